"""
=====================================
Pytest suite for core/logger.py
=====================================

Available markers:
------------------
unit, regression

How to Execute:
---------------
All tests:          python -m pytest tests/tests_core/test_logger.py -v
"""

import logging

import pytest

from core.logger import ColoredFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(level=logging.INFO, msg='digits extracted'):
    return logging.LogRecord('routines', level, __file__, 1, msg, None, None)


@pytest.mark.unit
def test_colored_formatter_adds_color_and_emoji():
    formatter = ColoredFormatter('%(emoji)s %(levelname)s %(message)s')

    output = formatter.format(make_record(logging.ERROR))

    assert '❌' in output
    assert '\033[31mERROR\033[0m' in output
    assert output.endswith('digits extracted')


@pytest.mark.regression
def test_colored_formatter_leaves_record_untouched():
    """File handlers sharing the record must not receive ANSI codes."""
    record = make_record(logging.WARNING)

    ColoredFormatter('%(emoji)s %(levelname)s %(message)s').format(record)

    assert record.levelname == 'WARNING'
    assert not hasattr(record, 'emoji')


@pytest.mark.unit
def test_get_logger_level_override():
    logger = get_logger('tests.core.logger', level='debug')
    assert logger.level == logging.DEBUG


@pytest.mark.unit
def test_setup_logging_console_and_file(restore_root_logger, tmp_path):
    setup_logging(log_level='WARNING', log_file='routines.log', log_dir=str(tmp_path))

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 2

    logging.getLogger('routines.test').warning('fingerprint mismatch')
    for handler in root.handlers:
        handler.flush()

    content = (tmp_path / 'routines.log').read_text(encoding='utf-8')
    assert 'fingerprint mismatch' in content
    assert '\033[' not in content


@pytest.mark.unit
def test_setup_logging_without_console(restore_root_logger):
    setup_logging(log_level='INFO', console_output=False)

    assert restore_root_logger.handlers == []

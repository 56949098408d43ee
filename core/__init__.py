"""
===================================================
Core infrastructure package for the text routines.
===================================================

This package provides centralized configuration management and logging
infrastructure used by the routine installer and database utilities.

Modules:
    config: Configuration management from environment variables
    logger: Centralized logging configuration and utilities

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>> 
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Installing routines into {config.routines_schema}")
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'config', 'Config']

from core.config import Config, config
from core.logger import get_logger, setup_logging

"""
=========================================
Comprehensive pytest suite for sql/ddl.py
=========================================

Sections:
---------
1. Unit tests - Individual SQL builders
2. Integration tests - Routine registry wiring
3. Edge case tests - Identifier validation and name folding

Available markers:
------------------
unit, integration, edge_case, regression

How to Execute:
---------------
All tests:          python -m pytest tests/tests_sql/test_ddl.py -v
By category:        python -m pytest tests/tests_sql/test_ddl.py -m unit
"""

import pytest

from routines.hashing import fingerprint_digits
from routines.text_extraction import extract_digits, extract_non_digits
from sql.ddl import (
    ROUTINE_DEFINITIONS,
    create_extension_sql,
    create_function_sql,
    drop_function_sql,
    extract_and_hash_numbers_function_sql,
    extract_numbers_from_string_function_sql,
    extract_string_from_number_function_sql,
    fold_identifier,
    hash_numbers_function_sql,
    qualified_name,
    quote_identifier,
)

# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
def test_create_extension_sql_default():
    assert create_extension_sql() == 'CREATE EXTENSION IF NOT EXISTS "pgcrypto";'


@pytest.mark.unit
def test_create_extension_sql_with_schema():
    sql = create_extension_sql('pgcrypto', if_not_exists=False, schema='ext')
    assert sql == 'CREATE EXTENSION "pgcrypto" SCHEMA "ext";'


@pytest.mark.unit
def test_create_function_sql_layout():
    """Header, DECLARE block, body and language appear in order."""
    sql = create_function_sql(
        schema='public',
        name='Digits',
        arguments=[('input_string', 'TEXT')],
        returns='TEXT',
        declarations=[('output_string', 'TEXT')],
        body=["output_string := input_string;", "RETURN output_string;"]
    )
    lines = sql.split("\n")

    assert lines[0] == 'CREATE OR REPLACE FUNCTION "public"."Digits"("input_string" TEXT)'
    assert lines[1] == 'RETURNS TEXT'
    assert lines[2] == 'AS $$'
    assert lines[3] == 'DECLARE'
    assert lines[4] == '    "output_string" TEXT;'
    assert lines[5] == 'BEGIN'
    assert lines[-2] == 'END;'
    assert lines[-1] == '$$ LANGUAGE plpgsql;'


@pytest.mark.unit
def test_create_function_sql_without_replace_or_declarations():
    sql = create_function_sql(
        schema='s',
        name='f',
        arguments=[],
        returns='INTEGER',
        body=['RETURN 1;'],
        or_replace=False
    )
    assert sql.startswith('CREATE FUNCTION "s"."f"()')
    assert 'DECLARE' not in sql


@pytest.mark.unit
def test_create_function_sql_comment_escaped():
    sql = create_function_sql(
        schema='public',
        name='f',
        arguments=[('x', 'TEXT')],
        returns='TEXT',
        body=['RETURN x;'],
        comment="it's digits"
    )
    assert sql.endswith(
        """COMMENT ON FUNCTION "public"."f"(TEXT) IS 'it''s digits';"""
    )


@pytest.mark.unit
def test_drop_function_sql():
    assert drop_function_sql('public', 'HashNumbers', ['TEXT']) == \
        'DROP FUNCTION IF EXISTS "public"."HashNumbers"(TEXT);'


@pytest.mark.unit
def test_drop_function_sql_cascade_no_if_exists():
    sql = drop_function_sql('public', 'f', ['TEXT', 'INTEGER'], if_exists=False, cascade=True)
    assert sql == 'DROP FUNCTION "public"."f"(TEXT, INTEGER) CASCADE;'


@pytest.mark.unit
def test_hash_numbers_function_sql_body():
    """The routine strips non-digits and hex-encodes a SHA-256 digest."""
    sql = hash_numbers_function_sql()

    assert '"public"."hashnumbers"("input_string" TEXT)' in sql
    assert "regexp_replace(input_string, '[^0-9]', '', 'g')" in sql
    assert "ENCODE(DIGEST(numbers_only, 'sha256'), 'hex')" in sql
    assert 'RETURN hash_value;' in sql


@pytest.mark.unit
def test_extract_and_hash_numbers_same_body_as_hash_numbers():
    hash_sql = hash_numbers_function_sql(schema='utils')
    extract_sql = extract_and_hash_numbers_function_sql(schema='utils')

    assert extract_sql == hash_sql.replace('hashnumbers', 'extractandhashnumbers')


@pytest.mark.unit
def test_extract_numbers_from_string_function_sql():
    sql = extract_numbers_from_string_function_sql(schema='utils')

    assert '"utils"."extractnumbersfromstring"("input_string" TEXT)' in sql
    assert "regexp_replace(input_string, '[^0-9]', '', 'g')" in sql
    assert 'DIGEST' not in sql


@pytest.mark.unit
def test_extract_string_from_number_function_sql():
    sql = extract_string_from_number_function_sql()

    assert '"public"."extractstringfromnumber"("input_number" INTEGER)' in sql
    assert 'output_string := input_number::TEXT;' in sql
    assert "regexp_replace(output_string, '[0-9]', '', 'g')" in sql


# =====================
# 2. INTEGRATION TESTS
# =====================

@pytest.mark.integration
def test_routine_registry_order_and_names():
    assert list(ROUTINE_DEFINITIONS) == [
        'HashNumbers',
        'ExtractAndHashNumbers',
        'ExtractNumbersFromString',
        'ExtractStringFromNumber',
    ]


@pytest.mark.integration
def test_routine_registry_references():
    """Each routine is paired with the Python function computing its value."""
    assert ROUTINE_DEFINITIONS['HashNumbers'].reference('a1') == fingerprint_digits('1')
    assert ROUTINE_DEFINITIONS['ExtractNumbersFromString'].reference is extract_digits
    assert ROUTINE_DEFINITIONS['ExtractStringFromNumber'].reference is extract_non_digits
    assert ROUTINE_DEFINITIONS['ExtractStringFromNumber'].sample == 12345


@pytest.mark.integration
@pytest.mark.parametrize('name', list(ROUTINE_DEFINITIONS))
def test_routine_definition_create_and_drop(name):
    definition = ROUTINE_DEFINITIONS[name]

    create_sql = definition.create_sql(schema='utils')
    drop_sql = definition.drop_sql(schema='utils')

    assert f'"utils"."{name.lower()}"(' in create_sql
    assert drop_sql == (
        f'DROP FUNCTION IF EXISTS "utils"."{name.lower()}"({", ".join(definition.argument_types)});'
    )


# ===================
# 3. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
@pytest.mark.parametrize('identifier', ['', '1abc', 'a-b', 'x"; DROP TABLE t; --', 'has space'])
def test_quote_identifier_rejects_invalid(identifier):
    with pytest.raises(ValueError, match='Invalid SQL identifier'):
        quote_identifier(identifier)


@pytest.mark.edge_case
def test_qualified_name_quotes_both_parts():
    assert qualified_name('public', 'HashNumbers') == '"public"."HashNumbers"'


@pytest.mark.edge_case
def test_fold_identifier_lower_cases_like_postgres():
    assert fold_identifier('HashNumbers') == 'hashnumbers'
    assert fold_identifier('already_lower') == 'already_lower'


@pytest.mark.edge_case
@pytest.mark.parametrize('identifier', ['', '9lives', 'Hash-Numbers'])
def test_fold_identifier_rejects_invalid(identifier):
    with pytest.raises(ValueError, match='Invalid SQL identifier'):
        fold_identifier(identifier)


@pytest.mark.edge_case
@pytest.mark.regression
@pytest.mark.parametrize('name', list(ROUTINE_DEFINITIONS))
def test_routines_created_under_folded_name(name):
    """Unquoted calls such as SELECT HashNumbers('...') resolve to the installed routine."""
    from sql.query_builder import check_function_exists_sql

    definition = ROUTINE_DEFINITIONS[name]
    create_sql = definition.create_sql(schema='public')

    assert definition.sql_name == name.lower()
    assert f'"{name}"' not in create_sql
    assert f'CREATE OR REPLACE FUNCTION "public"."{name.lower()}"(' in create_sql
    assert f'COMMENT ON FUNCTION "public"."{name.lower()}"(' in create_sql
    assert f"p.proname = '{name.lower()}'" in \
        check_function_exists_sql('public', definition.sql_name)


@pytest.mark.edge_case
def test_create_function_sql_empty_body():
    with pytest.raises(ValueError, match='body cannot be empty'):
        create_function_sql('public', 'f', [], 'TEXT', body=[])


@pytest.mark.edge_case
def test_routine_builder_rejects_bad_schema():
    with pytest.raises(ValueError):
        hash_numbers_function_sql(schema='public; DROP SCHEMA public')

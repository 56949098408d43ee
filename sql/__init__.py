"""
====================================================
SQL utilities package for warehouse text routines.
====================================================

This package provides pure SQL construction functions for installing,
calling and inspecting the warehouse text routines in PostgreSQL. All
functions return SQL strings that can be executed via SQLAlchemy.

The package follows a clear organization:
    - ddl.py: Data Definition Language (CREATE/DROP extensions and functions)
    - query_builder.py: Routine calls and catalog metadata queries

Architecture:
    - query_builder.py imports from ddl.py (not vice versa)
    - Identifiers are validated before they reach any SQL string
    - All SQL generation is pure functions (no side effects)

Example:
    >>> from sql.ddl import ROUTINE_DEFINITIONS, create_extension_sql
    >>> from sql.query_builder import call_function_builder
    >>>
    >>> statements = [create_extension_sql()] + [
    ...     routine.create_sql(schema='public')
    ...     for routine in ROUTINE_DEFINITIONS.values()
    ... ]
    >>> query = call_function_builder('public', 'hashnumbers')
"""

__version__ = "1.0.0"
__all__ = [
    # DDL functions
    'fold_identifier', 'create_extension_sql', 'create_function_sql', 'drop_function_sql',
    'hash_numbers_function_sql', 'extract_and_hash_numbers_function_sql',
    'extract_numbers_from_string_function_sql',
    'extract_string_from_number_function_sql',
    'RoutineDefinition', 'ROUTINE_DEFINITIONS',
    # Query functions
    'call_function_builder', 'check_function_exists_sql',
    'check_extension_exists_sql', 'get_function_info_sql'
]

from .ddl import (
    ROUTINE_DEFINITIONS,
    RoutineDefinition,
    create_extension_sql,
    create_function_sql,
    drop_function_sql,
    extract_and_hash_numbers_function_sql,
    extract_numbers_from_string_function_sql,
    extract_string_from_number_function_sql,
    fold_identifier,
    hash_numbers_function_sql,
)
from .query_builder import (
    call_function_builder,
    check_extension_exists_sql,
    check_function_exists_sql,
    get_function_info_sql,
)

"""
============================
SQL Query Builder Utilities.
============================

This module provides the queries used to call and inspect the warehouse
text routines once they are installed.

Query Builders:
- call_function_builder: Build a SELECT that calls a routine with bound parameters

Metadata Query Functions:
- check_function_exists_sql: Check if a function exists in a schema
- check_extension_exists_sql: Check if an extension is installed
- get_function_info_sql: List functions in a schema with their signatures

Usage:
    from sql.query_builder import call_function_builder, check_function_exists_sql

    query = call_function_builder(schema='public', function='hashnumbers')
    # SELECT "public"."hashnumbers"(:value) AS "result"
"""

from typing import List, Optional

from .ddl import qualified_name, quote_identifier


def call_function_builder(
    schema: str,
    function: str,
    parameters: Optional[List[str]] = None,
    result_alias: str = 'result'
) -> str:
    """
    Build a SELECT statement that calls a function with named bind parameters.

    Args:
        schema: Schema that owns the function
        function: Function name
        parameters: Bind parameter names, in argument order (default ['value'])
        result_alias: Column alias for the returned value

    Returns:
        SQL SELECT statement using :name placeholders for SQLAlchemy text()

    Example:
        >>> call_function_builder('public', 'hashnumbers')
        'SELECT "public"."hashnumbers"(:value) AS "result"'
    """
    parameters = parameters or ['value']
    for param in parameters:
        quote_identifier(param)
    placeholders = ", ".join(f":{param}" for param in parameters)
    return (
        f"SELECT {qualified_name(schema, function)}({placeholders}) "
        f"AS {quote_identifier(result_alias)}"
    )


def check_function_exists_sql(schema_name: str, function_name: str) -> str:
    """
    Generate SQL to check if a function exists.

    Args:
        schema_name: Schema name
        function_name: Function name as stored in pg_proc (unquoted names
            are folded to lower case, see sql.ddl.fold_identifier)

    Returns:
        SQL query that returns 1 if the function exists, nothing if not
    """
    quote_identifier(schema_name)
    quote_identifier(function_name)
    return f"""SELECT 1
FROM pg_proc p
JOIN pg_namespace n ON n.oid = p.pronamespace
WHERE n.nspname = '{schema_name}'
  AND p.proname = '{function_name}'"""


def check_extension_exists_sql(extension_name: str) -> str:
    """
    Generate SQL to check if an extension is installed.

    Args:
        extension_name: Name of the extension to check

    Returns:
        SQL query that returns 1 if the extension exists, nothing if not
    """
    quote_identifier(extension_name)
    return f"SELECT 1 FROM pg_extension WHERE extname = '{extension_name}'"


def get_function_info_sql(schema_name: str) -> str:
    """
    Generate SQL to list the functions of a schema.

    Args:
        schema_name: Schema name

    Returns:
        SQL query returning name, arguments, result type and description
    """
    quote_identifier(schema_name)
    return f"""SELECT
    p.proname as function_name,
    pg_get_function_identity_arguments(p.oid) as arguments,
    pg_get_function_result(p.oid) as result_type,
    obj_description(p.oid, 'pg_proc') as description
FROM pg_proc p
JOIN pg_namespace n ON n.oid = p.pronamespace
WHERE n.nspname = '{schema_name}'
ORDER BY p.proname"""

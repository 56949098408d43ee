"""
=======================================================================
Data Definition Language (DDL) utilities for warehouse text routines.
=======================================================================

Provides reusable functions for generating the PostgreSQL DDL that installs
the warehouse text routines as PL/pgSQL functions. Every routine installed
here has a Python reference implementation in the routines package, so the
database and application compute identical values.

Key Features:
    - Extension creation (pgcrypto supplies DIGEST())
    - Generic CREATE FUNCTION builder with dollar quoting
    - DROP FUNCTION with argument signatures
    - One builder per warehouse routine, created under the lower-case name
      PostgreSQL gives unquoted identifiers
    - Routine registry linking SQL builders to Python references

Functions:
    create_extension_sql: Generate CREATE EXTENSION statement
    create_function_sql: Generate CREATE [OR REPLACE] FUNCTION statement
    drop_function_sql: Generate DROP FUNCTION statement
    hash_numbers_function_sql: HashNumbers(TEXT) routine
    extract_and_hash_numbers_function_sql: ExtractAndHashNumbers(TEXT) routine
    extract_numbers_from_string_function_sql: ExtractNumbersFromString(TEXT) routine
    extract_string_from_number_function_sql: ExtractStringFromNumber(INTEGER) routine

Example:
    >>> from sql.ddl import create_extension_sql, hash_numbers_function_sql
    >>>
    >>> print(create_extension_sql())
    CREATE EXTENSION IF NOT EXISTS "pgcrypto";
    >>>
    >>> routine_sql = hash_numbers_function_sql(schema='public')
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from routines.hashing import extract_and_hash_numbers, hash_numbers
from routines.text_extraction import extract_digits, extract_non_digits

_IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

DIGIT_PATTERN = '[0-9]'
NON_DIGIT_PATTERN = '[^0-9]'


def quote_identifier(identifier: str) -> str:
    """Validate and double-quote a PostgreSQL identifier.

    Args:
        identifier: Schema, function, extension or argument name

    Returns:
        The identifier wrapped in double quotes

    Raises:
        ValueError: If the identifier contains characters other than
            letters, digits and underscores, or starts with a digit
    """
    if not identifier or not _IDENTIFIER_PATTERN.match(identifier):
        raise ValueError(f"Invalid SQL identifier: {identifier!r}")
    return f'"{identifier}"'


def fold_identifier(identifier: str) -> str:
    """Return the name PostgreSQL stores for an unquoted identifier.

    Unquoted names are folded to lower case, so HashNumbers is created and
    looked up as hashnumbers. Routines are installed under the folded name
    so that unquoted calls such as SELECT HashNumbers('a1') resolve.

    Raises:
        ValueError: If the identifier is not a plain SQL identifier
    """
    if not identifier or not _IDENTIFIER_PATTERN.match(identifier):
        raise ValueError(f"Invalid SQL identifier: {identifier!r}")
    return identifier.lower()


def qualified_name(schema: str, name: str) -> str:
    """Return the quoted "schema"."name" form of a database object."""
    return f"{quote_identifier(schema)}.{quote_identifier(name)}"


def create_extension_sql(
    extension_name: str = 'pgcrypto',
    if_not_exists: bool = True,
    schema: Optional[str] = None
) -> str:
    """Generate CREATE EXTENSION statement.

    Args:
        extension_name: Extension to create (pgcrypto provides DIGEST())
        if_not_exists: If True, add IF NOT EXISTS clause
        schema: Optional schema to install the extension objects into

    Returns:
        SQL CREATE EXTENSION statement

    Example:
        >>> print(create_extension_sql())
        CREATE EXTENSION IF NOT EXISTS "pgcrypto";
    """
    sql_parts = ["CREATE EXTENSION"]

    if if_not_exists:
        sql_parts.append("IF NOT EXISTS")

    sql_parts.append(quote_identifier(extension_name))

    if schema:
        sql_parts.append(f"SCHEMA {quote_identifier(schema)}")

    return " ".join(sql_parts) + ";"


def create_function_sql(
    schema: str,
    name: str,
    arguments: Sequence[Tuple[str, str]],
    returns: str,
    body: List[str],
    declarations: Optional[Sequence[Tuple[str, str]]] = None,
    language: str = 'plpgsql',
    or_replace: bool = True,
    comment: Optional[str] = None
) -> str:
    """Generate CREATE FUNCTION statement for a PL/pgSQL routine.

    Args:
        schema: Schema that owns the function
        name: Function name
        arguments: List of (argument name, SQL type) pairs
        returns: SQL return type
        body: Statements placed between BEGIN and END, one per item
        declarations: Optional (variable name, SQL type) pairs for DECLARE
        language: Procedural language (default 'plpgsql')
        or_replace: If True, emit CREATE OR REPLACE
        comment: Optional COMMENT ON FUNCTION text

    Returns:
        SQL CREATE FUNCTION statement, with COMMENT if requested

    Example:
        >>> sql = create_function_sql(
        ...     schema='public',
        ...     name='Digits',
        ...     arguments=[('input_string', 'TEXT')],
        ...     returns='TEXT',
        ...     body=["RETURN regexp_replace(input_string, '[^0-9]', '', 'g');"]
        ... )
    """
    if not body:
        raise ValueError("Function body cannot be empty")

    signature = ", ".join(
        f"{quote_identifier(arg_name)} {arg_type}" for arg_name, arg_type in arguments
    )

    header = "CREATE OR REPLACE FUNCTION" if or_replace else "CREATE FUNCTION"
    lines = [
        f"{header} {qualified_name(schema, name)}({signature})",
        f"RETURNS {returns}",
        "AS $$",
    ]

    if declarations:
        lines.append("DECLARE")
        for var_name, var_type in declarations:
            lines.append(f"    {quote_identifier(var_name)} {var_type};")

    lines.append("BEGIN")
    for statement in body:
        lines.append(f"    {statement}")
    lines.append("END;")
    lines.append(f"$$ LANGUAGE {language};")

    sql = "\n".join(lines)

    if comment:
        arg_types = ", ".join(arg_type for _, arg_type in arguments)
        escaped = comment.replace("'", "''")
        sql += (
            f"\nCOMMENT ON FUNCTION {qualified_name(schema, name)}({arg_types}) "
            f"IS '{escaped}';"
        )

    return sql


def drop_function_sql(
    schema: str,
    name: str,
    argument_types: Sequence[str],
    if_exists: bool = True,
    cascade: bool = False
) -> str:
    """
    Generate DROP FUNCTION statement.

    Args:
        schema: Schema that owns the function
        name: Function name
        argument_types: SQL types of the signature (overloads need these)
        if_exists: Add IF EXISTS clause
        cascade: Add CASCADE option

    Returns:
        SQL DROP FUNCTION statement
    """
    sql = "DROP FUNCTION"

    if if_exists:
        sql += " IF EXISTS"

    sql += f" {qualified_name(schema, name)}({', '.join(argument_types)})"

    if cascade:
        sql += " CASCADE"

    return sql + ";"


def _hash_digits_body() -> List[str]:
    return [
        f"numbers_only := regexp_replace(input_string, '{NON_DIGIT_PATTERN}', '', 'g');",
        "hash_value := ENCODE(DIGEST(numbers_only, 'sha256'), 'hex');",
        "RETURN hash_value;",
    ]


def hash_numbers_function_sql(schema: str = 'public', name: str = 'HashNumbers') -> str:
    """Generate the HashNumbers(TEXT) routine.

    Returns the SHA-256 hex digest of the digits in the input string.
    Requires the pgcrypto extension.
    """
    return create_function_sql(
        schema=schema,
        name=fold_identifier(name),
        arguments=[('input_string', 'TEXT')],
        returns='TEXT',
        declarations=[('numbers_only', 'TEXT'), ('hash_value', 'TEXT')],
        body=_hash_digits_body(),
        comment='SHA-256 hex digest of the digits in input_string'
    )


def extract_and_hash_numbers_function_sql(
    schema: str = 'public',
    name: str = 'ExtractAndHashNumbers'
) -> str:
    """Generate the ExtractAndHashNumbers(TEXT) routine (same body as HashNumbers)."""
    return create_function_sql(
        schema=schema,
        name=fold_identifier(name),
        arguments=[('input_string', 'TEXT')],
        returns='TEXT',
        declarations=[('numbers_only', 'TEXT'), ('hash_value', 'TEXT')],
        body=_hash_digits_body(),
        comment='SHA-256 hex digest of the digits in input_string'
    )


def extract_numbers_from_string_function_sql(
    schema: str = 'public',
    name: str = 'ExtractNumbersFromString'
) -> str:
    """Generate the ExtractNumbersFromString(TEXT) routine."""
    return create_function_sql(
        schema=schema,
        name=fold_identifier(name),
        arguments=[('input_string', 'TEXT')],
        returns='TEXT',
        declarations=[('output_string', 'TEXT')],
        body=[
            f"output_string := regexp_replace(input_string, '{NON_DIGIT_PATTERN}', '', 'g');",
            "RETURN output_string;",
        ],
        comment='Digits of input_string in their original order'
    )


def extract_string_from_number_function_sql(
    schema: str = 'public',
    name: str = 'ExtractStringFromNumber'
) -> str:
    """Generate the ExtractStringFromNumber(INTEGER) routine.

    Renders the integer as text and strips every digit, leaving only the
    minus sign of negative values.
    """
    return create_function_sql(
        schema=schema,
        name=fold_identifier(name),
        arguments=[('input_number', 'INTEGER')],
        returns='TEXT',
        declarations=[('output_string', 'TEXT')],
        body=[
            "output_string := input_number::TEXT;",
            f"output_string := regexp_replace(output_string, '{DIGIT_PATTERN}', '', 'g');",
            "RETURN output_string;",
        ],
        comment='Non-digit characters of input_number rendered as text'
    )


@dataclass(frozen=True)
class RoutineDefinition:
    """A warehouse routine: its DDL builder and Python reference.

    Attributes:
        name: Registry name; the database function is its lower-case fold
        builder: Callable(schema, name) returning the CREATE FUNCTION SQL
        argument_types: SQL argument types of the function signature
        reference: Python function computing the same value
        sample: Input used to verify the installed routine
    """

    name: str
    builder: Callable[..., str]
    argument_types: Tuple[str, ...]
    reference: Callable[[Any], str]
    sample: Any

    @property
    def sql_name(self) -> str:
        """Name of the function as stored in pg_proc."""
        return fold_identifier(self.name)

    def create_sql(self, schema: str = 'public') -> str:
        """Return the CREATE FUNCTION statement for this routine."""
        return self.builder(schema=schema, name=self.name)

    def drop_sql(self, schema: str = 'public', cascade: bool = False) -> str:
        """Return the DROP FUNCTION statement for this routine."""
        return drop_function_sql(
            schema=schema,
            name=self.sql_name,
            argument_types=self.argument_types,
            cascade=cascade
        )


ROUTINE_DEFINITIONS: Dict[str, RoutineDefinition] = {
    definition.name: definition
    for definition in (
        RoutineDefinition(
            name='HashNumbers',
            builder=hash_numbers_function_sql,
            argument_types=('TEXT',),
            reference=hash_numbers,
            sample='abc123def456xyz'
        ),
        RoutineDefinition(
            name='ExtractAndHashNumbers',
            builder=extract_and_hash_numbers_function_sql,
            argument_types=('TEXT',),
            reference=extract_and_hash_numbers,
            sample='abc123def456xyz'
        ),
        RoutineDefinition(
            name='ExtractNumbersFromString',
            builder=extract_numbers_from_string_function_sql,
            argument_types=('TEXT',),
            reference=extract_digits,
            sample='abc123def456xyz'
        ),
        RoutineDefinition(
            name='ExtractStringFromNumber',
            builder=extract_string_from_number_function_sql,
            argument_types=('INTEGER',),
            reference=extract_non_digits,
            sample=12345
        ),
    )
}

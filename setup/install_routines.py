"""
=====================================================
Routine installation module for the data warehouse.
=====================================================

Installs the warehouse text routines into PostgreSQL as PL/pgSQL functions
and checks them against the Python reference implementations in the
routines package. All SQL comes from the sql/ package; this module only
manages connections, transactions and error reporting.

Key Features:
    - pgcrypto extension creation (DIGEST() is needed by the hash routines)
    - Install, drop and existence check per routine or for all routines
    - Routines are created under the lower-case names PostgreSQL gives
      unquoted identifiers, so SELECT HashNumbers(...) resolves
    - Engine creation and the optional readiness wait come from
      utils.database_utils
    - Parity check: the installed routine and the Python reference must
      return the same value for a sample input

Prerequisites:
    - Warehouse database exists
    - Target schema exists (default 'public')
    - Privileges to CREATE EXTENSION and CREATE FUNCTION

Example:
    >>> from setup.install_routines import RoutineInstaller
    >>>
    >>> installer = RoutineInstaller(
    ...     host='localhost',
    ...     user='postgres',
    ...     password='password',
    ...     database='warehouse'
    ... )
    >>> installer.install_all()
    ['HashNumbers', 'ExtractAndHashNumbers', 'ExtractNumbersFromString', 'ExtractStringFromNumber']
    >>> all(check.matches for check in installer.verify_all())
    True
    >>> installer.close_connections()
"""

from dataclasses import dataclass
from typing import Any, List, Optional

import psycopg2
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from core.config import config
from core.logger import get_logger
from sql.ddl import ROUTINE_DEFINITIONS, RoutineDefinition, create_extension_sql
from sql.query_builder import (
    call_function_builder,
    check_extension_exists_sql,
    check_function_exists_sql,
)
from utils.database_utils import (
    DatabaseConnectionError,
    create_sqlalchemy_engine,
    wait_for_database,
)

logger = get_logger(__name__)


class RoutineInstallError(Exception):
    """Exception raised for routine installation errors.

    Raised when installing, dropping, inspecting or verifying a routine
    fails, or when an unknown routine name is requested.
    """
    pass


@dataclass(frozen=True)
class RoutineCheck:
    """Result of comparing an installed routine with its Python reference.

    Attributes:
        name: Routine name
        sample: Input passed to both implementations
        expected: Value returned by the Python reference
        actual: Value returned by the database
        matches: True if expected == actual
    """

    name: str
    sample: Any
    expected: str
    actual: Optional[str]

    @property
    def matches(self) -> bool:
        return self.expected == self.actual


class RoutineInstaller:
    """Install and verify the warehouse text routines.

    Attributes:
        host: PostgreSQL server hostname
        port: PostgreSQL server port
        user: Database user with CREATE FUNCTION privileges
        password: Database password
        database: Database the routines are installed into
        schema: Schema that owns the routines

    Example:
        >>> installer = RoutineInstaller(database='warehouse', schema='utils')
        >>> installer.install_routine('HashNumbers')
        'HashNumbers'
        >>> installer.routine_exists('HashNumbers')
        True
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        database: Optional[str] = None,
        schema: Optional[str] = None
    ):
        """Initialize the installer; unset parameters come from core.config.

        Args:
            host: PostgreSQL server hostname
            port: PostgreSQL server port number
            user: Database user
            password: Database password
            database: Target database (defaults to the warehouse database)
            schema: Target schema (defaults to ROUTINES_SCHEMA)
        """
        self.host = host or config.db_host
        self.port = port or config.db_port
        self.user = user or config.db_user
        self.password = password if password is not None else config.db_password
        self.database = database or config.warehouse_db_name
        self.schema = schema or config.routines_schema

        self._engine: Optional[Engine] = None

    def _get_engine(self) -> Engine:
        """Get SQLAlchemy engine connected to the target database."""
        if self._engine is None:
            self._engine = create_sqlalchemy_engine(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database
            )
        return self._engine

    def wait_until_available(self, max_retries: int = 10, retry_delay: int = 2) -> None:
        """Block until the target database accepts connections.

        Raises:
            RoutineInstallError: If the database never becomes available
        """
        try:
            wait_for_database(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                max_retries=max_retries,
                retry_delay=retry_delay
            )
        except DatabaseConnectionError as e:
            raise RoutineInstallError(str(e)) from e

    def _get_definition(self, name: str) -> RoutineDefinition:
        try:
            return ROUTINE_DEFINITIONS[name]
        except KeyError:
            raise RoutineInstallError(
                f"Unknown routine {name!r}; "
                f"available: {', '.join(ROUTINE_DEFINITIONS)}"
            ) from None

    def _execute(self, sql: str, action: str) -> None:
        """Execute a DDL statement in its own transaction."""
        try:
            with self._get_engine().begin() as conn:
                conn.execute(text(sql))
        except (SQLAlchemyError, psycopg2.Error) as e:
            logger.error(f"Error during {action}: {e}")
            raise RoutineInstallError(f"Failed {action}: {e}") from e

    def _exists(self, sql: str, action: str) -> bool:
        try:
            with self._get_engine().connect() as conn:
                result = conn.execute(text(sql))
                return result.fetchone() is not None
        except (SQLAlchemyError, psycopg2.Error) as e:
            logger.error(f"Error during {action}: {e}")
            raise RoutineInstallError(f"Failed {action}: {e}") from e

    def extension_exists(self, extension_name: str = 'pgcrypto') -> bool:
        """Check if an extension is installed in the target database."""
        return self._exists(
            check_extension_exists_sql(extension_name),
            f"extension check for {extension_name}"
        )

    def install_extension(self, extension_name: str = 'pgcrypto') -> None:
        """Create the extension if it is not already installed."""
        logger.info(f"Ensuring extension {extension_name} in {self.database}")
        self._execute(
            create_extension_sql(extension_name, if_not_exists=True),
            f"creation of extension {extension_name}"
        )

    def install_routine(self, name: str) -> str:
        """
        Create or replace a single routine.

        Args:
            name: Routine name from ROUTINE_DEFINITIONS

        Returns:
            The installed routine name

        Raises:
            RoutineInstallError: If the name is unknown or the DDL fails
        """
        definition = self._get_definition(name)
        logger.info(f"Installing routine {self.schema}.{name}")
        self._execute(definition.create_sql(schema=self.schema), f"installation of {name}")
        return name

    def install_all(
        self,
        include_extension: bool = True,
        wait_for_connection: bool = False
    ) -> List[str]:
        """
        Install every known routine.

        Args:
            include_extension: If True, create pgcrypto first
            wait_for_connection: If True, wait for the database to accept
                connections before running any DDL

        Returns:
            Names of the installed routines, in installation order
        """
        if wait_for_connection:
            self.wait_until_available()

        if include_extension:
            self.install_extension()

        installed = [self.install_routine(name) for name in ROUTINE_DEFINITIONS]
        logger.info(f"✅ Installed {len(installed)} routines into {self.schema}")
        return installed

    def routine_exists(self, name: str) -> bool:
        """Check if a routine exists in the target schema."""
        definition = self._get_definition(name)
        return self._exists(
            check_function_exists_sql(self.schema, definition.sql_name),
            f"existence check for {name}"
        )

    def drop_routine(self, name: str, cascade: bool = False) -> bool:
        """
        Drop a routine if it exists.

        Args:
            name: Routine name from ROUTINE_DEFINITIONS
            cascade: Drop dependent objects too

        Returns:
            True if the routine was dropped, False if it did not exist
        """
        if not self.routine_exists(name):
            logger.info(f"Routine {self.schema}.{name} does not exist")
            return False

        definition = self._get_definition(name)
        logger.info(f"Dropping routine {self.schema}.{name}")
        self._execute(
            definition.drop_sql(schema=self.schema, cascade=cascade),
            f"drop of {name}"
        )
        return True

    def drop_all(self, cascade: bool = False) -> List[str]:
        """Drop every known routine; returns the names actually dropped."""
        return [
            name for name in ROUTINE_DEFINITIONS
            if self.drop_routine(name, cascade=cascade)
        ]

    def verify_routine(self, name: str, sample: Any = None) -> RoutineCheck:
        """
        Compare an installed routine with its Python reference.

        Args:
            name: Routine name from ROUTINE_DEFINITIONS
            sample: Input value (defaults to the routine's registered sample)

        Returns:
            RoutineCheck describing both results
        """
        definition = self._get_definition(name)
        sample = definition.sample if sample is None else sample
        expected = definition.reference(sample)

        try:
            with self._get_engine().connect() as conn:
                result = conn.execute(
                    text(call_function_builder(self.schema, definition.sql_name)),
                    {'value': sample}
                )
                actual = result.scalar()
        except (SQLAlchemyError, psycopg2.Error) as e:
            logger.error(f"Error verifying routine {name}: {e}")
            raise RoutineInstallError(f"Failed verification of {name}: {e}") from e

        check = RoutineCheck(name=name, sample=sample, expected=expected, actual=actual)
        if check.matches:
            logger.info(f"✅ {name}({sample!r}) matches reference")
        else:
            logger.warning(
                f"⚠️ {name}({sample!r}) returned {actual!r}, expected {expected!r}"
            )
        return check

    def verify_all(self) -> List[RoutineCheck]:
        """Verify every known routine with its registered sample."""
        return [self.verify_routine(name) for name in ROUTINE_DEFINITIONS]

    def close_connections(self) -> None:
        """Close all database connections."""
        if self._engine:
            self._engine.dispose()
            self._engine = None

"""
==================================================
Database connectivity utilities for PostgreSQL.
==================================================

Connection helpers used by the routine installer: the installer's engine is
built by create_sqlalchemy_engine, and install_all(wait_for_connection=True)
blocks on wait_for_database before running any DDL. Keeps PostgreSQL
connection logic out of the SQL builders and the pure routines.

Key Features:
    - SQLAlchemy engine creation with connection pooling
    - Database availability checking
    - Retry loop while the server starts

Unset parameters fall back to core.config. An explicit empty password is
kept as given (local trust authentication).

Example:
    >>> from utils.database_utils import (
    ...     wait_for_database,
    ...     create_sqlalchemy_engine
    ... )
    >>>
    >>> wait_for_database(database='warehouse', max_retries=5)
    True
    >>> engine = create_sqlalchemy_engine(database='warehouse')
"""

import logging
import time

import psycopg2
from psycopg2 import OperationalError
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine

from core.config import config

logger = logging.getLogger(__name__)


class DatabaseConnectionError(Exception):
    """Exception raised when database connection fails."""
    pass


def _password_or_default(password: str = None) -> str:
    return password if password is not None else config.db_password


def create_sqlalchemy_engine(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    use_warehouse: bool = False,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10
) -> Engine:
    """
    Create SQLAlchemy engine with connection pooling.

    Args:
        host: Database hostname
        port: Database port
        user: Database user
        password: Database password ('' is kept, None uses config)
        database: Database name
        use_warehouse: If True and no database is given, use the warehouse
        echo: Enable SQL statement logging
        pool_size: Connection pool size
        max_overflow: Maximum overflow connections

    Returns:
        Configured SQLAlchemy Engine
    """
    connection_url = URL.create(
        drivername='postgresql',
        username=user or config.db_user,
        password=_password_or_default(password),
        host=host or config.db_host,
        port=port or config.db_port,
        database=database or (
            config.warehouse_db_name if use_warehouse else config.db_name
        )
    )

    return create_engine(
        connection_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True  # Verify connections before using
    )


def check_database_available(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    timeout: int = 5
) -> bool:
    """
    Check if PostgreSQL database is available.

    Args:
        host: Database hostname (defaults to config)
        port: Database port (defaults to config)
        user: Database user (defaults to config)
        password: Database password (defaults to config)
        database: Database name (defaults to config.db_name)
        timeout: Connection timeout in seconds

    Returns:
        True if database is available, False otherwise
    """
    try:
        conn = psycopg2.connect(
            host=host or config.db_host,
            port=port or config.db_port,
            user=user or config.db_user,
            password=_password_or_default(password),
            database=database or config.db_name,
            connect_timeout=timeout
        )
        conn.close()
        return True
    except OperationalError as e:
        logger.debug(f"Database not available: {e}")
        return False


def wait_for_database(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    max_retries: int = 10,
    retry_delay: int = 2,
    timeout: int = 5
) -> bool:
    """
    Wait for PostgreSQL database to become available with retries.

    Args:
        host: Database hostname (defaults to config)
        port: Database port (defaults to config)
        user: Database user (defaults to config)
        password: Database password (defaults to config)
        database: Database name (defaults to config.db_name)
        max_retries: Maximum number of retry attempts
        retry_delay: Delay between retries in seconds
        timeout: Connection timeout per attempt in seconds

    Returns:
        True once the database is available

    Raises:
        DatabaseConnectionError: If database never becomes available
    """
    host = host or config.db_host
    port = port or config.db_port
    database = database or config.db_name

    logger.info(f"Waiting for PostgreSQL at {host}:{port}/{database}...")

    for attempt in range(1, max_retries + 1):
        if check_database_available(host, port, user, password, database, timeout):
            logger.info(f"✅ PostgreSQL is available (attempt {attempt}/{max_retries})")
            return True

        if attempt < max_retries:
            logger.warning(
                f"⏳ PostgreSQL not available yet (attempt {attempt}/{max_retries}), "
                f"retrying in {retry_delay}s..."
            )
            time.sleep(retry_delay)

    error_msg = (
        f"PostgreSQL at {host}:{port}/{database} did not become available "
        f"after {max_retries} attempts"
    )
    logger.error(f"❌ {error_msg}")
    raise DatabaseConnectionError(error_msg)

"""
========================================================
Configuration management for the warehouse text routines.
========================================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

The configuration system ensures:
- Single source of truth for all settings
- Type conversion and validation
- Secure handling of sensitive credentials

Example:
    >>> from core.config import config
    >>>
    >>> # Database connection settings
    >>> print(f"Warehouse: {config.warehouse_db_name} on {config.db_host}")
    >>>
    >>> # Where routines get installed
    >>> print(f"Schema: {config.routines_schema}")
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
DEFAULT_LOG_LEVEL = 'INFO'


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        host: PostgreSQL server hostname or IP address
        port: PostgreSQL server port number
        user: Database username
        password: Database password
        database: Default/admin database name
        warehouse_db: Target data warehouse database name
    """

    host: str
    port: int
    user: str
    password: str
    database: str
    warehouse_db: str


@dataclass
class RoutineConfig:
    """Settings for the installed text routines.

    Attributes:
        schema: Schema the PL/pgSQL routines are created in
        log_level: Default application log level; unknown values fall back
            to INFO with a warning
        logs_dir: Directory for log files
    """

    schema: str
    log_level: str
    logs_dir: Path

    def __post_init__(self):
        level = self.log_level.upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(
                f"Invalid LOG_LEVEL {self.log_level!r}; "
                f"expected one of {', '.join(VALID_LOG_LEVELS)}, using {DEFAULT_LOG_LEVEL}"
            )
            level = DEFAULT_LOG_LEVEL
        self.log_level = level


class Config:
    """Centralized configuration manager.

    Provides access to all configuration settings loaded from environment
    variables (.env file).

    Attributes:
        db: DatabaseConfig instance with database connection settings
        routines: RoutineConfig instance with routine installation settings

    Properties:
        db_host: Database server hostname
        db_port: Database server port
        db_user: Database username
        db_password: Database password
        db_name: Default/admin database name
        warehouse_db_name: Warehouse database name
        routines_schema: Schema holding the installed routines
        log_level: Application log level

    Example:
        >>> config = Config()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig(
            host=os.getenv('POSTGRES_HOST', 'localhost'),
            port=int(os.getenv('POSTGRES_PORT', '5432')),
            user=os.getenv('POSTGRES_USER', 'postgres'),
            password=os.getenv('POSTGRES_PASSWORD', ''),
            database=os.getenv('POSTGRES_DB', 'postgres'),
            warehouse_db=os.getenv('WAREHOUSE_DB', 'sql_retail_analytics_warehouse')
        )

        project_root = Path(__file__).parent.parent
        self.routines = RoutineConfig(
            schema=os.getenv('ROUTINES_SCHEMA', 'public'),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            logs_dir=Path(os.getenv('LOGS_DIR', str(project_root / 'logs')))
        )

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        """Get database username."""
        return self.db.user

    @property
    def db_password(self) -> str:
        """Get database password."""
        return self.db.password

    @property
    def db_name(self) -> str:
        """Get default/admin database name."""
        return self.db.database

    @property
    def warehouse_db_name(self) -> str:
        """Get data warehouse database name."""
        return self.db.warehouse_db

    @property
    def routines_schema(self) -> str:
        """Get schema that holds the installed routines."""
        return self.routines.schema

    @property
    def log_level(self) -> str:
        """Get application log level."""
        return self.routines.log_level


# Global configuration instance
config = Config()

"""
==========================
Utility Functions Package.
==========================

Database connectivity helpers used by setup.install_routines.RoutineInstaller.

Modules:
    database_utils: PostgreSQL connectivity and health checks
"""

__version__ = "1.0.0"
__all__ = [
    'DatabaseConnectionError',
    'wait_for_database',
    'check_database_available',
    'create_sqlalchemy_engine',
]

from .database_utils import (
    DatabaseConnectionError,
    check_database_available,
    create_sqlalchemy_engine,
    wait_for_database,
)

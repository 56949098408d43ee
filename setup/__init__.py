"""
=====================================================
Setup package for the warehouse text routines.
=====================================================

This package installs the PL/pgSQL text routines into the data warehouse
and verifies them against their Python reference implementations.

Modules:
    install_routines: Routine installation, removal and parity checks

Architecture:
    - Configuration: Centralized in core/config.py (loads from .env)
    - SQL Generation: Pure functions in the sql/ package
    - Reference values: Pure functions in the routines/ package

Example:
    >>> from setup import RoutineInstaller
    >>> 
    >>> installer = RoutineInstaller()
    >>> installer.install_all()
    >>> checks = installer.verify_all()

Requirements:
    - SQLAlchemy >= 2.0.0
    - psycopg2-binary >= 2.9.0
    - python-dotenv >= 1.0.0
"""

__version__ = "0.1.0"
__all__ = [
    'RoutineInstaller',
    'RoutineInstallError',
    'RoutineCheck'
]

from .install_routines import RoutineCheck, RoutineInstaller, RoutineInstallError

"""
====================================================
Pure text routines for the data warehouse.
====================================================

Python reference implementations of the text routines the warehouse also
installs as PostgreSQL functions. Every routine is a pure function: no
database session, no shared state, safe to call from any thread.

Modules:
    text_extraction: Digit / non-digit extraction from strings and integers
    hashing: SHA-256 fingerprint of the digit content of a string

Example:
    >>> from routines import extract_digits, fingerprint_digits
    >>> 
    >>> extract_digits('abc123def456xyz')
    '123456'
    >>> fingerprint_digits('abc123def456xyz')[:12]
    '8d969eef6eca'
"""

__version__ = "0.1.0"
__all__ = [
    'extract_digits', 'extract_non_digits', 'extract_numeric_prefix',
    'InsufficientDigitsError',
    'fingerprint_digits', 'fingerprint_many',
    'hash_numbers', 'extract_and_hash_numbers',
    'EMPTY_DIGEST',
]

from .hashing import (
    EMPTY_DIGEST,
    extract_and_hash_numbers,
    fingerprint_digits,
    fingerprint_many,
    hash_numbers,
)
from .text_extraction import (
    InsufficientDigitsError,
    extract_digits,
    extract_non_digits,
    extract_numeric_prefix,
)

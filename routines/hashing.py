"""
=========================================
Digit fingerprints for warehouse records.
=========================================

Reference implementation of the ``HashNumbers`` / ``ExtractAndHashNumbers``
database routines: the digits of a string are hashed with SHA-256 and the
digest is returned as lowercase hex. The result fits the warehouse's
``VARCHAR(64)`` hash columns.

The database computes ``ENCODE(DIGEST(numbers_only, 'sha256'), 'hex')`` on a
UTF8 database; hashing the UTF-8 bytes of the digit string gives the same value.

Example:
    >>> from routines.hashing import fingerprint_digits
    >>>
    >>> fingerprint_digits('abc123def456xyz') == fingerprint_digits('123456')
    True
    >>> len(fingerprint_digits(''))
    64
"""

import hashlib
from typing import Iterable, List

from .text_extraction import extract_digits

DIGEST_ALGORITHM = 'sha256'
TEXT_ENCODING = 'utf-8'
DIGEST_HEX_LENGTH = 64

# SHA-256 of the empty byte string
EMPTY_DIGEST = 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'


def fingerprint_digits(value: str) -> str:
    """Compute the SHA-256 fingerprint of the digits in a string.

    Args:
        value: Input text; non-digit characters are ignored

    Returns:
        64-character lowercase hex digest of the UTF-8 encoded digit
        subsequence. Input without digits yields EMPTY_DIGEST.

    Example:
        >>> fingerprint_digits('abc123def456xyz')
        '8d969eef6ecad3c29a3a629280e686cf0c3f5d5a86aff3ca12020c923adc6c92'
    """
    digits = extract_digits(value)
    return hashlib.new(DIGEST_ALGORITHM, digits.encode(TEXT_ENCODING)).hexdigest()


def fingerprint_many(values: Iterable[str]) -> List[str]:
    """Fingerprint a batch of strings, preserving input order.

    Args:
        values: Iterable of input strings

    Returns:
        List of digests, one per input value
    """
    return [fingerprint_digits(value) for value in values]


# Names of the equivalent database routines
hash_numbers = fingerprint_digits
extract_and_hash_numbers = fingerprint_digits

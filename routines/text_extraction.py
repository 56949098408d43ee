"""
==========================================================
Digit and non-digit extraction from warehouse text values.
==========================================================

Reference implementations of the ``ExtractNumbersFromString`` and
``ExtractStringFromNumber`` database routines. Both are single-pass filters
over the input using an ASCII decimal-digit predicate, which is exactly the
``[0-9]`` class the database routines hand to ``regexp_replace``.

Two incompatible definitions of "extract string from number" exist in the
warehouse SQL scripts:
    - one strips every digit from the rendered number (``extract_non_digits``)
    - one validates that at least three digits are present and returns the
      first three characters unchanged (``extract_numeric_prefix``)

``extract_non_digits`` is the contract installed in the database. The prefix
variant is kept under its own name and is the only routine here that can fail.

Example:
    >>> from routines.text_extraction import extract_digits, extract_non_digits
    >>>
    >>> extract_digits('abc123def456xyz')
    '123456'
    >>> extract_non_digits('abc123def456xyz')
    'abcdefxyz'
    >>> extract_non_digits(-42)
    '-'
"""

import logging
from typing import Union

logger = logging.getLogger(__name__)

DECIMAL_DIGITS = frozenset('0123456789')


class InsufficientDigitsError(ValueError):
    """Exception raised when a rendered value has too few numeric digits.

    Attributes:
        value: The rendered text that failed validation
        digit_count: Number of decimal digits found in the text
        required: Minimum number of digits that was required
    """

    def __init__(self, value: str, digit_count: int, required: int):
        self.value = value
        self.digit_count = digit_count
        self.required = required
        super().__init__(
            f"Insufficient numeric digits in {value!r}: "
            f"found {digit_count}, need at least {required}"
        )


def is_decimal_digit(char: str) -> bool:
    """Return True if char is one of the ASCII digits 0-9."""
    return char in DECIMAL_DIGITS


def render_value(value: Union[str, int]) -> str:
    """Render a string or integer to text.

    Integers are rendered in canonical base 10 (no leading zeros, leading
    minus sign for negatives). Booleans are treated as the integers 0 and 1.

    Args:
        value: String or integer to render

    Returns:
        Text form of the value

    Raises:
        TypeError: If value is neither a string nor an integer
    """
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(int(value))
    raise TypeError(
        f"Expected str or int, got {type(value).__name__}"
    )


def extract_digits(value: str) -> str:
    """Reduce a string to the ordered subsequence of its decimal digits.

    Args:
        value: Input text of any length, possibly empty

    Returns:
        The digits of value in their original order ('' if there are none)

    Example:
        >>> extract_digits('Order #A-0042/7')
        '00427'
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected str, got {type(value).__name__}")
    return ''.join(char for char in value if is_decimal_digit(char))


def extract_non_digits(value: Union[str, int]) -> str:
    """Reduce a string or integer to the ordered subsequence of its non-digits.

    Integers are rendered in base 10 first, so a negative number keeps its
    minus sign and a non-negative one yields ''.

    Args:
        value: Input text or integer

    Returns:
        Every character of the rendered value that is not 0-9, in order

    Example:
        >>> extract_non_digits('abc123def456xyz')
        'abcdefxyz'
        >>> extract_non_digits(12345)
        ''
    """
    text = render_value(value)
    return ''.join(char for char in text if not is_decimal_digit(char))


def extract_numeric_prefix(value: Union[str, int], length: int = 3) -> str:
    """Return the first characters of a rendered value after a digit check.

    This is the validating variant of "extract string from number". The
    rendered value must contain at least ``length`` decimal digits; the first
    ``length`` characters are then returned without any filtering.

    Args:
        value: Input text or integer
        length: Prefix length and minimum digit count (default 3)

    Returns:
        The first ``length`` characters of the rendered value

    Raises:
        InsufficientDigitsError: If the rendered value has fewer than
            ``length`` decimal digits
        ValueError: If length is not positive

    Example:
        >>> extract_numeric_prefix(12345)
        '123'
        >>> extract_numeric_prefix(42)
        Traceback (most recent call last):
            ...
        routines.text_extraction.InsufficientDigitsError: ...
    """
    if length < 1:
        raise ValueError(f"length must be positive, got {length}")

    text = render_value(value)
    digit_count = sum(1 for char in text if is_decimal_digit(char))

    if digit_count < length:
        logger.debug(f"Rejecting {text!r}: {digit_count} digits < {length}")
        raise InsufficientDigitsError(text, digit_count, length)

    return text[:length]

"""Hebrew normalization and palindrome scanning.

This package holds the pure, synchronous core: text normalization, the
palindrome predicate, the span scanner, and result deduplication.
"""

from .normalizer import HebrewNormalizer, is_hebrew_letter, normalize_hebrew
from .palindromes import (
    DEFAULT_MAX_LENGTH,
    DEFAULT_MIN_LENGTH,
    PalindromeScanner,
    dedupe,
    find_palindromes,
    is_palindrome,
    validate_length_bounds,
)

__all__ = [
    "HebrewNormalizer",
    "normalize_hebrew",
    "is_hebrew_letter",
    "PalindromeScanner",
    "find_palindromes",
    "is_palindrome",
    "dedupe",
    "validate_length_bounds",
    "DEFAULT_MIN_LENGTH",
    "DEFAULT_MAX_LENGTH",
]

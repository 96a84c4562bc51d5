"""Top-level package for Hebrew palindromes.

This package finds palindromes in Hebrew text after stripping citations,
niqqud, and final-letter forms. The main entry point is `find_palindromes`;
optional AI-backed discovery and source lookup live under `llm`.
"""

from .errors import ScanConfigurationError
from .models.datatypes import PalindromeResult
from .text.normalizer import normalize_hebrew
from .text.palindromes import PalindromeScanner, find_palindromes, is_palindrome

__all__ = [
    "PalindromeResult",
    "PalindromeScanner",
    "ScanConfigurationError",
    "find_palindromes",
    "is_palindrome",
    "normalize_hebrew",
    "__version__",
]

__version__ = "0.1.0"

"""Palindrome detection over normalized Hebrew text.

Responsibilities:
- Test normalized forms for palindromes.
- Enumerate raw spans, normalize each, and keep well-bounded palindromes.
- Collapse duplicates by normalized form, longest first.

A start index is abandoned as soon as one of its spans normalizes longer than
`max_length`. Lengths are not monotonic in the span end: extending a span can
complete a citation marker, and stripping it removes letters already counted.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator

from ..errors import ScanConfigurationError
from ..models.datatypes import PalindromeResult, RawSpan
from .normalizer import is_hebrew_letter, normalize_hebrew


MIN_PALINDROME_LENGTH = 3
DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 50


def is_palindrome(normalized: str) -> bool:
    """Return whether a normalized form reads the same in both directions.

    Forms shorter than three letters are never palindromes.
    """

    if len(normalized) < MIN_PALINDROME_LENGTH:
        return False
    return normalized == normalized[::-1]


def validate_length_bounds(min_length: int, max_length: int) -> None:
    """Reject non-integer, non-positive, or inverted scan length bounds."""

    for field_name, value in (("min_length", min_length), ("max_length", max_length)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ScanConfigurationError(
                f"`{field_name}` must be an integer, got {value!r}.",
                field_name=field_name,
            )
    if min_length <= 0:
        raise ScanConfigurationError(
            f"`min_length` must be a positive integer, got {min_length}.",
            field_name="min_length",
        )
    if max_length < min_length:
        raise ScanConfigurationError(
            f"`max_length` ({max_length}) must not be smaller than "
            f"`min_length` ({min_length}).",
            field_name="max_length",
        )


def dedupe(results: Iterable[PalindromeResult]) -> list[PalindromeResult]:
    """Keep one result per normalized form, ordered by descending length.

    The sort is stable, so among equal-length results the earliest discovered
    one wins.
    """

    ranked = sorted(results, key=lambda result: result.length, reverse=True)
    kept: dict[str, PalindromeResult] = {}
    for result in ranked:
        if result.normalized not in kept:
            kept[result.normalized] = result
    return list(kept.values())


class PalindromeScanner:
    """Scan raw text for Hebrew palindromes within configured length bounds."""

    def __init__(
        self,
        min_length: int = DEFAULT_MIN_LENGTH,
        max_length: int = DEFAULT_MAX_LENGTH,
        normalizer: Callable[[str], str] = normalize_hebrew,
    ) -> None:
        """Initialize scanner bounds, rejecting misconfigured values."""

        validate_length_bounds(min_length, max_length)
        self.min_length = min_length
        self.max_length = max_length
        self._normalize = normalizer

    def scan(self, text: str) -> list[PalindromeResult]:
        """Return deduplicated palindromes found in `text`, longest first."""

        return dedupe(self.iter_candidates(text))

    def iter_candidates(self, text: str) -> Iterator[PalindromeResult]:
        """Yield every accepted candidate in discovery order, duplicates included."""

        for start, character in enumerate(text):
            if not is_hebrew_letter(character):
                continue
            yield from self._candidates_from(text, start)

    def _candidates_from(self, text: str, start: int) -> Iterator[PalindromeResult]:
        """Yield accepted candidates for spans anchored at `start`."""

        for end in range(start + 2, len(text) + 1):
            span = RawSpan(start=start, end=end)
            raw = span.text_in(text)
            normalized = self._normalize(raw)

            if len(normalized) > self.max_length:
                return
            if len(normalized) < self.min_length:
                continue
            if not is_palindrome(normalized):
                continue

            original = raw.strip()
            if not self._ends_on_letter(original):
                continue
            yield PalindromeResult(
                normalized=normalized,
                original=original,
                length=len(normalized),
            )

    @staticmethod
    def _ends_on_letter(trimmed: str) -> bool:
        """Return whether the trimmed raw span closes on a Hebrew letter."""

        return bool(trimmed) and is_hebrew_letter(trimmed[-1])


def find_palindromes(
    text: str,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> list[PalindromeResult]:
    """Find Hebrew palindromes in `text`.

    Args:
        text: Arbitrary input text.
        min_length: Smallest normalized length to report.
        max_length: Largest normalized length to report.

    Returns:
        One result per distinct normalized form, sorted by length descending.

    Raises:
        ScanConfigurationError: If the length bounds are misconfigured.
    """

    return PalindromeScanner(min_length=min_length, max_length=max_length).scan(text)

"""Hebrew text normalization for palindrome comparison.

Responsibilities:
- Strip inline chapter/verse citation markers such as `מט,י` or `(א:ב)`.
- Remove niqqud and cantillation marks.
- Fold final (sofit) letter forms to their base forms.
- Reduce text to the 22 Hebrew base letters with no spacing.
"""

from __future__ import annotations

import re


HEBREW_LETTER_RANGE = r"\u05D0-\u05EA"
COMBINING_MARK_RANGE = r"\u0591-\u05C7"

_CITATION_RE = re.compile(
    r"[\"'\u05F4\u05F3(]?"
    f"[{HEBREW_LETTER_RANGE}]{{1,3}}"
    r"[,:\s]+"
    f"[{HEBREW_LETTER_RANGE}]{{1,3}}"
    r"[\"'\u05F4\u05F3)]?"
)
_COMBINING_MARKS_RE = re.compile(f"[{COMBINING_MARK_RANGE}]")
_NON_LETTER_RE = re.compile(f"[^{HEBREW_LETTER_RANGE}]")
_HEBREW_LETTER_RE = re.compile(f"[{HEBREW_LETTER_RANGE}]")

SOFIT_TO_BASE = {
    "ך": "כ",
    "ם": "מ",
    "ן": "נ",
    "ף": "פ",
    "ץ": "צ",
}
_SOFIT_TABLE = str.maketrans(SOFIT_TO_BASE)


def is_hebrew_letter(character: str) -> bool:
    """Return whether `character` is a single Hebrew letter, final forms included."""

    return len(character) == 1 and _HEBREW_LETTER_RE.match(character) is not None


def strip_citations(text: str) -> str:
    """Replace every citation-like letter pair with a single space."""

    return _CITATION_RE.sub(" ", text)


def strip_combining_marks(text: str) -> str:
    """Delete niqqud and cantillation marks."""

    return _COMBINING_MARKS_RE.sub("", text)


def fold_final_letters(text: str) -> str:
    """Map final letter forms to their base forms."""

    return text.translate(_SOFIT_TABLE)


def normalize_hebrew(text: str) -> str:
    """Return the letters-only, vowel-free, final-folded form of `text`.

    Steps run in a fixed order: citation stripping, mark removal, final-letter
    folding, then filtering to Hebrew letters. The result may be empty.
    """

    cleaned = strip_citations(text)
    cleaned = strip_combining_marks(cleaned)
    cleaned = fold_final_letters(cleaned)
    return _NON_LETTER_RE.sub("", cleaned)


class HebrewNormalizer:
    """Normalize raw text spans into comparable Hebrew letter sequences."""

    def normalize(self, text: str) -> str:
        """Normalize text for palindrome testing."""

        return normalize_hebrew(text)

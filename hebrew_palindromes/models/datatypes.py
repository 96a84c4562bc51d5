"""Core datatypes shared across palindrome modules.

Responsibilities:
- Represent immutable records exchanged between scanning, AI, and CLI layers.
- Provide explicit typing for deterministic rendering and serialization.

Key types:
- `RawSpan`, `PalindromeResult`, `BiblicalSource`, `DiscoveredPalindrome`,
  `DiscoveryOutcome`, `SourceLookupOutcome`, and `AnnotatedResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class RawSpan:
    """A contiguous slice of the scanned input text.

    Attributes:
        start: Inclusive character offset.
        end: Exclusive character offset.
    """

    start: int
    end: int

    def text_in(self, source: str) -> str:
        """Return the raw substring this span covers in `source`."""

        return source[self.start : self.end]


@dataclass(frozen=True, slots=True)
class PalindromeResult:
    """One palindrome found in scanned text.

    Attributes:
        normalized: Letters-only, final-form-folded palindrome.
        original: Whitespace-trimmed raw text the palindrome was read from.
        length: Character count of `normalized`.
    """

    normalized: str
    original: str
    length: int

    def __post_init__(self) -> None:
        """Reject records whose length disagrees with the normalized form."""

        if self.length != len(self.normalized):
            raise ValueError(
                f"`length` must equal len(normalized) ({len(self.normalized)}), "
                f"got {self.length}."
            )

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable mapping of this result."""

        return {
            "normalized": self.normalized,
            "original": self.original,
            "length": self.length,
        }


@dataclass(frozen=True, slots=True)
class BiblicalSource:
    """Canonical location of a text in the Hebrew Bible."""

    book: str
    chapter: str
    verse: str

    def label(self) -> str:
        """Return a compact `book chapter:verse` label."""

        return f"{self.book} {self.chapter}:{self.verse}".strip()

    def as_dict(self) -> dict[str, str]:
        """Return a JSON-serializable mapping of this source."""

        return {"book": self.book, "chapter": self.chapter, "verse": self.verse}


@dataclass(frozen=True, slots=True)
class DiscoveredPalindrome:
    """A palindrome reported by the AI discovery request."""

    text: str
    source: BiblicalSource
    meaning: str | None = None

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable mapping of this discovery."""

        payload: dict[str, object] = {"text": self.text, **self.source.as_dict()}
        if self.meaning is not None:
            payload["meaning"] = self.meaning
        return payload


class DiscoveryStatus(str, Enum):
    """Outcome kinds for an AI discovery response."""

    OK = "ok"
    EMPTY = "empty"
    PARSE_FAILURE = "parse_failure"


class SourceLookupStatus(str, Enum):
    """Outcome kinds for an AI source-identification response."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    PARSE_FAILURE = "parse_failure"


@dataclass(frozen=True, slots=True)
class DiscoveryOutcome:
    """Parsed AI discovery response.

    `EMPTY` is a well-formed response listing no palindromes; `PARSE_FAILURE`
    is a response that could not be read at all.
    """

    status: DiscoveryStatus
    palindromes: tuple[DiscoveredPalindrome, ...] = field(default_factory=tuple)
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class SourceLookupOutcome:
    """Parsed AI source-identification response."""

    status: SourceLookupStatus
    source: BiblicalSource | None = None
    confidence: float | None = None
    detail: str | None = None


class LookupState(str, Enum):
    """Source-lookup lifecycle state of one annotated result."""

    IDLE = "idle"
    CHECKING = "checking"
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AnnotatedResult:
    """A palindrome result together with its source-lookup state."""

    result: PalindromeResult
    lookup: LookupState = LookupState.IDLE
    source: BiblicalSource | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable mapping including lookup metadata."""

        payload = self.result.as_dict()
        payload["lookup"] = self.lookup.value
        if self.source is not None:
            payload["source"] = self.source.as_dict()
        if self.error is not None:
            payload["error"] = self.error
        return payload

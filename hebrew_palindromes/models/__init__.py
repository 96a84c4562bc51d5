"""Typed records for palindrome scanning and AI annotation."""

from .datatypes import (
    AnnotatedResult,
    BiblicalSource,
    DiscoveredPalindrome,
    DiscoveryOutcome,
    DiscoveryStatus,
    LookupState,
    PalindromeResult,
    RawSpan,
    SourceLookupOutcome,
    SourceLookupStatus,
)

__all__ = [
    "RawSpan",
    "PalindromeResult",
    "BiblicalSource",
    "DiscoveredPalindrome",
    "DiscoveryStatus",
    "DiscoveryOutcome",
    "SourceLookupStatus",
    "SourceLookupOutcome",
    "LookupState",
    "AnnotatedResult",
]

"""Best-effort JSON extraction from free-form model text.

Model answers often wrap the requested JSON object in prose or code fences.
The object is taken as the span from the first `{` to the last `}` and parsed
into explicit outcome records; parse problems are reported as
`PARSE_FAILURE` outcomes rather than exceptions or silent empty lists.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..models.datatypes import (
    BiblicalSource,
    DiscoveredPalindrome,
    DiscoveryOutcome,
    DiscoveryStatus,
    SourceLookupOutcome,
    SourceLookupStatus,
)


UNKNOWN_BOOK_LABEL = "לא ידוע"

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


class ResponseParseError(ValueError):
    """Raised internally when model text holds no usable JSON object."""


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the outermost JSON object embedded in `text`.

    Raises:
        ResponseParseError: If no object is present or it does not decode.
    """

    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        raise ResponseParseError("No JSON object found in model response.")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"Model response JSON is invalid: {exc.msg}.") from exc
    if not isinstance(payload, dict):
        raise ResponseParseError("Model response JSON is not an object.")
    return payload


def _string_field(item: dict[str, Any], key: str, default: str = "") -> str:
    """Read a string-ish field, falling back to `default` for blank or missing values."""

    value = item.get(key)
    if value is None or isinstance(value, dict | list):
        return default
    text = str(value).strip()
    return text or default


def parse_discovery_response(text: str) -> DiscoveryOutcome:
    """Parse a discovery answer into an explicit outcome."""

    try:
        payload = extract_json_object(text)
    except ResponseParseError as exc:
        return DiscoveryOutcome(status=DiscoveryStatus.PARSE_FAILURE, detail=str(exc))

    raw_items = payload.get("palindromes")
    if not isinstance(raw_items, list):
        return DiscoveryOutcome(
            status=DiscoveryStatus.PARSE_FAILURE,
            detail="Model response is missing a `palindromes` list.",
        )

    discoveries: list[DiscoveredPalindrome] = []
    for item in raw_items:
        if not isinstance(item, dict):
            continue
        meaning = _string_field(item, "meaning") or None
        discoveries.append(
            DiscoveredPalindrome(
                text=_string_field(item, "text"),
                source=BiblicalSource(
                    book=_string_field(item, "book", UNKNOWN_BOOK_LABEL),
                    chapter=_string_field(item, "chapter"),
                    verse=_string_field(item, "verse"),
                ),
                meaning=meaning,
            )
        )

    if not raw_items:
        return DiscoveryOutcome(status=DiscoveryStatus.EMPTY)
    if not discoveries:
        return DiscoveryOutcome(
            status=DiscoveryStatus.PARSE_FAILURE,
            detail=f"Model response `palindromes` list has no usable entries ({len(raw_items)} skipped).",
        )
    return DiscoveryOutcome(status=DiscoveryStatus.OK, palindromes=tuple(discoveries))


def _parse_confidence(value: Any) -> float | None:
    """Return a confidence in [0, 1] or `None` when absent or unusable."""

    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    if parsed != parsed:
        return None
    return min(max(parsed, 0.0), 1.0)


def parse_source_response(text: str) -> SourceLookupOutcome:
    """Parse a source-identification answer into an explicit outcome."""

    try:
        payload = extract_json_object(text)
    except ResponseParseError as exc:
        return SourceLookupOutcome(status=SourceLookupStatus.PARSE_FAILURE, detail=str(exc))

    found = payload.get("found")
    if not isinstance(found, bool):
        return SourceLookupOutcome(
            status=SourceLookupStatus.PARSE_FAILURE,
            detail="Model response is missing a boolean `found` field.",
        )

    confidence = _parse_confidence(payload.get("confidence"))
    if not found:
        return SourceLookupOutcome(status=SourceLookupStatus.NOT_FOUND, confidence=confidence)

    book = _string_field(payload, "book")
    if not book:
        return SourceLookupOutcome(
            status=SourceLookupStatus.PARSE_FAILURE,
            detail="Model reported a source without a book name.",
        )
    return SourceLookupOutcome(
        status=SourceLookupStatus.FOUND,
        source=BiblicalSource(
            book=book,
            chapter=_string_field(payload, "chapter"),
            verse=_string_field(payload, "verse"),
        ),
        confidence=confidence,
    )

"""Source-lookup state transitions for scanned palindrome results.

Every transition takes a tuple of `AnnotatedResult` entries and returns a new
tuple with exactly one entry replaced; entries are never mutated in place, so
callers holding an older tuple keep a consistent view.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .llm.gemini_client import GeminiProviderError
from .llm.service import SourceIdentifier
from .models.datatypes import (
    AnnotatedResult,
    LookupState,
    PalindromeResult,
    SourceLookupOutcome,
    SourceLookupStatus,
)
from .telemetry.logger import RunLogger


Entries = tuple[AnnotatedResult, ...]

# Provider failures that will repeat for every remaining lookup in the run.
_RUN_ENDING_FAILURE_KINDS = frozenset({"invalid_api_key", "insufficient_quota"})


def annotate(results: Iterable[PalindromeResult]) -> Entries:
    """Wrap scan results as idle annotated entries."""

    return tuple(AnnotatedResult(result=result) for result in results)


def _entry_at(entries: Sequence[AnnotatedResult], index: int) -> AnnotatedResult:
    """Return entry `index`, rejecting negative and out-of-range positions."""

    if not 0 <= index < len(entries):
        raise IndexError(f"Result index {index} is out of range for {len(entries)} entries.")
    return entries[index]


def _replace(entries: Sequence[AnnotatedResult], index: int, entry: AnnotatedResult) -> Entries:
    """Return a copy of `entries` with position `index` replaced by `entry`."""

    _entry_at(entries, index)
    return (*entries[:index], entry, *entries[index + 1 :])


def needs_lookup(entry: AnnotatedResult) -> bool:
    """Return whether a lookup may start for `entry`."""

    return entry.source is None and entry.lookup is not LookupState.CHECKING


def begin_lookup(entries: Sequence[AnnotatedResult], index: int) -> Entries:
    """Mark entry `index` as checking, unless it is busy or already resolved."""

    entry = _entry_at(entries, index)
    if not needs_lookup(entry):
        return tuple(entries)
    return _replace(
        entries,
        index,
        AnnotatedResult(result=entry.result, lookup=LookupState.CHECKING),
    )


def complete_lookup(
    entries: Sequence[AnnotatedResult],
    index: int,
    outcome: SourceLookupOutcome,
) -> Entries:
    """Replace entry `index` with the state implied by a lookup outcome."""

    result = _entry_at(entries, index).result
    if outcome.status is SourceLookupStatus.FOUND and outcome.source is not None:
        entry = AnnotatedResult(result=result, lookup=LookupState.FOUND, source=outcome.source)
    elif outcome.status is SourceLookupStatus.NOT_FOUND:
        entry = AnnotatedResult(result=result, lookup=LookupState.NOT_FOUND)
    else:
        entry = AnnotatedResult(
            result=result,
            lookup=LookupState.FAILED,
            error=outcome.detail or "Source lookup response could not be parsed.",
        )
    return _replace(entries, index, entry)


def fail_lookup(entries: Sequence[AnnotatedResult], index: int, error: str) -> Entries:
    """Replace entry `index` with a tagged failure."""

    result = _entry_at(entries, index).result
    return _replace(
        entries,
        index,
        AnnotatedResult(result=result, lookup=LookupState.FAILED, error=error),
    )


def lookup_sources(
    entries: Sequence[AnnotatedResult],
    service: SourceIdentifier,
    indices: Iterable[int] | None = None,
    run_logger: RunLogger | None = None,
) -> Entries:
    """Run source lookups one entry at a time and return the final entries.

    Provider failures become `FAILED` entries; other exceptions propagate.
    After an invalid key or exhausted quota no further requests are sent, and
    every remaining entry awaiting a lookup is failed with the same error.
    """

    current: Entries = tuple(entries)
    targets = list(range(len(current))) if indices is None else list(indices)
    for position, index in enumerate(targets):
        if not needs_lookup(_entry_at(current, index)):
            continue
        current = begin_lookup(current, index)
        try:
            outcome = service.identify_source(current[index].result.original)
        except GeminiProviderError as exc:
            if run_logger is not None:
                run_logger.log_stage_failure("identify-source", exc.failure_kind)
            current = fail_lookup(current, index, str(exc))
            if exc.failure_kind in _RUN_ENDING_FAILURE_KINDS:
                for remaining in targets[position + 1 :]:
                    if needs_lookup(_entry_at(current, remaining)):
                        current = fail_lookup(current, remaining, str(exc))
                break
            continue
        current = complete_lookup(current, index, outcome)
    return current

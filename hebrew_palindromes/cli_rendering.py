"""CLI output and error rendering helpers.

This module centralizes user-facing presentation for command diagnostics,
scan results, AI discoveries, and source lookups.
"""

from __future__ import annotations

import json
from typing import NoReturn, Sequence

import typer

from .errors import CommandStageError
from .models.datatypes import (
    AnnotatedResult,
    DiscoveryOutcome,
    DiscoveryStatus,
    LookupState,
    SourceLookupOutcome,
    SourceLookupStatus,
)


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def _lookup_suffix(entry: AnnotatedResult) -> str:
    """Return the trailing source annotation for one result row."""

    if entry.lookup is LookupState.FOUND and entry.source is not None:
        return f"  [{entry.source.label()}]"
    if entry.lookup is LookupState.NOT_FOUND:
        return "  [source not found]"
    if entry.lookup is LookupState.FAILED:
        return "  [source lookup failed]"
    return ""


def echo_scan_results(entries: Sequence[AnnotatedResult]) -> None:
    """Print one row per palindrome: length, normalized form, original text."""

    if not entries:
        typer.echo("No palindromes found.")
        return
    typer.echo(f"Found {len(entries)} palindrome(s):")
    for position, entry in enumerate(entries, start=1):
        result = entry.result
        typer.echo(
            f"{position}. ({result.length}) {result.normalized} | "
            f"{result.original}{_lookup_suffix(entry)}"
        )


def echo_json(payload: object) -> None:
    """Print a payload as indented UTF-8 JSON."""

    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def echo_discovery(outcome: DiscoveryOutcome) -> None:
    """Print AI discoveries, keeping empty and unparseable answers distinct."""

    if outcome.status is DiscoveryStatus.PARSE_FAILURE:
        typer.secho(
            f"AI response could not be parsed: {outcome.detail or 'unknown format'}",
            fg=typer.colors.YELLOW,
            err=True,
        )
        return
    if outcome.status is DiscoveryStatus.EMPTY:
        typer.echo("AI returned no palindromes.")
        return
    for position, discovery in enumerate(outcome.palindromes, start=1):
        typer.echo(f"{position}. {discovery.text} ({discovery.source.label()})")
        if discovery.meaning:
            typer.echo(f"   {discovery.meaning}")


def echo_source_lookup(text: str, outcome: SourceLookupOutcome) -> None:
    """Print the result of a single source lookup."""

    if outcome.status is SourceLookupStatus.FOUND and outcome.source is not None:
        line = f"{text}: {outcome.source.label()}"
        if outcome.confidence is not None:
            line = f"{line} (confidence {outcome.confidence:.2f})"
        typer.echo(line)
    elif outcome.status is SourceLookupStatus.NOT_FOUND:
        typer.echo(f"{text}: no exact biblical source found.")
    else:
        typer.secho(
            f"AI response could not be parsed: {outcome.detail or 'unknown format'}",
            fg=typer.colors.YELLOW,
            err=True,
        )

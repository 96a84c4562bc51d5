"""Gemini runtime settings gathered from CLI options and the keyring.

Only the API key is read from the keyring. Anything the CLI and keyring do not
provide is left to the env/config layers of `AppConfig.resolved_provider_runtime`.
"""

from __future__ import annotations

from typing import Callable

import typer

from .credentials import ApiKeyStore, CredentialStoreError, create_credential_store
from .errors import CommandStageError
from .parsing import normalize_optional_string


def prompt_hidden_api_key(label: str = "Gemini API key (hidden; leave blank to skip)") -> str | None:
    """Prompt for an API key without echoing it and return `None` when left blank."""

    return normalize_optional_string(
        typer.prompt(label, default="", hide_input=True, show_default=False)
    )


def _remember_api_key(store: ApiKeyStore, api_key: str) -> None:
    """Persist a CLI-entered key, or warn that it only applies to this run."""

    if not store.is_available():
        typer.echo(
            "No keyring backend is available; the API key is used for this run only.",
            err=True,
        )
        return
    try:
        store.set_api_key(api_key)
    except CredentialStoreError as exc:
        raise CommandStageError(
            stage="credentials",
            detail=str(exc),
            hint="Fix the keyring backend, or rerun with `--no-store-api-key`.",
        ) from exc
    typer.echo("Saved the Gemini API key to the system keyring.", err=True)


def resolve_provider_runtime_sources(
    model: str | None,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    credential_store_factory: Callable[[], ApiKeyStore] = create_credential_store,
) -> tuple[dict[str, str], dict[str, str]]:
    """Return the `cli` and `secure` runtime source mappings.

    A key given via `--api-key` or `--prompt-api-key` is saved to the keyring
    when `store_api_key` is set and it differs from the stored key.
    """

    cli_values = {
        key: value
        for key, value in (
            ("model", normalize_optional_string(model)),
            ("api_key", normalize_optional_string(api_key)),
        )
        if value is not None
    }
    if prompt_api_key and "api_key" not in cli_values:
        prompted = prompt_hidden_api_key()
        if prompted is not None:
            cli_values["api_key"] = prompted

    store = credential_store_factory()
    stored_key = store.get_api_key()
    secure_values = {} if stored_key is None else {"api_key": stored_key}

    entered_key = cli_values.get("api_key")
    if store_api_key and entered_key is not None and entered_key != stored_key:
        _remember_api_key(store, entered_key)
    return cli_values, secure_values

"""Integration-test fixtures for deterministic CLI environment and credentials."""

from __future__ import annotations

import os

import pytest


class InMemoryCredentialStore:
    """Credential store kept in memory so tests never touch the OS keyring."""

    def __init__(self, initial_api_key: str | None = None) -> None:
        """Initialize the store with an optional pre-seeded API key."""

        self._api_key = initial_api_key
        self.last_error: str | None = None

    def is_available(self) -> bool:
        return True

    def get_api_key(self) -> str | None:
        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        self._api_key = api_key.strip()

    def clear_api_key(self) -> bool:
        """Clear API key and return whether one existed."""

        existed = self._api_key is not None
        self._api_key = None
        return existed


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    """Provide the in-memory store the CLI uses during a test."""

    return InMemoryCredentialStore()


@pytest.fixture(autouse=True)
def _isolate_cli_environment(
    monkeypatch: pytest.MonkeyPatch, credential_store: InMemoryCredentialStore
) -> None:
    """Clear provider env vars, disable request pacing, and stub secure storage."""

    for key in list(os.environ):
        if key.startswith("HEBREW_PALINDROMES_") or key == "GEMINI_API_KEY":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HEBREW_PALINDROMES_REQUEST_INTERVAL_SECONDS", "0")
    monkeypatch.setattr(
        "hebrew_palindromes.cli.create_credential_store", lambda: credential_store
    )

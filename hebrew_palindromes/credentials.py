"""Gemini API key storage in the operating-system keyring.

A missing or broken keyring never blocks a command. Reads report no stored
key, so resolution falls through to `GEMINI_API_KEY` and config defaults;
only an explicit write surfaces the keyring failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import keyring
from keyring.backends import fail
from keyring.errors import KeyringError

from .parsing import normalize_optional_string


SERVICE_NAME = "hebrew-palindromes"
GEMINI_ACCOUNT = "gemini_api_key"


class KeyringBackend(Protocol):
    """The subset of the `keyring` backend API used for the Gemini key."""

    def get_password(self, service: str, username: str) -> str | None: ...

    def set_password(self, service: str, username: str, password: str) -> None: ...

    def delete_password(self, service: str, username: str) -> None: ...


class ApiKeyStore(Protocol):
    """Key store operations used by CLI runtime resolution and `credentials`."""

    last_error: str | None

    def is_available(self) -> bool: ...

    def get_api_key(self) -> str | None: ...

    def set_api_key(self, api_key: str) -> None: ...

    def clear_api_key(self) -> bool: ...


class CredentialStoreError(RuntimeError):
    """Raised when the Gemini API key cannot be written to the keyring."""


@dataclass(slots=True)
class GeminiKeyStore:
    """Gemini API key kept under one keyring service/account pair.

    Attributes:
        backend: Keyring backend; the process default from `keyring.get_keyring()`
            when omitted.
        service_name: Keyring service identifier.
        account_name: Keyring account identifier.
        last_error: Message of the most recent failed read, if any.
    """

    backend: KeyringBackend | None = None
    service_name: str = SERVICE_NAME
    account_name: str = GEMINI_ACCOUNT
    last_error: str | None = None

    def _backend(self) -> KeyringBackend:
        return self.backend if self.backend is not None else keyring.get_keyring()

    def is_available(self) -> bool:
        """Return whether a real keyring backend is configured."""

        return not isinstance(self._backend(), fail.Keyring)

    def get_api_key(self) -> str | None:
        """Return the stored key, or `None` when absent or the keyring cannot be read."""

        try:
            value = self._backend().get_password(self.service_name, self.account_name)
        except KeyringError as exc:
            self.last_error = str(exc)
            return None
        self.last_error = None
        return normalize_optional_string(value)

    def set_api_key(self, api_key: str) -> None:
        """Store a stripped, non-empty key.

        Raises:
            ValueError: If `api_key` is blank.
            CredentialStoreError: If the keyring rejects the write.
        """

        normalized = normalize_optional_string(api_key)
        if normalized is None:
            raise ValueError("API key must be a non-empty string.")
        try:
            self._backend().set_password(self.service_name, self.account_name, normalized)
        except KeyringError as exc:
            raise CredentialStoreError(f"Keyring rejected the Gemini API key: {exc}") from exc

    def clear_api_key(self) -> bool:
        """Delete the stored key and report whether one was removed."""

        if self.get_api_key() is None:
            return False
        try:
            self._backend().delete_password(self.service_name, self.account_name)
        except KeyringError as exc:
            self.last_error = str(exc)
            return False
        return True


def create_credential_store() -> GeminiKeyStore:
    """Create a key store bound to the process default keyring backend."""

    return GeminiKeyStore()

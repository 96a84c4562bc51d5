"""Gemini HTTP client utilities for AI discovery and source lookup.

Responsibilities:
- Send minimal `generateContent` requests to the Gemini REST API.
- Normalize candidate text extraction for deterministic callers.
- Raise actionable provider exceptions for CLI-level error mapping.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Any

import requests

from .rate_limiter import RateLimiter


DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProviderError(RuntimeError):
    """Raised when a Gemini request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        """Initialize provider error metadata for diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code


class GeminiClient:
    """Minimal requests-based Gemini `generateContent` client."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout_seconds: float = 60.0,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize Gemini HTTP client settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.rate_limiter = rate_limiter

    @property
    def is_configured(self) -> bool:
        """Return whether an API key is available for requests."""

        return bool(self.api_key)

    def generate_text(
        self,
        *,
        model: str,
        prompt: str,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
    ) -> str:
        """Return the first candidate's text for a single-turn prompt."""

        self._require_api_key()

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }
        if self.rate_limiter is not None:
            self.rate_limiter.acquire(f"gemini:{model}")
        raw_payload = self._post_json_bytes(
            endpoint_path=f"/models/{model}:generateContent",
            payload=payload,
        ).decode("utf-8", errors="replace")
        return self._extract_candidate_text(raw_payload)

    def _require_api_key(self) -> None:
        """Require API key presence before issuing Gemini requests."""

        if not self.api_key:
            raise GeminiProviderError(
                "Missing Gemini API key. Set `GEMINI_API_KEY`, use `--api-key`, or "
                "`--prompt-api-key`.",
                failure_kind="invalid_api_key",
            )

    def _post_json_bytes(self, *, endpoint_path: str, payload: dict[str, Any]) -> bytes:
        """POST a JSON payload to Gemini and map failures consistently."""

        endpoint = f"{self.base_url}{endpoint_path}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(
                endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Gemini request timed out."
            else:
                detail = (
                    "Gemini request transport error: "
                    f"{self._short_message(self._redact_sensitive_tokens(str(exc)))}"
                )
            raise GeminiProviderError(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise GeminiProviderError(
                "Gemini request timed out.",
                failure_kind="timeout",
            ) from exc

    @classmethod
    def _extract_candidate_text(cls, raw_payload: str) -> str:
        """Extract joined text parts of the first candidate from a Gemini payload."""

        try:
            payload = json.loads(raw_payload)
        except json.JSONDecodeError as exc:
            raise GeminiProviderError(
                "Gemini returned invalid JSON payload.",
                failure_kind="malformed_response",
            ) from exc

        candidates = payload.get("candidates") if isinstance(payload, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise GeminiProviderError(
                "Gemini response missing non-empty `candidates` list.",
                failure_kind="malformed_response",
            )

        first_candidate = candidates[0]
        content = first_candidate.get("content") if isinstance(first_candidate, dict) else None
        if not isinstance(content, dict):
            raise GeminiProviderError(
                "Gemini response missing `candidates[0].content` object.",
                failure_kind="malformed_response",
            )

        parts = content.get("parts")
        if not isinstance(parts, list):
            raise GeminiProviderError(
                "Gemini response missing `candidates[0].content.parts` list.",
                failure_kind="malformed_response",
            )

        text = "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ).strip()
        if not text:
            raise GeminiProviderError(
                "Gemini response candidate text is empty.",
                failure_kind="malformed_response",
            )
        return text

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        return bytes(response.content).decode("utf-8", errors="replace").strip()

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bAIza[0-9A-Za-z_-]{20,}", "[redacted-key]", text)
        redacted = re.sub(r"(?i)([?&]key=)[^&\s]+", r"\1[redacted-key]", redacted)
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider message and optional provider status code."""

        if not body:
            return "", None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        provider_code: str | None = None
        message: str | None = None
        if isinstance(payload, dict):
            error_payload = payload.get("error")
            if isinstance(error_payload, dict):
                status_value = error_payload.get("status")
                if isinstance(status_value, str) and status_value.strip():
                    provider_code = status_value.strip()
                message_value = error_payload.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()

        if message is None:
            message = body

        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_code

    @staticmethod
    def _classify_http_failure(
        status_code: int,
        provider_message: str,
        provider_code: str | None,
    ) -> str:
        """Classify Gemini HTTP errors into deterministic diagnostic kinds."""

        message_lower = provider_message.lower()
        normalized_code = provider_code.upper() if provider_code is not None else ""

        if (
            status_code in {401, 403}
            or normalized_code in {"UNAUTHENTICATED", "PERMISSION_DENIED"}
            or "api key" in message_lower
        ):
            return "invalid_api_key"
        if status_code == 429 or normalized_code == "RESOURCE_EXHAUSTED":
            return "insufficient_quota"
        if "model" in message_lower and any(
            phrase in message_lower for phrase in ("not found", "is not supported", "invalid")
        ):
            return "invalid_model"
        if (
            status_code in {408, 504}
            or normalized_code == "DEADLINE_EXCEEDED"
            or "timed out" in message_lower
        ):
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_provider_error(cls, exc: requests.HTTPError) -> GeminiProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        body = cls._decode_error_body(exc)
        provider_message, provider_code = cls._extract_provider_message(body)
        failure_kind = cls._classify_http_failure(status_code, provider_message, provider_code)

        headline = {
            "invalid_api_key": "Gemini authentication failed",
            "insufficient_quota": "Gemini quota or rate limit exceeded",
            "invalid_model": "Gemini rejected the selected model",
            "timeout": "Gemini request timed out",
        }.get(failure_kind, "Gemini request failed")

        if provider_message:
            detail = f"{headline} (HTTP {status_code}): {provider_message}"
        else:
            detail = f"{headline} (HTTP {status_code})."

        return GeminiProviderError(
            detail,
            failure_kind=failure_kind,
            status_code=status_code,
            provider_code=provider_code,
        )

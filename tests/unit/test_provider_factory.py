"""Unit tests for provider-backed AI service construction."""

from __future__ import annotations

import pytest

from hebrew_palindromes.config import AppConfig, RuntimeConfigSources
from hebrew_palindromes.llm.cache import ResponseCache
from hebrew_palindromes.llm.gemini_client import GeminiClient
from hebrew_palindromes.provider_factory import ProviderFactory


def test_create_ai_service_wires_gemini_client_from_config() -> None:
    """Factory should pass resolved runtime values and config settings through."""

    cache = ResponseCache()
    config = AppConfig(
        timeout_seconds=12.0,
        temperature=0.1,
        max_output_tokens=512,
        request_interval_seconds=1.5,
    )

    service = ProviderFactory.create_ai_service(
        config,
        RuntimeConfigSources(cli={"model": "gemini-1.5-pro", "api_key": "cli-key"}),
        response_cache=cache,
    )

    assert isinstance(service.client, GeminiClient)
    assert service.client.api_key == "cli-key"
    assert service.client.timeout_seconds == 12.0
    assert service.client.rate_limiter is not None
    assert service.client.rate_limiter.min_interval_seconds == 1.5
    assert service.model == "gemini-1.5-pro"
    assert service.temperature == 0.1
    assert service.max_output_tokens == 512
    assert service.cache is cache
    assert service.is_configured() is True


def test_create_ai_service_without_key_is_unconfigured() -> None:
    """A missing key should produce a service that reports itself unconfigured."""

    service = ProviderFactory.create_ai_service(AppConfig())

    assert service.is_configured() is False


def test_create_ai_service_rejects_unknown_provider() -> None:
    """Unknown provider ids should fail before any client is built."""

    with pytest.raises(ValueError, match="Unsupported `provider`"):
        ProviderFactory.create_ai_service(AppConfig(provider="openai"))

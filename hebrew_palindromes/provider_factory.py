"""Provider factory for the AI collaborator.

Resolves the configured provider identifier to a concrete client and wraps it
in a `PalindromeAIService`. Callers receive the service explicitly; nothing is
cached at module level.
"""

from __future__ import annotations

from .config import AppConfig, RuntimeConfigSources
from .llm.cache import ResponseCache
from .llm.gemini_client import GeminiClient
from .llm.rate_limiter import RateLimiter
from .llm.service import PalindromeAIService


class ProviderFactory:
    """Factory for provider-backed AI services."""

    @staticmethod
    def create_ai_service(
        config: AppConfig,
        sources: RuntimeConfigSources | None = None,
        response_cache: ResponseCache | None = None,
    ) -> PalindromeAIService:
        """Create an AI service for the provider resolved from `config`."""

        runtime = config.resolved_provider_runtime(sources)
        if runtime.provider == "gemini":
            client = GeminiClient(
                api_key=runtime.api_key,
                base_url=runtime.base_url,
                timeout_seconds=config.timeout_seconds,
                rate_limiter=RateLimiter(min_interval_seconds=config.request_interval_seconds),
            )
            return PalindromeAIService(
                client=client,
                model=runtime.model,
                provider_id=runtime.provider,
                temperature=config.temperature,
                max_output_tokens=config.max_output_tokens,
                response_cache=response_cache,
            )
        raise ValueError(f"Unsupported AI provider `{runtime.provider}`.")

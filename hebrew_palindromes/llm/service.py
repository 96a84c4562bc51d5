"""AI-backed palindrome discovery and biblical source identification.

Responsibilities:
- Turn discovery and source requests into prompts for the Gemini client.
- Cache model text per request identity.
- Return explicit outcomes, keeping parse failures distinct from empty answers.
"""

from __future__ import annotations

from typing import Protocol

from ..models.datatypes import DiscoveryOutcome, SourceLookupOutcome
from .cache import ResponseCache
from .prompts import PromptLibrary
from .response_parsing import parse_discovery_response, parse_source_response


class TextGenerationClient(Protocol):
    """Protocol for clients that turn one prompt into model text."""

    @property
    def is_configured(self) -> bool:
        """Return whether the client can issue requests."""

    def generate_text(
        self,
        *,
        model: str,
        prompt: str,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
    ) -> str:
        """Return model text for `prompt`."""


class SourceIdentifier(Protocol):
    """Protocol for services that resolve a text to its biblical source."""

    def identify_source(self, text: str) -> SourceLookupOutcome:
        """Return a lookup outcome for `text`."""


class PalindromeAIService:
    """Discovery and source lookup over an explicitly injected text client."""

    def __init__(
        self,
        client: TextGenerationClient,
        model: str,
        *,
        provider_id: str = "gemini",
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
        response_cache: ResponseCache | None = None,
        prompts: PromptLibrary | None = None,
    ) -> None:
        """Initialize service settings and collaborators."""

        self.client = client
        self.model = model
        self.provider_id = provider_id
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.cache = response_cache if response_cache is not None else ResponseCache()
        self.prompts = prompts if prompts is not None else PromptLibrary()

    def is_configured(self) -> bool:
        """Return whether the underlying client has credentials."""

        return bool(self.client.is_configured)

    def discover_palindromes(self, user_prompt: str | None = None) -> DiscoveryOutcome:
        """Ask the model for biblical palindromes, optionally steered by `user_prompt`.

        Discovery answers are not cached; repeating the request is how a user
        asks for a fresh set.

        Raises:
            GeminiProviderError: If the provider request itself fails.
        """

        text = self.client.generate_text(
            model=self.model,
            prompt=self.prompts.discovery_prompt(user_prompt),
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        return parse_discovery_response(text)

    def identify_source(self, text: str) -> SourceLookupOutcome:
        """Ask the model where `text` appears in the Hebrew Bible.

        Raises:
            GeminiProviderError: If the provider request itself fails.
        """

        cache_key = self.cache.make_key(
            provider=self.provider_id,
            model=self.model,
            operation="identify_source",
            text=text,
        )
        answer = self.cache.get(cache_key)
        if answer is None:
            answer = self.client.generate_text(
                model=self.model,
                prompt=self.prompts.source_prompt(text),
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            )
            self.cache.set(cache_key, answer)
        return parse_source_response(answer)

"""AI collaborator for palindrome discovery and source identification.

This package wraps the Gemini REST API behind an explicitly constructed
service with cached, rate-limited requests and explicit parse outcomes.
"""

from .cache import ResponseCache
from .gemini_client import GeminiClient, GeminiProviderError
from .prompts import PromptLibrary
from .rate_limiter import RateLimiter
from .response_parsing import parse_discovery_response, parse_source_response
from .service import PalindromeAIService, SourceIdentifier, TextGenerationClient

__all__ = [
    "GeminiClient",
    "GeminiProviderError",
    "PalindromeAIService",
    "PromptLibrary",
    "RateLimiter",
    "ResponseCache",
    "SourceIdentifier",
    "TextGenerationClient",
    "parse_discovery_response",
    "parse_source_response",
]

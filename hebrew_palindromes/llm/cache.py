"""Bounded in-memory cache of model answers for source lookups.

Scan results often repeat the same palindrome at several positions; the cache
keeps one Gemini answer per distinct text so each is looked up once a session.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field

CacheKey = tuple[str, str, str, str]


@dataclass(slots=True)
class ResponseCache:
    """Least-recently-used cache of raw model answers.

    Attributes:
        max_entries: Answers kept before the oldest is evicted.
        hits: Lookups answered from the cache.
        misses: Lookups that found nothing.
    """

    max_entries: int = 512
    hits: int = 0
    misses: int = 0
    _answers: OrderedDict[CacheKey, str] = field(default_factory=OrderedDict)

    @staticmethod
    def make_key(*, provider: str, model: str, operation: str, text: str) -> CacheKey:
        """Key an answer by provider, model, operation, and whitespace-collapsed text."""

        return (
            provider.strip().lower(),
            model.strip(),
            operation.strip().lower(),
            " ".join(text.split()),
        )

    def __len__(self) -> int:
        return len(self._answers)

    def get(self, key: CacheKey) -> str | None:
        answer = self._answers.get(key)
        if answer is None:
            self.misses += 1
            return None
        self._answers.move_to_end(key)
        self.hits += 1
        return answer

    def set(self, key: CacheKey, answer: str) -> None:
        self._answers[key] = answer
        self._answers.move_to_end(key)
        while len(self._answers) > self.max_entries:
            self._answers.popitem(last=False)

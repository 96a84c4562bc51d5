"""Request pacing for Gemini calls.

`scan --identify-sources` sends one source lookup per result entry. Requests
for the same model are kept at least `min_interval_seconds` apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from time import monotonic, sleep
from typing import Callable


@dataclass(slots=True)
class RateLimiter:
    """Minimum spacing between consecutive requests sharing a key."""

    min_interval_seconds: float = 0.5
    clock: Callable[[], float] = monotonic
    sleeper: Callable[[float], None] = sleep
    _last_request_at: dict[str, float] = field(default_factory=dict)

    def acquire(self, key: str) -> float:
        """Sleep until `key` may send again, record the request, and return the delay."""

        previous = self._last_request_at.get(key)
        delay = 0.0
        if previous is not None and self.min_interval_seconds > 0.0:
            delay = max(0.0, previous + self.min_interval_seconds - self.clock())
            if delay:
                self.sleeper(delay)
        self._last_request_at[key] = self.clock()
        return delay

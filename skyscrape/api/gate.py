"""Admission gates deciding whether a request may reach the pipeline."""

import math
import threading
import time
from collections.abc import Callable
from typing import Protocol


class AdmissionGate(Protocol):
    """Decides whether a request may proceed.

    Attributes:
        retry_after: Seconds a rejected client should wait before retrying

    """

    retry_after: int

    def admit(self, key: str) -> bool:
        """Return True if the request identified by ``key`` may proceed."""
        ...

    def rate_limit_headers(self, key: str) -> dict[str, str]:
        """Return the quota headers to send back to ``key``."""
        ...


class FixedWindowRateLimiter:
    """In-memory fixed-window request counter, keyed per client.

    Expired windows are pruned once the table grows past ``prune_threshold``
    keys. After a prune the threshold is raised to twice the live key count,
    so a table full of live windows is not rescanned on every request.

    Attributes:
        limit: Requests allowed per window
        window: Window length in seconds
        prune_threshold: Key count that triggers the first prune

    """

    def __init__(
        self,
        limit: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
        prune_threshold: int = 10_000,
    ):
        """Initialize the limiter.

        Args:
            limit: Requests allowed per key per window
            window: Window length in seconds
            clock: Monotonic time source, injectable for tests
            prune_threshold: Key count above which expired windows are dropped

        """
        self.limit = limit
        self.window = window
        self.prune_threshold = prune_threshold
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: dict[str, tuple[float, int]] = {}
        self._next_prune = prune_threshold

    @property
    def retry_after(self) -> int:
        return math.ceil(self.window)

    def _current(self, key: str, now: float) -> tuple[float, int]:
        started, count = self._counters.get(key, (now, 0))
        if now - started >= self.window:
            return now, 0
        return started, count

    def _prune(self, now: float) -> None:
        self._counters = {k: v for k, v in self._counters.items() if now - v[0] < self.window}
        self._next_prune = max(self.prune_threshold, 2 * len(self._counters))

    def admit(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            started, count = self._current(key, now)
            if count >= self.limit:
                return False
            self._counters[key] = (started, count + 1)

            if len(self._counters) > self._next_prune:
                self._prune(now)
            return True

    def rate_limit_headers(self, key: str) -> dict[str, str]:
        """Quota headers for ``key``; the reset value is in seconds from now."""
        now = self._clock()
        with self._lock:
            started, count = self._current(key, now)
        return {
            'RateLimit-Limit': str(self.limit),
            'RateLimit-Remaining': str(max(self.limit - count, 0)),
            'RateLimit-Reset': str(math.ceil(started + self.window - now)),
            'RateLimit-Policy': f'{self.limit};w={self.retry_after}',
        }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._next_prune = self.prune_threshold


class AllowAll:
    """Gate that admits every request."""

    retry_after = 0

    def admit(self, key: str) -> bool:
        return True

    def rate_limit_headers(self, key: str) -> dict[str, str]:
        return {}


def default_gates() -> dict[str, AdmissionGate]:
    """Per-scope gates: 50 weather requests per 10 minutes, 100 other requests per 15 minutes."""
    return {
        'weather': FixedWindowRateLimiter(limit=50, window=10 * 60),
        'default': FixedWindowRateLimiter(limit=100, window=15 * 60),
    }

"""In-memory per-key cooldown rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Bounded: stale entries are purged and, past ``max_entries``, the least
  recently accepted keys are evicted.
"""

from __future__ import annotations

import math
import threading
import time
from collections import OrderedDict
from typing import Callable

from comments_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class InMemoryCooldownRateLimiter(AbstractRateLimiter):
    """Allow one accepted request per key every ``window_seconds``.

    Only the timestamp of the last *accepted* request is stored per key. A
    rejected request does not push the window forward, and a client that
    waits exactly ``window_seconds`` is allowed again. Bursts are never
    permitted.

    Evicting a key whose window has elapsed is invisible to clients. Evicting
    a key that is still cooling down (only when the map is full of fresh
    entries) lets that client post early; ``max_entries`` should be sized
    well above the number of clients expected inside one window.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        window_seconds: float = 30.0,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            window_seconds: Minimum time between accepted requests per key.
            max_entries: Maximum tracked keys (None for unbounded).
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If window_seconds or max_entries are invalid.
        """
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self._window_seconds = window_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        # key -> last accepted time, least recently accepted first
        self._last_seen: OrderedDict[str, float] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_seen)

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def check(self, key: str, *, now: float | None = None) -> RateLimitResult:
        """Check the key and record ``now`` when the request is allowed.

        Args:
            key: Client identifier.
            now: UNIX time in seconds; defaults to the injected clock.

        Returns:
            RateLimitResult with the decision and retry metadata.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        if now is None:
            now = self._clock()

        with self._lock:
            last = self._last_seen.get(key)
            if last is not None and now - last < self._window_seconds:
                reset_at = last + self._window_seconds
                return RateLimitResult(
                    allowed=False,
                    window_seconds=self._window_seconds,
                    reset_at=reset_at,
                    retry_after_seconds=max(1, math.ceil(reset_at - now)),
                )

            self._last_seen[key] = now
            self._last_seen.move_to_end(key)
            self._evict_locked(now)

        return RateLimitResult(
            allowed=True,
            window_seconds=self._window_seconds,
            reset_at=now + self._window_seconds,
        )

    def reset(self) -> None:
        with self._lock:
            self._last_seen.clear()

    def _evict_locked(self, now: float) -> None:
        if self._max_entries is None or len(self._last_seen) <= self._max_entries:
            return

        # Entries are ordered by acceptance time, so stale ones sit at the front
        while self._last_seen:
            oldest_key, oldest_at = next(iter(self._last_seen.items()))
            if now - oldest_at < self._window_seconds:
                break
            del self._last_seen[oldest_key]

        while len(self._last_seen) > self._max_entries:
            self._last_seen.popitem(last=False)

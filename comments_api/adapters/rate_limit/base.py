"""Rate limiter interfaces.

The comment service depends on this abstraction (not the concrete
implementation) so the in-process store can be replaced by a shared one
(e.g., Redis) when the API runs on more than one process.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        window_seconds: Cooldown enforced between accepted requests.
        reset_at: UNIX time (seconds) when the key may post again.
        retry_after_seconds: Whole seconds to wait when blocked, else None.
    """

    allowed: bool
    window_seconds: float
    reset_at: float
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, key: str, *, now: float | None = None) -> RateLimitResult:
        """Check the key and record the attempt if it is allowed.

        The check and the record happen atomically: two concurrent calls for
        the same key inside the window never both succeed.

        Args:
            key: Client identifier (e.g., forwarded client address).
            now: UNIX time in seconds; defaults to the limiter's clock.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> None:
        """Forget every tracked key."""
        raise NotImplementedError

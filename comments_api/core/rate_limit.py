"""Rate limiter wiring for the HTTP layer.

This module builds the process-wide limiter from settings and derives the
rate limit key from request headers.

Keying strategy:
- First address of ``X-Forwarded-For`` (the original client behind proxies).
- Else ``X-Real-IP``.
- Else the shared ``"unknown"`` bucket: every client without those headers
  is throttled together.
"""

from __future__ import annotations

import logging
from typing import Mapping

from comments_api.adapters.rate_limit.base import AbstractRateLimiter
from comments_api.adapters.rate_limit.in_memory import InMemoryCooldownRateLimiter
from comments_api.core.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_KEY = "unknown"

_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[float, int | None] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_window_seconds,
        settings.app.rate_limit_max_entries,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = InMemoryCooldownRateLimiter(
            window_seconds=settings.app.rate_limit_window_seconds,
            max_entries=settings.app.rate_limit_max_entries,
        )
        _limiter_config = config
        logger.debug(
            "rate_limit.limiter_built",
            extra={"window_s": config[0], "max_entries": config[1]},
        )

    return _limiter


def client_key_from_headers(headers: Mapping[str, str]) -> str:
    """Derive the rate limit key from request headers.

    Never fails: blank or absent headers fall through to the next source and
    finally to ``"unknown"``.

    Examples:
        >>> client_key_from_headers({"x-forwarded-for": "203.0.113.7, 10.0.0.1"})
        '203.0.113.7'
        >>> client_key_from_headers({"x-real-ip": "198.51.100.2"})
        '198.51.100.2'
        >>> client_key_from_headers({})
        'unknown'
    """

    forwarded_for = (headers.get("x-forwarded-for") or "").split(",")[0].strip()
    if forwarded_for:
        return forwarded_for

    real_ip = (headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT_KEY

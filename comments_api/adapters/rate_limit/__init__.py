"""Rate limiting adapters.

The comment service talks to ``AbstractRateLimiter`` only, so the in-memory
cooldown store can later be replaced by a shared one without touching the
service or the API layer.
"""

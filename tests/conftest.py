"""Pytest configuration and fixtures shared across all test modules.

Storage connection variables must be present before anything imports
``comments_api.core.config``; settings are built at import time.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("LOG_FORMAT", "plain")

from comments_api.adapters.rate_limit.in_memory import InMemoryCooldownRateLimiter  # noqa: E402
from comments_api.adapters.storage.base import AbstractCommentStore  # noqa: E402
from comments_api.services.comment_service import CommentService  # noqa: E402


class FakeClock:
    """Deterministic clock used to test cooldown windows."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeCommentStore(AbstractCommentStore):
    """In-memory stand-in for the comments table.

    Mirrors the database behavior the service relies on: ids and created_at
    are assigned on insert and listings come back newest first.
    """

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: Exception | None = None
        self.closed = False
        self._next_id = 1
        self._base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def add(self, **row: Any) -> dict[str, Any]:
        row.setdefault("id", self._next_id)
        self._next_id = max(self._next_id, int(row["id"])) + 1
        self.rows.append(row)
        return row

    async def list_by_slug(self, post_slug: str) -> list[dict[str, Any]]:
        self.calls.append(("list_by_slug", post_slug))
        if self.fail_with:
            raise self.fail_with
        matching = [r for r in self.rows if r["post_slug"] == post_slug]
        return sorted(matching, key=lambda r: r["created_at"], reverse=True)

    async def insert(self, record: dict[str, Any]) -> list[dict[str, Any]]:
        self.calls.append(("insert", record))
        if self.fail_with:
            raise self.fail_with
        created_at = self._base_time + timedelta(seconds=len(self.rows))
        row = self.add(**record, created_at=created_at.isoformat())
        return [dict(row)]

    async def delete_by_id(self, comment_id: str | int) -> None:
        self.calls.append(("delete_by_id", comment_id))
        if self.fail_with:
            raise self.fail_with
        self.rows = [r for r in self.rows if str(r["id"]) != str(comment_id)]

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_store() -> FakeCommentStore:
    return FakeCommentStore()


@pytest.fixture
def limiter(fake_clock: FakeClock) -> InMemoryCooldownRateLimiter:
    return InMemoryCooldownRateLimiter(window_seconds=30, clock=fake_clock)


@pytest.fixture
def comment_service(
    fake_store: FakeCommentStore, limiter: InMemoryCooldownRateLimiter
) -> CommentService:
    return CommentService(store=fake_store, limiter=limiter)

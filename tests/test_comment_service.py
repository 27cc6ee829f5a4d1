"""Tests for CommentService orchestration with a fake store and clock."""

import pytest

from comments_api.core.errors import (
    RateLimitedError,
    SpamRejectedError,
    StorageAppError,
    ValidationAppError,
)
from comments_api.services.comment_service import CommentService


def _payload(**overrides) -> dict:
    base = {"post_slug": "hello-world", "content": "Great read", "author": "Ada"}
    base.update(overrides)
    return base


class TestListComments:
    @pytest.mark.asyncio
    async def test_returns_newest_first(self, comment_service, fake_store) -> None:
        fake_store.add(id=1, post_slug="p", content="one", created_at="2024-01-01T00:00:01+00:00")
        fake_store.add(id=3, post_slug="p", content="three", created_at="2024-01-01T00:00:03+00:00")
        fake_store.add(id=2, post_slug="p", content="two", created_at="2024-01-01T00:00:02+00:00")
        fake_store.add(id=4, post_slug="other", content="x", created_at="2024-01-01T00:00:09+00:00")

        comments = await comment_service.list_comments("p")

        assert [c["id"] for c in comments] == [3, 2, 1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("slug", [None, "", "   "])
    async def test_missing_slug_skips_storage(self, comment_service, fake_store, slug) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await comment_service.list_comments(slug)

        assert exc_info.value.message == "Missing slug"
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, comment_service, fake_store) -> None:
        fake_store.fail_with = StorageAppError(code="storage_error", message="boom")

        with pytest.raises(StorageAppError):
            await comment_service.list_comments("p")


class TestCreateComment:
    @pytest.mark.asyncio
    async def test_creates_sanitized_record(self, comment_service, fake_store) -> None:
        created = await comment_service.create_comment(
            _payload(content="  " + "z" * 600, author="   "),
            client_key="1.2.3.4",
        )

        assert len(created) == 1
        row = created[0]
        assert row["id"] == 1
        assert row["content"] == "z" * 500
        assert row["author"] == "Anonymous"
        assert fake_store.calls[0] == (
            "insert",
            {"post_slug": "hello-world", "content": "z" * 500, "author": "Anonymous"},
        )

    @pytest.mark.asyncio
    async def test_honeypot_field_not_persisted(self, comment_service, fake_store) -> None:
        await comment_service.create_comment(_payload(website=None), client_key="k")

        _, record = fake_store.calls[0]
        assert "website" not in record

    @pytest.mark.asyncio
    async def test_second_create_inside_window_is_rate_limited(
        self, comment_service, fake_store, fake_clock
    ) -> None:
        await comment_service.create_comment(_payload(), client_key="1.2.3.4")

        fake_clock.advance(29.9)
        with pytest.raises(RateLimitedError) as exc_info:
            await comment_service.create_comment(_payload(), client_key="1.2.3.4")

        assert exc_info.value.message.startswith("Too many requests")
        assert exc_info.value.details["retry_after"] == 1
        assert [name for name, _ in fake_store.calls] == ["insert"]

    @pytest.mark.asyncio
    async def test_create_after_window_succeeds(self, comment_service, fake_store, fake_clock) -> None:
        await comment_service.create_comment(_payload(), client_key="1.2.3.4")

        fake_clock.advance(30)
        await comment_service.create_comment(_payload(), client_key="1.2.3.4")

        assert len(fake_store.rows) == 2

    @pytest.mark.asyncio
    async def test_different_clients_not_throttled_together(self, comment_service, fake_store) -> None:
        await comment_service.create_comment(_payload(), client_key="1.1.1.1")
        await comment_service.create_comment(_payload(), client_key="2.2.2.2")

        assert len(fake_store.rows) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_runs_before_validation(self, comment_service, fake_store) -> None:
        with pytest.raises(ValidationAppError):
            await comment_service.create_comment({}, client_key="k")

        # The rejected submission still consumed the cooldown
        with pytest.raises(RateLimitedError):
            await comment_service.create_comment(_payload(), client_key="k")
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_spam_rejected_regardless_of_fields(self, comment_service, fake_store) -> None:
        with pytest.raises(SpamRejectedError):
            await comment_service.create_comment(_payload(website="http://x"), client_key="k")

        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_missing_fields(self, comment_service, fake_store) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await comment_service.create_comment({"post_slug": "p"}, client_key="k")

        assert exc_info.value.message == "Missing fields"
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_without_limiter_never_throttles(self, fake_store) -> None:
        service = CommentService(store=fake_store, limiter=None)

        await service.create_comment(_payload(), client_key="k")
        await service.create_comment(_payload(), client_key="k")

        assert len(fake_store.rows) == 2

    @pytest.mark.asyncio
    async def test_custom_limits_applied(self, fake_store) -> None:
        service = CommentService(
            store=fake_store,
            content_max_chars=5,
            author_max_chars=3,
            default_author="Anónimo",
        )

        created = await service.create_comment(
            _payload(content="abcdefgh", author="Grace"), client_key="k"
        )

        assert created[0]["content"] == "abcde"
        assert created[0]["author"] == "Gra"

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, comment_service, fake_store) -> None:
        fake_store.fail_with = StorageAppError(code="storage_error", message="insert failed")

        with pytest.raises(StorageAppError) as exc_info:
            await comment_service.create_comment(_payload(), client_key="k")

        assert exc_info.value.message == "insert failed"


class TestDeleteComment:
    @pytest.mark.asyncio
    async def test_deletes_only_matching_record(self, comment_service, fake_store) -> None:
        fake_store.add(id=1, post_slug="p", content="a", created_at="1")
        fake_store.add(id=2, post_slug="p", content="b", created_at="2")

        result = await comment_service.delete_comment(1)

        assert result == {"success": True}
        assert [r["id"] for r in fake_store.rows] == [2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("comment_id", [None, "", "  "])
    async def test_missing_id_skips_storage(self, comment_service, fake_store, comment_id) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await comment_service.delete_comment(comment_id)

        assert exc_info.value.message == "Missing id"
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_zero_is_a_valid_id(self, comment_service, fake_store) -> None:
        await comment_service.delete_comment(0)

        assert fake_store.calls == [("delete_by_id", 0)]


@pytest.mark.asyncio
async def test_close_releases_store(comment_service, fake_store) -> None:
    await comment_service.close()

    assert fake_store.closed is True

"""Comment service orchestrating rate limiting, validation and storage.

This service is the boundary between HTTP handlers and the storage
collaborator. It handles:
- Per-client cooldown on comment creation
- Honeypot and required-field validation
- Trimming/capping of free-text fields
- Delegating list/insert/delete to the comment store
Every failure surfaces as an AppError subclass; the HTTP layer maps them to
status codes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from comments_api.adapters.rate_limit.base import AbstractRateLimiter
from comments_api.adapters.storage.base import AbstractCommentStore, CommentRecord
from comments_api.core.errors import RateLimitedError, ValidationAppError
from comments_api.core.logging import hash_identifier
from comments_api.utils.comment_validators import validate_comment_payload
from comments_api.utils.text_sanitizer import (
    DEFAULT_AUTHOR,
    as_text,
    sanitize_author,
    sanitize_content,
)

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests. Please wait before posting another comment."


class CommentService:
    """List, create and delete comments for a post.

    Args:
        store: Storage collaborator for the comments table.
        limiter: Cooldown limiter applied to creations, or None to disable it.
        content_max_chars: Cap applied to the comment body.
        author_max_chars: Cap applied to the author name.
        default_author: Placeholder stored when no author is given.
        honeypot_field: Hidden field that marks a submission as spam.
    """

    def __init__(
        self,
        store: AbstractCommentStore,
        limiter: AbstractRateLimiter | None = None,
        *,
        content_max_chars: int = 500,
        author_max_chars: int = 50,
        default_author: str = DEFAULT_AUTHOR,
        honeypot_field: str = "website",
    ) -> None:
        self.store = store
        self.limiter = limiter
        self.content_max_chars = content_max_chars
        self.author_max_chars = author_max_chars
        self.default_author = default_author
        self.honeypot_field = honeypot_field

    async def list_comments(self, slug: str | None) -> list[CommentRecord]:
        """Return the comments of a post, newest first.

        Raises:
            ValidationAppError: If slug is missing or blank.
            StorageAppError: If the store fails.
        """
        if not slug or not slug.strip():
            raise ValidationAppError(code="missing_slug", message="Missing slug")

        comments = await self.store.list_by_slug(slug)
        logger.info(
            "comments.listed",
            extra={"post_slug": slug, "count": len(comments)},
        )
        return comments

    def _enforce_rate_limit(self, client_key: str) -> None:
        if self.limiter is None:
            return

        key_hash = hash_identifier(client_key)
        result = self.limiter.check(client_key)
        if result.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={"key_hash": key_hash, "window_s": result.window_seconds},
            )
            return

        logger.warning(
            "rate_limit.exceeded",
            extra={
                "key_hash": key_hash,
                "window_s": result.window_seconds,
                "retry_after_s": result.retry_after_seconds,
            },
        )
        raise RateLimitedError(
            code="rate_limited",
            message=RATE_LIMITED_MESSAGE,
            details={"retry_after": result.retry_after_seconds or 0},
        )

    def build_record(self, payload: Mapping[str, Any]) -> CommentRecord:
        """Validate a submission and return the sanitized row to insert.

        Raises:
            SpamRejectedError: If the honeypot field is filled.
            ValidationAppError: If post_slug or content is missing.
        """
        validate_comment_payload(payload, honeypot_field=self.honeypot_field)

        return {
            "post_slug": as_text(payload["post_slug"]).strip(),
            "content": sanitize_content(payload["content"], self.content_max_chars),
            "author": sanitize_author(
                payload.get("author"),
                self.author_max_chars,
                self.default_author,
            ),
        }

    async def create_comment(self, payload: Mapping[str, Any], client_key: str) -> list[CommentRecord]:
        """Rate limit, validate, sanitize and insert a comment.

        Args:
            payload: Submitted fields.
            client_key: Rate limit key derived from the request.

        Returns:
            The created row(s) as returned by storage.

        Raises:
            RateLimitedError: If the client posted within the cooldown window.
            SpamRejectedError: If the honeypot field is filled.
            ValidationAppError: If post_slug or content is missing.
            StorageAppError: If the insert fails.
        """
        self._enforce_rate_limit(client_key)
        record = self.build_record(payload)

        created = await self.store.insert(record)
        logger.info(
            "comments.created",
            extra={
                "post_slug": record["post_slug"],
                "content_len": len(record["content"]),
                "key_hash": hash_identifier(client_key),
            },
        )
        return created

    async def delete_comment(self, comment_id: str | int | None) -> dict[str, bool]:
        """Delete a comment by id.

        Raises:
            ValidationAppError: If the id is missing or blank.
            StorageAppError: If the delete fails.
        """
        if comment_id is None or (isinstance(comment_id, str) and not comment_id.strip()):
            raise ValidationAppError(code="missing_id", message="Missing id")

        await self.store.delete_by_id(comment_id)
        logger.info("comments.deleted", extra={"comment_id": comment_id})
        return {"success": True}

    async def close(self) -> None:
        await self.store.aclose()

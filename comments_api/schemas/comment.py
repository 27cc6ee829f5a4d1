"""Pydantic schemas for comment requests and responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommentCreateRequest(BaseModel):
    """Body of a comment submission.

    Fields accept any JSON value. The comment service decides what counts as
    spam or missing, so a filled honeypot is reported as spam whatever the
    other fields hold, and after the rate limit has been applied.
    """

    post_slug: Any = Field(
        default=None,
        description="Slug of the post being commented on.",
    )
    content: Any = Field(
        default=None,
        description="Comment text. Trimmed and capped at 500 characters.",
    )
    author: Any = Field(
        default=None,
        description="Display name. Defaults to 'Anonymous'; capped at 50 characters.",
    )
    website: Any = Field(
        default=None,
        description="Honeypot field. Must be left empty; any value marks the submission as spam.",
    )


class CommentDeleteRequest(BaseModel):
    """Body of a comment deletion."""

    id: int | str | None = Field(
        default=None,
        description="Identifier of the comment to delete.",
    )


class Comment(BaseModel):
    """A stored comment, for API docs only.

    Rows are returned exactly as storage sends them; this model is not used
    to validate responses.
    """

    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    post_slug: str | None = None
    content: str | None = None
    author: str | None = None
    created_at: str | None = None


class DeleteCommentResponse(BaseModel):
    success: bool = True

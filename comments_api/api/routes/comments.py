from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from comments_api.adapters.storage.factory import create_comment_store
from comments_api.core.config import settings
from comments_api.core.rate_limit import client_key_from_headers, get_rate_limiter
from comments_api.schemas.comment import (
    Comment,
    CommentCreateRequest,
    CommentDeleteRequest,
    DeleteCommentResponse,
)
from comments_api.services.comment_service import CommentService

router = APIRouter(prefix="/api", tags=["Comments"])

_comment_service: CommentService | None = None


def get_comment_service() -> CommentService:
    """Return the process-wide comment service, building it on first use."""
    global _comment_service

    if _comment_service is None:
        _comment_service = CommentService(
            store=create_comment_store(),
            limiter=get_rate_limiter() if settings.app.rate_limit_enabled else None,
            content_max_chars=settings.app.content_max_chars,
            author_max_chars=settings.app.author_max_chars,
            default_author=settings.app.default_author,
            honeypot_field=settings.app.honeypot_field,
        )
    return _comment_service


async def close_comment_service() -> None:
    """Close the storage client of the cached service, if one was built."""
    global _comment_service

    if _comment_service is not None:
        await _comment_service.close()
        _comment_service = None


@router.get(
    "/comments",
    response_model=None,
    responses={200: {"model": list[Comment], "description": "Rows as stored"}},
)
async def list_comments(
    slug: str | None = Query(None, description="Slug of the post whose comments to list"),
    service: CommentService = Depends(get_comment_service),
) -> list[dict]:
    """List the comments of a post, most recent first.

    Returns 400 when ``slug`` is missing and 500 when storage fails.
    """
    return await service.list_comments(slug)


@router.post(
    "/comments",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    responses={201: {"model": list[Comment], "description": "The created row"}},
)
async def create_comment(
    request: Request,
    payload: CommentCreateRequest | None = None,
    service: CommentService = Depends(get_comment_service),
) -> list[dict]:
    """Create a comment.

    The client is identified by ``X-Forwarded-For`` / ``X-Real-IP`` and may
    post once every 30 seconds (429 otherwise). Filling the ``website``
    honeypot or omitting ``post_slug``/``content`` yields 400.
    """
    body = payload.model_dump() if payload is not None else {}
    client_key = client_key_from_headers(request.headers)
    return await service.create_comment(body, client_key)


@router.delete("/comments", response_model=DeleteCommentResponse)
async def delete_comment(
    payload: CommentDeleteRequest | None = None,
    service: CommentService = Depends(get_comment_service),
) -> dict:
    """Delete a comment by the ``id`` given in the JSON body."""
    comment_id = payload.id if payload is not None else None
    return await service.delete_comment(comment_id)

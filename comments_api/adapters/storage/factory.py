"""Factory for the comment store."""

from comments_api.adapters.storage.base import AbstractCommentStore
from comments_api.adapters.storage.postgrest import PostgrestCommentStore
from comments_api.core.config import settings
from comments_api.core.errors import ValidationAppError


def create_comment_store() -> AbstractCommentStore:
    """Build the comment store from comments_api.core.config settings.

    Returns:
        AbstractCommentStore: Configured store instance.

    Raises:
        ValidationAppError: If the connection URL or key is blank.
    """
    if not settings.storage.url.strip():
        raise ValidationAppError(
            code="storage_missing_url",
            message="Comment storage requires SUPABASE_URL environment variable",
        )
    if not settings.storage.anon_key.strip():
        raise ValidationAppError(
            code="storage_missing_key",
            message="Comment storage requires SUPABASE_ANON_KEY environment variable",
        )

    return PostgrestCommentStore(
        base_url=settings.storage.url,
        api_key=settings.storage.anon_key,
        table=settings.storage.table,
        timeout_seconds=settings.storage.timeout_seconds,
    )

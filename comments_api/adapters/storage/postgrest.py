"""PostgREST (Supabase REST) adapter for the comments table."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from comments_api.adapters.storage.base import AbstractCommentStore, CommentRecord
from comments_api.core.errors import StorageAppError

logger = logging.getLogger(__name__)


class PostgrestCommentStore(AbstractCommentStore):
    """Comment store backed by a PostgREST endpoint.

    Uses a shared ``httpx.AsyncClient``. Filtering and ordering are done by
    the database through PostgREST query operators (``eq.``, ``order=``).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "comments",
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the REST client.

        Args:
            base_url: Project URL (e.g., https://xyz.supabase.co).
            api_key: Access key sent as ``apikey`` and bearer token.
            table: Table name.
            timeout_seconds: Request timeout in seconds, None for no timeout.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.table = table
        self.client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def list_by_slug(self, post_slug: str) -> list[CommentRecord]:
        response = await self._request(
            "GET",
            params={
                "select": "*",
                "post_slug": f"eq.{post_slug}",
                "order": "created_at.desc",
            },
            operation="select",
        )
        return response.json()

    async def insert(self, record: CommentRecord) -> list[CommentRecord]:
        response = await self._request(
            "POST",
            json=[record],
            headers={"Prefer": "return=representation"},
            operation="insert",
        )
        return response.json()

    async def delete_by_id(self, comment_id: str | int) -> None:
        await self._request(
            "DELETE",
            params={"id": f"eq.{comment_id}"},
            operation="delete",
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, *, operation: str, **kwargs: Any) -> httpx.Response:
        """Send a request to the table endpoint, mapping failures to StorageAppError.

        Raises:
            StorageAppError: On transport errors or non-2xx responses.
        """
        try:
            response = await self.client.request(method, f"/{self.table}", **kwargs)
        except httpx.HTTPError as exc:
            logger.error(
                "storage.request_failed",
                extra={
                    "operation": operation,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise StorageAppError(
                code="storage_unavailable",
                message=f"Storage request failed: {exc}",
            ) from exc

        if response.is_error:
            message = _error_message(response)
            logger.error(
                "storage.error_response",
                extra={
                    "operation": operation,
                    "http_status": response.status_code,
                    "error_msg": message,
                },
            )
            raise StorageAppError(
                code="storage_error",
                message=message,
                details={"http_status": response.status_code},
            )

        logger.debug(
            "storage.request_ok",
            extra={"operation": operation, "http_status": response.status_code},
        )
        return response


def _error_message(response: httpx.Response) -> str:
    """Extract PostgREST's ``message`` field, falling back to the status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Storage returned HTTP {response.status_code}"

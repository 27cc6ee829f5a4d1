from abc import ABC, abstractmethod
from typing import Any

CommentRecord = dict[str, Any]


class AbstractCommentStore(ABC):
	"""Interface for the table that persists comments.

	Implementations raise StorageAppError for any failure reported by the
	backing service.
	"""

	@abstractmethod
	async def list_by_slug(self, post_slug: str) -> list[CommentRecord]:
		"""Return every comment of ``post_slug``, newest ``created_at`` first."""
		...

	@abstractmethod
	async def insert(self, record: CommentRecord) -> list[CommentRecord]:
		"""Insert one comment and return the created row(s) as stored."""
		...

	@abstractmethod
	async def delete_by_id(self, comment_id: str | int) -> None:
		"""Delete the comment whose ``id`` equals ``comment_id``."""
		...

	async def aclose(self) -> None:
		"""Release network resources, if any."""
		return None

"""Application-level exception types.

This module defines domain errors raised by services/adapters and mapped to
HTTP responses in one place (see exception_handlers).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    field: str
    retry_after: int
    http_status: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class SpamRejectedError(AppError):
    """Raised when the honeypot field is filled in."""


class RateLimitedError(AppError):
    """Raised when a client posts again before its cooldown elapsed."""


class StorageAppError(AppError):
    """Raised when the storage collaborator reports a failure."""

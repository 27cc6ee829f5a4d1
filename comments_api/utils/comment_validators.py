"""Validation rules for comment submissions.

Checks run in a fixed order: the honeypot first, so a submission with the
trap field filled is spam even when every other field is valid, then the
required fields.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from comments_api.core.errors import SpamRejectedError, ValidationAppError
from comments_api.utils.text_sanitizer import as_text

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("post_slug", "content")


def _is_blank(value: Any) -> bool:
    text = as_text(value)
    return text is None or not text.strip()


def is_honeypot_filled(payload: Mapping[str, Any], field: str = "website") -> bool:
    """Return True when the hidden honeypot field carries any truthy value."""
    return bool(payload.get(field))


def validate_comment_payload(payload: Mapping[str, Any], *, honeypot_field: str = "website") -> None:
    """Reject spam and incomplete submissions.

    Args:
        payload: Submitted fields (post_slug, content, author, honeypot).
        honeypot_field: Name of the hidden spam-trap field.

    Raises:
        SpamRejectedError: If the honeypot field was filled in.
        ValidationAppError: If post_slug or content is missing or blank.
    """
    if is_honeypot_filled(payload, honeypot_field):
        logger.warning("comments.spam_rejected", extra={"honeypot_field": honeypot_field})
        raise SpamRejectedError(code="spam_detected", message="Spam detected")

    missing = [name for name in REQUIRED_FIELDS if _is_blank(payload.get(name))]
    if missing:
        raise ValidationAppError(
            code="missing_fields",
            message="Missing fields",
            details={"context": {"missing": missing}},
        )

"""Normalization of user-supplied comment text."""

from typing import Any

DEFAULT_AUTHOR = "Anonymous"


def as_text(value: Any) -> str | None:
    """Read a JSON value as text.

    Strings pass through, numbers and booleans are stringified, anything
    else (null, arrays, objects) has no text.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


def truncate(text: str, max_chars: int) -> str:
    """Keep at most ``max_chars`` characters (the prefix)."""
    return text[:max_chars]


def sanitize_content(text: Any, max_chars: int = 500) -> str:
    """Trim surrounding whitespace, then cap the length.

    Args:
        text: Raw comment body.
        max_chars: Maximum allowed character count.

    Returns:
        str: Trimmed text, at most ``max_chars`` characters long.
    """
    return truncate((as_text(text) or "").strip(), max_chars)


def sanitize_author(
    text: Any,
    max_chars: int = 50,
    default: str = DEFAULT_AUTHOR,
) -> str:
    """Trim and cap the author name, falling back to ``default`` when empty.

    Args:
        text: Raw author name, possibly absent.
        max_chars: Maximum allowed character count.
        default: Placeholder used when no name remains after trimming.

    Returns:
        str: Author name to persist.
    """
    author = truncate((as_text(text) or "").strip(), max_chars)
    return author or default

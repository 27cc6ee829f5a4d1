"""Structured logging for the comments service.

Every record leaving the root handler carries the current request id and has
credentials, client addresses and comment bodies masked. Records are written
to stdout as one JSON object per line (or plain text with LOG_FORMAT=plain).
"""

from __future__ import annotations

import hashlib
import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from comments_api.core.config import LogSettings, settings

REDACTED = "[REDACTED]"

SENSITIVE_KEYS_DEFAULT: frozenset[str] = frozenset(
    {
        # storage credentials
        "apikey",
        "anon_key",
        "supabase_anon_key",
        "authorization",
        "cookie",
        "set-cookie",
        # client addresses
        "x-forwarded-for",
        "x-real-ip",
        "client_ip",
        "client_key",
        # user-submitted text
        "content",
        "author",
        "website",
    }
)

# Attributes every LogRecord has; anything else on a record came from ``extra``
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def get_request_id() -> str | None:
    return _request_id.get()


def clear_request_id() -> None:
    _request_id.set(None)


def hash_identifier(value: str) -> str:
    """Short SHA-256 digest so a client can be correlated across lines without logging its address."""
    return hashlib.sha256(value.encode()).hexdigest()[:16]


def redact(value: Any, keys: frozenset[str]) -> Any:
    """Mask values stored under sensitive keys, descending into dicts and lists."""
    if isinstance(value, Mapping):
        return {k: REDACTED if str(k).lower() in keys else redact(v, keys) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(redact(v, keys) for v in value)
    return value


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class RequestIdFilter(logging.Filter):
    """Stamp records with the request id of the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        return True


class SensitiveDataFilter(logging.Filter):
    """Mask sensitive ``extra`` fields in place, whatever formatter runs next."""

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        super().__init__()
        self.sensitive_keys = frozenset(k.lower() for k in (sensitive_keys or SENSITIVE_KEYS_DEFAULT))

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in redact(_extras(record), self.sensitive_keys).items():
            setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, then the extras."""

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        super().__init__()
        self.sensitive_keys = frozenset(k.lower() for k in (sensitive_keys or SENSITIVE_KEYS_DEFAULT))

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(redact(_extras(record), self.sensitive_keys))
        request_id = line.pop("request_id", None) or get_request_id()
        if request_id:
            line["request_id"] = request_id
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str, ensure_ascii=False)


def configure_logging(log_settings: LogSettings | None = None) -> logging.Handler:
    """Install a single stdout handler on the root logger.

    Args:
        log_settings: Defaults to ``settings.log``.

    Returns:
        The installed handler.
    """
    cfg = log_settings or settings.log
    level = logging.DEBUG if settings.app.debug else getattr(logging, cfg.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    if cfg.format.lower() == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request URL at INFO, and those URLs carry post slugs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    for name in ("uvicorn", "uvicorn.access"):
        logging.getLogger(name).propagate = False

    return handler

"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Session and task context
passed through ``extra`` (``session_id``, ``task``, ``task_id``, ``signal`` and
the feedback element ids) is promoted to top-level keys so log lines can be
filtered per session or per task. Anything else passed through ``extra`` is
kept under the ``extra`` key.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries, plus the ones the Formatter adds.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}

CONTEXT_KEYS: tuple[str, ...] = (
    "session_id",
    "task",
    "task_id",
    "signal",
    "notification_id",
    "progress_id",
)


def _context_value(key: str, value: object) -> object:
    # Signals may be passed as instances; log the variant name.
    if key == "signal" and not isinstance(value, str):
        return type(value).__name__
    return value


class JsonFormatter(logging.Formatter):
    """One JSON object per record with session and task context at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        for key in CONTEXT_KEYS:
            if key in fields:
                payload[key] = _context_value(key, fields.pop(key))
        if fields:
            payload["extra"] = fields

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send every record to stdout as JSON at ``level``."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    # Per-request access lines drown out session logs at DEBUG.
    logging.getLogger("uvicorn.access").setLevel(max(root.level, logging.INFO))

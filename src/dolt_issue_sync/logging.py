"""Structured logging configuration.

Every record is written as one JSON line on stderr, so command output on
stdout (for example ``--json``) stays machine-readable. Fields passed with
``extra=`` (``step``, ``migration``, ``remote``, ...) are nested under
``"extra"``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

# Attributes every LogRecord carries, plus the two a Formatter adds.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Database driver loggers that are noisy below INFO.
DRIVER_LOGGERS: tuple[str, ...] = ("mysql.connector",)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)

        # Paths and enums in extras are rendered with str().
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: TextIO | None = None) -> None:
    """Send all records through `JsonFormatter` to `stream` (stderr by default).

    Re-configuring replaces the previous handlers rather than adding to them.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))

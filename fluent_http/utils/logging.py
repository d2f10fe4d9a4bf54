"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from typing import IO, Any

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def _formatter(structured: bool) -> logging.Formatter:
    return JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)


def configure_logging(
    *,
    level: int | str = logging.INFO,
    structured: bool | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure root logging, optionally as JSON lines.

    With handlers already installed only the level changes, plus the formatter
    when ``structured`` is given explicitly.
    """

    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)

    if root.handlers:
        if structured is not None:
            for handler in root.handlers:
                handler.setFormatter(_formatter(structured))
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_formatter(bool(structured)))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]

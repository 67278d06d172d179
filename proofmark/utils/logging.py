"""Logging setup shared by the CLI and the publish pipeline."""

from __future__ import annotations

import json
import logging
import sys
from typing import IO, Any

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` fields merged in."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                data[key] = value

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


def _formatter(structured: bool) -> logging.Formatter:
    return JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)


def configure_logging(
    *,
    level: int = logging.INFO,
    structured: bool | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the root logger.

    ``structured=None`` keeps whatever formatter existing handlers already use,
    so repeated calls from nested entry points are harmless. Logs go to stderr
    by default; stdout is reserved for command output.
    """

    root = logging.getLogger()
    root.setLevel(level)

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

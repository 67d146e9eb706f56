"""Structured logging configuration.

Uses standard library logging with either JSON lines or a plain text format.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

# Extra fields promoted to top-level JSON keys; any others nest under "extra".
RACE_FIELDS: tuple[str, ...] = ("tick", "error_type", "issue_number", "magic_number", "repo")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s%(extra_suffix)s"


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_ATTRS
        and key != "extra_suffix"
        and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = _extra_fields(record)
        for key in RACE_FIELDS:
            if key in extra:
                payload[key] = extra.pop(key)
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-oriented single-line format with `extra` fields appended as key=value."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        extra = _extra_fields(record)
        record.extra_suffix = (
            " " + " ".join(f"{key}={value}" for key, value in extra.items()) if extra else ""
        )
        return super().format(record)


def configure_logging(level: str, fmt: str = "json") -> None:
    """Configure root logging on stdout, replacing any existing handlers."""

    root = logging.getLogger()

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(TextFormatter() if fmt == "text" else JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # Keep third-party loggers reasonably quiet unless explicitly configured.
    for name in ("urllib3", "github"):
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))

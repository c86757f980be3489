"""Logging setup with project and flat context.

Log calls in the package pass their context through ``extra``::

    logger.info("Deleted flat %s", flat.label, extra=flat_context(flat))

Both formatters pick up the ``CONTEXT_FIELDS`` found on a record: the text
formatter appends them as ``key=value`` pairs, the JSON formatter adds them
as top-level keys.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

CONTEXT_FIELDS = ("project_id", "flat", "target", "flat_count")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s%(context)s"


def flat_context(flat: Any) -> dict[str, str]:
    """``extra`` for a log call about one flat."""
    return {"project_id": flat.project_id, "flat": flat.label}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Context fields set on a record, in ``CONTEXT_FIELDS`` order."""
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) not in (None, "")
    }


class ContextFormatter(logging.Formatter):
    """Text formatter appending the record's project/flat context."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        context = record_context(record)
        record.context = "".join(f" | {k}={v}" for k, v in context.items())
        return super().format(record)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, context fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(record_context(record))
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Configure the root logger for the inventory tools.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` for text lines or ``"json"`` for one object per line.
    stream : TextIO | None
        Destination, stdout by default.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = JsonFormatter() if format_type == "json" else ContextFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("site_inventory").setLevel(log_level)
    # Faker logs locale lookups at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)

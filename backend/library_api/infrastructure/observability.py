"""Logging Setup — formatters for access lines and book events.

Invariants:
    - JSON records: timestamp, level, logger, message, plus any request/book extras
    - Text records: one human-readable line; book/error extras appended as key=value
    - setup_logging() owns exactly one root handler, however often it runs

Design Decisions:
    - Request details (method, path, status) are already in the access line
      message, so the text format only appends the book/error context
"""

import json
import logging
from datetime import datetime, timezone

REQUEST_FIELDS = ("method", "path", "status_code", "duration_ms", "content_length")
BOOK_FIELDS = ("book_id", "operation", "error_code")

_HANDLER_NAME = "library_api"


def _extras(record: logging.LogRecord, fields: tuple[str, ...]) -> dict:
    return {
        key: record.__dict__[key]
        for key in fields
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record, REQUEST_FIELDS + BOOK_FIELDS),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Console format: `<time> <LEVEL> <logger>: <message> book_id=... operation=...`."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _extras(record, BOOK_FIELDS)
        if not context:
            return line
        head, sep, tail = line.partition("\n")
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{head} {pairs}{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Handler:
    """Install (or replace) the application's root handler."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler

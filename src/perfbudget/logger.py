"""
Logging setup for perfbudget.

Modules log through ``logging.getLogger(__name__)``; this module attaches a
single stderr handler to the ``perfbudget`` logger.  The ``json`` format
writes one JSON object per line for log shippers, the ``text`` format a
plain console line.

Usage:
    from perfbudget.logger import configure_logging

    configure_logging(level="debug", fmt="json")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

ROOT_LOGGER = "perfbudget"

# LogRecord attributes copied into JSON entries when present
_EXTRA_FIELDS = ("operation", "passes")


class JsonFormatter(logging.Formatter):
    """Formats records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "info", fmt: str = "text") -> logging.Logger:
    """Attach one stderr handler to the ``perfbudget`` logger.

    Calling again replaces the handler, so repeated CLI invocations in one
    process do not duplicate output.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_perfbudget", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._perfbudget = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root

"""JSON log output for the provider registry.

Every record becomes one JSON object per line. Values passed through
``extra=`` (providerId, userId, email, ...) appear as top-level keys.
"""

import os
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any

# Attribute names every LogRecord carries; anything else came from extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "taskName"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not callable(value)
    }


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(_extra_fields(record))
        # UUIDs and datetimes in extra= are written as strings
        return json.dumps(entry, default=str)


def setup_structured_logging(level: str | None = None):
    """Send all application logs to stderr as JSON.

    The level is taken from ``level``, else LOG_LEVEL, else INFO.
    uvicorn's access log shares the handler but only reports warnings.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    root.handlers = [handler]

    access = logging.getLogger("uvicorn.access")
    access.handlers = [handler]
    access.setLevel(logging.WARNING)

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging - one JSON line per record.

Case and session context is passed with ``extra=`` rather than formatted
into the message, so a CNR or an email can be searched as its own key:

    logger.info("CNR lookup", extra={"cnr": cnr})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from courtdesk.core.config import settings

# Keys lifted from ``extra=`` into the JSON document.
CONTEXT_FIELDS: tuple[str, ...] = (
    "request_id",
    "cnr",
    "case_number",
    "court_type",
    "search_type",
    "operation",
    "outcome",
    "source",
    "status_code",
    "path",
    "url",
    "email",
    "member_id",
    "duplicates",
)


class JSONFormatter(logging.Formatter):
    """Emit every log record as a single JSON line for machine parsing."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value
        if record.exc_info and record.exc_info[1]:
            log_data["error"] = str(record.exc_info[1])
            log_data["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(log_data, default=str)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger writing JSON lines to stdout at ``LOG_LEVEL``."""
    logger = logging.getLogger(name or settings.SERVICE_NAME)
    if not logger.handlers:
        logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger

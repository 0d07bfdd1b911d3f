# backend/inspector360/logging_config.py
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from .middleware.request_id import get_request_id

# fields the services pass through `extra=`
EXTRA_KEYS = ("inspection_id", "station", "user_email", "form_code", "status")


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {k: getattr(record, k) for k in EXTRA_KEYS if hasattr(record, k)}


class JsonFormatter(logging.Formatter):
    """Renders a record as a single JSON line, tagged with the current request id."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        request_id = get_request_id()
        if request_id:
            payload["request_id"] = request_id
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _level(var: str, default: str) -> str:
    return (os.getenv(var) or default).upper()


def configure_logging() -> None:
    level = _level("LOG_LEVEL", "INFO")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    # idempotent: the app factory runs once per worker and once per test client
    root.handlers[:] = [handler]
    root.setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(_level("SQL_LOG_LEVEL", "WARNING"))

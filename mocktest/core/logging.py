"""Structured JSON logging.

Every line carries the request it was written for, and the ids that tie it
to a test, a candidate or an attempt are always present (null when unknown),
so one attempt can be followed from issuance to analytics with a single query.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger import jsonlogger

from mocktest.core.config import settings

# Set by the request ID middleware for the duration of a request
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

CORRELATION_FIELDS = ("test_id", "user_id", "attempt_id")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with service, request and attempt correlation fields."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = settings.PROJECT_NAME
        log_record["env"] = settings.ENV
        log_record["event"] = log_record.get("event") or record.getMessage()
        log_record["request_id"] = log_record.get("request_id") or request_id_var.get()

        for name in CORRELATION_FIELDS:
            value = log_record.get(name)
            log_record[name] = None if value is None else str(value)

        if record.levelno >= logging.WARNING:
            log_record["location"] = f"{record.module}.{record.funcName}:{record.lineno}"

        log_record.pop("asctime", None)


def setup_logging() -> None:
    """Send JSON lines to stdout at LOG_LEVEL."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        CustomJsonFormatter("%(timestamp)s %(level)s %(logger)s", datefmt="%Y-%m-%dT%H:%M:%S")
    )
    root_logger.addHandler(console_handler)

    # Request lines come from RequestIDMiddleware; SQL echo stays off
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

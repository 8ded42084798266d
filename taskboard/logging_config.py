"""
Central logging configuration for the Taskboard API.

Provides:
- Human-readable output in development, one JSON object per line in production
- Request correlation via contextvars (request_id set by middleware)
- Redaction of credential fields passed through ``extra=``

Usage:
    from taskboard.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("User signed in", extra={"user_id": user_id})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

# Set by RequestIdMiddleware for the duration of a request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Never emitted, whatever a caller passes in extra=
SENSITIVE_FIELDS = frozenset({"password", "password_hash", "token", "secret_key"})

REDACTED = "[redacted]"

_STANDARD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName", "request_id",
})


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, if set."""
    return request_id_var.get()


class RequestIdFilter(logging.Filter):
    """Stamp every record with the request ID from context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"  # type: ignore[attr-defined]
        return True


class CredentialRedactionFilter(logging.Filter):
    """Replace credential-bearing extra fields with a placeholder."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in SENSITIVE_FIELDS:
            if key in record.__dict__:
                setattr(record, key, REDACTED)
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for production log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        req_id = getattr(record, "request_id", None)
        if req_id and req_id != "-":
            log_obj["request_id"] = req_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or value is None:
                continue
            try:
                json.dumps(value)
                log_obj[key] = value
            except (TypeError, ValueError):
                log_obj[key] = str(value)

        return json.dumps(log_obj)


def _create_dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        environment: 'development' or 'production'
        debug: If True, use DEBUG level regardless of log_level
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicates on reload
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(CredentialRedactionFilter())

    if environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(_create_dev_formatter())

    root.addHandler(handler)

    # Reduce noise from third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Records carry request_id when one is set (see RequestIdMiddleware).
    Pass structured fields with extra={}, never credentials.
    """
    return logging.getLogger(name)

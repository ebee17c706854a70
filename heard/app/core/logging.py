"""Structured logging configuration for the Heard backend.

Uses the standard logging module configured through dictConfig, with an
optional JSON formatter for log aggregation in production.
"""

import json
import logging
import logging.config
import sys
import traceback
from datetime import datetime
from typing import Any, Dict, Optional

from heard.app.core.config import Settings, settings as default_settings


# Attributes every LogRecord has; anything else on a record came from extra=
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message",
    "asctime", "taskName",
))


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    CONTEXT_FIELDS = [
        "request_id",    # X-Request-ID of the current request
        "client_hash",   # Hashed client IP (never the raw address)
        "action_kind",   # Rate limited action (submissions, votes)
        "path",
        "method",
        "status_code",
        "duration_ms",
    ]

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()

        log_data: Dict[str, Any] = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
            "source": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        for field in self.CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None and value != "-":
                log_data[field] = value

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in self.CONTEXT_FIELDS:
                continue
            log_data.setdefault("extra", {})[key] = value

        if record.exc_info and record.exc_info != (None, None, None):
            log_data["exception"] = traceback.format_exception(*record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class ContextFilter(logging.Filter):
    """Fill in default values for contextual fields.

    The structured text format references request_id and client_hash
    directly, so records logged outside a request still need them.
    """

    CONTEXT_DEFAULTS = {
        "request_id": "-",
        "client_hash": "-",
    }

    def filter(self, record: logging.LogRecord) -> bool:
        for field, default in self.CONTEXT_DEFAULTS.items():
            if not hasattr(record, field):
                setattr(record, field, default)
        return True


def get_logging_config(config: Optional[Settings] = None) -> Dict[str, Any]:
    """Build a dictConfig-compatible logging configuration."""
    config = config or default_settings
    log_format = config.log_format.lower()
    log_level = config.log_level.upper()

    formatters: Dict[str, Any] = {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        },
        "structured": {
            "format": (
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
                " - request_id=%(request_id)s - client_hash=%(client_hash)s"
            )
        },
    }

    if log_format == "json":
        formatters["json"] = {"()": "heard.app.core.logging.JSONFormatter"}
        default_formatter = "json"
    else:
        default_formatter = "structured" if log_format == "structured" else "standard"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": {
            "context": {"()": "heard.app.core.logging.ContextFilter"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": default_formatter,
                "stream": sys.stdout,
                "filters": ["context"],
            },
        },
        "loggers": {
            "heard": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["console"],
        },
    }


def setup_logging(config: Optional[Settings] = None) -> None:
    """Configure logging for the application."""
    logging.config.dictConfig(get_logging_config(config))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str = "heard") -> logging.Logger:
    return logging.getLogger(name)


def get_log_context(
    request_id: Optional[str] = None,
    client_hash: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Create a context dict for the ``extra=`` argument of logging calls.

    Example:
        >>> logger.warning(
        ...     "Rate limit exceeded",
        ...     extra=get_log_context(client_hash="3f2a...", action_kind="votes"),
        ... )
    """
    context = {"request_id": request_id, "client_hash": client_hash}
    context.update(extra)
    return {k: v for k, v in context.items() if v is not None}

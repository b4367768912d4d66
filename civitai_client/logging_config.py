"""
Logging for the Civitai client.

Every module logs through get_logger(__name__), so all records live under
the "civitai_client" logger. The package installs only a NullHandler on
that logger; output is the application's decision.

Applications that want the client's own format call configure_logging(),
which attaches a single handler to the "civitai_client" logger (never the
root logger) and can be called again to change level or format.

Each transport call runs with a request id in a context variable, so every
record emitted while a request is in flight can be correlated:

    logger.warning("Retrying", extra={"attempt": 2, "url": url})
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

LIBRARY_LOGGER = "civitai_client"

# Set by HttpxTransport.send for the duration of one call
request_id_var: ContextVar[Optional[str]] = ContextVar("civitai_request_id", default=None)

# Attributes every LogRecord has; anything else on a record came from extra=
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "request_id"}

logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


def new_request_id() -> str:
    """Short correlation id for one outgoing request."""
    return uuid.uuid4().hex[:12]


class RequestIdFilter(logging.Filter):
    """Stamp records with the id of the request in flight ("-" outside a call)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"  # type: ignore[attr-defined]
        return True


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_ATTRS or key.startswith("_") or value is None:
            continue
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            value = str(value)
        fields[key] = value
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per record: level, logger, message, request id and extra= fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", "-")
        if request_id != "-":
            entry["request_id"] = request_id
        entry.update(_extra_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class ConsoleFormatter(logging.Formatter):
    """Readable single-line format; extra= fields are appended as key=value."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = _extra_fields(record)
        if extra:
            line += " " + " ".join(f"{k}={v}" for k, v in extra.items())
        return line


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """
    Send the client's log records to `stream` (stderr by default).

    Only the "civitai_client" logger is touched: a handler installed by an
    earlier call is replaced, handlers added by the application are left
    alone, and propagation to the root logger is turned off so records are
    not printed twice.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        environment: 'production' selects JSON output, anything else the console format
        debug: If True, use DEBUG level regardless of log_level

    Returns the installed handler.
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(LIBRARY_LOGGER)

    for existing in logger.handlers[:]:
        if getattr(existing, "_civitai_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler._civitai_handler = True  # type: ignore[attr-defined]
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter() if environment == "production" else ConsoleFormatter())

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

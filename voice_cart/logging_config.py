"""
Logging configuration for the Voice Cart service.

Every record is stamped with the id of the HTTP request being served (the
X-Request-ID set by RequestIDMiddleware in main.py), so the interpreter,
store and transcription lines of one voice command can be grepped together.
Outside a request the id is "-".

Usage:
    from voice_cart.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO).
        Transcripts are only logged at DEBUG.
"""
import logging
import os
import sys
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Polling AssemblyAI and per-request SQL are noise outside DEBUG
_CHATTY_LOGGERS = ("urllib3", "httpx", "httpcore", "sqlalchemy.engine")

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Copy the current request id onto each record as `request_id`."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def _resolve_level(level: Optional[str]) -> str:
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if name not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return "INFO"
    return name


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the service.

    Args:
        level: Log level name. Falls back to LOG_LEVEL, then INFO; unknown
               names also mean INFO.
    """
    level = _resolve_level(level)
    numeric_level = getattr(logging, level)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    # No-op when the root logger already has handlers (e.g. under uvicorn's
    # own config or pytest)
    logging.basicConfig(level=numeric_level, handlers=[handler])

    logging.getLogger("voice_cart").setLevel(numeric_level)

    chatty_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)

    logging.getLogger(__name__).debug("Logging configured at %s level", level)

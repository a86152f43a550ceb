"""Logging setup shared by the CLI and the HTTP service."""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class RequestIdFilter(logging.Filter):
    """Stamp each record with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def get_log_level(name: str) -> int:
    """Map a configured level name to a :mod:`logging` level, defaulting to INFO."""

    return _LEVELS.get(name.strip().upper(), logging.INFO)


def configure_logging(level: str = "info") -> None:
    """Configure root logging for the service."""

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=get_log_level(level), handlers=[handler], force=True)


__all__ = [
    "LOG_FORMAT",
    "RequestIdFilter",
    "configure_logging",
    "get_log_level",
    "request_id_var",
]

"""JSON-line logging for the payment token service.

Every record becomes one JSON object on stdout carrying ts/level/logger/
service/message plus whatever the caller passed via `extra=`.
"""
from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import UTC, datetime
from typing import Any

SERVICE_NAME = "payment-token-service"
_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Attribute names of a bare LogRecord; anything beyond them came from `extra=`.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line; extras never shadow core keys."""

    def __init__(self, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        core: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
        }
        body = record.msg if isinstance(record.msg, dict) else {"message": record.getMessage()}
        out = {**_extras(record), **body, **core}
        if record.exc_info:
            out["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(out, ensure_ascii=False, default=str)


def setup_logging(level: str | int = _DEFAULT_LEVEL) -> None:
    """Install the JSON handler on the root logger once.

    Later calls are no-ops so reloads and test runners keep their handlers.
    uvicorn's loggers are stripped of their own handlers and propagate to root.
    """
    if logging.getLogger().handlers:
        return
    if isinstance(level, int):
        level = logging.getLevelName(level)
    level = str(level).upper()
    if level not in logging.getLevelNamesMapping():
        level = "INFO"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JsonFormatter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "level": level,
                }
            },
            "root": {"level": level, "handlers": ["stdout"]},
            "loggers": {
                name: {"level": level, "handlers": [], "propagate": True}
                for name in _SERVER_LOGGERS
            },
        }
    )


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or __name__)

"""Logging setup shared by every module of the service."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

_NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "chromadb", "openai")


class JSONFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def __init__(self, service_name: str = "newsbot"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            payload["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Structured context passed through `extra={"context": {...}}`
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload.update(context)

        return json.dumps(payload, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...).
        log_format: ``json`` for structured output, anything else for plain text.
    """
    handler = logging.StreamHandler(sys.stdout)
    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically ``get_logger(__name__)``)."""
    return logging.getLogger(name)

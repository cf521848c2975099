"""
Logging configuration for the Flypside API

Console output in development, JSON lines in production.

Loggers:
- api: request handling and exception handlers
- services: event, offer and participant state changes
- db: store operations and rollbacks
- mail: outbound email
"""

import json
import logging
import os
import sys
from datetime import datetime
from typing import Dict, Optional

LOGGER_NAMES = ["api", "services", "db", "mail"]


class JSONFormatter(logging.Formatter):
    """Formatter that outputs each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for development

    Format: [TIMESTAMP] LEVEL - LOGGER - MESSAGE
    """

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def _get_log_level() -> int:
    level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def _is_production() -> bool:
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def configure_logging() -> Dict[str, logging.Logger]:
    """
    Configure the named flypside loggers

    Returns:
        Dictionary mapping short names (api, services, db, mail) to loggers
    """
    log_level = _get_log_level()
    formatter = JSONFormatter() if _is_production() else ConsoleFormatter()

    loggers = {}
    for logger_name in LOGGER_NAMES:
        logger = logging.getLogger(f"flypside.{logger_name}")
        logger.setLevel(log_level)
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False

        loggers[logger_name] = logger

    return loggers


_loggers: Optional[Dict[str, logging.Logger]] = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger by short name

    Raises:
        ValueError: If the logger name is not recognized
    """
    global _loggers

    if _loggers is None:
        _loggers = configure_logging()

    if name not in _loggers:
        raise ValueError(
            f"Unknown logger name: {name}. "
            f"Valid names: {', '.join(_loggers.keys())}"
        )

    return _loggers[name]


def init_logging() -> Dict[str, logging.Logger]:
    """Reconfigure logging (called on application startup)."""
    global _loggers
    _loggers = configure_logging()
    return _loggers

"""
Logging setup for the document store.

Call ``configure_logging()`` once at process start; importing
``app.services.document.document_service`` does so with the values of
``LOG_LEVEL`` and ``LOG_FORMAT``.
"""

import logging
import logging.config
from typing import Optional

import structlog

from app.core.config import settings

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("google", "urllib3")


def _shared_processors(log_format: str) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _formatter_config(log_format: str) -> dict:
    if log_format == "json":
        return {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "fmt": "%(asctime)s %(name)s %(levelname)s %(message)s",
        }
    return {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}


def configure_logging(
    level: Optional[str] = None, log_format: Optional[str] = None
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (defaults to LOG_LEVEL)
        log_format: "json" or "text" (defaults to LOG_FORMAT)
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_format = (log_format or settings.LOG_FORMAT).lower()

    structlog.configure(
        processors=_shared_processors(log_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = {
        "formatter": "default",
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stdout",
    }
    loggers = {"": {"level": level, "handlers": ["default"], "propagate": False}}
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING", "handlers": ["default"], "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": _formatter_config(log_format)},
            "handlers": {"default": handler},
            "loggers": loggers,
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def get_store_logger(backend: str) -> structlog.BoundLogger:
    """Get object store backend logger."""
    return get_logger(f"store.{backend}")


def get_service_logger(service_name: str) -> structlog.BoundLogger:
    """Get service-specific logger."""
    return get_logger(f"service.{service_name}")

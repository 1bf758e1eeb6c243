"""Process-wide logging setup shared by the API and Celery workers."""

from __future__ import annotations

import logging
import logging.config

from app.config import get_settings

ROOT_LOGGER_NAME = "app"

_configured = False


class LoggingConfig:
    """Configure logging once per process from settings.log_level."""

    def __init__(self, level: str | None = None) -> None:
        global _configured
        if _configured:
            return
        log_level = (level or get_settings().log_level or "INFO").upper()
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "default": {
                        "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    },
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "formatter": "default",
                    },
                },
                "loggers": {
                    ROOT_LOGGER_NAME: {
                        "handlers": ["console"],
                        "level": log_level,
                        "propagate": True,
                    },
                },
            }
        )
        _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the app namespace, e.g. get_logger("reaper") -> app.reaper."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

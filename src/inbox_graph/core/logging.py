"""Logging configuration helpers."""

from __future__ import annotations

import logging
import logging.config
from typing import Any

from .config import LoggingSettings

_NOISY_LOGGERS = ("httpx", "httpcore")


def _formatter(structured: bool) -> dict[str, Any]:
    """Return a dictConfig formatter fragment."""
    if structured:
        return {
            "format": (
                '{{"time": "{asctime}", "level": "{levelname}", '
                '"logger": "{name}", "message": "{message}"}}'
            ),
            "style": "{",
        }
    return {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"}


def configure_logging(settings: LoggingSettings) -> None:
    """Configure application logging according to provided settings."""
    level = settings.level.upper()
    dict_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": _formatter(settings.structured)},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in _NOISY_LOGGERS},
        "root": {"handlers": ["console"], "level": level},
    }

    logging.config.dictConfig(dict_config)


__all__ = ["configure_logging"]

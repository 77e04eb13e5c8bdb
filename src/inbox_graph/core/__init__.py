"""Core utilities for configuration, logging, models and interfaces."""

from .config import AppSettings, load_app_settings
from .logging import configure_logging

__all__ = [
    "AppSettings",
    "configure_logging",
    "load_app_settings",
]

"""Web application entry point for Inbox Graph."""

from .app import create_app

__all__ = ["create_app"]

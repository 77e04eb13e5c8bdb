"""Storage layer implementations."""

from .history import SqliteHistoryRepository

__all__ = ["SqliteHistoryRepository"]

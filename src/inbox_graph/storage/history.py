"""SQLite-backed history of completed analyses."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from types import TracebackType
from typing import Any

from ..core.config import StorageSettings
from ..core.datetime_utils import serialize_datetime
from ..core.interfaces import HistoryError, HistoryRepository
from ..core.models import AnalysisRecord

LOGGER = logging.getLogger(__name__)


class SqliteHistoryRepository(HistoryRepository):
    """Keep the most recent analysis records in SQLite."""

    def __init__(self, settings: StorageSettings) -> None:
        """Open the database and create the history table if needed."""
        self._settings = settings
        db_path = Path(settings.db_path)
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(db_path, check_same_thread=False)
        except (OSError, sqlite3.Error) as exc:
            raise HistoryError(f"Cannot open history database {db_path}") from exc
        self._connection.row_factory = sqlite3.Row
        # One connection is shared by request threads.
        self._lock = threading.Lock()
        try:
            self._apply_migrations()
        except sqlite3.Error as exc:
            self._connection.close()
            raise HistoryError(
                f"Cannot initialise history database {db_path}"
            ) from exc

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> SqliteHistoryRepository:
        """Enter context manager scope."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Ensure the connection is closed when exiting context manager."""
        self.close()

    # HistoryRepository API ---------------------------------------------------
    def append(self, record: AnalysisRecord) -> None:
        """Insert ``record`` and drop entries beyond the configured limit."""
        payload = record.to_dict()
        LOGGER.debug("Storing analysis for %r", record.email.subject)
        try:
            with self._lock, self._connection:
                self._connection.execute(
                    """
                    INSERT INTO history (subject, urgency, created_at, payload)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        record.email.subject,
                        record.analysis.urgency,
                        serialize_datetime(record.timestamp),
                        json.dumps(payload),
                    ),
                )
                self._connection.execute(
                    """
                    DELETE FROM history
                    WHERE id NOT IN (
                        SELECT id FROM history ORDER BY id DESC LIMIT ?
                    )
                    """,
                    (self._settings.history_limit,),
                )
        except sqlite3.Error as exc:
            raise HistoryError("Failed to store analysis history") from exc

    def list_recent(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return stored records as dictionaries, newest first."""
        query = "SELECT payload FROM history ORDER BY id DESC"
        params: tuple[int, ...] = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        try:
            with self._lock:
                rows = self._connection.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise HistoryError("Failed to read analysis history") from exc
        return [json.loads(row["payload"]) for row in rows]

    def clear(self) -> None:
        """Delete every stored record."""
        try:
            with self._lock, self._connection:
                self._connection.execute("DELETE FROM history")
        except sqlite3.Error as exc:
            raise HistoryError("Failed to clear analysis history") from exc
        LOGGER.info("Cleared analysis history")

    def close(self) -> None:
        """Close the SQLite connection."""
        with self._lock:
            self._connection.close()

    # Internal helpers --------------------------------------------------------
    def _apply_migrations(self) -> None:
        with self._connection:
            self._connection.execute(
                """
                CREATE TABLE IF NOT EXISTS history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    subject TEXT,
                    urgency TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    payload TEXT NOT NULL
                )
                """
            )


__all__ = ["SqliteHistoryRepository"]

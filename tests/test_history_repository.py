"""Tests for the SQLite-backed analysis history."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from inbox_graph.core.config import StorageSettings
from inbox_graph.core.interfaces import HistoryError
from inbox_graph.core.models import (
    AnalysisRecord,
    AnalysisResult,
    EmailSummary,
    GraphSummary,
    Sender,
)
from inbox_graph.storage import SqliteHistoryRepository


def _record(index: int) -> AnalysisRecord:
    timestamp = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc) + timedelta(
        minutes=index
    )
    return AnalysisRecord(
        email=EmailSummary(
            subject=f"Subject {index}",
            sender=Sender("Sender", "sender@example.com"),
            date="",
            platform="Gmail",
        ),
        graph_summary=GraphSummary(
            categories=(),
            keywords=(),
            urgency_score=index,
            action_items_count=0,
            sender_importance="standard",
            has_deadline=False,
            attachments=0,
        ),
        analysis=AnalysisResult(
            summary="Summary",
            urgency="NON-URGENT",
            reasoning="No urgent indicators detected; standard email communication.",
            confidence=1.0,
            score=0.0,
            key_actions=("Review email content",),
        ),
        timestamp=timestamp,
    )


def test_append_and_list_newest_first(tmp_path: Path) -> None:
    settings = StorageSettings(db_path=tmp_path / "history.db")
    with SqliteHistoryRepository(settings) as repository:
        repository.append(_record(1))
        repository.append(_record(2))

        entries = repository.list_recent()

    assert [entry["email"]["subject"] for entry in entries] == [
        "Subject 2",
        "Subject 1",
    ]
    assert entries[0]["analysis"]["keyActions"] == ["Review email content"]
    assert entries[0]["timestamp"] == "2025-03-01T12:02:00+00:00"


def test_history_is_pruned_to_limit(tmp_path: Path) -> None:
    db_path = tmp_path / "history.db"
    settings = StorageSettings(db_path=db_path, history_limit=2)
    with SqliteHistoryRepository(settings) as repository:
        for index in range(4):
            repository.append(_record(index))

        entries = repository.list_recent()
        limited = repository.list_recent(1)

    assert [entry["knowledgeGraph"]["urgencyScore"] for entry in entries] == [3, 2]
    assert len(limited) == 1

    with sqlite3.connect(db_path) as conn:
        (count,) = conn.execute("SELECT COUNT(*) FROM history").fetchone()
    assert count == 2


def test_clear_removes_everything(tmp_path: Path) -> None:
    settings = StorageSettings(db_path=tmp_path / "nested" / "history.db")
    with SqliteHistoryRepository(settings) as repository:
        repository.append(_record(1))
        repository.clear()

        assert repository.list_recent() == []


def test_unusable_path_raises_history_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    settings = StorageSettings(db_path=blocker / "history.db")

    with pytest.raises(HistoryError):
        SqliteHistoryRepository(settings)

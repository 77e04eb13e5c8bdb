"""FastAPI application exposing email analysis over JSON."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query, status as http_status
from pydantic import BaseModel, Field

from inbox_graph.core import AppSettings, load_app_settings
from inbox_graph.core.interfaces import (
    ForbiddenError,
    HistoryError,
    ModelWarmingError,
    NotConfiguredError,
    SummarizationError,
    Summarizer,
    UnauthorizedError,
)
from inbox_graph.core.models import EmailRecord, Sender
from inbox_graph.intelligence import EmailAnalyzer, HuggingFaceSummarizer
from inbox_graph.storage import SqliteHistoryRepository

LOGGER = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20


class SenderPayload(BaseModel):
    """Sender block of an incoming email."""

    name: str = ""
    email: str = ""


class EmailPayload(BaseModel):
    """Plain-text email submitted for analysis."""

    subject: str = ""
    sender: SenderPayload = Field(default_factory=SenderPayload)
    recipient: str | None = None
    date: str = ""
    body: str = ""
    attachments: list[str] = Field(default_factory=list)
    platform: str = ""
    url: str = ""

    def to_record(self) -> EmailRecord:
        return EmailRecord(
            subject=self.subject,
            sender=Sender(name=self.sender.name, email=self.sender.email),
            recipient=self.recipient,
            date=self.date,
            body=self.body,
            attachments=tuple(self.attachments),
            platform=self.platform,
            url=self.url,
        )


_SUMMARIZATION_STATUS: tuple[tuple[type[SummarizationError], int], ...] = (
    (UnauthorizedError, http_status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, http_status.HTTP_403_FORBIDDEN),
    (ModelWarmingError, http_status.HTTP_503_SERVICE_UNAVAILABLE),
)


def create_app(
    settings: AppSettings | None = None,
    *,
    summarizer: Summarizer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = settings or load_app_settings()
    if summarizer is None and app_settings.summarizer.api_key:
        summarizer = HuggingFaceSummarizer(app_settings.summarizer)

    history = SqliteHistoryRepository(app_settings.storage)
    analyzer = EmailAnalyzer(
        summarizer,
        settings=app_settings.analysis,
        summarizer_settings=app_settings.summarizer,
        history=history,
    )
    app = FastAPI(title="Inbox Graph")

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        """Release the analyzer pool and history connection."""
        analyzer.close()
        history.close()
        LOGGER.info("History connection closed")

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "summarizerConfigured": summarizer is not None}

    @app.post("/api/analyze")
    async def analyze(payload: EmailPayload) -> dict[str, Any]:
        try:
            record = await analyzer.analyze_async(payload.to_record())
        except NotConfiguredError as exc:
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except SummarizationError as exc:
            LOGGER.warning("Analysis failed: %s", exc)
            raise HTTPException(
                status_code=_status_for(exc),
                detail={"kind": exc.kind, "message": str(exc)},
            ) from exc
        return record.to_dict()

    @app.post("/api/graph")
    async def graph(payload: EmailPayload) -> dict[str, Any]:
        return analyzer.build_graph(payload.to_record()).to_dict()

    @app.get("/api/history")
    async def list_history(
        limit: int = Query(default=DEFAULT_HISTORY_LIMIT, ge=1, le=500),
    ) -> dict[str, Any]:
        try:
            entries = history.list_recent(limit)
        except HistoryError as exc:
            raise HTTPException(
                status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(exc),
            ) from exc
        return {"history": entries}

    @app.delete("/api/history")
    async def clear_history() -> dict[str, Any]:
        try:
            history.clear()
        except HistoryError as exc:
            raise HTTPException(
                status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(exc),
            ) from exc
        return {"success": True}

    @app.post("/api/test-connection")
    async def test_connection() -> dict[str, Any]:
        if summarizer is None:
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="API key not configured.",
            )
        return {"valid": summarizer.test_connection()}

    return app


def _status_for(exc: SummarizationError) -> int:
    for error_type, code in _SUMMARIZATION_STATUS:
        if isinstance(exc, error_type):
            return code
    return http_status.HTTP_502_BAD_GATEWAY


__all__ = ["EmailPayload", "create_app"]

"""Tests for the end-to-end email analyzer."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from inbox_graph.core.config import AnalysisSettings, AppSettings, SummarizerSettings
from inbox_graph.core.interfaces import (
    HistoryError,
    ModelWarmingError,
    NotConfiguredError,
)
from inbox_graph.core.models import AnalysisRecord, EmailRecord
from inbox_graph.intelligence import graph as graph_module
from inbox_graph.intelligence.analyzer import EmailAnalyzer
from inbox_graph.intelligence.summarizer import HuggingFaceSummarizer


class StubSummarizer:
    """Stub summarizer returning a fixed summary or raising."""

    def __init__(
        self, summary: str = "Stub summary", *, error: Exception | None = None
    ) -> None:
        self.summary = summary
        self.error = error
        self.inputs: list[str] = []

    @property
    def provider_id(self) -> str:
        return "stub-model"

    def summarize(self, text: str) -> str:
        self.inputs.append(text)
        if self.error is not None:
            raise self.error
        return self.summary

    def test_connection(self) -> bool:
        return True


class MemoryHistory:
    """In-memory history repository."""

    def __init__(self, *, fail: bool = False) -> None:
        self.records: list[AnalysisRecord] = []
        self.fail = fail

    def append(self, record: AnalysisRecord) -> None:
        if self.fail:
            raise HistoryError("disk full")
        self.records.append(record)

    def list_recent(self, limit: int | None = None) -> list[dict[str, Any]]:
        return [record.to_dict() for record in reversed(self.records)][:limit]

    def clear(self) -> None:
        self.records.clear()

    def close(self) -> None:
        pass


def test_analyze_combines_summary_and_urgency(invoice_email: EmailRecord) -> None:
    summarizer = StubSummarizer("Pay the invoice by Friday.")
    history = MemoryHistory()
    analyzer = EmailAnalyzer(summarizer, history=history)

    record = analyzer.analyze(invoice_email)

    analysis = record.analysis
    assert analysis.summary == "Pay the invoice by Friday."
    assert analysis.urgency == "URGENT"
    assert analysis.score == pytest.approx(8.5)
    assert analysis.confidence == pytest.approx(0.85)
    assert analysis.key_actions == (
        "Please review and approve the attached invoice immediately",
        "Deadline is this Friday",
    )
    assert record.graph_summary.sender_importance == "management"
    assert record.graph_summary.has_deadline
    assert record.graph_summary.attachments == 1
    assert record.graph_summary.action_items_count == 2
    assert summarizer.inputs == [invoice_email.body]
    assert history.records == [record]


def test_analyze_truncates_summarizer_input(invoice_email: EmailRecord) -> None:
    summarizer = StubSummarizer()
    analyzer = EmailAnalyzer(
        summarizer, summarizer_settings=SummarizerSettings(max_input_chars=10)
    )

    analyzer.analyze(invoice_email)

    assert summarizer.inputs == [invoice_email.body[:10]]


def test_non_urgent_email(lunch_email: EmailRecord) -> None:
    record = EmailAnalyzer(StubSummarizer()).analyze(lunch_email)

    assert record.analysis.urgency == "NON-URGENT"
    assert record.analysis.confidence >= 0.6
    assert record.analysis.key_actions == ("Review email content",)


def test_missing_summarizer_fails_before_extraction(
    invoice_email: EmailRecord, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _unexpected(*_args: Any) -> None:
        raise AssertionError("extraction should not run")

    monkeypatch.setattr(graph_module, "extract_categories", _unexpected)
    analyzer = EmailAnalyzer.from_settings(AppSettings())

    with pytest.raises(NotConfiguredError):
        analyzer.analyze(invoice_email)


def test_from_settings_uses_inference_api_when_key_present() -> None:
    settings = AppSettings(summarizer=SummarizerSettings(api_key="hf_test"))

    analyzer = EmailAnalyzer.from_settings(settings)

    assert isinstance(analyzer._summarizer, HuggingFaceSummarizer)


def test_summarizer_failure_propagates_without_history(
    invoice_email: EmailRecord,
) -> None:
    error = ModelWarmingError("Model is loading.", status_code=503)
    history = MemoryHistory()
    analyzer = EmailAnalyzer(StubSummarizer(error=error), history=history)

    with pytest.raises(ModelWarmingError) as excinfo:
        analyzer.analyze(invoice_email)

    assert excinfo.value is error
    assert history.records == []


def test_history_failure_does_not_fail_analysis(invoice_email: EmailRecord) -> None:
    analyzer = EmailAnalyzer(StubSummarizer(), history=MemoryHistory(fail=True))

    record = analyzer.analyze(invoice_email)

    assert record.analysis.urgency == "URGENT"


def test_parallel_extraction_matches_sequential(invoice_email: EmailRecord) -> None:
    sequential = EmailAnalyzer(StubSummarizer()).analyze(invoice_email)
    with EmailAnalyzer(
        StubSummarizer(),
        settings=AnalysisSettings(parallel_extraction=True, max_workers=3),
    ) as analyzer:
        parallel = analyzer.analyze(invoice_email)

    assert parallel.analysis == sequential.analysis
    assert parallel.graph_summary == sequential.graph_summary


def test_closed_parallel_analyzer_falls_back_to_sequential(
    invoice_email: EmailRecord,
) -> None:
    analyzer = EmailAnalyzer(
        StubSummarizer(),
        settings=AnalysisSettings(parallel_extraction=True, max_workers=2),
    )
    analyzer.close()

    record = analyzer.analyze(invoice_email)

    assert record.analysis.urgency == "URGENT"
    assert analyzer.build_graph(invoice_email).nodes.urgency_indicators.level == "high"


def test_analyze_batch_preserves_order(
    invoice_email: EmailRecord, lunch_email: EmailRecord
) -> None:
    analyzer = EmailAnalyzer(StubSummarizer())

    records = asyncio.run(analyzer.analyze_batch([lunch_email, invoice_email]))

    assert [record.analysis.urgency for record in records] == [
        "NON-URGENT",
        "URGENT",
    ]
    assert records[1].email.subject == invoice_email.subject


def test_record_serialises_to_result_shape(invoice_email: EmailRecord) -> None:
    payload = EmailAnalyzer(StubSummarizer()).analyze(invoice_email).to_dict()

    assert set(payload) == {"email", "knowledgeGraph", "analysis", "timestamp"}
    assert payload["knowledgeGraph"]["urgencyScore"] == 19
    assert payload["knowledgeGraph"]["senderImportance"] == "management"
    assert len(payload["knowledgeGraph"]["keywords"]) <= 5
    assert payload["analysis"]["urgency"] == "URGENT"
    assert payload["analysis"]["keyActions"][0].startswith("Please review")
    assert payload["timestamp"].endswith("+00:00")

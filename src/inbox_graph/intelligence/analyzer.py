"""Orchestrate graph building, summarization and urgency scoring."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from types import TracebackType

from inbox_graph.core.config import AnalysisSettings, AppSettings, SummarizerSettings
from inbox_graph.core.datetime_utils import utc_now
from inbox_graph.core.interfaces import (
    HistoryError,
    HistoryRepository,
    NotConfiguredError,
    Summarizer,
)
from inbox_graph.core.models import (
    AnalysisRecord,
    AnalysisResult,
    EmailRecord,
    GraphSummary,
    KnowledgeGraph,
)

from .graph import KnowledgeGraphBuilder
from .key_actions import select_key_actions
from .patterns import DEFAULT_PATTERNS, PatternLibrary
from .summarizer import HuggingFaceSummarizer
from .urgency import score_urgency

LOGGER = logging.getLogger(__name__)


class EmailAnalyzer:
    """Produce an :class:`AnalysisRecord` for one email at a time.

    The analyzer keeps no per-email state, so a single instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        summarizer: Summarizer | None,
        *,
        settings: AnalysisSettings | None = None,
        summarizer_settings: SummarizerSettings | None = None,
        history: HistoryRepository | None = None,
        patterns: PatternLibrary = DEFAULT_PATTERNS,
    ) -> None:
        """Wire collaborators; ``summarizer`` may be ``None`` when unconfigured."""
        self._summarizer = summarizer
        self._settings = settings or AnalysisSettings()
        self._max_input_chars = (
            summarizer_settings or SummarizerSettings()
        ).max_input_chars
        self._history = history
        self._executor: ThreadPoolExecutor | None = None
        if self._settings.parallel_extraction:
            self._executor = ThreadPoolExecutor(
                max_workers=self._settings.max_workers,
                thread_name_prefix="extractor",
            )
        self._patterns = patterns
        self._builder = KnowledgeGraphBuilder(patterns, executor=self._executor)

    @classmethod
    def from_settings(
        cls, settings: AppSettings, *, history: HistoryRepository | None = None
    ) -> EmailAnalyzer:
        """Create an analyzer backed by the configured inference API."""
        summarizer = (
            HuggingFaceSummarizer(settings.summarizer)
            if settings.summarizer.api_key
            else None
        )
        return cls(
            summarizer,
            settings=settings.analysis,
            summarizer_settings=settings.summarizer,
            history=history,
        )

    def __enter__(self) -> EmailAnalyzer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def build_graph(self, email: EmailRecord) -> KnowledgeGraph:
        """Return the knowledge graph for ``email`` without summarizing."""
        return self._builder.build(email)

    def analyze(self, email: EmailRecord) -> AnalysisRecord:
        """Run the full pipeline for ``email``.

        Summarization failures propagate unchanged and nothing is stored.
        """
        if self._summarizer is None:
            raise NotConfiguredError(
                "API key not configured. Set INBOX_GRAPH_SUMMARIZER__API_KEY."
            )

        graph = self._builder.build(email)
        body = email.body or ""
        summary = self._summarizer.summarize(body[: self._max_input_chars])
        assessment = score_urgency(graph)
        key_actions = select_key_actions(graph, self._settings.key_action_limit)

        record = AnalysisRecord(
            email=graph.email,
            graph_summary=GraphSummary.from_graph(graph),
            analysis=AnalysisResult(
                summary=summary,
                urgency=assessment.urgency,
                reasoning=assessment.reasoning,
                confidence=assessment.confidence,
                score=assessment.score,
                key_actions=key_actions,
            ),
            timestamp=utc_now(),
        )
        LOGGER.info(
            "Analyzed email %r from %s: %s (score %.1f, confidence %.2f)",
            email.subject,
            email.sender.email or "unknown sender",
            assessment.urgency,
            assessment.score,
            assessment.confidence,
        )
        self._save(record)
        return record

    async def analyze_async(self, email: EmailRecord) -> AnalysisRecord:
        """Run :meth:`analyze` on the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.analyze, email)

    async def analyze_batch(
        self, emails: Sequence[EmailRecord]
    ) -> list[AnalysisRecord]:
        """Analyse independent emails concurrently, preserving input order."""
        results = await asyncio.gather(*(self.analyze_async(email) for email in emails))
        return list(results)

    def close(self) -> None:
        """Shut down the extraction pool; later analyses run sequentially."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            self._builder = KnowledgeGraphBuilder(self._patterns)

    def _save(self, record: AnalysisRecord) -> None:
        if self._history is None:
            return
        try:
            self._history.append(record)
        except HistoryError as exc:
            LOGGER.warning("Failed to store analysis in history: %s", exc)


__all__ = ["EmailAnalyzer"]

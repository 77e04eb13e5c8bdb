"""Assemble extractor outputs into a knowledge graph."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import Executor
from types import MappingProxyType
from typing import Any

from inbox_graph.core.datetime_utils import utc_now
from inbox_graph.core.models import (
    EmailRecord,
    EmailSummary,
    GraphMetadata,
    GraphNodes,
    KnowledgeGraph,
)

from .extractors import (
    analyze_attachments,
    analyze_sender_importance,
    extract_action_items,
    extract_categories,
    extract_keywords,
    extract_temporal_context,
    extract_urgency_indicators,
)
from .patterns import DEFAULT_PATTERNS, PatternLibrary

LOGGER = logging.getLogger(__name__)

# Descriptive only; nothing reads these when scoring.
GRAPH_EDGES: Mapping[str, str] = MappingProxyType(
    {
        "urgency_to_sender": "sender importance influences urgency perception",
        "urgency_to_actions": "action items increase urgency level",
        "category_to_urgency": (
            "certain categories (e.g., financial) may have higher urgency"
        ),
        "temporal_to_urgency": "deadlines and meeting times indicate urgency",
        "attachments_to_importance": (
            "presence of attachments may indicate importance"
        ),
    }
)


class KnowledgeGraphBuilder:
    """Run the signal extractors for an email and package the results."""

    def __init__(
        self,
        patterns: PatternLibrary = DEFAULT_PATTERNS,
        *,
        executor: Executor | None = None,
    ) -> None:
        """Prepare the builder; extractors run on ``executor`` when given."""
        self._patterns = patterns
        self._executor = executor

    def build(self, email: EmailRecord) -> KnowledgeGraph:
        """Return a new knowledge graph describing ``email``."""
        patterns = self._patterns
        tasks: dict[str, tuple[Callable[..., Any], Any]] = {
            "categories": (extract_categories, email),
            "keywords": (extract_keywords, email),
            "urgency_indicators": (extract_urgency_indicators, email),
            "action_items": (extract_action_items, email),
            "sender_importance": (analyze_sender_importance, email.sender),
            "temporal_context": (extract_temporal_context, email),
            "attachment_context": (analyze_attachments, email.attachments),
        }

        if self._executor is None:
            results = {
                name: func(arg, patterns) for name, (func, arg) in tasks.items()
            }
        else:
            futures = {
                name: self._executor.submit(func, arg, patterns)
                for name, (func, arg) in tasks.items()
            }
            results = {name: future.result() for name, future in futures.items()}

        nodes = GraphNodes(**results)
        body = email.body or ""
        graph = KnowledgeGraph(
            email=EmailSummary.from_record(email),
            nodes=nodes,
            edges=GRAPH_EDGES,
            metadata=GraphMetadata(
                body_length=len(body),
                has_attachments=bool(email.attachments),
                built_at=utc_now(),
            ),
        )
        LOGGER.debug(
            "Built knowledge graph: %d categories, %d keywords, urgency %s, "
            "%d action items, sender %s",
            len(nodes.categories),
            len(nodes.keywords),
            nodes.urgency_indicators.level,
            len(nodes.action_items),
            nodes.sender_importance.level,
        )
        return graph


def build_knowledge_graph(
    email: EmailRecord, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> KnowledgeGraph:
    """Build a knowledge graph sequentially with ``patterns``."""
    return KnowledgeGraphBuilder(patterns).build(email)


__all__ = ["GRAPH_EDGES", "KnowledgeGraphBuilder", "build_knowledge_graph"]

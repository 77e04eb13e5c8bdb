"""Pick the most pressing action items from a knowledge graph."""

from __future__ import annotations

from inbox_graph.core.models import KnowledgeGraph

DEFAULT_ACTION = "Review email content"


def select_key_actions(graph: KnowledgeGraph, limit: int = 3) -> tuple[str, ...]:
    """Return up to ``limit`` action texts, highest priority first."""
    ranked = sorted(
        graph.nodes.action_items, key=lambda item: item.priority, reverse=True
    )
    actions = tuple(item.text.strip() for item in ranked[:limit])
    return actions or (DEFAULT_ACTION,)


__all__ = ["DEFAULT_ACTION", "select_key_actions"]

"""Rule-based urgency scoring over a knowledge graph."""

from __future__ import annotations

from inbox_graph.core.models import KnowledgeGraph, UrgencyAssessment

URGENT = "URGENT"
NON_URGENT = "NON-URGENT"
URGENT_THRESHOLD = 4.0
MAX_CONFIDENCE = 0.95
MIN_NON_URGENT_CONFIDENCE = 0.6

_LEVEL_WEIGHTS = {"high": 3.0, "medium": 1.5}
_SENDER_WEIGHTS = {"executive": 2.0, "management": 1.0}
_DEADLINE_WEIGHT = 2.0
_MEETING_WEIGHT = 1.0
_HIGH_PRIORITY_ACTIONS_WEIGHT = 1.5
_ACTIONS_WEIGHT = 0.5
_CATEGORY_WEIGHT = 1.0
_TIMELY_CATEGORIES = frozenset({"financial", "support", "hr"})
_CATEGORY_CONFIDENCE_FLOOR = 0.5

NO_INDICATORS_REASON = "No urgent indicators detected; standard email communication."


def score_urgency(graph: KnowledgeGraph) -> UrgencyAssessment:
    """Classify ``graph`` as urgent or not with reasons and confidence."""
    nodes = graph.nodes
    score = 0.0
    reasons: list[str] = []

    indicators = nodes.urgency_indicators
    level = indicators.level
    if level in _LEVEL_WEIGHTS:
        score += _LEVEL_WEIGHTS[level]
        if level == "high":
            reasons.append(
                f"High-priority language detected: {len(indicators.high)} "
                "urgent patterns"
            )
        else:
            reasons.append("Medium urgency indicators present")

    sender_level = nodes.sender_importance.level
    if sender_level in _SENDER_WEIGHTS:
        score += _SENDER_WEIGHTS[sender_level]
        reasons.append(f"Sender is {sender_level}-level")

    temporal = nodes.temporal_context
    if temporal.has_deadline:
        score += _DEADLINE_WEIGHT
        reasons.append("Contains deadline or time-sensitive information")
    if temporal.has_meeting_time:
        score += _MEETING_WEIGHT
        reasons.append("Meeting time scheduled")

    actions = nodes.action_items
    if actions:
        mean_priority = sum(item.priority for item in actions) / len(actions)
        if mean_priority > 2:
            score += _HIGH_PRIORITY_ACTIONS_WEIGHT
            reasons.append(f"{len(actions)} high-priority action items detected")
        elif mean_priority > 1:
            score += _ACTIONS_WEIGHT
            reasons.append(f"{len(actions)} action items present")

    if any(
        category.name in _TIMELY_CATEGORIES
        and category.confidence > _CATEGORY_CONFIDENCE_FLOOR
        for category in nodes.categories
    ):
        score += _CATEGORY_WEIGHT
        reasons.append("Email category typically requires timely response")

    if not reasons:
        reasons.append(NO_INDICATORS_REASON)

    is_urgent = score >= URGENT_THRESHOLD
    bounded = min(score / 10, MAX_CONFIDENCE)
    confidence = (
        bounded if is_urgent else max(MIN_NON_URGENT_CONFIDENCE, 1 - bounded)
    )
    return UrgencyAssessment(
        urgency=URGENT if is_urgent else NON_URGENT,
        reasons=tuple(reasons),
        confidence=confidence,
        score=score,
    )


__all__ = [
    "NON_URGENT",
    "NO_INDICATORS_REASON",
    "URGENT",
    "URGENT_THRESHOLD",
    "score_urgency",
]

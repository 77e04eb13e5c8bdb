"""Signal extractors producing the nodes of a knowledge graph.

Every extractor is a pure function of an email (or part of one) and a
:class:`PatternLibrary`. None of them raise for empty or missing text; a
regex that finds nothing simply yields an empty collection.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from inbox_graph.core.models import (
    ActionItem,
    AttachmentContext,
    CategoryMatch,
    EmailRecord,
    KeywordEntry,
    Sender,
    SenderImportance,
    TemporalContext,
    UrgencyIndicatorSet,
    UrgencyMatch,
)

from .patterns import DEFAULT_PATTERNS, PatternLibrary

_SENTENCE_BREAK = re.compile(r"[.!?]+")

GENERAL_CATEGORY = CategoryMatch(name="general", confidence=0.5)


def extract_categories(
    email: EmailRecord, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> tuple[CategoryMatch, ...]:
    """Return matching categories ordered by descending confidence."""
    text = f"{email.subject or ''} {email.body or ''}".lower()
    matches: list[CategoryMatch] = []
    for rule in patterns.categories:
        if rule.pattern.search(text) is None:
            continue
        count = sum(1 for _ in rule.pattern.finditer(text))
        matches.append(
            CategoryMatch(name=rule.name, confidence=min(count * 0.3, 1.0))
        )

    if not matches:
        return (GENERAL_CATEGORY,)
    return tuple(sorted(matches, key=lambda item: item.confidence, reverse=True))


def extract_keywords(
    email: EmailRecord, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> tuple[KeywordEntry, ...]:
    """Return the most frequent non-stop-word tokens of subject and body."""
    subject = email.subject or ""
    text = f"{subject} {email.body or ''}"

    frequency: dict[str, int] = {}
    for token in patterns.keyword_token.finditer(text):
        normalized = token.group(0).lower()
        if normalized in patterns.stop_words:
            continue
        if len(normalized) < patterns.min_keyword_length:
            continue
        frequency[normalized] = frequency.get(normalized, 0) + 1

    # sorted() is stable, so equal counts keep first-seen order.
    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    lowered_subject = subject.lower()
    return tuple(
        KeywordEntry(
            word=word,
            frequency=count,
            importance=_keyword_importance(word, lowered_subject, count),
        )
        for word, count in ranked[: patterns.max_keywords]
    )


def _keyword_importance(word: str, lowered_subject: str, frequency: int) -> float:
    importance = frequency * 0.1
    if word in lowered_subject:
        importance *= 2
    return min(importance, 1.0)


def extract_urgency_indicators(
    email: EmailRecord, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> UrgencyIndicatorSet:
    """Record the first match of every urgency pattern, tier by tier.

    ``location`` compares the match offset in ``"<subject> <body>"`` with the
    subject length, so a match starting exactly at the separator counts as
    body text.
    """
    subject = email.subject or ""
    text = f"{subject} {email.body or ''}"
    tiers: dict[str, list[UrgencyMatch]] = {"high": [], "medium": []}

    for tier, found in tiers.items():
        for entry in patterns.urgency_tier(tier):
            match = entry.pattern.search(text)
            if match is None:
                continue
            found.append(
                UrgencyMatch(
                    pattern=entry.identifier,
                    match=match.group(0),
                    location="subject" if match.start() < len(subject) else "body",
                )
            )

    return UrgencyIndicatorSet(high=tuple(tiers["high"]), medium=tuple(tiers["medium"]))


def extract_action_items(
    email: EmailRecord, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> tuple[ActionItem, ...]:
    """Return up to five action items in sentence order.

    A sentence matching several action patterns yields one item per pattern.
    """
    items: list[ActionItem] = []
    for sentence in _SENTENCE_BREAK.split(email.body or ""):
        for pattern in patterns.actions:
            if pattern.search(sentence) is None:
                continue
            items.append(
                ActionItem(
                    text=sentence.strip(),
                    type=classify_action_type(sentence, patterns),
                    priority=action_priority(sentence, patterns),
                )
            )
            if len(items) >= patterns.max_action_items:
                return tuple(items)
    return tuple(items)


def classify_action_type(
    sentence: str, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> str:
    """Return the first action type whose pattern matches ``sentence``."""
    for rule in patterns.action_types:
        if rule.pattern.search(sentence):
            return rule.type
    return patterns.default_action_type


def action_priority(sentence: str, patterns: PatternLibrary = DEFAULT_PATTERNS) -> float:
    """Return the priority of ``sentence`` clamped to the library maximum."""
    priority = patterns.base_priority
    for boost in patterns.priority_boosts:
        if boost.pattern.search(sentence):
            priority += boost.amount
    return min(priority, patterns.max_priority)


def analyze_sender_importance(
    sender: Sender | None, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> SenderImportance:
    """Classify the sender; automated addresses win over every other tier."""
    sender = sender or Sender()
    email = (sender.email or "").lower()
    name = (sender.name or "").lower()

    def _mentions(terms: Sequence[str]) -> bool:
        return any(term in name or term in email for term in terms)

    if any(term in email for term in patterns.automated_terms):
        level, score = "automated", 0.3
    elif _mentions(patterns.executive_terms):
        level, score = "executive", 3.0
    elif _mentions(patterns.management_terms):
        level, score = "management", 2.0
    else:
        level, score = "standard", 1.0

    return SenderImportance(
        level=level,
        score=score,
        name=sender.name or "",
        email=sender.email or "",
    )


def extract_temporal_context(
    email: EmailRecord, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> TemporalContext:
    """Collect date and time mentions plus deadline and meeting hints."""
    body = email.body or ""
    dates = tuple(match.group(0) for match in patterns.date.finditer(body))
    times = tuple(match.group(0) for match in patterns.time.finditer(body))
    mentions_meeting = patterns.meeting.search(body) is not None
    return TemporalContext(
        dates=dates,
        times=times,
        has_deadline=patterns.deadline.search(body) is not None,
        has_meeting_time=mentions_meeting and bool(dates or times),
    )


def analyze_attachments(
    filenames: Sequence[str] | None, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> AttachmentContext:
    """Describe attachments by count and distinct file-type category."""
    if not filenames:
        return AttachmentContext()

    types = [
        patterns.file_type(filename.rsplit(".", 1)[-1].lower())
        for filename in filenames
    ]
    return AttachmentContext(
        has_attachments=True,
        count=len(filenames),
        types=tuple(dict.fromkeys(types)),
        filenames=tuple(filenames),
    )


__all__ = [
    "GENERAL_CATEGORY",
    "action_priority",
    "analyze_attachments",
    "analyze_sender_importance",
    "classify_action_type",
    "extract_action_items",
    "extract_categories",
    "extract_keywords",
    "extract_temporal_context",
    "extract_urgency_indicators",
]

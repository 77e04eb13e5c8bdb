"""Declarative pattern tables consumed by the signal extractors."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class CategoryRule:
    """Category name paired with the regex that detects it."""

    name: str
    pattern: re.Pattern[str]


@dataclass(frozen=True, slots=True)
class UrgencyPattern:
    """Urgency phrase matcher belonging to a tier."""

    pattern: re.Pattern[str]
    tier: str

    @property
    def identifier(self) -> str:
        return self.pattern.pattern


@dataclass(frozen=True, slots=True)
class ActionTypeRule:
    """Action type assigned when ``pattern`` matches a sentence."""

    type: str
    pattern: re.Pattern[str]


@dataclass(frozen=True, slots=True)
class PriorityBoost:
    """Amount added to an action priority when ``pattern`` matches."""

    pattern: re.Pattern[str]
    amount: float


def _ci(source: str) -> re.Pattern[str]:
    return re.compile(source, re.IGNORECASE)


_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        "meeting", _ci(r"meeting|schedule|calendar|appointment|call|zoom|teams")
    ),
    CategoryRule(
        "financial",
        _ci(r"invoice|payment|budget|cost|expense|billing|transaction"),
    ),
    CategoryRule(
        "project", _ci(r"project|milestone|deliverable|sprint|roadmap|timeline")
    ),
    CategoryRule(
        "hr", _ci(r"leave|vacation|pto|performance|review|hr|human resources")
    ),
    CategoryRule("support", _ci(r"issue|problem|bug|error|help|support|ticket")),
    CategoryRule(
        "sales", _ci(r"proposal|quote|deal|client|customer|sales|opportunity")
    ),
    CategoryRule(
        "administrative",
        _ci(r"policy|procedure|compliance|regulation|documentation"),
    ),
    CategoryRule(
        "social",
        _ci(r"congratulations|welcome|thank you|invitation|announcement"),
    ),
)

_HIGH_URGENCY = (
    r"urgent",
    r"asap",
    r"immediately",
    r"critical",
    r"emergency",
    r"time[- ]sensitive",
    r"deadline",
    r"overdue",
    r"priority",
    r"important",
    r"action required",
    r"respond (by|before)",
    r"please respond",
    r"need.{0,20}(today|now|soon)",
    r"within.{0,10}(hour|day)",
    r"reminder",
    r"follow[- ]up",
)

_MEDIUM_URGENCY = (
    r"please (review|check|confirm)",
    r"fyi",
    r"for your (information|review)",
    r"when (you get|you have) (a chance|time)",
    r"at your convenience",
)

_ACTION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    _ci(source)
    for source in (
        r"please (review|approve|sign|complete|submit|update|confirm|respond|reply|check)",
        r"need (you to|your)",
        r"can you",
        r"could you",
        r"would you",
        r"action required",
        r"your (approval|signature|feedback|input|response)",
        r"waiting (for|on) you",
        r"pending your",
        r"requires? your",
        r"task",
        r"to[- ]do",
        r"deadline",
        r"due (date|by)",
    )
)

_ACTION_TYPES: tuple[ActionTypeRule, ...] = (
    ActionTypeRule("review", _ci(r"review|check|read")),
    ActionTypeRule("approval", _ci(r"approve|sign")),
    ActionTypeRule("completion", _ci(r"complete|finish|submit")),
    ActionTypeRule("response", _ci(r"respond|reply")),
    ActionTypeRule("update", _ci(r"update|change|modify")),
)

_PRIORITY_BOOSTS: tuple[PriorityBoost, ...] = (
    PriorityBoost(_ci(r"urgent|asap|immediately"), 2.0),
    PriorityBoost(_ci(r"please|kindly"), 0.5),
    PriorityBoost(_ci(r"deadline|due"), 1.0),
)

_FILE_TYPES = {
    "pdf": "document",
    "doc": "document",
    "docx": "document",
    "xls": "spreadsheet",
    "xlsx": "spreadsheet",
    "ppt": "presentation",
    "pptx": "presentation",
    "jpg": "image",
    "jpeg": "image",
    "png": "image",
    "gif": "image",
    "zip": "archive",
    "rar": "archive",
    "txt": "text",
    "csv": "data",
}

_STOP_WORDS = frozenset(
    {
        "the",
        "and",
        "for",
        "with",
        "this",
        "that",
        "from",
        "have",
        "has",
        "will",
        "would",
        "could",
        "should",
        "your",
        "you",
        "are",
        "was",
        "were",
    }
)


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True, slots=True)
class PatternLibrary:
    """Read-only rule tables shared by every extractor."""

    categories: tuple[CategoryRule, ...] = _CATEGORY_RULES
    urgency: tuple[UrgencyPattern, ...] = tuple(
        UrgencyPattern(_ci(source), "high") for source in _HIGH_URGENCY
    ) + tuple(UrgencyPattern(_ci(source), "medium") for source in _MEDIUM_URGENCY)
    actions: tuple[re.Pattern[str], ...] = _ACTION_PATTERNS
    action_types: tuple[ActionTypeRule, ...] = _ACTION_TYPES
    default_action_type: str = "general"
    priority_boosts: tuple[PriorityBoost, ...] = _PRIORITY_BOOSTS
    base_priority: float = 1.0
    max_priority: float = 3.0
    max_action_items: int = 5
    automated_terms: tuple[str, ...] = (
        "no-reply",
        "noreply",
        "automated",
        "notification",
    )
    executive_terms: tuple[str, ...] = (
        "ceo",
        "cto",
        "cfo",
        "coo",
        "president",
        "vp",
        "director",
    )
    management_terms: tuple[str, ...] = (
        "manager",
        "lead",
        "head",
        "supervisor",
        "coordinator",
    )
    file_types: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(_FILE_TYPES))
    )
    default_file_type: str = "other"
    stop_words: frozenset[str] = _STOP_WORDS
    min_keyword_length: int = 4
    max_keywords: int = 10
    keyword_token: re.Pattern[str] = re.compile(
        r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b|\b[a-z]{4,}\b"
    )
    date: re.Pattern[str] = _ci(
        r"\b\d{1,2}[/-]\d{1,2}[/-]\d{2,4}\b"
        r"|\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\s+\d{1,2}"
    )
    time: re.Pattern[str] = _ci(r"\b\d{1,2}:\d{2}\s*(?:am|pm)?\b")
    deadline: re.Pattern[str] = _ci(r"deadline|due (?:by|date|on)|by (?:end of|eod)")
    meeting: re.Pattern[str] = _ci(r"meeting|call|scheduled")

    def urgency_tier(self, tier: str) -> tuple[UrgencyPattern, ...]:
        """Return the urgency patterns of ``tier`` in declaration order."""
        return tuple(entry for entry in self.urgency if entry.tier == tier)

    def file_type(self, extension: str) -> str:
        """Map a lowercased extension to its file-type category."""
        return self.file_types.get(extension, self.default_file_type)


DEFAULT_PATTERNS = PatternLibrary()


__all__ = [
    "ActionTypeRule",
    "CategoryRule",
    "DEFAULT_PATTERNS",
    "PatternLibrary",
    "PriorityBoost",
    "UrgencyPattern",
]

"""Core domain models used across the application."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from .datetime_utils import serialize_datetime


@dataclass(frozen=True, slots=True)
class Sender:
    """Display name and address of the email sender."""

    name: str = ""
    email: str = ""


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True, slots=True)
class EmailRecord:
    """Plain-text email as supplied by an email source."""

    subject: str = ""
    sender: Sender = field(default_factory=Sender)
    recipient: str | None = None
    date: str = ""
    body: str = ""
    attachments: tuple[str, ...] = ()
    platform: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> EmailRecord:
        """Build a record from a JSON-like mapping, tolerating missing keys."""
        raw_sender = payload.get("sender") or {}
        if isinstance(raw_sender, str):
            sender = Sender(email=raw_sender)
        else:
            sender = Sender(
                name=str(raw_sender.get("name") or ""),
                email=str(raw_sender.get("email") or ""),
            )
        attachments = payload.get("attachments") or ()
        if isinstance(attachments, str):
            attachments = (attachments,)
        elif not isinstance(attachments, (list, tuple)):
            raise ValueError("attachments must be a list of file names")
        return cls(
            subject=str(payload.get("subject") or ""),
            sender=sender,
            recipient=payload.get("recipient"),
            date=str(payload.get("date") or ""),
            body=str(payload.get("body") or ""),
            attachments=tuple(str(name) for name in attachments),
            platform=str(payload.get("platform") or ""),
            url=str(payload.get("url") or ""),
        )


@dataclass(frozen=True, slots=True)
class CategoryMatch:
    """Category detected in the email text."""

    name: str
    confidence: float


@dataclass(frozen=True, slots=True)
class KeywordEntry:
    """Frequent keyword with its derived importance."""

    word: str
    frequency: int
    importance: float


@dataclass(frozen=True, slots=True)
class UrgencyMatch:
    """First match of an urgency pattern."""

    pattern: str
    match: str
    location: str


@dataclass(frozen=True, slots=True)
class UrgencyIndicatorSet:
    """Urgency phrases grouped by tier."""

    high: tuple[UrgencyMatch, ...] = ()
    medium: tuple[UrgencyMatch, ...] = ()

    @property
    def score(self) -> int:
        return 3 * len(self.high) + len(self.medium)

    @property
    def level(self) -> str:
        score = self.score
        if score >= 3:
            return "high"
        if score >= 1:
            return "medium"
        return "low"


@dataclass(frozen=True, slots=True)
class ActionItem:
    """Sentence flagged as requiring action from the recipient."""

    text: str
    type: str
    priority: float


@dataclass(frozen=True, slots=True)
class SenderImportance:
    """Coarse importance tier inferred from the sender."""

    level: str
    score: float
    name: str = ""
    email: str = ""


@dataclass(frozen=True, slots=True)
class TemporalContext:
    """Dates, times and deadline hints found in the body."""

    dates: tuple[str, ...] = ()
    times: tuple[str, ...] = ()
    has_deadline: bool = False
    has_meeting_time: bool = False


@dataclass(frozen=True, slots=True)
class AttachmentContext:
    """Summary of attached files."""

    has_attachments: bool = False
    count: int = 0
    types: tuple[str, ...] = ()
    filenames: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class GraphNodes:
    """The seven signal nodes of a knowledge graph."""

    categories: tuple[CategoryMatch, ...]
    keywords: tuple[KeywordEntry, ...]
    urgency_indicators: UrgencyIndicatorSet
    action_items: tuple[ActionItem, ...]
    sender_importance: SenderImportance
    temporal_context: TemporalContext
    attachment_context: AttachmentContext


@dataclass(frozen=True, slots=True)
class GraphMetadata:
    """Bookkeeping recorded when a graph is built."""

    body_length: int
    has_attachments: bool
    built_at: datetime


@dataclass(frozen=True, slots=True)
class EmailSummary:
    """Subset of email metadata carried into graphs and results."""

    subject: str
    sender: Sender
    date: str
    platform: str

    @classmethod
    def from_record(cls, email: EmailRecord) -> EmailSummary:
        return cls(
            subject=email.subject,
            sender=email.sender,
            date=email.date,
            platform=email.platform,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "sender": {"name": self.sender.name, "email": self.sender.email},
            "date": self.date,
            "platform": self.platform,
        }


@dataclass(frozen=True, slots=True)
class KnowledgeGraph:
    """Fixed-shape bundle of signals computed for one email."""

    email: EmailSummary
    nodes: GraphNodes
    edges: Mapping[str, str]
    metadata: GraphMetadata

    def __post_init__(self) -> None:
        object.__setattr__(self, "edges", MappingProxyType(dict(self.edges)))

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation of the graph."""
        nodes = self.nodes
        urgency = nodes.urgency_indicators
        return {
            "email": self.email.to_dict(),
            "nodes": {
                "categories": [_category_dict(item) for item in nodes.categories],
                "keywords": [_keyword_dict(item) for item in nodes.keywords],
                "urgencyIndicators": {
                    "indicators": {
                        "high": [_urgency_dict(item) for item in urgency.high],
                        "medium": [_urgency_dict(item) for item in urgency.medium],
                    },
                    "score": urgency.score,
                    "level": urgency.level,
                },
                "actionItems": [
                    {"text": item.text, "type": item.type, "priority": item.priority}
                    for item in nodes.action_items
                ],
                "senderImportance": {
                    "level": nodes.sender_importance.level,
                    "score": nodes.sender_importance.score,
                    "email": nodes.sender_importance.email,
                    "name": nodes.sender_importance.name,
                },
                "temporalContext": {
                    "dates": list(nodes.temporal_context.dates),
                    "times": list(nodes.temporal_context.times),
                    "hasDeadline": nodes.temporal_context.has_deadline,
                    "hasMeetingTime": nodes.temporal_context.has_meeting_time,
                },
                "attachmentContext": {
                    "hasAttachments": nodes.attachment_context.has_attachments,
                    "count": nodes.attachment_context.count,
                    "types": list(nodes.attachment_context.types),
                    "fileNames": list(nodes.attachment_context.filenames),
                },
            },
            "edges": dict(self.edges),
            "metadata": {
                "bodyLength": self.metadata.body_length,
                "hasAttachments": self.metadata.has_attachments,
                "extractedAt": serialize_datetime(self.metadata.built_at),
            },
        }


@dataclass(frozen=True, slots=True)
class UrgencyAssessment:
    """Rule-based urgency classification of a knowledge graph."""

    urgency: str
    reasons: tuple[str, ...]
    confidence: float
    score: float

    @property
    def reasoning(self) -> str:
        return ". ".join(self.reasons)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Summary plus rule-based urgency for one email."""

    summary: str
    urgency: str
    reasoning: str
    confidence: float
    score: float
    key_actions: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "urgency": self.urgency,
            "reasoning": self.reasoning,
            "keyActions": list(self.key_actions),
            "confidence": self.confidence,
            "score": self.score,
        }


@dataclass(frozen=True, slots=True)
class GraphSummary:
    """Condensed view of a knowledge graph for outward consumers."""

    categories: tuple[CategoryMatch, ...]
    keywords: tuple[KeywordEntry, ...]
    urgency_score: int
    action_items_count: int
    sender_importance: str
    has_deadline: bool
    attachments: int

    @classmethod
    def from_graph(cls, graph: KnowledgeGraph) -> GraphSummary:
        nodes = graph.nodes
        return cls(
            categories=nodes.categories,
            keywords=nodes.keywords[:5],
            urgency_score=nodes.urgency_indicators.score,
            action_items_count=len(nodes.action_items),
            sender_importance=nodes.sender_importance.level,
            has_deadline=nodes.temporal_context.has_deadline,
            attachments=nodes.attachment_context.count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "categories": [_category_dict(item) for item in self.categories],
            "keywords": [_keyword_dict(item) for item in self.keywords],
            "urgencyScore": self.urgency_score,
            "actionItemsCount": self.action_items_count,
            "senderImportance": self.sender_importance,
            "hasDeadline": self.has_deadline,
            "attachments": self.attachments,
        }


@dataclass(frozen=True, slots=True)
class AnalysisRecord:
    """Completed analysis as handed to presentation and history."""

    email: EmailSummary
    graph_summary: GraphSummary
    analysis: AnalysisResult
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "email": self.email.to_dict(),
            "knowledgeGraph": self.graph_summary.to_dict(),
            "analysis": self.analysis.to_dict(),
            "timestamp": serialize_datetime(self.timestamp),
        }


def _category_dict(item: CategoryMatch) -> dict[str, Any]:
    return {"name": item.name, "confidence": item.confidence}


def _keyword_dict(item: KeywordEntry) -> dict[str, Any]:
    return {
        "word": item.word,
        "frequency": item.frequency,
        "importance": item.importance,
    }


def _urgency_dict(item: UrgencyMatch) -> dict[str, Any]:
    return {"pattern": item.pattern, "match": item.match, "location": item.location}


__all__ = [
    "ActionItem",
    "AnalysisRecord",
    "AnalysisResult",
    "AttachmentContext",
    "CategoryMatch",
    "EmailRecord",
    "EmailSummary",
    "GraphMetadata",
    "GraphNodes",
    "GraphSummary",
    "KeywordEntry",
    "KnowledgeGraph",
    "Sender",
    "SenderImportance",
    "TemporalContext",
    "UrgencyAssessment",
    "UrgencyIndicatorSet",
    "UrgencyMatch",
]

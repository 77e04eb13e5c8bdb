"""Signal extraction, knowledge graphs and urgency analysis."""

from inbox_graph.core.interfaces import (
    AnalysisError,
    ForbiddenError,
    ModelWarmingError,
    NotConfiguredError,
    SummarizationError,
    UnauthorizedError,
)

from .analyzer import EmailAnalyzer
from .graph import KnowledgeGraphBuilder, build_knowledge_graph
from .key_actions import select_key_actions
from .patterns import DEFAULT_PATTERNS, PatternLibrary
from .summarizer import HuggingFaceSummarizer
from .urgency import score_urgency

__all__ = [
    "AnalysisError",
    "DEFAULT_PATTERNS",
    "EmailAnalyzer",
    "ForbiddenError",
    "HuggingFaceSummarizer",
    "KnowledgeGraphBuilder",
    "ModelWarmingError",
    "NotConfiguredError",
    "PatternLibrary",
    "SummarizationError",
    "UnauthorizedError",
    "build_knowledge_graph",
    "score_urgency",
    "select_key_actions",
]

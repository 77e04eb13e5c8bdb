"""Knowledge-graph based email summarization and urgency analysis."""

__version__ = "0.1.0"

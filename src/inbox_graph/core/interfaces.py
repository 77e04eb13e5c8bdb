"""Protocol interfaces and error types for pipeline collaborators."""

from __future__ import annotations

from typing import Any, Protocol

from .models import AnalysisRecord, EmailRecord


class AnalysisError(RuntimeError):
    """Raised when an email analysis cannot be completed."""


class NotConfiguredError(AnalysisError):
    """Raised before any work when no summarization credential is available."""


class SummarizationError(RuntimeError):
    """Raised when the summarization service does not return a summary."""

    kind = "unknown"
    retryable = False

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(SummarizationError):
    """The service rejected the credential."""

    kind = "unauthorized"


class ForbiddenError(SummarizationError):
    """The credential lacks permission for the model."""

    kind = "forbidden"


class ModelWarmingError(SummarizationError):
    """The hosted model is still loading; a later attempt may succeed."""

    kind = "warming"
    retryable = True


class EmailSourceError(RuntimeError):
    """Raised when an email cannot be read from its source."""


class HistoryError(RuntimeError):
    """Raised when analysis history cannot be read or written."""


class EmailSource(Protocol):
    """Supplies one plain-text email per request."""

    def load(self) -> EmailRecord:
        """Return the email to analyse."""
        raise NotImplementedError


class Summarizer(Protocol):
    """Opaque text summarization service."""

    @property
    def provider_id(self) -> str:
        """Identifier describing the backing model/provider."""
        raise NotImplementedError

    def summarize(self, text: str) -> str:
        """Return a summary of ``text`` or raise :class:`SummarizationError`."""
        raise NotImplementedError

    def test_connection(self) -> bool:
        """Return ``True`` when the service is reachable with the credential."""
        raise NotImplementedError


class HistoryRepository(Protocol):
    """Stores completed analyses."""

    def append(self, record: AnalysisRecord) -> None:
        """Persist ``record`` as the newest history entry."""
        raise NotImplementedError

    def list_recent(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return stored records, newest first."""
        raise NotImplementedError

    def clear(self) -> None:
        """Delete all stored records."""
        raise NotImplementedError

    def close(self) -> None:
        """Release storage resources."""
        raise NotImplementedError


__all__ = [
    "AnalysisError",
    "EmailSource",
    "EmailSourceError",
    "ForbiddenError",
    "HistoryError",
    "HistoryRepository",
    "ModelWarmingError",
    "NotConfiguredError",
    "SummarizationError",
    "Summarizer",
    "UnauthorizedError",
]

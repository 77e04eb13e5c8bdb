"""Tests for the hosted summarization client."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from inbox_graph.core.config import SummarizerSettings
from inbox_graph.core.interfaces import (
    ForbiddenError,
    ModelWarmingError,
    NotConfiguredError,
    SummarizationError,
    UnauthorizedError,
)
from inbox_graph.intelligence.summarizer import NO_SUMMARY, HuggingFaceSummarizer


def _summarizer(
    handler: Callable[[httpx.Request], httpx.Response],
) -> HuggingFaceSummarizer:
    settings = SummarizerSettings(api_key="hf_test", model="org/model")
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HuggingFaceSummarizer(settings, client=client)


def test_summarize_returns_summary_text() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"summary_text": "Invoice is overdue."}])

    summary = _summarizer(handler).summarize("Please pay the invoice.")

    assert summary == "Invoice is overdue."
    (request,) = seen
    assert request.url.path.endswith("/org/model")
    assert request.headers["Authorization"] == "Bearer hf_test"
    assert json.loads(request.content) == {"inputs": "Please pay the invoice."}


def test_summarize_accepts_generated_text() -> None:
    summarizer = _summarizer(
        lambda _request: httpx.Response(200, json=[{"generated_text": "Short."}])
    )

    assert summarizer.summarize("text") == "Short."


def test_summarize_without_summary_uses_placeholder() -> None:
    summarizer = _summarizer(lambda _request: httpx.Response(200, json=[]))

    assert summarizer.summarize("text") == NO_SUMMARY


@pytest.mark.parametrize(
    ("status_code", "error_type", "kind"),
    [
        (401, UnauthorizedError, "unauthorized"),
        (403, ForbiddenError, "forbidden"),
        (503, ModelWarmingError, "warming"),
    ],
)
def test_summarize_maps_status_codes(
    status_code: int, error_type: type[SummarizationError], kind: str
) -> None:
    summarizer = _summarizer(
        lambda _request: httpx.Response(status_code, json={"error": "nope"})
    )

    with pytest.raises(error_type) as excinfo:
        summarizer.summarize("text")

    assert excinfo.value.kind == kind
    assert excinfo.value.status_code == status_code


def test_loading_payload_is_warming_and_retryable() -> None:
    summarizer = _summarizer(
        lambda _request: httpx.Response(
            200, json={"error": "Model org/model is currently loading"}
        )
    )

    with pytest.raises(ModelWarmingError) as excinfo:
        summarizer.summarize("text")

    assert excinfo.value.retryable


def test_other_errors_are_reported_with_detail() -> None:
    summarizer = _summarizer(
        lambda _request: httpx.Response(500, json={"error": "boom"})
    )

    with pytest.raises(SummarizationError) as excinfo:
        summarizer.summarize("text")

    assert type(excinfo.value) is SummarizationError
    assert excinfo.value.kind == "unknown"
    assert not excinfo.value.retryable
    assert "API error (500): boom" in str(excinfo.value)


def test_transport_failure_is_summarization_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(SummarizationError):
        _summarizer(handler).summarize("text")


def test_missing_api_key_is_not_configured() -> None:
    with pytest.raises(NotConfiguredError):
        HuggingFaceSummarizer(SummarizerSettings())


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(200, True), (503, True), (401, False), (404, False)],
)
def test_connection_check(status_code: int, expected: bool) -> None:
    summarizer = _summarizer(lambda _request: httpx.Response(status_code, json=[]))

    assert summarizer.test_connection() is expected


def test_connection_check_handles_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert _summarizer(handler).test_connection() is False

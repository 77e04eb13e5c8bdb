"""Client for the hosted summarization model."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from inbox_graph.core.config import SummarizerSettings
from inbox_graph.core.interfaces import (
    ForbiddenError,
    ModelWarmingError,
    NotConfiguredError,
    SummarizationError,
    UnauthorizedError,
)

LOGGER = logging.getLogger(__name__)

NO_SUMMARY = "Unable to generate summary"
_TEST_INPUT = "This is a test email. Please summarize it."
_WARMING_MESSAGE = "Model is loading. Please wait 20-30 seconds and try again."


@dataclass(slots=True)
class HuggingFaceSummarizer:
    """Synchronous client for the Hugging Face inference API.

    Failures are raised once; callers decide whether to try again.
    """

    settings: SummarizerSettings
    client: httpx.Client | None = None

    def __post_init__(self) -> None:
        if not self.settings.api_key:
            raise NotConfiguredError(
                "API key not configured. Set INBOX_GRAPH_SUMMARIZER__API_KEY."
            )

    @property
    def provider_id(self) -> str:
        """Return a human readable identifier for the configured model."""
        return f"huggingface:{self.settings.model}"

    @property
    def endpoint(self) -> str:
        return self.settings.base_url.rstrip("/") + "/" + self.settings.model

    def summarize(self, text: str) -> str:
        """Return the model's summary of ``text``."""
        try:
            response = self._post(text)
        except httpx.HTTPError as exc:
            raise SummarizationError(f"Summarization request failed: {exc}") from exc

        if response.status_code == 401:
            raise UnauthorizedError(
                "Invalid API key. Please check your Hugging Face token.",
                status_code=401,
            )
        if response.status_code == 403:
            raise ForbiddenError(
                "Access denied. Ensure your Hugging Face token has read permissions.",
                status_code=403,
            )
        if response.status_code == 503:
            raise ModelWarmingError(_WARMING_MESSAGE, status_code=503)
        if response.is_error:
            detail = _error_detail(response)
            raise SummarizationError(
                f"API error ({response.status_code}): {detail}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise SummarizationError("Summarization service returned invalid JSON") from exc

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, str) and "loading" in error:
                raise ModelWarmingError(_WARMING_MESSAGE, status_code=response.status_code)
        return _extract_summary(data)

    def test_connection(self) -> bool:
        """Return ``True`` if the model answers or is warming up."""
        try:
            response = self._post(_TEST_INPUT)
        except httpx.HTTPError as exc:
            LOGGER.warning("Summarizer connection test failed: %s", exc)
            return False
        return response.is_success or response.status_code == 503

    def _post(self, text: str) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }
        payload = {"inputs": text}
        LOGGER.debug("Requesting summary from %s", self.provider_id)
        if self.client is not None:
            return self.client.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.settings.timeout_seconds,
            )
        return httpx.post(
            self.endpoint,
            json=payload,
            headers=headers,
            timeout=self.settings.timeout_seconds,
        )


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except json.JSONDecodeError:
        return response.text or "Unknown error"
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return "Unknown error"


def _extract_summary(data: Any) -> str:
    if isinstance(data, list) and data and isinstance(data[0], dict):
        first = data[0]
        for key in ("summary_text", "generated_text"):
            value = first.get(key)
            if isinstance(value, str) and value:
                return value
    return NO_SUMMARY


__all__ = ["HuggingFaceSummarizer", "NO_SUMMARY"]

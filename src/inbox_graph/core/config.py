"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class SummarizerSettings(BaseModel):
    """Settings for the hosted summarization model."""

    api_key: str | None = Field(
        default=None, description="Bearer token for the inference API"
    )
    base_url: str = Field(
        default="https://router.huggingface.co/hf-inference/models/",
        description="Inference API base URL; the model id is appended",
    )
    model: str = Field(
        default="google/pegasus-cnn_dailymail", description="Model identifier"
    )
    timeout_seconds: int = Field(
        default=30, ge=1, description="Request timeout for summarization calls"
    )
    max_input_chars: int = Field(
        default=1024,
        ge=1,
        description="Number of body characters sent to the model",
    )


class AnalysisSettings(BaseModel):
    """Settings for the rule-based analysis pipeline."""

    parallel_extraction: bool = Field(
        default=False, description="Run signal extractors on a thread pool"
    )
    max_workers: int = Field(
        default=7, ge=1, description="Thread pool size for parallel extraction"
    )
    key_action_limit: int = Field(
        default=3, ge=1, description="Number of key actions in a result"
    )


class StorageSettings(BaseModel):
    """Settings for local persistence."""

    db_path: Path = Field(
        default=Path("./inbox_graph.db"), description="SQLite database path"
    )
    history_limit: int = Field(
        default=50, ge=1, description="Number of analyses kept in history"
    )


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    summarizer: SummarizerSettings = Field(default_factory=SummarizerSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_PREFIX = "INBOX_GRAPH_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = (
        {key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)}
        if include_environment
        else {}
    )

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        normalized_value: Any = value
        if isinstance(value, str) and value == "":
            normalized_value = None
        elif isinstance(value, str):
            lowercase_value = value.lower()
            if lowercase_value == "true":
                normalized_value = True
            elif lowercase_value == "false":
                normalized_value = False
        _merge_into_tree(collected, path, normalized_value)

    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    *,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment=include_environment)
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AnalysisSettings",
    "AppSettings",
    "LoggingSettings",
    "StorageSettings",
    "SummarizerSettings",
    "load_app_settings",
]

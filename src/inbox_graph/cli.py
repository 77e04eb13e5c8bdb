"""Command-line entry point for Inbox Graph."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from inbox_graph.core import AppSettings, configure_logging, load_app_settings
from inbox_graph.core.interfaces import (
    EmailSourceError,
    HistoryError,
    NotConfiguredError,
    SummarizationError,
)
from inbox_graph.core.models import AnalysisRecord
from inbox_graph.ingestion import load_email_file
from inbox_graph.intelligence import (
    EmailAnalyzer,
    HuggingFaceSummarizer,
    KnowledgeGraphBuilder,
)
from inbox_graph.storage import SqliteHistoryRepository


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Inbox Graph email analyzer")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    subcommands = parser.add_subparsers(dest="command")

    subcommands.add_parser("info", help="Show the active configuration.")

    analyze = subcommands.add_parser(
        "analyze", help="Summarize an email file and classify its urgency."
    )
    analyze.add_argument("path", type=Path, help="Path to an .eml or .json email.")
    analyze.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the full result record as JSON.",
    )

    graph = subcommands.add_parser(
        "graph", help="Print the knowledge graph of an email file as JSON."
    )
    graph.add_argument("path", type=Path, help="Path to an .eml or .json email.")

    history = subcommands.add_parser("history", help="List recent analyses.")
    history.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of entries to show; set to 0 for no limit (default: 10).",
    )

    subcommands.add_parser("clear-history", help="Delete stored analyses.")
    subcommands.add_parser(
        "test-connection", help="Check the summarization API credential."
    )
    return parser


def execute(args: argparse.Namespace, settings: AppSettings) -> int:
    """Execute the requested CLI command and return the exit status."""
    command = args.command or "info"
    try:
        if command == "info":
            _print_info(settings)
        elif command == "analyze":
            return _run_analyze(settings, args.path, as_json=args.as_json)
        elif command == "graph":
            email = load_email_file(args.path)
            graph = KnowledgeGraphBuilder().build(email)
            print(json.dumps(graph.to_dict(), indent=2))
        elif command == "history":
            _run_history(settings, limit=args.limit)
        elif command == "clear-history":
            with SqliteHistoryRepository(settings.storage) as repository:
                repository.clear()
            print("History cleared.")
        elif command == "test-connection":
            return _run_test_connection(settings)
    except (EmailSourceError, HistoryError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    return execute(args, settings)


def _print_info(settings: AppSettings) -> None:
    configured = "yes" if settings.summarizer.api_key else "no"
    print("Inbox Graph is ready.")
    print(f"Summarization model: {settings.summarizer.model}")
    print(f"API key configured: {configured}")
    print(f"History database: {settings.storage.db_path}")


def _run_analyze(settings: AppSettings, path: Path, *, as_json: bool) -> int:
    """Analyse one email file and print the outcome."""
    email = load_email_file(path)
    with (
        SqliteHistoryRepository(settings.storage) as repository,
        EmailAnalyzer.from_settings(settings, history=repository) as analyzer,
    ):
        try:
            record = analyzer.analyze(email)
        except (NotConfiguredError, SummarizationError) as exc:
            print(f"Analysis failed: {exc}", file=sys.stderr)
            return 1

    if as_json:
        print(json.dumps(record.to_dict(), indent=2))
    else:
        _print_record(record)
    return 0


def _print_record(record: AnalysisRecord) -> None:
    analysis = record.analysis
    print(f"Subject: {record.email.subject or '(no subject)'}")
    print(f"Urgency: {analysis.urgency} (confidence {analysis.confidence:.0%})")
    print(f"Summary: {analysis.summary}")
    print(f"Reasoning: {analysis.reasoning}")
    print("Key actions:")
    for action in analysis.key_actions:
        print(f"  - {action}")


def _run_history(settings: AppSettings, *, limit: int) -> None:
    limit_value = None if limit <= 0 else limit
    with SqliteHistoryRepository(settings.storage) as repository:
        entries = repository.list_recent(limit_value)

    if not entries:
        print("No analyses stored.")
        return

    print(f"Showing {len(entries)} analysis record(s):")
    header = f"{'Timestamp':<32}  {'Urgency':<10}  Subject"
    print(header)
    print("-" * len(header))
    for entry in entries:
        subject = entry.get("email", {}).get("subject") or "(no subject)"
        urgency = entry.get("analysis", {}).get("urgency", "-")
        print(f"{entry.get('timestamp', '-'):<32}  {urgency:<10}  {subject}")


def _run_test_connection(settings: AppSettings) -> int:
    try:
        summarizer = HuggingFaceSummarizer(settings.summarizer)
    except NotConfiguredError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if summarizer.test_connection():
        print(f"Connection to {summarizer.provider_id} succeeded.")
        return 0
    print(f"Connection to {summarizer.provider_id} failed.", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())

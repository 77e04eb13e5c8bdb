"""Tests for file-based email sources."""

from __future__ import annotations

import json
from email.message import EmailMessage
from pathlib import Path

import pytest

from inbox_graph.core.interfaces import EmailSourceError
from inbox_graph.ingestion import EmailParser, load_email_file, strip_html


def _message() -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = "Invoice overdue"
    message["From"] = "Finance Manager <manager@company.com>"
    message["To"] = "user@example.com"
    message["Date"] = "Mon, 03 Mar 2025 09:00:00 +0000"
    message.set_content("Please approve the invoice.")
    message.add_attachment(
        b"%PDF-1.4", maintype="application", subtype="pdf", filename="invoice.pdf"
    )
    return message


def test_parser_extracts_record_fields() -> None:
    record = EmailParser().parse(_message().as_bytes(), platform="imap")

    assert record.subject == "Invoice overdue"
    assert record.sender.name == "Finance Manager"
    assert record.sender.email == "manager@company.com"
    assert record.recipient == "user@example.com"
    assert record.date == "Mon, 03 Mar 2025 09:00:00 +0000"
    assert record.body == "Please approve the invoice."
    assert record.attachments == ("invoice.pdf",)
    assert record.platform == "imap"


def test_parser_falls_back_to_html_text() -> None:
    message = EmailMessage()
    message["Subject"] = "Hello"
    message.set_content(
        "<html><style>p {color: red}</style><p>Hello <b>there</b> &amp; bye</p></html>",
        subtype="html",
    )

    record = EmailParser().parse(message.as_bytes())

    assert record.body == "Hello there & bye"
    assert record.sender.email == ""
    assert record.attachments == ()


def test_strip_html_keeps_line_structure() -> None:
    assert strip_html("<p>One</p>\n<p>Two  words</p>") == "One\nTwo words"


def test_load_eml_file(tmp_path: Path) -> None:
    path = tmp_path / "message.eml"
    path.write_bytes(_message().as_bytes())

    record = load_email_file(path)

    assert record.subject == "Invoice overdue"
    assert record.url.startswith("file://")


def test_load_json_file(tmp_path: Path) -> None:
    path = tmp_path / "message.json"
    path.write_text(
        json.dumps(
            {
                "subject": "Team lunch",
                "sender": {"name": "Alex", "email": "alex@company.com"},
                "body": "Lunch on Friday.",
                "attachments": ["menu.pdf"],
                "platform": "Gmail",
            }
        ),
        encoding="utf-8",
    )

    record = load_email_file(path)

    assert record.subject == "Team lunch"
    assert record.sender.name == "Alex"
    assert record.attachments == ("menu.pdf",)
    assert record.recipient is None


def test_missing_file_raises_source_error(tmp_path: Path) -> None:
    with pytest.raises(EmailSourceError):
        load_email_file(tmp_path / "absent.eml")


def test_invalid_json_raises_source_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("[1, 2", encoding="utf-8")

    with pytest.raises(EmailSourceError):
        load_email_file(path)


def test_strip_html_ignores_comments_and_quoted_brackets() -> None:
    payload = (
        '<p title="a>b">Hello</p><!-- hidden <b>x</b> -->'
        "<script>var x = 1;</script>"
    )

    assert strip_html(payload) == "Hello"


def test_json_attachment_string_is_one_file(tmp_path: Path) -> None:
    path = tmp_path / "message.json"
    path.write_text(
        json.dumps({"body": "See attached.", "attachments": "invoice.pdf"}),
        encoding="utf-8",
    )

    assert load_email_file(path).attachments == ("invoice.pdf",)


def test_json_attachments_of_wrong_type_raise_source_error(tmp_path: Path) -> None:
    path = tmp_path / "message.json"
    path.write_text(
        json.dumps({"body": "See attached.", "attachments": {"name": "a.pdf"}}),
        encoding="utf-8",
    )

    with pytest.raises(EmailSourceError, match="attachments"):
        load_email_file(path)

"""Shared email fixtures."""

from __future__ import annotations

import pytest

from inbox_graph.core.models import EmailRecord, Sender


@pytest.fixture
def invoice_email() -> EmailRecord:
    """Overdue invoice from a manager with a PDF attached."""

    return EmailRecord(
        subject="URGENT: Invoice overdue, please respond by Friday",
        sender=Sender(name="Finance Manager", email="manager@company.com"),
        recipient="me@company.com",
        date="Mon, 3 Mar 2025 09:00:00 +0000",
        body=(
            "Please review and approve the attached invoice immediately. "
            "Deadline is this Friday."
        ),
        attachments=("invoice.pdf",),
        platform="Gmail",
        url="https://mail.example.com/1",
    )


@pytest.fixture
def lunch_email() -> EmailRecord:
    """Casual team announcement without dates or requests."""

    return EmailRecord(
        subject="Team lunch next Friday",
        sender=Sender(name="Alex", email="alex@company.com"),
        body=(
            "Hey everyone, just a heads up we're doing lunch next week, "
            "no need to RSVP."
        ),
        platform="Outlook",
    )

"""Email sources turning files into plain-text email records."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import getaddresses
from pathlib import Path

from bs4 import BeautifulSoup, Comment

from ..core.interfaces import EmailSourceError
from ..core.models import EmailRecord, Sender

_BLANK_RUN = re.compile(r"\s+")


class EmailParser:
    """Convert raw RFC822 payloads into plain-text email records."""

    def __init__(self) -> None:
        """Prepare internal parser instance."""
        self._parser = BytesParser(policy=policy.default)

    def parse(
        self, payload: bytes, *, platform: str = "eml", url: str = ""
    ) -> EmailRecord:
        """Parse raw RFC822 bytes into an :class:`EmailRecord`."""
        message = self._parser.parsebytes(payload)
        body_text, body_html = _extract_bodies(message)
        body = body_text if body_text is not None else strip_html(body_html or "")

        return EmailRecord(
            subject=str(message.get("Subject") or ""),
            sender=_take_sender(message.get("From")),
            recipient=_take_first_address(message.get_all("To", [])),
            date=str(message.get("Date") or ""),
            body=body,
            attachments=tuple(_collect_attachment_names(message)),
            platform=platform,
            url=url,
        )


@dataclass(slots=True)
class FileEmailSource:
    """Load one email from an ``.eml`` or ``.json`` file."""

    path: Path

    def load(self) -> EmailRecord:
        """Read and parse the file, raising :class:`EmailSourceError` on failure."""
        try:
            payload = self.path.read_bytes()
        except OSError as exc:
            raise EmailSourceError(f"Cannot read {self.path}: {exc}") from exc

        if self.path.suffix.lower() == ".json":
            try:
                data = json.loads(payload.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise EmailSourceError(f"{self.path} is not valid JSON") from exc
            if not isinstance(data, dict):
                raise EmailSourceError(f"{self.path} must contain a JSON object")
            try:
                return EmailRecord.from_dict(data)
            except ValueError as exc:
                raise EmailSourceError(f"{self.path}: {exc}") from exc

        return EmailParser().parse(payload, url=self.path.resolve().as_uri())


def load_email_file(path: Path | str) -> EmailRecord:
    """Return the email stored at ``path``."""
    return FileEmailSource(Path(path)).load()


def strip_html(payload: str) -> str:
    """Return the visible text of an HTML fragment."""
    soup = BeautifulSoup(payload, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()

    text = soup.get_text()
    lines = (_BLANK_RUN.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def _take_sender(header_value: str | None) -> Sender:
    if not header_value:
        return Sender()
    for name, address in getaddresses([str(header_value)]):
        if name or address:
            return Sender(name=name.strip(), email=address.strip())
    return Sender()


def _take_first_address(headers: Iterable[str]) -> str | None:
    for _, address in getaddresses([str(header) for header in headers]):
        if address:
            return address
    return None


def _collapse_chunks(chunks: Iterable[str], separator: str) -> str | None:
    filtered_chunks = [chunk for chunk in chunks if chunk]
    if not filtered_chunks:
        return None
    return separator.join(filtered_chunks)


def _extract_bodies(message: EmailMessage) -> tuple[str | None, str | None]:
    plain_chunks: list[str] = []
    html_chunks: list[str] = []

    for part in message.walk():
        if part.is_multipart():
            continue
        if part.get_content_disposition() == "attachment":
            continue
        try:
            content_obj = part.get_content()
        except LookupError:
            continue
        if not isinstance(content_obj, str):
            continue
        content = content_obj.strip()
        content_type = part.get_content_type()
        if content_type == "text/plain":
            plain_chunks.append(content)
        elif content_type == "text/html":
            html_chunks.append(content)

    return _collapse_chunks(plain_chunks, "\n\n"), _collapse_chunks(html_chunks, "\n")


def _collect_attachment_names(message: EmailMessage) -> Iterable[str]:
    for part in message.iter_attachments():
        filename = part.get_filename()
        if filename:
            yield filename


__all__ = ["EmailParser", "FileEmailSource", "load_email_file", "strip_html"]

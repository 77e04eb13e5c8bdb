"""Email source collaborators."""

from .parser import EmailParser, FileEmailSource, load_email_file, strip_html

__all__ = ["EmailParser", "FileEmailSource", "load_email_file", "strip_html"]

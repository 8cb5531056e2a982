"""Reporters rendering classified coverage for files and terminals."""

from filecov.agents.reporters.html import HTMLReporter
from filecov.agents.reporters.markdown import (
    MarkdownReporter,
    MarkdownSummary,
    parse_markdown_summary,
)
from filecov.agents.reporters.writer import render_report, write_report

__all__ = [
    "HTMLReporter",
    "MarkdownReporter",
    "MarkdownSummary",
    "parse_markdown_summary",
    "render_report",
    "write_report",
]

"""Format dispatch and report file writing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from filecov.agents.reporters.html import HTMLReporter
from filecov.agents.reporters.markdown import MarkdownReporter
from filecov.models.coverage import ReportFormat

if TYPE_CHECKING:
    from pathlib import Path

    from filecov.models.coverage import CoverageReport

logger = logging.getLogger(__name__)

_RENDERERS: dict[ReportFormat, MarkdownReporter | HTMLReporter] = {
    ReportFormat.MARKDOWN: MarkdownReporter(),
    ReportFormat.HTML: HTMLReporter(),
}


def render_report(report: CoverageReport, report_format: ReportFormat) -> str:
    """Render *report* in the requested format. Identical inputs give identical text."""
    return _RENDERERS[report_format].render(report)


def write_report(text: str, destination: Path) -> Path:
    """Write *text* to *destination* exactly as given, replacing any existing file.

    Parent directories are created as needed.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", encoding="utf-8", newline="") as handle:
        handle.write(text)
    logger.info("Coverage report written to %s", destination)
    return destination

"""Markdown reporter — compact coverage summary for PR comments and logs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filecov.models.coverage import CoverageReport

logger = logging.getLogger(__name__)

_SUMMARY_RE = re.compile(
    r"^- \*\*Covered File:\*\* (?P<file>.+)\n"
    r"- \*\*Coverage percentage:\*\* (?P<percentage>\d+\.\d{2})% covered\n"
    r"- \*\*Line coverage:\*\* (?P<covered>\d+) / (?P<total>\d+) lines covered$",
    re.MULTILINE,
)


@dataclass(frozen=True)
class MarkdownSummary:
    """Values recovered from a rendered Markdown report."""

    file_path: str
    percentage: str
    covered: int
    total: int


class MarkdownReporter:
    """Renders a CoverageReport as a Markdown summary block."""

    def render(self, report: CoverageReport) -> str:
        """Return the Markdown summary (no trailing newline)."""
        summary = report.summary
        logger.debug("Rendering Markdown report for %s", report.file_path)
        return "\n".join(
            [
                "## Coverage Report",
                "",
                f"- **Covered File:** {report.file_path}",
                f"- **Coverage percentage:** {summary.percentage_text}% covered",
                f"- **Line coverage:** {summary.covered} / {summary.total} lines covered",
            ]
        )


def parse_markdown_summary(text: str) -> MarkdownSummary:
    """Recover the summary values embedded in a rendered Markdown report.

    Raises:
        ValueError: If *text* does not contain a coverage summary.
    """
    match = _SUMMARY_RE.search(text)
    if match is None:
        raise ValueError("Text does not contain a Markdown coverage summary")
    return MarkdownSummary(
        file_path=match.group("file"),
        percentage=match.group("percentage"),
        covered=int(match.group("covered")),
        total=int(match.group("total")),
    )

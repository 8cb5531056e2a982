"""Classify every physical line of a source file against merged coverage."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from filecov.models.coverage import (
    ClassifiedLine,
    CoverageReport,
    CoverageSummary,
    LineStatus,
)

if TYPE_CHECKING:
    from filecov.models.coverage import MergedCoverage, SourceFileRef

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_physical_lines(source_text: str) -> list[str]:
    """Split text into physical lines without their terminators.

    Only ``\\n``, ``\\r\\n`` and ``\\r`` end a line. A trailing terminator does
    not start an extra line; empty text has no lines.
    """
    if not source_text:
        return []
    lines = _LINE_BREAK_RE.split(source_text)
    if lines[-1] == "":
        lines.pop()
    return lines


def classify_line(line_number: int, merged: MergedCoverage) -> LineStatus:
    covered = merged.is_covered(line_number)
    if covered is None:
        return LineStatus.NON_EXECUTABLE
    return LineStatus.COVERED if covered else LineStatus.NOT_COVERED


def classify(source: SourceFileRef, source_text: str, merged: MergedCoverage) -> CoverageReport:
    """Build the CoverageReport of *source* from its text and merged coverage.

    Only what the instrumentation reported decides whether a line is
    executable; lines reported beyond the end of the file are ignored.
    """
    lines = tuple(
        ClassifiedLine(line_number=number, text=text, status=classify_line(number, merged))
        for number, text in enumerate(split_physical_lines(source_text), start=1)
    )
    covered = sum(1 for line in lines if line.status is LineStatus.COVERED)
    not_covered = sum(1 for line in lines if line.status is LineStatus.NOT_COVERED)

    stray = [ln for ln in merged.lines if ln > len(lines)]
    if stray:
        logger.warning(
            "Ignoring %d coverage entries past the end of %s (%d lines)",
            len(stray),
            source.relative_path,
            len(lines),
        )

    summary = CoverageSummary(covered=covered, not_covered=not_covered)
    logger.debug(
        "Classified %s: %d lines, %d/%d executable lines covered",
        source.relative_path,
        len(lines),
        covered,
        summary.total,
    )
    return CoverageReport(source=source, summary=summary, lines=lines)

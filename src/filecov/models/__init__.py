"""Data models for per-file coverage computation."""

from filecov.models.coverage import (
    ClassifiedLine,
    CoverageReport,
    CoverageSummary,
    CoverageUnit,
    LineStatus,
    MergedCoverage,
    ReportFormat,
    SourceFileRef,
    TestFileCandidate,
)

__all__ = [
    "ClassifiedLine",
    "CoverageReport",
    "CoverageSummary",
    "CoverageUnit",
    "LineStatus",
    "MergedCoverage",
    "ReportFormat",
    "SourceFileRef",
    "TestFileCandidate",
]

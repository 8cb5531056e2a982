"""Coverage models shared by the resolver, parsers, merger and reporters.

Everything here lives for exactly one invocation. Entities that are handed
between pipeline stages are frozen so a later stage cannot alter what an
earlier one produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

_PERCENT_QUANTUM = Decimal("0.01")


class LineStatus(Enum):
    """Classification of a single physical source line."""

    COVERED = "covered"
    NOT_COVERED = "not-covered"
    NON_EXECUTABLE = "non-executable"

    @property
    def css_class(self) -> str:
        """CSS class used for this status in the HTML report."""
        return _CSS_CLASSES[self]


_CSS_CLASSES = {
    LineStatus.COVERED: "covered-line",
    LineStatus.NOT_COVERED: "not-covered-line",
    LineStatus.NON_EXECUTABLE: "uncovered-line",
}


class ReportFormat(Enum):
    """Output format of a rendered coverage report."""

    MARKDOWN = "markdown"
    HTML = "html"

    @property
    def extension(self) -> str:
        """Conventional file extension for the format."""
        return "md" if self is ReportFormat.MARKDOWN else "html"

    @classmethod
    def from_name(cls, name: str) -> ReportFormat:
        """Parse a format name case-insensitively (``"HTML"``, ``"md"``, ...)."""
        normalized = name.strip().lower()
        if normalized in {"md", "markdown"}:
            return cls.MARKDOWN
        if normalized in {"html", "htm"}:
            return cls.HTML
        raise ValueError(f"Unknown report format: {name!r}")


@dataclass(frozen=True)
class SourceFileRef:
    """The file under analysis, relative to the workspace root."""

    workspace_root: Path
    """Root of the workspace the relative path is resolved against."""

    relative_path: str
    """Workspace-relative path using forward slashes."""

    @property
    def absolute_path(self) -> Path:
        return self.workspace_root / self.relative_path


@dataclass(frozen=True)
class TestFileCandidate:
    """A test file path derived from one layout convention."""

    convention: str
    """Identifier of the convention that produced the path (e.g. ``"shared"``)."""

    relative_path: str
    """Workspace-relative path of the candidate test file."""

    present: bool = False
    """True if the candidate exists on disk."""

    @property
    def target(self) -> str:
        """Bazel-style test target label, e.g. ``//app/test/java/a:FooTest``."""
        package, _, filename = self.relative_path.rpartition("/")
        name = filename.rsplit(".", 1)[0]
        return f"//{package}:{name}"


@dataclass(frozen=True)
class CoverageUnit:
    """Coverage contributed by exactly one test target for one source file.

    ``hits`` maps 1-based line numbers to hit counts. A line missing from the
    mapping was not instrumented; a line present with a zero count was
    instrumented but never executed.
    """

    source_path: str
    hits: Mapping[int, int] = field(default_factory=dict)
    target: str = ""

    def __post_init__(self) -> None:
        for line_number, count in self.hits.items():
            if line_number < 1:
                raise ValueError(f"Line numbers are 1-based, got {line_number}")
            if count < 0:
                raise ValueError(f"Hit count must be non-negative, got {count}")
        object.__setattr__(self, "hits", MappingProxyType(dict(self.hits)))


@dataclass
class MergedCoverage:
    """Per-line covered flag for one source file, OR-ed across units."""

    source_path: str
    lines: dict[int, bool] = field(default_factory=dict)

    def is_covered(self, line_number: int) -> bool | None:
        """Return the covered flag, or None if no unit reported the line."""
        return self.lines.get(line_number)

    @property
    def covered_lines(self) -> list[int]:
        return sorted(ln for ln, covered in self.lines.items() if covered)

    @property
    def not_covered_lines(self) -> list[int]:
        return sorted(ln for ln, covered in self.lines.items() if not covered)


@dataclass(frozen=True)
class ClassifiedLine:
    """One physical line of the source file and its coverage status."""

    line_number: int
    text: str
    status: LineStatus


@dataclass(frozen=True)
class CoverageSummary:
    """Line-coverage totals for one source file."""

    covered: int
    not_covered: int

    @property
    def total(self) -> int:
        """Executable lines: covered plus not covered."""
        return self.covered + self.not_covered

    @property
    def percentage(self) -> float:
        """Covered share of executable lines, rounded half-up to two places.

        A file with no executable lines reports 0.00.
        """
        return float(self._percentage_decimal())

    @property
    def percentage_text(self) -> str:
        """Percentage formatted with exactly two decimals, e.g. ``"75.00"``."""
        return f"{self._percentage_decimal():.2f}"

    def _percentage_decimal(self) -> Decimal:
        if self.total == 0:
            return Decimal("0.00")
        ratio = Decimal(self.covered * 100) / Decimal(self.total)
        return ratio.quantize(_PERCENT_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CoverageReport:
    """Classified coverage of one source file, ready for rendering."""

    source: SourceFileRef
    summary: CoverageSummary
    lines: tuple[ClassifiedLine, ...] = ()

    @property
    def file_path(self) -> str:
        return self.source.relative_path

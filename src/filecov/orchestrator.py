"""Coverage pipeline for a single source file.

resolve test targets -> run them instrumented -> parse each artifact ->
merge -> classify -> render -> write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from filecov.agents.analyzers.exemptions import EXEMPTION_MESSAGE, ExemptionRegistry
from filecov.agents.analyzers.test_resolver import DEFAULT_CONVENTIONS, TestResolver
from filecov.agents.reporters.writer import render_report, write_report
from filecov.agents.runners.coverage_runner import DEFAULT_PROCESS_TIMEOUT, CoverageRunner
from filecov.aggregation.classifier import classify
from filecov.aggregation.merger import merge_units
from filecov.models.coverage import ReportFormat, SourceFileRef
from filecov.utils.workspace import Workspace

if TYPE_CHECKING:
    from filecov.adapters.execution.base import TestExecutionService
    from filecov.agents.analyzers.test_resolver import TestConvention
    from filecov.models.coverage import CoverageReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoverageResult:
    """A computed and written coverage report."""

    report: CoverageReport
    text: str
    destination: Path
    targets: tuple[str, ...]


class CoverageOrchestrator:
    """Runs the coverage pipeline for source files of one workspace."""

    def __init__(
        self,
        workspace: Workspace,
        service: TestExecutionService,
        *,
        timeout: float = DEFAULT_PROCESS_TIMEOUT,
        parallel: bool = True,
        exemptions: ExemptionRegistry | None = None,
        conventions: tuple[TestConvention, ...] = DEFAULT_CONVENTIONS,
    ) -> None:
        self._workspace = workspace
        self._resolver = TestResolver(
            workspace.exists, exemptions=exemptions, conventions=conventions
        )
        self._runner = CoverageRunner(service, timeout=timeout, parallel=parallel)

    @property
    def resolver(self) -> TestResolver:
        return self._resolver

    async def compute(
        self,
        source_path: str,
        report_format: ReportFormat,
        destination: Path,
    ) -> CoverageResult | str:
        """Compute, render and write the coverage report of *source_path*.

        Returns:
            The CoverageResult, or ``EXEMPTION_MESSAGE`` when the file is exempt
            from having a test file.

        Raises:
            FileCoverageError: One of its subclasses, for any failure.
        """
        relative = self._workspace.relativize(source_path)
        resolution = self._resolver.resolve(relative)
        if resolution.exempt:
            return EXEMPTION_MESSAGE

        source_text = self._workspace.read_text(resolution.source_path)
        targets = resolution.targets
        units = await self._runner.run(resolution.source_path, targets)
        merged = merge_units(units, source_path=resolution.source_path)

        source = SourceFileRef(
            workspace_root=self._workspace.root, relative_path=resolution.source_path
        )
        report = classify(source, source_text, merged)
        text = render_report(report, report_format)
        write_report(text, destination)
        return CoverageResult(
            report=report, text=text, destination=destination, targets=tuple(targets)
        )


async def compute_coverage(
    workspace_root: str | Path,
    source_file_path: str,
    report_format: ReportFormat,
    destination: str | Path,
    execution_service: TestExecutionService,
    *,
    timeout: float = DEFAULT_PROCESS_TIMEOUT,
    parallel: bool = True,
    exemptions: ExemptionRegistry | None = None,
) -> CoverageResult | str:
    """Compute line coverage of one source file and write the rendered report.

    Args:
        workspace_root: Repository root.
        source_file_path: Source file, relative to *workspace_root*.
        report_format: Markdown summary or full HTML page.
        destination: File the report is written to.
        execution_service: Runs test targets under coverage instrumentation.
        timeout: Seconds each instrumented execution may take.
        parallel: Run the test targets concurrently.
        exemptions: Exemption registry; the built-in list when omitted.

    Returns:
        The CoverageResult, or ``EXEMPTION_MESSAGE`` for exempt files.
    """
    orchestrator = CoverageOrchestrator(
        Workspace(workspace_root),
        execution_service,
        timeout=timeout,
        parallel=parallel,
        exemptions=exemptions,
    )
    return await orchestrator.compute(source_file_path, report_format, Path(destination))

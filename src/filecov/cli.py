"""filecov CLI — per-file line coverage commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from filecov import __version__
from filecov.adapters.execution.bazel import BazelExecutionService
from filecov.agents.analyzers.exemptions import EXEMPTION_MESSAGE, ExemptionRegistry
from filecov.agents.analyzers.test_resolver import TestResolver
from filecov.agents.reporters.terminal import reporter
from filecov.config import FileCovConfig, load_config, validate_config
from filecov.errors import FileCoverageError
from filecov.models.coverage import ReportFormat
from filecov.orchestrator import CoverageOrchestrator
from filecov.utils.workspace import Workspace

logger = logging.getLogger(__name__)

_FORMAT_CHOICE = click.Choice(["markdown", "md", "html"], case_sensitive=False)


def _configure_logging(*, verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=reporter.console, show_path=False)],
        force=True,
    )


def _load_valid_config(workspace_root: str) -> FileCovConfig:
    config = load_config(workspace_root)
    problems = validate_config(config)
    if problems:
        for problem in problems:
            reporter.print_error(f"Configuration error: {problem}")
        raise SystemExit(1)
    return config


def _exemptions_for(config: FileCovConfig) -> ExemptionRegistry:
    return ExemptionRegistry().extended(config.exemptions.paths, config.exemptions.suffixes)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.version_option(version=__version__, prog_name="filecov")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """filecov — line coverage of a single source file from its own tests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose=verbose)


@cli.command()
@click.argument("workspace_root", type=click.Path(exists=True, file_okay=False))
@click.argument("file_path")
@click.option(
    "--format",
    "format_name",
    type=_FORMAT_CHOICE,
    default=None,
    help="Report format (default: markdown, or report.format from .filecov.yml).",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Report destination (default: coverage_reports/<file>/coverage.<ext>).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds each instrumented test run may take.",
)
@click.option("--sequential", is_flag=True, help="Run the test targets one at a time.")
def run(
    workspace_root: str,
    file_path: str,
    format_name: str | None,
    output_path: str | None,
    timeout: float | None,
    *,
    sequential: bool,
) -> None:
    """Compute line coverage of FILE_PATH (relative to WORKSPACE_ROOT)."""
    config = _load_valid_config(workspace_root)
    report_format = (
        ReportFormat.from_name(format_name) if format_name else config.report.report_format
    )
    workspace = Workspace(workspace_root)
    relative = workspace.relativize(file_path)
    destination = (
        Path(output_path)
        if output_path
        else config.default_output_path(relative, report_format)
    )

    orchestrator = CoverageOrchestrator(
        workspace,
        BazelExecutionService(workspace.root, bazel_command=config.execution.bazel_command),
        timeout=timeout or config.execution.process_timeout,
        parallel=config.execution.parallel and not sequential,
        exemptions=_exemptions_for(config),
    )

    reporter.print_header(f"filecov run — {relative}")
    try:
        with reporter.console.status("Running instrumented tests..."):
            result = asyncio.run(orchestrator.compute(relative, report_format, destination))
    except FileCoverageError as exc:
        reporter.print_error(str(exc))
        raise SystemExit(1) from exc

    if isinstance(result, str):
        reporter.print_info(result)
        return

    reporter.print_success(f"Coverage computed from {', '.join(result.targets)}")
    reporter.print_coverage_summary(result.report, result.destination)


@cli.command()
@click.argument("workspace_root", type=click.Path(exists=True, file_okay=False))
@click.argument("file_path")
def resolve(workspace_root: str, file_path: str) -> None:
    """List the test files that contribute coverage to FILE_PATH."""
    config = _load_valid_config(workspace_root)
    workspace = Workspace(workspace_root)
    resolver = TestResolver(workspace.exists, exemptions=_exemptions_for(config))
    try:
        resolution = resolver.resolve(workspace.relativize(file_path))
    except FileCoverageError as exc:
        reporter.print_error(str(exc))
        raise SystemExit(1) from exc

    if resolution.exempt:
        reporter.print_info(EXEMPTION_MESSAGE)
        return
    reporter.print_resolution(resolution)


def main() -> None:
    cli()

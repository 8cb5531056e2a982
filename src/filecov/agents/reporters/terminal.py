"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from pathlib import Path

    from filecov.agents.analyzers.test_resolver import Resolution
    from filecov.models.coverage import CoverageReport

console = Console()

_GOOD_COVERAGE = 80.0
_FAIR_COVERAGE = 50.0


def _coverage_color(percentage: float) -> str:
    """Return a Rich color name for a coverage percentage."""
    if percentage >= _GOOD_COVERAGE:
        return "green"
    if percentage >= _FAIR_COVERAGE:
        return "yellow"
    return "red"


class CLIReporter:
    """Rich terminal output for coverage runs."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def print_header(self, title: str) -> None:
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        self.console.print(f"[dim]{message}[/dim]")

    def print_resolution(self, resolution: Resolution) -> None:
        """Show every candidate test file and whether it contributes."""
        table = Table(title=f"Test files for {resolution.source_path}")
        table.add_column("Convention", style="cyan")
        table.add_column("Test file")
        table.add_column("Target", style="dim")
        table.add_column("Present", justify="center")
        for candidate in resolution.candidates:
            table.add_row(
                candidate.convention,
                candidate.relative_path,
                candidate.target,
                "[green]yes[/green]" if candidate.present else "[dim]no[/dim]",
            )
        self.console.print(table)

    def print_coverage_summary(self, report: CoverageReport, destination: Path) -> None:
        """Print the summary of a computed report and where it was written."""
        summary = report.summary
        color = _coverage_color(summary.percentage)
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Covered file", report.file_path)
        table.add_row("Coverage", f"[{color}]{summary.percentage_text}%[/{color}]")
        table.add_row("Lines", f"{summary.covered} / {summary.total} lines covered")
        self.console.print(table)
        self.console.print(f"\nComputed Coverage Report at: file://{destination.resolve()}")


reporter = CLIReporter()

"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jacoco_rollup.reporters.context import format_metric

if TYPE_CHECKING:
    from jacoco_rollup.models.coverage import CollectionResult
    from jacoco_rollup.reporters.context import RenderContext

console = Console()

_HIGH_COVERAGE = 80.0
_MEDIUM_COVERAGE = 50.0


def _coverage_color(percentage: float | None) -> str:
    """Return a Rich color name for a coverage percentage."""
    if percentage is None:
        return "dim"
    if percentage >= _HIGH_COVERAGE:
        return "green"
    if percentage >= _MEDIUM_COVERAGE:
        return "yellow"
    return "red"


class CLIReporter:
    """Rich terminal output reporter."""

    def __init__(self, target: Console | None = None) -> None:
        """Initialize the CLI reporter."""
        self.console = target or console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_coverage_summary(self, result: CollectionResult, context: RenderContext) -> None:
        """Print the aggregated coverage table."""
        rows = result.rows(output_name=context.output_name, include_empty=context.include_empty)
        if not rows:
            self.print_warning("No coverage reports found")
        else:
            table = Table(title=escape(context.heading), title_style="bold cyan")
            table.add_column("Module", style="bold")
            table.add_column("Report")
            table.add_column("Metric", justify="right")

            for row in rows:
                color = _coverage_color(row.metric)
                table.add_row(
                    escape(row.module_name),
                    escape(row.report_kind) or "-",
                    f"[{color}]{format_metric(row.metric)}[/{color}]",
                )
            self.console.print(table)

        if result.warning_count:
            self.print_warning(f"{result.warning_count} warning(s) while collecting reports")
            for warning in result.warnings:
                self.print_info(f"  {escape(warning)}")


reporter = CLIReporter()

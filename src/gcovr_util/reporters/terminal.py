"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gcovr_util.analyzers.diff import CoverageIncreaseReport
    from gcovr_util.analyzers.uncovered import UncoveredReport

console = Console()

_DEFAULT_HIGH_THRESHOLD = 80.0
_DEFAULT_MEDIUM_THRESHOLD = 50.0


def format_line_ranges(line_numbers: Sequence[int]) -> str:
    """Collapse ascending line numbers into ranges, e.g. ``1-3, 7``."""
    if not line_numbers:
        return ""

    segments: list[str] = []
    start = prev = line_numbers[0]
    for number in line_numbers[1:]:
        if number == prev + 1:
            prev = number
            continue
        segments.append(_range_repr(start, prev))
        start = prev = number
    segments.append(_range_repr(start, prev))
    return ", ".join(segments)


def _range_repr(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"


class CLIReporter:
    """Rich terminal output reporter for diff and uncovered results."""

    def __init__(
        self,
        *,
        high_threshold: float = _DEFAULT_HIGH_THRESHOLD,
        medium_threshold: float = _DEFAULT_MEDIUM_THRESHOLD,
    ) -> None:
        """Initialize the CLI reporter.

        Args:
            high_threshold: Coverage % at or above which values render green.
            medium_threshold: Coverage % at or above which values render yellow.
        """
        self.console = console
        self.high_threshold = high_threshold
        self.medium_threshold = medium_threshold

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

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

    # ── Results ────────────────────────────────────────────────────────

    def print_increase_report(self, report: CoverageIncreaseReport) -> None:
        """Print a table of functions whose coverage increased."""
        if not report.increases:
            self.print_info("No coverage increases found.")
            return

        table = Table(title="Coverage Increase Report", title_style="bold cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("File", style="bold")
        table.add_column("Function")
        table.add_column("Old Coverage", justify="right")
        table.add_column("New Coverage", justify="right")
        table.add_column("+Lines", justify="right")
        table.add_column("Newly Covered Lines")

        for i, inc in enumerate(report.increases, start=1):
            old_color = self._get_coverage_color(inc.old_coverage_percentage)
            new_color = self._get_coverage_color(inc.new_coverage_percentage)
            table.add_row(
                str(i),
                self._strip_workdir(inc.file),
                inc.demangled_name,
                f"[{old_color}]{inc.old_covered_lines}/{inc.total_lines} "
                f"({inc.old_coverage_percentage:.1f}%)[/{old_color}]",
                f"[{new_color}]{inc.new_covered_lines}/{inc.total_lines} "
                f"({inc.new_coverage_percentage:.1f}%)[/{new_color}]",
                f"[green]+{inc.lines_increased}[/green]",
                format_line_ranges(inc.increased_line_numbers),
            )

        self.console.print(table)
        self.print_success(
            f"{len(report.increases)} function(s) gained coverage "
            f"({report.total_lines_increased} newly covered lines)"
        )

    def print_uncovered_report(self, report: UncoveredReport) -> None:
        """Print a table of functions with uncovered lines, grouped by file."""
        if not report.files:
            self.print_success("No uncovered lines found. All lines have coverage!")
            return

        table = Table(title="Uncovered Lines Report", title_style="bold cyan")
        table.add_column("File", style="bold")
        table.add_column("Function")
        table.add_column("Coverage", justify="right")
        table.add_column("Uncovered Lines")

        for file_unc in report.files:
            file_label = self._strip_workdir(file_unc.file_path)
            for func in file_unc.uncovered_functions:
                color = self._get_coverage_color(func.coverage_percentage)
                table.add_row(
                    file_label,
                    func.demangled_name,
                    f"[{color}]{func.covered_lines}/{func.total_lines} "
                    f"({func.coverage_percentage:.1f}%)[/{color}]",
                    format_line_ranges(func.uncovered_line_numbers),
                )
                file_label = ""
            table.add_section()

        self.console.print(table)
        self.print_warning(
            f"{report.total_functions} function(s) with uncovered lines "
            f"({report.total_uncovered_lines} total uncovered lines)"
        )

    def _get_coverage_color(self, percentage: float) -> str:
        """Get a color based on coverage percentage."""
        if percentage >= self.high_threshold:
            return "green"
        if percentage >= self.medium_threshold:
            return "yellow"
        return "red"

    def _strip_workdir(self, file_path: str) -> str:
        """Strip the current working directory from file path for cleaner display.

        Args:
            file_path: Full or relative file path.

        Returns:
            Path relative to current working directory.
        """
        cwd = Path.cwd()
        try:
            return str(Path(file_path).relative_to(cwd))
        except ValueError:
            return file_path


# Singleton instance for easy import
reporter = CLIReporter()

"""Plain-text reporter for diff and uncovered results."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gcovr_util.analyzers.diff import CoverageIncreaseReport
    from gcovr_util.analyzers.uncovered import UncoveredReport

NO_INCREASES_MESSAGE = "No coverage increases found.\n"
NO_UNCOVERED_MESSAGE = "No uncovered lines found. All lines have coverage!\n"


def format_line_numbers(line_numbers: Iterable[int]) -> str:
    """Format line numbers as ``[1 2 3]``."""
    return "[" + " ".join(str(n) for n in line_numbers) + "]"


def format_increase_report(report: CoverageIncreaseReport) -> str:
    """Render a coverage increase report as human-readable text."""
    if not report.increases:
        return NO_INCREASES_MESSAGE

    parts = [
        "Coverage Increase Report\n",
        "=========================\n\n",
        f"Found {len(report.increases)} function(s) with increased coverage:\n\n",
    ]
    for i, inc in enumerate(report.increases, start=1):
        parts.append(
            f"{i}. File: {inc.file}\n"
            f"   Function: {inc.demangled_name}\n"
            f"   Old Coverage: {inc.old_covered_lines}/{inc.total_lines} lines "
            f"({inc.old_coverage_percentage:.1f}%)\n"
            f"   New Coverage: {inc.new_covered_lines}/{inc.total_lines} lines "
            f"({inc.new_coverage_percentage:.1f}%)\n"
            f"   Lines Increased: {inc.lines_increased}\n"
            f"   Newly Covered Line Numbers: {format_line_numbers(inc.increased_line_numbers)}\n\n"
        )
    return "".join(parts)


def format_uncovered_report(report: UncoveredReport) -> str:
    """Render an uncovered-lines report as human-readable text."""
    if not report.files:
        return NO_UNCOVERED_MESSAGE

    parts = [
        "Uncovered Lines Report\n",
        "======================\n\n",
        f"Found {report.total_functions} function(s) with uncovered lines "
        f"({report.total_uncovered_lines} total uncovered lines):\n\n",
    ]
    index = 1
    for file_unc in report.files:
        for func in file_unc.uncovered_functions:
            parts.append(
                f"{index}. File: {file_unc.file_path}\n"
                f"   Function: {func.demangled_name}\n"
                f"   Coverage: {func.covered_lines}/{func.total_lines} lines "
                f"({func.coverage_percentage:.1f}%)\n"
                f"   Uncovered Lines ({len(func.uncovered_line_numbers)}): "
                f"{format_line_numbers(func.uncovered_line_numbers)}\n\n"
            )
            index += 1
    return "".join(parts)

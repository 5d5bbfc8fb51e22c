"""Diff engine: finds functions whose line coverage increased.

Compares a base report against a new one file by file. A line counts as
newly covered when its base count is zero (or it did not exist in the
base report) and its new count is positive. Functions that only exist
in the base report, or whose coverage dropped, produce nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gcovr_util.models.coverage import CoverageReport, FileCoverage

logger = logging.getLogger(__name__)


# ── Data models ──────────────────────────────────────────────────


@dataclass(frozen=True)
class FunctionCoverageIncrease:
    """Coverage increase for a single function."""

    file: str
    """Path of the file in the new report."""

    function_name: str
    """Mangled name."""

    demangled_name: str
    """Demangled name, or the mangled name when none is known."""

    lines_increased: int
    """Number of newly covered lines."""

    total_lines: int
    """Lines belonging to the function in the new report."""

    increased_line_numbers: tuple[int, ...]
    """Newly covered line numbers, ascending."""

    old_covered_lines: int
    """Lines of the function covered in the base report."""

    new_covered_lines: int
    """Lines of the function covered in the new report."""

    @property
    def old_coverage_percentage(self) -> float:
        """Return base line coverage percentage (0.0 when the function has no lines)."""
        if self.total_lines == 0:
            return 0.0
        return self.old_covered_lines * 100.0 / self.total_lines

    @property
    def new_coverage_percentage(self) -> float:
        """Return new line coverage percentage (0.0 when the function has no lines)."""
        if self.total_lines == 0:
            return 0.0
        return self.new_covered_lines * 100.0 / self.total_lines


@dataclass(frozen=True)
class CoverageIncreaseReport:
    """All coverage increases between two reports.

    Ordered by the new report's file order, then by mangled function name.
    """

    increases: tuple[FunctionCoverageIncrease, ...] = field(default_factory=tuple)

    @property
    def total_lines_increased(self) -> int:
        """Return the number of newly covered lines across all functions."""
        return sum(inc.lines_increased for inc in self.increases)


# ── Diff ─────────────────────────────────────────────────────────


def _compare_file(
    base_lines: dict[str, dict[int, int]], new_file: FileCoverage
) -> list[FunctionCoverageIncrease]:
    """Return increases for every function of *new_file* against *base_lines*.

    *base_lines* is empty when the file is new, which makes every covered
    line an increase and every old count zero.
    """
    new_lines = new_file.line_counts_by_function()
    demangled_names = new_file.function_names()

    increases: list[FunctionCoverageIncrease] = []
    for func_name in sorted(new_lines):
        line_counts = new_lines[func_name]
        base_counts = base_lines.get(func_name, {})

        increased_lines: list[int] = []
        old_covered = 0
        new_covered = 0
        for line_number in sorted(line_counts):
            new_count = line_counts[line_number]
            base_count = base_counts.get(line_number, 0)
            if base_count > 0:
                old_covered += 1
            if new_count > 0:
                new_covered += 1
            if base_count == 0 and new_count > 0:
                increased_lines.append(line_number)

        if not increased_lines:
            continue

        increases.append(
            FunctionCoverageIncrease(
                file=new_file.file_path,
                function_name=func_name,
                demangled_name=demangled_names.get(func_name) or func_name,
                lines_increased=len(increased_lines),
                total_lines=len(line_counts),
                increased_line_numbers=tuple(increased_lines),
                old_covered_lines=old_covered,
                new_covered_lines=new_covered,
            )
        )
    return increases


def compute_coverage_increase(
    base_report: CoverageReport, new_report: CoverageReport
) -> CoverageIncreaseReport:
    """Compute per-function coverage increases from *base_report* to *new_report*.

    Args:
        base_report: The earlier report.
        new_report: The later report.

    Returns:
        A CoverageIncreaseReport; empty when nothing improved.
    """
    base_files = {file_cov.file_path: file_cov for file_cov in base_report.files}

    increases: list[FunctionCoverageIncrease] = []
    for new_file in new_report.files:
        base_file = base_files.get(new_file.file_path)
        if base_file is None:
            logger.debug("File %s is new; every covered line is an increase", new_file.file_path)
            base_lines: dict[str, dict[int, int]] = {}
        else:
            base_lines = base_file.line_counts_by_function()

        file_increases = _compare_file(base_lines, new_file)
        logger.debug(
            "File %s: %d function(s) with increased coverage",
            new_file.file_path,
            len(file_increases),
        )
        increases.extend(file_increases)

    return CoverageIncreaseReport(increases=tuple(increases))

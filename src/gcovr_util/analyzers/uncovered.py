"""Uncovered engine: lists lines with a zero execution count."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gcovr_util.models.coverage import CoverageReport, FileCoverage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunctionUncovered:
    """Uncovered lines within a single function."""

    function_name: str
    """Mangled name."""

    demangled_name: str
    """Demangled name, or the mangled name when none is known."""

    uncovered_line_numbers: tuple[int, ...]
    """Line numbers with a zero count, strictly ascending."""

    total_lines: int
    covered_lines: int

    @property
    def coverage_percentage(self) -> float:
        """Return line coverage percentage (0.0 when the function has no lines)."""
        if self.total_lines == 0:
            return 0.0
        return self.covered_lines * 100.0 / self.total_lines


@dataclass(frozen=True)
class FileUncovered:
    """All functions with uncovered lines within a single file."""

    file_path: str
    uncovered_functions: tuple[FunctionUncovered, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UncoveredReport:
    """Uncovered functions and lines, grouped by file and sorted by file path."""

    files: tuple[FileUncovered, ...] = field(default_factory=tuple)

    @property
    def total_functions(self) -> int:
        """Return the number of functions with at least one uncovered line."""
        return sum(len(file_unc.uncovered_functions) for file_unc in self.files)

    @property
    def total_uncovered_lines(self) -> int:
        """Return the number of uncovered lines across all files."""
        return sum(
            len(func.uncovered_line_numbers)
            for file_unc in self.files
            for func in file_unc.uncovered_functions
        )


def _uncovered_functions(file_cov: FileCoverage) -> list[FunctionUncovered]:
    """Return functions of *file_cov* with uncovered lines, sorted by mangled name."""
    demangled_names = file_cov.function_names()

    result: list[FunctionUncovered] = []
    for func_name, line_counts in sorted(file_cov.line_counts_by_function().items()):
        uncovered = sorted(ln for ln, count in line_counts.items() if count == 0)
        if not uncovered:
            continue
        result.append(
            FunctionUncovered(
                function_name=func_name,
                demangled_name=demangled_names.get(func_name) or func_name,
                uncovered_line_numbers=tuple(uncovered),
                total_lines=len(line_counts),
                covered_lines=sum(1 for count in line_counts.values() if count > 0),
            )
        )
    return result


def find_uncovered_lines(report: CoverageReport) -> UncoveredReport:
    """Find every uncovered line in *report*, grouped by file and function.

    Files without uncovered lines are left out; a fully covered or empty
    report yields an empty result.
    """
    files: list[FileUncovered] = []
    for file_cov in sorted(report.files, key=lambda f: f.file_path):
        functions = _uncovered_functions(file_cov)
        if not functions:
            continue
        logger.debug(
            "File %s: %d function(s) with uncovered lines", file_cov.file_path, len(functions)
        )
        files.append(
            FileUncovered(file_path=file_cov.file_path, uncovered_functions=tuple(functions))
        )

    return UncoveredReport(files=tuple(files))

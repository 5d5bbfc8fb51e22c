"""Coverage report models.

These mirror the gcovr JSON format: a report owns files, each file owns
its lines and functions. Lines refer to their function by mangled name.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LineCoverage:
    """Coverage data for a single line of code."""

    line_number: int
    function_name: str
    """Mangled name of the function this line belongs to."""

    count: int

    @property
    def is_covered(self) -> bool:
        """Return True if this line was executed at least once."""
        return self.count > 0


@dataclass
class FunctionCoverage:
    """Coverage data for a single function."""

    name: str
    """Mangled name, the join key for line records."""

    demangled_name: str = ""
    line_number: int = 0
    execution_count: int = 0
    blocks_percent: float = 0.0
    pos: list[str] = field(default_factory=list)


@dataclass
class FileCoverage:
    """Coverage data for a single source file."""

    file_path: str
    lines: list[LineCoverage] = field(default_factory=list)
    functions: list[FunctionCoverage] = field(default_factory=list)

    def function_names(self) -> dict[str, str]:
        """Return a mangled -> demangled name lookup for this file's functions."""
        return {func.name: func.demangled_name for func in self.functions}

    def line_counts_by_function(self) -> dict[str, dict[int, int]]:
        """Return ``{function name: {line number: count}}`` for this file.

        A repeated (function, line number) pair keeps the last count seen.
        """
        result: dict[str, dict[int, int]] = {}
        for line in self.lines:
            result.setdefault(line.function_name, {})[line.line_number] = line.count
        return result


@dataclass
class CoverageReport:
    """A parsed gcovr JSON report.

    ``files`` keeps the producer's order; ``format_version`` is opaque and
    passed through unchanged by filtering.
    """

    files: list[FileCoverage] = field(default_factory=list)
    format_version: str = ""

    @property
    def overall_line_coverage(self) -> float:
        """Return overall line coverage percentage across all files."""
        total_lines = sum(len(file_cov.lines) for file_cov in self.files)
        if total_lines == 0:
            return 100.0
        covered_lines = sum(
            sum(1 for line in file_cov.lines if line.is_covered) for file_cov in self.files
        )
        return (covered_lines / total_lines) * 100.0

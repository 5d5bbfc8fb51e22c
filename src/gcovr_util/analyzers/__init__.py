"""Coverage analyses: filtering, diffing and uncovered-line extraction."""

from gcovr_util.analyzers.diff import (
    CoverageIncreaseReport,
    FunctionCoverageIncrease,
    compute_coverage_increase,
)
from gcovr_util.analyzers.filter import apply_filter
from gcovr_util.analyzers.uncovered import (
    FileUncovered,
    FunctionUncovered,
    UncoveredReport,
    find_uncovered_lines,
)

__all__ = [
    "CoverageIncreaseReport",
    "FileUncovered",
    "FunctionCoverageIncrease",
    "FunctionUncovered",
    "UncoveredReport",
    "apply_filter",
    "compute_coverage_increase",
    "find_uncovered_lines",
]

"""Data models for gcovr-util."""

from gcovr_util.models.coverage import (
    CoverageReport,
    FileCoverage,
    FunctionCoverage,
    LineCoverage,
)

__all__ = [
    "CoverageReport",
    "FileCoverage",
    "FunctionCoverage",
    "LineCoverage",
]

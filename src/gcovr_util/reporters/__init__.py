"""Reporters that render diff and uncovered results."""

from gcovr_util.reporters.json_reporter import JSONReporter
from gcovr_util.reporters.terminal import CLIReporter, reporter
from gcovr_util.reporters.text import format_increase_report, format_uncovered_report

__all__ = [
    "CLIReporter",
    "JSONReporter",
    "format_increase_report",
    "format_uncovered_report",
    "reporter",
]

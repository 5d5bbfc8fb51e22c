"""Readers and writers for coverage report formats."""

from gcovr_util.adapters.gcovr_json import (
    parse_report_string,
    read_report,
    report_to_dict,
    write_report,
)

__all__ = [
    "parse_report_string",
    "read_report",
    "report_to_dict",
    "write_report",
]

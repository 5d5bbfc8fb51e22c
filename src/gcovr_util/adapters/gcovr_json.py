"""gcovr JSON report reader.

Parses the ``gcovr --json`` format into the unified CoverageReport and
serializes it back. Only minimal field presence is checked; anything the
analyzers do not use is carried through as-is.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from gcovr_util.errors import MalformedInputError, SourceUnreadableError
from gcovr_util.models.coverage import (
    CoverageReport,
    FileCoverage,
    FunctionCoverage,
    LineCoverage,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

FORMAT_VERSION_KEY = "gcovr/format_version"

_KEY_FILES = "files"
_KEY_FILE = "file"
_KEY_LINES = "lines"
_KEY_FUNCTIONS = "functions"


# ── Reading ──────────────────────────────────────────────────────


def read_report(path: Path) -> CoverageReport:
    """Read and parse a gcovr JSON report file.

    Raises:
        SourceUnreadableError: The file cannot be opened or read.
        MalformedInputError: The content is not a gcovr JSON report.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnreadableError(str(path), f"failed to read file: {e}") from e
    return parse_report_string(content, source=str(path))


def parse_report_string(content: str, source: str = "<string>") -> CoverageReport:
    """Parse gcovr JSON text into a CoverageReport.

    Args:
        content: The JSON document.
        source: Identifier used in error messages.

    Raises:
        MalformedInputError: The JSON is invalid or lacks required fields.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedInputError(source, f"failed to parse JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedInputError(source, "top-level JSON value must be an object")

    files_raw = data.get(_KEY_FILES, [])
    if not isinstance(files_raw, list):
        raise MalformedInputError(source, f"'{_KEY_FILES}' must be an array")

    files = [_file_coverage_from_json(entry, source) for entry in files_raw]
    format_version = data.get(FORMAT_VERSION_KEY, "")

    logger.debug("Parsed %d file(s) from %s", len(files), source)
    return CoverageReport(
        files=files,
        format_version="" if format_version is None else str(format_version),
    )


def _file_coverage_from_json(entry: Any, source: str) -> FileCoverage:
    """Build FileCoverage from one entry of the ``files`` array."""
    if not isinstance(entry, dict):
        raise MalformedInputError(source, "each file entry must be an object")
    file_path = entry.get(_KEY_FILE)
    if not isinstance(file_path, str):
        raise MalformedInputError(source, "file entry is missing a 'file' path")

    lines_raw = entry.get(_KEY_LINES)
    functions_raw = entry.get(_KEY_FUNCTIONS)
    if lines_raw is None:
        lines_raw = []
    if functions_raw is None:
        functions_raw = []
    if not isinstance(lines_raw, list) or not isinstance(functions_raw, list):
        raise MalformedInputError(
            source, f"'{_KEY_LINES}' and '{_KEY_FUNCTIONS}' of {file_path} must be arrays"
        )

    try:
        lines = [_line_from_json(line) for line in lines_raw]
        functions = [_function_from_json(func) for func in functions_raw]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise MalformedInputError(source, f"invalid record in {file_path}: {e!r}") from e

    return FileCoverage(file_path=file_path, lines=lines, functions=functions)


def _as_int(value: Any, key: str, minimum: int) -> int:
    """Return *value* if it is a JSON integer of at least *minimum*."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{key}' must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"'{key}' must be at least {minimum}, got {value}")
    return value


def _line_from_json(line: dict[str, Any]) -> LineCoverage:
    count = line.get("count")
    return LineCoverage(
        line_number=_as_int(line["line_number"], "line_number", 1),
        function_name=str(line.get("function_name") or ""),
        count=0 if count is None else _as_int(count, "count", 0),
    )


def _function_from_json(func: dict[str, Any]) -> FunctionCoverage:
    pos = func.get("pos") or []
    return FunctionCoverage(
        name=str(func["name"]),
        demangled_name=str(func.get("demangled_name") or ""),
        line_number=_as_int(func.get("lineno") or 0, "lineno", 0),
        execution_count=_as_int(func.get("execution_count") or 0, "execution_count", 0),
        blocks_percent=float(func.get("blocks_percent") or 0.0),
        pos=[str(p) for p in pos] if isinstance(pos, list) else [],
    )


# ── Writing ──────────────────────────────────────────────────────


def report_to_dict(report: CoverageReport) -> dict[str, Any]:
    """Serialize a CoverageReport back into the gcovr JSON shape."""
    return {
        FORMAT_VERSION_KEY: report.format_version,
        _KEY_FILES: [
            {
                _KEY_FILE: file_cov.file_path,
                _KEY_LINES: [
                    {
                        "line_number": line.line_number,
                        "function_name": line.function_name,
                        "count": line.count,
                    }
                    for line in file_cov.lines
                ],
                _KEY_FUNCTIONS: [
                    {
                        "name": func.name,
                        "demangled_name": func.demangled_name,
                        "lineno": func.line_number,
                        "execution_count": func.execution_count,
                        "blocks_percent": func.blocks_percent,
                        "pos": list(func.pos),
                    }
                    for func in file_cov.functions
                ],
            }
            for file_cov in report.files
        ],
    }


def write_report(report: CoverageReport, output_path: Path) -> None:
    """Write a CoverageReport to *output_path* as gcovr JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report_to_dict(report), indent=2), encoding="utf-8")

"""Filter engine: restricts a report to configured files and functions.

A report file is kept when its normalized path equals a target's, or when
the two share a base filename, so filters can name files as ``demo.cc``
while reports carry ``/abs/path/demo.cc``. Within a kept file, functions
and lines survive when their function matches the target's allowed
identifiers by mangled name, full demangled name, or base name (the
demangled name up to its parameter list).
"""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING

from gcovr_util.models.coverage import CoverageReport, FileCoverage

if TYPE_CHECKING:
    from gcovr_util.config import FilterConfig

logger = logging.getLogger(__name__)

_PARAMETER_LIST_START = "("


def normalize_file_path(file_path: str) -> str:
    """Return a canonical, slash-separated form of *file_path*.

    Backslashes become slashes, then ``.``/``..`` segments and repeated
    separators are collapsed.
    """
    normalized = posixpath.normpath(file_path.replace("\\", "/"))
    # normpath keeps a leading "//"
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def base_identifier(demangled_name: str) -> str:
    """Return *demangled_name* truncated at its parameter list.

    ``calculate(int, double)`` -> ``calculate``; names without a
    parameter list are returned unchanged.
    """
    return demangled_name.split(_PARAMETER_LIST_START, 1)[0]


def should_include_function(
    demangled_name: str, mangled_name: str, allowed_functions: set[str]
) -> bool:
    """Return True if a function matches any allowed identifier.

    Overloads sharing a base name are indistinguishable here; a base-name
    entry keeps all of them.
    """
    if mangled_name in allowed_functions:
        return True
    if demangled_name and demangled_name in allowed_functions:
        return True
    base = base_identifier(demangled_name)
    return bool(base) and base in allowed_functions


class _TargetIndex:
    """Allowed functions per normalized target path, with match tracking."""

    def __init__(self, filter_config: FilterConfig) -> None:
        self._targets: dict[str, set[str]] = {}
        for target in filter_config.targets:
            path = normalize_file_path(target.file)
            self._targets.setdefault(path, set()).update(target.functions)
        self._matched: set[str] = set()

    def allowed_functions(self, file_path: str) -> set[str] | None:
        """Return the allowed functions of every target matching *file_path*.

        None means no target matches the file.
        """
        path = normalize_file_path(file_path)
        name = posixpath.basename(path)
        allowed: set[str] | None = None
        for target_path, functions in self._targets.items():
            if target_path == path or posixpath.basename(target_path) == name:
                allowed = functions if allowed is None else allowed | functions
                self._matched.add(target_path)
        return allowed

    def unmatched_targets(self) -> list[str]:
        """Return target paths that no report file matched, in sorted order."""
        return sorted(set(self._targets) - self._matched)


def _filter_file(file_cov: FileCoverage, allowed_functions: set[str]) -> FileCoverage:
    """Return a copy of *file_cov* holding only allowed functions and their lines."""
    demangled_names = file_cov.function_names()

    functions = [
        func
        for func in file_cov.functions
        if should_include_function(func.demangled_name, func.name, allowed_functions)
    ]
    # A line whose function has no entry cannot be proven allowed.
    lines = [
        line
        for line in file_cov.lines
        if line.function_name in demangled_names
        and should_include_function(
            demangled_names[line.function_name], line.function_name, allowed_functions
        )
    ]
    return FileCoverage(file_path=file_cov.file_path, lines=lines, functions=functions)


def apply_filter(report: CoverageReport, filter_config: FilterConfig | None) -> CoverageReport:
    """Return the part of *report* selected by *filter_config*.

    With no filter, or a filter without targets, the report itself is
    returned. Otherwise a new report is built; files left without any
    function are dropped, and the format version is carried over.
    """
    if filter_config is None or not filter_config.targets:
        return report

    index = _TargetIndex(filter_config)
    files: list[FileCoverage] = []
    for file_cov in report.files:
        allowed = index.allowed_functions(file_cov.file_path)
        if allowed is None:
            logger.debug("Filter dropped file %s (no matching target)", file_cov.file_path)
            continue

        filtered = _filter_file(file_cov, allowed)
        if not filtered.functions:
            logger.debug("Filter dropped file %s (no matching function)", file_cov.file_path)
            continue
        files.append(filtered)

    for target in index.unmatched_targets():
        logger.warning("Filter target %s matched no file in the report", target)

    return CoverageReport(files=files, format_version=report.format_version)

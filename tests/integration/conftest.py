"""Shared fixtures for integration tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

# ── Marker registration ──────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker."""
    config.addinivalue_line("markers", "integration: integration tests")


# ── File creation helpers ────────────────────────────────────────


def write_file(root: Path, rel: str, content: str) -> None:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")


def write_json(root: Path, rel: str, data: dict[str, Any]) -> None:
    """Write a JSON file under *root*."""
    write_file(root, rel, json.dumps(data, indent=2))


def _gcovr_file(path: str, functions: list[tuple[str, str, dict[int, int]]]) -> dict[str, Any]:
    """Build one gcovr ``files`` entry from ``(mangled, demangled, {line: count})``."""
    lines = [
        {"line_number": number, "function_name": mangled, "count": count, "branches": []}
        for mangled, _, counts in functions
        for number, count in counts.items()
    ]
    return {
        "file": path,
        "lines": sorted(lines, key=lambda line: line["line_number"]),
        "functions": [
            {
                "name": mangled,
                "demangled_name": demangled,
                "lineno": min(counts),
                "execution_count": max(counts.values()),
                "blocks_percent": 100.0 if all(counts.values()) else 50.0,
                "pos": [f"{min(counts)}:1"],
            }
            for mangled, demangled, counts in functions
        ],
    }


# ── Project fixtures ─────────────────────────────────────────────


@pytest.fixture()
def gcovr_project(tmp_path: Path) -> Path:
    """Create a build directory holding base and new gcovr reports.

    Between the two runs ``calculate(int, double)`` gains lines 12-13,
    ``util.cc`` appears, and ``main`` is unchanged.
    """
    calc = "/work/src/calc.cc"
    base = {
        "gcovr/format_version": "0.6",
        "files": [
            _gcovr_file(
                calc,
                [
                    ("_Z9calculateid", "calculate(int, double)", {10: 4, 11: 4, 12: 0, 13: 0}),
                    ("_Z5resetv", "reset()", {20: 0, 21: 0}),
                ],
            ),
            _gcovr_file("/work/src/main.cc", [("main", "main", {1: 1, 2: 1})]),
        ],
    }
    new = {
        "gcovr/format_version": "0.6",
        "files": [
            _gcovr_file(
                calc,
                [
                    ("_Z9calculateid", "calculate(int, double)", {10: 4, 11: 4, 12: 2, 13: 1}),
                    ("_Z5resetv", "reset()", {20: 0, 21: 0}),
                ],
            ),
            _gcovr_file("/work/src/main.cc", [("main", "main", {1: 1, 2: 1})]),
            _gcovr_file("/work/src/util.cc", [("_Z4helpv", "help()", {5: 1, 6: 0})]),
        ],
    }
    write_json(tmp_path, "coverage/base.json", base)
    write_json(tmp_path, "coverage/new.json", new)
    write_file(
        tmp_path,
        "filters/calc.yaml",
        "compiler:\n"
        "  path: /usr/bin/g++\n"
        "  gcovr_exec_path: /work/build\n"
        "targets:\n"
        "  - file: calc.cc\n"
        "    functions:\n"
        "      - calculate\n",
    )
    return tmp_path

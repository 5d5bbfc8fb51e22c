"""Tests for the diff engine (analyzers/diff.py)."""

from __future__ import annotations

from gcovr_util.analyzers.diff import (
    CoverageIncreaseReport,
    FunctionCoverageIncrease,
    compute_coverage_increase,
)
from gcovr_util.models.coverage import (
    CoverageReport,
    FileCoverage,
    FunctionCoverage,
    LineCoverage,
)


def _report(*files: FileCoverage) -> CoverageReport:
    return CoverageReport(files=list(files), format_version="0.5")


def _file(
    path: str, lines: list[tuple[int, str, int]], functions: dict[str, str] | None = None
) -> FileCoverage:
    return FileCoverage(
        file_path=path,
        lines=[
            LineCoverage(line_number=number, function_name=func, count=count)
            for number, func, count in lines
        ],
        functions=[
            FunctionCoverage(name=name, demangled_name=demangled)
            for name, demangled in (functions or {}).items()
        ],
    )


# ── Tests: basic diff ────────────────────────────────────────────


def test_newly_covered_lines_are_reported() -> None:
    base = _report(_file("t.cpp", [(1, "foo", 0), (2, "foo", 0), (3, "foo", 1)], {"foo": "foo"}))
    new = _report(_file("t.cpp", [(1, "foo", 1), (2, "foo", 1), (3, "foo", 1)], {"foo": "foo"}))

    result = compute_coverage_increase(base, new)

    assert result.increases == (
        FunctionCoverageIncrease(
            file="t.cpp",
            function_name="foo",
            demangled_name="foo",
            lines_increased=2,
            total_lines=3,
            increased_line_numbers=(1, 2),
            old_covered_lines=1,
            new_covered_lines=3,
        ),
    )
    assert result.total_lines_increased == 2


def test_identical_reports_yield_nothing() -> None:
    file_cov = _file("t.cpp", [(1, "foo", 0), (2, "foo", 4)], {"foo": "foo()"})

    assert compute_coverage_increase(_report(file_cov), _report(file_cov)).increases == ()


def test_empty_reports() -> None:
    assert compute_coverage_increase(CoverageReport(), CoverageReport()) == (
        CoverageIncreaseReport()
    )


def test_decrease_is_not_reported() -> None:
    base = _report(_file("t.cpp", [(1, "foo", 3), (2, "foo", 3)]))
    new = _report(_file("t.cpp", [(1, "foo", 0), (2, "foo", 3)]))

    assert compute_coverage_increase(base, new).increases == ()


def test_count_growth_on_covered_line_is_not_an_increase() -> None:
    base = _report(_file("t.cpp", [(1, "foo", 1)]))
    new = _report(_file("t.cpp", [(1, "foo", 100)]))

    assert compute_coverage_increase(base, new).increases == ()


def test_is_asymmetric() -> None:
    before = _report(_file("t.cpp", [(1, "foo", 0)]))
    after = _report(_file("t.cpp", [(1, "foo", 1)]))

    assert len(compute_coverage_increase(before, after).increases) == 1
    assert compute_coverage_increase(after, before).increases == ()


# ── Tests: missing base data ─────────────────────────────────────


def test_new_file_counts_every_covered_line() -> None:
    new = _report(_file("fresh.cpp", [(1, "bar", 2), (2, "bar", 0), (3, "bar", 1)]))

    (inc,) = compute_coverage_increase(_report(), new).increases

    assert inc.file == "fresh.cpp"
    assert inc.increased_line_numbers == (1, 3)
    assert inc.old_covered_lines == 0
    assert inc.new_covered_lines == 2
    assert inc.total_lines == 3


def test_new_function_in_existing_file() -> None:
    base = _report(_file("t.cpp", [(1, "foo", 1)]))
    new = _report(_file("t.cpp", [(1, "foo", 1), (10, "bar", 1)]))

    (inc,) = compute_coverage_increase(base, new).increases

    assert inc.function_name == "bar"
    assert inc.increased_line_numbers == (10,)
    assert inc.old_covered_lines == 0


def test_new_line_in_existing_function() -> None:
    base = _report(_file("t.cpp", [(1, "foo", 1)]))
    new = _report(_file("t.cpp", [(1, "foo", 1), (2, "foo", 1)]))

    (inc,) = compute_coverage_increase(base, new).increases

    assert inc.increased_line_numbers == (2,)
    assert inc.old_covered_lines == 1
    assert inc.new_covered_lines == 2


def test_file_only_in_base_is_ignored() -> None:
    base = _report(_file("gone.cpp", [(1, "foo", 0)]))

    assert compute_coverage_increase(base, _report()).increases == ()


# ── Tests: naming and ordering ───────────────────────────────────


def test_demangled_name_is_used_when_known() -> None:
    new = _report(_file("t.cpp", [(1, "_Z3foov", 1)], {"_Z3foov": "foo()"}))

    (inc,) = compute_coverage_increase(_report(), new).increases

    assert inc.function_name == "_Z3foov"
    assert inc.demangled_name == "foo()"


def test_demangled_name_falls_back_to_mangled() -> None:
    new = _report(_file("t.cpp", [(1, "_Z3foov", 1)], {"_Z3foov": ""}))

    (inc,) = compute_coverage_increase(_report(), new).increases

    assert inc.demangled_name == "_Z3foov"


def test_order_follows_new_report_files_then_function_name() -> None:
    new = _report(
        _file("z.cpp", [(1, "b", 1), (2, "a", 1)]),
        _file("a.cpp", [(9, "c", 1)]),
    )

    result = compute_coverage_increase(_report(), new)

    assert [(inc.file, inc.function_name) for inc in result.increases] == [
        ("z.cpp", "a"),
        ("z.cpp", "b"),
        ("a.cpp", "c"),
    ]


def test_line_numbers_are_ascending() -> None:
    new = _report(_file("t.cpp", [(30, "foo", 1), (10, "foo", 1), (20, "foo", 1)]))

    (inc,) = compute_coverage_increase(_report(), new).increases

    assert inc.increased_line_numbers == (10, 20, 30)


def test_duplicate_line_records_keep_last_count() -> None:
    new = _report(_file("t.cpp", [(1, "foo", 1), (1, "foo", 0), (2, "foo", 1)]))

    (inc,) = compute_coverage_increase(_report(), new).increases

    assert inc.increased_line_numbers == (2,)
    assert inc.total_lines == 2
    assert inc.new_covered_lines == 1


# ── Tests: percentages ───────────────────────────────────────────


def test_coverage_percentages() -> None:
    inc = FunctionCoverageIncrease(
        file="t.cpp",
        function_name="foo",
        demangled_name="foo",
        lines_increased=2,
        total_lines=4,
        increased_line_numbers=(1, 2),
        old_covered_lines=1,
        new_covered_lines=3,
    )
    assert inc.old_coverage_percentage == 25.0
    assert inc.new_coverage_percentage == 75.0


def test_coverage_percentages_without_lines() -> None:
    inc = FunctionCoverageIncrease(
        file="t.cpp",
        function_name="foo",
        demangled_name="foo",
        lines_increased=0,
        total_lines=0,
        increased_line_numbers=(),
        old_covered_lines=0,
        new_covered_lines=0,
    )
    assert inc.old_coverage_percentage == 0.0
    assert inc.new_coverage_percentage == 0.0

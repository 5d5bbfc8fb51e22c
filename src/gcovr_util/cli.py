"""gcovr-util CLI: top-level command group."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from gcovr_util import __version__
from gcovr_util.adapters.gcovr_json import read_report, report_to_dict, write_report
from gcovr_util.analyzers.diff import CoverageIncreaseReport, compute_coverage_increase
from gcovr_util.analyzers.filter import apply_filter
from gcovr_util.analyzers.uncovered import UncoveredReport, find_uncovered_lines
from gcovr_util.config import (
    OUTPUT_FORMATS,
    FilterConfig,
    ToolConfig,
    load_config,
    load_filter_config,
    validate_config,
)
from gcovr_util.errors import GcovrUtilError
from gcovr_util.models.coverage import CoverageReport
from gcovr_util.reporters.json_reporter import JSONReporter
from gcovr_util.reporters.terminal import reporter
from gcovr_util.reporters.text import format_increase_report, format_uncovered_report

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_FILE_PATH = click.Path(dir_okay=False, path_type=Path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
    )


def _load_tool_config() -> ToolConfig:
    """Load and validate ``.gcovr-util.yml`` from the working directory."""
    try:
        config = load_config(Path.cwd())
    except GcovrUtilError as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(error)
        raise click.Abort

    reporter.high_threshold = config.report.high_threshold
    reporter.medium_threshold = config.report.medium_threshold
    return config


def _status(output_format: str, message: str) -> None:
    """Report progress; only the terminal format shows it on stdout."""
    logger.info(message)
    if output_format == "terminal":
        reporter.print_info(message)


def _read_report(path: Path, label: str, output_format: str) -> CoverageReport:
    _status(output_format, f"Reading {label}: {path}")
    try:
        report = read_report(path)
    except GcovrUtilError as e:
        reporter.print_error(f"Failed to parse {label}: {e}")
        raise click.Abort from e

    logger.debug(
        "Loaded %d file(s) from %s, %.1f%% line coverage",
        len(report.files),
        path,
        report.overall_line_coverage,
    )
    return report


def _read_filter(
    filter_path: Path | None, config: ToolConfig, output_format: str
) -> FilterConfig | None:
    """Load the filter named on the command line, else the configured default."""
    if filter_path is None and config.filter.path:
        filter_path = Path(config.filter.path)
    if filter_path is None:
        return None

    _status(output_format, f"Reading filter config: {filter_path}")
    try:
        filter_config = load_filter_config(filter_path)
    except GcovrUtilError as e:
        reporter.print_error(f"Failed to parse filter config: {e}")
        raise click.Abort from e

    _status(output_format, f"Filtering enabled: tracking {len(filter_config.targets)} file(s)")
    return filter_config


def _render(
    result: CoverageIncreaseReport | UncoveredReport,
    output_format: str,
    output_path: Path | None,
) -> None:
    """Render *result* to stdout and, when requested, to *output_path*."""
    if output_format == "json":
        json_reporter = JSONReporter()
        if output_path is not None:
            json_reporter.generate(output_path, result)
        else:
            click.echo(json_reporter.generate_string(result))
        return

    if isinstance(result, CoverageIncreaseReport):
        text = format_increase_report(result)
    else:
        text = format_uncovered_report(result)

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")

    if output_format == "text":
        if output_path is None:
            click.echo(text, nl=False)
        return

    if isinstance(result, CoverageIncreaseReport):
        reporter.print_increase_report(result)
    else:
        reporter.print_uncovered_report(result)
    if output_path is not None:
        reporter.print_info(f"Report written to {output_path}")


# ── Commands ─────────────────────────────────────────────────────

_filter_option = click.option(
    "--filter",
    "-f",
    "filter_path",
    type=_FILE_PATH,
    default=None,
    help="Filter config file (YAML) listing the target files and functions.",
)
_format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default: report.format from .gcovr-util.yml, else terminal).",
)
_output_option = click.option(
    "--output",
    "-o",
    "output_path",
    type=_FILE_PATH,
    default=None,
    help="Also write the report to this file.",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="gcovr-util")
def cli(*, verbose: bool) -> None:
    """gcovr-util: analyze and compare gcovr JSON coverage reports."""
    _configure_logging(verbose=verbose)


@cli.command()
@click.option(
    "--base", "-b", "base_path", type=_FILE_PATH, required=True, help="Base gcovr JSON report."
)
@click.option(
    "--new", "-n", "new_path", type=_FILE_PATH, required=True, help="New gcovr JSON report."
)
@_filter_option
@_format_option
@_output_option
def diff(
    base_path: Path,
    new_path: Path,
    filter_path: Path | None,
    output_format: str | None,
    output_path: Path | None,
) -> None:
    """Compare two gcovr JSON reports and show coverage increases.

    Lists each function with newly covered lines, its old and new line
    coverage, and the line numbers that became covered.
    """
    config = _load_tool_config()
    output_format = output_format or config.report.format

    base_report = _read_report(base_path, "base report", output_format)
    new_report = _read_report(new_path, "new report", output_format)
    filter_config = _read_filter(filter_path, config, output_format)

    if filter_config is not None:
        _status(output_format, "Applying filters...")
        base_report = apply_filter(base_report, filter_config)
        new_report = apply_filter(new_report, filter_config)

    _status(output_format, "Computing coverage increases...")
    _render(compute_coverage_increase(base_report, new_report), output_format, output_path)


@cli.command()
@click.argument("report_path", metavar="GCOVR_FILE", type=_FILE_PATH)
@_filter_option
@_format_option
@_output_option
def uncovered(
    report_path: Path,
    filter_path: Path | None,
    output_format: str | None,
    output_path: Path | None,
) -> None:
    """Report uncovered lines from a gcovr JSON report.

    Shows, grouped by file and function, which lines were never executed
    along with per-function line coverage.
    """
    config = _load_tool_config()
    output_format = output_format or config.report.format

    report = _read_report(report_path, "report", output_format)
    filter_config = _read_filter(filter_path, config, output_format)
    if filter_config is not None:
        _status(output_format, "Applying filters...")
        report = apply_filter(report, filter_config)

    _status(output_format, "Analyzing coverage...")
    _render(find_uncovered_lines(report), output_format, output_path)


cli.add_command(uncovered, name="un")


@cli.command("filter")
@click.argument("report_path", metavar="GCOVR_FILE", type=_FILE_PATH)
@click.option(
    "--filter",
    "-f",
    "filter_path",
    type=_FILE_PATH,
    default=None,
    help="Filter config file (YAML); defaults to filter.path from .gcovr-util.yml.",
)
@_output_option
def filter_command(report_path: Path, filter_path: Path | None, output_path: Path | None) -> None:
    """Write the filtered report as gcovr JSON.

    Prints to stdout unless --output is given.
    """
    config = _load_tool_config()
    report = _read_report(report_path, "report", "json")
    filter_config = _read_filter(filter_path, config, "json")
    if filter_config is None:
        reporter.print_error("No filter given: pass --filter or set filter.path in config")
        raise click.Abort

    filtered = apply_filter(report, filter_config)
    if output_path is not None:
        write_report(filtered, output_path)
        logger.info("Filtered report written to %s", output_path)
    else:
        click.echo(json.dumps(report_to_dict(filtered), indent=2))

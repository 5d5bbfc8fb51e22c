"""Configuration parsing: filter files and ``.gcovr-util.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from gcovr_util.errors import MalformedInputError, SourceUnreadableError

logger = logging.getLogger(__name__)

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

CONFIG_FILE_NAME = ".gcovr-util.yml"
OUTPUT_FORMATS = ("terminal", "text", "json")


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_value(value: Any) -> Any:
    if isinstance(value, str):
        return _resolve_env_vars(value)
    if isinstance(value, dict):
        return _resolve_dict(value)
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]
    return value


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary.

    Filter targets are a list of mappings, so lists are walked too.
    """
    return {key: _resolve_value(value) for key, value in data.items()}


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    """Read *path* as YAML and return its top-level mapping.

    An empty document yields an empty mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnreadableError(str(path), f"failed to read file: {e}") from e

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MalformedInputError(str(path), f"failed to parse YAML: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise MalformedInputError(str(path), "top-level YAML value must be a mapping")
    return _resolve_dict(parsed)


# ── Filter configuration ─────────────────────────────────────────


@dataclass
class CompilerConfig:
    """Compiler metadata carried by filter files (not used by the analyzers)."""

    path: str = ""
    """Compiler executable path."""

    gcovr_exec_path: str = ""
    """Directory gcovr was run from."""


@dataclass
class TargetFile:
    """A source file and the functions to keep from it."""

    file: str
    """File path; may be a bare filename, relative or absolute."""

    functions: list[str] = field(default_factory=list)
    """Allowed identifiers: mangled name, demangled name or base name."""


@dataclass
class FilterConfig:
    """Parsed filter file. No targets means no filtering."""

    targets: list[TargetFile] = field(default_factory=list)
    """Files and functions to keep."""

    compiler: CompilerConfig = field(default_factory=CompilerConfig)
    """Compiler metadata."""


def _parse_compiler_config(raw: dict[str, Any]) -> CompilerConfig:
    """Parse the optional ``compiler`` section."""
    compiler_raw = raw.get("compiler", {})
    if not isinstance(compiler_raw, dict):
        compiler_raw = {}

    return CompilerConfig(
        path=str(compiler_raw.get("path", "")),
        gcovr_exec_path=str(compiler_raw.get("gcovr_exec_path", "")),
    )


def _parse_targets(raw: dict[str, Any], source: str) -> list[TargetFile]:
    """Parse the ``targets`` list, rejecting entries the filter cannot use."""
    targets_raw = raw.get("targets")
    if targets_raw is None:
        return []
    if not isinstance(targets_raw, list):
        raise MalformedInputError(source, "'targets' must be a list")

    targets: list[TargetFile] = []
    for index, entry in enumerate(targets_raw):
        if not isinstance(entry, dict) or not isinstance(entry.get("file"), str):
            raise MalformedInputError(source, f"targets[{index}] must have a 'file' string")
        functions_raw = entry.get("functions") or []
        if not isinstance(functions_raw, list):
            raise MalformedInputError(source, f"targets[{index}].functions must be a list")
        targets.append(
            TargetFile(file=entry["file"], functions=[str(name) for name in functions_raw])
        )
    return targets


def load_filter_config(path: str | Path) -> FilterConfig:
    """Load a filter file.

    Raises:
        SourceUnreadableError: The file cannot be read.
        MalformedInputError: The YAML is invalid or has the wrong shape.
    """
    filter_path = Path(path)
    raw = _load_yaml_mapping(filter_path)
    config = FilterConfig(
        targets=_parse_targets(raw, str(filter_path)),
        compiler=_parse_compiler_config(raw),
    )
    logger.debug("Loaded %d filter target(s) from %s", len(config.targets), filter_path)
    return config


# ── Tool configuration ───────────────────────────────────────────


@dataclass
class ReportConfig:
    """Output configuration."""

    format: str = "terminal"
    """Default output format: terminal, text or json."""

    high_threshold: float = 80.0
    """Coverage percentage at or above which values render green."""

    medium_threshold: float = 50.0
    """Coverage percentage at or above which values render yellow."""


@dataclass
class FilterDefaults:
    """Filter applied when no ``--filter`` option is given."""

    path: str = ""
    """Path to a filter file (empty = no filtering)."""


@dataclass
class ToolConfig:
    """Complete configuration from ``.gcovr-util.yml``."""

    report: ReportConfig = field(default_factory=ReportConfig)
    """Output configuration."""

    filter: FilterDefaults = field(default_factory=FilterDefaults)
    """Default filter configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for debugging."""


def _parse_report_config(raw: dict[str, Any]) -> ReportConfig:
    """Parse the ``report`` section."""
    report_raw = raw.get("report", {})
    if not isinstance(report_raw, dict):
        report_raw = {}

    return ReportConfig(
        format=str(report_raw.get("format", os.environ.get("GCOVR_UTIL_FORMAT", "terminal"))),
        high_threshold=float(report_raw.get("high_threshold", 80.0)),
        medium_threshold=float(report_raw.get("medium_threshold", 50.0)),
    )


def _parse_filter_defaults(raw: dict[str, Any]) -> FilterDefaults:
    """Parse the ``filter`` section."""
    filter_raw = raw.get("filter", {})
    if not isinstance(filter_raw, dict):
        filter_raw = {}

    return FilterDefaults(
        path=str(filter_raw.get("path", os.environ.get("GCOVR_UTIL_FILTER", ""))),
    )


def load_config(root: str | Path) -> ToolConfig:
    """Load ``.gcovr-util.yml`` from *root*.

    Falls back to defaults and environment variables when the file is
    missing or incomplete.

    Raises:
        SourceUnreadableError: The file exists but cannot be read.
        MalformedInputError: The file is not valid YAML or has the wrong shape.
    """
    config_path = Path(root) / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if config_path.is_file():
        raw = _load_yaml_mapping(config_path)

    try:
        report = _parse_report_config(raw)
    except (TypeError, ValueError) as e:
        raise MalformedInputError(str(config_path), f"invalid report section: {e}") from e

    return ToolConfig(
        report=report,
        filter=_parse_filter_defaults(raw),
        raw=raw,
    )


def _validate_report_config(report: ReportConfig) -> list[str]:
    """Validate output settings."""
    max_percentage = 100.0
    errors: list[str] = []

    if report.format not in OUTPUT_FORMATS:
        errors.append(
            f"report.format must be one of {', '.join(OUTPUT_FORMATS)} (got: {report.format})"
        )

    if not 0.0 <= report.high_threshold <= max_percentage:
        errors.append(
            f"report.high_threshold must be between 0 and 100 (got: {report.high_threshold})"
        )

    if not 0.0 <= report.medium_threshold <= max_percentage:
        errors.append(
            f"report.medium_threshold must be between 0 and 100 "
            f"(got: {report.medium_threshold})"
        )

    if report.medium_threshold > report.high_threshold:
        errors.append("report.medium_threshold must not exceed report.high_threshold")

    return errors


def validate_config(config: ToolConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    return _validate_report_config(config.report)

"""Configuration parsing from ``.jacoco-rollup.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from jacoco_rollup.adapters.summary import DEFAULT_PARSER, available_parsers
from jacoco_rollup.collector import DEFAULT_BUILD_DIR, DEFAULT_REPORT_DIRS, DuplicatePolicy

logger = logging.getLogger(__name__)

CONFIG_FILE = ".jacoco-rollup.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_VALID_FORMATS = ("terminal", "html", "json", "all")


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


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def _as_int(value: Any, key: str) -> int:
    """Coerce an integer setting, raising ValueError naming ``key`` otherwise."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return int(value)
    raise ValueError(f"{key} must be an integer (got: {value!r})")


@dataclass
class CollectConfig:
    """Where to look for reports and how to gather them."""

    build_dir: str = DEFAULT_BUILD_DIR
    """Build output directory relative to each module."""

    report_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_REPORT_DIRS))
    """Report directories relative to each module, in lookup order."""

    parser: str = DEFAULT_PARSER
    """Summary table parser name."""

    coverage_column: int = 2
    """0-based cell index holding the percentage in each summary row."""

    duplicates: str = DuplicatePolicy.FIRST.value
    """Duplicate module name policy: first, last, or merge."""


@dataclass
class ReportConfig:
    """Summary rendering configuration."""

    output_dir: str = "target/site"
    """Directory (relative to the project root) that receives the summary page."""

    output_name: str = "jacoco"
    """Name of the summary page and of the unified report directory."""

    format: str = "terminal"
    """Output format: terminal, html, json, or all."""

    include_empty: bool = False
    """Render modules without reports as ``N/A`` rows."""

    locales: str = ""
    """Comma-separated locale list; the first valid token is the default."""

    title: str = "Code Test Coverage"
    """Page title of the HTML summary."""


@dataclass
class RollupConfig:
    """Complete configuration from ``.jacoco-rollup.yml``."""

    root: str
    """Project root directory."""

    collect: CollectConfig = field(default_factory=CollectConfig)
    """Collection configuration."""

    report: ReportConfig = field(default_factory=ReportConfig)
    """Rendering configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""

    @property
    def output_parent(self) -> Path:
        """Directory holding the summary page."""
        return Path(self.root) / self.report.output_dir

    @property
    def output_root(self) -> Path:
        """Unified directory receiving the copied module reports."""
        return self.output_parent / self.report.output_name


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        return {}
    return section


def _parse_collect_config(raw: dict[str, Any]) -> CollectConfig:
    """Parse collection configuration from raw YAML."""
    collect_raw = _section(raw, "collect")

    report_dirs_raw = collect_raw.get("report_dirs", list(DEFAULT_REPORT_DIRS))
    report_dirs = (
        [str(d) for d in report_dirs_raw]
        if isinstance(report_dirs_raw, list)
        else list(DEFAULT_REPORT_DIRS)
    )

    return CollectConfig(
        build_dir=str(collect_raw.get("build_dir", DEFAULT_BUILD_DIR)),
        report_dirs=report_dirs,
        parser=str(collect_raw.get("parser", DEFAULT_PARSER)),
        coverage_column=_as_int(
            collect_raw.get("coverage_column", 2), "collect.coverage_column"
        ),
        duplicates=str(
            collect_raw.get(
                "duplicates",
                os.environ.get("JACOCO_ROLLUP_DUPLICATES", DuplicatePolicy.FIRST.value),
            )
        ).lower(),
    )


def _parse_report_config(raw: dict[str, Any]) -> ReportConfig:
    """Parse rendering configuration from raw YAML."""
    report_raw = _section(raw, "report")

    return ReportConfig(
        output_dir=str(report_raw.get("output_dir", "target/site")),
        output_name=str(report_raw.get("output_name", "jacoco")),
        format=str(
            report_raw.get("format", os.environ.get("JACOCO_ROLLUP_FORMAT", "terminal"))
        ).lower(),
        include_empty=_as_bool(
            report_raw.get("include_empty", os.environ.get("JACOCO_ROLLUP_INCLUDE_EMPTY", ""))
        ),
        locales=str(report_raw.get("locales", os.environ.get("JACOCO_ROLLUP_LOCALES", ""))),
        title=str(report_raw.get("title", "Code Test Coverage")),
    )


def load_config(root: str | Path) -> RollupConfig:
    """Load and parse the complete ``.jacoco-rollup.yml`` configuration.

    Falls back to defaults and ``JACOCO_ROLLUP_*`` environment variables
    when the YAML file is missing or incomplete.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If a setting has the wrong type.
        OSError: If the file exists but cannot be read.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILE

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)

    return RollupConfig(
        root=str(root_path),
        collect=_parse_collect_config(raw),
        report=_parse_report_config(raw),
        raw=raw,
    )


def _validate_collect_config(collect: CollectConfig) -> list[str]:
    """Validate collection settings."""
    errors: list[str] = []

    if not collect.build_dir:
        errors.append("collect.build_dir must not be empty")

    if not collect.report_dirs:
        errors.append("collect.report_dirs must list at least one directory")

    parsers = available_parsers()
    if collect.parser not in parsers:
        errors.append(
            f"collect.parser must be one of: {', '.join(parsers)} (got: {collect.parser})"
        )

    if collect.coverage_column < 0:
        errors.append(
            f"collect.coverage_column must be non-negative (got: {collect.coverage_column})"
        )

    policies = [policy.value for policy in DuplicatePolicy]
    if collect.duplicates not in policies:
        errors.append(
            f"collect.duplicates must be one of: {', '.join(policies)} "
            f"(got: {collect.duplicates})"
        )

    return errors


def _validate_report_config(report: ReportConfig) -> list[str]:
    """Validate rendering settings."""
    errors: list[str] = []

    if report.format not in _VALID_FORMATS:
        errors.append(
            f"report.format must be one of: {', '.join(_VALID_FORMATS)} (got: {report.format})"
        )

    if not report.output_name or "/" in report.output_name or "\\" in report.output_name:
        errors.append(
            f"report.output_name must be a plain directory name (got: {report.output_name!r})"
        )

    return errors


def validate_config(config: RollupConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if not config.root:
        errors.append("root is required")

    errors.extend(_validate_collect_config(config.collect))
    errors.extend(_validate_report_config(config.report))
    return errors

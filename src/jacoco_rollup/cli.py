"""jacoco-rollup CLI: top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any

import click
import yaml
from rich.logging import RichHandler
from rich.markup import escape

from jacoco_rollup import __version__
from jacoco_rollup.adapters.summary import get_parser
from jacoco_rollup.collector import DuplicatePolicy, ReportCollector
from jacoco_rollup.config import load_config, validate_config
from jacoco_rollup.project import TraversalError, load_project
from jacoco_rollup.reporters import (
    HtmlSummaryReporter,
    JSONReporter,
    RenderContext,
    reporter,
    resolve_locale,
)

logger = logging.getLogger(__name__)

_FORMATS = ("terminal", "html", "json", "all")

# Exit status when reports were rendered but some module data was lost.
_EXIT_WARNINGS = 2


def _setup_logging(*, verbose: bool) -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(
        RichHandler(console=reporter.console, show_path=False, rich_tracebacks=False)
    )
    root.setLevel(logging.INFO if verbose else logging.WARNING)


def _config_to_dict(config: Any) -> dict[str, Any]:
    """Convert RollupConfig to dictionary for display."""
    result = asdict(config)
    result.pop("raw", None)
    return result


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log progress at INFO level.")
@click.version_option(version=__version__, prog_name="jacoco-rollup")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """jacoco-rollup: aggregate per-module JaCoCo reports into one summary."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose=verbose)


@cli.command("aggregate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory (holding the root pom.xml).",
)
@click.option(
    "--output",
    "output_dir",
    default=None,
    type=click.Path(file_okay=False, resolve_path=True),
    help="Directory for the summary page and copied reports (overrides report.output_dir).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(_FORMATS),
    default=None,
    help="Output format (overrides report.format).",
)
@click.option(
    "--include-empty/--omit-empty",
    default=None,
    help="Render modules without reports as N/A rows.",
)
@click.option(
    "--duplicates",
    type=click.Choice([policy.value for policy in DuplicatePolicy]),
    default=None,
    help="How to handle modules sharing a name.",
)
@click.option(
    "--fail-on-warnings",
    is_flag=True,
    help=f"Exit with status {_EXIT_WARNINGS} when some module data could not be collected.",
)
def aggregate(
    path: str,
    output_dir: str | None,
    output_format: str | None,
    include_empty: bool | None,
    duplicates: str | None,
    *,
    fail_on_warnings: bool,
) -> None:
    """Collect module coverage reports and render the aggregated summary.

    Example:
      jacoco-rollup aggregate --path . --format html
    """
    try:
        config = load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        reporter.print_error(escape(f"Failed to load configuration: {e}"))
        raise click.Abort from e

    if output_dir is not None:
        config.report.output_dir = output_dir
    if output_format is not None:
        config.report.format = output_format
    if include_empty is not None:
        config.report.include_empty = include_empty
    if duplicates is not None:
        config.collect.duplicates = duplicates

    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(escape(error))
        raise click.Abort

    collector = ReportCollector(
        config.output_root,
        build_dir=config.collect.build_dir,
        report_dirs=config.collect.report_dirs,
        parser=get_parser(config.collect.parser, column=config.collect.coverage_column),
        duplicates=config.collect.duplicates,
    )

    try:
        project = load_project(path)
        result = collector.collect(project)
    except TraversalError as e:
        reporter.print_error(escape(f"Cannot read project tree: {e}"))
        raise click.Abort from e

    context = RenderContext(
        project_name=project.display_name,
        locale=resolve_locale(config.report.locales),
        output_name=config.report.output_name,
        title=config.report.title,
        include_empty=config.report.include_empty,
    )

    fmt = config.report.format
    if fmt in {"terminal", "all"}:
        reporter.print_coverage_summary(result, context)
    if fmt in {"html", "all"}:
        page = HtmlSummaryReporter(context).generate(config.output_parent, result)
        reporter.print_success(f"HTML summary written to {page}")
    if fmt in {"json", "all"}:
        json_path = config.output_parent / f"{config.report.output_name}.json"
        JSONReporter(context).generate(json_path, result)
        reporter.print_success(f"JSON summary written to {json_path}")

    if fail_on_warnings and result.warning_count:
        raise click.exceptions.Exit(_EXIT_WARNINGS)


@cli.group("config")
def config_group() -> None:
    """Inspect `.jacoco-rollup.yml` configuration."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
@click.option(
    "--json-output",
    "as_json",
    is_flag=True,
    help="Output as JSON instead of YAML.",
)
def config_show(path: str, *, as_json: bool) -> None:
    """Display the resolved configuration.

    Example:
      jacoco-rollup config show
      jacoco-rollup config show --json-output
    """
    try:
        config = load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        reporter.print_error(escape(f"Failed to load configuration: {e}"))
        raise click.Abort from e

    data = _config_to_dict(config)
    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False))

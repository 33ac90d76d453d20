"""Reporters for rendering the aggregated coverage summary."""

from __future__ import annotations

from jacoco_rollup.reporters.context import RenderContext, format_metric, resolve_locale
from jacoco_rollup.reporters.html import HtmlSummaryReporter
from jacoco_rollup.reporters.json_reporter import JSONReporter
from jacoco_rollup.reporters.terminal import CLIReporter, reporter

__all__ = [
    "CLIReporter",
    "HtmlSummaryReporter",
    "JSONReporter",
    "RenderContext",
    "format_metric",
    "reporter",
    "resolve_locale",
]

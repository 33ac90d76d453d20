"""Summary table parsers for coverage report pages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jacoco_rollup.adapters.summary.base import (
    ReportReadError,
    RowOutcome,
    SkipReason,
    SummaryTableParser,
    mean_of,
)
from jacoco_rollup.adapters.summary.jacoco_html import JaCoCoHtmlParser

if TYPE_CHECKING:
    from pathlib import Path

_PARSERS: dict[str, type[SummaryTableParser]] = {
    "jacoco-html": JaCoCoHtmlParser,
}

DEFAULT_PARSER = "jacoco-html"


def available_parsers() -> list[str]:
    """Return the names of all registered parsers."""
    return sorted(_PARSERS)


def get_parser(name: str = DEFAULT_PARSER, **kwargs: int) -> SummaryTableParser:
    """Instantiate a parser by name.

    Raises:
        KeyError: If no parser is registered under ``name``.
    """
    try:
        parser_cls = _PARSERS[name]
    except KeyError:
        raise KeyError(
            f"Unknown summary parser: {name} (available: {', '.join(available_parsers())})"
        ) from None
    return parser_cls(**kwargs)


def extract_metric(index_file: Path, parser: SummaryTableParser | None = None) -> float | None:
    """Return the mean coverage percentage of ``index_file`` or None."""
    if parser is None:
        parser = JaCoCoHtmlParser()
    return parser.extract(index_file)


__all__ = [
    "DEFAULT_PARSER",
    "JaCoCoHtmlParser",
    "ReportReadError",
    "RowOutcome",
    "SkipReason",
    "SummaryTableParser",
    "available_parsers",
    "extract_metric",
    "get_parser",
    "mean_of",
]

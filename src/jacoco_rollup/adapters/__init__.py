"""Adapters for third-party coverage report formats."""

from jacoco_rollup.adapters.summary import (
    JaCoCoHtmlParser,
    SummaryTableParser,
    extract_metric,
    get_parser,
)

__all__ = [
    "JaCoCoHtmlParser",
    "SummaryTableParser",
    "extract_metric",
    "get_parser",
]

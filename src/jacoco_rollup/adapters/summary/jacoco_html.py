"""JaCoCo HTML summary parser.

JaCoCo's ``index.html`` lists one row per package (or class) in its first
table. The third cell of each row holds the instruction coverage as a
percentage string such as ``87%``.
"""

from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING

from jacoco_rollup.adapters.summary.base import RowOutcome, SkipReason, SummaryTableParser

if TYPE_CHECKING:
    from bs4 import BeautifulSoup
    from bs4.element import Tag

logger = logging.getLogger(__name__)

# Instruction coverage column ("Cov.") in JaCoCo's report layout.
_DEFAULT_COVERAGE_COLUMN = 2

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_percentage(text: str) -> RowOutcome:
    if "%" not in text:
        return RowOutcome.skipped(SkipReason.NO_PERCENT)
    number = text.replace("%", "").strip()
    if not _NUMBER_RE.fullmatch(number):
        return RowOutcome.skipped(SkipReason.NOT_NUMERIC)
    value = float(number)
    if not math.isfinite(value):
        return RowOutcome.skipped(SkipReason.NOT_NUMERIC)
    return RowOutcome.parsed(value)


class JaCoCoHtmlParser(SummaryTableParser):
    """Read coverage percentages from a JaCoCo ``index.html`` page.

    The first table in the document is the summary table. Its first row is
    the header and is always skipped; every other row contributes the
    percentage found in ``column`` (0-based) when there is one.
    """

    def __init__(self, column: int = _DEFAULT_COVERAGE_COLUMN) -> None:
        self._column = column

    @property
    def name(self) -> str:
        return "jacoco-html"

    @property
    def column(self) -> int:
        return self._column

    def parse_rows(self, document: BeautifulSoup) -> list[RowOutcome]:
        table = document.find("table")
        if table is None:
            return []
        rows = table.find_all("tr")
        return [self._parse_row(row) for row in rows[1:]]

    def _parse_row(self, row: Tag) -> RowOutcome:
        cells = row.find_all("td")
        if len(cells) <= self._column:
            return RowOutcome.skipped(SkipReason.MISSING_CELL)
        return _parse_percentage(cells[self._column].get_text(" ", strip=True))

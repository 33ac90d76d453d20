"""Base classes and data models for summary table parsers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class SkipReason(Enum):
    """Why a data row did not contribute a percentage."""

    MISSING_CELL = "missing_cell"
    NO_PERCENT = "no_percent"
    NOT_NUMERIC = "not_numeric"


@dataclass(frozen=True)
class RowOutcome:
    """Result of reading one data row of a summary table."""

    value: float | None = None
    reason: SkipReason | None = None

    @property
    def is_parsed(self) -> bool:
        """Return True if the row yielded a percentage."""
        return self.value is not None

    @classmethod
    def parsed(cls, value: float) -> RowOutcome:
        return cls(value=value)

    @classmethod
    def skipped(cls, reason: SkipReason) -> RowOutcome:
        return cls(reason=reason)


def mean_of(outcomes: list[RowOutcome]) -> float | None:
    """Return the unweighted mean of parsed rows, or None if none parsed."""
    values = [outcome.value for outcome in outcomes if outcome.value is not None]
    if not values:
        return None
    return sum(values) / len(values)


class ReportReadError(Exception):
    """Raised when a report page exists but cannot be read or decoded."""


class SummaryTableParser(ABC):
    """Abstract base class for coverage summary page parsers.

    Each concrete parser knows the layout of one report format and turns its
    summary table into per-row outcomes. Averaging and error handling are
    shared here so every format behaves the same way on broken input.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Parser identifier (e.g. 'jacoco-html')."""

    @abstractmethod
    def parse_rows(self, document: BeautifulSoup) -> list[RowOutcome]:
        """Return one outcome per data row of the summary table.

        Args:
            document: Parsed report page.

        Returns:
            Outcomes in row order; empty when the page has no summary table.
        """

    def load(self, index_file: Path) -> BeautifulSoup:
        """Read and parse a report page.

        Raises:
            ReportReadError: If the page cannot be read or is not UTF-8.
        """
        try:
            text = index_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ReportReadError(f"Failed to read coverage report {index_file}: {e}") from e
        return BeautifulSoup(text, "html.parser")

    def read_metric(self, index_file: Path) -> float | None:
        """Return the mean coverage percentage of a report page.

        Returns None when the table holds no parsable percentage.

        Raises:
            ReportReadError: If the page cannot be read.
        """
        outcomes = self.parse_rows(self.load(index_file))
        metric = mean_of(outcomes)
        if metric is None:
            logger.debug("No coverage percentage found in %s", index_file)
        return metric

    def extract(self, index_file: Path) -> float | None:
        """Like :meth:`read_metric`, but an unreadable page also yields None."""
        try:
            return self.read_metric(index_file)
        except ReportReadError as e:
            logger.warning("%s", e)
            return None

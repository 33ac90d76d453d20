"""Coverage report models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class ReportEntry:
    """A single JaCoCo report directory found for a module."""

    source_directory: Path
    """Directory holding the report (its name tells the kind, e.g. ``jacoco-ut``)."""

    metric: float | None = None
    """Mean coverage percentage (0.0 to 100.0), or None when not computable."""

    copied_to: Path | None = None
    """Location of the copy inside the unified output tree."""

    @property
    def kind(self) -> str:
        """Report kind, taken from the directory name."""
        return self.source_directory.name


@dataclass(eq=False)
class ModuleCoverageRecord:
    """Coverage reports discovered for one build module.

    Identity is the module name only, so records can be deduplicated in a
    set regardless of which reports they carry.
    """

    module_name: str
    reports: list[ReportEntry] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleCoverageRecord):
            return NotImplemented
        return self.module_name == other.module_name

    def __hash__(self) -> int:
        return hash(self.module_name)

    def add_report(self, entry: ReportEntry) -> None:
        """Append a discovered report."""
        self.reports.append(entry)

    @property
    def has_reports(self) -> bool:
        """Return True if at least one report was found for this module."""
        return bool(self.reports)


@dataclass(frozen=True)
class SummaryRow:
    """One rendered line of the aggregated summary."""

    module_name: str
    report_kind: str
    """Report directory name, empty for modules without reports."""

    metric: float | None
    link: str = ""
    """Link to the copied ``index.html``, relative to the summary page."""


@dataclass
class CollectionResult:
    """Outcome of a collection run."""

    records: list[ModuleCoverageRecord] = field(default_factory=list)
    """Deduplicated records in traversal order."""

    warnings: list[str] = field(default_factory=list)
    """Per-module problems that were logged and skipped."""

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def rows(self, *, output_name: str = "jacoco", include_empty: bool = False) -> list[SummaryRow]:
        """Flatten records into summary rows sorted by module then report kind.

        Args:
            output_name: Name of the unified output directory, used to build links.
            include_empty: Emit an ``N/A`` row for modules without reports.
        """
        rows: list[SummaryRow] = []
        for record in sorted(self.records, key=lambda r: r.module_name):
            if not record.has_reports:
                if include_empty:
                    rows.append(SummaryRow(record.module_name, "", None))
                continue
            for entry in sorted(record.reports, key=lambda e: e.kind):
                link = ""
                if entry.copied_to is not None:
                    copy_name = entry.copied_to.name
                    link = f"{output_name}/{record.module_name}/{copy_name}/index.html"
                rows.append(SummaryRow(record.module_name, entry.kind, entry.metric, link))
        return rows

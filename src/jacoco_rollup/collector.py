"""Report collector: walk a project tree and gather per-module JaCoCo reports."""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from typing import TYPE_CHECKING

from jacoco_rollup.adapters.summary import JaCoCoHtmlParser, ReportReadError
from jacoco_rollup.models.coverage import CollectionResult, ModuleCoverageRecord, ReportEntry

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from jacoco_rollup.adapters.summary import SummaryTableParser
    from jacoco_rollup.project.base import ProjectNode

logger = logging.getLogger(__name__)

DEFAULT_BUILD_DIR = "target"

# Integration-test reports first, then unit-test reports.
DEFAULT_REPORT_DIRS: tuple[str, ...] = (
    "target/site/jacoco-it",
    "target/site/jacoco-ut",
)

INDEX_FILE = "index.html"


class DuplicatePolicy(Enum):
    """What to do when two modules share the same identifier."""

    FIRST = "first"
    """Keep the first record seen, drop the others."""

    LAST = "last"
    """Keep the last record seen."""

    MERGE = "merge"
    """Append later reports to the first record."""


def copy_report_tree(source: Path, destination: Path) -> None:
    """Copy ``source`` to ``destination``, replacing anything already there."""
    if destination.exists():
        shutil.rmtree(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, destination)


class ReportCollector:
    """Collect JaCoCo reports from every leaf module of a project tree.

    Reports are copied to ``<output_root>/<module>/<report-dir-name>`` so the
    summary page can link to them from one place.
    """

    def __init__(
        self,
        output_root: Path,
        *,
        build_dir: str = DEFAULT_BUILD_DIR,
        report_dirs: Sequence[str] = DEFAULT_REPORT_DIRS,
        parser: SummaryTableParser | None = None,
        duplicates: DuplicatePolicy | str = DuplicatePolicy.FIRST,
    ) -> None:
        """Initialize the collector.

        Args:
            output_root: Unified directory that receives the copied reports.
            build_dir: Build output directory relative to each module; modules
                without it are treated as unbuilt.
            report_dirs: Report directories relative to each module, in the
                order they are looked up.
            parser: Summary table parser, defaults to JaCoCo HTML.
            duplicates: Policy for modules sharing an identifier.
        """
        self._output_root = output_root
        self._build_dir = build_dir
        self._report_dirs = tuple(report_dirs)
        self._parser = parser or JaCoCoHtmlParser()
        self._duplicates = DuplicatePolicy(duplicates)
        self._claimed: set[Path] = set()

    @property
    def output_root(self) -> Path:
        return self._output_root

    def collect(self, project: ProjectNode | None) -> CollectionResult:
        """Walk ``project`` and return the deduplicated module records.

        Raises:
            TraversalError: If the project tree cannot be enumerated.
        """
        result = CollectionResult()
        if project is None:
            return result

        self._claimed = set()
        found: list[ModuleCoverageRecord] = []
        self._visit(project, found, result.warnings)
        result.records = self._deduplicate(found, result.warnings)
        logger.info(
            "Collected %d module(s) with %d warning(s)", len(result.records), len(result.warnings)
        )
        return result

    def _visit(
        self,
        project: ProjectNode,
        found: list[ModuleCoverageRecord],
        warnings: list[str],
    ) -> None:
        if project.is_aggregator():
            for child in project.child_projects():
                self._visit(child, found, warnings)
            return

        # A dropped duplicate must not overwrite the kept module's copies.
        if self._duplicates is DuplicatePolicy.FIRST and any(
            r.module_name == project.module_identifier() for r in found
        ):
            self._warn_duplicate(project.module_identifier(), warnings)
            return

        record = self._collect_module(project, warnings)
        if record is not None:
            found.append(record)

    def _collect_module(
        self, project: ProjectNode, warnings: list[str]
    ) -> ModuleCoverageRecord | None:
        module_name = project.module_identifier()
        base_dir = project.base_directory()
        if not (base_dir / self._build_dir).is_dir():
            logger.debug("Module %s has no %s directory, skipping", module_name, self._build_dir)
            return None

        record = ModuleCoverageRecord(module_name=module_name)
        for rel in self._report_dirs:
            report_dir = base_dir / rel
            if not report_dir.is_dir():
                continue
            entry = self._collect_report(module_name, report_dir, warnings)
            if entry is not None:
                record.add_report(entry)
        return record

    def _collect_report(
        self, module_name: str, report_dir: Path, warnings: list[str]
    ) -> ReportEntry | None:
        index_file = report_dir / INDEX_FILE
        metric = None
        if not index_file.is_file():
            message = f"{module_name}: {report_dir.name} has no {INDEX_FILE}"
            logger.warning(message)
            warnings.append(message)
        else:
            try:
                metric = self._parser.read_metric(index_file)
            except ReportReadError as e:
                message = f"{module_name}: {e}"
                logger.warning(message)
                warnings.append(message)

        destination = self._destination(module_name, report_dir.name)
        try:
            copy_report_tree(report_dir, destination)
        except (OSError, shutil.Error) as e:
            message = f"{module_name}: failed to copy {report_dir} to {destination}: {e}"
            logger.warning(message)
            warnings.append(message)
            return None

        self._claimed.add(destination)
        return ReportEntry(source_directory=report_dir, metric=metric, copied_to=destination)

    def _destination(self, module_name: str, kind: str) -> Path:
        """Return a copy destination no earlier report of this run is using.

        Under the ``merge`` policy two same-named modules can both carry a
        ``jacoco-ut`` report; the later one goes to ``jacoco-ut-2`` and so on.
        """
        destination = self._output_root / module_name / kind
        suffix = 2
        while self._duplicates is DuplicatePolicy.MERGE and destination in self._claimed:
            destination = self._output_root / module_name / f"{kind}-{suffix}"
            suffix += 1
        return destination

    def _discard_copies(
        self,
        dropped: ModuleCoverageRecord,
        replacement: ModuleCoverageRecord,
        warnings: list[str],
    ) -> None:
        """Remove copies of ``dropped`` that ``replacement`` did not overwrite."""
        keep = {entry.copied_to for entry in replacement.reports}
        for entry in dropped.reports:
            if entry.copied_to is None or entry.copied_to in keep:
                continue
            self._claimed.discard(entry.copied_to)
            try:
                shutil.rmtree(entry.copied_to)
            except OSError as e:
                message = f"{dropped.module_name}: failed to remove {entry.copied_to}: {e}"
                logger.warning(message)
                warnings.append(message)

    def _deduplicate(
        self, records: list[ModuleCoverageRecord], warnings: list[str]
    ) -> list[ModuleCoverageRecord]:
        kept: dict[str, ModuleCoverageRecord] = {}
        for record in records:
            existing = kept.get(record.module_name)
            if existing is None:
                kept[record.module_name] = record
                continue

            self._warn_duplicate(record.module_name, warnings)
            if self._duplicates is DuplicatePolicy.LAST:
                self._discard_copies(existing, record, warnings)
                kept[record.module_name] = record
            elif self._duplicates is DuplicatePolicy.MERGE:
                for entry in record.reports:
                    existing.add_report(entry)
        return list(kept.values())

    def _warn_duplicate(self, module_name: str, warnings: list[str]) -> None:
        message = f"Duplicate module name {module_name!r} ({self._duplicates.value})"
        logger.warning(message)
        warnings.append(message)

"""Data models for jacoco-rollup."""

from jacoco_rollup.models.coverage import (
    CollectionResult,
    ModuleCoverageRecord,
    ReportEntry,
    SummaryRow,
)

__all__ = [
    "CollectionResult",
    "ModuleCoverageRecord",
    "ReportEntry",
    "SummaryRow",
]

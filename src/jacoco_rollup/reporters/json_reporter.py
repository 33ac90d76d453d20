"""JSON reporter: machine-readable aggregated coverage summary."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from jacoco_rollup.models.coverage import CollectionResult
    from jacoco_rollup.reporters.context import RenderContext

logger = logging.getLogger(__name__)


class JSONReporter:
    """Serialize summary rows and collection warnings into one JSON document."""

    def __init__(self, context: RenderContext) -> None:
        self._context = context

    def generate(self, output_path: Path, result: CollectionResult) -> Path:
        """Write a JSON report file.

        Args:
            output_path: Path to write the JSON file.
            result: Collection outcome to serialize.

        Returns:
            The path to the generated JSON file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate_string(result), encoding="utf-8")
        logger.info("JSON report written to %s", output_path)
        return output_path

    def generate_string(self, result: CollectionResult) -> str:
        """Return the JSON report as a string."""
        return json.dumps(self._build_report(result), indent=2, ensure_ascii=False)

    def _build_report(self, result: CollectionResult) -> dict[str, Any]:
        ctx = self._context
        rows = result.rows(output_name=ctx.output_name, include_empty=ctx.include_empty)
        return {
            "tool": "jacoco-rollup",
            "project": ctx.project_name,
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "modules": [
                {
                    "module": row.module_name,
                    "report": row.report_kind,
                    "metric": row.metric,
                    "link": row.link,
                }
                for row in rows
            ],
            "warnings": list(result.warnings),
        }

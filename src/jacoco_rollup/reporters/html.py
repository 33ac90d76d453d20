"""HTML summary reporter.

Writes a single page next to the unified report directory with one table row
per module report, each metric linking to the copied JaCoCo ``index.html``.
"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING

from jacoco_rollup.reporters.context import format_metric

if TYPE_CHECKING:
    from pathlib import Path

    from jacoco_rollup.models.coverage import CollectionResult, SummaryRow
    from jacoco_rollup.reporters.context import RenderContext

logger = logging.getLogger(__name__)


class HtmlSummaryReporter:
    """Render the aggregated coverage table as a standalone HTML page."""

    def __init__(self, context: RenderContext) -> None:
        self._context = context

    def generate(self, output_dir: Path, result: CollectionResult) -> Path:
        """Write ``<output_dir>/<output_name>.html`` and return its path."""
        page = output_dir / f"{self._context.output_name}.html"
        page.parent.mkdir(parents=True, exist_ok=True)
        page.write_text(self.render(result), encoding="utf-8")
        logger.info("HTML summary written to %s", page)
        return page

    def render(self, result: CollectionResult) -> str:
        """Return the summary page as a string."""
        ctx = self._context
        rows = result.rows(output_name=ctx.output_name, include_empty=ctx.include_empty)
        body_rows = "\n".join(self._render_row(row) for row in rows)
        if not rows:
            body_rows = '<tr><td colspan="3">No coverage reports found</td></tr>'
        warnings = ""
        if result.warning_count:
            warnings = (
                f'<p class="warnings">{result.warning_count} problem(s) while collecting '
                "reports; some modules may be missing.</p>"
            )

        return f"""<!DOCTYPE html>
<html lang="{html.escape(ctx.language)}">
<head>
<meta charset="UTF-8">
<title>{html.escape(ctx.title)}</title>
</head>
<body>
<div class="section">
<h1>{html.escape(ctx.heading)}</h1>
<div class="section">
<h2>Test Code Coverage</h2>
{warnings}
<table>
<tr><th>Module</th><th>Report</th><th>Metric</th></tr>
{body_rows}
</table>
</div>
</div>
</body>
</html>
"""

    def _render_row(self, row: SummaryRow) -> str:
        metric = html.escape(format_metric(row.metric))
        if row.link:
            metric = f'<a href="{html.escape(row.link)}">{metric}</a>'
        return (
            f"<tr><td>{html.escape(row.module_name)}</td>"
            f"<td>{html.escape(row.report_kind)}</td>"
            f"<td>{metric}</td></tr>"
        )

"""Tests for the JaCoCo HTML summary parser (adapters/summary/jacoco_html.py).

Covers row averaging, header skipping, skipped-row reasons, and tolerance
of unreadable or table-less pages.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from jacoco_rollup.adapters.summary import (
    JaCoCoHtmlParser,
    ReportReadError,
    RowOutcome,
    SkipReason,
    available_parsers,
    extract_metric,
    get_parser,
    mean_of,
)
from jacoco_rollup.adapters.summary.jacoco_html import _parse_percentage


def _summary_html(coverage_cells: list[str], *, extra_tables: str = "") -> str:
    rows = "\n".join(
        f'<tr><td>pkg{i}</td><td class="bar">{i} of 10</td><td class="ctr2">{cell}</td>'
        f"<td>x</td></tr>"
        for i, cell in enumerate(coverage_cells)
    )
    return f"""<html><body>
<table class="coverage">
<thead><tr><td>Element</td><td>Missed Instructions</td><td>Cov.</td><td>Missed</td></tr></thead>
<tbody>
{rows}
</tbody>
</table>
{extra_tables}
</body></html>"""


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "index.html"
    path.write_text(content, encoding="utf-8")
    return path


# ── Sample JaCoCo page ───────────────────────────────────────────

_JACOCO_INDEX = """\
<?xml version="1.0" encoding="UTF-8"?><!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" \
"http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd"><html xmlns="http://www.w3.org/1999/xhtml" \
lang="en"><head><title>core</title></head><body><h1>core</h1>
<table class="coverage" cellspacing="0" id="coveragetable">
<thead><tr><td class="sortable" id="a">Element</td><td class="down sortable bar" id="b">Missed \
Instructions</td><td class="sortable ctr2" id="c">Cov.</td><td class="sortable bar" id="d">Missed \
Branches</td><td class="sortable ctr2" id="e">Cov.</td></tr></thead>
<tfoot><tr><td>Total</td><td class="bar">30 of 200</td><td class="ctr2">85%</td>\
<td class="bar">4 of 20</td><td class="ctr2">80%</td></tr></tfoot>
<tbody>
<tr><td id="a0"><a href="com.example.core/index.html" class="el_package">com.example.core</a></td>\
<td class="bar" id="b0"><img src="jacoco-resources/redbar.gif" width="12" height="10" title="20" \
alt="20"/></td><td class="ctr2" id="c0">80%</td><td class="bar" id="d0">n/a</td>\
<td class="ctr2" id="e0">n/a</td></tr>
<tr><td id="a1"><a href="com.example.util/index.html" class="el_package">com.example.util</a></td>\
<td class="bar" id="b1"><img src="jacoco-resources/redbar.gif" width="4" height="10" title="10" \
alt="10"/></td><td class="ctr2" id="c1">90%</td><td class="bar" id="d1">n/a</td>\
<td class="ctr2" id="e1">n/a</td></tr>
</tbody></table>
<div class="footer"><span class="right">Created with JaCoCo</span></div></body></html>
"""


# ── Identity ─────────────────────────────────────────────────────


class TestJaCoCoHtmlParserIdentity:
    def test_name(self) -> None:
        assert JaCoCoHtmlParser().name == "jacoco-html"

    def test_default_column(self) -> None:
        assert JaCoCoHtmlParser().column == 2

    def test_registry(self) -> None:
        assert "jacoco-html" in available_parsers()
        parser = get_parser("jacoco-html", column=4)
        assert isinstance(parser, JaCoCoHtmlParser)
        assert parser.column == 4

    def test_registry_unknown(self) -> None:
        with pytest.raises(KeyError, match="Unknown summary parser"):
            get_parser("cobertura")


# ── Percentage parsing ───────────────────────────────────────────


class TestParsePercentage:
    def test_plain(self) -> None:
        assert _parse_percentage("87.5%") == RowOutcome.parsed(87.5)

    def test_space_before_percent(self) -> None:
        assert _parse_percentage("87 %").value == 87.0

    def test_no_percent(self) -> None:
        assert _parse_percentage("N/A").reason is SkipReason.NO_PERCENT

    def test_not_numeric(self) -> None:
        assert _parse_percentage("bad%").reason is SkipReason.NOT_NUMERIC

    def test_comma_decimal_not_numeric(self) -> None:
        assert _parse_percentage("87,5%").reason is SkipReason.NOT_NUMERIC

    def test_empty_after_strip(self) -> None:
        assert _parse_percentage("%").reason is SkipReason.NOT_NUMERIC

    def test_non_finite_rejected(self) -> None:
        assert _parse_percentage("1e999%").reason is SkipReason.NOT_NUMERIC


# ── Metric extraction ────────────────────────────────────────────


class TestExtract:
    def test_real_jacoco_page(self, tmp_path: Path) -> None:
        # Header skipped; the tfoot total row is a data row like any other.
        path = _write(tmp_path, _JACOCO_INDEX)
        assert JaCoCoHtmlParser().extract(path) == pytest.approx(85.0)

    def test_skips_unparsable_row(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _summary_html(["80%", "90%", "bad"]))
        assert extract_metric(path) == pytest.approx(85.0)

    def test_only_non_percent_row_is_absent(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _summary_html(["N/A"]))
        assert extract_metric(path) is None

    def test_single_data_row(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _summary_html(["42%"]))
        assert extract_metric(path) == pytest.approx(42.0)

    def test_zero_percent_is_a_value(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _summary_html(["0%"]))
        assert extract_metric(path) == 0.0

    def test_header_only_is_absent(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _summary_html([]))
        assert extract_metric(path) is None

    def test_header_row_skipped_even_with_percent(self, tmp_path: Path) -> None:
        html = (
            "<table><tr><td>a</td><td>b</td><td>10%</td></tr>"
            "<tr><td>a</td><td>b</td><td>50%</td></tr></table>"
        )
        assert extract_metric(_write(tmp_path, html)) == pytest.approx(50.0)

    def test_no_table_is_absent(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "<html><body><p>No coverage</p></body></html>")
        assert extract_metric(path) is None

    def test_only_first_table_used(self, tmp_path: Path) -> None:
        second = "<table><tr><td>h</td></tr><tr><td>a</td><td>b</td><td>0%</td></tr></table>"
        path = _write(tmp_path, _summary_html(["60%"], extra_tables=second))
        assert extract_metric(path) == pytest.approx(60.0)

    def test_short_rows_skipped(self, tmp_path: Path) -> None:
        html = (
            "<table><tr><th>Element</th></tr>"
            "<tr><td>only one cell 50%</td></tr>"
            "<tr><td>a</td><td>b</td><td>70%</td></tr></table>"
        )
        assert extract_metric(_write(tmp_path, html)) == pytest.approx(70.0)

    def test_extra_columns_do_not_change_result(self, tmp_path: Path) -> None:
        narrow = _write(tmp_path, _summary_html(["30%", "50%"]))
        expected = extract_metric(narrow)
        wide_rows = "".join(
            f"<tr><td>p</td><td>b</td><td>{cell}</td><td>99%</td><td>1%</td><td>z</td></tr>"
            for cell in ("30%", "50%")
        )
        wide_dir = tmp_path / "wide"
        wide_dir.mkdir()
        wide = _write(wide_dir, f"<table><tr><td>h</td></tr>{wide_rows}</table>")
        assert extract_metric(wide) == expected == pytest.approx(40.0)

    def test_row_order_does_not_change_result(self, tmp_path: Path) -> None:
        first = tmp_path / "a"
        second = tmp_path / "b"
        first.mkdir()
        second.mkdir()
        a = extract_metric(_write(first, _summary_html(["10%", "20%", "60%"])))
        b = extract_metric(_write(second, _summary_html(["60%", "10%", "20%"])))
        assert a == pytest.approx(b)

    def test_custom_column(self, tmp_path: Path) -> None:
        html = "<table><tr><td>h</td></tr><tr><td>a</td><td>b</td><td>c</td><td>25%</td></tr></table>"
        assert JaCoCoHtmlParser(column=3).extract(_write(tmp_path, html)) == pytest.approx(25.0)

    def test_missing_file_is_absent(self, tmp_path: Path) -> None:
        assert extract_metric(tmp_path / "missing" / "index.html") is None

    def test_undecodable_file_is_absent(self, tmp_path: Path) -> None:
        path = tmp_path / "index.html"
        path.write_bytes(b"\xff\xfe<table>\x80\x81</table>")
        assert extract_metric(path) is None

    def test_directory_instead_of_file_is_absent(self, tmp_path: Path) -> None:
        (tmp_path / "index.html").mkdir()
        assert extract_metric(tmp_path / "index.html") is None

    def test_read_metric_raises_on_unreadable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "index.html"
        path.write_bytes(b"\xff\xfe<table>\x80</table>")
        with pytest.raises(ReportReadError, match="Failed to read coverage report"):
            JaCoCoHtmlParser().read_metric(path)

    def test_read_metric_raises_on_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ReportReadError):
            JaCoCoHtmlParser().read_metric(tmp_path / "index.html")


# ── Row outcomes ─────────────────────────────────────────────────


class TestParseRows:
    def test_outcomes_per_data_row(self) -> None:
        document = BeautifulSoup(_summary_html(["80%", "N/A", "bad%"]), "html.parser")
        outcomes = JaCoCoHtmlParser().parse_rows(document)
        assert outcomes == [
            RowOutcome.parsed(80.0),
            RowOutcome.skipped(SkipReason.NO_PERCENT),
            RowOutcome.skipped(SkipReason.NOT_NUMERIC),
        ]
        assert [o.is_parsed for o in outcomes] == [True, False, False]

    def test_no_table_no_outcomes(self) -> None:
        document = BeautifulSoup("<p>empty</p>", "html.parser")
        assert JaCoCoHtmlParser().parse_rows(document) == []

    def test_mean_of_ignores_skipped(self) -> None:
        outcomes = [
            RowOutcome.parsed(10.0),
            RowOutcome.skipped(SkipReason.MISSING_CELL),
            RowOutcome.parsed(30.0),
        ]
        assert mean_of(outcomes) == pytest.approx(20.0)

    def test_mean_of_nothing_parsed(self) -> None:
        assert mean_of([RowOutcome.skipped(SkipReason.NO_PERCENT)]) is None
        assert mean_of([]) is None

# File: tests/test_reports.py
from __future__ import annotations

import csv
import io
import json

import click
import pytest

from seo_scout.aggregator import PageError, PageResult, RunResult, summarize
from seo_scout.checks import run_checks
from seo_scout.comparator import (
    FileChange,
    RevisionComparison,
    RevisionSummary,
    compare_runs,
)
from seo_scout.config import ChecksConfig
from seo_scout.crawler.models import AuditResult, PageMetadata
from seo_scout.errors import UnknownFormatError
from seo_scout.report import REPORTERS, get_reporter, save_report
from seo_scout.report.console import summary_table
from seo_scout.report.csv_report import PAGE_COLUMNS, render_csv
from seo_scout.report.html_report import group_errors, render_html
from seo_scout.report.json_report import render_json


@pytest.fixture()
def run(good_meta) -> RunResult:
    description_with_comma = 'Widgets, gadgets and "things"'
    ok = PageResult(
        url="https://www.example.com/",
        meta=good_meta,
        lastmod="2024-05-01",
        checks=run_checks(good_meta),
        structured_data=[{"type": "json-ld", "schema": "Organization", "data": {}}],
        audit=AuditResult(url="https://www.example.com/", scores={"seo": {"score": 0.92, "title": "SEO"}}),
    )
    partial_meta = PageMetadata(title="<script>alert(1)</script>", description=description_with_comma)
    partial = PageResult(url="https://www.example.com/partial", meta=partial_meta, checks=run_checks(partial_meta))
    failed = PageResult(
        url="https://www.example.com/down",
        meta=PageMetadata.failure("HTTP 503: Service Unavailable", 503),
        lastmod="2024-04-01",
    )
    result = RunResult(
        url="https://www.example.com",
        timestamp="2024-05-01T10:00:00.000Z",
        pages=[ok, partial, failed],
        errors=[PageError(url=failed.url, status=503, message="HTTP 503: Service Unavailable")],
        duration_ms=1234,
    )
    result.summary = summarize(result.pages)
    return result


def test_registry_and_unknown_format():
    assert set(REPORTERS) == {"console", "json", "csv", "html"}
    assert get_reporter("csv") is render_csv
    with pytest.raises(UnknownFormatError, match="Unknown format: pdf"):
        get_reporter("pdf")


def test_json_is_exact_serialization(run):
    assert json.loads(render_json(run)) == json.loads(json.dumps(run.to_dict()))


def test_csv_rows(run):
    rows = list(csv.reader(io.StringIO(render_csv(run))))

    assert tuple(rows[0]) == PAGE_COLUMNS
    assert len(rows) == 4
    ok, partial, failed = rows[1:]
    assert ok[0] == "https://www.example.com/"
    assert ok[9] == "Yes"
    assert ok[10:13] == ["0", "0", "2024-05-01"]
    assert partial[3] == 'Widgets, gadgets and "things"'
    assert partial[9] == "No"
    assert failed == [
        "https://www.example.com/down",
        "ERROR",
        "",
        "HTTP 503: Service Unavailable",
        "", "", "", "", "", "",
        "1",
        "0",
        "2024-04-01",
    ]


def test_csv_quotes_fields_with_commas_and_quotes(run):
    text = render_csv(run)
    assert '"Widgets, gadgets and ""things"""' in text


def test_console_run_report(run):
    text = click.unstyle(REPORTERS["console"](run, None))
    assert "Site: https://www.example.com" in text
    assert "Pages with Title" in text
    assert "1 pages failed" in text
    assert "[HTTP 503] https://www.example.com/down" in text
    assert "Structured Data: Organization" in text
    assert "Audit scores: seo: 92" in text
    assert "Overall Assessment" in text


def test_html_run_report_escapes_and_groups(run):
    html = render_html(run)
    assert html.startswith("<!DOCTYPE html>")
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<script>alert(1)</script>" not in html
    assert "HTTP 503" in html
    assert "Organization" in html
    assert "NOT SET" not in html.split("Page Details")[0]
    assert "Pages Analyzed:</strong> 3" in html


def test_group_errors_sorted_with_badges():
    errors = [
        PageError("https://a/1", 404, "HTTP 404: Not Found"),
        PageError("https://a/2", None, "timeout of 10s exceeded"),
        PageError("https://a/3", 500, "HTTP 500: Internal Server Error"),
        PageError("https://a/4", 404, "HTTP 404: Not Found"),
    ]
    groups = group_errors(errors)
    assert [(label, badge, len(items)) for label, badge, items in groups] == [
        ("Connection Error", "badge-error", 1),
        ("HTTP 404", "badge-warning", 2),
        ("HTTP 500", "badge-error", 1),
    ]


def test_comparison_in_every_format(run):
    second = RunResult(
        url="https://staging.example.com",
        timestamp=run.timestamp,
        pages=[
            PageResult(url="https://staging.example.com/", meta=PageMetadata(title="Changed title")),
            PageResult(url="https://staging.example.com/new", meta=PageMetadata()),
        ],
    )
    comparison = compare_runs(run, second)

    console = click.unstyle(REPORTERS["console"](comparison, None))
    assert "Environment 2: https://staging.example.com" in console
    assert "Page added in second environment" in console

    rows = list(csv.reader(io.StringIO(render_csv(comparison))))
    assert rows[0] == ["URL", "Status", "Field", "Before", "After", "Score", "Verdict"]
    assert ["https://www.example.com/", "changed", "description"] == rows[2][:3]
    assert rows[2][4] == "NOT SET"

    html = render_html(comparison)
    assert "SEO Environment Comparison" in html
    assert "NOT SET" in html
    assert json.loads(render_json(comparison))["summary"]["added"] == 1


def test_revision_comparison_in_every_format(run):
    revision = RevisionComparison(
        timestamp=run.timestamp,
        revision1="HEAD~1",
        revision2="HEAD",
        environment="staging",
        url="https://staging.example.com",
        changed_files=["templates/base.html.twig"],
        changes=[FileChange("templates/base.html.twig", "template", "+<title>New</title>", 1, 0)],
        summary=RevisionSummary(files_changed=1, additions=1, deletions=0),
        current_state=run,
    )

    console = click.unstyle(REPORTERS["console"](revision, None))
    assert "Revisions: HEAD~1 → HEAD" in console
    assert "templates/base.html.twig [template] +1 -0" in console

    assert render_csv(revision).splitlines() == [
        "File,Change Type,Additions,Deletions",
        "templates/base.html.twig,template,1,0",
    ]
    html = render_html(revision)
    assert "&lt;title&gt;New&lt;/title&gt;" in html
    assert "Current SEO State" in html
    assert json.loads(render_json(revision))["current_state"]["url"] == "https://www.example.com"


def test_save_report_creates_parents(tmp_path):
    path = save_report("hello", tmp_path / "nested" / "dir" / "report.txt")
    assert path.read_text(encoding="utf-8") == "hello"


def test_summary_table_is_boxed(run):
    lines = [click.unstyle(line) for line in summary_table(run.summary, ChecksConfig())]

    assert lines[0].startswith("┌") and lines[-1].startswith("└")
    header = next(line for line in lines if "Metric" in line)
    assert "Value" in header and "Status" in header
    title_row = next(line for line in lines if "Pages with Title" in line)
    assert "2/3" in title_row
    assert "✗ Poor" in title_row
    assert any("Avg Title Length" in line for line in lines)

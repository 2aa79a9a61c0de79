# File: seo_scout/report/csv_report.py
"""seo_scout.report.csv_report: flat CSV export, one row per page (or per change)."""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, List, Sequence

from seo_scout.aggregator import PageResult, RunResult
from seo_scout.comparator import NOT_SET, ComparisonResult, RevisionComparison

PAGE_COLUMNS: Sequence[str] = (
    "URL",
    "Title",
    "Title Length",
    "Meta Description",
    "Description Length",
    "OG Title",
    "OG Description",
    "Twitter Card",
    "Canonical",
    "Has Structured Data",
    "Errors",
    "Warnings",
    "Last Modified",
)

COMPARISON_COLUMNS: Sequence[str] = ("URL", "Status", "Field", "Before", "After", "Score", "Verdict")

REVISION_COLUMNS: Sequence[str] = ("File", "Change Type", "Additions", "Deletions")


def _page_row(page: PageResult) -> List[Any]:
    meta = page.meta
    if meta.error:
        return [page.url, "ERROR", "", meta.message or "", "", "", "", "", "", "", 1, 0, page.lastmod or ""]

    checks = page.checks
    return [
        page.url,
        meta.title or "",
        len(meta.title) if meta.title else 0,
        meta.description or "",
        len(meta.description) if meta.description else 0,
        meta.og_title or "",
        meta.og_description or "",
        meta.twitter_card or "",
        meta.canonical or "",
        "Yes" if page.structured_data else "No",
        len(checks.errors) if checks else 0,
        len(checks.warnings) if checks else 0,
        page.lastmod or "",
    ]


def _comparison_rows(comparison: ComparisonResult) -> Iterable[List[Any]]:
    for page in comparison.pages:
        verdict = page.verdict.value if page.verdict else ""
        if not page.changes:
            yield [page.url, page.status.value, "", "", "", "", verdict]
            continue
        for change in page.changes:
            yield [
                page.url,
                page.status.value,
                change.field,
                change.before if change.before is not None else NOT_SET,
                change.after if change.after is not None else NOT_SET,
                f"{page.score:g}",
                verdict,
            ]


def _write(header: Sequence[str], rows: Iterable[List[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def render_csv(result: Any, config: Any = None) -> str:
    """CSV text for *result*; quoting follows RFC 4180 (fields with ``,`` ``"`` or newlines)."""
    if isinstance(result, ComparisonResult):
        return _write(COMPARISON_COLUMNS, _comparison_rows(result))
    if isinstance(result, RevisionComparison):
        rows = ([c.file, c.change_type, c.additions, c.deletions] for c in result.changes)
        return _write(REVISION_COLUMNS, rows)
    if isinstance(result, RunResult):
        return _write(PAGE_COLUMNS, (_page_row(page) for page in result.pages))
    raise TypeError(f"Cannot render {type(result).__name__} as CSV")


__all__ = ["COMPARISON_COLUMNS", "PAGE_COLUMNS", "REVISION_COLUMNS", "render_csv"]

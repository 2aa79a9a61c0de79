# File: seo_scout/report/console.py
"""seo_scout.report.console: colored terminal rendering.

Text lines are styled with click.style; the summary table is a rich Table
rendered to ANSI text so it can be joined with the other lines.
"""

from __future__ import annotations

import io
from functools import partial
from typing import List, Optional, Sequence

import click
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from seo_scout.aggregator import PageResult, RunResult, Summary, recommendations, seo_score
from seo_scout.comparator import NOT_SET, ComparisonResult, PageComparison, PageStatus, RevisionComparison
from seo_scout.config import ChecksConfig
from seo_scout.utils import truncate

RULE = "═" * 80
DETAIL_PAGES = 5
DETAIL_CHANGES = 10
TABLE_WIDTH = 100


def _status(value: int, total: int, threshold: float = 0.95) -> Text:
    ratio = value / total if total else 0.0
    if ratio >= threshold:
        return Text("✓ Good", style="green")
    if ratio >= threshold * 0.8:
        return Text("⚠ Fair", style="yellow")
    return Text("✗ Poor", style="red")


def _length_status(length: int, bounds: Sequence[int]) -> Text:
    low, high = bounds
    if low <= length <= high:
        return Text("✓ Good", style="green")
    if low * 0.8 <= length <= high * 1.2:
        return Text("⚠ Acceptable", style="yellow")
    return Text("✗ Out of range", style="red")


def _mark(ok: bool) -> Text:
    return Text("✓", style="green") if ok else Text("⚠", style="yellow")


def summary_table(summary: Summary, config: ChecksConfig) -> List[str]:
    """Summary metrics as a rich table, returned as ANSI-styled lines."""
    total = summary.total_pages
    table = Table(box=box.SQUARE, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_column("Status")

    table.add_row("Pages with Title", f"{summary.with_title}/{total}", _status(summary.with_title, total))
    table.add_row(
        "Pages with Description",
        f"{summary.with_description}/{total}",
        _status(summary.with_description, total),
    )
    table.add_row(
        "Pages with Open Graph",
        f"{summary.with_open_graph}/{total}",
        _status(summary.with_open_graph, total, 0.8),
    )
    table.add_row(
        "Pages with Twitter Cards",
        f"{summary.with_twitter_card}/{total}",
        _status(summary.with_twitter_card, total, 0.8),
    )
    table.add_row(
        "Pages with Canonical URL",
        f"{summary.with_canonical}/{total}",
        _status(summary.with_canonical, total, 0.8),
    )
    table.add_row(
        "Pages with Structured Data",
        f"{summary.with_structured_data}/{total}",
        _status(summary.with_structured_data, total, 0.3),
    )
    table.add_row(
        "Unique Descriptions",
        str(summary.unique_descriptions),
        _mark(summary.unique_descriptions >= summary.with_description),
    )
    table.add_row(
        "Duplicate Descriptions",
        str(len(summary.duplicate_descriptions)),
        _mark(not summary.duplicate_descriptions),
    )
    table.add_row(
        "Avg Title Length",
        f"{summary.avg_title_length} chars",
        _length_status(summary.avg_title_length, config.title_length),
    )
    table.add_row(
        "Avg Description Length",
        f"{summary.avg_description_length} chars",
        _length_status(summary.avg_description_length, config.description_length),
    )

    buffer = io.StringIO()
    Console(file=buffer, force_terminal=True, color_system="standard", width=TABLE_WIDTH).print(table)
    return buffer.getvalue().rstrip("\n").split("\n")


def _page_details(page: PageResult, index: int) -> List[str]:
    green = partial(click.style, fg="green")
    yellow = partial(click.style, fg="yellow")
    red = partial(click.style, fg="red")

    out = [
        click.style(f"┌{'─' * 78}┐", fg="green", bold=True),
        click.style(f"│ {index}. {page.url[:74].ljust(74)} │", fg="green", bold=True),
        click.style(f"└{'─' * 78}┘", fg="green", bold=True),
    ]
    meta = page.meta
    if meta.error:
        out.append(red(f"  ✗ Error: {meta.message}"))
        out.append("")
        return out

    if meta.title:
        out.append(click.style("  Title: ", fg="cyan") + truncate(meta.title, 70))
        out.append(click.style(f"         ({len(meta.title)} chars)", dim=True))
    else:
        out.append(red(f"  Title: {NOT_SET}"))

    if meta.description:
        out.append(click.style("  Meta Description: ", fg="cyan") + truncate(meta.description, 70))
        out.append(click.style(f"                    ({len(meta.description)} chars)", dim=True))
    else:
        out.append(red(f"  Meta Description: {NOT_SET}"))

    if meta.og_title and meta.og_description:
        out.append(green("  ✓ Open Graph tags present"))
    else:
        out.append(yellow("  ⚠ Open Graph tags missing or incomplete"))

    if meta.twitter_card:
        out.append(green(f"  ✓ Twitter Card: {meta.twitter_card}"))
    else:
        out.append(yellow("  ⚠ Twitter Card: NOT PRESENT"))

    if meta.canonical:
        out.append(green("  ✓ Canonical URL: ") + click.style(truncate(meta.canonical, 50), dim=True))

    if page.structured_data:
        schemas = ", ".join(item.get("schema", "") for item in page.structured_data)
        out.append(green(f"  ✓ Structured Data: {schemas}"))

    if page.audit is not None:
        if page.audit.error:
            out.append(yellow(f"  ⚠ Audit failed: {page.audit.message}"))
        else:
            scores = ", ".join(
                f"{name}: {round((entry.get('score') or 0) * 100)}"
                for name, entry in page.audit.scores.items()
            )
            out.append(green(f"  ✓ Audit scores: {scores}"))

    checks = page.checks
    if checks and checks.errors:
        out.append(red("\n  Errors:"))
        out.extend(red(f"    ✗ {error}") for error in checks.errors)
    if checks and checks.warnings:
        out.append(yellow("\n  Warnings:"))
        out.extend(yellow(f"    ⚠ {warning}") for warning in checks.warnings)
    out.append("")
    return out


def _assessment(summary: Summary, config: ChecksConfig) -> List[str]:
    out = [
        click.style(f"\n{RULE}", fg="cyan", bold=True),
        click.style("Overall Assessment", fg="cyan", bold=True),
        click.style(f"{RULE}\n", fg="cyan", bold=True),
    ]
    score = seo_score(summary, config)
    if score >= 90:
        out.append(click.style(f"✓ Excellent SEO ({score}/100)", fg="green", bold=True))
        out.append(click.style("  Your pages are well-optimized for search engines.\n", fg="green"))
    elif score >= 70:
        out.append(click.style(f"⚠ Good SEO ({score}/100)", fg="yellow", bold=True))
        out.append(
            click.style("  Most pages are optimized, but there's room for improvement.\n", fg="yellow")
        )
    else:
        out.append(click.style(f"✗ Needs Improvement ({score}/100)", fg="red", bold=True))
        out.append(click.style("  Several SEO issues need attention.\n", fg="red"))

    items = recommendations(summary, config)
    if items:
        out.append(click.style("Recommendations:\n", fg="blue", bold=True))
        out.extend(click.style(f"  {i}. {item}", fg="blue") for i, item in enumerate(items, 1))
        out.append("")
    return out


def render_run(result: RunResult, config: ChecksConfig) -> List[str]:
    out = [
        click.style(f"\nSite: {result.url}", fg="blue", bold=True),
        click.style(f"Pages analyzed: {len(result.pages)}", fg="blue"),
        click.style(f"Duration: {result.duration_ms / 1000:.2f}s", fg="blue"),
        click.style(f"Generated: {result.timestamp}\n", fg="blue"),
    ]
    out.extend(summary_table(result.summary, config))

    if result.errors:
        out.append(click.style(f"\n{len(result.errors)} pages failed:", fg="red", bold=True))
        for error in result.errors:
            status = f"HTTP {error.status}" if error.status else "Connection Error"
            out.append(click.style(f"  ✗ [{status}] {error.url}", fg="red"))

    shown = min(DETAIL_PAGES, len(result.pages))
    out.append(click.style(f"\n{RULE}", fg="yellow", bold=True))
    out.append(
        click.style(
            f"Detailed Results (showing {shown} of {len(result.pages)} pages)", fg="yellow", bold=True
        )
    )
    out.append(click.style(f"{RULE}\n", fg="yellow", bold=True))
    for index, page in enumerate(result.pages[:shown], 1):
        out.extend(_page_details(page, index))

    out.extend(_assessment(result.summary, config))
    return out


def _change_lines(page: PageComparison) -> List[str]:
    out = [click.style(page.url, bold=True)]
    if page.status is PageStatus.ADDED:
        out.append(click.style(f"  + {page.message}\n", fg="green"))
        return out
    if page.status is PageStatus.REMOVED:
        out.append(click.style(f"  - {page.message}\n", fg="red"))
        return out
    for change in page.changes:
        out.append(click.style(f"  {change.field}:", fg="cyan"))
        out.append(click.style(f"    - {truncate(change.before or NOT_SET, 70)}", fg="red"))
        out.append(click.style(f"    + {truncate(change.after or NOT_SET, 70)}", fg="green"))
    if page.verdict is not None:
        out.append(click.style(f"  => {page.verdict.value} ({page.score:+g})", dim=True))
    out.append("")
    return out


def render_comparison(comparison: ComparisonResult) -> List[str]:
    summary = comparison.summary
    out = [
        click.style("\nComparing:", fg="yellow", bold=True),
        click.style(f"  Environment 1: {comparison.env1}", fg="yellow"),
        click.style(f"  Environment 2: {comparison.env2}\n", fg="yellow"),
        click.style("Summary:", fg="cyan", bold=True),
        click.style(f"  Total pages compared: {summary.total}", fg="cyan"),
        click.style(f"  Improved: {summary.improved}", fg="green"),
        click.style(f"  Degraded: {summary.degraded}", fg="red"),
        click.style(f"  Unchanged: {summary.unchanged}", dim=True),
        click.style(f"  Added: {summary.added}", fg="green"),
        click.style(f"  Removed: {summary.removed}\n", fg="red"),
    ]
    changes = comparison.changes
    if changes:
        out.append(click.style(RULE, fg="yellow", bold=True))
        out.append(click.style("Changes Detected", fg="yellow", bold=True))
        out.append(click.style(f"{RULE}\n", fg="yellow", bold=True))
        for page in changes[:DETAIL_CHANGES]:
            out.extend(_change_lines(page))
        if len(changes) > DETAIL_CHANGES:
            out.append(click.style(f"\n... and {len(changes) - DETAIL_CHANGES} more changes\n", dim=True))
    return out


def render_revision(comparison: RevisionComparison, config: ChecksConfig) -> List[str]:
    out = [
        click.style(f"Revisions: {comparison.revision1} → {comparison.revision2}", fg="blue"),
        click.style(f"Files changed: {len(comparison.changed_files)}", fg="blue"),
        click.style(f"Environment: {comparison.environment}", fg="blue"),
        click.style(f"URL: {comparison.url}\n", fg="blue"),
    ]
    if not comparison.changed_files:
        out.append(click.style("No SEO-relevant files changed.\n", fg="yellow"))
    else:
        out.append(click.style(RULE, fg="yellow", bold=True))
        out.append(click.style("SEO-Relevant File Changes", fg="yellow", bold=True))
        out.append(click.style(f"{RULE}\n", fg="yellow", bold=True))
        for change in comparison.changes:
            counts = click.style(f"+{change.additions}", fg="green") + " " + click.style(
                f"-{change.deletions}", fg="red"
            )
            out.append(click.style(f"  • {change.file}", fg="cyan") + f" [{change.change_type}] {counts}")
        out.append("")

    if comparison.current_state is not None:
        out.append(click.style("Current SEO State:\n", fg="cyan", bold=True))
        out.extend(summary_table(comparison.current_state.summary, config))
    return out


def render_console(result, config: Optional[ChecksConfig] = None) -> str:
    """Render any result type as colored terminal text."""
    config = config or ChecksConfig()
    if isinstance(result, ComparisonResult):
        lines = render_comparison(result)
    elif isinstance(result, RevisionComparison):
        lines = render_revision(result, config)
    else:
        lines = render_run(result, config)
    return "\n".join(lines)


__all__ = ["render_console", "summary_table"]

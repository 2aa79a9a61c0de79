# File: seo_scout/aggregator.py
"""seo_scout.aggregator: run results and their aggregated summary."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

from seo_scout.checks import CheckResult
from seo_scout.config import ChecksConfig
from seo_scout.crawler.models import AuditResult, PageMetadata, StructuredDataItem
from seo_scout.parser.html_parser import StructuredDataValidation
from seo_scout.utils import round_half_up

DUPLICATE_PREVIEW_LENGTH = 100


class DuplicateDescription(TypedDict):
    """Description text (preview) shared by several pages."""

    description: str
    count: int


@dataclass(slots=True)
class PageResult:
    """Everything collected for one page of a run."""

    url: str
    meta: PageMetadata
    lastmod: Optional[str] = None
    priority: Optional[float] = None
    checks: Optional[CheckResult] = None
    structured_data: List[StructuredDataItem] = field(default_factory=list)
    structured_data_validation: Optional[StructuredDataValidation] = None
    audit: Optional[AuditResult] = None


@dataclass(slots=True)
class PageError:
    """A page whose fetch failed."""

    url: str
    status: Optional[int]
    message: str


@dataclass(slots=True)
class Summary:
    """Counts and averages over the pages of one run."""

    total_pages: int = 0
    with_title: int = 0
    with_description: int = 0
    with_keywords: int = 0
    with_open_graph: int = 0
    with_twitter_card: int = 0
    with_canonical: int = 0
    with_structured_data: int = 0
    unique_descriptions: int = 0
    duplicate_descriptions: List[DuplicateDescription] = field(default_factory=list)
    avg_title_length: int = 0
    avg_description_length: int = 0
    total_checks: Dict[str, int] = field(
        default_factory=lambda: {"passed": 0, "warnings": 0, "errors": 0}
    )


@dataclass(slots=True)
class RunResult:
    """Outcome of one analysis invocation; not modified once returned."""

    url: str
    timestamp: str
    options: Dict[str, Any] = field(default_factory=dict)
    pages: List[PageResult] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    errors: List[PageError] = field(default_factory=list)
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the run."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _average(total: int, count: int) -> int:
    return round_half_up(total / count) if count else 0


def _duplicates(descriptions: List[str]) -> List[DuplicateDescription]:
    duplicates: List[DuplicateDescription] = []
    for description, count in Counter(descriptions).items():
        if count < 2:
            continue
        preview = description
        if len(preview) > DUPLICATE_PREVIEW_LENGTH:
            preview = preview[:DUPLICATE_PREVIEW_LENGTH] + "..."
        duplicates.append({"description": preview, "count": count})
    return duplicates


def summarize(pages: List[PageResult]) -> Summary:
    """Fold *pages* into a :class:`Summary`.

    Averages divide by the number of pages having the field, not by the
    total; duplicates compare descriptions exactly.
    """
    summary = Summary(total_pages=len(pages))
    title_total = 0
    description_total = 0
    descriptions: List[str] = []

    for page in pages:
        meta = page.meta
        if meta.title:
            summary.with_title += 1
            title_total += len(meta.title)
        if meta.description:
            summary.with_description += 1
            description_total += len(meta.description)
            descriptions.append(meta.description)
        if meta.keywords:
            summary.with_keywords += 1
        if meta.og_title and meta.og_description:
            summary.with_open_graph += 1
        if meta.twitter_card:
            summary.with_twitter_card += 1
        if meta.canonical:
            summary.with_canonical += 1
        if page.structured_data:
            summary.with_structured_data += 1

        if page.checks is not None:
            summary.total_checks["passed"] += len(page.checks.passed)
            summary.total_checks["warnings"] += len(page.checks.warnings)
            summary.total_checks["errors"] += len(page.checks.errors)

    summary.avg_title_length = _average(title_total, summary.with_title)
    summary.avg_description_length = _average(description_total, summary.with_description)
    summary.unique_descriptions = len(set(descriptions))
    summary.duplicate_descriptions = _duplicates(descriptions)
    return summary


# ---------------------------------------------------------------------------
# Assessment helpers shared by the console and HTML reporters
# ---------------------------------------------------------------------------


def _ratio(value: int, total: int) -> float:
    return value / total if total else 0.0


def _in_range(value: int, bounds: tuple) -> bool:
    return bounds[0] <= value <= bounds[1]


def seo_score(summary: Summary, config: Optional[ChecksConfig] = None) -> int:
    """Weighted 0-100 score: meta tags 40, social tags 30, technical 20, quality 10."""
    config = config or ChecksConfig()
    total = summary.total_pages
    score = 0.0
    score += _ratio(summary.with_title, total) * 20
    score += _ratio(summary.with_description, total) * 20
    score += _ratio(summary.with_open_graph, total) * 15
    score += _ratio(summary.with_twitter_card, total) * 15
    score += _ratio(summary.with_canonical, total) * 10
    score += _ratio(summary.with_structured_data, total) * 10
    if not summary.duplicate_descriptions:
        score += 5
    if _in_range(summary.avg_title_length, config.title_length):
        score += 3
    if _in_range(summary.avg_description_length, config.description_length):
        score += 2
    return round_half_up(score)


def recommendations(summary: Summary, config: Optional[ChecksConfig] = None) -> List[str]:
    """Actionable suggestions derived from *summary*."""
    config = config or ChecksConfig()
    total = summary.total_pages
    title_low, title_high = config.title_length
    desc_low, desc_high = config.description_length
    items: List[str] = []

    if summary.with_description < total:
        items.append(f"Add meta descriptions to {total - summary.with_description} pages")
    if summary.duplicate_descriptions:
        items.append(f"Fix {len(summary.duplicate_descriptions)} duplicate meta descriptions")
    if summary.with_twitter_card < total * 0.8:
        items.append("Add Twitter Card tags for better social sharing")
    if summary.with_structured_data < total * 0.3:
        items.append("Add Schema.org structured data for rich snippets")
    if not _in_range(summary.avg_title_length, config.title_length):
        items.append(
            f"Optimize title lengths (current avg: {summary.avg_title_length}, "
            f"target: {title_low}-{title_high})"
        )
    if not _in_range(summary.avg_description_length, config.description_length):
        items.append(
            f"Optimize description lengths (current avg: {summary.avg_description_length}, "
            f"target: {desc_low}-{desc_high})"
        )
    return items


__all__ = [
    "DuplicateDescription",
    "PageError",
    "PageResult",
    "RunResult",
    "Summary",
    "recommendations",
    "seo_score",
    "summarize",
]

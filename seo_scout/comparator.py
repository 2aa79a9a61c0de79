# File: seo_scout/comparator.py
"""seo_scout.comparator: environment-to-environment and revision-to-revision comparisons.

Absent values are kept as ``None`` throughout; reporters substitute
:data:`NOT_SET` when rendering.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from seo_scout.aggregator import RunResult
from seo_scout.config import ChecksConfig
from seo_scout.crawler.models import PageMetadata
from seo_scout.utils import page_key, utc_timestamp

NOT_SET = "NOT SET"

COMPARED_FIELDS: Sequence[str] = (
    "title",
    "description",
    "og_title",
    "og_description",
    "twitter_card",
    "twitter_title",
    "twitter_description",
    "canonical",
)

# Descriptions outside this range are penalised whatever the configured target.
ACCEPTABLE_DESCRIPTION_LENGTH = (50, 200)

SEO_PATH_PATTERNS: Sequence[str] = ("templates/", "translations/", "public/robots.txt")


class PageStatus(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class Verdict(str, Enum):
    IMPROVED = "improved"
    DEGRADED = "degraded"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class FieldChange:
    field: str
    before: Optional[str]
    after: Optional[str]


@dataclass(slots=True)
class PageComparison:
    """Classification of one URL from the union of both runs."""

    url: str
    status: PageStatus
    message: Optional[str] = None
    changes: List[FieldChange] = field(default_factory=list)
    score: float = 0.0
    verdict: Optional[Verdict] = None


@dataclass(slots=True)
class ComparisonSummary:
    total: int = 0
    improved: int = 0
    degraded: int = 0
    unchanged: int = 0
    added: int = 0
    removed: int = 0


@dataclass(slots=True)
class ComparisonResult:
    """Diff of two runs; ``pages`` holds every URL of either run exactly once."""

    timestamp: str
    env1: str
    env2: str
    pages: List[PageComparison] = field(default_factory=list)
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)

    @property
    def changes(self) -> List[PageComparison]:
        return [page for page in self.pages if page.status is not PageStatus.UNCHANGED]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def compare_metadata(before: PageMetadata, after: PageMetadata) -> List[FieldChange]:
    """Field-level differences over :data:`COMPARED_FIELDS`, strict inequality."""
    changes: List[FieldChange] = []
    for name in COMPARED_FIELDS:
        old, new = getattr(before, name), getattr(after, name)
        if old != new:
            changes.append(FieldChange(field=name, before=old, after=new))
    return changes


def _within(length: int, bounds: Sequence[int]) -> bool:
    return bounds[0] <= length <= bounds[1]


def assess_improvement(changes: List[FieldChange], config: Optional[ChecksConfig] = None) -> float:
    """Net score of a changed page; positive means improved.

    +1 for a field that became set, -1 for one that became unset, +0.5 for a
    description or title landing in its target range, -0.5 for a description
    outside the acceptable range (an unset description counts as length 0).
    """
    config = config or ChecksConfig()
    score = 0.0
    for change in changes:
        after_length = len(change.after) if change.after is not None else 0

        if change.before is None and change.after is not None:
            score += 1
        if change.after is None and change.before is not None:
            score -= 1

        if change.field == "description":
            if change.after is not None and _within(after_length, config.description_length):
                score += 0.5
            if not _within(after_length, ACCEPTABLE_DESCRIPTION_LENGTH):
                score -= 0.5
        elif change.field == "title":
            if change.after is not None and _within(after_length, config.title_length):
                score += 0.5
    return score


def _verdict(score: float) -> Verdict:
    if score > 0:
        return Verdict.IMPROVED
    if score < 0:
        return Verdict.DEGRADED
    return Verdict.UNCHANGED


def compare_runs(
    first: RunResult, second: RunResult, config: Optional[ChecksConfig] = None
) -> ComparisonResult:
    """Compare two runs page by page.

    Pages are matched on path and query so that runs against different
    hosts (staging and production) line up; the reported URL is the one of
    the first run when the page exists there.
    """
    comparison = ComparisonResult(timestamp=utc_timestamp(), env1=first.url, env2=second.url)
    pages1 = {page_key(page.url): page for page in first.pages}
    pages2 = {page_key(page.url): page for page in second.pages}
    summary = comparison.summary

    for key in dict.fromkeys([*pages1, *pages2]):
        page1, page2 = pages1.get(key), pages2.get(key)
        url = (page1 or page2).url

        if page1 is None:
            comparison.pages.append(
                PageComparison(url, PageStatus.ADDED, "Page added in second environment")
            )
            summary.added += 1
            continue
        if page2 is None:
            comparison.pages.append(
                PageComparison(url, PageStatus.REMOVED, "Page removed in second environment")
            )
            summary.removed += 1
            continue

        summary.total += 1
        changes = compare_metadata(page1.meta, page2.meta)
        if not changes:
            comparison.pages.append(
                PageComparison(url, PageStatus.UNCHANGED, verdict=Verdict.UNCHANGED)
            )
            summary.unchanged += 1
            continue

        score = assess_improvement(changes, config)
        verdict = _verdict(score)
        comparison.pages.append(
            PageComparison(url, PageStatus.CHANGED, changes=changes, score=score, verdict=verdict)
        )
        if verdict is Verdict.IMPROVED:
            summary.improved += 1
        elif verdict is Verdict.DEGRADED:
            summary.degraded += 1
        else:
            summary.unchanged += 1

    return comparison


# ---------------------------------------------------------------------------
# Revision comparison
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class FileChange:
    """Diff of one SEO-relevant file between two revisions."""

    file: str
    change_type: str
    diff: Optional[str]
    additions: int = 0
    deletions: int = 0


@dataclass(slots=True)
class RevisionSummary:
    files_changed: int = 0
    additions: int = 0
    deletions: int = 0


@dataclass(slots=True)
class RevisionComparison:
    """File-level changes between two revisions next to today's SEO snapshot."""

    timestamp: str
    revision1: str
    revision2: str
    environment: str
    url: str
    changed_files: List[str] = field(default_factory=list)
    changes: List[FileChange] = field(default_factory=list)
    commits: Dict[str, Dict[str, str]] = field(default_factory=dict)
    summary: RevisionSummary = field(default_factory=RevisionSummary)
    current_state: Optional[RunResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def seo_relevant_files(files: List[str]) -> List[str]:
    """Keep the files matching :data:`SEO_PATH_PATTERNS`, in their original order."""
    return [path for path in files if any(pattern in path for pattern in SEO_PATH_PATTERNS)]


__all__ = [
    "ACCEPTABLE_DESCRIPTION_LENGTH",
    "COMPARED_FIELDS",
    "NOT_SET",
    "SEO_PATH_PATTERNS",
    "ComparisonResult",
    "ComparisonSummary",
    "FieldChange",
    "FileChange",
    "PageComparison",
    "PageStatus",
    "RevisionComparison",
    "RevisionSummary",
    "Verdict",
    "assess_improvement",
    "compare_metadata",
    "compare_runs",
    "seo_relevant_files",
]

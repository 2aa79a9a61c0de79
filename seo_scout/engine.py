# File: seo_scout/engine.py
"""seo_scout.engine: orchestration layer behind the CLI and the tests.

:class:`Scout` wires the sitemap resolver, the extractors, the checker, the
aggregator and the comparator together, and persists rendered reports.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import click

from seo_scout.aggregator import PageError, PageResult, RunResult, summarize
from seo_scout.audit import run_audit
from seo_scout.checks import run_checks
from seo_scout.comparator import (
    ComparisonResult,
    FileChange,
    RevisionComparison,
    RevisionSummary,
    compare_runs,
    seo_relevant_files,
)
from seo_scout.config import ScoutConfig, load_config
from seo_scout.crawler.fetcher import Fetcher
from seo_scout.crawler.models import PageRef
from seo_scout.crawler.sitemap import SitemapResolver
from seo_scout.errors import EnvironmentResolutionError, GitError
from seo_scout.extractors import fetch_page, page_structured_data
from seo_scout.integrations.environment import resolve_base_url
from seo_scout.integrations.environment import resolve_blog_url as env_blog_url
from seo_scout.integrations.git import GitRepository, change_type, parse_diff
from seo_scout.logger import logger
from seo_scout.parser.html_parser import validate_structured_data
from seo_scout.report import get_reporter, save_report, write_json
from seo_scout.utils import filesystem_timestamp, host_hint, sitemap_url_for, utc_timestamp

__all__ = ["AnalyzeOptions", "ReportOutput", "Scout", "select_pages"]


@dataclass(slots=True)
class AnalyzeOptions:
    """Knobs of one analysis run; stored verbatim in ``RunResult.options``."""

    single: bool = False
    audit: bool = False
    limit: Optional[int] = None
    random: Optional[int] = None
    match: List[str] = field(default_factory=list)
    delay_ms: int = 0


@dataclass(slots=True)
class ReportOutput:
    """Rendered report text and the files written for it."""

    text: str
    output_path: Optional[Path] = None
    json_path: Optional[Path] = None


def select_pages(pages: Sequence[PageRef], options: AnalyzeOptions) -> List[PageRef]:
    """Apply the match filter, then random sampling, then the limit (only without sampling)."""
    selected = list(pages)
    patterns = [p.lower() for p in options.match if p]
    if patterns:
        selected = [ref for ref in selected if any(p in ref.loc.lower() for p in patterns)]
    if options.random and selected:
        selected = random.sample(selected, min(options.random, len(selected)))
    elif options.limit:
        selected = selected[: options.limit]
    return selected


class Scout:
    """Facade for the CLI and the tests: configuration, analysis, comparison, reporting."""

    def __init__(
        self,
        project_root: Union[str, Path, None] = None,
        config: Optional[ScoutConfig] = None,
    ) -> None:
        self.project_root = Path(project_root) if project_root is not None else Path.cwd()
        self.config = config if config is not None else load_config(self.project_root)
        self.git = GitRepository(self.project_root)

    def resolve_environment_url(self, environment: str) -> str:
        """Base URL of *environment* from the project's dotenv files."""
        return resolve_base_url(self.project_root, environment)

    def resolve_blog_url(self, environment: str) -> str:
        """Blog base URL of *environment*; raises when the project declares none."""
        url = env_blog_url(self.project_root, environment)
        if url is None:
            raise EnvironmentResolutionError(
                f"Could not determine blog URL for environment: {environment}"
            )
        return url

    async def list_pages(self, url: str) -> List[PageRef]:
        """Every page listed by the sitemap of *url*."""
        async with Fetcher(self.config) as fetcher:
            return await SitemapResolver(fetcher).resolve(sitemap_url_for(url))

    async def analyze(self, url: str, options: Optional[AnalyzeOptions] = None) -> RunResult:
        """Analyze the pages of *url* one after another.

        Page fetch failures are recorded in ``errors`` and never abort the
        run; a failing root sitemap raises SitemapError.
        """
        options = options or AnalyzeOptions()
        started = time.monotonic()
        result = RunResult(url=url, timestamp=utc_timestamp(), options=asdict(options))
        run_audits = options.audit or self.config.audit.enabled

        async with Fetcher(self.config) as fetcher:
            if options.single:
                refs = [PageRef(loc=url)]
            else:
                refs = await SitemapResolver(fetcher).resolve(sitemap_url_for(url))
            refs = select_pages(refs, options)

            total = len(refs)
            for index, ref in enumerate(refs, start=1):
                if options.delay_ms > 0 and index > 1:
                    await asyncio.sleep(options.delay_ms / 1000)
                logger.info("Analyzing %d/%d: %s", index, total, ref.loc)
                page = await fetch_page(fetcher, ref.loc)
                page_result = PageResult(
                    url=ref.loc, meta=page.meta, lastmod=ref.lastmod, priority=ref.priority
                )

                if page.meta.error:
                    result.errors.append(
                        PageError(
                            url=ref.loc,
                            status=page.meta.status_code,
                            message=page.meta.message or "Unknown error",
                        )
                    )
                    result.pages.append(page_result)
                    continue

                page_result.structured_data = page_structured_data(page)
                page_result.structured_data_validation = validate_structured_data(
                    page_result.structured_data
                )
                if run_audits:
                    page_result.audit = await run_audit(ref.loc, self.config.audit)
                page_result.checks = run_checks(page.meta, self.config.checks)
                result.pages.append(page_result)

        result.summary = summarize(result.pages)
        result.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "Analyzed %d pages of %s in %d ms (%d errors)",
            total,
            url,
            result.duration_ms,
            len(result.errors),
        )
        return result

    def compare(self, first: RunResult, second: RunResult) -> ComparisonResult:
        return compare_runs(first, second, self.config.checks)

    async def compare_environments(self, env1: str, env2: str) -> ComparisonResult:
        """Analyze both environments side by side and compare the runs."""
        url1 = self.resolve_environment_url(env1)
        url2 = self.resolve_environment_url(env2)
        logger.info("Comparing %s (%s) with %s (%s)", env1, url1, env2, url2)
        first, second = await asyncio.gather(self.analyze(url1), self.analyze(url2))
        return self.compare(first, second)

    async def revision_compare(
        self, revision1: str, revision2: str = "HEAD", environment: str = "staging"
    ) -> RevisionComparison:
        """SEO-relevant file changes between two revisions plus the current state of *environment*."""
        if not self.git.is_repository():
            raise GitError(f"Not a git repository: {self.project_root}")

        url = self.resolve_environment_url(environment)
        seo_files = seo_relevant_files(self.git.changed_files(revision1, revision2))
        comparison = RevisionComparison(
            timestamp=utc_timestamp(),
            revision1=revision1,
            revision2=revision2,
            environment=environment,
            url=url,
            changed_files=seo_files,
            commits={
                revision1: self.git.commit_info(revision1),
                revision2: self.git.commit_info(revision2),
            },
        )

        for path in seo_files:
            diff = self.git.file_diff(revision1, revision2, path)
            parsed = parse_diff(diff or "")
            comparison.changes.append(
                FileChange(
                    file=path,
                    change_type=change_type(path),
                    diff=diff,
                    additions=len(parsed.additions),
                    deletions=len(parsed.deletions),
                )
            )

        comparison.summary = RevisionSummary(
            files_changed=len(seo_files),
            additions=sum(change.additions for change in comparison.changes),
            deletions=sum(change.deletions for change in comparison.changes),
        )
        comparison.current_state = await self.analyze(url)
        return comparison

    def json_backup_path(self, result: Any, output: Union[str, Path, None]) -> Path:
        """``<output stem>.json`` beside *output*, else a timestamped file in the reports dir."""
        if output is not None:
            out = Path(output)
            return out.with_name(f"{out.stem}.json")
        hint = host_hint(getattr(result, "url", None))
        name = f"seo-{hint}-{filesystem_timestamp(getattr(result, 'timestamp', None))}.json"
        return self.project_root / self.config.reports_dir / name

    def report(
        self,
        result: Any,
        format: str = "console",
        output: Union[str, Path, None] = None,
        save_json: bool = True,
    ) -> ReportOutput:
        """Render *result* as *format*, write it to *output* and save the JSON snapshot."""
        reporter = get_reporter(format)
        rendered = ReportOutput(text=reporter(result, self.config.checks))

        if save_json and format != "json":
            rendered.json_path = write_json(result, self.json_backup_path(result, output))
            logger.info("JSON backup saved to: %s", rendered.json_path)

        if output is not None:
            text = click.unstyle(rendered.text) if format == "console" else rendered.text
            rendered.output_path = save_report(text, output)
            logger.info("Report saved to: %s", rendered.output_path)
        return rendered

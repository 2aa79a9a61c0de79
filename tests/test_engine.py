# File: tests/test_engine.py
from __future__ import annotations

import json
import time

import pytest
from aiohttp import web

from conftest import _serve_app, page_html, urlset
from seo_scout.comparator import PageStatus
from seo_scout.config import ScoutConfig
from seo_scout.crawler.models import PageRef
from seo_scout.engine import AnalyzeOptions, Scout, select_pages
from seo_scout.errors import EnvironmentResolutionError, GitError, SitemapError, UnknownFormatError
from seo_scout.integrations.git import GitRepository

REFS = [PageRef(loc=f"https://example.com/{name}") for name in ("blog/a", "Blog/b", "shop/c", "about", "blog/d")]


@pytest.fixture()
def scout(tmp_path, config) -> Scout:
    return Scout(project_root=tmp_path, config=config)


def test_select_pages_match_is_case_insensitive():
    selected = select_pages(REFS, AnalyzeOptions(match=["BLOG", "shop"]))
    assert [ref.loc.rsplit("/", 1)[-1] for ref in selected] == ["a", "b", "c", "d"]


def test_select_pages_limit_and_random():
    assert select_pages(REFS, AnalyzeOptions(limit=2)) == REFS[:2]
    sampled = select_pages(REFS, AnalyzeOptions(random=3, limit=1))
    assert len(sampled) == 3
    assert set(sampled) <= set(REFS)
    assert len(select_pages(REFS, AnalyzeOptions(random=50))) == len(REFS)


@pytest.mark.asyncio()
async def test_analyze_full_site(scout: Scout, site_server: str):
    result = await scout.analyze(site_server)

    assert [page.url for page in result.pages] == [
        f"{site_server}/",
        f"{site_server}/about",
        f"{site_server}/broken",
        f"{site_server}/blog/first-post",
    ]
    assert len(result.errors) == 1
    error = result.errors[0]
    assert (error.url, error.status) == (f"{site_server}/broken", 500)

    home, about, broken, post = result.pages
    assert home.checks.errors == [] and home.checks.warnings == []
    assert home.lastmod == "2024-05-01"
    assert "Title too short (5 chars, recommended 50-60)" in about.checks.warnings
    assert broken.checks is None
    assert broken.meta.error
    assert [item["schema"] for item in post.structured_data] == ["BlogPosting"]
    assert post.structured_data_validation["valid"] is True
    assert home.audit is None

    assert result.summary.total_pages == 4
    assert result.summary.with_title == 3
    assert result.summary.with_structured_data == 1
    assert result.options["single"] is False
    assert result.duration_ms >= 0


@pytest.mark.asyncio()
async def test_analyze_single_page_with_delay(scout: Scout, site_server: str):
    result = await scout.analyze(f"{site_server}/about", AnalyzeOptions(single=True, delay_ms=500))
    assert [page.url for page in result.pages] == [f"{site_server}/about"]
    # no delay after the last page
    assert result.duration_ms < 500


@pytest.mark.asyncio()
async def test_analyze_delays_between_pages(scout: Scout, site_server: str):
    start = time.perf_counter()
    result = await scout.analyze(site_server, AnalyzeOptions(match=["about", "first-post"], delay_ms=200))
    elapsed = time.perf_counter() - start
    assert len(result.pages) == 2
    assert elapsed >= 0.2


@pytest.mark.asyncio()
async def test_analyze_missing_sitemap_is_fatal(scout: Scout, site_server: str):
    with pytest.raises(SitemapError):
        await scout.analyze(f"{site_server}/nowhere")


@pytest.mark.asyncio()
async def test_list_pages(scout: Scout, site_server: str):
    pages = await scout.list_pages(site_server)
    assert len(pages) == 4


@pytest.mark.asyncio()
async def test_compare_environments(tmp_path, config, site_server: str):
    (tmp_path / ".env.staging").write_text(f"SITE_BASE_URL={site_server}\n", encoding="utf-8")
    (tmp_path / ".env.prod").write_text(f"SITE_BASE_URL={site_server}\n", encoding="utf-8")
    scout = Scout(project_root=tmp_path, config=config)

    comparison = await scout.compare_environments("staging", "prod")

    assert len(comparison.pages) == 4
    assert all(page.status is PageStatus.UNCHANGED for page in comparison.pages)
    assert comparison.summary.total == 4
    assert comparison.summary.unchanged == 4


class FakeGit(GitRepository):
    def __init__(self, repository: bool = True):
        super().__init__(".")
        self.repository = repository

    def is_repository(self):
        return self.repository

    def changed_files(self, revision1, revision2="HEAD"):
        return ["templates/base.html.twig", "src/Kernel.php", "public/robots.txt"]

    def file_diff(self, revision1, revision2, path):
        if path == "public/robots.txt":
            return None
        return "--- a\n+++ b\n-old\n+new\n+extra"

    def commit_info(self, revision):
        return {"hash": revision, "message": "msg", "author": "dev", "date": "2024-05-01"}


@pytest.mark.asyncio()
async def test_revision_compare(tmp_path, config, site_server: str):
    (tmp_path / ".env").write_text(f"SITE_BASE_URL={site_server}\n", encoding="utf-8")
    scout = Scout(project_root=tmp_path, config=config)
    scout.git = FakeGit()

    comparison = await scout.revision_compare("HEAD~1", "HEAD", "staging")

    assert comparison.url == site_server
    assert comparison.changed_files == ["templates/base.html.twig", "public/robots.txt"]
    template, robots = comparison.changes
    assert (template.change_type, template.additions, template.deletions) == ("template", 2, 1)
    assert (robots.change_type, robots.diff, robots.additions) == ("robots", None, 0)
    assert comparison.summary.files_changed == 2
    assert comparison.summary.additions == 2
    assert set(comparison.commits) == {"HEAD~1", "HEAD"}
    assert comparison.current_state.summary.total_pages == 4


@pytest.mark.asyncio()
async def test_revision_compare_outside_repository(scout: Scout):
    scout.git = FakeGit(repository=False)
    with pytest.raises(GitError, match="Not a git repository"):
        await scout.revision_compare("HEAD~1")


def test_report_writes_output_and_json_backup(scout: Scout, tmp_path):
    from seo_scout.aggregator import RunResult

    run = RunResult(url="https://staging.example.com", timestamp="2024-05-01T10:11:12.345Z")

    rendered = scout.report(run, "csv", tmp_path / "out" / "report.csv")
    assert rendered.output_path == tmp_path / "out" / "report.csv"
    assert rendered.output_path.read_text(encoding="utf-8") == rendered.text
    assert rendered.json_path == tmp_path / "out" / "report.json"
    assert json.loads(rendered.json_path.read_text(encoding="utf-8"))["url"] == run.url

    rendered = scout.report(run, "console")
    assert rendered.output_path is None
    assert rendered.json_path == tmp_path / "reports" / "seo-staging-2024-05-01T10-11-12.json"
    assert rendered.json_path.exists()


def test_report_json_format_has_no_separate_backup(scout: Scout, tmp_path):
    from seo_scout.aggregator import RunResult

    run = RunResult(url="https://example.com", timestamp="2024-05-01T10:11:12.345Z")
    rendered = scout.report(run, "json", tmp_path / "report.json")
    assert rendered.json_path is None
    assert json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))["url"] == run.url

    rendered = scout.report(run, "html", save_json=False)
    assert rendered.json_path is None
    assert not (tmp_path / "reports").exists()


def test_report_unknown_format(scout: Scout):
    from seo_scout.aggregator import RunResult

    with pytest.raises(UnknownFormatError):
        scout.report(RunResult(url="https://example.com", timestamp="t"), "pdf")


def test_scout_loads_project_config(tmp_path):
    (tmp_path / ".seo-scout.json").write_text('{"reports_dir": "out"}', encoding="utf-8")
    assert Scout(project_root=tmp_path).config.reports_dir == "out"
    assert Scout(project_root=tmp_path, config=ScoutConfig()).config.reports_dir == "reports"


@pytest.mark.asyncio()
async def test_unknown_charset_is_decoded_as_utf8(scout: Scout, unused_tcp_port: int):
    async def sitemap(_):
        return web.Response(text=urlset("/odd", "/plain"), content_type="application/xml")

    async def odd(_):
        return web.Response(
            body=page_html(title="Café page").encode("utf-8"),
            headers={"Content-Type": "text/html; charset=bogus-xyz"},
        )

    async def plain(_):
        return web.Response(text=page_html(), content_type="text/html")

    app = web.Application()
    app.router.add_get("/sitemap.xml", sitemap)
    app.router.add_get("/odd", odd)
    app.router.add_get("/plain", plain)

    async for base in _serve_app(app, unused_tcp_port):
        result = await scout.analyze(base)

    assert result.errors == []
    assert result.pages[0].meta.title == "Café page"
    assert len(result.pages) == 2


@pytest.mark.asyncio()
async def test_delay_applies_after_failed_pages(scout: Scout, unused_tcp_port: int):
    hits = []

    async def sitemap(_):
        return web.Response(text=urlset("/a", "/b", "/c"), content_type="application/xml")

    async def failing(_):
        hits.append(time.perf_counter())
        return web.Response(status=500, text="boom")

    app = web.Application()
    app.router.add_get("/sitemap.xml", sitemap)
    for path in ("/a", "/b", "/c"):
        app.router.add_get(path, failing)

    async for base in _serve_app(app, unused_tcp_port):
        result = await scout.analyze(base, AnalyzeOptions(delay_ms=200))

    assert len(result.errors) == 3
    gaps = [later - earlier for earlier, later in zip(hits, hits[1:])]
    assert len(gaps) == 2
    assert all(gap >= 0.19 for gap in gaps)


def test_resolve_blog_url(tmp_path, config):
    (tmp_path / ".env.prod").write_text(
        "APP_BASE_SCHEME=https\nSITE_BASE_HOST=www.example.com\nBLOG_BASE_HOST=blog.example.com\n",
        encoding="utf-8",
    )
    scout = Scout(project_root=tmp_path, config=config)
    assert scout.resolve_blog_url("prod") == "https://blog.example.com"
    with pytest.raises(EnvironmentResolutionError, match="blog URL for environment: staging"):
        scout.resolve_blog_url("staging")

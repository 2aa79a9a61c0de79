# File: tests/conftest.py
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Dict

import pytest
import pytest_asyncio
from aiohttp import web

from seo_scout.config import ScoutConfig
from seo_scout.crawler.models import PageMetadata

GOOD_TITLE = "Acme Widgets - Hand-made widgets for every workshop"  # 51 chars
GOOD_DESCRIPTION = (
    "Acme builds durable hand-made widgets for workshops, schools and makers. "
    "Browse the catalogue, compare models and order online with free shipping."
)  # 146 chars


def page_html(
    title: str = GOOD_TITLE,
    description: str = GOOD_DESCRIPTION,
    extra_head: str = "",
) -> str:
    """A complete page carrying every tag the checker looks at."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{title}</title>
  <meta name="description" content="{description}">
  <meta name="keywords" content="widgets, tools">
  <meta property="og:title" content="{title}">
  <meta property="og:description" content="{description}">
  <meta name="twitter:card" content="summary_large_image">
  <link rel="canonical" href="https://www.example.com/">
  {extra_head}
</head>
<body><h1>Acme</h1></body>
</html>"""


def urlset(*locs: str) -> str:
    entries = "".join(
        f"<url><loc>{loc}</loc><lastmod>2024-05-01</lastmod><priority>0.8</priority></url>"
        for loc in locs
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</urlset>'
    )


def sitemap_index(*locs: str) -> str:
    entries = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</sitemapindex>'
    )


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def static_app(routes: Dict[str, tuple]) -> web.Application:
    """Application answering each path with ``(status, content_type, body)``."""
    app = web.Application()

    def make_handler(status: int, content_type: str, body: str):
        async def handler(_):
            return web.Response(status=status, text=body, content_type=content_type)

        return handler

    for path, (status, content_type, body) in routes.items():
        app.router.add_get(path, make_handler(status, content_type, body))
    return app


@pytest.fixture(autouse=True)
def _reset_logger():
    """CLI tests configure the package logger; hand it back to caplog afterwards."""
    yield
    project_logger = logging.getLogger("SeoScout")
    project_logger.handlers.clear()
    project_logger.propagate = True


@pytest.fixture()
def config() -> ScoutConfig:
    return ScoutConfig(timeout=2.0, user_agent="TestAgent/1.0")


@pytest.fixture()
def good_meta() -> PageMetadata:
    return PageMetadata(
        title=GOOD_TITLE,
        description=GOOD_DESCRIPTION,
        og_title=GOOD_TITLE,
        og_description=GOOD_DESCRIPTION,
        twitter_card="summary",
        canonical="https://www.example.com/",
        status_code=200,
    )


@pytest_asyncio.fixture
async def site_server(unused_tcp_port: int) -> AsyncIterator[str]:
    """A small site: sitemap index (with a cycle and a broken child), pages, one 500 page.

    Page locations in the urlsets point at production hosts; they must be
    pinned back onto the test server.
    """
    routes = {
        "/sitemap.xml": (
            200,
            "application/xml",
            sitemap_index(
                "/sitemap-pages.xml",
                "https://www.example.com/sitemap-blog.xml",
                "/sitemap-missing.xml",
                "/sitemap.xml",
            ),
        ),
        "/sitemap-pages.xml": (
            200,
            "application/xml",
            urlset("https://www.example.com/", "https://www.example.com/about", "/broken"),
        ),
        "/sitemap-blog.xml": (
            200,
            "application/xml",
            urlset("https://www.example.com/blog/first-post"),
        ),
        "/": (200, "text/html", page_html()),
        "/about": (200, "text/html", page_html(title="About")),
        "/blog/first-post": (
            200,
            "text/html",
            page_html(
                extra_head='<script type="application/ld+json">'
                '{"@context": "https://schema.org", "@type": "BlogPosting"}</script>'
            ),
        ),
        "/broken": (500, "text/html", "boom"),
    }
    async for url in _serve_app(static_app(routes), unused_tcp_port):
        yield url

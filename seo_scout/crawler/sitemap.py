# seo_scout/crawler/sitemap.py
"""
Sitemap resolution: expands sitemap indexes depth-first into a flat list of
pages, pinning every location onto the origin of the root sitemap.

Generated sitemaps often hardcode the production host; pinning keeps a run
against staging or a local port on the environment under test.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Set

from seo_scout.crawler.fetcher import Fetcher
from seo_scout.crawler.models import PageRef
from seo_scout.errors import FetchError, SitemapError
from seo_scout.logger import logger
from seo_scout.parser.sitemap_parser import parse_sitemap
from seo_scout.utils import pin_origin


class SitemapResolver:
    """Turns a root sitemap URL into the ordered list of :class:`PageRef`."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    async def resolve(self, sitemap_url: str) -> List[PageRef]:
        """Resolve *sitemap_url*; failures of the root document raise SitemapError."""
        visited: Set[str] = set()
        try:
            pages = await self._resolve(sitemap_url, sitemap_url, visited)
        except (FetchError, SitemapError) as exc:
            raise SitemapError(f"Failed to parse sitemap: {exc}") from exc
        logger.info("Sitemap %s resolved to %d pages", sitemap_url, len(pages))
        return pages

    async def _resolve(self, url: str, reference: str, visited: Set[str]) -> List[PageRef]:
        visited.add(url)
        response = await self.fetcher.get(url)
        document = parse_sitemap(response.body)

        if not document.is_index:
            return [replace(ref, loc=pin_origin(ref.loc, reference)) for ref in document.urls]

        pages: List[PageRef] = []
        for location in document.sitemaps:
            child = pin_origin(location, reference)
            if child in visited:
                logger.warning("Skipping already visited sitemap %s", child)
                continue
            try:
                pages.extend(await self._resolve(child, reference, visited))
            except (FetchError, SitemapError) as exc:
                logger.warning("Failed to parse subsitemap %s: %s", location, exc)
        return pages


__all__ = ["SitemapResolver"]

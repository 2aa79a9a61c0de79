# File: seo_scout/extractors.py
"""seo_scout.extractors: per-page extraction on top of the fetcher and the HTML parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from seo_scout.crawler.fetcher import Fetcher
from seo_scout.crawler.models import PageMetadata, StructuredDataItem
from seo_scout.errors import FetchError
from seo_scout.logger import logger
from seo_scout.parser.html_parser import extract_metadata, extract_structured_data


@dataclass(slots=True)
class FetchedPage:
    """Metadata of one page plus the HTML it was extracted from (None on failure)."""

    url: str
    meta: PageMetadata
    html: Optional[str] = field(default=None, repr=False)


async def fetch_page(fetcher: Fetcher, url: str) -> FetchedPage:
    """Fetch *url* once and extract its metadata.

    A failed fetch is not raised: the returned metadata is the error variant
    carrying the HTTP status (when a response arrived) and a message.
    """
    try:
        response = await fetcher.get(url)
    except FetchError as exc:
        logger.warning("Failed to fetch %s: %s", url, exc.message)
        return FetchedPage(url=url, meta=PageMetadata.failure(exc.message, exc.status))

    html = response.text()
    meta = PageMetadata(
        **extract_metadata(html),
        status_code=response.status,
        final_url=response.final_url,
        redirected=response.redirected,
    )
    return FetchedPage(url=url, meta=meta, html=html)


def page_structured_data(page: FetchedPage) -> List[StructuredDataItem]:
    """Structured data of a fetched page; empty for failed fetches or unparsable markup."""
    if page.html is None:
        return []
    try:
        return extract_structured_data(page.html)
    except Exception as exc:
        logger.debug("Structured data extraction failed for %s: %s", page.url, exc)
        return []


__all__ = ["FetchedPage", "fetch_page", "page_structured_data"]

# seo_scout/crawler/models.py
"""
Data models produced while crawling: sitemap entries, raw responses
and the per-page extraction results.
"""
from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, TypedDict


class ChangeFrequency(str, Enum):
    """Values allowed in a sitemap ``<changefreq>`` element."""

    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[ChangeFrequency]:
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class PageRef:
    """One ``<url>`` entry of a urlset."""

    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[ChangeFrequency] = None
    priority: Optional[float] = None


@dataclass(slots=True)
class FetchResponse:
    """Body of a successful response together with where it ended up."""

    url: str
    final_url: str
    status: int
    body: bytes
    encoding: Optional[str] = None

    @property
    def redirected(self) -> bool:
        return self.final_url != self.url

    def text(self) -> str:
        """Decode the body with the declared charset; unknown charsets fall back to utf-8."""
        encoding = self.encoding or "utf-8"
        try:
            codecs.lookup(encoding)
        except LookupError:
            encoding = "utf-8"
        return self.body.decode(encoding, errors="replace")


class HreflangLink(TypedDict):
    """Alternate language link declared on a page."""

    hreflang: str
    href: str


class StructuredDataItem(TypedDict, total=False):
    """JSON-LD block or microdata item found on a page."""

    type: str
    schema: str
    data: Any
    itemtype: str


@dataclass(slots=True)
class PageMetadata:
    """SEO-relevant tags of one page, or the error variant when the fetch failed."""

    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None

    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    og_url: Optional[str] = None
    og_type: Optional[str] = None
    og_site_name: Optional[str] = None
    og_locale: Optional[str] = None

    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    twitter_site: Optional[str] = None
    twitter_creator: Optional[str] = None

    canonical: Optional[str] = None
    robots: Optional[str] = None
    viewport: Optional[str] = None
    lang: Optional[str] = None
    charset: Optional[str] = None
    hreflang: List[HreflangLink] = field(default_factory=list)

    status_code: Optional[int] = None
    final_url: Optional[str] = None
    redirected: bool = False

    error: bool = False
    message: Optional[str] = None

    @classmethod
    def failure(cls, message: str, status_code: Optional[int] = None) -> PageMetadata:
        return cls(error=True, message=message, status_code=status_code)


@dataclass(slots=True)
class AuditResult:
    """Subset of a Lighthouse report kept for one page."""

    url: str
    fetch_time: Optional[str] = None
    scores: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    audits: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    error: bool = False
    message: Optional[str] = None


__all__ = [
    "AuditResult",
    "ChangeFrequency",
    "FetchResponse",
    "HreflangLink",
    "PageMetadata",
    "PageRef",
    "StructuredDataItem",
]

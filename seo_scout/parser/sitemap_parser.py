# File: seo_scout/parser/sitemap_parser.py
"""seo_scout.parser.sitemap_parser: parsing of sitemap indexes and urlsets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from lxml import etree

from seo_scout.crawler.models import ChangeFrequency, PageRef
from seo_scout.errors import SitemapError

INDEX = "index"
URLSET = "urlset"


@dataclass(slots=True)
class SitemapDocument:
    """Parsed sitemap: either child sitemap locations or page entries."""

    kind: str
    sitemaps: List[str] = field(default_factory=list)
    urls: List[PageRef] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return self.kind == INDEX


def _text(element: etree._Element, tag: str) -> Optional[str]:
    value = element.findtext(f"{{*}}{tag}")
    if value is None:
        return None
    value = value.strip()
    return value or None


def _priority(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_sitemap(xml_content: Union[str, bytes]) -> SitemapDocument:
    """Parse sitemap XML into a :class:`SitemapDocument`.

    Entries keep their document order. ``<loc>`` values are returned as
    written; callers decide how to resolve them.

    Raises:
        SitemapError: the content is not XML, or its root element is
            neither ``<sitemapindex>`` nor ``<urlset>``.
    """
    if isinstance(xml_content, str):
        xml_content = xml_content.encode("utf-8")

    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_content, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise SitemapError(f"Invalid sitemap XML: {exc}") from exc
    if root is None:
        raise SitemapError("Invalid sitemap format")

    name = etree.QName(root).localname
    if name == "sitemapindex":
        locations = [_text(child, "loc") for child in root.iterfind("{*}sitemap")]
        return SitemapDocument(kind=INDEX, sitemaps=[loc for loc in locations if loc])

    if name == "urlset":
        urls: List[PageRef] = []
        for entry in root.iterfind("{*}url"):
            loc = _text(entry, "loc")
            if not loc:
                continue
            urls.append(
                PageRef(
                    loc=loc,
                    lastmod=_text(entry, "lastmod"),
                    changefreq=ChangeFrequency.parse(_text(entry, "changefreq")),
                    priority=_priority(_text(entry, "priority")),
                )
            )
        return SitemapDocument(kind=URLSET, urls=urls)

    raise SitemapError("Invalid sitemap format")


__all__ = ["INDEX", "URLSET", "SitemapDocument", "parse_sitemap"]

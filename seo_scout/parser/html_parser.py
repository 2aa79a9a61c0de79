# === FILE: seo_scout/parser/html_parser.py ===
"""HTML parsing utilities for SEO Scout.

Metadata extraction is driven by :data:`META_SCHEMA`, a fixed mapping of
field name to an ordered tuple of :class:`FieldRule`.  The first rule whose
selector matches an element decides the value; an empty value, or no match
at all, yields ``None``.  Adding a field means adding one schema entry and
the matching attribute on :class:`~seo_scout.crawler.models.PageMetadata`.

Structured data comes in two flavours:

* JSON-LD ``<script type="application/ld+json">`` blocks (invalid JSON is
  skipped);
* microdata, reduced to the ``itemtype`` of every ``itemscope`` element.
"""
from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, TypedDict

from bs4 import BeautifulSoup
from bs4.element import Tag

from seo_scout.crawler.models import HreflangLink, StructuredDataItem

__all__: Sequence[str] = (
    "FieldRule",
    "META_SCHEMA",
    "StructuredDataValidation",
    "extract_metadata",
    "extract_structured_data",
    "validate_structured_data",
)


@dataclass(frozen=True, slots=True)
class FieldRule:
    """CSS selector plus the attribute to read (``None`` reads the element text)."""

    selector: str
    attribute: Optional[str] = None

    def apply(self, soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(self.selector)
        if element is None:
            return None
        if self.attribute is None:
            value = element.get_text().strip()
        else:
            raw = element.get(self.attribute)
            value = " ".join(raw) if isinstance(raw, list) else raw
        return value or None


def _meta_name(name: str) -> Tuple[FieldRule, ...]:
    return (FieldRule(f'meta[name="{name}"]', "content"),)


def _meta_property(prop: str) -> Tuple[FieldRule, ...]:
    return (FieldRule(f'meta[property="{prop}"]', "content"),)


META_SCHEMA: Dict[str, Tuple[FieldRule, ...]] = {
    # Basic meta tags
    "title": (FieldRule("title"),),
    "description": _meta_name("description"),
    "keywords": _meta_name("keywords"),
    # Open Graph
    "og_title": _meta_property("og:title"),
    "og_description": _meta_property("og:description"),
    "og_image": _meta_property("og:image"),
    "og_url": _meta_property("og:url"),
    "og_type": _meta_property("og:type"),
    "og_site_name": _meta_property("og:site_name"),
    "og_locale": _meta_property("og:locale"),
    # Twitter cards
    "twitter_card": _meta_name("twitter:card"),
    "twitter_title": _meta_name("twitter:title"),
    "twitter_description": _meta_name("twitter:description"),
    "twitter_image": _meta_name("twitter:image"),
    "twitter_site": _meta_name("twitter:site"),
    "twitter_creator": _meta_name("twitter:creator"),
    # Technical
    "canonical": (FieldRule('link[rel="canonical"]', "href"),),
    "robots": _meta_name("robots"),
    "viewport": _meta_name("viewport"),
    "lang": (FieldRule("html", "lang"),),
    "charset": (
        FieldRule("meta[charset]", "charset"),
        FieldRule('meta[http-equiv="Content-Type"]', "content"),
    ),
}


def _first_match(soup: BeautifulSoup, rules: Tuple[FieldRule, ...]) -> Optional[str]:
    for rule in rules:
        value = rule.apply(soup)
        if value:
            return value
    return None


def _hreflang_links(soup: BeautifulSoup) -> List[HreflangLink]:
    links: List[HreflangLink] = []
    for tag in soup.select('link[rel="alternate"][hreflang]'):
        links.append({"hreflang": str(tag.get("hreflang", "")), "href": str(tag.get("href", ""))})
    return links


def extract_metadata(html: str) -> Dict[str, Any]:
    """Return every :data:`META_SCHEMA` field plus ``hreflang`` for *html*.

    Missing tags are ``None``; this function never raises for absent markup.
    """
    soup = BeautifulSoup(html, "html.parser")
    fields: Dict[str, Any] = {name: _first_match(soup, rules) for name, rules in META_SCHEMA.items()}
    fields["hreflang"] = _hreflang_links(soup)
    return fields


# ---------------------------------------------------------------------------
# Structured data
# ---------------------------------------------------------------------------


def _schema_name(data: Any) -> str:
    if isinstance(data, dict):
        kind = data.get("@type")
        if isinstance(kind, list):
            return ", ".join(str(k) for k in kind)
        if kind:
            return str(kind)
        graph = data.get("@graph")
        if isinstance(graph, list) and graph:
            return _schema_name(graph)
        return "Unknown"
    if isinstance(data, list):
        return ", ".join(
            str(item.get("@type", "")) if isinstance(item, dict) else "" for item in data
        )
    return "Unknown"


def extract_structured_data(html: str) -> List[StructuredDataItem]:
    """Collect JSON-LD blocks followed by microdata items, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    items: List[StructuredDataItem] = []

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        if not isinstance(script, Tag):
            continue
        try:
            data = json.loads(script.string or script.get_text())
        except (json.JSONDecodeError, TypeError):
            continue
        items.append({"type": "json-ld", "schema": _schema_name(data), "data": data})

    for element in soup.select("[itemscope][itemtype]"):
        itemtype = element.get("itemtype")
        if isinstance(itemtype, list):
            itemtype = " ".join(itemtype)
        if not itemtype:
            continue
        items.append(
            {"type": "microdata", "schema": itemtype.rstrip().split("/")[-1], "itemtype": itemtype}
        )

    return items


class StructuredDataValidation(TypedDict):
    """Outcome of the basic JSON-LD sanity checks."""

    valid: bool
    errors: List[str]
    warnings: List[str]


def validate_structured_data(items: List[StructuredDataItem]) -> StructuredDataValidation:
    """Check that every JSON-LD object declares ``@context`` and ``@type``."""
    result: StructuredDataValidation = {"valid": True, "errors": [], "warnings": []}
    for item in items:
        if item.get("type") != "json-ld":
            continue
        data = item.get("data")
        objects = data if isinstance(data, list) else [data]
        for obj in objects:
            if not isinstance(obj, dict):
                continue
            if "@context" not in obj:
                result["warnings"].append(f"Missing @context in {item.get('schema', 'Unknown')}")
            if "@type" not in obj and "@graph" not in obj:
                result["errors"].append("Missing @type in structured data")
                result["valid"] = False
    return result

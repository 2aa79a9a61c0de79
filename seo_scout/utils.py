# File: seo_scout/utils.py
"""seo_scout.utils: URL helpers and small formatting utilities."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from seo_scout.logger import logger

__all__: Sequence[str] = (
    "origin_of",
    "pin_origin",
    "page_key",
    "sitemap_url_for",
    "host_hint",
    "round_half_up",
    "utc_timestamp",
    "filesystem_timestamp",
    "truncate",
)


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` of *url*."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def pin_origin(url: str, reference: str) -> str:
    """Rewrite *url* onto the scheme, host and port of *reference*.

    Relative locations are resolved against the reference origin first;
    path, query and fragment of *url* are preserved.
    """
    ref = urlsplit(reference)
    absolute = urlsplit(urljoin(origin_of(reference) + "/", url.strip()))
    pinned = urlunsplit((ref.scheme, ref.netloc, absolute.path, absolute.query, absolute.fragment))
    if pinned != url:
        logger.debug("Pinned URL: %s -> %s", url, pinned)
    return pinned


def page_key(url: str) -> str:
    """Host-independent identity of a page: path (at least ``/``), query and fragment."""
    parts = urlsplit(url)
    key = parts.path or "/"
    if parts.query:
        key += f"?{parts.query}"
    if parts.fragment:
        key += f"#{parts.fragment}"
    return key


def sitemap_url_for(url: str) -> str:
    """URLs ending in ``.xml`` are sitemaps already; otherwise append ``/sitemap.xml``."""
    if url.endswith(".xml"):
        return url
    return f"{url.rstrip('/')}/sitemap.xml"


def host_hint(url: Optional[str]) -> str:
    """First label of the hostname (``staging`` for ``staging.example.com``)."""
    if not url:
        return "scan"
    hostname = urlsplit(url).hostname
    return hostname.split(".")[0] if hostname else "scan"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T10:00:00.123Z``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def filesystem_timestamp(timestamp: Optional[str] = None) -> str:
    """Timestamp safe for file names: ``:`` and ``.`` become ``-``, cut to the second."""
    value = timestamp or utc_timestamp()
    return value.replace(":", "-").replace(".", "-")[:19]


def truncate(text: Optional[str], max_length: int) -> str:
    """Shorten *text* to *max_length* characters, ending with ``...`` when cut."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."

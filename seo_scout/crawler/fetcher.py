# seo_scout/crawler/fetcher.py
"""
Fetcher module: single HTTP GET with timeout, user agent and a redirect cap.
No retries are attempted; a failure is reported to the caller as FetchError.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, TooManyRedirects

from seo_scout.config import ScoutConfig
from seo_scout.crawler.models import FetchResponse
from seo_scout.errors import FetchError
from seo_scout.logger import logger


class Fetcher:
    """Owns the aiohttp session shared by the sitemap resolver and the extractors."""

    def __init__(self, config: ScoutConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def get(self, url: str) -> FetchResponse:
        """
        GET *url* following at most ``max_redirects`` redirects.

        Raises FetchError with ``status`` set for HTTP error responses and
        without it for transport failures.
        """
        if self.session is None:
            raise RuntimeError("Fetcher must be used as an async context manager")

        logger.debug("GET %s", url)
        try:
            async with self.session.get(
                url,
                allow_redirects=True,
                max_redirects=self.config.max_redirects,
            ) as resp:
                if resp.status >= 400:
                    raise FetchError(f"HTTP {resp.status}: {resp.reason}", status=resp.status)
                body = await resp.read()
                return FetchResponse(
                    url=url,
                    final_url=str(resp.url),
                    status=resp.status,
                    body=body,
                    encoding=resp.charset,
                )
        except TooManyRedirects as exc:
            raise FetchError(
                f"Maximum number of redirects exceeded ({self.config.max_redirects})"
            ) from exc
        except asyncio.TimeoutError as exc:
            raise FetchError(f"timeout of {self.config.timeout:g}s exceeded") from exc
        except ClientError as exc:
            raise FetchError(str(exc) or exc.__class__.__name__) from exc


__all__ = ["Fetcher"]

# File: seo_scout/errors.py
"""seo_scout.errors: exceptions raised across the package and handled by the CLI."""

from __future__ import annotations

from typing import Optional


class ScoutError(Exception):
    """Base class for every error the CLI reports as a one-line message."""


class ConfigError(ScoutError):
    """Project configuration file is unreadable or invalid."""


class FetchError(ScoutError):
    """HTTP request failed; ``status`` is set when a response was received."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class SitemapError(ScoutError):
    """Root sitemap could not be fetched or is neither an index nor a urlset."""


class EnvironmentResolutionError(ScoutError):
    """No base URL can be derived for the requested environment."""


class UnknownFormatError(ScoutError):
    """Requested report format has no renderer."""


class GitError(ScoutError):
    """A git command exited with a non-zero status."""


class PageErrorsFound(ScoutError):
    """Raised by the fail-on-errors policy once a run has completed."""


__all__ = [
    "ScoutError",
    "ConfigError",
    "FetchError",
    "SitemapError",
    "EnvironmentResolutionError",
    "UnknownFormatError",
    "GitError",
    "PageErrorsFound",
]

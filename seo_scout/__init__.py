# seo_scout/__init__.py
"""
SEO Scout package initializer.
Defines package version and exposes the CLI entry point.
"""
__version__ = "1.0.0"

# Expose CLI entry point
from seo_scout.cli import cli as main  # noqa: E402

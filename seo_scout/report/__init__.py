# File: seo_scout/report/__init__.py
"""seo_scout.report: reporter registry used by the engine and the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from seo_scout.config import ChecksConfig
from seo_scout.errors import UnknownFormatError
from seo_scout.report.console import render_console
from seo_scout.report.csv_report import render_csv
from seo_scout.report.html_report import render_html
from seo_scout.report.json_report import render_json, write_json

Reporter = Callable[[Any, Optional[ChecksConfig]], str]

REPORTERS: Dict[str, Reporter] = {
    "console": render_console,
    "json": render_json,
    "csv": render_csv,
    "html": render_html,
}


def get_reporter(name: str) -> Reporter:
    """Return the renderer registered for *name* or raise UnknownFormatError."""
    try:
        return REPORTERS[name]
    except KeyError:
        raise UnknownFormatError(
            f"Unknown format: {name} (available: {', '.join(REPORTERS)})"
        ) from None


def save_report(text: str, path: Union[str, Path]) -> Path:
    """Write a rendered report to *path*, creating parent folders."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


__all__ = [
    "REPORTERS",
    "get_reporter",
    "render_console",
    "render_csv",
    "render_html",
    "render_json",
    "save_report",
    "write_json",
]

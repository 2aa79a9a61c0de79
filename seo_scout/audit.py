# File: seo_scout/audit.py
"""seo_scout.audit: optional Lighthouse audit run through its command-line tool."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Sequence

from seo_scout.config import AuditConfig
from seo_scout.crawler.models import AuditResult
from seo_scout.logger import logger

SEO_AUDITS: Sequence[str] = (
    "document-title",
    "meta-description",
    "http-status-code",
    "link-text",
    "crawlable-anchors",
    "is-crawlable",
    "robots-txt",
    "canonical",
    "hreflang",
    "structured-data",
)

_CHROME_FLAGS = "--headless --disable-gpu --no-sandbox"


def build_command(url: str, config: AuditConfig) -> List[str]:
    return [
        config.command,
        url,
        "--output=json",
        "--output-path=stdout",
        "--quiet",
        f"--only-categories={','.join(config.categories)}",
        f"--chrome-flags={_CHROME_FLAGS}",
    ]


def parse_lighthouse_report(url: str, report: Dict[str, Any]) -> AuditResult:
    """Keep the category scores and the SEO audits of a Lighthouse JSON report."""
    result = AuditResult(url=url, fetch_time=report.get("fetchTime"))
    for category_id, category in (report.get("categories") or {}).items():
        result.scores[category_id] = {"score": category.get("score"), "title": category.get("title")}

    audits = report.get("audits") or {}
    for audit_id in SEO_AUDITS:
        audit = audits.get(audit_id)
        if audit:
            result.audits[audit_id] = {
                "score": audit.get("score"),
                "title": audit.get("title"),
                "description": audit.get("description"),
                "display_value": audit.get("displayValue"),
            }
    return result


def _failure(url: str, message: str) -> AuditResult:
    logger.warning("Audit failed for %s: %s", url, message)
    return AuditResult(url=url, error=True, message=message)


async def run_audit(url: str, config: AuditConfig) -> AuditResult:
    """Audit *url*; every failure is returned as an error result, never raised."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *build_command(url, config),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        return _failure(url, f"Cannot start {config.command}: {exc}")

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=config.timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        return _failure(url, f"Audit timed out after {config.timeout:g}s")

    if proc.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace").strip().splitlines()
        return _failure(url, detail[-1] if detail else f"{config.command} exited with {proc.returncode}")

    try:
        report = json.loads(stdout)
    except json.JSONDecodeError as exc:
        return _failure(url, f"Invalid audit output: {exc}")
    if not isinstance(report, dict):
        return _failure(url, "Invalid audit output: expected a JSON object")
    return parse_lighthouse_report(url, report)


__all__ = ["SEO_AUDITS", "build_command", "parse_lighthouse_report", "run_audit"]

# File: seo_scout/checks.py
"""seo_scout.checks: rule-based classification of one page's metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from seo_scout.config import ChecksConfig
from seo_scout.crawler.models import PageMetadata

TITLE_MIN = 30
TITLE_MAX = 70
DESCRIPTION_MIN = 120
DESCRIPTION_MAX = 200


@dataclass(slots=True)
class CheckResult:
    """Human-readable findings, each list in rule order."""

    passed: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def _range(bounds: tuple) -> str:
    return f"{bounds[0]}-{bounds[1]}"


def run_checks(meta: PageMetadata, config: Optional[ChecksConfig] = None) -> CheckResult:
    """Classify *meta* into passed / warnings / errors.

    The thresholds are fixed; *config* only supplies the recommended ranges
    quoted in the messages.
    """
    config = config or ChecksConfig()
    checks = CheckResult()

    if not meta.title:
        checks.errors.append("Missing page title")
    else:
        length = len(meta.title)
        if length < TITLE_MIN:
            checks.warnings.append(
                f"Title too short ({length} chars, recommended {_range(config.title_length)})"
            )
        elif length > TITLE_MAX:
            checks.warnings.append(
                f"Title too long ({length} chars, recommended {_range(config.title_length)})"
            )
        else:
            checks.passed.append("Title length is good")

    if not meta.description:
        checks.errors.append("Missing meta description")
    else:
        length = len(meta.description)
        if length < DESCRIPTION_MIN:
            checks.warnings.append(
                f"Description too short ({length} chars, "
                f"recommended {_range(config.description_length)})"
            )
        elif length > DESCRIPTION_MAX:
            checks.warnings.append(
                f"Description too long ({length} chars, "
                f"recommended {_range(config.description_length)})"
            )
        else:
            checks.passed.append("Description length is good")

    if meta.og_title and meta.og_description:
        checks.passed.append("Open Graph tags present")
    else:
        checks.warnings.append("Missing Open Graph tags")

    if meta.twitter_card:
        checks.passed.append("Twitter Card present")
    else:
        checks.warnings.append("Missing Twitter Card")

    if meta.canonical:
        checks.passed.append("Canonical URL present")
    else:
        checks.warnings.append("Missing canonical URL")

    return checks


__all__ = ["CheckResult", "run_checks"]

# File: seo_scout/report/html_report.py
"""seo_scout.report.html_report: self-contained HTML report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from seo_scout import __version__
from seo_scout.aggregator import PageError, RunResult, recommendations, seo_score
from seo_scout.comparator import NOT_SET, ComparisonResult, RevisionComparison
from seo_scout.config import ChecksConfig

TEMPLATE_DIR = Path(__file__).parent / "templates"


def status_class(value: int, total: int, threshold: float = 0.95) -> str:
    ratio = value / total if total else 0.0
    if ratio >= threshold:
        return "stat-good"
    if ratio >= threshold * 0.8:
        return "stat-warning"
    return "stat-error"


def percentage(value: int, total: int) -> int:
    return round(value / total * 100) if total else 0


def group_errors(errors: List[PageError]) -> List[Tuple[str, str, List[PageError]]]:
    """Errors grouped by ``HTTP <status>`` / ``Connection Error``, sorted by label."""
    groups: Dict[str, List[PageError]] = {}
    for error in errors:
        label = f"HTTP {error.status}" if error.status else "Connection Error"
        groups.setdefault(label, []).append(error)
    return [
        (label, "badge-warning" if "404" in label else "badge-error", groups[label])
        for label in sorted(groups)
    ]


def _environment(template_dir: Union[Path, str, None]) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals.update(
        status_class=status_class,
        percentage=percentage,
        not_set=NOT_SET,
        version=__version__,
    )
    return env


def render_html(
    result: Any,
    config: Optional[ChecksConfig] = None,
    template_dir: Union[Path, str, None] = None,
) -> str:
    """Render *result* with the matching template.

    Args:
        result: RunResult, ComparisonResult or RevisionComparison.
        config: target ranges shown next to averages.
        template_dir: alternative Jinja2 template folder.

    Returns:
        The HTML document as text.
    """
    config = config or ChecksConfig()
    env = _environment(template_dir)
    context: Dict[str, Any] = {"checks_config": config}

    if isinstance(result, ComparisonResult):
        template = env.get_template("comparison.html.j2")
        context["comparison"] = result
    elif isinstance(result, RevisionComparison):
        template = env.get_template("revision.html.j2")
        context["revision"] = result
        context["run"] = result.current_state
    elif isinstance(result, RunResult):
        template = env.get_template("report.html.j2")
        context.update(
            run=result,
            error_groups=group_errors(result.errors),
            score=seo_score(result.summary, config),
            recommendations=recommendations(result.summary, config),
        )
    else:
        raise TypeError(f"Cannot render {type(result).__name__} as HTML")

    return template.render(**context).strip()


__all__ = ["TEMPLATE_DIR", "group_errors", "percentage", "render_html", "status_class"]

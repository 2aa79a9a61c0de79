# seo_scout/report/json_report.py

"""
JSON report for SEO Scout.

The output is the exact serialization of the result value; the same text is
written as the automatic JSON snapshot next to every other report format.
"""
import json
from pathlib import Path
from typing import Any, Union


def render_json(result: Any, config: Any = None) -> str:
    """
    Serialize a run, comparison or revision comparison to indented JSON.

    :param result: object exposing ``to_dict()``
    :param config: unused, accepted for a uniform reporter signature
    :return: JSON text

    Example:
    ```python
    from seo_scout.report.json_report import render_json
    print(render_json(run))
    ```
    """
    return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)


def write_json(result: Any, output_path: Union[Path, str]) -> Path:
    """Write :func:`render_json` output to *output_path*, creating parent folders."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_json(result), encoding="utf-8")
    return output

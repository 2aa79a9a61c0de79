# === FILE: seo_scout/config.py ===
"""
Loading and validation of the SEO Scout project configuration.

The configuration lives in an optional ``.seo-scout.json`` (or ``.yaml``)
file at the project root. Pydantic describes the schema; a missing file
falls back to the documented defaults. The resulting :class:`ScoutConfig`
is passed explicitly to every component that needs it.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from seo_scout.errors import ConfigError

CONFIG_FILENAMES: Tuple[str, ...] = (".seo-scout.json", ".seo-scout.yaml", ".seo-scout.yml")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SEO-Scout/1.0; +https://github.com/seo-scout)"


class ChecksConfig(BaseModel):
    """Target length ranges used for recommendations and comparison bonuses."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    title_length: Tuple[int, int] = Field((50, 60), alias="titleLength")
    description_length: Tuple[int, int] = Field((150, 160), alias="metaDescriptionLength")

    @field_validator("title_length", "description_length")
    def _ordered_range(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        low, high = v
        if low < 0 or low > high:
            raise ValueError(f"invalid length range {list(v)}")
        return v


class AuditConfig(BaseModel):
    """Settings of the optional page-quality audit (Lighthouse)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = Field(False, description="Run the audit for every page.")
    command: str = Field("lighthouse", min_length=1, description="Auditor executable.")
    categories: List[str] = Field(
        default_factory=lambda: ["seo", "performance", "accessibility", "best-practices"]
    )
    timeout: float = Field(120.0, gt=0, description="Timeout of one audit run (seconds).")


class ScoutConfig(BaseModel):
    """Configuration for one SEO Scout invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    checks: ChecksConfig = Field(default_factory=ChecksConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig, alias="lighthouse")
    timeout: float = Field(10.0, gt=0, description="Timeout of one request (seconds).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    max_redirects: int = Field(5, ge=0, description="Redirects followed per request.")
    reports_dir: str = Field("reports", min_length=1, description="Directory for JSON snapshots.")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config_file(path: Union[str, Path]) -> ScoutConfig:
    """Read one YAML or JSON file and return a validated :class:`ScoutConfig`."""
    path_obj = Path(path).expanduser()
    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ConfigError(f"Unsupported config format: {suffix}")

    try:
        return ScoutConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path_obj}: {exc}") from exc


def load_config(project_root: Union[str, Path, None] = None) -> ScoutConfig:
    """
    Look for a project config file in *project_root* (cwd by default).
    Without one, the defaults are returned.
    """
    root = Path(project_root) if project_root is not None else Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return load_config_file(candidate)
    return ScoutConfig()


__all__ = [
    "AuditConfig",
    "ChecksConfig",
    "ScoutConfig",
    "load_config",
    "load_config_file",
]

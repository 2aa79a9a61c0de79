# File: seo_scout/integrations/environment.py
"""seo_scout.integrations.environment: base URL of a named environment from layered dotenv files.

Files are read in Symfony precedence order, later files overriding earlier
ones: ``.env``, ``.env.local``, ``.env.<env>``, ``.env.<env>.local``.
``${VAR}`` and ``$VAR`` references are substituted against the variables
loaded so far, then against the process environment.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from dotenv import dotenv_values

from seo_scout.errors import EnvironmentResolutionError
from seo_scout.logger import logger

_BRACED_VAR = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
_BARE_VAR = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


def env_files(environment: str) -> List[str]:
    return [".env", ".env.local", f".env.{environment}", f".env.{environment}.local"]


def substitute(value: str, variables: Mapping[str, str]) -> str:
    """Expand ``${VAR}`` then ``$VAR`` in *value*; unknown names become empty."""

    def lookup(match: re.Match[str]) -> str:
        name = match.group(1)
        return variables.get(name) or os.environ.get(name) or ""

    return _BARE_VAR.sub(lookup, _BRACED_VAR.sub(lookup, value))


def load_env_files(project_root: Union[str, Path], environment: str) -> Dict[str, str]:
    """Merge the dotenv files of *environment* into one mapping."""
    root = Path(project_root)
    variables: Dict[str, str] = {}
    for name in env_files(environment):
        path = root / name
        if not path.is_file():
            continue
        logger.debug("Loading %s", path)
        for key, raw in dotenv_values(path, interpolate=False).items():
            variables[key] = substitute(raw or "", variables)
    return variables


def _from_variables(variables: Mapping[str, str], url_key: str, host_key: str) -> Optional[str]:
    if variables.get(url_key):
        return variables[url_key]
    scheme, host = variables.get("APP_BASE_SCHEME"), variables.get(host_key)
    if scheme and host:
        return f"{scheme}://{host}"
    return None


def resolve_base_url(project_root: Union[str, Path], environment: str = "dev") -> str:
    """``SITE_BASE_URL``, else ``APP_BASE_SCHEME://SITE_BASE_HOST``."""
    variables = load_env_files(project_root, environment)
    url = _from_variables(variables, "SITE_BASE_URL", "SITE_BASE_HOST")
    if url is None:
        raise EnvironmentResolutionError(
            f"Could not determine base URL for environment: {environment}"
        )
    return url


def resolve_blog_url(project_root: Union[str, Path], environment: str = "dev") -> Optional[str]:
    """``BLOG_BASE_URL``, else ``APP_BASE_SCHEME://BLOG_BASE_HOST``, else None."""
    return _from_variables(load_env_files(project_root, environment), "BLOG_BASE_URL", "BLOG_BASE_HOST")


__all__ = ["env_files", "load_env_files", "resolve_base_url", "resolve_blog_url", "substitute"]

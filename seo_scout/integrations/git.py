# File: seo_scout/integrations/git.py
"""seo_scout.integrations.git: thin wrapper over the git command line."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from seo_scout.errors import GitError
from seo_scout.logger import logger


@dataclass(slots=True)
class ParsedDiff:
    """Lines of a unified diff split by kind."""

    additions: List[str] = field(default_factory=list)
    deletions: List[str] = field(default_factory=list)
    context: List[str] = field(default_factory=list)


def parse_diff(diff: str) -> ParsedDiff:
    parsed = ParsedDiff()
    for line in diff.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            parsed.additions.append(line[1:])
        elif line.startswith("-") and not line.startswith("---"):
            parsed.deletions.append(line[1:])
        elif not line.startswith("@@") and not line.startswith("diff"):
            parsed.context.append(line)
    return parsed


def change_type(path: str) -> str:
    """Coarse category of an SEO-relevant file."""
    if "translations/" in path:
        return "translation"
    if "templates/" in path:
        return "template"
    if "robots.txt" in path:
        return "robots"
    if "sitemap" in path:
        return "sitemap"
    return "other"


class GitRepository:
    """Runs git in *root*; every failing command raises :class:`GitError`."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def _run(self, *args: str) -> str:
        logger.debug("git %s", " ".join(args))
        try:
            completed = subprocess.run(
                ["git", *args],
                cwd=self.root,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as exc:
            raise GitError("Git command failed: git executable not found") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise GitError(f"Git command failed: git {' '.join(args)}: {detail}") from exc
        return completed.stdout.strip()

    def is_repository(self) -> bool:
        try:
            self._run("rev-parse", "--git-dir")
        except GitError:
            return False
        return True

    def changed_files(self, revision1: str, revision2: str = "HEAD") -> List[str]:
        output = self._run("diff", "--name-only", revision1, revision2)
        return [line for line in output.split("\n") if line]

    def file_diff(self, revision1: str, revision2: str, path: str) -> Optional[str]:
        """Unified diff of *path*, or None when git cannot produce it."""
        try:
            return self._run("diff", revision1, revision2, "--", path)
        except GitError as exc:
            logger.warning("No diff for %s: %s", path, exc)
            return None

    def commit_info(self, revision: str) -> Dict[str, str]:
        message = self._run("log", "-1", "--pretty=%B", revision)
        return {
            "hash": self._run("rev-parse", "--short", revision),
            "message": message.split("\n")[0],
            "author": self._run("log", "-1", "--pretty=%an", revision),
            "date": self._run("log", "-1", "--pretty=%ai", revision),
        }


__all__ = [
    "GitRepository",
    "ParsedDiff",
    "change_type",
    "parse_diff",
]

# File: tests/test_git.py
from __future__ import annotations

import subprocess

import pytest

import seo_scout.integrations.git as git_module
from seo_scout.errors import GitError
from seo_scout.integrations.git import GitRepository, change_type, parse_diff

SAMPLE_DIFF = """diff --git a/templates/base.html.twig b/templates/base.html.twig
index 1111111..2222222 100644
--- a/templates/base.html.twig
+++ b/templates/base.html.twig
@@ -1,4 +1,4 @@
 <head>
-  <title>Old</title>
+  <title>New</title>
+  <meta name="description" content="Added">
 </head>"""


def test_parse_diff_counts_lines():
    parsed = parse_diff(SAMPLE_DIFF)
    assert parsed.additions == ["  <title>New</title>", '  <meta name="description" content="Added">']
    assert parsed.deletions == ["  <title>Old</title>"]
    assert " <head>" in parsed.context


@pytest.mark.parametrize(
    "path,expected",
    [
        ("translations/messages.fr.yaml", "translation"),
        ("templates/blog/show.html.twig", "template"),
        ("public/robots.txt", "robots"),
        ("config/sitemap.yaml", "sitemap"),
        ("src/Kernel.php", "other"),
    ],
)
def test_change_type(path, expected):
    assert change_type(path) == expected


class FakeGit(GitRepository):
    """Answers git commands from a dict instead of running git."""

    def __init__(self, answers):
        super().__init__(".")
        self.answers = answers
        self.calls = []

    def _run(self, *args):
        self.calls.append(args)
        answer = self.answers.get(args)
        if answer is None:
            raise GitError(f"Git command failed: git {' '.join(args)}")
        return answer


def test_changed_files_and_commit_info():
    repo = FakeGit(
        {
            ("diff", "--name-only", "HEAD~1", "HEAD"): "templates/a.twig\nsrc/b.php\n",
            ("log", "-1", "--pretty=%B", "HEAD"): "Improve titles\n\nLonger body",
            ("rev-parse", "--short", "HEAD"): "abc1234",
            ("log", "-1", "--pretty=%an", "HEAD"): "Dana",
            ("log", "-1", "--pretty=%ai", "HEAD"): "2024-05-01 10:00:00 +0200",
        }
    )
    assert repo.changed_files("HEAD~1") == ["templates/a.twig", "src/b.php"]
    assert repo.commit_info("HEAD") == {
        "hash": "abc1234",
        "message": "Improve titles",
        "author": "Dana",
        "date": "2024-05-01 10:00:00 +0200",
    }


def test_file_diff_returns_none_on_failure():
    repo = FakeGit({("diff", "a", "b", "--", "templates/x.twig"): SAMPLE_DIFF})
    assert repo.file_diff("a", "b", "templates/x.twig") == SAMPLE_DIFF
    assert repo.file_diff("a", "b", "templates/missing.twig") is None


def test_run_wraps_subprocess_failures(monkeypatch, tmp_path):
    def missing_git(*args, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr(git_module.subprocess, "run", missing_git)
    with pytest.raises(GitError, match="git executable not found"):
        GitRepository(tmp_path).changed_files("HEAD~1")

    def failing_git(cmd, **kwargs):
        raise subprocess.CalledProcessError(128, cmd, stderr="fatal: bad revision 'nope'")

    monkeypatch.setattr(git_module.subprocess, "run", failing_git)
    with pytest.raises(GitError, match="bad revision"):
        GitRepository(tmp_path).changed_files("nope")
    assert GitRepository(tmp_path).is_repository() is False

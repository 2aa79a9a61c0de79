# === FILE: seo_scout/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of SEO Scout.

Commands:
  analyze [URL]             Analyze a site from its sitemap (or a single page)
  compare                   Compare the SEO state of two environments
  revision-compare R1 [R2]  SEO-relevant file changes between two git revisions
  list [URL]                List the pages found in the sitemap

Group options:
  --log-level LEVEL         Logging level (DEBUG, INFO, ...)
  --log-file PATH           Also write logs to this file (rotated)
  --project-root DIR        Project holding .env files and .seo-scout.json
  --version, -v             Show the SEO Scout version

Set the DEBUG environment variable to print tracebacks on failure.

Example:
  seo-scout analyze https://example.com --limit 20 -f html -o report.html
"""
import asyncio
import os
import sys
import traceback
from pathlib import Path

import click

from seo_scout import __version__
from seo_scout.engine import AnalyzeOptions, Scout
from seo_scout.errors import PageErrorsFound, ScoutError
from seo_scout.logger import init_logging
from seo_scout.report import REPORTERS, get_reporter

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])

FORMAT_HELP = f"Output format ({'/'.join(REPORTERS)})"


def print_error(exc: BaseException):
    click.secho(f"Error: {exc}", fg="red", err=True)
    if os.environ.get("DEBUG"):
        click.echo("".join(traceback.format_exception(exc)), err=True)
    sys.exit(1)


def banner(title: str):
    click.secho("\n" + "═" * 64, fg="cyan", bold=True, err=True)
    click.secho(f"{title:^64}", fg="cyan", bold=True, err=True)
    click.secho("═" * 64 + "\n", fg="cyan", bold=True, err=True)


def make_scout(ctx) -> Scout:
    return Scout(project_root=ctx.obj["project_root"])


def target_url(scout: Scout, url, env, blog=False) -> str:
    if url:
        return url
    if env:
        if blog:
            resolved = scout.resolve_blog_url(env)
            click.secho(f"Using blog URL from .env.{env}: {resolved}", fg="blue", err=True)
        else:
            resolved = scout.resolve_environment_url(env)
            click.secho(f"Using URL from .env.{env}: {resolved}", fg="blue", err=True)
        return resolved
    raise ScoutError("Please provide a URL or --env option")


def emit_report(scout: Scout, result, fmt, output, save_json=True):
    rendered = scout.report(result, fmt, output, save_json=save_json)
    if rendered.json_path:
        click.secho(f"JSON backup saved to: {rendered.json_path}", fg="blue", err=True)
    if rendered.output_path:
        click.secho(f"Report saved to: {rendered.output_path}", fg="green", err=True)
    else:
        click.echo(rendered.text)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="SEO Scout, version %(version)s")
@click.option(
    "--log-level", "log_level",
    default="INFO", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Logging level"
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Log file (stderr only when omitted)"
)
@click.option(
    "--project-root", "project_root",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root with .env files and .seo-scout.json (default: cwd)"
)
@click.pass_context
def cli(ctx, log_level, log_file, project_root):
    """SEO analysis of sitemaps, environments and git revisions."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    ctx.ensure_object(dict)
    ctx.obj["project_root"] = project_root or Path.cwd()


@cli.command("analyze", context_settings=CONTEXT_SETTINGS)
@click.argument("url", required=False)
@click.option("--env", "-e", "env", default=None, help="Environment whose base URL is analyzed")
@click.option("--blog", is_flag=True, help="With --env, analyze the environment's blog URL instead")
@click.option("--single", "-s", is_flag=True, help="Analyze only the given page, not the sitemap")
@click.option("--audit", "-a", is_flag=True, help="Run the Lighthouse audit for every page (slow)")
@click.option("--format", "-f", "fmt", default="console", show_default=True, help=FORMAT_HELP)
@click.option(
    "--output", "-o", "output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report to this file"
)
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Analyze at most N pages")
@click.option("--random", "random_", type=click.IntRange(min=1), default=None, help="Sample N random pages")
@click.option("--match", multiple=True, help="Only URLs containing this substring (repeatable)")
@click.option("--delay", type=click.IntRange(min=0), default=0, help="Delay between requests (ms)")
@click.option("--fail-on-errors", is_flag=True, help="Exit with status 1 when any page fails")
@click.option("--no-save-json", is_flag=True, help="Do not write the JSON snapshot")
@click.pass_context
def analyze(ctx, url, env, blog, single, audit, fmt, output, limit, random_, match, delay,
            fail_on_errors, no_save_json):
    """Analyze a website from its sitemap or a single page."""
    try:
        get_reporter(fmt)
        scout = make_scout(ctx)
        url = target_url(scout, url, env, blog)
        banner("SEO Scout Analysis")
        options = AnalyzeOptions(
            single=single,
            audit=audit,
            limit=limit,
            random=random_,
            match=list(match),
            delay_ms=delay,
        )
        result = asyncio.run(scout.analyze(url, options))
        if fail_on_errors and result.errors:
            raise PageErrorsFound(
                f"Encountered {len(result.errors)} page errors (example: {result.errors[0].url})"
            )
        emit_report(scout, result, fmt, output, save_json=not no_save_json)
    except Exception as exc:
        print_error(exc)


@cli.command("compare", context_settings=CONTEXT_SETTINGS)
@click.option("--env", "-e", "env", default="staging", show_default=True, help="Primary environment")
@click.option(
    "--compare-env", "-c", "compare_env",
    default="prod", show_default=True,
    help="Environment to compare with"
)
@click.option("--format", "-f", "fmt", default="console", show_default=True, help=FORMAT_HELP)
@click.option(
    "--output", "-o", "output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report to this file"
)
@click.pass_context
def compare(ctx, env, compare_env, fmt, output):
    """Compare the SEO state of two environments."""
    try:
        get_reporter(fmt)
        scout = make_scout(ctx)
        banner("SEO Environment Comparison")
        comparison = asyncio.run(scout.compare_environments(env, compare_env))
        emit_report(scout, comparison, fmt, output)
    except Exception as exc:
        print_error(exc)


@cli.command("revision-compare", context_settings=CONTEXT_SETTINGS)
@click.argument("revision1")
@click.argument("revision2", default="HEAD")
@click.option("--env", "-e", "env", default="staging", show_default=True, help="Environment to test against")
@click.option("--format", "-f", "fmt", default="console", show_default=True, help=FORMAT_HELP)
@click.option(
    "--output", "-o", "output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report to this file"
)
@click.pass_context
def revision_compare(ctx, revision1, revision2, env, fmt, output):
    """Compare SEO-relevant changes between two git revisions (REVISION2 defaults to HEAD)."""
    try:
        get_reporter(fmt)
        scout = make_scout(ctx)
        banner("Revision SEO Comparison")
        click.secho(f"Comparing revisions: {revision1} → {revision2}", fg="blue", err=True)
        click.secho(f"Environment: {env}\n", fg="blue", err=True)
        comparison = asyncio.run(scout.revision_compare(revision1, revision2, env))
        emit_report(scout, comparison, fmt, output)
    except Exception as exc:
        print_error(exc)


@cli.command("list", context_settings=CONTEXT_SETTINGS)
@click.argument("url", required=False)
@click.option("--env", "-e", "env", default=None, help="Environment whose sitemap is listed")
@click.option("--blog", is_flag=True, help="With --env, list the environment's blog sitemap")
@click.pass_context
def list_pages(ctx, url, env, blog):
    """List all pages of a sitemap."""
    try:
        scout = make_scout(ctx)
        url = target_url(scout, url, env, blog)
        pages = asyncio.run(scout.list_pages(url))
    except Exception as exc:
        print_error(exc)

    click.secho(f"\nFound {len(pages)} pages in sitemap:\n", fg="green", bold=True)
    for index, page in enumerate(pages, 1):
        click.echo(click.style(f"{index:>3}. ", fg="cyan") + page.loc)
    click.echo()


if __name__ == "__main__":
    cli()

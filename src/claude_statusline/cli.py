"""CLI entry point for claude-statusline.

Configure it in ~/.claude/settings.json::

    {"statusLine": {"type": "command", "command": "claude-statusline"}}
"""

import logging
import os
import sys
from pathlib import Path

import click

from .config import CACHE_MAX_AGE, get_cache_path, get_context_overhead
from .core import MalformedSessionInput, SessionInput
from .statusline import build_status_line
from .usage import UsageCache

logger = logging.getLogger(__name__)


def _debug_from_env() -> bool:
    return os.environ.get("CLAUDE_STATUSLINE_DEBUG", "").strip().lower() not in ("", "0", "false", "no", "off")


def _configure_logging(verbose: bool) -> None:
    # stdout carries the status line; diagnostics go to stderr only.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger = logging.getLogger("claude_statusline")
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


@click.command()
@click.option(
    "--cache-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Usage-limits cache file (default: $CLAUDE_STATUSLINE_CACHE or <tmp>/claude-usage-cache).",
)
@click.option("--cache-max-age", type=click.FloatRange(min=0), default=CACHE_MAX_AGE, show_default=True,
              help="Seconds a cached usage response stays fresh.")
@click.option("--overhead", type=click.IntRange(min=0), default=None,
              help="Tokens added to reported context usage (default: 12000).")
@click.option("--no-limits", is_flag=True, help="Skip the rate-limit segment (no network access).")
@click.option("--no-git", is_flag=True, help="Skip the git segment.")
@click.option("--verbose", "-v", is_flag=True,
              help="Log diagnostics to stderr (also enabled by $CLAUDE_STATUSLINE_DEBUG).")
def main(cache_file, cache_max_age, overhead, no_limits, no_git, verbose):
    """Print a one-line status summary for the Claude Code session JSON on stdin."""
    _configure_logging(verbose or _debug_from_env())

    raw = sys.stdin.buffer.read()
    try:
        session = SessionInput.from_json(raw)
    except MalformedSessionInput as e:
        logger.warning("%s; rendering fallback line", e)
        session = SessionInput(cwd=os.environ.get("PWD", ""))

    usage_cache = UsageCache(
        path=cache_file if cache_file is not None else get_cache_path(),
        max_age=cache_max_age,
    )
    line = build_status_line(
        session,
        usage_cache=usage_cache,
        overhead=overhead if overhead is not None else get_context_overhead(),
        fetch_limits=not no_limits,
        probe_git=not no_git,
    )
    click.echo(line)

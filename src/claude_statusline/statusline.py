"""Resolve every status line field from the session input and render it."""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import TypeVar

from .config import CONTEXT_OVERHEAD
from .context import resolve_context_usage
from .core import UNKNOWN, ContextUsage, SessionInput, StatusSnapshot
from .git import resolve_git_state
from .render import render_status_line, shorten_home
from .session_name import resolve_session_name
from .usage import UsageCache

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _best_effort(resolver: Callable[..., T], *args, default: T, **kwargs) -> T:
    """Call one segment's resolver; a failure costs that segment only."""
    try:
        return resolver(*args, **kwargs)
    except Exception:
        logger.debug("%s failed", resolver.__name__, exc_info=True)
        return default


def build_snapshot(
    session: SessionInput,
    usage_cache: UsageCache | None = None,
    home: str | None = None,
    overhead: int = CONTEXT_OVERHEAD,
    projects_path: Path | None = None,
    fetch_limits: bool = True,
    probe_git: bool = True,
) -> StatusSnapshot:
    """Resolve each field independently; any that cannot be resolved is left out."""
    if home is None:
        home = str(Path.home())

    unknown_context = ContextUsage(
        tokens_used=UNKNOWN,
        tokens_left=UNKNOWN,
        percent=0,
        context_size=session.context_size,
    )
    context = _best_effort(resolve_context_usage, session, overhead=overhead, default=unknown_context)

    session_name = _best_effort(
        resolve_session_name,
        session.session_id,
        session.project_dir,
        projects_path=projects_path,
        default=None,
    )

    limits = None
    if fetch_limits:
        cache = usage_cache if usage_cache is not None else UsageCache()
        limits = _best_effort(cache.get_usage_limits, default=None)

    git = _best_effort(resolve_git_state, session.cwd, default=None) if probe_git else None

    return StatusSnapshot(
        directory=shorten_home(session.cwd, home),
        model=session.model,
        context=context,
        cost_usd=session.cost_usd,
        session_name=session_name,
        mode=session.mode,
        limits=limits,
        git=git,
    )


def build_status_line(
    session: SessionInput,
    now: datetime | None = None,
    **options,
) -> str:
    """Resolve and render in one call. ``options`` are passed to build_snapshot()."""
    return render_status_line(build_snapshot(session, **options), now=now)

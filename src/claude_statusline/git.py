"""Git branch and dirty state for the working directory.

All queries pass ``--no-optional-locks`` where git would otherwise refresh
the index, so probing never leaves an ``index.lock`` behind or races with
the user's own git commands.
"""

import logging
import subprocess

from .config import PROBE_TIMEOUT
from .core import GitState

logger = logging.getLogger(__name__)


def _git(directory: str, *args: str) -> str | None:
    """Run a git command in ``directory``; return stdout, or None on any failure."""
    try:
        result = subprocess.run(
            ["git", "-C", directory, "--no-optional-locks", *args],
            capture_output=True,
            text=True,
            timeout=PROBE_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git %s failed in %s: %s", " ".join(args), directory, e)
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def resolve_git_state(directory: str) -> GitState | None:
    """Return the branch and dirty flag, or None outside a repo or on a detached HEAD."""
    if not directory:
        return None

    if _git(directory, "rev-parse", "--git-dir") is None:
        return None

    branch = (_git(directory, "branch", "--show-current") or "").strip()
    if not branch:
        return None

    status = _git(directory, "status", "--porcelain")
    # Untracked files count as dirty, same as `git status`.
    dirty = bool(status and status.strip())
    return GitState(branch=branch, dirty=dirty)

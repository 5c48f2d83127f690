"""Assemble a StatusSnapshot into the final ANSI-colored line.

Layout, with optional parts in brackets:

    [name | ]~/dir | [Model][ | mode |] Context: 12% (25k/174k) | $0.15[ | 5h: 40% → 2h5m | 7d: 12% → 3d4h][ | main*]
"""

from datetime import datetime

from .core import ContextUsage, GitState, StatusSnapshot, UsageLimits, UsageWindow
from .formatting import (
    CYAN,
    GREEN,
    MAGENTA,
    RED,
    RESET,
    WHITE,
    band_color,
    format_cost,
    format_time_until,
    format_tokens,
)


def shorten_home(path: str, home: str) -> str:
    """Replace a leading home directory with "~"."""
    home = home.rstrip("/")
    if not home or not path:
        return path
    if path == home:
        return "~"
    if path.startswith(home + "/"):
        return "~" + path[len(home):]
    return path


def _session_segment(name: str | None) -> str:
    if not name:
        return ""
    return f"{MAGENTA}{name}{RESET} | "


def _mode_segment(mode: str | None) -> str:
    if not mode:
        return ""
    return f" | {mode} |"


def _context_segment(context: ContextUsage) -> str:
    used = format_tokens(context.tokens_used)
    left = format_tokens(context.tokens_left)
    color = band_color(context.percent)
    return f"{WHITE}Context:{RESET} {color}{context.percent}%{RESET} ({used}/{left})"


def _window_segment(label: str, window: UsageWindow, now: datetime | None) -> str:
    text = f"{label}: {band_color(window.utilization)}{window.utilization}%{RESET}"
    countdown = format_time_until(window.resets_at, now=now)
    if countdown:
        text += f" → {MAGENTA}{countdown}{RESET}"
    return text


def _limits_segment(limits: UsageLimits | None, now: datetime | None) -> str:
    if limits is None:
        return ""
    five = _window_segment("5h", limits.five_hour, now)
    seven = _window_segment("7d", limits.seven_day, now)
    return f" | {five} | {seven}"


def _git_segment(git: GitState | None) -> str:
    if git is None:
        return ""
    dirty = f"{RED}*{RESET}" if git.dirty else ""
    return f" | {CYAN}{git.branch}{RESET}{dirty}"


def render_status_line(snapshot: StatusSnapshot, now: datetime | None = None) -> str:
    """Render the status line. Pure: same snapshot and ``now`` give the same string."""
    return (
        f"{_session_segment(snapshot.session_name)}"
        f"{CYAN}{snapshot.directory}{RESET} | [{snapshot.model}]"
        f"{_mode_segment(snapshot.mode)} "
        f"{_context_segment(snapshot.context)}"
        f" | {GREEN}{format_cost(snapshot.cost_usd)}{RESET}"
        f"{_limits_segment(snapshot.limits, now)}"
        f"{_git_segment(snapshot.git)}"
    )

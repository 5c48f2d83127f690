"""Small pure formatters: countdowns, token counts, severity bands, colors."""

from datetime import datetime, timezone
from typing import Optional, Union

from .core import TokenCount

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
WHITE = "\033[97m"

BAND_COLORS = {
    "low": GREEN,
    "medium": YELLOW,
    "high": RED,
}


def classify(percent: int) -> str:
    """Map a 0-100 percentage to a severity band: "low", "medium" or "high"."""
    if percent >= 80:
        return "high"
    if percent >= 60:
        return "medium"
    return "low"


def band_color(percent: int) -> str:
    """ANSI color for a percentage, clamped to 0-100 before classifying."""
    return BAND_COLORS[classify(max(0, min(100, percent)))]


def format_tokens(value: TokenCount) -> str:
    """Compact token count: 1999 -> "1k". Non-integers pass through unchanged."""
    if not isinstance(value, int) or isinstance(value, bool):
        return str(value)
    if value >= 1000:
        return f"{value // 1000}k"
    return str(value)


def format_cost(cost_usd: float) -> str:
    return f"${cost_usd:.2f}"


def format_time_until(value: Union[str, datetime, None], now: Optional[datetime] = None) -> str:
    """Countdown to ``value`` using the two most significant units.

    Examples: "3d5h", "2h30m", "45m", "now". Returns "" when ``value`` is
    missing or cannot be parsed.
    """
    reset_at = value if isinstance(value, datetime) else parse_iso(value)
    if reset_at is None:
        return ""
    if reset_at.tzinfo is None:
        reset_at = reset_at.replace(tzinfo=timezone.utc)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff = int((reset_at - now).total_seconds())
    if diff <= 0:
        return "now"

    days = diff // 86400
    hours = (diff % 86400) // 3600
    mins = (diff % 3600) // 60

    if days > 0:
        return f"{days}d{hours}h"
    if hours > 0:
        return f"{hours}h{mins}m"
    return f"{mins}m"


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string."""
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None

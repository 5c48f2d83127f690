"""Path resolution and tunables for the status line."""

import os
import tempfile
from pathlib import Path

CACHE_MAX_AGE = 300  # seconds
CONTEXT_OVERHEAD = 12_000  # system prompt, tool schemas, etc. not itemized in usage
DEFAULT_CONTEXT_SIZE = 200_000

USAGE_URL = "https://api.anthropic.com/api/oauth/usage"
USAGE_BETA_HEADER = "oauth-2025-04-20"
REQUEST_TIMEOUT = 2.0
PROBE_TIMEOUT = 2.0  # git and keychain subprocesses

KEYCHAIN_SERVICE = "Claude Code-credentials"


def get_claude_home() -> Path:
    """Return Claude Code's configuration directory."""
    env = os.environ.get("CLAUDE_CONFIG_DIR")
    if env:
        return Path(env)

    return Path.home() / ".claude"


def get_projects_path() -> Path:
    """Return the path to Claude Code's projects directory."""
    return get_claude_home() / "projects"


def get_credentials_path() -> Path:
    """Return the path to the OAuth credentials file."""
    return get_claude_home() / ".credentials.json"


def get_cache_path() -> Path:
    """Return the path of the shared usage-limits cache file."""
    env = os.environ.get("CLAUDE_STATUSLINE_CACHE")
    if env:
        return Path(env)

    return Path(tempfile.gettempdir()) / "claude-usage-cache"


def get_context_overhead() -> int:
    """Return the token overhead added to reported context usage."""
    env = os.environ.get("CLAUDE_STATUSLINE_OVERHEAD", "")
    if env.isdigit():
        return int(env)
    return CONTEXT_OVERHEAD

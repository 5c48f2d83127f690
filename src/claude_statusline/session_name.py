"""Custom session titles set with /rename.

Claude Code keeps one directory per project under ~/.claude/projects/, named
after the project path with "/" replaced by "-". Inside it:

- sessions-index.json: session metadata, including ``customTitle`` once the
  index has caught up with a rename. Either ``{"entries": [...]}`` or a bare
  list of entries.
- <session id>.jsonl: the transcript. A rename appends a record of type
  "custom-title" immediately, so it is the fallback for fresh renames.
"""

import json
import logging
from pathlib import Path

from .config import get_projects_path
from .transcript import find_last_record

logger = logging.getLogger(__name__)


def escape_project_dir(project_dir: str) -> str:
    """/Users/alice/dev/app -> -Users-alice-dev-app"""
    return project_dir.replace("/", "-")


def get_project_storage(project_dir: str, projects_path: Path | None = None) -> Path:
    base = projects_path if projects_path is not None else get_projects_path()
    return base / escape_project_dir(project_dir)


def title_from_index(index_path: Path, session_id: str) -> str | None:
    """Look up ``customTitle`` for ``session_id`` in a sessions-index.json."""
    if not index_path.exists():
        return None

    try:
        data = json.loads(index_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read sessions-index.json at %s: %s", index_path, e)
        return None

    entries = data.get("entries", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        return None

    for entry in entries:
        if not isinstance(entry, dict) or entry.get("sessionId") != session_id:
            continue
        title = entry.get("customTitle")
        if isinstance(title, str) and title:
            return title
    return None


def title_from_transcript(transcript_path: Path) -> str | None:
    """Return the most recent custom title recorded in a session transcript."""
    record = find_last_record(
        transcript_path,
        lambda r: r.get("type") == "custom-title" and bool(r.get("customTitle")),
    )
    if record is None:
        return None
    return str(record["customTitle"])


def resolve_session_name(
    session_id: str,
    project_dir: str,
    projects_path: Path | None = None,
) -> str | None:
    """Return the session's custom title, or None if it was never renamed."""
    if not session_id or not project_dir:
        return None

    storage = get_project_storage(project_dir, projects_path)
    return (
        title_from_index(storage / "sessions-index.json", session_id)
        or title_from_transcript(storage / f"{session_id}.jsonl")
    )

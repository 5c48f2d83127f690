"""Newest-first reading of Claude Code session transcripts (.jsonl).

Transcripts are append-only, one JSON record per line, and can grow to tens
of megabytes. The status line only ever wants the most recent record of a
given kind, so the file is read backwards in fixed-size blocks and parsing
stops at the first match.

Record kinds used here:
- "assistant": carries ``message.usage`` with the token breakdown of the
  API response that produced it.
- "custom-title": written when the user renames the session; carries
  ``customTitle``.
Everything else is ignored.
"""

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

BLOCK_SIZE = 64 * 1024


def iter_lines_reversed(path: Path, block_size: int = BLOCK_SIZE) -> Iterator[bytes]:
    """Yield the non-empty lines of ``path`` from last to first."""
    with path.open("rb") as f:
        f.seek(0, 2)
        position = f.tell()
        remainder = b""

        while position > 0:
            read_size = min(block_size, position)
            position -= read_size
            f.seek(position)
            block = f.read(read_size) + remainder

            lines = block.split(b"\n")
            # The first piece may be the tail of a line that starts in an earlier block.
            remainder = lines.pop(0)
            for line in reversed(lines):
                if line.strip():
                    yield line

        if remainder.strip():
            yield remainder


def iter_records_reversed(path: Path) -> Iterator[dict]:
    """Yield parsed JSONL records newest first, skipping lines that are not objects."""
    for line in iter_lines_reversed(path):
        try:
            record = json.loads(line)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug("Skipping bad transcript line in %s: %s", path, e)
            continue
        if isinstance(record, dict):
            yield record


def find_last_record(path: Path, predicate: Callable[[dict], bool]) -> dict | None:
    """Return the most recent record matching ``predicate``, or None.

    A missing or unreadable file is treated the same as no match.
    """
    if not path.is_file():
        return None
    try:
        for record in iter_records_reversed(path):
            if predicate(record):
                return record
    except OSError as e:
        logger.debug("Failed to read transcript %s: %s", path, e)
    return None


def record_usage(record: dict) -> dict | None:
    """Return the usage object of a record (``message.usage`` or top-level ``usage``)."""
    message = record.get("message")
    if isinstance(message, dict) and isinstance(message.get("usage"), dict):
        return message["usage"]
    if isinstance(record.get("usage"), dict):
        return record["usage"]
    return None

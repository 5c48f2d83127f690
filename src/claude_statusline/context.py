"""Context-window usage reconciled from the session payload and the transcript.

Claude Code does not always report usage the same way. Sources, in order:

1. ``context_window.current_usage`` - the breakdown of the latest API call.
2. ``context_window.total_input_tokens`` + ``total_output_tokens``.
3. The last usage record in the session transcript, when 1 and 2 add up to
   zero (e.g. right after a resume, before the next API call).

The usage object never includes the system prompt scaffolding and tool
schemas, so a fixed overhead is added to get close to what ``/context``
reports.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from .config import CONTEXT_OVERHEAD
from .core import UNKNOWN, ContextUsage, SessionInput, TokenUsage
from .transcript import find_last_record, record_usage

logger = logging.getLogger(__name__)


def from_current_usage(session: SessionInput) -> int | None:
    if session.current_usage is None:
        return None
    return session.current_usage.total


def from_totals(session: SessionInput) -> int | None:
    return session.total_input_tokens + session.total_output_tokens


def from_transcript(session: SessionInput) -> int | None:
    if not session.transcript_path:
        return None
    record = find_last_record(
        Path(session.transcript_path),
        lambda r: record_usage(r) is not None,
    )
    if record is None:
        return None
    return TokenUsage.from_dict(record_usage(record)).total


# Each source returns None when it has nothing to say.
STRUCTURED_SOURCES: list[Callable[[SessionInput], int | None]] = [from_current_usage, from_totals]


def count_context_tokens(session: SessionInput) -> int:
    """Raw token count before overhead; 0 when no source has data."""
    tokens = 0
    for source in STRUCTURED_SOURCES:
        count = source(session)
        if count is not None:
            tokens = count
            break

    if tokens == 0:
        tokens = from_transcript(session) or 0
        if tokens:
            logger.debug("Context usage taken from transcript: %d tokens", tokens)
    return tokens


def resolve_context_usage(session: SessionInput, overhead: int = CONTEXT_OVERHEAD) -> ContextUsage:
    """Resolve how much of the context window is in use.

    Returns ``UNKNOWN`` token counts and 0% until some source reports usage.
    """
    context_size = session.context_size
    tokens = count_context_tokens(session)

    if tokens <= 0:
        return ContextUsage(
            tokens_used=UNKNOWN,
            tokens_left=UNKNOWN,
            percent=0,
            context_size=context_size,
        )

    used = tokens + overhead
    return ContextUsage(
        tokens_used=used,
        tokens_left=context_size - used,
        percent=used * 100 // context_size,
        context_size=context_size,
    )

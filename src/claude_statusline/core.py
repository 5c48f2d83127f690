"""Core data models for claude-statusline."""

import json
from dataclasses import dataclass
from typing import Optional, Union

from .config import DEFAULT_CONTEXT_SIZE

UNKNOWN = "..."  # placeholder until the first usage report arrives

TokenCount = Union[int, str]  # int, or UNKNOWN


class MalformedSessionInput(ValueError):
    """The session JSON on stdin could not be parsed into an object."""


def _as_int(value, default: int = 0) -> int:
    """Coerce a JSON number (or numeric string) to int, truncating toward zero."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _as_float(value, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class TokenUsage:
    """One API response's token breakdown."""

    input: int = 0
    cache_creation_input: int = 0
    cache_read_input: int = 0
    output: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "TokenUsage":
        return cls(
            input=_as_int(data.get("input_tokens")),
            cache_creation_input=_as_int(data.get("cache_creation_input_tokens")),
            cache_read_input=_as_int(data.get("cache_read_input_tokens")),
            output=_as_int(data.get("output_tokens")),
        )

    @property
    def total(self) -> int:
        return self.input + self.cache_creation_input + self.cache_read_input + self.output


@dataclass(frozen=True)
class SessionInput:
    """The session description Claude Code pipes to the status line command."""

    model: str = "Unknown"
    cwd: str = ""
    session_id: str = ""
    project_dir: str = ""
    mode: Optional[str] = None
    cost_usd: float = 0.0
    context_size: int = DEFAULT_CONTEXT_SIZE
    current_usage: Optional[TokenUsage] = None  # absent when null or {}
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    transcript_path: Optional[str] = None

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "SessionInput":
        """Parse stdin text or raw bytes.

        Raises MalformedSessionInput if it is not a UTF-8 JSON object.
        """
        try:
            data = json.loads(text)
        except (ValueError, TypeError, RecursionError) as e:
            raise MalformedSessionInput(f"session input is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedSessionInput(
                f"session input must be a JSON object, got {type(data).__name__}"
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionInput":
        model_info = data.get("model")
        if isinstance(model_info, dict):
            model = model_info.get("display_name") or "Unknown"
        elif isinstance(model_info, str) and model_info:
            model = model_info
        else:
            model = "Unknown"

        workspace = _section(data, "workspace")
        context_window = _section(data, "context_window")

        context_size = _as_int(context_window.get("context_window_size"), DEFAULT_CONTEXT_SIZE)
        if context_size <= 0:
            context_size = DEFAULT_CONTEXT_SIZE

        raw_usage = context_window.get("current_usage")
        current_usage = TokenUsage.from_dict(raw_usage) if isinstance(raw_usage, dict) and raw_usage else None

        mode = data.get("mode")
        transcript = data.get("transcript_path")

        return cls(
            model=str(model),
            cwd=str(data.get("cwd") or workspace.get("current_dir") or ""),
            session_id=str(data.get("session_id") or ""),
            project_dir=str(workspace.get("project_dir") or ""),
            mode=str(mode) if mode else None,
            cost_usd=_as_float(_section(data, "cost").get("total_cost_usd")),
            context_size=context_size,
            current_usage=current_usage,
            total_input_tokens=_as_int(context_window.get("total_input_tokens")),
            total_output_tokens=_as_int(context_window.get("total_output_tokens")),
            transcript_path=str(transcript) if transcript else None,
        )


@dataclass(frozen=True)
class UsageWindow:
    """A rate-limit window: whole-percent utilization and when it resets."""

    utilization: int
    resets_at: Optional[str] = None  # ISO 8601


@dataclass(frozen=True)
class UsageLimits:
    """The 5-hour and 7-day rate-limit windows."""

    five_hour: UsageWindow
    seven_day: UsageWindow

    @classmethod
    def from_payload(cls, payload) -> Optional["UsageLimits"]:
        """Build limits from the usage API body, or None if either window is unusable."""
        if not isinstance(payload, dict):
            return None
        five_hour = _window(payload.get("five_hour"))
        seven_day = _window(payload.get("seven_day"))
        if five_hour is None or seven_day is None:
            return None
        return cls(five_hour=five_hour, seven_day=seven_day)


def _window(data) -> Optional[UsageWindow]:
    if not isinstance(data, dict):
        return None
    utilization = _as_int(data.get("utilization"), default=-1)
    if utilization < 0:
        return None
    resets_at = data.get("resets_at")
    return UsageWindow(
        utilization=utilization,
        resets_at=str(resets_at) if resets_at else None,
    )


@dataclass(frozen=True)
class ContextUsage:
    """Resolved context-window consumption."""

    tokens_used: TokenCount
    tokens_left: TokenCount
    percent: int
    context_size: int


@dataclass(frozen=True)
class GitState:
    """Current branch and whether the working tree has uncommitted changes."""

    branch: str
    dirty: bool = False


@dataclass(frozen=True)
class StatusSnapshot:
    """Everything the renderer needs, fully resolved."""

    directory: str
    model: str
    context: ContextUsage
    cost_usd: float = 0.0
    session_name: Optional[str] = None
    mode: Optional[str] = None
    limits: Optional[UsageLimits] = None
    git: Optional[GitState] = None

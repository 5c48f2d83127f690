"""Shared test fixtures for claude-statusline."""

import json

import pytest

from claude_statusline.credentials.keychain import KeychainCredentialStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.claude, keychain and usage cache."""
    claude_home = tmp_path / "claude-home"
    claude_home.mkdir()
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(claude_home))
    monkeypatch.setenv("CLAUDE_STATUSLINE_CACHE", str(tmp_path / "usage-cache.json"))
    monkeypatch.delenv("CLAUDE_STATUSLINE_OVERHEAD", raising=False)
    monkeypatch.delenv("CLAUDE_STATUSLINE_DEBUG", raising=False)
    monkeypatch.setattr(KeychainCredentialStore, "is_available", lambda self: False)
    return claude_home


@pytest.fixture
def claude_home(isolated_env):
    return isolated_env


@pytest.fixture
def usage_payload():
    return {
        "five_hour": {"utilization": 42.7, "resets_at": "2025-06-01T14:30:00.000Z"},
        "seven_day": {"utilization": 81.0, "resets_at": "2025-06-04T09:00:00Z"},
    }


@pytest.fixture
def session_payload():
    """A realistic status line payload as Claude Code sends it."""
    return {
        "session_id": "session-001",
        "transcript_path": "",
        "cwd": "/Users/testuser/dev/myapp/src",
        "model": {"id": "claude-opus-4-5", "display_name": "Opus 4.5"},
        "workspace": {
            "current_dir": "/Users/testuser/dev/myapp/src",
            "project_dir": "/Users/testuser/dev/myapp",
        },
        "version": "2.0.76",
        "cost": {"total_cost_usd": 0.146, "total_duration_ms": 45000},
        "context_window": {
            "total_input_tokens": 15234,
            "total_output_tokens": 4521,
            "context_window_size": 200000,
            "current_usage": {
                "input_tokens": 1000,
                "output_tokens": 500,
                "cache_creation_input_tokens": 0,
                "cache_read_input_tokens": 0,
            },
        },
    }


def _usage_record(uuid, input_tokens, output_tokens, cache_creation=0, cache_read=0):
    return {
        "type": "assistant",
        "uuid": uuid,
        "timestamp": "2025-01-20T10:00:30Z",
        "message": {
            "role": "assistant",
            "content": [{"type": "text", "text": "Done."}],
            "usage": {
                "input_tokens": input_tokens,
                "cache_creation_input_tokens": cache_creation,
                "cache_read_input_tokens": cache_read,
                "output_tokens": output_tokens,
            },
        },
    }


@pytest.fixture
def transcript_lines():
    """Transcript records, oldest first.

    The newest usage record (uuid-004) sums to 2000 + 300 + 40000 + 700 = 43000.
    The newest custom title is "auth refactor v2".
    """
    return [
        {"type": "user", "uuid": "uuid-001", "message": {"role": "user", "content": "Help me refactor auth"}},
        _usage_record("uuid-002", 500, 100),
        {"type": "custom-title", "customTitle": "auth refactor", "sessionId": "session-001"},
        {"type": "user", "uuid": "uuid-003", "message": {"role": "user", "content": "Now split it up"}},
        _usage_record("uuid-004", 2000, 700, cache_creation=300, cache_read=40000),
        {"type": "custom-title", "customTitle": "auth refactor v2", "sessionId": "session-001"},
        {"type": "file-history-snapshot", "files": [{"path": "/src/auth.ts"}]},
        {"type": "user", "uuid": "uuid-005", "message": {"role": "user", "content": "Thanks"}},
    ]


@pytest.fixture
def tmp_transcript(tmp_path, transcript_lines):
    path = tmp_path / "transcript.jsonl"
    path.write_text("\n".join(json.dumps(line) for line in transcript_lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def tmp_project_storage(claude_home, transcript_lines):
    """A project directory under <claude home>/projects with an index and a transcript.

    The index knows a custom title for session-002 only; session-001 has to
    fall back to its transcript.
    """
    storage = claude_home / "projects" / "-Users-testuser-dev-myapp"
    storage.mkdir(parents=True)

    index = {
        "version": 1,
        "entries": [
            {
                "sessionId": "session-001",
                "firstPrompt": "Help me refactor auth",
                "messageCount": 8,
                "projectPath": "/Users/testuser/dev/myapp",
            },
            {
                "sessionId": "session-002",
                "firstPrompt": "Write tests for the API",
                "customTitle": "api tests",
                "messageCount": 3,
                "projectPath": "/Users/testuser/dev/myapp",
            },
        ],
    }
    (storage / "sessions-index.json").write_text(json.dumps(index), encoding="utf-8")
    (storage / "session-001.jsonl").write_text(
        "\n".join(json.dumps(line) for line in transcript_lines) + "\n", encoding="utf-8"
    )
    return storage

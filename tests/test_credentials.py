"""Tests for credential stores and token resolution."""

import json
import subprocess
from unittest.mock import patch

from claude_statusline.credentials import (
    CredentialStore,
    FileCredentialStore,
    KeychainCredentialStore,
    get_available_stores,
    resolve_token,
)
from claude_statusline.credentials.store import parse_access_token

# Captured before the autouse fixture stubs it out.
_keychain_is_available = KeychainCredentialStore.is_available

CREDENTIALS = {
    "claudeAiOauth": {
        "accessToken": "sk-ant-oat01-abc",
        "refreshToken": "sk-ant-ort01-def",
        "expiresAt": 1767225599000,
        "scopes": ["user:inference", "user:profile"],
        "subscriptionType": "max",
    }
}


class FakeStore(CredentialStore):
    def __init__(self, name, raw):
        self.name = name
        self.raw = raw
        self.reads = 0

    def is_available(self):
        return True

    def read(self):
        self.reads += 1
        return self.raw


class TestParseAccessToken:
    def test_valid(self):
        assert parse_access_token(json.dumps(CREDENTIALS)) == "sk-ant-oat01-abc"

    def test_missing_token(self):
        assert parse_access_token(json.dumps({"claudeAiOauth": {}})) is None
        assert parse_access_token(json.dumps({"other": 1})) is None
        assert parse_access_token(json.dumps({"claudeAiOauth": {"accessToken": ""}})) is None

    def test_garbage(self):
        assert parse_access_token("not json") is None
        assert parse_access_token("[]") is None


class TestFileCredentialStore:
    def test_reads_token(self, claude_home):
        (claude_home / ".credentials.json").write_text(json.dumps(CREDENTIALS), encoding="utf-8")
        store = FileCredentialStore()
        assert store.is_available() is True
        assert store.get_token() == "sk-ant-oat01-abc"

    def test_missing_file(self, claude_home):
        store = FileCredentialStore()
        assert store.is_available() is False
        assert store.get_token() is None

    def test_corrupt_file(self, claude_home):
        (claude_home / ".credentials.json").write_text("{", encoding="utf-8")
        assert FileCredentialStore().get_token() is None


class TestKeychainCredentialStore:
    def test_not_available_off_macos(self):
        store = KeychainCredentialStore()
        with patch("claude_statusline.credentials.keychain.sys.platform", "linux"):
            assert _keychain_is_available(store) is False

    def test_available_on_macos_with_security(self):
        store = KeychainCredentialStore()
        with (
            patch("claude_statusline.credentials.keychain.sys.platform", "darwin"),
            patch("claude_statusline.credentials.keychain.shutil.which", return_value="/usr/bin/security"),
        ):
            assert _keychain_is_available(store) is True

    def test_reads_generic_password(self):
        completed = subprocess.CompletedProcess(
            args=[], returncode=0, stdout=json.dumps(CREDENTIALS) + "\n", stderr="",
        )
        with patch("claude_statusline.credentials.keychain.subprocess.run", return_value=completed) as run:
            assert KeychainCredentialStore().get_token() == "sk-ant-oat01-abc"

        args = run.call_args.args[0]
        assert args[:2] == ["security", "find-generic-password"]
        assert "Claude Code-credentials" in args
        assert run.call_args.kwargs["timeout"] == 2.0

    def test_item_not_found(self):
        completed = subprocess.CompletedProcess(args=[], returncode=44, stdout="", stderr="not found")
        with patch("claude_statusline.credentials.keychain.subprocess.run", return_value=completed):
            assert KeychainCredentialStore().get_token() is None

    def test_timeout(self):
        error = subprocess.TimeoutExpired(cmd="security", timeout=2.0)
        with patch("claude_statusline.credentials.keychain.subprocess.run", side_effect=error):
            assert KeychainCredentialStore().read() is None


class TestResolveToken:
    def test_first_store_with_token_wins(self):
        first = FakeStore("file", json.dumps(CREDENTIALS))
        second = FakeStore("keychain", json.dumps({"claudeAiOauth": {"accessToken": "other"}}))
        assert resolve_token([first, second]) == "sk-ant-oat01-abc"
        assert second.reads == 0

    def test_falls_through_to_next_store(self):
        first = FakeStore("file", "{}")
        second = FakeStore("keychain", json.dumps(CREDENTIALS))
        assert resolve_token([first, second]) == "sk-ant-oat01-abc"

    def test_no_stores(self):
        assert resolve_token([]) is None

    def test_detects_file_store(self, claude_home):
        (claude_home / ".credentials.json").write_text(json.dumps(CREDENTIALS), encoding="utf-8")
        stores = get_available_stores()
        assert [s.name for s in stores] == ["file"]
        assert resolve_token() == "sk-ant-oat01-abc"

    def test_nothing_available(self):
        assert get_available_stores() == []
        assert resolve_token() is None

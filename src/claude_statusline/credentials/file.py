"""Credentials file backend (~/.claude/.credentials.json, used on Linux)."""

import logging
from pathlib import Path

from ..config import get_credentials_path
from .store import CredentialStore

logger = logging.getLogger(__name__)


class FileCredentialStore(CredentialStore):
    """Reads the plain-text credentials file Claude Code writes on Linux."""

    name = "file"

    def get_path(self) -> Path:
        return get_credentials_path()

    def is_available(self) -> bool:
        return self.get_path().is_file()

    def read(self) -> str | None:
        path = self.get_path()
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.debug("Failed to read credentials file %s: %s", path, e)
            return None

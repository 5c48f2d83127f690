"""Abstract base class for OAuth credential stores."""

import json
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Base class for places Claude Code keeps its OAuth credentials.

    Each store (credentials file, macOS Keychain) implements this interface
    so the usage client can ask for a bearer token without caring where it
    lives.
    """

    name: str  # "file", "keychain"

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if this store can be queried on this machine."""
        ...

    @abstractmethod
    def read(self) -> str | None:
        """Return the raw credentials JSON document, or None."""
        ...

    def get_token(self) -> str | None:
        """Return the OAuth access token held by this store, or None."""
        raw = self.read()
        if not raw:
            return None
        return parse_access_token(raw)


def parse_access_token(raw: str) -> str | None:
    """Extract ``claudeAiOauth.accessToken`` from a credentials document."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.debug("Credentials are not valid JSON: %s", e)
        return None
    if not isinstance(data, dict):
        return None

    oauth = data.get("claudeAiOauth")
    if not isinstance(oauth, dict):
        return None
    token = oauth.get("accessToken")
    if isinstance(token, str) and token:
        return token
    return None

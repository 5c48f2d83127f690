"""macOS Keychain backend.

Claude Code stores the same JSON document the Linux credentials file holds
as a generic password named "Claude Code-credentials". It is read with the
``security`` command-line tool so no extra bindings are needed.
"""

import logging
import shutil
import subprocess
import sys

from ..config import KEYCHAIN_SERVICE, PROBE_TIMEOUT
from .store import CredentialStore

logger = logging.getLogger(__name__)


class KeychainCredentialStore(CredentialStore):
    """Reads credentials from the macOS login keychain."""

    name = "keychain"

    def __init__(self, service: str = KEYCHAIN_SERVICE):
        self.service = service

    def is_available(self) -> bool:
        return sys.platform == "darwin" and shutil.which("security") is not None

    def read(self) -> str | None:
        try:
            result = subprocess.run(
                ["security", "find-generic-password", "-s", self.service, "-w"],
                capture_output=True,
                text=True,
                timeout=PROBE_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Keychain lookup failed: %s", e)
            return None

        if result.returncode != 0:
            logger.debug("No keychain item %r (exit %d)", self.service, result.returncode)
            return None
        return result.stdout.strip() or None

"""Auto-detect usable credential stores and resolve a bearer token."""

import logging

from .file import FileCredentialStore
from .keychain import KeychainCredentialStore
from .store import CredentialStore

logger = logging.getLogger(__name__)


def get_available_stores() -> list[CredentialStore]:
    """Return the stores usable on this machine, in lookup order (file first)."""
    stores = []
    for StoreClass in [FileCredentialStore, KeychainCredentialStore]:
        store = StoreClass()
        if store.is_available():
            stores.append(store)
    return stores


def resolve_token(stores: list[CredentialStore] | None = None) -> str | None:
    """Return the first OAuth access token any store yields, or None."""
    if stores is None:
        stores = get_available_stores()
    for store in stores:
        token = store.get_token()
        if token:
            logger.debug("Using OAuth token from %s store", store.name)
            return token
    return None


__all__ = [
    "CredentialStore",
    "FileCredentialStore",
    "KeychainCredentialStore",
    "get_available_stores",
    "resolve_token",
]

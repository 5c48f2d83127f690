"""Rate-limit usage from the Anthropic OAuth usage endpoint, with a file cache.

The endpoint returns the 5-hour and 7-day windows::

    {
      "five_hour": {"utilization": 42.0, "resets_at": "2025-12-31T23:59:59.000Z"},
      "seven_day": {"utilization": 17.5, "resets_at": "2026-01-04T08:00:00.000Z"}
    }

The status line is redrawn constantly, so responses are cached in a single
file shared by every invocation. Freshness comes from the file's mtime.
Concurrent writers are not coordinated; the last one wins.
"""

import json
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

import httpx

from .config import CACHE_MAX_AGE, REQUEST_TIMEOUT, USAGE_BETA_HEADER, USAGE_URL, get_cache_path
from .core import UsageLimits
from .credentials import resolve_token

logger = logging.getLogger(__name__)


class UsageLimitClient:
    """One-shot client for the usage endpoint. Never raises, never retries."""

    def __init__(
        self,
        token_resolver: Callable[[], str | None] | None = None,
        url: str = USAGE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.token_resolver = token_resolver
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def fetch(self) -> str | None:
        """Return the raw JSON body of the usage endpoint, or None on any failure."""
        token = self.token_resolver() if self.token_resolver else resolve_token()
        if not token:
            logger.debug("No OAuth token available; skipping usage fetch")
            return None

        headers = {
            "Authorization": f"Bearer {token}",
            "anthropic-beta": USAGE_BETA_HEADER,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(self.url, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug("Usage fetch failed: %s", e)
            return None

        try:
            payload = resp.json()
        except ValueError as e:
            logger.debug("Usage response is not JSON: %s", e)
            return None
        if not isinstance(payload, dict):
            logger.debug("Usage response is not an object: %r", payload)
            return None
        return resp.text


class UsageCache:
    """Time-boxed file cache in front of a UsageLimitClient."""

    def __init__(
        self,
        client: UsageLimitClient | None = None,
        path: Path | None = None,
        max_age: float = CACHE_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client if client is not None else UsageLimitClient()
        self.path = path if path is not None else get_cache_path()
        self.max_age = max_age
        self.clock = clock

    def get_usage_limits(self) -> UsageLimits | None:
        """Return current usage limits, from the cache when fresh, else from the API.

        A failed fetch returns None and leaves any existing cache file alone,
        so the next invocation tries again.
        """
        cached = self._read_fresh()
        if cached is not None:
            return UsageLimits.from_payload(cached)

        body = self.client.fetch()
        if body is None:
            return None

        limits = UsageLimits.from_payload(json.loads(body))
        self._write(body)
        return limits

    def age(self) -> float | None:
        """Seconds since the cache file was last written, or None if it does not exist."""
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            return None
        return self.clock() - mtime

    def _read_fresh(self) -> dict | None:
        age = self.age()
        if age is None or age >= self.max_age:
            return None

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable usage cache %s: %s", self.path, e)
            return None

        if not isinstance(payload, dict):
            logger.warning("Ignoring usage cache %s: not a JSON object", self.path)
            return None
        return payload

    def _write(self, body: str) -> None:
        # Write beside the target and rename so readers never see a partial file.
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    tmp.write(body)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.debug("Failed to write usage cache %s: %s", self.path, e)

"""Minimal Vercel KV client over the Upstash REST protocol.

Each command is POSTed to the base URL as a JSON array, e.g.
``["SET", "submission:abc", "..."]``, and answered with
``{"result": ...}`` or ``{"error": "..."}``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from formrelay.settings import settings

logger = logging.getLogger(__name__)


class KVError(RuntimeError):
    """The KV service accepted the request but rejected the command."""


def submission_key(submission_id: str, prefix: Optional[str] = None) -> str:
    return f"{settings.KV_KEY_PREFIX if prefix is None else prefix}{submission_id}"


class KVStore:
    def __init__(self, url: str, token: str, timeout: int = 10, session: Optional[requests.Session] = None):
        if not url or not token:
            raise RuntimeError("KV_URL and KV_TOKEN must both be set")
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "KVStore":
        return cls(settings.KV_URL or "", settings.KV_TOKEN or "")

    def command(self, *args: Any) -> Any:
        """Run one command and return its `result`.

        Raises requests.HTTPError on non-2xx and KVError on command errors.
        """
        body: List[Any] = [str(a) for a in args]
        headers = {"Authorization": f"Bearer {self.token}"}
        logger.debug("KV command %s %s", body[0], body[1] if len(body) > 1 else "")
        resp = self.session.post(self.url, json=body, headers=headers, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        if isinstance(data, dict) and data.get("error"):
            raise KVError(data["error"])
        return data.get("result") if isinstance(data, dict) else data

    def set(self, key: str, value: str) -> None:
        result = self.command("SET", key, value)
        if result != "OK":
            raise KVError(f"unexpected SET reply for {key}: {result!r}")
        logger.info("Stored %d chars at %s", len(value), key)

    def get(self, key: str) -> Optional[str]:
        return self.command("GET", key)

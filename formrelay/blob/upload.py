"""Upload files to Vercel Blob over its HTTP API."""

from __future__ import annotations

import logging
import mimetypes
import secrets
import string
from typing import Any, Dict, IO, Optional, Union
from urllib.parse import quote

import requests

from formrelay.settings import settings

logger = logging.getLogger(__name__)

# alphanumerics only so generated names never start with a special character
PREFIX_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
PREFIX_LENGTH = 10
API_VERSION = "7"


class BlobError(RuntimeError):
    """Raised when the blob service rejects an upload."""


def unique_filename(filename: str, length: int = PREFIX_LENGTH) -> str:
    """Prefix `filename` with a random id so uploads never overwrite each other."""
    prefix = "".join(secrets.choice(PREFIX_ALPHABET) for _ in range(length))
    return f"{prefix}-{filename}"


def put_blob(
    pathname: str,
    body: Union[bytes, IO[bytes]],
    token: str,
    content_type: Optional[str] = None,
    api_url: Optional[str] = None,
    timeout: int = 60,
) -> Dict[str, Any]:
    """Stream `body` to the blob store with public access.

    Returns the service's JSON (url, downloadUrl, pathname, contentType, ...).
    """
    base = (api_url or settings.BLOB_API_URL).rstrip("/")
    content_type = content_type or mimetypes.guess_type(pathname)[0] or "application/octet-stream"
    headers = {
        "authorization": f"Bearer {token}",
        "x-api-version": API_VERSION,
        "x-content-type": content_type,
        "x-add-random-suffix": "0",
    }
    url = f"{base}/{quote(pathname)}"
    logger.debug("PUT %s (%s)", url, content_type)
    try:
        resp = requests.put(url, data=body, headers=headers, params={"access": "public"}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise BlobError(str(e)) from e
    blob = resp.json()
    logger.info("Uploaded %s -> %s", pathname, blob.get("url"))
    return blob

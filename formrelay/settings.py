"""Application settings loaded from environment (and .env).

This module provides a small Settings holder backed by environment variables.
Keep this file simple and import `settings` from other modules.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

# Field label overrides live in a JSON file so they can be edited without touching code.
DEFAULT_LABELS_PATH = Path(__file__).parent / "schemas" / "field_labels.json"


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


@dataclass
class Settings:
    # Vercel KV / Upstash REST endpoint
    KV_URL: str | None = _get("KV_URL")
    KV_TOKEN: str | None = _get("KV_TOKEN")
    KV_KEY_PREFIX: str = _get("KV_KEY_PREFIX", "submission:")
    # "markdown" stores the rendered document, "json" stores the raw envelope
    KV_STORE_FORMAT: str = _get("KV_STORE_FORMAT", "markdown")

    # Notion
    NOTION_TOKEN: str | None = _get("NOTION_TOKEN")
    NOTION_DATABASE_ID: str | None = _get("NOTION_DATABASE_ID")
    # Fixed property names on the submissions database
    P_TITLE: str = _get("P_TITLE", "Submission ID")
    P_SERVICES: str = _get("P_SERVICES", "Services")
    P_SUBMITTED_AT: str = _get("P_SUBMITTED_AT", "Submitted At")

    # Vercel Blob
    BLOB_READ_WRITE_TOKEN: str | None = _get("BLOB_READ_WRITE_TOKEN")
    BLOB_API_URL: str = _get("BLOB_API_URL", "https://blob.vercel-storage.com")

    # Timestamps in markdown documents are rendered in this zone
    LOCAL_TZ: str = _get("LOCAL_TZ", "UTC")
    FIELD_LABELS_FILE: str = _get("FIELD_LABELS_FILE", str(DEFAULT_LABELS_PATH))

    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _get("LOG_FILE", None)


settings = Settings()

_REQUIRED = {
    "kv": [
        ("KV_URL", "Vercel KV REST URL"),
        ("KV_TOKEN", "Vercel KV REST token"),
    ],
    "notion": [
        ("NOTION_TOKEN", "Notion integration token"),
        ("NOTION_DATABASE_ID", "Notion submissions database id"),
    ],
    "blob": [
        ("BLOB_READ_WRITE_TOKEN", "Vercel Blob read/write token"),
    ],
}


def validate_required(sink: str) -> None:
    """Validate the secrets a sink needs and raise a helpful RuntimeError if missing.

    This function checks environment variables at runtime so callers can load a .env first.
    """
    if sink not in _REQUIRED:
        raise RuntimeError(f"Unknown sink '{sink}'; expected one of {', '.join(sorted(_REQUIRED))}")
    missing = [f"{name} ({desc})" for name, desc in _REQUIRED[sink] if not os.getenv(name)]
    if missing:
        msg = (
            "Missing required environment variables: "
            + ", ".join(missing)
            + "\nPlease set them in your .env or environment and try again."
        )
        raise RuntimeError(msg)

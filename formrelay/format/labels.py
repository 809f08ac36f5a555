"""Derive display labels from form field keys, with an override table."""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from formrelay.settings import settings

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_WORD_START = re.compile(r"(^|\s)(\S)")


def load_label_overrides(path: Optional[str] = None) -> Dict[str, str]:
    """Read the key -> label override table. A missing file yields an empty table."""
    p = Path(path or settings.FIELD_LABELS_FILE)
    if not p.exists():
        logger.debug("Label override file %s missing; using derived labels only", p)
        return {}
    with open(p, "r", encoding="utf8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise RuntimeError(f"Label override file {p} must contain a JSON object")
    return {str(k): str(v) for k, v in data.items()}


@lru_cache(maxsize=1)
def _default_overrides() -> Dict[str, str]:
    return load_label_overrides()


def humanize_key(key: str) -> str:
    """Underscores to spaces, split camel case, collapse spaces, capitalize each word."""
    s = str(key).replace("_", " ")
    s = _CAMEL_BOUNDARY.sub(" ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), s)


def derive_label(key: str, overrides: Optional[Dict[str, str]] = None) -> str:
    table = _default_overrides() if overrides is None else overrides
    if key in table:
        return table[key]
    # keys made only of separators humanize to nothing
    return humanize_key(key) or str(key).strip() or "Untitled Field"


def singular_label(label: str) -> str:
    """Strip one trailing 's' ("Contacts" -> "Contact").

    Naive: "Addresses" becomes "Addresse".
    """
    if label.endswith("s") and len(label) > 1:
        return label[:-1]
    return label

"""Map a submission to Notion database page properties.

The result is handed untouched to `notion.io.create_submission_page`; nothing
here talks to the API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from formrelay.format.inline import format_size, inline_value, to_json
from formrelay.format.labels import derive_label, singular_label
from formrelay.models.submission import SubmissionRecord
from formrelay.models.values import (
    Boolean,
    FieldValue,
    FileRef,
    Number,
    ObjectList,
    OpaqueObject,
    PrimitiveList,
    Text,
    classify,
    is_empty,
)
from formrelay.settings import settings

logger = logging.getLogger(__name__)

# Notion caps a single rich_text segment at 2000 characters
RICH_TEXT_LIMIT = 2000


@dataclass(frozen=True)
class PropertyNames:
    title: str = settings.P_TITLE
    services: str = settings.P_SERVICES
    submitted_at: str = settings.P_SUBMITTED_AT


def rich_text(content: str) -> Dict[str, Any]:
    segments: List[Dict[str, Any]] = []
    for start in range(0, len(content), RICH_TEXT_LIMIT):
        segments.append({"text": {"content": content[start : start + RICH_TEXT_LIMIT]}})
    if not segments:
        segments.append({"text": {"content": ""}})
    return {"rich_text": segments}


def _title(content: str) -> Dict[str, Any]:
    return {"title": [{"text": {"content": content[:RICH_TEXT_LIMIT]}}]}


def _multi_select(names: List[str]) -> Dict[str, Any]:
    # commas are not allowed in select option names
    options = [{"name": str(n).replace(",", " ").strip()} for n in names]
    return {"multi_select": [o for o in options if o["name"]]}


def _object_list_text(label: str, fv: ObjectList, overrides: Optional[Dict[str, str]]) -> str:
    item_label = singular_label(label)
    lines: List[str] = []
    for i, item in enumerate(fv.items, start=1):
        lines.append(f"{item_label} {i}")
        for key, value in item.items():
            lines.append(f"{derive_label(key, overrides)}: {inline_value(value)}")
    return "\n".join(lines)


def property_value(label: str, fv: FieldValue, overrides: Optional[Dict[str, str]] = None) -> Optional[Dict[str, Any]]:
    """Tagged Notion value for one field, or None when there is nothing to store."""
    if is_empty(fv):
        return None
    if isinstance(fv, Text):
        return rich_text(fv.value)
    if isinstance(fv, Number):
        return {"number": fv.value}
    if isinstance(fv, Boolean):
        return {"checkbox": fv.value}
    if isinstance(fv, PrimitiveList):
        return rich_text(", ".join(inline_value(item) for item in fv.items))
    if isinstance(fv, ObjectList):
        return rich_text(_object_list_text(label, fv, overrides))
    if isinstance(fv, FileRef):
        lines = [f"Name: {fv.name}", f"Size: {format_size(fv.size)}"]
        if fv.url:
            lines.append(f"URL: {fv.url}")
        return rich_text("\n".join(lines))
    value = fv.value if isinstance(fv, OpaqueObject) else fv
    return rich_text(to_json(value, indent=2))


def build_notion_properties(
    record: SubmissionRecord,
    submitted_at: Optional[datetime] = None,
    names: Optional[PropertyNames] = None,
    overrides: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    names = names or PropertyNames()
    ts = submitted_at or datetime.now(timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)

    props: Dict[str, Any] = {
        names.title: _title(record.id),
        names.services: _multi_select(record.services),
        names.submitted_at: {"date": {"start": ts.isoformat()}},
    }
    fixed = set(props)
    used: Dict[str, str] = {}

    for key, value in record.form_data.items():
        label = derive_label(key, overrides)
        if label in fixed:
            logger.warning("Field '%s' maps to reserved property '%s'; skipping", key, label)
            continue
        prop = property_value(label, classify(value), overrides)
        if prop is None:
            logger.debug("Field '%s' not provided; omitted from properties", key)
            continue
        if label in used:
            logger.warning("Fields '%s' and '%s' share label '%s'; keeping both", used[label], key, label)
            label = f"{label} ({key})"
        used[label] = key
        props[label] = prop

    logger.debug("Built %d Notion properties for submission %s", len(props), record.id)
    return props

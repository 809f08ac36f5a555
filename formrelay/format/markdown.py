"""Render a submission as a markdown document for the key-value sink.

Document layout:

    # New Form Submission
    **Submission ID:** ...
    **Submitted At:** ...
    ## Selected Services      (only when services were picked)
    ## Form Details
    ### <Field Label>         (one per form field, payload order)

Formatting degrades instead of raising: shapes it does not recognise are
embedded as pretty-printed JSON.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from formrelay.format.inline import NOT_PROVIDED, format_size, inline_value, literal, to_json
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

TITLE = "# New Form Submission"
PLACEHOLDER = f"_{NOT_PROVIDED}_"


def _resolve_tz(tz: tzinfo | str | None) -> tzinfo:
    if isinstance(tz, tzinfo):
        return tz
    name = tz or settings.LOCAL_TZ
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown time zone %r; falling back to UTC", name)
        return timezone.utc


def format_timestamp(submitted_at: Optional[datetime] = None, tz: tzinfo | str | None = None) -> str:
    ts = submitted_at or datetime.now(timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(_resolve_tz(tz)).strftime("%Y-%m-%d %H:%M:%S %Z")


def _file_lines(fv: FileRef) -> List[str]:
    name = f"[{fv.name}]({fv.url})" if fv.url else fv.name
    return [f"- **File Name:** {name}", f"- **File Size:** {format_size(fv.size)}"]


def _object_list_lines(label: str, fv: ObjectList, overrides: Optional[Dict[str, str]]) -> List[str]:
    item_label = singular_label(label)
    lines: List[str] = []
    for i, item in enumerate(fv.items, start=1):
        if lines:
            lines.append("")
        lines.append(f"#### {item_label} {i}")
        if not item:
            lines.append(PLACEHOLDER)
            continue
        for key, value in item.items():
            lines.append(f"- **{derive_label(key, overrides)}:** {inline_value(value)}")
    return lines


def render_field(label: str, fv: FieldValue, overrides: Optional[Dict[str, str]] = None) -> List[str]:
    """Markdown lines for one form field, heading included."""
    lines = [f"### {label}"]
    if is_empty(fv):
        lines.append(PLACEHOLDER)
    elif isinstance(fv, Text):
        lines.append(fv.value)
    elif isinstance(fv, (Number, Boolean)):
        lines.append(literal(fv.value))
    elif isinstance(fv, PrimitiveList):
        lines.extend(f"- {inline_value(item)}" for item in fv.items)
    elif isinstance(fv, ObjectList):
        lines.extend(_object_list_lines(label, fv, overrides))
    elif isinstance(fv, FileRef):
        lines.extend(_file_lines(fv))
    else:
        value = fv.value if isinstance(fv, OpaqueObject) else fv
        lines.extend(["```json", to_json(value, indent=2), "```"])
    return lines


def format_data_to_markdown(
    record: SubmissionRecord,
    submitted_at: Optional[datetime] = None,
    tz: tzinfo | str | None = None,
    overrides: Optional[Dict[str, str]] = None,
) -> str:
    sections: List[List[str]] = [
        [TITLE],
        [f"**Submission ID:** {record.id}"],
        [f"**Submitted At:** {format_timestamp(submitted_at, tz)}"],
    ]
    if record.services:
        sections.append(["## Selected Services"] + [f"- {s}" for s in record.services])

    details = ["## Form Details"]
    if not record.form_data:
        details.append(PLACEHOLDER)
    sections.append(details)
    for key, value in record.form_data.items():
        sections.append(render_field(derive_label(key, overrides), classify(value), overrides))

    logger.debug("Rendered markdown for submission %s (%d fields)", record.id, len(record.form_data))
    return "\n\n".join("\n".join(section) for section in sections) + "\n"

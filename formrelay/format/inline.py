"""Single-line renderings of field values shared by the markdown and Notion formatters."""

from __future__ import annotations

import json
from typing import Any

from formrelay.models.values import (
    Absent,
    Boolean,
    FileRef,
    Number,
    ObjectList,
    OpaqueObject,
    PrimitiveList,
    Text,
    classify,
)

NOT_PROVIDED = "Not provided"

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def to_json(value: Any, indent: int | None = None) -> str:
    # default=str keeps odd values (dates, decimals) from raising
    if indent is None:
        return json.dumps(value, ensure_ascii=False, default=str, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, default=str, indent=indent)


def literal(value: Any) -> str:
    """JSON-style literal for scalars: true/false, 3 rather than 3.0."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float, str)):
        return str(value)
    return to_json(value)


def format_size(size: Any) -> str:
    """Human readable byte count; non-numeric sizes are shown as given."""
    if size is None or size == "":
        return NOT_PROVIDED
    if isinstance(size, bool) or not isinstance(size, (int, float)):
        return str(size)
    n = float(size)
    for unit in _SIZE_UNITS:
        if abs(n) < 1024 or unit == _SIZE_UNITS[-1]:
            if unit == "B":
                return f"{int(n)} B"
            return f"{n:.1f} {unit}"
        n /= 1024
    return str(size)


def inline_value(value: Any) -> str:
    """Render any JSON value on one line (used for nested object fields)."""
    fv = classify(value)
    if isinstance(fv, Absent):
        return NOT_PROVIDED
    if isinstance(fv, Text):
        return fv.value
    if isinstance(fv, (Number, Boolean)):
        return literal(fv.value)
    if isinstance(fv, PrimitiveList):
        if not fv.items:
            return NOT_PROVIDED
        return ", ".join(literal(item) for item in fv.items)
    if isinstance(fv, FileRef):
        return f"{fv.name} ({format_size(fv.size)})"
    if isinstance(fv, ObjectList):
        return to_json(list(fv.items))
    if isinstance(fv, OpaqueObject):
        return to_json(fv.value)
    return str(value)

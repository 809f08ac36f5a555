"""Tagged field values: one class per JSON value kind found in form answers.

`classify` is the only place that inspects raw JSON types; renderers match on
these classes instead.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Number:
    value: Union[int, float]


@dataclass(frozen=True)
class Boolean:
    value: bool


@dataclass(frozen=True)
class PrimitiveList:
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class ObjectList:
    items: Tuple[Dict[str, Any], ...]


@dataclass(frozen=True)
class FileRef:
    name: str
    size: Any = None
    url: Optional[str] = None


@dataclass(frozen=True)
class OpaqueObject:
    value: Any


@dataclass(frozen=True)
class Absent:
    pass


FieldValue = Union[Text, Number, Boolean, PrimitiveList, ObjectList, FileRef, OpaqueObject, Absent]

ABSENT = Absent()


def _file_ref(value: Dict[str, Any]) -> Optional[FileRef]:
    """Return a FileRef for `{"file": {"name": ..., "size": ...}}`, else None."""
    inner = value.get("file")
    if not isinstance(inner, dict) or "name" not in inner:
        return None
    url = inner.get("url")
    return FileRef(
        name=str(inner.get("name")),
        size=inner.get("size"),
        url=url if isinstance(url, str) and url else None,
    )


def classify(value: Any) -> FieldValue:
    if value is None or value == "":
        return ABSENT
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return Boolean(value)
    if isinstance(value, float) and not math.isfinite(value):
        # NaN and Infinity are not valid numbers downstream
        return Text(json.dumps(value))
    if isinstance(value, (int, float)):
        return Number(value)
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, list):
        if value and all(isinstance(item, dict) for item in value):
            return ObjectList(tuple(value))
        return PrimitiveList(tuple(value))
    if isinstance(value, dict):
        ref = _file_ref(value)
        if ref is not None:
            return ref
    return OpaqueObject(value)


def is_empty(fv: FieldValue) -> bool:
    """True for values that carry nothing to render."""
    if isinstance(fv, Absent):
        return True
    return isinstance(fv, PrimitiveList) and not fv.items

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubmissionRecord(BaseModel):
    """One inbound form submission: id, selected services and the raw field answers."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    services: List[str] = Field(default_factory=list)
    form_data: Dict[str, Any] = Field(default_factory=dict, alias="formData")

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("submission id is required")
        return v

    @field_validator("services", mode="before")
    @classmethod
    def _services_default(cls, v: Any) -> Any:
        # clients send null when nothing was selected
        return [] if v is None else v

    @field_validator("form_data", mode="before")
    @classmethod
    def _form_data_default(cls, v: Any) -> Any:
        return {} if v is None else v

    @classmethod
    def from_json_file(cls, path: str | Path) -> "SubmissionRecord":
        with open(path, "r", encoding="utf8") as fh:
            return cls.model_validate(json.load(fh))

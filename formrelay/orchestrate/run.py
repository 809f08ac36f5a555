"""Orchestrator helpers: validate a payload, format it, hand it to a sink.

These functions mirror what the submit/upload endpoints do and return
``(status, body)`` pairs so any web layer (or the CLI) can turn them into a
response without repeating the error mapping.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, IO, Optional, Tuple, Union

from pydantic import ValidationError

from formrelay.blob.upload import put_blob, unique_filename
from formrelay.format.markdown import format_data_to_markdown
from formrelay.kv.store import KVStore, submission_key
from formrelay.models.submission import SubmissionRecord
from formrelay.notion.io import create_submission_page, get_client
from formrelay.notion.mapping import build_notion_properties
from formrelay.settings import settings

logger = logging.getLogger(__name__)

Result = Tuple[int, Dict[str, Any]]
SINKS = ("kv", "notion")


def parse_submission(payload: Any) -> SubmissionRecord:
    """Validate a parsed JSON body. Raises ValueError with a readable message."""
    if not isinstance(payload, dict):
        raise ValueError("request body must be a JSON object")
    try:
        return SubmissionRecord.model_validate(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
        )
        raise ValueError(problems) from e


def kv_document(record: SubmissionRecord, submitted_at: datetime, store_format: Optional[str] = None) -> str:
    fmt = (store_format or settings.KV_STORE_FORMAT).lower()
    if fmt == "json":
        return json.dumps(
            {
                "services": record.services,
                "formData": record.form_data,
                "submittedAt": submitted_at.isoformat(),
            },
            ensure_ascii=False,
            default=str,
        )
    return format_data_to_markdown(record, submitted_at=submitted_at)


def submit_submission(
    payload: Any,
    sink: str = "kv",
    kv: Optional[KVStore] = None,
    notion: Any = None,
    database_id: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> Result:
    stage = "validate"
    submission_id = payload.get("id") if isinstance(payload, dict) else None
    logger.info("Submit start | id=%s sink=%s", submission_id, sink)
    if sink not in SINKS:
        return 400, {"error": f"Unknown sink '{sink}'"}
    try:
        record = parse_submission(payload)
    except ValueError as e:
        logger.warning("Submit rejected | id=%s reason=%s", submission_id, e)
        return 400, {"error": f"Submission failed: {e}"}

    ts = submitted_at or datetime.now(timezone.utc)
    body: Dict[str, Any] = {"message": "Success", "submissionId": record.id}
    try:
        if sink == "kv":
            stage = "format"
            document = kv_document(record, ts)
            stage = "persist"
            store = kv or KVStore.from_settings()
            store.set(submission_key(record.id), document)
        else:
            stage = "format"
            properties = build_notion_properties(record, submitted_at=ts)
            stage = "persist"
            client = notion or get_client()
            db_id = database_id or settings.NOTION_DATABASE_ID
            if not db_id:
                raise RuntimeError("NOTION_DATABASE_ID not configured in environment")
            body["pageId"] = create_submission_page(client, db_id, properties)
    except Exception as e:
        logger.exception("Submit failed | id=%s sink=%s stage=%s", record.id, sink, stage)
        return 500, {"error": f"Submission failed: {str(e) or e.__class__.__name__}"}

    logger.info("Submit success | id=%s sink=%s", record.id, sink)
    return 200, body


def upload_file(
    filename: Optional[str],
    body: Union[bytes, IO[bytes], None],
    token: Optional[str] = None,
    uploader: Callable[..., Dict[str, Any]] = put_blob,
    content_type: Optional[str] = None,
) -> Result:
    token = token or settings.BLOB_READ_WRITE_TOKEN
    if not token:
        return 500, {"error": "Configuration error: BLOB_READ_WRITE_TOKEN is not set."}
    if not filename:
        return 400, {"error": "A filename is required."}
    if body is None or body == b"":
        return 400, {"error": "No file to upload."}

    pathname = unique_filename(filename)
    logger.info("Upload start | filename=%s pathname=%s", filename, pathname)
    try:
        blob = uploader(pathname, body, token, content_type=content_type)
    except Exception as e:
        logger.exception("Upload failed | pathname=%s", pathname)
        return 500, {"error": f"Upload failed: {str(e) or e.__class__.__name__}"}
    logger.info("Upload success | url=%s", blob.get("url"))
    return 200, blob

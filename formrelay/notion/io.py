"""Notion I/O helpers: client bootstrap, page creation and schema inspection."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from notion_client import Client

from formrelay.settings import settings

logger = logging.getLogger(__name__)


def get_client(token: Optional[str] = None) -> Client:
    token = token or settings.NOTION_TOKEN
    if not token:
        raise RuntimeError("NOTION_TOKEN not configured in environment")
    logger.debug("Using NOTION_TOKEN %s...%s", token[:4], token[-4:])
    return Client(auth=token)


def create_submission_page(client: Client, database_id: str, properties: Dict[str, Any]) -> str:
    """Create one page in the submissions database and return its id.

    API errors (notion_client.APIResponseError) propagate to the caller.
    """
    page = client.pages.create(parent={"database_id": database_id}, properties=properties)
    page_id = page.get("id", "")
    logger.info("Created Notion page %s in database %s", page_id, database_id)
    return page_id


def dump_db_props(client: Client, database_id: str) -> Dict[str, Any]:
    meta = client.databases.retrieve(database_id=database_id)
    props = meta.get("properties", {})
    # simplify to property_name -> type
    simple = {k: v.get("type") for k, v in props.items()}
    return {"id": database_id, "properties": simple}

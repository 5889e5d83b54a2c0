from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from notion_client import APIResponseError, Client

from app.config import get_settings
from app.media.models import DEFAULT_CATEGORY, ExtractedRecord

logger = logging.getLogger(__name__)

# ================================
# DATABASE SCHEMA
# ================================
# Column names in the target Notion database.
TITLE_PROPERTY = "Item"
AMOUNT_PROPERTY = "Amount"
CATEGORY_PROPERTY = "Category"
DATE_PROPERTY = "Date"

TRANSCRIPT_PREFIX = "Original Transcript: "
# Notion rejects rich_text content longer than this.
RICH_TEXT_LIMIT = 2000
SELECT_NAME_LIMIT = 100

_client: Optional[Client] = None


def _get_client() -> Client:
    global _client
    if _client is None:
        settings = get_settings()
        if not settings.notion_api_key:
            raise RuntimeError("NOTION_API_KEY is not set")
        _client = Client(
            auth=settings.notion_api_key,
            timeout_ms=int(settings.http_timeout * 1000),
        )
    return _client


# ================================
# PAYLOAD BUILDERS
# ================================
def select_name(category: str) -> str:
    """Select option names cannot contain commas or exceed 100 characters."""
    name = category.replace(",", " ")[:SELECT_NAME_LIMIT].strip()
    return name or DEFAULT_CATEGORY


def build_properties(record: ExtractedRecord) -> Dict[str, Any]:
    """Map a finalized record onto the database's typed properties."""
    return {
        TITLE_PROPERTY: {
            "title": [{"text": {"content": record.item[:RICH_TEXT_LIMIT]}}],
        },
        AMOUNT_PROPERTY: {
            "number": record.amount,
        },
        CATEGORY_PROPERTY: {
            "select": {"name": select_name(record.category)},
        },
        DATE_PROPERTY: {
            "date": {"start": record.date},
        },
    }


def build_note_blocks(summary: str) -> List[Dict[str, Any]]:
    """Paragraph block(s) carrying the verbatim transcript."""
    text = f"{TRANSCRIPT_PREFIX}{summary}"
    chunks = [text[i:i + RICH_TEXT_LIMIT] for i in range(0, len(text), RICH_TEXT_LIMIT)]
    return [
        {
            "object": "block",
            "type": "paragraph",
            "paragraph": {
                "rich_text": [
                    {"type": "text", "text": {"content": chunk}}
                    for chunk in chunks
                ],
            },
        }
    ]


# ================================
# CORE INSERT
# ================================
def create_entry(
    database_id: str,
    properties: Dict[str, Any],
    children: List[Dict[str, Any]],
) -> bool:
    """
    Create one page in a Notion database.

    Returns:
        True on confirmed creation, False on any error. Never raises.
    """
    try:
        page = _get_client().pages.create(
            parent={"database_id": database_id},
            properties=properties,
            children=children,
        )
    except APIResponseError as e:
        logger.error("[NOTION ERROR %s] %s", e.code, e)
        return False
    except Exception as e:  # noqa: BLE001
        logger.error("[NOTION ERROR] %s", e)
        return False

    if not isinstance(page, dict) or not page.get("id"):
        logger.error("[NOTION ERROR] page creation not confirmed: %r", page)
        return False

    logger.info("[NOTION] created page %s", page["id"])
    return True


def save_record(record: ExtractedRecord, database_id: Optional[str] = None) -> bool:
    """
    Persist a finalized record to the configured database.
    """
    return create_entry(
        database_id or get_settings().notion_database_id,
        build_properties(record),
        build_note_blocks(record.summary),
    )

"""
Record mapper: extraction candidate → finalized ExtractedRecord.

Malformed values are coerced to defaults instead of rejected, so a
voice note is still logged when the model output is sloppy.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Optional

from app.media.models import (
    DEFAULT_CATEGORY,
    DEFAULT_ITEM,
    ExtractedRecord,
    RecordCandidate,
)
from app.utils.time import today

_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:$|[T ])")


def _text(value: Any, default: str) -> str:
    if value is None or isinstance(value, (dict, list, bool)):
        return default
    text = str(value).strip()
    return text or default


def _amount(value: Any) -> float | int:
    """Non-negative finite number, 0 otherwise."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        try:
            value = float(cleaned)
        except ValueError:
            return 0
    if not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        if value.is_integer():
            value = int(value)
    return value if value >= 0 else 0


def _date(value: Any, fallback: str) -> str:
    """
    Accept "YYYY-MM-DD", optionally followed by an ISO time part.
    """
    if not isinstance(value, str):
        return fallback
    match = _DATE_PREFIX.match(value.strip())
    if not match:
        return fallback
    try:
        return datetime.strptime(match.group(1), "%Y-%m-%d").date().isoformat()
    except ValueError:
        return fallback


def map_record(
    candidate: Optional[RecordCandidate],
    transcript: str,
    current_date: Optional[str] = None,
) -> ExtractedRecord:
    """
    Apply defaults to a record candidate and attach the transcript.

    Args:
        candidate: Parsed JSON object from the extraction model.
        transcript: Verbatim transcript; always becomes the summary.
        current_date: "YYYY-MM-DD" used when the date is missing or bad.
            Defaults to today's UTC date.
    """
    data = candidate if isinstance(candidate, dict) else {}
    fallback_date = current_date or today()

    return ExtractedRecord(
        category=_text(data.get("category"), DEFAULT_CATEGORY),
        amount=_amount(data.get("amount")),
        item=_text(data.get("item"), DEFAULT_ITEM),
        date=_date(data.get("date"), fallback_date),
        summary=transcript,
    )

from __future__ import annotations

import json
import logging
from typing import Optional

from openai import OpenAIError

from app.config import get_settings
from app.media.errors import ExtractionError
from app.media.models import RecordCandidate
from app.media.stt import get_openai_client
from app.media.validator import validate_candidate

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """
You are a data extraction assistant. Extract structured data from the user's spoken log.

Return ONLY a valid JSON object with keys:
- "category" (string)
- "amount" (number, if applicable, else 0)
- "item" (string, short title)
- "date" (ISO 8601 format YYYY-MM-DD, assume current year if not specified)

Rules:
- If it's not an expense, use category "Note" or "Journal".
- If it's not an expense, amount is 0.
- No markdown, no prose, no extra keys.
"""


def extract_record(transcript: str, model: Optional[str] = None) -> RecordCandidate:
    """
    Turn a transcript into a record candidate using a chat model in JSON mode.

    The candidate is the raw JSON object; field types are not checked here
    and there is no "summary" yet. See app.media.mapper.map_record.

    Raises:
        ExtractionError: the request failed, or the response was empty,
        not JSON, or not a JSON object.
    """
    try:
        response = get_openai_client().chat.completions.create(
            model=model or get_settings().extraction_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": transcript},
            ],
            response_format={"type": "json_object"},
        )
    except (OpenAIError, RuntimeError) as e:
        raise ExtractionError(f"Extraction request failed: {e}") from e

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise ExtractionError("No response from extraction model")

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Extraction response is not JSON: {e}") from e

    is_valid, err = validate_candidate(parsed)
    if not is_valid:
        raise ExtractionError(f"Extraction response has the wrong shape: {err}")

    logger.debug("[EXTRACTION JSON] %s", parsed)
    return parsed

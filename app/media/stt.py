"""
Speech-to-text (Audio → Text) through the OpenAI transcription API.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from openai import OpenAI, OpenAIError

from app.config import get_settings
from app.media.errors import TranscriptionError

logger = logging.getLogger(__name__)

# Lazily-initialized OpenAI client, shared with the extraction adapter
_client: Optional[OpenAI] = None


def get_openai_client() -> OpenAI:
    """
    Lazily initialize the OpenAI client so that importing this module
    does not explode if the key is missing (e.g. during local tests).
    """
    global _client
    if _client is None:
        api_key = get_settings().openai_api_key
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")
        _client = OpenAI(api_key=api_key, timeout=get_settings().http_timeout)
    return _client


def perform_stt(
    audio: BinaryIO,
    model: Optional[str] = None,
    language: Optional[str] = None,
) -> str:
    """
    Transcribe a voice recording.

    Args:
        audio: Readable binary file object; its name tells the API the format.
        model: Transcription model, defaults to the configured one.
        language: Optional ISO-639-1 hint, defaults to the configured one.

    Returns:
        str: The recognized text, stripped.

    Raises:
        TranscriptionError: service unreachable, input rejected, or no text.
    """
    settings = get_settings()
    params = {
        "model": model or settings.transcription_model,
        "file": audio,
    }
    language = language or settings.transcription_language
    if language:
        params["language"] = language

    try:
        response = get_openai_client().audio.transcriptions.create(**params)
    except (OpenAIError, RuntimeError) as e:
        raise TranscriptionError(f"Transcription request failed: {e}") from e

    text = getattr(response, "text", None)
    if not isinstance(text, str) or not text.strip():
        raise TranscriptionError("Transcription returned no text")
    return text.strip()

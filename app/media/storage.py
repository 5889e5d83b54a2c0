"""
Voice file retrieval and temporary storage.

A downloaded voice note lives on local disk only for the duration of one job.
Use voice_file() to hold it: the file is removed when the block exits,
whatever the outcome.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

import requests

from app.config import get_settings
from app.media.errors import RetrievalError
from app.services import telegram

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
VOICE_SUFFIX = ".ogg"


def temp_audio_path(sender_id: int | str, temp_dir: Optional[str] = None) -> str:
    """
    Build a fresh local path for a voice download.

    Name is temp_<sender>_<epoch ms>_<random>.ogg; the random suffix keeps
    two notes from the same sender within one millisecond apart.
    """
    directory = temp_dir or get_settings().voice_temp_dir
    millis = int(time.time() * 1000)
    suffix = uuid.uuid4().hex[:8]
    return os.path.join(directory, f"temp_{sender_id}_{millis}_{suffix}{VOICE_SUFFIX}")


def remove_media_file(path: Optional[str]) -> bool:
    """
    Remove a temporary media file. Never raises.

    Returns:
        bool: True if a file was removed.
    """
    if not path:
        return False
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error("[VOICE CLEANUP ERROR] could not remove %s: %s", path, e)
        return False


def save_media_file(url: str, dest: str) -> str:
    """
    Stream ``url`` into ``dest`` and return ``dest`` once fully flushed.

    A partially written file is removed before RetrievalError propagates.
    """
    try:
        with requests.get(url, stream=True, timeout=get_settings().http_timeout) as response:
            response.raise_for_status()
            with open(dest, "wb") as fh:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
                fh.flush()
                os.fsync(fh.fileno())
    except (requests.RequestException, OSError) as e:
        remove_media_file(dest)
        raise RetrievalError(f"Could not download voice file: {e}") from e
    return dest


def download_voice_file(
    file_ref: str,
    sender_id: int | str,
    temp_dir: Optional[str] = None,
) -> str:
    """
    Resolve a Telegram file_id and download it to a new temporary file.

    The caller owns the returned path and must remove it.

    Raises:
        RetrievalError: resolution, transfer or disk write failed.
    """
    try:
        file_path = telegram.get_file_path(file_ref)
    except Exception as e:  # noqa: BLE001
        raise RetrievalError(f"Could not resolve voice file {file_ref!r}: {e}") from e

    dest = temp_audio_path(sender_id, temp_dir)
    save_media_file(telegram.file_download_url(file_path), dest)
    logger.info("[VOICE] downloaded %s for sender %s -> %s", file_ref, sender_id, dest)
    return dest


@contextmanager
def voice_file(
    file_ref: str,
    sender_id: int | str,
    temp_dir: Optional[str] = None,
) -> Iterator[str]:
    """
    Download a voice note and yield its local path, removing it on exit.
    """
    path = download_voice_file(file_ref, sender_id, temp_dir)
    try:
        yield path
    finally:
        remove_media_file(path)

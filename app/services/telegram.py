# app/services/telegram.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from app.config import get_settings

logger = logging.getLogger(__name__)

TELEGRAM_API_ROOT = "https://api.telegram.org"


def _api_base() -> str:
    return f"{TELEGRAM_API_ROOT}/bot{get_settings().telegram_token}"


def file_download_url(file_path: str) -> str:
    """Direct download address for a file resolved through getFile."""
    return f"{TELEGRAM_API_ROOT}/file/bot{get_settings().telegram_token}/{file_path}"


def _call(endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Call a Bot API method and return its "result".

    Raises requests.RequestException on transport errors and
    RuntimeError when Telegram answers with ok=false.
    """
    url = f"{_api_base()}/{endpoint}"
    response = requests.post(url, json=payload, timeout=get_settings().http_timeout)
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not response.ok or not body.get("ok"):
        description = body.get("description") or response.text
        raise RuntimeError(f"Telegram {endpoint} failed ({response.status_code}): {description}")
    return body.get("result") or {}


def _post(endpoint: str, payload: Dict[str, Any]) -> bool:
    try:
        _call(endpoint, payload)
        return True
    except Exception as e:  # noqa: BLE001
        # Notifications are best-effort; the caller never sees the failure
        logger.error("[TELEGRAM ERROR %s] %s", endpoint, e)
        return False


def send_message(
    chat_id: int | str,
    text: str,
    parse_mode: Optional[str] = "Markdown",
) -> bool:
    """
    Send a message to a Telegram chat.

    Pass parse_mode=None for text containing user content, so stray
    Markdown characters cannot make Telegram reject the message.

    Returns True when Telegram accepted the message.
    """
    payload: Dict[str, Any] = {
        "chat_id": chat_id,
        "text": text,
    }
    if parse_mode:
        payload["parse_mode"] = parse_mode

    return _post("sendMessage", payload)


def get_file_path(file_id: str) -> str:
    """
    Resolve a file_id to the server-side file_path used for downloading.

    Errors propagate to the caller.
    """
    result = _call("getFile", {"file_id": file_id})
    file_path = result.get("file_path")
    if not file_path:
        raise RuntimeError(f"Telegram getFile returned no file_path for {file_id!r}")
    return file_path


def set_webhook(url: str, secret_token: Optional[str] = None) -> bool:
    """
    Register the webhook URL so Telegram starts pushing updates to it.
    """
    payload: Dict[str, Any] = {
        "url": url,
        "allowed_updates": ["message"],
    }
    if secret_token:
        payload["secret_token"] = secret_token
    return _post("setWebhook", payload)

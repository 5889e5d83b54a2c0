from __future__ import annotations

import hmac
import logging
from typing import Any, Dict, Optional

from flask import Blueprint, abort, jsonify, request

from app.config import get_settings
from app.media.models import VoiceNoteEvent
from app.media.pipeline import handle_voice_note
from app.services.telegram import send_message

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)

WELCOME_TEXT = "Welcome to VoiceLog.ai! Send me a voice note to log an expense or event."
SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def is_start_command(text: Any) -> bool:
    """True for "/start", "/start@BotName" and deep links like "/start payload"."""
    if not isinstance(text, str) or not text.strip():
        return False
    command = text.split()[0].split("@")[0]
    return command.lower() == "/start"


def voice_event_from_update(update: Dict[str, Any]) -> Optional[VoiceNoteEvent]:
    """
    Build a VoiceNoteEvent from a Telegram update, or None if it has no voice note.
    """
    message = update.get("message")
    if not isinstance(message, dict):
        return None
    voice = message.get("voice") or {}
    if not isinstance(voice, dict):
        return None
    file_id = voice.get("file_id")
    if not file_id:
        return None

    # Replies go to the chat; in a private chat its id is the user id
    sender = message.get("chat") or message.get("from") or {}
    sender_id = sender.get("id") if isinstance(sender, dict) else None
    if sender_id is None:
        return None
    return VoiceNoteEvent(sender_id=sender_id, file_ref=file_id)


def _check_secret() -> None:
    secret = get_settings().webhook_secret
    if not secret:
        return
    received = request.headers.get(SECRET_HEADER, "")
    if not hmac.compare_digest(received, secret):
        logger.warning("[WEBHOOK] rejected update with bad secret token")
        abort(403)


@api.route("/", methods=["GET"])
def healthcheck() -> str:
    return "VoiceLog bot running"


@api.route("/webhook", methods=["POST"])
def webhook() -> Any:
    """
    Telegram webhook endpoint.

    Handles:
    - voice notes via the voice pipeline
    - the /start command (welcome text)

    Everything else is acknowledged and ignored. Always answers 200 for
    accepted updates so Telegram does not redeliver a failed job.
    """
    _check_secret()
    update = request.get_json(silent=True)
    if not isinstance(update, dict):
        update = {}

    event = voice_event_from_update(update)
    if event is not None:
        job = handle_voice_note(event)
        return jsonify({"ok": True, "status": job.status})

    message = update.get("message")
    if not isinstance(message, dict):
        return jsonify({"ok": True})
    text = message.get("text")
    chat = message.get("chat")
    chat_id = chat.get("id") if isinstance(chat, dict) else None
    if chat_id is not None and is_start_command(text):
        send_message(chat_id, WELCOME_TEXT)

    return jsonify({"ok": True})

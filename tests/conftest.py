from __future__ import annotations

from typing import Any, Dict, Iterable, List

import pytest

import app.media.stt as stt
import app.services.notion as notion
from app.config import get_settings

AUDIO_BYTES = b"OggS\x00fake-opus-payload" * 10


@pytest.fixture(autouse=True)
def env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Complete configuration pointing temp files at a per-test directory."""
    voice_dir = tmp_path / "voice"
    voice_dir.mkdir()
    monkeypatch.setenv("TELEGRAM_TOKEN", "123:abc")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("NOTION_API_KEY", "secret_test")
    monkeypatch.setenv("NOTION_DATABASE_ID", "db-123")
    monkeypatch.setenv("VOICE_TEMP_DIR", str(voice_dir))
    monkeypatch.delenv("TELEGRAM_WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("TRANSCRIPTION_LANGUAGE", raising=False)
    get_settings.cache_clear()
    monkeypatch.setattr(stt, "_client", None)
    monkeypatch.setattr(notion, "_client", None)
    yield voice_dir
    get_settings.cache_clear()


class FakeStreamResponse:
    """Stand-in for a streamed requests.Response."""

    def __init__(self, chunks: Iterable[bytes], status_code: int = 200, fail_after: int | None = None):
        self.chunks = list(chunks)
        self.status_code = status_code
        self.fail_after = fail_after

    def __enter__(self):
        return self

    def __exit__(self, *exc):  # noqa: ANN002
        return False

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size: int = 1):  # noqa: ARG002
        import requests

        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                raise requests.ConnectionError("connection reset mid-stream")
            yield chunk


@pytest.fixture
def sent_messages(monkeypatch: pytest.MonkeyPatch) -> List[Dict[str, Any]]:
    """Capture outgoing Telegram messages instead of sending them."""
    import app.services.telegram as telegram

    sent: List[Dict[str, Any]] = []

    def fake_send(chat_id, text, parse_mode="Markdown"):  # noqa: ANN001
        sent.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})
        return True

    monkeypatch.setattr(telegram, "send_message", fake_send)
    return sent


@pytest.fixture
def telegram_file(monkeypatch: pytest.MonkeyPatch):
    """Resolve any file_id to a fixed path and serve AUDIO_BYTES for it."""
    import app.media.storage as storage
    import app.services.telegram as telegram

    calls: Dict[str, Any] = {"get": []}
    monkeypatch.setattr(telegram, "get_file_path", lambda file_id: f"voice/{file_id}.oga")

    def fake_get(url, stream=False, timeout=None):  # noqa: ANN001
        calls["get"].append(url)
        return calls.get("response") or FakeStreamResponse([AUDIO_BYTES[:50], AUDIO_BYTES[50:]])

    monkeypatch.setattr(storage.requests, "get", fake_get)
    return calls

"""Environment-driven configuration for the VoiceLog bot."""
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

# Settings attribute -> environment variable, for the values the bot cannot run without.
REQUIRED_SETTINGS = {
    "telegram_token": "TELEGRAM_TOKEN",
    "openai_api_key": "OPENAI_API_KEY",
    "notion_api_key": "NOTION_API_KEY",
    "notion_database_id": "NOTION_DATABASE_ID",
}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass
class Settings:
    """
    Centralized configuration, read from the environment when instantiated.

    Only the four credentials in REQUIRED_SETTINGS are validated at startup;
    everything else has a working default.
    """

    telegram_token: Optional[str] = field(default_factory=lambda: _env("TELEGRAM_TOKEN"))
    openai_api_key: Optional[str] = field(default_factory=lambda: _env("OPENAI_API_KEY"))
    notion_api_key: Optional[str] = field(default_factory=lambda: _env("NOTION_API_KEY"))
    notion_database_id: Optional[str] = field(default_factory=lambda: _env("NOTION_DATABASE_ID"))

    transcription_model: str = field(
        default_factory=lambda: _env("OPENAI_TRANSCRIPTION_MODEL", "whisper-1")
    )
    transcription_language: Optional[str] = field(
        default_factory=lambda: _env("TRANSCRIPTION_LANGUAGE")
    )
    extraction_model: str = field(
        default_factory=lambda: _env("OPENAI_EXTRACTION_MODEL", "gpt-4-turbo-preview")
    )

    voice_temp_dir: str = field(
        default_factory=lambda: _env("VOICE_TEMP_DIR", tempfile.gettempdir())
    )
    http_timeout: float = field(
        default_factory=lambda: float(_env("HTTP_TIMEOUT_SECONDS", "30"))
    )

    webhook_url: Optional[str] = field(default_factory=lambda: _env("TELEGRAM_WEBHOOK_URL"))
    webhook_secret: Optional[str] = field(default_factory=lambda: _env("TELEGRAM_WEBHOOK_SECRET"))

    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())
    port: int = field(default_factory=lambda: int(_env("PORT", "10000")))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance to avoid repeated environment reads."""

    return Settings()


def missing_settings(settings: Optional[Settings] = None) -> List[str]:
    """
    Return the environment variable names of required settings that are unset.
    """
    settings = settings or get_settings()
    return [
        env_name
        for attr, env_name in REQUIRED_SETTINGS.items()
        if not getattr(settings, attr)
    ]

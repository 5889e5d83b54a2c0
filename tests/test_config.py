from __future__ import annotations

import logging

import pytest

import main
from app.config import Settings, get_settings, missing_settings


def test_settings_read_environment_with_defaults(env) -> None:  # noqa: ANN001
    settings = get_settings()

    assert settings.telegram_token == "123:abc"
    assert settings.notion_database_id == "db-123"
    assert settings.transcription_model == "whisper-1"
    assert settings.extraction_model == "gpt-4-turbo-preview"
    assert settings.voice_temp_dir == str(env)
    assert settings.port == 10000
    assert missing_settings(settings) == []


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    "name",
    ["TELEGRAM_TOKEN", "OPENAI_API_KEY", "NOTION_API_KEY", "NOTION_DATABASE_ID"],
)
def test_each_required_variable_is_reported(monkeypatch: pytest.MonkeyPatch, name: str) -> None:
    monkeypatch.delenv(name)

    assert missing_settings(Settings()) == [name]


def test_blank_value_counts_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTION_API_KEY", "   ")

    assert missing_settings(Settings()) == ["NOTION_API_KEY"]


def test_startup_exits_nonzero_when_config_missing(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("TELEGRAM_TOKEN")
    monkeypatch.delenv("NOTION_DATABASE_ID")
    get_settings.cache_clear()

    with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as info:
        main.startup_check()

    assert info.value.code == 1
    assert "TELEGRAM_TOKEN" in caplog.text and "NOTION_DATABASE_ID" in caplog.text


def test_startup_passes_with_full_config() -> None:
    main.startup_check()


def test_running_app_main_module_checks_config(monkeypatch: pytest.MonkeyPatch) -> None:
    import runpy

    served = []
    monkeypatch.setattr("flask.Flask.run", lambda self, *a, **k: served.append(self))
    for name in ("TELEGRAM_TOKEN", "OPENAI_API_KEY", "NOTION_API_KEY", "NOTION_DATABASE_ID"):
        monkeypatch.delenv(name)
    get_settings.cache_clear()

    with pytest.raises(SystemExit) as info:
        runpy.run_module("app.main", run_name="__main__")

    assert info.value.code == 1
    assert served == []

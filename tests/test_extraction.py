from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

import app.media.extraction as extraction
from app.media.errors import ExtractionError


class FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs):  # noqa: ANN003
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _install(monkeypatch: pytest.MonkeyPatch, completions: FakeCompletions) -> None:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(extraction, "get_openai_client", lambda: client)


def test_returns_parsed_object_and_sends_json_mode_request(monkeypatch: pytest.MonkeyPatch) -> None:
    completions = FakeCompletions('{"category": "Food", "amount": 20, "item": "Coffee", "date": "2024-05-01"}')
    _install(monkeypatch, completions)

    candidate = extraction.extract_record("Spent 20 on coffee")

    assert candidate == {"category": "Food", "amount": 20, "item": "Coffee", "date": "2024-05-01"}
    call = completions.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    assert call["model"] == "gpt-4-turbo-preview"
    assert call["messages"][0] == {"role": "system", "content": extraction.SYSTEM_PROMPT}
    assert call["messages"][1] == {"role": "user", "content": "Spent 20 on coffee"}


def test_system_prompt_names_fields_and_note_rule() -> None:
    for key in ('"category"', '"amount"', '"item"', '"date"', '"Note"', '"Journal"'):
        assert key in extraction.SYSTEM_PROMPT


def test_model_can_be_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    from app.config import get_settings

    monkeypatch.setenv("OPENAI_EXTRACTION_MODEL", "gpt-4o-mini")
    get_settings.cache_clear()
    completions = FakeCompletions("{}")
    _install(monkeypatch, completions)

    extraction.extract_record("hello")

    assert completions.calls[0]["model"] == "gpt-4o-mini"


def test_field_types_are_not_validated(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FakeCompletions('{"amount": "lots", "date": "tomorrow"}'))

    assert extraction.extract_record("x") == {"amount": "lots", "date": "tomorrow"}


@pytest.mark.parametrize("content", [None, "", "not json at all", "[1, 2, 3]", '"just a string"', "42"])
def test_unusable_content_raises(monkeypatch: pytest.MonkeyPatch, content) -> None:  # noqa: ANN001
    _install(monkeypatch, FakeCompletions(content))

    with pytest.raises(ExtractionError):
        extraction.extract_record("Spent 20 on coffee")


def test_service_error_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    from openai import OpenAIError

    _install(monkeypatch, FakeCompletions(error=OpenAIError("rate limited")))

    with pytest.raises(ExtractionError) as info:
        extraction.extract_record("Spent 20 on coffee")

    assert isinstance(info.value.__cause__, OpenAIError)

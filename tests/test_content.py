"""Tests for aipuzzle.core.content – structured requests and the fallback level."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from openai import OpenAIError

from aipuzzle.core.config import ContentConfig
from aipuzzle.core.content import (
    CONCEPT_SCHEMA,
    LEVEL_THEME_SCHEMA,
    ContentError,
    ContentProvider,
    GameConcept,
    load_level,
    validate_payload,
)
from aipuzzle.core.levels import FALLBACK_THEME


class FakeClient:
    """Mimics ``client.chat.completions.create`` and records each call."""

    def __init__(self, reply: Any = None, error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        text = self.reply if isinstance(self.reply, str) else json.dumps(self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


THEME_REPLY = {
    "theme": "Лесной дождь",
    "colors": ["#2d6a4f", "#40916c", "#52b788", "#95d5b2"],
    "funFact": "Деревья общаются через грибницу.",
}

CONCEPT_REPLY = {
    "title": "Сонные коты",
    "tagline": "Уложи всех котиков спать",
    "funFactor": "Мурлыканье",
    "coreMechanic": "Перетаскивание подушек",
    "visualStyle": "Пастель",
}

MARKETING_REPLY = {
    "headline": "Котики ждут!",
    "socialPost": "Скачай и усни вместе с котами.",
    "targetAudience": "Любители кошек",
    "monetizationStrategy": "Косметические подушки",
}


def provider_with(client: FakeClient) -> ContentProvider:
    return ContentProvider(ContentConfig(api_key="test"), client=client)


# ---------------------------------------------------------------------------
# validate_payload
# ---------------------------------------------------------------------------

class TestValidatePayload:
    def test_accepts_complete_object(self):
        assert validate_payload(THEME_REPLY, LEVEL_THEME_SCHEMA) is THEME_REPLY

    def test_rejects_non_object(self):
        with pytest.raises(ContentError):
            validate_payload(["x"], LEVEL_THEME_SCHEMA)

    def test_rejects_missing_field(self):
        with pytest.raises(ContentError, match="funFact"):
            validate_payload({"theme": "a", "colors": []}, LEVEL_THEME_SCHEMA)

    def test_rejects_blank_string(self):
        with pytest.raises(ContentError):
            validate_payload({**CONCEPT_REPLY, "title": "  "}, CONCEPT_SCHEMA)

    def test_rejects_non_string_list(self):
        with pytest.raises(ContentError):
            validate_payload({**THEME_REPLY, "colors": [1, 2, 3, 4]}, LEVEL_THEME_SCHEMA)


# ---------------------------------------------------------------------------
# ContentProvider
# ---------------------------------------------------------------------------

class TestLevelTheme:
    def test_parses_reply(self):
        theme = provider_with(FakeClient(THEME_REPLY)).request_level_theme(1)
        assert theme.theme == "Лесной дождь"
        assert theme.colors == tuple(THEME_REPLY["colors"])
        assert theme.fun_fact.startswith("Деревья")

    def test_sends_structured_request(self):
        client = FakeClient(THEME_REPLY)
        provider_with(client).request_level_theme(3)
        call = client.calls[0]
        assert call["model"] == "gemini-2.5-flash"
        assert call["response_format"]["type"] == "json_schema"
        assert call["response_format"]["json_schema"]["schema"] is LEVEL_THEME_SCHEMA
        assert "Level 3" in call["messages"][-1]["content"]

    def test_wrong_palette_size(self):
        reply = {**THEME_REPLY, "colors": ["#fff", "#000"]}
        with pytest.raises(ContentError, match="palette"):
            provider_with(FakeClient(reply)).request_level_theme(1)

    def test_not_json(self):
        with pytest.raises(ContentError):
            provider_with(FakeClient("here is your theme!")).request_level_theme(1)

    def test_empty_message(self):
        with pytest.raises(ContentError):
            provider_with(FakeClient("")).request_level_theme(1)

    def test_service_error(self):
        client = FakeClient(error=OpenAIError("quota exceeded"))
        with pytest.raises(ContentError, match="quota"):
            provider_with(client).request_level_theme(1)


class TestConceptAndMarketing:
    def test_concept(self):
        concept = provider_with(FakeClient(CONCEPT_REPLY)).request_concept("Сонные коты")
        assert concept == GameConcept(
            title="Сонные коты",
            tagline="Уложи всех котиков спать",
            fun_factor="Мурлыканье",
            core_mechanic="Перетаскивание подушек",
            visual_style="Пастель",
        )

    def test_blank_topic_never_calls_service(self):
        client = FakeClient(CONCEPT_REPLY)
        with pytest.raises(ContentError):
            provider_with(client).request_concept("   ")
        assert client.calls == []

    def test_marketing_prompt_mentions_concept(self):
        client = FakeClient(MARKETING_REPLY)
        concept = GameConcept("Сонные коты", "t", "f", "Перетаскивание подушек", "v")
        data = provider_with(client).request_marketing_strategy(concept)
        assert data.headline == "Котики ждут!"
        assert data.monetization_strategy == "Косметические подушки"
        prompt = client.calls[0]["messages"][-1]["content"]
        assert "Сонные коты" in prompt
        assert "Перетаскивание подушек" in prompt


# ---------------------------------------------------------------------------
# load_level
# ---------------------------------------------------------------------------

class TestLoadLevel:
    def test_generated_level(self):
        level = load_level(provider_with(FakeClient(THEME_REPLY)), 1)
        assert level.id == 1
        assert level.theme == "Лесной дождь"
        assert level.grid_size == 3

    def test_grid_grows_after_level_two(self):
        assert load_level(provider_with(FakeClient(THEME_REPLY)), 3).grid_size == 4

    def test_fallback_on_failure(self):
        level = load_level(provider_with(FakeClient(error=OpenAIError("boom"))), 5)
        assert level.id == 5
        assert level.theme == FALLBACK_THEME
        assert level.grid_size == 3

    def test_fallback_without_provider(self):
        assert load_level(None, 2).theme == FALLBACK_THEME

"""
Generated level themes, game concepts and marketing copy.

Every request is a single structured-output chat completion against an
OpenAI-compatible endpoint (Gemini's compatibility endpoint by default). The JSON
reply is checked against the same schema that was sent; anything unexpected is a
``ContentError``. ``load_level`` turns such failures into the fixed fallback level.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from openai import OpenAI, OpenAIError

from aipuzzle.core.config import ContentConfig
from aipuzzle.core.levels import (
    PALETTE_SIZE,
    LevelData,
    fallback_level,
    grid_size_for_level,
    normalize_palette,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write content for a relaxing casual puzzle game. "
    "Reply with JSON only, matching the requested schema."
)


class ContentError(RuntimeError):
    """The content service failed or returned something unusable."""


@dataclass(frozen=True)
class LevelTheme:
    theme: str
    colors: Tuple[str, ...]
    fun_fact: str


@dataclass(frozen=True)
class GameConcept:
    title: str
    tagline: str
    fun_factor: str
    core_mechanic: str
    visual_style: str


@dataclass(frozen=True)
class MarketingData:
    headline: str
    social_post: str
    target_audience: str
    monetization_strategy: str


def _object_schema(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


LEVEL_THEME_SCHEMA = _object_schema(
    {
        "theme": {"type": "string", "description": "Title of the level theme in Russian"},
        "colors": {
            "type": "array",
            "items": {"type": "string"},
            "description": f"Array of {PALETTE_SIZE} hex color strings",
        },
        "funFact": {"type": "string", "description": "A rewarding fun fact or message in Russian"},
    }
)

CONCEPT_SCHEMA = _object_schema(
    {
        "title": {"type": "string"},
        "tagline": {"type": "string"},
        "funFactor": {"type": "string"},
        "coreMechanic": {"type": "string"},
        "visualStyle": {"type": "string"},
    }
)

MARKETING_SCHEMA = _object_schema(
    {
        "headline": {"type": "string"},
        "socialPost": {"type": "string"},
        "targetAudience": {"type": "string"},
        "monetizationStrategy": {"type": "string"},
    }
)


def validate_payload(payload: Any, schema: Dict[str, Any]) -> Dict[str, Any]:
    """Check required fields and their types against an object schema."""
    if not isinstance(payload, dict):
        raise ContentError(f"expected a JSON object, got {type(payload).__name__}")
    for name in schema["required"]:
        if name not in payload:
            raise ContentError(f"missing field '{name}'")
        expected = schema["properties"][name]["type"]
        value = payload[name]
        if expected == "string":
            if not isinstance(value, str) or not value.strip():
                raise ContentError(f"field '{name}' must be a non-empty string")
        elif expected == "array":
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ContentError(f"field '{name}' must be a list of strings")
    return payload


class ContentProvider:
    """Client for the hosted text model."""

    def __init__(self, config: ContentConfig, client: Optional[Any] = None) -> None:
        self._config = config
        self._client = client

    @property
    def config(self) -> ContentConfig:
        return self._config

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                # One attempt only; a failure goes straight to the caller's fallback.
                self._client = OpenAI(
                    api_key=self._config.api_key,
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    max_retries=0,
                )
            except OpenAIError as e:
                raise ContentError(f"content client unavailable: {e}") from e
        return self._client

    def request_level_theme(self, level_number: int) -> LevelTheme:
        prompt = (
            f"Generate a creative theme for a casual puzzle game level (Level {level_number}).\n"
            "Language: Russian.\n"
            f"Also provide a palette of {PALETTE_SIZE} hex color codes that match the theme.\n"
            'Also provide a short "Fun Fact" or "Positive Affirmation" in Russian related to the '
            "theme as a reward for solving it.\n"
            'The theme should be relaxing (e.g., "Forest Rain", "Space Walk", "Cat Cafe").'
        )
        data = self._generate(prompt, "level_theme", LEVEL_THEME_SCHEMA)
        try:
            colors = normalize_palette(data["colors"])
        except ValueError as e:
            raise ContentError(f"bad palette: {e}") from e
        return LevelTheme(theme=data["theme"].strip(), colors=colors, fun_fact=data["funFact"].strip())

    def request_concept(self, topic: str) -> GameConcept:
        topic = topic.strip()
        if not topic:
            raise ContentError("topic must not be empty")
        prompt = (
            f'Generate a casual puzzle game concept based on the theme: "{topic}".\n'
            "Language: Russian.\n"
            "Provide a catchy title, a tagline, a description of the fun factor, "
            "the core mechanic, and the visual style."
        )
        data = self._generate(prompt, "game_concept", CONCEPT_SCHEMA)
        return GameConcept(
            title=data["title"],
            tagline=data["tagline"],
            fun_factor=data["funFactor"],
            core_mechanic=data["coreMechanic"],
            visual_style=data["visualStyle"],
        )

    def request_marketing_strategy(self, concept: GameConcept) -> MarketingData:
        prompt = (
            "Generate a marketing strategy for a mobile game.\n"
            f"Game Title: {concept.title}\n"
            f"Description: {concept.core_mechanic}\n"
            "Language: Russian.\n"
            "Provide an ad headline, a social media post text, target audience description, "
            "and monetization strategy."
        )
        data = self._generate(prompt, "marketing_strategy", MARKETING_SCHEMA)
        return MarketingData(
            headline=data["headline"],
            social_post=data["socialPost"],
            target_audience=data["targetAudience"],
            monetization_strategy=data["monetizationStrategy"],
        )

    def _generate(self, prompt: str, schema_name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": schema_name, "schema": schema, "strict": True},
                },
                temperature=self._config.temperature,
                timeout=self._config.timeout,
            )
        except OpenAIError as e:
            raise ContentError(f"{schema_name} request failed: {e}") from e

        if not response or not response.choices:
            raise ContentError(f"{schema_name}: empty response")
        message = response.choices[0].message
        text = (message.content or "").strip() if message else ""
        if not text:
            raise ContentError(f"{schema_name}: empty message")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ContentError(f"{schema_name}: response is not JSON: {e}") from e
        return validate_payload(payload, schema)


def load_level(provider: Optional[ContentProvider], level_number: int) -> LevelData:
    """Level content for ``level_number``; the fixed fallback level if generation fails."""
    if provider is None:
        return fallback_level(level_number)
    try:
        theme = provider.request_level_theme(level_number)
    except ContentError as e:
        logger.warning("Failed to load level %d, using fallback: %s", level_number, e)
        return fallback_level(level_number)
    return LevelData(
        id=level_number,
        theme=theme.theme,
        colors=theme.colors,
        fun_fact=theme.fun_fact,
        grid_size=grid_size_for_level(level_number),
    )

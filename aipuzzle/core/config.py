"""Game configuration: YAML game data plus environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from aipuzzle.core.leaderboard import LeaderboardEntry
from aipuzzle.core.shop import Pack

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / "game.yaml"

_API_KEY_VARS = ("AIPUZZLE_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY")


@dataclass(frozen=True)
class ContentConfig:
    """Settings for the hosted text model behind the content provider."""

    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    api_key: Optional[str] = None
    timeout: float = 20.0
    temperature: float = 0.9

    def __post_init__(self) -> None:
        if not self.model:
            raise ValueError("content.model must not be empty")
        if self.timeout <= 0:
            raise ValueError("content.timeout must be a positive number")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("content.temperature must be between 0 and 2")


@dataclass(frozen=True)
class EconomyConfig:
    cost_hint: int = 2500
    cost_skip: int = 5000
    cost_discount: int = 100000
    score_per_level: int = 100
    reward_base: int = 150
    reward_per_level: int = 10
    purchase_delay_ms: int = 1000
    rates: Dict[str, float] = field(default_factory=lambda: {"RUB": 50.0, "USD": 1.0})
    currency_labels: Dict[str, str] = field(default_factory=lambda: {"RUB": "₽", "USD": "$"})
    packs: Tuple[Pack, ...] = (
        Pack(id=1, pzzls=1000, multiplier=1),
        Pack(id=2, pzzls=5000, multiplier=5, popular=True),
        Pack(id=3, pzzls=10000, multiplier=10),
    )

    def __post_init__(self) -> None:
        for name in ("cost_hint", "cost_skip", "cost_discount", "score_per_level",
                     "reward_base", "reward_per_level", "purchase_delay_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"economy.{name} must be a non-negative integer")
        if not self.rates:
            raise ValueError("economy.rates must list at least one currency")
        missing = set(self.rates) - set(self.currency_labels)
        if missing:
            raise ValueError(f"economy.currency_labels missing for: {sorted(missing)}")
        if not self.packs:
            raise ValueError("economy.packs must not be empty")

    def level_reward(self, level: int) -> int:
        return self.reward_base + level * self.reward_per_level

    def level_points(self, level: int) -> int:
        return level * self.score_per_level


@dataclass(frozen=True)
class GameConfig:
    content: ContentConfig = field(default_factory=ContentConfig)
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    leaderboard: Tuple[LeaderboardEntry, ...] = ()
    save_path: Optional[Path] = None


def load_config(path: Optional[Path] = None) -> GameConfig:
    """Load game data from YAML and apply environment overrides.

    Resolution order for the file: explicit ``path``, ``AIPUZZLE_CONFIG``, the packaged
    ``data/game.yaml``.
    """
    if path is None:
        env_path = os.environ.get("AIPUZZLE_CONFIG")
        path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected a YAML mapping at top level")

    config = GameConfig(
        content=_parse_content(raw.get("content") or {}, path.name),
        economy=_parse_economy(raw.get("economy") or {}, path.name),
        leaderboard=_parse_leaderboard(raw.get("leaderboard") or [], path.name),
        save_path=Path(raw["save_path"]).expanduser() if raw.get("save_path") else None,
    )
    return _apply_env(config)


def _parse_content(raw: Any, source: str) -> ContentConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"{source}: 'content' must be a mapping")
    defaults = ContentConfig()
    return ContentConfig(
        model=str(raw.get("model", defaults.model)),
        base_url=str(raw.get("base_url", defaults.base_url)),
        api_key=raw.get("api_key"),
        timeout=float(raw.get("timeout", defaults.timeout)),
        temperature=float(raw.get("temperature", defaults.temperature)),
    )


def _parse_economy(raw: Any, source: str) -> EconomyConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"{source}: 'economy' must be a mapping")
    defaults = EconomyConfig()
    kwargs: Dict[str, Any] = {}
    for name in ("cost_hint", "cost_skip", "cost_discount", "score_per_level",
                 "reward_base", "reward_per_level", "purchase_delay_ms"):
        if name in raw:
            kwargs[name] = int(raw[name])
    if "rates" in raw:
        kwargs["rates"] = {str(k): float(v) for k, v in dict(raw["rates"]).items()}
    if "currency_labels" in raw:
        kwargs["currency_labels"] = {str(k): str(v) for k, v in dict(raw["currency_labels"]).items()}
    if "packs" in raw:
        packs = []
        for item in raw["packs"] or []:
            if not isinstance(item, dict) or "pzzls" not in item:
                raise ValueError(f"{source}: each pack needs at least 'pzzls'")
            packs.append(
                Pack(
                    id=int(item.get("id", len(packs) + 1)),
                    pzzls=int(item["pzzls"]),
                    multiplier=float(item.get("multiplier", 1)),
                    popular=bool(item.get("popular", False)),
                )
            )
        kwargs["packs"] = tuple(packs)
    return replace(defaults, **kwargs)


def _parse_leaderboard(raw: Any, source: str) -> Tuple[LeaderboardEntry, ...]:
    if not isinstance(raw, list):
        raise ValueError(f"{source}: 'leaderboard' must be a list")
    entries = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("name"):
            raise ValueError(f"{source}: leaderboard entries need a 'name'")
        entries.append(
            LeaderboardEntry(
                name=str(item["name"]),
                score=int(item.get("score", 0)),
                avatar=str(item.get("avatar", "")),
            )
        )
    return tuple(entries)


def _apply_env(config: GameConfig) -> GameConfig:
    content = config.content
    api_key = content.api_key
    if not api_key:
        api_key = next((os.environ[v] for v in _API_KEY_VARS if os.environ.get(v)), None)
    if not api_key:
        logger.warning(
            "No API key found (%s); levels will use the built-in fallback theme",
            ", ".join(_API_KEY_VARS),
        )
    content = replace(
        content,
        api_key=api_key,
        model=os.environ.get("AIPUZZLE_MODEL") or content.model,
        base_url=os.environ.get("AIPUZZLE_BASE_URL") or content.base_url,
    )
    save_env = os.environ.get("AIPUZZLE_SAVE_FILE")
    save_path = Path(save_env).expanduser() if save_env else config.save_path
    return replace(config, content=content, save_path=save_path)

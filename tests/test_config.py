"""Tests for aipuzzle.core.config – YAML game data and environment overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from aipuzzle.core.config import (
    DEFAULT_CONFIG_PATH,
    ContentConfig,
    EconomyConfig,
    load_config,
)

ENV_VARS = (
    "AIPUZZLE_CONFIG",
    "AIPUZZLE_API_KEY",
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "AIPUZZLE_MODEL",
    "AIPUZZLE_BASE_URL",
    "AIPUZZLE_SAVE_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_yaml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "game.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Packaged game data
# ---------------------------------------------------------------------------

class TestPackagedConfig:
    def test_file_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_economy(self):
        economy = load_config().economy
        assert economy.cost_hint == 2500
        assert economy.cost_skip == 5000
        assert economy.cost_discount == 100000
        assert economy.purchase_delay_ms == 1000
        assert [p.pzzls for p in economy.packs] == [1000, 5000, 10000]

    def test_leaderboard(self):
        board = load_config().leaderboard
        assert len(board) == 8
        assert board[0].name == "PuzzleMaster99"
        assert board[0].score == 15400

    def test_content_defaults(self):
        content = load_config().content
        assert content.model == "gemini-2.5-flash"
        assert content.api_key is None

    def test_no_save_file_by_default(self):
        assert load_config().save_path is None


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

class TestEnvironment:
    def test_api_key_precedence(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "openai")
        monkeypatch.setenv("GEMINI_API_KEY", "gemini")
        assert load_config().content.api_key == "gemini"
        monkeypatch.setenv("AIPUZZLE_API_KEY", "own")
        assert load_config().content.api_key == "own"

    def test_model_and_base_url(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("AIPUZZLE_MODEL", "gpt-4o-mini")
        monkeypatch.setenv("AIPUZZLE_BASE_URL", "http://localhost:8080/v1")
        content = load_config().content
        assert content.model == "gpt-4o-mini"
        assert content.base_url == "http://localhost:8080/v1"

    def test_save_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("AIPUZZLE_SAVE_FILE", str(tmp_path / "save.json"))
        assert load_config().save_path == tmp_path / "save.json"

    def test_config_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        path = write_yaml(tmp_path, "economy:\n  cost_hint: 10\n")
        monkeypatch.setenv("AIPUZZLE_CONFIG", str(path))
        assert load_config().economy.cost_hint == 10


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------

class TestCustomFiles:
    def test_missing_sections_use_defaults(self, tmp_path: Path):
        config = load_config(write_yaml(tmp_path, ""))
        assert config.economy == EconomyConfig()
        assert config.content.model == ContentConfig().model
        assert config.leaderboard == ()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_top_level_must_be_mapping(self, tmp_path: Path):
        with pytest.raises(ValueError):
            load_config(write_yaml(tmp_path, "- a\n- b\n"))

    def test_negative_cost_rejected(self, tmp_path: Path):
        with pytest.raises(ValueError):
            load_config(write_yaml(tmp_path, "economy:\n  cost_hint: -5\n"))

    def test_pack_needs_pzzls(self, tmp_path: Path):
        with pytest.raises(ValueError):
            load_config(write_yaml(tmp_path, "economy:\n  packs:\n    - {id: 1}\n"))

    def test_leaderboard_needs_name(self, tmp_path: Path):
        with pytest.raises(ValueError):
            load_config(write_yaml(tmp_path, "leaderboard:\n  - {score: 3}\n"))

    def test_bad_temperature(self, tmp_path: Path):
        with pytest.raises(ValueError):
            load_config(write_yaml(tmp_path, "content:\n  temperature: 5\n"))


class TestEconomyFormulas:
    def test_level_reward(self):
        assert EconomyConfig().level_reward(1) == 160
        assert EconomyConfig().level_reward(5) == 200

    def test_level_points(self):
        assert EconomyConfig().level_points(3) == 300

    def test_labels_required_for_every_rate(self):
        with pytest.raises(ValueError):
            EconomyConfig(rates={"EUR": 1.0}, currency_labels={"USD": "$"})

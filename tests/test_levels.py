"""Tests for aipuzzle.core.levels – level data, grid sizes and palettes."""

from __future__ import annotations

import pytest

from aipuzzle.core.levels import (
    FALLBACK_COLORS,
    FALLBACK_FUN_FACT,
    FALLBACK_THEME,
    LevelData,
    fallback_level,
    grid_size_for_level,
    is_hex_color,
    normalize_palette,
)


class TestGridSize:
    @pytest.mark.parametrize("level", [1, 2])
    def test_first_levels_are_three_by_three(self, level: int):
        assert grid_size_for_level(level) == 3

    @pytest.mark.parametrize("level", [3, 4, 10, 250])
    def test_later_levels_are_four_by_four(self, level: int):
        assert grid_size_for_level(level) == 4


class TestHexColors:
    @pytest.mark.parametrize("value", ["#fff", "#FFFFFF", "#8b5cf6", " #abc "])
    def test_valid(self, value: str):
        assert is_hex_color(value)

    @pytest.mark.parametrize("value", ["fff", "#ffff", "#gggggg", "red", ""])
    def test_invalid(self, value: str):
        assert not is_hex_color(value)


class TestNormalizePalette:
    def test_accepts_four_colors(self):
        assert normalize_palette(["#111", " #222222", "#333", "#444444 "]) == (
            "#111",
            "#222222",
            "#333",
            "#444444",
        )

    def test_wrong_count(self):
        with pytest.raises(ValueError, match="expected 4"):
            normalize_palette(["#111", "#222"])

    def test_bad_color(self):
        with pytest.raises(ValueError, match="invalid hex"):
            normalize_palette(["#111", "#222", "blue", "#444"])


class TestFallbackLevel:
    def test_contents(self):
        level = fallback_level(7)
        assert level == LevelData(
            id=7,
            theme=FALLBACK_THEME,
            colors=FALLBACK_COLORS,
            fun_fact=FALLBACK_FUN_FACT,
            grid_size=3,
        )

    def test_always_three_by_three(self):
        assert fallback_level(12).grid_size == 3

    def test_fixed_palette(self):
        assert fallback_level(1).colors == ("#6366f1", "#8b5cf6", "#ec4899", "#f43f5e")

"""Tests for aipuzzle.ui.colors – palette constants, blending and gradient stops."""

from __future__ import annotations

import pytest

from aipuzzle.ui.colors import (
    PuzzleColors,
    amount_color,
    blend_hex,
    expand_hex,
    format_amount,
    gradient_stops,
)


# ===========================================================================
# PuzzleColors – constants exist
# ===========================================================================

class TestPuzzleColors:
    @pytest.mark.parametrize("name", ["BG", "PURPLE", "PINK", "TEXT_PRIMARY", "EARN", "SPEND"])
    def test_is_hex(self, name: str):
        value = getattr(PuzzleColors, name)
        assert value.startswith("#")
        assert len(value) == 7

    def test_card_bg_is_rgba(self):
        assert PuzzleColors.CARD_BG.startswith("rgba(")


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_t_zero_returns_a(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#FF0000"

    def test_t_one_returns_b(self):
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000FF"

    def test_midpoint(self):
        result = blend_hex("#000000", "#FFFFFF", 0.5)
        assert result == "#7F7F7F"

    def test_clamped(self):
        assert blend_hex("#FF0000", "#0000FF", -1.0) == "#FF0000"
        assert blend_hex("#FF0000", "#0000FF", 2.0) == "#0000FF"

    def test_short_hex_returns_a(self):
        assert blend_hex("#FFF", "#000000", 0.5) == "#FFF"

    def test_invalid_hex_chars_return_a(self):
        assert blend_hex("#GGHHII", "#000000", 0.5) == "#GGHHII"

    def test_whitespace_padding(self):
        assert blend_hex("  #FF0000  ", "  #0000FF  ", 0.0) == "#FF0000"


# ===========================================================================
# Level gradients
# ===========================================================================

class TestGradient:
    def test_expand_short_hex(self):
        assert expand_hex("#abc") == "#aabbcc"
        assert expand_hex(" #123456 ") == "#123456"

    def test_four_stops_evenly_spaced(self):
        stops = gradient_stops(["#6366f1", "#8b5cf6", "#ec4899", "#f43f5e"])
        assert [round(pos, 3) for pos, _ in stops] == [0.0, 0.333, 0.667, 1.0]
        assert stops[-1][1] == "#f43f5e"

    def test_single_color(self):
        assert gradient_stops(["#fff"]) == [(0.0, "#ffffff"), (1.0, "#ffffff")]

    def test_empty(self):
        assert gradient_stops([]) == []


# ===========================================================================
# Ledger amounts
# ===========================================================================

class TestAmounts:
    def test_positive_has_plus(self):
        assert format_amount(160) == "+160"
        assert amount_color(160) == PuzzleColors.EARN

    def test_negative(self):
        assert format_amount(-2500) == "-2500"
        assert amount_color(-2500) == PuzzleColors.SPEND

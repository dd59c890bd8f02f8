from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence, Tuple

PALETTE_SIZE = 4

FALLBACK_THEME = "Базовый уровень"
FALLBACK_COLORS: Tuple[str, ...] = ("#6366f1", "#8b5cf6", "#ec4899", "#f43f5e")
FALLBACK_FUN_FACT = "Вы отлично справляетесь!"
FALLBACK_GRID_SIZE = 3

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class LevelData:
    id: int
    theme: str
    colors: Tuple[str, ...]
    fun_fact: str
    grid_size: int


def grid_size_for_level(level_number: int) -> int:
    """First two levels are 3x3, everything after is 4x4."""
    return 3 if level_number <= 2 else 4


def is_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR.match(value.strip()))


def normalize_palette(colors: Sequence[str]) -> Tuple[str, ...]:
    """Validate a generated palette: exactly four hex colors."""
    if len(colors) != PALETTE_SIZE:
        raise ValueError(f"expected {PALETTE_SIZE} colors, got {len(colors)}")
    palette = tuple(str(c).strip() for c in colors)
    bad = [c for c in palette if not is_hex_color(c)]
    if bad:
        raise ValueError(f"invalid hex colors: {bad}")
    return palette


def fallback_level(level_number: int) -> LevelData:
    """Fixed level used whenever generated content is unavailable."""
    return LevelData(
        id=level_number,
        theme=FALLBACK_THEME,
        colors=FALLBACK_COLORS,
        fun_fact=FALLBACK_FUN_FACT,
        grid_size=FALLBACK_GRID_SIZE,
    )

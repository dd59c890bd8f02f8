"""Theme colors and color utilities for the UI."""

from typing import List, Sequence, Tuple


class PuzzleColors:
    """Light playful palette shared by all screens."""

    BG = "#f5f3ff"
    BG_ACCENT = "#ede9fe"

    PURPLE = "#8b5cf6"
    PURPLE_DARK = "#5b21b6"
    PINK = "#ec4899"
    TEAL = "#14b8a6"
    YELLOW = "#f59e0b"

    CARD_BG = "rgba(255, 255, 255, 0.92)"
    CARD_BORDER = "rgba(255, 255, 255, 0.8)"

    TEXT_PRIMARY = "#1f2937"
    TEXT_SECONDARY = "#4b5563"
    TEXT_MUTED = "#9ca3af"

    EARN = "#22c55e"
    SPEND = "#ef4444"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a


def expand_hex(color: str) -> str:
    """#RGB -> #RRGGBB; anything else is returned stripped."""
    color = color.strip()
    if len(color) == 4 and color.startswith("#"):
        return "#" + "".join(ch * 2 for ch in color[1:])
    return color


def gradient_stops(colors: Sequence[str]) -> List[Tuple[float, str]]:
    """Evenly spaced stops for a level palette (first color at 0, last at 1)."""
    palette = [expand_hex(c) for c in colors]
    if not palette:
        return []
    if len(palette) == 1:
        return [(0.0, palette[0]), (1.0, palette[0])]
    step = 1.0 / (len(palette) - 1)
    return [(i * step, c) for i, c in enumerate(palette)]


def amount_color(amount: int) -> str:
    return PuzzleColors.EARN if amount > 0 else PuzzleColors.SPEND


def format_amount(amount: int) -> str:
    return f"+{amount}" if amount > 0 else str(amount)

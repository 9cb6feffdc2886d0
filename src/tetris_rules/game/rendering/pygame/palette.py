# src/tetris_rules/game/rendering/pygame/palette.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Color = Tuple[int, int, int]
ColorA = Tuple[int, int, int, int]


def shade(color: Color, factor: float) -> Color:
    """Scale an RGB color; factor > 1 lightens, < 1 darkens (clamped)."""
    return (
        max(0, min(255, int(color[0] * factor))),
        max(0, min(255, int(color[1] * factor))),
        max(0, min(255, int(color[2] * factor))),
    )


@dataclass(frozen=True)
class Palette:
    # frame
    bg: Color = (16, 16, 22)
    panel_bg: Color = (24, 24, 32)
    border: Color = (96, 96, 120)

    # well
    empty: Color = (28, 28, 36)
    grid: Color = (44, 44, 56)

    # text
    text: Color = (225, 225, 235)
    muted: Color = (150, 150, 170)
    warn: Color = (245, 170, 80)

    # pieces without a color in the YAML set
    fallback_piece: Color = (180, 180, 200)

    # overlays
    ghost_alpha: int = 90
    sweep_rgba: ColorA = (255, 255, 255, 150)
    game_over_rgba: ColorA = (0, 0, 0, 160)

    # block bevel
    bevel_px: int = 3
    bevel_light: float = 1.35
    bevel_dark: float = 0.6

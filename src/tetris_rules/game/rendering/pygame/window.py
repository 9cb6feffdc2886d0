# src/tetris_rules/game/rendering/pygame/window.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import pygame

from tetris_rules.game.rendering.pygame.sidebar import SIDEBAR_W


@dataclass(frozen=True)
class WindowSpec:
    width: int
    height: int
    title: str = "Tetris"


@dataclass(frozen=True)
class Layout:
    origin: Tuple[int, int]
    margin: int
    sidebar_x: int
    sidebar_y: int
    sidebar_w: int
    window: WindowSpec


def create_window(spec: WindowSpec) -> pygame.Surface:
    pygame.display.set_caption(spec.title)
    return pygame.display.set_mode((int(spec.width), int(spec.height)))


def compute_layout(
        *,
        board_h: int,
        board_w: int,
        cell: int,
        sidebar_w: int = SIDEBAR_W,
        right_pad: int = 8,
        bottom_pad: int = 48,
        title: str = "Tetris",
) -> Layout:
    """Single source of truth for window geometry."""
    ox = 24
    oy = 24

    margin = 6
    sidebar_x = ox + int(board_w) * int(cell) + 24
    sidebar_y = oy - margin

    # Keep 2px borders/text off the very edge.
    safety = 6

    window_w = int(sidebar_x) + int(sidebar_w) + int(right_pad) + int(safety)
    window_h = max(int(oy) + int(board_h) * int(cell) + int(bottom_pad), 560)

    return Layout(
        origin=(int(ox), int(oy)),
        margin=int(margin),
        sidebar_x=int(sidebar_x),
        sidebar_y=int(sidebar_y),
        sidebar_w=int(sidebar_w),
        window=WindowSpec(width=int(window_w), height=int(window_h), title=str(title)),
    )

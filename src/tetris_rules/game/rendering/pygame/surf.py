# src/tetris_rules/game/rendering/pygame/surf.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import pygame

Color = Tuple[int, int, int]
ColorA = Tuple[int, int, int, int]


@dataclass
class SurfaceCache:
    """
    Cache small surfaces (cell blocks, translucent overlays) by (size, color).
    Avoids re-allocating surfaces every frame.
    """

    _surfs: Dict[Tuple[int, int, ColorA], pygame.Surface]

    def __init__(self) -> None:
        self._surfs = {}

    def cell(self, *, size: int, color: Color, alpha: int = 255) -> pygame.Surface:
        return self.rect(w=size, h=size, color=(color[0], color[1], color[2], alpha))

    def rect(self, *, w: int, h: int, color: ColorA) -> pygame.Surface:
        rgba: ColorA = (int(color[0]), int(color[1]), int(color[2]), int(color[3]))
        key = (int(w), int(h), rgba)
        surf = self._surfs.get(key)
        if surf is None:
            surf = pygame.Surface((int(w), int(h)), flags=pygame.SRCALPHA)
            surf.fill(rgba)
            self._surfs[key] = surf
        return surf


def blit_text(
        *,
        screen: pygame.Surface,
        font: pygame.font.Font,
        text: str,
        pos: Tuple[int, int],
        color: Color,
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)

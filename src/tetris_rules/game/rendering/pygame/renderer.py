# src/tetris_rules/game/rendering/pygame/renderer.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pygame

from tetris_rules.game.core.pieceset import PieceSet
from tetris_rules.game.core.types import StateView
from tetris_rules.game.rendering.pygame.grid import draw_grid
from tetris_rules.game.rendering.pygame.palette import Palette
from tetris_rules.game.rendering.pygame.sidebar import SIDEBAR_W, draw_sidebar
from tetris_rules.game.rendering.pygame.surf import SurfaceCache
from tetris_rules.game.rendering.pygame.window import Layout, WindowSpec, compute_layout, create_window

__all__ = ["Palette", "TetrisRenderer"]


@dataclass(frozen=True)
class Fonts:
    small: pygame.font.Font
    tiny: pygame.font.Font


class TetrisRenderer:
    """Draws a StateView. Reads only the snapshot; never touches the session."""

    def __init__(
        self,
        *,
        cell: int,
        pieces: PieceSet,
        show_grid_lines: bool = False,
        show_ghost: bool = True,
        palette: Optional[Palette] = None,
    ) -> None:
        self.cell = int(cell)
        self.pieces = pieces
        self.show_grid_lines = bool(show_grid_lines)
        self.show_ghost = bool(show_ghost)
        self.palette = palette or Palette()

        small = pygame.font.SysFont("consolas", 16) or pygame.font.SysFont(None, 16)
        tiny = pygame.font.SysFont("consolas", 14) or pygame.font.SysFont(None, 14)
        self.fonts = Fonts(small=small, tiny=tiny)

        self.cache = SurfaceCache()

    def init_window(
        self,
        *,
        board_h: int,
        board_w: int,
        title: str = "Tetris",
        sidebar_w: int = SIDEBAR_W,
    ) -> tuple[pygame.Surface, Layout]:
        layout = compute_layout(
            board_h=int(board_h),
            board_w=int(board_w),
            cell=int(self.cell),
            sidebar_w=int(sidebar_w),
            title=str(title),
        )
        screen = create_window(WindowSpec(width=layout.window.width, height=layout.window.height, title=str(title)))
        return screen, layout

    def render(self, *, screen: pygame.Surface, view: StateView, layout: Layout) -> None:
        screen.fill(self.palette.bg)

        draw_grid(
            screen=screen,
            view=view,
            origin=layout.origin,
            margin=layout.margin,
            cell=self.cell,
            show_grid_lines=self.show_grid_lines,
            show_ghost=self.show_ghost,
            palette=self.palette,
            pieces=self.pieces,
            cache=self.cache,
        )

        draw_sidebar(
            screen=screen,
            view=view,
            pieces=self.pieces,
            x=layout.sidebar_x,
            y=layout.sidebar_y,
            w=layout.sidebar_w,
            palette=self.palette,
            cache=self.cache,
            font_small=self.fonts.small,
            font_tiny=self.fonts.tiny,
        )

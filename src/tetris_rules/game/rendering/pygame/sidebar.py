# src/tetris_rules/game/rendering/pygame/sidebar.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import pygame

from tetris_rules.game.core.pieceset import PieceSet
from tetris_rules.game.core.types import SessionPhase, StateView
from tetris_rules.game.rendering.pygame.grid import draw_piece_preview
from tetris_rules.game.rendering.pygame.palette import Palette
from tetris_rules.game.rendering.pygame.surf import SurfaceCache, blit_text

# -----------------------------------------------------------------------------
# Public sizing contract
# -----------------------------------------------------------------------------
SIDEBAR_W = 220


# -----------------------------------------------------------------------------
# Layout constants (all magic numbers live here, not inline)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SidebarLayout:
    panel_gap_y: int = 12

    title_pad_x: int = 10
    title_pad_y: int = 8

    preview_cell: int = 14
    preview_box_h: int = 50
    preview_gap_y: int = 4
    preview_top_y: int = 30

    hold_panel_h: int = 92

    stats_panel_h: int = 112
    stats_row_h: int = 20
    stats_value_dx: int = 80

    controls_row_h: int = 18
    controls_key_x_offset: int = 10
    controls_desc_x_offset: int = 86


_LAYOUT = SidebarLayout()

CONTROLS: List[Tuple[str, str]] = [
    ("<- / A", "move left"),
    ("-> / D", "move right"),
    ("Down/S", "soft drop"),
    ("Space/W", "hard drop"),
    ("X / Up", "rotate cw"),
    ("Z / Q", "rotate ccw"),
    ("C", "hold"),
    ("R", "restart"),
    ("Esc", "quit"),
]


def _panel(*, screen: pygame.Surface, rect: pygame.Rect, title: str, palette: Palette, font: pygame.font.Font) -> None:
    pygame.draw.rect(screen, palette.panel_bg, rect)
    pygame.draw.rect(screen, palette.border, rect, width=2)
    blit_text(
        screen=screen,
        font=font,
        text=title,
        pos=(rect.x + _LAYOUT.title_pad_x, rect.y + _LAYOUT.title_pad_y),
        color=palette.text,
    )


def draw_sidebar(
        *,
        screen: pygame.Surface,
        view: StateView,
        pieces: PieceSet,
        x: int,
        y: int,
        w: int,
        palette: Palette,
        cache: SurfaceCache,
        font_small: pygame.font.Font,
        font_tiny: pygame.font.Font,
) -> None:
    """Next queue, hold slot, score/lines/best and the key legend."""
    L = _LAYOUT
    cy = int(y)

    # NEXT
    n_next = len(view.next_kinds)
    next_h = L.preview_top_y + n_next * (L.preview_box_h + L.preview_gap_y)
    r = pygame.Rect(x, cy, w, next_h)
    _panel(screen=screen, rect=r, title="NEXT", palette=palette, font=font_small)
    for i, kind in enumerate(view.next_kinds):
        box = pygame.Rect(x, cy + L.preview_top_y + i * (L.preview_box_h + L.preview_gap_y), w, L.preview_box_h)
        draw_piece_preview(
            screen=screen,
            pieces=pieces,
            kind=kind,
            box=box,
            cell=L.preview_cell,
            palette=palette,
            cache=cache,
        )
    cy += next_h + L.panel_gap_y

    # HOLD
    r = pygame.Rect(x, cy, w, L.hold_panel_h)
    _panel(screen=screen, rect=r, title="HOLD", palette=palette, font=font_small)
    draw_piece_preview(
        screen=screen,
        pieces=pieces,
        kind=view.hold_kind,
        box=pygame.Rect(x, cy + L.preview_top_y, w, L.hold_panel_h - L.preview_top_y - 6),
        cell=L.preview_cell,
        palette=palette,
        cache=cache,
        dimmed=not view.hold_available,
    )
    cy += L.hold_panel_h + L.panel_gap_y

    # STATS
    r = pygame.Rect(x, cy, w, L.stats_panel_h)
    _panel(screen=screen, rect=r, title="STATS", palette=palette, font=font_small)
    rows = [("score", str(view.score)), ("lines", str(view.lines)), ("best", str(view.best_score))]
    for i, (k, v) in enumerate(rows):
        ry = cy + L.preview_top_y + i * L.stats_row_h
        blit_text(screen=screen, font=font_tiny, text=k, pos=(x + L.title_pad_x, ry), color=palette.muted)
        blit_text(screen=screen, font=font_tiny, text=v, pos=(x + L.title_pad_x + L.stats_value_dx, ry), color=palette.text)
    cy += L.stats_panel_h + L.panel_gap_y

    # CONTROLS (only if there is room)
    for i, (key, desc) in enumerate(CONTROLS):
        ry = cy + i * L.controls_row_h
        if ry + L.controls_row_h > screen.get_height():
            break
        blit_text(screen=screen, font=font_tiny, text=key, pos=(x + L.controls_key_x_offset, ry), color=palette.muted)
        blit_text(screen=screen, font=font_tiny, text=desc, pos=(x + L.controls_desc_x_offset, ry), color=palette.text)

    if view.phase is SessionPhase.STOPPED:
        blit_text(
            screen=screen,
            font=font_small,
            text="GAME OVER  (R to restart)",
            pos=(x, screen.get_height() - 28),
            color=palette.warn,
        )

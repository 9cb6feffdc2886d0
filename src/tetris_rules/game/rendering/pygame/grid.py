# src/tetris_rules/game/rendering/pygame/grid.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pygame

from tetris_rules.game.core.pieceset import PieceSet
from tetris_rules.game.core.types import ActivePiece, StateView
from tetris_rules.game.rendering.pygame.palette import Color, Palette, shade
from tetris_rules.game.rendering.pygame.surf import SurfaceCache


# -----------------------------------------------------------------------------
# Rendering constants (no inline magic numbers)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class GridRenderCfg:
    border_width: int = 2
    grid_line_width: int = 1
    ghost_outline_width: int = 1


CFG = GridRenderCfg()


def board_id_to_color(*, board_id: int, palette: Palette, pieces: PieceSet) -> Color:
    if board_id == 0:
        return palette.empty
    try:
        c = pieces.color_of(pieces.board_id_to_kind(int(board_id)))
    except ValueError:
        c = None
    return c if c is not None else palette.fallback_piece


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def draw_grid(
        *,
        screen: pygame.Surface,
        view: StateView,
        origin: Tuple[int, int],
        margin: int,
        cell: int,
        show_grid_lines: bool,
        show_ghost: bool,
        palette: Palette,
        pieces: PieceSet,
        cache: SurfaceCache,
) -> None:
    """
    Draw the locked board, then ghost, active piece and sweep highlight.

    `view.grid` is the LOCKED board only (0 = empty, 1..K = board_id); the
    active piece is never baked into it.
    """
    arr = np.asarray(view.grid)
    ox, oy = origin
    h, w = int(arr.shape[0]), int(arr.shape[1])

    for y in range(h):
        for x in range(w):
            color = board_id_to_color(board_id=int(arr[y, x]), palette=palette, pieces=pieces)
            rx = ox + x * cell
            ry = oy + y * cell
            screen.blit(cache.cell(size=cell, color=color), (rx, ry))
            if int(arr[y, x]) != 0:
                _bevel(screen=screen, rx=rx, ry=ry, cell=cell, color=color, palette=palette)
            if show_grid_lines:
                pygame.draw.rect(screen, palette.grid, pygame.Rect(rx, ry, cell, cell), width=CFG.grid_line_width)

    ap = view.active
    if ap is not None:
        if show_ghost and view.ghost_y is not None and view.ghost_y != ap.y:
            _draw_piece(
                screen=screen,
                piece=ap,
                y=int(view.ghost_y),
                origin=origin,
                cell=cell,
                palette=palette,
                pieces=pieces,
                cache=cache,
                alpha=int(palette.ghost_alpha),
            )
        _draw_piece(
            screen=screen,
            piece=ap,
            y=int(ap.y),
            origin=origin,
            cell=cell,
            palette=palette,
            pieces=pieces,
            cache=cache,
        )

    _draw_sweep(screen=screen, view=view, origin=origin, cell=cell, w=w, h=h, palette=palette, cache=cache)

    pygame.draw.rect(
        screen,
        palette.border,
        pygame.Rect(ox - margin, oy - margin, w * cell + 2 * margin, h * cell + 2 * margin),
        width=CFG.border_width,
    )

    if view.game_over:
        screen.blit(cache.rect(w=w * cell, h=h * cell, color=palette.game_over_rgba), (ox, oy))


# -----------------------------------------------------------------------------
# Overlay helpers
# -----------------------------------------------------------------------------
def _draw_piece(
        *,
        screen: pygame.Surface,
        piece: ActivePiece,
        y: int,
        origin: Tuple[int, int],
        cell: int,
        palette: Palette,
        pieces: PieceSet,
        cache: SurfaceCache,
        alpha: int = 255,
) -> None:
    ox, oy = origin
    m = piece.matrix
    for yy in range(int(m.shape[0])):
        for xx in range(int(m.shape[1])):
            v = int(m[yy, xx])
            if v == 0:
                continue
            gy = y + yy
            if gy < 0:
                continue
            color = board_id_to_color(board_id=v, palette=palette, pieces=pieces)
            rx = ox + (piece.x + xx) * cell
            ry = oy + gy * cell
            screen.blit(cache.cell(size=cell, color=color, alpha=alpha), (rx, ry))
            if alpha < 255:
                pygame.draw.rect(screen, color, pygame.Rect(rx, ry, cell, cell), width=CFG.ghost_outline_width)
            else:
                _bevel(screen=screen, rx=rx, ry=ry, cell=cell, color=color, palette=palette)


def _draw_sweep(
        *,
        screen: pygame.Surface,
        view: StateView,
        origin: Tuple[int, int],
        cell: int,
        w: int,
        h: int,
        palette: Palette,
        cache: SurfaceCache,
) -> None:
    ox, oy = origin
    row = cache.rect(w=w * cell, h=cell, color=palette.sweep_rgba)
    for r in view.sweeping_rows:
        screen.blit(row, (ox, oy + int(r) * cell))
    col = cache.rect(w=cell, h=h * cell, color=palette.sweep_rgba)
    for c in view.sweeping_cols:
        screen.blit(col, (ox + int(c) * cell, oy))


def draw_piece_preview(
        *,
        screen: pygame.Surface,
        pieces: PieceSet,
        kind: Optional[str],
        box: pygame.Rect,
        cell: int,
        palette: Palette,
        cache: SurfaceCache,
        dimmed: bool = False,
) -> None:
    """Centered spawn-orientation preview of `kind` inside `box`."""
    if kind is None:
        return
    m = pieces.shape(kind)
    ys, xs = np.nonzero(m)
    if ys.size == 0:
        return
    y0, y1 = int(ys.min()), int(ys.max())
    x0, x1 = int(xs.min()), int(xs.max())
    pw = (x1 - x0 + 1) * cell
    ph = (y1 - y0 + 1) * cell
    bx = box.x + (box.w - pw) // 2
    by = box.y + (box.h - ph) // 2

    c = pieces.color_of(kind)
    color = c if c is not None else palette.fallback_piece
    if dimmed:
        color = palette.muted
    for r, cc in zip(ys, xs):
        screen.blit(cache.cell(size=cell, color=color), (bx + (int(cc) - x0) * cell, by + (int(r) - y0) * cell))


def _bevel(*, screen: pygame.Surface, rx: int, ry: int, cell: int, color: Color, palette: Palette) -> None:
    """Light top/left edge, dark bottom/right edge."""
    b = int(palette.bevel_px)
    if b <= 0 or cell <= 2 * b:
        return
    light = shade(color, palette.bevel_light)
    dark = shade(color, palette.bevel_dark)
    pygame.draw.rect(screen, light, pygame.Rect(rx, ry, cell, b))
    pygame.draw.rect(screen, light, pygame.Rect(rx, ry, b, cell))
    pygame.draw.rect(screen, dark, pygame.Rect(rx, ry + cell - b, cell, b))
    pygame.draw.rect(screen, dark, pygame.Rect(rx + cell - b, ry, b, cell))

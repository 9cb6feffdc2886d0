# src/tetris_rules/game/core/rotation.py
from __future__ import annotations

from typing import Iterator, Optional

import numpy as np

from tetris_rules.game.core.board import Board
from tetris_rules.game.core.collision import collides
from tetris_rules.game.core.types import ActivePiece

CW = +1
CCW = -1


def rotate_matrix(m: np.ndarray, direction: int) -> np.ndarray:
    """
    90 degree rotation of a square matrix into a NEW array.

      clockwise:         new[x][N-1-y] = old[y][x]
      counterclockwise:  new[N-1-x][y] = old[y][x]
    """
    n_rows, n_cols = m.shape
    if n_rows != n_cols:
        raise ValueError(f"rotation needs a square matrix, got shape={m.shape}")
    if direction not in (CW, CCW):
        raise ValueError(f"direction must be +1 (cw) or -1 (ccw), got {direction!r}")

    n = int(n_rows)
    out = np.zeros_like(m)
    for y in range(n):
        for x in range(n):
            if direction == CW:
                out[x, n - 1 - y] = m[y, x]
            else:
                out[n - 1 - x, y] = m[y, x]
    return out


def kick_offsets(width: int) -> Iterator[int]:
    """
    Cumulative x displacements tried by the kick search.

    Steps 1, -2, 3, -4, ... are applied one after another, so the piece is
    probed at +1, -1, +2, -2, ... from where it started. The search ends
    once the next step would be wider than the matrix.
    """
    dx = 0
    step = 1
    while abs(step) <= int(width):
        dx += step
        yield dx
        step = -(step + (1 if step > 0 else -1))


def try_rotate(board: Board, piece: ActivePiece, direction: int) -> Optional[ActivePiece]:
    """
    Rotate with kick search. Returns the rotated piece, or None when no
    kick fits (caller keeps the original piece untouched).
    """
    rotated = rotate_matrix(piece.matrix, direction)
    if not collides(board, rotated, piece.x, piece.y):
        return piece.with_matrix(rotated, x=piece.x)

    for dx in kick_offsets(piece.size):
        nx = piece.x + dx
        if not collides(board, rotated, nx, piece.y):
            return piece.with_matrix(rotated, x=nx)
    return None

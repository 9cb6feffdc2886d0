# src/tetris_rules/game/core/collision.py
from __future__ import annotations

import numpy as np

from tetris_rules.game.core.board import Board
from tetris_rules.game.core.constants import EMPTY_CELL


def collides(board: Board, matrix: np.ndarray, x: int, y: int) -> bool:
    """
    True if any filled cell of `matrix` placed with its top-left at (x, y)
    lies outside the board or on an occupied board cell.

    Empty matrix cells are never tested, so padded bounding boxes may hang
    over the walls.
    """
    n_rows, n_cols = matrix.shape
    for r in range(n_rows):
        for c in range(n_cols):
            if matrix[r, c] == EMPTY_CELL:
                continue
            bx = x + c
            by = y + r
            if bx < 0 or bx >= board.w or by < 0 or by >= board.h:
                return True
            if board.grid[by, bx] != EMPTY_CELL:
                return True
    return False


def merge(board: Board, matrix: np.ndarray, x: int, y: int) -> int:
    """
    Write every filled cell of `matrix` into the board and return how many
    cells were written.

    Does NOT check collisions first; caller must ensure
    `not collides(board, matrix, x, y)`.
    """
    placed = 0
    n_rows, n_cols = matrix.shape
    for r in range(n_rows):
        for c in range(n_cols):
            v = matrix[r, c]
            if v == EMPTY_CELL:
                continue
            board.grid[y + r, x + c] = v
            placed += 1
    return placed


def drop_distance(board: Board, matrix: np.ndarray, x: int, y: int) -> int:
    """Rows the piece can still fall before touching the stack/floor."""
    d = 0
    while not collides(board, matrix, x, y + d + 1):
        d += 1
    return d


def ghost_y(board: Board, matrix: np.ndarray, x: int, y: int) -> int:
    return y + drop_distance(board, matrix, x, y)


def fits_anywhere(board: Board, matrix: np.ndarray) -> bool:
    """True if some (x, y) exists where the matrix does not collide."""
    n = int(max(matrix.shape))
    for y in range(-n, board.h):
        for x in range(-n, board.w):
            if not collides(board, matrix, x, y):
                return True
    return False

# src/tetris_rules/game/core/board.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tetris_rules.game.core.constants import EMPTY_CELL


@dataclass
class Board:
    """
    Locked cells only (0=empty, 1..7 piece board ids).

    h/w never change after creation. Row 0 is the top of the well.
    """

    h: int
    w: int
    grid: np.ndarray

    @classmethod
    def empty(cls, *, h: int, w: int) -> "Board":
        h, w = int(h), int(w)
        if h <= 0 or w <= 0:
            raise ValueError(f"board dimensions must be positive, got h={h} w={w}")
        return cls(h=h, w=w, grid=np.zeros((h, w), dtype=np.uint8))

    def reset(self) -> None:
        self.grid[:, :] = EMPTY_CELL

    def copy_grid(self) -> np.ndarray:
        return self.grid.copy()

    def full_rows(self) -> list[int]:
        """Ascending indices of rows with no empty cell."""
        full = np.all(self.grid != EMPTY_CELL, axis=1)
        return [int(r) for r in np.flatnonzero(full)]

    def full_cols(self) -> list[int]:
        full = np.all(self.grid != EMPTY_CELL, axis=0)
        return [int(c) for c in np.flatnonzero(full)]

    def remove_row(self, row: int) -> None:
        """Delete `row` and prepend an empty row; rows above it shift down by one."""
        r = int(row)
        if not 0 <= r < self.h:
            raise IndexError(f"row {r} out of range (h={self.h})")
        kept = np.delete(self.grid, r, axis=0)
        fresh = np.zeros((1, self.w), dtype=self.grid.dtype)
        self.grid = np.vstack([fresh, kept])

    def clear_row(self, row: int) -> None:
        self.grid[int(row), :] = EMPTY_CELL

    def clear_col(self, col: int) -> None:
        self.grid[:, int(col)] = EMPTY_CELL

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid))


def create_board(w: int, h: int) -> Board:
    return Board.empty(h=h, w=w)

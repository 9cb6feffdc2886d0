# src/tetris_rules/game/core/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np


class Command(Enum):
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    SOFT_DROP = auto()
    HARD_DROP = auto()
    ROTATE_CW = auto()
    ROTATE_CCW = auto()
    HOLD = auto()


# Commands that only shift/turn the falling piece (never merge or spawn).
MOTION_COMMANDS = frozenset({Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.ROTATE_CW, Command.ROTATE_CCW})


class EventKind(Enum):
    MOVE = auto()
    ROTATE = auto()
    SOFT_DROP = auto()
    HARD_DROP = auto()
    HOLD = auto()
    LINE_CLEAR = auto()
    GAME_OVER = auto()


class SessionPhase(Enum):
    ACTIVE = auto()
    ANIMATING = auto()
    STOPPED = auto()


class SweepPhase(Enum):
    IDLE = auto()
    ANIMATING = auto()


@dataclass(frozen=True, eq=False)
class ActivePiece:
    """
    The falling piece. `matrix` is a working copy (never a template) and is
    treated as immutable: every move/rotation builds a new ActivePiece.
    """

    kind: str
    matrix: np.ndarray
    x: int
    y: int

    @property
    def size(self) -> int:
        return int(self.matrix.shape[0])

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return ActivePiece(kind=self.kind, matrix=self.matrix, x=self.x + int(dx), y=self.y + int(dy))

    def with_matrix(self, matrix: np.ndarray, *, x: int) -> "ActivePiece":
        return ActivePiece(kind=self.kind, matrix=matrix, x=int(x), y=self.y)


@dataclass(frozen=True)
class ScoreState:
    score: int = 0
    lines: int = 0


@dataclass(frozen=True)
class StateView:
    """
    Render-facing snapshot handed to on_state_changed listeners.

    grid is a COPY of the locked board (no active overlay); the active piece
    and the ghost landing row are provided separately.
    """

    grid: np.ndarray
    active: Optional[ActivePiece]
    ghost_y: Optional[int]
    next_kinds: Tuple[str, ...]
    hold_kind: Optional[str]
    hold_available: bool
    score: int
    lines: int
    best_score: int
    sweeping_rows: Tuple[int, ...]
    sweeping_cols: Tuple[int, ...]
    phase: SessionPhase

    @property
    def game_over(self) -> bool:
        return self.phase is SessionPhase.STOPPED

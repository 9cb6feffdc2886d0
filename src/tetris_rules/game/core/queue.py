# src/tetris_rules/game/core/queue.py
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Deque, Optional, Tuple

from tetris_rules.game.core.constants import QUEUE_LOOKAHEAD
from tetris_rules.game.core.piece_rules import PieceRule


class HoldOutcome(Enum):
    REJECTED = auto()  # latch already used this turn
    STORED = auto()    # slot was empty; caller must spawn the next queued piece
    SWAPPED = auto()   # slot was occupied; `kind` is the piece to respawn


@dataclass(frozen=True)
class HoldResult:
    outcome: HoldOutcome
    kind: Optional[str] = None


class PieceQueue:
    """
    Lookahead buffer of upcoming kinds plus the single hold slot.

    Invariants:
      - len(upcoming) >= lookahead after every public call
      - hold_available is re-armed by take_next() and cleared by a hold
    """

    def __init__(self, *, rule: PieceRule, lookahead: int = QUEUE_LOOKAHEAD) -> None:
        if int(lookahead) < 1:
            raise ValueError(f"lookahead must be >= 1, got {lookahead}")
        self.rule = rule
        self.lookahead = int(lookahead)
        self._upcoming: Deque[str] = deque()
        self.held: Optional[str] = None
        self.hold_available: bool = True

    def reset(self) -> None:
        self._upcoming.clear()
        self.held = None
        self.hold_available = True
        self._refill()

    def _refill(self) -> None:
        while len(self._upcoming) < self.lookahead:
            self._upcoming.append(self.rule.next_piece())

    def upcoming(self) -> Tuple[str, ...]:
        return tuple(self._upcoming)

    def take_next(self, *, rearm_hold: bool = True) -> str:
        """
        Pop the front kind and top the queue back up.

        rearm_hold=False is used when the spawn itself comes from a hold, so
        the latch stays cleared until the next placement.
        """
        self._refill()
        kind = self._upcoming.popleft()
        self._refill()
        if rearm_hold:
            self.hold_available = True
        return kind

    def hold(self, current_kind: str) -> HoldResult:
        if not self.hold_available:
            return HoldResult(outcome=HoldOutcome.REJECTED)

        if self.held is None:
            self.held = str(current_kind)
            self.hold_available = False
            return HoldResult(outcome=HoldOutcome.STORED)

        swapped = self.held
        self.held = str(current_kind)
        self.hold_available = False
        return HoldResult(outcome=HoldOutcome.SWAPPED, kind=swapped)

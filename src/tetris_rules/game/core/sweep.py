# src/tetris_rules/game/core/sweep.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional, Tuple

from tetris_rules.game.core.board import Board
from tetris_rules.game.core.constants import SWEEP_DELAY_MS
from tetris_rules.game.core.rules import ScoreConfig, score_for_grid_clears, score_for_row_clears
from tetris_rules.game.core.timers import TimerService
from tetris_rules.game.core.types import SweepPhase
from tetris_rules.utils.logging import get_logger

SweepRuleset = Literal["rows", "grid"]

LOG = get_logger("tetris_rules.game.sweep")


@dataclass(frozen=True)
class SweepResult:
    rows: Tuple[int, ...]
    cols: Tuple[int, ...]
    points: int
    lines: int


class LineSweeper:
    """
    Two-phase clear: detect right after a merge, animate for `delay_ms`,
    then finalize on the timer callback.

    Rulesets:
      rows: full rows only. Finalize removes each row (ascending) and
            prepends an empty row; the k-th row of a batch scores base*2**k.
      grid: full rows AND full columns, detected independently and zeroed
            in place (nothing shifts); n lines score base*n*n.

    The sweeper never touches the active piece or the queue; the owner
    decides what is allowed while `busy` is True.
    """

    def __init__(
            self,
            *,
            timer: TimerService,
            ruleset: SweepRuleset = "rows",
            delay_ms: float = SWEEP_DELAY_MS,
            score_cfg: ScoreConfig | None = None,
    ) -> None:
        if ruleset not in ("rows", "grid"):
            raise ValueError(f"ruleset must be 'rows' or 'grid', got {ruleset!r}")
        if float(delay_ms) < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        self.timer = timer
        self.ruleset: SweepRuleset = ruleset
        self.delay_ms = float(delay_ms)
        self.score_cfg = score_cfg or ScoreConfig()

        self.phase = SweepPhase.IDLE
        self.rows: Tuple[int, ...] = ()
        self.cols: Tuple[int, ...] = ()
        self._handle: Optional[object] = None

    @property
    def busy(self) -> bool:
        return self.phase is not SweepPhase.IDLE

    def detect(self, board: Board) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        rows = tuple(board.full_rows())
        if self.ruleset == "grid":
            return rows, tuple(board.full_cols())
        return rows, ()

    def begin(self, board: Board, on_finalized: Callable[[SweepResult], None]) -> bool:
        """
        Run detection once. Returns False (and stays idle) when nothing is
        full; otherwise enters ANIMATING and schedules finalization.
        """
        if self.busy:
            raise RuntimeError("LineSweeper.begin() called while a sweep is already running")

        rows, cols = self.detect(board)
        if not rows and not cols:
            return False

        self.phase = SweepPhase.ANIMATING
        self.rows = rows
        self.cols = cols
        LOG.debug("sweep start rows=%s cols=%s delay_ms=%s", list(rows), list(cols), self.delay_ms)

        def _fire() -> None:
            self._handle = None
            on_finalized(self.finalize(board))

        if self.delay_ms <= 0:
            _fire()
        else:
            self._handle = self.timer.schedule_after(self.delay_ms, _fire)
        return True

    def finalize(self, board: Board) -> SweepResult:
        rows = tuple(sorted(self.rows))
        cols = tuple(sorted(self.cols))

        if self.ruleset == "grid":
            for r in rows:
                board.clear_row(r)
            for c in cols:
                board.clear_col(c)
            n = len(rows) + len(cols)
            points = score_for_grid_clears(n, self.score_cfg)
        else:
            # Ascending order: removing row r only shifts rows above r, so the
            # still-pending (larger) indices stay valid without adjustment.
            for r in rows:
                board.remove_row(r)
            n = len(rows)
            points = score_for_row_clears(n, self.score_cfg)

        self._idle()
        LOG.debug("sweep done rows=%s cols=%s points=%d", list(rows), list(cols), points)
        return SweepResult(rows=rows, cols=cols, points=int(points), lines=int(n))

    def cancel(self) -> None:
        if self._handle is not None:
            self.timer.cancel(self._handle)
        self._idle()

    def _idle(self) -> None:
        self._handle = None
        self.phase = SweepPhase.IDLE
        self.rows = ()
        self.cols = ()

# src/tetris_rules/game/core/session.py
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Optional

import numpy as np

from tetris_rules.config.game import GameConfig
from tetris_rules.game.core.board import Board
from tetris_rules.game.core.collision import collides, drop_distance, ghost_y, merge
from tetris_rules.game.core.constants import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    DROP_INTERVAL_MS,
    QUEUE_LOOKAHEAD,
    SWEEP_DELAY_MS,
)
from tetris_rules.game.core.piece_rules import PieceRule, UniformPieceRule
from tetris_rules.game.core.pieceset import PieceSet
from tetris_rules.game.core.queue import HoldOutcome, PieceQueue
from tetris_rules.game.core.rotation import CCW, CW, try_rotate
from tetris_rules.game.core.rules import ScoreConfig, placement_score
from tetris_rules.game.core.sweep import LineSweeper, SweepResult, SweepRuleset
from tetris_rules.game.core.timers import TickTimer, TimerService
from tetris_rules.game.core.types import (
    MOTION_COMMANDS,
    ActivePiece,
    Command,
    EventKind,
    ScoreState,
    SessionPhase,
    StateView,
)
from tetris_rules.game.persistence import BestScoreStore, JsonBestScoreStore, MemoryBestScoreStore
from tetris_rules.utils.logging import get_logger

StateListener = Callable[[StateView], None]
EventListener = Callable[[EventKind], None]

LOG = get_logger("tetris_rules.game.session")

_COMMAND_ALIASES = {
    "left": Command.MOVE_LEFT,
    "move_left": Command.MOVE_LEFT,
    "right": Command.MOVE_RIGHT,
    "move_right": Command.MOVE_RIGHT,
    "down": Command.SOFT_DROP,
    "soft_drop": Command.SOFT_DROP,
    "drop": Command.HARD_DROP,
    "hard_drop": Command.HARD_DROP,
    "cw": Command.ROTATE_CW,
    "rot_cw": Command.ROTATE_CW,
    "rotate_cw": Command.ROTATE_CW,
    "ccw": Command.ROTATE_CCW,
    "rot_ccw": Command.ROTATE_CCW,
    "rotate_ccw": Command.ROTATE_CCW,
    "hold": Command.HOLD,
}


def normalize_command(cmd: Any) -> Command:
    if isinstance(cmd, Command):
        return cmd
    s = str(cmd).strip().lower()
    try:
        return _COMMAND_ALIASES[s]
    except KeyError as e:
        raise ValueError(f"unknown command {cmd!r}. known: {sorted(_COMMAND_ALIASES)!r}") from e


class GameSession:
    """
    Owns one game: board, active piece, queue/hold, sweeper, score.

    Contracts:

      - tick(dt_ms) is the only clock. It advances the session-owned timer
        (firing due sweep finalizations) and then gravity.
      - submit_command() returns True iff it changed state. Rule outcomes
        (blocked move, failed rotation, hold already used, game over) are
        never exceptions.
      - While a sweep is animating, every command is dropped unless
        allow_move_during_animation is set, in which case only
        move/rotate of the already-spawned next piece are accepted.
      - Board and score are written only here and in the sweep finalize
        callback.
      - on_state_changed gets a fresh StateView after every mutation;
        on_event is fire-and-forget.
    """

    def __init__(
            self,
            *,
            width: int = BOARD_WIDTH,
            height: int = BOARD_HEIGHT,
            lookahead: int = QUEUE_LOOKAHEAD,
            drop_interval_ms: float = DROP_INTERVAL_MS,
            sweep_delay_ms: float = SWEEP_DELAY_MS,
            ruleset: SweepRuleset = "rows",
            allow_move_during_animation: bool = False,
            score_cfg: Optional[ScoreConfig] = None,
            piece_set: Optional[PieceSet] = None,
            piece_rule: Optional[PieceRule] = None,
            timer: Optional[TimerService] = None,
            best_store: Optional[BestScoreStore] = None,
            seed: Optional[int] = None,
            on_state_changed: Optional[StateListener] = None,
            on_event: Optional[EventListener] = None,
    ) -> None:
        self.w = int(width)
        self.h = int(height)
        if self.w <= 0 or self.h <= 0:
            raise ValueError(f"board dimensions must be positive, got width={self.w} height={self.h}")
        if float(drop_interval_ms) <= 0:
            raise ValueError(f"drop_interval_ms must be positive, got {drop_interval_ms}")

        self.drop_interval_ms = float(drop_interval_ms)
        self.allow_move_during_animation = bool(allow_move_during_animation)
        self.score_cfg = score_cfg or ScoreConfig()
        self.pieces = piece_set or PieceSet.classic7()
        if len(self.pieces) == 0:
            raise ValueError("PieceSet has no kinds (empty pieceset is invalid).")

        # A timer we create is advanced by tick(); an injected one belongs to the host.
        self._owns_timer = timer is None
        self.timer: TimerService = timer if timer is not None else TickTimer()

        self._rng: np.random.Generator = np.random.default_rng(seed)
        self.queue = PieceQueue(rule=piece_rule or UniformPieceRule(), lookahead=lookahead)
        self.sweeper = LineSweeper(
            timer=self.timer,
            ruleset=ruleset,
            delay_ms=sweep_delay_ms,
            score_cfg=self.score_cfg,
        )

        self.best_store: BestScoreStore = best_store if best_store is not None else MemoryBestScoreStore()
        self.best_score = self._load_best()

        self.on_state_changed = on_state_changed
        self.on_event = on_event

        self.board = Board.empty(h=self.h, w=self.w)
        self.active: Optional[ActivePiece] = None
        self.score_state = ScoreState()
        self._gravity_ms = 0.0
        self._stopped = False

        self.reset()

    @classmethod
    def from_config(cls, cfg: GameConfig, **kwargs: Any) -> "GameSession":
        if "best_store" not in kwargs and cfg.best_score.path:
            kwargs["best_store"] = JsonBestScoreStore(Path(cfg.best_score.path).expanduser())
        return cls(
            width=cfg.board.width,
            height=cfg.board.height,
            lookahead=cfg.queue.lookahead,
            drop_interval_ms=cfg.timing.drop_interval_ms,
            sweep_delay_ms=cfg.timing.sweep_delay_ms,
            ruleset=cfg.sweep.ruleset,
            allow_move_during_animation=cfg.sweep.allow_move_during_animation,
            score_cfg=ScoreConfig(line_base=cfg.scoring.line_base, per_cell=cfg.scoring.per_cell),
            seed=cfg.seed,
            **kwargs,
        )

    # ---- lifecycle -------------------------------------------------------------------

    def reset(self) -> StateView:
        """Back to creation-time state; cancels any pending sweep."""
        self.sweeper.cancel()
        if self._owns_timer and isinstance(self.timer, TickTimer):
            self.timer.cancel_all()

        self.board = Board.empty(h=self.h, w=self.w)
        self.score_state = ScoreState()
        self._gravity_ms = 0.0
        self._stopped = False
        self.active = None

        self.queue.rule.reset(rng=self._rng, kinds=self.pieces.kinds())
        self.queue.reset()
        self._spawn(self.queue.take_next())

        self._notify()
        return self.state()

    @property
    def phase(self) -> SessionPhase:
        if self._stopped:
            return SessionPhase.STOPPED
        if self.sweeper.busy:
            return SessionPhase.ANIMATING
        return SessionPhase.ACTIVE

    @property
    def game_over(self) -> bool:
        return self._stopped

    @property
    def score(self) -> int:
        return int(self.score_state.score)

    @property
    def lines(self) -> int:
        return int(self.score_state.lines)

    # ---- clock -----------------------------------------------------------------------

    def tick(self, dt_ms: float) -> None:
        dt = float(dt_ms)
        if dt < 0:
            raise ValueError(f"dt_ms must be >= 0, got {dt}")
        if self._stopped:
            return

        # A finalize inside this tick restarts gravity; the remaining time is dropped.
        was_busy = self.sweeper.busy
        if self._owns_timer and isinstance(self.timer, TickTimer):
            self.timer.advance(dt)

        if was_busy or self._stopped or self.sweeper.busy or self.active is None:
            return

        self._gravity_ms += dt
        if self._gravity_ms > self.drop_interval_ms:
            self._gravity_ms = 0.0
            self._step_down()

    # ---- commands --------------------------------------------------------------------

    def submit_command(self, cmd: Any) -> bool:
        c = normalize_command(cmd)

        if self._stopped or self.active is None:
            return False
        if self.sweeper.busy:
            if not (self.allow_move_during_animation and c in MOTION_COMMANDS):
                return False

        if c is Command.MOVE_LEFT:
            return self._shift(-1)
        if c is Command.MOVE_RIGHT:
            return self._shift(+1)
        if c is Command.ROTATE_CW:
            return self._rotate(CW)
        if c is Command.ROTATE_CCW:
            return self._rotate(CCW)
        if c is Command.SOFT_DROP:
            self._gravity_ms = 0.0
            self._emit(EventKind.SOFT_DROP)
            self._step_down()
            return True
        if c is Command.HARD_DROP:
            return self._hard_drop()
        if c is Command.HOLD:
            return self._hold()
        raise AssertionError(f"unhandled command {c!r}")

    # ---- internals -------------------------------------------------------------------

    def _shift(self, dx: int) -> bool:
        ap = self.active
        if ap is None or collides(self.board, ap.matrix, ap.x + dx, ap.y):
            return False
        self.active = ap.moved(dx, 0)
        self._emit(EventKind.MOVE)
        self._notify()
        return True

    def _rotate(self, direction: int) -> bool:
        ap = self.active
        if ap is None:
            return False
        rotated = try_rotate(self.board, ap, direction)
        if rotated is None:
            return False
        self.active = rotated
        self._emit(EventKind.ROTATE)
        self._notify()
        return True

    def _step_down(self) -> None:
        """One row of gravity/soft drop; locks when the row below is blocked."""
        ap = self.active
        if ap is None:
            return
        if collides(self.board, ap.matrix, ap.x, ap.y + 1):
            self._lock()
            return
        self.active = ap.moved(0, 1)
        self._notify()

    def _hard_drop(self) -> bool:
        ap = self.active
        if ap is None:
            return False
        d = drop_distance(self.board, ap.matrix, ap.x, ap.y)
        self.active = ap.moved(0, d)
        self._gravity_ms = 0.0
        self._emit(EventKind.HARD_DROP)
        self._lock()
        return True

    def _hold(self) -> bool:
        ap = self.active
        if ap is None:
            return False
        res = self.queue.hold(ap.kind)
        if res.outcome is HoldOutcome.REJECTED:
            return False

        if res.outcome is HoldOutcome.STORED:
            kind = self.queue.take_next(rearm_hold=False)
        else:
            assert res.kind is not None
            kind = res.kind

        self._gravity_ms = 0.0
        self._emit(EventKind.HOLD)
        self._spawn(kind)
        self._notify()
        return True

    def _lock(self) -> None:
        ap = self.active
        if ap is None:
            return

        placed = merge(self.board, ap.matrix, ap.x, ap.y)
        self.active = None
        self._gravity_ms = 0.0
        self._add_score(placement_score(placed, self.score_cfg), 0)
        LOG.debug("locked %s at x=%d y=%d (+%d cells)", ap.kind, ap.x, ap.y, placed)

        # Detection runs exactly once per merge.
        started = self.sweeper.begin(self.board, self._on_sweep_finalized)
        if not started:
            self._spawn(self.queue.take_next())
        else:
            self._emit(EventKind.LINE_CLEAR)
            if self.sweeper.busy and self.allow_move_during_animation:
                self._spawn_during_sweep()

        self._notify()

    def _spawn_during_sweep(self) -> None:
        """
        Early spawn while rows are still animating. A piece that would overlap
        the rows being removed waits for finalize, so the pending clear is
        scored and game over is judged on the settled board.
        """
        kind = self.queue.upcoming()[0]
        matrix = self.pieces.get(kind).working_copy()
        x, y = self._spawn_xy(matrix)
        if collides(self.board, matrix, x, y):
            LOG.debug("spawn %s deferred until sweep finalize", kind)
            return
        self._spawn(self.queue.take_next())

    def _on_sweep_finalized(self, result: SweepResult) -> None:
        self._add_score(result.points, result.lines)
        LOG.debug(
            "cleared rows=%s cols=%s +%d (score=%d lines=%d)",
            list(result.rows),
            list(result.cols),
            result.points,
            self.score,
            self.lines,
        )

        if self._stopped:
            self._notify()
            return

        ap = self.active
        if ap is None:
            self._spawn(self.queue.take_next())
        elif collides(self.board, ap.matrix, ap.x, ap.y):
            # Rows shifted into a piece that kept moving during the animation.
            self._end_game()

        self._notify()

    def _spawn(self, kind: str) -> None:
        matrix = self.pieces.get(kind).working_copy()
        x, y = self._spawn_xy(matrix)
        ap = ActivePiece(kind=str(kind), matrix=matrix, x=x, y=y)
        self.active = ap
        self._gravity_ms = 0.0
        if collides(self.board, ap.matrix, ap.x, ap.y):
            self._end_game()
        else:
            LOG.debug("spawn %s at x=%d", ap.kind, ap.x)

    def _spawn_xy(self, matrix: np.ndarray) -> tuple[int, int]:
        return (self.w // 2) - (int(matrix.shape[0]) // 2), 0

    def _end_game(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self.sweeper.cancel()
        LOG.info("game over: score=%d lines=%d best=%d", self.score, self.lines, self.best_score)
        self._emit(EventKind.GAME_OVER)

    def _add_score(self, points: int, lines: int) -> None:
        if points == 0 and lines == 0:
            return
        self.score_state = replace(
            self.score_state,
            score=self.score_state.score + int(points),
            lines=self.score_state.lines + int(lines),
        )
        if self.score_state.score > self.best_score:
            self.best_score = int(self.score_state.score)
            self._save_best()

    def _load_best(self) -> int:
        try:
            return int(self.best_store.load())
        except (OSError, ValueError) as e:
            LOG.warning("could not read best score, starting from 0: %s", e)
            return 0

    def _save_best(self) -> None:
        try:
            self.best_store.save(self.best_score)
        except OSError as e:
            LOG.warning("could not persist best score %d: %s", self.best_score, e)

    def _emit(self, kind: EventKind) -> None:
        cb = self.on_event
        if cb is None:
            return
        try:
            cb(kind)
        except Exception:
            LOG.exception("on_event listener failed for %s", kind.name)

    def _notify(self) -> None:
        cb = self.on_state_changed
        if cb is None:
            return
        try:
            cb(self.state())
        except Exception:
            LOG.exception("on_state_changed listener failed")

    # ---- snapshots -------------------------------------------------------------------

    def _ghost_y(self) -> Optional[int]:
        ap = self.active
        if ap is None or self._stopped:
            return None
        return ghost_y(self.board, ap.matrix, ap.x, ap.y)

    def state(self) -> StateView:
        return StateView(
            grid=self.board.copy_grid(),
            active=self.active,
            ghost_y=self._ghost_y(),
            next_kinds=self.queue.upcoming(),
            hold_kind=self.queue.held,
            hold_available=bool(self.queue.hold_available),
            score=self.score,
            lines=self.lines,
            best_score=int(self.best_score),
            sweeping_rows=tuple(self.sweeper.rows),
            sweeping_cols=tuple(self.sweeper.cols),
            phase=self.phase,
        )

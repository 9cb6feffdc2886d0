# src/tetris_rules/config/game.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator

from tetris_rules.config.base import ConfigBase, coerce_int
from tetris_rules.game.core.constants import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    CELL_SCORE,
    DROP_INTERVAL_MS,
    LINE_BASE_SCORE,
    QUEUE_LOOKAHEAD,
    SWEEP_DELAY_MS,
)

SweepRulesetName = Literal["rows", "grid"]


class BoardConfig(ConfigBase):
    width: int = Field(default=BOARD_WIDTH, ge=4)
    height: int = Field(default=BOARD_HEIGHT, ge=4)


class QueueConfig(ConfigBase):
    lookahead: int = Field(default=QUEUE_LOOKAHEAD, ge=1)


class TimingConfig(ConfigBase):
    drop_interval_ms: float = Field(default=DROP_INTERVAL_MS, gt=0)
    sweep_delay_ms: float = Field(default=SWEEP_DELAY_MS, ge=0)


class ScoringConfig(ConfigBase):
    line_base: int = Field(default=LINE_BASE_SCORE, ge=0)
    per_cell: int = Field(default=CELL_SCORE, ge=0)


class SweepConfig(ConfigBase):
    ruleset: SweepRulesetName = "rows"
    # False: every command is dropped while a sweep animates and the next
    # piece spawns after finalize. True: the next piece spawns at once and
    # may move/rotate (not drop/hold) during the animation.
    allow_move_during_animation: bool = False

    @field_validator("ruleset", mode="before")
    @classmethod
    def _ruleset_lower(cls, v: object) -> str:
        return str(v).strip().lower()


class BestScoreConfig(ConfigBase):
    path: Optional[str] = None


class GameConfig(ConfigBase):
    """
    Session-level config: everything GameSession needs to build a game.
    """

    seed: Optional[int] = Field(default=None, ge=0)
    log_level: str = "info"
    board: BoardConfig = BoardConfig()
    queue: QueueConfig = QueueConfig()
    timing: TimingConfig = TimingConfig()
    scoring: ScoringConfig = ScoringConfig()
    sweep: SweepConfig = SweepConfig()
    best_score: BestScoreConfig = BestScoreConfig()

    @field_validator("seed", mode="before")
    @classmethod
    def _seed_int(cls, v: object) -> Optional[int]:
        if v is None:
            return None
        return coerce_int(v, where="seed")

    @field_validator("log_level", mode="before")
    @classmethod
    def _log_level_lower(cls, v: object) -> str:
        s = str(v).strip().lower()
        if s not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"log_level must be debug|info|warning|error|critical, got {v!r}")
        return s


__all__ = [
    "GameConfig",
    "BoardConfig",
    "QueueConfig",
    "TimingConfig",
    "ScoringConfig",
    "SweepConfig",
    "BestScoreConfig",
    "SweepRulesetName",
]

# src/tetris_rules/game/core/rules.py
from __future__ import annotations

from dataclasses import dataclass

from tetris_rules.game.core.constants import CELL_SCORE, LINE_BASE_SCORE


@dataclass(frozen=True)
class ScoreConfig:
    line_base: int = LINE_BASE_SCORE
    per_cell: int = CELL_SCORE


def placement_score(cells_placed: int, cfg: ScoreConfig) -> int:
    return int(cells_placed) * int(cfg.per_cell)


def row_clear_bonus(index_in_batch: int, cfg: ScoreConfig) -> int:
    """
    Doubling bonus for the k-th row (0-based) removed in one sweep:
    base, 2*base, 4*base, 8*base, ...
    """
    k = int(index_in_batch)
    if k < 0:
        raise ValueError(f"index_in_batch must be >= 0, got {k}")
    return int(cfg.line_base) * (1 << k)


def score_for_row_clears(cleared: int, cfg: ScoreConfig) -> int:
    return sum(row_clear_bonus(k, cfg) for k in range(int(cleared)))


def score_for_grid_clears(cleared: int, cfg: ScoreConfig) -> int:
    """Rows+columns ruleset: base * n * n for n lines cleared together."""
    n = int(cleared)
    if n <= 0:
        return 0
    return int(cfg.line_base) * n * n

from __future__ import annotations

from tetris_rules.config.game import (
    BestScoreConfig,
    BoardConfig,
    GameConfig,
    QueueConfig,
    ScoringConfig,
    SweepConfig,
    TimingConfig,
)
from tetris_rules.config.io import load_game_config, load_yaml, to_plain_dict

__all__ = [
    "GameConfig",
    "BoardConfig",
    "QueueConfig",
    "TimingConfig",
    "ScoringConfig",
    "SweepConfig",
    "BestScoreConfig",
    "load_game_config",
    "load_yaml",
    "to_plain_dict",
]

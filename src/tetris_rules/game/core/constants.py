# src/tetris_rules/game/core/constants.py
from __future__ import annotations

# Board / cell encoding
EMPTY_CELL: int = 0

BOARD_WIDTH: int = 12
BOARD_HEIGHT: int = 20

# Upcoming pieces kept visible in the next-queue
QUEUE_LOOKAHEAD: int = 4

# Timing (milliseconds of simulated time)
DROP_INTERVAL_MS: int = 1000
SWEEP_DELAY_MS: int = 800

# Scoring
LINE_BASE_SCORE: int = 10
CELL_SCORE: int = 1

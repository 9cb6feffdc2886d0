# src/tetris_rules/game/persistence.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

BEST_SCORE_KEY = "best_score"


class BestScoreStore(Protocol):
    """Key-value persistence for the single best-score integer."""

    def load(self) -> int: ...

    def save(self, score: int) -> None: ...


@dataclass
class MemoryBestScoreStore:
    value: int = 0
    saves: int = 0

    def load(self) -> int:
        return int(self.value)

    def save(self, score: int) -> None:
        self.value = int(score)
        self.saves += 1


@dataclass(frozen=True)
class JsonBestScoreStore:
    """
    {"best_score": <int>} in a small JSON file.

    A missing file reads as 0. A file that exists but is not that shape
    raises ValueError so the caller can decide how loud to be.
    """

    path: Path

    def load(self) -> int:
        p = Path(self.path)
        if not p.is_file():
            return 0
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"best score file {p} is not valid JSON") from e
        if not isinstance(data, dict) or BEST_SCORE_KEY not in data:
            raise ValueError(f"best score file {p} must be a mapping with key {BEST_SCORE_KEY!r}")
        v = data[BEST_SCORE_KEY]
        if isinstance(v, bool) or not isinstance(v, int) or v < 0:
            raise ValueError(f"best score in {p} must be a non-negative int, got {v!r}")
        return int(v)

    def save(self, score: int) -> None:
        p = Path(self.path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps({BEST_SCORE_KEY: int(score)}, indent=2) + "\n", encoding="utf-8")


__all__ = ["BestScoreStore", "MemoryBestScoreStore", "JsonBestScoreStore", "BEST_SCORE_KEY"]

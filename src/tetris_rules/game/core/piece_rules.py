# src/tetris_rules/game/core/piece_rules.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

import numpy as np


class PieceRule(ABC):
    """
    Piece selection rule interface.

    Lifecycle:
      - reset(rng=..., kinds=...) is called once per session/reset
      - next_piece() is called whenever the queue needs a refill

    The RNG is session-owned and injected; rules must not create their own
    RNG streams.
    """

    @abstractmethod
    def reset(self, *, rng: np.random.Generator, kinds: Sequence[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def next_piece(self) -> str:
        raise NotImplementedError


@dataclass
class UniformPieceRule(PieceRule):
    """
    Uniform selection with replacement. No bag: long droughts of a kind are
    possible and intentional.
    """

    _rng: np.random.Generator | None = None
    _kinds: tuple[str, ...] = ()

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[str]) -> None:
        self._rng = rng
        self._kinds = tuple(str(k) for k in kinds)
        if not self._kinds:
            raise ValueError("UniformPieceRule requires non-empty kinds")

    def next_piece(self) -> str:
        if self._rng is None or not self._kinds:
            raise RuntimeError("UniformPieceRule.reset() must be called before next_piece()")
        i = int(self._rng.integers(0, len(self._kinds)))
        return self._kinds[i]


@dataclass
class ScriptedPieceRule(PieceRule):
    """
    Deterministic rule replaying a fixed sequence (cycled). Used by replays
    and tests that need a known piece order.
    """

    sequence: tuple[str, ...] = ()
    _i: int = 0

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[str]) -> None:
        known = set(str(k) for k in kinds)
        if not self.sequence:
            raise ValueError("ScriptedPieceRule requires a non-empty sequence")
        unknown = sorted(set(self.sequence) - known)
        if unknown:
            raise KeyError(f"ScriptedPieceRule has unknown kinds {unknown!r} (known={sorted(known)!r})")
        self._i = 0

    def next_piece(self) -> str:
        if not self.sequence:
            raise RuntimeError("ScriptedPieceRule.reset() must be called before next_piece()")
        k = self.sequence[self._i % len(self.sequence)]
        self._i += 1
        return k

# src/tetris_rules/game/core/timers.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Protocol


class TimerService(Protocol):
    """Host-provided delayed-callback service."""

    def schedule_after(self, duration_ms: float, callback: Callable[[], None]) -> object: ...

    def cancel(self, handle: object) -> None: ...


@dataclass(eq=False)
class _Scheduled:
    due_ms: float
    seq: int
    callback: Callable[[], None]
    cancelled: bool = False


@dataclass
class TickTimer:
    """
    Deterministic timer driven by simulated time.

    Nothing fires on its own: advance(dt_ms) moves the clock and runs every
    callback whose deadline has been reached, earliest first (ties in
    scheduling order). No wall clock is involved, so sweeps can be tested
    without real waits.
    """

    now_ms: float = 0.0
    _pending: List[_Scheduled] = field(default_factory=list)
    _seq: int = 0

    def schedule_after(self, duration_ms: float, callback: Callable[[], None]) -> _Scheduled:
        d = float(duration_ms)
        if d < 0:
            raise ValueError(f"duration_ms must be >= 0, got {d}")
        self._seq += 1
        item = _Scheduled(due_ms=self.now_ms + d, seq=self._seq, callback=callback)
        self._pending.append(item)
        return item

    def cancel(self, handle: object) -> None:
        if isinstance(handle, _Scheduled):
            handle.cancelled = True
            if handle in self._pending:
                self._pending.remove(handle)

    def cancel_all(self) -> None:
        for item in self._pending:
            item.cancelled = True
        self._pending.clear()

    def pending(self) -> int:
        return len(self._pending)

    def advance(self, dt_ms: float) -> int:
        """Advance simulated time; returns how many callbacks fired."""
        d = float(dt_ms)
        if d < 0:
            raise ValueError(f"dt_ms must be >= 0, got {d}")
        target = self.now_ms + d
        fired = 0
        while True:
            due = [p for p in self._pending if p.due_ms <= target]
            if not due:
                break
            item = min(due, key=lambda p: (p.due_ms, p.seq))
            self._pending.remove(item)
            self.now_ms = max(self.now_ms, item.due_ms)
            if not item.cancelled:
                item.callback()
                fired += 1
        self.now_ms = target
        return fired

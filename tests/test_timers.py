# tests/test_timers.py
from __future__ import annotations

from typing import List

import pytest

from tetris_rules.game.core.timers import TickTimer


def test_callbacks_fire_in_deadline_order() -> None:
    t = TickTimer()
    fired: List[str] = []
    t.schedule_after(30, lambda: fired.append("c"))
    t.schedule_after(10, lambda: fired.append("a"))
    t.schedule_after(10, lambda: fired.append("b"))

    assert t.advance(9) == 0
    assert t.advance(1) == 2
    assert fired == ["a", "b"]
    assert t.advance(100) == 1
    assert fired == ["a", "b", "c"]
    assert t.now_ms == 110


def test_callback_may_schedule_within_same_advance() -> None:
    t = TickTimer()
    fired: List[float] = []

    def first() -> None:
        fired.append(t.now_ms)
        t.schedule_after(5, lambda: fired.append(t.now_ms))

    t.schedule_after(5, first)
    t.advance(20)
    assert fired == [5.0, 10.0]


def test_cancel_and_cancel_all() -> None:
    t = TickTimer()
    fired: List[int] = []
    h = t.schedule_after(1, lambda: fired.append(1))
    t.schedule_after(2, lambda: fired.append(2))
    t.cancel(h)
    assert t.pending() == 1
    t.cancel_all()
    assert t.pending() == 0
    t.advance(10)
    assert fired == []


def test_negative_durations_rejected() -> None:
    t = TickTimer()
    with pytest.raises(ValueError):
        t.schedule_after(-1, lambda: None)
    with pytest.raises(ValueError):
        t.advance(-1)

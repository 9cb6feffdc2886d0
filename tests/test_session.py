# tests/test_session.py
from __future__ import annotations

from pathlib import Path
from typing import Any, List

import numpy as np
import pytest

from tetris_rules.config import load_game_config
from tetris_rules.game.core.piece_rules import ScriptedPieceRule
from tetris_rules.game.core.session import GameSession, normalize_command
from tetris_rules.game.core.types import Command, EventKind, SessionPhase, StateView
from tetris_rules.game.persistence import JsonBestScoreStore, MemoryBestScoreStore

O_ID = 2


def _session(seq: tuple[str, ...] = ("O",), **kw: Any) -> GameSession:
    kw.setdefault("piece_rule", ScriptedPieceRule(sequence=seq))
    return GameSession(**kw)


def _prepare_bottom_rows(s: GameSession, rows: List[int], *, gap: tuple[int, int] = (5, 6)) -> None:
    """Fill `rows` except the two columns an O piece spawned at x=5 will drop into."""
    for r in rows:
        s.board.grid[r, :] = 1
        s.board.grid[r, gap[0]] = 0
        s.board.grid[r, gap[1]] = 0


def test_spawn_position_is_centered_at_top() -> None:
    s = _session(("O", "I", "T"))
    assert s.active is not None
    assert (s.active.kind, s.active.x, s.active.y) == ("O", 5, 0)

    s.submit_command(Command.HARD_DROP)
    assert (s.active.kind, s.active.x, s.active.y) == ("I", 4, 0)

    s.submit_command(Command.HARD_DROP)
    assert (s.active.kind, s.active.x, s.active.y) == ("T", 5, 0)


def test_hard_drop_merges_scores_and_spawns_next() -> None:
    events: List[EventKind] = []
    s = _session(on_event=events.append)

    assert s.submit_command(Command.HARD_DROP) is True

    assert s.board.grid[18:20, 5:7].tolist() == [[O_ID, O_ID], [O_ID, O_ID]]
    assert s.board.filled_cells() == 4
    assert s.score == 4
    assert s.lines == 0
    assert s.active is not None and s.active.y == 0
    assert events == [EventKind.HARD_DROP]


def test_moves_are_blocked_by_walls() -> None:
    s = _session()
    for _ in range(5):
        assert s.submit_command(Command.MOVE_LEFT) is True
    assert s.active.x == 0
    assert s.submit_command(Command.MOVE_LEFT) is False
    assert s.active.x == 0


def test_commands_accept_string_aliases() -> None:
    assert normalize_command("left") is Command.MOVE_LEFT
    assert normalize_command("HARD_DROP") is Command.HARD_DROP
    with pytest.raises(ValueError, match="unknown command"):
        normalize_command("teleport")

    s = _session()
    assert s.submit_command("right") is True
    assert s.active.x == 6


def test_gravity_uses_strict_interval_and_resets() -> None:
    s = _session(drop_interval_ms=1000)
    s.tick(1000)
    assert s.active.y == 0
    s.tick(1)
    assert s.active.y == 1
    s.tick(1000)
    assert s.active.y == 1
    s.tick(1)
    assert s.active.y == 2


def test_soft_drop_moves_down_and_resets_gravity() -> None:
    events: List[EventKind] = []
    s = _session(drop_interval_ms=1000, on_event=events.append)
    s.tick(600)
    assert s.submit_command(Command.SOFT_DROP) is True
    assert s.active.y == 1
    s.tick(600)
    assert s.active.y == 1
    assert events == [EventKind.SOFT_DROP]


def test_soft_drop_on_floor_locks() -> None:
    s = _session()
    s.submit_command(Command.HARD_DROP)
    s.board.reset()
    for _ in range(18):
        s.submit_command(Command.SOFT_DROP)
    assert s.active.y == 18
    s.submit_command(Command.SOFT_DROP)
    assert s.board.grid[19, 5] == O_ID
    assert s.active.y == 0


def test_line_clear_animates_then_finalizes() -> None:
    events: List[EventKind] = []
    s = _session(sweep_delay_ms=800, on_event=events.append)
    _prepare_bottom_rows(s, [18, 19])

    assert s.submit_command(Command.HARD_DROP) is True
    assert s.phase is SessionPhase.ANIMATING
    assert s.active is None
    assert s.score == 4
    view = s.state()
    assert view.sweeping_rows == (18, 19)
    assert events == [EventKind.HARD_DROP, EventKind.LINE_CLEAR]

    s.tick(799)
    assert s.phase is SessionPhase.ANIMATING
    s.tick(1)
    assert s.phase is SessionPhase.ACTIVE
    assert s.score == 4 + 10 + 20
    assert s.lines == 2
    assert s.board.filled_cells() == 0
    assert s.active is not None and (s.active.x, s.active.y) == (5, 0)
    assert s.state().sweeping_rows == ()


def test_detection_runs_once_per_merge(monkeypatch: pytest.MonkeyPatch) -> None:
    s = _session(sweep_delay_ms=0)
    calls: List[int] = []
    original = s.sweeper.begin

    def counting_begin(board: Any, cb: Any) -> bool:
        calls.append(1)
        return original(board, cb)

    monkeypatch.setattr(s.sweeper, "begin", counting_begin)

    _prepare_bottom_rows(s, [19])
    s.submit_command(Command.HARD_DROP)
    assert len(calls) == 1
    assert s.lines == 1

    s.submit_command(Command.HARD_DROP)
    assert len(calls) == 2


def test_all_commands_are_noops_while_animating() -> None:
    s = _session(("O", "T"), sweep_delay_ms=500)
    _prepare_bottom_rows(s, [19])
    s.submit_command(Command.HARD_DROP)
    assert s.phase is SessionPhase.ANIMATING

    grid = s.board.copy_grid()
    before = (s.score, s.lines, s.queue.upcoming(), s.queue.held, s.queue.hold_available)
    for cmd in Command:
        assert s.submit_command(cmd) is False
    s.tick(100)

    assert np.array_equal(s.board.grid, grid)
    assert (s.score, s.lines, s.queue.upcoming(), s.queue.held, s.queue.hold_available) == before
    assert s.active is None


def test_allow_move_during_animation_spawns_immediately() -> None:
    s = _session(("O", "T"), sweep_delay_ms=500, allow_move_during_animation=True)
    _prepare_bottom_rows(s, [19])
    s.submit_command(Command.HARD_DROP)

    assert s.phase is SessionPhase.ANIMATING
    assert s.active is not None and s.active.kind == "T"
    assert s.submit_command(Command.MOVE_LEFT) is True
    assert s.submit_command(Command.ROTATE_CW) is True
    assert s.submit_command(Command.HARD_DROP) is False
    assert s.submit_command(Command.SOFT_DROP) is False
    assert s.submit_command(Command.HOLD) is False

    # Gravity is suspended during the animation.
    s.tick(400)
    assert s.active.y == 0

    s.tick(100)
    assert s.phase is SessionPhase.ACTIVE
    assert s.lines == 1
    assert s.active.kind == "T"


def test_finalize_shifting_into_moved_piece_ends_game() -> None:
    events: List[EventKind] = []
    s = _session(("O", "T"), sweep_delay_ms=500, allow_move_during_animation=True, on_event=events.append)
    _prepare_bottom_rows(s, [19])
    # Above the T's empty top-left cell; lands in its middle row after a one-row shift.
    s.board.grid[0, 5] = 1
    s.submit_command(Command.HARD_DROP)
    assert s.active.kind == "T"
    assert s.phase is SessionPhase.ANIMATING

    s.tick(500)
    assert s.phase is SessionPhase.STOPPED
    assert EventKind.GAME_OVER in events


@pytest.mark.parametrize("allow_move", [False, True])
def test_spawn_over_clearing_row_waits_for_finalize(allow_move: bool) -> None:
    s = _session(("I",), sweep_delay_ms=500, allow_move_during_animation=allow_move)
    # Pillar under column 4 holds the I at y=0; row 1 is full once it locks.
    s.board.grid[2:, 4] = 1
    s.board.grid[1, :] = 1
    s.board.grid[1, 4:8] = 0

    s.submit_command(Command.HARD_DROP)
    assert s.phase is SessionPhase.ANIMATING
    assert s.active is None
    assert s.score == 4

    s.tick(500)
    assert s.phase is SessionPhase.ACTIVE
    assert (s.score, s.lines) == (14, 1)
    assert s.board.grid[1].sum() == 0
    assert s.active is not None and (s.active.kind, s.active.x, s.active.y) == ("I", 4, 0)


def test_finalize_tick_does_not_carry_gravity_into_new_piece() -> None:
    s = _session(sweep_delay_ms=400, drop_interval_ms=800)
    _prepare_bottom_rows(s, [19])
    s.submit_command(Command.HARD_DROP)
    assert s.phase is SessionPhase.ANIMATING

    s.tick(1000)
    assert s.phase is SessionPhase.ACTIVE
    assert s.active is not None and s.active.y == 0

    s.tick(800)
    assert s.active.y == 0
    s.tick(1)
    assert s.active.y == 1


def test_hold_store_then_swap() -> None:
    s = _session(("T", "I", "O", "S"))
    assert s.active.kind == "T"

    assert s.submit_command(Command.HOLD) is True
    assert s.active.kind == "I"
    assert s.queue.held == "T"
    assert s.state().hold_available is False

    assert s.submit_command(Command.HOLD) is False
    assert s.active.kind == "I"

    s.submit_command(Command.HARD_DROP)
    assert s.active.kind == "O"
    assert s.state().hold_available is True

    assert s.submit_command(Command.HOLD) is True
    assert s.active.kind == "T"
    assert (s.active.x, s.active.y) == (5, 0)
    assert s.queue.held == "O"


def test_game_over_on_spawn_collision() -> None:
    events: List[EventKind] = []
    s = _session(on_event=events.append)
    s.board.grid[2:, 5] = 1

    s.submit_command(Command.HARD_DROP)

    assert s.phase is SessionPhase.STOPPED
    assert s.game_over
    assert s.state().game_over
    assert events[-1] is EventKind.GAME_OVER

    snapshot = s.board.copy_grid()
    for cmd in Command:
        assert s.submit_command(cmd) is False
    s.tick(5000)
    assert np.array_equal(s.board.grid, snapshot)


def test_reset_restores_initial_state() -> None:
    s = _session(("O", "T"), sweep_delay_ms=500)
    _prepare_bottom_rows(s, [19])
    s.submit_command(Command.HARD_DROP)
    assert s.phase is SessionPhase.ANIMATING

    view = s.reset()
    assert view.phase is SessionPhase.ACTIVE
    assert view.score == 0 and view.lines == 0
    assert int(view.grid.sum()) == 0
    assert view.hold_kind is None
    assert view.active is not None and view.active.kind == "O"

    # The cancelled sweep must not fire later.
    s.tick(1000)
    assert s.lines == 0


def test_state_listener_gets_snapshots() -> None:
    views: List[StateView] = []
    s = _session(on_state_changed=views.append)
    n = len(views)
    s.submit_command(Command.MOVE_RIGHT)
    assert len(views) == n + 1
    v = views[-1]
    assert v.active is not None and v.active.x == 6
    assert v.ghost_y == 18
    assert len(v.next_kinds) == 4

    # The snapshot grid is a copy.
    v.grid[0, 0] = 9
    assert s.board.grid[0, 0] == 0


def test_listener_errors_do_not_break_the_session() -> None:
    def boom(_: Any) -> None:
        raise RuntimeError("listener failed")

    s = _session(on_state_changed=boom, on_event=boom)
    assert s.submit_command(Command.MOVE_LEFT) is True
    assert s.active.x == 4


def test_best_score_updates_and_persists() -> None:
    store = MemoryBestScoreStore(value=3)
    s = _session(best_store=store)
    assert s.best_score == 3

    s.submit_command(Command.HARD_DROP)
    assert s.best_score == 4
    assert store.value == 4
    assert store.saves == 1

    s.reset()
    assert s.best_score == 4
    assert s.state().best_score == 4


def test_corrupt_best_score_file_starts_from_zero(tmp_path: Path) -> None:
    p = tmp_path / "best.json"
    p.write_text("{not json", encoding="utf-8")
    s = _session(best_store=JsonBestScoreStore(p))
    assert s.best_score == 0

    s.submit_command(Command.HARD_DROP)
    assert JsonBestScoreStore(p).load() == 4


def test_seeded_sessions_replay_identically() -> None:
    a = GameSession(seed=123)
    b = GameSession(seed=123)
    for _ in range(10):
        assert a.active.kind == b.active.kind
        assert a.state().next_kinds == b.state().next_kinds
        a.submit_command(Command.HARD_DROP)
        b.submit_command(Command.HARD_DROP)


def test_from_config_applies_settings() -> None:
    cfg = load_game_config(
        overrides=["board.width=10", "board.height=8", "queue.lookahead=2", "sweep.ruleset=grid", "seed=5"]
    )
    s = GameSession.from_config(cfg)
    assert (s.w, s.h) == (10, 8)
    assert s.sweeper.ruleset == "grid"
    assert len(s.state().next_kinds) == 2
    assert s.state().grid.shape == (8, 10)


def test_constructor_rejects_bad_dimensions() -> None:
    with pytest.raises(ValueError, match="positive"):
        GameSession(width=0)
    with pytest.raises(ValueError, match="drop_interval_ms"):
        GameSession(drop_interval_ms=0)

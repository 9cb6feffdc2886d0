# tests/test_simulate.py
from __future__ import annotations

import json

import numpy as np
import pytest

from tetris_rules.apps.simulate.entrypoint import parse_args, play_random_game, run_simulate
from tetris_rules.game.core.session import GameSession


def test_random_game_respects_step_cap() -> None:
    s = GameSession(seed=1)
    r = play_random_game(session=s, rng=np.random.default_rng(1), max_steps=50, tick_ms=10.0)
    assert r.steps <= 50
    assert r.score == s.score
    if not r.game_over:
        assert r.steps == 50


def test_random_games_reach_game_over() -> None:
    s = GameSession(seed=2, sweep_delay_ms=0)
    r = play_random_game(session=s, rng=np.random.default_rng(2), max_steps=100_000, tick_ms=50.0)
    assert r.game_over
    assert r.score > 0


def test_cli_json_summary(capsys: pytest.CaptureFixture[str]) -> None:
    args = parse_args(["--games", "2", "--max-steps", "300", "--json", "--set", "sweep.ruleset=grid"])
    assert run_simulate(args) == 0

    out = json.loads(capsys.readouterr().out)
    assert len(out["games"]) == 2
    assert out["best_score"] >= max(g["score"] for g in out["games"])
    assert all(g["steps"] <= 300 for g in out["games"])
    assert out["config"]["sweep"]["ruleset"] == "grid"
    assert out["config"]["seed"] == 0

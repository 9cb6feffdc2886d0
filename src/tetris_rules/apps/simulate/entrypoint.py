# src/tetris_rules/apps/simulate/entrypoint.py
from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

import numpy as np
from rich import box
from rich.console import Console
from rich.table import Table
from tqdm.rich import tqdm

from tetris_rules.config import load_game_config, to_plain_dict
from tetris_rules.game.core.session import GameSession
from tetris_rules.game.core.types import Command
from tetris_rules.utils.logging import setup_logger

# Hard drop is rarer than movement so random games last more than a few pieces.
_COMMANDS: tuple[Command, ...] = (
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE_CW,
    Command.ROTATE_CCW,
    Command.SOFT_DROP,
    Command.HOLD,
    Command.HARD_DROP,
)
_WEIGHTS = np.array([4, 4, 2, 2, 3, 1, 1], dtype=np.float64)


@dataclass(frozen=True)
class GameResult:
    game: int
    steps: int
    score: int
    lines: int
    game_over: bool


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Run headless games driven by random commands.")
    ap.add_argument("--config", type=str, default=None)
    ap.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE")
    ap.add_argument("--games", type=int, default=10)
    ap.add_argument("--max-steps", type=int, default=5000, help="per-game cap (commands)")
    ap.add_argument("--tick-ms", type=float, default=50.0, help="simulated ms between commands")
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--json", action="store_true", help="print results as JSON instead of a table")
    ap.add_argument("--no-progress", action="store_true")
    ap.add_argument("--log-level", type=str, default=None)
    return ap.parse_args(argv)


def play_random_game(
        *,
        session: GameSession,
        rng: np.random.Generator,
        max_steps: int,
        tick_ms: float,
        game: int = 0,
) -> GameResult:
    session.reset()
    p = _WEIGHTS / _WEIGHTS.sum()
    steps = 0
    while not session.game_over and steps < int(max_steps):
        cmd = _COMMANDS[int(rng.choice(len(_COMMANDS), p=p))]
        session.submit_command(cmd)
        session.tick(float(tick_ms))
        steps += 1
    return GameResult(
        game=int(game),
        steps=int(steps),
        score=session.score,
        lines=session.lines,
        game_over=bool(session.game_over),
    )


def _summary_table(results: List[GameResult], *, best: int) -> Table:
    table = Table(title="[simulate] RESULT", box=box.SIMPLE_HEAVY)
    table.add_column("game", justify="right")
    table.add_column("steps", justify="right")
    table.add_column("score", justify="right")
    table.add_column("lines", justify="right")
    table.add_column("game over")
    for r in results:
        table.add_row(str(r.game), str(r.steps), str(r.score), str(r.lines), "yes" if r.game_over else "no")

    if results:
        table.add_section()
        table.add_row(
            "mean",
            f"{np.mean([r.steps for r in results]):.1f}",
            f"{np.mean([r.score for r in results]):.1f}",
            f"{np.mean([r.lines for r in results]):.2f}",
            "",
        )
    table.add_row("best", "", str(best), "", "")
    return table


def _emit_table(*, logger: Any, table: Table) -> None:
    console = None
    for handler in getattr(logger, "handlers", []):
        console = getattr(handler, "console", None)
        if console is not None:
            break
    (console or Console()).print(table)


def run_simulate(args: argparse.Namespace) -> int:
    overrides = list(args.overrides)
    if args.log_level is not None:
        overrides.append(f"log_level={args.log_level}")
    cfg = load_game_config(Path(args.config) if args.config else None, overrides=overrides)
    if cfg.seed is None:
        cfg = cfg.model_copy(update={"seed": int(args.seed)})

    logger = setup_logger(name="tetris_rules", use_rich=True, level=cfg.log_level)
    logger.info(
        "[simulate] games=%d max_steps=%d tick_ms=%.1f ruleset=%s seed=%s",
        int(args.games),
        int(args.max_steps),
        float(args.tick_ms),
        cfg.sweep.ruleset,
        cfg.seed,
    )

    session = GameSession.from_config(cfg)
    rng = np.random.default_rng(int(args.seed))

    results: List[GameResult] = []
    games = range(int(args.games))
    it = games if bool(args.no_progress) or bool(args.json) else tqdm(games, unit="game")
    for g in it:
        r = play_random_game(session=session, rng=rng, max_steps=int(args.max_steps), tick_ms=float(args.tick_ms), game=g)
        logger.debug("[simulate] game=%d steps=%d score=%d lines=%d", r.game, r.steps, r.score, r.lines)
        results.append(r)

    if bool(args.json):
        report = {
            "config": to_plain_dict(cfg),
            "best_score": session.best_score,
            "games": [asdict(r) for r in results],
        }
        print(json.dumps(report, indent=2))
    else:
        _emit_table(logger=logger, table=_summary_table(results, best=session.best_score))
    return 0


__all__ = ["GameResult", "parse_args", "play_random_game", "run_simulate"]

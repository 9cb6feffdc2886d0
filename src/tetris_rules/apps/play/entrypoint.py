# src/tetris_rules/apps/play/entrypoint.py
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from tetris_rules.config import load_game_config
from tetris_rules.game.core.session import GameSession
from tetris_rules.game.persistence import JsonBestScoreStore, MemoryBestScoreStore
from tetris_rules.game.rendering.pygame.app import run_manual_play
from tetris_rules.utils.logging import setup_logger
from tetris_rules.utils.paths import default_best_score_path


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Play Tetris with the keyboard (pygame).")
    ap.add_argument("--config", type=str, default=None, help="game YAML (see configs/)")
    ap.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="dot-list override, e.g. --set sweep.ruleset=grid (repeatable)",
    )
    ap.add_argument("--seed", type=int, default=None)

    # --- UI ---
    ap.add_argument("--cell", type=int, default=28)
    ap.add_argument("--fps", type=int, default=60)
    ap.add_argument("--show-grid", action="store_true")
    ap.add_argument("--no-ghost", action="store_true")
    ap.add_argument("--no-repeat", action="store_true")

    # --- best score ---
    ap.add_argument("--best-score", type=str, default=None, help="best-score JSON file (default: ~/.tetris_rules)")
    ap.add_argument("--no-best-score", action="store_true", help="keep the best score in memory only")

    ap.add_argument("--log-level", type=str, default=None)
    return ap.parse_args(argv)


def run_play(args: argparse.Namespace) -> int:
    overrides = list(args.overrides)
    if args.seed is not None:
        overrides.append(f"seed={int(args.seed)}")
    if args.log_level is not None:
        overrides.append(f"log_level={args.log_level}")
    cfg = load_game_config(Path(args.config) if args.config else None, overrides=overrides)

    logger = setup_logger(name="tetris_rules", use_rich=True, level=cfg.log_level)

    if bool(args.no_best_score):
        store = MemoryBestScoreStore()
        logger.info("[play] best score: in-memory")
    else:
        path = Path(args.best_score or cfg.best_score.path or default_best_score_path()).expanduser()
        store = JsonBestScoreStore(path)
        logger.info("[play] best score file=%s", str(path))

    session = GameSession.from_config(cfg, best_store=store)
    logger.info(
        "[play] board=%dx%d ruleset=%s lookahead=%d seed=%s",
        session.w,
        session.h,
        cfg.sweep.ruleset,
        cfg.queue.lookahead,
        cfg.seed,
    )

    return run_manual_play(
        session=session,
        cell=int(args.cell),
        fps=int(args.fps),
        show_grid=bool(args.show_grid),
        show_ghost=not bool(args.no_ghost),
        no_repeat=bool(args.no_repeat),
    )


__all__ = ["parse_args", "run_play"]

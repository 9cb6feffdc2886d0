# src/tetris_rules/cli/play.py
from __future__ import annotations

from tetris_rules.apps.play.entrypoint import parse_args, run_play


def main() -> int:
    return run_play(parse_args())


if __name__ == "__main__":
    raise SystemExit(main())

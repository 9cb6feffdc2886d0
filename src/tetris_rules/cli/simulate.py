# src/tetris_rules/cli/simulate.py
from __future__ import annotations

from tetris_rules.apps.simulate.entrypoint import parse_args, run_simulate


def main() -> int:
    return run_simulate(parse_args())


if __name__ == "__main__":
    raise SystemExit(main())

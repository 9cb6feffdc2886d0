# src/tetris_rules/utils/logging.py
from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "tetris_rules"


def setup_logger(*, name: str = ROOT_LOGGER, use_rich: bool = True, level: str = "info") -> logging.Logger:
    """
    Host-side logger setup. Records go to stderr so stdout stays free for
    machine-readable output (e.g. `tetris-simulate --json`).

    Calling it again replaces the handler instead of stacking a second one.
    """
    logger = logging.getLogger(str(name))
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    handler: logging.Handler
    if use_rich:
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Library-side logger. No handlers are attached here; a host calls
    setup_logger() on the "tetris_rules" root and children inherit it.
    """
    return logging.getLogger(str(name))


__all__ = ["ROOT_LOGGER", "setup_logger", "get_logger"]

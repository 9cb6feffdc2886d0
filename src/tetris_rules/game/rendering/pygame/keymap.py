# src/tetris_rules/game/rendering/pygame/keymap.py
from __future__ import annotations

from typing import Dict, Optional, Union

import pygame

from tetris_rules.game.core.types import Command

# Host-level actions that never reach the session as commands.
RESET = "reset"
QUIT = "quit"

KeyAction = Union[Command, str]

KEYMAP: Dict[int, KeyAction] = {
    pygame.K_a: Command.MOVE_LEFT,
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_d: Command.MOVE_RIGHT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_s: Command.SOFT_DROP,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_w: Command.HARD_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_e: Command.ROTATE_CW,
    pygame.K_x: Command.ROTATE_CW,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_q: Command.ROTATE_CCW,
    pygame.K_z: Command.ROTATE_CCW,
    pygame.K_c: Command.HOLD,
    pygame.K_r: RESET,
    pygame.K_ESCAPE: QUIT,
}


def resolve_key(key: int) -> Optional[KeyAction]:
    return KEYMAP.get(int(key))


__all__ = ["KEYMAP", "RESET", "QUIT", "KeyAction", "resolve_key"]

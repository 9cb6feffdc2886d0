# tests/test_keymap.py
from __future__ import annotations

import pygame

from tetris_rules.game.core.types import Command
from tetris_rules.game.rendering.pygame.keymap import KEYMAP, QUIT, RESET, resolve_key


def test_movement_and_rotation_keys() -> None:
    assert resolve_key(pygame.K_LEFT) is Command.MOVE_LEFT
    assert resolve_key(pygame.K_a) is Command.MOVE_LEFT
    assert resolve_key(pygame.K_RIGHT) is Command.MOVE_RIGHT
    assert resolve_key(pygame.K_DOWN) is Command.SOFT_DROP
    assert resolve_key(pygame.K_SPACE) is Command.HARD_DROP
    assert resolve_key(pygame.K_UP) is Command.ROTATE_CW
    assert resolve_key(pygame.K_x) is Command.ROTATE_CW
    assert resolve_key(pygame.K_z) is Command.ROTATE_CCW
    assert resolve_key(pygame.K_c) is Command.HOLD


def test_host_actions_and_unmapped_keys() -> None:
    assert resolve_key(pygame.K_r) == RESET
    assert resolve_key(pygame.K_ESCAPE) == QUIT
    assert resolve_key(pygame.K_F12) is None


def test_every_command_has_a_key() -> None:
    bound = {a for a in KEYMAP.values() if isinstance(a, Command)}
    assert bound == set(Command)

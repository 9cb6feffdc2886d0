# src/tetris_rules/game/rendering/pygame/app.py
from __future__ import annotations

import pygame

from tetris_rules.game.core.session import GameSession
from tetris_rules.game.core.types import Command, EventKind, StateView
from tetris_rules.game.rendering.pygame.keymap import QUIT, RESET, resolve_key
from tetris_rules.game.rendering.pygame.renderer import TetrisRenderer
from tetris_rules.utils.logging import get_logger

LOG = get_logger("tetris_rules.play")


def run_manual_play(
        *,
        session: GameSession,
        cell: int,
        fps: int,
        show_grid: bool,
        show_ghost: bool,
        no_repeat: bool,
        title: str = "Tetris",
) -> int:
    """
    Keyboard host. The frame clock feeds session.tick(); the latest
    StateView pushed by the session is what gets drawn.
    """
    latest: dict[str, StateView] = {"view": session.state()}

    def _on_state(view: StateView) -> None:
        latest["view"] = view

    def _on_event(kind: EventKind) -> None:
        if kind is EventKind.GAME_OVER:
            LOG.info("[play] game over: score=%d lines=%d", session.score, session.lines)
        elif kind is EventKind.LINE_CLEAR:
            LOG.debug("[play] line clear")

    session.on_state_changed = _on_state
    session.on_event = _on_event

    pygame.init()
    try:
        renderer = TetrisRenderer(cell=cell, pieces=session.pieces, show_grid_lines=show_grid, show_ghost=show_ghost)
        screen, layout = renderer.init_window(board_h=session.h, board_w=session.w, title=title)
        clock = pygame.time.Clock()

        if not no_repeat:
            pygame.key.set_repeat(120, 35)

        running = True
        while running:
            dt_ms = clock.tick(int(fps))

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break
                if event.type != pygame.KEYDOWN:
                    continue
                action = resolve_key(event.key)
                if action is None:
                    continue
                if action == QUIT:
                    running = False
                    break
                if action == RESET:
                    LOG.info("[play] restart")
                    session.reset()
                    continue
                if isinstance(action, Command):
                    session.submit_command(action)

            session.tick(float(dt_ms))

            renderer.render(screen=screen, view=latest["view"], layout=layout)
            pygame.display.flip()
    finally:
        pygame.quit()

    LOG.info("[play] exit: score=%d lines=%d best=%d", session.score, session.lines, session.best_score)
    return 0

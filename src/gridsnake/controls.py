"""Keyboard and mouse bindings translated into game commands."""

from __future__ import annotations

from enum import Enum
import pygame

from .game import GameState, SnakeGame
from .rules import direction_toward
from .utils import Direction, Position


class Intent(str, Enum):
    """What a raw input asks the game to do."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    TOGGLE_PAUSE = "toggle_pause"
    START = "start"
    RESET = "reset"


KEY_BINDINGS: dict[int, Intent] = {
    pygame.K_UP: Intent.UP,
    pygame.K_w: Intent.UP,
    pygame.K_DOWN: Intent.DOWN,
    pygame.K_s: Intent.DOWN,
    pygame.K_LEFT: Intent.LEFT,
    pygame.K_a: Intent.LEFT,
    pygame.K_RIGHT: Intent.RIGHT,
    pygame.K_d: Intent.RIGHT,
    pygame.K_SPACE: Intent.TOGGLE_PAUSE,
    pygame.K_ESCAPE: Intent.TOGGLE_PAUSE,
    pygame.K_RETURN: Intent.START,
    pygame.K_KP_ENTER: Intent.START,
    pygame.K_r: Intent.RESET,
}

INTENT_DIRECTIONS = {
    Intent.UP: Direction.UP,
    Intent.DOWN: Direction.DOWN,
    Intent.LEFT: Direction.LEFT,
    Intent.RIGHT: Direction.RIGHT,
}


def apply_intent(game: SnakeGame, intent: Intent) -> None:
    """Forward an intent to the matching game command."""
    if intent in INTENT_DIRECTIONS:
        game.change_direction(INTENT_DIRECTIONS[intent])
    elif intent == Intent.TOGGLE_PAUSE:
        if game.data.game_state == GameState.PLAYING:
            game.toggle_pause()
    elif intent == Intent.START:
        game.start()
    elif intent == Intent.RESET:
        game.reset()


def handle_key(game: SnakeGame, key: int) -> Intent | None:
    """Dispatch a pressed key; return the intent it mapped to, if any."""
    intent = KEY_BINDINGS.get(key)
    if intent is not None:
        apply_intent(game, intent)
    return intent


def cell_at(pixel: tuple[int, int], origin: tuple[int, int], cell_size: int, board_size: int) -> Position | None:
    """Board cell under a screen pixel, or None outside the board."""
    x = (pixel[0] - origin[0]) // cell_size
    y = (pixel[1] - origin[1]) // cell_size
    if 0 <= x < board_size and 0 <= y < board_size:
        return (x, y)
    return None


def handle_cell_click(game: SnakeGame, cell: Position) -> Direction | None:
    """Steer toward a clicked cell along its dominant axis."""
    if not game.is_playing:
        return None
    direction = direction_toward(game.data.snake.head, cell)
    if direction is not None:
        game.change_direction(direction)
    return direction

"""Shared constants and utility helpers for gridsnake."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Tuple
import json
import logging

logger = logging.getLogger(__name__)

BOARD_SIZE = 20
INITIAL_SPEED_MS = 200
SPEED_DECREMENT_MS = 10
POINTS_PER_FOOD = 10
SCORE_PER_LEVEL = 50
MIN_SPEED_MS = 50
INITIAL_SNAKE_LENGTH = 3
POLL_INTERVAL_MS = 16
HISTORY_LIMIT = 50

SCREEN_WIDTH = 760
SCREEN_HEIGHT = 720
HUD_HEIGHT = 96
FPS = 60

BG_COLOR = (8, 10, 20)
BOARD_COLOR = (14, 18, 34)
GRID_COLOR = (24, 32, 58)
TEXT_COLOR = (220, 238, 255)
SHADOW_COLOR = (15, 24, 45)
LIGHT_BG_COLOR = (226, 232, 240)
LIGHT_BOARD_COLOR = (203, 213, 225)
LIGHT_GRID_COLOR = (180, 190, 205)
LIGHT_TEXT_COLOR = (20, 24, 40)

GREEN = (57, 255, 20)
DARK_GREEN = (20, 170, 60)
RED = (255, 70, 90)
YELLOW = (255, 233, 68)
CYAN = (30, 242, 255)
ORANGE = (255, 130, 40)

Position = Tuple[int, int]


class Direction(str, Enum):
    """Grid headings the snake can move in."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def vector(self) -> tuple[int, int]:
        return _VECTORS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

DIRECTIONS: tuple[Direction, ...] = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

DATA_DIR = Path(".gridsnake")


def ensure_data_dir(path: Path) -> None:
    """Create the directory that holds save files."""
    path.mkdir(parents=True, exist_ok=True)


def load_json(path: Path, default: Any) -> Any:
    """Load JSON data, returning default when missing or malformed."""
    if not path.exists():
        return default
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (ValueError, OSError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return default


def save_json(path: Path, payload: Any) -> None:
    """Save JSON data with deterministic formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, indent=2, sort_keys=True)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(text)

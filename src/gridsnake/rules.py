"""Pure geometry and scoring rules for the snake board."""

from __future__ import annotations

from datetime import datetime
import math
import random

from .settings import GameConfig
from .snake import Snake
from .utils import DIRECTIONS, Direction, Position


def positions_equal(a: Position, b: Position) -> bool:
    return a[0] == b[0] and a[1] == b[1]


def in_bounds(position: Position, board_size: int) -> bool:
    """Check if a grid cell is inside an N x N board."""
    x, y = position
    return 0 <= x < board_size and 0 <= y < board_size


def next_position(position: Position, direction: Direction) -> Position:
    """Shift position one cell in direction; anything else leaves it in place."""
    if not isinstance(direction, Direction):
        return position
    dx, dy = direction.vector
    return (position[0] + dx, position[1] + dy)


def is_valid_direction_change(current: Direction, requested: Direction) -> bool:
    """Only an exact reversal is rejected."""
    return requested != current.opposite


def wall_collision(snake: Snake, board_size: int) -> bool:
    return not in_bounds(snake.head, board_size)


def self_collision(snake: Snake) -> bool:
    head = snake.head
    return any(positions_equal(segment, head) for segment in snake.segments[1:])


def food_collision(snake: Snake, food: Position) -> bool:
    return positions_equal(snake.head, food)


def random_food_position(snake: Snake, board_size: int, rng: random.Random | None = None) -> Position:
    """Uniformly sample a board cell not covered by the snake.

    A board with no free cell is unreachable under normal play because the
    snake collides before it can fill the grid.
    """
    rng = rng or random
    occupied = set(snake.segments)
    assert len(occupied) < board_size * board_size, "no free cell left for food"
    while True:
        candidate = (rng.randrange(board_size), rng.randrange(board_size))
        if candidate not in occupied:
            return candidate


def speed_for_level(level: int, config: GameConfig) -> int:
    """Milliseconds per tick at level, floored at config.min_speed."""
    speed = config.initial_speed - (level - 1) * config.speed_decrement
    return max(speed, config.min_speed)


def level_for_score(score: int, score_per_level: int) -> int:
    return score // score_per_level + 1


def score_for_next_level(level: int, score_per_level: int) -> int:
    """Score at which the level after `level` starts."""
    return level * score_per_level


def points_to_next_level(score: int, score_per_level: int) -> int:
    level = level_for_score(score, score_per_level)
    return score_for_next_level(level, score_per_level) - score


def distance(a: Position, b: Position) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def direction_toward(origin: Position, target: Position) -> Direction | None:
    """Heading along the dominant axis from origin to target, None if they coincide."""
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    if dy != 0:
        return Direction.DOWN if dy > 0 else Direction.UP
    return None


def board_fill_percentage(snake_length: int, board_size: int) -> float:
    return snake_length / (board_size * board_size) * 100


def random_direction(rng: random.Random | None = None) -> Direction:
    return (rng or random).choice(DIRECTIONS)


def format_time(seconds: int) -> str:
    """Render seconds as MM:SS."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def format_score(score: int) -> str:
    return f"{score:,}"


def generate_game_id(rng: random.Random | None = None) -> str:
    """Unique-enough id for a play session."""
    stamp = int(datetime.now().timestamp() * 1000)
    suffix = "".join((rng or random).choice("abcdefghijklmnopqrstuvwxyz0123456789") for _ in range(9))
    return f"snake_{stamp}_{suffix}"

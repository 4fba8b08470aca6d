from __future__ import annotations

import pytest

from gridsnake.scheduler import TickScheduler
from gridsnake.snake import Snake
from gridsnake.utils import Direction


def test_spawn_trails_body_behind_head() -> None:
    snake = Snake.spawn((10, 10), Direction.RIGHT)
    assert snake.segments == [(10, 10), (9, 10), (8, 10)]
    assert Snake.spawn((5, 5), Direction.UP).segments == [(5, 5), (5, 6), (5, 7)]


def test_advance_with_and_without_growth() -> None:
    snake = Snake.spawn((10, 10))
    snake.advance((11, 10), grow=False)
    assert snake.segments == [(11, 10), (10, 10), (9, 10)]
    snake.advance((12, 10), grow=True)
    assert len(snake) == 4
    assert snake.tail == (9, 10)


def test_empty_snake_is_rejected() -> None:
    with pytest.raises(ValueError):
        Snake([])


def test_scheduler_respects_poll_interval(clock) -> None:
    polls: list[float] = []
    scheduler = TickScheduler(polls.append, clock=clock, poll_interval_ms=16)
    assert scheduler.pump() is False

    scheduler.start()
    clock.advance(10)
    assert scheduler.pump() is False
    clock.advance(6)
    assert scheduler.pump() is True

    scheduler.stop()
    clock.advance(100)
    assert scheduler.pump() is False
    assert polls == [1016.0]

from __future__ import annotations

import random

from gridsnake.achievements import Achievement, AchievementEvaluator, headline_for_score
from gridsnake.game import SnakeGame
from gridsnake.storage import MemoryStore


def test_score_100_unlocks_only_century_club() -> None:
    store = MemoryStore({"snake-game-achievements": ["first_food", "score_50"]})
    evaluator = AchievementEvaluator(store)
    heard: list[str] = []
    evaluator.add_listener(lambda item: heard.append(item.id))

    fresh = evaluator.evaluate(100)
    assert [item.id for item in fresh] == ["score_100"]
    assert heard == ["score_100"]
    assert evaluator.is_unlocked("first_food")
    assert evaluator.is_unlocked("score_50")
    assert not evaluator.is_unlocked("score_250")
    assert not evaluator.is_unlocked("score_500")

    assert evaluator.evaluate(100) == []
    assert heard == ["score_100"]


def test_unlock_is_idempotent() -> None:
    evaluator = AchievementEvaluator(MemoryStore())
    assert evaluator.unlock("score_250") is True
    assert evaluator.unlock("score_250") is False
    flags = {item.id: item.unlocked for item in evaluator.achievements()}
    assert flags["score_250"] is True
    assert flags["first_food"] is False


def test_custom_thresholds() -> None:
    evaluator = AchievementEvaluator(MemoryStore(), definitions=[Achievement("tiny", "Tiny", "Score 1", 1)])
    assert [item.id for item in evaluator.evaluate(5)] == ["tiny"]
    evaluator.reset()
    assert not evaluator.is_unlocked("tiny")


def test_game_score_changes_trigger_evaluation(clock) -> None:
    store = MemoryStore()
    evaluator = AchievementEvaluator(store)
    game = SnakeGame(store, clock=clock, rng=random.Random(4), achievements=evaluator)
    game.start()
    game.data.food = (11, 10)
    game.tick()

    assert evaluator.is_unlocked("first_food")

    game.data.snake.segments = [(19, 10), (18, 10), (17, 10), (16, 10)]
    game.data.food = (0, 0)
    game.tick()
    assert game.last_result is not None
    assert game.last_result.unlocked == ["first_food"]


def test_headline_for_score() -> None:
    assert headline_for_score(0) == "KEEP TRYING!"
    assert headline_for_score(120) == "CENTURY CLUB!"
    assert headline_for_score(999) == "LEGENDARY SNAKE!"

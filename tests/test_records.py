from __future__ import annotations

from gridsnake.records import (
    STATS_KEY,
    BestScore,
    GameHistory,
    GameStats,
    StatsTracker,
    UnlockedAchievements,
    average_score,
)
from gridsnake.storage import MemoryStore


def test_best_score_only_moves_up() -> None:
    best = BestScore(MemoryStore())
    assert best.value == 0
    assert best.update(120) is True
    assert best.update(80) is False
    assert best.update(120) is False
    assert best.value == 120


def test_best_score_ignores_garbage() -> None:
    assert BestScore(MemoryStore({"snake-game-best-score": "lots"})).value == 0


def test_stats_merge_patch_recomputes_average() -> None:
    tracker = StatsTracker(MemoryStore())
    stats = tracker.update(total_games_played=3, total_score=100)
    assert stats.average_score == 33
    assert tracker.stats.total_score == 100
    assert tracker.stats.longest_snake == 0


def test_record_game_accumulates() -> None:
    store = MemoryStore()
    tracker = StatsTracker(store)
    tracker.record_game(score=30, level=1, snake_length=6, play_time=20)
    tracker.record_game(score=60, level=2, snake_length=4, play_time=40)

    stats = tracker.stats
    assert stats == GameStats(
        total_games_played=2,
        total_score=90,
        average_score=45,
        longest_snake=6,
        best_level=2,
        play_time=60,
    )
    assert store.read(STATS_KEY, {})["totalGamesPlayed"] == 2


def test_average_rounds_half_up() -> None:
    assert average_score(5, 2) == 3
    assert average_score(4, 3) == 1


def test_unlocked_achievements_add_if_absent() -> None:
    unlocked = UnlockedAchievements(MemoryStore())
    assert unlocked.add("first_food") is True
    assert unlocked.add("first_food") is False
    assert unlocked.ids() == ["first_food"]
    assert "first_food" in unlocked
    unlocked.clear()
    assert unlocked.ids() == []


def test_history_keeps_newest_first_and_is_capped() -> None:
    history = GameHistory(MemoryStore(), limit=3)
    for score in (10, 20, 30, 40):
        history.add(score=score, level=1, snake_length=3, play_time=5)
    assert [entry.score for entry in history.entries()] == [40, 30, 20]

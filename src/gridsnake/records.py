"""Typed records kept in the key-value store: best score, stats, achievements, history."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from typing import Any
import logging

from .storage import KeyValueStore
from .utils import HISTORY_LIMIT

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "snake-game-best-score"
STATS_KEY = "snake-game-stats"
ACHIEVEMENTS_KEY = "snake-game-achievements"
HISTORY_KEY = "snake-game-history"
SETTINGS_KEY = "snake-game-settings"


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


_STATS_PAYLOAD_KEYS = {
    "total_games_played": "totalGamesPlayed",
    "total_score": "totalScore",
    "average_score": "averageScore",
    "longest_snake": "longestSnake",
    "best_level": "bestLevel",
    "play_time": "playTime",
}


def average_score(total_score: int, games_played: int) -> int:
    """Rounded mean score, half up."""
    return (2 * total_score + games_played) // (2 * games_played)


class BestScore:
    """Cross-session best score with update-if-greater semantics."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    @property
    def value(self) -> int:
        return max(0, _as_int(self.store.read(BEST_SCORE_KEY, 0), 0))

    def update(self, score: int) -> bool:
        """Store score if it beats the current best; return whether it did."""
        if score <= self.value:
            return False
        self.store.write(BEST_SCORE_KEY, score)
        logger.info("New best score: %d", score)
        return True


@dataclass(slots=True)
class GameStats:
    """Aggregate counters across all completed games."""

    total_games_played: int = 0
    total_score: int = 0
    average_score: int = 0
    longest_snake: int = 0
    best_level: int = 1
    play_time: int = 0

    def to_payload(self) -> dict[str, int]:
        return {_STATS_PAYLOAD_KEYS[name]: value for name, value in asdict(self).items()}

    @classmethod
    def from_payload(cls, raw: Any) -> "GameStats":
        stats = cls()
        if not isinstance(raw, dict):
            return stats
        for item in fields(cls):
            key = _STATS_PAYLOAD_KEYS[item.name]
            setattr(stats, item.name, _as_int(raw.get(key), getattr(stats, item.name)))
        return stats


class StatsTracker:
    """Persisted GameStats with merge-patch updates."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    @property
    def stats(self) -> GameStats:
        return GameStats.from_payload(self.store.read(STATS_KEY, {}))

    def update(self, **patch: int) -> GameStats:
        """Merge patch over the stored stats and recompute the average."""
        stats = self.stats
        for name, value in patch.items():
            if not hasattr(stats, name):
                raise AttributeError(f"unknown stats field: {name}")
            setattr(stats, name, int(value))
        if stats.total_games_played > 0:
            stats.average_score = average_score(stats.total_score, stats.total_games_played)
        self.store.write(STATS_KEY, stats.to_payload())
        return stats

    def record_game(self, score: int, level: int, snake_length: int, play_time: int) -> GameStats:
        """Fold one completed game into the aggregate counters."""
        current = self.stats
        return self.update(
            total_games_played=current.total_games_played + 1,
            total_score=current.total_score + score,
            longest_snake=max(current.longest_snake, snake_length),
            best_level=max(current.best_level, level),
            play_time=current.play_time + max(0, play_time),
        )

    def reset(self) -> GameStats:
        stats = GameStats()
        self.store.write(STATS_KEY, stats.to_payload())
        return stats


class UnlockedAchievements:
    """Set of unlocked achievement ids, stored as a JSON list."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def ids(self) -> list[str]:
        raw = self.store.read(ACHIEVEMENTS_KEY, [])
        if not isinstance(raw, list):
            return []
        return [str(item) for item in raw]

    def __contains__(self, achievement_id: str) -> bool:
        return achievement_id in self.ids()

    def add(self, achievement_id: str) -> bool:
        """Add the id if absent; return whether it was added."""
        current = self.ids()
        if achievement_id in current:
            return False
        self.store.write(ACHIEVEMENTS_KEY, [*current, achievement_id])
        return True

    def clear(self) -> None:
        self.store.write(ACHIEVEMENTS_KEY, [])


@dataclass(slots=True)
class HistoryEntry:
    """One completed game."""

    score: int
    level: int
    snake_length: int
    play_time: int
    date: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "snakeLength": self.snake_length,
            "playTime": self.play_time,
            "date": self.date,
        }

    @classmethod
    def from_payload(cls, raw: dict[str, Any]) -> "HistoryEntry":
        return cls(
            score=_as_int(raw.get("score"), 0),
            level=_as_int(raw.get("level"), 1),
            snake_length=_as_int(raw.get("snakeLength"), 0),
            play_time=_as_int(raw.get("playTime"), 0),
            date=str(raw.get("date", "")),
        )


class GameHistory:
    """Most recent completed games, newest first."""

    def __init__(self, store: KeyValueStore, limit: int = HISTORY_LIMIT) -> None:
        self.store = store
        self.limit = limit

    def entries(self) -> list[HistoryEntry]:
        raw = self.store.read(HISTORY_KEY, [])
        if not isinstance(raw, list):
            return []
        return [HistoryEntry.from_payload(row) for row in raw if isinstance(row, dict)]

    def add(self, score: int, level: int, snake_length: int, play_time: int) -> HistoryEntry:
        entry = HistoryEntry(
            score=score,
            level=level,
            snake_length=snake_length,
            play_time=play_time,
            date=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )
        rows = [entry, *self.entries()][: self.limit]
        self.store.write(HISTORY_KEY, [row.to_payload() for row in rows])
        return entry

    def clear(self) -> None:
        self.store.write(HISTORY_KEY, [])

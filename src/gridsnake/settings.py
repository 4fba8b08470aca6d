"""Settings persistence and runtime configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from .records import SETTINGS_KEY
from .storage import KeyValueStore
from .utils import (
    BOARD_SIZE,
    INITIAL_SPEED_MS,
    MIN_SPEED_MS,
    POINTS_PER_FOOD,
    SCORE_PER_LEVEL,
    SPEED_DECREMENT_MS,
)


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Immutable rules of a game: board, pacing, and scoring."""

    board_size: int = BOARD_SIZE
    initial_speed: int = INITIAL_SPEED_MS
    speed_decrement: int = SPEED_DECREMENT_MS
    points_per_food: int = POINTS_PER_FOOD
    score_per_level: int = SCORE_PER_LEVEL
    min_speed: int = MIN_SPEED_MS

    def __post_init__(self) -> None:
        if self.board_size < 3:
            raise ValueError("board_size must be at least 3")
        if self.score_per_level <= 0:
            raise ValueError("score_per_level must be positive")
        if self.min_speed <= 0 or self.initial_speed < self.min_speed:
            raise ValueError("speeds must satisfy 0 < min_speed <= initial_speed")


DEFAULT_CONFIG = GameConfig()


class Difficulty(str, Enum):
    """Pacing presets selectable from settings."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


def config_for_difficulty(difficulty: Difficulty, base: GameConfig = DEFAULT_CONFIG) -> GameConfig:
    """Return base with its starting speed adjusted for difficulty."""
    if difficulty == Difficulty.EASY:
        return replace(base, initial_speed=base.initial_speed + 50)
    if difficulty == Difficulty.HARD:
        return replace(base, initial_speed=max(base.min_speed, base.initial_speed - 50))
    return base


@dataclass(slots=True)
class GameSettings:
    """Persistent player preferences."""

    sound_enabled: bool = True
    show_grid: bool = True
    show_animations: bool = True
    difficulty: Difficulty = Difficulty.NORMAL
    theme: Theme = Theme.DARK


class SettingsManager:
    """Load, save, and mutate game settings."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.settings = self.load()

    def load(self) -> GameSettings:
        """Load game settings from the store with safe defaults."""
        raw: Any = self.store.read(SETTINGS_KEY, {})
        settings = GameSettings()
        if not isinstance(raw, dict):
            return settings

        settings.sound_enabled = bool(raw.get("soundEnabled", settings.sound_enabled))
        settings.show_grid = bool(raw.get("showGrid", settings.show_grid))
        settings.show_animations = bool(raw.get("showAnimations", settings.show_animations))

        if raw.get("difficulty") in {e.value for e in Difficulty}:
            settings.difficulty = Difficulty(raw["difficulty"])
        if raw.get("theme") in {e.value for e in Theme}:
            settings.theme = Theme(raw["theme"])
        return settings

    def save(self) -> None:
        """Persist settings to the store."""
        payload = {
            "soundEnabled": self.settings.sound_enabled,
            "showGrid": self.settings.show_grid,
            "showAnimations": self.settings.show_animations,
            "difficulty": self.settings.difficulty.value,
            "theme": self.settings.theme.value,
        }
        self.store.write(SETTINGS_KEY, payload)

    def toggle(self, field_name: str) -> bool:
        """Flip a boolean setting, persist, and return the new value."""
        value = not bool(getattr(self.settings, field_name))
        setattr(self.settings, field_name, value)
        self.save()
        return value

    def cycle_difficulty(self) -> Difficulty:
        """Cycle difficulty and persist settings."""
        order = [Difficulty.EASY, Difficulty.NORMAL, Difficulty.HARD]
        idx = order.index(self.settings.difficulty)
        self.settings.difficulty = order[(idx + 1) % len(order)]
        self.save()
        return self.settings.difficulty

    def cycle_theme(self) -> Theme:
        self.settings.theme = Theme.LIGHT if self.settings.theme == Theme.DARK else Theme.DARK
        self.save()
        return self.settings.theme

    @property
    def game_config(self) -> GameConfig:
        return config_for_difficulty(self.settings.difficulty)

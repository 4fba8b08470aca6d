from __future__ import annotations

import pytest

from gridsnake.records import SETTINGS_KEY
from gridsnake.settings import (
    DEFAULT_CONFIG,
    Difficulty,
    GameConfig,
    SettingsManager,
    Theme,
    config_for_difficulty,
)
from gridsnake.storage import MemoryStore


def test_settings_load_save_round_trip() -> None:
    store = MemoryStore()
    mgr = SettingsManager(store)
    mgr.toggle("show_grid")
    mgr.cycle_difficulty()
    mgr.cycle_theme()

    loaded = SettingsManager(store).settings
    assert loaded.show_grid is False
    assert loaded.difficulty == Difficulty.HARD
    assert loaded.theme == Theme.LIGHT
    assert store.read(SETTINGS_KEY, {})["showGrid"] is False


def test_settings_ignore_unknown_values() -> None:
    store = MemoryStore({SETTINGS_KEY: {"difficulty": "nightmare", "soundEnabled": False}})
    settings = SettingsManager(store).settings
    assert settings.difficulty == Difficulty.NORMAL
    assert settings.sound_enabled is False


def test_difficulty_presets() -> None:
    assert config_for_difficulty(Difficulty.NORMAL) == DEFAULT_CONFIG
    assert config_for_difficulty(Difficulty.EASY).initial_speed == 250
    assert config_for_difficulty(Difficulty.HARD).initial_speed == 150


def test_game_config_rejects_nonsense() -> None:
    with pytest.raises(ValueError):
        GameConfig(board_size=2)
    with pytest.raises(ValueError):
        GameConfig(score_per_level=0)
    with pytest.raises(ValueError):
        GameConfig(initial_speed=40, min_speed=50)

from __future__ import annotations

from pathlib import Path

import pygame

from gridsnake.audio import AudioManager
from gridsnake.game import GameState, TickResult
from gridsnake.records import BEST_SCORE_KEY


def test_integration_play_until_game_over(tmp_path: Path) -> None:
    from gridsnake.app import SnakeApp

    app = SnakeApp(root=tmp_path, data_dir=tmp_path / "data")
    try:
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RETURN))
        assert app._handle_events() is True
        assert app.game.data.game_state == GameState.PLAYING

        app.game.data.food = (11, 10)
        assert app.game.tick() == TickResult.ATE
        app.game.data.food = (0, 0)
        while app.game.tick() != TickResult.COLLIDED:
            pass
        app._render()

        assert app.game.data.game_state == GameState.GAME_OVER
        assert app.store.read(BEST_SCORE_KEY, 0) == 10
        assert app.achievements.is_unlocked("first_food")
        assert any("First Bite" in toast.text for toast in app.toasts)
    finally:
        app.game.close()
        pygame.quit()


def test_settings_hotkeys_only_when_not_moving(tmp_path: Path) -> None:
    from gridsnake.app import SnakeApp

    app = SnakeApp(root=tmp_path, data_dir=tmp_path / "data")
    try:
        assert app._handle_settings_key(pygame.K_g) is True
        assert app.settings.show_grid is False

        app.game.start()
        assert app._handle_settings_key(pygame.K_g) is False
        assert app.settings.show_grid is False
    finally:
        app.game.close()
        pygame.quit()


def test_reset_progress_hotkey_needs_settings_panel(tmp_path: Path) -> None:
    from gridsnake.app import SnakeApp

    app = SnakeApp(root=tmp_path, data_dir=tmp_path / "data")
    try:
        app.game.stats.record_game(score=40, level=1, snake_length=7, play_time=12)
        app.game.history.add(score=40, level=1, snake_length=7, play_time=12)
        app.achievements.unlock("first_food")
        app.game.best.update(40)

        assert app._handle_settings_key(pygame.K_x) is False
        assert app.game.stats.stats.total_games_played == 1

        assert app._handle_settings_key(pygame.K_TAB) is True
        assert app._handle_settings_key(pygame.K_x) is True
        assert app.game.stats.stats.total_games_played == 0
        assert app.game.history.entries() == []
        assert not app.achievements.is_unlocked("first_food")
        assert app.game.best.value == 40
    finally:
        app.game.close()
        pygame.quit()


def test_audio_without_assets_is_silent(tmp_path: Path) -> None:
    audio = AudioManager(tmp_path)
    audio.load_assets()
    assert audio.sounds == {}
    audio.play("eat")

"""Audio loading and playback wrappers."""

from __future__ import annotations

from pathlib import Path
import logging
import pygame

from .game import GameEvent, GameEventType

logger = logging.getLogger(__name__)

SOUND_FILES = {
    "eat": "eat.wav",
    "level_up": "level_up.wav",
    "game_over": "game_over.wav",
    "new_best": "new_best.wav",
    "achievement": "achievement.wav",
}

EVENT_SOUNDS = {
    GameEventType.FOOD_EATEN: "eat",
    GameEventType.LEVEL_UP: "level_up",
    GameEventType.GAME_OVER: "game_over",
    GameEventType.NEW_BEST_SCORE: "new_best",
}


class AudioManager:
    """Plays sound effects for game events; silent when the mixer or assets are absent."""

    def __init__(self, root: Path, enabled: bool = True) -> None:
        self.root = root
        self.enabled = enabled
        self.mixer_ready = False
        self.sounds: dict[str, pygame.mixer.Sound] = {}
        try:
            pygame.mixer.init()
            self.mixer_ready = True
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)

    def load_assets(self) -> None:
        """Load available sound files from the assets folder."""
        if not self.mixer_ready:
            return
        for key, filename in SOUND_FILES.items():
            path = self.root / "assets" / "sounds" / filename
            if not path.exists():
                continue
            try:
                self.sounds[key] = pygame.mixer.Sound(str(path))
            except pygame.error as exc:
                logger.warning("Could not load %s: %s", path, exc)

    def play(self, key: str) -> None:
        """Play a named sound effect."""
        if not (self.enabled and self.mixer_ready):
            return
        sound = self.sounds.get(key)
        if sound:
            sound.play()

    def on_game_event(self, event: GameEvent) -> None:
        key = EVENT_SOUNDS.get(event.type)
        if key:
            self.play(key)

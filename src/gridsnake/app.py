"""Pygame window: event loop, rendering, and wiring of the game core."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import pygame

from .achievements import Achievement, AchievementEvaluator, headline_for_score
from .audio import AudioManager
from .controls import cell_at, handle_cell_click, handle_key
from .game import GameEvent, GameEventType, GameSnapshot, GameState, SnakeGame
from .rules import board_fill_percentage, format_score, format_time, points_to_next_level
from .settings import SettingsManager, Theme
from .storage import JsonFileStore
from .utils import (
    BG_COLOR,
    BOARD_COLOR,
    CYAN,
    DATA_DIR,
    DARK_GREEN,
    FPS,
    GREEN,
    GRID_COLOR,
    HUD_HEIGHT,
    LIGHT_BG_COLOR,
    LIGHT_BOARD_COLOR,
    LIGHT_GRID_COLOR,
    LIGHT_TEXT_COLOR,
    ORANGE,
    RED,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SHADOW_COLOR,
    TEXT_COLOR,
    YELLOW,
)

logger = logging.getLogger(__name__)

STORE_POLL_INTERVAL_MS = 1000
TOAST_FRAMES = FPS * 3


@dataclass(slots=True)
class Toast:
    """Transient banner shown over the board."""

    text: str
    color: tuple[int, int, int]
    frames: int = TOAST_FRAMES


@dataclass(slots=True)
class Palette:
    background: tuple[int, int, int]
    board: tuple[int, int, int]
    grid: tuple[int, int, int]
    text: tuple[int, int, int]


DARK_PALETTE = Palette(BG_COLOR, BOARD_COLOR, GRID_COLOR, TEXT_COLOR)
LIGHT_PALETTE = Palette(LIGHT_BG_COLOR, LIGHT_BOARD_COLOR, LIGHT_GRID_COLOR, LIGHT_TEXT_COLOR)


class SnakeApp:
    """Hosts a SnakeGame in a pygame window and renders its snapshots."""

    def __init__(self, root: Path, data_dir: Path | None = None) -> None:
        pygame.init()
        pygame.font.init()

        self.root = root
        self.store = JsonFileStore(data_dir or DATA_DIR)
        self.settings_manager = SettingsManager(self.store)
        self.settings = self.settings_manager.settings

        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("gridsnake")
        self.clock = pygame.time.Clock()

        self.title_font = pygame.font.SysFont("consolas", 44, bold=True)
        self.body_font = pygame.font.SysFont("consolas", 24, bold=True)
        self.small_font = pygame.font.SysFont("consolas", 16)

        self.audio = AudioManager(self.root, enabled=self.settings.sound_enabled)
        self.audio.load_assets()

        self.achievements = AchievementEvaluator(self.store)
        self.achievements.add_listener(self._on_achievement)
        self.toasts: list[Toast] = []
        self.show_settings = False
        self._last_store_poll = 0

        self.game = self._create_game()

    def _create_game(self) -> SnakeGame:
        game = SnakeGame(
            self.store,
            config=self.settings_manager.game_config,
            achievements=self.achievements,
        )
        game.add_listener(self._on_game_event)
        game.add_listener(self.audio.on_game_event)
        return game

    @property
    def palette(self) -> Palette:
        return LIGHT_PALETTE if self.settings.theme == Theme.LIGHT else DARK_PALETTE

    @property
    def cell_size(self) -> int:
        available = min(SCREEN_WIDTH - 40, SCREEN_HEIGHT - HUD_HEIGHT - 40)
        return max(4, available // self.game.config.board_size)

    @property
    def board_origin(self) -> tuple[int, int]:
        side = self.cell_size * self.game.config.board_size
        return ((SCREEN_WIDTH - side) // 2, HUD_HEIGHT + (SCREEN_HEIGHT - HUD_HEIGHT - side) // 2)

    def run(self) -> None:
        """Main event/update/render loop."""
        running = True
        while running:
            self.clock.tick(FPS)
            running = self._handle_events()
            if not running:
                break
            self.game.update()
            self._poll_store()
            self._render()
        self.game.close()
        pygame.quit()

    def _handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                cell = cell_at(event.pos, self.board_origin, self.cell_size, self.game.config.board_size)
                if cell is not None:
                    handle_cell_click(self.game, cell)
                continue
            if event.type != pygame.KEYDOWN:
                continue
            if event.key == pygame.K_q and not self.game.is_playing:
                return False
            if self._handle_settings_key(event.key):
                continue
            handle_key(self.game, event.key)
        return True

    def _handle_settings_key(self, key: int) -> bool:
        """Settings hotkeys; only honoured while no move is in flight."""
        if self.game.is_playing:
            return False
        if key == pygame.K_TAB:
            self.show_settings = not self.show_settings
        elif key == pygame.K_g:
            self.settings_manager.toggle("show_grid")
        elif key == pygame.K_m:
            self.audio.enabled = self.settings_manager.toggle("sound_enabled")
        elif key == pygame.K_v:
            self.settings_manager.toggle("show_animations")
        elif key == pygame.K_t:
            self.settings_manager.cycle_theme()
        elif key == pygame.K_f:
            self._cycle_difficulty()
        elif key == pygame.K_x and self.show_settings:
            self._reset_progress()
        else:
            return False
        self.settings = self.settings_manager.settings
        return True

    def _cycle_difficulty(self) -> None:
        if self.game.is_paused:
            return
        difficulty = self.settings_manager.cycle_difficulty()
        self.game.close()
        self.game = self._create_game()
        logger.info("Difficulty set to %s", difficulty.value)

    def _reset_progress(self) -> None:
        """Wipe stats, history and unlocked achievements; the best score stays."""
        self.game.stats.reset()
        self.game.history.clear()
        self.achievements.reset()
        logger.info("Progress reset")

    def _poll_store(self) -> None:
        now = pygame.time.get_ticks()
        if now - self._last_store_poll < STORE_POLL_INTERVAL_MS:
            return
        self._last_store_poll = now
        self.store.poll_external_changes()

    def _on_game_event(self, event: GameEvent) -> None:
        if event.type == GameEventType.LEVEL_UP:
            self._push_toast(f"LEVEL UP! {event.snapshot.level}", CYAN)
        elif event.type == GameEventType.NEW_BEST_SCORE:
            self._push_toast("NEW BEST SCORE!", YELLOW)

    def _on_achievement(self, achievement: Achievement) -> None:
        self.audio.play("achievement")
        self._push_toast(f"{achievement.name}: {achievement.description}", ORANGE)

    def _push_toast(self, text: str, color: tuple[int, int, int]) -> None:
        if not self.settings.show_animations:
            return
        self.toasts.append(Toast(text, color))

    def _render(self) -> None:
        snapshot = self.game.snapshot()
        palette = self.palette
        self.screen.fill(palette.background)
        self._render_hud(snapshot, palette)
        self._render_board(snapshot, palette)

        if self.show_settings and not self.game.is_playing:
            self._render_settings(palette)
        elif snapshot.game_state == GameState.READY:
            self._render_banner("SNAKE", "Enter to start | Tab settings | Q quit", palette)
        elif snapshot.is_paused:
            self._render_banner("PAUSED", "Space to resume | R reset", palette)
        elif snapshot.game_state == GameState.GAME_OVER:
            self._render_game_over(palette)

        self._render_toasts()
        pygame.display.flip()

    def _render_hud(self, snapshot: GameSnapshot, palette: Palette) -> None:
        per_level = self.game.config.score_per_level
        lines = [
            (f"SCORE {format_score(snapshot.score)}", GREEN),
            (f"BEST {format_score(snapshot.best_score)}", YELLOW),
            (f"LEVEL {snapshot.level}", CYAN),
        ]
        x = 20
        for text, color in lines:
            label = self.body_font.render(text, True, color)
            self.screen.blit(label, (x, 18))
            x += label.get_width() + 36

        detail = (
            f"Next level in {points_to_next_level(snapshot.score, per_level)} pts"
            f" | {snapshot.game_speed} ms/tick"
            f" | board {board_fill_percentage(snapshot.snake_length, self.game.config.board_size):.0f}%"
            f" | {format_time(self.game.play_time())}"
        )
        self.screen.blit(self.small_font.render(detail, True, palette.text), (20, 56))

    def _render_board(self, snapshot: GameSnapshot, palette: Palette) -> None:
        size = self.game.config.board_size
        cell = self.cell_size
        ox, oy = self.board_origin
        board_rect = pygame.Rect(ox, oy, cell * size, cell * size)
        pygame.draw.rect(self.screen, palette.board, board_rect)

        if self.settings.show_grid:
            for i in range(size + 1):
                pygame.draw.line(self.screen, palette.grid, (ox + i * cell, oy), (ox + i * cell, oy + size * cell))
                pygame.draw.line(self.screen, palette.grid, (ox, oy + i * cell), (ox + size * cell, oy + i * cell))

        fx, fy = snapshot.food
        pygame.draw.rect(
            self.screen,
            RED,
            pygame.Rect(ox + fx * cell + 2, oy + fy * cell + 2, cell - 4, cell - 4),
            border_radius=cell // 2,
        )

        for idx, (x, y) in enumerate(snapshot.segments):
            color = GREEN if idx == 0 else DARK_GREEN
            rect = pygame.Rect(ox + x * cell + 1, oy + y * cell + 1, cell - 2, cell - 2)
            pygame.draw.rect(self.screen, color, rect, border_radius=3)

        pygame.draw.rect(self.screen, palette.grid, board_rect, width=2)

    def _render_banner(self, title: str, prompt: str, palette: Palette) -> None:
        overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 120))
        self.screen.blit(overlay, (0, 0))
        heading = self.title_font.render(title, True, YELLOW)
        shadow = self.title_font.render(title, True, SHADOW_COLOR)
        cx = SCREEN_WIDTH // 2
        self.screen.blit(shadow, (cx - heading.get_width() // 2 + 3, SCREEN_HEIGHT // 2 - 57))
        self.screen.blit(heading, (cx - heading.get_width() // 2, SCREEN_HEIGHT // 2 - 60))
        line = self.small_font.render(prompt, True, TEXT_COLOR)
        self.screen.blit(line, (cx - line.get_width() // 2, SCREEN_HEIGHT // 2 + 10))

    def _render_game_over(self, palette: Palette) -> None:
        result = self.game.last_result
        self._render_banner("GAME OVER", "Enter to play again | R reset | Q quit", palette)
        if result is None:
            return
        lines = [
            (f"Final score: {format_score(result.score)}   Level: {result.level}", TEXT_COLOR),
            (f"Best: {format_score(result.best_score)}" + ("  (new best!)" if result.new_best else ""), YELLOW),
            (headline_for_score(result.score), ORANGE),
            (f"Length {result.snake_length} | Time {format_time(result.play_time)}", TEXT_COLOR),
        ]
        y = SCREEN_HEIGHT // 2 + 48
        for text, color in lines:
            label = self.body_font.render(text, True, color)
            self.screen.blit(label, (SCREEN_WIDTH // 2 - label.get_width() // 2, y))
            y += 34

    def _render_settings(self, palette: Palette) -> None:
        overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        self.screen.blit(overlay, (0, 0))
        title = self.title_font.render("SETTINGS", True, YELLOW)
        self.screen.blit(title, (SCREEN_WIDTH // 2 - title.get_width() // 2, 130))

        stats = self.game.stats.stats
        unlocked = sum(1 for item in self.achievements.achievements() if item.unlocked)
        lines = [
            f"Sound [M]: {self.settings.sound_enabled}",
            f"Grid [G]: {self.settings.show_grid}",
            f"Animations [V]: {self.settings.show_animations}",
            f"Difficulty [F]: {self.settings.difficulty.value.title()}",
            f"Theme [T]: {self.settings.theme.value.title()}",
            f"Games {stats.total_games_played} | Avg {stats.average_score} | Longest {stats.longest_snake}",
            f"Achievements {unlocked}/{len(self.achievements.definitions)}",
            "Reset progress [X]",
            "Back: Tab",
        ]
        for idx, line in enumerate(lines):
            text = self.small_font.render(line, True, TEXT_COLOR)
            self.screen.blit(text, (SCREEN_WIDTH // 2 - 200, 220 + idx * 32))

    def _render_toasts(self) -> None:
        y = HUD_HEIGHT + 12
        for toast in self.toasts:
            label = self.body_font.render(toast.text, True, toast.color)
            self.screen.blit(label, (SCREEN_WIDTH // 2 - label.get_width() // 2, y))
            y += 32
            toast.frames -= 1
        self.toasts = [toast for toast in self.toasts if toast.frames > 0]

"""Game state machine: lifecycle commands, the tick algorithm, and game-over bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
import logging
import random

from .achievements import Achievement, AchievementEvaluator
from .records import BEST_SCORE_KEY, BestScore, GameHistory, StatsTracker
from .rules import (
    food_collision,
    generate_game_id,
    is_valid_direction_change,
    level_for_score,
    next_position,
    random_food_position,
    self_collision,
    speed_for_level,
    wall_collision,
)
from .scheduler import Clock, TickScheduler, monotonic_ms
from .settings import DEFAULT_CONFIG, GameConfig
from .snake import Snake
from .storage import KeyValueStore
from .utils import INITIAL_SNAKE_LENGTH, POLL_INTERVAL_MS, Direction, Position

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Lifecycle of a single game session."""

    READY = auto()
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()


def is_game_playable(state: GameState) -> bool:
    return state in {GameState.READY, GameState.PLAYING, GameState.PAUSED}


class GameEventType(Enum):
    STATE_CHANGED = auto()
    PAUSE_CHANGED = auto()
    SCORE_CHANGED = auto()
    FOOD_EATEN = auto()
    LEVEL_UP = auto()
    GAME_OVER = auto()
    NEW_BEST_SCORE = auto()


class TickResult(Enum):
    IDLE = auto()
    MOVED = auto()
    ATE = auto()
    COLLIDED = auto()


@dataclass(slots=True)
class GameData:
    """Authoritative mutable state, owned by SnakeGame."""

    snake: Snake
    food: Position
    score: int = 0
    level: int = 1
    game_state: GameState = GameState.READY
    is_paused: bool = False
    best_score: int = 0
    game_speed: int = DEFAULT_CONFIG.initial_speed


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only copy of GameData for renderers and other observers."""

    segments: tuple[Position, ...]
    direction: Direction
    next_direction: Direction
    food: Position
    score: int
    level: int
    game_state: GameState
    is_paused: bool
    best_score: int
    game_speed: int

    @property
    def head(self) -> Position:
        return self.segments[0]

    @property
    def snake_length(self) -> int:
        return len(self.segments)


@dataclass(frozen=True, slots=True)
class GameEvent:
    type: GameEventType
    snapshot: GameSnapshot


@dataclass(slots=True)
class SessionInfo:
    """Timing for the session in progress (milliseconds on the game clock)."""

    game_id: str = ""
    start_ms: float | None = None
    last_move_ms: float = 0.0
    ticks: int = 0


@dataclass(slots=True)
class GameResult:
    """Summary of a finished game for the game-over panel."""

    score: int
    level: int
    snake_length: int
    play_time: int
    best_score: int
    new_best: bool
    unlocked: list[str] = field(default_factory=list)


GameListener = Callable[[GameEvent], None]


class SnakeGame:
    """Single-player snake: commands, queries, and the timed tick.

    Commands issued in a state where they do not apply are ignored. The
    tick fires from :class:`TickScheduler` polls once ``game_speed``
    milliseconds have passed since the last move; hosts drive it with
    :meth:`update`.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: GameConfig = DEFAULT_CONFIG,
        clock: Clock = monotonic_ms,
        rng: random.Random | None = None,
        achievements: AchievementEvaluator | None = None,
        poll_interval_ms: float = POLL_INTERVAL_MS,
    ) -> None:
        self.config = config
        self.store = store
        self.clock = clock
        self.rng = rng or random.Random()
        self.best = BestScore(store)
        self.stats = StatsTracker(store)
        self.history = GameHistory(store)
        self.achievements = achievements
        self.scheduler = TickScheduler(self._on_poll, clock=clock, poll_interval_ms=poll_interval_ms)
        self.session = SessionInfo()
        self.last_result: GameResult | None = None
        self._listeners: list[GameListener] = []
        self._session_unlocks: list[str] = []

        self.data = self._fresh_data(GameState.READY)
        self._unsubscribe_best = store.subscribe(BEST_SCORE_KEY, self._on_external_best_score)
        self._detach_achievements: Callable[[], None] | None = None
        if achievements is not None:
            self._detach_achievements = achievements.add_listener(self._on_unlock)

    # Commands ---------------------------------------------------------

    def start(self) -> None:
        """Begin a fresh game from READY or GAME_OVER."""
        if self.data.game_state not in {GameState.READY, GameState.GAME_OVER}:
            logger.debug("start ignored in %s", self.data.game_state.name)
            return
        now = self.clock()
        self.data = self._fresh_data(GameState.PLAYING)
        self.session = SessionInfo(game_id=generate_game_id(self.rng), start_ms=now, last_move_ms=now)
        self.last_result = None
        self._session_unlocks = []
        self.scheduler.start()
        logger.info("Game %s started", self.session.game_id)
        self._emit(GameEventType.STATE_CHANGED)

    def pause(self) -> None:
        if self.data.game_state != GameState.PLAYING or self.data.is_paused:
            logger.debug("pause ignored")
            return
        self.data.is_paused = True
        self.scheduler.stop()
        self._emit(GameEventType.PAUSE_CHANGED)

    def resume(self) -> None:
        """Continue a paused game; the next move waits a full interval."""
        if self.data.game_state != GameState.PLAYING or not self.data.is_paused:
            logger.debug("resume ignored")
            return
        self.data.is_paused = False
        self.session.last_move_ms = self.clock()
        self.scheduler.start()
        self._emit(GameEventType.PAUSE_CHANGED)

    def toggle_pause(self) -> None:
        if self.data.is_paused:
            self.resume()
        else:
            self.pause()

    def reset(self) -> None:
        """Abandon whatever is running and return to READY."""
        self.scheduler.stop()
        self.data = self._fresh_data(GameState.READY)
        self.session = SessionInfo()
        self.last_result = None
        self._emit(GameEventType.STATE_CHANGED)

    def change_direction(self, requested: Direction) -> None:
        """Queue a heading for the next tick unless it reverses the committed one."""
        if not self.is_playing:
            return
        snake = self.data.snake
        if not is_valid_direction_change(snake.direction, requested):
            return
        snake.next_direction = requested

    # Queries ----------------------------------------------------------

    @property
    def is_game_over(self) -> bool:
        return self.data.game_state == GameState.GAME_OVER

    @property
    def is_playing(self) -> bool:
        return self.data.game_state == GameState.PLAYING and not self.data.is_paused

    @property
    def is_paused(self) -> bool:
        return self.data.is_paused

    def snapshot(self) -> GameSnapshot:
        data = self.data
        return GameSnapshot(
            segments=tuple(data.snake.segments),
            direction=data.snake.direction,
            next_direction=data.snake.next_direction,
            food=data.food,
            score=data.score,
            level=data.level,
            game_state=data.game_state,
            is_paused=data.is_paused,
            best_score=data.best_score,
            game_speed=data.game_speed,
        )

    def play_time(self) -> int:
        """Whole seconds since the current session started."""
        if self.session.start_ms is None:
            return 0
        return max(0, int((self.clock() - self.session.start_ms) // 1000))

    # Events -----------------------------------------------------------

    def add_listener(self, listener: GameListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _emit(self, event_type: GameEventType) -> None:
        event = GameEvent(event_type, self.snapshot())
        if event_type == GameEventType.SCORE_CHANGED and self.achievements is not None:
            self.achievements.evaluate(event.snapshot.score)
        for listener in list(self._listeners):
            listener(event)

    # Ticking ----------------------------------------------------------

    def update(self) -> None:
        """Pump the scheduler; called from the host loop."""
        self.scheduler.pump()

    def _on_poll(self, now: float) -> None:
        if not self.is_playing:
            return
        if now - self.session.last_move_ms < self.data.game_speed:
            return
        self.tick()
        self.session.last_move_ms = now

    def tick(self) -> TickResult:
        """Advance the snake one cell, resolving collisions before any mutation."""
        if not self.is_playing:
            return TickResult.IDLE

        data = self.data
        snake = data.snake
        direction = snake.next_direction
        new_head = next_position(snake.head, direction)
        moved = snake.with_head(new_head, direction)

        if wall_collision(moved, self.config.board_size) or self_collision(moved):
            self._finish_game()
            return TickResult.COLLIDED

        self.session.ticks += 1
        if food_collision(moved, data.food):
            snake.advance(new_head, grow=True)
            snake.commit_direction()
            previous_level = data.level
            data.score += self.config.points_per_food
            data.level = level_for_score(data.score, self.config.score_per_level)
            data.game_speed = speed_for_level(data.level, self.config)
            data.food = random_food_position(snake, self.config.board_size, self.rng)
            self._emit(GameEventType.FOOD_EATEN)
            self._emit(GameEventType.SCORE_CHANGED)
            if data.level > previous_level:
                logger.info("Level up: %d (speed %d ms)", data.level, data.game_speed)
                self._emit(GameEventType.LEVEL_UP)
            return TickResult.ATE

        snake.advance(new_head, grow=False)
        snake.commit_direction()
        return TickResult.MOVED

    def _finish_game(self) -> None:
        if self.data.game_state != GameState.PLAYING:
            return
        data = self.data
        data.game_state = GameState.GAME_OVER
        self.scheduler.stop()

        play_time = self.play_time()
        snake_length = len(data.snake)
        new_best = self.best.update(data.score)
        if new_best:
            data.best_score = data.score
        self.stats.record_game(
            score=data.score,
            level=data.level,
            snake_length=snake_length,
            play_time=play_time,
        )
        self.history.add(
            score=data.score,
            level=data.level,
            snake_length=snake_length,
            play_time=play_time,
        )
        self.last_result = GameResult(
            score=data.score,
            level=data.level,
            snake_length=snake_length,
            play_time=play_time,
            best_score=data.best_score,
            new_best=new_best,
            unlocked=list(self._session_unlocks),
        )
        logger.info(
            "Game %s over: score=%d level=%d length=%d time=%ds",
            self.session.game_id,
            data.score,
            data.level,
            snake_length,
            play_time,
        )
        self._emit(GameEventType.STATE_CHANGED)
        self._emit(GameEventType.GAME_OVER)
        if new_best:
            self._emit(GameEventType.NEW_BEST_SCORE)

    # Internals --------------------------------------------------------

    def _fresh_data(self, state: GameState) -> GameData:
        size = self.config.board_size
        centre = size // 2
        head = (max(centre, INITIAL_SNAKE_LENGTH - 1), centre)
        snake = Snake.spawn(head, Direction.RIGHT)
        return GameData(
            snake=snake,
            food=random_food_position(snake, size, self.rng),
            score=0,
            level=1,
            game_state=state,
            is_paused=False,
            best_score=self.best.value,
            game_speed=self.config.initial_speed,
        )

    def _on_unlock(self, achievement: Achievement) -> None:
        self._session_unlocks.append(achievement.id)

    def _on_external_best_score(self, key: str, value: Any) -> None:
        if self.data.game_state == GameState.GAME_OVER:
            return
        try:
            self.data.best_score = max(0, int(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed %s value %r", key, value)

    def close(self) -> None:
        """Stop ticking and detach from the store."""
        self.scheduler.stop()
        self._unsubscribe_best()
        if self._detach_achievements is not None:
            self._detach_achievements()

"""Score-milestone achievements backed by the persistent unlock set."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable
import logging

from .records import UnlockedAchievements
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Achievement:
    """A score threshold worth celebrating."""

    id: str
    name: str
    description: str
    score_threshold: int
    unlocked: bool = False


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("first_food", "First Bite", "Eat your first food!", 10),
    Achievement("score_50", "Getting Started", "Reach 50 points", 50),
    Achievement("score_100", "Century Club", "Reach 100 points", 100),
    Achievement("score_250", "Snake Master", "Reach 250 points", 250),
    Achievement("score_500", "Legendary Snake", "Reach 500 points", 500),
)

UnlockListener = Callable[[Achievement], None]


class AchievementEvaluator:
    """Unlocks every achievement whose threshold a score has reached."""

    def __init__(
        self,
        store: KeyValueStore,
        definitions: Iterable[Achievement] = ACHIEVEMENTS,
    ) -> None:
        self.definitions = tuple(sorted(definitions, key=lambda item: item.score_threshold))
        self.unlocked = UnlockedAchievements(store)
        self._listeners: list[UnlockListener] = []

    def add_listener(self, listener: UnlockListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def is_unlocked(self, achievement_id: str) -> bool:
        return achievement_id in self.unlocked

    def unlock(self, achievement_id: str) -> bool:
        """Unlock by id; only the first call for an id notifies listeners."""
        if not self.unlocked.add(achievement_id):
            return False
        logger.info("Achievement unlocked: %s", achievement_id)
        definition = self._definition(achievement_id)
        if definition is not None:
            for listener in list(self._listeners):
                listener(replace(definition, unlocked=True))
        return True

    def evaluate(self, score: int) -> list[Achievement]:
        """Unlock everything score qualifies for and return what was new."""
        already = set(self.unlocked.ids())
        fresh: list[Achievement] = []
        for definition in self.definitions:
            if score < definition.score_threshold or definition.id in already:
                continue
            if self.unlock(definition.id):
                fresh.append(replace(definition, unlocked=True))
        return fresh

    def achievements(self) -> list[Achievement]:
        """All definitions with their persisted unlocked flag."""
        unlocked = set(self.unlocked.ids())
        return [replace(item, unlocked=item.id in unlocked) for item in self.definitions]

    def reset(self) -> None:
        self.unlocked.clear()

    def _definition(self, achievement_id: str) -> Achievement | None:
        for definition in self.definitions:
            if definition.id == achievement_id:
                return definition
        return None


def headline_for_score(score: int, definitions: Iterable[Achievement] = ACHIEVEMENTS) -> str:
    """Banner for the game-over panel: the highest milestone reached."""
    reached = [item for item in definitions if score >= item.score_threshold]
    if not reached:
        return "KEEP TRYING!"
    best = max(reached, key=lambda item: item.score_threshold)
    return f"{best.name.upper()}!"

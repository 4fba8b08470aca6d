"""Pytest configuration for headless pygame tests."""

from __future__ import annotations

import os
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from gridsnake.game import SnakeGame  # noqa: E402
from gridsnake.storage import MemoryStore  # noqa: E402


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def game(store: MemoryStore, clock: FakeClock) -> SnakeGame:
    return SnakeGame(store, clock=clock, rng=random.Random(7))

"""Poll-driven tick scheduling owned by a single game instance."""

from __future__ import annotations

from typing import Callable
import time

from .utils import POLL_INTERVAL_MS

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class TickScheduler:
    """Fires a poll callback at a fixed cadence while running.

    The host loop calls :meth:`pump` as often as it likes (every frame for
    the pygame shell). The callback runs at most once per pump and only when
    ``poll_interval_ms`` has passed since the previous poll. Whether a poll
    turns into a game tick is decided by the callback, which compares the
    poll time with its own last-move timestamp.
    """

    def __init__(
        self,
        callback: Callable[[float], None],
        clock: Clock = monotonic_ms,
        poll_interval_ms: float = POLL_INTERVAL_MS,
    ) -> None:
        self.callback = callback
        self.clock = clock
        self.poll_interval_ms = poll_interval_ms
        self.running = False
        self._last_poll_ms = 0.0

    def start(self) -> None:
        self.running = True
        self._last_poll_ms = self.clock()

    def stop(self) -> None:
        """Cancel any pending poll; pumping a stopped scheduler does nothing."""
        self.running = False

    def pump(self) -> bool:
        """Run the callback if a poll is due; return whether it ran."""
        if not self.running:
            return False
        now = self.clock()
        if now - self._last_poll_ms < self.poll_interval_ms:
            return False
        self._last_poll_ms = now
        self.callback(now)
        return True

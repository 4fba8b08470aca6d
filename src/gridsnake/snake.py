"""Snake entity: segments, heading, and the queued turn."""

from __future__ import annotations

from dataclasses import dataclass

from .utils import INITIAL_SNAKE_LENGTH, Direction, Position


@dataclass(slots=True)
class Snake:
    """Head-first list of segments plus committed and queued headings."""

    segments: list[Position]
    direction: Direction = Direction.RIGHT
    next_direction: Direction = Direction.RIGHT

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("a snake needs at least one segment")

    @classmethod
    def spawn(
        cls,
        head: Position,
        direction: Direction = Direction.RIGHT,
        length: int = INITIAL_SNAKE_LENGTH,
    ) -> "Snake":
        """Build a straight snake whose body trails behind the head."""
        dx, dy = direction.vector
        segments = [(head[0] - dx * i, head[1] - dy * i) for i in range(length)]
        return cls(segments=segments, direction=direction, next_direction=direction)

    @property
    def head(self) -> Position:
        return self.segments[0]

    @property
    def tail(self) -> Position:
        return self.segments[-1]

    def __len__(self) -> int:
        return len(self.segments)

    def with_head(self, new_head: Position, direction: Direction) -> "Snake":
        """Return the about-to-move snake: new head in front of the full current body."""
        return Snake(
            segments=[new_head, *self.segments],
            direction=direction,
            next_direction=direction,
        )

    def advance(self, new_head: Position, grow: bool) -> None:
        """Move the head forward, dropping the tail unless growing."""
        self.segments.insert(0, new_head)
        if not grow:
            self.segments.pop()

    def commit_direction(self) -> None:
        """Apply the queued heading."""
        self.direction = self.next_direction

"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snake_clash.grid import Grid


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    def is_reverse_of(self, other: Direction) -> bool:
        """True if the two vectors cancel out on both axes."""
        dr, dc = self.value
        odr, odc = other.value
        return dr + odr == 0 and dc + odc == 0


class Snake:
    """A snake represented as an ordered deque of (row, col) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``. Direction input is
    buffered in ``next_direction`` and only committed by :meth:`advance`,
    so at most one turn happens per tick.
    """

    def __init__(
        self,
        start_row: int,
        start_col: int,
        direction: Direction = Direction.RIGHT,
        length: int = 3,
        *,
        is_ai: bool = False,
        label: str = "",
        color: str = "",
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dr, dc = direction.value
        self.body: deque[tuple[int, int]] = deque()
        for i in range(length):
            self.body.append((start_row - dr * i, start_col - dc * i))
        self.direction = direction
        self.next_direction = direction
        self.alive = True
        self.is_ai = is_ai
        self.label = label
        self.color = color
        self._grow_pending = 0

    @property
    def head(self) -> tuple[int, int]:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def grow_pending(self) -> int:
        return self._grow_pending

    def set_direction(self, new_direction: Direction) -> None:
        """Buffer a direction change, ignoring 180° reversals."""
        if new_direction.is_reverse_of(self.direction):
            return
        self.next_direction = new_direction

    def next_head(self, direction: Direction | None = None) -> tuple[int, int]:
        """Compute the head position one step along *direction*."""
        if direction is None:
            direction = self.next_direction
        dr, dc = direction.value
        r, c = self.head
        return r + dr, c + dc

    def advance(self) -> tuple[int, int] | None:
        """Move the snake one step forward.

        Returns the vacated tail cell, or ``None`` if the snake grew or is
        dead.
        """
        if not self.alive:
            return None
        self.direction = self.next_direction
        self.body.appendleft(self.next_head(self.direction))
        if self._grow_pending > 0:
            self._grow_pending -= 1
            return None
        return self.body.pop()

    def grow(self, amount: int = 1) -> None:
        """Queue growth, applied one segment per subsequent tick."""
        self._grow_pending += amount

    def occupies(self, row: int, col: int) -> bool:
        """Check whether the snake occupies a given cell."""
        return (row, col) in self.body

    def hits_wall(self, grid: Grid) -> bool:
        """Check whether the head has left the board."""
        return not grid.in_bounds(*self.head)

    def hits_self(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self.body)[1:])

    def hits_other(self, other: Snake) -> bool:
        """Check whether the head lies on any segment of *other*, head included."""
        return self.head in other.body

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
            "alive": self.alive,
            "is_ai": self.is_ai,
            "label": self.label,
            "color": self.color,
        }

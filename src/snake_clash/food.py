"""Food items and their spawning logic."""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_clash.grid import Grid
    from snake_clash.snake import Snake

logger = logging.getLogger(__name__)


class FoodKind(enum.Enum):
    """Food variants. Each maps to a fixed (value, grow_amount) pair."""

    NORMAL = "normal"
    SUPER = "super"
    SPEED = "speed"


_REWARDS: dict[FoodKind, tuple[int, int]] = {
    FoodKind.NORMAL: (1, 1),
    FoodKind.SPEED: (1, 1),
    FoodKind.SUPER: (3, 3),
}


@dataclass
class Food:
    """A food item on the board."""

    row: int
    col: int
    kind: FoodKind = FoodKind.NORMAL
    # Only used by renderers to phase animations.
    spawned_at: float = field(default_factory=time.monotonic)

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.col

    @property
    def value(self) -> int:
        return _REWARDS[self.kind][0]

    @property
    def grow_amount(self) -> int:
        return _REWARDS[self.kind][1]

    def to_dict(self) -> dict:
        return {"position": [self.row, self.col], "kind": self.kind.value}


class FoodSpawner:
    """Places food on unoccupied cells and picks its variant.

    Uses a NumPy RNG shared with the engine so a seeded engine places food
    reproducibly.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
        *,
        max_attempts: int = 1000,
        super_threshold: float = 0.92,
        speed_threshold: float = 0.82,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts
        self.super_threshold = super_threshold
        self.speed_threshold = speed_threshold

    def pick_empty_cell(
        self, snakes: Sequence[Snake], foods: Sequence[Food],
    ) -> tuple[int, int]:
        """Sample random cells until one is free of snakes and food.

        After ``max_attempts`` misses the grid centre is returned even if
        it is occupied.
        """
        occupied: set[tuple[int, int]] = set()
        for snake in snakes:
            occupied.update(snake.body)
        occupied.update(food.position for food in foods)

        for _ in range(self.max_attempts):
            cell = self.grid.random_cell(self.rng)
            if cell not in occupied:
                return cell

        logger.warning(
            "No empty cell found after %d attempts; using grid centre.",
            self.max_attempts,
        )
        return self.grid.center

    def draw_kind(self) -> FoodKind:
        """Map one uniform draw in [0, 1) to a food variant."""
        roll = float(self.rng.random())
        if roll > self.super_threshold:
            return FoodKind.SUPER
        if roll > self.speed_threshold:
            return FoodKind.SPEED
        return FoodKind.NORMAL

    def spawn(self, snakes: Sequence[Snake], foods: list[Food]) -> Food:
        """Create one food item and append it to *foods*."""
        row, col = self.pick_empty_cell(snakes, foods)
        food = Food(row, col, self.draw_kind())
        foods.append(food)
        return food

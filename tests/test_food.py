"""Tests for food items and the FoodSpawner."""

import numpy as np
import pytest

from snake_clash.food import Food, FoodKind, FoodSpawner
from snake_clash.grid import Grid
from snake_clash.snake import Direction, Snake


class _FixedRng:
    """Stand-in generator whose ``random()`` replays fixed values."""

    def __init__(self, values):
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


class TestFood:
    @pytest.mark.parametrize(
        ("kind", "value", "grow"),
        [
            (FoodKind.NORMAL, 1, 1),
            (FoodKind.SPEED, 1, 1),
            (FoodKind.SUPER, 3, 3),
        ],
    )
    def test_value_and_growth(self, kind, value, grow):
        food = Food(1, 2, kind)
        assert food.value == value
        assert food.grow_amount == grow

    def test_position_and_dict(self):
        food = Food(3, 4, FoodKind.SUPER)
        assert food.position == (3, 4)
        assert food.to_dict() == {"position": [3, 4], "kind": "super"}


class TestFoodSpawnerInit:
    def test_invalid_attempts(self):
        with pytest.raises(ValueError, match="at least 1"):
            FoodSpawner(Grid(), max_attempts=0)


class TestPickEmptyCell:
    def test_avoids_snakes_and_food(self):
        grid = Grid(cols=5, rows=5)
        spawner = FoodSpawner(grid, np.random.default_rng(1))
        snake = Snake(2, 2, Direction.RIGHT, length=3)
        foods = [Food(0, c) for c in range(5)]
        occupied = set(snake.body) | {f.position for f in foods}
        for _ in range(50):
            cell = spawner.pick_empty_cell([snake], foods)
            assert cell not in occupied
            assert grid.in_bounds(*cell)

    def test_falls_back_to_centre_when_full(self, caplog):
        grid = Grid(cols=4, rows=4)
        spawner = FoodSpawner(grid, np.random.default_rng(0), max_attempts=50)
        foods = [Food(r, c) for r in range(4) for c in range(4)]
        with caplog.at_level("WARNING"):
            cell = spawner.pick_empty_cell([], foods)
        assert cell == (2, 2)
        assert "No empty cell" in caplog.text

    def test_deterministic_with_seed(self):
        cells_a = self._pick_with_seed(42)
        cells_b = self._pick_with_seed(42)
        assert cells_a == cells_b

    @staticmethod
    def _pick_with_seed(seed):
        spawner = FoodSpawner(Grid(), np.random.default_rng(seed))
        return [spawner.pick_empty_cell([], []) for _ in range(5)]


class TestDrawKind:
    @pytest.mark.parametrize(
        ("roll", "kind"),
        [
            (0.0, FoodKind.NORMAL),
            (0.82, FoodKind.NORMAL),
            (0.83, FoodKind.SPEED),
            (0.92, FoodKind.SPEED),
            (0.93, FoodKind.SUPER),
            (0.999, FoodKind.SUPER),
        ],
    )
    def test_thresholds(self, roll, kind):
        spawner = FoodSpawner(Grid(), _FixedRng([roll]))
        assert spawner.draw_kind() == kind


class TestSpawn:
    def test_spawn_appends(self):
        spawner = FoodSpawner(Grid(), np.random.default_rng(3))
        foods = []
        food = spawner.spawn([], foods)
        assert foods == [food]
        assert isinstance(food.kind, FoodKind)

    def test_spawn_never_duplicates_cells(self):
        grid = Grid(cols=6, rows=6)
        spawner = FoodSpawner(grid, np.random.default_rng(5))
        foods = []
        for _ in range(20):
            spawner.spawn([], foods)
        assert len({f.position for f in foods}) == 20

"""Fixed-size board geometry for the snake game."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np


class Grid:
    """Discrete board of ``rows`` x ``cols`` cells.

    Coordinates use (row, col) ordering consistent with NumPy indexing.
    The grid holds no entity state; occupancy masks are built on demand
    from the cells passed in.
    """

    def __init__(self, cols: int = 30, rows: int = 30) -> None:
        if cols < 4 or rows < 4:
            raise ValueError("Grid dimensions must be at least 4×4.")
        self.cols = cols
        self.rows = rows

    @property
    def center(self) -> tuple[int, int]:
        return self.rows // 2, self.cols // 2

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def wall_distance(self, row: int, col: int) -> int:
        """Return the distance from a cell to the closest wall."""
        return min(row, col, self.rows - 1 - row, self.cols - 1 - col)

    def random_cell(self, rng: np.random.Generator) -> tuple[int, int]:
        """Draw a uniformly random cell (column first, then row)."""
        col = int(rng.integers(self.cols))
        row = int(rng.integers(self.rows))
        return row, col

    def occupancy(self, cells: Iterable[tuple[int, int]]) -> np.ndarray:
        """Return a boolean mask with every in-bounds cell of *cells* set."""
        mask = np.zeros((self.rows, self.cols), dtype=bool)
        for r, c in cells:
            if self.in_bounds(r, c):
                mask[r, c] = True
        return mask

    def free_cells_around(
        self, mask: np.ndarray, row: int, col: int, radius: int,
    ) -> int:
        """Count unoccupied in-bounds cells in the square window around a cell.

        Cells of the window that fall outside the board are not counted.
        """
        window = mask[
            max(row - radius, 0):max(row + radius + 1, 0),
            max(col - radius, 0):max(col + radius + 1, 0),
        ]
        return int(window.size - np.count_nonzero(window))

    def to_dict(self) -> dict:
        return {"cols": self.cols, "rows": self.rows}

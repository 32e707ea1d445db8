"""Heuristic opponent: score each safe move and take the best one."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from snake_clash.config import AIWeights
from snake_clash.snake import Direction

if TYPE_CHECKING:
    from snake_clash.food import Food
    from snake_clash.grid import Grid
    from snake_clash.snake import Snake

logger = logging.getLogger(__name__)


def candidate_moves(
    snake: Snake, opponent: Snake | None, grid: Grid,
) -> list[tuple[Direction, tuple[int, int]]]:
    """List the moves that do not collide immediately.

    The reverse of the current direction is never a candidate. A move is
    unsafe if its head cell is off the board or on any segment of either
    snake (the full bodies, tails included).
    """
    moves: list[tuple[Direction, tuple[int, int]]] = []
    for direction in Direction:
        if direction.is_reverse_of(snake.direction):
            continue
        pos = snake.next_head(direction)
        if not grid.in_bounds(*pos):
            continue
        if pos in snake.body:
            continue
        if opponent is not None and pos in opponent.body:
            continue
        moves.append((direction, pos))
    return moves


def nearest_food_distance(
    pos: tuple[int, int], foods: Sequence[Food],
) -> int:
    """Manhattan distance to the closest food, 0 when there is none."""
    if not foods:
        return 0
    r, c = pos
    return min(abs(f.row - r) + abs(f.col - c) for f in foods)


def score_move(
    pos: tuple[int, int],
    foods: Sequence[Food],
    grid: Grid,
    body_mask: np.ndarray,
    weights: AIWeights,
    rng: np.random.Generator,
) -> float:
    """Weighted desirability of moving the head to *pos*."""
    row, col = pos
    score = -weights.food * nearest_food_distance(pos, foods)
    score += weights.wall * grid.wall_distance(row, col)
    score += weights.open_space * grid.free_cells_around(
        body_mask, row, col, weights.open_space_radius,
    )
    score += float(rng.uniform(0.0, weights.jitter))
    return score


def choose_direction(
    snake: Snake,
    opponent: Snake | None,
    foods: Sequence[Food],
    grid: Grid,
    rng: np.random.Generator,
    weights: AIWeights | None = None,
) -> Direction | None:
    """Pick the highest-scoring safe direction.

    Ties keep the first direction evaluated. Returns ``None`` when every
    move collides; the caller then leaves the snake's direction alone.
    """
    weights = weights or AIWeights()
    moves = candidate_moves(snake, opponent, grid)
    if not moves:
        logger.debug("AI snake at %s has no safe move.", snake.head)
        return None

    # Open space only counts the AI's own body as occupied.
    body_mask = grid.occupancy(snake.body)
    best_dir: Direction | None = None
    best_score = -np.inf
    for direction, pos in moves:
        score = score_move(pos, foods, grid, body_mask, weights, rng)
        if score > best_score:
            best_score = score
            best_dir = direction
    return best_dir


def steer(
    snake: Snake,
    opponent: Snake | None,
    foods: Sequence[Food],
    grid: Grid,
    rng: np.random.Generator,
    weights: AIWeights | None = None,
) -> None:
    """Run the policy and feed its choice to ``snake.set_direction``."""
    direction = choose_direction(snake, opponent, foods, grid, rng, weights)
    if direction is not None:
        snake.set_direction(direction)

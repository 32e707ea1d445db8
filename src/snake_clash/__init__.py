"""Snake Clash: simulation and adjudication engine."""

from snake_clash.config import AIWeights, GameConfig
from snake_clash.engine import (
    GameEngine,
    GameMode,
    MatchPhase,
    RoundOutcome,
    TickResult,
)
from snake_clash.food import Food, FoodKind, FoodSpawner
from snake_clash.grid import Grid
from snake_clash.scoreboard import MatchResult, Scoreboard
from snake_clash.snake import Direction, Snake

__all__ = [
    "AIWeights",
    "Direction",
    "Food",
    "FoodKind",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "GameMode",
    "Grid",
    "MatchPhase",
    "MatchResult",
    "RoundOutcome",
    "Scoreboard",
    "Snake",
    "TickResult",
]

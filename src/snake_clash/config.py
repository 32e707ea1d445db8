"""Tunable constants for the simulation, the AI, and the session clock."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AIWeights:
    """Weights of the AI move-scoring heuristic."""

    food: float = 1.0
    wall: float = 0.5
    open_space: float = 0.3
    jitter: float = 2.0
    # Half-width of the open-space window; 2 gives a 5x5 neighbourhood.
    open_space_radius: int = 2


@dataclass(frozen=True)
class GameConfig:
    """Full game configuration.

    Supports JSON serialization so a tuned setup can be reused.
    """

    # Board
    cols: int = 30
    rows: int = 30
    initial_snake_length: int = 3
    start_margin: int = 5

    # Match
    rounds_to_win: int = 3

    # Speed ramp (milliseconds per tick)
    initial_interval_ms: int = 120
    speed_step_ms: int = 2
    min_interval_ms: int = 50

    # Food
    initial_food: int = 3
    min_food: int = 2
    max_food: int = 5
    extra_food_chance: float = 0.02
    super_threshold: float = 0.92
    speed_threshold: float = 0.82
    max_spawn_attempts: int = 1000

    # Session timing (milliseconds)
    countdown_steps: int = 3
    countdown_step_ms: int = 700
    go_display_ms: int = 800
    message_ms: int = 1500
    next_round_delay_ms: int = 2000
    game_over_delay_ms: int = 1500

    seed: int | None = None

    ai: AIWeights = field(default_factory=AIWeights)

    def __post_init__(self) -> None:
        if self.rows < 4:
            raise ValueError("rows must be at least 4.")
        if self.initial_snake_length < 1:
            raise ValueError("initial_snake_length must be at least 1.")
        # Player 1 extends left from start_margin, player 2 extends right
        # from cols - 1 - start_margin; the two bodies must fit and not touch.
        tail_room = self.start_margin - (self.initial_snake_length - 1)
        if tail_room < 0:
            raise ValueError(
                "initial_snake_length does not fit behind start_margin."
            )
        if self.cols - 1 - self.start_margin <= self.start_margin:
            raise ValueError("cols is too small for the start layout.")
        if self.rounds_to_win < 1:
            raise ValueError("rounds_to_win must be at least 1.")
        if self.min_interval_ms <= 0 or self.speed_step_ms < 0:
            raise ValueError(
                "min_interval_ms must be positive and speed_step_ms >= 0."
            )
        if self.initial_interval_ms < self.min_interval_ms:
            raise ValueError(
                "initial_interval_ms must be >= min_interval_ms."
            )
        if not 0 <= self.min_food <= self.max_food:
            raise ValueError("expected 0 <= min_food <= max_food.")
        for name in ("extra_food_chance", "super_threshold", "speed_threshold"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1].")
        if self.speed_threshold > self.super_threshold:
            raise ValueError("speed_threshold must not exceed super_threshold.")
        if self.max_spawn_attempts < 1:
            raise ValueError("max_spawn_attempts must be at least 1.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> GameConfig:
        raw = dict(raw)
        ai_data = raw.pop("ai", {})
        raw["ai"] = AIWeights(**ai_data)
        return cls(**raw)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))

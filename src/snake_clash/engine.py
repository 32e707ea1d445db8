"""Tick engine and round/match state machine."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

import numpy as np

from snake_clash.ai import steer
from snake_clash.config import GameConfig
from snake_clash.food import Food, FoodSpawner
from snake_clash.grid import Grid
from snake_clash.scoreboard import MatchResult, Scoreboard
from snake_clash.snake import Direction, Snake

logger = logging.getLogger(__name__)

_PLAYER_COLORS = ("#4ade80", "#60a5fa")


class GameMode(enum.Enum):
    """Selectable game modes."""

    SINGLE_PLAYER = "single-player"
    TWO_PLAYER_LOCAL = "two-player-local"
    VS_AI = "single-player-vs-ai"


class MatchPhase(enum.Enum):
    """Lifecycle phases of the simulation context."""

    IDLE = "idle"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    PAUSED = "paused"
    ROUND_ENDED = "round_ended"
    MATCH_ENDED = "match_ended"


class RoundOutcome(enum.Enum):
    """How a round finished."""

    DRAW = "draw"
    ROUND_WON = "round_won"
    MATCH_WON = "match_won"
    GAME_OVER = "game_over"


@dataclass
class TickResult:
    """What happened during one call to :meth:`GameEngine.step`."""

    tick: int
    advanced: bool = False
    eaten: list[tuple[int, Food]] = field(default_factory=list)
    deaths: list[int] = field(default_factory=list)
    reschedule: bool = False
    outcome: RoundOutcome | None = None
    winner: int | None = None


class GameEngine:
    """Single owned simulation context for a match.

    The engine holds the snakes, food, scoreboard, and tick interval, and
    moves between :class:`MatchPhase` values. It has no clock of its own:
    whoever drives it calls :meth:`step` once per tick interval and
    reschedules when a tick reports ``reschedule``.
    """

    def __init__(self, config: GameConfig | None = None) -> None:
        cfg = config or GameConfig()
        self.config = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.grid = Grid(cols=cfg.cols, rows=cfg.rows)
        self.spawner = FoodSpawner(
            self.grid,
            self.rng,
            max_attempts=cfg.max_spawn_attempts,
            super_threshold=cfg.super_threshold,
            speed_threshold=cfg.speed_threshold,
        )
        self.scoreboard = Scoreboard(players=2)

        self.mode: GameMode | None = None
        self.autopilot = False
        self.snakes: list[Snake] = []
        self.foods: list[Food] = []
        self.tick = 0
        self.round_number = 0
        self.tick_interval_ms = cfg.initial_interval_ms
        self.paused = False
        self.last_outcome: RoundOutcome | None = None
        self._phase = MatchPhase.IDLE

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def phase(self) -> MatchPhase:
        if self.paused and self._phase == MatchPhase.ACTIVE:
            return MatchPhase.PAUSED
        return self._phase

    def start_match(
        self, mode: GameMode | str, *, autopilot: bool = False,
    ) -> None:
        """Reset the scoreboard and begin the first round of a match.

        With *autopilot* player 1 is driven by the AI as well.
        """
        self.mode = GameMode(mode)
        self.autopilot = autopilot
        self.scoreboard.reset()
        self.round_number = 0
        logger.info(
            "Match started (mode=%s, autopilot=%s).",
            self.mode.value, autopilot,
        )
        self._start_round()

    def finish_countdown(self) -> None:
        """Move from the pre-round countdown into active play."""
        if self._phase != MatchPhase.COUNTDOWN:
            raise ValueError("No countdown in progress.")
        self._phase = MatchPhase.ACTIVE

    def start_next_round(self) -> None:
        """Begin the next round of a running match."""
        if self._phase != MatchPhase.ROUND_ENDED:
            raise ValueError("Round has not ended.")
        self._start_round()

    def return_to_menu(self) -> None:
        """Tear down the match and go back to idle."""
        self.mode = None
        self.autopilot = False
        self.snakes = []
        self.foods = []
        self.paused = False
        self.last_outcome = None
        self.tick_interval_ms = self.config.initial_interval_ms
        self._phase = MatchPhase.IDLE

    def toggle_pause(self) -> bool:
        """Flip the pause flag during countdown or play.

        Returns the resulting pause state; requests outside a round are
        ignored.
        """
        if self._phase in (MatchPhase.COUNTDOWN, MatchPhase.ACTIVE):
            self.paused = not self.paused
            logger.info("Game %s.", "paused" if self.paused else "resumed")
        return self.paused

    def set_direction(self, snake_index: int, direction: Direction) -> None:
        """Record a player's intended direction for the next tick.

        Input for a missing, dead, or AI-controlled snake is dropped, as is
        a 180° reversal.
        """
        if not 0 <= snake_index < len(self.snakes):
            return
        snake = self.snakes[snake_index]
        if snake.is_ai or not snake.alive:
            return
        snake.set_direction(direction)

    def _start_round(self) -> None:
        cfg = self.config
        self.tick_interval_ms = cfg.initial_interval_ms
        self.tick = 0
        self.paused = False
        self.last_outcome = None
        self.round_number += 1

        mid_row = cfg.rows // 2
        p1 = Snake(
            mid_row,
            cfg.start_margin,
            Direction.RIGHT,
            length=cfg.initial_snake_length,
            is_ai=self.autopilot,
            label="Player 1",
            color=_PLAYER_COLORS[0],
        )
        if self.mode == GameMode.SINGLE_PLAYER:
            self.snakes = [p1]
        else:
            is_ai = self.mode == GameMode.VS_AI
            p2 = Snake(
                mid_row,
                cfg.cols - 1 - cfg.start_margin,
                Direction.LEFT,
                length=cfg.initial_snake_length,
                is_ai=is_ai,
                label="AI" if is_ai else "Player 2",
                color=_PLAYER_COLORS[1],
            )
            self.snakes = [p1, p2]

        self.foods = []
        for _ in range(cfg.initial_food):
            self.spawner.spawn(self.snakes, self.foods)

        self._phase = MatchPhase.COUNTDOWN
        logger.info("Round %d ready.", self.round_number)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self) -> TickResult:
        """Advance the simulation by one tick.

        Does nothing unless the phase is ``ACTIVE``.
        """
        if self.phase != MatchPhase.ACTIVE:
            return TickResult(tick=self.tick)

        self.tick += 1
        result = TickResult(tick=self.tick, advanced=True)

        for i, snake in enumerate(self.snakes):
            if snake.is_ai and snake.alive:
                steer(
                    snake,
                    self.opponent_of(i),
                    self.foods,
                    self.grid,
                    self.rng,
                    self.config.ai,
                )

        for snake in self.snakes:
            snake.advance()

        self._consume_food(result)
        self._resolve_collisions(result)
        self._maintain_food()
        self._evaluate_round_end(result)
        return result

    def opponent_of(self, snake_index: int) -> Snake | None:
        for j, other in enumerate(self.snakes):
            if j != snake_index:
                return other
        return None

    def _consume_food(self, result: TickResult) -> None:
        cfg = self.config
        for idx, snake in enumerate(self.snakes):
            if not snake.alive:
                continue
            # Replacement food is appended, so iterate over a snapshot.
            for food in reversed(list(self.foods)):
                if food.position != snake.head:
                    continue
                snake.grow(food.grow_amount)
                self.scoreboard.add_points(idx, food.value)
                self.foods.remove(food)
                self.spawner.spawn(self.snakes, self.foods)
                self.tick_interval_ms = max(
                    cfg.min_interval_ms,
                    self.tick_interval_ms - cfg.speed_step_ms,
                )
                result.eaten.append((idx, food))
                result.reschedule = True
                logger.debug(
                    "Snake %d ate %s food; interval now %d ms.",
                    idx, food.kind.value, self.tick_interval_ms,
                )

    def _resolve_collisions(self, result: TickResult) -> None:
        for i, snake in enumerate(self.snakes):
            if not snake.alive:
                continue
            if snake.hits_wall(self.grid) or snake.hits_self():
                snake.alive = False
            for j, other in enumerate(self.snakes):
                if i != j and snake.hits_other(other):
                    snake.alive = False
            if not snake.alive:
                result.deaths.append(i)

        if len(self.snakes) == 2:
            a, b = self.snakes
            if a.alive and b.alive and a.head == b.head:
                a.alive = False
                b.alive = False
                result.deaths.extend([0, 1])

        for i in result.deaths:
            logger.info(
                "Snake %d died at tick %d (round %d).",
                i, self.tick, self.round_number,
            )

    def _maintain_food(self) -> None:
        cfg = self.config
        count = len(self.foods)
        if count < cfg.min_food or (
            count < cfg.max_food and self.rng.random() < cfg.extra_food_chance
        ):
            self.spawner.spawn(self.snakes, self.foods)

    def _evaluate_round_end(self, result: TickResult) -> None:
        if self.mode == GameMode.SINGLE_PLAYER:
            if not self.snakes[0].alive:
                self._finish(result, RoundOutcome.GAME_OVER, MatchPhase.MATCH_ENDED)
            return

        alive = [i for i, s in enumerate(self.snakes) if s.alive]
        if not alive:
            self._finish(result, RoundOutcome.DRAW, MatchPhase.ROUND_ENDED)
        elif len(alive) == 1 and len(self.snakes) == 2:
            winner = alive[0]
            wins = self.scoreboard.award_round(winner)
            if wins >= self.config.rounds_to_win:
                self._finish(
                    result, RoundOutcome.MATCH_WON, MatchPhase.MATCH_ENDED, winner,
                )
            else:
                self._finish(
                    result, RoundOutcome.ROUND_WON, MatchPhase.ROUND_ENDED, winner,
                )

    def _finish(
        self,
        result: TickResult,
        outcome: RoundOutcome,
        phase: MatchPhase,
        winner: int | None = None,
    ) -> None:
        self._phase = phase
        self.last_outcome = outcome
        result.outcome = outcome
        result.winner = winner
        logger.info(
            "Round %d ended: %s (winner=%s, rounds=%s).",
            self.round_number,
            outcome.value,
            winner,
            self.scoreboard.rounds_won,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def match_result(self) -> MatchResult:
        return self.scoreboard.result(
            single_player=self.mode == GameMode.SINGLE_PLAYER,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "mode": self.mode.value if self.mode else None,
            "phase": self.phase.value,
            "paused": self.paused,
            "round": self.round_number,
            "tick": self.tick,
            "tick_interval_ms": self.tick_interval_ms,
            "grid": self.grid.to_dict(),
            "snakes": [s.to_dict() for s in self.snakes],
            "foods": [f.to_dict() for f in self.foods],
            "scoreboard": self.scoreboard.to_dict(),
            "rounds_to_win": self.config.rounds_to_win,
        }

"""Clockless match runner for simulation and throughput checks."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from snake_clash.config import GameConfig
from snake_clash.engine import GameEngine, GameMode, MatchPhase

logger = logging.getLogger(__name__)


@dataclass
class MatchSummary:
    """Outcome of one headless match."""

    mode: str
    completed: bool
    rounds: int
    ticks: int
    winner: int | None
    points: tuple[int, ...]
    rounds_won: tuple[int, ...]
    wall_time_seconds: float

    def summary(self) -> str:
        if not self.completed:
            outcome = "unfinished"
        elif self.mode == GameMode.SINGLE_PLAYER.value:
            outcome = f"score {self.points[0]}"
        elif self.winner is None:
            outcome = "draw"
        else:
            outcome = f"player {self.winner + 1} wins"
        return (
            f"Match: {self.mode}, {outcome} | "
            f"{self.rounds} round(s), {self.ticks} ticks, "
            f"points {list(self.points)}, rounds {list(self.rounds_won)}, "
            f"{self.wall_time_seconds:.3f}s"
        )


def run_match(
    engine: GameEngine,
    mode: GameMode | str,
    *,
    autopilot: bool = True,
    max_ticks: int = 10_000,
) -> MatchSummary:
    """Play a full match without timers.

    Countdowns and inter-round delays are skipped. The match stops early
    once *max_ticks* ticks have been simulated across all rounds.
    """
    if max_ticks < 1:
        raise ValueError("max_ticks must be at least 1.")
    start = time.perf_counter()
    engine.start_match(mode, autopilot=autopilot)
    ticks = 0
    while ticks < max_ticks:
        phase = engine.phase
        if phase == MatchPhase.MATCH_ENDED:
            break
        if phase == MatchPhase.COUNTDOWN:
            engine.finish_countdown()
        elif phase == MatchPhase.ROUND_ENDED:
            engine.start_next_round()
        else:
            engine.step()
            ticks += 1

    completed = engine.phase == MatchPhase.MATCH_ENDED
    if not completed:
        logger.warning("Match stopped after %d ticks without a result.", ticks)
    result = engine.match_result()
    return MatchSummary(
        mode=engine.mode.value,
        completed=completed,
        rounds=engine.round_number,
        ticks=ticks,
        winner=result.winner if completed else None,
        points=result.points,
        rounds_won=result.rounds_won,
        wall_time_seconds=time.perf_counter() - start,
    )


def simulate(
    config: GameConfig,
    mode: GameMode | str,
    *,
    matches: int = 1,
    autopilot: bool = True,
    max_ticks: int = 10_000,
) -> list[MatchSummary]:
    """Run *matches* headless matches on one engine."""
    engine = GameEngine(config)
    summaries = []
    for i in range(matches):
        summary = run_match(
            engine, mode, autopilot=autopilot, max_ticks=max_ticks,
        )
        logger.info("Match %d/%d: %s", i + 1, matches, summary.summary())
        summaries.append(summary)
    return summaries

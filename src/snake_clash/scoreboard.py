"""Cumulative points and round wins for a match."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchResult:
    """End-of-match summary handed to the game-over screen."""

    winner: int | None
    points: tuple[int, ...]
    rounds_won: tuple[int, ...]
    single_player: bool = False

    @property
    def is_draw(self) -> bool:
        return not self.single_player and self.winner is None

    def to_dict(self) -> dict:
        return {
            "winner": self.winner,
            "points": list(self.points),
            "rounds_won": list(self.rounds_won),
            "single_player": self.single_player,
        }


class Scoreboard:
    """Tracks per-player points and rounds won.

    Points and round wins both persist across rounds and are cleared only
    by :meth:`reset` at the start of a match.
    """

    __slots__ = ("points", "rounds_won")

    def __init__(self, players: int = 2) -> None:
        if players < 1:
            raise ValueError("players must be at least 1.")
        self.points = [0] * players
        self.rounds_won = [0] * players

    def reset(self) -> None:
        self.points = [0] * len(self.points)
        self.rounds_won = [0] * len(self.rounds_won)

    def add_points(self, player: int, value: int) -> int:
        self.points[player] += value
        return self.points[player]

    def award_round(self, player: int) -> int:
        """Credit *player* with a round win and return their new total."""
        self.rounds_won[player] += 1
        return self.rounds_won[player]

    def result(self, single_player: bool = False) -> MatchResult:
        """Summarise the match; the winner has strictly more round wins."""
        winner: int | None = None
        if not single_player:
            best = max(self.rounds_won)
            leaders = [i for i, w in enumerate(self.rounds_won) if w == best]
            if len(leaders) == 1:
                winner = leaders[0]
        return MatchResult(
            winner=winner,
            points=tuple(self.points),
            rounds_won=tuple(self.rounds_won),
            single_player=single_player,
        )

    def to_dict(self) -> dict:
        return {
            "points": list(self.points),
            "rounds_won": list(self.rounds_won),
        }

"""Real-time driver: runs a GameEngine on an asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from snake_clash.engine import GameEngine, GameMode, MatchPhase, RoundOutcome
from snake_clash.scoreboard import MatchResult
from snake_clash.snake import Direction

logger = logging.getLogger(__name__)

RenderCallback = Callable[[dict], None]
MessageCallback = Callable[[str | None, int], None]
GameOverCallback = Callable[[MatchResult], None]


class IntervalTimer:
    """Repeating timer built on ``loop.call_later``.

    The period is fixed for the lifetime of one :meth:`start`; changing it
    means calling :meth:`start` again, which cancels the pending fire first.
    Exceptions raised by the callback are logged and stop the timer.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._interval = 0.0
        self._callback: Callable[[], None] | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def interval(self) -> float:
        return self._interval

    def start(self, interval: float, callback: Callable[[], None]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive.")
        self.cancel()
        self._interval = interval
        self._callback = callback
        self._arm()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        # Re-arm before running so the callback may restart or cancel us.
        self._arm()
        assert self._callback is not None  # noqa: S101
        try:
            self._callback()
        except Exception:
            logger.exception("Timer callback failed; stopping timer.")
            self.cancel()


class GameSession:
    """Owns one engine plus every timer that drives it.

    Ticks, the pre-round countdown, and the delays between rounds each get
    their own handle so pausing (which only makes ticks return early)
    never disturbs the others. All handles are cancelled on
    :meth:`start_match` and :meth:`return_to_menu`.
    """

    def __init__(
        self,
        engine: GameEngine | None = None,
        *,
        on_render: RenderCallback | None = None,
        on_message: MessageCallback | None = None,
        on_game_over: GameOverCallback | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.engine = engine or GameEngine()
        self._loop = loop or asyncio.get_running_loop()
        self._on_render = on_render
        self._on_message = on_message
        self._on_game_over = on_game_over

        self._tick_timer = IntervalTimer(self._loop)
        self._countdown_timer = IntervalTimer(self._loop)
        self._countdown_left = 0
        self._delayed: list[asyncio.TimerHandle] = []
        self.result: MatchResult | None = None

    # ------------------------------------------------------------------
    # Menu / lifecycle collaborator
    # ------------------------------------------------------------------

    def start_match(
        self, mode: GameMode | str, *, autopilot: bool = False,
    ) -> None:
        self._cancel_all()
        self.result = None
        self._message(None, 0)
        self.engine.start_match(mode, autopilot=autopilot)
        self._begin_countdown()

    def start_next_round(self) -> None:
        self._cancel_all()
        self._message(None, 0)
        self.engine.start_next_round()
        self._begin_countdown()

    def return_to_menu(self) -> None:
        self._cancel_all()
        self._message(None, 0)
        self.engine.return_to_menu()

    # ------------------------------------------------------------------
    # Input collaborator
    # ------------------------------------------------------------------

    def set_direction(self, snake_index: int, direction: Direction) -> None:
        self.engine.set_direction(snake_index, direction)

    def toggle_pause(self) -> bool:
        was_paused = self.engine.paused
        paused = self.engine.toggle_pause()
        if paused and not was_paused:
            self._message("PAUSED", 0)
        elif was_paused and not paused:
            self._message(None, 0)
        return paused

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    @property
    def tick_timer(self) -> IntervalTimer:
        return self._tick_timer

    def _begin_countdown(self) -> None:
        cfg = self.engine.config
        self._countdown_left = cfg.countdown_steps
        if self._countdown_left <= 0:
            self._go()
            return
        self._message(str(self._countdown_left), 0)
        self._countdown_timer.start(
            cfg.countdown_step_ms / 1000.0, self._countdown_step,
        )

    def _countdown_step(self) -> None:
        self._countdown_left -= 1
        if self._countdown_left > 0:
            self._message(str(self._countdown_left), 0)
            return
        self._countdown_timer.cancel()
        self._go()

    def _go(self) -> None:
        self._message("GO!", self.engine.config.go_display_ms)
        self.engine.finish_countdown()
        self._restart_ticks()

    def _restart_ticks(self) -> None:
        self._tick_timer.start(
            self.engine.tick_interval_ms / 1000.0, self._on_tick,
        )

    def _on_tick(self) -> None:
        engine = self.engine
        if engine.phase != MatchPhase.ACTIVE:
            return

        result = engine.step()
        if result.reschedule:
            self._restart_ticks()

        if self._on_render is not None:
            self._on_render(engine.get_state())

        if result.outcome is not None:
            self._tick_timer.cancel()
            self._announce(result.outcome, result.winner)

    def _announce(self, outcome: RoundOutcome, winner: int | None) -> None:
        cfg = self.engine.config
        if outcome == RoundOutcome.GAME_OVER:
            self._message("Game Over!", 0)
            self._later(cfg.game_over_delay_ms, self._finish_match)
        elif outcome == RoundOutcome.DRAW:
            self._message("Draw!", cfg.message_ms)
            self._later(cfg.next_round_delay_ms, self.start_next_round)
        elif outcome == RoundOutcome.MATCH_WON:
            self._message(f"Player {winner + 1} Wins!", 0)
            self._later(cfg.game_over_delay_ms, self._finish_match)
        else:
            self._message(f"Player {winner + 1} scores!", cfg.message_ms)
            self._later(cfg.next_round_delay_ms, self.start_next_round)

    def _finish_match(self) -> None:
        self._message(None, 0)
        self.result = self.engine.match_result()
        logger.info("Match finished: %s", self.result.to_dict())
        if self._on_game_over is not None:
            self._on_game_over(self.result)

    def _later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self._delayed.append(
            self._loop.call_later(delay_ms / 1000.0, callback),
        )

    def _cancel_all(self) -> None:
        self._tick_timer.cancel()
        self._countdown_timer.cancel()
        for handle in self._delayed:
            handle.cancel()
        self._delayed.clear()

    def _message(self, text: str | None, duration_ms: int) -> None:
        if self._on_message is not None:
            self._on_message(text, duration_ms)

    def close(self) -> None:
        """Cancel every outstanding timer."""
        self._cancel_all()
        logger.info("Session closed.")

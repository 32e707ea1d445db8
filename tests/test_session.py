"""Tests for the asyncio session driver and its interval timer."""

from __future__ import annotations

import asyncio

import pytest

from snake_clash.config import GameConfig
from snake_clash.engine import GameEngine, GameMode, MatchPhase
from snake_clash.food import Food
from snake_clash.session import GameSession, IntervalTimer
from snake_clash.snake import Direction

FAST = dict(
    initial_interval_ms=5,
    speed_step_ms=1,
    min_interval_ms=1,
    countdown_step_ms=1,
    go_display_ms=1,
    message_ms=1,
    next_round_delay_ms=1,
    game_over_delay_ms=1,
)


def _fast_engine(**overrides) -> GameEngine:
    return GameEngine(GameConfig(seed=0, **{**FAST, **overrides}))


class TestIntervalTimer:
    @pytest.mark.asyncio
    async def test_fires_repeatedly(self):
        timer = IntervalTimer(asyncio.get_running_loop())
        fired = []
        timer.start(0.001, lambda: fired.append(1))
        await asyncio.sleep(0.05)
        timer.cancel()
        assert len(fired) >= 3
        assert not timer.running

    @pytest.mark.asyncio
    async def test_cancel_stops_fires(self):
        timer = IntervalTimer(asyncio.get_running_loop())
        fired = []
        timer.start(0.001, lambda: fired.append(1))
        await asyncio.sleep(0.02)
        timer.cancel()
        count = len(fired)
        await asyncio.sleep(0.02)
        assert len(fired) == count

    @pytest.mark.asyncio
    async def test_restart_changes_interval(self):
        timer = IntervalTimer(asyncio.get_running_loop())
        timer.start(1.0, lambda: None)
        timer.start(0.5, lambda: None)
        assert timer.interval == 0.5
        assert timer.running
        timer.cancel()

    @pytest.mark.asyncio
    async def test_rejects_non_positive_interval(self):
        timer = IntervalTimer(asyncio.get_running_loop())
        with pytest.raises(ValueError, match="positive"):
            timer.start(0, lambda: None)

    @pytest.mark.asyncio
    async def test_failing_callback_stops_timer(self, caplog):
        timer = IntervalTimer(asyncio.get_running_loop())
        calls = []

        def boom():
            calls.append(1)
            raise RuntimeError("boom")

        timer.start(0.001, boom)
        await asyncio.sleep(0.03)
        assert calls == [1]
        assert not timer.running
        assert "Timer callback failed" in caplog.text


class TestGameSession:
    @pytest.mark.asyncio
    async def test_single_player_game_over(self):
        messages: list[str | None] = []
        done = asyncio.Event()
        results = []

        def on_game_over(result):
            results.append(result)
            done.set()

        session = GameSession(
            _fast_engine(),
            on_message=lambda text, _ms: messages.append(text),
            on_game_over=on_game_over,
        )
        session.start_match(GameMode.SINGLE_PLAYER)
        await asyncio.wait_for(done.wait(), timeout=5)

        assert session.engine.phase == MatchPhase.MATCH_ENDED
        assert results[0].single_player
        assert session.result is results[0]
        shown = [m for m in messages if m is not None]
        assert shown[:4] == ["3", "2", "1", "GO!"]
        assert "Game Over!" in shown
        session.close()

    @pytest.mark.asyncio
    async def test_renders_every_tick(self):
        states = []
        done = asyncio.Event()

        def on_render(state):
            states.append(state)
            if len(states) >= 3:
                done.set()

        session = GameSession(_fast_engine(), on_render=on_render)
        session.start_match(GameMode.TWO_PLAYER_LOCAL)
        await asyncio.wait_for(done.wait(), timeout=5)
        session.close()
        ticks = [s["tick"] for s in states[:3]]
        assert ticks == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_draws_restart_rounds(self):
        draws = []
        done = asyncio.Event()

        def on_message(text, _ms):
            if text == "Draw!":
                draws.append(text)
                if len(draws) == 2:
                    done.set()

        session = GameSession(
            _fast_engine(next_round_delay_ms=200), on_message=on_message,
        )
        session.start_match(GameMode.TWO_PLAYER_LOCAL)
        await asyncio.wait_for(done.wait(), timeout=5)
        session.close()
        assert session.engine.round_number == 2
        assert session.engine.scoreboard.rounds_won == [0, 0]

    @pytest.mark.asyncio
    async def test_match_won_announced(self):
        messages = []
        done = asyncio.Event()

        def on_message(text, _ms):
            messages.append(text)
            if text == "GO!":
                session.set_direction(0, Direction.UP)

        session = GameSession(
            _fast_engine(rows=8, rounds_to_win=1),
            on_message=on_message,
            on_game_over=lambda _result: done.set(),
        )
        session.start_match(GameMode.TWO_PLAYER_LOCAL)
        await asyncio.wait_for(done.wait(), timeout=5)
        assert "Player 2 Wins!" in messages
        assert session.result.winner == 1
        assert session.engine.scoreboard.rounds_won == [0, 1]
        session.close()

    @pytest.mark.asyncio
    async def test_eating_reschedules_tick_timer(self):
        rendered = asyncio.Event()

        def place_food(text, _ms):
            if text == "GO!":
                session.engine.foods[:] = [Food(15, 6)]

        session = GameSession(
            _fast_engine(),
            on_render=lambda _state: rendered.set(),
            on_message=place_food,
        )
        session.start_match(GameMode.SINGLE_PLAYER)
        await asyncio.wait_for(rendered.wait(), timeout=5)
        engine = session.engine
        assert engine.tick_interval_ms < engine.config.initial_interval_ms
        assert session.tick_timer.interval == pytest.approx(
            engine.tick_interval_ms / 1000.0,
        )
        session.close()

    @pytest.mark.asyncio
    async def test_pause_freezes_ticks(self):
        started = asyncio.Event()
        messages = []
        session = GameSession(
            _fast_engine(),
            on_render=lambda _state: started.set(),
            on_message=lambda text, _ms: messages.append(text),
        )
        session.start_match(GameMode.TWO_PLAYER_LOCAL)
        await asyncio.wait_for(started.wait(), timeout=5)

        assert session.toggle_pause() is True
        assert messages[-1] == "PAUSED"
        tick = session.engine.tick
        await asyncio.sleep(0.05)
        assert session.engine.tick == tick
        assert session.tick_timer.running

        assert session.toggle_pause() is False
        assert messages[-1] is None
        await asyncio.sleep(0.05)
        assert session.engine.round_number > 1 or session.engine.tick > tick
        session.close()

    @pytest.mark.asyncio
    async def test_return_to_menu_cancels_timers(self):
        started = asyncio.Event()
        session = GameSession(
            _fast_engine(), on_render=lambda _state: started.set(),
        )
        session.start_match(GameMode.SINGLE_PLAYER)
        await asyncio.wait_for(started.wait(), timeout=5)
        session.return_to_menu()
        assert not session.tick_timer.running
        assert session.engine.phase == MatchPhase.IDLE
        tick = session.engine.tick
        await asyncio.sleep(0.03)
        assert session.engine.tick == tick
        assert session.result is None

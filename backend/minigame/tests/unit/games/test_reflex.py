import pytest

from minigame.logic.enums import ReflexPhase
from minigame.logic.games.reflex import ReflexGame
from minigame.logic.input import KeyPress
from minigame.logic.results import ReflexResult
from minigame.logic.settings import GameSettings

FIXED_DELAY = GameSettings(reflex_min_delay_seconds=2.0, reflex_max_delay_seconds=2.0)


@pytest.fixture
def game(scheduler, display, input_bus, rng):
    game = ReflexGame(scheduler, display, input_bus, settings=FIXED_DELAY, rng=rng)
    game.start()
    return game


def _react(game, scheduler, latency_seconds):
    game.trigger()
    scheduler.advance(2.0)
    assert game.phase is ReflexPhase.READY
    scheduler.advance(latency_seconds)
    game.trigger()


class TestReflexPhases:
    def test_starts_idle(self, game, display):
        assert game.phase is ReflexPhase.IDLE
        assert display.texts["reflex-text"] == "Press Space to start"
        assert display.has_class("reflex-zone", "idle")

    def test_trigger_arms_waiting(self, game, display):
        game.trigger()

        assert game.phase is ReflexPhase.WAITING
        assert game.pending_timer_count == 1
        assert display.has_class("reflex-zone", "waiting")
        assert not display.has_class("reflex-zone", "idle")

    def test_delay_elapses_to_ready(self, game, scheduler, display):
        game.trigger()
        scheduler.advance(1.5)
        assert game.phase is ReflexPhase.WAITING

        scheduler.advance(0.5)
        assert game.phase is ReflexPhase.READY
        assert display.texts["reflex-text"] == "SPACE!"

    def test_trigger_while_ready_records_latency(self, game, scheduler, display):
        _react(game, scheduler, 0.25)

        assert game.phase is ReflexPhase.RESULT
        assert game.samples == (250,)
        assert display.texts["reflex-time"] == "250ms"
        assert display.texts["reflex-best"] == "Best: 250ms"

    def test_result_rearms_on_next_trigger(self, game, scheduler):
        _react(game, scheduler, 0.3)
        game.trigger()
        assert game.phase is ReflexPhase.WAITING

    def test_space_key_drives_trigger(self, game, input_bus):
        input_bus.dispatch(KeyPress(key=" "))
        assert game.phase is ReflexPhase.WAITING

    def test_other_keys_ignored(self, game, input_bus):
        input_bus.dispatch(KeyPress(key="x"))
        assert game.phase is ReflexPhase.IDLE

    def test_delay_drawn_within_range(self, scheduler, display, input_bus, rng):
        game = ReflexGame(scheduler, display, input_bus, rng=rng)
        game.start()
        game.trigger()

        scheduler.advance(1.49)
        assert game.phase is ReflexPhase.WAITING
        scheduler.advance(5.0 - 1.49)
        assert game.phase is ReflexPhase.READY


class TestReflexFalseStart:
    def test_trigger_while_waiting_is_too_early(self, game, display):
        game.trigger()
        game.trigger()

        assert game.phase is ReflexPhase.TOO_EARLY
        assert game.samples == ()
        assert game.false_starts == 1
        assert display.texts["reflex-text"] == "Too early!"

    def test_too_early_cancels_pending_delay(self, game, scheduler):
        game.trigger()
        game.trigger()
        scheduler.advance(10.0)

        assert game.phase is ReflexPhase.TOO_EARLY
        assert game.pending_timer_count == 0

    def test_retry_after_too_early(self, game, scheduler):
        game.trigger()
        game.trigger()
        _react(game, scheduler, 0.2)

        assert game.samples == (200,)
        assert game.false_starts == 1


class TestReflexResult:
    def test_two_samples_give_best_and_mean(self, game, scheduler):
        _react(game, scheduler, 0.2)
        _react(game, scheduler, 0.3)

        result = game.stop()

        assert result == ReflexResult(best_latency_ms=200, avg_latency_ms=250, attempts=2, false_starts=0)

    def test_mean_rounds_half_up(self, game, scheduler):
        _react(game, scheduler, 0.2)
        _react(game, scheduler, 0.201)

        result = game.stop()

        assert result.avg_latency_ms == 201

    def test_no_samples_reports_zeros(self, game):
        result = game.stop()

        assert result == ReflexResult(best_latency_ms=0, avg_latency_ms=0, attempts=0, false_starts=0)

    def test_false_starts_reported_separately(self, game, scheduler):
        game.trigger()
        game.trigger()
        _react(game, scheduler, 0.4)

        result = game.stop()

        assert result.attempts == 1
        assert result.false_starts == 1

    def test_stop_cancels_pending_timer(self, game, scheduler):
        game.trigger()
        game.stop()
        scheduler.advance(10.0)

        assert game.phase is ReflexPhase.WAITING
        assert game.pending_timer_count == 0

    def test_restart_resets_counters(self, game, scheduler):
        _react(game, scheduler, 0.2)
        game.stop()
        game.start()

        assert game.samples == ()
        assert game.best_ms is None
        assert game.phase is ReflexPhase.IDLE

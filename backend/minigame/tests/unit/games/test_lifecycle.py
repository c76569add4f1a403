"""Lifecycle contract shared by every registered game."""

import pytest

from minigame.logic.enums import GameId
from minigame.logic.games.registry import GAME_TYPES, build_games
from minigame.logic.input import KeyPress, TextSubmit
from minigame.logic.results import session_result_adapter

GAME_IDS = list(GameId)


@pytest.fixture(params=GAME_IDS, ids=[game_id.value for game_id in GAME_IDS])
def game(request, scheduler, display, input_bus, rng):
    return GAME_TYPES[request.param](scheduler, display, input_bus, rng=rng)


class TestRegistry:
    def test_every_game_id_registered(self):
        assert set(GAME_TYPES) == set(GameId)
        for game_id, game_type in GAME_TYPES.items():
            assert game_type.game_id is game_id
            assert game_type.label

    def test_build_games_shares_collaborators(self, scheduler, display, input_bus):
        games = build_games(scheduler, display, input_bus)
        assert set(games) == set(GameId)

    def test_build_games_subset(self, scheduler, display, input_bus):
        games = build_games(scheduler, display, input_bus, enabled=[GameId.SNAKE])
        assert list(games) == [GameId.SNAKE]


class TestLifecycle:
    def test_stop_without_start_returns_none(self, game):
        assert game.stop() is None

    def test_start_attaches_and_stop_detaches(self, game, input_bus):
        game.start()
        assert game.active
        assert input_bus.listener_count == 1

        game.stop()
        assert not game.active
        assert input_bus.listener_count == 0

    def test_duplicate_start_is_noop(self, game, input_bus):
        game.start()
        game.start()
        assert input_bus.listener_count == 1

    def test_second_stop_returns_none(self, game):
        game.start()
        assert game.stop() is not None
        assert game.stop() is None

    def test_stop_leaves_no_pending_timers(self, game, scheduler, input_bus):
        game.start()
        for event in (KeyPress(key=" "), TextSubmit(text="1"), KeyPress(key="ArrowUp"), TextSubmit(text="word")):
            input_bus.dispatch(event)
        scheduler.advance(0.2)

        game.stop()

        assert game.pending_timer_count == 0
        assert scheduler.pending == 0

    def test_result_matches_game_and_validates(self, game):
        game.start()
        result = game.stop()

        assert result.game_id is game.game_id
        assert session_result_adapter.validate_python(result.model_dump()) == result

    def test_input_after_stop_is_ignored(self, game, input_bus):
        game.start()
        first = game.stop()
        input_bus.dispatch(KeyPress(key=" "))
        input_bus.dispatch(TextSubmit(text="1"))

        game.start()
        assert game.stop() == first

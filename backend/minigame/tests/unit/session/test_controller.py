import asyncio
import json

import pytest

from minigame.logic.enums import GameId
from minigame.logic.games.registry import build_games
from minigame.logic.input import KeyPress, TextSubmit
from minigame.logic.results import ArithmeticResult
from minigame.session.controller import DONE_BANNER, SessionController
from minigame.stats.aggregator import StatisticsAggregator
from minigame.tests.mocks import QUIET_FRAMES, FailingStorage, InMemoryStorage, RecordingFocus


class GatedStorage(InMemoryStorage):
    """Storage whose load blocks until the test opens the gate."""

    def __init__(self, content=None):
        super().__init__(content)
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    async def load(self):
        self.entered.set()
        await self.gate.wait()
        return await super().load()


def _pick(game_id):
    def select(last_game_id, game_ids, rng):
        return game_id

    return select


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def focus():
    return RecordingFocus()


@pytest.fixture
def games(scheduler, display, input_bus, rng):
    return build_games(scheduler, display, input_bus, settings=QUIET_FRAMES, rng=rng)


@pytest.fixture
def make_controller(games, display, focus, input_bus, rng):
    def factory(storage, **kwargs):
        return SessionController(games, StatisticsAggregator(storage), display, focus, input_bus, rng=rng, **kwargs)

    return factory


@pytest.fixture
def controller(make_controller, storage):
    return make_controller(storage)


class TestShow:
    async def test_show_starts_one_game(self, controller, display, input_bus):
        game_id = await controller.on_show()

        assert game_id in GameId
        assert controller.active_game_id is game_id
        assert controller.get_game(game_id).active
        assert display.current_game is game_id
        assert input_bus.listener_count == 1

    async def test_show_displays_label_and_summary(self, make_controller, storage, display):
        storage.content = json.dumps({"snake": {"games_played": 4, "high_score": 9}})
        controller = make_controller(storage, select=_pick(GameId.SNAKE))

        await controller.on_show()

        assert display.title == "Snake"
        assert display.summary == "High score: 9 | Games: 4"

    async def test_duplicate_show_is_ignored(self, controller, display, input_bus):
        first = await controller.on_show()
        second = await controller.on_show()

        assert second is None
        assert controller.active_game_id is first
        assert display.count("show_game") == 1
        assert input_bus.listener_count == 1

    async def test_concurrent_shows_start_once(self, controller, display):
        results = await asyncio.gather(controller.on_show(), controller.on_show(), controller.on_show())

        assert sum(result is not None for result in results) == 1
        assert display.count("show_game") == 1

    async def test_stats_loaded_before_first_show_only(self, controller, storage):
        for _ in range(3):
            await controller.on_show()
            controller.on_hide()
        await controller.drain()

        assert storage.load_calls == 1

    async def test_never_same_game_twice_in_a_row(self, controller):
        previous = None
        for _ in range(40):
            game_id = await controller.on_show()
            assert game_id is not previous
            previous = game_id
            controller.on_hide()
        await controller.drain()

    async def test_show_clears_done_banner(self, controller, display):
        controller.notify_task_done()
        assert display.has_class(DONE_BANNER, "visible")

        await controller.on_show()

        assert not display.has_class(DONE_BANNER, "visible")


class TestHide:
    async def test_hide_stops_records_and_saves(self, make_controller, storage, input_bus):
        controller = make_controller(storage, select=_pick(GameId.ARITHMETIC))
        await controller.on_show()
        game = controller.get_game(GameId.ARITHMETIC)
        for correct in (True, True, True, False):
            answer = game.challenge.answer
            input_bus.dispatch(TextSubmit(text=str(answer if correct else answer + 1)))

        result = controller.on_hide()
        await controller.drain()

        assert result == ArithmeticResult(correct=3, total=4, best_streak=3)
        assert controller.active_game_id is None
        assert input_bus.listener_count == 0
        assert json.loads(storage.content)["arithmetic"] == {"total_problems": 4, "correct": 3, "best_streak": 3}

    async def test_duplicate_hide_stops_once(self, controller, display, focus, storage):
        await controller.on_show()

        first = controller.on_hide()
        second = controller.on_hide()
        await controller.drain()

        assert first is not None
        assert second is None
        assert storage.save_calls == 1
        assert display.count("show_idle") == 2
        assert focus.restores == 2

    async def test_hide_without_show_is_harmless(self, controller, display, focus, storage):
        assert controller.on_hide() is None

        assert display.count("show_idle") == 1
        assert focus.restores == 1
        assert controller.pending_saves == 0
        assert storage.save_calls == 0

    async def test_hide_remembers_last_game(self, controller):
        game_id = await controller.on_show()
        controller.on_hide()
        await controller.drain()

        assert controller.last_game_id is game_id
        assert controller.active_game_id is None

    async def test_save_failure_does_not_break_sessions(self, make_controller):
        controller = make_controller(FailingStorage(fail_load=False, fail_save=True))

        await controller.on_show()
        controller.on_hide()
        await controller.drain()

        assert await controller.on_show() is not None

    async def test_load_failure_still_shows(self, make_controller, display):
        controller = make_controller(FailingStorage(fail_load=True, fail_save=False))

        game_id = await controller.on_show()

        assert game_id is not None
        assert display.current_game is game_id


class TestHideDuringLoad:
    async def test_hide_while_loading_abandons_show(self, make_controller, display, input_bus):
        storage = GatedStorage()
        controller = make_controller(storage)

        show = asyncio.create_task(controller.on_show())
        await storage.entered.wait()
        controller.on_hide()
        storage.gate.set()

        assert await show is None
        assert controller.active_game_id is None
        assert display.count("show_game") == 0
        assert input_bus.listener_count == 0

    async def test_show_after_abandoned_show_works(self, make_controller):
        storage = GatedStorage()
        controller = make_controller(storage)

        show = asyncio.create_task(controller.on_show())
        await storage.entered.wait()
        controller.on_hide()
        storage.gate.set()
        await show

        assert await controller.on_show() is not None


class TestInput:
    async def test_escape_hides(self, controller, display):
        await controller.on_show()

        controller.handle_input(KeyPress(key="Escape"))

        assert controller.active_game_id is None
        assert display.count("show_idle") == 1
        await controller.drain()

    async def test_other_input_reaches_active_game(self, make_controller, storage):
        controller = make_controller(storage, select=_pick(GameId.REFLEX))
        await controller.on_show()

        controller.handle_input(KeyPress(key=" "))

        assert controller.get_game(GameId.REFLEX).phase.value == "waiting"

    def test_input_while_idle_is_dropped(self, controller, input_bus):
        controller.handle_input(TextSubmit(text="12"))
        assert input_bus.listener_count == 0


class TestNotify:
    def test_notify_shows_banner_without_touching_session(self, controller, display):
        controller.notify_task_done()

        assert display.has_class(DONE_BANNER, "visible")
        assert controller.active_game_id is None

    async def test_notify_during_game_keeps_game_running(self, controller, display):
        game_id = await controller.on_show()

        controller.notify_task_done()

        assert controller.active_game_id is game_id
        assert display.has_class(DONE_BANNER, "visible")

"""Test doubles for the scheduler, display, storage and focus collaborators."""

from __future__ import annotations

import heapq
import itertools
import json
import random
from typing import TYPE_CHECKING, Any

from minigame.logic.display import DisplaySurface
from minigame.logic.settings import GameSettings
from minigame.logic.timer import Scheduler
from minigame.messaging.protocol import ConnectionProtocol
from minigame.session.focus import FocusRestorer

if TYPE_CHECKING:
    from collections.abc import Callable

    from minigame.logic.enums import GameId
    from minigame.logic.games.snake import SnakeBoard


class _ManualHandle:
    __slots__ = ("cancelled",)

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> bool:
        self.cancelled = True
        return True


class ManualScheduler(Scheduler):
    """Scheduler with an explicit clock. Callbacks run only inside advance()."""

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, _ManualHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle()
        heapq.heappush(self._queue, (self._now + delay, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in deadline order."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if not handle.cancelled:
                callback()
        self._now = target


class RecordingDisplay(DisplaySurface):
    """Display that keeps the latest state of every element plus a call log."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.texts: dict[str, str] = {}
        self.classes: dict[str, set[str]] = {}
        self.boards: dict[str, SnakeBoard] = {}
        self.current_game: GameId | None = None
        self.title: str | None = None
        self.summary: str | None = None

    def show_game(self, game_id: GameId, label: str, summary: str) -> None:
        self.calls.append(("show_game", game_id))
        self.current_game = game_id
        self.title = label
        self.summary = summary

    def show_idle(self) -> None:
        self.calls.append(("show_idle", None))
        self.current_game = None

    def set_text(self, element: str, text: str) -> None:
        self.texts[element] = text

    def toggle_class(self, element: str, class_name: str, *, enabled: bool) -> None:
        classes = self.classes.setdefault(element, set())
        if enabled:
            classes.add(class_name)
        else:
            classes.discard(class_name)

    def draw_board(self, element: str, board: SnakeBoard) -> None:
        self.boards[element] = board

    def has_class(self, element: str, class_name: str) -> bool:
        return class_name in self.classes.get(element, set())

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


class InMemoryStorage:
    def __init__(self, content: str | None = None) -> None:
        self.content = content
        self.load_calls = 0
        self.save_calls = 0

    async def load(self) -> str | None:
        self.load_calls += 1
        return self.content

    async def save(self, content: str) -> None:
        self.save_calls += 1
        self.content = content


class FailingStorage(InMemoryStorage):
    """Storage whose reads and/or writes raise OSError."""

    def __init__(self, *, fail_load: bool = True, fail_save: bool = True, content: str | None = None) -> None:
        super().__init__(content)
        self._fail_load = fail_load
        self._fail_save = fail_save

    async def load(self) -> str | None:
        self.load_calls += 1
        if self._fail_load:
            raise OSError("disk unavailable")
        return self.content

    async def save(self, content: str) -> None:
        self.save_calls += 1
        if self._fail_save:
            raise OSError("disk full")
        self.content = content


class RecordingFocus(FocusRestorer):
    def __init__(self) -> None:
        self.captures = 0
        self.restores = 0

    async def capture(self) -> None:
        self.captures += 1

    def restore(self) -> None:
        self.restores += 1


class MockConnection(ConnectionProtocol):
    """In-memory connection collecting sent messages."""

    def __init__(self, connection_id: str = "conn-1") -> None:
        self._connection_id = connection_id
        self.sent: list[str] = []
        self.closed: tuple[int, str] | None = None

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_text(self, data: str) -> None:
        self.sent.append(data)

    async def receive_text(self) -> str:
        raise ConnectionError("mock connection has no inbound traffic")

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = (code, reason)

    @property
    def messages(self) -> list[dict[str, Any]]:
        return [json.loads(raw) for raw in self.sent]


class ScriptedRandom(random.Random):
    """Random whose randrange answers come from a script first, then from the seeded generator."""

    def __init__(self, seed: int = 0) -> None:
        super().__init__(seed)
        self.script: list[int] = []

    def randrange(self, *args: Any, **kwargs: Any) -> int:
        if self.script:
            return self.script.pop(0)
        return super().randrange(*args, **kwargs)


# Frames far apart so logic tests drive snake ticks explicitly.
QUIET_FRAMES = GameSettings(frame_interval_seconds=3600.0)

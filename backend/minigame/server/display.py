"""
DisplaySurface that forwards display commands to connected overlay clients.

Game code calls the surface synchronously from timer callbacks and input
handlers, so commands are queued per connection and drained by a sender task
owned by the websocket endpoint.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from minigame.logic.display import DisplaySurface
from minigame.messaging.types import (
    DrawBoardMessage,
    SetTextMessage,
    ShowGameMessage,
    ShowIdleMessage,
    ToggleClassMessage,
)

if TYPE_CHECKING:
    from minigame.logic.enums import GameId
    from minigame.logic.games.snake import SnakeBoard
    from minigame.messaging.types import DisplayMessage

logger = structlog.get_logger()

_QUEUE_SIZE = 512


class DisplayHub(DisplaySurface):
    def __init__(self, queue_size: int = _QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._queues: dict[str, asyncio.Queue[dict[str, Any]]] = {}
        self._scene: ShowGameMessage | ShowIdleMessage = ShowIdleMessage()
        self._boards: dict[str, SnakeBoard] = {}

    @property
    def connection_count(self) -> int:
        return len(self._queues)

    @property
    def scene(self) -> ShowGameMessage | ShowIdleMessage:
        return self._scene

    def register(self, connection_id: str) -> asyncio.Queue[dict[str, Any]]:
        """Add a client. Its queue starts with the current scene so late joiners are in sync."""
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self._queue_size)
        queue.put_nowait(self._scene.model_dump(mode="json"))
        self._queues[connection_id] = queue
        return queue

    def unregister(self, connection_id: str) -> None:
        self._queues.pop(connection_id, None)

    def show_game(self, game_id: GameId, label: str, summary: str) -> None:
        self._boards.clear()
        self._scene = ShowGameMessage(game_id=game_id, label=label, summary=summary)
        self._broadcast(self._scene)

    def show_idle(self) -> None:
        self._boards.clear()
        self._scene = ShowIdleMessage()
        self._broadcast(self._scene)

    def set_text(self, element: str, text: str) -> None:
        self._broadcast(SetTextMessage(element=element, text=text))

    def toggle_class(self, element: str, class_name: str, *, enabled: bool) -> None:
        self._broadcast(ToggleClassMessage(element=element, class_name=class_name, enabled=enabled))

    def draw_board(self, element: str, board: SnakeBoard) -> None:
        # Frames arrive at display rate; only changed boards go out.
        if self._boards.get(element) == board:
            return
        self._boards[element] = board
        self._broadcast(DrawBoardMessage(element=element, board=board))

    def _broadcast(self, message: DisplayMessage) -> None:
        if not self._queues:
            return
        payload = message.model_dump(mode="json")
        for connection_id, queue in self._queues.items():
            try:
                queue.put_nowait(payload)
            except asyncio.QueueFull:
                logger.warning("display queue full, dropping command", connection_id=connection_id, type=message.type)

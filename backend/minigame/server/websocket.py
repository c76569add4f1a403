from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from minigame.messaging.protocol import ConnectionProtocol
from minigame.messaging.types import ErrorCode, ErrorMessage

logger = structlog.get_logger()

if TYPE_CHECKING:
    from minigame.messaging.router import SignalRouter
    from minigame.server.display import DisplayHub

# Disconnect after this many consecutive undecodable frames
_MAX_DECODE_ERRORS = 5


class WebSocketConnection(ConnectionProtocol):
    def __init__(self, websocket: WebSocket, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_text(self, data: str) -> None:
        try:
            await self._websocket.send_text(data)
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def receive_text(self) -> str:
        try:
            return await self._websocket.receive_text()
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect, RuntimeError):
            await self._websocket.close(code=code, reason=reason)


async def _pump_display(connection: ConnectionProtocol, queue: asyncio.Queue) -> None:
    """Forward queued display commands until the connection goes away."""
    while True:
        payload = await queue.get()
        try:
            await connection.send_message(payload)
        except (ConnectionError, RuntimeError):
            return


async def websocket_endpoint(websocket: WebSocket, router: SignalRouter, hub: DisplayHub) -> None:
    await websocket.accept()

    connection = WebSocketConnection(websocket)
    structlog.contextvars.bind_contextvars(connection_id=connection.connection_id)
    logger.info("websocket connected")

    queue = hub.register(connection.connection_id)
    sender = asyncio.create_task(_pump_display(connection, queue))
    decode_errors = 0

    try:
        while True:
            try:
                data = await connection.receive_message()
            except ValueError as e:
                decode_errors += 1
                logger.warning("decode error", error=str(e), strikes=decode_errors)
                await connection.send_message(
                    ErrorMessage(code=ErrorCode.INVALID_MESSAGE, message=str(e)).model_dump(mode="json"),
                )
                if decode_errors >= _MAX_DECODE_ERRORS:
                    logger.info("too many decode errors, disconnecting")
                    await connection.close(code=4004, reason="too_many_decode_errors")
                    return
                continue

            decode_errors = 0
            await router.handle_message(connection, data)
    except (WebSocketDisconnect, RuntimeError, ConnectionError):  # fmt: skip
        pass
    finally:
        hub.unregister(connection.connection_id)
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sender
        logger.info("websocket disconnected")
        structlog.contextvars.clear_contextvars()

from __future__ import annotations

import contextlib
import json
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute

from minigame.logic.games.registry import build_games
from minigame.logic.input import InputBus
from minigame.logic.timer import AsyncioScheduler
from minigame.messaging.router import SignalRouter
from minigame.messaging.types import parse_host_signal
from minigame.server.display import DisplayHub
from minigame.server.settings import ServerSettings
from minigame.server.websocket import websocket_endpoint
from minigame.session.controller import SessionController
from minigame.session.focus import AppleScriptFocusRestorer, NullFocusRestorer
from minigame.stats.aggregator import StatisticsAggregator
from shared.logging import setup_logging
from shared.storage import LocalStatsStorage

logger = structlog.get_logger()

if TYPE_CHECKING:
    import random
    from collections.abc import AsyncIterator

    from starlette.requests import Request
    from starlette.websockets import WebSocket

    from minigame.logic.settings import GameSettings
    from minigame.logic.timer import Scheduler
    from minigame.session.focus import FocusRestorer
    from shared.storage import StatsStorage

_MAX_REQUEST_BODY_SIZE = 1024


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def status(request: Request) -> JSONResponse:
    controller: SessionController = request.app.state.controller
    router: SignalRouter = request.app.state.router
    hub: DisplayHub = request.app.state.hub
    return JSONResponse(
        {
            "status": "ok",
            "active_game": controller.active_game_id,
            "last_game": controller.last_game_id,
            "sleeping": router.sleeping,
            "sleep_remaining_seconds": round(router.sleep_remaining_seconds),
            "connections": hub.connection_count,
        },
    )


async def stats(request: Request) -> JSONResponse:
    aggregator: StatisticsAggregator = request.app.state.stats
    await aggregator.load()
    return JSONResponse(
        {
            game_id.value: {**aggregate.model_dump(mode="json"), "summary": aggregator.summary(game_id)}
            for game_id, aggregate in aggregator.snapshot().items()
        },
    )


async def post_signal(request: Request) -> JSONResponse:
    router: SignalRouter = request.app.state.router

    try:
        raw_body = await request.body()
        if len(raw_body) > _MAX_REQUEST_BODY_SIZE:
            return JSONResponse({"error": "Request body too large"}, status_code=413)
        body = json.loads(raw_body)
        if not isinstance(body, dict):
            raise TypeError("signal body must be a JSON object")
        signal = parse_host_signal(body)
    except (ValueError, TypeError, UnicodeDecodeError, ValidationError):  # fmt: skip
        return JSONResponse({"error": "Invalid signal"}, status_code=400)

    accepted = await router.dispatch(signal)
    return JSONResponse({"signal": signal.signal.value, "accepted": accepted})


def _default_focus(settings: ServerSettings) -> FocusRestorer:
    if settings.restore_focus and AppleScriptFocusRestorer.is_supported():
        return AppleScriptFocusRestorer(own_bundle_id=settings.own_bundle_id)
    return NullFocusRestorer()


def create_app(
    settings: ServerSettings | None = None,
    *,
    storage: StatsStorage | None = None,
    focus: FocusRestorer | None = None,
    scheduler: Scheduler | None = None,
    game_settings: GameSettings | None = None,
    rng: random.Random | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ServerSettings()

    if storage is None:  # pragma: no cover
        storage = LocalStatsStorage(settings.stats_file)
    if focus is None:
        focus = _default_focus(settings)

    hub = DisplayHub()
    input_bus = InputBus()
    games = build_games(scheduler or AsyncioScheduler(), hub, input_bus, settings=game_settings, rng=rng)
    aggregator = StatisticsAggregator(storage)
    controller = SessionController(games, aggregator, hub, focus, input_bus, rng=rng)
    router = SignalRouter(controller, focus)

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(websocket, router, hub)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
        Route("/stats", stats, methods=["GET"]),
        Route("/signals", post_signal, methods=["POST"]),
        WebSocketRoute("/ws", ws_endpoint),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        yield
        # Stop a running game so its session still counts, then flush stats.
        controller.on_hide()
        await controller.drain()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.controller = controller
    app.state.router = router
    app.state.hub = hub
    app.state.stats = aggregator

    logger.info("overlay server ready", games=[game_id.value for game_id in games])
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    settings = ServerSettings()
    setup_logging(log_dir=settings.log_dir, retention=settings.log_retention)
    return create_app(settings=settings)


def main() -> None:  # pragma: no cover
    import uvicorn  # noqa: PLC0415

    settings = ServerSettings()
    uvicorn.run(
        "minigame.server.app:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )

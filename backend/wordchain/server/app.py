from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute

from shared.logging import setup_logging
from wordchain.logic.generator import ChainGenerator
from wordchain.logic.graph import build_word_graph, load_word_pairs
from wordchain.messaging.router import MessageRouter
from wordchain.server.settings import GameServerSettings
from wordchain.server.websocket import websocket_endpoint
from wordchain.session.manager import GameCoordinator

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request
    from starlette.websockets import WebSocket


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def status(request: Request) -> JSONResponse:
    coordinator: GameCoordinator = request.app.state.coordinator
    session = coordinator.session
    return JSONResponse(
        {
            "status": "ok",
            "players": coordinator.player_count,
            "current_round": session.current_round,
            "total_rounds": session.total_rounds,
            "phase": session.phase.value,
        },
    )


def create_coordinator(settings: GameServerSettings) -> GameCoordinator:
    """Load the word pairs and build a coordinator around them."""
    graph = build_word_graph(load_word_pairs(settings.words_path))
    logger.info("word graph loaded", words=len(graph), path=settings.words_path)
    generator = ChainGenerator(graph, max_attempts=settings.game.max_chain_attempts)
    return GameCoordinator(generator, settings=settings.game)


def create_app(
    settings: GameServerSettings | None = None,
    coordinator: GameCoordinator | None = None,
    message_router: MessageRouter | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = GameServerSettings()

    if coordinator is None:
        coordinator = create_coordinator(settings)

    if message_router is None:
        message_router = MessageRouter(coordinator)

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(websocket, message_router)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
        WebSocketRoute("/ws", ws_endpoint),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        yield
        coordinator.cancel_pending_transitions()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.coordinator = coordinator

    logger.info("word chain server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    settings = GameServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)

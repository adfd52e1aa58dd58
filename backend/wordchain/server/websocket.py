from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from wordchain.messaging.encoder import DecodeError, decode
from wordchain.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()

if TYPE_CHECKING:
    from wordchain.messaging.router import MessageRouter


def _new_player_id() -> str:
    return uuid4().hex[:12]


class WebSocketConnection(ConnectionProtocol):
    def __init__(self, websocket: WebSocket, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._connection_id = connection_id or _new_player_id()

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_text(self, data: str) -> None:
        try:
            await self._websocket.send_text(data)
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def receive_text(self) -> str:
        """Return the next text frame; binary frames raise DecodeError and leave the socket open."""
        try:
            message = await self._websocket.receive()
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None
        if message["type"] == "websocket.disconnect":
            raise ConnectionError("WebSocket already disconnected")
        text = message.get("text")
        if text is None:
            raise DecodeError("binary frames are not supported")
        return text

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect):
            await self._websocket.close(code=code, reason=reason)


async def websocket_endpoint(websocket: WebSocket, router: MessageRouter) -> None:
    await websocket.accept()

    connection = WebSocketConnection(websocket)
    structlog.contextvars.bind_contextvars(connection_id=connection.connection_id)
    logger.info("websocket connected")
    await router.handle_connect(connection)

    try:
        while True:
            try:
                data = decode(await connection.receive_text())
            except DecodeError as e:
                # malformed frames are dropped; the connection stays open
                logger.warning("decode error", error=str(e))
                continue
            await router.handle_message(connection, data)
    except (WebSocketDisconnect, RuntimeError, ConnectionError):
        pass
    finally:
        logger.info("websocket disconnected")
        await router.handle_disconnect(connection)
        structlog.contextvars.clear_contextvars()

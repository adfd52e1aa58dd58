"""Unit tests for WebSocketConnection wrapper class."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.websockets import WebSocketDisconnect

from wordchain.messaging.encoder import DecodeError
from wordchain.server.websocket import WebSocketConnection


class TestWebSocketConnection:
    def test_generates_connection_id(self):
        conn = WebSocketConnection(MagicMock())

        assert conn.connection_id
        assert conn.connection_id != WebSocketConnection(MagicMock()).connection_id

    async def test_send_message_encodes_json_text(self):
        mock_ws = MagicMock()
        mock_ws.send_text = AsyncMock()
        conn = WebSocketConnection(mock_ws, connection_id="test-conn")

        await conn.send_message({"type": "roundComplete"})

        mock_ws.send_text.assert_awaited_once_with('{"type":"roundComplete"}')

    async def test_send_text_converts_disconnect_to_connection_error(self):
        mock_ws = MagicMock()
        mock_ws.send_text = AsyncMock(side_effect=WebSocketDisconnect())
        conn = WebSocketConnection(mock_ws, connection_id="test-conn")

        with pytest.raises(ConnectionError, match="WebSocket already disconnected"):
            await conn.send_text("{}")

    async def test_receive_text_returns_text_frame(self):
        mock_ws = MagicMock()
        mock_ws.receive = AsyncMock(return_value={"type": "websocket.receive", "text": '{"type":"join"}'})
        conn = WebSocketConnection(mock_ws, connection_id="test-conn")

        assert await conn.receive_text() == '{"type":"join"}'

    async def test_binary_frame_raises_decode_error(self):
        mock_ws = MagicMock()
        mock_ws.receive = AsyncMock(return_value={"type": "websocket.receive", "bytes": b"\x01\x02"})
        conn = WebSocketConnection(mock_ws, connection_id="test-conn")

        with pytest.raises(DecodeError, match="binary frames"):
            await conn.receive_text()

    async def test_disconnect_message_raises_connection_error(self):
        mock_ws = MagicMock()
        mock_ws.receive = AsyncMock(return_value={"type": "websocket.disconnect", "code": 1001})
        conn = WebSocketConnection(mock_ws, connection_id="test-conn")

        with pytest.raises(ConnectionError, match="WebSocket already disconnected"):
            await conn.receive_text()

    async def test_receive_converts_disconnect_to_connection_error(self):
        mock_ws = MagicMock()
        mock_ws.receive = AsyncMock(side_effect=WebSocketDisconnect())
        conn = WebSocketConnection(mock_ws, connection_id="test-conn")

        with pytest.raises(ConnectionError, match="WebSocket already disconnected"):
            await conn.receive_text()

    async def test_close_suppresses_disconnect(self):
        mock_ws = MagicMock()
        mock_ws.close = AsyncMock(side_effect=WebSocketDisconnect())
        conn = WebSocketConnection(mock_ws, connection_id="test-conn")

        await conn.close()

"""Abstract connection protocol for JSON text communication."""

from abc import ABC, abstractmethod
from typing import Any

from wordchain.messaging.encoder import decode, encode


class ConnectionProtocol(ABC):
    """
    Abstract interface for a client connection.

    This abstraction allows message handling logic to be tested
    without real WebSocket connections. Uses JSON text frames.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Unique identifier for this connection; doubles as the player id."""
        ...

    @abstractmethod
    async def send_text(self, data: str) -> None:
        """
        Send a raw text frame to the client.
        """
        ...

    @abstractmethod
    async def receive_text(self) -> str:
        """
        Receive a raw text frame from the client.
        """
        ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None:
        """
        Close the connection.
        """
        ...

    async def send_message(self, data: dict[str, Any]) -> None:
        """
        Send a message to the client using JSON encoding.
        """
        await self.send_text(encode(data))

    async def receive_message(self) -> dict[str, Any]:
        """
        Receive a message from the client using JSON decoding.
        """
        raw = await self.receive_text()
        return decode(raw)

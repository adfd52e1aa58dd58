from __future__ import annotations

from typing import TYPE_CHECKING, Any, assert_never

import structlog
from pydantic import ValidationError

from wordchain.messaging.types import (
    GuessMessage,
    JoinMessage,
    RevealLetterMessage,
    UpdateNameMessage,
    parse_client_message,
)

if TYPE_CHECKING:
    from wordchain.messaging.protocol import ConnectionProtocol
    from wordchain.session.manager import GameCoordinator

logger = structlog.get_logger()


class MessageRouter:
    """
    Routes incoming messages to appropriate handlers.

    This class contains pure business logic and can be tested
    without real WebSocket connections.
    """

    def __init__(self, coordinator: GameCoordinator) -> None:
        self._coordinator = coordinator

    async def handle_message(
        self,
        connection: ConnectionProtocol,
        raw_message: dict[str, Any],
    ) -> None:
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            # malformed or unknown messages are dropped without a reply
            logger.warning("invalid message", connection_id=connection.connection_id, error=str(e))
            return

        if isinstance(message, JoinMessage):
            await self._coordinator.join(connection, message.name)
        elif isinstance(message, UpdateNameMessage):
            await self._coordinator.update_name(connection, message.name)
        elif isinstance(message, RevealLetterMessage):
            await self._coordinator.reveal_letter(connection, message.word_index)
        elif isinstance(message, GuessMessage):
            await self._coordinator.guess(connection, message.word_index, message.guess)
        else:
            assert_never(message)

    async def handle_connect(self, connection: ConnectionProtocol) -> None:
        await self._coordinator.connect(connection)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        await self._coordinator.disconnect(connection)

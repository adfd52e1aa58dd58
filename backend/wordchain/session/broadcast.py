"""Fan-out of public state and per-player private state."""

from __future__ import annotations

import contextlib
import time
from typing import TYPE_CHECKING

import structlog

from wordchain.messaging.types import (
    GameStateMessage,
    LogMessage,
    PlayerInfo,
    PlayerStateMessage,
)

if TYPE_CHECKING:
    from wordchain.messaging.types import WireModel
    from wordchain.session.models import GameSession, Player
    from wordchain.session.registry import PlayerRegistry

logger = structlog.get_logger()


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class Broadcaster:
    """Send messages to every registered player or to a single one.

    Sends are best-effort: a peer that fails mid-send is left for the
    connection-closed path to remove from the registry.
    """

    def __init__(self, registry: PlayerRegistry) -> None:
        self._registry = registry

    async def send_to(self, player: Player, message: WireModel) -> None:
        with contextlib.suppress(RuntimeError, OSError, ConnectionError):
            await player.connection.send_message(message.to_wire())

    async def broadcast(self, message: WireModel) -> None:
        payload = message.to_wire()
        for player in self._registry:
            with contextlib.suppress(RuntimeError, OSError, ConnectionError):
                await player.connection.send_message(payload)

    async def broadcast_game_state(self, session: GameSession) -> None:
        await self.broadcast(
            GameStateMessage(
                current_round=session.current_round,
                total_rounds=session.total_rounds,
                chain=list(session.chain),
                players=[PlayerInfo(name=p.name, score=p.score) for p in self._registry],
                round_winner=session.round_winner,
            ),
        )

    async def send_player_state(self, player: Player) -> None:
        await self.send_to(
            player,
            PlayerStateMessage(revealed_letters=[sorted(letters) for letters in player.revealed_letters]),
        )

    async def log(self, message: str) -> None:
        """Broadcast a human-readable event line to every player."""
        logger.info("game event", message=message)
        await self.broadcast(LogMessage(message=message, timestamp=_wall_clock_ms()))

"""Registry of joined players, keyed by connection id."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wordchain.session.models import Player

if TYPE_CHECKING:
    from collections.abc import Iterator

    from wordchain.messaging.protocol import ConnectionProtocol


class PlayerRegistry:
    """Single source of truth for who is connected and joined.

    Outbound connection handles live here as data so broadcasts look players
    up by id instead of capturing sockets in callbacks.
    """

    def __init__(self) -> None:
        self._players: dict[str, Player] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        # snapshot so callers may await between items while joins/leaves mutate the dict
        return iter(list(self._players.values()))

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def get(self, player_id: str) -> Player | None:
        return self._players.get(player_id)

    def add(self, connection: ConnectionProtocol, name: str | None, chain: list[str]) -> Player:
        """Register a player with reveal state sized to the current chain."""
        player = Player(
            connection=connection,
            name=name or self.default_name(),
        )
        player.reset_progress(chain)
        self._players[connection.connection_id] = player
        return player

    def remove(self, player_id: str) -> Player | None:
        return self._players.pop(player_id, None)

    def default_name(self) -> str:
        return f"Player {len(self._players) + 1}"

    def reset_progress(self, chain: list[str]) -> None:
        for player in self._players.values():
            player.reset_progress(chain)

    def reset_scores(self) -> None:
        for player in self._players.values():
            player.score = 0

    def top_scorers(self) -> list[str]:
        """Return the names of every player tied at the maximum score, in join order."""
        if not self._players:
            return []
        best = max(player.score for player in self._players.values())
        return [player.name for player in self._players.values() if player.score == best]

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from wordchain.logic.enums import SessionPhase
from wordchain.logic.rounds import TOTAL_ROUNDS

if TYPE_CHECKING:
    from wordchain.messaging.protocol import ConnectionProtocol


@dataclass
class Player:
    """Represent a joined player and their private progress.

    Lifecycle:
    - Created on join; reveal state is sized to the current chain
    - On every round start: revealed_letters and reveal_cooldowns are reallocated
    - On disconnect: removed from the registry entirely
    """

    connection: ConnectionProtocol
    name: str
    score: int = 0
    revealed_letters: list[set[int]] = field(default_factory=list)
    reveal_cooldowns: list[float | None] = field(default_factory=list)  # monotonic ms, None if never

    @property
    def player_id(self) -> str:
        return self.connection.connection_id

    def reset_progress(self, chain: list[str]) -> None:
        """Allocate fresh reveal and cooldown state for ``chain``.

        The first and last words are always visible, so they start fully revealed.
        """
        self.revealed_letters = [set() for _ in chain]
        self.reveal_cooldowns = [None] * len(chain)
        if chain:
            for index in (0, len(chain) - 1):
                self.revealed_letters[index] = set(range(len(chain[index])))


@dataclass
class GameSession:
    """Authoritative round state.

    ``round_winner`` is latched at most once per round and cleared only when a
    new round starts. ``epoch`` advances on every lifecycle transition so
    scheduled transitions can detect that they are stale.
    """

    current_round: int = 1
    total_rounds: int = TOTAL_ROUNDS
    chain: list[str] = field(default_factory=list)
    round_start_time: float | None = None
    round_winner: str | None = None
    phase: SessionPhase = SessionPhase.IDLE
    epoch: int = 0

    @property
    def is_final_round(self) -> bool:
        return self.current_round >= self.total_rounds

    def is_interior_index(self, word_index: int) -> bool:
        """Check that an index addresses a hidden word (not first, not last)."""
        return 0 < word_index < len(self.chain) - 1

    def advance_epoch(self) -> int:
        self.epoch += 1
        return self.epoch

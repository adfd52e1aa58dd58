from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from wordchain.logic.enums import SessionPhase
from wordchain.logic.rounds import is_correct_guess, next_letter_to_reveal, words_for_round
from wordchain.logic.settings import GameSettings
from wordchain.messaging.types import (
    ConnectedMessage,
    GameEndMessage,
    RevealCooldownMessage,
    RoundCompleteMessage,
)
from wordchain.session.broadcast import Broadcaster
from wordchain.session.models import GameSession
from wordchain.session.registry import PlayerRegistry
from wordchain.session.scheduler import TransitionScheduler

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from wordchain.logic.generator import ChainGenerator
    from wordchain.messaging.protocol import ConnectionProtocol
    from wordchain.session.models import Player

logger = structlog.get_logger()


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


def format_game_end_message(winners: list[str]) -> str:
    if not winners:
        return "Nobody is left to win the game."
    if len(winners) == 1:
        return f"{winners[0]} wins the game!"
    return f"It's a tie between {', '.join(winners)}!"


class GameCoordinator:
    """Own the authoritative session and player registry and apply every state transition.

    All handlers and scheduled transitions run under one lock, so each one
    mutates state completely before its first send and no other handler can
    observe a half-updated view while a send is awaited.
    """

    def __init__(
        self,
        generator: ChainGenerator,
        settings: GameSettings | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._generator = generator
        self._settings = settings or GameSettings()
        self._clock = clock or _monotonic_ms
        self._session = GameSession()
        self._registry = PlayerRegistry()
        self._broadcaster = Broadcaster(self._registry)
        self._scheduler = TransitionScheduler()
        self._lock = asyncio.Lock()

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def registry(self) -> PlayerRegistry:
        return self._registry

    @property
    def player_count(self) -> int:
        return len(self._registry)

    @property
    def pending_transition_count(self) -> int:
        return self._scheduler.pending_count

    def cancel_pending_transitions(self) -> None:
        self._scheduler.cancel_all()

    # --- Connection lifecycle ---

    async def connect(self, connection: ConnectionProtocol) -> None:
        """Greet a new connection with its ephemeral player id."""
        await connection.send_message(ConnectedMessage(player_id=connection.connection_id).to_wire())

    async def disconnect(self, connection: ConnectionProtocol) -> None:
        async with self._lock:
            player = self._registry.remove(connection.connection_id)
            if player is None:
                return
            logger.info(
                "player left",
                round=self._session.current_round,
                player_name=player.name,
                remaining=len(self._registry),
            )
            await self._broadcaster.log(f"{player.name} disconnected")
            await self._broadcaster.broadcast_game_state(self._session)

    # --- Client actions ---

    async def join(self, connection: ConnectionProtocol, name: str | None) -> None:
        async with self._lock:
            if connection.connection_id in self._registry:
                logger.debug("duplicate join ignored")
                return

            player = self._registry.add(connection, name, self._session.chain)
            logger.info("player joined", round=self._session.current_round, player_name=player.name)
            await self._broadcaster.log(f"{player.name} joined the game")

            if self._session.phase == SessionPhase.IDLE:
                await self._start_new_round()
            else:
                await self._broadcaster.broadcast_game_state(self._session)
                await self._broadcaster.send_player_state(player)

    async def update_name(self, connection: ConnectionProtocol, name: str | None) -> None:
        async with self._lock:
            player = self._registry.get(connection.connection_id)
            if player is None:
                return
            old_name = player.name
            player.name = name or player.name
            await self._broadcaster.log(f"{old_name} changed name to {player.name}")
            await self._broadcaster.broadcast_game_state(self._session)

    async def reveal_letter(self, connection: ConnectionProtocol, word_index: int) -> None:
        async with self._lock:
            player = self._get_addressable_player(connection, word_index)
            if player is None:
                return

            now = self._clock()
            last = player.reveal_cooldowns[word_index]
            cooldown = self._settings.reveal_cooldown_ms
            if last is not None and now - last < cooldown:
                remaining = cooldown - (now - last)
                await self._broadcaster.send_to(
                    player,
                    RevealCooldownMessage(word_index=word_index, remaining_ms=round(remaining)),
                )
                return

            self._reveal_next_letter(player, word_index)
            player.reveal_cooldowns[word_index] = now
            await self._broadcaster.send_player_state(player)

    async def guess(self, connection: ConnectionProtocol, word_index: int, text: str | None) -> None:
        async with self._lock:
            player = self._get_addressable_player(connection, word_index)
            if player is None:
                return

            word = self._session.chain[word_index]
            if not is_correct_guess(text, word):
                # forced reveal: ignores the cooldown and leaves its timestamp untouched
                self._reveal_next_letter(player, word_index)
                await self._broadcaster.send_player_state(player)
                return

            player.revealed_letters[word_index] = set(range(len(word)))
            await self._broadcaster.send_player_state(player)
            if self._has_solved_chain(player):
                await self._handle_round_win(player)

    # --- Reveal bookkeeping ---

    def _get_addressable_player(self, connection: ConnectionProtocol, word_index: int) -> Player | None:
        """Return the player if ``word_index`` names a hidden word of the current chain."""
        player = self._registry.get(connection.connection_id)
        if player is None or not self._session.is_interior_index(word_index):
            return None
        if len(player.revealed_letters) != len(self._session.chain):
            logger.debug("stale reveal state ignored", word_index=word_index)
            return None
        return player

    def _reveal_next_letter(self, player: Player, word_index: int) -> None:
        word = self._session.chain[word_index]
        revealed = player.revealed_letters[word_index]
        index = next_letter_to_reveal(word, revealed)
        if index is not None:
            revealed.add(index)

    def _has_solved_chain(self, player: Player) -> bool:
        chain = self._session.chain
        return all(len(player.revealed_letters[i]) >= len(chain[i]) for i in range(1, len(chain) - 1))

    # --- Lifecycle transitions ---

    async def start_new_game(self) -> None:
        """Reset round and scores and start round one, superseding any pending transition."""
        async with self._lock:
            await self._start_new_game()

    async def _start_new_round(self) -> None:
        session = self._session
        word_count = words_for_round(session.current_round)
        session.chain = self._generator.generate(word_count)
        session.round_start_time = self._clock()
        session.round_winner = None
        session.phase = SessionPhase.ROUND_ACTIVE
        session.advance_epoch()
        self._registry.reset_progress(session.chain)
        logger.info("round started", round=session.current_round, word_count=word_count, epoch=session.epoch)

        await self._broadcaster.broadcast_game_state(session)
        for player in self._registry:
            await self._broadcaster.send_player_state(player)
        await self._broadcaster.log(f"Round {session.current_round} started! Chain has {word_count} words.")

    async def _start_new_game(self) -> None:
        self._session.current_round = 1
        self._registry.reset_scores()
        await self._start_new_round()
        await self._broadcaster.log("New game started! All scores reset to 0.")

    async def _handle_round_win(self, player: Player) -> None:
        session = self._session
        if session.round_winner is not None:
            return

        player.score += 1
        session.round_winner = player.name
        session.phase = SessionPhase.ROUND_WON
        epoch = session.advance_epoch()
        logger.info("round won", round=session.current_round, player_name=player.name, score=player.score)

        await self._broadcaster.send_to(player, RoundCompleteMessage())
        await self._broadcaster.log(f"{player.name} solved the chain and wins Round {session.current_round}!")
        await self._broadcaster.broadcast_game_state(session)

        if session.is_final_round:
            self._schedule(self._settings.game_end_delay_ms, epoch, self._handle_game_end, "game_end")
        else:
            self._schedule(self._settings.round_advance_delay_ms, epoch, self._advance_round, "round_advance")

    async def _advance_round(self) -> None:
        self._session.current_round += 1
        await self._start_new_round()

    async def _handle_game_end(self) -> None:
        session = self._session
        winners = self._registry.top_scorers()
        message = format_game_end_message(winners)
        session.phase = SessionPhase.GAME_ENDED
        epoch = session.advance_epoch()
        logger.info("game ended", round=session.current_round, winners=winners)

        await self._broadcaster.broadcast(GameEndMessage(winners=winners, message=message))
        await self._broadcaster.log(message)

        self._schedule(self._settings.new_game_delay_ms, epoch, self._start_new_game, "new_game")

    def _schedule(
        self,
        delay_ms: int,
        epoch: int,
        transition: Callable[[], Awaitable[None]],
        name: str,
    ) -> None:
        async def run(scheduled_epoch: int) -> None:
            async with self._lock:
                if scheduled_epoch != self._session.epoch:
                    logger.info(
                        "stale transition skipped",
                        transition=name,
                        scheduled_epoch=scheduled_epoch,
                        current_epoch=self._session.epoch,
                    )
                    return
                await transition()

        self._scheduler.schedule(delay_ms, epoch, run, name)

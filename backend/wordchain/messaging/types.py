from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class ClientMessageType(StrEnum):
    JOIN = "join"
    UPDATE_NAME = "updateName"
    REVEAL_LETTER = "revealLetter"
    GUESS = "guess"


class ServerMessageType(StrEnum):
    CONNECTED = "connected"
    GAME_STATE = "gameState"
    PLAYER_STATE = "playerState"
    REVEAL_COOLDOWN = "revealCooldown"
    ROUND_COMPLETE = "roundComplete"
    LOG = "log"
    GAME_END = "gameEnd"


class WireModel(BaseModel):
    """Base for wire messages: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class JoinMessage(WireModel):
    type: Literal[ClientMessageType.JOIN] = ClientMessageType.JOIN
    name: str | None = None


class UpdateNameMessage(WireModel):
    type: Literal[ClientMessageType.UPDATE_NAME] = ClientMessageType.UPDATE_NAME
    name: str | None = None


class RevealLetterMessage(WireModel):
    type: Literal[ClientMessageType.REVEAL_LETTER] = ClientMessageType.REVEAL_LETTER
    word_index: int


class GuessMessage(WireModel):
    type: Literal[ClientMessageType.GUESS] = ClientMessageType.GUESS
    word_index: int
    guess: str | None = None


ClientMessage = Annotated[
    JoinMessage | UpdateNameMessage | RevealLetterMessage | GuessMessage,
    Field(discriminator="type"),
]


class ConnectedMessage(WireModel):
    type: Literal[ServerMessageType.CONNECTED] = ServerMessageType.CONNECTED
    player_id: str


class PlayerInfo(WireModel):
    name: str
    score: int


class GameStateMessage(WireModel):
    type: Literal[ServerMessageType.GAME_STATE] = ServerMessageType.GAME_STATE
    current_round: int
    total_rounds: int
    chain: list[str]
    players: list[PlayerInfo]
    round_winner: str | None


class PlayerStateMessage(WireModel):
    type: Literal[ServerMessageType.PLAYER_STATE] = ServerMessageType.PLAYER_STATE
    revealed_letters: list[list[int]]


class RevealCooldownMessage(WireModel):
    type: Literal[ServerMessageType.REVEAL_COOLDOWN] = ServerMessageType.REVEAL_COOLDOWN
    word_index: int
    remaining_ms: int


class RoundCompleteMessage(WireModel):
    type: Literal[ServerMessageType.ROUND_COMPLETE] = ServerMessageType.ROUND_COMPLETE


class LogMessage(WireModel):
    type: Literal[ServerMessageType.LOG] = ServerMessageType.LOG
    message: str
    timestamp: int  # unix epoch milliseconds


class GameEndMessage(WireModel):
    type: Literal[ServerMessageType.GAME_END] = ServerMessageType.GAME_END
    winners: list[str]
    message: str


_client_message_adapter = TypeAdapter(ClientMessage)


def parse_client_message(data: dict[str, Any]) -> JoinMessage | UpdateNameMessage | RevealLetterMessage | GuessMessage:
    """Parse a raw dict into a typed client message.

    Raises pydantic.ValidationError for unknown tags and malformed payloads.
    """
    return _client_message_adapter.validate_python(data)

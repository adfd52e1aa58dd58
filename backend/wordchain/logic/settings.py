"""Gameplay timing and search settings."""

from pydantic import BaseModel, ConfigDict, Field

from wordchain.logic.generator import MAX_CHAIN_ATTEMPTS


class GameSettings(BaseModel):
    """Tunable gameplay constants. Durations are in milliseconds."""

    model_config = ConfigDict(frozen=True)

    reveal_cooldown_ms: int = Field(default=10_000, ge=0)
    round_advance_delay_ms: int = Field(default=5_000, ge=0)
    game_end_delay_ms: int = Field(default=3_000, ge=0)
    new_game_delay_ms: int = Field(default=10_000, ge=0)
    max_chain_attempts: int = Field(default=MAX_CHAIN_ATTEMPTS, ge=1)

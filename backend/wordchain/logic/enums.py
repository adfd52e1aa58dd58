from enum import StrEnum


class SessionPhase(StrEnum):
    IDLE = "idle"
    ROUND_ACTIVE = "round_active"
    ROUND_WON = "round_won"
    GAME_ENDED = "game_ended"

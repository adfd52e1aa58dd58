import random
from pathlib import Path

import pytest

from wordchain.logic.generator import ChainGenerator
from wordchain.logic.graph import build_word_graph
from wordchain.logic.settings import GameSettings
from wordchain.messaging.router import MessageRouter
from wordchain.session.manager import GameCoordinator

WORDS_PATH = Path(__file__).resolve().parents[2] / "data" / "words.json"

# Long single-path graph: every chain from "alpha" is deterministic.
LINEAR_PAIRS = [
    ("alpha", "bravo"),
    ("bravo", "charlie"),
    ("charlie", "delta"),
    ("delta", "echo"),
    ("echo", "foxtrot"),
    ("foxtrot", "golf"),
    ("golf", "hotel"),
]


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fast_settings():
    """Short lifecycle delays so scheduled transitions fire quickly in tests."""
    return GameSettings(round_advance_delay_ms=20, game_end_delay_ms=20, new_game_delay_ms=20)


@pytest.fixture
def generator():
    return ChainGenerator(build_word_graph(LINEAR_PAIRS), rng=random.Random(7))


@pytest.fixture
def coordinator(generator, fast_settings, clock):
    coordinator = GameCoordinator(generator, settings=fast_settings, clock=clock)
    yield coordinator
    coordinator.cancel_pending_transitions()


@pytest.fixture
def message_router(coordinator):
    return MessageRouter(coordinator)


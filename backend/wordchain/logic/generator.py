"""
Puzzle chain generation over the directed word graph.

Uses randomized-restart breadth-first search: each attempt picks a random
start word and searches for the first path of the requested length in BFS
order (edge insertion order). Each queued path carries its own visited set,
so no word repeats within a chain.
"""

from __future__ import annotations

import random
from collections import deque
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from wordchain.logic.graph import WordGraph

logger = structlog.get_logger()

MAX_CHAIN_ATTEMPTS = 100


def find_chain(graph: WordGraph, start_word: str, target_length: int) -> list[str] | None:
    """Return the first path from ``start_word`` of exactly ``target_length`` words, or None."""
    if start_word not in graph or target_length < 1:
        return None

    queue: deque[tuple[list[str], frozenset[str]]] = deque([([start_word], frozenset([start_word]))])
    while queue:
        path, used = queue.popleft()
        if len(path) == target_length:
            return path

        for neighbor in graph.get(path[-1], ()):
            if neighbor in used:
                continue
            next_path = [*path, neighbor]
            if len(next_path) == target_length:
                return next_path
            queue.append((next_path, used | {neighbor}))

    return None


class ChainGenerator:
    """Generate puzzle chains of a requested length from a word graph."""

    def __init__(
        self,
        graph: WordGraph,
        rng: random.Random | None = None,
        max_attempts: int = MAX_CHAIN_ATTEMPTS,
    ) -> None:
        self._graph = graph
        self._words = list(graph)
        self._rng = rng or random.Random()  # noqa: S311
        self._max_attempts = max_attempts

    @property
    def word_count(self) -> int:
        return len(self._words)

    def generate(self, length: int) -> list[str]:
        """Return a chain of ``length`` words.

        Falls back to a prefix of the known-word list when no attempt finds a
        path. The fallback does not guarantee adjacency between words.
        """
        if self._words:
            for _ in range(self._max_attempts):
                start_word = self._rng.choice(self._words)
                chain = find_chain(self._graph, start_word, length)
                if chain is not None and len(chain) == length:
                    return chain

        logger.warning(
            "chain search exhausted, using fallback chain",
            length=length,
            attempts=self._max_attempts,
        )
        return self._words[:length]

"""
Directed word graph built from ordered word pairs.

Each pair ``[source, target]`` is one directed edge. The relation is
asymmetric: ``foot -> ball`` does not imply ``ball -> foot``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

if TYPE_CHECKING:
    from collections.abc import Iterable

WordPair = tuple[str, str]
WordGraph = dict[str, list[str]]

_word_pairs_adapter = TypeAdapter(list[WordPair])


def build_word_graph(pairs: Iterable[WordPair]) -> WordGraph:
    """Build an adjacency mapping from directed word pairs.

    Every word that appears in any pair becomes a key, even when it has no
    outgoing edges. Targets keep input order and duplicates are preserved.
    """
    graph: WordGraph = {}
    for source, target in pairs:
        graph.setdefault(source, [])
        graph.setdefault(target, [])
        graph[source].append(target)
    return graph


def load_word_pairs(path: Path | str) -> list[WordPair]:
    """Read a JSON array of ``[source, target]`` pairs from disk."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return _word_pairs_adapter.validate_python(raw)

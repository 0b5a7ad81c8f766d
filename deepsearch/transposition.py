"""
Transposition table: remembers search results keyed by position hash.

The same position is often reached through different move orders, and each
iterative-deepening pass revisits every position of the previous pass. The
table stores, for each position key, the value found, the remaining depth it
was searched to, what kind of bound the value is, and the move that produced
it. The search only trusts an entry searched at least as deep as the current
request; a shallower entry still contributes its best move as an ordering
hint.

Bound labels:
    The search stores LOWER_BOUND for a node that failed low (value at or
    below the original alpha) and UPPER_BOUND for a node that failed high
    (value at or above the original beta). On lookup, LOWER_BOUND raises
    alpha and UPPER_BOUND lowers beta. The label names are the reverse of the
    usual textbook naming, but store and lookup use them consistently, and
    that pairing is what the search results depend on.

Replacement policy:
    By default every store overwrites the previous entry for the key (last
    write wins), so the most recent verdict for a position is always
    recorded. ``depth_preferred=True`` switches to "replace only if the new
    depth is at least the stored depth".
"""

import enum
from dataclasses import dataclass
from typing import Any


class Bound(enum.Enum):
    EXACT = 0
    LOWER_BOUND = 1
    UPPER_BOUND = 2


@dataclass(frozen=True)
class TableEntry:
    value: int          # score from the maximizing player's point of view
    depth: int          # remaining depth the value was computed at (>= 0)
    bound: Bound        # EXACT / LOWER_BOUND / UPPER_BOUND
    best_move: Any      # last move iterated at the node, None at the horizon


class TranspositionTable:
    """
    Unbounded mapping from position key to a single TableEntry.

    Entries live as long as the table instance; each AI instance owns its own
    table, so tables are never shared between AIs.
    """

    def __init__(self, depth_preferred: bool = False) -> None:
        self.depth_preferred = depth_preferred
        self._entries: dict[int, TableEntry] = {}

    def lookup(self, key: int) -> TableEntry | None:
        return self._entries.get(key)

    def store(self, key: int, value: int, depth: int, bound: Bound, best_move: Any) -> None:
        if self.depth_preferred:
            existing = self._entries.get(key)
            if existing is not None and existing.depth > depth:
                return
        self._entries[key] = TableEntry(value, depth, bound, best_move)

    def clear(self) -> None:
        """Drop every entry. Used when the caller starts a new game."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: int) -> bool:
        return key in self._entries

"""
Killer-move heuristic storage.

A killer move is a quiet move that caused a cutoff in a sibling subtree at
the same ply. Trying it early in the next sibling often produces the same
cutoff again, so the search orders it right after the transposition-table
move. The buffers here are pure ordering hints: an empty buffer is normal
and simply gives no ordering boost.
"""

from collections import deque
from typing import Generic, Iterator, TypeVar

from deepsearch.constants import KILLER_SLOTS

T = TypeVar("T")


class LimitedBuffer(Generic[T]):
    """
    Insertion-ordered buffer holding at most ``capacity`` items.

    Adding to a full buffer evicts the oldest item. Duplicates are kept:
    the same move recorded twice occupies two slots.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._items: deque[T] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._items.maxlen

    def add(self, item: T) -> None:
        self._items.append(item)

    def clear(self) -> None:
        self._items.clear()

    def to_list(self) -> list[T]:
        """Return the contents oldest-first."""
        return list(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"LimitedBuffer({self.to_list()!r}, capacity={self.capacity})"


class KillerMoves(Generic[T]):
    """
    One LimitedBuffer per ply index.

    The search indexes the table by remaining depth, so ``plies`` must be one
    more than the configured maximum search depth: search() may be called at
    any depth from 0 up to that maximum.

    Attributes:
        plies: Number of ply buffers.
        slots: Capacity of each buffer (KILLER_SLOTS by default).
    """

    def __init__(self, plies: int, slots: int = KILLER_SLOTS) -> None:
        self.plies = plies
        self.slots = slots
        self._buffers: list[LimitedBuffer[T]] = [LimitedBuffer(slots) for _ in range(plies)]

    def record(self, ply: int, move: T) -> None:
        """Remember a move that caused a cutoff at ``ply``."""
        self._buffer(ply).add(move)

    def moves(self, ply: int) -> list[T]:
        """Return the killers stored for ``ply`` (0, 1 or 2 moves), oldest first."""
        return self._buffer(ply).to_list()

    def clear_all(self) -> None:
        for buffer in self._buffers:
            buffer.clear()

    def _buffer(self, ply: int) -> LimitedBuffer[T]:
        if not 0 <= ply < self.plies:
            raise IndexError(f"ply {ply} outside killer table of {self.plies} plies")
        return self._buffers[ply]

    def __len__(self) -> int:
        return self.plies

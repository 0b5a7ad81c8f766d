"""
Collaborator interfaces consumed by the search.

The search knows nothing about the game it plays. Everything game-specific
is reached through the three protocols below:

    GameRules       — move generation, make/unmake, hashing, terminal test
    Heuristic       — static evaluation from a given player's point of view
    StatisticsSink  — counters the search increments

chess_rules.ChessRules and evaluate.material implement the first two for
python-chess; stats.SearchStatistics implements the third. Tests plug in
small hand-built game trees through the same interfaces.
"""

from typing import Any, Hashable, Protocol, Sequence

# Moves and states are opaque to the search. Moves only need equality.
Move = Any
State = Any


class GameRules(Protocol):
    def legal_moves(
        self,
        state: State,
        preferred: Move | None = None,
        killer1: Move | None = None,
        killer2: Move | None = None,
    ) -> Sequence[Move]:
        """
        Return the legal moves for the side to move.

        Order: ``preferred`` first, then ``killer1`` and ``killer2``, then the
        remaining moves in the generator's natural order. Hints that are not
        legal in ``state`` (stale table moves, killers from another subtree)
        must be ignored silently.
        """
        ...

    def apply(self, move: Move, state: State) -> None:
        """Play ``move`` on ``state`` in place."""
        ...

    def undo(self, move: Move, state: State) -> None:
        """Take back ``move``, the last move applied to ``state``."""
        ...

    def position_key(self, state: State) -> int:
        """Fixed-width hash identifying ``state``."""
        ...

    def is_terminal(self, state: State, depth: int) -> bool:
        """True when the game is over in ``state``."""
        ...

    def active_player(self, state: State) -> Hashable:
        """The side to move in ``state``."""
        ...

    def pass_move(self) -> Move:
        """The no-op move played when a side has no legal move."""
        ...


class Heuristic(Protocol):
    def __call__(self, state: State, player: Hashable) -> int:
        """
        Score ``state`` from ``player``'s point of view.

        Must return a value in [LOSS_SCORE, WIN_SCORE]; WIN_SCORE is reserved
        for a confirmed win for ``player``.
        """
        ...


class StatisticsSink(Protocol):
    def record_cache_hit(self) -> None:
        ...

    def record_cutoff(self, moves_evaluated: int) -> None:
        ...

"""
Search core: minimax with alpha-beta pruning, a transposition table, killer
moves, and iterative deepening under a wall-clock budget.

The search is game-agnostic. It reaches the game only through a GameRules
object (move generation, make/unmake, hashing, terminal test) and a
Heuristic (static evaluation); see game.py for both interfaces.

Structure, from the outside in:

1. choose_move() — iterative deepening driver. Clears the killer tables,
   starts the clock, then runs the root search at depth 0, 1, 2, ... up to
   the configured maximum while time remains. The best (value, move) pair
   seen across depths is kept; a value of WIN_SCORE ends the search at once.

2. _run_minimax() — root search at a fixed depth. Every root move is searched
   with alpha set to the best value found so far among its siblings (not
   -INFINITY), which narrows the window early. Equal values are resolved by
   a coin flip from the instance's random generator.

3. search() — the recursive alpha-beta evaluator. Consults the transposition
   table, falls back to static evaluation at the horizon, at terminal
   positions, or once the time budget is spent, orders moves (table move,
   killers, rest), records killers on cutoffs, and stores its verdict.

Time model:
    The clock is polled at every node entry and at the top of every
    deepening iteration. Nothing interrupts a node once it starts iterating
    its moves, so a search can overrun its budget by up to one subtree.

State ownership:
    The transposition table, killer tables, random generator and statistics
    sink are fields of the AI instance. Two instances never share state, and
    one instance must not be searched from two threads at once.
"""

import enum
import logging
import random
import time
from typing import Callable, Hashable, NamedTuple

from deepsearch.constants import (
    DEFAULT_SEARCH_DEPTH,
    DEFAULT_TIME_LIMIT_MS,
    INFINITY,
    TIE_BREAK_PROBABILITY,
    WIN_SCORE,
)
from deepsearch.game import GameRules, Heuristic, Move, State, StatisticsSink
from deepsearch.killers import KillerMoves
from deepsearch.stats import SearchStatistics
from deepsearch.transposition import Bound, TranspositionTable

_log = logging.getLogger(__name__)


class SearchPhase(enum.Enum):
    IDLE = "idle"
    DEEPENING = "deepening"
    DONE = "done"


class RootResult(NamedTuple):
    value: int
    move: Move


class KillerAlphaBetaAI:
    """
    Iterative-deepening alpha-beta AI backed by a transposition table and
    the killer heuristic.

    Args:
        name:         Display name, carried over by copy().
        heuristic:    Static evaluation, called as heuristic(state, player).
        rules:        GameRules implementation for the game being played.
        depth:        Maximum iterative-deepening depth (>= 0).
        max_time_ms:  Wall-clock budget per decision in milliseconds (> 0).
        seed:         Seed for the tie-breaking generator. Ignored if rng is given.
        rng:          Explicit random.Random instance for tie-breaking.
        clock:        Monotonic clock returning seconds. Tests inject a fake one.
        stats:        Statistics sink; a fresh SearchStatistics by default.
        depth_preferred_table:
                      Store table entries only when at least as deep as the
                      existing entry, instead of always overwriting.

    Raises:
        ValueError: depth is negative or max_time_ms is not positive.
    """

    def __init__(
        self,
        name: str,
        heuristic: Heuristic,
        rules: GameRules,
        depth: int = DEFAULT_SEARCH_DEPTH,
        max_time_ms: float = DEFAULT_TIME_LIMIT_MS,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        stats: StatisticsSink | None = None,
        depth_preferred_table: bool = False,
    ) -> None:
        if depth < 0:
            raise ValueError(f"search depth must be >= 0, got {depth}")
        if max_time_ms <= 0:
            raise ValueError(f"time budget must be > 0 ms, got {max_time_ms}")

        self._name = name
        self._heuristic = heuristic
        self._rules = rules
        self._search_depth = depth
        self._max_time_ms = max_time_ms
        self._clock = clock
        self._rng = rng if rng is not None else random.Random(seed)
        self._depth_preferred_table = depth_preferred_table

        self._table = TranspositionTable(depth_preferred=depth_preferred_table)
        # Indexed by remaining depth, 0 through depth inclusive.
        self._killers: KillerMoves = KillerMoves(depth + 1)
        self._stats = stats if stats is not None else SearchStatistics()

        self._phase = SearchPhase.IDLE
        self._start = 0.0
        self._budget_ms = max_time_ms
        self._player: Hashable = None

        # Per-decision results, read by the UCI handler and the benchmark.
        self.nodes = 0
        self.depth_reached = -1
        self.best_value: int | None = None

    # -----------------------------------------------------------------------
    # Configuration and state
    # -----------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def heuristic(self) -> Heuristic:
        return self._heuristic

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def search_depth(self) -> int:
        return self._search_depth

    @property
    def max_time_ms(self) -> float:
        return self._max_time_ms

    @property
    def table(self) -> TranspositionTable:
        return self._table

    @property
    def killers(self) -> KillerMoves:
        return self._killers

    @property
    def stats(self) -> StatisticsSink:
        return self._stats

    @property
    def phase(self) -> SearchPhase:
        return self._phase

    def copy(self) -> "KillerAlphaBetaAI":
        """
        Return a fresh AI with the same configuration.

        The copy has its own empty transposition table, killer tables,
        statistics and an unseeded random generator; nothing searched by this
        instance carries over.
        """
        return KillerAlphaBetaAI(
            self._name,
            self._heuristic,
            self._rules,
            self._search_depth,
            self._max_time_ms,
            clock=self._clock,
            depth_preferred_table=self._depth_preferred_table,
        )

    duplicate_with_same_configuration = copy

    @staticmethod
    def uses_canonical_board_orientation() -> bool:
        """The AI expects positions in the standard orientation."""
        return True

    # -----------------------------------------------------------------------
    # Iterative deepening driver
    # -----------------------------------------------------------------------

    def choose_move(self, state: State, max_time_ms: float | None = None) -> Move | None:
        """
        Return the best move found for ``state`` within the time budget.

        ``max_time_ms`` overrides the configured budget for this decision only,
        so a caller on a game clock can keep one AI (and its table) per game.

        ``state`` is mutated during the search through rules.apply/undo and is
        restored before this method returns.

        Returns:
            The chosen move, or None if the budget ran out before the first
            iteration started.
        """
        self.start_decision(state, max_time_ms)
        self._phase = SearchPhase.DEEPENING

        best_value = -INFINITY
        best_move = None
        depth = 0
        try:
            while depth <= self._search_depth and self._elapsed_ms() < self._budget_ms:
                value, move = self._run_minimax(state, depth)
                self.depth_reached = depth
                _log.debug(
                    "%s: depth %d value %d move %s nodes %d time %.0fms",
                    self._name, depth, value, move, self.nodes, self._elapsed_ms(),
                )

                if value > best_value or value == best_value and self._coin_flip():
                    best_value = value
                    best_move = move
                    if best_value == WIN_SCORE:
                        _log.debug("%s: forced win found at depth %d", self._name, depth)
                        break

                depth += 1
        finally:
            self._phase = SearchPhase.DONE

        self.best_value = best_value if best_move is not None else None
        _log.info(
            "%s: move %s value %s depth %d nodes %d time %.0fms",
            self._name, best_move, self.best_value, self.depth_reached,
            self.nodes, self._elapsed_ms(),
        )
        return best_move

    def start_decision(self, state: State, max_time_ms: float | None = None) -> None:
        """
        Reset per-decision state: killers, counters, clock and the player the
        search maximizes for. choose_move() calls this; tests that drive
        search() directly call it first.
        """
        if max_time_ms is not None and max_time_ms <= 0:
            raise ValueError(f"time budget must be > 0 ms, got {max_time_ms}")
        self._budget_ms = max_time_ms if max_time_ms is not None else self._max_time_ms
        self._start = self._clock()
        self._player = self._rules.active_player(state)
        self._killers.clear_all()
        self.nodes = 0
        self.depth_reached = -1
        self.best_value = None

    # -----------------------------------------------------------------------
    # Root search
    # -----------------------------------------------------------------------

    def _run_minimax(self, state: State, depth: int) -> RootResult:
        best_value = -INFINITY
        best_move = self._rules.pass_move()

        for move in self._generate_moves(state):
            self._rules.apply(move, state)
            value = self.search(state, depth - 1, best_value, INFINITY, False)
            if value > best_value or value == best_value and self._coin_flip():
                best_value = value
                best_move = move
            self._rules.undo(move, state)

        return RootResult(best_value, best_move)

    # -----------------------------------------------------------------------
    # Alpha-beta evaluator
    # -----------------------------------------------------------------------

    def search(self, state: State, depth: int, alpha: int, beta: int, maximizing: bool) -> int:
        """
        Alpha-beta minimax value of ``state`` searched ``depth`` plies deep.

        Args:
            state:      Position to evaluate, mutated and restored in place.
            depth:      Remaining depth. At or below 0 the static value is used.
            alpha:      Best value the maximizing side can already guarantee.
            beta:       Best value the minimizing side can already guarantee.
            maximizing: True when the player the AI searches for is to move.

        Returns:
            The node value from the maximizing player's point of view. Values
            outside the (alpha, beta) window are bounds, not exact scores.
        """
        self.nodes += 1
        original_alpha = alpha
        original_beta = beta

        key = self._rules.position_key(state)
        entry = self._table.lookup(key)
        best_move = None
        if entry is not None:
            # A shallow entry cannot answer this node but still orders moves.
            best_move = entry.best_move
            if entry.depth >= depth:
                self._stats.record_cache_hit()
                if entry.bound is Bound.EXACT:
                    return entry.value
                elif entry.bound is Bound.LOWER_BOUND and entry.value > alpha:
                    alpha = entry.value
                elif entry.bound is Bound.UPPER_BOUND and entry.value < beta:
                    beta = entry.value

                if alpha >= beta:
                    return entry.value

        if self._rules.is_terminal(state, depth) or depth <= 0 or self._out_of_time():
            value = self._heuristic(state, self._player)
        else:
            killer1, killer2 = self._killer_pair(depth)
            moves = self._generate_moves(state, best_move, killer1, killer2)
            moves_evaluated = 0

            for move in moves:
                moves_evaluated += 1
                best_move = move
                self._rules.apply(move, state)
                value = self.search(state, depth - 1, alpha, beta, not maximizing)
                self._rules.undo(move, state)

                if maximizing:
                    if value > alpha:
                        alpha = value
                elif value < beta:
                    beta = value

                if beta <= alpha:
                    self._stats.record_cutoff(moves_evaluated)
                    self._killers.record(depth, move)
                    break

            value = alpha if maximizing else beta

        if value <= original_alpha:
            bound = Bound.LOWER_BOUND
        elif value >= original_beta:
            bound = Bound.UPPER_BOUND
        else:
            bound = Bound.EXACT
        self._table.store(key, value, max(depth, 0), bound, best_move)

        return value

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _generate_moves(
        self,
        state: State,
        preferred: Move | None = None,
        killer1: Move | None = None,
        killer2: Move | None = None,
    ) -> list[Move]:
        moves = list(self._rules.legal_moves(state, preferred, killer1, killer2))
        if not moves:
            moves.append(self._rules.pass_move())
        return moves

    def _killer_pair(self, depth: int) -> tuple[Move | None, Move | None]:
        killers = self._killers.moves(depth)
        killers += [None] * (2 - len(killers))
        return killers[0], killers[1]

    def _coin_flip(self) -> bool:
        return self._rng.random() < TIE_BREAK_PROBABILITY

    def _elapsed_ms(self) -> float:
        return (self._clock() - self._start) * 1000

    def _out_of_time(self) -> bool:
        return self._elapsed_ms() > self._budget_ms

"""
deepsearch: game-agnostic adversarial search.

This package implements an iterative-deepening minimax search with
alpha-beta pruning, a transposition table and the killer-move heuristic,
plus python-chess bindings so it can play chess out of the box.

Modules:
    constants     — Score bounds, search defaults, piece values
    killers       — Per-ply killer move buffers
    transposition — Transposition table entries and storage
    stats         — Cache-hit and cutoff counters
    game          — GameRules / Heuristic / StatisticsSink interfaces
    search        — Alpha-beta evaluator, root search, iterative deepening
    evaluate      — Material evaluation for chess
    chess_ai      — python-chess GameRules and the get_best_move() entry point
"""

from deepsearch.search import KillerAlphaBetaAI, RootResult, SearchPhase
from deepsearch.stats import SearchStatistics
from deepsearch.transposition import Bound, TableEntry, TranspositionTable

__all__ = [
    "Bound",
    "KillerAlphaBetaAI",
    "RootResult",
    "SearchPhase",
    "SearchStatistics",
    "TableEntry",
    "TranspositionTable",
]

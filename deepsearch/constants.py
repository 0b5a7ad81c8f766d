"""
Engine constants: score bounds, search defaults, and piece values.

All numeric constants used throughout the engine are defined here so that
the search modules never need to introduce new magic numbers. Centralizing
constants makes tuning and experimentation much easier.

Scores are plain integers measured from the point of view of the player the
AI is searching for (the "maximizing" player). WIN_SCORE is a distinguished
value: a heuristic returns it only for a confirmed win, and the iterative
deepening driver stops as soon as it sees it.
"""

import chess

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# Scores are integers (never floats) so they work correctly in alpha-beta
# comparisons. INFINITY sits strictly outside the heuristic range so that a
# search window of (-INFINITY, INFINITY) is always wider than any real score.

WIN_SCORE: int = 99_999      # Confirmed win for the maximizing player
LOSS_SCORE: int = -WIN_SCORE  # Confirmed loss for the maximizing player
DRAW_SCORE: int = 0           # Stalemate, repetition, 50-move rule
INFINITY: int = WIN_SCORE + 1

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------

# Number of killer moves remembered per ply. Two is the classic choice:
# enough to hold both refutations that alternate in sibling subtrees.
KILLER_SLOTS: int = 2

# Default maximum depth for iterative deepening. Python is slow enough that
# the time budget almost always stops the search first.
DEFAULT_SEARCH_DEPTH: int = 6

# Default time budget per move, in milliseconds.
DEFAULT_TIME_LIMIT_MS: int = 1_000

# Probability of switching to a newly evaluated move whose value equals the
# current best. 0.5 is a fair coin.
TIE_BREAK_PROBABILITY: float = 0.5

# ---------------------------------------------------------------------------
# Piece values (centipawns)
# ---------------------------------------------------------------------------
# Used by the material heuristic in evaluate.py. The king has no material
# value: it is never captured, and mate is scored separately.

PAWN_VALUE: int = 100
KNIGHT_VALUE: int = 320
BISHOP_VALUE: int = 330
ROOK_VALUE: int = 500
QUEEN_VALUE: int = 900

PIECE_VALUES: dict[int, int] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
    chess.KING:   0,
}

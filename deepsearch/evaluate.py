"""
Material evaluation for chess positions.

The search is minimax, not negamax: every score is measured from the point
of view of one fixed player (the side the AI plays), whichever side is to
move. A positive score means that player is ahead.

Game-over positions get the distinguished scores from constants.py:
WIN_SCORE when the opponent is checkmated, LOSS_SCORE when the player is,
DRAW_SCORE for every other ending. Material scores are clamped strictly
inside those bounds so that only a real checkmate can read as a win; the
iterative deepening driver relies on that to stop early.
"""

import chess

from deepsearch.constants import DRAW_SCORE, LOSS_SCORE, PIECE_VALUES, WIN_SCORE


def material(board: chess.Board, player: chess.Color) -> int:
    """
    Score ``board`` from ``player``'s point of view.

    Args:
        board:  The position to score. Not modified.
        player: chess.WHITE or chess.BLACK.

    Returns:
        WIN_SCORE / LOSS_SCORE on checkmate, DRAW_SCORE on any other game
        end, otherwise the centipawn material balance for ``player``.

    Example:
        >>> material(chess.Board(), chess.WHITE)
        0
    """
    if board.is_checkmate():
        # The side to move is the side that has been mated.
        return LOSS_SCORE if board.turn == player else WIN_SCORE
    if board.is_game_over():
        return DRAW_SCORE

    score = 0
    for piece_type, value in PIECE_VALUES.items():
        score += value * len(board.pieces(piece_type, player))
        score -= value * len(board.pieces(piece_type, not player))

    return max(LOSS_SCORE + 1, min(score, WIN_SCORE - 1))

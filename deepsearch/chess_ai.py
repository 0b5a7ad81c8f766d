"""
python-chess bindings for the search core.

ChessRules adapts chess.Board to the GameRules interface, and
get_best_move() is the stable entry point that interface/uci.py, web/app.py
and tools/bench.py call. Its return shape (move, score_cp, depth, nodes) does
not change when the search internals do.
"""

import chess
import chess.polyglot

from deepsearch.constants import DEFAULT_SEARCH_DEPTH
from deepsearch.evaluate import material
from deepsearch.search import KillerAlphaBetaAI


class ChessRules:
    """
    GameRules implementation for python-chess boards.

    Moves are chess.Move values and the state is a chess.Board mutated with
    push/pop. Position keys are Polyglot Zobrist hashes (64-bit).
    """

    def legal_moves(
        self,
        board: chess.Board,
        preferred: chess.Move | None = None,
        killer1: chess.Move | None = None,
        killer2: chess.Move | None = None,
    ) -> list[chess.Move]:
        """
        Legal moves with the hints first.

        Hints that are not legal here (a table move from a colliding position,
        a killer from a different subtree) are skipped, and a hint that
        repeats an earlier one is only listed once.
        """
        legal = list(board.legal_moves)
        ordered: list[chess.Move] = []
        for hint in (preferred, killer1, killer2):
            if hint is not None and hint in legal and hint not in ordered:
                ordered.append(hint)
        ordered.extend(move for move in legal if move not in ordered)
        return ordered

    def apply(self, move: chess.Move, board: chess.Board) -> None:
        board.push(move)

    def undo(self, move: chess.Move, board: chess.Board) -> None:
        undone = board.pop()
        if undone != move:
            raise ValueError(f"undo({move.uci()}) but last move was {undone.uci()}")

    def position_key(self, board: chess.Board) -> int:
        return chess.polyglot.zobrist_hash(board)

    def is_terminal(self, board: chess.Board, depth: int) -> bool:
        return board.is_game_over()

    def active_player(self, board: chess.Board) -> chess.Color:
        return board.turn

    def pass_move(self) -> chess.Move:
        return chess.Move.null()


def new_chess_ai(
    time_limit_ms: int,
    depth: int = DEFAULT_SEARCH_DEPTH,
    name: str = "deepsearch",
    seed: int | None = None,
) -> KillerAlphaBetaAI:
    """Build a chess AI with the material heuristic."""
    return KillerAlphaBetaAI(name, material, ChessRules(), depth, time_limit_ms, seed=seed)


def get_best_move(
    board: chess.Board,
    time_limit_ms: int,
    depth: int = DEFAULT_SEARCH_DEPTH,
    ai: KillerAlphaBetaAI | None = None,
) -> tuple[chess.Move | None, int, int, int]:
    """
    Return the best move for the current position within the time budget.

    Args:
        board:         The current position. Not modified (searched on a copy).
        time_limit_ms: Time budget in milliseconds for this move.
        depth:         Maximum search depth. Ignored when ``ai`` is given.
        ai:            An existing AI to reuse, keeping its transposition
                       table across moves of the same game.

    Returns:
        Tuple of (move, score_cp, depth, nodes):
            - move:     The chosen move, or None if the game is already over.
            - score_cp: Score from the side-to-move's perspective.
            - depth:    The deepest iteration started.
            - nodes:    Number of nodes visited.
    """
    if board.is_game_over():
        return (None, 0, 0, 0)

    if ai is None:
        ai = new_chess_ai(time_limit_ms, depth)

    move = ai.choose_move(board.copy(), time_limit_ms)
    if move is None:
        return (None, 0, 0, ai.nodes)

    return (move, ai.best_value, max(ai.depth_reached, 0), ai.nodes)

import unittest

import chess

from deepsearch.chess_ai import ChessRules, get_best_move, new_chess_ai
from deepsearch.constants import DRAW_SCORE, LOSS_SCORE, WIN_SCORE
from deepsearch.evaluate import material

BACK_RANK_MATE = "6k1/5ppp/8/8/8/8/5PPP/3R2K1 w - - 0 1"
FOOLS_MATE_SETUP = "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq g3 0 2"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
HANGING_QUEEN = "4k3/8/8/3q4/8/8/8/3QK3 w - - 0 1"


class TestMaterial(unittest.TestCase):
    def test_start_position_is_balanced(self):
        self.assertEqual(material(chess.Board(), chess.WHITE), 0)
        self.assertEqual(material(chess.Board(), chess.BLACK), 0)

    def test_material_is_from_players_point_of_view(self):
        board = chess.Board("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNB1KBNR w KQkq - 0 1")

        self.assertEqual(material(board, chess.WHITE), -900)
        self.assertEqual(material(board, chess.BLACK), 900)

    def test_checkmate(self):
        board = chess.Board(FOOLS_MATE)

        self.assertEqual(material(board, chess.WHITE), LOSS_SCORE)
        self.assertEqual(material(board, chess.BLACK), WIN_SCORE)

    def test_stalemate_is_a_draw(self):
        self.assertEqual(material(chess.Board(STALEMATE), chess.WHITE), DRAW_SCORE)


class TestChessRules(unittest.TestCase):
    def setUp(self):
        self.rules = ChessRules()
        self.board = chess.Board()

    def test_hints_first_illegal_hints_skipped(self):
        moves = self.rules.legal_moves(
            self.board,
            chess.Move.from_uci("g1f3"),
            chess.Move.from_uci("e2e4"),
            chess.Move.from_uci("e2e5"),
        )

        self.assertEqual(moves[:2], [chess.Move.from_uci("g1f3"), chess.Move.from_uci("e2e4")])
        self.assertEqual(len(moves), 20)
        self.assertEqual(set(moves), set(self.board.legal_moves))

    def test_repeated_hint_listed_once(self):
        e4 = chess.Move.from_uci("e2e4")
        moves = self.rules.legal_moves(self.board, e4, e4, None)

        self.assertEqual(moves[0], e4)
        self.assertEqual(moves.count(e4), 1)

    def test_no_hints_natural_order(self):
        self.assertEqual(self.rules.legal_moves(self.board), list(self.board.legal_moves))

    def test_apply_undo_restore_position_key(self):
        key = self.rules.position_key(self.board)
        e4 = chess.Move.from_uci("e2e4")

        self.rules.apply(e4, self.board)
        self.assertNotEqual(self.rules.position_key(self.board), key)
        self.rules.undo(e4, self.board)
        self.assertEqual(self.rules.position_key(self.board), key)

    def test_undo_of_wrong_move(self):
        self.rules.apply(chess.Move.from_uci("e2e4"), self.board)
        with self.assertRaises(ValueError):
            self.rules.undo(chess.Move.from_uci("d2d4"), self.board)

    def test_terminal_and_player(self):
        self.assertFalse(self.rules.is_terminal(self.board, 3))
        self.assertTrue(self.rules.is_terminal(chess.Board(FOOLS_MATE), 3))
        self.assertEqual(self.rules.active_player(self.board), chess.WHITE)

    def test_pass_move_is_null(self):
        self.assertEqual(self.rules.pass_move(), chess.Move.null())


class TestGetBestMove(unittest.TestCase):
    def test_finds_back_rank_mate(self):
        board = chess.Board(BACK_RANK_MATE)
        move, score, depth, nodes = get_best_move(board, 10_000, depth=3)

        self.assertEqual(move, chess.Move.from_uci("d1d8"))
        self.assertEqual(score, WIN_SCORE)
        self.assertEqual(depth, 0)
        self.assertGreater(nodes, 0)
        self.assertEqual(board.fen(), BACK_RANK_MATE)

    def test_finds_mate_for_black(self):
        move, score, _, _ = get_best_move(chess.Board(FOOLS_MATE_SETUP), 10_000, depth=2)

        self.assertEqual(move, chess.Move.from_uci("d8h4"))
        self.assertEqual(score, WIN_SCORE)

    def test_wins_hanging_queen(self):
        move, score, _, _ = get_best_move(chess.Board(HANGING_QUEEN), 30_000, depth=1)

        self.assertEqual(move, chess.Move.from_uci("d1d5"))
        self.assertEqual(score, 900)

    def test_game_over(self):
        self.assertEqual(get_best_move(chess.Board(FOOLS_MATE), 1_000), (None, 0, 0, 0))

    def test_reused_ai_keeps_its_table(self):
        ai = new_chess_ai(10_000, depth=1, seed=3)
        get_best_move(chess.Board(HANGING_QUEEN), 10_000, ai=ai)

        self.assertGreater(len(ai.table), 0)


if __name__ == "__main__":
    unittest.main()

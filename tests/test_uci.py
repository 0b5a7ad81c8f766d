import io
import unittest
from contextlib import redirect_stderr, redirect_stdout

import chess

from interface.uci import INFINITE_TIME_MS, UciHandler

BACK_RANK_MATE = "6k1/5ppp/8/8/8/8/5PPP/3R2K1 w - - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class TestUciHandler(unittest.TestCase):
    def setUp(self):
        self.handler = UciHandler()

    def _run_go(self, *tokens: str) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            self.handler.handle_go(list(tokens))
            self.handler.handle_stop()
        return out.getvalue()

    def test_position_startpos_with_moves(self):
        self.handler.handle_position(["startpos", "moves", "e2e4", "e7e5"])

        expected = chess.Board()
        expected.push_uci("e2e4")
        expected.push_uci("e7e5")
        self.assertEqual(self.handler.board, expected)

    def test_position_fen(self):
        self.handler.handle_position(["fen", *BACK_RANK_MATE.split()])

        self.assertEqual(self.handler.board.fen(), BACK_RANK_MATE)

    def test_position_stops_at_illegal_move(self):
        with redirect_stderr(io.StringIO()) as err:
            self.handler.handle_position(["startpos", "moves", "e2e4", "e2e4"])

        self.assertEqual(len(self.handler.board.move_stack), 1)
        self.assertIn("illegal move", err.getvalue())

    def test_invalid_fen_keeps_board(self):
        with redirect_stderr(io.StringIO()):
            self.handler.handle_position(["fen", "not", "a", "fen"])

        self.assertEqual(self.handler.board, chess.Board())

    def test_time_budget(self):
        parse = self.handler._parse_go_params
        budget = self.handler._time_budget

        self.assertEqual(budget(parse(["movetime", "500"])), 500)
        self.assertEqual(budget(parse(["wtime", "40000", "btime", "1000", "winc", "100"])), 1_100)
        self.assertEqual(budget(parse(["infinite"])), INFINITE_TIME_MS)

    def test_go_reports_mate(self):
        self.handler.handle_position(["fen", *BACK_RANK_MATE.split()])
        output = self._run_go("depth", "2", "movetime", "10000")

        self.assertIn("score cp 99999", output)
        self.assertTrue(output.strip().endswith("bestmove d1d8"))

    def test_go_reuses_ai_with_same_settings(self):
        self.handler.handle_position(["fen", *BACK_RANK_MATE.split()])
        self._run_go("depth", "1", "movetime", "10000")
        first = self.handler.ai
        self._run_go("depth", "1", "movetime", "10000")

        self.assertIs(self.handler.ai, first)

        self.handler.handle_ucinewgame()
        self.assertIsNone(self.handler.ai)

    def test_go_reuses_ai_as_the_clock_runs_down(self):
        self.handler.handle_position(["fen", *BACK_RANK_MATE.split()])
        self._run_go("depth", "1", "wtime", "400000", "btime", "400000")
        first = self.handler.ai
        output = self._run_go("depth", "1", "wtime", "200000", "btime", "200000")

        self.assertIs(self.handler.ai, first)
        self.assertTrue(output.strip().endswith("bestmove d1d8"))

    def test_go_with_new_depth_builds_new_ai(self):
        self.handler.handle_position(["fen", *BACK_RANK_MATE.split()])
        self._run_go("depth", "1", "movetime", "10000")
        first = self.handler.ai
        self._run_go("depth", "2", "movetime", "10000")

        self.assertIsNot(self.handler.ai, first)
        self.assertEqual(self.handler.ai.search_depth, 2)

    def test_go_on_finished_game(self):
        self.handler.handle_position(["fen", *FOOLS_MATE.split()])

        self.assertEqual(self._run_go("movetime", "100").strip(), "bestmove (none)")

    def test_handshake(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.handler.handle_uci()
            self.handler.handle_isready()

        lines = out.getvalue().splitlines()
        self.assertEqual(lines[-2:], ["uciok", "readyok"])


if __name__ == "__main__":
    unittest.main()

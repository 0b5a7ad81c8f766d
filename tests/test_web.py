import unittest

from fastapi.testclient import TestClient

from web.app import app

BACK_RANK_MATE = "6k1/5ppp/8/8/8/8/5PPP/3R2K1 w - - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class TestMoveEndpoint(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_returns_move_and_new_fen(self):
        response = self.client.post(
            "/api/move", json={"fen": BACK_RANK_MATE, "time_limit": 5.0, "depth": 2}
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["move"], "d1d8")
        self.assertEqual(body["score"], 99_999)
        self.assertEqual(body["fen"], "3R2k1/5ppp/8/8/8/8/5PPP/6K1 b - - 1 1")

    def test_invalid_fen(self):
        response = self.client.post("/api/move", json={"fen": "garbage"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid FEN", response.json()["detail"])

    def test_game_over(self):
        response = self.client.post("/api/move", json={"fen": FOOLS_MATE})

        self.assertEqual(response.status_code, 400)
        self.assertIn("already over", response.json()["detail"])


if __name__ == "__main__":
    unittest.main()

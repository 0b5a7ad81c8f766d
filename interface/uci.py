"""
UCI (Universal Chess Interface) protocol handler.

UCI is the standard text-based protocol that allows chess GUIs and testing
tools (like cutechess-cli) to communicate with chess engines. The engine
reads commands from stdin and writes responses to stdout. All output lines
must be flushed immediately: GUI programs won't block waiting for a newline.

Protocol overview:
    GUI → Engine: uci, isready, ucinewgame, position, go, stop, quit
    Engine → GUI: id name, id author, uciok, readyok, info, bestmove

Threading model:
    The UCI loop runs on the main thread and must never block on the search.
    When the GUI sends "go", we spawn a daemon thread to run the search on a
    private copy of the board. The search has no external stop signal: it
    ends by itself when its time budget runs out, so "stop" simply waits for
    the thread to deliver its bestmove.

Engine reuse:
    The handler keeps one AI per game and reuses it while the depth stays the
    same, so the transposition table carries over from move to move. The time
    budget is passed per search, so a changing game clock does not reset it.
    "ucinewgame" drops it.

Critical rule: NEVER print to stdout except for valid UCI responses.
Debug output must go to stderr or be suppressed entirely.
"""

import sys
import os
import threading
import time

# ---------------------------------------------------------------------------
# Path setup: make 'deepsearch' importable when this script is run directly
# as `python interface/uci.py` without installing the package.
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess

from deepsearch.chess_ai import get_best_move, new_chess_ai
from deepsearch.constants import DEFAULT_SEARCH_DEPTH
from deepsearch.search import KillerAlphaBetaAI

# Budget used for "go infinite" and for "go depth N" without a clock.
# The search cannot be interrupted, so "infinite" has to be finite.
INFINITE_TIME_MS = 60_000

# "go depth N" is capped here; the killer tables are sized per depth.
MAX_GO_DEPTH = 32


def _send(line: str) -> None:
    """
    Write a line to stdout and flush immediately.

    UCI requires every output line to be flushed right away. GUIs read
    line-by-line; if the buffer is not flushed, the GUI will hang waiting
    for output that is already in the buffer.
    """
    print(line, flush=True)


def _log(message: str) -> None:
    """Write a diagnostic message to stderr; stdout is reserved for UCI."""
    print(message, file=sys.stderr, flush=True)


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Holds the current board position, the AI for the current game, and the
    search thread lifecycle. The main UCI loop creates one instance and
    dispatches commands to it.

    Attributes:
        board:         The current board position, updated by "position" commands.
        ai:            The AI used for this game, or None before the first "go".
        search_thread: The active search thread, or None if no search is running.
    """

    def __init__(self) -> None:
        self.board: chess.Board = chess.Board()
        self.ai: KillerAlphaBetaAI | None = None
        self.search_thread: threading.Thread | None = None

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        _send("id name deepsearch")
        _send("id author deepsearch developers")
        _send("uciok")

    def handle_isready(self) -> None:
        # Wait for a running search so "readyok" really means ready.
        self._wait_for_search()
        _send("readyok")

    def handle_ucinewgame(self) -> None:
        """Reset the board and forget the AI, dropping its transposition table."""
        self._wait_for_search()
        self.board = chess.Board()
        self.ai = None

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos
            position startpos moves e2e4 e7e5 ...
            position fen <FEN>
            position fen <FEN> moves e2e4 e7e5 ...

        Args:
            tokens: The command tokens with "position" already stripped.
        """
        try:
            if not tokens:
                return

            if tokens[0] == "startpos":
                board = chess.Board()
                move_tokens = tokens[2:] if len(tokens) > 1 and tokens[1] == "moves" else []
            elif tokens[0] == "fen":
                # FEN strings have 6 space-separated fields; find where "moves" appears
                if "moves" in tokens:
                    moves_idx = tokens.index("moves")
                    fen = " ".join(tokens[1:moves_idx])
                    move_tokens = tokens[moves_idx + 1:]
                else:
                    fen = " ".join(tokens[1:])
                    move_tokens = []
                board = chess.Board(fen)
            else:
                _log(f"uci: unknown position type: {tokens[0]}")
                return

            for uci_move in move_tokens:
                move = chess.Move.from_uci(uci_move)
                if move not in board.legal_moves:
                    _log(f"uci: illegal move in position command: {uci_move}")
                    break
                board.push(move)

            self.board = board

        except ValueError as e:
            _log(f"uci: error in position command: {e}")

    def handle_go(self, tokens: list[str]) -> None:
        """
        Parse a "go" command and start the search in a background thread.

        Supported parameters:
            movetime <ms>
            wtime <ms> btime <ms> [winc <ms> binc <ms>]
            depth <n>
            infinite
        """
        self._wait_for_search()

        params = self._parse_go_params(tokens)
        time_limit_ms = self._time_budget(params)
        depth = max(0, min(params.get("depth", DEFAULT_SEARCH_DEPTH), MAX_GO_DEPTH))

        ai = self.ai
        if ai is None or ai.search_depth != depth:
            ai = new_chess_ai(time_limit_ms, depth)
            self.ai = ai

        board_copy = self.board.copy()

        def search_and_reply() -> None:
            """Run the search and emit the UCI info + bestmove lines."""
            try:
                start = time.monotonic()
                move, score, reached, nodes = get_best_move(board_copy, time_limit_ms, ai=ai)
                elapsed_ms = max(1, int((time.monotonic() - start) * 1000))

                if move is not None:
                    nps = max(1, nodes * 1000 // elapsed_ms)
                    _send(
                        f"info depth {reached} score cp {score} "
                        f"nodes {nodes} nps {nps} time {elapsed_ms}"
                    )
                    _send(f"bestmove {move.uci()}")
                else:
                    # No legal moves: the game is over (checkmate or stalemate).
                    _send("bestmove (none)")

            except Exception as e:
                _log(f"search error: {e}")
                _send("bestmove (none)")

        self.search_thread = threading.Thread(target=search_and_reply, daemon=True)
        self.search_thread.start()

    def handle_stop(self) -> None:
        """
        Respond to the "stop" command.

        The search ends on its own budget; we wait for it so the GUI gets its
        bestmove before the next command is processed.
        """
        self._wait_for_search()

    def handle_quit(self) -> None:
        self._wait_for_search()
        sys.exit(0)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _wait_for_search(self) -> None:
        if self.search_thread is not None and self.search_thread.is_alive():
            self.search_thread.join()
        self.search_thread = None

    @staticmethod
    def _parse_go_params(tokens: list[str]) -> dict[str, int]:
        params: dict[str, int] = {}
        i = 0
        while i < len(tokens) - 1:
            key = tokens[i]
            try:
                params[key] = int(tokens[i + 1])
                i += 2
            except ValueError:
                i += 1
        return params

    def _time_budget(self, params: dict[str, int]) -> int:
        """
        Extract the time budget in milliseconds from parsed "go" parameters.

        movetime wins; otherwise 1/40 of the remaining clock plus the
        increment for the side to move; otherwise INFINITE_TIME_MS.
        """
        if "movetime" in params:
            return max(1, params["movetime"])

        color = self.board.turn
        time_key = "wtime" if color == chess.WHITE else "btime"
        inc_key = "winc" if color == chess.WHITE else "binc"

        if time_key in params:
            time_left = params[time_key]
            increment = params.get(inc_key, 0)
            return max(1, time_left // 40 + increment)

        return INFINITE_TIME_MS


def run_uci_loop() -> None:
    """
    Main UCI protocol loop.

    Reads lines from stdin and dispatches each command to the UciHandler.
    Runs until the "quit" command is received or stdin is closed. A failing
    command is logged to stderr and the loop continues.
    """
    handler = UciHandler()

    for raw_line in sys.stdin:
        line = raw_line.strip()
        if not line:
            continue

        tokens = line.split()
        command = tokens[0]
        args = tokens[1:]

        try:
            if command == "uci":
                handler.handle_uci()
            elif command == "isready":
                handler.handle_isready()
            elif command == "ucinewgame":
                handler.handle_ucinewgame()
            elif command == "position":
                handler.handle_position(args)
            elif command == "go":
                handler.handle_go(args)
            elif command == "stop":
                handler.handle_stop()
            elif command == "quit":
                handler.handle_quit()
            else:
                _log(f"uci: ignoring unknown command: {command!r}")

        except Exception as e:
            _log(f"uci: unhandled error for command {command!r}: {e}")

    handler._wait_for_search()


if __name__ == "__main__":
    run_uci_loop()

"""
FastAPI web application for the deepsearch chess AI.

Exposes a single REST endpoint (POST /api/move) that accepts a FEN position,
a time limit and an optional search depth, runs the iterative-deepening
search, and returns the chosen move with its score and the depth reached.

Architecture notes:
- Sync endpoint (not async): FastAPI runs sync handlers in a thread pool,
  which is the correct pattern for CPU-bound blocking calls like the search.
- Stateless per request: the client sends the full FEN each time, and each
  request gets a fresh AI, so no transposition table is shared between
  concurrent requests.
"""

import logging

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from deepsearch.chess_ai import get_best_move
from deepsearch.constants import DEFAULT_SEARCH_DEPTH

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="deepsearch", version="1.0.0")

# Bounds for client-supplied search parameters.
MIN_TIME_LIMIT = 0.1
MAX_TIME_LIMIT = 30.0
MAX_DEPTH = 12


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class MoveRequest(BaseModel):
    """
    Client request to the AI.

    Fields:
        fen: Full FEN string representing the current board position.
        time_limit: Seconds allocated for this move, clamped to [0.1, 30.0].
        depth: Maximum iterative-deepening depth, clamped to [0, 12].
    """

    fen: str
    time_limit: float = 1.0
    depth: int = DEFAULT_SEARCH_DEPTH

    @field_validator("time_limit")
    @classmethod
    def clamp_time_limit(cls, v: float) -> float:
        return max(MIN_TIME_LIMIT, min(v, MAX_TIME_LIMIT))

    @field_validator("depth")
    @classmethod
    def clamp_depth(cls, v: int) -> int:
        return max(0, min(v, MAX_DEPTH))


class MoveResponse(BaseModel):
    """
    Result of a search.

    Fields:
        move: Chosen move in UCI notation (e.g. "e2e4", "e7e8q").
        fen: Board FEN after the move is applied.
        score: Score in centipawns from the mover's perspective.
        depth: Deepest iteration the search started.
    """

    move: str
    fen: str
    score: int
    depth: int


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Compute a move for the given position.

    Raises:
        HTTPException 400: Malformed FEN or game already over.
        HTTPException 500: The search failed or returned no move.
    """
    try:
        board = chess.Board(request.fen)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc

    if board.is_game_over():
        raise HTTPException(
            status_code=400,
            detail=f"Game is already over: {board.result()}",
        )

    time_limit_ms = int(request.time_limit * 1000)

    try:
        move, score, depth, nodes = get_best_move(board, time_limit_ms, request.depth)
    except Exception as exc:
        _log.exception("Search failed for FEN=%s", request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if move is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    _log.info(
        "Move=%s score=%d depth=%d nodes=%d fen=%s",
        move.uci(),
        score,
        depth,
        nodes,
        request.fen[:40],
    )

    board.push(move)
    return MoveResponse(
        move=move.uci(),
        fen=board.fen(),
        score=score,
        depth=depth,
    )

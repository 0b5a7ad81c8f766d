#!/usr/bin/env python3
"""
Benchmark: measure nodes, table hits and cutoffs per move.

Run before and after each search change (move ordering, table policy, etc.)
to quantify the effect. Fewer nodes at the same depth means more effective
pruning; a higher first-move cutoff rate means better move ordering.

The search runs in-process so the statistics sink can be read directly.

Usage: python3 tools/bench.py [--time-ms 2000] [--depth 4] [--depth-preferred]
"""
import argparse
import os
import sys
import time

_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess

from deepsearch.chess_ai import ChessRules
from deepsearch.evaluate import material
from deepsearch.search import KillerAlphaBetaAI
from deepsearch.stats import SearchStatistics

# Fixed positions spanning opening, middlegame, and endgame.
# Same positions for every comparison.
POSITIONS = [
    ("Start",        chess.STARTING_FEN),
    ("Italian",      "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R b KQkq - 3 3"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Complex mid",  "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8"),
    ("Mate in 1",    "6k1/5ppp/8/8/8/8/5PPP/3R2K1 w - - 0 1"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Pawn race",    "8/1p4k1/p7/P1K5/8/8/8/8 w - - 0 1"),
]


def run_position(label: str, fen: str, time_ms: int, depth: int, depth_preferred: bool) -> dict:
    """Search one position with a fresh AI and return its metrics."""
    stats = SearchStatistics()
    ai = KillerAlphaBetaAI(
        "bench",
        material,
        ChessRules(),
        depth,
        time_ms,
        seed=0,
        stats=stats,
        depth_preferred_table=depth_preferred,
    )
    board = chess.Board(fen)

    start = time.monotonic()
    move = ai.choose_move(board)
    time_ms_used = max(1, int((time.monotonic() - start) * 1000))

    return {
        "label": label,
        "move": move.uci() if move is not None else "(none)",
        "depth": ai.depth_reached,
        "score": ai.best_value if ai.best_value is not None else 0,
        "nodes": ai.nodes,
        "hits": stats.cache_hits,
        "cutoffs": stats.cutoffs,
        "first": stats.first_move_cutoff_rate,
        "time_ms": time_ms_used,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="deepsearch benchmark")
    parser.add_argument("--time-ms", type=int, default=2_000)
    parser.add_argument("--depth", type=int, default=4)
    parser.add_argument("--depth-preferred", action="store_true",
                        help="only replace table entries with deeper results")
    args = parser.parse_args()

    print(f"deepsearch benchmark — {sys.executable}")
    print(f"time budget {args.time_ms}ms, max depth {args.depth}, "
          f"depth-preferred table: {args.depth_preferred}")
    print()
    print(
        f"{'Position':<12} {'Move':<7} {'Depth':>5} {'Score':>6} {'Nodes':>8} "
        f"{'Hits':>7} {'Cutoffs':>8} {'1st':>5} {'Time(ms)':>9}"
    )
    print("-" * 76)

    results = []
    for label, fen in POSITIONS:
        r = run_position(label, fen, args.time_ms, args.depth, args.depth_preferred)
        results.append(r)
        print(
            f"{r['label']:<12} {r['move']:<7} {r['depth']:>5} {r['score']:>6} "
            f"{r['nodes']:>8,} {r['hits']:>7,} {r['cutoffs']:>8,} "
            f"{r['first']:>5.0%} {r['time_ms']:>9,}"
        )

    avg_nodes = sum(r["nodes"] for r in results) // len(results)
    avg_time = sum(r["time_ms"] for r in results) // len(results)
    print("-" * 76)
    print(f"{'AVERAGE':<12} {'':<7} {'':>5} {'':>6} {avg_nodes:>8,} "
          f"{'':>7} {'':>8} {'':>5} {avg_time:>9,}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Benchmark: measure nodes searched and time per move at a fixed depth.

Run before and after each change to move ordering or evaluation to quantify
its effect. A lower node count at the same depth indicates more effective
pruning; a higher NPS indicates a faster evaluation function.

Usage: python3 tools/bench.py [--depth N] [--fen FEN ...] [--verbose]
"""
import argparse
import logging
import os
import sys
import time

_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess

from turochamp.constants import SEARCH_DEPTH
from turochamp.search import search_position

_log = logging.getLogger("bench")

# Positions spanning opening, middlegame, and endgame.
# The same positions are used for every version comparison.
POSITIONS = [
    ("Start",        chess.STARTING_FEN),
    ("After 1.e4",   "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"),
    ("Italian",      "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R b KQkq - 3 3"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Complex mid",  "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8"),
    ("Back rank",    "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Pawn race",    "8/1p4k1/p7/P1K5/8/8/8/8 w - - 0 1"),
]


def run_position(label: str, fen: str, depth: int) -> dict:
    """Search a single position in-process and return metrics.

    Args:
        label: Human-readable position name for display.
        fen: Position to search.
        depth: Iterative-deepening depth to search to.

    Returns:
        Dict with keys: label, move, depth, score, nodes, nps, time_ms.
    """
    board = chess.Board(fen)
    start = time.monotonic()
    result = search_position(board, max_depth=depth)
    time_ms = max(1, int((time.monotonic() - start) * 1000))

    return {
        "label": label,
        "move": result.move.uci() if result.move else "(none)",
        "depth": result.depth,
        "score": result.score,
        "nodes": result.nodes,
        "nps": result.nodes * 1000 // time_ms,
        "time_ms": time_ms,
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--depth", type=int, default=SEARCH_DEPTH)
    parser.add_argument("--fen", action="append", default=[],
                        help="extra position to include (may be repeated)")
    parser.add_argument("--verbose", action="store_true",
                        help="log every completed iteration to stderr")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    positions = list(POSITIONS)
    for fen in args.fen:
        try:
            chess.Board(fen)
        except ValueError as exc:
            _log.error("Skipping invalid FEN %r: %s", fen, exc)
            continue
        positions.append((f"Custom {len(positions) + 1}", fen))

    print(f"Turochamp benchmark ({sys.executable})")
    print(f"Depth: {args.depth}")
    print()
    print(
        f"{'Position':<14} {'Move':<7} {'Depth':>5} {'Score':>7} "
        f"{'Nodes':>8} {'NPS':>8} {'Time(ms)':>9}"
    )
    print("-" * 69)

    results = []
    for label, fen in positions:
        r = run_position(label, fen, args.depth)
        results.append(r)
        print(
            f"{r['label']:<14} {r['move']:<7} {r['depth']:>5} {r['score']:>7} "
            f"{r['nodes']:>8,} {r['nps']:>8,} {r['time_ms']:>9,}"
        )

    valid = [r for r in results if r["nodes"] > 0]
    if valid:
        avg_nodes = sum(r["nodes"] for r in valid) // len(valid)
        avg_time = sum(r["time_ms"] for r in valid) // len(valid)
        avg_nps = sum(r["nps"] for r in valid) // len(valid)
        print("-" * 69)
        print(
            f"{'AVERAGE':<14} {'':<7} {'':<5} {'':<7} "
            f"{avg_nodes:>8,} {avg_nps:>8,} {avg_time:>9,}"
        )


if __name__ == "__main__":
    main()

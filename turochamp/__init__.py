"""
Turochamp search engine package.

This package implements the decision engine of a chess-playing agent:
iterative-deepening negamax with alpha-beta pruning, quiescence search,
history-based move ordering, and a Turochamp-style evaluation function.
Board representation and move generation come from python-chess.

Modules:
    constants - Piece values, search parameters, and evaluation weights
    position  - Scoped push/null-move helpers and host queries over chess.Board
    evaluate  - Static evaluation (material, mobility, king exposure, safety, pawns)
    ordering  - MVV-LVA capture ordering, unsafe-square penalty, history table
    search    - Quiescence, alpha-beta, iterative deepening, think()
"""

from turochamp.search import think

__all__ = ["think"]

"""
Thin adapter over python-chess for the operations the search relies on.

The search owns a single mutable chess.Board for the whole call tree. Every
push issued by the engine goes through pushed() or null_move(), which pop in
a finally block so the board is restored on every exit path, cutoffs
included.
"""

from contextlib import contextmanager
from typing import Iterator

import chess


@contextmanager
def pushed(board: chess.Board, move: chess.Move) -> Iterator[chess.Board]:
    """Apply move for the duration of the with-block."""
    board.push(move)
    try:
        yield board
    finally:
        board.pop()


@contextmanager
def null_move(board: chess.Board) -> Iterator[chess.Board]:
    """Pass the turn for the duration of the with-block."""
    board.push(chess.Move.null())
    try:
        yield board
    finally:
        board.pop()


def is_draw(board: chess.Board) -> bool:
    """
    True for stalemate, insufficient material, the fifty-move rule, or a
    position that already occurred earlier in the game.

    Repetition counts as a draw on its first recurrence: inside a search,
    steering back into a known position gains nothing.
    """
    return (
        board.is_stalemate()
        or board.is_insufficient_material()
        or board.halfmove_clock >= 100
        or board.is_repetition(2)
    )


def queen_attacks(board: chess.Board, square: chess.Square) -> chess.Bitboard:
    """Squares a queen standing on square would attack, given current occupancy."""
    occupied = board.occupied
    return (
        chess.BB_RANK_ATTACKS[square][chess.BB_RANK_MASKS[square] & occupied]
        | chess.BB_FILE_ATTACKS[square][chess.BB_FILE_MASKS[square] & occupied]
        | chess.BB_DIAG_ATTACKS[square][chess.BB_DIAG_MASKS[square] & occupied]
    )

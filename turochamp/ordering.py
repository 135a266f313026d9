"""
Move ordering: MVV-LVA captures, unsafe-square penalty, history heuristic.

Good ordering makes alpha-beta cut off early. Each move gets a priority:

    captures:        100_000 + victim_value - attacker_value
    unsafe square:   - ATTACKED_SQUARE_PENALTY if the opponent attacks the
                     destination (applies to captures and quiet moves alike)
    history:         + accumulated bonus for (side, from, to)

Moves are sorted by descending priority. Python's sort is stable, so ties
keep the generator's order and searches are reproducible.
"""

from typing import Iterable

import chess

from turochamp.constants import ATTACKED_SQUARE_PENALTY, CAPTURE_ORDER_BASE, PIECE_VALUES


class HistoryTable:
    """
    Cutoff bonuses keyed by (side to move, origin square, destination square).

    Stored as a flat list of 2 * 64 * 64 ints. The driver clears it at the
    start of every iterative-deepening depth.
    """

    def __init__(self) -> None:
        self._table: list[int] = [0] * (2 * 64 * 64)

    @staticmethod
    def _index(color: chess.Color, from_square: chess.Square, to_square: chess.Square) -> int:
        return (int(color) * 64 + from_square) * 64 + to_square

    def get(self, color: chess.Color, move: chess.Move) -> int:
        return self._table[self._index(color, move.from_square, move.to_square)]

    def reward(self, color: chess.Color, move: chess.Move, depth: int) -> None:
        """Credit a move that produced a beta cutoff at the given remaining depth."""
        self._table[self._index(color, move.from_square, move.to_square)] += depth * depth

    def clear(self) -> None:
        self._table = [0] * (2 * 64 * 64)

    def total(self) -> int:
        return sum(self._table)


def move_priority(board: chess.Board, move: chess.Move, history: HistoryTable) -> int:
    score = 0
    if board.is_capture(move):
        attacker = board.piece_type_at(move.from_square)
        # En passant: the captured pawn is not on move.to_square.
        victim = board.piece_type_at(move.to_square) or chess.PAWN
        score += CAPTURE_ORDER_BASE + PIECE_VALUES[victim] - PIECE_VALUES.get(attacker, 0)
    if board.is_attacked_by(not board.turn, move.to_square):
        score -= ATTACKED_SQUARE_PENALTY
    score += history.get(board.turn, move)
    return score


def order_moves(board: chess.Board, moves: Iterable[chess.Move],
                history: HistoryTable) -> list[chess.Move]:
    """
    Return moves sorted best-first for the side to move.

    Args:
        board:   Position the moves belong to. Not modified.
        moves:   Candidate moves (all legal moves, or captures only).
        history: Cutoff bonuses accumulated during the current iteration.

    Returns:
        A new list, highest priority first, ties in generator order.
    """
    return sorted(moves, key=lambda move: move_priority(board, move, history), reverse=True)

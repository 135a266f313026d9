"""
Turochamp-style static evaluation: material plus positional credit.

The score is always returned from the perspective of the side to move
(negamax convention). It is built from two halves:

- Material: piece counts times fixed values, own minus opponent.
- Positional: a score computed for the side to move only. The opponent's
  positional score is obtained by passing the turn with a null move,
  recomputing, and undoing the null move. Own minus opponent gives the
  positional half.

The positional score sums four terms:

1. Mobility. Legal non-pawn, non-castling moves are grouped by origin
   square. Each origin accumulates 2 per capture and 1 per quiet move, and
   contributes isqrt(10000 * count), so a piece's first few moves are worth
   more than its last ones.
2. King exposure. The king's square is treated as if a queen stood on it;
   the number of squares that queen would attack goes through the same
   square-root formula. This is a proxy, not a real king-safety model.
3. Piece safety. Each knight, bishop, rook and queen defended once earns
   100, defended twice or more earns 150.
4. Pawn credit. 20 per rank advanced from the starting rank, plus 30 when a
   non-pawn piece defends the pawn.
"""

import math

import chess

from turochamp.constants import (
    CAPTURE_MOBILITY_WEIGHT,
    DEFENDED_ONCE_BONUS,
    DEFENDED_TWICE_BONUS,
    MINOR_AND_MAJOR_PIECES,
    MOBILITY_SCALE,
    PAWN_DEFENDED_BONUS,
    PAWN_RANK_BONUS,
    PIECE_VALUES,
    QUIET_MOBILITY_WEIGHT,
)
from turochamp.position import null_move, queen_attacks


def mobility_score(count: int) -> int:
    """
    Square-root credit for a weighted move count: floor(sqrt(10000 * count)).

    Integer square root keeps the result exact for every count, e.g.
    0 -> 0, 1 -> 100, 2 -> 141, 8 -> 282, 27 -> 519.
    """
    return math.isqrt(MOBILITY_SCALE * count)


def material(board: chess.Board, color: chess.Color) -> int:
    """Sum of piece values for one side. Kings count for nothing."""
    return sum(
        chess.popcount(board.pieces_mask(piece_type, color)) * value
        for piece_type, value in PIECE_VALUES.items()
    )


def piece_attack_counts(board: chess.Board, color: chess.Color) -> list[int]:
    """
    For every square, how many of color's knights, bishops, rooks and queens
    attack it. Squares holding friendly pieces count, so this doubles as a
    defender count.
    """
    counts = [0] * 64
    for piece_type in MINOR_AND_MAJOR_PIECES:
        for square in chess.scan_forward(board.pieces_mask(piece_type, color)):
            for target in chess.scan_forward(board.attacks_mask(square)):
                counts[target] += 1
    return counts


def pawn_attack_counts(board: chess.Board, color: chess.Color) -> list[int]:
    """For every square, how many of color's pawns attack it."""
    counts = [0] * 64
    for square in chess.scan_forward(board.pieces_mask(chess.PAWN, color)):
        for target in chess.scan_forward(chess.BB_PAWN_ATTACKS[color][square]):
            counts[target] += 1
    return counts


def _mobility(board: chess.Board) -> int:
    weighted: dict[chess.Square, int] = {}
    for move in board.generate_legal_moves():
        if board.piece_type_at(move.from_square) == chess.PAWN or board.is_castling(move):
            continue
        weight = CAPTURE_MOBILITY_WEIGHT if board.is_capture(move) else QUIET_MOBILITY_WEIGHT
        weighted[move.from_square] = weighted.get(move.from_square, 0) + weight
    return sum(mobility_score(count) for count in weighted.values())


def _king_exposure(board: chess.Board, color: chess.Color) -> int:
    king_square = board.king(color)
    if king_square is None:
        return 0
    return mobility_score(chess.popcount(queen_attacks(board, king_square)))


def _piece_safety(board: chess.Board, color: chess.Color,
                  piece_defenders: list[int], pawn_defenders: list[int]) -> int:
    score = 0
    for piece_type in MINOR_AND_MAJOR_PIECES:
        for square in chess.scan_forward(board.pieces_mask(piece_type, color)):
            defenders = piece_defenders[square] + pawn_defenders[square]
            if defenders >= 2:
                score += DEFENDED_TWICE_BONUS
            elif defenders == 1:
                score += DEFENDED_ONCE_BONUS
    return score


def _pawn_credit(board: chess.Board, color: chess.Color, piece_defenders: list[int]) -> int:
    score = 0
    for square in chess.scan_forward(board.pieces_mask(chess.PAWN, color)):
        rank = chess.square_rank(square)
        advanced = rank - 1 if color == chess.WHITE else 6 - rank
        score += PAWN_RANK_BONUS * advanced
        if piece_defenders[square]:
            score += PAWN_DEFENDED_BONUS
    return score


def positional_score(board: chess.Board) -> int:
    """Positional credit for the side to move. The board is not modified."""
    color = board.turn
    piece_defenders = piece_attack_counts(board, color)
    pawn_defenders = pawn_attack_counts(board, color)
    return (
        _mobility(board)
        + _king_exposure(board, color)
        + _piece_safety(board, color, piece_defenders, pawn_defenders)
        + _pawn_credit(board, color, piece_defenders)
    )


def evaluate(board: chess.Board) -> int:
    """
    Centipawn evaluation from the side-to-move's perspective.

    Args:
        board: The current position. Temporarily receives a null move to
               score the opponent's positional terms; restored on return.

    Returns:
        Own material minus opponent material plus own positional score
        minus opponent positional score. Positive favours the side to move.

    Example:
        >>> import chess
        >>> evaluate(chess.Board())  # the start position is symmetric
        0
    """
    color = board.turn
    score = material(board, color) - material(board, not color)
    score += positional_score(board)
    with null_move(board):
        score -= positional_score(board)
    return score

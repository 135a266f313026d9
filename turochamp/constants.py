"""
Engine constants: piece values, search parameters, and evaluation weights.

All numeric constants used by the search and the evaluator are defined here
so that no module needs to introduce its own magic numbers. Values are in
centipawns (1 pawn = 100 cp) unless stated otherwise.

The evaluation weights follow a Turochamp-style scheme: material plus a
handful of positional terms (mobility, king exposure, piece safety, pawn
advancement) rather than piece-square tables.
"""

import chess

# ---------------------------------------------------------------------------
# Piece values (centipawns)
# ---------------------------------------------------------------------------
# The king carries no material value: checkmate is handled structurally by
# the search, never by counting the king.

PAWN_VALUE: int = 100
KNIGHT_VALUE: int = 300
BISHOP_VALUE: int = 350
ROOK_VALUE: int = 500
QUEEN_VALUE: int = 1000
KING_VALUE: int = 0

PIECE_VALUES: dict[int, int] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
    chess.KING:   KING_VALUE,
}

# Piece kinds that count as "non-pawn pieces" for mobility, safety and
# defender counting. The king is deliberately absent.
MINOR_AND_MAJOR_PIECES: tuple[int, ...] = (
    chess.KNIGHT,
    chess.BISHOP,
    chess.ROOK,
    chess.QUEEN,
)

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# MATE_SCORE is offset by the distance from the root so that shallower mates
# are preferred. INFINITY is the initial search window and lies well outside
# any reachable score.

MATE_SCORE: int = 100_000
MATE_THRESHOLD: int = MATE_SCORE - 1_000
INFINITY: int = 999_999
DRAW_SCORE: int = 0

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------
# Iterative deepening always runs every depth from 1 to SEARCH_DEPTH; there is
# no clock-based cutoff.

SEARCH_DEPTH: int = 3

# ---------------------------------------------------------------------------
# Move ordering
# ---------------------------------------------------------------------------

CAPTURE_ORDER_BASE: int = 100_000
ATTACKED_SQUARE_PENALTY: int = 150

# ---------------------------------------------------------------------------
# Evaluation weights
# ---------------------------------------------------------------------------
# Mobility per origin square is isqrt(MOBILITY_SCALE * weighted_count), i.e.
# roughly 100 * sqrt(count).

MOBILITY_SCALE: int = 10_000
CAPTURE_MOBILITY_WEIGHT: int = 2
QUIET_MOBILITY_WEIGHT: int = 1

DEFENDED_ONCE_BONUS: int = 100
DEFENDED_TWICE_BONUS: int = 150

PAWN_RANK_BONUS: int = 20
PAWN_DEFENDED_BONUS: int = 30

# ---------------------------------------------------------------------------
# Castling incentive (root ply only)
# ---------------------------------------------------------------------------

CASTLE_BONUS: int = 300
CASTLE_NEXT_PLY_BONUS: int = 200
CASTLING_RIGHTS_BONUS: int = 100

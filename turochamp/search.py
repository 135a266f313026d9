"""
Search entry point: negamax with alpha-beta pruning, quiescence search,
history-ordered moves, and iterative deepening over a fixed depth range.

think() is the only operation the host needs: given a board it returns one
legal move. search_position() returns the same decision together with the
score, depth and node counts for tooling such as tools/bench.py.

Search layers, outermost first:

1. Iterative deepening: depth 1, 2, ... SEARCH_DEPTH. Each depth starts a
   fresh iteration (counters, root best pair and history table all reset)
   and the best root move of the deepest completed iteration is played.
   A time budget may be passed but is only logged; every configured depth
   always runs to completion.

2. Alpha-beta (negamax): full-width search to the remaining depth. At the
   root of an iteration, a castling incentive is added to each move's score
   and the best (score, move) pair is tracked separately from alpha. Beta
   cutoffs below the root reward the refuting move in the history table.

3. Quiescence: capture-only extension at the horizon. The side to move may
   "stand pat" on the static evaluation instead of capturing.

The board is shared by the whole call tree. Every push is scoped by
turochamp.position.pushed()/null_move(), so the board is back in its
original state when any of these functions returns.
"""

import logging
from dataclasses import dataclass, field
from typing import NamedTuple

import chess

from turochamp.constants import (
    CASTLE_BONUS,
    CASTLE_NEXT_PLY_BONUS,
    CASTLING_RIGHTS_BONUS,
    DRAW_SCORE,
    INFINITY,
    MATE_SCORE,
    SEARCH_DEPTH,
)
from turochamp.evaluate import evaluate
from turochamp.ordering import HistoryTable, order_moves
from turochamp.position import is_draw, null_move, pushed

_log = logging.getLogger(__name__)


@dataclass
class SearchState:
    """
    Per-search mutable state, owned by the driver.

    Attributes:
        root_depth:  Depth the current iteration started from. A node is the
                     root exactly when its remaining depth equals this.
        best_move:   Best root move of the current iteration, or None before
                     the first root move has been searched.
        best_score:  Score of best_move, castling incentive included.
        node_count:  Alpha-beta nodes visited in the current iteration.
        qnode_count: Quiescence nodes visited in the current iteration.
        history:     Cutoff bonuses used by move ordering.
    """

    root_depth: int = 0
    best_move: chess.Move | None = None
    best_score: int = -INFINITY
    node_count: int = 0
    qnode_count: int = 0
    history: HistoryTable = field(default_factory=HistoryTable)

    def begin_iteration(self, depth: int) -> None:
        """Reset everything that is scoped to a single deepening iteration."""
        self.root_depth = depth
        self.best_move = None
        self.best_score = -INFINITY
        self.node_count = 0
        self.qnode_count = 0
        self.history.clear()


class SearchResult(NamedTuple):
    move: chess.Move | None
    score: int
    depth: int
    nodes: int


def castling_bonus(board: chess.Board, move: chess.Move) -> int:
    """
    Root-only incentive that nudges the engine toward castling.

    Returns:
        CASTLE_BONUS if move castles. Otherwise, looking at the position
        after move: 0 if the mover has lost all castling rights,
        CASTLE_NEXT_PLY_BONUS if the mover could castle on its very next
        turn (tested by passing the opponent's turn with a null move), and
        CASTLING_RIGHTS_BONUS if rights remain but castling is not yet
        available.
    """
    if board.is_castling(move):
        return CASTLE_BONUS

    mover = board.turn
    with pushed(board, move):
        if not board.has_castling_rights(mover):
            return 0
        with null_move(board):
            if any(board.is_castling(reply) for reply in board.legal_moves):
                return CASTLE_NEXT_PLY_BONUS
    return CASTLING_RIGHTS_BONUS


def quiescence(board: chess.Board, alpha: int, beta: int, state: SearchState) -> int:
    """
    Capture-only search that resolves exchanges before trusting the evaluator.

    The static evaluation is a lower bound (stand-pat): the side to move can
    always decline further captures. If it already meets beta the node fails
    high immediately. Otherwise captures are searched in priority order until
    none remain; each capture strictly reduces material, so recursion ends.

    Args:
        board: Current position. Restored before returning.
        alpha: Lower bound of the search window.
        beta:  Upper bound of the search window.
        state: Search state; only the quiescence node counter is touched.

    Returns:
        Score in centipawns for the side to move, within [alpha, beta].
    """
    state.qnode_count += 1

    stand_pat = evaluate(board)
    if stand_pat >= beta:
        return beta
    if stand_pat > alpha:
        alpha = stand_pat

    for move in order_moves(board, board.generate_legal_captures(), state.history):
        with pushed(board, move):
            score = -quiescence(board, -beta, -alpha, state)

        if score >= beta:
            return beta
        if score > alpha:
            alpha = score

    return alpha


def alpha_beta(board: chess.Board, depth: int, alpha: int, beta: int, state: SearchState) -> int:
    """
    Negamax search with alpha-beta pruning and quiescence at the horizon.

    Terminal checks run in this order: depth 0 drops into quiescence, then a
    checkmated side to move scores -MATE_SCORE plus its distance from the
    root (so nearer mates are more extreme), then any draw below the root
    scores 0. A drawn root is still searched so that a move is chosen.

    For each ordered legal move the child is searched with the negated,
    swapped window. When a score raises alpha and also reaches beta, the
    node returns beta at once; below the root the refuting move earns
    depth * depth in the history table.

    At the root of an iteration (depth == state.root_depth), each move's
    score includes castling_bonus(). The child is searched with the window
    shifted down by that bonus, so a root score is exact whenever it beats
    alpha and never exceeds alpha otherwise. The best (score, move) pair is
    recorded on state with a strict comparison, so the first of several
    equal moves in search order wins.

    Args:
        board: Current position. Restored before returning.
        depth: Remaining depth in plies.
        alpha: Lower bound of the search window.
        beta:  Upper bound of the search window.
        state: Search state (root depth, root best pair, history, counters).

    Returns:
        beta on a cutoff, otherwise the (possibly raised) alpha.
    """
    if depth == 0:
        return quiescence(board, alpha, beta, state)

    state.node_count += 1

    at_root = depth == state.root_depth

    if board.is_checkmate():
        return -MATE_SCORE + (state.root_depth - depth)
    # The root must still pick a move, even in a drawn position.
    if not at_root and is_draw(board):
        return DRAW_SCORE

    for move in order_moves(board, board.legal_moves, state.history):
        bonus = castling_bonus(board, move) if at_root else 0
        # Shift the child's window by the bonus so its fail-hard bound
        # cannot be lifted above alpha by the bonus alone.
        with pushed(board, move):
            score = -alpha_beta(board, depth - 1, bonus - beta, bonus - alpha, state) + bonus

        if score > alpha:
            alpha = score
            if score >= beta:
                if not at_root:
                    state.history.reward(board.turn, move, depth)
                return beta

        if at_root and score > state.best_score:
            state.best_score = score
            state.best_move = move

    return alpha


def search_position(board: chess.Board, time_limit_ms: int | None = None,
                    max_depth: int = SEARCH_DEPTH) -> SearchResult:
    """
    Run iterative deepening from depth 1 to max_depth.

    Args:
        board:         The position to search. Restored before returning.
        time_limit_ms: Accepted for interface compatibility; never consulted.
        max_depth:     Deepest iteration to run (inclusive).

    Returns:
        SearchResult of the deepest completed iteration. move is None when
        the side to move has no legal moves.

    Raises:
        ValueError: If max_depth is smaller than 1.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")

    if not any(board.legal_moves):
        _log.info("No legal moves in %s", board.fen())
        return SearchResult(None, 0, 0, 0)

    if time_limit_ms is not None:
        _log.debug("Time budget %d ms ignored; searching to depth %d", time_limit_ms, max_depth)

    state = SearchState()
    result = SearchResult(None, 0, 0, 0)

    for depth in range(1, max_depth + 1):
        state.begin_iteration(depth)
        alpha_beta(board, depth, -INFINITY, INFINITY, state)

        result = SearchResult(state.best_move, state.best_score, depth,
                              state.node_count + state.qnode_count)
        _log.debug(
            "depth=%d score=%d move=%s nodes=%d qnodes=%d history=%d",
            depth,
            state.best_score,
            state.best_move.uci() if state.best_move else "(none)",
            state.node_count,
            state.qnode_count,
            state.history.total(),
        )

    _log.info("Move=%s score=%d depth=%d nodes=%d fen=%s",
              result.move.uci() if result.move else "(none)",
              result.score, result.depth, result.nodes, board.fen())
    return result


def think(board: chess.Board, time_limit_ms: int | None = None,
          max_depth: int = SEARCH_DEPTH) -> chess.Move | None:
    """
    Choose a move for the side to move.

    This is the single operation the host calls. The board is borrowed for
    the duration of the call and handed back unchanged.

    Args:
        board:         The current position.
        time_limit_ms: Time allowance in milliseconds. Accepted but unused;
                       the search always runs every depth up to max_depth.
        max_depth:     Deepest iterative-deepening iteration.

    Returns:
        A legal move, or None if the game is already over.
    """
    return search_position(board, time_limit_ms, max_depth).move

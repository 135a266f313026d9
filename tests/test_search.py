import logging

import chess
import pytest

from turochamp.constants import (
    CASTLE_BONUS,
    CASTLE_NEXT_PLY_BONUS,
    CASTLING_RIGHTS_BONUS,
    INFINITY,
    MATE_SCORE,
    MATE_THRESHOLD,
    PAWN_VALUE,
    QUEEN_VALUE,
)
from turochamp.evaluate import evaluate
from turochamp.ordering import order_moves
from turochamp.position import is_draw
from turochamp.search import (
    SearchState,
    alpha_beta,
    castling_bonus,
    quiescence,
    search_position,
    think,
)

# Small quiet positions without castling rights.
EQUIVALENCE_FENS = [
    "4k3/8/3r4/8/4N3/8/3P4/4K3 w - - 0 1",
    "3r2k1/5p2/8/3B4/8/8/5PPP/6K1 w - - 0 1",
]

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"


def _reference_quiescence(board):
    best = evaluate(board)
    for move in list(board.generate_legal_captures()):
        board.push(move)
        best = max(best, -_reference_quiescence(board))
        board.pop()
    return best


def _reference_negamax(board, depth, root_depth):
    """Full-width negamax without pruning, same terminal rules as alpha_beta."""
    if depth == 0:
        return _reference_quiescence(board)
    if board.is_checkmate():
        return -MATE_SCORE + (root_depth - depth)
    if is_draw(board):
        return 0
    best = -INFINITY
    for move in list(board.legal_moves):
        board.push(move)
        best = max(best, -_reference_negamax(board, depth - 1, root_depth))
        board.pop()
    return best


def _fresh_state(root_depth):
    state = SearchState()
    state.begin_iteration(root_depth)
    return state


# ---------------------------------------------------------------------------
# Board restoration
# ---------------------------------------------------------------------------


def test_search_restores_board_including_move_stack(start_board):
    for uci in ("e2e4", "e7e5", "g1f3"):
        start_board.push_uci(uci)
    before = start_board.copy()

    think(start_board, max_depth=2)

    assert start_board == before
    assert start_board.fen() == before.fen()
    assert start_board.move_stack == before.move_stack


def test_cutoff_paths_restore_board():
    board = chess.Board(EQUIVALENCE_FENS[0])
    fen = board.fen()
    state = _fresh_state(3)

    # A window this narrow fails high on the very first move.
    alpha_beta(board, 2, -INFINITY, -INFINITY + 1, state)
    assert board.fen() == fen
    assert not board.move_stack

    quiescence(board, -INFINITY, -INFINITY + 1, state)
    assert board.fen() == fen
    assert not board.move_stack


# ---------------------------------------------------------------------------
# Alpha-beta
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("fen, depth", [
    (EQUIVALENCE_FENS[0], 2),
    (EQUIVALENCE_FENS[1], 2),
    # White may castle into a quiet square or win the f2 knight with the king.
    ("4k3/p7/8/8/8/8/5n2/4K2R w K - 0 1", 1),
    ("4k3/p7/8/8/8/8/5n2/4K2R w K - 0 1", 2),
])
def test_pruning_matches_full_width_negamax(fen, depth):
    board = chess.Board(fen)

    values = {}
    for move in list(board.legal_moves):
        bonus = castling_bonus(board, move)
        board.push(move)
        values[move] = -_reference_negamax(board, depth - 1, depth) + bonus
        board.pop()
    expected = max(values.values())

    state = _fresh_state(depth)
    score = alpha_beta(board, depth, -INFINITY, INFINITY, state)

    assert score == expected
    assert state.best_score == expected
    assert values[state.best_move] == expected


def test_castling_bonus_cannot_beat_a_winning_capture():
    board = chess.Board("4k3/p7/8/8/8/8/5n2/4K2R w K - 0 1")
    state = _fresh_state(1)
    alpha_beta(board, 1, -INFINITY, INFINITY, state)

    assert state.best_move == chess.Move.from_uci("e1f2")


def test_mated_side_scores_nearer_mates_lower():
    board = chess.Board("R5k1/5ppp/8/8/8/8/8/6K1 b - - 1 1")
    assert board.is_checkmate()

    assert alpha_beta(board, 3, -INFINITY, INFINITY, _fresh_state(3)) == -MATE_SCORE
    assert alpha_beta(board, 1, -INFINITY, INFINITY, _fresh_state(3)) == -MATE_SCORE + 2


def test_stalemate_below_the_root_scores_zero():
    board = chess.Board("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert board.is_stalemate()
    assert alpha_beta(board, 2, -INFINITY, INFINITY, _fresh_state(3)) == 0


def test_repetition_below_the_root_scores_zero(start_board):
    for uci in ("g1f3", "g8f6", "f3g1", "f6g8"):
        start_board.push_uci(uci)
    assert alpha_beta(start_board, 2, -INFINITY, INFINITY, _fresh_state(3)) == 0


def test_cutoff_rewards_refuting_move_with_depth_squared():
    board = chess.Board(EQUIVALENCE_FENS[0])
    state = _fresh_state(3)
    first = order_moves(board, board.legal_moves, state.history)[0]

    score = alpha_beta(board, 2, -INFINITY, -INFINITY + 1, state)

    assert score == -INFINITY + 1
    assert state.history.get(chess.WHITE, first) == 2 * 2
    assert state.history.total() == 2 * 2


def test_begin_iteration_resets_history_and_counters():
    state = SearchState()
    state.history.reward(chess.WHITE, chess.Move.from_uci("e2e4"), 4)
    state.best_move = chess.Move.from_uci("e2e4")
    state.best_score = 123
    state.node_count = 50
    state.qnode_count = 70

    state.begin_iteration(2)

    assert state.history.total() == 0
    assert state.root_depth == 2
    assert state.best_move is None
    assert state.best_score == -INFINITY
    assert state.node_count == state.qnode_count == 0


# ---------------------------------------------------------------------------
# Quiescence
# ---------------------------------------------------------------------------


def test_hanging_queen_costs_at_least_a_queen():
    # Black to move, black queen on d8 faces the white queen on d4.
    hanging = chess.Board("3q2k1/8/8/8/3Q4/8/8/6K1 b - - 0 1")
    defended = chess.Board("3q2k1/8/8/8/3Q4/4P3/8/6K1 b - - 0 1")
    state = SearchState()

    hanging_score = -quiescence(hanging, -INFINITY, INFINITY, state)
    defended_score = -quiescence(defended, -INFINITY, INFINITY, state)

    assert defended_score - hanging_score >= QUEEN_VALUE


def test_quiescence_stands_pat_in_quiet_position(start_board):
    assert quiescence(start_board, -INFINITY, INFINITY, SearchState()) == evaluate(start_board)


def test_quiescence_fails_high_on_stand_pat(start_board):
    assert quiescence(start_board, -INFINITY, -500, SearchState()) == -500


# ---------------------------------------------------------------------------
# Castling incentive
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("uci, expected", [
    ("e1g1", CASTLE_BONUS),
    ("e1c1", CASTLE_BONUS),
    ("a1a2", CASTLE_NEXT_PLY_BONUS),  # kingside castling stays available
    ("e1f1", 0),                       # king move forfeits both rights
])
def test_castling_bonus(uci, expected):
    board = chess.Board(CASTLING_FEN)
    assert castling_bonus(board, chess.Move.from_uci(uci)) == expected
    assert board.fen() == CASTLING_FEN


def test_castling_bonus_when_rights_remain_but_path_is_blocked(start_board):
    assert castling_bonus(start_board, chess.Move.from_uci("e2e4")) == CASTLING_RIGHTS_BONUS


def test_no_castling_bonus_without_rights():
    board = chess.Board("4k3/8/8/8/8/8/8/R3K2R w - - 0 1")
    assert castling_bonus(board, chess.Move.from_uci("a1a2")) == 0


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def test_finds_mate_in_one(mate_in_one_board):
    result = search_position(mate_in_one_board, max_depth=2)

    assert result.move == chess.Move.from_uci("a1a8")
    assert result.score >= MATE_THRESHOLD
    assert result.depth == 2


def test_start_position_depth_one_does_not_drop_material(start_board):
    result = search_position(start_board, max_depth=1)

    assert result.move in start_board.legal_moves
    assert result.score > -PAWN_VALUE
    start_board.push(result.move)
    assert not any(start_board.is_capture(reply) for reply in start_board.legal_moves)


def test_time_budget_does_not_change_the_decision(middlegame_board):
    assert think(middlegame_board, 1, max_depth=1) == think(middlegame_board, None, max_depth=1)


def test_no_move_when_game_is_over():
    board = chess.Board("R5k1/5ppp/8/8/8/8/8/6K1 b - - 1 1")
    assert think(board) is None
    assert search_position(board).nodes == 0


def test_repeated_root_position_still_gets_a_move(start_board):
    for uci in ("g1f3", "g8f6", "f3g1", "f6g8"):
        start_board.push_uci(uci)
    assert is_draw(start_board)

    move = think(start_board, max_depth=2)

    assert move in start_board.legal_moves


@pytest.mark.parametrize("fen", [
    "4k3/8/8/8/8/8/8/4K3 w - - 0 1",          # insufficient material
    "4k3/8/8/8/8/8/4P3/4K3 w - - 100 80",     # fifty-move rule
])
def test_drawn_root_still_gets_a_move(fen):
    board = chess.Board(fen)
    assert is_draw(board)

    result = search_position(board, max_depth=1)

    assert result.move in board.legal_moves
    assert result.depth == 1


def test_rejects_non_positive_depth(start_board):
    with pytest.raises(ValueError):
        search_position(start_board, max_depth=0)


def test_logs_every_completed_iteration(mate_in_one_board, caplog):
    with caplog.at_level(logging.DEBUG, logger="turochamp.search"):
        search_position(mate_in_one_board, max_depth=2)

    iterations = [r for r in caplog.records if r.getMessage().startswith("depth=")]
    assert [r.getMessage().split()[0] for r in iterations] == ["depth=1", "depth=2"]


def test_iteration_log_reports_history_total(mate_in_one_board, caplog):
    with caplog.at_level(logging.DEBUG, logger="turochamp.search"):
        search_position(mate_in_one_board, max_depth=1)

    iteration = next(r for r in caplog.records if r.getMessage().startswith("depth=1"))
    # Depth one never cuts off below the root, so nothing is rewarded.
    assert iteration.getMessage().endswith("history=0")

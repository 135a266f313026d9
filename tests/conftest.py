import chess
import pytest


@pytest.fixture
def start_board() -> chess.Board:
    return chess.Board()


@pytest.fixture
def middlegame_board() -> chess.Board:
    return chess.Board("r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4")


@pytest.fixture
def mate_in_one_board() -> chess.Board:
    """White to move; Ra8 is mate."""
    return chess.Board("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")

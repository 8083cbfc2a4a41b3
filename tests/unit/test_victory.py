from orbitchess.engine.systems.victory import is_game_over, kings_alive, winner_if_any
from orbitchess.models.enums import PieceType, Side, Winner


def _king(state, side):
    return next(p for p in state.pieces if p.side == side and p.type == PieceType.KING)


def test_both_kings_alive_means_no_winner(fresh):
    assert winner_if_any(fresh) == Winner.NONE
    assert not is_game_over(fresh)
    assert kings_alive(fresh, Side.WHITE) == 1


def test_losing_a_king_hands_the_win_to_the_other_side(fresh):
    _king(fresh, Side.WHITE).alive = False
    assert winner_if_any(fresh) == Winner.BLACK
    assert is_game_over(fresh)


def test_losing_black_king(board):
    _king(board, Side.BLACK).alive = False
    assert winner_if_any(board) == Winner.WHITE


def test_double_king_loss_is_over_without_a_winner(board):
    _king(board, Side.WHITE).alive = False
    _king(board, Side.BLACK).alive = False
    assert is_game_over(board)
    assert winner_if_any(board) == Winner.NONE

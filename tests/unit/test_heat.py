from orbitchess.engine.actions.move import apply_move
from orbitchess.engine.core import GameEngine
from orbitchess.engine.factory import empty_state
from orbitchess.engine.systems import heat
from orbitchess.models.api import MoveAction
from orbitchess.models.enums import Direction, FlyerKind, HeatTiming, PieceType, Side, SimMode, StaticKind
from orbitchess.models.session import GameSession
from tests.utils.helpers import QUIET_RULES, add_static, put, sq, with_kings

STAR = (5, 10)


def _move(state, src, dst):
    res = apply_move(state, MoveAction(src=sq(*src), dst=sq(*dst)))
    assert res.applied, res.reason
    return res


def _star_board(timing=HeatTiming.END_OF_ACTION):
    state = with_kings(empty_state(rules=QUIET_RULES.model_copy(update={"heat_timing": timing})))
    add_static(state, StaticKind.STAR, *STAR)
    return state


def test_mark_heat_only_touches_adjacent_pieces_of_side():
    st = _star_board()
    near = put(st, Side.WHITE, PieceType.KNIGHT, 4, 11)
    far = put(st, Side.WHITE, PieceType.KNIGHT, 3, 10)
    enemy = put(st, Side.BLACK, PieceType.KNIGHT, 6, 9)

    heat.mark_heat(st, Side.WHITE)
    assert near.heated
    assert not far.heated
    assert not enemy.heated
    assert heat.heated_snapshot(st, Side.WHITE) == {near.id}
    assert heat.near_star(st, sq(6, 9))
    assert heat.star_square(st) == sq(*STAR)


def test_no_star_no_heat(board):
    p = put(board, Side.WHITE, PieceType.ROOK, 4, 10)
    heat.mark_heat(board, Side.WHITE)
    assert not p.heated
    assert heat.burn_overheated(board, Side.WHITE, {p.id}) == []


def test_piece_lingering_by_the_star_burns_on_its_next_action():
    st = _star_board()
    rook = put(st, Side.WHITE, PieceType.ROOK, 2, 10)

    _move(st, (2, 10), (4, 10))
    assert rook.alive and rook.heated

    _move(st, (0, 0), (0, 1))
    res = _move(st, (9, 0), (9, 1))
    assert not rook.alive
    assert rook.id in res.killed


def test_piece_that_leaves_the_star_survives():
    st = _star_board()
    rook = put(st, Side.WHITE, PieceType.ROOK, 2, 10)

    _move(st, (2, 10), (4, 10))
    _move(st, (0, 0), (0, 1))
    _move(st, (4, 10), (4, 5))
    assert rook.alive
    assert not rook.heated


def test_turn_start_timing_burns_before_the_side_moves():
    st = _star_board(HeatTiming.TURN_START)
    rook = put(st, Side.WHITE, PieceType.ROOK, 2, 10)

    _move(st, (2, 10), (4, 10))
    assert rook.heated

    # White's turn begins as Black's action completes
    _move(st, (0, 0), (0, 1))
    assert st.side_to_move == Side.WHITE
    assert not rook.alive


def test_turn_start_resolution_clears_flag_of_escaped_piece():
    st = _star_board()
    escaped = put(st, Side.WHITE, PieceType.KNIGHT, 2, 2)
    stuck = put(st, Side.WHITE, PieceType.KNIGHT, 6, 11)
    escaped.heated = True
    stuck.heated = True

    assert heat.resolve_heat_at_turn_start(st) == [stuck.id]
    assert escaped.alive and not escaped.heated
    assert not stuck.alive
    assert heat.resolve_heat_at_turn_start(st) == []


def test_burn_clears_flags_of_survivors():
    st = _star_board()
    away = put(st, Side.WHITE, PieceType.BISHOP, 0, 19)
    away.heated = True
    assert heat.burn_overheated(st, Side.WHITE, {away.id}) == []
    assert away.alive and not away.heated


def _comet_over_heated_knight():
    # a heated White knight by the star with a comet one square away; Black to move
    st = _star_board(HeatTiming.TURN_START)
    knight = put(st, Side.WHITE, PieceType.KNIGHT, 4, 11)
    knight.heated = True
    st.add_flyer(FlyerKind.COMET, sq(4, 12), Direction.W)
    st.side_to_move = Side.BLACK
    return st


def test_turn_start_heat_waits_for_a_deferred_hazard_phase():
    full = _comet_over_heated_knight()
    assert apply_move(full, MoveAction(src=sq(0, 0), dst=sq(0, 1)), SimMode.FULL).applied
    # the comet strikes first, then there is nothing left to burn
    assert full.flyers == []
    assert not full.pieces[2].alive

    sess = GameSession(id="s-heat", state=_comet_over_heated_knight(), ai_enabled=False)
    res = apply_move(sess.state, MoveAction(src=sq(0, 0), dst=sq(0, 1)), SimMode.NONE)
    assert res.applied
    sess.pending_hazard_phase = True
    assert sess.state.pieces[2].alive
    assert len(sess.state.flyers) == 1

    engine = GameEngine()
    assert engine.destinations(sess, sq(4, 11)) == []
    assert engine.complete_hazard_phase(sess)
    assert sess.state.model_dump() == full.model_dump()

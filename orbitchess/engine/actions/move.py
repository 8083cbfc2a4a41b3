from __future__ import annotations

from typing import TYPE_CHECKING

from ...core.primitives import in_bounds
from ...models.api import ActionResult, MoveAction
from ...models.enums import ActionLogResult, FlyerKind, SimMode
from ..logging.logger import log_event
from ..systems.heat import heated_snapshot, mark_heat
from ..systems.index import SpatialIndex, flyer_at, piece_at, static_at
from ..systems.movement import destination_coords
from .base import ActionHandler, alive_ids, finish_action

if TYPE_CHECKING:
    from ...models.session import GameSession
    from ...models.state import GameState


def check_move(state: GameState, move: MoveAction) -> tuple[bool, str]:
    """Pure legality check; the destination generators are the single source of truth."""
    if not in_bounds(move.src, state.rows, state.cols):
        return False, "source out of bounds"
    mover = piece_at(state, move.src)
    if mover is None:
        return False, "no piece at source"
    if mover.side != state.side_to_move:
        return False, "not your turn"
    if not in_bounds(move.dst, state.rows, state.cols):
        return False, "destination out of bounds"
    target = piece_at(state, move.dst)
    if target is not None and target.side == mover.side:
        return False, "destination occupied by a friendly piece"
    ix = SpatialIndex.build(state)
    if move.dst.coord not in destination_coords(ix, state, move.src.coord, mover.type, mover.side):
        return False, f"illegal {mover.type.value} move"
    return True, "ok"


def apply_move(state: GameState, move: MoveAction, sim_mode: SimMode = SimMode.FULL) -> ActionResult:
    """Validate and commit one move. A rejection leaves ``state`` untouched."""
    ok, why = check_move(state, move)
    if not ok:
        return ActionResult.rejected(state, why)

    side = state.side_to_move
    heated_at_start = heated_snapshot(state, side)
    alive_before = alive_ids(state)
    mover = piece_at(state, move.src)
    target = piece_at(state, move.dst)

    hz = flyer_at(state, move.dst)
    if hz is not None:
        mover.pos = move.dst
        hz.alive = False
        state.flyers = [h for h in state.flyers if h.alive]
        if hz.kind == FlyerKind.COMET:
            mover.alive = False
            return finish_action(state, side, heated_at_start, alive_before, sim_mode)
        state.manufacturing[side] += 1

    if target is not None:
        target.alive = False

    if static_at(state, move.dst) is not None:
        mover.pos = move.dst
        mover.alive = False
        return finish_action(state, side, heated_at_start, alive_before, sim_mode)

    mover.pos = move.dst
    mark_heat(state, side)
    return finish_action(state, side, heated_at_start, alive_before, sim_mode)


class MoveHandler(ActionHandler):
    action_type = MoveAction

    def evaluate(self, state, action: MoveAction):
        return check_move(state, action)

    def apply(self, sess: GameSession, action: MoveAction):
        side = sess.state.side_to_move
        res = apply_move(sess.state, action, SimMode.FULL)
        log_event(sess, side, action, ActionLogResult.APPLIED if res.applied else ActionLogResult.ILLEGAL, res)
        return res

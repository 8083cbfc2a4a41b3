from __future__ import annotations

from typing import TYPE_CHECKING

from ...core.primitives import in_bounds
from ...models.api import ActionResult, DeployAction
from ...models.enums import ActionLogResult, SimMode
from ..logging.logger import log_event
from ..systems.heat import heated_snapshot, mark_heat
from ..systems.index import flyer_at, piece_at, static_at
from .base import ActionHandler, alive_ids, finish_action

if TYPE_CHECKING:
    from ...models.session import GameSession
    from ...models.state import GameState


def deploy_cost(state: GameState, action: DeployAction) -> int | None:
    return action.cost if action.cost is not None else state.rules.deploy_cost(action.type)


def check_deploy(state: GameState, action: DeployAction) -> tuple[bool, str]:
    """Resource and square checks only; home-rank placement is the caller's rule."""
    cost = deploy_cost(state, action)
    if cost is None:
        return False, f"{action.type.value} cannot be deployed"
    if cost < 0:
        return False, "negative cost"
    if state.manufacturing[state.side_to_move] < cost:
        return False, f"not enough manufacturing (need {cost})"
    if not in_bounds(action.to, state.rows, state.cols):
        return False, "destination out of bounds"
    if piece_at(state, action.to) is not None:
        return False, "destination occupied"
    if static_at(state, action.to) is not None:
        return False, "destination is a static hazard"
    if flyer_at(state, action.to) is not None:
        return False, "destination holds a flying hazard"
    return True, "ok"


def check_home_rank(state: GameState, action: DeployAction) -> tuple[bool, str]:
    if action.to.r != state.home_rank(state.side_to_move):
        return False, "deploys must land on the home rank"
    return True, "ok"


def apply_deploy(state: GameState, action: DeployAction, sim_mode: SimMode = SimMode.FULL) -> ActionResult:
    """Spend manufacturing and put a new piece on ``action.to``; consumes the turn."""
    ok, why = check_deploy(state, action)
    if not ok:
        return ActionResult.rejected(state, why)

    side = state.side_to_move
    heated_at_start = heated_snapshot(state, side)
    alive_before = alive_ids(state)
    state.manufacturing[side] -= deploy_cost(state, action) or 0
    state.add_piece(side, action.type, action.to)
    mark_heat(state, side)
    return finish_action(state, side, heated_at_start, alive_before, sim_mode)


class DeployHandler(ActionHandler):
    action_type = DeployAction

    def evaluate(self, state, action: DeployAction):
        ok, why = check_home_rank(state, action)
        if not ok:
            return ok, why
        return check_deploy(state, action)

    def apply(self, sess: GameSession, action: DeployAction):
        side = sess.state.side_to_move
        ok, why = check_home_rank(sess.state, action)
        res = apply_deploy(sess.state, action, SimMode.FULL) if ok else ActionResult.rejected(sess.state, why)
        log_event(sess, side, action, ActionLogResult.APPLIED if res.applied else ActionLogResult.ILLEGAL, res)
        return res

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.primitives import Square
from ..models.api import (
    Action,
    ActionResult,
    DeployAction,
    EvaluateResponse,
    LegalAction,
    LegalActionsResponse,
    MoveAction,
)
from ..models.enums import Winner
from .actions.deploy import DeployHandler, deploy_cost
from .actions.move import MoveHandler
from .ai import deploy_squares
from .logging.logger import log_error, log_illegal
from .systems import movement, victory
from .systems.turn import complete_round

if TYPE_CHECKING:
    from ..models.session import GameSession
    from ..models.state import GameState
    from .actions.base import Registry

default_handlers: Registry = {
    MoveHandler.action_type: MoveHandler(),
    DeployHandler.action_type: DeployHandler(),
}


class GameEngine:
    def __init__(self, handlers: Registry | None = None):
        self.handlers: Registry = handlers or default_handlers

    def _view(self, sess: GameSession) -> GameState:
        """State the next player will act on: a deferred hazard phase is settled on a copy."""
        if not sess.pending_hazard_phase:
            return sess.state
        st = sess.state.clone()
        complete_round(st)
        return st

    def normalize(self, state: GameState, action: Action) -> Action:
        # players pay list price; a client-supplied cost is ignored
        if isinstance(action, DeployAction):
            return action.model_copy(update={"cost": state.rules.deploy_cost(action.type)})
        return action

    def evaluate(self, sess: GameSession, action: Action) -> EvaluateResponse:
        st = self._view(sess)
        if victory.is_game_over(st):
            return EvaluateResponse(legal=False, explanation="game over")
        h = self.handlers.get(type(action))
        if not h:
            return EvaluateResponse(legal=False, explanation="unknown action")
        ok, why = h.evaluate(st, self.normalize(st, action))
        return EvaluateResponse(legal=ok, explanation=why)

    def complete_hazard_phase(self, sess: GameSession) -> bool:
        """Run a deferred hazard phase, and the turn start it held back, exactly once."""
        if not sess.pending_hazard_phase:
            return False
        complete_round(sess.state)
        sess.pending_hazard_phase = False
        sess.decision_token += 1
        return True

    def process_action(
        self, sess: GameSession, action: Action
    ) -> tuple[EvaluateResponse, ActionResult | None]:
        self.complete_hazard_phase(sess)
        action = self.normalize(sess.state, action)
        ev = self.evaluate(sess, action)
        if not ev.legal:
            log_illegal(sess, action, ev.explanation)
            return ev, None
        try:
            res = self.handlers[type(action)].apply(sess, action)
        except Exception as e:
            log_error(sess, action, e)
            raise
        if res.applied:
            sess.decision_token += 1
        return ev, res

    def destinations(self, sess: GameSession, src: Square) -> list[Square]:
        st = self._view(sess)
        p = next((p for p in st.alive_pieces(st.side_to_move) if p.pos == src), None)
        if p is None:
            return []
        return movement.legal_destinations(st, src, p.side)

    def list_legal_actions(self, sess: GameSession) -> LegalActionsResponse:
        st = self._view(sess)
        out: list[LegalAction] = []
        if victory.is_game_over(st):
            return LegalActionsResponse(actions=out)

        side = st.side_to_move
        for p in st.alive_pieces(side):
            for dst in movement.legal_destinations(st, p.pos, side):
                out.append(LegalAction(action=MoveAction(src=p.pos, dst=dst), explanation="ok"))

        pool = st.manufacturing[side]
        squares = deploy_squares(st, side)
        for t, cost in st.rules.deploy_costs.items():
            if cost > pool:
                continue
            for sq in squares:
                act = DeployAction(to=sq, type=t, cost=cost)
                out.append(LegalAction(action=act, explanation=f"ok (cost={deploy_cost(st, act)})"))
        return LegalActionsResponse(actions=out)

    def check_victory_conditions(self, sess: GameSession) -> Winner:
        return victory.winner_if_any(sess.state)

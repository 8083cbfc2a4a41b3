from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models.enums import ActionLogResult
from .ai import Candidate, choose_action, commit_action, remember
from .logging.logger import log_event
from .systems.turn import closes_round
from .systems.victory import is_game_over

if TYPE_CHECKING:  # typing-only imports
    import random

    from ..models.api import ActionResult
    from ..models.session import GameSession
    from .core import GameEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecisionTicket:
    """An AI decision computed on a clone, valid only while ``token`` is current."""

    token: int
    action: Candidate


def ai_to_move(sess: GameSession) -> bool:
    return (
        sess.ai_enabled
        and sess.state.side_to_move == sess.ai_side
        and not is_game_over(sess.state)
    )


def plan_enemy_move(sess: GameSession, rng: random.Random | None = None) -> DecisionTicket | None:
    """Think on a private copy; the live state is never read after this returns."""
    if not ai_to_move(sess) or sess.pending_hazard_phase:
        return None
    token = sess.decision_token
    thinking = sess.state.clone()
    action = choose_action(
        thinking,
        sess.ai_side,
        sess.difficulty,
        memory=sess.ai_memory.model_copy(),
        rng=rng,
    )
    if action is None:
        return None
    return DecisionTicket(token=token, action=action)


def commit_enemy_move(sess: GameSession, ticket: DecisionTicket) -> ActionResult | None:
    """Apply a planned decision unless the game moved on in the meantime.

    The hazard phase is deferred (``pending_hazard_phase``) so the caller can
    stage it after presenting the AI's move.
    """
    if ticket.token != sess.decision_token or not ai_to_move(sess):
        logger.info("session %s: discarding stale AI decision (token %s)", sess.id, ticket.token)
        return None
    side = sess.state.side_to_move
    remember(sess.ai_memory, sess.state, ticket.action)
    res = commit_action(sess.state, ticket.action)
    log_event(
        sess,
        side,
        ticket.action,
        ActionLogResult.APPLIED if res.applied else ActionLogResult.ILLEGAL,
        res,
        extra={"ai": sess.difficulty.value},
    )
    if res.applied:
        sess.decision_token += 1
        if closes_round(side):
            sess.pending_hazard_phase = True
    return res


def enemy_autoplay(
    engine: GameEngine,
    sess: GameSession,
    *,
    rng: random.Random | None = None,
    complete_hazards: bool = True,
) -> ActionResult | None:
    """Plan and commit one AI action, then (by default) settle the hazard phase.

    Contract:
    - Inputs: engine (has complete_hazard_phase(sess)); session; optional rng for easy mode
    - Behavior: no-op unless the AI side is to move and the game is live.
    - Output: the committed ActionResult, or None when nothing was played.
    """
    ticket = plan_enemy_move(sess, rng)
    if ticket is None:
        return None
    res = commit_enemy_move(sess, ticket)
    if res is not None and complete_hazards:
        engine.complete_hazard_phase(sess)
    return res

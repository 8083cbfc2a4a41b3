from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.api import Action, ActionResult
    from ...models.enums import Side
    from ...models.session import GameSession

from ...events import ActionEvent, event_bus
from ...models.enums import ActionLogResult


def log_event(
    sess: GameSession,
    side: Side,
    action: Action,
    result: ActionLogResult,
    outcome: ActionResult | None = None,
    message: str | None = None,
    extra: dict | None = None,
) -> None:
    event_bus.emit(
        ActionEvent(
            session_id=sess.id,
            ply=sess.state.ply,
            side=side,
            action=action,
            result=result,
            message=message or (outcome.reason if outcome else None),
            killed=list(outcome.killed) if outcome else [],
            extra=extra,
        )
    )


def log_illegal(sess: GameSession, action: Action, explanation: str) -> None:
    log_event(sess, sess.state.side_to_move, action, ActionLogResult.ILLEGAL, message=explanation)


def log_error(sess: GameSession, action: Action, error: Exception) -> None:
    log_event(sess, sess.state.side_to_move, action, ActionLogResult.ERROR, message=str(error))

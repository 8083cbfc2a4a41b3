from __future__ import annotations

import logging

from .engine.store import logs
from .events import ActionEvent, event_bus
from .models.api import ActionLogEntry
from .models.enums import ActionLogResult

logger = logging.getLogger("orbitchess.actions")

_LEVELS = {
    ActionLogResult.APPLIED: logging.INFO,
    ActionLogResult.ILLEGAL: logging.WARNING,
    ActionLogResult.ERROR: logging.ERROR,
}


def _on_action_event(ev: ActionEvent) -> None:
    # Convert event to ActionLogEntry JSON for the in-memory log
    entry = ActionLogEntry(
        session_id=ev.session_id,
        ply=ev.ply,
        side=ev.side,
        action=ev.action,
        result=ev.result,
        message=ev.message,
        killed=ev.killed,
        extra=ev.extra,
    )
    logs.append(ev.session_id, entry.model_dump_json())
    logger.log(
        _LEVELS[ev.result],
        "session=%s ply=%s side=%s %s result=%s msg=%s killed=%s",
        ev.session_id,
        ev.ply,
        ev.side.value,
        ev.action.kind,
        ev.result.value,
        ev.message,
        ev.killed,
    )


def register_listeners() -> None:
    event_bus.subscribe(ActionEvent, _on_action_event)

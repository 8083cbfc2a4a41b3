from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from orbitchess.models.api import Action
    from orbitchess.models.enums import ActionLogResult, Side


@dataclass
class ActionEvent:
    session_id: str
    ply: int
    side: Side
    action: Action
    result: ActionLogResult
    message: str | None = None
    killed: list[str] = field(default_factory=list)
    extra: dict | None = None


T = TypeVar("T")


class EventBus:
    def __init__(self) -> None:
        self._subs: dict[type[Any], list[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        lst = self._subs.setdefault(event_type, [])
        if handler not in lst:
            lst.append(handler)

    def emit(self, event: Any) -> None:
        for h in self._subs.get(type(event), []):
            # Let exceptions propagate; callers decide how to handle them
            h(event)


# Global bus instance
event_bus = EventBus()

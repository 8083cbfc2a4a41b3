from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ...models.api import ActionResult
from ...models.enums import HeatTiming
from ..systems.heat import burn_overheated
from ..systems.turn import advance_turn

if TYPE_CHECKING:
    from ...models.api import Action
    from ...models.enums import SimMode, Side
    from ...models.session import GameSession
    from ...models.state import GameState


class ActionHandler(Protocol):
    action_type: type

    def evaluate(self, state: GameState, action: Action) -> tuple[bool, str]: ...

    def apply(self, sess: GameSession, action: Action) -> ActionResult: ...


Registry = dict[type, ActionHandler]


def alive_ids(state: GameState) -> set[str]:
    return {p.id for p in state.pieces if p.alive}


def finish_action(
    state: GameState,
    mover: Side,
    heated_at_start: set[str],
    alive_before: set[str],
    sim_mode: SimMode,
) -> ActionResult:
    """Common tail of every committed action: heat burn, then the turn advance."""
    if state.rules.heat_timing == HeatTiming.END_OF_ACTION:
        burn_overheated(state, mover, heated_at_start)
    advance_turn(state, mover, sim_mode)
    killed = [p.id for p in state.pieces if not p.alive and p.id in alive_before]
    return ActionResult(applied=True, ply=state.ply, killed=killed)

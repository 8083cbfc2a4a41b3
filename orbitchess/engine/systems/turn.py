from __future__ import annotations

from typing import TYPE_CHECKING

from ...models.enums import HeatTiming, Side, SimMode
from .hazards import run_hazard_phase
from .heat import resolve_heat_at_turn_start

if TYPE_CHECKING:
    from ...models.state import GameState


def closes_round(mover: Side) -> bool:
    """Hazards act once per round, after Black's action."""
    return mover == Side.BLACK


def _turn_start(state: GameState) -> None:
    if state.rules.heat_timing == HeatTiming.TURN_START:
        resolve_heat_at_turn_start(state)


def advance_turn(state: GameState, mover: Side, sim_mode: SimMode) -> None:
    state.side_to_move = mover.other
    state.ply += 1
    if closes_round(mover):
        if sim_mode == SimMode.NONE:
            # the new turn starts once the deferred phase is completed
            return
        run_hazard_phase(state, sim_mode)
    _turn_start(state)


def complete_round(state: GameState) -> None:
    """Finish a round committed with ``SimMode.NONE``: hazards, then the turn start."""
    run_hazard_phase(state, SimMode.FULL)
    _turn_start(state)

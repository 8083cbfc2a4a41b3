from __future__ import annotations

from typing import TYPE_CHECKING

from ...core.primitives import is_adjacent8
from ...models.enums import StaticKind

if TYPE_CHECKING:
    from ...core.primitives import Square
    from ...models.enums import Side
    from ...models.state import GameState


def star_square(state: GameState) -> Square | None:
    return next((h.pos for h in state.statics if h.kind == StaticKind.STAR), None)


def near_star(state: GameState, sq: Square) -> bool:
    star = star_square(state)
    return star is not None and is_adjacent8(sq, star)


def mark_heat(state: GameState, side: Side) -> None:
    """Flag every alive piece of ``side`` standing next to the star."""
    star = star_square(state)
    if star is None:
        return
    for p in state.pieces:
        if p.alive and p.side == side and is_adjacent8(p.pos, star):
            p.heated = True


def heated_snapshot(state: GameState, side: Side) -> set[str]:
    return {p.id for p in state.pieces if p.alive and p.side == side and p.heated}


def burn_overheated(state: GameState, side: Side, snapshot: set[str]) -> list[str]:
    """Destroy pieces from ``snapshot`` that are still next to the star.

    Survivors have escaped, so their flag is cleared.
    """
    star = star_square(state)
    if star is None or not snapshot:
        return []
    burned: list[str] = []
    for p in state.pieces:
        if not p.alive or p.side != side or p.id not in snapshot:
            continue
        if is_adjacent8(p.pos, star):
            p.alive = False
            burned.append(p.id)
        p.heated = False
    return burned


def resolve_heat_at_turn_start(state: GameState) -> list[str]:
    """Settle heat obligations of the side whose turn is beginning.

    A heated piece still next to the star combusts; the flag is cleared either
    way, so each obligation resolves exactly once.
    """
    star = star_square(state)
    if star is None:
        return []
    burned: list[str] = []
    for p in state.pieces:
        if not p.alive or p.side != state.side_to_move or not p.heated:
            continue
        if is_adjacent8(p.pos, star):
            p.alive = False
            burned.append(p.id)
        p.heated = False
    return burned

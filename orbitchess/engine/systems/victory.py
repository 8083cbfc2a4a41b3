from __future__ import annotations

from typing import TYPE_CHECKING

from ...models.enums import PieceType, Side, Winner

if TYPE_CHECKING:
    from ...models.state import GameState


def kings_alive(state: GameState, side: Side) -> int:
    return sum(1 for p in state.pieces if p.alive and p.side == side and p.type == PieceType.KING)


def winner_if_any(state: GameState) -> Winner:
    """A side loses the moment it has no king; losing both at once has no winner."""
    white = kings_alive(state, Side.WHITE) > 0
    black = kings_alive(state, Side.BLACK) > 0
    if white and not black:
        return Winner.WHITE
    if black and not white:
        return Winner.BLACK
    return Winner.NONE


def is_game_over(state: GameState) -> bool:
    return kings_alive(state, Side.WHITE) == 0 or kings_alive(state, Side.BLACK) == 0

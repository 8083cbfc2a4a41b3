# tests/utils/helpers.py
from __future__ import annotations

from orbitchess.core.primitives import Square
from orbitchess.models.config import RulesConfig
from orbitchess.models.enums import PieceType, Side, StaticKind
from orbitchess.models.state import GameState
from orbitchess.models.units import Piece, StaticHazard

QUIET_RULES = RulesConfig().with_spawn_chance(0.0)
LOUD_RULES = RulesConfig().with_spawn_chance(1.0)


def sq(r: int, c: int) -> Square:
    return Square(r=r, c=c)


def add_static(state: GameState, kind: StaticKind, r: int, c: int) -> None:
    state.statics.append(StaticHazard(kind=kind, pos=sq(r, c)))


def put(state: GameState, side: Side, piece_type: PieceType, r: int, c: int) -> Piece:
    return state.add_piece(side, piece_type, sq(r, c))


def with_kings(state: GameState, white=(9, 0), black=(0, 0)) -> GameState:
    """Both kings on the board so the game is live."""
    put(state, Side.WHITE, PieceType.KING, *white)
    put(state, Side.BLACK, PieceType.KING, *black)
    return state


def coords(squares) -> set[tuple[int, int]]:
    return {s.coord for s in squares}


def piece_on(state: GameState, r: int, c: int) -> Piece | None:
    return next((p for p in state.pieces if p.alive and p.pos == sq(r, c)), None)

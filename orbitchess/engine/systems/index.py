from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...core.primitives import Coord, Square
    from ...models.state import GameState
    from ...models.units import FlyingHazard, Piece, StaticHazard


def piece_at(state: GameState, sq: Square) -> Piece | None:
    return next(
        (p for p in state.pieces if p.alive and p.pos.r == sq.r and p.pos.c == sq.c),
        None,
    )


def static_at(state: GameState, sq: Square) -> StaticHazard | None:
    return next(
        (h for h in state.statics if h.pos.r == sq.r and h.pos.c == sq.c), None
    )


def flyer_at(state: GameState, sq: Square) -> FlyingHazard | None:
    return next(
        (f for f in state.flyers if f.alive and f.pos.r == sq.r and f.pos.c == sq.c),
        None,
    )


@dataclass(frozen=True)
class SpatialIndex:
    """Hashed snapshot of occupancy with the same semantics as the scans above.

    Only valid until the state is mutated; build a fresh one per query batch.
    """

    rows: int
    cols: int
    pieces: dict[Coord, Piece]
    statics: dict[Coord, StaticHazard]
    flyers: dict[Coord, FlyingHazard]

    @classmethod
    def build(cls, state: GameState) -> SpatialIndex:
        pieces: dict[Coord, Piece] = {}
        for p in state.pieces:
            if p.alive:
                pieces.setdefault(p.pos.coord, p)
        statics = {h.pos.coord: h for h in state.statics}
        flyers: dict[Coord, FlyingHazard] = {}
        for f in state.flyers:
            # first alive flyer wins, matching flyer_at
            if f.alive and f.pos.coord not in flyers:
                flyers[f.pos.coord] = f
        return cls(state.rows, state.cols, pieces, statics, flyers)

    def in_bounds(self, c: Coord) -> bool:
        return 0 <= c[0] < self.rows and 0 <= c[1] < self.cols

    def piece(self, c: Coord) -> Piece | None:
        return self.pieces.get(c)

    def static(self, c: Coord) -> StaticHazard | None:
        return self.statics.get(c)

    def flyer(self, c: Coord) -> FlyingHazard | None:
        return self.flyers.get(c)

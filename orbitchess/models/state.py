from __future__ import annotations

from pydantic import BaseModel, Field

from ..core.primitives import Square
from .config import DEFAULT_RULES, RulesConfig
from .enums import Direction, FlyerKind, PieceType, Side
from .units import FlyingHazard, Piece, StaticHazard


def _empty_pools() -> dict[Side, int]:
    return {Side.WHITE: 0, Side.BLACK: 0}


class GameState(BaseModel):
    rows: int
    cols: int
    side_to_move: Side = Side.WHITE
    ply: int = 0
    rng_seed: int = 0
    pieces: list[Piece] = Field(default_factory=list)
    statics: list[StaticHazard] = Field(default_factory=list)
    flyers: list[FlyingHazard] = Field(default_factory=list)
    manufacturing: dict[Side, int] = Field(default_factory=_empty_pools)
    next_entity_id: int = 1
    rules: RulesConfig = DEFAULT_RULES

    def issue_id(self, prefix: str) -> str:
        eid = f"{prefix}{self.next_entity_id}"
        self.next_entity_id += 1
        return eid

    def add_piece(self, side: Side, piece_type: PieceType, pos: Square) -> Piece:
        p = Piece(id=self.issue_id("p"), side=side, type=piece_type, pos=pos)
        self.pieces.append(p)
        return p

    def add_flyer(self, kind: FlyerKind, pos: Square, direction: Direction) -> FlyingHazard:
        hz = FlyingHazard(id=self.issue_id("hz"), kind=kind, pos=pos, dir=direction)
        self.flyers.append(hz)
        return hz

    def alive_pieces(self, side: Side | None = None) -> list[Piece]:
        return [p for p in self.pieces if p.alive and (side is None or p.side == side)]

    def home_rank(self, side: Side) -> int:
        return self.rows - 1 if side == Side.WHITE else 0

    def pawn_rank(self, side: Side) -> int:
        return self.rows - 2 if side == Side.WHITE else 1

    def clone(self) -> GameState:
        """Independent copy for look-ahead.

        Pieces and flyers hold only immutable values, so a shallow copy of each is
        a full copy. Statics and rules are immutable and shared.
        """
        return GameState.model_construct(
            rows=self.rows,
            cols=self.cols,
            side_to_move=self.side_to_move,
            ply=self.ply,
            rng_seed=self.rng_seed,
            pieces=[p.model_copy() for p in self.pieces],
            statics=list(self.statics),
            flyers=[f.model_copy() for f in self.flyers],
            manufacturing=dict(self.manufacturing),
            next_entity_id=self.next_entity_id,
            rules=self.rules,
        )

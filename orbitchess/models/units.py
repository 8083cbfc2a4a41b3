from pydantic import BaseModel, ConfigDict

from ..core.primitives import Square
from .enums import Direction, FlyerKind, PieceType, Side, StaticKind


class Piece(BaseModel):
    id: str
    side: Side
    type: PieceType
    pos: Square
    alive: bool = True
    # set when the piece ends its side's action next to the star; must not stay there
    heated: bool = False


class StaticHazard(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: StaticKind
    pos: Square


class FlyingHazard(BaseModel):
    id: str
    kind: FlyerKind
    pos: Square
    dir: Direction
    alive: bool = True

    @property
    def next_square(self) -> Square:
        dr, dc = self.dir.step
        return Square(r=self.pos.r + dr, c=self.pos.c + dc)

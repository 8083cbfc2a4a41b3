from __future__ import annotations

from pydantic import BaseModel, ConfigDict

Coord = tuple[int, int]  # (r, c)


class Square(BaseModel):
    """Board coordinate (0-based). Row 0 is Black's back rank."""

    model_config = ConfigDict(frozen=True)

    r: int
    c: int

    @property
    def coord(self) -> Coord:
        return (self.r, self.c)

    @classmethod
    def of(cls, coord: Coord) -> Square:
        return cls(r=coord[0], c=coord[1])


def in_bounds(sq: Square, rows: int, cols: int) -> bool:
    return 0 <= sq.r < rows and 0 <= sq.c < cols


def same_square(a: Square, b: Square) -> bool:
    return a.r == b.r and a.c == b.c


def is_adjacent8(a: Square, b: Square) -> bool:
    dr = abs(a.r - b.r)
    dc = abs(a.c - b.c)
    return dr <= 1 and dc <= 1 and (dr + dc) > 0


def chebyshev(a: Coord, b: Coord) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))

"""Legal-destination generators, one per piece type.

Every generator answers for the piece standing on ``src`` as if it belonged to
``side`` (default: the side to move). Passing ``side`` explicitly is how the
evaluator counts the opponent's mobility without touching ``side_to_move``.

Hazards are occupiable but impassable: a static hazard or live flyer is a legal
landing square (suicide or impact) and stops any ray that reaches it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from ...core.primitives import Square
from ...models.enums import PieceType, Side
from .index import SpatialIndex

if TYPE_CHECKING:
    from ...core.primitives import Coord
    from ...models.state import GameState

ORTHOGONAL: tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL: tuple[Coord, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
KING_OFFSETS = ORTHOGONAL + DIAGONAL
KNIGHT_OFFSETS: tuple[Coord, ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)


def pawn_direction(side: Side) -> int:
    return -1 if side == Side.WHITE else 1


def _slide(ix: SpatialIndex, src: Coord, side: Side, dirs: tuple[Coord, ...]) -> list[Coord]:
    out: list[Coord] = []
    for dr, dc in dirs:
        r, c = src[0] + dr, src[1] + dc
        while ix.in_bounds((r, c)):
            sq = (r, c)
            p = ix.piece(sq)
            if p is not None:
                if p.side != side:
                    out.append(sq)
                break
            if ix.static(sq) is not None or ix.flyer(sq) is not None:
                out.append(sq)
                break
            out.append(sq)
            r += dr
            c += dc
    return out


def _leap(ix: SpatialIndex, src: Coord, side: Side, offsets: tuple[Coord, ...]) -> list[Coord]:
    out: list[Coord] = []
    for dr, dc in offsets:
        sq = (src[0] + dr, src[1] + dc)
        if not ix.in_bounds(sq):
            continue
        p = ix.piece(sq)
        if p is not None and p.side == side:
            continue
        out.append(sq)
    return out


def _pawn(ix: SpatialIndex, src: Coord, side: Side, home_row: int) -> list[Coord]:
    out: list[Coord] = []
    d = pawn_direction(side)
    r, c = src

    one = (r + d, c)
    if ix.in_bounds(one) and ix.piece(one) is None:
        # a hazard on the square does not block: stepping onto it is suicide/impact
        out.append(one)

    two = (r + 2 * d, c)
    if r == home_row and ix.in_bounds(two) and ix.piece(two) is None:
        # a flyer on the intervening square does not block the launch
        if ix.piece(one) is None and ix.static(one) is None:
            out.append(two)

    for dc in (-1, 1):
        diag = (r + d, c + dc)
        if not ix.in_bounds(diag):
            continue
        p = ix.piece(diag)
        if p is not None:
            if p.side != side:
                out.append(diag)
        elif ix.static(diag) is not None or ix.flyer(diag) is not None:
            out.append(diag)
    return out


def destination_coords(
    ix: SpatialIndex, state: GameState, src: Coord, piece_type: PieceType, side: Side
) -> list[Coord]:
    match piece_type:
        case PieceType.ROOK:
            return _slide(ix, src, side, ORTHOGONAL)
        case PieceType.BISHOP:
            return _slide(ix, src, side, DIAGONAL)
        case PieceType.QUEEN:
            return _slide(ix, src, side, ORTHOGONAL + DIAGONAL)
        case PieceType.KNIGHT:
            return _leap(ix, src, side, KNIGHT_OFFSETS)
        case PieceType.KING:
            return _leap(ix, src, side, KING_OFFSETS)
        case PieceType.PAWN:
            return _pawn(ix, src, side, state.pawn_rank(side))
        case _:
            assert_never(piece_type)


def _generate(state: GameState, src: Square, piece_type: PieceType, side: Side | None) -> list[Square]:
    ix = SpatialIndex.build(state)
    coords = destination_coords(ix, state, src.coord, piece_type, side or state.side_to_move)
    return [Square.of(c) for c in coords]


def rook_destinations(state: GameState, src: Square, side: Side | None = None) -> list[Square]:
    return _generate(state, src, PieceType.ROOK, side)


def bishop_destinations(state: GameState, src: Square, side: Side | None = None) -> list[Square]:
    return _generate(state, src, PieceType.BISHOP, side)


def queen_destinations(state: GameState, src: Square, side: Side | None = None) -> list[Square]:
    return _generate(state, src, PieceType.QUEEN, side)


def knight_destinations(state: GameState, src: Square, side: Side | None = None) -> list[Square]:
    return _generate(state, src, PieceType.KNIGHT, side)


def king_destinations(state: GameState, src: Square, side: Side | None = None) -> list[Square]:
    return _generate(state, src, PieceType.KING, side)


def pawn_destinations(state: GameState, src: Square, side: Side | None = None) -> list[Square]:
    return _generate(state, src, PieceType.PAWN, side)


def legal_destinations(state: GameState, src: Square, side: Side | None = None) -> list[Square]:
    """Destinations of whatever alive piece stands on ``src`` (empty if none)."""
    ix = SpatialIndex.build(state)
    p = ix.piece(src.coord)
    if p is None:
        return []
    coords = destination_coords(ix, state, src.coord, p.type, side or state.side_to_move)
    return [Square.of(c) for c in coords]


def count_mobility(state: GameState, side: Side, ix: SpatialIndex | None = None) -> int:
    ix = ix or SpatialIndex.build(state)
    total = 0
    for p in state.pieces:
        if p.alive and p.side == side:
            total += len(destination_coords(ix, state, p.pos.coord, p.type, side))
    return total

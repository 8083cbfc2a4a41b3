from __future__ import annotations

from ..core import rng as rnd
from ..core.primitives import Square
from ..models.config import DEFAULT_RULES, Belt, RulesConfig
from ..models.enums import PieceType, Side, StaticKind
from ..models.state import GameState
from ..models.units import StaticHazard

DEFAULT_ROWS = 10
DEFAULT_COLS = 20


class SetupError(RuntimeError):
    """Static hazards could not be placed (belt too small or fully occupied)."""


def start_file(cols: int, width: int = 8) -> int:
    """Leftmost column of the back-rank formation, centred on the board."""
    return max(0, (cols - width) // 2)


def row_of_rank(rank: int, rows: int) -> int:
    return rows - rank


def empty_state(
    rows: int = DEFAULT_ROWS,
    cols: int = DEFAULT_COLS,
    seed: int = 0,
    rules: RulesConfig | None = None,
) -> GameState:
    """A board without pieces or hazards; convenient for building scenarios."""
    return GameState(rows=rows, cols=cols, rng_seed=seed & rnd.UINT32_MASK, rules=rules or DEFAULT_RULES)


def _place(state: GameState, kind: StaticKind, belt: Belt, occupied: set[tuple[int, int]], rng) -> None:
    rows, cols = state.rows, state.cols
    # belt window intersected with the board
    r_lo = max(0, row_of_rank(belt.rank_max, rows))
    r_hi = min(rows - 1, row_of_rank(belt.rank_min, rows))
    c_lo = max(0, belt.col_min)
    c_hi = min(cols - 1, belt.col_max)
    if r_lo > r_hi or c_lo > c_hi:
        raise SetupError(f"{kind.value} belt does not fit a {rows}x{cols} board")
    for _ in range(state.rules.placement_tries):
        r = rnd.rand_int(rng, r_lo, r_hi)
        c = rnd.rand_int(rng, c_lo, c_hi)
        if (r, c) in occupied:
            continue
        occupied.add((r, c))
        state.statics.append(StaticHazard(kind=kind, pos=Square(r=r, c=c)))
        return
    raise SetupError(f"failed to place {kind.value}")


def create_initial_state(
    rows: int = DEFAULT_ROWS,
    cols: int = DEFAULT_COLS,
    seed: int = 123456,
    rules: RulesConfig | None = None,
) -> GameState:
    """Standard opening: both formations centred, then planets and the star.

    Hazards are placed with a stream derived from ``seed``; the same seed always
    yields the same board.
    """
    state = empty_state(rows, cols, seed, rules)
    formation = state.rules.formation
    f0 = start_file(cols, len(formation))

    for i, t in enumerate(formation):
        state.add_piece(Side.WHITE, t, Square(r=state.home_rank(Side.WHITE), c=f0 + i))
    for i in range(len(formation)):
        state.add_piece(Side.WHITE, PieceType.PAWN, Square(r=state.pawn_rank(Side.WHITE), c=f0 + i))
    for i, t in enumerate(formation):
        state.add_piece(Side.BLACK, t, Square(r=state.home_rank(Side.BLACK), c=f0 + i))
    for i in range(len(formation)):
        state.add_piece(Side.BLACK, PieceType.PAWN, Square(r=state.pawn_rank(Side.BLACK), c=f0 + i))

    rng = rnd.stream(seed)
    occupied = {p.pos.coord for p in state.pieces}
    for _ in range(state.rules.planet_count):
        _place(state, StaticKind.PLANET, state.rules.planet_belt, occupied, rng)
    _place(state, StaticKind.STAR, state.rules.star_belt, occupied, rng)
    return state

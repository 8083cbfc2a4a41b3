"""Flying hazards: seeded spawning at the board edges and per-round advance."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...core import rng as rnd
from ...core.primitives import Square, in_bounds
from ...models.enums import Direction, FlyerKind, SimMode
from .index import piece_at, static_at

if TYPE_CHECKING:
    import random

    from ...models.state import GameState
    from ...models.units import FlyingHazard


def _belt_rows(state: GameState) -> tuple[int, int]:
    top, bottom = state.rules.comet_belt_rows
    top = max(0, min(top, state.rows - 1))
    bottom = max(top, min(bottom, state.rows - 1))
    return top, bottom


def _edge_band_column(state: GameState, rng: random.Random) -> int:
    depth = max(1, min(state.rules.edge_band_depth, state.cols // 2))
    off = rnd.rand_int(rng, 0, depth - 1)
    from_left = rnd.coin(rng)
    return off if from_left else state.cols - depth + off


def _land(state: GameState, kind: FlyerKind, pos: Square, direction: Direction) -> FlyingHazard | None:
    """Place a fresh flyer, resolving an immediate impact on its entry square."""
    p = piece_at(state, pos)
    if p is not None:
        if kind == FlyerKind.COMET:
            p.alive = False
        else:
            state.manufacturing[p.side] += 1
        return None
    if static_at(state, pos) is not None:
        return None
    return state.add_flyer(kind, pos, direction)


def maybe_spawn_hazards(state: GameState) -> list[FlyingHazard]:
    """Roll for new flyers. Draw order is fixed; the seed advances on every call.

    1. horizontal comet from column 0 (heading E) or the last column (heading W)
    2. vertical comet from the top (S) or bottom (N) edge in an edge-band column
    3. vertical asteroid, same entry rule
    4. horizontal asteroid on a belt row in an edge-band column
    """
    rules = state.rules
    rng = rnd.stream(state.rng_seed)
    state.rng_seed = rnd.advance_seed(state.rng_seed, rules.seed_increment)
    top, bottom = _belt_rows(state)
    spawned: list[FlyingHazard] = []

    def keep(hz: FlyingHazard | None) -> None:
        if hz is not None:
            spawned.append(hz)

    if rng.random() < rules.comet_horizontal_chance:
        row = rnd.rand_int(rng, top, bottom)
        from_left = rnd.coin(rng)
        pos = Square(r=row, c=0 if from_left else state.cols - 1)
        keep(_land(state, FlyerKind.COMET, pos, Direction.E if from_left else Direction.W))

    if rng.random() < rules.comet_vertical_chance:
        col = _edge_band_column(state, rng)
        from_top = rnd.coin(rng)
        pos = Square(r=0 if from_top else state.rows - 1, c=col)
        keep(_land(state, FlyerKind.COMET, pos, Direction.S if from_top else Direction.N))

    if rng.random() < rules.asteroid_vertical_chance:
        col = _edge_band_column(state, rng)
        from_top = rnd.coin(rng)
        pos = Square(r=0 if from_top else state.rows - 1, c=col)
        keep(_land(state, FlyerKind.ASTEROID, pos, Direction.S if from_top else Direction.N))

    if rng.random() < rules.asteroid_horizontal_chance:
        row = rnd.rand_int(rng, top, bottom)
        from_left = rnd.coin(rng)
        pos = Square(r=row, c=_edge_band_column(state, rng))
        keep(_land(state, FlyerKind.ASTEROID, pos, Direction.E if from_left else Direction.W))

    return spawned


def hazard_tick(state: GameState) -> list[str]:
    """Advance every alive flyer one square; returns ids of pieces destroyed."""
    killed: list[str] = []
    for hz in state.flyers:
        if not hz.alive:
            continue
        nxt = hz.next_square
        if not in_bounds(nxt, state.rows, state.cols):
            hz.alive = False
            continue
        hz.pos = nxt
        if static_at(state, nxt) is not None:
            hz.alive = False
            continue
        p = piece_at(state, nxt)
        if p is None:
            continue
        if hz.kind == FlyerKind.COMET:
            p.alive = False
            killed.append(p.id)
        else:
            state.manufacturing[p.side] += 1
        hz.alive = False
    state.flyers = [h for h in state.flyers if h.alive]
    return killed


def run_hazard_phase(state: GameState, mode: SimMode = SimMode.FULL) -> None:
    match mode:
        case SimMode.FULL:
            maybe_spawn_hazards(state)
            hazard_tick(state)
        case SimMode.TICK_ONLY:
            hazard_tick(state)
        case SimMode.NONE:
            pass

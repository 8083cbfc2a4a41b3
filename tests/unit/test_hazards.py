from orbitchess.engine.actions.move import apply_move
from orbitchess.engine.factory import empty_state
from orbitchess.engine.systems import hazards
from orbitchess.models.api import MoveAction
from orbitchess.models.enums import Direction, FlyerKind, PieceType, Side, SimMode, StaticKind
from tests.utils.helpers import LOUD_RULES, QUIET_RULES, add_static, put, sq, with_kings


def test_tick_moves_flyers_one_square():
    st = empty_state(rules=QUIET_RULES)
    hz = st.add_flyer(FlyerKind.COMET, sq(4, 4), Direction.E)
    assert hazards.hazard_tick(st) == []
    assert hz.pos == sq(4, 5)
    assert st.flyers == [hz]


def test_comet_impact_kills_and_vanishes():
    st = empty_state(rules=QUIET_RULES)
    victim = put(st, Side.BLACK, PieceType.BISHOP, 3, 4)
    st.add_flyer(FlyerKind.COMET, sq(4, 4), Direction.N)
    assert hazards.hazard_tick(st) == [victim.id]
    assert not victim.alive
    assert st.flyers == []


def test_asteroid_impact_pays_the_struck_side():
    st = empty_state(rules=QUIET_RULES)
    target = put(st, Side.WHITE, PieceType.PAWN, 5, 4)
    st.add_flyer(FlyerKind.ASTEROID, sq(4, 4), Direction.S)
    assert hazards.hazard_tick(st) == []
    assert target.alive
    assert st.manufacturing[Side.WHITE] == 1
    assert st.flyers == []


def test_flyers_vanish_on_statics_and_off_board():
    st = empty_state(rules=QUIET_RULES)
    add_static(st, StaticKind.PLANET, 4, 5)
    st.add_flyer(FlyerKind.COMET, sq(4, 4), Direction.E)
    st.add_flyer(FlyerKind.ASTEROID, sq(0, 3), Direction.N)
    st.add_flyer(FlyerKind.COMET, sq(9, 19), Direction.E)
    hazards.hazard_tick(st)
    assert st.flyers == []


def test_forced_spawn_places_all_four_rolls():
    st = empty_state(seed=99, rules=LOUD_RULES)
    seed = st.rng_seed
    spawned = hazards.maybe_spawn_hazards(st)

    assert st.rng_seed == (seed + st.rules.seed_increment) & 0xFFFFFFFF
    assert len(spawned) == 4
    assert sorted(h.kind.value for h in spawned) == ["asteroid", "asteroid", "comet", "comet"]

    horizontal_comet = spawned[0]
    assert horizontal_comet.kind == FlyerKind.COMET
    assert 2 <= horizontal_comet.pos.r <= 7
    if horizontal_comet.dir == Direction.E:
        assert horizontal_comet.pos.c == 0
    else:
        assert horizontal_comet.dir == Direction.W
        assert horizontal_comet.pos.c == st.cols - 1

    vertical_comet = spawned[1]
    assert vertical_comet.pos.r in (0, st.rows - 1)
    assert vertical_comet.pos.c in (0, 1, 2, 3, 16, 17, 18, 19)
    assert vertical_comet.dir == (Direction.S if vertical_comet.pos.r == 0 else Direction.N)


def test_spawn_with_zero_chance_still_advances_seed():
    st = empty_state(seed=5, rules=QUIET_RULES)
    assert hazards.maybe_spawn_hazards(st) == []
    assert st.rng_seed == 5 + st.rules.seed_increment


def test_spawn_is_deterministic_for_a_seed():
    a = empty_state(seed=1234, rules=LOUD_RULES)
    b = empty_state(seed=1234, rules=LOUD_RULES)
    for _ in range(5):
        hazards.run_hazard_phase(a, SimMode.FULL)
        hazards.run_hazard_phase(b, SimMode.FULL)
    assert a.model_dump() == b.model_dump()


def test_spawn_onto_a_piece_resolves_immediately():
    st = empty_state(seed=77, rules=LOUD_RULES.model_copy(update={"comet_belt_rows": (4, 4)}))
    # every square a horizontal comet can enter on row 4
    left = put(st, Side.WHITE, PieceType.ROOK, 4, 0)
    right = put(st, Side.BLACK, PieceType.ROOK, 4, st.cols - 1)
    spawned = hazards.maybe_spawn_hazards(st)
    assert not (left.alive and right.alive)
    assert all(h.pos not in (left.pos, right.pos) for h in spawned if h.kind == FlyerKind.COMET)


def test_tick_only_never_touches_the_seed():
    st = empty_state(seed=3, rules=LOUD_RULES)
    st.add_flyer(FlyerKind.ASTEROID, sq(5, 5), Direction.W)
    hazards.run_hazard_phase(st, SimMode.TICK_ONLY)
    assert st.rng_seed == 3
    assert [h.pos for h in st.flyers] == [sq(5, 4)]
    hazards.run_hazard_phase(st, SimMode.NONE)
    assert [h.pos for h in st.flyers] == [sq(5, 4)]


def _round_trip_moves():
    # kings shuffle along the middle files, clear of every spawn lane
    return [((9, 9), (9, 8)), ((0, 9), (0, 8)), ((9, 8), (9, 9)), ((0, 8), (0, 9))] * 2


def _cadence(rules):
    st = with_kings(empty_state(seed=2024, rules=rules), white=(9, 9), black=(0, 9))
    phases = []
    for src, dst in _round_trip_moves():
        mover = st.side_to_move
        seed = st.rng_seed
        res = apply_move(st, MoveAction(src=sq(*src), dst=sq(*dst)))
        assert res.applied, res.reason
        phases.append((mover, st.rng_seed != seed))
    return st, phases


def test_hazard_phase_only_after_black_with_forced_spawns():
    st, phases = _cadence(LOUD_RULES)
    assert phases == [(Side.WHITE, False), (Side.BLACK, True)] * 4
    assert st.flyers


def test_hazard_phase_only_after_black_without_spawns():
    st, phases = _cadence(QUIET_RULES)
    assert phases == [(Side.WHITE, False), (Side.BLACK, True)] * 4
    assert st.flyers == []


def test_white_action_never_moves_flyers():
    st = with_kings(empty_state(seed=8, rules=LOUD_RULES), white=(9, 9), black=(0, 9))
    st.add_flyer(FlyerKind.COMET, sq(5, 2), Direction.E)
    before = [h.model_dump() for h in st.flyers]
    apply_move(st, MoveAction(src=sq(9, 9), dst=sq(9, 8)))
    assert [h.model_dump() for h in st.flyers] == before

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.primitives import Square
from ..models.api import ActionResult, DeployAction, MoveAction
from ..models.enums import Difficulty, FlyerKind, PieceType, Side, SimMode, Winner
from .actions.deploy import apply_deploy
from .actions.move import apply_move
from .factory import start_file
from .systems.heat import heated_snapshot
from .systems.index import SpatialIndex
from .systems.movement import count_mobility, destination_coords
from .systems.victory import is_game_over, winner_if_any

if TYPE_CHECKING:
    from ..models.session import AIMemory
    from ..models.state import GameState

logger = logging.getLogger(__name__)

Candidate = MoveAction | DeployAction


@dataclass(frozen=True)
class EvalWeights:
    """Tunable weights for the static evaluator.

    All values are constants to avoid magic numbers scattered in logic.
    """

    win: float = 1_000_000.0
    pawn: float = 1.0
    knight: float = 3.0
    bishop: float = 3.0
    rook: float = 5.0
    queen: float = 9.0
    king: float = 1000.0
    heated_penalty: float = 0.6  # per own heated piece
    heated_bonus: float = 0.6  # per enemy heated piece
    manufacturing: float = 0.15  # per point of pool differential
    comet_threat_penalty: float = 0.9  # times value of an own piece in a comet's path
    comet_threat_bonus: float = 0.5  # times value of an enemy piece in a comet's path
    mobility: float = 0.02  # per destination of differential
    undeveloped: float = 0.15  # per officer still on its own back rank

    def value(self, t: PieceType) -> float:
        match t:
            case PieceType.PAWN:
                return self.pawn
            case PieceType.KNIGHT:
                return self.knight
            case PieceType.BISHOP:
                return self.bishop
            case PieceType.ROOK:
                return self.rook
            case PieceType.QUEEN:
                return self.queen
            case PieceType.KING:
                return self.king


@dataclass(frozen=True)
class SearchLimits:
    deploy_squares_per_type: int = 8
    easy_top_n: int = 8
    hard_top_n: int = 20
    repeat_penalty: float = 0.75  # easy: same piece as last turn
    reversal_penalty: float = 1.0  # hard: exact undo of last move


DEFAULT_WEIGHTS = EvalWeights()
DEFAULT_LIMITS = SearchLimits()


# ----- candidates -----


def _deploy_preference(state: GameState, col: int) -> tuple[int, float]:
    """Prefer squares inside the starting formation, then towards the centre."""
    width = len(state.rules.formation)
    lo = start_file(state.cols, width)
    hi = lo + width - 1
    outside = lo - col if col < lo else (col - hi if col > hi else 0)
    return outside, abs(col - (state.cols - 1) / 2)


def deploy_squares(state: GameState, side: Side, ix: SpatialIndex | None = None) -> list[Square]:
    ix = ix or SpatialIndex.build(state)
    row = state.home_rank(side)
    free = [
        c
        for c in range(state.cols)
        if ix.piece((row, c)) is None and ix.static((row, c)) is None and ix.flyer((row, c)) is None
    ]
    free.sort(key=lambda c: _deploy_preference(state, c))
    return [Square(r=row, c=c) for c in free]


def enumerate_candidates(
    state: GameState, side: Side, limits: SearchLimits = DEFAULT_LIMITS
) -> list[Candidate]:
    ix = SpatialIndex.build(state)
    out: list[Candidate] = []
    for p in state.pieces:
        if not p.alive or p.side != side:
            continue
        for dst in destination_coords(ix, state, p.pos.coord, p.type, side):
            out.append(MoveAction(src=p.pos, dst=Square.of(dst)))

    pool = state.manufacturing[side]
    affordable = [(cost, t) for t, cost in state.rules.deploy_costs.items() if cost <= pool]
    if affordable:
        squares = deploy_squares(state, side, ix)[: limits.deploy_squares_per_type]
        for cost, t in sorted(affordable, key=lambda ct: -ct[0]):
            out.extend(DeployAction(to=sq, type=t, cost=cost) for sq in squares)
    return out


# ----- evaluation -----


def evaluate_state(state: GameState, ai_side: Side, w: EvalWeights = DEFAULT_WEIGHTS) -> float:
    """Signed score; positive favours ``ai_side``."""
    if is_game_over(state):
        winner = winner_if_any(state)
        if winner == Winner.NONE:
            return 0.0
        return w.win if winner.value == ai_side.value else -w.win

    opp = ai_side.other
    ix = SpatialIndex.build(state)
    score = 0.0

    for p in state.pieces:
        if not p.alive:
            continue
        sign = 1.0 if p.side == ai_side else -1.0
        score += sign * w.value(p.type)
        if p.type not in (PieceType.PAWN, PieceType.KING) and p.pos.r == state.home_rank(p.side):
            score -= sign * w.undeveloped

    score -= w.heated_penalty * len(heated_snapshot(state, ai_side))
    score += w.heated_bonus * len(heated_snapshot(state, opp))

    score += w.manufacturing * (state.manufacturing[ai_side] - state.manufacturing[opp])

    for hz in state.flyers:
        if not hz.alive or hz.kind != FlyerKind.COMET:
            continue
        victim = ix.piece(hz.next_square.coord)
        if victim is None:
            continue
        if victim.side == ai_side:
            score -= w.comet_threat_penalty * w.value(victim.type)
        else:
            score += w.comet_threat_bonus * w.value(victim.type)

    score += w.mobility * (count_mobility(state, ai_side, ix) - count_mobility(state, opp, ix))
    return score


# ----- search -----


def apply_candidate(state: GameState, cand: Candidate, sim_mode: SimMode) -> ActionResult:
    if isinstance(cand, MoveAction):
        return apply_move(state, cand, sim_mode)
    return apply_deploy(state, cand, sim_mode)


def simulate(state: GameState, cand: Candidate) -> GameState | None:
    """Play ``cand`` on a clone; hazards may tick but never spawn."""
    sim = state.clone()
    res = apply_candidate(sim, cand, SimMode.TICK_ONLY)
    return sim if res.applied else None


def _moved_piece_id(state: GameState, cand: Candidate) -> str | None:
    if not isinstance(cand, MoveAction):
        return None
    return next(
        (p.id for p in state.pieces if p.alive and p.pos == cand.src),
        None,
    )


def _is_reversal(cand: Candidate, memory: AIMemory | None) -> bool:
    return (
        memory is not None
        and isinstance(cand, MoveAction)
        and memory.last_src is not None
        and memory.last_dst is not None
        and cand.src == memory.last_dst
        and cand.dst == memory.last_src
    )


def _score_one_ply(
    state: GameState,
    ai_side: Side,
    cands: list[Candidate],
    w: EvalWeights,
) -> list[tuple[float, Candidate, GameState]]:
    scored: list[tuple[float, Candidate, GameState]] = []
    for cand in cands:
        sim = simulate(state, cand)
        if sim is None:
            continue
        scored.append((evaluate_state(sim, ai_side, w), cand, sim))
    return scored


def _worst_reply(
    sim: GameState,
    ai_side: Side,
    floor: float,
    w: EvalWeights,
    limits: SearchLimits,
) -> float:
    """Opponent's best one-ply answer, i.e. the minimum of our evaluation.

    Stops as soon as the running minimum drops to ``floor``: that candidate can no
    longer beat the best found so far, so the final choice is unaffected.
    """
    if is_game_over(sim):
        return evaluate_state(sim, ai_side, w)
    worst: float | None = None
    for reply in enumerate_candidates(sim, sim.side_to_move, limits):
        after = simulate(sim, reply)
        if after is None:
            continue
        v = evaluate_state(after, ai_side, w)
        if worst is None or v < worst:
            worst = v
            if worst <= floor:
                break
    return evaluate_state(sim, ai_side, w) if worst is None else worst


def choose_action(
    state: GameState,
    ai_side: Side,
    difficulty: Difficulty,
    *,
    memory: AIMemory | None = None,
    rng: random.Random | None = None,
    weights: EvalWeights = DEFAULT_WEIGHTS,
    limits: SearchLimits = DEFAULT_LIMITS,
) -> Candidate | None:
    """Pick the AI's action for ``state`` without touching it.

    - easy: one ply, penalise moving the same piece again, random among the top N
    - medium: one ply, best score, first seen wins ties
    - hard: one ply to rank, keep the top N, then assume the opponent's best reply
    """
    if state.side_to_move != ai_side or is_game_over(state):
        return None
    cands = enumerate_candidates(state, ai_side, limits)
    if not cands:
        return None

    scored = _score_one_ply(state, ai_side, cands, weights)
    if not scored:
        return None

    match difficulty:
        case Difficulty.MEDIUM:
            best = scored[0]
            for entry in scored[1:]:
                if entry[0] > best[0]:
                    best = entry
            logger.debug("ai[medium] picked %s score=%.3f", best[1], best[0])
            return best[1]

        case Difficulty.EASY:
            last = memory.last_piece_id if memory else None
            ranked = [
                (s - limits.repeat_penalty if last and _moved_piece_id(state, c) == last else s, c)
                for s, c, _ in scored
            ]
            ranked.sort(key=lambda sc: -sc[0])
            top = ranked[: limits.easy_top_n]
            pick = (rng or random.Random()).choice(top)
            logger.debug("ai[easy] picked %s score=%.3f of %d", pick[1], pick[0], len(top))
            return pick[1]

        case Difficulty.HARD:
            ranked3 = [
                (s, limits.reversal_penalty if _is_reversal(c, memory) else 0.0, c, sim)
                for s, c, sim in scored
            ]
            ranked3.sort(key=lambda e: -(e[0] - e[1]))
            best_val = float("-inf")
            best_cand: Candidate | None = None
            for _, penalty, cand, sim in ranked3[: limits.hard_top_n]:
                worst = _worst_reply(sim, ai_side, best_val + penalty, weights, limits)
                val = worst - penalty
                if val > best_val:
                    best_val, best_cand = val, cand
            logger.debug("ai[hard] picked %s worst-case=%.3f", best_cand, best_val)
            return best_cand


def remember(memory: AIMemory, state: GameState, cand: Candidate) -> None:
    """Record ``cand`` (before it is applied to ``state``) for next turn's penalties."""
    if isinstance(cand, MoveAction):
        memory.last_piece_id = _moved_piece_id(state, cand)
        memory.last_src = cand.src
        memory.last_dst = cand.dst
    else:
        memory.last_piece_id = None
        memory.last_src = None
        memory.last_dst = None


def commit_action(state: GameState, cand: Candidate) -> ActionResult:
    """Apply the chosen action to the live state, deferring the hazard phase."""
    return apply_candidate(state, cand, SimMode.NONE)

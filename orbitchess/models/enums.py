from enum import Enum


class Side(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def other(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE


class PieceType(str, Enum):
    KING = "king"
    QUEEN = "queen"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"
    PAWN = "pawn"


class StaticKind(str, Enum):
    PLANET = "planet"
    STAR = "star"


class FlyerKind(str, Enum):
    COMET = "comet"
    ASTEROID = "asteroid"


class Direction(str, Enum):
    N = "N"
    S = "S"
    E = "E"
    W = "W"

    @property
    def step(self) -> tuple[int, int]:
        """(dr, dc) for one tick of travel."""
        return _STEPS[self]


_STEPS = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
}


class SimMode(str, Enum):
    """
    How much of the hazard phase runs when a Black action completes a round:
    - FULL: spawn (consumes the seed) then tick
    - TICK_ONLY: deterministic tick, never spawns; used for AI look-ahead
    - NONE: nothing; the caller completes the phase later
    """

    FULL = "full"
    TICK_ONLY = "tick_only"
    NONE = "none"


class HeatTiming(str, Enum):
    END_OF_ACTION = "end_of_action"
    TURN_START = "turn_start"


class Winner(str, Enum):
    WHITE = "white"
    BLACK = "black"
    NONE = "none"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ActionLogResult(str, Enum):
    APPLIED = "applied"
    ILLEGAL = "illegal"
    ERROR = "error"

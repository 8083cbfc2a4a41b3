from pydantic import BaseModel, Field

from ..core.primitives import Square
from .enums import Difficulty, Side
from .state import GameState


class AIMemory(BaseModel):
    """What the AI did last turn; feeds the repetition and reversal penalties."""

    last_piece_id: str | None = None
    last_src: Square | None = None
    last_dst: Square | None = None


class GameSession(BaseModel):
    id: str
    state: GameState
    ai_side: Side = Side.BLACK
    difficulty: Difficulty = Difficulty.MEDIUM
    ai_enabled: bool = True
    # bumped on every live mutation; a planned AI move is dropped if it changed
    decision_token: int = 0
    # set when an action was committed with the hazard phase deferred
    pending_hazard_phase: bool = False
    ai_memory: AIMemory = Field(default_factory=AIMemory)

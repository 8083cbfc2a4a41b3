from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from ..core.primitives import Square
from .enums import ActionLogResult, Difficulty, PieceType, Side, Winner
from .state import GameState

# ----- Actions (discriminated union) -----


class MoveAction(BaseModel):
    kind: Literal["move"] = "move"
    src: Square
    dst: Square


class DeployAction(BaseModel):
    kind: Literal["deploy"] = "deploy"
    to: Square
    type: PieceType
    # None: the rules' price list decides (the engine facade fills it in)
    cost: int | None = None


Action = Annotated[MoveAction | DeployAction, Field(discriminator="kind")]


class ActionResult(BaseModel):
    """Outcome of one attempted action. A rejected result means nothing changed."""

    applied: bool
    reason: str = "ok"
    ply: int
    killed: list[str] = Field(default_factory=list)

    @classmethod
    def rejected(cls, state: GameState, reason: str) -> ActionResult:
        return cls(applied=False, reason=reason, ply=state.ply)


# ----- API IO -----


class CreateSessionRequest(BaseModel):
    rows: int = Field(default=10, ge=4, le=32)
    cols: int = Field(default=20, ge=8, le=40)
    seed: int | None = None
    difficulty: Difficulty | None = None
    ai_side: Side | None = None
    ai_enabled: bool = True


class SessionView(BaseModel):
    id: str
    state: GameState
    ai_side: Side
    difficulty: Difficulty
    ai_enabled: bool
    winner: Winner
    game_over: bool
    pending_hazard_phase: bool
    decision_token: int


class EvaluateRequest(BaseModel):
    action: Action


class EvaluateResponse(BaseModel):
    legal: bool
    explanation: str


class ApplyActionRequest(BaseModel):
    action: Action


class ApplyActionResponse(BaseModel):
    applied: bool
    explanation: str
    result: ActionResult
    ai_result: ActionResult | None = None
    session: SessionView


class DestinationsResponse(BaseModel):
    src: Square
    destinations: list[Square]


# ----- Bulk legal listing -----


class LegalAction(BaseModel):
    action: Action
    explanation: str


class LegalActionsResponse(BaseModel):
    actions: list[LegalAction]


# ----- Action Log -----


class ActionLogEntry(BaseModel):
    ts: datetime = Field(default_factory=datetime.now)
    session_id: str
    ply: int
    side: Side
    action: Action
    result: ActionLogResult = ActionLogResult.APPLIED
    message: str | None = None
    killed: list[str] = Field(default_factory=list)
    extra: dict[str, Any] | None = None


class ActionLogResponse(BaseModel):
    entries: list[ActionLogEntry]

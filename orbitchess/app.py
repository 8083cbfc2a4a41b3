from __future__ import annotations

import asyncio
import os
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import TypeAdapter

from .core.primitives import Square
from .engine import store
from .engine.auto_enemy import ai_to_move, commit_enemy_move, plan_enemy_move
from .engine.core import GameEngine
from .engine.factory import SetupError, create_initial_state
from .engine.systems.victory import is_game_over
from .logging_listeners import register_listeners
from .models.api import (
    ActionLogEntry,
    ActionLogResponse,
    ActionResult,
    ApplyActionRequest,
    ApplyActionResponse,
    CreateSessionRequest,
    DeployAction,
    DestinationsResponse,
    EvaluateRequest,
    EvaluateResponse,
    LegalActionsResponse,
    MoveAction,
    SessionView,
)
from .models.config import RulesConfig
from .models.enums import Difficulty, Side
from .models.session import AIMemory, GameSession
from .models.state import GameState

AI_DIFFICULTY = Difficulty(os.getenv("AI_DIFFICULTY", "medium"))
AI_SIDE = Side(os.getenv("AI_SIDE", "black"))
AI_THINK_DELAY = float(os.getenv("AI_THINK_DELAY", "0"))
GAME_SEED = int(os.getenv("GAME_SEED", "42"))

app = FastAPI(title="Orbit Chess")
engine = GameEngine()
register_listeners()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _view(sess: GameSession) -> SessionView:
    return SessionView(
        id=sess.id,
        state=sess.state,
        ai_side=sess.ai_side,
        difficulty=sess.difficulty,
        ai_enabled=sess.ai_enabled,
        winner=engine.check_victory_conditions(sess),
        game_over=is_game_over(sess.state),
        pending_hazard_phase=sess.pending_hazard_phase,
        decision_token=sess.decision_token,
    )


async def _load(sid: str) -> GameSession:
    sess = await store.get_session(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    return sess


def _new_board(rows: int, cols: int, seed: int | None) -> GameState:
    try:
        return create_initial_state(rows, cols, GAME_SEED if seed is None else seed)
    except SetupError as e:
        raise HTTPException(400, str(e)) from e


async def _ai_turn(sess: GameSession) -> ActionResult | None:
    """Plan on a clone, optionally 'think', then commit if nothing changed meanwhile."""
    ticket = plan_enemy_move(sess)
    if ticket is None:
        return None
    if AI_THINK_DELAY > 0:
        await asyncio.sleep(AI_THINK_DELAY)
        # the session may have been replaced or reset while we slept
        sess = await _load(sess.id)
    res = commit_enemy_move(sess, ticket)
    if res is not None:
        engine.complete_hazard_phase(sess)
        await store.save_session(sess)
    return res


@app.get("/health")
def health() -> dict[str, Any]:
    return {"ok": True, "storage": "memory"}


## Model-driven examples (avoid bespoke templates)


@app.get("/info")
def defaults_info():
    """Expose rules defaults and action schemas for collaborators."""
    return {
        "rules": RulesConfig().model_dump(mode="json"),
        "actions": {
            "move": {
                "schema": MoveAction.model_json_schema(),
                "example": MoveAction(src=Square(r=8, c=6), dst=Square(r=6, c=6)).model_dump(mode="json"),
            },
            "deploy": {
                "schema": DeployAction.model_json_schema(),
                "example": DeployAction(to=Square(r=9, c=0), type="knight").model_dump(mode="json"),
            },
        },
        "requests": {
            "create_session": {
                "schema": CreateSessionRequest.model_json_schema(),
                "example": CreateSessionRequest().model_dump(mode="json"),
            }
        },
    }


@app.get("/sessions", response_model=list[SessionView])
async def list_sessions():
    return [_view(s) for s in (await store.store.all()).values()]


@app.post("/sessions", response_model=SessionView)
async def create_session(req: CreateSessionRequest):
    state = _new_board(req.rows, req.cols, req.seed)
    sess = GameSession(
        id=str(uuid4()),
        state=state,
        ai_side=req.ai_side or AI_SIDE,
        difficulty=req.difficulty or AI_DIFFICULTY,
        ai_enabled=req.ai_enabled,
    )
    await store.save_session(sess)
    # an AI playing White opens the game
    if ai_to_move(sess):
        await _ai_turn(sess)
    return _view(sess)


@app.get("/sessions/{sid}", response_model=SessionView)
async def get_session(sid: str):
    return _view(await _load(sid))


@app.get("/sessions/{sid}/legal_actions", response_model=LegalActionsResponse)
async def list_legal_actions(sid: str):
    return engine.list_legal_actions(await _load(sid))


@app.get("/sessions/{sid}/destinations", response_model=DestinationsResponse)
async def destinations(sid: str, r: int, c: int):
    sess = await _load(sid)
    src = Square(r=r, c=c)
    return DestinationsResponse(src=src, destinations=engine.destinations(sess, src))


@app.post("/sessions/{sid}/evaluate", response_model=EvaluateResponse)
async def evaluate_action(sid: str, req: EvaluateRequest):
    return engine.evaluate(await _load(sid), req.action)


@app.post("/sessions/{sid}/action", response_model=ApplyActionResponse)
async def apply_action(sid: str, req: ApplyActionRequest):
    sess = await _load(sid)
    if ai_to_move(sess):
        raise HTTPException(409, "waiting for the AI")
    eval_result, result = engine.process_action(sess, req.action)
    if not eval_result.legal or result is None or not result.applied:
        raise HTTPException(400, eval_result.explanation)
    await store.save_session(sess)

    ai_result = await _ai_turn(sess) if ai_to_move(sess) else None
    sess = await _load(sid)
    return ApplyActionResponse(
        applied=True,
        explanation=eval_result.explanation,
        result=result,
        ai_result=ai_result,
        session=_view(sess),
    )


@app.post("/sessions/{sid}/ai_move", response_model=ApplyActionResponse)
async def ai_move(sid: str):
    sess = await _load(sid)
    if not ai_to_move(sess):
        raise HTTPException(409, "not the AI's turn")
    ai_result = await _ai_turn(sess)
    if ai_result is None:
        raise HTTPException(409, "AI decision discarded")
    sess = await _load(sid)
    return ApplyActionResponse(
        applied=ai_result.applied,
        explanation=ai_result.reason,
        result=ai_result,
        ai_result=ai_result,
        session=_view(sess),
    )


@app.get("/sessions/{sid}/log", response_model=ActionLogResponse)
async def get_action_log(sid: str, limit: int = Query(50, ge=1, le=1000)):
    await _load(sid)
    raw = store.logs.list(sid, limit)
    entries: list[ActionLogEntry] = []

    # Validate each stored JSON string as a single ActionLogEntry
    ta = TypeAdapter(ActionLogEntry)
    for s in raw:
        entries.append(ta.validate_json(s))

    return ActionLogResponse(entries=entries)


@app.post("/sessions/{sid}/reset", response_model=SessionView)
async def reset_session(sid: str, seed: int | None = None):
    """Fresh board in the same session; any AI decision still in flight is dropped."""
    sess = await _load(sid)
    sess.state = _new_board(sess.state.rows, sess.state.cols, seed)
    sess.pending_hazard_phase = False
    sess.ai_memory = AIMemory()
    sess.decision_token += 1
    await store.save_session(sess)
    if ai_to_move(sess):
        await _ai_turn(sess)
    return _view(sess)


@app.delete("/sessions/{sid}")
async def delete_session(sid: str):
    await _load(sid)
    await store.delete_session(sid)
    return {"ok": True}

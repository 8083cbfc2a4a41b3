# Shared fixtures: hand-built boards and sessions for engine tests.

from __future__ import annotations

import pytest

from orbitchess.engine.factory import create_initial_state, empty_state
from orbitchess.engine.store import logs
from orbitchess.logging_listeners import register_listeners
from orbitchess.models.session import GameSession
from orbitchess.models.state import GameState
from tests.utils.helpers import QUIET_RULES, with_kings


@pytest.fixture(scope="session", autouse=True)
def _listeners():
    # the app registers these on import; engine-only tests need them too
    register_listeners()


@pytest.fixture(autouse=True)
def _clean_logs():
    yield
    logs._logs.clear()


@pytest.fixture
def board() -> GameState:
    """Empty 10x20 board with both kings tucked in the corners and no spawns."""
    return with_kings(empty_state(rules=QUIET_RULES))


@pytest.fixture
def fresh() -> GameState:
    return create_initial_state(seed=42)


@pytest.fixture
def session(fresh: GameState) -> GameSession:
    return GameSession(id="s-test", state=fresh, ai_enabled=False)

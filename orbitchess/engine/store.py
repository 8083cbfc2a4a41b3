from __future__ import annotations

import asyncio
import os
from collections import OrderedDict, deque
from typing import Dict, Optional, Protocol

from orbitchess.models.session import GameSession

MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "50"))
MAX_LOG_ENTRIES = int(os.getenv("MAX_LOG_ENTRIES", "1000"))


class SessionStore(Protocol):
    async def get(self, sid: str) -> Optional[GameSession]: ...
    async def set(self, s: GameSession) -> None: ...
    async def delete(self, sid: str) -> None: ...
    async def all(self) -> Dict[str, GameSession]: ...


class MemorySessionStore:
    """In-process store with an asyncio.Lock for safety within a single worker.

    Least recently used sessions are evicted beyond ``max_sessions``.
    """
    def __init__(self, max_sessions: int = MAX_SESSIONS) -> None:
        self._data: OrderedDict[str, GameSession] = OrderedDict()
        self._lock = asyncio.Lock()
        self._max = max_sessions

    async def get(self, sid: str) -> Optional[GameSession]:
        async with self._lock:
            s = self._data.get(sid)
            if s is not None:
                self._data.move_to_end(sid)
            return s

    async def set(self, s: GameSession) -> None:
        async with self._lock:
            self._data[s.id] = s
            self._data.move_to_end(s.id)
            while len(self._data) > self._max:
                evicted, _ = self._data.popitem(last=False)
                logs.drop(evicted)

    async def delete(self, sid: str) -> None:
        async with self._lock:
            self._data.pop(sid, None)
            logs.drop(sid)

    async def all(self) -> Dict[str, GameSession]:
        async with self._lock:
            return dict(self._data)


class ActionLogBook:
    """Per-session ring buffer of serialized ActionLogEntry JSON lines."""
    def __init__(self, maxlen: int = MAX_LOG_ENTRIES) -> None:
        self._logs: Dict[str, deque[str]] = {}
        self._maxlen = maxlen

    def append(self, sid: str, line: str) -> None:
        self._logs.setdefault(sid, deque(maxlen=self._maxlen)).append(line)

    def list(self, sid: str, limit: int) -> list[str]:
        buf = self._logs.get(sid)
        if not buf:
            return []
        return list(buf)[-limit:]

    def drop(self, sid: str) -> None:
        self._logs.pop(sid, None)


logs = ActionLogBook()
store: SessionStore = MemorySessionStore()

# Convenience helpers (import these in app.py)
async def save_session(s: GameSession) -> None:
    await store.set(s)

async def get_session(sid: str) -> Optional[GameSession]:
    return await store.get(sid)

async def delete_session(sid: str) -> None:
    await store.delete(sid)

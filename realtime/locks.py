"""Per-session serialization points."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Dict, Optional

if TYPE_CHECKING:
    from .registry import Session, SessionRegistry


class SessionLocks:
    """
    One asyncio.Lock per session id.

    Holding a session's lock makes a mutation and its broadcast atomic with
    respect to every other event for that session. Sessions never share a lock.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    def discard(self, session_id: str) -> None:
        self._locks.pop(session_id, None)

    def clear(self) -> None:
        self._locks.clear()

    def __len__(self) -> int:
        return len(self._locks)


@asynccontextmanager
async def locked_session(locks: SessionLocks, registry: SessionRegistry, session_id: object) -> AsyncIterator[Optional[Session]]:
    """
    Hold the session's lock and yield the live Session, or yield None if it does not exist.

    Unknown and malformed ids never get a lock entry.
    """

    if registry.find(session_id) is None:
        yield None
        return
    async with locks.lock(session_id):
        session = registry.find(session_id)
        if session is None:
            # Deleted while we waited for the lock.
            locks.discard(session_id)
        yield session

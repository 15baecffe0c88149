"""
Deferred deletion of empty sessions.

When a session's member count drops to zero a cleanup task is scheduled for it.
At expiry the task re-reads live state under the session lock and only deletes
the session if it is still empty; a rejoin in the meantime "rescues" it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from .locks import SessionLocks
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class SessionCleanup:
    """Cancellable cleanup timers keyed by session id (at most one live timer per session)."""

    def __init__(self, registry: SessionRegistry, locks: SessionLocks, grace_seconds: float):
        self._registry = registry
        self._locks = locks
        self.grace_seconds = grace_seconds
        self._tasks: Dict[str, asyncio.Task] = {}

    def schedule(self, session_id: str, delay: Optional[float] = None) -> asyncio.Task:
        """(Re)start the cleanup timer for a session. Must run inside the event loop."""
        self.cancel(session_id)
        delay = self.grace_seconds if delay is None else delay
        task = asyncio.create_task(self._expire_after(session_id, delay), name=f"session-cleanup:{session_id}")
        self._tasks[session_id] = task
        logger.debug("Cleanup for session %s scheduled in %.0fs", session_id, delay)
        return task

    def cancel(self, session_id: str) -> bool:
        task = self._tasks.pop(session_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def pending(self, session_id: str) -> bool:
        task = self._tasks.get(session_id)
        return task is not None and not task.done()

    async def _expire_after(self, session_id: str, delay: float) -> None:
        # No lock is held while waiting.
        await asyncio.sleep(delay)
        await self.expire(session_id)

    async def expire(self, session_id: str) -> bool:
        """Delete the session if it is still empty. Returns True if it was deleted."""
        async with self._locks.lock(session_id):
            if self._tasks.get(session_id) is asyncio.current_task():
                del self._tasks[session_id]
            session = self._registry.find(session_id)
            if session is None:
                self._locks.discard(session_id)
                return False
            if session.members:
                logger.info("Session %s rescued (%d users)", session_id, session.user_count)
                return False
            self._registry.delete(session_id)
            self._locks.discard(session_id)
        logger.info("Session %s deleted (empty)", session_id)
        return True

    async def shutdown(self) -> None:
        """Cancel all pending timers (for shutdown)."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

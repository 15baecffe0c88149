"""
Presence tracking (who is connected) per session.

Membership is recorded twice and both records change together under the
session lock:
- `Session.members` in the registry (its size is the presence count)
- the connection's subscription to the session's broadcast group

A reverse index (connection id -> session ids) lets a disconnect find every
session the connection belongs to without scanning the registry.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Set, Tuple

from codeinterview.applib.exceptions import SessionNotFoundError
from codeinterview.applib.models.api import CodeSyncEvent, UserJoinedEvent, UserLeftEvent

from .groups import BroadcastGroups
from .lifecycle import SessionCleanup
from .locks import SessionLocks, locked_session
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class PresenceManager:
    def __init__(
        self,
        registry: SessionRegistry,
        groups: BroadcastGroups,
        locks: SessionLocks,
        cleanup: SessionCleanup,
    ):
        self._registry = registry
        self._groups = groups
        self._locks = locks
        self._cleanup = cleanup
        self._connection_sessions: Dict[str, Set[str]] = {}

    async def join(self, connection_id: str, session_id: object) -> Dict[str, str]:
        """
        Add a connection to a session and return the private {code, language} snapshot.

        The snapshot (`code-sync`) is sent to the joiner before `user-joined` goes to the
        group, so nobody sees a presence count the joiner has not been synced for.
        Raises SessionNotFoundError without any side effect if the session does not exist.
        """

        async with locked_session(self._locks, self._registry, session_id) as session:
            if session is None:
                raise SessionNotFoundError(session_id)

            session.members.add(connection_id)
            await self._groups.subscribe(connection_id, session.id)
            self._connection_sessions.setdefault(connection_id, set()).add(session.id)
            self._cleanup.cancel(session.id)

            snapshot = session.snapshot()
            await self._groups.send(connection_id, CodeSyncEvent(**snapshot))
            await self._groups.publish(session.id, UserJoinedEvent(user_count=session.user_count))

        logger.info("Connection %s joined session %s. Users in room: %d", connection_id, session.id, session.user_count)
        return snapshot

    async def leave(self, connection_id: str) -> List[Tuple[str, int]]:
        """
        Remove a connection from every session it belongs to.

        Remaining members of each session get `user-left` with the new count; sessions that
        become empty get a cleanup scheduled. Returns (session_id, remaining) pairs. A second
        call for the same connection is a no-op.
        """

        session_ids = self._connection_sessions.pop(connection_id, set())
        left: List[Tuple[str, int]] = []

        for session_id in sorted(session_ids):
            async with locked_session(self._locks, self._registry, session_id) as session:
                await self._groups.unsubscribe(connection_id, session_id)
                if session is None or connection_id not in session.members:
                    continue

                session.members.discard(connection_id)
                remaining = session.user_count
                await self._groups.publish(session_id, UserLeftEvent(user_count=remaining))
                if remaining == 0:
                    self._cleanup.schedule(session_id)

            logger.info("Connection %s left session %s. Users in room: %d", connection_id, session_id, remaining)
            left.append((session_id, remaining))

        return left

    def user_count(self, session_id: str) -> int:
        session = self._registry.find(session_id)
        return session.user_count if session else 0

    def sessions_for(self, connection_id: str) -> Set[str]:
        return set(self._connection_sessions.get(connection_id, ()))

    def clear(self) -> None:
        self._connection_sessions.clear()

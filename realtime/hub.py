"""
Process-wide wiring of the collaboration core.

`collaboration_hub` is created at import (process start) and torn down with
`shutdown()`. All state is local to this process: running several instances
would need a shared keyed store with per-key atomic updates instead of the
in-memory registry.
"""

from __future__ import annotations

import logging
from typing import Optional

from codeinterview.applib.config import config
from codeinterview.applib.exceptions import SessionAlreadyExistsError
from codeinterview.applib.helpers import generate_session_id
from codeinterview.applib.models.api import SessionSnapshot

from .groups import BroadcastGroups, ChannelLayerGroups
from .lifecycle import SessionCleanup
from .locks import SessionLocks
from .presence import PresenceManager
from .registry import Session, SessionRegistry
from .router import EventRouter

logger = logging.getLogger(__name__)

# Random ids collide rarely; give up after this many attempts.
MAX_ID_ATTEMPTS = 10


class CollaborationHub:
    def __init__(
        self,
        groups: Optional[BroadcastGroups] = None,
        grace_seconds: Optional[float] = None,
        max_code_size: Optional[int] = None,
    ):
        self.registry = SessionRegistry()
        self.locks = SessionLocks()
        self.groups = groups or ChannelLayerGroups()
        self.cleanup = SessionCleanup(
            self.registry,
            self.locks,
            config.SESSION_GRACE_SECONDS if grace_seconds is None else grace_seconds,
        )
        self.presence = PresenceManager(self.registry, self.groups, self.locks, self.cleanup)
        if max_code_size is None and config.ENFORCE_CODE_SIZE_LIMIT:
            max_code_size = config.MAX_CODE_SIZE_BYTES
        self.router = EventRouter(self.registry, self.presence, self.groups, self.locks, max_code_size=max_code_size)

    async def create_session(self, language: Optional[str] = None) -> Session:
        """
        Create a session with a fresh id and the language's starter code.

        The cleanup timer starts right away, so a session nobody ever joins is
        reaped after the grace interval like any other empty session.
        """
        for _ in range(MAX_ID_ATTEMPTS):
            try:
                session = self.registry.create(generate_session_id(), language=language)
            except SessionAlreadyExistsError:
                continue
            self.cleanup.schedule(session.id)
            logger.info("Session %s created (%s)", session.id, session.language)
            return session
        raise RuntimeError("Could not allocate a unique session id")

    def snapshot(self, session_id: object) -> SessionSnapshot:
        """Raises SessionNotFoundError for unknown or malformed ids."""
        session = self.registry.get(session_id)
        return SessionSnapshot(
            id=session.id,
            code=session.code,
            language=session.language,
            user_count=session.user_count,
        )

    async def shutdown(self) -> None:
        await self.cleanup.shutdown()
        self.presence.clear()
        self.registry.clear()
        self.locks.clear()


collaboration_hub = CollaborationHub()

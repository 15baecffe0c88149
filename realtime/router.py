"""
Event router: the single entry point for every real-time event.

Fan-out contract per inbound event:
- join-session     -> `code-sync` to the sender, then `user-joined` to the group
                      (unknown session: `error` to the sender only)
- code-change      -> `code-update` to every member except the sender
- language-change  -> `language-update` to every member including the sender
- run-code         -> `code-execution` to every member including the sender
- disconnect       -> `user-left` to the remaining members of each affected session

Mutation events for an unknown session are dropped without telling the sender;
the session may have been cleaned up after the sender joined it.
Concurrent code changes are not merged: the last one applied wins.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from codeinterview.applib.exceptions import SessionNotFoundError
from codeinterview.applib.helpers import is_code_too_large
from codeinterview.applib.models.api import (
    CodeChangeRequest,
    CodeExecutionEvent,
    CodeUpdateEvent,
    ErrorEvent,
    LanguageChangeRequest,
    LanguageUpdateEvent,
    RunCodeRequest,
)
from codeinterview.applib.types import ClientEvent

from .groups import BroadcastGroups
from .locks import SessionLocks, locked_session
from .presence import PresenceManager
from .registry import SessionRegistry

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Session not found"

RequestT = TypeVar("RequestT", bound=BaseModel)


class EventRouter:
    def __init__(
        self,
        registry: SessionRegistry,
        presence: PresenceManager,
        groups: BroadcastGroups,
        locks: SessionLocks,
        max_code_size: Optional[int] = None,
    ):
        self._registry = registry
        self._presence = presence
        self._groups = groups
        self._locks = locks
        # None disables the oversize check
        self.max_code_size = max_code_size
        self._handlers: Dict[str, Callable[[str, Any], Awaitable[bool]]] = {
            ClientEvent.JOIN_SESSION.value: self.join_session,
            ClientEvent.CODE_CHANGE.value: self.code_change,
            ClientEvent.LANGUAGE_CHANGE.value: self.language_change,
            ClientEvent.RUN_CODE.value: self.run_code,
        }

    async def dispatch(self, connection_id: str, event_type: Any, data: Any) -> bool:
        """Route one inbound event. Returns True if it was applied."""
        handler = self._handlers.get(event_type) if isinstance(event_type, str) else None
        if handler is None:
            logger.info("Ignoring unknown event type %r from %s", event_type, connection_id)
            return False
        return await handler(connection_id, data)

    async def join_session(self, connection_id: str, session_id: Any) -> bool:
        try:
            await self._presence.join(connection_id, session_id)
        except SessionNotFoundError:
            logger.info("Connection %s tried to join unknown session %r", connection_id, session_id)
            await self._groups.send(connection_id, ErrorEvent(message=SESSION_NOT_FOUND))
            return False
        return True

    async def code_change(self, connection_id: str, data: Any) -> bool:
        request = self._parse(CodeChangeRequest, data, connection_id)
        if request is None:
            return False
        if self.max_code_size is not None and is_code_too_large(request.code, self.max_code_size):
            logger.warning(
                "Dropping code-change for session %s from %s: code exceeds %d bytes",
                request.session_id,
                connection_id,
                self.max_code_size,
            )
            return False

        async with locked_session(self._locks, self._registry, request.session_id) as session:
            if session is None:
                return self._drop(ClientEvent.CODE_CHANGE, request.session_id, connection_id)
            session.code = request.code
            await self._groups.publish(session.id, CodeUpdateEvent(code=request.code), exclude=connection_id)
        return True

    async def language_change(self, connection_id: str, data: Any) -> bool:
        request = self._parse(LanguageChangeRequest, data, connection_id)
        if request is None:
            return False

        async with locked_session(self._locks, self._registry, request.session_id) as session:
            if session is None:
                return self._drop(ClientEvent.LANGUAGE_CHANGE, request.session_id, connection_id)
            session.language = request.language
            # The sender is included: every client re-renders off the confirmed value.
            await self._groups.publish(session.id, LanguageUpdateEvent(language=request.language))
        return True

    async def run_code(self, connection_id: str, data: Any) -> bool:
        request = self._parse(RunCodeRequest, data, connection_id)
        if request is None:
            return False

        async with locked_session(self._locks, self._registry, request.session_id) as session:
            if session is None:
                return self._drop(ClientEvent.RUN_CODE, request.session_id, connection_id)
            logger.info("Run code requested for session %s", session.id)
            await self._groups.publish(session.id, CodeExecutionEvent())
        return True

    async def disconnect(self, connection_id: str) -> List[Tuple[str, int]]:
        return await self._presence.leave(connection_id)

    @staticmethod
    def _parse(model: Type[RequestT], data: Any, connection_id: str) -> Optional[RequestT]:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.debug("Dropping malformed %s from %s: %s", model.__name__, connection_id, e)
            return None

    @staticmethod
    def _drop(event: ClientEvent, session_id: str, connection_id: str) -> bool:
        logger.debug("Dropping %s for unknown session %r from %s", event.value, session_id, connection_id)
        return False

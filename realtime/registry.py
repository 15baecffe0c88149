"""
In-memory registry of collaborative coding sessions.

The registry is process-local: every session lives in this process only and
is gone on restart. Sessions are created by the REST layer (or directly in
tests), mutated by the event router, and deleted by the cleanup scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional, Set

from codeinterview.applib.config import config
from codeinterview.applib.exceptions import (
    SessionAlreadyExistsError,
    SessionIdValidationError,
    SessionNotFoundError,
)
from codeinterview.applib.helpers import FALLBACK_CODE_TEMPLATE, get_default_code_template, is_valid_session_id


@dataclass
class Session:
    """One shared editing unit: code buffer, language tag and member set."""

    id: str
    code: str
    language: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    # connection ids currently subscribed; its size is the presence count
    members: Set[str] = field(default_factory=set)

    @property
    def user_count(self) -> int:
        return len(self.members)

    def snapshot(self) -> Dict[str, str]:
        return {"code": self.code, "language": self.language}


class SessionRegistry:
    """Maps session id -> Session. No method blocks."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def create(self, session_id: str, code: Optional[str] = None, language: Optional[str] = None) -> Session:
        """Register a new session.

        Args:
            session_id: Id for the new session
            code: Initial buffer; defaults to the template for an explicit ``language``,
                otherwise to the generic starter
            language: Language tag, stored lowercased; defaults to ``DEFAULT_LANGUAGE``
        """
        if not is_valid_session_id(session_id):
            raise SessionIdValidationError(f"Invalid session ID: {session_id!r}")
        if session_id in self._sessions:
            raise SessionAlreadyExistsError(session_id)
        if language:
            language = language.lower()
            if code is None:
                code = get_default_code_template(language)
        else:
            language = config.DEFAULT_LANGUAGE
        if code is None:
            code = FALLBACK_CODE_TEMPLATE
        session = Session(id=session_id, code=code, language=language)
        self._sessions[session_id] = session
        return session

    def find(self, session_id: object) -> Optional[Session]:
        """Get a session, or None for unknown and malformed ids."""
        if not is_valid_session_id(session_id):
            return None
        return self._sessions.get(session_id)

    def get(self, session_id: object) -> Session:
        session = self.find(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> bool:
        """Remove a session. Deleting an absent id is a no-op."""
        return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        self._sessions.clear()

    def __contains__(self, session_id: object) -> bool:
        return self.find(session_id) is not None

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

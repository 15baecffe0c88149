"""
Pydantic models for request validation and response serialization.
These models are used for both HTTP endpoints and WebSocket message handling.
"""

from codeinterview.applib.models.api import (
    CodeChangeRequest,
    LanguageChangeRequest,
    RunCodeRequest,
    CreateSessionRequest,
    CodeSyncEvent,
    CodeUpdateEvent,
    LanguageUpdateEvent,
    UserJoinedEvent,
    UserLeftEvent,
    CodeExecutionEvent,
    ErrorEvent,
    SessionSnapshot,
    CreateSessionResponse,
)

# Re-export all models for convenience
__all__ = [
    "CodeChangeRequest",
    "LanguageChangeRequest",
    "RunCodeRequest",
    "CreateSessionRequest",
    "CodeSyncEvent",
    "CodeUpdateEvent",
    "LanguageUpdateEvent",
    "UserJoinedEvent",
    "UserLeftEvent",
    "CodeExecutionEvent",
    "ErrorEvent",
    "SessionSnapshot",
    "CreateSessionResponse",
]

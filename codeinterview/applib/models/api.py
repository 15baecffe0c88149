from codeinterview.applib.types import ServerEvent
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, ClassVar, Optional


class SessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias='sessionId')

class CodeChangeRequest(SessionRequest):
    code: str

class LanguageChangeRequest(SessionRequest):
    language: str

class RunCodeRequest(SessionRequest):
    pass

class CreateSessionRequest(BaseModel):
    language: Optional[str] = None


class OutboundEvent(BaseModel):
    """Server -> client event, sent on the wire as {"type": <name>, "data": {...}}"""
    model_config = ConfigDict(populate_by_name=True)

    name: ClassVar[ServerEvent]

    def payload(self) -> Any:
        return self.model_dump(by_alias=True)

    def to_frame(self) -> dict:
        return {'type': self.name.value, 'data': self.payload()}

class CodeSyncEvent(OutboundEvent):
    """Private snapshot for a connection that just joined"""
    name = ServerEvent.CODE_SYNC
    code: str
    language: str

class CodeUpdateEvent(OutboundEvent):
    name = ServerEvent.CODE_UPDATE
    code: str

class LanguageUpdateEvent(OutboundEvent):
    name = ServerEvent.LANGUAGE_UPDATE
    language: str

class UserJoinedEvent(OutboundEvent):
    name = ServerEvent.USER_JOINED
    user_count: int = Field(alias='userCount')

class UserLeftEvent(OutboundEvent):
    name = ServerEvent.USER_LEFT
    user_count: int = Field(alias='userCount')

class CodeExecutionEvent(OutboundEvent):
    """Execution-requested notice; the code itself runs client-side"""
    name = ServerEvent.CODE_EXECUTION
    message: str = 'Code execution requested'

class ErrorEvent(OutboundEvent):
    name = ServerEvent.ERROR
    message: str

    def payload(self) -> Any:
        return self.message


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    code: str
    language: str
    user_count: int = Field(alias='userCount')

class CreateSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias='sessionId')
    share_link: str = Field(alias='shareLink')

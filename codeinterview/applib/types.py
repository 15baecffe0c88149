from enum import Enum

class Language(Enum):
    JAVASCRIPT = 'javascript'
    TYPESCRIPT = 'typescript'
    PYTHON = 'python'
    JAVA = 'java'
    CPP = 'cpp'
    GO = 'go'

class ClientEvent(Enum):
    JOIN_SESSION = 'join-session'
    CODE_CHANGE = 'code-change'
    LANGUAGE_CHANGE = 'language-change'
    RUN_CODE = 'run-code'

class ServerEvent(Enum):
    CODE_SYNC = 'code-sync'
    CODE_UPDATE = 'code-update'
    LANGUAGE_UPDATE = 'language-update'
    USER_JOINED = 'user-joined'
    USER_LEFT = 'user-left'
    CODE_EXECUTION = 'code-execution'
    ERROR = 'error'

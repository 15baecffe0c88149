class SessionNotFoundError(LookupError):
    """Raised when a session id is unknown or not a well-formed id."""

    def __init__(self, session_id: object):
        super().__init__(f"Session not found: {session_id!r}")
        self.session_id = session_id


class SessionAlreadyExistsError(KeyError):
    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id


class SessionIdValidationError(ValueError):
    """Raised when an operation that depends on the id format gets a malformed id."""

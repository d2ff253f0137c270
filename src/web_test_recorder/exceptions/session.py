"""
Session-related exceptions.
"""

from web_test_recorder.exceptions.base import WebTestRecorderError


class SessionError(WebTestRecorderError):
    """Base exception for recording and replay session errors."""

    error_type = "session_error"


class SpawnError(SessionError):
    """
    The recording subprocess could not be started.

    Raised when:
    - The recorder executable is not installed or not on PATH
    - The executable is not permitted to run
    - The process exits immediately with an error
    """

    error_type = "spawn_error"

    def __init__(self, message: str, command: list[str] | None = None, reason: str | None = None):
        super().__init__(message, {"command": command, "reason": reason})
        self.command = command
        self.reason = reason


class SessionNotFoundError(SessionError):
    """
    No session is registered under the given id.
    """

    error_type = "session_not_found"

    def __init__(self, message: str, session_id: str):
        super().__init__(message, {"session_id": session_id})
        self.session_id = session_id


class SessionGoneError(SessionNotFoundError):
    """
    The session existed but has already been saved or stopped.

    Subclass of SessionNotFoundError so callers that only care about
    "not available" can keep a single except clause.
    """

    error_type = "session_gone"

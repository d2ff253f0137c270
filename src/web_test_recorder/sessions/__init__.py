"""
Sessions module - Session state and the registry that owns it.
"""

from web_test_recorder.sessions.models import (
    Session,
    SessionKind,
    SessionState,
    RecordingSession,
    ReplaySession,
    new_session_id,
)
from web_test_recorder.sessions.registry import SessionRegistry

__all__ = [
    "Session",
    "SessionKind",
    "SessionState",
    "RecordingSession",
    "ReplaySession",
    "new_session_id",
    "SessionRegistry",
]

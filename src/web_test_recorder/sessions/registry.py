"""
Session Registry - Process-lifetime map of session id to session state.

The registry is an explicit object owned by the application context and
handed to every component that needs it. It is used from a single asyncio
event loop; per-session locks serialize operations on one id while
different ids proceed independently.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from web_test_recorder.exceptions import SessionGoneError, SessionNotFoundError
from web_test_recorder.sessions.models import Session, SessionKind

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    In-memory session store.

    Example:
        >>> registry = SessionRegistry()
        >>> registry.set(session)
        >>> async with registry.lock(session.id):
        ...     session = registry.get(session.id)
    """

    def __init__(self, max_tombstones: int = 1000):
        """
        Args:
            max_tombstones: How many destroyed ids to remember for SessionGoneError
        """
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._destroyed: "OrderedDict[str, None]" = OrderedDict()
        self._max_tombstones = max_tombstones

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return self.has(session_id)

    def has(self, session_id: str) -> bool:
        """Whether a live session is registered under this id."""
        return session_id in self._sessions

    def was_destroyed(self, session_id: str) -> bool:
        """Whether this id belonged to a session that was deleted."""
        return session_id in self._destroyed

    def find(self, session_id: str) -> Optional[Session]:
        """Return the session or None."""
        return self._sessions.get(session_id)

    def get(self, session_id: str, kind: Optional[SessionKind] = None) -> Session:
        """
        Return the live session for an id.

        Args:
            session_id: Session id
            kind: If given, sessions of another kind are treated as unknown

        Raises:
            SessionGoneError: The session was already saved or stopped
            SessionNotFoundError: The id was never registered
        """
        session = self._sessions.get(session_id)
        if session is not None and (kind is None or session.kind == kind):
            return session
        if session_id in self._destroyed:
            raise SessionGoneError(f"Session {session_id} has already ended", session_id=session_id)
        raise SessionNotFoundError(f"Session {session_id} not found", session_id=session_id)

    def set(self, session: Session) -> None:
        """Register or replace a session."""
        self._sessions[session.id] = session
        self._destroyed.pop(session.id, None)

    def delete(self, session_id: str) -> Optional[Session]:
        """
        Remove a session and mark it DESTROYED.

        Returns:
            The removed session, or None if nothing was registered
        """
        session = self._sessions.pop(session_id, None)
        self._locks.pop(session_id, None)
        if session is None:
            return None
        session.mark_destroyed()
        self._destroyed[session_id] = None
        while len(self._destroyed) > self._max_tombstones:
            self._destroyed.popitem(last=False)
        logger.debug(f"[{session_id}] Session removed from registry")
        return session

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session lock; created on first use."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def sessions(self, kind: Optional[SessionKind] = None) -> List[Session]:
        """Live sessions, optionally filtered by kind, oldest first."""
        items = list(self._sessions.values())
        if kind is not None:
            items = [s for s in items if s.kind == kind]
        return sorted(items, key=lambda s: s.started_at)

    def clear(self) -> None:
        """Forget everything, including tombstones."""
        self._sessions.clear()
        self._locks.clear()
        self._destroyed.clear()

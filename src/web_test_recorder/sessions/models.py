"""
Session Models - In-memory state for recording and replay sessions.

Sessions move through three states:

    ACTIVE ──(process exits on its own)──> FINISHED
      │                                        │
      └──────────(save / stop)──────> DESTROYED <┘

A FINISHED recording stays queryable until save/stop decides what to do
with it. DESTROYED is terminal; the registry forgets the session but
remembers its id so late callers get SessionGoneError.
"""

import itertools
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional

from web_test_recorder.interfaces.recording import RecordingHandle

if TYPE_CHECKING:
    from web_test_recorder.engine.models import ReplayResult

_id_counter = itertools.count()


def new_session_id() -> str:
    """Timestamp-derived id; the counter keeps ids unique within one millisecond."""
    return f"{int(time.time() * 1000)}{next(_id_counter) % 1000:03d}"


class SessionKind(str, Enum):
    """Kinds of session."""
    RECORDING = "recording"
    REPLAY = "replay"


class SessionState(str, Enum):
    """Lifecycle states."""
    ACTIVE = "active"
    FINISHED = "finished"
    DESTROYED = "destroyed"


@dataclass
class Session:
    """Common session fields. Use one of the concrete subclasses."""
    id: str
    state: SessionState = SessionState.ACTIVE
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    kind: ClassVar[SessionKind]

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    @property
    def age_seconds(self) -> float:
        return (datetime.now() - self.started_at).total_seconds()

    def mark_finished(self) -> bool:
        """ACTIVE -> FINISHED. Returns False if the session was not active."""
        if self.state != SessionState.ACTIVE:
            return False
        self.state = SessionState.FINISHED
        self.finished_at = datetime.now()
        return True

    def mark_destroyed(self) -> None:
        self.state = SessionState.DESTROYED
        if self.finished_at is None:
            self.finished_at = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "state": self.state.value,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


@dataclass
class RecordingSession(Session):
    """
    A running (or just-exited) recorder.

    The artifact file is the source of truth while the session lives;
    last_known_code only caches the most recent successful read.
    """
    target_url: str = ""
    test_name: str = ""
    artifact_path: Optional[Path] = None
    handle: Optional[RecordingHandle] = field(default=None, repr=False)
    last_known_code: str = ""
    exit_code: Optional[int] = None

    kind: ClassVar[SessionKind] = SessionKind.RECORDING

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "target_url": self.target_url,
            "test_name": self.test_name,
            "exit_code": self.exit_code,
        })
        return data


@dataclass
class ReplaySession(Session):
    """A replay run in progress."""
    target_url: str = ""
    total_steps: int = 0
    completed_steps: int = 0
    result: Optional["ReplayResult"] = None

    kind: ClassVar[SessionKind] = SessionKind.REPLAY

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "target_url": self.target_url,
            "total_steps": self.total_steps,
            "completed_steps": self.completed_steps,
            "result": self.result.to_dict() if self.result else None,
        })
        return data

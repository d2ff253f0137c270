"""
Recorder Supervisor - Lifecycle of interactive recording sessions.

Protocol seen by callers:

    session_id = await supervisor.start(url, name)   # spawn recorder
    await supervisor.status(session_id)              # poll, repeatedly
    artifact = await supervisor.save(session_id, name)   # or stop()

Every operation on one session id runs under that session's registry lock.
The background exit watcher takes the same lock, so "recorder exited on
its own" and "caller saved/stopped" are serialized and resolved by state:

- exit first: ACTIVE -> FINISHED, final artifact content is cached, the
  session stays queryable until save/stop (or the finished TTL expires);
- save/stop first: session becomes DESTROYED and the watcher, when it
  finally gets the lock, finds nothing to do.
"""

import asyncio
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from web_test_recorder.interfaces.recording import RecordingBackend, RecordingHandle
from web_test_recorder.sessions.models import (
    RecordingSession,
    SessionKind,
    SessionState,
    new_session_id,
)
from web_test_recorder.sessions.registry import SessionRegistry
from web_test_recorder.storage.case_store import TestCaseStore
from web_test_recorder.storage.models import TestArtifact

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_DIR = Path(tempfile.gettempdir()) / "web-test-recorder"


@dataclass
class RecordingStatus:
    """Snapshot returned by a status poll."""
    session_id: str
    running: bool
    code: str
    state: SessionState
    exit_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "running": self.running,
            "code": self.code,
            "state": self.state.value,
            "exit_code": self.exit_code,
        }


class RecorderSupervisor:
    """
    Starts, polls, saves and stops recording sessions.

    Example:
        >>> supervisor = RecorderSupervisor(CodegenBackend(), SessionRegistry(), store)
        >>> session_id = await supervisor.start("https://example.com", "checkout")
        >>> (await supervisor.status(session_id)).running
        True
        >>> artifact = await supervisor.save(session_id, "checkout")
    """

    def __init__(
        self,
        backend: RecordingBackend,
        registry: SessionRegistry,
        store: Optional[TestCaseStore] = None,
        artifact_dir: Optional[Union[str, Path]] = None,
        artifact_suffix: str = ".spec.ts",
        finished_ttl_seconds: float = 600.0,
    ):
        """
        Args:
            backend: Recording capability (subprocess or test double)
            registry: Shared session registry
            store: Where save() persists the test case; None skips persistence
            artifact_dir: Directory for per-session artifact files
            artifact_suffix: File suffix of artifacts
            finished_ttl_seconds: How long a self-exited session is kept; 0 keeps it forever
        """
        self._backend = backend
        self._registry = registry
        self._store = store
        self._artifact_dir = Path(artifact_dir) if artifact_dir else DEFAULT_ARTIFACT_DIR
        self._artifact_suffix = artifact_suffix
        self._finished_ttl_seconds = finished_ttl_seconds
        self._watchers: Dict[str, "asyncio.Task[None]"] = {}

    def artifact_path_for(self, session_id: str) -> Path:
        return self._artifact_dir / f".codegen-{session_id}{self._artifact_suffix}"

    def sessions(self) -> List[RecordingSession]:
        """Live recording sessions, oldest first."""
        return self._registry.sessions(SessionKind.RECORDING)  # type: ignore[return-value]

    async def start(self, target_url: str, test_name: str = "") -> str:
        """
        Spawn a recorder for ``target_url`` and register the session.

        Returns:
            The new session id

        Raises:
            SpawnError: If the recorder could not be started (nothing is registered)
        """
        session_id = new_session_id()
        artifact_path = self.artifact_path_for(session_id)
        logger.info(f"[{session_id}] Starting recording session for {target_url}")

        handle = await self._backend.start(target_url, artifact_path)

        session = RecordingSession(
            id=session_id,
            target_url=target_url,
            test_name=test_name,
            artifact_path=artifact_path,
            handle=handle,
        )
        self._registry.set(session)
        self._watchers[session_id] = asyncio.create_task(
            self._watch(session_id, handle),
            name=f"recorder-watch-{session_id}",
        )
        return session_id

    async def status(self, session_id: str) -> RecordingStatus:
        """
        Latest recorder output for a session.

        Raises:
            SessionNotFoundError: Unknown id (SessionGoneError if it already ended)
        """
        self._get(session_id)
        async with self._registry.lock(session_id):
            session = self._get(session_id)
            code = await self._read(session)
            running = session.is_active and session.handle is not None and self._backend.poll(session.handle)
            return RecordingStatus(
                session_id=session_id,
                running=running,
                code=code,
                state=session.state,
                exit_code=session.exit_code,
            )

    async def save(self, session_id: str, test_name: Optional[str] = None) -> TestArtifact:
        """
        Persist the recorded code as a test case and end the session.

        The session is only destroyed after the store accepted the test
        case; a storage failure leaves it queryable so the caller can retry.

        Raises:
            SessionNotFoundError: Unknown id (SessionGoneError if it already ended)
        """
        self._get(session_id)
        async with self._registry.lock(session_id):
            session = self._get(session_id)
            code = await self._read(session)
            artifact = TestArtifact(
                name=test_name or session.test_name or f"Recording {session_id}",
                code=code,
                url=session.target_url,
                status="not run",
                metadata={
                    "session_id": session_id,
                    "recorded_at": session.started_at.isoformat(),
                },
            )
            if self._store is not None:
                await self._store.add(artifact)
            await self._destroy(session)

        logger.info(f"[{session_id}] Saved recording as test case {artifact.id} ({len(code)} chars)")
        return artifact

    async def stop(self, session_id: str) -> None:
        """
        Discard a session: kill the recorder and delete its artifact.

        Raises:
            SessionNotFoundError: Unknown id (SessionGoneError if it already ended)
        """
        self._get(session_id)
        async with self._registry.lock(session_id):
            session = self._get(session_id)
            await self._destroy(session)
        logger.info(f"[{session_id}] Recording session stopped")

    async def shutdown(self) -> None:
        """Stop every live recording session."""
        for session in self.sessions():
            try:
                await self.stop(session.id)
            except Exception as e:
                logger.warning(f"[{session.id}] Error during shutdown: {e}")

    def _get(self, session_id: str) -> RecordingSession:
        # Also called before lock() so unknown ids never allocate a lock
        session = self._registry.get(session_id, kind=SessionKind.RECORDING)
        assert isinstance(session, RecordingSession)
        return session

    async def _read(self, session: RecordingSession) -> str:
        """Read the artifact; fall back to the last content seen if it is gone."""
        if session.artifact_path is None:
            return session.last_known_code
        code = await self._backend.read_artifact(session.artifact_path)
        if code:
            session.last_known_code = code
            return code
        return session.last_known_code

    async def _destroy(self, session: RecordingSession) -> None:
        """Kill, clean up and deregister. Caller holds the session lock."""
        if session.handle is not None:
            await self._backend.stop(session.handle)
        if session.artifact_path is not None:
            await self._backend.delete_artifact(session.artifact_path)
        self._registry.delete(session.id)

        watcher = self._watchers.pop(session.id, None)
        if watcher is not None and watcher is not asyncio.current_task() and not watcher.done():
            watcher.cancel()

    async def _watch(self, session_id: str, handle: RecordingHandle) -> None:
        """Capture the final artifact when the recorder exits on its own."""
        try:
            exit_code = await self._backend.wait(handle)
            if not self._registry.has(session_id):
                return

            async with self._registry.lock(session_id):
                session = self._registry.find(session_id)
                if not isinstance(session, RecordingSession) or not session.is_active:
                    return
                await self._read(session)
                session.exit_code = exit_code
                session.mark_finished()
                logger.info(
                    f"[{session_id}] Recorder exited with code {exit_code}; "
                    f"{len(session.last_known_code)} chars captured"
                )

            if self._finished_ttl_seconds <= 0:
                return
            await asyncio.sleep(self._finished_ttl_seconds)

            if not self._registry.has(session_id):
                return
            async with self._registry.lock(session_id):
                session = self._registry.find(session_id)
                if isinstance(session, RecordingSession) and session.state == SessionState.FINISHED:
                    logger.info(f"[{session_id}] Discarding finished session after {self._finished_ttl_seconds}s idle")
                    await self._destroy(session)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"[{session_id}] Recorder watcher failed")
        finally:
            if self._watchers.get(session_id) is asyncio.current_task():
                self._watchers.pop(session_id, None)

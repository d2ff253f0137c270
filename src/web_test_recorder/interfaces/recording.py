"""
Recording Interface - Capability contract for the external recording tool.

The supervisor never touches processes or files directly. It asks a
RecordingBackend to start a recorder that writes generated code to an
artifact path, polls it for liveness, and stops it. A test double can
implement this without spawning anything.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass
class RecordingHandle:
    """
    Opaque handle to one running recorder.

    Attributes:
        artifact_path: Where the recorder writes its generated code
        pid: OS process id, if the backend has one
        native: Backend-specific handle (e.g. asyncio.subprocess.Process)
    """
    artifact_path: Path
    pid: Optional[int] = None
    native: Any = field(default=None, repr=False)


class RecordingBackend(ABC):
    """Starts, polls and stops external recorders."""

    @abstractmethod
    async def start(self, target_url: str, artifact_path: Path) -> RecordingHandle:
        """
        Start a recorder for ``target_url`` writing to ``artifact_path``.

        Raises:
            SpawnError: If the recorder could not be started
        """
        ...

    @abstractmethod
    def poll(self, handle: RecordingHandle) -> bool:
        """Return True while the recorder is still running."""
        ...

    @abstractmethod
    async def wait(self, handle: RecordingHandle) -> Optional[int]:
        """Wait for the recorder to exit and return its exit code."""
        ...

    @abstractmethod
    async def stop(self, handle: RecordingHandle) -> None:
        """Terminate the recorder if it is still running. Must be idempotent."""
        ...

    async def read_artifact(self, path: Path) -> str:
        """Return the artifact content, or an empty string if it does not exist yet."""
        def _read() -> str:
            try:
                # The recorder rewrites the file in place; a read can catch it mid-character.
                return path.read_text(encoding="utf-8", errors="replace")
            except FileNotFoundError:
                return ""

        return await asyncio.to_thread(_read)

    async def delete_artifact(self, path: Path) -> None:
        """Delete the artifact file. A missing file is not an error."""
        await asyncio.to_thread(path.unlink, missing_ok=True)

"""
Codegen Backend - Runs ``playwright codegen`` as the external recorder.

The recorder is an interactive subprocess: it opens a headed browser and
keeps rewriting the generated test to ``--output`` as the user clicks
around. It exits when the user closes the browser window or when it is
killed.
"""

import asyncio
import logging
import subprocess
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, List, Optional, Sequence

from web_test_recorder.exceptions import SpawnError
from web_test_recorder.interfaces.recording import RecordingBackend, RecordingHandle

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("playwright", "codegen")

# File suffix of the generated code per codegen --target
TARGET_SUFFIXES = {
    "playwright-test": ".spec.ts",
    "javascript": ".js",
    "python": ".py",
    "python-async": ".py",
    "python-pytest": ".py",
    "csharp": ".cs",
    "java": ".java",
}


def artifact_suffix(target: str) -> str:
    """File suffix for a codegen target."""
    return TARGET_SUFFIXES.get(target, ".txt")


@dataclass
class _CodegenProcess:
    process: asyncio.subprocess.Process
    stderr_tail: Deque[str] = field(default_factory=lambda: deque(maxlen=20))
    drain_task: Optional["asyncio.Task[None]"] = None


class CodegenBackend(RecordingBackend):
    """
    RecordingBackend that spawns Playwright's code generator.

    Example:
        >>> backend = CodegenBackend(target="playwright-test")
        >>> handle = await backend.start("https://example.com", Path("/tmp/.codegen-1.spec.ts"))
        >>> backend.poll(handle)
        True
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        target: str = "playwright-test",
        startup_check_seconds: float = 0.5,
        kill_grace_seconds: float = 2.0,
    ):
        """
        Args:
            command: Executable and leading args (default ``playwright codegen``)
            target: Language target for generated code
            startup_check_seconds: An exit within this window counts as a failed spawn
            kill_grace_seconds: How long stop() waits for the killed process to be reaped
        """
        self._command = list(command or DEFAULT_COMMAND)
        self._target = target
        self._startup_check_seconds = startup_check_seconds
        self._kill_grace_seconds = kill_grace_seconds

    def build_command(self, target_url: str, artifact_path: Path) -> List[str]:
        """Full argv for one recording."""
        return [
            *self._command,
            "--target", self._target,
            "--output", str(artifact_path),
            target_url,
        ]

    async def start(self, target_url: str, artifact_path: Path) -> RecordingHandle:
        cmd = self.build_command(target_url, artifact_path)
        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Running: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise SpawnError(
                f"Recorder executable not found: {cmd[0]}. Is Playwright installed?",
                command=cmd,
                reason=str(e),
            )
        except PermissionError as e:
            raise SpawnError(
                f"Permission denied running recorder: {cmd[0]}",
                command=cmd,
                reason=str(e),
            )
        except OSError as e:
            raise SpawnError(f"Could not start recorder: {e}", command=cmd, reason=str(e))

        proc = _CodegenProcess(process=process)
        proc.drain_task = asyncio.create_task(self._drain_stderr(proc))
        handle = RecordingHandle(artifact_path=artifact_path, pid=process.pid, native=proc)

        if self._startup_check_seconds > 0:
            try:
                returncode = await asyncio.wait_for(process.wait(), self._startup_check_seconds)
            except asyncio.TimeoutError:
                returncode = None
            if returncode is not None and returncode != 0:
                await self._finish_drain(proc)
                stderr = "\n".join(proc.stderr_tail).strip()
                raise SpawnError(
                    f"Recorder exited immediately with code {returncode}"
                    + (f": {stderr}" if stderr else ""),
                    command=cmd,
                    reason=stderr or None,
                )

        logger.debug(f"Recorder started (pid={process.pid})")
        return handle

    def poll(self, handle: RecordingHandle) -> bool:
        proc: _CodegenProcess = handle.native
        return proc.process.returncode is None

    async def wait(self, handle: RecordingHandle) -> Optional[int]:
        proc: _CodegenProcess = handle.native
        returncode = await proc.process.wait()
        await self._finish_drain(proc)
        return returncode

    async def stop(self, handle: RecordingHandle) -> None:
        proc: _CodegenProcess = handle.native
        process = proc.process
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            try:
                await asyncio.wait_for(process.wait(), self._kill_grace_seconds)
            except asyncio.TimeoutError:
                logger.warning(f"Recorder pid={process.pid} did not exit within {self._kill_grace_seconds}s")
        await self._finish_drain(proc)

    async def _drain_stderr(self, proc: _CodegenProcess) -> None:
        stream = proc.process.stderr
        if stream is None:
            return
        while True:
            line = await stream.readline()
            if not line:
                break
            text = line.decode("utf-8", errors="replace").rstrip()
            if text:
                proc.stderr_tail.append(text)
                logger.debug(f"codegen[{proc.process.pid}]: {text}")

    async def _finish_drain(self, proc: _CodegenProcess) -> None:
        task = proc.drain_task
        if task is None or task.done():
            return
        try:
            await asyncio.wait_for(asyncio.shield(task), 1.0)
        except asyncio.TimeoutError:
            task.cancel()

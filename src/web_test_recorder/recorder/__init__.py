"""
Recorder Module - Supervise external recording sessions.

This module spawns Playwright's code generator for interactive
recording and exposes its evolving output through a polling protocol.
"""

from web_test_recorder.recorder.codegen import CodegenBackend, artifact_suffix
from web_test_recorder.recorder.supervisor import RecorderSupervisor, RecordingStatus

__all__ = [
    "CodegenBackend",
    "artifact_suffix",
    "RecorderSupervisor",
    "RecordingStatus",
]

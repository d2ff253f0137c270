"""
Engine module - Deterministic replay of stored action sequences.

Components:
- ActionExecutor: Runs one typed action against the automation page
- StepRunner: Sequences actions with fail-fast semantics
"""

from web_test_recorder.engine.models import (
    ReplayRequest,
    ReplayResult,
    RunStatus,
    StepResult,
    StepStatus,
)
from web_test_recorder.engine.executor import ActionExecutor, error_message
from web_test_recorder.engine.step_runner import StepRunner, DEFAULT_SETTLE_DELAY_MS

__all__ = [
    "ReplayRequest",
    "ReplayResult",
    "RunStatus",
    "StepResult",
    "StepStatus",
    "ActionExecutor",
    "error_message",
    "StepRunner",
    "DEFAULT_SETTLE_DELAY_MS",
]

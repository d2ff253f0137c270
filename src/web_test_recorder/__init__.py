"""
Web Test Recorder - Record, replay and AI-generate browser end-to-end tests.

This package supervises Playwright codegen recording sessions, replays
stored action sequences with fail-fast semantics, and turns recordings
into test code through an external AI endpoint.

Example:
    >>> from web_test_recorder import create_context
    >>> context = create_context()
    >>> session_id = await context.supervisor.start("https://example.com", "smoke")
"""

__version__ = "0.1.0"

# Public API exports
from web_test_recorder.config.settings import Settings
from web_test_recorder.context import AppContext, create_context
from web_test_recorder.engine.step_runner import StepRunner
from web_test_recorder.llm.gateway import AIGatewayClient
from web_test_recorder.recorder.supervisor import RecorderSupervisor
from web_test_recorder.sessions.registry import SessionRegistry

__all__ = [
    "AppContext",
    "create_context",
    "Settings",
    "StepRunner",
    "AIGatewayClient",
    "RecorderSupervisor",
    "SessionRegistry",
    "__version__",
]

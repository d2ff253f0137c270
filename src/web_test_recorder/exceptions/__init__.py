"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Web Test Recorder,
providing clear error types for different failure scenarios.
"""

from web_test_recorder.exceptions.base import (
    WebTestRecorderError,
    ConfigurationError,
    StorageError,
    RecordNotFoundError,
)
from web_test_recorder.exceptions.session import (
    SessionError,
    SpawnError,
    SessionNotFoundError,
    SessionGoneError,
)
from web_test_recorder.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    NavigationError,
    ActionExecutionError,
)
from web_test_recorder.exceptions.llm import (
    LLMError,
    UpstreamError,
    InvalidResponseError,
)

__all__ = [
    # Base exceptions
    "WebTestRecorderError",
    "ConfigurationError",
    "StorageError",
    "RecordNotFoundError",
    # Session exceptions
    "SessionError",
    "SpawnError",
    "SessionNotFoundError",
    "SessionGoneError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "NavigationError",
    "ActionExecutionError",
    # LLM exceptions
    "LLMError",
    "UpstreamError",
    "InvalidResponseError",
]

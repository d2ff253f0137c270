"""
Utilities module - Logging and retry helpers.
"""

from web_test_recorder.utils.logging import setup_logging
from web_test_recorder.utils.retry import RetryConfig, retry, retry_async

__all__ = [
    "setup_logging",
    "RetryConfig",
    "retry",
    "retry_async",
]

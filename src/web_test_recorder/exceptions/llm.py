"""
LLM-related exceptions.
"""

from web_test_recorder.exceptions.base import WebTestRecorderError


class LLMError(WebTestRecorderError):
    """Base exception for AI gateway errors."""

    error_type = "llm_error"


class UpstreamError(LLMError):
    """
    The AI endpoint could not be reached after all retries.

    Attributes:
        attempts: Number of attempts made
        last_error: Message of the final failure
    """

    error_type = "upstream_error"

    def __init__(self, message: str, attempts: int, last_error: str | None = None):
        super().__init__(message, {"attempts": attempts, "last_error": last_error})
        self.attempts = attempts
        self.last_error = last_error


class InvalidResponseError(LLMError):
    """
    Invalid response from the AI endpoint.

    Raised when an attempt gets a reply that is not usable at all
    (for example an HTTP error status).
    """

    error_type = "invalid_response"

    def __init__(self, message: str, raw_response: str | None = None):
        super().__init__(message, {"raw_response": raw_response[:500] if raw_response else None})
        self.raw_response = raw_response

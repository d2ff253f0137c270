"""
Base exceptions for Web Test Recorder.
"""


class WebTestRecorderError(Exception):
    """
    Base exception for all Web Test Recorder errors.

    All custom exceptions inherit from this class, making it easy
    to catch any error from the library.

    Attributes:
        message: Human-readable error message
        details: Optional additional error details
    """

    error_type = "internal_error"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(WebTestRecorderError):
    """
    Error in configuration.

    Raised when there's an issue with settings, environment variables,
    or configuration files, e.g. a missing or malformed AI endpoint URL.
    """

    error_type = "configuration_error"


class StorageError(WebTestRecorderError):
    """Base exception for test case storage errors."""

    error_type = "storage_error"


class RecordNotFoundError(StorageError):
    """A stored test case does not exist."""

    error_type = "record_not_found"

    def __init__(self, message: str, record_id: str):
        super().__init__(message, {"record_id": record_id})
        self.record_id = record_id

"""
Tests for custom exceptions.
"""

import pytest


class TestWebTestRecorderError:
    """Test the base WebTestRecorderError exception."""

    def test_create_base_error(self):
        """Test creating a WebTestRecorderError."""
        from web_test_recorder.exceptions import WebTestRecorderError
        error = WebTestRecorderError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.details == {}

    def test_details_in_str(self):
        """Test that details are appended to the message."""
        from web_test_recorder.exceptions import WebTestRecorderError
        error = WebTestRecorderError("Bad thing", {"key": "value"})
        assert "Bad thing" in str(error)
        assert "key" in str(error)

    def test_base_error_is_exception(self):
        """Test that WebTestRecorderError is an exception."""
        from web_test_recorder.exceptions import WebTestRecorderError
        assert issubclass(WebTestRecorderError, Exception)


class TestConfigurationError:
    """Test the ConfigurationError exception."""

    def test_create_config_error(self):
        """Test creating a ConfigurationError."""
        from web_test_recorder.exceptions import ConfigurationError
        error = ConfigurationError("AI endpoint is not configured")
        assert str(error) == "AI endpoint is not configured"
        assert error.error_type == "configuration_error"

    def test_config_error_is_base_error(self):
        """Test that ConfigurationError is subclass of WebTestRecorderError."""
        from web_test_recorder.exceptions import ConfigurationError, WebTestRecorderError
        assert issubclass(ConfigurationError, WebTestRecorderError)


class TestSessionErrors:
    """Test session exceptions."""

    def test_spawn_error_keeps_command(self):
        """Test that SpawnError records the command that failed."""
        from web_test_recorder.exceptions import SpawnError, SessionError
        error = SpawnError("Recorder executable not found", command=["playwright", "codegen"])
        assert error.command == ["playwright", "codegen"]
        assert error.error_type == "spawn_error"
        assert isinstance(error, SessionError)

    def test_session_not_found_has_id(self):
        """Test that SessionNotFoundError carries the session id."""
        from web_test_recorder.exceptions import SessionNotFoundError
        error = SessionNotFoundError("Session 123 not found", session_id="123")
        assert error.session_id == "123"
        assert error.error_type == "session_not_found"

    def test_session_gone_is_not_found(self):
        """Test that SessionGoneError can be caught as SessionNotFoundError."""
        from web_test_recorder.exceptions import SessionGoneError, SessionNotFoundError
        error = SessionGoneError("Session 1 has already ended", session_id="1")
        assert isinstance(error, SessionNotFoundError)
        assert error.error_type == "session_gone"

    def test_distinct_error_types(self):
        """Test that 'not installed', 'unknown' and 'gone' are distinguishable."""
        from web_test_recorder.exceptions import SpawnError, SessionGoneError, SessionNotFoundError
        types = {
            SpawnError("x").error_type,
            SessionNotFoundError("x", session_id="1").error_type,
            SessionGoneError("x", session_id="1").error_type,
        }
        assert len(types) == 3


class TestBrowserErrors:
    """Test browser exceptions."""

    def test_navigation_error_has_url(self):
        """Test NavigationError carries the URL."""
        from web_test_recorder.exceptions import NavigationError, BrowserError
        error = NavigationError("Failed to navigate", url="https://example.com")
        assert error.url == "https://example.com"
        assert isinstance(error, BrowserError)

    def test_action_error_has_type(self):
        """Test ActionExecutionError carries the action type."""
        from web_test_recorder.exceptions import ActionExecutionError
        error = ActionExecutionError("Unsupported action type: hover", action_type="hover")
        assert error.action_type == "hover"


class TestLLMErrors:
    """Test AI gateway exceptions."""

    def test_upstream_error_attempts(self):
        """Test UpstreamError carries attempts and last error."""
        from web_test_recorder.exceptions import UpstreamError, LLMError
        error = UpstreamError("failed", attempts=3, last_error="boom")
        assert error.attempts == 3
        assert error.last_error == "boom"
        assert isinstance(error, LLMError)
        assert error.error_type == "upstream_error"

    def test_invalid_response_truncates_raw(self):
        """Test that raw responses are truncated in details."""
        from web_test_recorder.exceptions import InvalidResponseError
        error = InvalidResponseError("bad", raw_response="x" * 2000)
        assert len(error.details["raw_response"]) == 500
        assert len(error.raw_response) == 2000


class TestStorageErrors:
    """Test storage exceptions."""

    def test_record_not_found(self):
        """Test RecordNotFoundError carries the record id."""
        from web_test_recorder.exceptions import RecordNotFoundError, StorageError
        error = RecordNotFoundError("Test case abc not found", record_id="abc")
        assert error.record_id == "abc"
        assert isinstance(error, StorageError)

    def test_catch_all_library_errors(self):
        """Test that library errors can be caught with the base class."""
        from web_test_recorder.exceptions import WebTestRecorderError, RecordNotFoundError
        with pytest.raises(WebTestRecorderError):
            raise RecordNotFoundError("missing", record_id="1")

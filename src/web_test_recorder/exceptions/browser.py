"""
Browser-related exceptions.
"""

from web_test_recorder.exceptions.base import WebTestRecorderError


class BrowserError(WebTestRecorderError):
    """Base exception for browser-related errors."""

    error_type = "browser_error"


class BrowserLaunchError(BrowserError):
    """
    Error launching the browser.

    Raised when the browser fails to start, which could be due to:
    - Missing browser binaries
    - Invalid browser options
    - Resource constraints
    """

    error_type = "browser_launch_error"


class NavigationError(BrowserError):
    """
    Error during page navigation.

    Raised when navigation fails, such as:
    - Invalid URL
    - Network error
    - Navigation timeout
    """

    error_type = "navigation_error"

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, {"url": url})
        self.url = url


class ActionExecutionError(BrowserError):
    """
    Error during action execution.

    Raised when a click, fill or wait fails against the page.
    """

    error_type = "action_error"

    def __init__(self, message: str, action_type: str, selector: str | None = None):
        super().__init__(message, {"action_type": action_type, "selector": selector})
        self.action_type = action_type
        self.selector = selector

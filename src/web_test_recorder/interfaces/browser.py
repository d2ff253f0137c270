"""
Browser Interface - Abstract base classes for the browser automation capability.

The replay engine only needs a small capability set from the automation
driver: navigate, click a locator, fill a locator, and wait. Implementations
raise a descriptive exception when an operation fails; the engine surfaces
that message as-is.

Example:
    >>> from web_test_recorder.browsers import PlaywrightBrowserProvider
    >>> provider = PlaywrightBrowserProvider(settings.browser)
    >>> page = await provider.new_page()
    >>> await page.goto("https://example.com")
    >>> await page.close()
"""

from abc import ABC, abstractmethod


class IAutomationPage(ABC):
    """
    Abstract interface for a single browser page used during replay.

    One page is owned by one replay run; closing it releases every
    browser resource allocated for that run.
    """

    @abstractmethod
    async def goto(self, url: str) -> None:
        """
        Navigate to a URL.

        Args:
            url: Absolute URL to load
        """
        ...

    @abstractmethod
    async def click(self, selector: str, timeout_ms: int) -> None:
        """
        Click the single element matched by a locator.

        Args:
            selector: Locator expression
            timeout_ms: Maximum time to wait for the element to be actionable
        """
        ...

    @abstractmethod
    async def fill(self, selector: str, value: str, timeout_ms: int) -> None:
        """
        Fill the single input matched by a locator.

        Args:
            selector: Locator expression
            value: Text to put into the input
            timeout_ms: Maximum time to wait for the element to be editable
        """
        ...

    @abstractmethod
    async def wait_for_timeout(self, duration_ms: int) -> None:
        """Pause for a fixed duration."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the page and any browser it owns."""
        ...


class IBrowserProvider(ABC):
    """Factory for fresh automation pages, one per replay run."""

    @abstractmethod
    async def new_page(self) -> IAutomationPage:
        """Launch a browser context and return a new page in it."""
        ...

"""
Playwright Browser - Implementation of the automation capability using Playwright.

Each replay run gets its own Playwright driver, browser and context, so
closing the page tears down everything that run allocated.
"""

from pathlib import Path
from typing import Any, Optional
import logging

from playwright.async_api import async_playwright

from web_test_recorder.config.settings import BrowserSettings
from web_test_recorder.interfaces.browser import IAutomationPage, IBrowserProvider
from web_test_recorder.exceptions.browser import BrowserLaunchError

logger = logging.getLogger(__name__)


class PlaywrightPage(IAutomationPage):
    """
    Playwright implementation of IAutomationPage.

    Wraps a Playwright Page together with the browser and driver that
    were started for it.
    """

    def __init__(self, page: Any, browser: Any = None, playwright: Any = None):
        """
        Initialize the page wrapper.

        Args:
            page: Playwright Page object
            browser: Playwright Browser owning the page
            playwright: Running Playwright driver instance
        """
        self._page = page
        self._browser = browser
        self._playwright = playwright

    @property
    def url(self) -> str:
        """Get current URL."""
        return self._page.url

    async def goto(self, url: str) -> None:
        """Navigate to URL."""
        await self._page.goto(url)

    async def click(self, selector: str, timeout_ms: int) -> None:
        """Click the element matched by a locator."""
        await self._page.locator(selector).click(timeout=timeout_ms)

    async def fill(self, selector: str, value: str, timeout_ms: int) -> None:
        """Fill the input matched by a locator."""
        await self._page.locator(selector).fill(value, timeout=timeout_ms)

    async def wait_for_timeout(self, duration_ms: int) -> None:
        """Pause on the page clock."""
        await self._page.wait_for_timeout(duration_ms)

    async def close(self) -> None:
        """Close the browser and stop the driver."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None


class PlaywrightBrowserProvider(IBrowserProvider):
    """
    Launches a fresh Playwright browser per replay run.

    Example:
        >>> provider = PlaywrightBrowserProvider(BrowserSettings(headless=True))
        >>> page = await provider.new_page()
    """

    def __init__(self, settings: Optional[BrowserSettings] = None):
        self._settings = settings or BrowserSettings()

    def _storage_state(self) -> Optional[str]:
        path = self._settings.storage_state_path
        if not self._settings.inject_auth_on_replay or not path:
            return None
        if not Path(path).exists():
            logger.warning(f"Auth state file not found, replaying without it: {path}")
            return None
        return path

    async def new_page(self) -> PlaywrightPage:
        """Launch a browser and open a page in a new context."""
        playwright = await async_playwright().start()
        try:
            browser_type = getattr(playwright, self._settings.browser_type)
            browser = await browser_type.launch(
                headless=self._settings.headless,
                slow_mo=self._settings.slow_mo,
            )
        except Exception as e:
            await playwright.stop()
            raise BrowserLaunchError(
                f"Failed to launch {self._settings.browser_type}: {e}",
                {"browser_type": self._settings.browser_type},
            )

        try:
            context_options = {}
            storage_state = self._storage_state()
            if storage_state:
                context_options["storage_state"] = storage_state
                logger.info(f"Injecting auth state from {storage_state}")
            context = await browser.new_context(**context_options)
            page = await context.new_page()
        except Exception as e:
            await browser.close()
            await playwright.stop()
            raise BrowserLaunchError(f"Failed to open page: {e}")

        logger.debug(f"Launched {self._settings.browser_type} (headless={self._settings.headless})")
        return PlaywrightPage(page, browser=browser, playwright=playwright)

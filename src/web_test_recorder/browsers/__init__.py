"""
Browsers module - Browser automation implementations.
"""

from web_test_recorder.browsers.playwright_browser import PlaywrightBrowserProvider, PlaywrightPage

__all__ = [
    "PlaywrightBrowserProvider",
    "PlaywrightPage",
]

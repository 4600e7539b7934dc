"""
Browsers module - Browser adapter implementations.
"""

from web_commander.browsers.playwright_browser import (
    PlaywrightBrowser,
    PlaywrightPage,
    PlaywrightElement,
    PlaywrightKeyboard,
)

__all__ = [
    "PlaywrightBrowser",
    "PlaywrightPage",
    "PlaywrightElement",
    "PlaywrightKeyboard",
]

"""
Playwright Browser - Implementation of IBrowser using Playwright.

This module provides a Playwright-based implementation of the browser interface.
"""

from typing import Any, Optional
import logging

from web_commander.interfaces.browser import (
    IBrowser,
    IPage,
    IElement,
    IKeyboard,
    BrowserType,
    WaitPolicy,
)
from web_commander.exceptions.browser import (
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
)

logger = logging.getLogger(__name__)

# Resolves once the document has any element at all
_HAS_CONTENT_JS = "() => document.querySelector('*') !== null"


class PlaywrightElement(IElement):
    """
    Playwright implementation of IElement.
    
    Wraps a Playwright ElementHandle for interaction and inspection.
    """
    
    def __init__(self, element: Any, selector: str):
        """
        Initialize the element wrapper.
        
        Args:
            element: Playwright ElementHandle
            selector: The selector used to find this element
        """
        self._element = element
        self._selector = selector
    
    @property
    def selector(self) -> str:
        return self._selector
    
    async def query_selector(self, selector: str) -> Optional[IElement]:
        """Find first matching descendant."""
        element = await self._element.query_selector(selector)
        if element:
            return PlaywrightElement(element, f"{self._selector} {selector}")
        return None
    
    async def click(self, **options: Any) -> None:
        """Click on this element."""
        await self._element.click(**options)
    
    async def scroll_into_view(self) -> None:
        """Scroll into view."""
        await self._element.scroll_into_view_if_needed()
    
    async def set_value(self, value: str) -> None:
        """Assign the value property."""
        await self._element.evaluate("(el, value) => { el.value = value; }", value)
    
    async def type_text(self, text: str) -> None:
        """Type text key by key."""
        await self._element.type(text)
    
    async def press(self, key: str) -> None:
        """Press a key."""
        await self._element.press(key)
    
    async def get_attribute(self, name: str) -> Optional[str]:
        """Get an attribute value."""
        return await self._element.get_attribute(name)
    
    async def inner_text(self) -> str:
        """Get rendered text."""
        return await self._element.inner_text()


class PlaywrightKeyboard(IKeyboard):
    """Playwright implementation of IKeyboard."""
    
    def __init__(self, keyboard: Any):
        self._keyboard = keyboard
    
    async def type_text(self, text: str) -> None:
        """Type into the focused element."""
        await self._keyboard.type(text)
    
    async def press(self, key: str) -> None:
        """Press a key."""
        await self._keyboard.press(key)


class PlaywrightPage(IPage):
    """
    Playwright implementation of IPage.
    
    Wraps a Playwright Page for navigation and interaction.
    """
    
    def __init__(self, page: Any):
        """
        Initialize the page wrapper.
        
        Args:
            page: Playwright Page object
        """
        self._page = page
        self._keyboard = PlaywrightKeyboard(page.keyboard)
    
    @property
    def url(self) -> str:
        """Get current URL."""
        return self._page.url
    
    @property
    def keyboard(self) -> IKeyboard:
        return self._keyboard
    
    async def title(self) -> str:
        """Get page title."""
        return await self._page.title()
    
    async def content(self) -> str:
        """Get page HTML."""
        return await self._page.content()
    
    async def goto(
        self,
        url: str,
        wait_until: WaitPolicy = WaitPolicy.LOAD,
        timeout: Optional[int] = None,
    ) -> None:
        """Navigate to URL."""
        try:
            await self._page.goto(url, wait_until=WaitPolicy(wait_until).value, timeout=timeout)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}", url=url)
    
    async def query_selector(self, selector: str) -> Optional[IElement]:
        """Find first matching element."""
        element = await self._page.query_selector(selector)
        if element:
            return PlaywrightElement(element, selector)
        return None
    
    async def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None) -> None:
        """Wait for load state."""
        await self._page.wait_for_load_state(state, timeout=timeout)
    
    async def wait_for_content(self, timeout: Optional[int] = None) -> None:
        """Wait for the document to have an element."""
        await self._page.wait_for_function(_HAS_CONTENT_JS, timeout=timeout)
    
    async def wait_for_timeout(self, timeout: int) -> None:
        """Wait for timeout."""
        await self._page.wait_for_timeout(timeout)
    
    async def close(self) -> None:
        """Close page."""
        await self._page.close()


class PlaywrightBrowser(IBrowser):
    """
    Playwright implementation of IBrowser.
    
    Example:
        >>> browser = PlaywrightBrowser()
        >>> await browser.launch(headless=True)
        >>> page = await browser.new_page(viewport={"width": 800, "height": 1200})
        >>> await page.goto("https://example.com")
        >>> await browser.close()
    """
    
    def __init__(self):
        """Initialize the browser (not launched yet)."""
        self._playwright: Any = None
        self._browser: Any = None
        self._default_context: Any = None
    
    @property
    def is_connected(self) -> bool:
        """Check if browser is connected."""
        return self._browser is not None and self._browser.is_connected()
    
    async def launch(
        self,
        headless: bool = True,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        **options: Any,
    ) -> None:
        """
        Launch the browser.
        
        Args:
            headless: Whether to run headless
            browser_type: Type of browser to launch
            **options: Additional Playwright launch options
        """
        try:
            from playwright.async_api import async_playwright
            
            self._playwright = await async_playwright().start()
            
            browser_launchers = {
                BrowserType.CHROMIUM: self._playwright.chromium,
                BrowserType.FIREFOX: self._playwright.firefox,
                BrowserType.WEBKIT: self._playwright.webkit,
            }
            launcher = browser_launchers.get(browser_type, self._playwright.chromium)
            
            self._browser = await launcher.launch(
                headless=headless,
                **options,
            )
            
            logger.info(f"Launched {browser_type.value} browser (headless={headless})")
            
        except Exception as e:
            raise BrowserLaunchError(f"Failed to launch browser: {e}")
    
    async def new_page(self, **options: Any) -> IPage:
        """
        Create a new page.
        
        Args:
            **options: Context options (viewport, user_agent, ...)
            
        Returns:
            New page instance
        """
        if not self._browser:
            raise BrowserConnectionError("Browser not launched. Call launch() first.")
        
        if not self._default_context:
            self._default_context = await self._browser.new_context(**options)
        
        page = await self._default_context.new_page()
        return PlaywrightPage(page)
    
    async def close(self) -> None:
        """Close the browser and cleanup."""
        if self._default_context:
            await self._default_context.close()
            self._default_context = None
        
        if self._browser:
            await self._browser.close()
            self._browser = None
        
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        
        logger.info("Browser closed")

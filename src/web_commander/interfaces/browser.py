"""
Browser Interface - Abstract base classes for the browser adapter.

The command dispatcher only talks to these interfaces, never to a concrete
automation library. The surface is deliberately small: query by selector,
read attributes and text, type, click and wait.

Example:
    >>> from web_commander.browsers import PlaywrightBrowser
    >>> browser = PlaywrightBrowser()
    >>> await browser.launch(headless=True)
    >>> page = await browser.new_page()
    >>> await page.goto("https://example.com")
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional


class BrowserType(Enum):
    """Supported browser types."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class WaitPolicy(str, Enum):
    """Navigation completion states understood by ``IPage.goto``."""
    LOAD = "load"
    DOM_CONTENT_LOADED = "domcontentloaded"
    NETWORK_IDLE = "networkidle"
    COMMIT = "commit"


class IElement(ABC):
    """
    Abstract interface for interacting with a live DOM element.
    """

    @abstractmethod
    async def query_selector(self, selector: str) -> Optional["IElement"]:
        """
        Find the first descendant matching a selector.
        
        Args:
            selector: CSS selector
            
        Returns:
            The matching element, or None if not found
        """
        ...

    @abstractmethod
    async def click(self, **options: Any) -> None:
        """
        Click on this element.
        
        Args:
            **options: Browser-specific click options (e.g., button, modifiers)
        """
        ...

    @abstractmethod
    async def scroll_into_view(self) -> None:
        """Scroll the element into view."""
        ...

    @abstractmethod
    async def set_value(self, value: str) -> None:
        """
        Assign the element's ``value`` property directly (no key events).
        
        Args:
            value: The new value
        """
        ...

    @abstractmethod
    async def type_text(self, text: str) -> None:
        """
        Focus the element and type text into it, key by key.
        
        Args:
            text: Text to type
        """
        ...

    @abstractmethod
    async def press(self, key: str) -> None:
        """
        Focus the element and press a single key.
        
        Args:
            key: Key name (e.g., 'Backspace', 'Enter')
        """
        ...

    @abstractmethod
    async def get_attribute(self, name: str) -> Optional[str]:
        """
        Get an attribute value from this element.
        
        Args:
            name: The attribute name
            
        Returns:
            The attribute value, or None if not present
        """
        ...

    @abstractmethod
    async def inner_text(self) -> str:
        """
        Get the rendered text of this element.
        
        Returns:
            The visible text
        """
        ...


class IKeyboard(ABC):
    """
    Abstract interface for page-level keyboard input.
    
    Keys go to whatever element currently has focus.
    """

    @abstractmethod
    async def type_text(self, text: str) -> None:
        """Type text into the focused element."""
        ...

    @abstractmethod
    async def press(self, key: str) -> None:
        """Press a single key on the focused element."""
        ...


class IPage(ABC):
    """
    Abstract interface for browser page operations.
    
    This is the page document capability the command dispatcher depends on:
    navigation, content snapshots, selector queries, keyboard and waits.
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Get the current page URL."""
        ...

    @property
    @abstractmethod
    def keyboard(self) -> IKeyboard:
        """Get the page keyboard."""
        ...

    @abstractmethod
    async def title(self) -> str:
        """Get the current page title."""
        ...

    @abstractmethod
    async def content(self) -> str:
        """
        Get the full HTML content of the page.
        
        Returns:
            The page's HTML content
        """
        ...

    @abstractmethod
    async def goto(
        self,
        url: str,
        wait_until: WaitPolicy = WaitPolicy.LOAD,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Navigate to a URL.
        
        Args:
            url: The URL to navigate to
            wait_until: When to consider the navigation finished
            timeout: Maximum time in milliseconds (0 waits forever)
        """
        ...

    @abstractmethod
    async def query_selector(self, selector: str) -> Optional[IElement]:
        """
        Find the first element matching a selector.
        
        Args:
            selector: CSS selector
            
        Returns:
            The matching element, or None if not found
        """
        ...

    @abstractmethod
    async def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None) -> None:
        """
        Wait for the page to reach a specific load state.
        
        Args:
            state: Load state to wait for ('load', 'domcontentloaded', 'networkidle')
            timeout: Maximum time to wait in milliseconds (0 waits forever)
        """
        ...

    @abstractmethod
    async def wait_for_content(self, timeout: Optional[int] = None) -> None:
        """
        Wait until the document has at least one element.
        
        Args:
            timeout: Maximum time to wait in milliseconds (0 waits forever)
        """
        ...

    @abstractmethod
    async def wait_for_timeout(self, timeout: int) -> None:
        """
        Wait for a specified amount of time.
        
        Args:
            timeout: Time to wait in milliseconds
        """
        ...


class IBrowser(ABC):
    """
    Abstract interface for browser management.
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the browser is connected and running."""
        ...

    @abstractmethod
    async def launch(
        self,
        headless: bool = True,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        **options: Any,
    ) -> None:
        """
        Launch a browser instance.
        
        Args:
            headless: Whether to run in headless mode
            browser_type: Type of browser to launch
            **options: Browser-specific launch options
        """
        ...

    @abstractmethod
    async def new_page(self, **options: Any) -> IPage:
        """
        Create a new browser page/tab.
        
        Args:
            **options: Browser-specific context options (viewport, user agent)
            
        Returns:
            A new page instance
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the browser and cleanup resources."""
        ...

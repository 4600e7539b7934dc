"""
Command-related exceptions.

``EmptyActionError`` is fatal for a session. ``NotFoundError`` and its
subclasses are recoverable: the dispatcher turns them into result strings.
"""

from web_commander.exceptions.base import CommanderError


class EmptyActionError(CommanderError):
    """
    A directive line without an action verb.
    
    Attributes:
        line: The raw directive line
    """
    
    def __init__(self, line: str):
        super().__init__(f"Command lacks action: {line!r}", {"line": line})
        self.line = line


class NotFoundError(CommanderError):
    """Base exception for lookups that found nothing on the page."""
    pass


class LinkNotFoundError(NotFoundError):
    """
    The completion service returned no usable link for an intent.
    
    Attributes:
        intent: The requested link description
    """
    
    def __init__(self, message: str, intent: str):
        super().__init__(message, {"intent": intent})
        self.intent = intent


class ElementNotFoundError(NotFoundError):
    """
    No element matching a selector exists in the live page.
    
    Attributes:
        selector: The selector that matched nothing
    """
    
    def __init__(self, message: str, selector: str):
        super().__init__(message, {"selector": selector})
        self.selector = selector

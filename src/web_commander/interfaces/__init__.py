"""
Interfaces module - Contracts for the browser adapter and completion service.
"""

from web_commander.interfaces.browser import (
    BrowserType,
    WaitPolicy,
    IBrowser,
    IPage,
    IElement,
    IKeyboard,
)
from web_commander.interfaces.llm import (
    ILLMProvider,
    LLMResponse,
    Message,
    MessageRole,
    Usage,
)

__all__ = [
    "BrowserType",
    "WaitPolicy",
    "IBrowser",
    "IPage",
    "IElement",
    "IKeyboard",
    "ILLMProvider",
    "LLMResponse",
    "Message",
    "MessageRole",
    "Usage",
]

"""
Web Commander - Drive a web browser with natural-language goals.

A language model turns a goal into simple commands (go, click, search,
question); each command runs against a live page, and pages are shown to the
model as compact, size-bounded simplified markup.

Example:
    >>> from web_commander import CommanderSession
    >>> session = CommanderSession(page, prompts, settings)
    >>> result = await session.run("what is the best omakase sushi experience in NYC?")
"""

__version__ = "0.1.0"

# Public API exports
from web_commander.core.session import CommanderSession, SessionResult
from web_commander.commands.dispatcher import CommandDispatcher
from web_commander.config.settings import Settings
from web_commander.dom.simplifier import HtmlSimplifier
from web_commander.dom.chunker import Chunker

__all__ = [
    "CommanderSession",
    "SessionResult",
    "CommandDispatcher",
    "Settings",
    "HtmlSimplifier",
    "Chunker",
    "__version__",
]

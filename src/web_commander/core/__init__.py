"""
Core module - Session orchestration.

A session plans a goal into commands, dispatches them on one page and
summarizes the outcome.
"""

from web_commander.core.session import (
    CommanderSession,
    SessionResult,
    DEFAULT_GOAL,
    format_session_history,
)

__all__ = [
    "CommanderSession",
    "SessionResult",
    "DEFAULT_GOAL",
    "format_session_history",
]

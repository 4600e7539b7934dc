"""
Commands module - Directive parsing, link resolution and dispatch.
"""

from web_commander.commands.parser import Command, parse_command, parse_commands
from web_commander.commands.link_resolver import LinkResolver
from web_commander.commands.dispatcher import (
    CommandDispatcher,
    DispatchState,
    HistoryEntry,
    format_history,
    normalize_url,
)

__all__ = [
    "Command",
    "parse_command",
    "parse_commands",
    "LinkResolver",
    "CommandDispatcher",
    "DispatchState",
    "HistoryEntry",
    "format_history",
    "normalize_url",
]

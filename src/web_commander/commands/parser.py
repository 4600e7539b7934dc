"""
Command Parser - Turn directive lines into commands.

Directives come one per line from the model, in either form:

    go: news.ycombinator.com
    click top story
"""

from dataclasses import dataclass
from typing import List
import logging

from web_commander.exceptions.command import EmptyActionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """
    A parsed directive.

    Attributes:
        action: The verb, as written
        args: Free-form arguments, possibly empty
    """
    action: str
    args: str = ""

    @property
    def verb(self) -> str:
        """The action, lower-cased for dispatch."""
        return self.action.lower()

    def __str__(self) -> str:
        return f"{self.action}: {self.args}" if self.args else self.action


def parse_command(line: str) -> Command:
    """
    Parse one directive line.

    With a colon, the action is everything before the first colon and the args
    everything after it. Without one, the action is the first word and the
    args are the remaining words joined by single spaces.

    Args:
        line: The directive

    Returns:
        The parsed command

    Raises:
        EmptyActionError: If there is no action
    """
    if ":" in line:
        action, _, args = line.partition(":")
        action, args = action.strip(), args.strip()
    else:
        words = line.split()
        action = words[0] if words else ""
        args = " ".join(words[1:])

    if not action:
        raise EmptyActionError(line)

    return Command(action=action, args=args)


def parse_commands(text: str) -> List[Command]:
    """
    Parse a model response holding one directive per line.

    Blank lines are skipped.

    Raises:
        EmptyActionError: If a non-blank line has no action
    """
    commands = [parse_command(line) for line in text.splitlines() if line.strip()]
    logger.debug(f"Parsed {len(commands)} commands")
    return commands

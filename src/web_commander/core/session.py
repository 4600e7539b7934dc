"""
Session - Goal in, commands run, summary out.

A session asks the model to turn a goal into directives, dispatches them one
by one on the same page and keeps an append-only history of what happened.

Example:
    >>> session = CommanderSession(page, prompts, settings)
    >>> result = await session.run("what is the best omakase sushi experience in NYC?")
    >>> summary = await session.summarize([result.goal], result.history)
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence
import logging
import time

from web_commander.commands.dispatcher import CommandDispatcher, HistoryEntry
from web_commander.commands.parser import Command, parse_commands
from web_commander.config.settings import Settings
from web_commander.interfaces.browser import IPage
from web_commander.prompts.service import PLAN_TEMPLATE, SUMMARY_TEMPLATE, PromptService

logger = logging.getLogger(__name__)

DEFAULT_GOAL = "what is the best omakase sushi experience in NYC?"

PlanCallback = Callable[[List[Command]], None]
StepCallback = Callable[[int, Command, str], None]


@dataclass
class SessionResult:
    """
    Outcome of running a goal.

    Attributes:
        goal: The goal as given
        commands: The planned commands, in order
        history: One entry per executed command
        duration_seconds: Wall time of the run
    """
    goal: str
    commands: List[Command] = field(default_factory=list)
    history: List[HistoryEntry] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def steps_executed(self) -> int:
        return len(self.history)


def format_session_history(history: Sequence[HistoryEntry]) -> str:
    """Number every command and result for the summary prompt."""
    lines: List[str] = []
    for number, entry in enumerate(history, start=1):
        lines.append(f"Command {number}: {entry.command}")
        lines.append(f"Result {number}: {entry.result}")
        lines.append("")
    return "\n".join(lines)


class CommanderSession:
    """
    Runs goals on one page.

    Errors from the browser or the completion service end the run; commands
    that merely fail to find something are recorded in the history and the
    run continues.
    """

    def __init__(
        self,
        page: IPage,
        prompts: PromptService,
        settings: Optional[Settings] = None,
        dispatcher: Optional[CommandDispatcher] = None,
    ):
        self._page = page
        self._prompts = prompts
        self._settings = settings or Settings()
        self._dispatcher = dispatcher or CommandDispatcher(page, prompts, self._settings)

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    async def plan(self, goal: str) -> List[Command]:
        """
        Translate a goal into commands.

        Raises:
            EmptyActionError: If the model produced a line without an action
        """
        text = await self._prompts.complete(PLAN_TEMPLATE, {"input": goal})
        commands = parse_commands(text)
        logger.info(f"Planned {len(commands)} commands for: {goal}")
        return commands

    async def run(
        self,
        goal: str,
        on_plan: Optional[PlanCallback] = None,
        on_step: Optional[StepCallback] = None,
    ) -> SessionResult:
        """
        Plan a goal and execute every command.

        Args:
            goal: What the user wants
            on_plan: Called with the planned commands before any runs
            on_step: Called with (step number, command, result) after each command

        Returns:
            The commands and history of the run
        """
        start_time = time.perf_counter()
        result = SessionResult(goal=goal)
        result.commands = await self.plan(goal)
        if on_plan:
            on_plan(result.commands)

        for number, command in enumerate(result.commands, start=1):
            outcome = await self._dispatcher.dispatch(command, result.history)
            result.history.append(HistoryEntry(command=str(command), result=outcome))
            if on_step:
                on_step(number, command, outcome)

        result.duration_seconds = time.perf_counter() - start_time
        logger.info(f"Ran {result.steps_executed} commands in {result.duration_seconds:.1f}s")
        return result

    async def summarize(self, goals: Sequence[str], history: Sequence[HistoryEntry]) -> str:
        """Ask the model to summarize a run for the user."""
        return await self._prompts.complete(
            SUMMARY_TEMPLATE,
            {
                "human_entries": "\n".join(goals),
                "history": format_session_history(history),
            },
        )

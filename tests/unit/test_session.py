"""
Tests for CommanderSession - planning, running and summarizing goals.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from web_commander.commands.dispatcher import HistoryEntry
from web_commander.commands.parser import Command
from web_commander.core.session import (
    CommanderSession,
    SessionResult,
    format_session_history,
)
from web_commander.exceptions import EmptyActionError, NavigationError
from web_commander.prompts.service import PLAN_TEMPLATE, SUMMARY_TEMPLATE

PLAN = "go: google.com\nsearch: omakase nyc\n\nquestion: what is the best?\n"


@pytest.fixture
def mock_dispatcher():
    """A dispatcher answering every command with a canned result."""
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(side_effect=lambda command, history: f"did {command.action}")
    return dispatcher


@pytest.fixture
def session(mock_page, mock_prompts, settings, mock_dispatcher):
    """Create a session with a mocked dispatcher."""
    return CommanderSession(mock_page, mock_prompts, settings, dispatcher=mock_dispatcher)


class TestFormatSessionHistory:
    """Test history formatting for the summary."""

    def test_numbered(self):
        """Test commands and results are numbered from one."""
        history = [
            HistoryEntry("go: google.com", "Opened https://google.com"),
            HistoryEntry("search: sushi", 'Searched for "sushi"'),
        ]
        assert format_session_history(history) == (
            "Command 1: go: google.com\n"
            "Result 1: Opened https://google.com\n"
            "\n"
            "Command 2: search: sushi\n"
            'Result 2: Searched for "sushi"\n'
        )

    def test_empty(self):
        """Test an empty history is empty text."""
        assert format_session_history([]) == ""


class TestPlan:
    """Test goal planning."""

    @pytest.mark.asyncio
    async def test_plan(self, session, mock_prompts):
        """Test the model's lines become commands."""
        mock_prompts.complete.return_value = PLAN

        commands = await session.plan("best omakase in NYC")

        assert commands == [
            Command("go", "google.com"),
            Command("search", "omakase nyc"),
            Command("question", "what is the best?"),
        ]
        mock_prompts.complete.assert_awaited_once_with(PLAN_TEMPLATE, {"input": "best omakase in NYC"})

    @pytest.mark.asyncio
    async def test_plan_with_bad_line(self, session, mock_prompts):
        """Test a plan line without action fails the plan."""
        mock_prompts.complete.return_value = "go: google.com\n: oops"

        with pytest.raises(EmptyActionError):
            await session.plan("anything")


class TestRun:
    """Test running goals."""

    @pytest.mark.asyncio
    async def test_run_records_history(self, session, mock_prompts, mock_dispatcher):
        """Test every command is dispatched in order and recorded."""
        mock_prompts.complete.return_value = PLAN

        result = await session.run("best omakase in NYC")

        assert isinstance(result, SessionResult)
        assert result.goal == "best omakase in NYC"
        assert result.steps_executed == 3
        assert result.history == [
            HistoryEntry("go: google.com", "did go"),
            HistoryEntry("search: omakase nyc", "did search"),
            HistoryEntry("question: what is the best?", "did question"),
        ]
        assert result.duration_seconds >= 0
        dispatched = [call.args[0] for call in mock_dispatcher.dispatch.await_args_list]
        assert dispatched == result.commands

    @pytest.mark.asyncio
    async def test_history_passed_to_dispatcher(self, session, mock_prompts, mock_dispatcher):
        """Test each command sees the entries recorded before it."""
        mock_prompts.complete.return_value = PLAN
        seen = []

        async def dispatch(command, history):
            seen.append(list(history))
            return "ok"

        mock_dispatcher.dispatch.side_effect = dispatch

        await session.run("goal")

        assert [len(entries) for entries in seen] == [0, 1, 2]
        assert seen[2][1] == HistoryEntry("search: omakase nyc", "ok")

    @pytest.mark.asyncio
    async def test_callbacks(self, session, mock_prompts):
        """Test plan and step callbacks."""
        mock_prompts.complete.return_value = "go: a.com\ngo: b.com"
        plans = []
        steps = []

        await session.run(
            "goal",
            on_plan=plans.append,
            on_step=lambda number, command, outcome: steps.append((number, command.args, outcome)),
        )

        assert plans == [[Command("go", "a.com"), Command("go", "b.com")]]
        assert steps == [(1, "a.com", "did go"), (2, "b.com", "did go")]

    @pytest.mark.asyncio
    async def test_empty_plan(self, session, mock_prompts, mock_dispatcher):
        """Test a goal the model could not plan runs nothing."""
        mock_prompts.complete.return_value = ""

        result = await session.run("goal")

        assert result.commands == []
        assert result.history == []
        mock_dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fatal_error_ends_run(self, session, mock_prompts, mock_dispatcher):
        """Test a browser failure stops the remaining commands."""
        mock_prompts.complete.return_value = PLAN
        mock_dispatcher.dispatch.side_effect = [
            "Opened https://google.com",
            NavigationError("timeout"),
            "never",
        ]

        with pytest.raises(NavigationError):
            await session.run("goal")
        assert mock_dispatcher.dispatch.await_count == 2

    @pytest.mark.asyncio
    async def test_default_dispatcher(self, mock_page, mock_prompts, settings):
        """Test a real dispatcher runs against the page."""
        mock_prompts.complete.return_value = "go: example.com"
        session = CommanderSession(mock_page, mock_prompts, settings)

        result = await session.run("open example")

        assert result.history == [HistoryEntry("go: example.com", "Opened https://example.com")]
        mock_page.goto.assert_awaited_once()


class TestSummarize:
    """Test session summaries."""

    @pytest.mark.asyncio
    async def test_summarize(self, session, mock_prompts):
        """Test goals and numbered history are sent to the summary prompt."""
        mock_prompts.complete.return_value = "Sushi Nakazawa."
        history = [HistoryEntry("question: best?", "Q: best?, A: Sushi Nakazawa")]

        summary = await session.summarize(["best omakase", "in NYC"], history)

        assert summary == "Sushi Nakazawa."
        mock_prompts.complete.assert_awaited_once_with(
            SUMMARY_TEMPLATE,
            {
                "human_entries": "best omakase\nin NYC",
                "history": "Command 1: question: best?\nResult 1: Q: best?, A: Sushi Nakazawa\n",
            },
        )

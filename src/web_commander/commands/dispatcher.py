"""
Command Dispatcher - Run parsed commands against a live page.

Every command is one cycle of a small state machine:

    IDLE -> NAVIGATING | CLICKING | SEARCHING | ANSWERING -> DONE | FAILED -> IDLE

Handlers always return a human-readable result string. Lookups that find
nothing (no link, no search box) become result strings as well; only browser,
network and completion service failures propagate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote, urljoin, urlparse
import logging
import re

from web_commander.commands.link_resolver import LinkResolver
from web_commander.commands.parser import Command, parse_command
from web_commander.config.settings import Settings
from web_commander.dom.chunker import Chunker
from web_commander.dom.simplifier import HtmlSimplifier
from web_commander.exceptions.command import ElementNotFoundError, LinkNotFoundError
from web_commander.interfaces.browser import IElement, IPage, WaitPolicy
from web_commander.prompts.service import (
    BEST_ANSWER_TEMPLATE,
    QUESTION_TEMPLATE,
    PromptService,
)

logger = logging.getLogger(__name__)

TEXT_FIELD_SELECTORS = ("input[type=text]", "input[type=search]")

_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


class DispatchState(Enum):
    """Dispatcher states."""
    IDLE = "idle"
    NAVIGATING = "navigating"
    CLICKING = "clicking"
    SEARCHING = "searching"
    ANSWERING = "answering"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class HistoryEntry:
    """
    One executed command and what came of it.

    Attributes:
        command: The directive as executed
        result: The dispatcher's result string
    """
    command: str
    result: str


def format_history(history: Sequence[HistoryEntry]) -> str:
    """Format the most recent history entry as prompt context."""
    if not history:
        return ""
    last = history[-1]
    return f"# last command: {last.command}\n# last result: {last.result}"


def normalize_url(url: str) -> str:
    """Prefix ``https://`` when a URL has no scheme."""
    url = url.strip()
    if _SCHEME.match(url):
        return url
    return f"https://{url}"


def css_string(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def url_host(url: str) -> Optional[str]:
    """The host of a URL, or None for relative or unparseable URLs."""
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


Handler = Callable[[Command, str], Awaitable[str]]


class CommandDispatcher:
    """
    Executes commands on a page.

    Example:
        >>> dispatcher = CommandDispatcher(page, prompts, settings)
        >>> await dispatcher.dispatch("go: news.ycombinator.com")
        'Opened https://news.ycombinator.com'
        >>> await dispatcher.dispatch("click top story", history)
        'Clicked "top story" -> Show HN: ... (example.com)'
    """

    def __init__(
        self,
        page: IPage,
        prompts: PromptService,
        settings: Optional[Settings] = None,
        resolver: Optional[LinkResolver] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            page: Page to act on
            prompts: Completion service for clicks and questions
            settings: Settings (defaults when omitted)
            resolver: Link resolver (built from the settings when omitted)
        """
        self._page = page
        self._prompts = prompts
        self._settings = settings or Settings()

        chunking = self._settings.chunking
        self._simplifier = HtmlSimplifier(
            max_ancestor_depth=chunking.max_ancestor_depth,
            ascii_only=chunking.ascii_only,
        )
        self._chunker = Chunker.from_settings(chunking)
        self._resolver = resolver or LinkResolver(prompts, self._simplifier, self._chunker)

        self._state = DispatchState.IDLE
        self._last_outcome: Optional[DispatchState] = None

        self._handlers: Dict[str, Tuple[DispatchState, Handler]] = {
            "go": (DispatchState.NAVIGATING, self._go),
            "click": (DispatchState.CLICKING, self._click),
            "search": (DispatchState.SEARCHING, self._search),
            "question": (DispatchState.ANSWERING, self._question),
        }

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def last_outcome(self) -> Optional[DispatchState]:
        """DONE or FAILED for the previous command, None before the first."""
        return self._last_outcome

    @property
    def actions(self) -> List[str]:
        return list(self._handlers)

    async def dispatch(
        self,
        directive: Union[str, Command],
        history: Optional[Sequence[HistoryEntry]] = None,
    ) -> str:
        """
        Execute one command.

        Args:
            directive: A directive line or an already parsed command
            history: Session history, only the last entry is used

        Returns:
            The result string

        Raises:
            EmptyActionError: If a directive line has no action
            BrowserError: If the browser fails
            ServiceError: If the completion service fails
        """
        command = directive if isinstance(directive, Command) else parse_command(directive)
        history_text = format_history(history or [])

        entry = self._handlers.get(command.verb)
        try:
            if entry is None:
                logger.warning(f"Unknown command: {command.action}")
                result = f"Unknown command! action: {command.action}, args: {command.args}"
            else:
                state, handler = entry
                self._state = state
                logger.info(f"{state.value.capitalize()}: {command.args}")
                result = await handler(command, history_text)
        except Exception:
            self._last_outcome = DispatchState.FAILED
            raise
        else:
            self._last_outcome = DispatchState.DONE
        finally:
            self._state = DispatchState.IDLE

        logger.debug(f"Result: {result}")
        return result

    # =========================================================================
    # HANDLERS
    # =========================================================================

    async def _go(self, command: Command, history_text: str) -> str:
        url = normalize_url(command.args)
        await self._page.goto(
            url,
            wait_until=WaitPolicy.NETWORK_IDLE,
            timeout=self._settings.browser.navigation_timeout_ms,
        )
        return f"Opened {url}"

    async def _click(self, command: Command, history_text: str) -> str:
        browser = self._settings.browser
        markup = await self._page.content()
        try:
            candidate = await self._resolver.resolve(markup, command.args, history_text)
        except LinkNotFoundError as e:
            logger.warning(str(e))
            return f'Could not click "{command.args}"'

        link = await self._page.query_selector(f"a[href={css_string(candidate.url)}]")
        if link is not None:
            await link.click()
            await self._page.wait_for_load_state("load", timeout=browser.settle_timeout_ms)
            await self._page.wait_for_content(timeout=browser.settle_timeout_ms)
            if browser.click_pause_ms:
                await self._page.wait_for_timeout(browser.click_pause_ms)
        else:
            target = urljoin(self._page.url, candidate.url)
            logger.debug(f"Link not in page, navigating to {target}")
            await self._page.goto(
                target,
                wait_until=WaitPolicy.NETWORK_IDLE,
                timeout=browser.navigation_timeout_ms,
            )

        result = f'Clicked "{command.args}"'
        if candidate.anchor and candidate.anchor != command.args:
            result += f" -> {candidate.anchor}"
        host = url_host(candidate.url)
        if host:
            result += f" ({host})"
        return result

    async def _search(self, command: Command, history_text: str) -> str:
        browser = self._settings.browser
        query = " ".join(command.args.split())

        if self._on_video_search_host():
            url = browser.video_search_url.format(query=quote(query))
            await self._page.goto(
                url,
                wait_until=WaitPolicy.NETWORK_IDLE,
                timeout=browser.navigation_timeout_ms,
            )
            return f'Searched for "{command.args}"'

        try:
            text_field = await self._find_text_field()
        except ElementNotFoundError as e:
            logger.warning(str(e))
            return f'Could not search for "{command.args}": no text field found'

        await text_field.scroll_into_view()
        await text_field.set_value("")
        # Clears autofill suggestions
        await text_field.press("Backspace")
        await self._page.keyboard.type_text(query)
        await self._page.wait_for_content(timeout=browser.settle_timeout_ms)
        await self._page.keyboard.press("Enter")
        await self._page.wait_for_content(timeout=browser.settle_timeout_ms)
        if browser.search_pause_ms:
            await self._page.wait_for_timeout(browser.search_pause_ms)

        return f'Searched for "{command.args}"'

    async def _question(self, command: Command, history_text: str) -> str:
        question = command.args
        markup = await self._page.content()
        title = await self._page.title()
        simplified = self._simplifier.simplify_html(markup, page_title=title, page_url=self._page.url)

        overhead = self._prompts.prompt_overhead(QUESTION_TEMPLATE, question)
        fragments = self._chunker.chunk(simplified, overhead)
        asked = fragments[: self._settings.chunking.question_fragments]
        logger.debug(f"Asking against {len(asked)} of {len(fragments)} fragments")

        answers = []
        for fragment in asked:
            answer = await self._prompts.complete(
                QUESTION_TEMPLATE,
                {"page_content": fragment.text, "question": question},
            )
            answers.append(answer)

        best = await self._prompts.complete(
            BEST_ANSWER_TEMPLATE,
            {"question": question, "answers": "\n".join(answers)},
        )
        return f"Q: {question}, A: {best}"

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _on_video_search_host(self) -> bool:
        host = url_host(self._page.url) or ""
        video_host = self._settings.browser.video_search_host
        return host == video_host or host.endswith(f".{video_host}")

    async def _find_text_field(self) -> IElement:
        """
        The first text or search input, preferring the first form's.

        Raises:
            ElementNotFoundError: If the page has no such input
        """
        form = await self._page.query_selector("form")
        scopes = [form, self._page] if form is not None else [self._page]
        for scope in scopes:
            for selector in TEXT_FIELD_SELECTORS:
                text_field = await scope.query_selector(selector)
                if text_field is not None:
                    return text_field
        raise ElementNotFoundError("No text field found", selector=", ".join(TEXT_FIELD_SELECTORS))

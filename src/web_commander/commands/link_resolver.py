"""
Link Resolver - Ask the model which link matches a click intent.

Only decides *what* to click. Whether the link exists in the live page is the
dispatcher's concern.
"""

import logging
from typing import Optional

from web_commander.dom.chunker import Chunker
from web_commander.dom.simplifier import HtmlSimplifier
from web_commander.exceptions.command import LinkNotFoundError
from web_commander.prompts.schemas import LinkCandidate
from web_commander.prompts.service import BEST_LINK_TEMPLATE, PromptService

logger = logging.getLogger(__name__)


class LinkResolver:
    """
    Resolves a natural-language click intent to a link on the page.

    Only the first fragment of a long page is shown to the model.

    Example:
        >>> resolver = LinkResolver(prompts)
        >>> candidate = await resolver.resolve(html, "top story", "")
        >>> candidate.url
        'https://example.com/story/1'
    """

    def __init__(
        self,
        prompts: PromptService,
        simplifier: Optional[HtmlSimplifier] = None,
        chunker: Optional[Chunker] = None,
    ):
        self._prompts = prompts
        self._simplifier = simplifier or HtmlSimplifier()
        self._chunker = chunker or Chunker()

    async def resolve(self, markup: str, intent: str, history_text: str = "") -> LinkCandidate:
        """
        Find the link that best matches an intent.

        Args:
            markup: Raw page markup
            intent: What the user wants to click
            history_text: Formatted last command and result

        Returns:
            The chosen link

        Raises:
            LinkNotFoundError: If the model picked no link or one without a URL
            ServiceError: If the completion call fails or answers garbage
        """
        simplified = self._simplifier.simplify_html(markup)
        overhead = self._prompts.prompt_overhead(BEST_LINK_TEMPLATE, intent)
        fragments = self._chunker.chunk(simplified, overhead)
        if len(fragments) > 1:
            logger.debug(f"Resolving '{intent}' against fragment 1 of {len(fragments)}")

        candidate = await self._prompts.determine_best_link(fragments[0].text, intent, history_text)
        if candidate is None or not candidate.is_usable:
            raise LinkNotFoundError(f"No link found for '{intent}'", intent=intent)

        logger.info(f"Resolved '{intent}' to {candidate.url}")
        return candidate

"""
Chunker - Split simplified markup into prompt-sized fragments.

Fragments are cut immediately before closing tags so that no boundary ever
falls inside a tag, and the contents of all fragments joined in order give
back the input exactly. Every fragment of a split page carries a small header:

    <meta name="page" content="2 of 3">
    <meta name="og:title" content="Sushi Nakazawa">
    <meta name="og:url" content="https://example.com/">
"""

from dataclasses import dataclass
from typing import List, Optional
import html
import logging
import re

from web_commander.config.settings import ChunkingSettings
from web_commander.dom.simplifier import extract_page_metadata

logger = logging.getLogger(__name__)

CLOSING_TAG_SPLIT = re.compile(r"(?=</[^>]+>)")


@dataclass(frozen=True)
class Fragment:
    """
    One prompt-sized slice of simplified markup.

    Attributes:
        content: The slice itself
        index: Zero-based position
        total_count: Number of fragments the page was split into
        origin_url: Page URL found in the simplified markup
        origin_title: Page title found in the simplified markup
        header: Pagination and metadata lines, empty for an unsplit page
    """
    content: str
    index: int = 0
    total_count: int = 1
    origin_url: Optional[str] = None
    origin_title: Optional[str] = None
    header: str = ""

    @property
    def text(self) -> str:
        """What goes into the prompt."""
        return self.header + self.content

    @property
    def page_number(self) -> int:
        return self.index + 1

    def __str__(self) -> str:
        return self.text


class Chunker:
    """
    Character-budgeted splitter.

    The budget is the model's context size converted to characters, minus the
    prompt that will wrap the fragment and a safety margin.

    Example:
        >>> chunker = Chunker(token_limit=2048)
        >>> fragments = chunker.chunk(simplified, overhead_chars=600)
        >>> fragments[0].text
    """

    def __init__(self, token_limit: int = 2048, chars_per_token: int = 4, safety_margin: int = 100):
        self.token_limit = token_limit
        self.chars_per_token = chars_per_token
        self.safety_margin = safety_margin

    @classmethod
    def from_settings(cls, settings: ChunkingSettings) -> "Chunker":
        return cls(
            token_limit=settings.token_limit,
            chars_per_token=settings.chars_per_token,
            safety_margin=settings.safety_margin,
        )

    def budget(self, overhead_chars: int = 0) -> int:
        """Characters available for page content."""
        return self.token_limit * self.chars_per_token - overhead_chars - self.safety_margin

    def chunk(self, text: str, overhead_chars: int = 0) -> List[Fragment]:
        """
        Split simplified markup into fragments.

        Args:
            text: Simplified markup
            overhead_chars: Length of the prompt the fragment will be embedded in

        Returns:
            A single unmodified fragment when the text fits the budget,
            otherwise every fragment with its pagination header
        """
        max_chars = self.budget(overhead_chars)
        url, title = extract_page_metadata(text)

        if not text or len(text) <= max_chars:
            return [Fragment(content=text, origin_url=url, origin_title=title)]

        parts = self.split(text, max_chars)
        total = len(parts)
        logger.debug(f"Split {len(text)} chars into {total} fragments of at most {max_chars}")

        return [
            Fragment(
                content=part,
                index=index,
                total_count=total,
                origin_url=url,
                origin_title=title,
                header=self._header(index, total, url, title),
            )
            for index, part in enumerate(parts)
        ]

    def split(self, text: str, max_chars: int) -> List[str]:
        """
        Cut text before closing tags into pieces shorter than ``max_chars``.

        A single textlet longer than the budget becomes a piece of its own.
        """
        textlets = [textlet for textlet in CLOSING_TAG_SPLIT.split(text) if textlet]

        parts: List[str] = []
        current: List[str] = []
        current_len = 0
        for textlet in textlets:
            if current and current_len + len(textlet) >= max_chars:
                parts.append("".join(current))
                current = []
                current_len = 0
            current.append(textlet)
            current_len += len(textlet)

        if current:
            parts.append("".join(current))
        return parts

    @staticmethod
    def _header(index: int, total: int, url: Optional[str], title: Optional[str]) -> str:
        lines = [f'<meta name="page" content="{index + 1} of {total}">']
        if index > 0:
            if title is not None:
                lines.append(f'<meta name="og:title" content="{html.escape(title)}">')
            if url is not None:
                lines.append(f'<meta name="og:url" content="{html.escape(url)}">')
        return "\n".join(lines) + "\n"

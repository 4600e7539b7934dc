"""
HTML Simplifier - Reduce page markup to compact pseudo-HTML for prompts.

Pages are far too verbose to paste into a size-limited prompt. The simplifier
keeps the text of every leaf element and only the markup that carries meaning
for a model deciding what to click or read:

    <div class="product-card"><a href="/p/1"><span class="price-tag">$5</span></a></div>

becomes

    <link class='price' href='/p/1'>$5</link>

Rules, in short:
- script/style subtrees are dropped
- leaves are grouped under their parent; a parent wrapper is only emitted
  when it says something (a meaningful tag or a kept class)
- a class token is kept only if it contains a whitelisted word, and then only
  as that word (``price-large`` -> ``price``)
- text nested inside a link or button inherits the ``link``/``button`` class
- bare structural tags (p/br/span/div/td) degrade to plain text

Example:
    >>> simplifier = HtmlSimplifier()
    >>> simplifier.simplify_html("<p class='score'>228 points</p>")
    '<score>228 points</score>'
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import html
import logging
import re

from web_commander.dom.model import DomNode, parse_html

logger = logging.getLogger(__name__)

# Tags that only structure text
BASIC_ELEMENTS = frozenset({"p", "br", "span", "div", "td"})

# Group wrappers omitted when they carry no kept class
UNWRAPPED_PARENTS = frozenset({"p", "br", "div", "span"})

STRIPPED_TAGS = frozenset({"script", "style"})

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

# Tag names and class tokens that mark an element as clickable
LINKABLES = ("a", "link", "button", "btn")

ELEMENT_RENAMES: Dict[str, str] = {
    "a": "link",
    "anchor": "link",
}

CLASS_RENAMES: Dict[str, str] = {
    "title": "section",
    "btn": "button",
}

# Class words that carry meaning for a model reading the page
CLASS_WHITELIST: Tuple[str, ...] = (
    "button",
    "btn",
    "link",
    "input",
    "strikethrough",
    "title",
    "rank",
    "priority",
    "star",
    "rating",
    "review",
    "score",
    "price",
    "cost",
    "menu",
    "user",
    "date",
    "time",
    "page",
    "age",
    "month",
    "day",
    "year",
    "type",
    "category",
    "kind",
    "offer",
    "promo",
    "sale",
    "cart",
    "add",
    "image",
    "email",
    "street",
    "city",
    "cities",
    "zip",
    "postal",
    "country",
    "reservation",
    "availability",
    "quantity",
    "inventory",
    "product",
    "sku",
    "notify",
    "share",
    "important",
    "comment",
    "article",
    "venue",
    "location",
    "color",
    "footer",
    "skip",
    "next",
    "previous",
    "cuisine",
    "neighborhood",
)

META_URL = "og:url"
META_TITLE = "og:title"

_META_LINE = re.compile(r"^<meta name='(og:url|og:title)' content='(.*)' />$", re.MULTILINE)


def simpler_element_name(tag: str) -> str:
    """Rename a tag to its compact form (``a`` -> ``link``)."""
    tag = tag.lower()
    return ELEMENT_RENAMES.get(tag, tag)


def simpler_class_name(class_name: str) -> str:
    """Rename a kept class to its canonical form (``btn`` -> ``button``)."""
    class_name = class_name.lower()
    return CLASS_RENAMES.get(class_name, class_name)


def meta_line(name: str, content: str) -> str:
    """A page metadata line as emitted at the top of simplified output."""
    return f"<meta name='{name}' content='{html.escape(content)}' />"


def extract_page_metadata(simplified: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Read the page URL and title back out of simplified output.

    Returns:
        ``(url, title)``, either may be None
    """
    found: Dict[str, str] = {}
    for name, content in _META_LINE.findall(simplified):
        found.setdefault(name, html.unescape(content))
    return found.get(META_URL), found.get(META_TITLE)


def _unique(items: List[str]) -> List[str]:
    seen: List[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


@dataclass
class ParentGroup:
    """
    A parent element and the leaves directly under it.

    Attributes:
        parent: The shared parent
        children: Leaf children in document order
    """
    parent: DomNode
    children: List[DomNode] = field(default_factory=list)


class HtmlSimplifier:
    """
    Reduce a DomNode tree to compact pseudo-HTML.

    The output is a newline-joined list of formatted groups, optionally
    preceded by ``og:url``/``og:title`` metadata lines.
    """

    def __init__(self, max_ancestor_depth: int = 64, ascii_only: bool = True):
        """
        Initialize the simplifier.

        Args:
            max_ancestor_depth: How many ancestors to inspect for a linkable one
            ascii_only: Strip non-ASCII characters when parsing raw markup
        """
        self.max_ancestor_depth = max_ancestor_depth
        self.ascii_only = ascii_only

    def simplify_html(
        self,
        markup: str,
        page_title: Optional[str] = None,
        page_url: Optional[str] = None,
    ) -> str:
        """Parse raw markup and simplify it."""
        root = parse_html(markup, ascii_only=self.ascii_only)
        return self.simplify(root, page_title=page_title, page_url=page_url)

    def simplify(
        self,
        root: DomNode,
        page_title: Optional[str] = None,
        page_url: Optional[str] = None,
    ) -> str:
        """
        Simplify a parsed page.

        Args:
            root: Root of the page tree
            page_title: Page title for the metadata header
            page_url: Page URL for the metadata header

        Returns:
            Simplified markup; metadata lines are only added when both the
            title and the URL are given
        """
        lines: List[str] = []
        groups = self.group_leaves(root)
        for group in groups:
            formatted = self.format_group(group)
            if formatted:
                lines.append(formatted)

        if page_title and page_url:
            lines[:0] = [meta_line(META_URL, page_url), meta_line(META_TITLE, page_title)]

        logger.debug(f"Simplified {len(groups)} groups into {len(lines)} blocks")
        return "\n".join(lines)

    # =========================================================================
    # TRAVERSAL
    # =========================================================================

    def collect_leaves(self, root: DomNode) -> List[DomNode]:
        """
        Leaves in document order, ignoring script/style subtrees.

        An element whose only children were scripts or styles counts as a leaf.
        """
        leaves: List[DomNode] = []
        stack = [root]
        while stack:
            node = stack.pop()
            children = [child for child in node.children if child.tag not in STRIPPED_TAGS]
            if children:
                stack.extend(reversed(children))
            elif node.parent is not None:
                leaves.append(node)
        return leaves

    def group_leaves(self, root: DomNode) -> List[ParentGroup]:
        """Group leaves by parent, parents in order of first appearance."""
        groups: Dict[int, ParentGroup] = {}
        for leaf in self.collect_leaves(root):
            group = groups.get(id(leaf.parent))
            if group is None:
                group = groups[id(leaf.parent)] = ParentGroup(parent=leaf.parent)
            group.children.append(leaf)
        return list(groups.values())

    # =========================================================================
    # CLASSES
    # =========================================================================

    def keeper_classes(self, node: DomNode) -> List[str]:
        """
        The classes of a node worth showing to a model.

        A class is kept when it contains (case-insensitively) a whitelisted
        word, and is replaced by that word. When the node has no linkable class
        of its own, the classification of its nearest linkable ancestor comes
        first.
        """
        classes = node.classes
        keepers: List[str] = []

        if not self._has_linkable_class(node):
            ancestor = self.linkable_ancestor(node)
            if ancestor is not None:
                keepers.extend(self._linkable_classification(ancestor))

        remaining = list(CLASS_WHITELIST)
        for class_name in classes:
            lowered = class_name.lower()
            for word in list(remaining):
                if word in lowered:
                    keepers.append(simpler_class_name(word))
                    remaining.remove(word)

        return _unique(keepers)

    def linkable_ancestor(self, node: DomNode) -> Optional[DomNode]:
        """
        Walk up from a node to the first linkable ancestor.

        Stops at the root or after ``max_ancestor_depth`` ancestors.
        """
        cursor = node.parent
        depth = 0
        while cursor is not None and depth < self.max_ancestor_depth:
            if self._linkable_classification(cursor):
                return cursor
            cursor = cursor.parent
            depth += 1
        return None

    @staticmethod
    def _has_linkable_class(node: DomNode) -> bool:
        return any(class_name.lower() in LINKABLES for class_name in node.classes)

    @staticmethod
    def _linkable_classification(node: DomNode) -> List[str]:
        """A node's linkable tag or classes, canonicalized (``a`` -> ``link``)."""
        tag = node.tag.lower()
        if tag in LINKABLES:
            return [simpler_class_name(simpler_element_name(tag))]
        return _unique([
            simpler_class_name(simpler_element_name(class_name))
            for class_name in node.classes
            if class_name.lower() in LINKABLES
        ])

    def link_target(self, node: DomNode) -> Optional[str]:
        """The node's href, or the one of the link it sits in."""
        href = node.get("href")
        if href or self._has_linkable_class(node):
            return href
        ancestor = self.linkable_ancestor(node)
        return ancestor.get("href") if ancestor is not None else None

    # =========================================================================
    # FORMATTING
    # =========================================================================

    def format_group(self, group: ParentGroup) -> str:
        """
        Format a parent and its leaves.

        Returns:
            The formatted block, or "" when every child is empty
        """
        if len(group.children) == 1:
            return self.format_node(group.children[0])

        parent = group.parent
        parent_name = simpler_element_name(parent.tag)
        keepers = [c for c in self.keeper_classes(parent) if c != parent_name]
        href = parent.get("href")

        children = [self.format_node(child, wrapper_href=href) for child in group.children]
        children = [child for child in children if child]
        if not children:
            return ""

        lines = [f"  {child}" for child in children]
        if keepers or href or parent_name not in UNWRAPPED_PARENTS:
            lines.insert(0, self._open_tag(parent_name, keepers, href))
            lines.append(f"</{parent_name}>")
        return "\n".join(lines)

    def format_node(self, node: DomNode, wrapper_href: Optional[str] = None) -> str:
        """
        Format a single leaf.

        Text inside a link carries the link's href, unless the group wrapper
        already shows it (``wrapper_href``).

        Examples:
            <p class='score'>228 points</p>      -> <score>228 points</score>
            <div class='button time'>6:00PM</div> -> <button class='time'>6:00PM</button>
            <span>plain</span>                   -> plain

        Returns:
            The formatted leaf, or "" when it has no visible text
        """
        text = " ".join(node.text.split())
        if not text:
            return ""

        element = simpler_element_name(node.tag)
        keepers = self.keeper_classes(node)

        # Promote the first kept class to be the tag of a structural element
        if keepers and element in BASIC_ELEMENTS:
            element = keepers.pop(0)

        keepers = [c for c in keepers if c != element]
        if element in HEADING_TAGS:
            keepers = [c for c in keepers if c != "section"]

        if not keepers and element in BASIC_ELEMENTS:
            return text

        href = self.link_target(node)
        if href == wrapper_href and node.get("href") is None:
            href = None
        return f"{self._open_tag(element, keepers, href)}{text}</{element}>"

    @staticmethod
    def _open_tag(name: str, classes: List[str], href: Optional[str]) -> str:
        attrs = ""
        if classes:
            attrs += f" class='{' '.join(classes)}'"
        if href:
            attrs += f" href='{href}'"
        return f"<{name}{attrs}>"


def simplify_html(
    markup: str,
    page_title: Optional[str] = None,
    page_url: Optional[str] = None,
) -> str:
    """Simplify raw markup with default settings."""
    return HtmlSimplifier().simplify_html(markup, page_title=page_title, page_url=page_url)

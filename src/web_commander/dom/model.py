"""
DOM Model - A small ordered tree built from page markup.

The tree only carries what the simplifier needs: tag, attributes, own text,
parent and ordered children. It is built fresh from every page snapshot.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional
import logging
import re

import lxml.html
from lxml import etree

logger = logging.getLogger(__name__)

_NON_ASCII = re.compile(r"[^\x00-\x7f]")


@dataclass(eq=False)
class DomNode:
    """
    One element of a parsed page.

    Nodes compare by identity; two elements with the same tag and text are
    still different nodes.

    Attributes:
        tag: Lower-case tag name
        attributes: Attributes in document order
        children: Element children in document order
        parent: Enclosing element (None for the root)
        text: Own text, i.e. direct text plus the tails of the children
    """
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["DomNode"] = field(default_factory=list)
    parent: Optional["DomNode"] = field(default=None, repr=False)
    text: str = ""

    @property
    def classes(self) -> List[str]:
        """The element's class tokens."""
        return self.attributes.get("class", "").split()

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute value."""
        return self.attributes.get(name, default)

    def append(self, child: "DomNode") -> "DomNode":
        """Attach a child as the last element child."""
        child.parent = self
        self.children.append(child)
        return child

    def iter(self) -> Iterator["DomNode"]:
        """Yield this node and all descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self) -> Iterator["DomNode"]:
        """Yield the parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


def parse_html(markup: str, ascii_only: bool = False) -> DomNode:
    """
    Parse markup into a DomNode tree.

    Never raises for malformed markup: empty or unparseable input yields an
    empty ``html`` root.

    Args:
        markup: Raw HTML
        ascii_only: Strip non-ASCII characters before parsing

    Returns:
        The root node
    """
    if ascii_only:
        markup = _NON_ASCII.sub("", markup)

    if not markup or not markup.strip():
        return DomNode(tag="html")

    try:
        try:
            document = lxml.html.document_fromstring(markup)
        except ValueError:
            # str input with an XML encoding declaration
            document = lxml.html.document_fromstring(markup.encode("utf-8"))
    except (etree.ParserError, ValueError) as e:
        logger.debug(f"Unparseable markup, using an empty document: {e}")
        return DomNode(tag="html")

    return from_lxml(document)


def from_lxml(element: "lxml.html.HtmlElement") -> DomNode:
    """
    Convert an lxml element tree into DomNodes.

    Comments and processing instructions are dropped, their tail text is kept
    in the parent's own text.
    """
    nodes: Dict[object, DomNode] = {}
    root: Optional[DomNode] = None

    for el in element.iter():
        if not isinstance(el.tag, str):
            continue

        own_text = [el.text or ""]
        own_text.extend(child.tail or "" for child in el)
        node = DomNode(
            tag=el.tag.lower(),
            attributes={str(key): str(value) for key, value in el.attrib.items()},
            text="".join(own_text),
        )

        parent = nodes.get(el.getparent())
        if parent is None:
            if root is None:
                root = node
        else:
            parent.append(node)
        nodes[el] = node

    return root if root is not None else DomNode(tag="html")

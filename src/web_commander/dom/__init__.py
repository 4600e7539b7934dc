"""
DOM module - Page markup parsing, simplification and chunking.
"""

from web_commander.dom.model import DomNode, parse_html, from_lxml
from web_commander.dom.simplifier import (
    HtmlSimplifier,
    ParentGroup,
    simplify_html,
    extract_page_metadata,
)
from web_commander.dom.chunker import Chunker, Fragment

__all__ = [
    "DomNode",
    "parse_html",
    "from_lxml",
    "HtmlSimplifier",
    "ParentGroup",
    "simplify_html",
    "extract_page_metadata",
    "Chunker",
    "Fragment",
]

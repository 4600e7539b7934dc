"""
Tests for the DOM model - parsing markup into DomNode trees.
"""

import pytest

from web_commander.dom.model import DomNode, parse_html


class TestDomNode:
    """Test the DomNode dataclass."""

    def test_append_sets_parent(self):
        """Test appending links child and parent."""
        root = DomNode("html")
        child = root.append(DomNode("body"))

        assert child.parent is root
        assert root.children == [child]
        assert root.is_root
        assert not child.is_root

    def test_classes(self):
        """Test class tokens are split on whitespace."""
        node = DomNode("div", attributes={"class": "  price   large "})
        assert node.classes == ["price", "large"]
        assert DomNode("div").classes == []

    def test_iter_document_order(self):
        """Test iteration is pre-order in document order."""
        root = DomNode("html")
        body = root.append(DomNode("body"))
        first = body.append(DomNode("p"))
        first.append(DomNode("b"))
        body.append(DomNode("span"))

        assert [node.tag for node in root.iter()] == ["html", "body", "p", "b", "span"]

    def test_ancestors(self):
        """Test ancestors go up to the root."""
        root = DomNode("html")
        leaf = root.append(DomNode("body")).append(DomNode("p"))

        assert [node.tag for node in leaf.ancestors()] == ["body", "html"]

    def test_identity_equality(self):
        """Test equal-looking nodes are still different nodes."""
        assert DomNode("p", text="x") != DomNode("p", text="x")


class TestParseHtml:
    """Test parse_html."""

    def test_builds_tree(self):
        """Test a simple document is parsed."""
        root = parse_html("<p class='score'>228 points</p>")

        assert root.tag == "html"
        paragraphs = [node for node in root.iter() if node.tag == "p"]
        assert len(paragraphs) == 1
        assert paragraphs[0].text == "228 points"
        assert paragraphs[0].get("class") == "score"
        assert paragraphs[0].parent.tag == "body"

    def test_comment_tail_kept(self):
        """Test comments are dropped but the text after them is kept."""
        root = parse_html("<p>Hello<!-- note --> world</p>")
        paragraph = next(node for node in root.iter() if node.tag == "p")

        assert paragraph.children == []
        assert paragraph.text == "Hello world"

    def test_children_tails_in_parent_text(self):
        """Test a node's own text includes the text between its children."""
        root = parse_html("<div>one <b>two</b> three</div>")
        div = next(node for node in root.iter() if node.tag == "div")

        assert div.text == "one  three"
        assert div.children[0].text == "two"

    @pytest.mark.parametrize("markup", ["", "   ", "\n\t"])
    def test_empty_input(self, markup):
        """Test empty input gives an empty document."""
        root = parse_html(markup)
        assert root.tag == "html"
        assert root.children == []

    def test_ascii_only(self):
        """Test non-ASCII characters are stripped when asked."""
        root = parse_html("<p>café €5</p>", ascii_only=True)
        paragraph = next(node for node in root.iter() if node.tag == "p")
        assert paragraph.text == "caf 5"

    def test_keeps_unicode_by_default(self):
        """Test non-ASCII characters are kept by default."""
        root = parse_html("<p>café</p>")
        paragraph = next(node for node in root.iter() if node.tag == "p")
        assert paragraph.text == "café"

    def test_encoding_declaration(self):
        """Test markup with an XML encoding declaration still parses."""
        root = parse_html('<?xml version="1.0" encoding="utf-8"?><html><body><p>ok</p></body></html>')
        assert any(node.text == "ok" for node in root.iter())

    def test_malformed_markup(self):
        """Test unclosed tags do not raise."""
        root = parse_html("<div><p>unclosed <b>bold")
        assert any(node.tag == "b" and node.text == "bold" for node in root.iter())

    def test_tags_lowercased(self):
        """Test tag names are lower-cased."""
        root = parse_html("<DIV><SPAN>x</SPAN></DIV>")
        assert {node.tag for node in root.iter()} >= {"div", "span"}

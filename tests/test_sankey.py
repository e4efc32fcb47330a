"""Tests for the sankey dialect."""

from __future__ import annotations

import pytest

from mermaid_ast import ParseError
from mermaid_ast.sankey import SankeyNode, parse_sankey, render_sankey


class TestSankeyParsing:
    def test_quoted_fields_with_commas(self):
        d = parse_sankey('sankey-beta\n"A, Inc",B,10\nB,"C, Ltd",20')
        assert list(d.nodes) == ["A, Inc", "B", "C, Ltd"]
        assert [l.value for l in d.links] == [10.0, 20.0]

    def test_doubled_quotes(self):
        d = parse_sankey('sankey-beta\n"A ""Company""",B,10')
        assert d.nodes['A "Company"'].label == 'A "Company"'

    def test_nodes_are_created_on_first_reference(self):
        d = parse_sankey("sankey-beta\nSource,Target,100")
        assert d.nodes["Source"] == SankeyNode(id="Source", label="Source")
        assert d.nodes["Target"] == SankeyNode(id="Target", label="Target")
        assert d.links[0].value == 100.0

    def test_plain_sankey_header(self):
        assert len(parse_sankey("sankey\nA,B,1").links) == 1

    def test_wrong_field_count(self):
        with pytest.raises(ParseError, match="Expected 3 fields"):
            parse_sankey("sankey-beta\nA,B")

    def test_bad_value(self):
        with pytest.raises(ParseError, match="Expected a number") as exc_info:
            parse_sankey("sankey-beta\n\nA,B,lots")
        assert exc_info.value.line == 3

    def test_empty_endpoint(self):
        with pytest.raises(ParseError, match="must not be empty"):
            parse_sankey("sankey-beta\n,B,1")


class TestSankeyRendering:
    def test_canonical_form(self):
        d = parse_sankey('sankey-beta\n"A, Inc",B,10\nB,C,2.5')
        assert render_sankey(d) == 'sankey-beta\n\n"A, Inc",B,10\nB,C,2.5'

    def test_fixed_point(self):
        text = 'sankey-beta\n\n"A ""Q""",B,10'
        assert render_sankey(parse_sankey(text)) == text

    def test_comment_like_field_is_quoted(self):
        d = parse_sankey('sankey-beta\n"%%x",B,1')
        assert list(d.nodes) == ["%%x", "B"]
        text = render_sankey(d)
        assert text == 'sankey-beta\n\n"%%x",B,1'
        assert render_sankey(parse_sankey(text)) == text

    def test_trailing_semicolon(self):
        d = parse_sankey("sankey-beta\nA,B,1;\nB,C,2 ;")
        assert [l.value for l in d.links] == [1.0, 2.0]

"""Tests for the mindmap dialect."""

from __future__ import annotations

import pytest

from mermaid_ast import ParseError, RenderOptions
from mermaid_ast.mindmap import MindmapDiagram, MindmapNode, parse_mindmap, render_mindmap

MINDMAP = """mindmap
  root((mindmap))
    Origins
      Long history
      ::icon(fa fa-book)
    Research
      effect[Effectiveness]
      b))Bang((
      c)Cloud(
      h{{Hexagon}}
      :::urgent
"""


class TestMindmapParsing:
    def test_tree_from_indentation(self):
        root = parse_mindmap(MINDMAP).root
        assert root.id == "root"
        assert root.label == "mindmap"
        assert root.shape == "circle"
        assert [c.label for c in root.children] == ["Origins", "Research"]
        assert root.children[0].children[0].icon == "fa fa-book"

    def test_shapes(self):
        research = parse_mindmap(MINDMAP).root.children[1]
        shapes = [(c.id, c.shape) for c in research.children]
        assert shapes == [
            ("effect", "square"),
            ("b", "bang"),
            ("c", "cloud"),
            ("h", "hexagon"),
        ]
        assert research.children[0].label == "Effectiveness"
        assert research.children[-1].css_class == "urgent"

    def test_node_without_id_uses_label(self):
        node = parse_mindmap("mindmap\n  [Only label]").root
        assert node.id == node.label == "Only label"

    def test_second_root(self):
        with pytest.raises(ParseError, match="only have one root") as exc_info:
            parse_mindmap("mindmap\n  a\n  b")
        assert exc_info.value.line == 3

    def test_icon_before_node(self):
        with pytest.raises(ParseError, match="Icon without a preceding node"):
            parse_mindmap("mindmap\n  ::icon(x)")

    def test_empty(self):
        assert parse_mindmap("mindmap").root is None


class TestMindmapRendering:
    def test_canonical_form(self):
        assert render_mindmap(parse_mindmap(MINDMAP)) == (
            "mindmap\n"
            "    root((mindmap))\n"
            "        Origins\n"
            "            Long history\n"
            "            ::icon(fa fa-book)\n"
            "        Research\n"
            "            effect[Effectiveness]\n"
            "            b))Bang((\n"
            "            c)Cloud(\n"
            "            h{{Hexagon}}\n"
            "            :::urgent"
        )

    def test_quotes_labels_with_edge_brackets(self):
        diagram = MindmapDiagram(root=MindmapNode(id="a", label="(x)", shape="square"))
        assert render_mindmap(diagram, RenderOptions(indent=2)) == 'mindmap\n  a["(x)"]'

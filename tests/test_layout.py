"""Tests for the geometry handed to visual renderers."""

from __future__ import annotations

import pytest

from mermaid_ast import (
    BuildOptions,
    LayoutOptions,
    PositionedGraph,
    UnreachableStateError,
    flowchart,
    layout_diagram,
    parse,
)
from mermaid_ast.flowchart import FlowchartDiagram
from mermaid_ast.pie import PieChart


def _by_id(graph: PositionedGraph):
    return {n.id: n for n in graph.nodes}


class TestLayoutBasics:
    def test_empty_structure(self):
        assert layout_diagram(FlowchartDiagram()) == PositionedGraph(width=80, height=80)

    def test_single_node(self):
        graph = layout_diagram(parse("flowchart TB\nA"))
        (node,) = graph.nodes
        assert (node.x, node.y) == (pytest.approx(40), pytest.approx(40))
        assert node.width == pytest.approx(13 * 0.55 + 32)
        assert node.height == pytest.approx(33)
        assert graph.width == pytest.approx(node.width + 80)

    def test_nodes_stay_inside_the_canvas(self):
        graph = layout_diagram(parse("flowchart TB\nA --> B & C\nB --> D\nC --> D\nE"))
        for node in graph.nodes:
            assert node.x >= 40 - 1e-6
            assert node.y >= 40 - 1e-6
            assert node.x + node.width <= graph.width - 40 + 1e-6
            assert node.y + node.height <= graph.height - 40 + 1e-6

    def test_custom_padding(self):
        graph = layout_diagram(parse("flowchart TB\nA"), LayoutOptions(padding=10))
        assert graph.nodes[0].x == pytest.approx(10)

    def test_structure_is_not_modified(self):
        diagram = parse("flowchart TB\nA --> B")
        before = repr(diagram)
        layout_diagram(diagram)
        assert repr(diagram) == before


class TestDirections:
    def test_top_to_bottom(self):
        nodes = _by_id(layout_diagram(parse("flowchart TB\nA --> B --> C")))
        assert nodes["A"].y < nodes["B"].y < nodes["C"].y

    def test_bottom_to_top(self):
        nodes = _by_id(layout_diagram(parse("flowchart BT\nA --> B")))
        assert nodes["A"].y > nodes["B"].y

    def test_left_to_right(self):
        nodes = _by_id(layout_diagram(parse("flowchart LR\nA --> B")))
        assert nodes["A"].x < nodes["B"].x

    def test_right_to_left(self):
        nodes = _by_id(layout_diagram(parse("flowchart RL\nA --> B")))
        assert nodes["A"].x > nodes["B"].x


class TestEdges:
    def test_edges_connect_centers(self):
        graph = layout_diagram(parse("flowchart TB\nA -->|go| B"))
        nodes = _by_id(graph)
        (edge,) = graph.edges
        assert edge.label == "go"
        start, end = edge.points
        assert start.x == pytest.approx(nodes["A"].x + nodes["A"].width / 2)
        assert end.y == pytest.approx(nodes["B"].y + nodes["B"].height / 2)

    def test_dangling_relation_is_skipped(self):
        diagram = flowchart().node("A").link("A", "B").build(BuildOptions(validate=False))
        graph = layout_diagram(diagram)
        assert [n.id for n in graph.nodes] == ["A"]
        assert graph.edges == ()

    def test_self_loop_is_kept_as_an_edge(self):
        graph = layout_diagram(parse("flowchart TB\nA --> A\nA --> B"))
        assert len(graph.nodes) == 2
        assert len(graph.edges) == 2

    def test_disconnected_components_do_not_overlap(self):
        graph = layout_diagram(parse("flowchart TB\nA --> B\nC --> D\nE"))
        boxes = sorted(graph.nodes, key=lambda n: n.x)
        groups = {"A": 0, "B": 0, "C": 1, "D": 1, "E": 2}
        for left, right in zip(boxes, boxes[1:]):
            if groups[left.id] != groups[right.id]:
                assert left.x + left.width <= right.x + 1e-6


class TestOtherDialects:
    def test_state_terminals_per_scope(self):
        graph = layout_diagram(
            parse("stateDiagram-v2\n[*] --> A\nA --> [*]\nstate C {\n[*] --> D\n}")
        )
        ids = [n.id for n in graph.nodes]
        assert "[*]start:" in ids
        assert "[*]end:" in ids
        assert "[*]start:C" in ids
        assert len(graph.edges) == 3

    def test_class_diagram(self):
        graph = layout_diagram(parse("classDiagram\nAnimal <|-- Dog"))
        assert {n.shape for n in graph.nodes} == {"class"}
        assert len(graph.edges) == 1

    def test_er_diagram(self):
        graph = layout_diagram(parse("erDiagram\nA ||--o{ B : has"))
        assert graph.edges[0].label == "has"

    def test_sankey_flows_left_to_right(self):
        nodes = _by_id(layout_diagram(parse("sankey-beta\nA,B,1")))
        assert nodes["A"].x < nodes["B"].x

    def test_unsupported_structure(self):
        with pytest.raises(UnreachableStateError):
            layout_diagram(PieChart())  # type: ignore[arg-type]

from __future__ import annotations

from dataclasses import dataclass, field

from grandalf.graphs import Edge, Graph, Vertex
from grandalf.layouts import SugiyamaLayout

from .class_diagram import ClassDiagram
from .er import ErDiagram
from .errors import assert_never
from .flowchart import FlowchartDiagram
from .sankey import SankeyDiagram
from .state import TERMINAL, StateDiagram

# ============================================================================
# Layout boundary
#
# Visual renderers consume positioned geometry, never the structures
# themselves. This module reads entities and relations out of a structure
# (without touching it) and places them with grandalf's Sugiyama layout.
# ============================================================================

LayoutDiagram = FlowchartDiagram | ClassDiagram | StateDiagram | ErDiagram | SankeyDiagram

NODE_PADDING_X = 16
NODE_PADDING_Y = 10
# Average glyph width as a share of the font size (medium weight)
GLYPH_WIDTH_RATIO = 0.55


@dataclass(frozen=True, slots=True)
class LayoutOptions:
    padding: float = 40
    node_spacing: float = 24
    layer_spacing: float = 40
    font_size: float = 13


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class PositionedNode:
    """A placed entity. ``x`` and ``y`` are the top-left corner."""

    id: str
    label: str
    shape: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class PositionedEdge:
    source: str
    target: str
    label: str | None
    points: tuple[Point, ...]


@dataclass(frozen=True, slots=True)
class PositionedGraph:
    width: float
    height: float
    nodes: tuple[PositionedNode, ...] = ()
    edges: tuple[PositionedEdge, ...] = ()


# ============================================================================
# Reading a structure
# ============================================================================


@dataclass(slots=True)
class _LayoutInput:
    direction: str = "TB"
    # id -> (label, shape)
    nodes: dict[str, tuple[str, str]] = field(default_factory=dict)
    # (source, target, label)
    edges: list[tuple[str, str, str | None]] = field(default_factory=list)


def _collect(diagram: LayoutDiagram) -> _LayoutInput:
    if isinstance(diagram, FlowchartDiagram):
        data = _LayoutInput(direction=diagram.direction)
        for node in diagram.nodes.values():
            data.nodes[node.id] = (node.label, node.shape)
        data.edges = [(l.source, l.target, l.label) for l in diagram.links]
    elif isinstance(diagram, ClassDiagram):
        data = _LayoutInput(direction=diagram.direction)
        for cls in diagram.classes.values():
            data.nodes[cls.id] = (cls.label, "class")
        data.edges = [(r.from_, r.to, r.label) for r in diagram.relationships]
    elif isinstance(diagram, StateDiagram):
        data = _LayoutInput(direction=diagram.direction)
        for state in diagram.states.values():
            data.nodes[state.id] = (state.label or state.id, state.kind)
        # Each scope gets its own start/end pseudo-state
        for t in diagram.transitions:
            source = _terminal_id(t.source, t.scope, "start", data)
            target = _terminal_id(t.target, t.scope, "end", data)
            data.edges.append((source, target, t.label))
    elif isinstance(diagram, ErDiagram):
        data = _LayoutInput(direction=diagram.direction)
        for entity in diagram.entities.values():
            data.nodes[entity.id] = (entity.label, "entity")
        data.edges = [(r.entity1, r.entity2, r.label or None) for r in diagram.relationships]
    elif isinstance(diagram, SankeyDiagram):
        data = _LayoutInput(direction="LR")
        for node in diagram.nodes.values():
            data.nodes[node.id] = (node.label, "default")
        data.edges = [(l.source, l.target, None) for l in diagram.links]
    else:
        assert_never(diagram, "layout structure")
    return data


def _terminal_id(state_id: str, scope: str | None, role: str, data: _LayoutInput) -> str:
    if state_id != TERMINAL:
        return state_id
    node_id = f"{TERMINAL}{role}:{scope or ''}"
    data.nodes.setdefault(node_id, ("", f"state-{role}"))
    return node_id


def estimate_node_size(label: str, font_size: float) -> tuple[float, float]:
    width = len(label) * font_size * GLYPH_WIDTH_RATIO + NODE_PADDING_X * 2
    height = font_size + NODE_PADDING_Y * 2
    return width, height


# ============================================================================
# grandalf
# ============================================================================


class _VertexView:
    """Minimal view object required by grandalf's SugiyamaLayout."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        self.xy = (0.0, 0.0)


def layout_diagram(diagram: LayoutDiagram, options: LayoutOptions | None = None) -> PositionedGraph:
    """Place the entities of a flowchart, class, state, ER or sankey structure.

    Each connected component is laid out on its own, then components are
    placed side by side. Relations to undeclared entities are skipped.
    """
    opts = options or LayoutOptions()
    data = _collect(diagram)
    padding = opts.padding
    if not data.nodes:
        return PositionedGraph(width=2 * padding, height=2 * padding)

    is_horizontal = data.direction in ("LR", "RL")
    is_reversed = data.direction in ("BT", "RL")

    vertices: dict[str, Vertex] = {}
    sizes: dict[str, tuple[float, float]] = {}
    for node_id, (label, _shape) in data.nodes.items():
        w, h = estimate_node_size(label or node_id, opts.font_size)
        sizes[node_id] = (w, h)
        v = Vertex(node_id)
        # grandalf always layers top to bottom; swap for horizontal flow
        v.view = _VertexView(h, w) if is_horizontal else _VertexView(w, h)
        vertices[node_id] = v

    grandalf_edges: list[Edge] = []
    seen_pairs: set[tuple[str, str]] = set()
    for source, target, _label in data.edges:
        if source not in vertices or target not in vertices or source == target:
            continue
        if (source, target) in seen_pairs:
            continue
        seen_pairs.add((source, target))
        grandalf_edges.append(Edge(vertices[source], vertices[target]))

    graph = Graph(list(vertices.values()), grandalf_edges)

    # Center of every node, with components placed left to right
    centers: dict[str, tuple[float, float]] = {}
    offset_x = 0.0
    for component in graph.C:
        members = [v.data for v in component.sV]
        if len(members) > 1:
            sug = SugiyamaLayout(component)
            sug.xspace = opts.node_spacing
            sug.yspace = opts.layer_spacing
            sug.init_all()
            sug.draw()

        raw: dict[str, tuple[float, float]] = {}
        for v in component.sV:
            x, y = v.view.xy if len(members) > 1 else (0.0, 0.0)
            if is_horizontal:
                x, y = y, x
            if is_reversed:
                if is_horizontal:
                    x = -x
                else:
                    y = -y
            raw[v.data] = (x, y)

        min_x = min(raw[n][0] - sizes[n][0] / 2 for n in raw)
        max_x = max(raw[n][0] + sizes[n][0] / 2 for n in raw)
        min_y = min(raw[n][1] - sizes[n][1] / 2 for n in raw)
        for node_id, (x, y) in raw.items():
            centers[node_id] = (x - min_x + offset_x, y - min_y)
        offset_x += (max_x - min_x) + opts.node_spacing

    nodes: list[PositionedNode] = []
    for node_id, (label, shape) in data.nodes.items():
        cx, cy = centers[node_id]
        w, h = sizes[node_id]
        nodes.append(PositionedNode(
            id=node_id,
            label=label,
            shape=shape,
            x=cx - w / 2 + padding,
            y=cy - h / 2 + padding,
            width=w,
            height=h,
        ))

    edges: list[PositionedEdge] = []
    for source, target, label in data.edges:
        if source not in centers or target not in centers:
            continue
        sx, sy = centers[source]
        tx, ty = centers[target]
        edges.append(PositionedEdge(
            source=source,
            target=target,
            label=label,
            points=(Point(sx + padding, sy + padding), Point(tx + padding, ty + padding)),
        ))

    width = max(n.x + n.width for n in nodes) + padding
    height = max(n.y + n.height for n in nodes) + padding
    return PositionedGraph(width=width, height=height, nodes=tuple(nodes), edges=tuple(edges))

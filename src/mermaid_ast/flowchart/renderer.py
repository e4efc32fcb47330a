from __future__ import annotations

import re

from ..lexer import accessibility_lines, format_style_props, quote
from ..types import RenderOptions, resolve_render_options
from .parser import SHAPE_DELIMITERS
from .types import FlowchartDiagram, FlowClick, FlowLink, FlowNode, FlowSubgraph

# Labels matching this are written without quotes. Anything else could be
# read back as a different shape.
_PLAIN_LABEL_RE = re.compile(
    r'^[^\s"\[\](){}/\\|-](?:[^"\[\](){}/\\|]*[^\s"\[\](){}/\\|-])?$'
)

_ARROW_END_TEXT = {
    "arrow_point": ">",
    "arrow_circle": "o",
    "arrow_cross": "x",
    "arrow_open": "",
}


def _label_text(label: str) -> str:
    return label if _PLAIN_LABEL_RE.match(label) else quote(label)


def link_operator(link: FlowLink) -> str:
    """The operator text between two nodes, including a ``|label|``."""
    end = _ARROW_END_TEXT[link.arrow]
    if link.stroke == "dotted":
        text = "-" + "." * link.length + "-" + end
    else:
        stroke_char = "=" if link.stroke == "thick" else "-"
        text = stroke_char * (link.length + (1 if end else 2)) + end
    if link.bidirectional:
        text = "<" + text
    if link.label:
        text += f"|{_label_text(link.label)}|"
    return text


def _render_click(click: FlowClick) -> str:
    if click.kind == "href":
        text = f"click {click.node_id} href {quote(click.target)}"
    else:
        text = f"click {click.node_id} call {click.target}({click.args or ''})"
    if click.tooltip is not None:
        text += f" {quote(click.tooltip)}"
    if click.kind == "href" and click.link_target:
        text += f" {click.link_target}"
    return text


class _FlowchartRenderer:
    """One rendering pass. Tracks which nodes have been declared and the
    order links are written in, so ``linkStyle`` indexes can follow them."""

    def __init__(self, diagram: FlowchartDiagram, options: RenderOptions) -> None:
        self.diagram = diagram
        self.options = options
        self.indent = options.indent_unit
        self.lines: list[str] = []
        self.emitted: set[str] = set()
        self.link_order: list[int] = []

        self.linked: set[str] = set()
        for link in diagram.links:
            self.linked.add(link.source)
            self.linked.add(link.target)

        # Links whose endpoints are both direct members of a subgraph are
        # written inside the first such subgraph.
        self.internal: dict[int, list[int]] = {}
        self.placed: set[int] = set()
        subgraphs = list(diagram.walk_subgraphs())
        for index, link in enumerate(diagram.links):
            for subgraph in subgraphs:
                if link.source in subgraph.node_ids and link.target in subgraph.node_ids:
                    self.internal.setdefault(id(subgraph), []).append(index)
                    self.placed.add(index)
                    break

    def inline_class(self, node_id: str) -> str | None:
        if not self.options.inline_classes or node_id not in self.diagram.nodes:
            return None
        classes = self.diagram.class_assignments.get(node_id, ())
        return classes[0] if len(classes) == 1 else None

    def node_text(self, node: FlowNode) -> str:
        if node.is_bare:
            text = node.id
        else:
            shape = "square" if node.shape == "default" else node.shape
            opener, closer = SHAPE_DELIMITERS[shape]
            text = f"{node.id}{opener}{_label_text(node.label)}{closer}"
        class_name = self.inline_class(node.id)
        if class_name:
            text += f":::{class_name}"
        return text

    def render_subgraph(self, subgraph: FlowSubgraph, depth: int) -> None:
        prefix = self.indent * depth
        inner = prefix + self.indent
        head = f"subgraph {subgraph.id}"
        if subgraph.title != subgraph.id:
            head += f"[{_label_text(subgraph.title)}]"
        self.lines.append(prefix + head)
        if subgraph.direction:
            self.lines.append(f"{inner}direction {subgraph.direction}")
        for node_id in subgraph.node_ids:
            node = self.diagram.nodes.get(node_id)
            if node is None or node_id in self.emitted:
                self.lines.append(inner + node_id)
            else:
                self.lines.append(inner + self.node_text(node))
            self.emitted.add(node_id)
        for child in subgraph.children:
            self.render_subgraph(child, depth + 1)
        self.render_links(self.internal.get(id(subgraph), []), inner)
        self.lines.append(prefix + "end")

    def render_links(self, indices: list[int], prefix: str) -> None:
        links = self.diagram.links
        i = 0
        while i < len(indices):
            link = links[indices[i]]
            text = f"{link.source} {link_operator(link)} {link.target}"
            self.link_order.append(indices[i])
            if self.options.compact_links:
                while i + 1 < len(indices) and links[indices[i + 1]].source == links[indices[i]].target:
                    i += 1
                    nxt = links[indices[i]]
                    text += f" {link_operator(nxt)} {nxt.target}"
                    self.link_order.append(indices[i])
            self.lines.append(prefix + text)
            i += 1

    def render_declarations(self) -> None:
        nodes = list(self.diagram.nodes.values())
        if self.options.sort_entities:
            nodes.sort(key=lambda n: n.id)
        for node in nodes:
            if node.id in self.emitted:
                continue
            if not node.is_bare or node.id not in self.linked or self.inline_class(node.id):
                self.lines.append(self.indent + self.node_text(node))
                self.emitted.add(node.id)

    def link_style_key(self, key: str) -> str:
        if not key.isdigit() or int(key) >= len(self.diagram.links):
            return key
        return str(self.link_order.index(int(key)))


def render_flowchart(diagram: FlowchartDiagram, options: RenderOptions | None = None) -> str:
    """Render canonical flowchart text.

    Order: subgraphs, node declarations, links, then classDef, class,
    style, click and linkStyle statements.
    """
    opts = resolve_render_options(options)
    indent = opts.indent_unit
    r = _FlowchartRenderer(diagram, opts)
    r.lines.append(f"flowchart {diagram.direction}")
    r.lines.extend(accessibility_lines(indent, diagram.acc_title, diagram.acc_description))

    for subgraph in diagram.subgraphs:
        r.render_subgraph(subgraph, 1)
    r.render_declarations()
    r.render_links([i for i in range(len(diagram.links)) if i not in r.placed], indent)

    lines = r.lines
    for name, style in diagram.class_defs.items():
        lines.append(f"{indent}classDef {name} {format_style_props(style)}".rstrip())
    for node_id, classes in diagram.class_assignments.items():
        if r.inline_class(node_id):
            continue
        for class_name in classes:
            lines.append(f"{indent}class {node_id} {class_name}")
    for node_id, style in diagram.node_styles.items():
        lines.append(f"{indent}style {node_id} {format_style_props(style)}")
    for click in diagram.clicks:
        lines.append(indent + _render_click(click))
    for key, style in diagram.link_styles.items():
        lines.append(f"{indent}linkStyle {r.link_style_key(key)} {format_style_props(style)}")
    return "\n".join(lines)

from __future__ import annotations

from ..lexer import quote
from ..types import RenderOptions, resolve_render_options
from .parser import SHAPE_DELIMITERS
from .types import MindmapDiagram, MindmapNode

_DELIMITERS = {shape: (open_, close) for shape, open_, close in SHAPE_DELIMITERS}

_EDGE_CHARS = '[](){}"'


def _needs_quotes(label: str) -> bool:
    return (
        not label
        or label != label.strip()
        or label[0] in _EDGE_CHARS
        or label[-1] in _EDGE_CHARS
    )


def _node_text(node: MindmapNode) -> str:
    if node.shape == "default":
        return node.label
    open_, close = _DELIMITERS[node.shape]
    label = quote(node.label) if _needs_quotes(node.label) else node.label
    node_id = "" if node.id == node.label else node.id
    return f"{node_id}{open_}{label}{close}"


def render_mindmap(diagram: MindmapDiagram, options: RenderOptions | None = None) -> str:
    indent = resolve_render_options(options).indent_unit
    lines = ["mindmap"]

    def emit(node: MindmapNode, depth: int) -> None:
        prefix = indent * depth
        lines.append(prefix + _node_text(node))
        if node.icon:
            lines.append(f"{prefix}::icon({node.icon})")
        if node.css_class:
            lines.append(f"{prefix}:::{node.css_class}")
        for child in node.children:
            emit(child, depth + 1)

    if diagram.root is not None:
        emit(diagram.root, 1)
    return "\n".join(lines)

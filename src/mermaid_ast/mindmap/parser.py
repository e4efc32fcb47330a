from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..detect import HEADER_PATTERNS
from ..lexer import is_quoted, source_lines, split_header, unquote
from .types import MindmapDiagram, MindmapNode, MindmapShape

# (shape, open, close), longest delimiters first
SHAPE_DELIMITERS: tuple[tuple[MindmapShape, str, str], ...] = (
    ("circle", "((", "))"),
    ("bang", "))", "(("),
    ("hexagon", "{{", "}}"),
    ("square", "[", "]"),
    ("rounded", "(", ")"),
    ("cloud", ")", "("),
)

_ID = r"[^\s\[\](){}]*"

_SHAPE_PATTERNS = [
    (shape, re.compile(rf"^(?P<id>{_ID}){re.escape(open_)}(?P<label>.+){re.escape(close)}$"))
    for shape, open_, close in SHAPE_DELIMITERS
]

_ICON_RE = re.compile(r"^::icon\((.*)\)$")
_CLASS_RE = re.compile(r"^:::\s*(.+)$")


@dataclass(slots=True)
class _Node:
    id: str
    label: str
    shape: MindmapShape
    icon: str | None = None
    css_class: str | None = None
    children: list[_Node] = field(default_factory=list)

    def freeze(self) -> MindmapNode:
        return MindmapNode(
            id=self.id,
            label=self.label,
            shape=self.shape,
            icon=self.icon,
            css_class=self.css_class,
            children=tuple(child.freeze() for child in self.children),
        )


def _parse_node(text: str) -> _Node:
    for shape, pattern in _SHAPE_PATTERNS:
        match = pattern.match(text)
        if match:
            raw = match.group("label").strip()
            label = unquote(raw) if is_quoted(raw) else raw
            return _Node(id=match.group("id") or label, label=label, shape=shape)
    return _Node(id=text, label=text, shape="default")


def parse_mindmap(text: str) -> MindmapDiagram:
    """Build the node tree from indentation. Exactly one root is allowed."""
    lines = source_lines(text)
    _, body = split_header(lines, HEADER_PATTERNS["mindmap"])

    root: _Node | None = None
    last: _Node | None = None
    stack: list[tuple[int, _Node]] = []

    for line in body:
        match = _ICON_RE.match(line.text)
        if match:
            if last is None:
                raise line.error("Icon without a preceding node")
            last.icon = match.group(1).strip()
            continue

        match = _CLASS_RE.match(line.text)
        if match:
            if last is None:
                raise line.error("Class without a preceding node")
            last.css_class = match.group(1).strip()
            continue

        node = _parse_node(line.text)
        depth = len(line.indent)
        while stack and stack[-1][0] >= depth:
            stack.pop()
        if stack:
            stack[-1][1].children.append(node)
        elif root is None:
            root = node
        else:
            raise line.error("A mindmap can only have one root node")
        stack.append((depth, node))
        last = node

    return MindmapDiagram(root=root.freeze() if root else None)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MindmapShape = Literal[
    "default", "square", "rounded", "circle", "bang", "cloud", "hexagon"
]


@dataclass(frozen=True, slots=True)
class MindmapNode:
    """A node in the mind map tree.

    When a node is written without an id (``[Label]`` or plain text) the
    id equals the label.
    """

    id: str
    label: str
    shape: MindmapShape = "default"
    icon: str | None = None
    css_class: str | None = None
    children: tuple[MindmapNode, ...] = ()


@dataclass(frozen=True, slots=True)
class MindmapDiagram:
    type: Literal["mindmap"] = field(default="mindmap", init=False)
    root: MindmapNode | None = None

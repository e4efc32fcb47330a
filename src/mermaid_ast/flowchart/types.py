from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from ..types import Direction, frozen_map

# ============================================================================
# Flowchart types
#
# Nodes live in an insertion-ordered map keyed by id, links reference them by
# id. Subgraphs form a tree and list the ids of their direct members.
# ============================================================================

NodeShape = Literal[
    "default",        # bare id
    "square",         # [text]
    "round",          # (text)
    "circle",         # ((text))
    "doublecircle",   # (((text)))
    "ellipse",        # (-text-)
    "stadium",        # ([text])
    "subroutine",     # [[text]]
    "cylinder",       # [(text)]
    "diamond",        # {text}
    "hexagon",        # {{text}}
    "odd",            # >text]
    "trapezoid",      # [/text\]
    "inv_trapezoid",  # [\text/]
    "lean_right",     # [/text/]
    "lean_left",      # [\text\]
]

LinkStroke = Literal["normal", "thick", "dotted"]

LinkArrow = Literal["arrow_point", "arrow_circle", "arrow_cross", "arrow_open"]

ClickKind = Literal["href", "callback"]


@dataclass(frozen=True, slots=True)
class FlowNode:
    id: str
    label: str
    shape: NodeShape = "default"

    @property
    def is_bare(self) -> bool:
        return self.shape == "default" and self.label == self.id


@dataclass(frozen=True, slots=True)
class FlowLink:
    source: str
    target: str
    label: str | None = None
    stroke: LinkStroke = "normal"
    arrow: LinkArrow = "arrow_point"
    # Extra dashes: 1 is ``-->``, 2 is ``--->``
    length: int = 1
    # ``<-->``
    bidirectional: bool = False


@dataclass(frozen=True, slots=True)
class FlowSubgraph:
    id: str
    title: str
    node_ids: tuple[str, ...] = ()
    children: tuple[FlowSubgraph, ...] = ()
    direction: Direction | None = None

    def walk(self):
        """This subgraph and its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True, slots=True)
class FlowClick:
    """``click`` binding. ``target`` is a URL for href, a function name for callbacks."""

    node_id: str
    kind: ClickKind
    target: str
    args: str | None = None
    tooltip: str | None = None
    # Browsing context for href, e.g. ``_blank``
    link_target: str | None = None


@dataclass(frozen=True, slots=True)
class FlowchartDiagram:
    type: Literal["flowchart"] = field(default="flowchart", init=False)
    direction: Direction = "TB"
    nodes: Mapping[str, FlowNode] = field(default_factory=frozen_map)
    links: tuple[FlowLink, ...] = ()
    subgraphs: tuple[FlowSubgraph, ...] = ()
    class_defs: Mapping[str, Mapping[str, str]] = field(default_factory=frozen_map)
    # Style classes per node id, in assignment order
    class_assignments: Mapping[str, tuple[str, ...]] = field(default_factory=frozen_map)
    node_styles: Mapping[str, Mapping[str, str]] = field(default_factory=frozen_map)
    clicks: tuple[FlowClick, ...] = ()
    # Keyed by link index as text, or "default"
    link_styles: Mapping[str, Mapping[str, str]] = field(default_factory=frozen_map)
    acc_title: str | None = None
    acc_description: str | None = None

    def walk_subgraphs(self):
        for subgraph in self.subgraphs:
            yield from subgraph.walk()

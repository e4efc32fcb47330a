from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from ..types import frozen_map


@dataclass(frozen=True, slots=True)
class SankeyNode:
    id: str
    label: str


@dataclass(frozen=True, slots=True)
class SankeyLink:
    source: str
    target: str
    value: float


@dataclass(frozen=True, slots=True)
class SankeyDiagram:
    type: Literal["sankey"] = field(default="sankey", init=False)
    nodes: Mapping[str, SankeyNode] = field(default_factory=frozen_map)
    links: tuple[SankeyLink, ...] = ()

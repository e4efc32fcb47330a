from .builder import FlowchartBuilder, FlowSubgraphBuilder, flowchart
from .parser import parse_flowchart
from .renderer import link_operator, render_flowchart
from .types import (
    FlowchartDiagram,
    FlowClick,
    FlowLink,
    FlowNode,
    FlowSubgraph,
    LinkArrow,
    LinkStroke,
    NodeShape,
)

__all__ = [
    "FlowClick",
    "FlowLink",
    "FlowNode",
    "FlowSubgraph",
    "FlowSubgraphBuilder",
    "FlowchartBuilder",
    "FlowchartDiagram",
    "LinkArrow",
    "LinkStroke",
    "NodeShape",
    "flowchart",
    "link_operator",
    "parse_flowchart",
    "render_flowchart",
]

from .parser import parse_sankey
from .renderer import render_sankey
from .types import SankeyDiagram, SankeyLink, SankeyNode

__all__ = ["SankeyDiagram", "SankeyLink", "SankeyNode", "parse_sankey", "render_sankey"]

from .parser import parse_mindmap
from .renderer import render_mindmap
from .types import MindmapDiagram, MindmapNode

__all__ = ["MindmapDiagram", "MindmapNode", "parse_mindmap", "render_mindmap"]

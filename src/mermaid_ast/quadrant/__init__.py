from .parser import parse_quadrant
from .renderer import render_quadrant
from .types import QuadrantAxis, QuadrantChart, QuadrantPoint

__all__ = [
    "QuadrantAxis",
    "QuadrantChart",
    "QuadrantPoint",
    "parse_quadrant",
    "render_quadrant",
]

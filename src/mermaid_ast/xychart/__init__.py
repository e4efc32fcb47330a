from .parser import parse_xychart
from .renderer import render_xychart
from .types import BandAxis, RangeAxis, XYChart, XYSeries

__all__ = [
    "BandAxis",
    "RangeAxis",
    "XYChart",
    "XYSeries",
    "parse_xychart",
    "render_xychart",
]

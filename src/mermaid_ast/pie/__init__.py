from .parser import parse_pie_async
from .renderer import render_pie
from .types import PieChart, PieSection

__all__ = ["PieChart", "PieSection", "parse_pie_async", "render_pie"]

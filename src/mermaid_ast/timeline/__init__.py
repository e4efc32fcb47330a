from .parser import parse_timeline
from .renderer import render_timeline
from .types import TimelineDiagram, TimelinePeriod, TimelineSection

__all__ = [
    "TimelineDiagram",
    "TimelinePeriod",
    "TimelineSection",
    "parse_timeline",
    "render_timeline",
]

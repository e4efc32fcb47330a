from .parser import parse_journey
from .renderer import render_journey
from .types import JourneyDiagram, JourneySection, JourneyTask

__all__ = [
    "JourneyDiagram",
    "JourneySection",
    "JourneyTask",
    "parse_journey",
    "render_journey",
]

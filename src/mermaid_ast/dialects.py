from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union, get_args

from .class_diagram import ClassDiagram, parse_class_diagram, render_class_diagram
from .detect import detect_or_raise, is_class_diagram, is_er, is_flowchart, is_journey
from .detect import is_mindmap, is_pie, is_quadrant, is_sankey, is_sequence
from .detect import is_state_diagram, is_timeline, is_xychart
from .er import ErDiagram, parse_er_diagram, render_er_diagram
from .errors import AsyncDialectError, UnknownDialectError, assert_never
from .flowchart import FlowchartDiagram, parse_flowchart, render_flowchart
from .journey import JourneyDiagram, parse_journey, render_journey
from .mindmap import MindmapDiagram, parse_mindmap, render_mindmap
from .pie import PieChart, parse_pie_async, render_pie
from .quadrant import QuadrantChart, parse_quadrant, render_quadrant
from .sankey import SankeyDiagram, parse_sankey, render_sankey
from .sequence import SequenceDiagram, parse_sequence_diagram, render_sequence_diagram
from .state import StateDiagram, parse_state_diagram, render_state_diagram
from .timeline import TimelineDiagram, parse_timeline, render_timeline
from .types import DiagramType, RenderOptions
from .xychart import XYChart, parse_xychart, render_xychart

logger = logging.getLogger(__name__)

Diagram = Union[
    FlowchartDiagram,
    SequenceDiagram,
    ClassDiagram,
    StateDiagram,
    PieChart,
    ErDiagram,
    MindmapDiagram,
    QuadrantChart,
    SankeyDiagram,
    TimelineDiagram,
    JourneyDiagram,
    XYChart,
]


# ============================================================================
# Dispatch table
# ============================================================================


@dataclass(frozen=True, slots=True)
class DialectHandlers:
    detect: Callable[[str], bool]
    parse: Callable[[str], Any] | None
    parse_async: Callable[[str], Awaitable[Any]]
    render: Callable[[Any, RenderOptions | None], str]

    @property
    def is_async(self) -> bool:
        """True when only ``parse_async`` can read this dialect."""
        return self.parse is None


def _sync(parse: Callable[[str], Any]) -> Callable[[str], Awaitable[Any]]:
    async def parse_async(text: str) -> Any:
        return parse(text)

    return parse_async


def _handlers(detect, parse, render) -> DialectHandlers:
    return DialectHandlers(detect=detect, parse=parse, parse_async=_sync(parse), render=render)


DIALECTS: dict[DiagramType, DialectHandlers] = {
    "flowchart": _handlers(is_flowchart, parse_flowchart, render_flowchart),
    "sequence": _handlers(is_sequence, parse_sequence_diagram, render_sequence_diagram),
    "class": _handlers(is_class_diagram, parse_class_diagram, render_class_diagram),
    "state": _handlers(is_state_diagram, parse_state_diagram, render_state_diagram),
    "pie": DialectHandlers(
        detect=is_pie, parse=None, parse_async=parse_pie_async, render=render_pie
    ),
    "er": _handlers(is_er, parse_er_diagram, render_er_diagram),
    "mindmap": _handlers(is_mindmap, parse_mindmap, render_mindmap),
    "quadrant": _handlers(is_quadrant, parse_quadrant, render_quadrant),
    "sankey": _handlers(is_sankey, parse_sankey, render_sankey),
    "timeline": _handlers(is_timeline, parse_timeline, render_timeline),
    "journey": _handlers(is_journey, parse_journey, render_journey),
    "xychart": _handlers(is_xychart, parse_xychart, render_xychart),
}

_missing = set(get_args(DiagramType)) - set(DIALECTS)
if _missing:
    raise ImportError(f"No handlers registered for dialects: {sorted(_missing)}")


# ============================================================================
# Entry points
# ============================================================================


def _handlers_for(text: str, dialect: DiagramType | None) -> tuple[DiagramType, DialectHandlers]:
    if dialect is None:
        dialect = detect_or_raise(text)
        logger.debug("Detected %s diagram", dialect)
    handlers = DIALECTS.get(dialect)
    if handlers is None:
        # A hint comes from the caller, so it is input, not a bug
        raise UnknownDialectError(text, dialect)
    return dialect, handlers


def parse(text: str, dialect: DiagramType | None = None) -> Diagram:
    """Parse diagram text, detecting the dialect unless one is given.

    Raises:
        UnknownDialectError: no dialect given and none detected.
        AsyncDialectError: the dialect can only be parsed by ``parse_async``.
        ParseError: malformed input.
    """
    dialect, handlers = _handlers_for(text, dialect)
    if handlers.parse is None:
        raise AsyncDialectError(dialect)
    return handlers.parse(text)


async def parse_async(text: str, dialect: DiagramType | None = None) -> Diagram:
    """Parse diagram text. Works for every dialect."""
    _, handlers = _handlers_for(text, dialect)
    return await handlers.parse_async(text)


def render(diagram: Diagram, options: RenderOptions | None = None) -> str:
    """Render any parsed or built structure as canonical text."""
    handlers = DIALECTS.get(getattr(diagram, "type", None))  # type: ignore[arg-type]
    if handlers is None:
        assert_never(diagram, "diagram structure")
    return handlers.render(diagram, options)

"""mermaid-ast: parse Mermaid diagram text into immutable structures and
render canonical, round-trip stable text."""

from __future__ import annotations

from .class_diagram import class_diagram
from .detect import (
    detect,
    detect_or_raise,
    is_class_diagram,
    is_er,
    is_flowchart,
    is_journey,
    is_mindmap,
    is_pie,
    is_quadrant,
    is_sankey,
    is_sequence,
    is_state_diagram,
    is_timeline,
    is_xychart,
)
from .dialects import DIALECTS, Diagram, DialectHandlers, parse, parse_async, render
from .errors import (
    AsyncDialectError,
    ClassDiagramValidationError,
    FlowchartValidationError,
    MermaidError,
    ParseError,
    SequenceValidationError,
    StateDiagramValidationError,
    UnknownDialectError,
    UnreachableStateError,
    ValidationError,
    assert_never,
)
from .flowchart import flowchart
from .layout import LayoutOptions, PositionedGraph, layout_diagram
from .sequence import sequence
from .state import state_diagram
from .types import BuildOptions, DiagramType, Direction, RenderOptions

__all__ = [
    "DIALECTS",
    "AsyncDialectError",
    "BuildOptions",
    "ClassDiagramValidationError",
    "Diagram",
    "DiagramType",
    "DialectHandlers",
    "Direction",
    "FlowchartValidationError",
    "LayoutOptions",
    "MermaidError",
    "ParseError",
    "PositionedGraph",
    "RenderOptions",
    "SequenceValidationError",
    "StateDiagramValidationError",
    "UnknownDialectError",
    "UnreachableStateError",
    "ValidationError",
    "assert_never",
    "class_diagram",
    "detect",
    "detect_or_raise",
    "flowchart",
    "is_class_diagram",
    "is_er",
    "is_flowchart",
    "is_journey",
    "is_mindmap",
    "is_pie",
    "is_quadrant",
    "is_sankey",
    "is_sequence",
    "is_state_diagram",
    "is_timeline",
    "is_xychart",
    "layout_diagram",
    "parse",
    "parse_async",
    "render",
    "sequence",
    "state_diagram",
]

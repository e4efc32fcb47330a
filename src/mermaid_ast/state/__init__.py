from .builder import StateDiagramBuilder, StateScopeBuilder, state_diagram
from .parser import parse_state_diagram
from .renderer import render_state_diagram
from .types import (
    TERMINAL,
    NotePosition,
    StateDiagram,
    StateKind,
    StateNode,
    StateNote,
    StateTransition,
)

__all__ = [
    "TERMINAL",
    "NotePosition",
    "StateDiagram",
    "StateDiagramBuilder",
    "StateKind",
    "StateNode",
    "StateNote",
    "StateScopeBuilder",
    "StateTransition",
    "parse_state_diagram",
    "render_state_diagram",
    "state_diagram",
]

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from ..types import Direction, frozen_map

# Pseudo-state used for both the initial and the final state.
TERMINAL = "[*]"

StateKind = Literal["default", "fork", "join", "choice", "composite"]

NotePosition = Literal["left of", "right of"]


@dataclass(frozen=True, slots=True)
class StateNode:
    """A state. ``parent`` is the id of the enclosing composite state."""

    id: str
    label: str | None = None
    kind: StateKind = "default"
    parent: str | None = None
    # Layout direction inside a composite state
    direction: Direction | None = None


@dataclass(frozen=True, slots=True)
class StateTransition:
    """``source --> target : label``. ``scope`` is the composite it was
    written in, ``None`` for the top level."""

    source: str
    target: str
    label: str | None = None
    scope: str | None = None


@dataclass(frozen=True, slots=True)
class StateNote:
    state_id: str
    text: str
    position: NotePosition = "right of"


@dataclass(frozen=True, slots=True)
class StateDiagram:
    type: Literal["state"] = field(default="state", init=False)
    direction: Direction = "TB"
    states: Mapping[str, StateNode] = field(default_factory=frozen_map)
    transitions: tuple[StateTransition, ...] = ()
    notes: tuple[StateNote, ...] = ()
    class_defs: Mapping[str, Mapping[str, str]] = field(default_factory=frozen_map)
    class_assignments: Mapping[str, tuple[str, ...]] = field(default_factory=frozen_map)
    acc_title: str | None = None
    acc_description: str | None = None

    def children_of(self, parent: str | None) -> list[StateNode]:
        return [s for s in self.states.values() if s.parent == parent]

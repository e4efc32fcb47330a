from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping

from ..errors import StateDiagramValidationError
from ..lexer import parse_style_props
from ..types import BuildOptions, Direction
from ..validation import ReferenceLog, should_validate
from .parser import _StateContext
from .types import TERMINAL, NotePosition, StateDiagram, StateNote, StateTransition

logger = logging.getLogger(__name__)


class _StateScope:
    """Statements shared by the top level and composite states."""

    def __init__(self, root: StateDiagramBuilder, scope: str | None) -> None:
        self._root = root
        self._scope = scope

    def state(self, state_id: str, label: str | None = None):
        draft = self._root._ctx.declare(state_id, self._scope)
        if label is not None:
            draft.label = label
        return self

    def fork(self, state_id: str):
        self._root._ctx.declare(state_id, self._scope).kind = "fork"
        return self

    def join(self, state_id: str):
        self._root._ctx.declare(state_id, self._scope).kind = "join"
        return self

    def choice(self, state_id: str):
        self._root._ctx.declare(state_id, self._scope).kind = "choice"
        return self

    def composite(
        self,
        state_id: str,
        fn: Callable[[StateScopeBuilder], object],
        label: str | None = None,
        direction: Direction | None = None,
    ):
        """Declare a composite state; ``fn`` fills in its contents."""
        draft = self._root._ctx.declare(state_id, self._scope)
        draft.kind = "composite"
        if label is not None:
            draft.label = label
        if direction is not None:
            draft.direction = direction
        fn(StateScopeBuilder(self._root, state_id))
        return self

    def transition(self, source: str, target: str, label: str | None = None):
        construct = f"transition {source} --> {target}"
        self._root._refs.entity(source, construct)
        self._root._refs.entity(target, construct)
        self._root._ctx.transitions.append(StateTransition(
            source=source, target=target, label=label, scope=self._scope
        ))
        return self

    def initial(self, target: str, label: str | None = None):
        return self.transition(TERMINAL, target, label)

    def final(self, source: str, label: str | None = None):
        return self.transition(source, TERMINAL, label)

    def note(self, state_id: str, text: str, position: NotePosition = "right of"):
        self._root._refs.entity(state_id, f"note {position} {state_id}")
        self._root._ctx.notes.append(StateNote(state_id=state_id, text=text, position=position))
        return self


class StateScopeBuilder(_StateScope):
    """Builder handed to ``composite`` callbacks."""

    def direction(self, direction: Direction) -> StateScopeBuilder:
        self._root._ctx.states[self._scope].direction = direction
        return self


class StateDiagramBuilder(_StateScope):
    """Fluent builder for ``stateDiagram-v2`` structures.

    ``[*]`` is always a valid transition endpoint. Every other name must be
    declared with ``state``, ``fork``, ``join``, ``choice`` or ``composite``.
    """

    def __init__(self, direction: Direction = "TB") -> None:
        super().__init__(self, None)
        self._ctx = _StateContext(direction=direction)
        self._refs = ReferenceLog()

    def class_def(self, name: str, style: Mapping[str, str] | str) -> StateDiagramBuilder:
        if isinstance(style, str):
            style = parse_style_props(style)
        self._ctx.class_defs[name] = dict(style)
        return self

    def assign_class(self, state_ids: str | Iterable[str], name: str) -> StateDiagramBuilder:
        if isinstance(state_ids, str):
            state_ids = [state_ids]
        for state_id in state_ids:
            construct = f"class {state_id} {name}"
            self._refs.entity(state_id, construct)
            self._refs.class_def(name, construct)
            classes = self._ctx.class_assignments.setdefault(state_id, [])
            if name not in classes:
                classes.append(name)
        return self

    def acc_title(self, title: str) -> StateDiagramBuilder:
        self._ctx.acc["title"] = title
        return self

    def acc_description(self, description: str) -> StateDiagramBuilder:
        self._ctx.acc["description"] = description
        return self

    def build(self, options: BuildOptions | None = None) -> StateDiagram:
        if should_validate(options, "state"):
            known = set(self._ctx.states)
            known.add(TERMINAL)
            self._refs.check(known, self._ctx.class_defs, StateDiagramValidationError)
        diagram = self._ctx.freeze()
        logger.debug(
            "Built state diagram: %d states, %d transitions",
            len(diagram.states),
            len(diagram.transitions),
        )
        return diagram


def state_diagram(direction: Direction = "TB") -> StateDiagramBuilder:
    return StateDiagramBuilder(direction)

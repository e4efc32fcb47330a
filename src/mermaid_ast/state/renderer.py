from __future__ import annotations

from ..lexer import accessibility_lines, format_style_props, quote
from ..types import RenderOptions, resolve_render_options
from .types import StateDiagram, StateNode, StateNote, StateTransition


def _render_transition(t: StateTransition) -> str:
    text = f"{t.source} --> {t.target}"
    if t.label:
        text += f" : {t.label}"
    return text


def _render_note(note: StateNote, prefix: str, indent: str) -> list[str]:
    head = f"{prefix}note {note.position} {note.state_id}"
    parts = [part.strip() for part in note.text.split("\n") if part.strip()]
    if len(parts) < 2:
        return [f"{head} : {parts[0]}" if parts else f"{head} :"]
    lines = [head]
    lines.extend(prefix + indent + part for part in parts)
    lines.append(f"{prefix}end note")
    return lines


class _RegionRenderer:
    """Renders one scope (the top level or a composite state) at a time."""

    def __init__(self, diagram: StateDiagram, options: RenderOptions) -> None:
        self.diagram = diagram
        self.options = options
        self.indent = options.indent_unit
        self.lines: list[str] = []
        # Scopes of the transitions naming each state. A state left
        # undeclared is re-created in the scope of its first transition.
        self.reference_scopes: dict[str, set[str | None]] = {}
        for t in diagram.transitions:
            self.reference_scopes.setdefault(t.source, set()).add(t.scope)
            self.reference_scopes.setdefault(t.target, set()).add(t.scope)

    def _note_scope(self, note: StateNote) -> str | None:
        state = self.diagram.states.get(note.state_id)
        return state.parent if state else None

    def render(self, scope: str | None, depth: int) -> None:
        prefix = self.indent * depth
        states = self.diagram.children_of(scope)
        if self.options.sort_entities:
            states.sort(key=lambda s: s.id)
        for state in states:
            self._render_state(state, prefix, depth)
        for t in self.diagram.transitions:
            if t.scope == scope:
                self.lines.append(prefix + _render_transition(t))
        for note in self.diagram.notes:
            if self._note_scope(note) == scope:
                self.lines.extend(_render_note(note, prefix, self.indent))

    def _render_state(self, state: StateNode, prefix: str, depth: int) -> None:
        if state.kind == "composite":
            head = f"state {state.id}"
            if state.label is not None:
                head = f"state {quote(state.label)} as {state.id}"
            self.lines.append(f"{prefix}{head} {{")
            if state.direction:
                self.lines.append(f"{prefix}{self.indent}direction {state.direction}")
            self.render(state.id, depth + 1)
            self.lines.append(prefix + "}")
        elif state.kind != "default":
            self.lines.append(f"{prefix}state {state.id} <<{state.kind}>>")
        elif state.label is not None:
            self.lines.append(f"{prefix}{state.id} : {state.label}".rstrip())
        elif self.reference_scopes.get(state.id) != {state.parent}:
            self.lines.append(prefix + state.id)


def render_state_diagram(
    diagram: StateDiagram, options: RenderOptions | None = None
) -> str:
    opts = resolve_render_options(options)
    indent = opts.indent_unit
    lines = ["stateDiagram-v2"]
    if diagram.direction != "TB":
        lines.append(f"{indent}direction {diagram.direction}")
    lines.extend(accessibility_lines(indent, diagram.acc_title, diagram.acc_description))

    region = _RegionRenderer(diagram, opts)
    region.render(None, 1)
    lines.extend(region.lines)

    for name, style in diagram.class_defs.items():
        lines.append(f"{indent}classDef {name} {format_style_props(style)}".rstrip())
    for state_id, classes in diagram.class_assignments.items():
        for class_name in classes:
            lines.append(f"{indent}class {state_id} {class_name}")
    return "\n".join(lines)

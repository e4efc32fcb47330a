from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..detect import HEADER_PATTERNS
from ..lexer import (
    SourceLine,
    match_accessibility,
    parse_style_props,
    source_lines,
    split_header,
    unquote,
)
from ..types import frozen_map
from .types import TERMINAL, StateDiagram, StateKind, StateNode, StateNote, StateTransition

# ============================================================================
# State diagram parser
#
# Supported syntax:
#   state "Label" as Id          alias
#   Id : description
#   state Id <<fork|join|choice>>
#   state Id { ... }             composite state
#   A --> B : label              transition, [*] for start/end
#   note left of A : text        (or multi-line, closed by "end note")
#   classDef name fill:#f00      class A,B name
# ============================================================================

_DIRECTION_RE = re.compile(r"^direction\s+(TD|TB|LR|BT|RL)\s*$", re.IGNORECASE)
_COMPOSITE_RE = re.compile(r'^state\s+(?:("[^"]*")\s+as\s+)?([\w-]+)\s*\{$')
_ALIAS_RE = re.compile(r'^state\s+("[^"]*")\s+as\s+([\w-]+)$')
_PSEUDO_RE = re.compile(r"^state\s+([\w-]+)\s*<<(fork|join|choice)>>$", re.IGNORECASE)
_STATE_RE = re.compile(r"^state\s+([\w-]+)$")
_TRANSITION_RE = re.compile(
    r"^(\[\*\]|[\w-]+)\s*-->\s*(\[\*\]|[\w-]+)(?:\s*:\s*(.*))?$"
)
_DESCRIPTION_RE = re.compile(r"^([\w-]+)\s*:\s*(.*)$")
_NOTE_RE = re.compile(
    r"^note\s+(left of|right of)\s+([\w-]+)\s*(?::\s*(.*))?$", re.IGNORECASE
)
_END_NOTE_RE = re.compile(r"^end\s+note$", re.IGNORECASE)
_CLASS_DEF_RE = re.compile(r"^classDef\s+([\w-]+)(?:\s+(.*))?$")
_CLASS_RE = re.compile(r"^class\s+([\w-]+(?:\s*,\s*[\w-]+)*)\s+([\w-]+)$")
_BARE_RE = re.compile(r"^([\w-]+)$")


@dataclass(slots=True)
class _StateDraft:
    id: str
    parent: str | None
    label: str | None = None
    kind: StateKind = "default"
    direction: str | None = None
    declared: bool = False


@dataclass(slots=True)
class _OpenNote:
    state_id: str
    position: str
    opened_at: SourceLine
    lines: list[str] = field(default_factory=list)


@dataclass(slots=True)
class _StateContext:
    direction: str = "TB"
    states: dict[str, _StateDraft] = field(default_factory=dict)
    transitions: list[StateTransition] = field(default_factory=list)
    notes: list[StateNote] = field(default_factory=list)
    class_defs: dict[str, dict[str, str]] = field(default_factory=dict)
    class_assignments: dict[str, list[str]] = field(default_factory=dict)
    acc: dict[str, str] = field(default_factory=dict)

    def declare(self, state_id: str, scope: str | None) -> _StateDraft:
        """Register an explicit declaration.

        A state first seen in a transition is moved to the declaration's
        scope and position.
        """
        draft = self.states.get(state_id)
        if draft is None:
            draft = _StateDraft(id=state_id, parent=scope, declared=True)
            self.states[state_id] = draft
        elif not draft.declared:
            del self.states[state_id]
            draft.parent = scope
            draft.declared = True
            self.states[state_id] = draft
        return draft

    def reference(self, state_id: str, scope: str | None) -> None:
        if state_id != TERMINAL and state_id not in self.states:
            self.states[state_id] = _StateDraft(id=state_id, parent=scope)

    def freeze(self) -> StateDiagram:
        return StateDiagram(
            direction=self.direction,
            states=frozen_map({
                sid: StateNode(
                    id=d.id,
                    label=d.label,
                    kind=d.kind,
                    parent=d.parent,
                    direction=d.direction,
                )
                for sid, d in self.states.items()
            }),
            transitions=tuple(self.transitions),
            notes=tuple(self.notes),
            class_defs=frozen_map({k: frozen_map(v) for k, v in self.class_defs.items()}),
            class_assignments=frozen_map(
                {k: tuple(v) for k, v in self.class_assignments.items()}
            ),
            acc_title=self.acc.get("title"),
            acc_description=self.acc.get("description"),
        )


def parse_state_diagram(text: str) -> StateDiagram:
    lines = source_lines(text, strip_semicolon=True)
    header, body = split_header(lines, HEADER_PATTERNS["state"])
    if header and header.group("rest").strip():
        raise lines[0].error("Unexpected text after stateDiagram header")

    ctx = _StateContext()
    composite_stack: list[tuple[str, SourceLine]] = []
    open_note: _OpenNote | None = None

    for line in body:
        scope = composite_stack[-1][0] if composite_stack else None

        # --- multi-line note body ---
        if open_note is not None:
            if _END_NOTE_RE.match(line.text):
                ctx.notes.append(StateNote(
                    state_id=open_note.state_id,
                    text="\n".join(open_note.lines),
                    position=open_note.position,  # type: ignore[arg-type]
                ))
                open_note = None
            else:
                open_note.lines.append(line.text)
            continue

        acc = match_accessibility(line.text)
        if acc:
            ctx.acc[acc[0]] = acc[1]
            continue

        # --- direction override ---
        m = _DIRECTION_RE.match(line.text)
        if m:
            if composite_stack:
                ctx.states[scope].direction = m.group(1).upper()
            else:
                ctx.direction = m.group(1).upper()
            continue

        # --- composite state start ---
        m = _COMPOSITE_RE.match(line.text)
        if m:
            draft = ctx.declare(m.group(2), scope)
            draft.kind = "composite"
            if m.group(1):
                draft.label = unquote(m.group(1))
            composite_stack.append((draft.id, line))
            continue

        # --- composite state end ---
        if line.text == "}":
            if not composite_stack:
                raise line.error("Unexpected '}' outside a composite state")
            composite_stack.pop()
            continue

        m = _ALIAS_RE.match(line.text)
        if m:
            ctx.declare(m.group(2), scope).label = unquote(m.group(1))
            continue

        m = _PSEUDO_RE.match(line.text)
        if m:
            ctx.declare(m.group(1), scope).kind = m.group(2).lower()
            continue

        m = _STATE_RE.match(line.text)
        if m:
            ctx.declare(m.group(1), scope)
            continue

        m = _NOTE_RE.match(line.text)
        if m:
            position = m.group(1).lower()
            if m.group(3) is None:
                open_note = _OpenNote(state_id=m.group(2), position=position, opened_at=line)
            else:
                ctx.notes.append(StateNote(
                    state_id=m.group(2),
                    text=m.group(3).strip(),
                    position=position,  # type: ignore[arg-type]
                ))
            continue

        m = _CLASS_DEF_RE.match(line.text)
        if m:
            ctx.class_defs[m.group(1)] = parse_style_props(m.group(2) or "")
            continue

        m = _CLASS_RE.match(line.text)
        if m:
            for state_id in re.split(r"\s*,\s*", m.group(1)):
                classes = ctx.class_assignments.setdefault(state_id, [])
                if m.group(2) not in classes:
                    classes.append(m.group(2))
            continue

        # --- transition ---
        m = _TRANSITION_RE.match(line.text)
        if m:
            ctx.reference(m.group(1), scope)
            ctx.reference(m.group(2), scope)
            ctx.transitions.append(StateTransition(
                source=m.group(1),
                target=m.group(2),
                label=(m.group(3) or "").strip() or None,
                scope=scope,
            ))
            continue

        # --- state description ---
        m = _DESCRIPTION_RE.match(line.text)
        if m:
            ctx.declare(m.group(1), scope).label = m.group(2).strip()
            continue

        m = _BARE_RE.match(line.text)
        if m:
            ctx.declare(m.group(1), scope)
            continue

        raise line.error(f"Invalid state diagram statement: {line.text!r}")

    if open_note is not None:
        raise open_note.opened_at.error("Unclosed note, expected 'end note'")
    if composite_stack:
        state_id, opened_at = composite_stack[-1]
        raise opened_at.error(f"Unclosed composite state '{state_id}'")

    return ctx.freeze()

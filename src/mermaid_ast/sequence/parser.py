from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..detect import HEADER_PATTERNS
from ..lexer import SourceLine, match_accessibility, source_lines, split_header
from ..types import frozen_map
from .types import (
    ARROWS,
    SECTION_KEYWORDS,
    Activation,
    Autonumber,
    Block,
    Message,
    Note,
    Section,
    SectionedBlock,
    SequenceActor,
    SequenceBox,
    SequenceDiagram,
    Statement,
)

# ============================================================================
# Sequence diagram parser
#
# Parses Mermaid sequenceDiagram syntax into a SequenceDiagram structure.
#
# Supported syntax:
#   participant A as Alice
#   actor B as Bob
#   box Aqua Group ... end
#   A->>B: Solid arrow
#   A-->>B: Dashed arrow
#   A-)B: Async arrow
#   A-xB: Cross arrow
#   A<<->>B: Bidirectional arrow
#   A->>+B: Activate target
#   A-->>-B: Deactivate source
#   activate A / deactivate A
#   loop Label ... end          (also opt, break, rect)
#   alt Label ... else Label ... end
#   par Label ... and Label ... end
#   critical Label ... option Label ... end
#   Note left of A: Text
#   Note right of A: Text
#   Note over A,B: Text
#   autonumber [start [step]] / autonumber off
#   title Text
# ============================================================================

# Inner hyphens are allowed. ``A-xB`` still reads as A, cross arrow, B.
_ACTOR_ID = r"[\w.@$]+(?:-[\w.@$]+)*"
_ARROW = "|".join(re.escape(arrow) for arrow in ARROWS)

# Compiled regex patterns
_ACTOR_RE = re.compile(rf"^(participant|actor)\s+({_ACTOR_ID})(?:\s+as\s+(.+))?$")
_BOX_RE = re.compile(r"^box(?:\s+(.*))?$")
_NOTE_RE = re.compile(
    rf"^note\s+(left of|right of|over)\s+({_ACTOR_ID}(?:\s*,\s*{_ACTOR_ID})?)\s*:\s*(.*)$",
    re.IGNORECASE,
)
_BLOCK_RE = re.compile(r"^(loop|opt|break|rect|alt|par|critical)(?:\s+(.*))?$")
_DIVIDER_RE = re.compile(r"^(else|and|option)(?:\s+(.*))?$")
_ACTIVATION_RE = re.compile(rf"^(activate|deactivate)\s+({_ACTOR_ID})$")
_AUTONUMBER_RE = re.compile(r"^autonumber(?:\s+(\d+))?(?:\s+(\d+))?$")
_AUTONUMBER_OFF_RE = re.compile(r"^autonumber\s+off$")
_TITLE_RE = re.compile(r"^title(?:\s*:\s*|\s+)(.*)$")
_MSG_RE = re.compile(
    rf"^(?P<from>{_ACTOR_ID})\s*(?P<arrow>{_ARROW})\s*(?P<mark>[+-]?)\s*"
    rf"(?P<to>{_ACTOR_ID})\s*(?::\s*(?P<text>.*))?$"
)

# Box colours are recognised by form or by name; anything else is label text.
_COLOR_RE = re.compile(
    r"^(?:rgba?\([^)]*\)|hsla?\([^)]*\)|#[0-9a-fA-F]{3,8}|transparent|"
    r"aqua|black|blue|fuchsia|gold|gray|green|grey|lavender|lightblue|lightgreen|"
    r"lightgrey|lightyellow|lime|maroon|navy|olive|orange|pink|purple|red|silver|"
    r"teal|white|yellow)$",
    re.IGNORECASE,
)
_BOX_COLOR_RE = re.compile(r"^(rgba?\([^)]*\)|hsla?\([^)]*\)|\S+)(?:\s+(.*))?$")


@dataclass(slots=True)
class _Frame:
    """An open block. Simple blocks keep exactly one section."""

    type: str
    opened_at: SourceLine
    sections: list[tuple[str, list[Statement]]] = field(default_factory=list)

    @property
    def statements(self) -> list[Statement]:
        return self.sections[-1][1]

    def close(self) -> Statement:
        if self.type in SECTION_KEYWORDS:
            return SectionedBlock(
                type=self.type,  # type: ignore[arg-type]
                sections=tuple(
                    Section(label=label, statements=tuple(stmts))
                    for label, stmts in self.sections
                ),
            )
        label, stmts = self.sections[0]
        return Block(type=self.type, label=label, statements=tuple(stmts))  # type: ignore[arg-type]


@dataclass(slots=True)
class _OpenBox:
    label: str | None
    color: str | None
    opened_at: SourceLine
    actor_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class _SequenceContext:
    title: str | None = None
    actors: dict[str, SequenceActor] = field(default_factory=dict)
    boxes: list[SequenceBox] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)
    acc: dict[str, str] = field(default_factory=dict)

    def ensure_actor(self, actor_id: str) -> None:
        """Ensure an actor exists, creating a default participant if not."""
        if actor_id not in self.actors:
            self.actors[actor_id] = SequenceActor(id=actor_id, label=actor_id)

    def freeze(self) -> SequenceDiagram:
        return SequenceDiagram(
            title=self.title,
            actors=frozen_map(self.actors),
            boxes=tuple(self.boxes),
            statements=tuple(self.statements),
            acc_title=self.acc.get("title"),
            acc_description=self.acc.get("description"),
        )


def parse_sequence_diagram(text: str) -> SequenceDiagram:
    """Parse a Mermaid sequence diagram.

    The ``sequenceDiagram`` header is optional. Actors referenced before
    they are declared become plain participants.
    """
    lines = source_lines(text, strip_semicolon=True)
    _, body = split_header(lines, HEADER_PATTERNS["sequence"])

    ctx = _SequenceContext()
    # Track block nesting with a stack
    frames: list[_Frame] = []
    box: _OpenBox | None = None

    def emit(stmt: Statement) -> None:
        (frames[-1].statements if frames else ctx.statements).append(stmt)

    for line in body:
        # --- Participant / Actor declaration ---
        actor_match = _ACTOR_RE.match(line.text)
        if actor_match:
            actor_id = actor_match.group(2)
            label = (actor_match.group(3) or "").strip() or actor_id
            ctx.actors[actor_id] = SequenceActor(
                id=actor_id,
                label=label,
                type=actor_match.group(1),  # type: ignore[arg-type]
            )
            if box is not None and actor_id not in box.actor_ids:
                box.actor_ids.append(actor_id)
            continue

        if box is not None:
            if line.text == "end":
                ctx.boxes.append(SequenceBox(
                    label=box.label, color=box.color, actor_ids=tuple(box.actor_ids)
                ))
                box = None
                continue
            raise line.error("Only participant and actor declarations may appear in a box")

        acc_match = match_accessibility(line.text)
        if acc_match:
            ctx.acc[acc_match[0]] = acc_match[1]
            continue

        title_match = _TITLE_RE.match(line.text)
        if title_match:
            ctx.title = title_match.group(1).strip()
            continue

        box_match = _BOX_RE.match(line.text)
        if box_match:
            if frames:
                raise line.error("A box cannot be opened inside a block")
            label, color = _parse_box_header(box_match.group(1) or "")
            box = _OpenBox(label=label, color=color, opened_at=line)
            continue

        # --- Note ---
        # "Note left of A: text" / "Note right of A: text" / "Note over A,B: text"
        note_match = _NOTE_RE.match(line.text)
        if note_match:
            actor_ids = tuple(s.strip() for s in note_match.group(2).split(","))
            position = note_match.group(1).lower()
            if len(actor_ids) > 1 and position != "over":
                raise line.error(f"'{position}' notes take a single participant")
            for actor_id in actor_ids:
                ctx.ensure_actor(actor_id)
            emit(Note(
                position=position,  # type: ignore[arg-type]
                actor_ids=actor_ids,
                text=note_match.group(3).strip(),
            ))
            continue

        # --- Block start: loop, alt, opt, par, critical, break, rect ---
        block_match = _BLOCK_RE.match(line.text)
        if block_match:
            frame = _Frame(type=block_match.group(1), opened_at=line)
            frame.sections.append(((block_match.group(2) or "").strip(), []))
            frames.append(frame)
            continue

        # --- Block divider: else, and, option ---
        divider_match = _DIVIDER_RE.match(line.text)
        if divider_match:
            keyword = divider_match.group(1)
            if not frames or SECTION_KEYWORDS.get(frames[-1].type) != keyword:  # type: ignore[call-overload]
                raise line.error(f"'{keyword}' outside a matching block")
            frames[-1].sections.append(((divider_match.group(2) or "").strip(), []))
            continue

        # --- Block end ---
        if line.text == "end":
            if not frames:
                raise line.error("Unexpected 'end'")
            emit(frames.pop().close())
            continue

        activation_match = _ACTIVATION_RE.match(line.text)
        if activation_match:
            ctx.ensure_actor(activation_match.group(2))
            emit(Activation(
                actor_id=activation_match.group(2),
                active=activation_match.group(1) == "activate",
            ))
            continue

        if _AUTONUMBER_OFF_RE.match(line.text):
            emit(Autonumber(enabled=False))
            continue

        autonumber_match = _AUTONUMBER_RE.match(line.text)
        if autonumber_match:
            start, step = autonumber_match.groups()
            emit(Autonumber(
                start=int(start) if start else None,
                step=int(step) if step else None,
            ))
            continue

        # --- Message ---
        # Format: FROM ARROW [+|-] TO: LABEL
        msg_match = _MSG_RE.match(line.text)
        if msg_match:
            # Ensure both actors exist
            ctx.ensure_actor(msg_match.group("from"))
            ctx.ensure_actor(msg_match.group("to"))
            mark = msg_match.group("mark")
            emit(Message(
                from_=msg_match.group("from"),
                to=msg_match.group("to"),
                text=(msg_match.group("text") or "").strip(),
                arrow=msg_match.group("arrow"),  # type: ignore[arg-type]
                activate=mark == "+",
                deactivate=mark == "-",
            ))
            continue

        raise line.error(f"Invalid sequence statement: {line.text!r}")

    if box is not None:
        raise box.opened_at.error("Unclosed box, expected 'end'")
    if frames:
        raise frames[-1].opened_at.error(f"Unclosed '{frames[-1].type}' block")

    return ctx.freeze()


def _parse_box_header(rest: str) -> tuple[str | None, str | None]:
    """Split ``box [color] [label]`` into ``(label, color)``."""
    rest = rest.strip()
    if not rest:
        return None, None
    match = _BOX_COLOR_RE.match(rest)
    if match and _COLOR_RE.match(match.group(1)):
        return (match.group(2) or "").strip() or None, match.group(1)
    return rest, None

from __future__ import annotations

from ..errors import assert_never
from ..lexer import accessibility_lines
from ..types import RenderOptions, resolve_render_options
from .types import (
    SECTION_KEYWORDS,
    Activation,
    Autonumber,
    Block,
    Message,
    Note,
    SectionedBlock,
    SequenceActor,
    SequenceBox,
    SequenceDiagram,
    Statement,
)


def _render_actor(actor: SequenceActor) -> str:
    if actor.label != actor.id:
        return f"{actor.type} {actor.id} as {actor.label}"
    return f"{actor.type} {actor.id}"


def _render_box_header(box: SequenceBox) -> str:
    parts = ["box"]
    if box.color:
        parts.append(box.color)
    if box.label:
        parts.append(box.label)
    return " ".join(parts)


def _render_message(msg: Message) -> str:
    mark = "+" if msg.activate else "-" if msg.deactivate else ""
    head = f"{msg.from_}{msg.arrow}{mark}{msg.to}"
    text = msg.text.strip()
    return f"{head}: {text}" if text else head


def _render_autonumber(stmt: Autonumber) -> str:
    if not stmt.enabled:
        return "autonumber off"
    parts = ["autonumber"]
    if stmt.start is not None:
        parts.append(str(stmt.start))
        if stmt.step is not None:
            parts.append(str(stmt.step))
    return " ".join(parts)


def _render_statements(
    statements: tuple[Statement, ...], depth: int, indent: str, lines: list[str]
) -> None:
    prefix = indent * depth
    for stmt in statements:
        if isinstance(stmt, Message):
            lines.append(prefix + _render_message(stmt))
        elif isinstance(stmt, Note):
            actors = ",".join(stmt.actor_ids)
            lines.append(f"{prefix}Note {stmt.position} {actors}: {stmt.text}".rstrip())
        elif isinstance(stmt, Activation):
            keyword = "activate" if stmt.active else "deactivate"
            lines.append(f"{prefix}{keyword} {stmt.actor_id}")
        elif isinstance(stmt, Autonumber):
            lines.append(prefix + _render_autonumber(stmt))
        elif isinstance(stmt, Block):
            lines.append(f"{prefix}{stmt.type} {stmt.label}".rstrip())
            _render_statements(stmt.statements, depth + 1, indent, lines)
            lines.append(prefix + "end")
        elif isinstance(stmt, SectionedBlock):
            keyword = stmt.type
            for section in stmt.sections:
                lines.append(f"{prefix}{keyword} {section.label}".rstrip())
                _render_statements(section.statements, depth + 1, indent, lines)
                keyword = SECTION_KEYWORDS[stmt.type]
            lines.append(prefix + "end")
        else:
            assert_never(stmt, "sequence statement")


def render_sequence_diagram(
    diagram: SequenceDiagram, options: RenderOptions | None = None
) -> str:
    """Render canonical ``sequenceDiagram`` text.

    Every actor is declared up front, boxed ones first, so the actor order
    survives a round trip.
    """
    opts = resolve_render_options(options)
    indent = opts.indent_unit
    lines = ["sequenceDiagram"]
    if diagram.title:
        lines.append(f"{indent}title {diagram.title}")
    lines.extend(accessibility_lines(indent, diagram.acc_title, diagram.acc_description))

    declared: set[str] = set()
    for box in diagram.boxes:
        lines.append(indent + _render_box_header(box))
        for actor_id in box.actor_ids:
            actor = diagram.actors.get(actor_id, SequenceActor(actor_id, actor_id))
            lines.append(indent * 2 + _render_actor(actor))
            declared.add(actor_id)
        lines.append(indent + "end")

    actors = [a for a in diagram.actors.values() if a.id not in declared]
    if opts.sort_entities:
        actors.sort(key=lambda a: a.id)
    for actor in actors:
        lines.append(indent + _render_actor(actor))

    _render_statements(diagram.statements, 1, indent, lines)
    return "\n".join(lines)

from __future__ import annotations

import re

from ..lexer import accessibility_lines, quote
from ..types import RenderOptions, resolve_render_options
from .types import Cardinality, ErAttribute, ErDiagram, ErEntity, ErRelationship

_LEFT_SYMBOL: dict[Cardinality, str] = {
    "one": "||",
    "zero-one": "|o",
    "many": "}|",
    "zero-many": "}o",
}

_RIGHT_SYMBOL: dict[Cardinality, str] = {
    "one": "||",
    "zero-one": "o|",
    "many": "|{",
    "zero-many": "o{",
}

_BARE_LABEL_RE = re.compile(r"^[\w-]+$")


def _render_attribute(attr: ErAttribute) -> str:
    parts = [attr.type, attr.name]
    if attr.keys:
        parts.append(", ".join(attr.keys))
    if attr.comment is not None:
        parts.append(quote(attr.comment))
    return " ".join(parts)


def _render_relationship(rel: ErRelationship) -> str:
    line = "--" if rel.identifying else ".."
    arrow = f"{_LEFT_SYMBOL[rel.cardinality1]}{line}{_RIGHT_SYMBOL[rel.cardinality2]}"
    label = rel.label if _BARE_LABEL_RE.match(rel.label) else quote(rel.label)
    return f"{rel.entity1} {arrow} {rel.entity2} : {label}"


def _render_entity(entity: ErEntity, indent: str) -> list[str]:
    head = entity.id
    if entity.label != entity.id:
        head += f"[{quote(entity.label)}]"
    if not entity.attributes:
        return [indent + head]
    lines = [f"{indent}{head} {{"]
    lines.extend(indent * 2 + _render_attribute(a) for a in entity.attributes)
    lines.append(indent + "}")
    return lines


def render_er_diagram(diagram: ErDiagram, options: RenderOptions | None = None) -> str:
    """Render canonical ``erDiagram`` text.

    Entities only referenced by relationships are left implicit.
    """
    opts = resolve_render_options(options)
    indent = opts.indent_unit
    lines = ["erDiagram"]
    if diagram.direction != "TB":
        lines.append(f"{indent}direction {diagram.direction}")
    lines.extend(accessibility_lines(indent, diagram.acc_title, diagram.acc_description))

    referenced = set()
    for rel in diagram.relationships:
        referenced.add(rel.entity1)
        referenced.add(rel.entity2)

    entities = list(diagram.entities.values())
    if opts.sort_entities:
        entities.sort(key=lambda e: e.id)
    for entity in entities:
        if entity.attributes or entity.label != entity.id or entity.id not in referenced:
            lines.extend(_render_entity(entity, indent))

    for rel in diagram.relationships:
        lines.append(indent + _render_relationship(rel))
    return "\n".join(lines)

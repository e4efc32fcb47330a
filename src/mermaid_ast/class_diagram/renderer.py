from __future__ import annotations

from ..lexer import accessibility_lines, format_style_props, quote
from ..types import RenderOptions, resolve_render_options
from .types import (
    ClassDiagram,
    ClassMember,
    ClassNode,
    ClassRelationship,
    RelationEnd,
)

# Arrow text for each end of a relationship line
_LEFT_MARKERS: dict[RelationEnd, str] = {
    "none": "",
    "extension": "<|",
    "composition": "*",
    "aggregation": "o",
    "dependency": "<",
    "lollipop": "()",
}

_RIGHT_MARKERS: dict[RelationEnd, str] = {
    "none": "",
    "extension": "|>",
    "composition": "*",
    "aggregation": "o",
    "dependency": ">",
    "lollipop": "()",
}


def render_member(member: ClassMember) -> str:
    """Format a member the way the parser reads it back.

    Attributes: ``+String name``. Methods: ``+eat(food) bool``.
    """
    marker = "$" if member.is_static else "*" if member.is_abstract else ""
    if member.is_method:
        text = f"{member.visibility}{member.name}({member.params}){marker}"
        if member.type:
            text += f" {member.type}"
        return text
    type_prefix = f"{member.type} " if member.type else ""
    return f"{member.visibility}{type_prefix}{member.name}{marker}"


def _render_relationship(rel: ClassRelationship) -> str:
    line = "--" if rel.line == "solid" else ".."
    parts = [rel.from_]
    if rel.from_cardinality is not None:
        parts.append(quote(rel.from_cardinality))
    parts.append(f"{_LEFT_MARKERS[rel.from_end]}{line}{_RIGHT_MARKERS[rel.to_end]}")
    if rel.to_cardinality is not None:
        parts.append(quote(rel.to_cardinality))
    parts.append(rel.to)
    text = " ".join(parts)
    if rel.label:
        text += f" : {rel.label}"
    return text


def _has_body(cls: ClassNode) -> bool:
    return bool(cls.annotation or cls.attributes or cls.methods)


def _render_class(cls: ClassNode, prefix: str, indent: str) -> list[str]:
    head = f"class {cls.id}"
    if cls.generic:
        head += f"~{cls.generic}~"
    if cls.label != cls.id:
        head += f"[{quote(cls.label)}]"
    if not _has_body(cls):
        return [prefix + head]

    body: list[str] = []
    if cls.annotation:
        body.append(f"<<{cls.annotation}>>")
    body.extend(render_member(m) for m in cls.attributes)
    body.extend(render_member(m) for m in cls.methods)
    return [
        f"{prefix}{head} {{",
        *(prefix + indent + line for line in body),
        prefix + "}",
    ]


def render_class_diagram(
    diagram: ClassDiagram, options: RenderOptions | None = None
) -> str:
    """Render canonical ``classDiagram`` text.

    Namespaces come first and carry the full declaration of their members.
    Classes that are plain and referenced by a relationship stay implicit.
    """
    opts = resolve_render_options(options)
    indent = opts.indent_unit
    lines = ["classDiagram"]
    if diagram.direction != "TB":
        lines.append(f"{indent}direction {diagram.direction}")
    lines.extend(accessibility_lines(indent, diagram.acc_title, diagram.acc_description))

    referenced: set[str] = set()
    for rel in diagram.relationships:
        referenced.add(rel.from_)
        referenced.add(rel.to)

    rendered: set[str] = set()
    for ns in diagram.namespaces:
        lines.append(f"{indent}namespace {ns.name} {{")
        class_ids = sorted(ns.class_ids) if opts.sort_entities else list(ns.class_ids)
        for cls_id in class_ids:
            cls = diagram.classes.get(cls_id)
            if cls is None or cls_id in rendered:
                lines.append(f"{indent * 2}class {cls_id}")
                continue
            lines.extend(_render_class(cls, indent * 2, indent))
            rendered.add(cls_id)
        lines.append(indent + "}")

    classes = list(diagram.classes.values())
    if opts.sort_entities:
        classes.sort(key=lambda c: c.id)
    for cls in classes:
        if cls.id in rendered:
            continue
        needs_declaration = (
            _has_body(cls)
            or cls.generic
            or cls.label != cls.id
            or cls.id not in referenced
        )
        if needs_declaration:
            lines.extend(_render_class(cls, indent, indent))

    for rel in diagram.relationships:
        lines.append(indent + _render_relationship(rel))

    for note in diagram.notes:
        if note.for_class is not None:
            lines.append(f"{indent}note for {note.for_class} {quote(note.text)}")
        else:
            lines.append(f"{indent}note {quote(note.text)}")

    for name, style in diagram.class_defs.items():
        lines.append(f"{indent}classDef {name} {format_style_props(style)}".rstrip())
    for cls_id, class_names in diagram.css_classes.items():
        for class_name in class_names:
            lines.append(f'{indent}cssClass "{cls_id}" {class_name}')
    return "\n".join(lines)

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
from ..types import DIRECTIONS, frozen_map
from .types import (
    ClassDiagram,
    ClassMember,
    ClassNamespace,
    ClassNode,
    ClassNote,
    ClassRelationship,
    RelationEnd,
    Visibility,
)

# ============================================================================
# Class diagram parser
#
# Supported syntax:
#   class Animal { +String name; +eat() void }
#   class Square~Shape~["Square"]
#   <<interface>> Shape        (or <<interface>> inside the body)
#   Animal <|-- Dog            (inheritance)
#   Car *-- Engine             (composition)
#   Car o-- Wheel              (aggregation)
#   A --> B                    (association)
#   A ..> B                    (dependency)
#   A ..|> B                   (realization)
#   A ()-- B                   (lollipop)
#   A "1" --> "*" B : label    (with cardinality + label)
#   Animal : +String name      (inline member)
#   namespace MyNamespace { class A { } }
#   note for A "text"
#   classDef hot fill:#f00     cssClass "A,B" hot
# ============================================================================

_CLASS_RE = re.compile(
    r'^class\s+([\w-]+)(?:~([^~]+)~)?(?:\s*\[("[^"]*")\])?\s*(\{)?\s*(\})?$'
)
_NAMESPACE_RE = re.compile(r"^namespace\s+([\w.-]+)\s*\{$")
_DIRECTION_RE = re.compile(r"^direction\s+(\w+)$", re.IGNORECASE)
_ANNOTATION_RE = re.compile(r"^<<([^>]+)>>$")
_OUTER_ANNOTATION_RE = re.compile(r"^<<([^>]+)>>\s+([\w-]+)$")
_NOTE_FOR_RE = re.compile(r'^note\s+for\s+([\w-]+)\s+("[^"]*")$')
_NOTE_RE = re.compile(r'^note\s+("[^"]*")$')
_CLASS_DEF_RE = re.compile(r"^classDef\s+([\w-]+)(?:\s+(.*))?$")
_CSS_CLASS_RE = re.compile(r'^cssClass\s+"([^"]+)"\s+([\w-]+)$')
_INLINE_MEMBER_RE = re.compile(r"^([\w-]+)\s*:\s*(.+)$")
_METHOD_RE = re.compile(
    r"^(?P<name>[^(]*?)\((?P<params>[^)]*)\)(?P<classifier>[$*]?)\s*(?P<ret>.*)$"
)

# Pattern: FROM ["card"] ARROW ["card"] TO [: label]. Spaces around the
# arrow are optional. An ``o`` touching an id is part of the id.
_RELATIONSHIP_RE = re.compile(
    r"^(?P<from>[\w-]+)\s*"
    r'(?:(?P<from_card>"[^"]*")\s*)?'
    r"(?P<left><\||\*|o|<|\(\))?(?P<line>--|\.\.)"
    r'(?P<right>\|>|\*|o(?=[\s"])|>|\(\))?\s*'
    r'(?:(?P<to_card>"[^"]*")\s*)?'
    r"(?P<to>[\w-]+)(?:\s*:\s*(?P<label>.*))?$"
)

_LEFT_ENDS: dict[str, RelationEnd] = {
    "": "none",
    "<|": "extension",
    "*": "composition",
    "o": "aggregation",
    "<": "dependency",
    "()": "lollipop",
}

_RIGHT_ENDS: dict[str, RelationEnd] = {
    "": "none",
    "|>": "extension",
    "*": "composition",
    "o": "aggregation",
    ">": "dependency",
    "()": "lollipop",
}


@dataclass(slots=True)
class _ClassDraft:
    id: str
    label: str
    generic: str | None = None
    annotation: str | None = None
    attributes: list[ClassMember] = field(default_factory=list)
    methods: list[ClassMember] = field(default_factory=list)

    def add_member(self, member: ClassMember) -> None:
        if member.is_method:
            self.methods.append(member)
        else:
            self.attributes.append(member)

    def freeze(self) -> ClassNode:
        return ClassNode(
            id=self.id,
            label=self.label,
            generic=self.generic,
            annotation=self.annotation,
            attributes=tuple(self.attributes),
            methods=tuple(self.methods),
        )


@dataclass(slots=True)
class _NamespaceDraft:
    name: str
    opened_at: SourceLine
    class_ids: list[str] = field(default_factory=list)


def parse_class_diagram(text: str) -> ClassDiagram:
    """Parse a Mermaid class diagram. The ``classDiagram`` header is optional."""
    lines = source_lines(text, strip_semicolon=True)
    _, body = split_header(lines, HEADER_PATTERNS["class"])

    # Track classes by ID for deduplication
    class_map: dict[str, _ClassDraft] = {}
    relationships: list[ClassRelationship] = []
    namespaces: list[ClassNamespace] = []
    notes: list[ClassNote] = []
    class_defs: dict[str, dict[str, str]] = {}
    css_classes: dict[str, list[str]] = {}
    acc: dict[str, str] = {}
    direction = "TB"

    current_namespace: _NamespaceDraft | None = None
    # Track class body parsing
    current_class: _ClassDraft | None = None
    class_opened_at: SourceLine | None = None

    for line in body:
        # --- Inside a class body block ---
        if current_class is not None:
            if line.text == "}":
                current_class = None
                continue
            annot_match = _ANNOTATION_RE.match(line.text)
            if annot_match:
                current_class.annotation = annot_match.group(1).strip()
                continue
            member = _parse_member(line.text)
            if member is not None:
                current_class.add_member(member)
            continue

        acc_match = match_accessibility(line.text)
        if acc_match:
            acc[acc_match[0]] = acc_match[1]
            continue

        m = _DIRECTION_RE.match(line.text)
        if m:
            direction = m.group(1).upper()
            if direction not in DIRECTIONS:
                raise line.error(f"Unknown direction {m.group(1)!r}")
            continue

        # --- Namespace block start ---
        m = _NAMESPACE_RE.match(line.text)
        if m:
            if current_namespace is not None:
                raise line.error("Nested namespaces are not supported")
            current_namespace = _NamespaceDraft(name=m.group(1), opened_at=line)
            continue

        # --- Namespace end ---
        if line.text == "}":
            if current_namespace is None:
                raise line.error("Unexpected '}'")
            namespaces.append(ClassNamespace(
                name=current_namespace.name,
                class_ids=tuple(current_namespace.class_ids),
            ))
            current_namespace = None
            continue

        # --- Class declaration, with optional generic, label and body ---
        m = _CLASS_RE.match(line.text)
        if m:
            cls = _ensure_class(class_map, m.group(1))
            if m.group(2):
                cls.generic = m.group(2)
            if m.group(3):
                cls.label = unquote(m.group(3))
            if current_namespace is not None and cls.id not in current_namespace.class_ids:
                current_namespace.class_ids.append(cls.id)
            if m.group(4) and not m.group(5):
                current_class = cls
                class_opened_at = line
            continue

        m = _OUTER_ANNOTATION_RE.match(line.text)
        if m:
            _ensure_class(class_map, m.group(2)).annotation = m.group(1).strip()
            continue

        m = _NOTE_FOR_RE.match(line.text)
        if m:
            notes.append(ClassNote(text=unquote(m.group(2)), for_class=m.group(1)))
            continue

        m = _NOTE_RE.match(line.text)
        if m:
            notes.append(ClassNote(text=unquote(m.group(1))))
            continue

        m = _CLASS_DEF_RE.match(line.text)
        if m:
            class_defs[m.group(1)] = parse_style_props(m.group(2) or "")
            continue

        m = _CSS_CLASS_RE.match(line.text)
        if m:
            for cls_id in (part.strip() for part in m.group(1).split(",")):
                if not cls_id:
                    continue
                assigned = css_classes.setdefault(cls_id, [])
                if m.group(2) not in assigned:
                    assigned.append(m.group(2))
            continue

        # --- Relationship ---
        m = _RELATIONSHIP_RE.match(line.text)
        if m:
            rel = _parse_relationship(m)
            # Ensure both classes exist
            _ensure_class(class_map, rel.from_)
            _ensure_class(class_map, rel.to)
            relationships.append(rel)
            continue

        # --- Inline member: `ClassName : +String name` ---
        m = _INLINE_MEMBER_RE.match(line.text)
        if m:
            member = _parse_member(m.group(2))
            cls = _ensure_class(class_map, m.group(1))
            if member is not None:
                cls.add_member(member)
            continue

        raise line.error(f"Invalid class diagram statement: {line.text!r}")

    if current_class is not None and class_opened_at is not None:
        raise class_opened_at.error(f"Unclosed class body '{current_class.id}'")
    if current_namespace is not None:
        raise current_namespace.opened_at.error(
            f"Unclosed namespace '{current_namespace.name}'"
        )

    return ClassDiagram(
        direction=direction,
        classes=frozen_map({cid: c.freeze() for cid, c in class_map.items()}),
        relationships=tuple(relationships),
        namespaces=tuple(namespaces),
        notes=tuple(notes),
        class_defs=frozen_map({k: frozen_map(v) for k, v in class_defs.items()}),
        css_classes=frozen_map({k: tuple(v) for k, v in css_classes.items()}),
        acc_title=acc.get("title"),
        acc_description=acc.get("description"),
    )


def _ensure_class(class_map: dict[str, _ClassDraft], cls_id: str) -> _ClassDraft:
    """Ensure a class exists in the map, creating a default if needed."""
    cls = class_map.get(cls_id)
    if cls is None:
        cls = _ClassDraft(id=cls_id, label=cls_id)
        class_map[cls_id] = cls
    return cls


def parse_member(text: str) -> ClassMember | None:
    """Parse a class member line (attribute or method).

    Returns ``None`` for blank input.
    """
    trimmed = text.strip().rstrip(";").strip()
    if not trimmed:
        return None

    # Extract visibility prefix
    visibility: Visibility = ""
    rest = trimmed
    if rest[0] in "+-#~":
        visibility = rest[0]  # type: ignore[assignment]
        rest = rest[1:].strip()

    # Check if it's a method (has parentheses)
    method_match = _METHOD_RE.match(rest)
    if method_match:
        classifier = method_match.group("classifier")
        return ClassMember(
            visibility=visibility,
            name=method_match.group("name").strip(),
            type=method_match.group("ret").strip() or None,
            params=method_match.group("params").strip(),
            is_static=classifier == "$",
            is_abstract=classifier == "*",
        )

    # It's an attribute: "Type name" or just "name"
    parts = rest.split()
    if len(parts) >= 2:
        type_: str | None = parts[0]
        name = " ".join(parts[1:])
    else:
        name = parts[0] if parts else rest
        type_ = None

    return ClassMember(
        visibility=visibility,
        name=re.sub(r"[$*]$", "", name),
        type=type_,
        is_static=name.endswith("$"),
        is_abstract=name.endswith("*"),
    )


_parse_member = parse_member


def _parse_relationship(m: re.Match[str]) -> ClassRelationship:
    label = (m.group("label") or "").strip()
    return ClassRelationship(
        from_=m.group("from"),
        to=m.group("to"),
        from_end=_LEFT_ENDS[m.group("left") or ""],
        to_end=_RIGHT_ENDS[m.group("right") or ""],
        line="solid" if m.group("line") == "--" else "dotted",
        label=label or None,
        from_cardinality=unquote(m.group("from_card")) if m.group("from_card") else None,
        to_cardinality=unquote(m.group("to_card")) if m.group("to_card") else None,
    )

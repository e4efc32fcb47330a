from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..detect import HEADER_PATTERNS
from ..lexer import SourceLine, match_accessibility, source_lines, split_header, unquote
from ..types import DIRECTIONS, frozen_map
from .types import Cardinality, ErAttribute, ErDiagram, ErEntity, ErRelationship, KeyKind

# ============================================================================
# ER diagram parser
#
# Supported syntax:
#   CUSTOMER ||--o{ ORDER : places
#   CUSTOMER["Customer"] {
#     string name PK
#     int age
#     string email UK "user email"
#   }
#
# Cardinality notation:
#   ||  exactly one
#   o|  zero or one (also |o)
#   }|  one or more (also |{)
#   o{  zero or more (also }o)
#
# Line style:
#   --  identifying (solid line)
#   ..  non-identifying (dashed line)
# ============================================================================

_ENTITY_BLOCK_RE = re.compile(r'^([\w-]+)(?:\["([^"]*)"\])?\s*\{\s*(\})?$')
_ENTITY_RE = re.compile(r'^([\w-]+)(?:\["([^"]*)"\])?$')
_DIRECTION_RE = re.compile(r"^direction\s+(\w+)$", re.IGNORECASE)
_ATTRIBUTE_RE = re.compile(r"^(\S+)\s+(\S+)(?:\s+(.+))?$")
_RELATIONSHIP_RE = re.compile(
    r"^([\w-]+)\s*([|o}{]{2})(--|\.\.)([|o}{]{2})\s*([\w-]+)(?:\s*:\s*(.*))?$"
)

_LEFT_CARDINALITY: dict[str, Cardinality] = {
    "||": "one",
    "|o": "zero-one",
    "o|": "zero-one",
    "}|": "many",
    "|}": "many",
    "}o": "zero-many",
    "o}": "zero-many",
}

_RIGHT_CARDINALITY: dict[str, Cardinality] = {
    "||": "one",
    "o|": "zero-one",
    "|o": "zero-one",
    "|{": "many",
    "{|": "many",
    "o{": "zero-many",
    "{o": "zero-many",
}


@dataclass(slots=True)
class _EntityDraft:
    id: str
    label: str
    attributes: list[ErAttribute] = field(default_factory=list)


def parse_er_diagram(text: str) -> ErDiagram:
    """Parse a Mermaid ER diagram. The ``erDiagram`` header is optional."""
    lines = source_lines(text, strip_semicolon=True)
    _, body = split_header(lines, HEADER_PATTERNS["er"])

    # Track entities by ID for deduplication
    entity_map: dict[str, _EntityDraft] = {}
    relationships: list[ErRelationship] = []
    direction = "TB"
    acc: dict[str, str] = {}
    # Track entity body parsing
    current_entity: _EntityDraft | None = None
    opened_at: SourceLine | None = None

    for line in body:
        # --- Inside entity body ---
        if current_entity is not None:
            if line.text == "}":
                current_entity = None
                continue
            current_entity.attributes.append(_parse_attribute(line))
            continue

        acc_match = match_accessibility(line.text)
        if acc_match:
            acc[acc_match[0]] = acc_match[1]
            continue

        match = _DIRECTION_RE.match(line.text)
        if match:
            direction = match.group(1).upper()
            if direction not in DIRECTIONS:
                raise line.error(f"Unknown direction {match.group(1)!r}")
            continue

        # --- Entity block start: `ENTITY_NAME["alias"] {` ---
        match = _ENTITY_BLOCK_RE.match(line.text)
        if match:
            entity = _ensure_entity(entity_map, match.group(1), match.group(2))
            if not match.group(3):
                current_entity = entity
                opened_at = line
            continue

        # --- Relationship: `ENTITY1 cardinality1--cardinality2 ENTITY2 : label` ---
        match = _RELATIONSHIP_RE.match(line.text)
        if match:
            rel = _parse_relationship(match, line)
            # Ensure both entities exist
            _ensure_entity(entity_map, rel.entity1)
            _ensure_entity(entity_map, rel.entity2)
            relationships.append(rel)
            continue

        match = _ENTITY_RE.match(line.text)
        if match:
            _ensure_entity(entity_map, match.group(1), match.group(2))
            continue

        raise line.error(f"Invalid ER statement: {line.text!r}")

    if current_entity is not None and opened_at is not None:
        raise opened_at.error(f"Unclosed entity block '{current_entity.id}'")

    return ErDiagram(
        direction=direction,
        entities=frozen_map({
            eid: ErEntity(id=e.id, label=e.label, attributes=tuple(e.attributes))
            for eid, e in entity_map.items()
        }),
        relationships=tuple(relationships),
        acc_title=acc.get("title"),
        acc_description=acc.get("description"),
    )


def _ensure_entity(
    entity_map: dict[str, _EntityDraft], entity_id: str, alias: str | None = None
) -> _EntityDraft:
    """Ensure an entity exists in the map; an alias relabels it."""
    entity = entity_map.get(entity_id)
    if entity is None:
        entity = _EntityDraft(id=entity_id, label=entity_id)
        entity_map[entity_id] = entity
    if alias is not None:
        entity.label = unquote(f'"{alias}"')
    return entity


def _parse_attribute(line: SourceLine) -> ErAttribute:
    """Parse an attribute line inside an entity block.

    Format: type name [PK|FK|UK[, ...]] ["comment"]
    """
    match = _ATTRIBUTE_RE.match(line.text)
    if not match:
        raise line.error(f"Invalid attribute: {line.text!r}")

    rest = (match.group(3) or "").strip()

    # Extract quoted comment first
    comment: str | None = None
    comment_match = re.search(r'"([^"]*)"', rest)
    if comment_match:
        comment = unquote(comment_match.group(0))
        rest = (rest[: comment_match.start()] + rest[comment_match.end() :]).strip()

    # Extract key constraints
    keys: list[KeyKind] = []
    for part in re.split(r"[\s,]+", rest):
        if not part:
            continue
        upper = part.upper()
        if upper not in ("PK", "FK", "UK"):
            raise line.error(f"Unknown attribute key {part!r}")
        keys.append(upper)  # type: ignore[arg-type]

    return ErAttribute(
        type=match.group(1), name=match.group(2), keys=tuple(keys), comment=comment
    )


def _parse_relationship(match: re.Match[str], line: SourceLine) -> ErRelationship:
    cardinality1 = _LEFT_CARDINALITY.get(match.group(2))
    cardinality2 = _RIGHT_CARDINALITY.get(match.group(4))
    if cardinality1 is None:
        raise line.error(f"Unknown cardinality {match.group(2)!r}", match.start(2))
    if cardinality2 is None:
        raise line.error(f"Unknown cardinality {match.group(4)!r}", match.start(4))

    return ErRelationship(
        entity1=match.group(1),
        entity2=match.group(5),
        cardinality1=cardinality1,
        cardinality2=cardinality2,
        label=unquote((match.group(6) or "").strip()),
        identifying=match.group(3) == "--",
    )

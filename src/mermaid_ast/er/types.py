from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from ..types import Direction, frozen_map

# ============================================================================
# ER diagram types
#
# ER diagrams show database entities, their attributes, and relationships.
# ============================================================================

# Cardinality notation (crow's foot):
#   'one'       ||  exactly one
#   'zero-one'  |o  zero or one
#   'many'      }|  one or more
#   'zero-many' }o  zero or more
Cardinality = Literal["one", "zero-one", "many", "zero-many"]

KeyKind = Literal["PK", "FK", "UK"]


@dataclass(frozen=True, slots=True)
class ErAttribute:
    """A single attribute (column) of an ER entity."""

    # Data type (string, int, varchar, etc.)
    type: str
    # Attribute name
    name: str
    # Key constraints: PK, FK, UK
    keys: tuple[KeyKind, ...] = ()
    # Optional comment
    comment: str | None = None


@dataclass(frozen=True, slots=True)
class ErEntity:
    """An entity definition in an ER diagram."""

    id: str
    # Display name (same as id unless aliased)
    label: str
    # Entity attributes (columns)
    attributes: tuple[ErAttribute, ...] = ()


@dataclass(frozen=True, slots=True)
class ErRelationship:
    """A relationship between two entities."""

    entity1: str
    entity2: str
    # Cardinality at entity1's end
    cardinality1: Cardinality
    # Cardinality at entity2's end
    cardinality2: Cardinality
    # Relationship verb/label (e.g., "places", "contains")
    label: str = ""
    # Whether the relationship is identifying (solid line) or non-identifying (dashed)
    identifying: bool = True


@dataclass(frozen=True, slots=True)
class ErDiagram:
    """ER diagram structure. ``direction`` defaults to ``TB``."""

    type: Literal["er"] = field(default="er", init=False)
    direction: Direction = "TB"
    entities: Mapping[str, ErEntity] = field(default_factory=frozen_map)
    relationships: tuple[ErRelationship, ...] = ()
    acc_title: str | None = None
    acc_description: str | None = None

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from ..types import Direction, frozen_map

# ============================================================================
# Class diagram types
#
# Class diagrams show UML classes and the relationships between them:
# inheritance, composition, aggregation, dependency, etc.
# ============================================================================

Visibility = Literal["+", "-", "#", "~", ""]

# Marker drawn at one end of a relationship line:
#   extension    <|  |>   (hollow triangle)
#   composition  *        (filled diamond)
#   aggregation  o        (hollow diamond)
#   dependency   <  >     (open arrow)
#   lollipop     ()       (provided interface)
RelationEnd = Literal[
    "none", "extension", "composition", "aggregation", "dependency", "lollipop"
]

LineStyle = Literal["solid", "dotted"]


@dataclass(frozen=True, slots=True)
class ClassMember:
    """A single class member. ``params`` is ``None`` for attributes."""

    # Visibility: + public, - private, # protected, ~ package
    visibility: Visibility
    # Member name
    name: str
    # Attribute type or method return type (e.g., "String", "int", "void")
    type: str | None = None
    # Method parameter list, verbatim
    params: str | None = None
    # Whether the member is static (underlined in UML)
    is_static: bool = False
    # Whether the member is abstract (italic in UML)
    is_abstract: bool = False

    @property
    def is_method(self) -> bool:
        return self.params is not None


@dataclass(frozen=True, slots=True)
class ClassNode:
    """A class definition in the diagram."""

    id: str
    label: str
    # Generic parameter, ``Square~Shape~``
    generic: str | None = None
    # Annotation like <<interface>>, <<abstract>>, <<service>>, <<enumeration>>
    annotation: str | None = None
    # Class attributes (fields/properties)
    attributes: tuple[ClassMember, ...] = ()
    # Class methods (functions)
    methods: tuple[ClassMember, ...] = ()


@dataclass(frozen=True, slots=True)
class ClassRelationship:
    """A relationship between two classes, ``from_ <end>--<end> to``."""

    from_: str
    to: str
    from_end: RelationEnd = "none"
    to_end: RelationEnd = "none"
    line: LineStyle = "solid"
    # Label on the relationship line
    label: str | None = None
    # Cardinality at the "from" end (e.g., "1", "*", "0..1")
    from_cardinality: str | None = None
    # Cardinality at the "to" end
    to_cardinality: str | None = None


@dataclass(frozen=True, slots=True)
class ClassNamespace:
    """A namespace grouping of classes."""

    name: str
    class_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ClassNote:
    text: str
    # ``None`` for a free-floating note
    for_class: str | None = None


@dataclass(frozen=True, slots=True)
class ClassDiagram:
    """Class diagram structure. ``direction`` defaults to ``TB``."""

    type: Literal["class"] = field(default="class", init=False)
    direction: Direction = "TB"
    classes: Mapping[str, ClassNode] = field(default_factory=frozen_map)
    relationships: tuple[ClassRelationship, ...] = ()
    namespaces: tuple[ClassNamespace, ...] = ()
    notes: tuple[ClassNote, ...] = ()
    class_defs: Mapping[str, Mapping[str, str]] = field(default_factory=frozen_map)
    # Style classes applied to each class id
    css_classes: Mapping[str, tuple[str, ...]] = field(default_factory=frozen_map)
    acc_title: str | None = None
    acc_description: str | None = None

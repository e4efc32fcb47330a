from .builder import ClassDiagramBuilder, ClassNamespaceBuilder, class_diagram
from .parser import parse_class_diagram, parse_member
from .renderer import render_class_diagram, render_member
from .types import (
    ClassDiagram,
    ClassMember,
    ClassNamespace,
    ClassNode,
    ClassNote,
    ClassRelationship,
    LineStyle,
    RelationEnd,
    Visibility,
)

__all__ = [
    "ClassDiagram",
    "ClassDiagramBuilder",
    "ClassMember",
    "ClassNamespace",
    "ClassNamespaceBuilder",
    "ClassNode",
    "ClassNote",
    "ClassRelationship",
    "LineStyle",
    "RelationEnd",
    "Visibility",
    "class_diagram",
    "parse_class_diagram",
    "parse_member",
    "render_class_diagram",
    "render_member",
]

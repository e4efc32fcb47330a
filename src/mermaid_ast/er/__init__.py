from .parser import parse_er_diagram
from .renderer import render_er_diagram
from .types import Cardinality, ErAttribute, ErDiagram, ErEntity, ErRelationship

__all__ = [
    "Cardinality",
    "ErAttribute",
    "ErDiagram",
    "ErEntity",
    "ErRelationship",
    "parse_er_diagram",
    "render_er_diagram",
]

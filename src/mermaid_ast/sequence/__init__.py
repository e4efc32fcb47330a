from .builder import SequenceBlockBuilder, SequenceBoxBuilder, SequenceBuilder, sequence
from .parser import parse_sequence_diagram
from .renderer import render_sequence_diagram
from .types import (
    Activation,
    Arrow,
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

__all__ = [
    "Activation",
    "Arrow",
    "Autonumber",
    "Block",
    "Message",
    "Note",
    "Section",
    "SectionedBlock",
    "SequenceActor",
    "SequenceBlockBuilder",
    "SequenceBox",
    "SequenceBoxBuilder",
    "SequenceBuilder",
    "SequenceDiagram",
    "Statement",
    "parse_sequence_diagram",
    "render_sequence_diagram",
    "sequence",
]

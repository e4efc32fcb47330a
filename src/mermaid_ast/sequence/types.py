from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Union

from ..types import frozen_map

# ============================================================================
# Sequence diagram types
#
# Sequence diagrams show actor interactions over time. The statement list is
# a tree: loop/opt/break/rect blocks hold statements, alt/par/critical blocks
# hold labelled sections of statements.
# ============================================================================

ActorType = Literal["participant", "actor"]
LineStyle = Literal["solid", "dashed"]
ArrowHead = Literal["filled", "open", "cross", "async", "bidirectional"]
NotePosition = Literal["left of", "right of", "over"]
BlockType = Literal["loop", "opt", "break", "rect"]
SectionedBlockType = Literal["alt", "par", "critical"]

# Message arrows, longest first so prefix matching picks the right one
Arrow = Literal[
    "<<-->>", "<<->>", "-->>", "->>", "-->", "->", "--x", "-x", "--)", "-)"
]

ARROWS: tuple[str, ...] = (
    "<<-->>", "<<->>", "-->>", "->>", "--x", "-x", "--)", "-)", "-->", "->"
)

# Keyword that opens each further section of a sectioned block
SECTION_KEYWORDS: dict[SectionedBlockType, str] = {
    "alt": "else",
    "par": "and",
    "critical": "option",
}


@dataclass(frozen=True, slots=True)
class SequenceActor:
    id: str
    label: str
    # 'participant' renders as a box, 'actor' renders as a stick figure
    type: ActorType = "participant"


@dataclass(frozen=True, slots=True)
class SequenceBox:
    """Background box grouping participants."""

    label: str | None = None
    color: str | None = None
    actor_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Message:
    from_: str
    to: str
    text: str = ""
    arrow: Arrow = "->>"
    # Activate the target lifeline (+)
    activate: bool = False
    # Deactivate the source lifeline (-)
    deactivate: bool = False

    @property
    def line_style(self) -> LineStyle:
        return "dashed" if "--" in self.arrow else "solid"

    @property
    def arrow_head(self) -> ArrowHead:
        if self.arrow.startswith("<<"):
            return "bidirectional"
        if self.arrow.endswith(">>"):
            return "filled"
        if self.arrow.endswith("x"):
            return "cross"
        if self.arrow.endswith(")"):
            return "async"
        return "open"


@dataclass(frozen=True, slots=True)
class Note:
    position: NotePosition
    # Which actor(s) the note is attached to, two only for "over"
    actor_ids: tuple[str, ...]
    text: str


@dataclass(frozen=True, slots=True)
class Activation:
    actor_id: str
    active: bool = True


@dataclass(frozen=True, slots=True)
class Autonumber:
    start: int | None = None
    step: int | None = None
    # ``autonumber off``
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class Block:
    type: BlockType
    # Header label; the colour for ``rect``
    label: str = ""
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True, slots=True)
class Section:
    label: str = ""
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True, slots=True)
class SectionedBlock:
    """alt/else, par/and, critical/option. Holds at least one section."""

    type: SectionedBlockType
    sections: tuple[Section, ...] = ()


Statement = Union[Message, Note, Activation, Autonumber, Block, SectionedBlock]


@dataclass(frozen=True, slots=True)
class SequenceDiagram:
    type: Literal["sequence"] = field(default="sequence", init=False)
    title: str | None = None
    # Actors in first-appearance order
    actors: Mapping[str, SequenceActor] = field(default_factory=frozen_map)
    boxes: tuple[SequenceBox, ...] = ()
    statements: tuple[Statement, ...] = ()
    acc_title: str | None = None
    acc_description: str | None = None

    def iter_messages(self):
        """All messages in document order, descending into blocks."""
        stack = list(reversed(self.statements))
        while stack:
            stmt = stack.pop()
            if isinstance(stmt, Message):
                yield stmt
            elif isinstance(stmt, Block):
                stack.extend(reversed(stmt.statements))
            elif isinstance(stmt, SectionedBlock):
                for section in reversed(stmt.sections):
                    stack.extend(reversed(section.statements))

from __future__ import annotations

import logging
from typing import Callable, Iterable

from ..errors import SequenceValidationError
from ..types import BuildOptions
from ..validation import ReferenceLog, should_validate
from .parser import _SequenceContext
from .types import (
    Activation,
    ActorType,
    Arrow,
    Autonumber,
    Block,
    BlockType,
    Message,
    Note,
    NotePosition,
    Section,
    SectionedBlock,
    SectionedBlockType,
    SequenceActor,
    SequenceBox,
    SequenceDiagram,
    Statement,
)

logger = logging.getLogger(__name__)

SectionSpec = tuple[str, Callable[["SequenceBlockBuilder"], object]]


class _StatementScope:
    """Statements allowed at the top level and inside blocks."""

    def __init__(self, root: SequenceBuilder, statements: list[Statement]) -> None:
        self._root = root
        self._statements = statements

    def message(
        self,
        from_: str,
        to: str,
        text: str = "",
        arrow: Arrow = "->>",
        activate: bool = False,
        deactivate: bool = False,
    ):
        construct = f"message {from_}{arrow}{to}"
        self._root._refs.entity(from_, construct)
        self._root._refs.entity(to, construct)
        self._statements.append(Message(
            from_=from_,
            to=to,
            text=text,
            arrow=arrow,
            activate=activate,
            deactivate=deactivate,
        ))
        return self

    def note(
        self,
        actor_ids: str | Iterable[str],
        text: str,
        position: NotePosition = "right of",
    ):
        ids = (actor_ids,) if isinstance(actor_ids, str) else tuple(actor_ids)
        for actor_id in ids:
            self._root._refs.entity(actor_id, f"note {position} {','.join(ids)}")
        self._statements.append(Note(position=position, actor_ids=ids, text=text))
        return self

    def activate(self, actor_id: str):
        self._root._refs.entity(actor_id, f"activate {actor_id}")
        self._statements.append(Activation(actor_id=actor_id, active=True))
        return self

    def deactivate(self, actor_id: str):
        self._root._refs.entity(actor_id, f"deactivate {actor_id}")
        self._statements.append(Activation(actor_id=actor_id, active=False))
        return self

    def autonumber(self, start: int | None = None, step: int | None = None, enabled: bool = True):
        self._statements.append(Autonumber(start=start, step=step, enabled=enabled))
        return self

    # --- blocks ---

    def _block(self, type_: BlockType, label: str, fn: Callable[[SequenceBlockBuilder], object]):
        inner: list[Statement] = []
        fn(SequenceBlockBuilder(self._root, inner))
        self._statements.append(Block(type=type_, label=label, statements=tuple(inner)))
        return self

    def loop(self, label: str, fn: Callable[[SequenceBlockBuilder], object]):
        return self._block("loop", label, fn)

    def opt(self, label: str, fn: Callable[[SequenceBlockBuilder], object]):
        return self._block("opt", label, fn)

    def break_(self, label: str, fn: Callable[[SequenceBlockBuilder], object]):
        return self._block("break", label, fn)

    def rect(self, color: str, fn: Callable[[SequenceBlockBuilder], object]):
        return self._block("rect", color, fn)

    def _sectioned(self, type_: SectionedBlockType, sections: tuple[SectionSpec, ...]):
        if not sections:
            raise ValueError(f"'{type_}' needs at least one section")
        built: list[Section] = []
        for label, fn in sections:
            inner: list[Statement] = []
            fn(SequenceBlockBuilder(self._root, inner))
            built.append(Section(label=label, statements=tuple(inner)))
        self._statements.append(SectionedBlock(type=type_, sections=tuple(built)))
        return self

    def alt(self, *sections: SectionSpec):
        """``alt`` with one ``(label, fn)`` pair per branch; later ones become ``else``."""
        return self._sectioned("alt", sections)

    def par(self, *sections: SectionSpec):
        return self._sectioned("par", sections)

    def critical(self, *sections: SectionSpec):
        return self._sectioned("critical", sections)


class SequenceBlockBuilder(_StatementScope):
    """Builder handed to block and section callbacks."""


class SequenceBoxBuilder:
    """Builder handed to ``box`` callbacks. Declares the boxed actors."""

    def __init__(self, root: SequenceBuilder) -> None:
        self._root = root
        self.actor_ids: list[str] = []

    def participant(self, actor_id: str, label: str | None = None) -> SequenceBoxBuilder:
        self._root._declare(actor_id, label, "participant")
        if actor_id not in self.actor_ids:
            self.actor_ids.append(actor_id)
        return self

    def actor(self, actor_id: str, label: str | None = None) -> SequenceBoxBuilder:
        self._root._declare(actor_id, label, "actor")
        if actor_id not in self.actor_ids:
            self.actor_ids.append(actor_id)
        return self


class SequenceBuilder(_StatementScope):
    """Fluent builder for sequence diagrams.

    Unlike the parser, the builder does not create participants on first
    use: every actor named by a statement must be declared.
    """

    def __init__(self) -> None:
        self._ctx = _SequenceContext()
        self._refs = ReferenceLog()
        super().__init__(self, self._ctx.statements)

    def _declare(self, actor_id: str, label: str | None, type_: ActorType) -> None:
        self._ctx.actors[actor_id] = SequenceActor(
            id=actor_id, label=label if label is not None else actor_id, type=type_
        )

    def participant(self, actor_id: str, label: str | None = None) -> SequenceBuilder:
        self._declare(actor_id, label, "participant")
        return self

    def actor(self, actor_id: str, label: str | None = None) -> SequenceBuilder:
        self._declare(actor_id, label, "actor")
        return self

    def box(
        self,
        fn: Callable[[SequenceBoxBuilder], object],
        label: str | None = None,
        color: str | None = None,
    ) -> SequenceBuilder:
        scope = SequenceBoxBuilder(self)
        fn(scope)
        self._ctx.boxes.append(
            SequenceBox(label=label, color=color, actor_ids=tuple(scope.actor_ids))
        )
        return self

    def title(self, title: str) -> SequenceBuilder:
        self._ctx.title = title
        return self

    def acc_title(self, title: str) -> SequenceBuilder:
        self._ctx.acc["title"] = title
        return self

    def acc_description(self, description: str) -> SequenceBuilder:
        self._ctx.acc["description"] = description
        return self

    def build(self, options: BuildOptions | None = None) -> SequenceDiagram:
        if should_validate(options, "sequence"):
            self._refs.check(self._ctx.actors, (), SequenceValidationError)
        diagram = self._ctx.freeze()
        logger.debug(
            "Built sequence diagram: %d actors, %d statements",
            len(diagram.actors),
            len(diagram.statements),
        )
        return diagram


def sequence() -> SequenceBuilder:
    return SequenceBuilder()

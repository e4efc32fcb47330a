from __future__ import annotations

import logging
from typing import Callable, Mapping

from ..errors import ClassDiagramValidationError
from ..lexer import parse_style_props
from ..types import BuildOptions, Direction, frozen_map
from ..validation import ReferenceLog, should_validate
from .parser import _ClassDraft, parse_member
from .types import (
    ClassDiagram,
    ClassNamespace,
    ClassNote,
    ClassRelationship,
    LineStyle,
    RelationEnd,
)

logger = logging.getLogger(__name__)


class ClassDiagramBuilder:
    """Fluent builder for class diagrams.

    Every method returns the builder. Names used by relationships, notes,
    members and ``css_class`` must be declared with ``class_`` before
    ``build()`` unless validation is turned off.
    """

    def __init__(self, direction: Direction = "TB") -> None:
        self._direction = direction
        self._classes: dict[str, _ClassDraft] = {}
        self._declared: set[str] = set()
        self._relationships: list[ClassRelationship] = []
        self._namespaces: list[ClassNamespace] = []
        self._notes: list[ClassNote] = []
        self._class_defs: dict[str, Mapping[str, str]] = {}
        self._css_classes: dict[str, list[str]] = {}
        self._acc_title: str | None = None
        self._acc_description: str | None = None
        self._refs = ReferenceLog()

    def _draft(self, class_id: str) -> _ClassDraft:
        draft = self._classes.get(class_id)
        if draft is None:
            draft = _ClassDraft(id=class_id, label=class_id)
            self._classes[class_id] = draft
        return draft

    # --- classes ---

    def class_(
        self,
        class_id: str,
        *members: str,
        label: str | None = None,
        generic: str | None = None,
        annotation: str | None = None,
    ) -> ClassDiagramBuilder:
        """Declare a class. ``members`` use the member syntax, ``+String name``."""
        draft = self._draft(class_id)
        self._declared.add(class_id)
        if label is not None:
            draft.label = label
        if generic is not None:
            draft.generic = generic
        if annotation is not None:
            draft.annotation = annotation
        for text in members:
            member = parse_member(text)
            if member is not None:
                draft.add_member(member)
        return self

    def member(self, class_id: str, text: str) -> ClassDiagramBuilder:
        self._refs.entity(class_id, f"member {class_id} : {text}")
        member = parse_member(text)
        if member is not None:
            self._draft(class_id).add_member(member)
        return self

    def annotate(self, class_id: str, annotation: str) -> ClassDiagramBuilder:
        self._refs.entity(class_id, f"<<{annotation}>> {class_id}")
        self._draft(class_id).annotation = annotation
        return self

    # --- relationships ---

    def relation(
        self,
        from_: str,
        to: str,
        *,
        from_end: RelationEnd = "none",
        to_end: RelationEnd = "none",
        line: LineStyle = "solid",
        label: str | None = None,
        from_cardinality: str | None = None,
        to_cardinality: str | None = None,
    ) -> ClassDiagramBuilder:
        construct = f"relation {from_} -- {to}"
        self._refs.entity(from_, construct)
        self._refs.entity(to, construct)
        self._relationships.append(ClassRelationship(
            from_=from_,
            to=to,
            from_end=from_end,
            to_end=to_end,
            line=line,
            label=label,
            from_cardinality=from_cardinality,
            to_cardinality=to_cardinality,
        ))
        return self

    def extends(self, child: str, parent: str, label: str | None = None) -> ClassDiagramBuilder:
        """``Parent <|-- Child``"""
        return self.relation(parent, child, from_end="extension", label=label)

    def realization(
        self, implementer: str, interface: str, label: str | None = None
    ) -> ClassDiagramBuilder:
        """``Interface <|.. Implementer``"""
        return self.relation(
            interface, implementer, from_end="extension", line="dotted", label=label
        )

    def composition(self, owner: str, owned: str, label: str | None = None) -> ClassDiagramBuilder:
        return self.relation(owner, owned, from_end="composition", label=label)

    def aggregation(self, owner: str, owned: str, label: str | None = None) -> ClassDiagramBuilder:
        return self.relation(owner, owned, from_end="aggregation", label=label)

    def association(self, from_: str, to: str, label: str | None = None) -> ClassDiagramBuilder:
        return self.relation(from_, to, to_end="dependency", label=label)

    def dependency(self, dependent: str, target: str, label: str | None = None) -> ClassDiagramBuilder:
        return self.relation(dependent, target, to_end="dependency", line="dotted", label=label)

    # --- grouping and decoration ---

    def namespace(
        self, name: str, fn: Callable[[ClassNamespaceBuilder], object]
    ) -> ClassDiagramBuilder:
        scope = ClassNamespaceBuilder(self, name)
        fn(scope)
        self._namespaces.append(ClassNamespace(name=name, class_ids=tuple(scope.class_ids)))
        return self

    def note(self, text: str, for_class: str | None = None) -> ClassDiagramBuilder:
        if for_class is not None:
            self._refs.entity(for_class, f"note for {for_class}")
        self._notes.append(ClassNote(text=text, for_class=for_class))
        return self

    def class_def(self, name: str, style: Mapping[str, str] | str) -> ClassDiagramBuilder:
        if isinstance(style, str):
            style = parse_style_props(style)
        self._class_defs[name] = frozen_map(style)
        return self

    def css_class(self, class_id: str, name: str) -> ClassDiagramBuilder:
        construct = f'cssClass "{class_id}" {name}'
        self._refs.entity(class_id, construct)
        self._refs.class_def(name, construct)
        assigned = self._css_classes.setdefault(class_id, [])
        if name not in assigned:
            assigned.append(name)
        return self

    def acc_title(self, title: str) -> ClassDiagramBuilder:
        self._acc_title = title
        return self

    def acc_description(self, description: str) -> ClassDiagramBuilder:
        self._acc_description = description
        return self

    def build(self, options: BuildOptions | None = None) -> ClassDiagram:
        if should_validate(options, "class"):
            self._refs.check(self._declared, self._class_defs, ClassDiagramValidationError)
        diagram = ClassDiagram(
            direction=self._direction,
            classes=frozen_map({cid: c.freeze() for cid, c in self._classes.items()}),
            relationships=tuple(self._relationships),
            namespaces=tuple(self._namespaces),
            notes=tuple(self._notes),
            class_defs=frozen_map(self._class_defs),
            css_classes=frozen_map({k: tuple(v) for k, v in self._css_classes.items()}),
            acc_title=self._acc_title,
            acc_description=self._acc_description,
        )
        logger.debug(
            "Built class diagram: %d classes, %d relationships",
            len(diagram.classes),
            len(diagram.relationships),
        )
        return diagram


class ClassNamespaceBuilder:
    """Scope handed to ``ClassDiagramBuilder.namespace`` callbacks.

    Classes declared here belong to the namespace and to the diagram.
    """

    def __init__(self, parent: ClassDiagramBuilder, name: str) -> None:
        self.parent = parent
        self.name = name
        self.class_ids: list[str] = []

    def class_(
        self,
        class_id: str,
        *members: str,
        label: str | None = None,
        generic: str | None = None,
        annotation: str | None = None,
    ) -> ClassNamespaceBuilder:
        self.parent.class_(
            class_id, *members, label=label, generic=generic, annotation=annotation
        )
        if class_id not in self.class_ids:
            self.class_ids.append(class_id)
        return self

    def member(self, class_id: str, text: str) -> ClassNamespaceBuilder:
        self.parent.member(class_id, text)
        return self


def class_diagram(direction: Direction = "TB") -> ClassDiagramBuilder:
    return ClassDiagramBuilder(direction)

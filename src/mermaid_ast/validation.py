from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Container, Literal

from .errors import ValidationError
from .types import DEFAULT_BUILD_OPTIONS, BuildOptions

logger = logging.getLogger(__name__)

# ============================================================================
# Reference tracking shared by the builders
#
# Each builder call that names another entity records a Reference. build()
# replays them in the order they were made, so the first dangling name wins.
# ============================================================================

ReferenceKind = Literal["entity", "class_def"]

_NOUNS: dict[ReferenceKind, str] = {
    "entity": "entity",
    "class_def": "class definition",
}


@dataclass(frozen=True, slots=True)
class Reference:
    kind: ReferenceKind
    identifier: str
    # Statement that made the reference, e.g. "link A --> B"
    construct: str


class ReferenceLog:
    def __init__(self) -> None:
        self._references: list[Reference] = []

    def __len__(self) -> int:
        return len(self._references)

    def entity(self, identifier: str, construct: str) -> None:
        self._references.append(Reference("entity", identifier, construct))

    def class_def(self, identifier: str, construct: str) -> None:
        self._references.append(Reference("class_def", identifier, construct))

    def check(
        self,
        entities: Container[str],
        class_defs: Container[str],
        error: type[ValidationError],
    ) -> None:
        """Raise ``error`` for the first reference to an undeclared name."""
        for ref in self._references:
            known = entities if ref.kind == "entity" else class_defs
            if ref.identifier not in known:
                raise error(
                    f"{ref.construct}: undeclared {_NOUNS[ref.kind]} '{ref.identifier}'",
                    ref.identifier,
                    ref.construct,
                )


def should_validate(options: BuildOptions | None, dialect: str) -> bool:
    opts = DEFAULT_BUILD_OPTIONS if options is None else options
    if not opts.validate:
        logger.debug("Validation bypassed for %s builder", dialect)
    return opts.validate

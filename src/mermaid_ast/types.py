from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Literal, Mapping, TypeVar, Union

# ============================================================================
# Dialect tags
# ============================================================================

DiagramType = Literal[
    "flowchart",
    "sequence",
    "class",
    "state",
    "pie",
    "er",
    "mindmap",
    "quadrant",
    "sankey",
    "timeline",
    "journey",
    "xychart",
]

Direction = Literal["TB", "TD", "BT", "RL", "LR"]

DIRECTIONS: tuple[str, ...] = ("TB", "TD", "BT", "RL", "LR")


# ============================================================================
# Frozen collections
# ============================================================================

K = TypeVar("K")
V = TypeVar("V")

EMPTY_MAP: Mapping = MappingProxyType({})


def frozen_map(items: Mapping[K, V] | None = None) -> Mapping[K, V]:
    """Read-only, insertion-ordered snapshot of ``items``."""
    if not items:
        return EMPTY_MAP
    return MappingProxyType(dict(items))


# ============================================================================
# Options
# ============================================================================


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Canonical rendering options.

    ``indent`` is the text for one nesting level. An integer means that
    many spaces and ``"tab"`` means a tab character. It must resolve to
    at least one whitespace character, since nesting is read back from it.
    """

    indent: Union[str, int] = "    "
    inline_classes: bool = False
    compact_links: bool = False
    sort_entities: bool = False

    def __post_init__(self) -> None:
        unit = self.indent_unit
        if not unit or unit.strip():
            raise ValueError(
                f"indent must be one or more whitespace characters, got {self.indent!r}"
            )

    @property
    def indent_unit(self) -> str:
        if isinstance(self.indent, int):
            return " " * self.indent
        if self.indent == "tab":
            return "\t"
        return self.indent

    def merged(self, **overrides) -> RenderOptions:
        return replace(self, **overrides)


DEFAULT_RENDER_OPTIONS = RenderOptions()


def resolve_render_options(options: RenderOptions | None) -> RenderOptions:
    return DEFAULT_RENDER_OPTIONS if options is None else options


@dataclass(frozen=True, slots=True)
class BuildOptions:
    validate: bool = True


DEFAULT_BUILD_OPTIONS = BuildOptions()

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True, slots=True)
class JourneyTask:
    name: str
    score: float
    actors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class JourneySection:
    name: str | None = None
    tasks: tuple[JourneyTask, ...] = ()


@dataclass(frozen=True, slots=True)
class JourneyDiagram:
    type: Literal["journey"] = field(default="journey", init=False)
    title: str | None = None
    sections: tuple[JourneySection, ...] = ()
    acc_title: str | None = None
    acc_description: str | None = None

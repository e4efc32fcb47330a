from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True, slots=True)
class TimelinePeriod:
    name: str
    events: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TimelineSection:
    """A titled group of periods. Periods before any ``section`` line
    land in a leading section whose ``name`` is ``None``."""

    name: str | None = None
    periods: tuple[TimelinePeriod, ...] = ()


@dataclass(frozen=True, slots=True)
class TimelineDiagram:
    type: Literal["timeline"] = field(default="timeline", init=False)
    title: str | None = None
    sections: tuple[TimelineSection, ...] = ()
    acc_title: str | None = None
    acc_description: str | None = None

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True, slots=True)
class PieSection:
    label: str
    value: float


@dataclass(frozen=True, slots=True)
class PieChart:
    """A pie chart. ``show_data`` defaults to ``False``."""

    type: Literal["pie"] = field(default="pie", init=False)
    title: str | None = None
    show_data: bool = False
    sections: tuple[PieSection, ...] = ()
    acc_title: str | None = None
    acc_description: str | None = None

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from ..types import frozen_map


@dataclass(frozen=True, slots=True)
class QuadrantAxis:
    """Labels at the two ends of an axis (left/right or bottom/top)."""

    low: str | None = None
    high: str | None = None


@dataclass(frozen=True, slots=True)
class QuadrantPoint:
    name: str
    x: float
    y: float
    class_name: str | None = None
    styles: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class QuadrantChart:
    type: Literal["quadrant"] = field(default="quadrant", init=False)
    title: str | None = None
    x_axis: QuadrantAxis = QuadrantAxis()
    y_axis: QuadrantAxis = QuadrantAxis()
    # quadrant-1 .. quadrant-4, ``None`` where unset
    quadrants: tuple[str | None, str | None, str | None, str | None] = (
        None,
        None,
        None,
        None,
    )
    points: tuple[QuadrantPoint, ...] = ()
    class_defs: Mapping[str, tuple[str, ...]] = field(default_factory=frozen_map)
    acc_title: str | None = None
    acc_description: str | None = None

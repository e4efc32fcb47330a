from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

Orientation = Literal["vertical", "horizontal"]

SeriesKind = Literal["line", "bar"]


@dataclass(frozen=True, slots=True)
class BandAxis:
    """Categorical axis: ``x-axis "title" [a, b, c]``."""

    title: str | None = None
    categories: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RangeAxis:
    """Numeric axis: ``y-axis "title" 0 --> 100``. Bounds are optional."""

    title: str | None = None
    min: float | None = None
    max: float | None = None


Axis = Union[BandAxis, RangeAxis]


@dataclass(frozen=True, slots=True)
class XYSeries:
    kind: SeriesKind
    values: tuple[float, ...] = ()
    label: str | None = None


@dataclass(frozen=True, slots=True)
class XYChart:
    type: Literal["xychart"] = field(default="xychart", init=False)
    orientation: Orientation = "vertical"
    title: str | None = None
    x_axis: Axis | None = None
    y_axis: RangeAxis | None = None
    series: tuple[XYSeries, ...] = ()
    acc_title: str | None = None
    acc_description: str | None = None

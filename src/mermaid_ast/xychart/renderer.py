from __future__ import annotations

from ..errors import assert_never
from ..lexer import accessibility_lines, format_number, quote
from ..types import RenderOptions, resolve_render_options
from .types import Axis, BandAxis, RangeAxis, XYChart, XYSeries


def _render_axis(name: str, axis: Axis) -> str:
    parts = [name]
    if axis.title is not None:
        parts.append(quote(axis.title))
    if isinstance(axis, BandAxis):
        categories = ", ".join('"' + c.replace('"', '""') + '"' for c in axis.categories)
        parts.append(f"[{categories}]")
    elif isinstance(axis, RangeAxis):
        if axis.min is not None and axis.max is not None:
            parts.append(f"{format_number(axis.min)} --> {format_number(axis.max)}")
    else:
        assert_never(axis, "axis")
    return " ".join(parts)


def _render_series(series: XYSeries) -> str:
    parts = [series.kind]
    if series.label is not None:
        parts.append(quote(series.label))
    parts.append("[" + ", ".join(format_number(v) for v in series.values) + "]")
    return " ".join(parts)


def render_xychart(chart: XYChart, options: RenderOptions | None = None) -> str:
    indent = resolve_render_options(options).indent_unit
    header = "xychart-beta"
    if chart.orientation == "horizontal":
        header += " horizontal"
    lines = [header]
    if chart.title:
        lines.append(f"{indent}title {quote(chart.title)}")
    lines.extend(accessibility_lines(indent, chart.acc_title, chart.acc_description))
    if chart.x_axis is not None:
        lines.append(indent + _render_axis("x-axis", chart.x_axis))
    if chart.y_axis is not None:
        lines.append(indent + _render_axis("y-axis", chart.y_axis))
    for series in chart.series:
        lines.append(indent + _render_series(series))
    return "\n".join(lines)

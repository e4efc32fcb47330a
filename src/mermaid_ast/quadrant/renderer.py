from __future__ import annotations

from ..lexer import accessibility_lines, format_number, quote
from ..types import RenderOptions, resolve_render_options
from .types import QuadrantAxis, QuadrantChart, QuadrantPoint


def _render_axis(name: str, axis: QuadrantAxis) -> str | None:
    if axis.low is None and axis.high is None:
        return None
    text = f"{name} {quote(axis.low or '')}"
    if axis.high is not None:
        text += f" --> {quote(axis.high)}"
    return text


def _render_point(point: QuadrantPoint) -> str:
    name = point.name
    if ":" in name or '"' in name or name != name.strip():
        name = quote(name)
    if point.class_name:
        name += f":::{point.class_name}"
    text = f"{name}: [{format_number(point.x)}, {format_number(point.y)}]"
    if point.styles:
        text += " " + ", ".join(point.styles)
    return text


def render_quadrant(chart: QuadrantChart, options: RenderOptions | None = None) -> str:
    opts = resolve_render_options(options)
    indent = opts.indent_unit
    lines = ["quadrantChart"]
    if chart.title:
        lines.append(f"{indent}title {chart.title}")
    lines.extend(accessibility_lines(indent, chart.acc_title, chart.acc_description))

    for name, axis in (("x-axis", chart.x_axis), ("y-axis", chart.y_axis)):
        rendered = _render_axis(name, axis)
        if rendered:
            lines.append(indent + rendered)

    for number, label in enumerate(chart.quadrants, start=1):
        if label:
            lines.append(f"{indent}quadrant-{number} {label}")

    points = chart.points
    if opts.sort_entities:
        points = tuple(sorted(points, key=lambda p: p.name))
    for point in points:
        lines.append(indent + _render_point(point))

    for name, styles in chart.class_defs.items():
        lines.append(f"{indent}classDef {name} {', '.join(styles)}".rstrip())
    return "\n".join(lines)

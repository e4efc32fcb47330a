from __future__ import annotations

from ..lexer import accessibility_lines, format_number, quote
from ..types import RenderOptions, resolve_render_options
from .types import PieChart


def render_pie(chart: PieChart, options: RenderOptions | None = None) -> str:
    indent = resolve_render_options(options).indent_unit
    lines = ["pie showData" if chart.show_data else "pie"]
    if chart.title:
        lines.append(f"{indent}title {chart.title}")
    lines.extend(accessibility_lines(indent, chart.acc_title, chart.acc_description))
    for section in chart.sections:
        lines.append(f"{indent}{quote(section.label)} : {format_number(section.value)}")
    return "\n".join(lines)

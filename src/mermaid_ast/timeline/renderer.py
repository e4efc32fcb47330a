from __future__ import annotations

from ..lexer import accessibility_lines
from ..types import RenderOptions, resolve_render_options
from .types import TimelineDiagram


def render_timeline(
    diagram: TimelineDiagram, options: RenderOptions | None = None
) -> str:
    indent = resolve_render_options(options).indent_unit
    lines = ["timeline"]
    if diagram.title:
        lines.append(f"{indent}title {diagram.title}")
    lines.extend(
        accessibility_lines(indent, diagram.acc_title, diagram.acc_description)
    )
    for section in diagram.sections:
        depth = 1
        if section.name is not None:
            lines.append(f"{indent}section {section.name}")
            depth = 2
        for period in section.periods:
            lines.append(indent * depth + " : ".join((period.name, *period.events)))
    return "\n".join(lines)

from __future__ import annotations

from ..lexer import accessibility_lines, format_number
from ..types import RenderOptions, resolve_render_options
from .types import JourneyDiagram, JourneyTask


def _render_task(task: JourneyTask) -> str:
    text = f"{task.name}: {format_number(task.score)}"
    if task.actors:
        text += ": " + ", ".join(task.actors)
    return text


def render_journey(diagram: JourneyDiagram, options: RenderOptions | None = None) -> str:
    indent = resolve_render_options(options).indent_unit
    lines = ["journey"]
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
        for task in section.tasks:
            lines.append(indent * depth + _render_task(task))
    return "\n".join(lines)

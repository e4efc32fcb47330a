from __future__ import annotations

from ..lexer import format_delimited_field, format_number
from ..types import RenderOptions
from .types import SankeyDiagram


def render_sankey(diagram: SankeyDiagram, options: RenderOptions | None = None) -> str:
    # Records are CSV, so they are never indented.
    lines = ["sankey-beta", ""]
    for link in diagram.links:
        lines.append(
            ",".join((
                format_delimited_field(link.source),
                format_delimited_field(link.target),
                format_number(link.value),
            ))
        )
    return "\n".join(lines)

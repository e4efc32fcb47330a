from __future__ import annotations

from dataclasses import dataclass, field

from ..detect import HEADER_PATTERNS
from ..lexer import parse_number, source_lines, split_delimited, split_header
from ..types import frozen_map
from .types import SankeyDiagram, SankeyLink, SankeyNode


@dataclass(slots=True)
class _SankeyContext:
    nodes: dict[str, SankeyNode] = field(default_factory=dict)
    links: list[SankeyLink] = field(default_factory=list)

    def ensure_node(self, node_id: str) -> None:
        if node_id not in self.nodes:
            self.nodes[node_id] = SankeyNode(id=node_id, label=node_id)


def parse_sankey(text: str) -> SankeyDiagram:
    """Parse ``source,target,value`` records.

    Nodes are created on first reference with their id as label.
    """
    lines = source_lines(text, strip_semicolon=True)
    header, body = split_header(lines, HEADER_PATTERNS["sankey"])
    if header and header.group("rest").strip():
        raise lines[0].error("Unexpected text after sankey header")

    ctx = _SankeyContext()
    for line in body:
        fields = split_delimited(line.text, line)
        if len(fields) != 3:
            raise line.error(
                f"Expected 3 fields (source,target,value), got {len(fields)}"
            )
        source, target, raw_value = fields
        if not source or not target:
            raise line.error("Sankey source and target must not be empty")
        value = parse_number(raw_value, line)
        ctx.ensure_node(source)
        ctx.ensure_node(target)
        ctx.links.append(SankeyLink(source=source, target=target, value=value))

    return SankeyDiagram(nodes=frozen_map(ctx.nodes), links=tuple(ctx.links))

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from ..detect import HEADER_PATTERNS
from ..lexer import (
    SourceLine,
    is_quoted,
    match_accessibility,
    parse_style_props,
    source_lines,
    split_header,
    unquote,
)
from ..types import DIRECTIONS, frozen_map
from .types import (
    FlowchartDiagram,
    FlowClick,
    FlowLink,
    FlowNode,
    FlowSubgraph,
    LinkArrow,
    NodeShape,
)

# ============================================================================
# Flowchart parser
#
# Supported syntax:
#   flowchart LR                 (or graph TD; direction defaults to TB)
#   A[Square] --> B(Round)       15 node shapes, see SHAPE_DELIMITERS
#   A --> B --> C                chains
#   A & B --> C & D              groups
#   A -->|label| B               also A -- label --> B
#   A ==> B, A -.-> B, A --o B   thick, dotted, circle and cross ends
#   A <--> B                     bidirectional
#   A:::className
#   subgraph id[Title] ... end   nested, with its own direction
#   classDef name fill:#f00      class A,B name
#   style A fill:#f00            linkStyle 0,1 stroke:#f00
#   click A href "url" "tip" _blank
#   click A call fn(args) "tip"
# ============================================================================

NODE_ID = r"\w+(?:-\w+)*"

# Opening and closing delimiters per shape, longest openers first so that
# "((" is tried before "(".
_SHAPE_TABLE: list[tuple[str, str, NodeShape]] = [
    ("(((", ")))", "doublecircle"),
    ("((", "))", "circle"),
    ("([", "])", "stadium"),
    ("[(", ")]", "cylinder"),
    ("[[", "]]", "subroutine"),
    ("(-", "-)", "ellipse"),
    ("{{", "}}", "hexagon"),
    ("[/", "\\]", "trapezoid"),
    ("[\\", "/]", "inv_trapezoid"),
    ("[/", "/]", "lean_right"),
    ("[\\", "\\]", "lean_left"),
    ("[", "]", "square"),
    ("(", ")", "round"),
    ("{", "}", "diamond"),
    (">", "]", "odd"),
]

SHAPE_DELIMITERS: dict[NodeShape, tuple[str, str]] = {
    shape: (opener, closer) for opener, closer, shape in _SHAPE_TABLE
}

# Quoted text, or unquoted text free of quotes and brackets
_LABEL = r'("[^"]*"|[^"\[\](){}]*?)'

NODE_PATTERNS: list[tuple[re.Pattern[str], NodeShape]] = [
    (re.compile(rf"^({NODE_ID}){re.escape(opener)}{_LABEL}{re.escape(closer)}"), shape)
    for opener, closer, shape in _SHAPE_TABLE
]

BARE_NODE_REGEX = re.compile(rf"^({NODE_ID})")
CLASS_SHORTHAND_REGEX = re.compile(r"^:::([\w][\w-]*)")

_ARROW_REGEX = re.compile(
    r"^(?P<start><)?(?:"
    r"-(?P<dots>\.+)-(?P<dotted_end>[>ox])?"
    r"|(?P<equals>={2,})(?P<thick_end>[>ox])?"
    r"|(?P<dashes>-{2,})(?P<normal_end>[>ox])?"
    r")"
)
_PIPE_LABEL_REGEX = re.compile(r'^\s*\|("[^"]*"|[^|]*)\|')

# "-- text -->", "== text ==>", "-. text .->"
_TEXT_LINK_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("normal", re.compile(r"^(?P<start><)?--\s+(?P<text>.+?)\s+(?P<close>-{2,}[>ox]?)")),
    ("thick", re.compile(r"^(?P<start><)?==\s+(?P<text>.+?)\s+(?P<close>={2,}[>ox]?)")),
    ("dotted", re.compile(r"^(?P<start><)?-\.\s+(?P<text>.+?)\s+(?P<close>\.+-[>ox]?)")),
]

_ARROW_ENDS: dict[str, LinkArrow] = {
    ">": "arrow_point",
    "o": "arrow_circle",
    "x": "arrow_cross",
    "": "arrow_open",
}

_ID_LIST = rf"({NODE_ID}(?:\s*,\s*{NODE_ID})*)"

_CLASS_DEF_RE = re.compile(rf"^classDef\s+{_ID_LIST}(?:\s+(.*))?$")
_CLASS_RE = re.compile(rf"^class\s+{_ID_LIST}\s+([\w-]+)$")
_STYLE_RE = re.compile(rf"^style\s+{_ID_LIST}\s+(.+)$")
_LINK_STYLE_RE = re.compile(r"^linkStyle\s+(default|\d+(?:\s*,\s*\d+)*)\s+(.+)$")
_CLICK_HREF_RE = re.compile(
    rf'^click\s+({NODE_ID})\s+(?:href\s+)?("[^"]*")'
    r'(?:\s+("[^"]*"))?(?:\s+(_self|_blank|_parent|_top))?$'
)
_CLICK_CALL_RE = re.compile(
    rf"^click\s+({NODE_ID})\s+(?:call\s+)?([A-Za-z_][\w.]*)(?:\(([^)]*)\))?"
    r'(?:\s+("[^"]*"))?$'
)
_DIRECTION_RE = re.compile(r"^direction\s+(\w+)$", re.IGNORECASE)
_SUBGRAPH_RE = re.compile(r"^subgraph\s+(.+)$")
_SUBGRAPH_BRACKET_RE = re.compile(r"^([\w-]+)\s*\[(.+)\]$")
_SUBGRAPH_ID_RE = re.compile(r"^[\w-]+$")


@dataclass(slots=True)
class _SubgraphDraft:
    id: str
    title: str
    opened_at: SourceLine | None = None
    node_ids: list[str] = field(default_factory=list)
    children: list[_SubgraphDraft] = field(default_factory=list)
    direction: str | None = None

    def freeze(self) -> FlowSubgraph:
        return FlowSubgraph(
            id=self.id,
            title=self.title,
            node_ids=tuple(self.node_ids),
            children=tuple(c.freeze() for c in self.children),
            direction=self.direction,  # type: ignore[arg-type]
        )


@dataclass(slots=True)
class _FlowContext:
    """Per-parse accumulator. The builder drives the same object."""

    direction: str = "TB"
    nodes: dict[str, FlowNode] = field(default_factory=dict)
    links: list[FlowLink] = field(default_factory=list)
    subgraphs: list[_SubgraphDraft] = field(default_factory=list)
    stack: list[_SubgraphDraft] = field(default_factory=list)
    class_defs: dict[str, dict[str, str]] = field(default_factory=dict)
    class_assignments: dict[str, list[str]] = field(default_factory=dict)
    node_styles: dict[str, dict[str, str]] = field(default_factory=dict)
    clicks: list[FlowClick] = field(default_factory=list)
    link_styles: dict[str, dict[str, str]] = field(default_factory=dict)
    acc: dict[str, str] = field(default_factory=dict)

    def mention(self, node_id: str) -> None:
        """Record ``node_id`` as a member of the innermost open subgraph."""
        if self.stack:
            current = self.stack[-1]
            if node_id not in current.node_ids:
                current.node_ids.append(node_id)

    def define_node(self, node_id: str, label: str, shape: NodeShape) -> None:
        # A later shaped definition replaces the earlier one in place
        self.nodes[node_id] = FlowNode(id=node_id, label=label, shape=shape)
        self.mention(node_id)

    def ensure_node(self, node_id: str) -> None:
        if node_id not in self.nodes:
            self.nodes[node_id] = FlowNode(id=node_id, label=node_id)
        self.mention(node_id)

    def assign_class(self, node_id: str, class_name: str) -> None:
        classes = self.class_assignments.setdefault(node_id, [])
        if class_name not in classes:
            classes.append(class_name)

    def open_subgraph(self, sg_id: str, title: str, opened_at: SourceLine | None = None) -> _SubgraphDraft:
        draft = _SubgraphDraft(id=sg_id, title=title, opened_at=opened_at)
        self.stack.append(draft)
        return draft

    def close_subgraph(self) -> None:
        completed = self.stack.pop()
        if self.stack:
            self.stack[-1].children.append(completed)
        else:
            self.subgraphs.append(completed)

    def freeze(self) -> FlowchartDiagram:
        return FlowchartDiagram(
            direction=self.direction,  # type: ignore[arg-type]
            nodes=frozen_map(self.nodes),
            links=tuple(self.links),
            subgraphs=tuple(s.freeze() for s in self.subgraphs),
            class_defs=frozen_map({k: frozen_map(v) for k, v in self.class_defs.items()}),
            class_assignments=frozen_map(
                {k: tuple(v) for k, v in self.class_assignments.items()}
            ),
            node_styles=frozen_map({k: frozen_map(v) for k, v in self.node_styles.items()}),
            clicks=tuple(self.clicks),
            link_styles=frozen_map({k: frozen_map(v) for k, v in self.link_styles.items()}),
            acc_title=self.acc.get("title"),
            acc_description=self.acc.get("description"),
        )


def parse_flowchart(text: str) -> FlowchartDiagram:
    """Parse Mermaid flowchart text.

    The ``flowchart``/``graph`` header is optional. Nodes referenced by a
    link are created on first mention with their id as label.
    """
    lines = source_lines(text, strip_semicolon=True)
    header, body = split_header(lines, HEADER_PATTERNS["flowchart"])

    ctx = _FlowContext()
    if header:
        rest = header.group("rest").strip()
        if rest:
            ctx.direction = _parse_direction(rest, lines[0], len(lines[0].text) - len(rest))

    for line in body:
        acc = match_accessibility(line.text)
        if acc:
            ctx.acc[acc[0]] = acc[1]
            continue

        # --- classDef ---
        m = _CLASS_DEF_RE.match(line.text)
        if m:
            props = parse_style_props(m.group(2) or "")
            for name in _split_ids(m.group(1)):
                ctx.class_defs[name] = props
            continue

        # --- class assignment ---
        m = _CLASS_RE.match(line.text)
        if m:
            for node_id in _split_ids(m.group(1)):
                ctx.assign_class(node_id, m.group(2))
            continue

        # --- style statement ---
        m = _STYLE_RE.match(line.text)
        if m:
            props = parse_style_props(m.group(2))
            for node_id in _split_ids(m.group(1)):
                existing = ctx.node_styles.setdefault(node_id, {})
                existing.update(props)
            continue

        m = _LINK_STYLE_RE.match(line.text)
        if m:
            props = parse_style_props(m.group(2))
            for key in _split_ids(m.group(1)):
                ctx.link_styles.setdefault(str(key), {}).update(props)
            continue

        m = _CLICK_HREF_RE.match(line.text)
        if m:
            ctx.clicks.append(FlowClick(
                node_id=m.group(1),
                kind="href",
                target=unquote(m.group(2)),
                tooltip=unquote(m.group(3)) if m.group(3) else None,
                link_target=m.group(4),
            ))
            continue

        m = _CLICK_CALL_RE.match(line.text)
        if m:
            ctx.clicks.append(FlowClick(
                node_id=m.group(1),
                kind="callback",
                target=m.group(2),
                args=m.group(3),
                tooltip=unquote(m.group(4)) if m.group(4) else None,
            ))
            continue

        # --- direction override ---
        m = _DIRECTION_RE.match(line.text)
        if m:
            direction = _parse_direction(m.group(1), line, m.start(1))
            if ctx.stack:
                ctx.stack[-1].direction = direction
            else:
                ctx.direction = direction
            continue

        # --- subgraph start ---
        m = _SUBGRAPH_RE.match(line.text)
        if m:
            sg_id, title = _parse_subgraph_header(m.group(1).strip(), line)
            ctx.open_subgraph(sg_id, title, line)
            continue

        # --- subgraph end ---
        if line.text == "end":
            if not ctx.stack:
                raise line.error("Unexpected 'end' outside a subgraph")
            ctx.close_subgraph()
            continue

        # --- Edge/node definitions ---
        _parse_edge_line(line, ctx)

    if ctx.stack:
        draft = ctx.stack[-1]
        raise (draft.opened_at or lines[-1]).error(f"Unclosed subgraph '{draft.id}'")

    return ctx.freeze()


# ============================================================================
# Statement helpers
# ============================================================================


def _split_ids(text: str) -> list[str]:
    return [s.strip() for s in text.split(",") if s.strip()]


def _parse_direction(token: str, line: SourceLine, offset: int) -> str:
    direction = token.strip().upper()
    if direction not in DIRECTIONS:
        raise line.error(f"Unknown direction {token.strip()!r}", offset)
    return direction


def _parse_subgraph_header(rest: str, line: SourceLine) -> tuple[str, str]:
    bracket_match = _SUBGRAPH_BRACKET_RE.match(rest)
    if bracket_match:
        return bracket_match.group(1), unquote(bracket_match.group(2).strip())
    if _SUBGRAPH_ID_RE.match(rest):
        return rest, rest
    title = unquote(rest)
    sg_id = re.sub(r"[^\w-]", "", title.replace(" ", "_"))
    if not sg_id:
        raise line.error(f"Cannot derive a subgraph id from {rest!r}")
    return sg_id, title


def _node_label(token: str) -> str:
    return unquote(token) if is_quoted(token) else token.strip()


# ============================================================================
# Flowchart edge line parser
# ============================================================================


def _parse_edge_line(line: SourceLine, ctx: _FlowContext) -> None:
    text = line.text

    first_group = _consume_node_group(text, ctx)
    if first_group is None:
        raise line.error(f"Invalid flowchart statement: {text!r}")

    prev_group_ids, remaining = first_group
    remaining = remaining.strip()

    while remaining:
        offset = len(text) - len(remaining)
        link = _consume_link(remaining)
        if link is None:
            raise line.error(f"Expected a link, got {remaining!r}", offset)

        link_fields, remaining = link
        remaining = remaining.strip()
        offset = len(text) - len(remaining)

        next_group = _consume_node_group(remaining, ctx)
        if next_group is None:
            raise line.error("Expected a node after the link", offset)

        next_ids, remaining = next_group
        remaining = remaining.strip()

        for source_id in prev_group_ids:
            for target_id in next_ids:
                ctx.links.append(FlowLink(source=source_id, target=target_id, **link_fields))

        prev_group_ids = next_ids


def _consume_node_group(text: str, ctx: _FlowContext) -> tuple[list[str], str] | None:
    first = _consume_node(text, ctx)
    if not first:
        return None

    ids = [first[0]]
    remaining = first[1].strip()

    while remaining.startswith("&"):
        remaining = remaining[1:].strip()
        nxt = _consume_node(remaining, ctx)
        if not nxt:
            return None
        ids.append(nxt[0])
        remaining = nxt[1].strip()

    return ids, remaining


def _consume_node(text: str, ctx: _FlowContext) -> tuple[str, str] | None:
    node_id: str | None = None
    remaining = text

    for pattern, shape in NODE_PATTERNS:
        m = pattern.match(text)
        if m:
            node_id = m.group(1)
            ctx.define_node(node_id, _node_label(m.group(2)), shape)
            remaining = text[m.end() :]
            break

    if node_id is None:
        bare_match = BARE_NODE_REGEX.match(text)
        if not bare_match:
            return None
        node_id = bare_match.group(1)
        ctx.ensure_node(node_id)
        remaining = text[bare_match.end() :]

    class_match = CLASS_SHORTHAND_REGEX.match(remaining)
    if class_match:
        ctx.assign_class(node_id, class_match.group(1))
        remaining = remaining[class_match.end() :]

    return node_id, remaining


def _consume_link(text: str) -> tuple[dict[str, Any], str] | None:
    """Match one link operator at the start of ``text``.

    Returns the FlowLink fields other than the endpoints, and the rest.
    """
    for stroke, pattern in _TEXT_LINK_PATTERNS:
        m = pattern.match(text)
        if not m:
            continue
        close = m.group("close")
        arrow_match = _ARROW_REGEX.fullmatch(("-" + close) if stroke == "dotted" else close)
        link_fields = _link_fields(arrow_match, bool(m.group("start"))) if arrow_match else None
        if link_fields is None or link_fields["stroke"] != stroke:
            continue
        link_fields["label"] = _node_label(m.group("text")) or None
        return link_fields, text[m.end() :]

    m = _ARROW_REGEX.match(text)
    if not m:
        return None
    link_fields = _link_fields(m, bool(m.group("start")))
    if link_fields is None:
        return None
    remaining = text[m.end() :]
    pipe = _PIPE_LABEL_REGEX.match(remaining)
    if pipe:
        link_fields["label"] = _node_label(pipe.group(1)) or None
        remaining = remaining[pipe.end() :]
    return link_fields, remaining


def _link_fields(m: re.Match[str], bidirectional: bool) -> dict[str, Any] | None:
    if m.group("dots") is not None:
        stroke = "dotted"
        end = m.group("dotted_end") or ""
        length = len(m.group("dots"))
    else:
        stroke = "thick" if m.group("equals") else "normal"
        body = m.group("equals") or m.group("dashes")
        end = m.group("thick_end") or m.group("normal_end") or ""
        # An open link needs one more stroke character: "---" vs "-->"
        length = len(body) - (1 if end else 2)
    if length < 1:
        return None
    arrow = _ARROW_ENDS[end]
    if bidirectional and arrow != "arrow_point":
        return None
    return {
        "stroke": stroke,
        "arrow": arrow,
        "length": length,
        "bidirectional": bidirectional,
    }

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping

from ..errors import FlowchartValidationError
from ..lexer import parse_style_props
from ..types import BuildOptions, Direction
from ..validation import ReferenceLog, should_validate
from .parser import _FlowContext
from .types import FlowchartDiagram, FlowClick, FlowLink, LinkArrow, LinkStroke, NodeShape

logger = logging.getLogger(__name__)


def _style(style: Mapping[str, str] | str) -> dict[str, str]:
    return parse_style_props(style) if isinstance(style, str) else dict(style)


class _FlowScope:
    """Node, link and subgraph statements, at the top level or in a subgraph."""

    def __init__(self, root: FlowchartBuilder) -> None:
        self._root = root

    def node(self, node_id: str, label: str | None = None, shape: NodeShape | None = None):
        if shape is None:
            shape = "square" if label is not None else "default"
        self._root._ctx.define_node(node_id, label if label is not None else node_id, shape)
        return self

    def link(
        self,
        source: str,
        target: str,
        label: str | None = None,
        *,
        stroke: LinkStroke = "normal",
        arrow: LinkArrow = "arrow_point",
        length: int = 1,
        bidirectional: bool = False,
    ):
        if length < 1:
            raise ValueError(f"Link length must be at least 1, got {length}")
        if bidirectional and arrow != "arrow_point":
            raise ValueError("Only arrow_point links can be bidirectional")
        ctx = self._root._ctx
        construct = f"link {source} --> {target}"
        self._root._refs.entity(source, construct)
        self._root._refs.entity(target, construct)
        ctx.mention(source)
        ctx.mention(target)
        ctx.links.append(FlowLink(
            source=source,
            target=target,
            label=label,
            stroke=stroke,
            arrow=arrow,
            length=length,
            bidirectional=bidirectional,
        ))
        return self

    def subgraph(
        self,
        subgraph_id: str,
        fn: Callable[[FlowSubgraphBuilder], object],
        title: str | None = None,
        direction: Direction | None = None,
    ):
        """Open a subgraph, let ``fn`` fill it, then close it."""
        ctx = self._root._ctx
        draft = ctx.open_subgraph(subgraph_id, title if title is not None else subgraph_id)
        draft.direction = direction
        fn(FlowSubgraphBuilder(self._root))
        ctx.close_subgraph()
        return self


class FlowSubgraphBuilder(_FlowScope):
    """Builder handed to ``subgraph`` callbacks."""

    def member(self, node_id: str) -> FlowSubgraphBuilder:
        """Place an already declared node in this subgraph."""
        self._root._refs.entity(node_id, f"subgraph member {node_id}")
        self._root._ctx.mention(node_id)
        return self

    def direction(self, direction: Direction) -> FlowSubgraphBuilder:
        self._root._ctx.stack[-1].direction = direction
        return self


class FlowchartBuilder(_FlowScope):
    """Fluent builder for flowcharts.

    Links, styles, class assignments and clicks refer to nodes that must be
    declared with ``node``; ``build`` reports the first one that is not.
    """

    def __init__(self, direction: Direction = "TB") -> None:
        super().__init__(self)
        self._ctx = _FlowContext(direction=direction)
        self._refs = ReferenceLog()

    def class_def(self, name: str, style: Mapping[str, str] | str) -> FlowchartBuilder:
        self._ctx.class_defs[name] = _style(style)
        return self

    def assign_class(self, node_ids: str | Iterable[str], name: str) -> FlowchartBuilder:
        if isinstance(node_ids, str):
            node_ids = [node_ids]
        for node_id in node_ids:
            construct = f"class {node_id} {name}"
            self._refs.entity(node_id, construct)
            self._refs.class_def(name, construct)
            self._ctx.assign_class(node_id, name)
        return self

    def style(self, node_id: str, style: Mapping[str, str] | str) -> FlowchartBuilder:
        self._refs.entity(node_id, f"style {node_id}")
        self._ctx.node_styles.setdefault(node_id, {}).update(_style(style))
        return self

    def click_href(
        self,
        node_id: str,
        url: str,
        tooltip: str | None = None,
        link_target: str | None = None,
    ) -> FlowchartBuilder:
        self._refs.entity(node_id, f"click {node_id}")
        self._ctx.clicks.append(FlowClick(
            node_id=node_id, kind="href", target=url, tooltip=tooltip, link_target=link_target
        ))
        return self

    def click_callback(
        self,
        node_id: str,
        function: str,
        args: str | None = None,
        tooltip: str | None = None,
    ) -> FlowchartBuilder:
        self._refs.entity(node_id, f"click {node_id}")
        self._ctx.clicks.append(FlowClick(
            node_id=node_id, kind="callback", target=function, args=args, tooltip=tooltip
        ))
        return self

    def link_style(self, index: int | str, style: Mapping[str, str] | str) -> FlowchartBuilder:
        """Style link number ``index`` (in link order), or ``"default"``."""
        key = str(index)
        if key != "default" and not key.isdigit():
            raise ValueError(f"Link style index must be a number or 'default', got {index!r}")
        self._ctx.link_styles.setdefault(key, {}).update(_style(style))
        return self

    def acc_title(self, title: str) -> FlowchartBuilder:
        self._ctx.acc["title"] = title
        return self

    def acc_description(self, description: str) -> FlowchartBuilder:
        self._ctx.acc["description"] = description
        return self

    def build(self, options: BuildOptions | None = None) -> FlowchartDiagram:
        if should_validate(options, "flowchart"):
            self._refs.check(self._ctx.nodes, self._ctx.class_defs, FlowchartValidationError)
        diagram = self._ctx.freeze()
        logger.debug(
            "Built flowchart: %d nodes, %d links", len(diagram.nodes), len(diagram.links)
        )
        return diagram


def flowchart(direction: Direction = "TB") -> FlowchartBuilder:
    return FlowchartBuilder(direction)

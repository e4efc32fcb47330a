from __future__ import annotations

from dataclasses import dataclass, field

from parsimonious.nodes import NodeVisitor

from ..engine import GrammarEngine
from ..lexer import unquote
from .types import PieChart, PieSection

# ============================================================================
# Grammar
#
# Whitespace is explicit: ``ws`` is inserted around tokens and every line
# ends with ``eos``, which takes an optional trailing ``;``. The header is
# optional so a bare body is accepted.
# ============================================================================

PIE_GRAMMAR = r"""
document     = blank* header? line*

header       = ws pie_keyword show_data? header_title? eos
pie_keyword  = ~r"pie(?![\w-])"i
show_data    = ~r"[ \t]+showData"i
header_title = ~r"[ \t]+title[ \t]+"i rest

line         = blank / statement
statement    = ws (acc_title / acc_descr / title / section) eos

acc_title    = ~r"accTitle[ \t]*:[ \t]*" rest
acc_descr    = ~r"accDescr[ \t]*:[ \t]*" rest
title        = ~r"title[ \t]+"i rest
section      = quoted ws ":" ws number

quoted       = ~r'"[^"\n]*"'
number       = ~r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
rest         = ~r"[^\n]*?(?=[ \t]*;?[ \t]*\n)"

blank        = ws comment? eos
comment      = ~r"%%[^\n]*"
eos          = ws ";"? ws eol
eol          = ~r"\n"
ws           = ~r"[ \t]*"
"""

_engine = GrammarEngine("pie", PIE_GRAMMAR)


# ============================================================================
# Per-call accumulator
# ============================================================================


@dataclass(slots=True)
class _PieContext:
    title: str | None = None
    show_data: bool = False
    sections: list[PieSection] = field(default_factory=list)
    acc_title: str | None = None
    acc_description: str | None = None

    def freeze(self) -> PieChart:
        return PieChart(
            title=self.title,
            show_data=self.show_data,
            sections=tuple(self.sections),
            acc_title=self.acc_title,
            acc_description=self.acc_description,
        )


class _PieVisitor(NodeVisitor):
    def __init__(self, context: _PieContext) -> None:
        self.context = context

    def visit_show_data(self, node, visited_children):
        self.context.show_data = True

    def visit_header_title(self, node, visited_children):
        self.context.title = node.children[1].text.strip()

    def visit_title(self, node, visited_children):
        self.context.title = node.children[1].text.strip()

    def visit_acc_title(self, node, visited_children):
        self.context.acc_title = node.children[1].text.strip()

    def visit_acc_descr(self, node, visited_children):
        self.context.acc_description = node.children[1].text.strip()

    def visit_section(self, node, visited_children):
        label = unquote(node.children[0].text)
        value = float(node.children[4].text)
        self.context.sections.append(PieSection(label=label, value=value))

    def generic_visit(self, node, visited_children):
        return visited_children or node


# ============================================================================
# Entry point
# ============================================================================


async def parse_pie_async(text: str) -> PieChart:
    """Parse pie chart text.

    The grammar is compiled on first use in a worker thread; later calls
    reuse it.
    """
    await _engine.initialize()
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    if not normalized.endswith("\n"):
        normalized += "\n"
    context = _PieContext()
    _engine.run(normalized, _PieVisitor(context))
    return context.freeze()

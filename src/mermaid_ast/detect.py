from __future__ import annotations

import re

from .errors import UnknownDialectError
from .lexer import source_lines
from .types import DiagramType

# Header keyword per dialect. The lookahead is the word boundary: "pie showData"
# matches, "piexyz" does not.
HEADER_PATTERNS: dict[DiagramType, re.Pattern[str]] = {
    tag: re.compile(rf"^(?:{keywords})(?=[\s;]|$)(?P<rest>.*)$", re.IGNORECASE)
    for tag, keywords in (
        ("flowchart", r"flowchart|graph"),
        ("sequence", r"sequenceDiagram"),
        ("class", r"classDiagram-v2|classDiagram"),
        ("state", r"stateDiagram-v2|stateDiagram"),
        ("pie", r"pie"),
        ("er", r"erDiagram"),
        ("mindmap", r"mindmap"),
        ("quadrant", r"quadrantChart"),
        ("sankey", r"sankey-beta|sankey"),
        ("timeline", r"timeline"),
        ("journey", r"journey"),
        ("xychart", r"xychart-beta|xychart"),
    )
}


def _first_line(text: str) -> str:
    lines = source_lines(text)
    return lines[0].text if lines else ""


def detect(text: str) -> DiagramType | None:
    """Identify the dialect from the first meaningful line, or ``None``."""
    first = _first_line(text)
    for tag, pattern in HEADER_PATTERNS.items():
        if pattern.match(first):
            return tag
    return None


def detect_or_raise(text: str) -> DiagramType:
    tag = detect(text)
    if tag is None:
        raise UnknownDialectError(text)
    return tag


def _is(tag: DiagramType, text: str) -> bool:
    return bool(HEADER_PATTERNS[tag].match(_first_line(text)))


def is_flowchart(text: str) -> bool:
    return _is("flowchart", text)


def is_sequence(text: str) -> bool:
    return _is("sequence", text)


def is_class_diagram(text: str) -> bool:
    return _is("class", text)


def is_state_diagram(text: str) -> bool:
    return _is("state", text)


def is_pie(text: str) -> bool:
    return _is("pie", text)


def is_er(text: str) -> bool:
    return _is("er", text)


def is_mindmap(text: str) -> bool:
    return _is("mindmap", text)


def is_quadrant(text: str) -> bool:
    return _is("quadrant", text)


def is_sankey(text: str) -> bool:
    return _is("sankey", text)


def is_timeline(text: str) -> bool:
    return _is("timeline", text)


def is_journey(text: str) -> bool:
    return _is("journey", text)


def is_xychart(text: str) -> bool:
    return _is("xychart", text)

from __future__ import annotations

import re

from ..detect import HEADER_PATTERNS
from ..lexer import (
    NUMBER,
    SourceLine,
    match_accessibility,
    parse_number,
    source_lines,
    split_header,
    unquote,
)
from ..types import frozen_map
from .types import QuadrantAxis, QuadrantChart, QuadrantPoint

_TITLE_RE = re.compile(r"^title\s+(.+)$", re.IGNORECASE)
_AXIS_RE = re.compile(r"^([xy])-axis\s+(.+)$", re.IGNORECASE)
_QUADRANT_RE = re.compile(r"^quadrant-([1-4])\s+(.+)$", re.IGNORECASE)
_CLASS_DEF_RE = re.compile(r"^classDef\s+([\w-]+)(?:\s+(.*))?$")
_POINT_RE = re.compile(
    rf"^(?P<name>.+?)(?::::(?P<cls>[\w-]+))?\s*:\s*"
    rf"\[\s*(?P<x>{NUMBER})\s*,\s*(?P<y>{NUMBER})\s*\]\s*(?P<styles>.*)$"
)


def _split_styles(text: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in text.split(",") if part.strip())


def _parse_axis(text: str) -> QuadrantAxis:
    """``Low --> High`` or just ``Low``; either side may be quoted."""
    low, arrow, high = text.partition("-->")
    low = unquote(low.strip()) or None
    if not arrow:
        return QuadrantAxis(low=low)
    return QuadrantAxis(low=low, high=unquote(high.strip()) or None)


def parse_quadrant(text: str) -> QuadrantChart:
    lines = source_lines(text, strip_semicolon=True)
    _, body = split_header(lines, HEADER_PATTERNS["quadrant"])

    title: str | None = None
    acc: dict[str, str] = {}
    axes: dict[str, QuadrantAxis] = {}
    quadrants: list[str | None] = [None, None, None, None]
    points: list[QuadrantPoint] = []
    class_defs: dict[str, tuple[str, ...]] = {}

    for line in body:
        acc_match = match_accessibility(line.text)
        if acc_match:
            acc[acc_match[0]] = acc_match[1]
            continue

        match = _TITLE_RE.match(line.text)
        if match:
            title = match.group(1).strip()
            continue

        match = _AXIS_RE.match(line.text)
        if match:
            axes[match.group(1).lower()] = _parse_axis(match.group(2))
            continue

        match = _QUADRANT_RE.match(line.text)
        if match:
            quadrants[int(match.group(1)) - 1] = unquote(match.group(2).strip())
            continue

        match = _CLASS_DEF_RE.match(line.text)
        if match:
            class_defs[match.group(1)] = _split_styles(match.group(2) or "")
            continue

        match = _POINT_RE.match(line.text)
        if match:
            points.append(_parse_point(match, line))
            continue

        raise line.error(f"Invalid quadrant chart statement: {line.text!r}")

    return QuadrantChart(
        title=title,
        x_axis=axes.get("x", QuadrantAxis()),
        y_axis=axes.get("y", QuadrantAxis()),
        quadrants=tuple(quadrants),
        points=tuple(points),
        class_defs=frozen_map(class_defs),
        acc_title=acc.get("title"),
        acc_description=acc.get("description"),
    )


def _parse_point(match: re.Match[str], line: SourceLine) -> QuadrantPoint:
    return QuadrantPoint(
        name=unquote(match.group("name").strip()),
        x=parse_number(match.group("x"), line, match.start("x")),
        y=parse_number(match.group("y"), line, match.start("y")),
        class_name=match.group("cls"),
        styles=_split_styles(match.group("styles")),
    )

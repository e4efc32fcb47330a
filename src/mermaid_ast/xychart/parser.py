from __future__ import annotations

import re

from ..detect import HEADER_PATTERNS
from ..lexer import (
    NUMBER,
    SourceLine,
    match_accessibility,
    parse_number,
    source_lines,
    split_delimited,
    split_header,
    unquote,
)
from .types import Axis, BandAxis, RangeAxis, XYChart, XYSeries

_TITLE_RE = re.compile(r"^title\s+(.+)$", re.IGNORECASE)
_AXIS_RE = re.compile(r"^([xy])-axis(?:\s+(.*))?$", re.IGNORECASE)
_RANGE_RE = re.compile(rf"^({NUMBER})\s*-->\s*({NUMBER})$")
_NUMBER_TOKEN_RE = re.compile(rf"^{NUMBER}$")
_SERIES_RE = re.compile(r'^(line|bar)\s*(?:("[^"]*")\s*)?\[(.*)\]$', re.IGNORECASE)


def _parse_values(text: str, line: SourceLine, offset: int) -> tuple[float, ...]:
    if not text.strip():
        return ()
    return tuple(parse_number(part, line, offset) for part in text.split(","))


def _parse_axis(axis: str, text: str, line: SourceLine, offset: int) -> Axis:
    body = text.strip()
    title: str | None = None
    if body.startswith('"'):
        end = body.find('"', 1)
        if end == -1:
            raise line.error("Unterminated axis title", offset)
        title = unquote(body[: end + 1])
        body = body[end + 1 :].strip()
    elif body and not body.startswith("["):
        token, _, rest = body.partition(" ")
        if not _NUMBER_TOKEN_RE.match(token):
            title = token
            body = rest.strip()

    if body.startswith("["):
        if axis != "x":
            raise line.error("Only the x-axis takes categories", offset)
        if not body.endswith("]"):
            raise line.error("Unterminated category list", offset)
        inner = body[1:-1]
        categories = () if not inner.strip() else tuple(split_delimited(inner, line, offset))
        return BandAxis(title=title, categories=categories)

    if not body:
        return RangeAxis(title=title)
    match = _RANGE_RE.match(body)
    if not match:
        raise line.error(f"Invalid axis range: {body!r}", offset)
    return RangeAxis(
        title=title,
        min=parse_number(match.group(1), line, offset),
        max=parse_number(match.group(2), line, offset),
    )


def parse_xychart(text: str) -> XYChart:
    lines = source_lines(text, strip_semicolon=True)
    header, body = split_header(lines, HEADER_PATTERNS["xychart"])
    orientation = "vertical"
    if header:
        rest = header.group("rest").strip().lower()
        if rest in ("horizontal", "vertical"):
            orientation = rest
        elif rest:
            raise lines[0].error(f"Unknown chart orientation {rest!r}")

    title: str | None = None
    acc: dict[str, str] = {}
    x_axis: Axis | None = None
    y_axis: RangeAxis | None = None
    series: list[XYSeries] = []

    for line in body:
        acc_match = match_accessibility(line.text)
        if acc_match:
            acc[acc_match[0]] = acc_match[1]
            continue

        match = _TITLE_RE.match(line.text)
        if match:
            title = unquote(match.group(1).strip())
            continue

        match = _AXIS_RE.match(line.text)
        if match:
            axis = match.group(1).lower()
            parsed = _parse_axis(axis, match.group(2) or "", line, match.start(1))
            if axis == "x":
                x_axis = parsed
            else:
                y_axis = parsed
            continue

        match = _SERIES_RE.match(line.text)
        if match:
            label = unquote(match.group(2)) if match.group(2) else None
            series.append(XYSeries(
                kind=match.group(1).lower(),
                values=_parse_values(match.group(3), line, match.start(3)),
                label=label,
            ))
            continue

        raise line.error(f"Invalid xychart statement: {line.text!r}")

    return XYChart(
        orientation=orientation,
        title=title,
        x_axis=x_axis,
        y_axis=y_axis,
        series=tuple(series),
        acc_title=acc.get("title"),
        acc_description=acc.get("description"),
    )

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..detect import HEADER_PATTERNS
from ..lexer import match_accessibility, source_lines, split_header
from .types import TimelineDiagram, TimelinePeriod, TimelineSection

_TITLE_RE = re.compile(r"^title\s+(.+)$", re.IGNORECASE)
_SECTION_RE = re.compile(r"^section\s+(.+)$", re.IGNORECASE)


@dataclass(slots=True)
class _Period:
    name: str
    events: list[str] = field(default_factory=list)


@dataclass(slots=True)
class _Section:
    name: str | None
    periods: list[_Period] = field(default_factory=list)


@dataclass(slots=True)
class _TimelineContext:
    title: str | None = None
    acc_title: str | None = None
    acc_description: str | None = None
    sections: list[_Section] = field(default_factory=list)

    def current_section(self) -> _Section:
        if not self.sections:
            self.sections.append(_Section(name=None))
        return self.sections[-1]


def _split_events(text: str) -> list[str]:
    return [part.strip() for part in text.split(":") if part.strip()]


def parse_timeline(text: str) -> TimelineDiagram:
    lines = source_lines(text)
    _, body = split_header(lines, HEADER_PATTERNS["timeline"])
    ctx = _TimelineContext()

    for line in body:
        acc = match_accessibility(line.text)
        if acc:
            if acc[0] == "title":
                ctx.acc_title = acc[1]
            else:
                ctx.acc_description = acc[1]
            continue

        match = _TITLE_RE.match(line.text)
        if match:
            ctx.title = match.group(1).strip()
            continue

        match = _SECTION_RE.match(line.text)
        if match:
            ctx.sections.append(_Section(name=match.group(1).strip()))
            continue

        if line.text.startswith(":"):
            section = ctx.current_section()
            if not section.periods:
                raise line.error("Event continuation without a time period")
            section.periods[-1].events.extend(_split_events(line.text))
            continue

        name, _, rest = line.text.partition(":")
        ctx.current_section().periods.append(
            _Period(name=name.strip(), events=_split_events(rest))
        )

    return TimelineDiagram(
        title=ctx.title,
        sections=tuple(
            TimelineSection(
                name=section.name,
                periods=tuple(
                    TimelinePeriod(name=p.name, events=tuple(p.events))
                    for p in section.periods
                ),
            )
            for section in ctx.sections
        ),
        acc_title=ctx.acc_title,
        acc_description=ctx.acc_description,
    )

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..detect import HEADER_PATTERNS
from ..lexer import match_accessibility, parse_number, source_lines, split_header
from .types import JourneyDiagram, JourneySection, JourneyTask

_TITLE_RE = re.compile(r"^title\s+(.+)$", re.IGNORECASE)
_SECTION_RE = re.compile(r"^section\s+(.+)$", re.IGNORECASE)
# Task name: score: actor, actor
_TASK_RE = re.compile(r"^([^:]+?)\s*:\s*([^:]+?)\s*(?::\s*(.*))?$")


@dataclass(slots=True)
class _Section:
    name: str | None
    tasks: list[JourneyTask] = field(default_factory=list)


def parse_journey(text: str) -> JourneyDiagram:
    lines = source_lines(text)
    _, body = split_header(lines, HEADER_PATTERNS["journey"])
    title: str | None = None
    acc_title: str | None = None
    acc_description: str | None = None
    sections: list[_Section] = []

    for line in body:
        acc = match_accessibility(line.text)
        if acc:
            if acc[0] == "title":
                acc_title = acc[1]
            else:
                acc_description = acc[1]
            continue

        match = _TITLE_RE.match(line.text)
        if match:
            title = match.group(1).strip()
            continue

        match = _SECTION_RE.match(line.text)
        if match:
            sections.append(_Section(name=match.group(1).strip()))
            continue

        match = _TASK_RE.match(line.text)
        if not match:
            raise line.error(f"Invalid journey task: {line.text!r}")
        score = parse_number(match.group(2), line, match.start(2))
        actors = tuple(
            actor.strip() for actor in (match.group(3) or "").split(",") if actor.strip()
        )
        if not sections:
            sections.append(_Section(name=None))
        sections[-1].tasks.append(
            JourneyTask(name=match.group(1).strip(), score=score, actors=actors)
        )

    return JourneyDiagram(
        title=title,
        sections=tuple(
            JourneySection(name=s.name, tasks=tuple(s.tasks)) for s in sections
        ),
        acc_title=acc_title,
        acc_description=acc_description,
    )

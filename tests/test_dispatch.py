"""Tests for dialect detection dispatch through the handler table."""

from __future__ import annotations

import asyncio
import logging
from typing import get_args

import pytest

from mermaid_ast import (
    DIALECTS,
    AsyncDialectError,
    DiagramType,
    ParseError,
    RenderOptions,
    UnknownDialectError,
    UnreachableStateError,
    parse,
    parse_async,
    render,
)

SAMPLES: dict[str, str] = {
    "flowchart": "flowchart LR\n    A --> B",
    "sequence": "sequenceDiagram\n    participant A\n    participant B\n    A->>B: hi",
    "class": "classDiagram\n    A <|-- B",
    "state": "stateDiagram-v2\n    [*] --> A",
    "er": "erDiagram\n    A ||--o{ B : has",
    "mindmap": "mindmap\n    root\n        child",
    "quadrant": "quadrantChart\n    P: [0.1, 0.2]",
    "sankey": "sankey-beta\n\nA,B,10",
    "timeline": "timeline\n    2002 : LinkedIn",
    "journey": "journey\n    section S\n        Task: 5: Me",
    "xychart": "xychart-beta\n    bar [1, 2]",
}


class TestHandlerTable:
    def test_every_dialect_has_handlers(self):
        assert set(DIALECTS) == set(get_args(DiagramType))

    def test_only_pie_is_async(self):
        assert [tag for tag, h in DIALECTS.items() if h.is_async] == ["pie"]

    @pytest.mark.parametrize("tag", sorted(SAMPLES))
    def test_detect_handlers_agree(self, tag):
        assert DIALECTS[tag].detect(SAMPLES[tag])


class TestParse:
    @pytest.mark.parametrize("tag", sorted(SAMPLES))
    def test_detected_and_canonical(self, tag):
        diagram = parse(SAMPLES[tag])
        assert diagram.type == tag
        assert render(diagram) == SAMPLES[tag]

    @pytest.mark.parametrize("tag", sorted(SAMPLES))
    def test_parse_async_matches_parse(self, tag):
        assert asyncio.run(parse_async(SAMPLES[tag])) == parse(SAMPLES[tag])

    def test_dialect_hint_allows_missing_header(self):
        diagram = parse("A --> B", dialect="flowchart")
        assert diagram.type == "flowchart"
        assert len(diagram.links) == 1

    def test_unknown_dialect(self):
        with pytest.raises(UnknownDialectError, match="Unable to detect diagram type"):
            parse("hello world")

    def test_empty_text(self):
        with pytest.raises(UnknownDialectError):
            parse("  \n%% only a comment\n")

    def test_unknown_dialect_hint(self):
        with pytest.raises(UnknownDialectError, match="Unknown dialect 'bogus'") as exc_info:
            parse("A --> B", dialect="bogus")  # type: ignore[arg-type]
        assert exc_info.value.dialect == "bogus"
        assert exc_info.value.text == "A --> B"

    def test_unknown_dialect_hint_async(self):
        with pytest.raises(UnknownDialectError, match="Unknown dialect 'bogus'"):
            asyncio.run(parse_async("A --> B", dialect="bogus"))  # type: ignore[arg-type]

    def test_pie_needs_parse_async(self):
        with pytest.raises(AsyncDialectError) as exc_info:
            parse('pie\n"A" : 1')
        assert exc_info.value.dialect == "pie"

    def test_parse_errors_propagate(self):
        with pytest.raises(ParseError):
            parse("sequenceDiagram\nend")

    def test_detection_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="mermaid_ast.dialects"):
            parse("graph TD\nA --> B")
        assert "Detected flowchart diagram" in caplog.text


class TestRender:
    def test_options_pass_through(self):
        text = render(parse(SAMPLES["flowchart"]), RenderOptions(indent="tab"))
        assert text == "flowchart LR\n\tA --> B"

    def test_unknown_structure(self):
        with pytest.raises(UnreachableStateError) as exc_info:
            render(object())  # type: ignore[arg-type]
        assert isinstance(exc_info.value, AssertionError)

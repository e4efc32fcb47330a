"""Tests for the pie dialect and its asynchronous grammar engine."""

from __future__ import annotations

import asyncio

import pytest

from mermaid_ast import AsyncDialectError, ParseError, parse, parse_async, render
from mermaid_ast.pie import PieChart, PieSection, parse_pie_async, render_pie


def parse_pie(text: str) -> PieChart:
    return asyncio.run(parse_pie_async(text))


class TestPieParsing:
    def test_decimal_values(self):
        chart = parse_pie('pie\n"A" : 33.33\n"B" : 66.67')
        assert [s.label for s in chart.sections] == ["A", "B"]
        assert chart.sections[0].value == pytest.approx(33.33)
        assert chart.sections[1].value == pytest.approx(66.67)

    def test_integer_value_is_float(self):
        chart = parse_pie('pie\n"A" : 100')
        assert chart.sections == (PieSection(label="A", value=100.0),)
        assert isinstance(chart.sections[0].value, float)

    def test_header_options(self):
        chart = parse_pie('pie showData title Key elements\n"Calcium" : 42.96')
        assert chart.show_data is True
        assert chart.title == "Key elements"

    def test_title_and_accessibility_statements(self):
        chart = parse_pie(
            "pie\n"
            "    title Pets adopted\n"
            "    accTitle: Pets\n"
            "    accDescr: Adoption numbers\n"
            '    "Dogs" : 386\n'
        )
        assert chart.title == "Pets adopted"
        assert chart.acc_title == "Pets"
        assert chart.acc_description == "Adoption numbers"
        assert chart.show_data is False

    def test_comments_and_blank_lines(self):
        chart = parse_pie('%% leading\npie\n\n    %% inside\n    "A" : 1\n')
        assert len(chart.sections) == 1

    def test_body_without_header(self):
        chart = parse_pie('"A" : 1\n"B" : 2')
        assert len(chart.sections) == 2

    def test_label_with_entity(self):
        chart = parse_pie('pie\n"say #quot;hi#quot;" : 1')
        assert chart.sections[0].label == 'say "hi"'

    def test_trailing_semicolons(self):
        chart = parse_pie('pie showData;\ntitle Pets;\n"A" : 10;\n"B" : 2 ;\n;')
        assert chart.show_data is True
        assert chart.title == "Pets"
        assert [(s.label, s.value) for s in chart.sections] == [("A", 10.0), ("B", 2.0)]

    def test_semicolon_inside_title_is_kept(self):
        assert parse_pie("pie title a;b").title == "a;b"

    def test_invalid_statement_reports_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse_pie('pie\n"A" : 1\n"B" = 2')
        assert exc_info.value.line == 3

    def test_concurrent_parses_do_not_share_state(self):
        async def run_both():
            return await asyncio.gather(
                parse_pie_async('pie\n"A" : 1'),
                parse_pie_async('pie\n"B" : 2\n"C" : 3'),
            )

        first, second = asyncio.run(run_both())
        assert [s.label for s in first.sections] == ["A"]
        assert [s.label for s in second.sections] == ["B", "C"]


class TestPieRendering:
    def test_canonical_form(self):
        chart = PieChart(
            title="Pets",
            show_data=True,
            sections=(PieSection("Dogs", 386.0), PieSection("Cats", 85.5)),
        )
        assert render_pie(chart) == (
            "pie showData\n"
            "    title Pets\n"
            '    "Dogs" : 386\n'
            '    "Cats" : 85.5'
        )

    def test_round_trip(self):
        text = 'pie\n    title T\n    "A" : 33.33\n    "B" : 66.67'
        assert render(parse_pie(text)) == text


class TestPieDispatch:
    def test_sync_parse_is_refused(self):
        with pytest.raises(AsyncDialectError, match="parse_async"):
            parse('pie\n"A" : 1')

    def test_parse_async_detects_pie(self):
        chart = asyncio.run(parse_async('pie\n"A" : 1'))
        assert chart.type == "pie"

"""Tests for the shared lexing helpers."""

from __future__ import annotations

import pytest

from mermaid_ast.errors import ParseError
from mermaid_ast.lexer import (
    SourceLine,
    format_delimited_field,
    format_number,
    format_style_props,
    match_accessibility,
    parse_number,
    parse_style_props,
    quote,
    source_lines,
    split_delimited,
    unquote,
)

LINE = SourceLine(number=3, column=5, text="")


# ============================================================================
# Line splitting
# ============================================================================


class TestSourceLines:
    def test_skips_blank_lines_and_comments(self):
        lines = source_lines("a\n\n  %% note\n  b  ")
        assert [l.text for l in lines] == ["a", "b"]

    def test_keeps_caller_line_numbers_and_columns(self):
        lines = source_lines("\n\n    foo")
        assert lines[0].number == 3
        assert lines[0].column == 5
        assert lines[0].indent == "    "

    def test_strips_trailing_semicolon_when_asked(self):
        assert source_lines("A --> B;", strip_semicolon=True)[0].text == "A --> B"
        assert source_lines("A --> B;")[0].text == "A --> B;"

    def test_handles_crlf(self):
        assert [l.text for l in source_lines("a\r\nb\r\n")] == ["a", "b"]

    def test_error_points_at_column(self):
        err = SourceLine(number=2, column=3, text="xyz").error("bad", 4)
        assert isinstance(err, ParseError)
        assert (err.line, err.column) == (2, 7)
        assert str(err) == "line 2, column 7: bad"


# ============================================================================
# Numbers
# ============================================================================


class TestNumbers:
    @pytest.mark.parametrize(
        "token,expected",
        [("100", 100.0), ("33.33", 33.33), ("-2", -2.0), (".5", 0.5), ("1e3", 1000.0), ("+7.", 7.0)],
    )
    def test_parses_numbers(self, token, expected):
        assert parse_number(token, LINE) == pytest.approx(expected)

    @pytest.mark.parametrize("token", ["", "abc", "1.2.3", "--1", "1,5"])
    def test_rejects_non_numbers(self, token):
        with pytest.raises(ParseError, match="Expected a number"):
            parse_number(token, LINE)

    @pytest.mark.parametrize(
        "value,expected",
        [(100.0, "100"), (33.33, "33.33"), (-2.0, "-2"), (0.5, "0.5"), (0.0, "0")],
    )
    def test_formats_numbers(self, value, expected):
        assert format_number(value) == expected


# ============================================================================
# Quotes
# ============================================================================


class TestQuotes:
    def test_quote_escapes_inner_quotes(self):
        assert quote('say "hi"') == '"say #quot;hi#quot;"'

    def test_unquote_decodes_entity(self):
        assert unquote('"say #quot;hi#quot;"') == 'say "hi"'

    def test_unquote_leaves_bare_text(self):
        assert unquote("plain") == "plain"
        assert unquote('"') == '"'


# ============================================================================
# Delimited records
# ============================================================================


class TestDelimitedRecords:
    def test_splits_plain_fields(self):
        assert split_delimited("a, b ,c", LINE) == ["a", "b", "c"]

    def test_quoted_field_keeps_delimiter(self):
        assert split_delimited('"A, Inc",B,10', LINE) == ["A, Inc", "B", "10"]

    def test_doubled_quote_is_literal(self):
        assert split_delimited('"A ""Company""",B,10', LINE) == ['A "Company"', "B", "10"]

    def test_empty_fields(self):
        assert split_delimited("a,,b,", LINE) == ["a", "", "b", ""]

    def test_unterminated_quote(self):
        with pytest.raises(ParseError, match="Unterminated quoted field"):
            split_delimited('"abc,d', LINE)

    def test_garbage_after_quoted_field(self):
        with pytest.raises(ParseError, match="after quoted field"):
            split_delimited('"abc"x,d', LINE)

    @pytest.mark.parametrize(
        "value,expected",
        [("plain", "plain"), ("A, Inc", '"A, Inc"'), ('say "x"', '"say ""x"""'), (" pad", '" pad"')],
    )
    def test_format_field(self, value, expected):
        assert format_delimited_field(value) == expected


# ============================================================================
# Style properties and accessibility lines
# ============================================================================


class TestStyleProps:
    def test_parses_pairs_in_order(self):
        style = parse_style_props("fill:#f00, stroke:#333,stroke-width:2px")
        assert list(style.items()) == [
            ("fill", "#f00"),
            ("stroke", "#333"),
            ("stroke-width", "2px"),
        ]

    def test_ignores_malformed_pairs(self):
        assert parse_style_props("fill, :x,color:") == {}

    def test_formats_pairs(self):
        assert format_style_props({"fill": "#f00", "stroke": "#333"}) == "fill:#f00,stroke:#333"


class TestAccessibility:
    def test_title(self):
        assert match_accessibility("accTitle: My chart") == ("title", "My chart")

    def test_description(self):
        assert match_accessibility("accDescr :about it") == ("description", "about it")

    def test_other_text(self):
        assert match_accessibility("title foo") is None

"""Tests for option records and the error taxonomy."""

from __future__ import annotations

import dataclasses

import pytest

from mermaid_ast import (
    BuildOptions,
    MermaidError,
    ParseError,
    RenderOptions,
    UnknownDialectError,
    UnreachableStateError,
    assert_never,
)
from mermaid_ast.class_diagram import ClassDiagram
from mermaid_ast.er import ErDiagram
from mermaid_ast.flowchart import FlowchartDiagram
from mermaid_ast.quadrant import QuadrantChart
from mermaid_ast.sankey import SankeyDiagram
from mermaid_ast.sequence import SequenceDiagram
from mermaid_ast.state import StateDiagram
from mermaid_ast.types import EMPTY_MAP, frozen_map, resolve_render_options


class TestRenderOptions:
    def test_defaults(self):
        opts = resolve_render_options(None)
        assert opts == RenderOptions()
        assert opts.indent_unit == "    "
        assert not (opts.inline_classes or opts.compact_links or opts.sort_entities)

    @pytest.mark.parametrize("indent,unit", [(2, "  "), ("tab", "\t"), ("\t\t", "\t\t"), (1, " ")])
    def test_indent_unit(self, indent, unit):
        assert RenderOptions(indent=indent).indent_unit == unit

    @pytest.mark.parametrize("indent", [0, -2, "", "--", " x"])
    def test_indent_must_be_whitespace(self, indent):
        with pytest.raises(ValueError, match="one or more whitespace characters"):
            RenderOptions(indent=indent)

    def test_merged_rechecks_indent(self):
        with pytest.raises(ValueError):
            RenderOptions().merged(indent=0)

    def test_merged_overlays_fields(self):
        base = RenderOptions(indent=2)
        merged = base.merged(sort_entities=True)
        assert merged == RenderOptions(indent=2, sort_entities=True)
        assert base.sort_entities is False

    def test_unknown_option(self):
        with pytest.raises(TypeError):
            RenderOptions().merged(colour="red")

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RenderOptions().indent = 2  # type: ignore[misc]


class TestBuildOptions:
    def test_validates_by_default(self):
        assert BuildOptions().validate is True


class TestFrozenMap:
    def test_read_only_snapshot(self):
        source = {"a": 1}
        snapshot = frozen_map(source)
        source["b"] = 2
        assert dict(snapshot) == {"a": 1}
        with pytest.raises(TypeError):
            snapshot["c"] = 3  # type: ignore[index]

    def test_empty(self):
        assert frozen_map({}) is EMPTY_MAP
        assert frozen_map(None) is EMPTY_MAP


class TestStructureDefaults:
    @pytest.mark.parametrize(
        "structure",
        [
            FlowchartDiagram,
            SequenceDiagram,
            ClassDiagram,
            StateDiagram,
            ErDiagram,
            SankeyDiagram,
            QuadrantChart,
        ],
    )
    def test_mapping_fields_use_a_factory(self, structure):
        # A shared mapping default is rejected by dataclasses before 3.12
        for f in dataclasses.fields(structure):
            assert f.default is not EMPTY_MAP, f.name

    def test_empty_structures_compare_equal(self):
        first, second = FlowchartDiagram(), FlowchartDiagram()
        assert dict(first.nodes) == {}
        assert first == second


class TestErrors:
    def test_parse_error_position(self):
        err = ParseError("Unexpected token", 3, 7)
        assert str(err) == "line 3, column 7: Unexpected token"
        assert (err.line, err.column, err.message) == (3, 7, "Unexpected token")
        assert isinstance(err, MermaidError)

    def test_unknown_dialect_keeps_text(self):
        err = UnknownDialectError("nonsense\nmore")
        assert err.text == "nonsense\nmore"
        assert "'nonsense'" in str(err)

    def test_unreachable_is_an_assertion(self):
        with pytest.raises(UnreachableStateError, match="Unhandled shape: 'blob'") as exc_info:
            assert_never("blob", "shape")
        assert isinstance(exc_info.value, AssertionError)
        assert not isinstance(exc_info.value, MermaidError)

"""Tests for the ER diagram parser and renderer."""

from __future__ import annotations

import pytest

from mermaid_ast import ParseError, RenderOptions
from mermaid_ast.er import ErAttribute, parse_er_diagram, render_er_diagram


# ============================================================================
# Entities and attributes
# ============================================================================


class TestEntities:
    def test_entity_block(self):
        d = parse_er_diagram(
            "erDiagram\n"
            "  CUSTOMER {\n"
            "    string name PK\n"
            '    string email UK "login id"\n'
            "    int org_id FK, UK\n"
            "  }"
        )
        attrs = d.entities["CUSTOMER"].attributes
        assert attrs[0] == ErAttribute(type="string", name="name", keys=("PK",))
        assert attrs[1].comment == "login id"
        assert attrs[2].keys == ("FK", "UK")

    def test_alias(self):
        d = parse_er_diagram('erDiagram\nCUSTOMER["Customer Account"] {\n}')
        assert d.entities["CUSTOMER"].label == "Customer Account"

    def test_standalone_entity(self):
        d = parse_er_diagram("erDiagram\nPRODUCT")
        assert list(d.entities) == ["PRODUCT"]

    def test_unclosed_block(self):
        with pytest.raises(ParseError, match="Unclosed entity block 'A'") as exc_info:
            parse_er_diagram("erDiagram\nA {\n  int id")
        assert exc_info.value.line == 2

    def test_unknown_key(self):
        with pytest.raises(ParseError, match="Unknown attribute key 'XK'"):
            parse_er_diagram("erDiagram\nA {\n  int id XK\n}")


# ============================================================================
# Relationships
# ============================================================================


class TestRelationships:
    @pytest.mark.parametrize(
        "arrow,left,right",
        [
            ("||--||", "one", "one"),
            ("|o--o|", "zero-one", "zero-one"),
            ("}|--|{", "many", "many"),
            ("}o--o{", "zero-many", "zero-many"),
            ("||--o{", "one", "zero-many"),
        ],
    )
    def test_cardinalities(self, arrow, left, right):
        d = parse_er_diagram(f"erDiagram\nA {arrow} B : rel")
        rel = d.relationships[0]
        assert (rel.cardinality1, rel.cardinality2) == (left, right)
        assert rel.identifying is True

    def test_non_identifying_and_quoted_label(self):
        rel = parse_er_diagram('erDiagram\nA ||..o{ B : "has many"').relationships[0]
        assert rel.identifying is False
        assert rel.label == "has many"

    def test_entities_created_from_relationships(self):
        d = parse_er_diagram("erDiagram\nCUSTOMER ||--o{ ORDER : places")
        assert list(d.entities) == ["CUSTOMER", "ORDER"]

    def test_invalid_statement(self):
        with pytest.raises(ParseError, match="Invalid ER statement"):
            parse_er_diagram("erDiagram\nA -> B")


# ============================================================================
# Rendering
# ============================================================================


class TestRendering:
    def test_canonical_form(self):
        d = parse_er_diagram(
            "erDiagram\n"
            "direction LR\n"
            "ORDER ||--|{ LINE-ITEM : contains\n"
            'CUSTOMER["Customer"] {\n'
            "string name PK\n"
            "}\n"
            "CUSTOMER ||..o{ ORDER : \"places order\"\n"
        )
        assert render_er_diagram(d) == (
            "erDiagram\n"
            "    direction LR\n"
            '    CUSTOMER["Customer"] {\n'
            "        string name PK\n"
            "    }\n"
            "    ORDER ||--|{ LINE-ITEM : contains\n"
            '    CUSTOMER ||..o{ ORDER : "places order"'
        )

    def test_unreferenced_entities_are_declared(self):
        d = parse_er_diagram("erDiagram\nZ\nA")
        assert render_er_diagram(d, RenderOptions(sort_entities=True)) == "erDiagram\n    A\n    Z"

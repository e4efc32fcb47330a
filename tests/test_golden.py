"""Golden snapshot tests.

Each ``golden/<dialect>/<name>.input.mmd`` is parsed and rendered, and the
result must equal ``<name>.output.mmd``. The recorded output must also be a
fixed point: parsing and rendering it again reproduces it exactly. The
fixed point must hold for every options value, not just the defaults.

Set ``UPDATE_GOLDEN=1`` to rewrite the recorded outputs.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import get_args

import pytest

from mermaid_ast import DiagramType, RenderOptions, parse_async, render

GOLDEN_DIR = Path(__file__).parent / "golden"
UPDATE = os.environ.get("UPDATE_GOLDEN") == "1"

CASES = sorted(GOLDEN_DIR.glob("*/*.input.mmd"))

OPTION_GRID = {
    "indent-2": RenderOptions(indent=2),
    "tab": RenderOptions(indent="tab"),
    "sorted": RenderOptions(sort_entities=True),
    "inline-compact": RenderOptions(inline_classes=True, compact_links=True),
    "everything": RenderOptions(
        indent=3, inline_classes=True, compact_links=True, sort_entities=True
    ),
}


def _round_trip(text: str, dialect: str, options: RenderOptions | None = None) -> str:
    # parse_async reads every dialect, pie included
    return render(asyncio.run(parse_async(text, dialect=dialect)), options) + "\n"


def _case_id(path: Path) -> str:
    return f"{path.parent.name}/{path.name.removesuffix('.input.mmd')}"


@pytest.mark.parametrize("input_path", CASES, ids=[_case_id(p) for p in CASES])
class TestGolden:
    def test_snapshot(self, input_path: Path):
        output_path = input_path.with_name(input_path.name.replace(".input.", ".output."))
        rendered = _round_trip(input_path.read_text(), input_path.parent.name)
        if UPDATE:
            output_path.write_text(rendered)
        assert rendered == output_path.read_text()

    def test_fixed_point(self, input_path: Path):
        output_path = input_path.with_name(input_path.name.replace(".input.", ".output."))
        expected = output_path.read_text()
        assert _round_trip(expected, input_path.parent.name) == expected

    @pytest.mark.parametrize("options", list(OPTION_GRID.values()), ids=list(OPTION_GRID))
    def test_fixed_point_with_options(self, input_path: Path, options: RenderOptions):
        dialect = input_path.parent.name
        once = _round_trip(input_path.read_text(), dialect, options)
        assert _round_trip(once, dialect, options) == once


def test_every_dialect_has_a_fixture():
    assert {p.parent.name for p in CASES} == set(get_args(DiagramType))

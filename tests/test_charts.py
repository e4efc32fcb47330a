"""Tests for the timeline, journey, quadrant and xychart dialects."""

from __future__ import annotations

import pytest

from mermaid_ast import ParseError, RenderOptions
from mermaid_ast.journey import parse_journey, render_journey
from mermaid_ast.quadrant import QuadrantAxis, parse_quadrant, render_quadrant
from mermaid_ast.timeline import parse_timeline, render_timeline
from mermaid_ast.xychart import BandAxis, RangeAxis, parse_xychart, render_xychart


# ============================================================================
# Timeline
# ============================================================================


class TestTimeline:
    def test_periods_and_events(self):
        d = parse_timeline(
            "timeline\n"
            "    title History of Social Media\n"
            "    2002 : LinkedIn\n"
            "    2004 : Facebook : Google\n"
            "         : Orkut\n"
        )
        assert d.title == "History of Social Media"
        (section,) = d.sections
        assert section.name is None
        assert [p.name for p in section.periods] == ["2002", "2004"]
        assert section.periods[1].events == ("Facebook", "Google", "Orkut")

    def test_sections(self):
        d = parse_timeline("timeline\nsection Early\n1990 : Web\nsection Late\n2000 : Bubble")
        assert [s.name for s in d.sections] == ["Early", "Late"]

    def test_period_without_events(self):
        d = parse_timeline("timeline\n2020")
        assert d.sections[0].periods[0].events == ()

    def test_dangling_continuation(self):
        with pytest.raises(ParseError, match="without a time period"):
            parse_timeline("timeline\n: orphan")

    def test_render(self):
        d = parse_timeline("timeline\ntitle T\n2002 : A\nsection S\n2004 : B : C")
        assert render_timeline(d) == (
            "timeline\n"
            "    title T\n"
            "    2002 : A\n"
            "    section S\n"
            "        2004 : B : C"
        )


# ============================================================================
# Journey
# ============================================================================


class TestJourney:
    def test_tasks(self):
        d = parse_journey(
            "journey\n"
            "    title My working day\n"
            "    section Go to work\n"
            "      Make tea: 5: Me\n"
            "      Go upstairs: 3: Me, Cat\n"
            "      Do work: 1\n"
        )
        assert d.title == "My working day"
        tasks = d.sections[0].tasks
        assert tasks[0].name == "Make tea"
        assert tasks[0].score == 5.0
        assert tasks[1].actors == ("Me", "Cat")
        assert tasks[2].actors == ()

    def test_bad_score(self):
        with pytest.raises(ParseError, match="Expected a number"):
            parse_journey("journey\nTask: high: Me")

    def test_invalid_line(self):
        with pytest.raises(ParseError, match="Invalid journey task"):
            parse_journey("journey\njust words")

    def test_render(self):
        d = parse_journey("journey\ntitle J\nsection S\nA: 5: Me,Cat\nB: 2.5")
        assert render_journey(d) == (
            "journey\n"
            "    title J\n"
            "    section S\n"
            "        A: 5: Me, Cat\n"
            "        B: 2.5"
        )


# ============================================================================
# Quadrant chart
# ============================================================================

QUADRANT = """quadrantChart
    title Reach and engagement
    x-axis Low Reach --> High Reach
    y-axis Low Engagement --> High Engagement
    quadrant-1 We should expand
    quadrant-3 Re-evaluate
    Campaign A: [0.3, 0.6]
    Campaign B:::hot: [0.45, 0.23] radius: 12, color: #ff3300
    classDef hot color: #ff0000, radius: 10
"""


class TestQuadrant:
    def test_parse(self):
        chart = parse_quadrant(QUADRANT)
        assert chart.title == "Reach and engagement"
        assert chart.x_axis == QuadrantAxis(low="Low Reach", high="High Reach")
        assert chart.quadrants == ("We should expand", None, "Re-evaluate", None)
        a, b = chart.points
        assert (a.name, a.x, a.y) == ("Campaign A", 0.3, 0.6)
        assert b.class_name == "hot"
        assert b.styles == ("radius: 12", "color: #ff3300")
        assert chart.class_defs["hot"] == ("color: #ff0000", "radius: 10")

    def test_single_sided_axis(self):
        chart = parse_quadrant("quadrantChart\nx-axis Effort")
        assert chart.x_axis == QuadrantAxis(low="Effort")

    def test_invalid_point(self):
        with pytest.raises(ParseError, match="Invalid quadrant chart statement"):
            parse_quadrant("quadrantChart\nPoint: [x, 1]")

    def test_trailing_semicolons(self):
        chart = parse_quadrant("quadrantChart;\ntitle Reach;\nA: [0.1, 0.2];")
        assert chart.title == "Reach"
        assert (chart.points[0].x, chart.points[0].y) == (0.1, 0.2)

    def test_render(self):
        assert render_quadrant(parse_quadrant(QUADRANT)) == (
            "quadrantChart\n"
            "    title Reach and engagement\n"
            '    x-axis "Low Reach" --> "High Reach"\n'
            '    y-axis "Low Engagement" --> "High Engagement"\n'
            "    quadrant-1 We should expand\n"
            "    quadrant-3 Re-evaluate\n"
            "    Campaign A: [0.3, 0.6]\n"
            "    Campaign B:::hot: [0.45, 0.23] radius: 12, color: #ff3300\n"
            "    classDef hot color: #ff0000, radius: 10"
        )

    def test_sorted_points(self):
        chart = parse_quadrant("quadrantChart\nb: [0.1, 0.1]\na: [0.2, 0.2]")
        text = render_quadrant(chart, RenderOptions(sort_entities=True, indent=2))
        assert text == "quadrantChart\n  a: [0.2, 0.2]\n  b: [0.1, 0.1]"


# ============================================================================
# XY chart
# ============================================================================

XYCHART = """xychart-beta
    title "Sales Revenue"
    x-axis [jan, feb, mar]
    y-axis "Revenue (in $)" 4000 --> 11000
    bar [5000, 6000, 7500]
    line "trend" [5000, 6000, 7500.5]
"""


class TestXYChart:
    def test_parse(self):
        chart = parse_xychart(XYCHART)
        assert chart.orientation == "vertical"
        assert chart.title == "Sales Revenue"
        assert chart.x_axis == BandAxis(categories=("jan", "feb", "mar"))
        assert chart.y_axis == RangeAxis(title="Revenue (in $)", min=4000.0, max=11000.0)
        bar, line = chart.series
        assert bar.kind == "bar" and bar.label is None
        assert line.label == "trend"
        assert line.values[-1] == 7500.5

    def test_horizontal(self):
        assert parse_xychart("xychart-beta horizontal").orientation == "horizontal"

    def test_unknown_orientation(self):
        with pytest.raises(ParseError, match="Unknown chart orientation"):
            parse_xychart("xychart-beta diagonal")

    def test_numeric_x_axis(self):
        chart = parse_xychart("xychart-beta\nx-axis 1 --> 10")
        assert chart.x_axis == RangeAxis(min=1.0, max=10.0)

    def test_y_axis_rejects_categories(self):
        with pytest.raises(ParseError, match="Only the x-axis takes categories"):
            parse_xychart("xychart-beta\ny-axis [a, b]")

    def test_bad_series_value(self):
        with pytest.raises(ParseError, match="Expected a number"):
            parse_xychart("xychart-beta\nbar [1, two]")

    def test_trailing_semicolons(self):
        chart = parse_xychart("xychart-beta\nx-axis [a, b];\nbar [1, 2];")
        assert chart.x_axis == BandAxis(categories=("a", "b"))
        assert chart.series[0].values == (1.0, 2.0)

    def test_render(self):
        assert render_xychart(parse_xychart(XYCHART)) == (
            "xychart-beta\n"
            '    title "Sales Revenue"\n'
            '    x-axis ["jan", "feb", "mar"]\n'
            '    y-axis "Revenue (in $)" 4000 --> 11000\n'
            "    bar [5000, 6000, 7500]\n"
            '    line "trend" [5000, 6000, 7500.5]'
        )

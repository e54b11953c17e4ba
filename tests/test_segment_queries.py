"""Test module for operations shared by all segments: intersections between
segments (pathseg.bounds_intersection), closest points, dashes and approximations.

The tests are run using pytest.
"""

import math

import pytest

from pathseg.arc import Arc
from pathseg.bounds_intersection import BoundsIntersection, IntersectionRange
from pathseg.cubic import Cubic
from pathseg.geom import Ray2, Vec2
from pathseg.line import Line
from pathseg.quadratic import Quadratic
from pathseg.segment import Segment

ARCH = Cubic((0, 0), (0, 1), (1, 1), (1, 0))
WAVE = Cubic((0, 0), (1, 3), (3, -2), (4, 1))


###############################################################################
# BoundsIntersection
###############################################################################
class TestBoundsIntersection:
    """Intersections by recursive bounds subdivision."""

    def test_box_intersects(self):
        """Boxes are given by two corners in any order, touching counts."""
        assert BoundsIntersection.box_intersects(Vec2(0, 0), Vec2(1, 1), Vec2(2, 2), Vec2(1, 1))
        assert BoundsIntersection.box_intersects(Vec2(1, 1), Vec2(0, 0), Vec2(0.5, 2), Vec2(0.6, -1))
        assert not BoundsIntersection.box_intersects(Vec2(0, 0), Vec2(1, 1), Vec2(1.1, 0), Vec2(2, 1))

    def test_range_distance(self):
        """The distance sums the squared parameter differences."""
        point = Vec2(0, 0)
        first = IntersectionRange(0, 0.5, 0, 0.5, point, point, point, point)
        second = IntersectionRange(0.5, 1, 0, 0.5, point, point, point, point)
        assert first.distance(second) == pytest.approx(0.5)
        assert first.distance(first) == 0

    def test_push_subdivisions(self):
        """Crossing diagonals keep the quarters around the crossing."""
        a = Line((0, 0), (2, 2))
        b = Line((0, 2), (2, 0))
        candidate = IntersectionRange(0, 1, 0, 1, a.start, a.end, b.start, b.end)
        result = []
        candidate.push_subdivisions(a, b, result)
        assert result
        for quarter in result:
            assert quarter.at_max - quarter.at_min == pytest.approx(0.5)
            assert quarter.at_min <= 0.5 <= quarter.at_max
            assert quarter.bt_min <= 0.5 <= quarter.bt_max

    def test_crossing_lines(self):
        """Test the generic algorithm on two lines."""
        intersections = BoundsIntersection.intersect(Line((0, 0), (2, 2)), Line((0, 2), (2, 0)))
        assert len(intersections) == 1
        assert intersections[0].point.equals_epsilon(Vec2(1, 1), 1e-9)
        assert intersections[0].a_t == pytest.approx(0.5)
        assert intersections[0].b_t == pytest.approx(0.5)

    def test_disjoint_bounds(self):
        """Segments with disjoint bounds do not intersect."""
        assert BoundsIntersection.intersect(ARCH, Line((5, 5), (6, 6))) == []

    def test_agrees_with_ray_intersection(self):
        """Bounds subdivision finds the same crossings as the ray based line intersection."""
        line = Line((-1, 0.5), (2, 0.5))
        expected = sorted(hit.a_t for hit in Segment.intersect(ARCH, line))
        found = sorted(hit.a_t for hit in BoundsIntersection.intersect(ARCH, line))
        assert expected == pytest.approx([(1 - math.sqrt(1 / 3)) / 2, (1 + math.sqrt(1 / 3)) / 2])
        assert found == pytest.approx(expected, abs=1e-9)

    def test_crossing_quadratics(self):
        """Two parabolas with the same x parametrization cross at equal parameters."""
        a = Quadratic((0, 0), (1, 2), (2, 0))
        b = Quadratic((0, 1), (1, -1), (2, 1))
        intersections = sorted(Segment.intersect(a, b), key=lambda hit: hit.a_t)
        assert len(intersections) == 2
        expected = [0.5 - math.sqrt(2) / 4, 0.5 + math.sqrt(2) / 4]
        for intersection, t in zip(intersections, expected):
            assert intersection.a_t == pytest.approx(t, abs=1e-9)
            assert intersection.b_t == pytest.approx(t, abs=1e-9)

    def test_arc_and_cubic(self):
        """Mixed segment types meet at points on both."""
        arc = Arc((2, 0), 1.5, 0, math.pi, False)
        intersections = Segment.intersect(arc, WAVE)
        assert intersections
        for intersection in intersections:
            assert arc.position_at(intersection.a_t).equals_epsilon(intersection.point, 1e-6)
            assert WAVE.position_at(intersection.b_t).equals_epsilon(intersection.point, 1e-6)

    def test_line_operand_order(self):
        """Parameters follow the operand order when a line is involved."""
        line = Line((0.5, -1), (0.5, 2))
        first = Segment.intersect(ARCH, line)
        second = Segment.intersect(line, ARCH)
        assert len(first) == len(second) == 1
        assert first[0].a_t == pytest.approx(second[0].b_t)
        assert first[0].a_t == pytest.approx(0.5)
        assert first[0].b_t == pytest.approx(0.5833333333)


###############################################################################
# Shared segment operations
###############################################################################
class TestSegmentOperations:
    """Closest points, dashes, slicing and approximations."""

    def test_closest_point_on_curve(self):
        """The top of the arch is closest to a point above it."""
        results = Segment.closest_to_point([ARCH], Vec2(0.5, 2), 1e-7)
        best = Segment.filter_closest_to_point_result(results)
        assert len(best) == 1
        assert best[0].t == pytest.approx(0.5, abs=1e-6)
        assert best[0].distance_squared == pytest.approx(1.5625, abs=1e-9)

    def test_closest_point_over_segments(self):
        """The closest of several segments wins."""
        far = Line((0, 10), (1, 10))
        near = Line((0, 1), (1, 1))
        results = Segment.closest_to_point([far, near, ARCH], Vec2(0.5, 1.5), 1e-7)
        assert [result.segment for result in results] == [near]

    def test_dash_values(self):
        """Dash toggles along a straight line."""
        dashes = Line((0, 0), (10, 0)).get_dash_values([2, 3], 0)
        assert dashes.values == pytest.approx([0.2, 0.5, 0.7, 1.0])
        assert dashes.arc_length == pytest.approx(10)
        assert dashes.initially_inside

    def test_dash_values_with_offset(self):
        """An offset longer than the dash starts in the gap."""
        dashes = Line((0, 0), (10, 0)).get_dash_values([2, 3], 3)
        assert not dashes.initially_inside
        assert dashes.values[0] == pytest.approx(0.2)

    def test_slice(self):
        """A slice follows the original parametrization linearly."""
        piece = WAVE.slice(0.25, 0.75)
        assert piece.start.equals_epsilon(WAVE.position_at(0.25), 1e-12)
        assert piece.position_at(0.5).equals_epsilon(WAVE.position_at(0.5), 1e-12)
        assert piece.end.equals_epsilon(WAVE.position_at(0.75), 1e-12)

    def test_subdivided_into_monotone(self):
        """The arch splits at its top."""
        pieces = ARCH.subdivided_into_monotone()
        assert len(pieces) == 2
        assert pieces[0].end.equals_epsilon(Vec2(0.5, 0.75), 1e-12)

    def test_piecewise_linear(self):
        """Forced levels give a contiguous polyline."""
        lines = WAVE.to_piecewise_linear_segments(min_levels=3, max_levels=3)
        assert len(lines) == 8
        assert all(isinstance(line, Line) for line in lines)
        assert lines[0].start == WAVE.start
        assert lines[-1].end == WAVE.end
        for first, second in zip(lines[:-1], lines[1:]):
            assert first.end == second.start

    def test_piecewise_linear_or_arc(self):
        """The approximation runs from start to end without gaps."""
        pieces = WAVE.to_piecewise_linear_or_arc_segments()
        assert pieces
        assert all(isinstance(piece, (Arc, Line)) for piece in pieces)
        assert pieces[0].start.equals_epsilon(WAVE.start, 1e-6)
        assert pieces[-1].end.equals_epsilon(WAVE.end, 1e-6)
        for first, second in zip(pieces[:-1], pieces[1:]):
            assert first.end.equals_epsilon(second.start, 1e-6)

    def test_winding_of_circle(self):
        """A ray from inside a full circle crosses it once."""
        circle = Arc((0, 0), 1, 0, 2 * math.pi, False)
        assert abs(circle.winding_intersection(Ray2(Vec2(0, 0), Vec2(1, 1)))) == 1

    def test_stroked_bounds_dilated(self):
        """Axis-aligned end tangents allow simple dilation of the bounds."""
        assert Line((0, 0), (1, 0)).are_stroked_bounds_dilated()
        assert ARCH.are_stroked_bounds_dilated()
        assert not Line((0, 0), (1, 1)).are_stroked_bounds_dilated()

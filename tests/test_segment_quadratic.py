"""Test module for the Quadratic segment in pathseg.quadratic

svgpathtools serves as an independent reference for positions, bounds and lengths.
The tests are run using pytest.
"""

import numpy as np
import pytest
import svgpathtools

from pathseg.cubic import Cubic
from pathseg.geom import Ray2, Vec2
from pathseg.line import Line
from pathseg.quadratic import Quadratic
from pathseg.segment import Segment


def reference(quadratic: Quadratic) -> svgpathtools.QuadraticBezier:
    """The same curve as svgpathtools object."""
    return svgpathtools.QuadraticBezier(
        complex(*quadratic.start), complex(*quadratic.control), complex(*quadratic.end)
    )


QUADRATIC = Quadratic((0, 0), (2, 4), (5, 1))


###############################################################################
# Evaluation
###############################################################################
class TestQuadraticEvaluation:
    """Positions, tangents, curvature and subdivision."""

    def test_positions_match_reference(self):
        """Positions agree with svgpathtools."""
        ref = reference(QUADRATIC)
        for t in np.linspace(0, 1, 11):
            point = QUADRATIC.position_at(float(t))
            expected = ref.point(float(t))
            assert point.equals_epsilon(Vec2(expected.real, expected.imag), 1e-12)

    def test_exact_endpoints(self):
        """position_at returns the end points exactly."""
        quadratic = Quadratic((0.1, 0.7), (0.3, 0.9), (0.7, 0.1))
        assert quadratic.position_at(0) == quadratic.start
        assert quadratic.position_at(1) == quadratic.end

    def test_tangent_is_derivative(self):
        """The tangent is the non-normalized derivative."""
        ref = reference(QUADRATIC)
        derivative = ref.derivative(0.3)
        assert QUADRATIC.tangent_at(0.3).equals_epsilon(Vec2(derivative.real, derivative.imag), 1e-12)

    def test_curvature_matches_reference(self):
        """Endpoint formula and interior subdivision agree with the analytic curvature magnitude."""
        ref = reference(QUADRATIC)
        for t in (0.0, 0.4, 1.0):
            assert abs(QUADRATIC.curvature_at(t)) == pytest.approx(ref.curvature(t), rel=1e-6)

    def test_curvature_with_control_on_endpoint(self):
        """A control point on an end point makes a straight curve."""
        straight = Quadratic((0, 0), (0, 0), (2, 1))
        assert straight.curvature_at(0) == 0
        assert straight.curvature_at(1) == 0
        assert straight.curvature_at(0.5) == 0
        assert Quadratic((3, 3), (3, 3), (3, 3)).curvature_at(0.5) == 0

    def test_subdivided_reproduces_curve(self):
        """Both halves together trace the original curve."""
        t_split = 0.3
        first, second = QUADRATIC.subdivided(t_split)
        for u in np.linspace(0, 1, 50):
            u = float(u)
            if u <= t_split:
                point = first.position_at(u / t_split)
            else:
                point = second.position_at((u - t_split) / (1 - t_split))
            assert point.equals_epsilon(QUADRATIC.position_at(u), 1e-9)

    def test_bounds_match_reference(self):
        """Bounds include the interior extremum."""
        xmin, xmax, ymin, ymax = reference(QUADRATIC).bbox()
        bounds = QUADRATIC.get_bounds()
        assert bounds.extent == pytest.approx((xmin, ymin, xmax, ymax))
        assert bounds.ymax > max(QUADRATIC.start.y, QUADRATIC.end.y)

    def test_arc_length_matches_reference(self):
        """Test the adaptive arc length."""
        assert QUADRATIC.get_arc_length() == pytest.approx(reference(QUADRATIC).length(), rel=1e-6)

    def test_polygonize_matches_positions(self):
        """Forward differencing and vectorized evaluation follow the curve."""
        for steps in (8, 100):
            points = QUADRATIC.polygonize(steps)
            expected = [QUADRATIC.position_at(float(t)).to_tuple() for t in np.linspace(0, 1, steps + 1)]
            assert np.allclose(points, expected)


###############################################################################
# Shape operations
###############################################################################
class TestQuadraticOperations:
    """Degree elevation, reparametrization, degeneracies and strokes."""

    def test_degree_elevated(self):
        """The elevated cubic traces the same curve."""
        cubic = QUADRATIC.degree_elevated()
        assert isinstance(cubic, Cubic)
        for t in np.linspace(0, 1, 11):
            assert cubic.position_at(float(t)).equals_epsilon(QUADRATIC.position_at(float(t)), 1e-12)

    def test_reparametrized(self):
        """The reparametrized curve follows position_at(a * t + b)."""
        piece = QUADRATIC.reparametrized(0.5, 0.25)
        for t in (0.0, 0.3, 1.0):
            assert piece.position_at(t).equals_epsilon(QUADRATIC.position_at(0.5 * t + 0.25), 1e-12)

    def test_reversed_twice(self):
        """Reversing twice gives the original curve."""
        assert QUADRATIC.reversed().reversed().serialize() == QUADRATIC.serialize()

    def test_nondegenerate_collinear(self):
        """A collinear quadratic becomes lines, through its turning point if it has one."""
        assert [type(s) for s in Quadratic((0, 0), (1, 0), (2, 0)).get_nondegenerate_segments()] == [Line]
        overshoot = Quadratic((0, 0), (3, 0), (1, 0)).get_nondegenerate_segments()
        assert len(overshoot) == 2
        assert overshoot[0].end.x == pytest.approx(1.8)

    def test_nondegenerate_control_at_end(self):
        """A control point on the end point gives a straight line."""
        segments = Quadratic((0, 0), (2, 2), (2, 2)).get_nondegenerate_segments()
        assert len(segments) == 1
        assert isinstance(segments[0], Line)

    def test_nondegenerate_point(self):
        """A single point vanishes, a curved quadratic stays."""
        assert Quadratic((1, 1), (1, 1), (1, 1)).get_nondegenerate_segments() == []
        assert QUADRATIC.get_nondegenerate_segments() == [QUADRATIC]

    def test_stroke_sides(self):
        """Left and right strokes lie at half the line width from the curve."""
        left = QUADRATIC.stroke_left(0.2)
        right = QUADRATIC.stroke_right(0.2)
        assert len(left) == len(right) == 32
        assert left[0].start.distance(QUADRATIC.start) == pytest.approx(0.1)
        assert right[-1].end.distance(QUADRATIC.start) == pytest.approx(0.1)

    def test_svg_fragment(self):
        """Test the path command."""
        assert QUADRATIC.get_svg_path_fragment() == "Q 2 4 5 1"


###############################################################################
# Intersections and overlaps
###############################################################################
class TestQuadraticQueries:
    """Ray hits and overlaps."""

    def test_ray_hits(self):
        """A horizontal ray through a parabola hits twice with opposite winding."""
        parabola = Quadratic((0, 0), (1, 2), (2, 0))
        hits = parabola.intersection(Ray2(Vec2(-1, 0.5), Vec2(1, 0)))
        assert len(hits) == 2
        assert sorted(hit.wind for hit in hits) == [-1, 1]
        for hit in hits:
            assert hit.point.y == pytest.approx(0.5)
            assert parabola.position_at(hit.t).equals_epsilon(hit.point, 1e-12)

    def test_overlap_with_sub_curve(self):
        """A piece of a quadratic overlaps the quadratic."""
        piece = QUADRATIC.reparametrized(0.5, 0.25)
        overlaps = piece.get_overlaps(QUADRATIC)
        assert len(overlaps) == 1
        assert overlaps[0].a == pytest.approx(0.5)
        assert overlaps[0].b == pytest.approx(0.25)

    def test_no_overlap(self):
        """Different curves and different types do not overlap."""
        assert QUADRATIC.get_overlaps(Quadratic((0, 0), (2, 5), (5, 1))) == []
        assert QUADRATIC.get_overlaps(Line((0, 0), (5, 1))) is None

    def test_intersect_with_line(self):
        """The vertical line x = 1 crosses the parabola at its apex."""
        parabola = Quadratic((0, 0), (1, 2), (2, 0))
        intersections = Segment.intersect(parabola, Line((1, -1), (1, 3)))
        assert len(intersections) == 1
        assert intersections[0].a_t == pytest.approx(0.5)
        assert intersections[0].point.equals_epsilon(Vec2(1, 1), 1e-9)

    def test_serialization_round_trip(self):
        """serialize/deserialize reproduces the quadratic."""
        data = QUADRATIC.serialize()
        assert data["type"] == "Quadratic"
        assert data["controlX"] == 2
        assert Segment.deserialize(data).serialize() == data

"""Test module for the Cubic segment in pathseg.cubic

svgpathtools serves as an independent reference for positions, bounds and lengths.
The tests are run using pytest.
"""

import numpy as np
import pytest
import svgpathtools

from pathseg.cubic import Cubic
from pathseg.geom import Affine, Ray2, Vec2
from pathseg.line import Line
from pathseg.quadratic import Quadratic
from pathseg.segment import Segment


def reference(cubic: Cubic) -> svgpathtools.CubicBezier:
    """The same curve as svgpathtools object."""
    return svgpathtools.CubicBezier(
        complex(*cubic.start), complex(*cubic.control1), complex(*cubic.control2), complex(*cubic.end)
    )


ARCH = Cubic((0, 0), (0, 1), (1, 1), (1, 0))
WAVE = Cubic((0, 0), (1, 3), (3, -2), (4, 1))
CUSP = Cubic((0, 0), (1, 1), (0, 1), (1, 0))
LOOP = Cubic((0, 0), (3, 2), (-2, 2), (1, 0))


###############################################################################
# Evaluation
###############################################################################
class TestCubicEvaluation:
    """Positions, tangents, subdivision and bounds."""

    def test_position_at_half(self):
        """Test the midpoint of a symmetric arch."""
        assert ARCH.position_at(0.5).equals_epsilon(Vec2(0.5, 0.75), 1e-12)

    def test_positions_match_reference(self):
        """Positions and derivatives agree with svgpathtools."""
        ref = reference(WAVE)
        for t in np.linspace(0, 1, 11):
            t = float(t)
            expected = ref.point(t)
            derivative = ref.derivative(t)
            assert WAVE.position_at(t).equals_epsilon(Vec2(expected.real, expected.imag), 1e-12)
            assert WAVE.tangent_at(t).equals_epsilon(Vec2(derivative.real, derivative.imag), 1e-12)

    def test_exact_endpoints(self):
        """position_at returns the end points exactly."""
        cubic = Cubic((0.1, 0.3), (0.7, 0.2), (0.3, 0.9), (0.7, 0.7))
        assert cubic.position_at(0) == cubic.start
        assert cubic.position_at(1) == cubic.end

    def test_curvature_matches_reference(self):
        """Endpoint formula and interior subdivision agree with the curvature magnitude."""
        ref = reference(WAVE)
        for t in (0.0, 0.3, 1.0):
            assert abs(WAVE.curvature_at(t)) == pytest.approx(ref.curvature(t), rel=1e-6)

    def test_curvature_with_control_on_endpoint(self):
        """A control point on the start point uses the next distinct control point."""
        cubic = Cubic((0, 0), (0, 0), (1, 1), (2, 0))
        curvature = cubic.curvature_at(0)
        assert np.isfinite(curvature)
        assert cubic.reversed().curvature_at(1) == pytest.approx(-curvature)
        assert np.isfinite(cubic.curvature_at(0.5))

    def test_curvature_of_point(self):
        """A cubic collapsed onto one point has no curvature."""
        point = Cubic((1, 1), (1, 1), (1, 1), (1, 1))
        assert point.curvature_at(0) == 0
        assert point.curvature_at(0.5) == 0
        assert point.curvature_at(1) == 0

    def test_subdivided_reproduces_curve(self):
        """Both halves together trace the original curve."""
        t_split = 0.6
        first, second = WAVE.subdivided(t_split)
        for u in np.linspace(0, 1, 50):
            u = float(u)
            if u <= t_split:
                point = first.position_at(u / t_split)
            else:
                point = second.position_at((u - t_split) / (1 - t_split))
            assert point.equals_epsilon(WAVE.position_at(u), 1e-9)

    def test_bounds_match_reference(self):
        """Bounds include the interior extrema."""
        xmin, xmax, ymin, ymax = reference(WAVE).bbox()
        assert WAVE.get_bounds().extent == pytest.approx((xmin, ymin, xmax, ymax))

    def test_bounds_contain_samples(self):
        """Every polygonized point lies within the bounds."""
        for cubic in (ARCH, WAVE, CUSP, LOOP):
            bounds = cubic.get_bounds()
            for x, y in cubic.polygonize(200):
                assert bounds.contains_point(Vec2(x, y), epsilon=1e-9)

    def test_bounds_with_transform(self):
        """Transformed bounds equal the bounds of the transformed curve."""
        matrix = Affine.rotation(0.7) @ Affine.scaling(2, 0.5)
        expected = WAVE.transformed(matrix).get_bounds()
        assert WAVE.get_bounds_with_transform(matrix).equals_epsilon(expected, 1e-9)

    def test_arc_length_matches_reference(self):
        """Test the adaptive arc length."""
        assert ARCH.get_arc_length() == pytest.approx(reference(ARCH).length(), rel=1e-6)

    def test_interior_extrema(self):
        """The arch has a single interior extremum in y at its middle."""
        assert ARCH.get_interior_extrema_ts() == pytest.approx([0.5])


###############################################################################
# Shape analysis
###############################################################################
class TestCubicShape:
    """Cusps, loops, degree reduction and degeneracies."""

    def test_cusp(self):
        """The derivative vanishes at the cusp."""
        assert CUSP.t_cusp == pytest.approx(0.5)
        assert CUSP.has_cusp()
        assert CUSP.quadratics is not None
        assert len(CUSP.quadratics) == 2

    def test_loop_is_no_cusp(self):
        """A loop shares the cusp candidate formula but keeps a non-zero derivative."""
        loop = Cubic((0, 0), (1, 1), (-1, 1), (0, 0))
        assert loop.t_cusp == pytest.approx(0.5)
        assert not loop.has_cusp()
        assert loop.quadratics is None

    def test_nondegenerate_cusp(self):
        """A cubic with a cusp is split into quadratics."""
        segments = CUSP.get_nondegenerate_segments()
        assert len(segments) == 2
        assert all(isinstance(segment, Quadratic) for segment in segments)
        assert segments[0].end.equals_epsilon(CUSP.position_at(0.5), 1e-12)

    def test_degree_reduced(self):
        """An elevated quadratic is reduced back to the quadratic."""
        quadratic = Quadratic((0, 0), (2, 4), (5, 1))
        reduced = quadratic.degree_elevated().degree_reduced(1e-9)
        assert reduced is not None
        assert reduced.control.equals_epsilon(quadratic.control, 1e-9)
        assert WAVE.degree_reduced(1e-9) is None

    def test_nondegenerate_reducible(self):
        """A reducible cubic becomes its quadratic."""
        cubic = Quadratic((0, 0), (2, 4), (5, 1)).degree_elevated()
        segments = cubic.get_nondegenerate_segments()
        assert len(segments) == 1
        assert isinstance(segments[0], Quadratic)

    def test_nondegenerate_collinear(self):
        """A straight cubic becomes lines, a point vanishes."""
        segments = Cubic((0, 0), (1, 0), (2, 0), (3, 0)).get_nondegenerate_segments()
        assert segments
        assert all(isinstance(segment, Line) for segment in segments)
        assert Cubic((1, 1), (1, 1), (1, 1), (1, 1)).get_nondegenerate_segments() == []
        assert WAVE.get_nondegenerate_segments() == [WAVE]

    def test_self_intersection(self):
        """The symmetric loop crosses itself on its axis of symmetry."""
        hit = LOOP.get_self_intersection()
        assert hit is not None
        assert hit.a_t < hit.b_t
        assert hit.a_t + hit.b_t == pytest.approx(1, abs=1e-6)
        assert hit.point.x == pytest.approx(0.5, abs=1e-6)
        assert LOOP.position_at(hit.a_t).equals_epsilon(LOOP.position_at(hit.b_t), 1e-6)

    def test_no_self_intersection(self):
        """Curves without loop do not cross themselves."""
        assert ARCH.get_self_intersection() is None
        assert WAVE.get_self_intersection() is None

    def test_reversed_twice(self):
        """Reversing twice gives the original curve."""
        assert WAVE.reversed().reversed().serialize() == WAVE.serialize()
        assert WAVE.reversed().position_at(0.25).equals_epsilon(WAVE.position_at(0.75), 1e-12)

    def test_stroke_sides(self):
        """The strokes are polylines at half the line width from the curve."""
        left = WAVE.stroke_left(0.5)
        right = WAVE.stroke_right(0.5)
        assert len(left) == len(right) == 31
        assert left[0].start.distance(WAVE.start) == pytest.approx(0.25)
        assert right[-1].end.distance(WAVE.start) == pytest.approx(0.25)

    def test_svg_fragment(self):
        """Test the path command."""
        assert WAVE.get_svg_path_fragment() == "C 1 3 3 -2 4 1"


###############################################################################
# Intersections, overlaps and serialization
###############################################################################
class TestCubicQueries:
    """Ray hits, overlaps and plain data form."""

    def test_ray_hits(self):
        """A horizontal ray through the wave hits it three times."""
        hits = WAVE.intersection(Ray2(Vec2(-1, 0.5), Vec2(1, 0)))
        assert len(hits) == 3
        for hit in hits:
            assert hit.point.y == pytest.approx(0.5)
        assert sum(hit.wind for hit in hits) in (-1, 1)

    def test_overlap_with_half(self):
        """The second half of a cubic overlaps it with s = t/2 + 1/2."""
        second_half = WAVE.subdivided(0.5)[1]
        overlaps = second_half.get_overlaps(WAVE)
        assert len(overlaps) == 1
        assert overlaps[0].a == pytest.approx(0.5)
        assert overlaps[0].b == pytest.approx(0.5)
        assert overlaps[0].get_overlapped_range() == pytest.approx((0, 1))

    def test_no_overlap(self):
        """Different cubics and different segment types do not overlap."""
        assert WAVE.get_overlaps(ARCH) == []
        assert WAVE.get_overlaps(Line((0, 0), (4, 1))) is None

    def test_intersect_with_quadratic(self):
        """Both parameters of a crossing point address the same point."""
        quadratic = Quadratic((0, 1), (2, -1), (4, 1))
        intersections = Segment.intersect(WAVE, quadratic)
        assert intersections
        for intersection in intersections:
            assert WAVE.position_at(intersection.a_t).equals_epsilon(intersection.point, 1e-6)
            assert quadratic.position_at(intersection.b_t).equals_epsilon(intersection.point, 1e-6)

    def test_serialization_round_trip(self):
        """serialize/deserialize reproduces the cubic."""
        data = WAVE.serialize()
        assert data["type"] == "Cubic"
        assert (data["control1X"], data["control2Y"]) == (1, -2)
        assert Segment.deserialize(data).serialize() == data
        with pytest.raises(ValueError):
            Quadratic.deserialize(data)

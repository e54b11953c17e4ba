"""Test module for the EllipticalArc segment in pathseg.elliptical_arc

The tests are run using pytest.
"""

import math

import numpy as np
import pytest

from pathseg.arc import Arc
from pathseg.elliptical_arc import EllipticalArc, EllipticalArcOverlapType
from pathseg.geom import Affine, Ray2, Vec2
from pathseg.segment import Segment

ELLIPSE = EllipticalArc((0, 0), 2, 1, 0, 0, 2 * math.pi, False)
ROTATED = EllipticalArc((1, 2), 3, 1, 0.6, 0.2, 5.5, False)


###############################################################################
# Construction and evaluation
###############################################################################
class TestEllipticalArcEvaluation:
    """Normalization, positions, tangents and bounds."""

    def test_radius_swap(self):
        """radius_x becomes the larger radius, the curve stays the same."""
        arc = EllipticalArc((0, 0), 1, 2, 0, 0, math.pi / 2, False)
        assert (arc.radius_x, arc.radius_y) == (2, 1)
        assert arc.rotation == pytest.approx(math.pi / 2)
        assert arc.start.equals_epsilon(Vec2(1, 0), 1e-12)
        assert arc.end.equals_epsilon(Vec2(0, 2), 1e-12)

    def test_negative_radius(self):
        """Negative radii are remapped without changing the curve."""
        arc = EllipticalArc((0, 0), -2, 1, 0, 0, math.pi / 2, False)
        assert arc.radius_x == 2
        assert arc.anticlockwise
        assert arc.start.equals_epsilon(Vec2(-2, 0), 1e-12)
        assert arc.end.equals_epsilon(Vec2(0, 1), 1e-12)

    def test_unsupported_span(self):
        """More than a full turn in the direction of the arc is rejected."""
        with pytest.raises(ValueError):
            EllipticalArc((0, 0), 2, 1, 0, 0, 7, False)

    def test_positions(self):
        """Points follow the rotated and scaled unit circle."""
        assert ELLIPSE.position_at(0.25).equals_epsilon(Vec2(0, 1), 1e-12)
        assert ELLIPSE.position_at(0.5).equals_epsilon(Vec2(-2, 0), 1e-12)
        rotated = EllipticalArc((1, 1), 2, 1, math.pi / 2, 0, math.pi, False)
        assert rotated.start.equals_epsilon(Vec2(1, 3), 1e-12)

    def test_tangent_is_derivative(self):
        """tangent_at matches a central difference."""
        step = 1e-6
        for t in (0.2, 0.5, 0.8):
            difference = (ROTATED.position_at(t + step) - ROTATED.position_at(t - step)) / (2 * step)
            assert difference.equals_epsilon(ROTATED.tangent_at(t), 1e-4)
        assert ROTATED.start_tangent.magnitude == pytest.approx(1)
        assert ROTATED.start_tangent.dot(ROTATED.tangent_at(0)) > 0

    def test_curvature(self):
        """At the end of the major axis the curvature is rx / ry^2."""
        assert ELLIPSE.curvature_at(0) == pytest.approx(2)
        assert ELLIPSE.curvature_at(0.25) == pytest.approx(0.25)

    def test_bounds_contain_samples(self):
        """Every polygonized point lies within the bounds."""
        for arc in (ELLIPSE, ROTATED, ROTATED.reversed(), EllipticalArc((0, 0), 3, 2, 0, 0.1, 1.2, True)):
            bounds = arc.get_bounds()
            for x, y in arc.polygonize(200):
                assert bounds.contains_point(Vec2(x, y), epsilon=1e-9)

    def test_full_ellipse_bounds(self):
        """Test the bounds of an axis-aligned ellipse."""
        assert ELLIPSE.get_bounds().extent == pytest.approx((-2, -1, 2, 1))

    def test_subdivided(self):
        """Subdivision keeps the ellipse and splits the angles."""
        first, second = ROTATED.subdivided(0.4)
        assert first.end.equals_epsilon(second.start, 1e-12)
        assert second.end.equals_epsilon(ROTATED.end, 1e-12)
        assert first.position_at(0.5).equals_epsilon(ROTATED.position_at(0.2), 1e-12)

    def test_reduces_to_arc(self):
        """Equal radii make a circular arc."""
        arc = EllipticalArc((1, 1), 2, 2, 0.5, 0, 1, False)
        segments = arc.get_nondegenerate_segments()
        assert len(segments) == 1
        assert isinstance(segments[0], Arc)
        assert segments[0].start.equals_epsilon(arc.start, 1e-12)
        assert segments[0].end.equals_epsilon(arc.end, 1e-12)
        assert ROTATED.get_nondegenerate_segments() == [ROTATED]
        assert EllipticalArc((0, 0), 2, 0, 0, 0, 1, False).get_nondegenerate_segments() == []


###############################################################################
# Output and transformations
###############################################################################
class TestEllipticalArcOutput:
    """SVG fragments, transformations, areas and conics."""

    def test_svg_fragment_rotation_in_degrees(self):
        """The x-axis rotation is written in degrees."""
        arc = EllipticalArc((0, 0), 2, 1, math.pi / 2, 0, 1, False)
        assert arc.get_svg_path_fragment().split()[:6] == ["A", "2", "1", "90", "0", "1"]

    def test_full_ellipse_svg_fragment(self):
        """A full ellipse is written as two halves."""
        assert ELLIPSE.get_svg_path_fragment().count("A") == 2

    def test_transformed(self):
        """Rotation and reflection map every point of the arc."""
        for matrix in (
            Affine.translation(3, -1) @ Affine.rotation(0.3),
            Affine.scaling(1, -1),
            Affine.scaling(2, 3),
        ):
            result = ROTATED.transformed(matrix)
            for t in (0, 0.3, 0.7, 1):
                assert result.position_at(t).equals_epsilon(matrix.times_vector(ROTATED.position_at(t)), 1e-9)

    def test_reflection_flips_direction(self):
        """Test the direction after a reflection."""
        assert ROTATED.transformed(Affine.scaling(-1, 1)).anticlockwise

    def test_signed_area_of_ellipse(self):
        """Two halves enclose pi * rx * ry."""
        first = EllipticalArc((1, 2), 3, 1, 0.4, 0, math.pi, False)
        second = EllipticalArc((1, 2), 3, 1, 0.4, math.pi, 2 * math.pi, False)
        area = first.get_signed_area_fragment() + second.get_signed_area_fragment()
        assert area == pytest.approx(3 * math.pi)

    def test_conic_matrix(self):
        """Points of the ellipse solve the conic equation."""
        matrix = ROTATED.get_conic_matrix()
        for t in (0.1, 0.6):
            point = ROTATED.position_at(t)
            vector = np.array([point.x, point.y, 1.0])
            assert vector @ matrix @ vector == pytest.approx(0, abs=1e-9)

    def test_strokes(self):
        """The strokes are polylines at half the line width from the curve."""
        left = ROTATED.stroke_left(1)
        right = ROTATED.stroke_right(1)
        assert len(left) == len(right) == 31
        assert left[0].start.distance(ROTATED.start) == pytest.approx(0.5)
        assert right[-1].end.distance(ROTATED.start) == pytest.approx(0.5)


###############################################################################
# Queries
###############################################################################
class TestEllipticalArcQueries:
    """Ray hits, overlaps, intersections and serialization."""

    def test_ray_hits(self):
        """A ray along the major axis hits both vertices."""
        hits = ELLIPSE.intersection(Ray2(Vec2(-5, 0), Vec2(1, 0)))
        assert [hit.distance for hit in hits] == pytest.approx([3, 7])
        assert hits[0].point.equals_epsilon(Vec2(-2, 0), 1e-12)
        assert hits[1].point.equals_epsilon(Vec2(2, 0), 1e-12)
        assert hits[0].wind == -hits[1].wind
        for hit in hits:
            assert hit.normal.equals_epsilon(Vec2(-1, 0), 1e-12)

    def test_ray_hit_normal_is_perpendicular(self):
        """The hit normal is perpendicular to the curve."""
        hits = ROTATED.intersection(Ray2(Vec2(1, 2), Vec2(1, 1)))
        assert len(hits) == 1
        hit = hits[0]
        assert hit.normal.magnitude == pytest.approx(1)
        assert hit.normal.dot(ROTATED.tangent_at(hit.t)) == pytest.approx(0, abs=1e-9)
        assert ROTATED.position_at(hit.t).equals_epsilon(hit.point, 1e-9)

    def test_overlap_types(self):
        """Ellipses are compared ignoring angles."""
        a = EllipticalArc((0, 0), 2, 1, 0, 0, math.pi, False)
        b = EllipticalArc((0, 0), 2, 1, math.pi, 0, 1, True)
        c = EllipticalArc((0, 0), 1, 2, 0, 0, 1, False)
        assert EllipticalArc.get_overlap_type(a, b) is EllipticalArcOverlapType.MATCHING
        assert EllipticalArc.get_overlap_type(a, c) is EllipticalArcOverlapType.NONE
        circle = EllipticalArc((0, 0), 1, 1, 0, 0, 1, False)
        turned_circle = EllipticalArc((0, 0), 1, 1, math.pi / 2, 0, 1, False)
        assert EllipticalArc.get_overlap_type(circle, turned_circle) is EllipticalArcOverlapType.OPPOSITE

    def test_overlap(self):
        """Two halves of the same ellipse shifted by a quarter overlap by a quarter."""
        a = EllipticalArc((0, 0), 2, 1, 0, 0, math.pi, False)
        b = EllipticalArc((0, 0), 2, 1, 0, math.pi / 2, 3 * math.pi / 2, False)
        overlaps = a.get_overlaps(b)
        assert len(overlaps) == 1
        assert overlaps[0].apply(0.5) == pytest.approx(0)
        assert overlaps[0].apply(1) == pytest.approx(0.5)
        assert a.get_overlaps(Arc((0, 0), 1, 0, 1, False)) is None

    def test_intersect_crossing_ellipses(self):
        """Quarters of two perpendicular ellipses cross on the diagonal."""
        a = EllipticalArc((0, 0), 2, 1, 0, 0, math.pi / 2, False)
        b = EllipticalArc((0, 0), 2, 1, math.pi / 2, -math.pi / 2, 0, False)
        intersections = Segment.intersect(a, b)
        assert len(intersections) == 1
        expected = 2 / math.sqrt(5)
        assert intersections[0].point.equals_epsilon(Vec2(expected, expected), 1e-6)
        assert a.position_at(intersections[0].a_t).equals_epsilon(intersections[0].point, 1e-6)
        assert b.position_at(intersections[0].b_t).equals_epsilon(intersections[0].point, 1e-6)

    def test_intersect_same_ellipse(self):
        """Arcs of the same ellipse meet only at shared end points."""
        a = EllipticalArc((0, 0), 2, 1, 0, 0, math.pi / 2, False)
        b = EllipticalArc((0, 0), 2, 1, 0, math.pi / 2, math.pi, False)
        intersections = EllipticalArc.intersect(a, b)
        assert len(intersections) == 1
        assert (intersections[0].a_t, intersections[0].b_t) == (1, 0)

    def test_serialization_round_trip(self):
        """serialize/deserialize reproduces the elliptical arc."""
        data = ROTATED.serialize()
        assert data["type"] == "EllipticalArc"
        assert data["radiusX"] == 3
        assert Segment.deserialize(data).serialize() == data

    def test_flat_ellipse_queries(self):
        """An ellipse flattened onto a line has no curvature and no ray hits."""
        flat = EllipticalArc((0, 0), 2, 0, 0, 0, math.pi, False)
        assert flat.curvature_at(0.5) == 0
        assert flat.intersection(Ray2(Vec2(0, -1), Vec2(0, 1))) == []

    def test_zero_span_parameter(self):
        """The single point of an arc without span has the parameter 0."""
        assert EllipticalArc((0, 0), 2, 1, 0, 1, 1, False).t_at_angle(1) == 0

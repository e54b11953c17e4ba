"""Test module for the BezierCurve helpers in pathseg.bezier

The tests are run using pytest.
These tests ensure that the Python and NumPy polygonizers agree and
that the shared closed-form helpers match the segment classes.
"""

import math

import numpy as np
import pytest

from pathseg.arc import Arc
from pathseg.bezier import BezierCurve
from pathseg.cubic import Cubic
from pathseg.geom import Ray2, Vec2
from pathseg.quadratic import Quadratic

CUBIC_POINTS = np.array([[30.0, 10.0], [35.0, 15.0], [40.0, 15.0], [45.0, 10.0]], dtype=np.float64)
QUADRATIC_POINTS = np.array([[0.0, 0.0], [10.0, 20.0], [20.0, 0.0]], dtype=np.float64)


###############################################################################
# Cubic polygonization
###############################################################################
class TestCubicPolygonization:
    """Forward differencing against vectorized evaluation for cubic curves."""

    def test_python_vs_numpy(self):
        """Both in-place methods write the same points."""
        for steps in (1, 2, 5, 10, 69):
            buffer_python = np.empty((steps + 1, 2), dtype=np.float64)
            buffer_numpy = np.empty((steps + 1, 2), dtype=np.float64)
            count_python = BezierCurve.polygonize_cubic_curve_python_inplace(CUBIC_POINTS, steps, buffer_python)
            count_numpy = BezierCurve.polygonize_cubic_curve_numpy_inplace(CUBIC_POINTS, steps, buffer_numpy)
            assert count_python == count_numpy == steps + 1
            assert np.allclose(buffer_python, buffer_numpy, rtol=1e-9, atol=1e-9), f"steps={steps}"

    def test_end_points_exact(self):
        """The first and last points are the end points of the curve."""
        for steps in (3, 70, 200):
            result = BezierCurve.polygonize_cubic_curve(CUBIC_POINTS, steps)
            assert result.shape == (steps + 1, 2)
            assert np.array_equal(result[0], CUBIC_POINTS[0])
            assert np.allclose(result[-1], CUBIC_POINTS[3])

    def test_numpy_threshold_boundary(self):
        """Results on both sides of the method switch follow the same curve."""
        below = BezierCurve.polygonize_cubic_curve(CUBIC_POINTS, 69)
        above = BezierCurve.polygonize_cubic_curve(CUBIC_POINTS, 70)
        cubic = Cubic(*CUBIC_POINTS.tolist())
        assert np.allclose(below[23], cubic.position_at(23 / 69).to_array())
        assert np.allclose(above[35], cubic.position_at(0.5).to_array())

    def test_start_index(self):
        """Points are written from start_index on."""
        buffer = np.zeros((8, 2), dtype=np.float64)
        count = BezierCurve.polygonize_cubic_curve_python_inplace(CUBIC_POINTS, 4, buffer, start_index=3)
        assert count == 5
        assert np.array_equal(buffer[:3], np.zeros((3, 2)))
        assert np.allclose(buffer[3], CUBIC_POINTS[0])
        assert np.allclose(buffer[7], CUBIC_POINTS[3])

    def test_invalid_steps(self):
        """At least one step is needed."""
        with pytest.raises(AssertionError):
            BezierCurve.polygonize_cubic_curve(CUBIC_POINTS, 0)


###############################################################################
# Quadratic polygonization
###############################################################################
class TestQuadraticPolygonization:
    """Forward differencing against vectorized evaluation for quadratic curves."""

    def test_python_vs_numpy(self):
        """Both in-place methods write the same points."""
        for steps in (1, 2, 7, 50):
            buffer_python = np.empty((steps + 1, 2), dtype=np.float64)
            buffer_numpy = np.empty((steps + 1, 2), dtype=np.float64)
            BezierCurve.polygonize_quadratic_curve_python_inplace(QUADRATIC_POINTS, steps, buffer_python)
            BezierCurve.polygonize_quadratic_curve_numpy_inplace(QUADRATIC_POINTS, steps, buffer_numpy)
            assert np.allclose(buffer_python, buffer_numpy, rtol=1e-9, atol=1e-9), f"steps={steps}"

    def test_apex(self):
        """The middle point of the symmetric parabola is its apex."""
        result = BezierCurve.polygonize_quadratic_curve(QUADRATIC_POINTS, 4)
        assert np.allclose(result, [[0, 0], [5, 7.5], [10, 10], [15, 7.5], [20, 0]])

    def test_list_input(self):
        """Plain lists of tuples are accepted."""
        result = BezierCurve.polygonize_quadratic_curve([(0, 0), (1, 1), (2, 0)], 2)
        assert np.allclose(result, [[0, 0], [1, 0.5], [2, 0]])


###############################################################################
# Closed-form helpers
###############################################################################
class TestBezierHelpers:
    """Endpoint curvature and ray alignment."""

    def test_is_near_endpoint(self):
        """Only parameters very close to 0 or 1 count as endpoints."""
        assert BezierCurve.is_near_endpoint(0)
        assert BezierCurve.is_near_endpoint(1)
        assert not BezierCurve.is_near_endpoint(0.001)

    def test_curvature_sign_matches_arc(self):
        """A curve turning like an arc with increasing angle has positive curvature."""
        quadratic = Quadratic((1, 0), (1, 1), (0, 1))
        arc = Arc((0, 0), 1, 0, math.pi / 2, False)
        assert quadratic.curvature_at(0) > 0
        assert arc.curvature_at(0) > 0
        assert quadratic.reversed().curvature_at(0) < 0

    def test_ray_aligned_matrix(self):
        """The ray origin goes to the origin, its direction to the x-axis."""
        ray = Ray2(Vec2(1, 2), Vec2(0, 1))
        matrix = BezierCurve.ray_aligned_matrix(ray)
        assert matrix.times_vector(Vec2(1, 2)).equals_epsilon(Vec2(0, 0), 1e-12)
        assert matrix.times_vector(Vec2(1, 5)).equals_epsilon(Vec2(3, 0), 1e-12)

    def test_ray_hits_drop_outside(self):
        """Parameters outside [0, 1] and points behind the ray are dropped."""
        quadratic = Quadratic((0, 0), (1, 2), (2, 0))
        ray = Ray2(Vec2(1, -1), Vec2(0, 1))
        hits = BezierCurve.ray_hits(quadratic, ray, [0.5, 1.5, -0.2])
        assert len(hits) == 1
        assert hits[0].point.equals_epsilon(Vec2(1, 1), 1e-12)
        assert hits[0].distance == pytest.approx(2)
        assert BezierCurve.ray_hits(quadratic, Ray2(Vec2(1, 3), Vec2(0, 1)), [0.5]) == []

"""Bezier curve helpers shared by the quadratic and cubic segments"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pathseg.consts import CURVATURE_ENDPOINT_EPSILON
from pathseg.geom import Affine, Ray2, Vec2
from pathseg.overlap import RayIntersection

if TYPE_CHECKING:
    from pathseg.segment import Segment

PointsLike = Union[Sequence[Tuple[float, float]], NDArray[np.float64]]

# Step count from which the vectorized evaluation is used
_NUMPY_STEPS_THRESHOLD: int = 70


class BezierCurve:
    """Class to handle quadratic and cubic Bezier curve operations.

    Provides methods for polygonizing Bezier curves into point sequences,
    supporting both pure Python and NumPy-optimized implementations, and the
    closed-form pieces the Bezier segments have in common.
    """

    ###########################################################################
    # Polygonization
    ###########################################################################
    @classmethod
    def polygonize_cubic_curve_python_inplace(
        cls, points: PointsLike, steps: int, output_buffer: NDArray[np.float64], start_index: int = 0
    ) -> int:
        """
        Polygonize a cubic Bezier curve into _output_buffer_ using forward differencing.

        The differences are derived from the first four exact curve points, so each
        further point costs three additions per coordinate.

        Returns:
            int: number of points written (steps + 1)
        """
        (p0x, p0y), (p1x, p1y), (p2x, p2y), (p3x, p3y) = [(float(p[0]), float(p[1])) for p in points]

        def evaluate(t: float) -> Tuple[float, float]:
            mt = 1.0 - t
            c0 = mt * mt * mt
            c1 = 3.0 * mt * mt * t
            c2 = 3.0 * mt * t * t
            c3 = t * t * t
            return (c0 * p0x + c1 * p1x + c2 * p2x + c3 * p3x, c0 * p0y + c1 * p1y + c2 * p2y + c3 * p3y)

        h = 1.0 / steps
        b0 = (p0x, p0y)
        b1 = evaluate(h)
        b2 = evaluate(2.0 * h)
        b3 = evaluate(3.0 * h)

        x, y = b0
        dx1 = b1[0] - b0[0]
        dy1 = b1[1] - b0[1]
        dx2 = b2[0] - 2.0 * b1[0] + b0[0]
        dy2 = b2[1] - 2.0 * b1[1] + b0[1]
        # constant for a cubic
        dx3 = b3[0] - 3.0 * b2[0] + 3.0 * b1[0] - b0[0]
        dy3 = b3[1] - 3.0 * b2[1] + 3.0 * b1[1] - b0[1]

        output_buffer[start_index, 0] = x
        output_buffer[start_index, 1] = y
        for i in range(1, steps):
            x += dx1
            y += dy1
            dx1 += dx2
            dy1 += dy2
            dx2 += dx3
            dy2 += dy3
            output_buffer[start_index + i, 0] = x
            output_buffer[start_index + i, 1] = y

        # the end point is exact
        output_buffer[start_index + steps, 0] = p3x
        output_buffer[start_index + steps, 1] = p3y
        return steps + 1

    @classmethod
    def polygonize_cubic_curve_numpy_inplace(
        cls, points: PointsLike, steps: int, output_buffer: NDArray[np.float64], start_index: int = 0
    ) -> int:
        """
        Polygonize a cubic Bezier curve into _output_buffer_ by vectorized evaluation.

        Returns:
            int: number of points written (steps + 1)
        """
        points_array = np.asarray(points, dtype=np.float64)
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)[:, np.newaxis]
        mt = 1.0 - t
        curve = (
            mt**3 * points_array[0]
            + 3.0 * mt**2 * t * points_array[1]
            + 3.0 * mt * t**2 * points_array[2]
            + t**3 * points_array[3]
        )
        output_buffer[start_index : start_index + steps + 1, :2] = curve
        return steps + 1

    @classmethod
    def polygonize_cubic_curve(cls, points: PointsLike, steps: int) -> NDArray[np.float64]:
        """
        Polygonize a cubic Bezier curve into line segments.
        Uses pure Python for small step counts, NumPy for larger ones.

        Args:
            points: Control points start, control1, control2, end
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the points (x, y)
        """
        assert steps >= 1, f"polygonize needs at least one step, got {steps}"
        result = np.empty((steps + 1, 2), dtype=np.float64)
        if steps < _NUMPY_STEPS_THRESHOLD:
            cls.polygonize_cubic_curve_python_inplace(points, steps, result)
        else:
            cls.polygonize_cubic_curve_numpy_inplace(points, steps, result)
        return result

    @classmethod
    def polygonize_quadratic_curve_python_inplace(
        cls, points: PointsLike, steps: int, output_buffer: NDArray[np.float64], start_index: int = 0
    ) -> int:
        """Polygonize a quadratic Bezier curve into _output_buffer_ using forward differencing.

        B(t) = P0 + 2t(P1 - P0) + t^2(P0 - 2P1 + P2), so the second difference is constant.

        Returns:
            int: number of points written (steps + 1)
        """
        (p0x, p0y), (p1x, p1y), (p2x, p2y) = [(float(p[0]), float(p[1])) for p in points]

        h = 1.0 / steps
        dx2 = 2.0 * h * h * (p0x - 2.0 * p1x + p2x)
        dy2 = 2.0 * h * h * (p0y - 2.0 * p1y + p2y)
        # first difference B(h) - B(0)
        dx1 = 2.0 * h * (p1x - p0x) + 0.5 * dx2
        dy1 = 2.0 * h * (p1y - p0y) + 0.5 * dy2

        x, y = p0x, p0y
        output_buffer[start_index, 0] = x
        output_buffer[start_index, 1] = y
        for i in range(1, steps):
            x += dx1
            y += dy1
            dx1 += dx2
            dy1 += dy2
            output_buffer[start_index + i, 0] = x
            output_buffer[start_index + i, 1] = y

        output_buffer[start_index + steps, 0] = p2x
        output_buffer[start_index + steps, 1] = p2y
        return steps + 1

    @classmethod
    def polygonize_quadratic_curve_numpy_inplace(
        cls, points: PointsLike, steps: int, output_buffer: NDArray[np.float64], start_index: int = 0
    ) -> int:
        """Polygonize a quadratic Bezier curve into _output_buffer_ by vectorized evaluation."""
        points_array = np.asarray(points, dtype=np.float64)
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)[:, np.newaxis]
        mt = 1.0 - t
        curve = mt**2 * points_array[0] + 2.0 * mt * t * points_array[1] + t**2 * points_array[2]
        output_buffer[start_index : start_index + steps + 1, :2] = curve
        return steps + 1

    @classmethod
    def polygonize_quadratic_curve(cls, points: PointsLike, steps: int) -> NDArray[np.float64]:
        """
        Polygonize a quadratic Bezier curve into line segments.

        Args:
            points: Control points start, control, end
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the points (x, y)
        """
        assert steps >= 1, f"polygonize needs at least one step, got {steps}"
        result = np.empty((steps + 1, 2), dtype=np.float64)
        if steps < _NUMPY_STEPS_THRESHOLD:
            cls.polygonize_quadratic_curve_python_inplace(points, steps, result)
        else:
            cls.polygonize_quadratic_curve_numpy_inplace(points, steps, result)
        return result

    ###########################################################################
    # Closed-form helpers
    ###########################################################################
    @staticmethod
    def is_near_endpoint(t: float) -> bool:
        """True if _t_ is close enough to 0 or 1 for the endpoint curvature formula."""
        return abs(t - 0.5) > 0.5 - CURVATURE_ENDPOINT_EPSILON

    @staticmethod
    def endpoint_curvature(degree: int, at_start: bool, points: Sequence[Vec2]) -> float:
        """
        Signed curvature at an end of a Bezier curve.

        Uses h * (n - 1) / (n * a^2) with the chord a = |p1 - p0| between the end
        point p0 and its neighboring control point p1 and h the signed distance of
        the next control point p2 from that chord. Control points coinciding with
        the end point are skipped, without a chord or a next control point the
        curve is straight there and the curvature is 0.

        Args:
            degree (int): degree n of the curve
            at_start (bool): True for t = 0, False for t = 1
            points (Sequence[Vec2]): the control points, starting at the end point
        """
        p0 = points[0]
        index = 1
        while index < len(points) and points[index] == p0:
            index += 1
        if index + 1 >= len(points):
            return 0.0
        p1 = points[index]
        p2 = points[index + 1]
        d10 = p1 - p0
        a = d10.magnitude
        h = (-1 if at_start else 1) * d10.perpendicular.normalized().dot(p2 - p1)
        return h * (degree - 1) / (degree * a * a)

    @staticmethod
    def ray_aligned_matrix(ray: Ray2) -> Affine:
        """Transformation mapping _ray_ onto the positive x-axis starting at the origin."""
        return Affine.rotation(-ray.direction.angle) @ Affine.translation(-ray.position.x, -ray.position.y)

    @staticmethod
    def ray_hits(segment: Segment, ray: Ray2, ts: Iterable[float]) -> List[RayIntersection]:
        """
        Convert parameters where _segment_ crosses the line of _ray_ into ray hits.

        Parameters outside [0, 1] and points behind the ray origin are dropped.
        The normal faces the ray, the winding follows the crossing direction.
        """
        result = []
        for t in ts:
            if not 0 <= t <= 1:
                continue
            hit_point = segment.position_at(t)
            unit_tangent = segment.tangent_at(t).normalized()
            perp = unit_tangent.perpendicular
            to_hit = hit_point - ray.position
            if to_hit.dot(ray.direction) > 0:
                normal = -perp if perp.dot(ray.direction) > 0 else perp
                wind = 1 if ray.direction.perpendicular.dot(unit_tangent) < 0 else -1
                result.append(RayIntersection(to_hit.magnitude, hit_point, normal, wind, t))
        return result

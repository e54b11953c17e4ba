"""Quadratic Bezier segment"""

from __future__ import annotations

import math
from functools import cached_property
from typing import TYPE_CHECKING, List, Optional

import numpy as np
from numpy.typing import NDArray

from pathseg.bezier import BezierCurve
from pathseg.consts import OVERLAP_EPSILON, ROOT_BOUNDARY_EPSILON
from pathseg.geom import Affine, Bounds, GeomMath, Ray2, Vec2
from pathseg.line import Line, PointLike
from pathseg.overlap import Overlap, RayIntersection, polynomial_get_overlap_quadratic, unit_interval_ts
from pathseg.segment import Segment, assert_finite_point, assert_parameter
from pathseg.svgpath import svg_number

if TYPE_CHECKING:
    from pathseg.context import PathContext
    from pathseg.cubic import Cubic


###############################################################################
# Quadratic
###############################################################################
class Quadratic(Segment):
    """
    A quadratic Bezier curve:
        P(t) = (1-t)^2 * start + 2(1-t)t * control + t^2 * end
    """

    type_name = "Quadratic"

    def __init__(self, start: PointLike, control: PointLike, end: PointLike):
        self._start = Vec2.coerce(start)
        self._control = Vec2.coerce(control)
        self._end = Vec2.coerce(end)
        assert_finite_point(self._start, "Quadratic start")
        assert_finite_point(self._control, "Quadratic control")
        assert_finite_point(self._end, "Quadratic end")

    @property
    def start(self) -> Vec2:
        return self._start

    @start.setter
    def start(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Quadratic start")
        if value != self._start:
            self._start = value
            self.invalidate()

    @property
    def control(self) -> Vec2:
        """Vec2: The control point, the curve usually does not pass through it."""
        return self._control

    @control.setter
    def control(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Quadratic control")
        if value != self._control:
            self._control = value
            self.invalidate()

    @property
    def end(self) -> Vec2:
        return self._end

    @end.setter
    def end(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Quadratic end")
        if value != self._end:
            self._end = value
            self.invalidate()

    @property
    def degree(self) -> int:
        """int: Polynomial degree."""
        return 2

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------
    def position_at(self, t: float) -> Vec2:
        assert_parameter(t)
        if t == 0:
            return self._start
        if t == 1:
            return self._end
        mt = 1 - t
        return self._start * (mt * mt) + self._control * (2 * mt * t) + self._end * (t * t)

    def tangent_at(self, t: float) -> Vec2:
        assert_parameter(t)
        return (self._control - self._start) * (2 * (1 - t)) + (self._end - self._control) * (2 * t)

    def curvature_at(self, t: float) -> float:
        assert_parameter(t)
        if BezierCurve.is_near_endpoint(t):
            at_start = t < 0.5
            points = (self._start, self._control, self._end)
            return BezierCurve.endpoint_curvature(self.degree, at_start, points if at_start else points[::-1])
        return self.subdivided(t)[0].curvature_at(1)

    def subdivided(self, t: float) -> List[Segment]:
        assert_parameter(t)
        if t in (0, 1):
            return [self]
        # de Casteljau
        left_mid = self._start.blend(self._control, t)
        right_mid = self._control.blend(self._end, t)
        mid = left_mid.blend(right_mid, t)
        return [Quadratic(self._start, left_mid, mid), Quadratic(mid, right_mid, self._end)]

    @cached_property
    def start_tangent(self) -> Vec2:
        """Vec2: The unit tangent at the start, along the chord if the control point is the start."""
        if self._start == self._control:
            return (self._end - self._start).normalized()
        return (self._control - self._start).normalized()

    @cached_property
    def end_tangent(self) -> Vec2:
        """Vec2: The unit tangent at the end, along the chord if the control point is the end."""
        if self._end == self._control:
            return (self._end - self._start).normalized()
        return (self._end - self._control).normalized()

    @staticmethod
    def extrema_t(start: float, control: float, end: float) -> float:
        """
        Parameter where the derivative of the one-dimensional quadratic vanishes.

        Returns:
            float: the parameter (not restricted to [0, 1]), NaN for a vanishing second derivative
        """
        divisor = 2 * (end - 2 * control + start)
        if divisor == 0:
            return math.nan
        return -2 * (control - start) / divisor

    @cached_property
    def t_critical_x(self) -> float:
        """float: Parameter of the extremum in x, see extrema_t()."""
        return Quadratic.extrema_t(self._start.x, self._control.x, self._end.x)

    @cached_property
    def t_critical_y(self) -> float:
        """float: Parameter of the extremum in y, see extrema_t()."""
        return Quadratic.extrema_t(self._start.y, self._control.y, self._end.y)

    def get_interior_extrema_ts(self) -> List[float]:
        result = [
            t
            for t in (self.t_critical_x, self.t_critical_y)
            if not math.isnan(t) and ROOT_BOUNDARY_EPSILON < t < 1 - ROOT_BOUNDARY_EPSILON
        ]
        return sorted(result)

    def _build_bounds(self) -> Bounds:
        bounds = Bounds.point(self._start).with_point(self._end)
        for t in (self.t_critical_x, self.t_critical_y):
            if not math.isnan(t) and 0 < t < 1:
                bounds = bounds.with_point(self.position_at(t))
        return bounds

    def get_nondegenerate_segments(self) -> List[Segment]:
        start = self._start
        control = self._control
        end = self._end

        start_is_end = start == end
        start_is_control = start == control
        end_is_control = end == control

        if start_is_end and start_is_control:
            return []
        if start_is_end:
            # out to the farthest point and back
            half_point = self.position_at(0.5)
            return [Line(start, half_point), Line(half_point, end)]
        if not GeomMath.are_points_collinear(start, control, end):
            return [self]
        if start_is_control or end_is_control:
            return [Line(start, end)]

        # the control point may pull the curve beyond the start-end line segment
        delta = end - start
        p1d = (control - start).dot(delta.normalized()) / delta.magnitude
        t = Quadratic.extrema_t(0, p1d, 1)
        if not math.isnan(t) and 0 < t < 1:
            point = self.position_at(t)
            return Line(start, point).get_nondegenerate_segments() + Line(point, end).get_nondegenerate_segments()
        return [Line(start, end)]

    # -------------------------------------------------------------------------
    # Offsets and strokes
    # -------------------------------------------------------------------------
    def approximate_offset(self, r: float) -> Quadratic:
        """Offset all three points by _r_ along the normals at start, chord and end."""
        start_direction = self._end - self._start if self._start == self._control else self._control - self._start
        end_direction = self._end - self._start if self._end == self._control else self._end - self._control
        return Quadratic(
            self._start + start_direction.perpendicular.normalized() * r,
            self._control + (self._end - self._start).perpendicular.normalized() * r,
            self._end + end_direction.perpendicular.normalized() * r,
        )

    def offset_to(self, r: float, reverse: bool) -> List[Quadratic]:
        """
        Approximate the curve offset by the distance _r_ with 32 quadratics.

        Args:
            r (float): signed offset distance
            reverse (bool): reverse order and direction of the result

        Returns:
            List[Quadratic]: the offset pieces
        """
        curves: List[Segment] = [self]
        for _ in range(5):
            curves = [piece for curve in curves for piece in curve.subdivided(0.5)]
        offset_curves = [curve.approximate_offset(r) for curve in curves]
        if reverse:
            offset_curves = [curve.reversed() for curve in reversed(offset_curves)]
        return offset_curves

    def stroke_left(self, line_width: float) -> List[Segment]:
        return list(self.offset_to(-line_width / 2, False))

    def stroke_right(self, line_width: float) -> List[Segment]:
        return list(self.offset_to(line_width / 2, True))

    def degree_elevated(self) -> Cubic:
        """The same curve as a cubic Bezier."""
        # pylint: disable=import-outside-toplevel
        from pathseg.cubic import Cubic

        return Cubic(
            self._start,
            (self._start + self._control * 2) / 3,
            (self._end + self._control * 2) / 3,
            self._end,
        )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    def _build_svg_path_fragment(self) -> str:
        return (
            f"Q {svg_number(self._control.x)} {svg_number(self._control.y)} "
            f"{svg_number(self._end.x)} {svg_number(self._end.y)}"
        )

    def write_to_context(self, context: PathContext) -> None:
        context.quadratic_curve_to(self._control.x, self._control.y, self._end.x, self._end.y)

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        return BezierCurve.polygonize_quadratic_curve(
            [self._start.to_tuple(), self._control.to_tuple(), self._end.to_tuple()], steps
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        # rotate the ray onto the x-axis, then only y == 0 needs to be solved
        matrix = BezierCurve.ray_aligned_matrix(ray)
        p0 = matrix.times_vector(self._start)
        p1 = matrix.times_vector(self._control)
        p2 = matrix.times_vector(self._end)

        a = p0.y - 2 * p1.y + p2.y
        b = -2 * p0.y + 2 * p1.y
        c = p0.y
        ts = GeomMath.solve_quadratic_roots_real(a, b, c) or []
        return BezierCurve.ray_hits(self, ray, ts)

    def transformed(self, matrix: Affine) -> Quadratic:
        return Quadratic(
            matrix.times_vector(self._start), matrix.times_vector(self._control), matrix.times_vector(self._end)
        )

    def get_signed_area_fragment(self) -> float:
        start, control, end = self._start, self._control, self._end
        return (
            start.x * (2 * control.y + end.y)
            + control.x * (-2 * start.y + 2 * end.y)
            + end.x * (-start.y - 2 * control.y)
        ) / 6

    def reparametrized(self, a: float, b: float) -> Quadratic:
        """The curve traced by x -> position_at(a * x + b)."""
        # power form p*t^2 + q*t + r
        p = self._start + self._end - self._control * 2
        q = (self._control - self._start) * 2
        r = self._start

        # power form alpha*x^2 + beta*x + gamma
        alpha = p * (a * a)
        beta = p * (2 * a * b) + q * a
        gamma = p * (b * b) + q * b + r

        return Quadratic(gamma, beta * 0.5 + gamma, alpha + beta + gamma)

    def reversed(self) -> Quadratic:
        return Quadratic(self._end, self._control, self._start)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------
    def serialize(self) -> dict:
        return {
            "type": self.type_name,
            "startX": self._start.x,
            "startY": self._start.y,
            "controlX": self._control.x,
            "controlY": self._control.y,
            "endX": self._end.x,
            "endY": self._end.y,
        }

    @classmethod
    def deserialize(cls, payload: dict) -> Quadratic:
        cls._check_type_tag(payload)
        return cls(
            Vec2(payload["startX"], payload["startY"]),
            Vec2(payload["controlX"], payload["controlY"]),
            Vec2(payload["endX"], payload["endY"]),
        )

    # -------------------------------------------------------------------------
    # Overlaps
    # -------------------------------------------------------------------------
    def get_overlaps(self, other: Segment, epsilon: float = OVERLAP_EPSILON) -> Optional[List[Overlap]]:
        if isinstance(other, Quadratic):
            return Quadratic.get_quadratic_overlaps(self, other, epsilon)
        return None

    @staticmethod
    def get_quadratic_overlaps(
        quadratic1: Quadratic, quadratic2: Quadratic, epsilon: float = OVERLAP_EPSILON
    ) -> List[Overlap]:
        """
        Determine whether two quadratics overlap over a continuous section.

        Works on the power basis coefficients (see polynomial_get_overlap_quadratic())
        and checks the candidate map at the extrema of the difference curve.

        Args:
            quadratic1 (Quadratic): first curve p
            quadratic2 (Quadratic): second curve q
            epsilon (float): maximum coordinate difference of corresponding points

        Returns:
            List[Overlap]: the single overlap p(t) == q(a * t + b), or []
        """
        # pylint: disable=too-many-locals
        s1, c1, e1 = quadratic1.start, quadratic1.control, quadratic1.end
        s2, c2, e2 = quadratic2.start, quadratic2.control, quadratic2.end

        p0x, p1x, p2x = s1.x, -2 * s1.x + 2 * c1.x, s1.x - 2 * c1.x + e1.x
        p0y, p1y, p2y = s1.y, -2 * s1.y + 2 * c1.y, s1.y - 2 * c1.y + e1.y
        q0x, q1x, q2x = s2.x, -2 * s2.x + 2 * c2.x, s2.x - 2 * c2.x + e2.x
        q0y, q1y, q2y = s2.y, -2 * s2.y + 2 * c2.y, s2.y - 2 * c2.y + e2.y

        # prefer the dimension with the largest variation
        xs = (s1.x, c1.x, e1.x, s2.x, c2.x, e2.x)
        ys = (s1.y, c1.y, e1.y, s2.y, c2.y, e2.y)
        x_spread = max(xs) - min(xs)
        y_spread = max(ys) - min(ys)

        x_overlap = polynomial_get_overlap_quadratic(p0x, p1x, p2x, q0x, q1x, q2x)
        y_overlap = polynomial_get_overlap_quadratic(p0y, p1y, p2y, q0y, q1y, q2y)
        if x_spread > y_spread:
            overlap = x_overlap if x_overlap.is_definite else y_overlap
        else:
            overlap = y_overlap if y_overlap.is_definite else x_overlap
        if not overlap.is_definite:
            return []

        a = overlap.a
        b = overlap.b
        aa = a * a
        bb = b * b
        ab2 = 2 * a * b

        # difference between p(t) and q(a*t+b) in power form
        d0x = q0x + b * q1x + bb * q2x - p0x
        d1x = a * q1x + ab2 * q2x - p1x
        d2x = aa * q2x - p2x
        d0y = q0y + b * q1y + bb * q2y - p0y
        d1y = a * q1y + ab2 * q2y - p1y
        d2y = aa * q2y - p2y

        # the difference is largest at t = 0, t = 1 or its extremum
        for t in unit_interval_ts(GeomMath.solve_linear_roots_real(2 * d2x, d1x)):
            if abs((d2x * t + d1x) * t + d0x) > epsilon:
                return []
        for t in unit_interval_ts(GeomMath.solve_linear_roots_real(2 * d2y, d1y)):
            if abs((d2y * t + d1y) * t + d0y) > epsilon:
                return []

        qt0 = b
        qt1 = a + b
        if (qt0 > 1 and qt1 > 1) or (qt0 < 0 and qt1 < 0):
            return []

        return [Overlap(a, b)]

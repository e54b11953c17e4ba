"""Cubic Bezier segment with cusp, inflection and overlap analysis"""

from __future__ import annotations

import logging
import math
from functools import cached_property
from typing import TYPE_CHECKING, List, NamedTuple, Optional

import numpy as np
from numpy.typing import NDArray

from pathseg.bezier import BezierCurve
from pathseg.consts import (
    CUSP_EPSILON,
    OVERLAP_EPSILON,
    REDUCTION_EPSILON,
    ROOT_BOUNDARY_EPSILON,
    SELF_INTERSECTION_EPSILON,
)
from pathseg.geom import Affine, Bounds, GeomMath, Ray2, Vec2
from pathseg.line import Line, PointLike
from pathseg.overlap import (
    Overlap,
    RayIntersection,
    SegmentIntersection,
    polynomial_get_overlap_cubic,
    unit_interval_ts,
)
from pathseg.quadratic import Quadratic
from pathseg.segment import Segment, assert_finite_point, assert_parameter
from pathseg.svgpath import svg_number

if TYPE_CHECKING:
    from pathseg.context import PathContext

logger = logging.getLogger(__name__)


class CuspInfo(NamedTuple):
    """Cusp candidate and inflection parameters of a cubic."""

    t_cusp: float
    t_determinant: float
    t_inflection1: float
    t_inflection2: float


###############################################################################
# Cubic
###############################################################################
class Cubic(Segment):
    """
    A cubic Bezier curve:
        P(t) = (1-t)^3 * start + 3(1-t)^2 t * control1 + 3(1-t)t^2 * control2 + t^3 * end

    Besides the common segment operations the cubic knows about its cusp and
    inflection points (see _compute_cusp_info()), can be reduced to a quadratic
    where the control polygon allows it, and detects overlaps with other cubics.
    """

    type_name = "Cubic"

    def __init__(self, start: PointLike, control1: PointLike, control2: PointLike, end: PointLike):
        self._start = Vec2.coerce(start)
        self._control1 = Vec2.coerce(control1)
        self._control2 = Vec2.coerce(control2)
        self._end = Vec2.coerce(end)
        assert_finite_point(self._start, "Cubic start")
        assert_finite_point(self._control1, "Cubic control1")
        assert_finite_point(self._control2, "Cubic control2")
        assert_finite_point(self._end, "Cubic end")

    @property
    def start(self) -> Vec2:
        return self._start

    @start.setter
    def start(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Cubic start")
        if value != self._start:
            self._start = value
            self.invalidate()

    @property
    def control1(self) -> Vec2:
        """Vec2: The first control point."""
        return self._control1

    @control1.setter
    def control1(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Cubic control1")
        if value != self._control1:
            self._control1 = value
            self.invalidate()

    @property
    def control2(self) -> Vec2:
        """Vec2: The second control point."""
        return self._control2

    @control2.setter
    def control2(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Cubic control2")
        if value != self._control2:
            self._control2 = value
            self.invalidate()

    @property
    def end(self) -> Vec2:
        return self._end

    @end.setter
    def end(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Cubic end")
        if value != self._end:
            self._end = value
            self.invalidate()

    @property
    def degree(self) -> int:
        """int: Polynomial degree."""
        return 3

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
        mmm = mt * mt * mt
        mmt = 3 * mt * mt * t
        mtt = 3 * mt * t * t
        ttt = t * t * t
        return Vec2(
            self._start.x * mmm + self._control1.x * mmt + self._control2.x * mtt + self._end.x * ttt,
            self._start.y * mmm + self._control1.y * mmt + self._control2.y * mtt + self._end.y * ttt,
        )

    def tangent_at(self, t: float) -> Vec2:
        assert_parameter(t)
        mt = 1 - t
        return (
            self._start * (-3 * mt * mt)
            + self._control1 * (3 * mt * mt - 6 * mt * t)
            + self._control2 * (6 * mt * t - 3 * t * t)
            + self._end * (3 * t * t)
        )

    def curvature_at(self, t: float) -> float:
        assert_parameter(t)
        if BezierCurve.is_near_endpoint(t):
            at_start = t < 0.5
            points = (self._start, self._control1, self._control2, self._end)
            return BezierCurve.endpoint_curvature(self.degree, at_start, points if at_start else points[::-1])
        return self.subdivided(t)[0].curvature_at(1)

    def subdivided(self, t: float) -> List[Segment]:
        assert_parameter(t)
        if t in (0, 1):
            return [self]
        # de Casteljau
        left = self._start.blend(self._control1, t)
        right = self._control2.blend(self._end, t)
        middle = self._control1.blend(self._control2, t)
        left_mid = left.blend(middle, t)
        right_mid = middle.blend(right, t)
        mid = left_mid.blend(right_mid, t)
        return [Cubic(self._start, left, left_mid, mid), Cubic(mid, right_mid, right, self._end)]

    # -------------------------------------------------------------------------
    # Flattening basis
    # -------------------------------------------------------------------------
    @cached_property
    def r(self) -> Vec2:
        """Vec2: Unit vector from the start towards control1."""
        return (self._control1 - self._start).normalized()

    @cached_property
    def s(self) -> Vec2:
        """Vec2: Perpendicular of r, together they form the local (r, s) frame at the start."""
        return self.r.perpendicular

    def to_rs(self, point: Vec2) -> Vec2:
        """Coordinates of _point_ relative to the start in the (r, s) frame."""
        first_vector = point - self._start
        return Vec2(first_vector.dot(self.r), first_vector.dot(self.s))

    # -------------------------------------------------------------------------
    # Cusps and inflections
    # -------------------------------------------------------------------------
    @cached_property
    def _cusp_info(self) -> CuspInfo:
        return self._compute_cusp_info()

    def _compute_cusp_info(self) -> CuspInfo:
        """
        Compute the possible cusp location and the inflection parameters.

        With P(t) = a t^3 + b t^2 + c t + start in power form, the cusp candidate is
        t_cusp = -1/2 (a_perp . c) / (a_perp . b) and the inflections are
        t_cusp -+ sqrt(t_determinant) with t_determinant = t_cusp^2 - 1/3 (b_perp . c) / (a_perp . b).

        Returns:
            CuspInfo: inflections are NaN if not real
        """
        a = -self._start + self._control1 * 3 - self._control2 * 3 + self._end
        b = self._start * 3 - self._control1 * 6 + self._control2 * 3
        c = -self._start * 3 + self._control1 * 3

        a_perp_dot_b = a.perpendicular.dot(b)
        with np.errstate(divide="ignore", invalid="ignore"):
            t_cusp = float(np.divide(-0.5 * a.perpendicular.dot(c), a_perp_dot_b))
            t_determinant = float(t_cusp * t_cusp - np.divide(b.perpendicular.dot(c), 3 * a_perp_dot_b))

        if t_determinant >= 0:
            sqrt_det = math.sqrt(t_determinant)
            return CuspInfo(t_cusp, t_determinant, t_cusp - sqrt_det, t_cusp + sqrt_det)
        # no real roots
        return CuspInfo(t_cusp, t_determinant, math.nan, math.nan)

    @property
    def t_cusp(self) -> float:
        """float: Parameter of the possible cusp, it is a cusp only if has_cusp() holds."""
        return self._cusp_info.t_cusp

    @property
    def t_determinant(self) -> float:
        """float: Determinant deciding about real inflection points (>= 0)."""
        return self._cusp_info.t_determinant

    @property
    def t_inflection1(self) -> float:
        """float: Parameter of the first possible inflection point, NaN if there is none."""
        return self._cusp_info.t_inflection1

    @property
    def t_inflection2(self) -> float:
        """float: Parameter of the second possible inflection point, NaN if there is none."""
        return self._cusp_info.t_inflection2

    def has_cusp(self, epsilon: float = CUSP_EPSILON) -> bool:
        """True if the derivative (almost) vanishes at t_cusp within [0, 1]."""
        t_cusp = self.t_cusp
        return 0 <= t_cusp <= 1 and self.tangent_at(t_cusp).magnitude < epsilon

    @cached_property
    def quadratics(self) -> Optional[List[Quadratic]]:
        """Optional[List[Quadratic]]: The quadratics this cubic consists of if it has a cusp, else None."""
        return self._compute_cusp_segments()

    def _compute_cusp_segments(self) -> Optional[List[Quadratic]]:
        if not self.has_cusp():
            return None

        t_cusp = self.t_cusp
        logger.debug("Splitting cubic %s at cusp t=%s into quadratics", self, t_cusp)
        if t_cusp == 0:
            return [Quadratic(self._start, self._control2, self._end)]
        if t_cusp == 1:
            return [Quadratic(self._start, self._control1, self._end)]
        first, second = self.subdivided(t_cusp)
        return [
            Quadratic(first.start, first.control1, first.end),
            Quadratic(second.start, second.control2, second.end),
        ]

    # -------------------------------------------------------------------------
    # Extrema and bounds
    # -------------------------------------------------------------------------
    @staticmethod
    def extrema_t(v0: float, v1: float, v2: float, v3: float) -> List[float]:
        """Parameters in [0, 1] where the one-dimensional cubic has a vanishing derivative."""
        if v0 == v1 == v2 == v3:
            return []
        # coefficients of the derivative
        a = -3 * v0 + 9 * v1 - 9 * v2 + 3 * v3
        b = 6 * v0 - 12 * v1 + 6 * v2
        c = -3 * v0 + 3 * v1
        roots = GeomMath.solve_quadratic_roots_real(a, b, c) or []
        return [t for t in roots if 0 <= t <= 1]

    @cached_property
    def x_extrema_t(self) -> List[float]:
        """List[float]: Parameters where dx/dt == 0."""
        return Cubic.extrema_t(self._start.x, self._control1.x, self._control2.x, self._end.x)

    @cached_property
    def y_extrema_t(self) -> List[float]:
        """List[float]: Parameters where dy/dt == 0."""
        return Cubic.extrema_t(self._start.y, self._control1.y, self._control2.y, self._end.y)

    def _build_bounds(self) -> Bounds:
        bounds = Bounds.point(self._start).with_point(self._end)
        for t in self.x_extrema_t + self.y_extrema_t:
            bounds = bounds.with_point(self.position_at(t))
        if self.has_cusp():
            bounds = bounds.with_point(self.position_at(self.t_cusp))
        return bounds

    def get_interior_extrema_ts(self) -> List[float]:
        result: List[float] = []
        for t in self.x_extrema_t + self.y_extrema_t:
            if ROOT_BOUNDARY_EPSILON < t < 1 - ROOT_BOUNDARY_EPSILON:
                if all(abs(t - other) > ROOT_BOUNDARY_EPSILON for other in result):
                    result.append(t)
        return sorted(result)

    # -------------------------------------------------------------------------
    # Simplification
    # -------------------------------------------------------------------------
    def degree_reduced(self, epsilon: float = 0.0) -> Optional[Quadratic]:
        """
        The equivalent quadratic, if the control polygon allows it.

        Args:
            epsilon (float): maximum distance of the two quadratic control point candidates.
                Defaults to 0.0 (exact).

        Returns:
            Optional[Quadratic]: the quadratic, None if the cubic is not reducible
        """
        control_a = (self._control1 * 3 - self._start) / 2
        control_b = (self._control2 * 3 - self._end) / 2
        if (control_a - control_b).magnitude <= epsilon:
            return Quadratic(self._start, control_a.average(control_b), self._end)
        return None

    def get_nondegenerate_segments(self) -> List[Segment]:
        start = self._start
        control1 = self._control1
        control2 = self._control2
        end = self._end

        if start == end == control1 == control2:
            return []
        if self.has_cusp():
            return [segment for quadratic in self.quadratics for segment in quadratic.get_nondegenerate_segments()]

        reduced = self.degree_reduced(REDUCTION_EPSILON)
        if reduced is not None:
            return reduced.get_nondegenerate_segments()

        if (
            GeomMath.are_points_collinear(start, control1, end)
            and GeomMath.are_points_collinear(start, control2, end)
            and not start.equals_epsilon(end, 1e-7)
        ):
            # polyline through the extrema
            extrema_points = [self.position_at(t) for t in sorted(self.x_extrema_t + self.y_extrema_t)]
            points = [start] + extrema_points + [end]
            lines = [Line(p0, p1) for p0, p1 in zip(points[:-1], points[1:])]
            return [segment for line in lines for segment in line.get_nondegenerate_segments()]

        return [self]

    # -------------------------------------------------------------------------
    # Offsets and strokes
    # -------------------------------------------------------------------------
    def offset_to(self, r: float, reverse: bool) -> List[Line]:
        """
        Approximate the curve offset by the distance _r_ with a polyline of 31 lines.

        Args:
            r (float): signed offset distance
            reverse (bool): walk the curve from end to start

        Returns:
            List[Line]: the offset polyline
        """
        quantity = 32
        points: List[Vec2] = []
        result: List[Line] = []
        for i in range(quantity):
            t = i / (quantity - 1)
            if reverse:
                t = 1 - t
            points.append(self.position_at(t) + self.tangent_at(t).perpendicular.normalized() * r)
            if i > 0:
                result.append(Line(points[i - 1], points[i]))
        return result

    def stroke_left(self, line_width: float) -> List[Segment]:
        return list(self.offset_to(-line_width / 2, False))

    def stroke_right(self, line_width: float) -> List[Segment]:
        return list(self.offset_to(line_width / 2, True))

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    def _build_svg_path_fragment(self) -> str:
        return (
            f"C {svg_number(self._control1.x)} {svg_number(self._control1.y)} "
            f"{svg_number(self._control2.x)} {svg_number(self._control2.y)} "
            f"{svg_number(self._end.x)} {svg_number(self._end.y)}"
        )

    def write_to_context(self, context: PathContext) -> None:
        context.bezier_curve_to(
            self._control1.x, self._control1.y, self._control2.x, self._control2.y, self._end.x, self._end.y
        )

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        return BezierCurve.polygonize_cubic_curve(
            [self._start.to_tuple(), self._control1.to_tuple(), self._control2.to_tuple(), self._end.to_tuple()],
            steps,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        # rotate the ray onto the x-axis, then only y == 0 needs to be solved
        matrix = BezierCurve.ray_aligned_matrix(ray)
        p0 = matrix.times_vector(self._start)
        p1 = matrix.times_vector(self._control1)
        p2 = matrix.times_vector(self._control2)
        p3 = matrix.times_vector(self._end)

        # power basis of the y coordinate
        a = -p0.y + 3 * p1.y - 3 * p2.y + p3.y
        b = 3 * p0.y - 6 * p1.y + 3 * p2.y
        c = -3 * p0.y + 3 * p1.y
        d = p0.y
        ts = GeomMath.solve_cubic_roots_real(a, b, c, d) or []
        return BezierCurve.ray_hits(self, ray, ts)

    def transformed(self, matrix: Affine) -> Cubic:
        return Cubic(
            matrix.times_vector(self._start),
            matrix.times_vector(self._control1),
            matrix.times_vector(self._control2),
            matrix.times_vector(self._end),
        )

    def get_signed_area_fragment(self) -> float:
        p0, p1, p2, p3 = self._start, self._control1, self._control2, self._end
        return (
            p0.x * (6 * p1.y + 3 * p2.y + p3.y)
            + p1.x * (-6 * p0.y + 3 * p2.y + 3 * p3.y)
            + p2.x * (-3 * p0.y - 3 * p1.y + 6 * p3.y)
            + p3.x * (-p0.y - 3 * p1.y - 6 * p2.y)
        ) / 20

    def reversed(self) -> Cubic:
        return Cubic(self._end, self._control2, self._control1, self._start)

    def get_self_intersection(self, epsilon: float = SELF_INTERSECTION_EPSILON) -> Optional[SegmentIntersection]:
        """
        The point where the cubic crosses itself, if any.

        The curve is split into monotone pieces (which cannot cross themselves) and
        every pair of pieces is intersected. Hits within _epsilon_ of the ends of a
        piece are ignored, so neighboring pieces do not report their shared point.

        Returns:
            Optional[SegmentIntersection]: the crossing with both parameters on this cubic, or None
        """
        # pylint: disable=import-outside-toplevel
        from pathseg.bounds_intersection import BoundsIntersection

        t_extremes = self.get_interior_extrema_ts()
        full_extremes = [0.0] + t_extremes + [1.0]
        segments = self.subdivisions(t_extremes)
        if len(segments) < 3:
            return None

        for i, a_segment in enumerate(segments):
            for j in range(i + 1, len(segments)):
                intersections = BoundsIntersection.intersect(a_segment, segments[j])
                if not intersections:
                    continue
                hit = intersections[0]
                if epsilon < hit.a_t < 1 - epsilon and epsilon < hit.b_t < 1 - epsilon:
                    a_t = full_extremes[i] + hit.a_t * (full_extremes[i + 1] - full_extremes[i])
                    b_t = full_extremes[j] + hit.b_t * (full_extremes[j + 1] - full_extremes[j])
                    return SegmentIntersection(hit.point, a_t, b_t)
        return None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------
    def serialize(self) -> dict:
        return {
            "type": self.type_name,
            "startX": self._start.x,
            "startY": self._start.y,
            "control1X": self._control1.x,
            "control1Y": self._control1.y,
            "control2X": self._control2.x,
            "control2Y": self._control2.y,
            "endX": self._end.x,
            "endY": self._end.y,
        }

    @classmethod
    def deserialize(cls, payload: dict) -> Cubic:
        cls._check_type_tag(payload)
        return cls(
            Vec2(payload["startX"], payload["startY"]),
            Vec2(payload["control1X"], payload["control1Y"]),
            Vec2(payload["control2X"], payload["control2Y"]),
            Vec2(payload["endX"], payload["endY"]),
        )

    # -------------------------------------------------------------------------
    # Overlaps
    # -------------------------------------------------------------------------
    def get_overlaps(self, other: Segment, epsilon: float = OVERLAP_EPSILON) -> Optional[List[Overlap]]:
        if isinstance(other, Cubic):
            return Cubic.get_cubic_overlaps(self, other, epsilon)
        return None

    @staticmethod
    def get_cubic_overlaps(cubic1: Cubic, cubic2: Cubic, epsilon: float = OVERLAP_EPSILON) -> List[Overlap]:
        """
        Determine whether two cubics overlap over a continuous section.

        Both curves are converted to the power basis (see polynomial_get_overlap_cubic())
        and a candidate map p(t) == q(a * t + b) is derived on the axis where cubic1
        varies most, falling back to the other axis. The candidate is accepted if the
        difference curve stays within _epsilon_ at t = 0, t = 1 and its extrema, and
        the mapped range [b, a + b] meets [0, 1].

        Args:
            cubic1 (Cubic): first curve p
            cubic2 (Cubic): second curve q
            epsilon (float): maximum coordinate difference of corresponding points

        Returns:
            List[Overlap]: the single overlap, or []
        """
        # pylint: disable=too-many-locals
        s1, c11, c12, e1 = cubic1.start, cubic1.control1, cubic1.control2, cubic1.end
        s2, c21, c22, e2 = cubic2.start, cubic2.control1, cubic2.control2, cubic2.end

        p0x = s1.x
        p1x = -3 * s1.x + 3 * c11.x
        p2x = 3 * s1.x - 6 * c11.x + 3 * c12.x
        p3x = -s1.x + 3 * c11.x - 3 * c12.x + e1.x
        p0y = s1.y
        p1y = -3 * s1.y + 3 * c11.y
        p2y = 3 * s1.y - 6 * c11.y + 3 * c12.y
        p3y = -s1.y + 3 * c11.y - 3 * c12.y + e1.y

        q0x = s2.x
        q1x = -3 * s2.x + 3 * c21.x
        q2x = 3 * s2.x - 6 * c21.x + 3 * c22.x
        q3x = -s2.x + 3 * c21.x - 3 * c22.x + e2.x
        q0y = s2.y
        q1y = -3 * s2.y + 3 * c21.y
        q2y = 3 * s2.y - 6 * c21.y + 3 * c22.y
        q3y = -s2.y + 3 * c21.y - 3 * c22.y + e2.y

        xs = (s1.x, c11.x, c12.x, e1.x)
        ys = (s1.y, c11.y, c12.y, e1.y)
        x_spread = max(xs) - min(xs)
        y_spread = max(ys) - min(ys)

        x_overlap = polynomial_get_overlap_cubic(p0x, p1x, p2x, p3x, q0x, q1x, q2x, q3x)
        y_overlap = polynomial_get_overlap_cubic(p0y, p1y, p2y, p3y, q0y, q1y, q2y, q3y)
        if x_spread > y_spread:
            overlap = x_overlap if x_overlap.is_definite else y_overlap
        else:
            overlap = y_overlap if y_overlap.is_definite else x_overlap
        if not overlap.is_definite:
            logger.debug("No overlap candidate between %s and %s", cubic1, cubic2)
            return []

        a = overlap.a
        b = overlap.b
        aa = a * a
        aaa = aa * a
        bb = b * b
        bbb = bb * b
        ab2 = 2 * a * b
        abb3 = 3 * a * bb
        aab3 = 3 * aa * b

        # difference between p(t) and q(a*t+b) in power form
        d0x = q0x + b * q1x + bb * q2x + bbb * q3x - p0x
        d1x = a * q1x + ab2 * q2x + abb3 * q3x - p1x
        d2x = aa * q2x + aab3 * q3x - p2x
        d3x = aaa * q3x - p3x
        d0y = q0y + b * q1y + bb * q2y + bbb * q3y - p0y
        d1y = a * q1y + ab2 * q2y + abb3 * q3y - p1y
        d2y = aa * q2y + aab3 * q3y - p2y
        d3y = aaa * q3y - p3y

        # the difference is largest at t = 0, t = 1 or its extrema
        for t in unit_interval_ts(GeomMath.solve_quadratic_roots_real(3 * d3x, 2 * d2x, d1x)):
            if abs(((d3x * t + d2x) * t + d1x) * t + d0x) > epsilon:
                return []
        for t in unit_interval_ts(GeomMath.solve_quadratic_roots_real(3 * d3y, 2 * d2y, d1y)):
            if abs(((d3y * t + d2y) * t + d1y) * t + d0y) > epsilon:
                return []

        qt0 = b
        qt1 = a + b
        if (qt0 > 1 and qt1 > 1) or (qt0 < 0 and qt1 < 0):
            return []

        return [Overlap(a, b)]

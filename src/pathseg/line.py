"""Straight line segment"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Union, Sequence

from pathseg.consts import OVERLAP_EPSILON, RAY_EPSILON
from pathseg.geom import Affine, Bounds, GeomMath, Ray2, Vec2
from pathseg.overlap import (
    Overlap,
    RayIntersection,
    SegmentIntersection,
    polynomial_get_overlap_linear,
)
from pathseg.segment import ClosestPoint, Segment, assert_finite_point, assert_parameter
from pathseg.svgpath import svg_number

if TYPE_CHECKING:
    from pathseg.context import PathContext

PointLike = Union[Vec2, Sequence[float]]


###############################################################################
# Line
###############################################################################
class Line(Segment):
    """A straight line segment from start to end."""

    type_name = "Line"

    def __init__(self, start: PointLike, end: PointLike):
        self._start = Vec2.coerce(start)
        self._end = Vec2.coerce(end)
        assert_finite_point(self._start, "Line start")
        assert_finite_point(self._end, "Line end")

    @property
    def start(self) -> Vec2:
        return self._start

    @start.setter
    def start(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Line start")
        if value != self._start:
            self._start = value
            self.invalidate()

    @property
    def end(self) -> Vec2:
        return self._end

    @end.setter
    def end(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        assert_finite_point(value, "Line end")
        if value != self._end:
            self._end = value
            self.invalidate()

    @property
    def degree(self) -> int:
        """int: Polynomial degree."""
        return 1

    def position_at(self, t: float) -> Vec2:
        assert_parameter(t)
        if t == 1:
            return self._end
        return self._start + (self._end - self._start) * t

    def tangent_at(self, t: float) -> Vec2:
        assert_parameter(t)
        return self._end - self._start

    def curvature_at(self, t: float) -> float:
        assert_parameter(t)
        return 0.0

    def subdivided(self, t: float) -> List[Segment]:
        assert_parameter(t)
        if t in (0, 1):
            return [self]
        point = self.position_at(t)
        return [Line(self._start, point), Line(point, self._end)]

    def _build_bounds(self) -> Bounds:
        return Bounds.point(self._start).with_point(self._end)

    def get_bounds_with_transform(self, matrix: Affine) -> Bounds:
        return Bounds.point(matrix.times_vector(self._start)).with_point(matrix.times_vector(self._end))

    def get_interior_extrema_ts(self) -> List[float]:
        return []

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._start == self._end:
            return []
        return [self]

    def _build_svg_path_fragment(self) -> str:
        return f"L {svg_number(self._end.x)} {svg_number(self._end.y)}"

    def write_to_context(self, context: PathContext) -> None:
        context.line_to(self._end.x, self._end.y)

    def stroke_left(self, line_width: float) -> List[Segment]:
        offset = -self.end_tangent.perpendicular * (line_width / 2)
        return [Line(self._start + offset, self._end + offset)]

    def stroke_right(self, line_width: float) -> List[Segment]:
        offset = self.start_tangent.perpendicular * (line_width / 2)
        return [Line(self._end + offset, self._start + offset)]

    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        """
        Hit-test the line with _ray_.

        A hit at the very end (t == 1) is not reported, so that consecutive
        segments of a path do not count a shared endpoint twice.
        """
        start = self._start
        diff = self._end - start
        if diff.magnitude_squared == 0:
            return []

        denom = ray.direction.y * diff.x - ray.direction.x * diff.y
        if denom == 0:
            # parallel or coincident
            return []

        t = (ray.direction.x * (start.y - ray.position.y) - ray.direction.y * (start.x - ray.position.x)) / denom
        if t < 0 or t >= 1:
            return []

        s = (diff.x * (start.y - ray.position.y) - diff.y * (start.x - ray.position.x)) / denom
        if s < RAY_EPSILON:
            # behind the ray
            return []

        perp = diff.perpendicular
        point = start + diff * t
        normal = (-perp if perp.dot(ray.direction) > 0 else perp).normalized()
        wind = 1 if ray.direction.perpendicular.dot(diff) < 0 else -1
        return [RayIntersection(s, point, normal, wind, t)]

    def transformed(self, matrix: Affine) -> Line:
        return Line(matrix.times_vector(self._start), matrix.times_vector(self._end))

    def explicit_closest_to_point(self, point: Vec2) -> List[ClosestPoint]:
        """The closest point on the line to _point_ by orthogonal projection."""
        diff = self._end - self._start
        if diff.magnitude_squared == 0:
            t = 0.0
        else:
            t = GeomMath.clamp((point - self._start).dot(diff) / diff.magnitude_squared, 0, 1)
        closest = self.position_at(t)
        return [ClosestPoint(self, t, closest, point.distance_squared(closest))]

    def get_closest_points(self, point: Vec2) -> List[ClosestPoint]:
        return self.explicit_closest_to_point(point)

    def get_signed_area_fragment(self) -> float:
        return 0.5 * (self._start.x * self._end.y - self._start.y * self._end.x)

    def reparametrized(self, a: float, b: float) -> Line:
        """The line traced by t -> position_at(a * t + b)."""
        return Line(self.position_at(b), self.position_at(a + b))

    def reversed(self) -> Line:
        return Line(self._end, self._start)

    def get_arc_length(
        self, distance_epsilon: float = 1e-10, curve_epsilon: float = 1e-8, max_levels: int = 15
    ) -> float:
        return self._start.distance(self._end)

    def to_piecewise_linear_or_arc_segments(
        # pylint: disable=too-many-arguments,too-many-positional-arguments,unused-argument
        self,
        min_levels: int = 2,
        max_levels: int = 7,
        curvature_threshold: float = 0.02,
        error_threshold: float = 10,
        error_points: Sequence[float] = (0.25, 0.75),
    ) -> List[Segment]:
        return [self]

    def serialize(self) -> dict:
        return {
            "type": self.type_name,
            "startX": self._start.x,
            "startY": self._start.y,
            "endX": self._end.x,
            "endY": self._end.y,
        }

    @classmethod
    def deserialize(cls, payload: dict) -> Line:
        cls._check_type_tag(payload)
        return cls(Vec2(payload["startX"], payload["startY"]), Vec2(payload["endX"], payload["endY"]))

    def get_overlaps(self, other: Segment, epsilon: float = OVERLAP_EPSILON) -> Optional[List[Overlap]]:
        if isinstance(other, Line):
            return Line.get_line_overlaps(self, other, epsilon)
        return None

    @staticmethod
    def get_line_overlaps(line1: Line, line2: Line, epsilon: float = OVERLAP_EPSILON) -> List[Overlap]:
        """
        Determine whether two lines overlap over a continuous section.

        Args:
            line1 (Line): first line p
            line2 (Line): second line q
            epsilon (float): maximum coordinate difference of corresponding points

        Returns:
            List[Overlap]: the single overlap p(t) == q(a * t + b), or []
        """
        p0x = line1.start.x
        p1x = line1.end.x - line1.start.x
        p0y = line1.start.y
        p1y = line1.end.y - line1.start.y

        q0x = line2.start.x
        q1x = line2.end.x - line2.start.x
        q0y = line2.start.y
        q1y = line2.end.y - line2.start.y

        # prefer the dimension with the largest variation
        xs = (line1.start.x, line1.end.x, line2.start.x, line2.end.x)
        ys = (line1.start.y, line1.end.y, line2.start.y, line2.end.y)
        x_spread = max(xs) - min(xs)
        y_spread = max(ys) - min(ys)

        x_overlap = polynomial_get_overlap_linear(p0x, p1x, q0x, q1x)
        y_overlap = polynomial_get_overlap_linear(p0y, p1y, q0y, q1y)
        if x_spread > y_spread:
            overlap = x_overlap if x_overlap.is_definite else y_overlap
        else:
            overlap = y_overlap if y_overlap.is_definite else x_overlap
        if not overlap.is_definite:
            return []

        a = overlap.a
        b = overlap.b

        # difference between p(t) and q(a*t+b), linear so checking t=0 and t=1 suffices
        d0x = q0x + b * q1x - p0x
        d1x = a * q1x - p1x
        d0y = q0y + b * q1y - p0y
        d1y = a * q1y - p1y
        if abs(d0x) > epsilon or abs(d1x + d0x) > epsilon or abs(d0y) > epsilon or abs(d1y + d0y) > epsilon:
            return []

        qt0 = b
        qt1 = a + b
        if (qt0 > 1 and qt1 > 1) or (qt0 < 0 and qt1 < 0):
            return []

        return [Overlap(a, b)]

    @staticmethod
    def intersect(a: Line, b: Line) -> List[SegmentIntersection]:
        """Intersection of two line segments (at most one)."""
        point = GeomMath.line_segment_intersection(a.start, a.end, b.start, b.end)
        if point is None:
            return []
        a_t = a.explicit_closest_to_point(point)[0].t
        b_t = b.explicit_closest_to_point(point)[0].t
        return [SegmentIntersection(point, a_t, b_t)]

    @staticmethod
    def intersect_other(line: Line, other: Segment) -> List[SegmentIntersection]:
        """
        Intersections of _line_ with any other segment, found by casting a ray along the line.

        Hits within 1e-8 of the line's endpoints are excluded.
        """
        delta = line.end - line.start
        length = delta.magnitude
        if length == 0:
            return []
        ray = Ray2(line.start, delta)

        results = []
        for hit in other.intersection(ray):
            line_t = hit.distance / length
            if RAY_EPSILON < line_t < 1 - RAY_EPSILON:
                results.append(SegmentIntersection(hit.point, line_t, hit.t))
        return results

"""Circular arc segment"""

from __future__ import annotations

import logging
import math
from functools import cached_property
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from pathseg.consts import (
    ANGLE_EPSILON,
    ARC_OVERLAP_EPSILON,
    CARDINAL_ANGLES,
    FULL_CIRCLE_SVG_EPSILON,
    INTERSECTION_EPSILON,
    ROOT_BOUNDARY_EPSILON,
    TWO_PI,
)
from pathseg.geom import Affine, Bounds, GeomMath, Ray2, Vec2
from pathseg.line import Line, PointLike
from pathseg.overlap import Overlap, RayIntersection, SegmentIntersection
from pathseg.segment import Segment, assert_finite_point, assert_parameter
from pathseg.svgpath import svg_number

if TYPE_CHECKING:
    from pathseg.context import PathContext

logger = logging.getLogger(__name__)


###############################################################################
# Arc
###############################################################################
class Arc(Segment):
    """
    A continuous part of a circle, following the canvas arc() conventions.

    The arc runs from start_angle to end_angle around center, increasing the angle
    (visually clockwise with y pointing down) unless anticlockwise is set. If the
    end angle lies on the "wrong" side of the start angle it is wrapped by 2*pi,
    see compute_actual_end_angle(). A negative radius is remapped to a positive
    one with both angles turned by pi.

    Raises:
        ValueError: if the angles differ by more than a full turn in the direction of the arc
    """

    type_name = "Arc"

    def __init__(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        center: PointLike,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool,
    ):
        self._center = Vec2.coerce(center)
        self._radius = float(radius)
        self._start_angle = float(start_angle)
        self._end_angle = float(end_angle)
        self._anticlockwise = anticlockwise
        self._normalize()

    def _normalize(self) -> None:
        """Check the defining values and remap a negative radius."""
        assert_finite_point(self._center, "Arc center")
        assert math.isfinite(self._radius), f"Arc radius should be a finite number: {self._radius}"
        assert math.isfinite(self._start_angle), f"Arc start_angle should be a finite number: {self._start_angle}"
        assert math.isfinite(self._end_angle), f"Arc end_angle should be a finite number: {self._end_angle}"
        assert isinstance(self._anticlockwise, bool), f"Arc anticlockwise should be a bool: {self._anticlockwise!r}"

        if self._radius < 0:
            self._radius = -self._radius
            self._start_angle += math.pi
            self._end_angle += math.pi

        span = self._start_angle - self._end_angle if self._anticlockwise else self._end_angle - self._start_angle
        if span <= -TWO_PI or span > TWO_PI:
            raise ValueError(
                f"Unsupported arc: start_angle {self._start_angle} and end_angle {self._end_angle} "
                f"differ by more than a full turn (anticlockwise={self._anticlockwise})"
            )

    def _changed(self) -> None:
        self._normalize()
        self.invalidate()

    # -------------------------------------------------------------------------
    # Defining values
    # -------------------------------------------------------------------------
    @property
    def center(self) -> Vec2:
        """Vec2: Center of the circle."""
        return self._center

    @center.setter
    def center(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        if value != self._center:
            self._center = value
            self._changed()

    @property
    def radius(self) -> float:
        """float: Radius of the circle, never negative."""
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        if value != self._radius:
            self._radius = float(value)
            self._changed()

    @property
    def start_angle(self) -> float:
        """float: Angle of the start point in radians."""
        return self._start_angle

    @start_angle.setter
    def start_angle(self, value: float) -> None:
        if value != self._start_angle:
            self._start_angle = float(value)
            self._changed()

    @property
    def end_angle(self) -> float:
        """float: Angle of the end point in radians, as given (see actual_end_angle)."""
        return self._end_angle

    @end_angle.setter
    def end_angle(self, value: float) -> None:
        if value != self._end_angle:
            self._end_angle = float(value)
            self._changed()

    @property
    def anticlockwise(self) -> bool:
        """bool: True if the angle decreases from start to end."""
        return self._anticlockwise

    @anticlockwise.setter
    def anticlockwise(self, value: bool) -> None:
        if value != self._anticlockwise:
            self._anticlockwise = value
            self._changed()

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------
    @cached_property
    def start(self) -> Vec2:
        return self.position_at_angle(self._start_angle)

    @cached_property
    def end(self) -> Vec2:
        return self.position_at_angle(self._end_angle)

    @cached_property
    def start_tangent(self) -> Vec2:
        return self.tangent_at_angle(self._start_angle)

    @cached_property
    def end_tangent(self) -> Vec2:
        return self.tangent_at_angle(self._end_angle)

    @cached_property
    def actual_end_angle(self) -> float:
        """float: The end angle wrapped so that its difference to start_angle follows the direction."""
        return Arc.compute_actual_end_angle(self._start_angle, self._end_angle, self._anticlockwise)

    @cached_property
    def is_full_perimeter(self) -> bool:
        """bool: True if the arc covers the whole circle."""
        if self._anticlockwise:
            return self._start_angle - self._end_angle >= TWO_PI
        return self._end_angle - self._start_angle >= TWO_PI

    @cached_property
    def angle_difference(self) -> float:
        """float: The swept angle, never negative, 2*pi for a full circle."""
        difference = self._start_angle - self._end_angle if self._anticlockwise else self._end_angle - self._start_angle
        if difference < 0:
            difference += TWO_PI
        return difference

    @staticmethod
    def compute_actual_end_angle(start_angle: float, end_angle: float, anticlockwise: bool) -> float:
        """
        The end angle wrapped by 2*pi where needed, so that the sign of
        (result - start_angle) matches the direction of the arc.

        Returns:
            float: start_angle - 2*pi <= result <= start_angle for anticlockwise arcs,
                start_angle <= result <= start_angle + 2*pi otherwise
        """
        if anticlockwise:
            if start_angle > end_angle:
                return end_angle
            if start_angle < end_angle:
                return end_angle - TWO_PI
            return start_angle
        if start_angle < end_angle:
            return end_angle
        if start_angle > end_angle:
            return end_angle + TWO_PI
        return start_angle

    # -------------------------------------------------------------------------
    # Angles and parameters
    # -------------------------------------------------------------------------
    def angle_at(self, t: float) -> float:
        """The angle at the parameter _t_."""
        return self._start_angle + (self.actual_end_angle - self._start_angle) * t

    def map_angle(self, angle: float, epsilon: float = ANGLE_EPSILON) -> float:
        """
        Map a contained _angle_ into the range from start_angle to actual_end_angle.

        Angles within _epsilon_ of the start or the end snap to them exactly.
        """
        if abs(GeomMath.modulo_between_down(angle - self._start_angle, -math.pi, math.pi)) < epsilon:
            return self._start_angle
        if abs(GeomMath.modulo_between_down(angle - self.actual_end_angle, -math.pi, math.pi)) < epsilon:
            return self.actual_end_angle
        if self._start_angle > self.actual_end_angle:
            return GeomMath.modulo_between_up(angle, self._start_angle - TWO_PI, self._start_angle)
        return GeomMath.modulo_between_down(angle, self._start_angle, self._start_angle + TWO_PI)

    def t_at_angle(self, angle: float) -> float:
        """The parameter of a contained _angle_, 0 for an arc without span."""
        swept = self.actual_end_angle - self._start_angle
        if swept == 0:
            return 0.0
        return (self.map_angle(angle) - self._start_angle) / swept

    def position_at_angle(self, angle: float) -> Vec2:
        """The point of the circle at _angle_."""
        return self._center + Vec2.create_polar(self._radius, angle)

    def tangent_at_angle(self, angle: float) -> Vec2:
        """The unit tangent at _angle_ in the direction of the arc."""
        normal = Vec2.create_polar(1, angle)
        return normal.perpendicular if self._anticlockwise else -normal.perpendicular

    def contains_angle(self, angle: float) -> bool:
        """True if a ray from the center in the direction _angle_ hits the arc."""
        normalized_angle = angle - self._end_angle if self._anticlockwise else angle - self._start_angle
        positive_min_angle = GeomMath.modulo_between_down(normalized_angle, 0, TWO_PI)
        return positive_min_angle <= self.angle_difference

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------
    def position_at(self, t: float) -> Vec2:
        assert_parameter(t)
        if t == 0:
            return self.start
        if t == 1:
            return self.end
        return self.position_at_angle(self.angle_at(t))

    def tangent_at(self, t: float) -> Vec2:
        assert_parameter(t)
        angle = self.angle_at(t)
        swept = self.actual_end_angle - self._start_angle
        return Vec2(-math.sin(angle), math.cos(angle)) * (self._radius * swept)

    def curvature_at(self, t: float) -> float:
        assert_parameter(t)
        if self._radius == 0:
            # a single point
            return 0.0
        return (-1 if self._anticlockwise else 1) / self._radius

    def subdivided(self, t: float) -> List[Segment]:
        assert_parameter(t)
        if t in (0, 1):
            return [self]
        angle0 = self.angle_at(0)
        angle_t = self.angle_at(t)
        angle1 = self.angle_at(1)
        return [
            Arc(self._center, self._radius, angle0, angle_t, self._anticlockwise),
            Arc(self._center, self._radius, angle_t, angle1, self._anticlockwise),
        ]

    def _build_bounds(self) -> Bounds:
        bounds = Bounds.point(self.start).with_point(self.end)
        if self._start_angle != self._end_angle:
            for angle in CARDINAL_ANGLES:
                if self.contains_angle(angle):
                    bounds = bounds.with_point(self.position_at_angle(angle))
        return bounds

    def get_interior_extrema_ts(self) -> List[float]:
        result = []
        for angle in CARDINAL_ANGLES:
            if self.contains_angle(angle):
                t = self.t_at_angle(angle)
                if ROOT_BOUNDARY_EPSILON < t < 1 - ROOT_BOUNDARY_EPSILON:
                    result.append(t)
        return sorted(result)

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._radius <= 0 or self._start_angle == self._end_angle:
            return []
        return [self]

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    def _build_svg_path_fragment(self) -> str:
        # A rx ry x-axis-rotation large-arc-flag sweep-flag x y
        radius = svg_number(self._radius)
        sweep_flag = "0" if self._anticlockwise else "1"
        end = f"{svg_number(self.end.x)} {svg_number(self.end.y)}"
        if self.angle_difference < TWO_PI - FULL_CIRCLE_SVG_EPSILON:
            large_arc_flag = "0" if self.angle_difference < math.pi else "1"
            return f"A {radius} {radius} 0 {large_arc_flag} {sweep_flag} {end}"

        # a (nearly) full circle is ambiguous with only start and end, so it is drawn as two halves
        split_point = self.position_at_angle((self._start_angle + self._end_angle) / 2)
        first_arc = f"A {radius} {radius} 0 0 {sweep_flag} {svg_number(split_point.x)} {svg_number(split_point.y)}"
        second_arc = f"A {radius} {radius} 0 0 {sweep_flag} {end}"
        return f"{first_arc} {second_arc}"

    def write_to_context(self, context: PathContext) -> None:
        context.arc(
            self._center.x, self._center.y, self._radius, self._start_angle, self._end_angle, self._anticlockwise
        )

    def stroke_left(self, line_width: float) -> List[Segment]:
        offset = (1 if self._anticlockwise else -1) * line_width / 2
        return [Arc(self._center, self._radius + offset, self._start_angle, self._end_angle, self._anticlockwise)]

    def stroke_right(self, line_width: float) -> List[Segment]:
        offset = (-1 if self._anticlockwise else 1) * line_width / 2
        return [Arc(self._center, self._radius + offset, self._end_angle, self._start_angle, not self._anticlockwise)]

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        """
        Hit-test the arc with _ray_.

        The ray is intersected with the whole circle and hits outside the swept
        angle are dropped. Hits from outside the circle wind opposite to a hit
        from inside.
        """
        result: List[RayIntersection] = []
        if self._radius == 0 or self.angle_difference == 0:
            return result

        center_to_ray = ray.position - self._center
        tmp = ray.direction.dot(center_to_ray)
        center_to_ray_dist_sq = center_to_ray.magnitude_squared
        discriminant = 4 * tmp * tmp - 4 * (center_to_ray_dist_sq - self._radius * self._radius)
        if discriminant < 0:
            # misses the circle
            return result

        base = ray.direction.dot(self._center) - ray.direction.dot(ray.position)
        sqt = math.sqrt(discriminant) / 2
        ta = base - sqt
        tb = base + sqt
        if tb < 0:
            # circle behind the ray
            return result

        point_b = ray.point_at_distance(tb)
        normal_b = (point_b - self._center).normalized()
        normal_b_angle = normal_b.angle

        if ta >= 0:
            # ray starts outside, two possible hits
            point_a = ray.point_at_distance(ta)
            normal_a = (point_a - self._center).normalized()
            normal_a_angle = normal_a.angle
            if self.contains_angle(normal_a_angle):
                result.append(
                    RayIntersection(
                        ta, point_a, normal_a, 1 if self._anticlockwise else -1, self.t_at_angle(normal_a_angle)
                    )
                )
        if self.contains_angle(normal_b_angle):
            # the normal faces the ray, so it points inwards
            result.append(
                RayIntersection(
                    tb, point_b, -normal_b, -1 if self._anticlockwise else 1, self.t_at_angle(normal_b_angle)
                )
            )
        return result

    def transformed(self, matrix: Affine) -> Union[Arc, Segment]:
        """
        This arc transformed by _matrix_.

        Reflections reverse the direction. Any other map than a similarity turns the
        circle into an ellipse, then the arc is transformed as an EllipticalArc with equal radii.
        """
        # pylint: disable=import-outside-toplevel
        from pathseg.elliptical_arc import EllipticalArc

        if not matrix.is_similarity():
            as_ellipse = EllipticalArc(
                self._center, self._radius, self._radius, 0, self._start_angle, self._end_angle, self._anticlockwise
            )
            return as_ellipse.transformed(matrix)

        scale_vector = matrix.scale_vector
        start_angle = matrix.times_direction(Vec2.create_polar(1, self._start_angle)).angle
        end_angle = matrix.times_direction(Vec2.create_polar(1, self._end_angle)).angle
        anticlockwise = self._anticlockwise if matrix.determinant >= 0 else not self._anticlockwise

        if abs(self._end_angle - self._start_angle) == TWO_PI:
            end_angle = start_angle - TWO_PI if anticlockwise else start_angle + TWO_PI

        return Arc(
            matrix.times_vector(self._center), scale_vector.x * self._radius, start_angle, end_angle, anticlockwise
        )

    def get_signed_area_fragment(self) -> float:
        t0 = self._start_angle
        t1 = self.actual_end_angle
        return (
            0.5
            * self._radius
            * (
                self._radius * (t1 - t0)
                + self._center.x * (math.sin(t1) - math.sin(t0))
                - self._center.y * (math.cos(t1) - math.cos(t0))
            )
        )

    def reversed(self) -> Arc:
        return Arc(self._center, self._radius, self._end_angle, self._start_angle, not self._anticlockwise)

    def get_arc_length(
        self, distance_epsilon: float = 1e-10, curve_epsilon: float = 1e-8, max_levels: int = 15
    ) -> float:
        return self.angle_difference * self._radius

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

    def get_conic_matrix(self) -> NDArray[np.float64]:
        """
        Symmetric 3x3 matrix Q of the circle, a point (x, y, 1) lies on it if p^T Q p == 0.

        Returns:
            NDArray[np.float64]: the conic matrix
        """
        a = self._center.x
        b = self._center.y
        # x^2 + y^2 - 2ax - 2by + (a^2 + b^2 - r^2) = 0
        return np.array(
            [
                [1.0, 0.0, -a],
                [0.0, 1.0, -b],
                [-a, -b, a * a + b * b - self._radius * self._radius],
            ],
            dtype=np.float64,
        )

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------
    def serialize(self) -> dict:
        return {
            "type": self.type_name,
            "centerX": self._center.x,
            "centerY": self._center.y,
            "radius": self._radius,
            "startAngle": self._start_angle,
            "endAngle": self._end_angle,
            "anticlockwise": self._anticlockwise,
        }

    @classmethod
    def deserialize(cls, payload: dict) -> Arc:
        cls._check_type_tag(payload)
        return cls(
            Vec2(payload["centerX"], payload["centerY"]),
            payload["radius"],
            payload["startAngle"],
            payload["endAngle"],
            payload["anticlockwise"],
        )

    # -------------------------------------------------------------------------
    # Overlaps
    # -------------------------------------------------------------------------
    def get_overlaps(self, other: Segment, epsilon: float = ARC_OVERLAP_EPSILON) -> Optional[List[Overlap]]:
        """
        Overlaps with another Arc, None for other segment types.

        Args:
            other (Segment): the other segment
            epsilon (float): maximum center distance and radius difference of the two circles
        """
        if isinstance(other, Arc):
            return Arc.get_arc_overlaps(self, other, epsilon)
        return None

    @staticmethod
    def get_partial_overlap(end1: float, start2: float, end2: float, t_start2: float, t_end2: float) -> List[Overlap]:
        """
        Overlap between the angle ranges [0, end1] and [start2, end2].

        Args:
            end1 (float): relative end angle of the first arc, its parameters are [0, 1]
            start2 (float): relative start angle of the second arc
            end2 (float): relative end angle of the second arc
            t_start2 (float): parameter of the second arc at start2
            t_end2 (float): parameter of the second arc at end2

        Returns:
            List[Overlap]: one overlap if the ranges share more than 1e-8, else []
        """
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        min2 = min(start2, end2)
        max2 = max(start2, end2)
        overlap_min = min2
        overlap_max = min(end1, max2)
        if overlap_max < overlap_min + 1e-8:
            return []

        return [
            Overlap.create_linear(
                GeomMath.clamp(GeomMath.linear(0, end1, 0, 1, overlap_min), 0, 1),
                GeomMath.clamp(GeomMath.linear(start2, end2, t_start2, t_end2, overlap_min), 0, 1),
                GeomMath.clamp(GeomMath.linear(0, end1, 0, 1, overlap_max), 0, 1),
                GeomMath.clamp(GeomMath.linear(start2, end2, t_start2, t_end2, overlap_max), 0, 1),
            )
        ]

    @staticmethod
    def get_angular_overlaps(
        start_angle1: float, end_angle1: float, start_angle2: float, end_angle2: float
    ) -> List[Overlap]:
        """
        Overlaps between two arcs of the same circle given by their angles.

        The first arc is moved to [0, end1] with end1 > 0, the start of the second
        into [0, 2*pi). If the second arc then wraps past 0 or 2*pi it is handled
        in two parts.

        Args:
            start_angle1 (float): start angle of the first arc
            end_angle1 (float): actual end angle of the first arc
            start_angle2 (float): start angle of the second arc
            end_angle2 (float): actual end angle of the second arc

        Returns:
            List[Overlap]: zero to two overlaps p(t) == q(a * t + b)
        """
        end1 = end_angle1 - start_angle1
        sign1 = -1 if end1 < 0 else 1
        end1 *= sign1

        start2 = GeomMath.modulo_between_down(sign1 * (start_angle2 - start_angle1), 0, TWO_PI)
        end2 = sign1 * (end_angle2 - start_angle2) + start2

        if end2 < -1e-10:
            wrap_t = -start2 / (end2 - start2)
            return Arc.get_partial_overlap(end1, start2, 0, 0, wrap_t) + Arc.get_partial_overlap(
                end1, TWO_PI, end2 + TWO_PI, wrap_t, 1
            )
        if end2 > TWO_PI + 1e-10:
            wrap_t = (TWO_PI - start2) / (end2 - start2)
            return Arc.get_partial_overlap(end1, start2, TWO_PI, 0, wrap_t) + Arc.get_partial_overlap(
                end1, 0, end2 - TWO_PI, wrap_t, 1
            )
        return Arc.get_partial_overlap(end1, start2, end2, 0, 1)

    @staticmethod
    def get_arc_overlaps(arc1: Arc, arc2: Arc, epsilon: float = ARC_OVERLAP_EPSILON) -> List[Overlap]:
        """Overlaps of two arcs, only arcs on the same circle (within _epsilon_) can overlap."""
        if arc1.center.distance(arc2.center) > epsilon or abs(arc1.radius - arc2.radius) > epsilon:
            return []
        return Arc.get_angular_overlaps(
            arc1.start_angle, arc1.actual_end_angle, arc2.start_angle, arc2.actual_end_angle
        )

    # -------------------------------------------------------------------------
    # Intersections
    # -------------------------------------------------------------------------
    @staticmethod
    def get_circle_intersection_point(center1: Vec2, radius1: float, center2: Vec2, radius2: float) -> List[Vec2]:
        """
        Intersection points of two circles.

        Returns:
            List[Vec2]: zero, one (touching) or two points, none for concentric circles
        """
        assert math.isfinite(radius1) and radius1 >= 0, f"radius1 should be a non-negative number: {radius1}"
        assert math.isfinite(radius2) and radius2 >= 0, f"radius2 should be a non-negative number: {radius2}"

        delta = center2 - center1
        d = delta.magnitude
        if d < 1e-10 or d > radius1 + radius2 + 1e-10:
            return []
        if d > radius1 + radius2 - 1e-10:
            return [center1.blend(center2, radius1 / d)]

        bit = d * d - radius2 * radius2 + radius1 * radius1
        x_prime = 0.5 * bit / d
        discriminant = 4 * d * d * radius1 * radius1 - bit * bit
        base = center1.blend(center2, x_prime / d)
        if discriminant >= 1e-10:
            y_prime = math.sqrt(discriminant) / d / 2
            perpendicular = delta.perpendicular.normalized() * y_prime
            return [base + perpendicular, base - perpendicular]
        if discriminant > -1e-10:
            return [base]
        return []

    @staticmethod
    def intersect(a: Arc, b: Arc, epsilon: float = INTERSECTION_EPSILON) -> List[SegmentIntersection]:
        """
        Finite intersections of two arcs.

        Arcs on the same circle (within _epsilon_) can only meet at their endpoints.
        """
        results: List[SegmentIntersection] = []
        if a.radius == 0 or a.angle_difference == 0 or b.radius == 0 or b.angle_difference == 0:
            return results

        if a.center.equals_epsilon(b.center, epsilon) and abs(a.radius - b.radius) < epsilon:
            a_start = a.position_at(0)
            a_end = a.position_at(1)
            b_start = b.position_at(0)
            b_end = b.position_at(1)
            for a_point, a_t in ((a_start, 0), (a_end, 1)):
                for b_point, b_t in ((b_start, 0), (b_end, 1)):
                    if a_point.equals_epsilon(b_point, epsilon):
                        results.append(SegmentIntersection(a_point.average(b_point), a_t, b_t))
            return results

        for point in Arc.get_circle_intersection_point(a.center, a.radius, b.center, b.radius):
            angle_a = (point - a.center).angle
            angle_b = (point - b.center).angle
            if a.contains_angle(angle_a) and b.contains_angle(angle_b):
                results.append(SegmentIntersection(point, a.t_at_angle(angle_a), b.t_at_angle(angle_b)))
        return results

    @staticmethod
    def create_from_points(start_point: Vec2, middle_point: Vec2, end_point: Vec2) -> Union[Arc, Line]:
        """
        The arc from _start_point_ to _end_point_ passing through _middle_point_.

        Returns:
            Union[Arc, Line]: the arc, or a Line if the points are collinear
        """
        center = GeomMath.circle_center_from_points(start_point, middle_point, end_point)
        if center is None:
            logger.debug("Collinear points %s, %s, %s: using a line", start_point, middle_point, end_point)
            return Line(start_point, end_point)

        start_diff = start_point - center
        middle_diff = middle_point - center
        end_diff = end_point - center
        radius = (start_diff.magnitude + middle_diff.magnitude + end_diff.magnitude) / 3

        arc = Arc(center, radius, start_diff.angle, end_diff.angle, True)
        if arc.contains_angle(middle_diff.angle):
            return arc
        return Arc(center, radius, start_diff.angle, end_diff.angle, False)

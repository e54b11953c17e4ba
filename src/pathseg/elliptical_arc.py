"""Elliptical arc segment"""

from __future__ import annotations

import math
from enum import Enum, auto
from functools import cached_property
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from pathseg.arc import Arc
from pathseg.bounds_intersection import BoundsIntersection
from pathseg.consts import (
    ARC_OVERLAP_EPSILON,
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

# conic matrix of the unit circle x^2 + y^2 - 1 = 0
_UNIT_CIRCLE_CONIC_MATRIX = np.diag([1.0, 1.0, -1.0])


class EllipticalArcOverlapType(Enum):
    """How the full ellipses of two elliptical arcs relate."""

    # radius_x matches radius_x of the other, same center and rotation (modulo pi)
    MATCHING = auto()
    # radius_x matches radius_y of the other, rotations differ by pi/2 (modulo pi)
    OPPOSITE = auto()
    NONE = auto()


###############################################################################
# EllipticalArc
###############################################################################
class EllipticalArc(Segment):
    """
    A continuous part of an ellipse.

    The ellipse is the unit circle scaled by (radius_x, radius_y), rotated by
    _rotation_ and moved to _center_. Angles are parametric angles on the unit
    circle before that mapping, and follow the same direction conventions as Arc.

    Negative radii are remapped to positive ones. If radius_x < radius_y the radii
    are swapped and the rotation turned by pi/2, so radius_x is always the
    semi-major radius afterwards.
    """

    type_name = "EllipticalArc"

    def __init__(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        center: PointLike,
        radius_x: float,
        radius_y: float,
        rotation: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool,
    ):
        self._center = Vec2.coerce(center)
        self._radius_x = float(radius_x)
        self._radius_y = float(radius_y)
        self._rotation = float(rotation)
        self._start_angle = float(start_angle)
        self._end_angle = float(end_angle)
        self._anticlockwise = anticlockwise
        self._normalize()

    def _normalize(self) -> None:
        """Check the defining values, remap negative radii and order the radii."""
        assert_finite_point(self._center, "EllipticalArc center")
        for name in ("_radius_x", "_radius_y", "_rotation", "_start_angle", "_end_angle"):
            value = getattr(self, name)
            assert math.isfinite(value), f"EllipticalArc {name[1:]} should be a finite number: {value}"
        assert isinstance(
            self._anticlockwise, bool
        ), f"EllipticalArc anticlockwise should be a bool: {self._anticlockwise!r}"

        if self._radius_x < 0:
            self._radius_x = -self._radius_x
            self._start_angle = math.pi - self._start_angle
            self._end_angle = math.pi - self._end_angle
            self._anticlockwise = not self._anticlockwise
        if self._radius_y < 0:
            self._radius_y = -self._radius_y
            self._start_angle = -self._start_angle
            self._end_angle = -self._end_angle
            self._anticlockwise = not self._anticlockwise
        if self._radius_x < self._radius_y:
            self._rotation += math.pi / 2
            self._start_angle -= math.pi / 2
            self._end_angle -= math.pi / 2
            self._radius_x, self._radius_y = self._radius_y, self._radius_x

        span = self._start_angle - self._end_angle if self._anticlockwise else self._end_angle - self._start_angle
        if span <= -TWO_PI or span > TWO_PI:
            raise ValueError(
                f"Unsupported elliptical arc: start_angle {self._start_angle} and end_angle {self._end_angle} "
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
        """Vec2: Center of the ellipse."""
        return self._center

    @center.setter
    def center(self, value: PointLike) -> None:
        value = Vec2.coerce(value)
        if value != self._center:
            self._center = value
            self._changed()

    @property
    def radius_x(self) -> float:
        """float: Semi-major radius."""
        return self._radius_x

    @radius_x.setter
    def radius_x(self, value: float) -> None:
        if value != self._radius_x:
            self._radius_x = float(value)
            self._changed()

    @property
    def radius_y(self) -> float:
        """float: Semi-minor radius."""
        return self._radius_y

    @radius_y.setter
    def radius_y(self, value: float) -> None:
        if value != self._radius_y:
            self._radius_y = float(value)
            self._changed()

    @property
    def rotation(self) -> float:
        """float: Angle of the semi-major axis in radians."""
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        if value != self._rotation:
            self._rotation = float(value)
            self._changed()

    @property
    def start_angle(self) -> float:
        """float: Parametric angle of the start point."""
        return self._start_angle

    @start_angle.setter
    def start_angle(self, value: float) -> None:
        if value != self._start_angle:
            self._start_angle = float(value)
            self._changed()

    @property
    def end_angle(self) -> float:
        """float: Parametric angle of the end point."""
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
    def unit_transform(self) -> Affine:
        """Affine: Maps the unit circle onto this ellipse."""
        return EllipticalArc.compute_unit_transform(self._center, self._radius_x, self._radius_y, self._rotation)

    @cached_property
    def unit_arc_segment(self) -> Arc:
        """Arc: The corresponding arc of the unit circle, see unit_transform."""
        return Arc(Vec2(0, 0), 1, self._start_angle, self._end_angle, self._anticlockwise)

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
        """float: The end angle wrapped like Arc.actual_end_angle."""
        return Arc.compute_actual_end_angle(self._start_angle, self._end_angle, self._anticlockwise)

    @cached_property
    def is_full_perimeter(self) -> bool:
        """bool: True if the arc covers the whole ellipse."""
        if self._anticlockwise:
            return self._start_angle - self._end_angle >= TWO_PI
        return self._end_angle - self._start_angle >= TWO_PI

    @cached_property
    def angle_difference(self) -> float:
        """float: The swept parametric angle, never negative."""
        difference = self._start_angle - self._end_angle if self._anticlockwise else self._end_angle - self._start_angle
        if difference < 0:
            difference += TWO_PI
        return difference

    @cached_property
    def possible_extrema_angles(self) -> List[float]:
        """List[float]: Parametric angles where dx or dy vanishes on the full ellipse."""
        # gradient zero: -rx sin(a) cos(rot) - ry cos(a) sin(rot) == 0 for x, likewise for y
        x_angle = math.atan2(-self._radius_y * math.sin(self._rotation), self._radius_x * math.cos(self._rotation))
        y_angle = math.atan2(self._radius_y * math.cos(self._rotation), self._radius_x * math.sin(self._rotation))
        return [x_angle, x_angle + math.pi, y_angle, y_angle + math.pi]

    @staticmethod
    def compute_unit_transform(center: Vec2, radius_x: float, radius_y: float, rotation: float) -> Affine:
        """Transformation mapping the unit circle onto the given ellipse."""
        return (
            Affine.translation(center.x, center.y) @ Affine.rotation(rotation) @ Affine.scaling(radius_x, radius_y)
        )

    # -------------------------------------------------------------------------
    # Angles and parameters
    # -------------------------------------------------------------------------
    def angle_at(self, t: float) -> float:
        """The parametric angle at the parameter _t_."""
        return self._start_angle + (self.actual_end_angle - self._start_angle) * t

    def map_angle(self, angle: float) -> float:
        """Map a contained _angle_ into the range from start_angle to actual_end_angle."""
        return self.unit_arc_segment.map_angle(angle)

    def t_at_angle(self, angle: float) -> float:
        """The parameter of a contained _angle_, 0 for an arc without span."""
        return self.unit_arc_segment.t_at_angle(angle)

    def position_at_angle(self, angle: float) -> Vec2:
        """The point of the ellipse at the parametric _angle_."""
        return self.unit_transform.times_vector(Vec2.create_polar(1, angle))

    def tangent_at_angle(self, angle: float) -> Vec2:
        """The unit tangent at the parametric _angle_ in the direction of the arc."""
        normal = self.unit_transform.transform_normal(Vec2.create_polar(1, angle))
        return normal.perpendicular if self._anticlockwise else -normal.perpendicular

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
        return self.unit_transform.times_direction(Vec2(-math.sin(angle), math.cos(angle))) * swept

    def curvature_at(self, t: float) -> float:
        assert_parameter(t)
        if self._radius_x == 0 or self._radius_y == 0:
            # flattened onto a line or a point
            return 0.0
        angle = self.angle_at(t)
        aq = self._radius_x * math.sin(angle)
        bq = self._radius_y * math.cos(angle)
        denominator = (bq * bq + aq * aq) ** 1.5
        return (-1 if self._anticlockwise else 1) * self._radius_x * self._radius_y / denominator

    def subdivided(self, t: float) -> List[Segment]:
        assert_parameter(t)
        if t in (0, 1):
            return [self]
        angle0 = self.angle_at(0)
        angle_t = self.angle_at(t)
        angle1 = self.angle_at(1)
        return [
            EllipticalArc(
                self._center, self._radius_x, self._radius_y, self._rotation, angle0, angle_t, self._anticlockwise
            ),
            EllipticalArc(
                self._center, self._radius_x, self._radius_y, self._rotation, angle_t, angle1, self._anticlockwise
            ),
        ]

    def _build_bounds(self) -> Bounds:
        bounds = Bounds.point(self.start).with_point(self.end)
        if self._start_angle != self._end_angle:
            for angle in self.possible_extrema_angles:
                if self.unit_arc_segment.contains_angle(angle):
                    bounds = bounds.with_point(self.position_at_angle(angle))
        return bounds

    def get_interior_extrema_ts(self) -> List[float]:
        result = []
        for angle in self.possible_extrema_angles:
            if self.unit_arc_segment.contains_angle(angle):
                t = self.t_at_angle(angle)
                if ROOT_BOUNDARY_EPSILON < t < 1 - ROOT_BOUNDARY_EPSILON:
                    result.append(t)
        return sorted(result)

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._radius_x <= 0 or self._radius_y <= 0 or self._start_angle == self._end_angle:
            return []
        if self._radius_x == self._radius_y:
            start_angle = self._start_angle + self._rotation
            end_angle = self._end_angle + self._rotation
            # keep full circles
            if abs(self._end_angle - self._start_angle) == TWO_PI:
                end_angle = start_angle - TWO_PI if self._anticlockwise else start_angle + TWO_PI
            return [Arc(self._center, self._radius_x, start_angle, end_angle, self._anticlockwise)]
        return [self]

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    def _build_svg_path_fragment(self) -> str:
        radii = f"{svg_number(self._radius_x)} {svg_number(self._radius_y)}"
        rotation = svg_number(math.degrees(self._rotation))
        sweep_flag = "0" if self._anticlockwise else "1"
        end = f"{svg_number(self.end.x)} {svg_number(self.end.y)}"
        if self.angle_difference < TWO_PI - FULL_CIRCLE_SVG_EPSILON:
            large_arc_flag = "0" if self.angle_difference < math.pi else "1"
            return f"A {radii} {rotation} {large_arc_flag} {sweep_flag} {end}"

        split_point = self.position_at_angle((self._start_angle + self._end_angle) / 2)
        first_arc = f"A {radii} {rotation} 0 {sweep_flag} {svg_number(split_point.x)} {svg_number(split_point.y)}"
        second_arc = f"A {radii} {rotation} 0 {sweep_flag} {end}"
        return f"{first_arc} {second_arc}"

    def write_to_context(self, context: PathContext) -> None:
        context.ellipse(
            self._center.x,
            self._center.y,
            self._radius_x,
            self._radius_y,
            self._rotation,
            self._start_angle,
            self._end_angle,
            self._anticlockwise,
        )

    def offset_to(self, r: float, reverse: bool) -> List[Segment]:
        """
        Polyline approximation of the curve offset by _r_ along the normal.

        Args:
            r (float): signed offset distance
            reverse (bool): True to run from end to start

        Returns:
            List[Segment]: 31 lines through 32 offset points
        """
        quantity = 32
        points: List[Vec2] = []
        result: List[Segment] = []
        for i in range(quantity):
            ratio = i / (quantity - 1)
            if reverse:
                ratio = 1 - ratio
            angle = self.angle_at(ratio)
            points.append(self.position_at_angle(angle) + self.tangent_at_angle(angle).perpendicular.normalized() * r)
            if i > 0:
                result.append(Line(points[i - 1], points[i]))
        return result

    def stroke_left(self, line_width: float) -> List[Segment]:
        return self.offset_to(-line_width / 2, False)

    def stroke_right(self, line_width: float) -> List[Segment]:
        return self.offset_to(line_width / 2, True)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        """Hit-test with _ray_ by intersecting the unit arc with the inverse-transformed ray."""
        if self._radius_x == 0 or self._radius_y == 0:
            return []
        unit_transform = self.unit_transform
        inverse = unit_transform.inverted()
        unit_ray = Ray2(inverse.times_vector(ray.position), inverse.times_direction(ray.direction))

        result = []
        for hit in self.unit_arc_segment.intersection(unit_ray):
            point = unit_transform.times_vector(hit.point)
            normal = unit_transform.transform_normal(hit.normal)
            result.append(RayIntersection(ray.position.distance(point), point, normal, hit.wind, hit.t))
        return result

    def transformed(self, matrix: Affine) -> EllipticalArc:
        """
        This elliptical arc transformed by _matrix_.

        The linear part of matrix @ unit_transform is split by a singular value
        decomposition W * S * V^T: S holds the new radii, W the new rotation and
        V^T shifts the parametric angles. If V^T is a reflection the angles are
        mirrored and the direction is reversed.
        """
        linear = matrix.matrix[:2, :2] @ self.unit_transform.matrix[:2, :2]
        w, radii, vt = np.linalg.svd(linear)
        if np.linalg.det(w) < 0:
            w[:, 1] *= -1
            vt[1, :] *= -1

        phi = math.atan2(vt[0, 1], vt[0, 0])
        reflected = np.linalg.det(vt) < 0
        if reflected:
            start_angle = phi - self._start_angle
            end_angle = phi - self._end_angle
            anticlockwise = not self._anticlockwise
        else:
            start_angle = self._start_angle - phi
            end_angle = self._end_angle - phi
            anticlockwise = self._anticlockwise
        if self.is_full_perimeter:
            end_angle = start_angle - TWO_PI if anticlockwise else start_angle + TWO_PI

        return EllipticalArc(
            matrix.times_vector(self._center),
            float(radii[0]),
            float(radii[1]),
            math.atan2(w[1, 0], w[0, 0]),
            start_angle,
            end_angle,
            anticlockwise,
        )

    def get_signed_area_fragment(self) -> float:
        t0 = self._start_angle
        t1 = self.actual_end_angle
        sin0 = math.sin(t0)
        sin1 = math.sin(t1)
        cos0 = math.cos(t0)
        cos1 = math.cos(t1)
        rx = self._radius_x
        ry = self._radius_y
        cx = self._center.x
        cy = self._center.y
        return 0.5 * (
            rx * ry * (t1 - t0)
            + math.cos(self._rotation) * (rx * cy * (cos0 - cos1) + ry * cx * (sin1 - sin0))
            + math.sin(self._rotation) * (rx * cx * (cos1 - cos0) + ry * cy * (sin1 - sin0))
        )

    def reversed(self) -> EllipticalArc:
        return EllipticalArc(
            self._center,
            self._radius_x,
            self._radius_y,
            self._rotation,
            self._end_angle,
            self._start_angle,
            not self._anticlockwise,
        )

    def to_piecewise_linear_or_arc_segments(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        min_levels: int = 2,
        max_levels: int = 7,
        curvature_threshold: float = 0.02,
        error_threshold: float = 10,
        error_points: Sequence[float] = (0.25, 0.75),
    ) -> List[Segment]:
        if self._radius_x == self._radius_y:
            return self.get_nondegenerate_segments()
        return super().to_piecewise_linear_or_arc_segments(
            min_levels, max_levels, curvature_threshold, error_threshold, error_points
        )

    def get_conic_matrix(self) -> NDArray[np.float64]:
        """
        Symmetric 3x3 matrix Q of the ellipse, a point (x, y, 1) lies on it if p^T Q p == 0.

        With M the unit transform this is M^-T C M^-1 for the unit circle matrix C.
        """
        inverted = self.unit_transform.inverted().matrix
        return inverted.T @ _UNIT_CIRCLE_CONIC_MATRIX @ inverted

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------
    def serialize(self) -> dict:
        return {
            "type": self.type_name,
            "centerX": self._center.x,
            "centerY": self._center.y,
            "radiusX": self._radius_x,
            "radiusY": self._radius_y,
            "rotation": self._rotation,
            "startAngle": self._start_angle,
            "endAngle": self._end_angle,
            "anticlockwise": self._anticlockwise,
        }

    @classmethod
    def deserialize(cls, payload: dict) -> EllipticalArc:
        cls._check_type_tag(payload)
        return cls(
            Vec2(payload["centerX"], payload["centerY"]),
            payload["radiusX"],
            payload["radiusY"],
            payload["rotation"],
            payload["startAngle"],
            payload["endAngle"],
            payload["anticlockwise"],
        )

    # -------------------------------------------------------------------------
    # Overlaps and intersections
    # -------------------------------------------------------------------------
    def get_overlaps(self, other: Segment, epsilon: float = ARC_OVERLAP_EPSILON) -> Optional[List[Overlap]]:
        if isinstance(other, EllipticalArc):
            return EllipticalArc.get_elliptical_arc_overlaps(self, other, epsilon)
        return None

    @staticmethod
    def get_overlap_type(
        a: EllipticalArc, b: EllipticalArc, epsilon: float = ARC_OVERLAP_EPSILON
    ) -> EllipticalArcOverlapType:
        """
        Relation of the full ellipses of _a_ and _b_, ignoring their angles and directions.
        """
        if a.center.distance(b.center) < epsilon:
            matching_radii = abs(a.radius_x - b.radius_x) < epsilon and abs(a.radius_y - b.radius_y) < epsilon
            opposite_radii = abs(a.radius_x - b.radius_y) < epsilon and abs(a.radius_y - b.radius_x) < epsilon
            # rotations need to differ by a multiple of pi
            if matching_radii and (
                abs(GeomMath.modulo_between_down(a.rotation - b.rotation + math.pi / 2, 0, math.pi) - math.pi / 2)
                < epsilon
            ):
                return EllipticalArcOverlapType.MATCHING
            # rotations need to differ by pi/2 plus a multiple of pi
            if opposite_radii and (
                abs(GeomMath.modulo_between_down(a.rotation - b.rotation, 0, math.pi) - math.pi / 2) < epsilon
            ):
                return EllipticalArcOverlapType.OPPOSITE
        return EllipticalArcOverlapType.NONE

    @staticmethod
    def get_elliptical_arc_overlaps(
        a: EllipticalArc, b: EllipticalArc, epsilon: float = ARC_OVERLAP_EPSILON
    ) -> List[Overlap]:
        """Zero to two overlaps p(t) == q(a * t + b) of two arcs on the same ellipse."""
        if EllipticalArc.get_overlap_type(a, b, epsilon) is EllipticalArcOverlapType.NONE:
            return []
        return Arc.get_angular_overlaps(
            a.start_angle + a.rotation,
            a.actual_end_angle + a.rotation,
            b.start_angle + b.rotation,
            b.actual_end_angle + b.rotation,
        )

    @staticmethod
    def intersect(
        a: EllipticalArc, b: EllipticalArc, epsilon: float = INTERSECTION_EPSILON
    ) -> List[SegmentIntersection]:
        """
        Finite intersections of two elliptical arcs.

        Arcs of the same ellipse can only meet at their endpoints, all others
        are intersected by bounds subdivision.
        """
        if EllipticalArc.get_overlap_type(a, b, epsilon) is EllipticalArcOverlapType.NONE:
            return BoundsIntersection.intersect(a, b)

        results = []
        for a_point, a_t in ((a.position_at(0), 0), (a.position_at(1), 1)):
            for b_point, b_t in ((b.position_at(0), 0), (b.position_at(1), 1)):
                if a_point.equals_epsilon(b_point, epsilon):
                    results.append(SegmentIntersection(a_point.average(b_point), a_t, b_t))
        return results

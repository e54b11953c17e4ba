"""Segment base class: the operation set shared by all parametric curve segments"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from functools import cached_property
from typing import TYPE_CHECKING, Callable, ClassVar, Dict, List, NamedTuple, Optional, Sequence, Tuple, Type

import numpy as np
from numpy.typing import NDArray

from pathseg.consts import OVERLAP_EPSILON
from pathseg.geom import Affine, Bounds, GeomMath, Ray2, Vec2
from pathseg.overlap import Overlap, RayIntersection, SegmentIntersection

if TYPE_CHECKING:
    from pathseg.context import PathContext

logger = logging.getLogger(__name__)


###############################################################################
# Helper types
###############################################################################
class DashValues(NamedTuple):
    """Parametric positions where a line dash toggles on a segment.

    Attributes:
        values: parameters where the dash state changes, ascending
        arc_length: the approximated arc length used for the dash computation
        initially_inside: True if the segment starts inside a dash
    """

    values: List[float]
    arc_length: float
    initially_inside: bool


class ClosestPoint(NamedTuple):
    """A point on a segment closest to a query point.

    Attributes:
        segment: the segment the point lies on
        t: parameter of the point on the segment
        closest_point: the point itself
        distance_squared: squared distance to the query point
    """

    segment: "Segment"
    t: float
    closest_point: Vec2
    distance_squared: float


class _ClosestItem(NamedTuple):
    """A parameter range under refinement in Segment.closest_to_point."""

    ta: float
    tb: float
    pa: Vec2
    pb: Vec2
    segment: "Segment"
    min_distance_squared: float


def assert_parameter(t: float, name: str = "t") -> None:
    """Assert that a segment parameter lies in [0, 1]."""
    assert 0 <= t <= 1, f"{name} should be within [0, 1], got {t}"


def assert_finite_point(point: Vec2, name: str) -> None:
    """Assert that _point_ is a finite Vec2."""
    assert isinstance(point, Vec2), f"{name} should be a Vec2: {point!r}"
    assert point.is_finite(), f"{name} should be finite: {point}"


###############################################################################
# Segment
###############################################################################
class Segment(ABC):
    """
    A single parametrized curve piece with domain t in [0, 1].

    t = 0 is the start of the segment and t = 1 its end. Derived values
    (bounds, tangents, SVG fragments, ...) are cached with functools.cached_property
    and dropped together by invalidate() whenever a defining attribute changes.
    """

    # Registry of concrete segment types for Segment.deserialize, keyed by the "type" tag
    _registry: ClassVar[Dict[str, Type[Segment]]] = {}
    _cached_names: ClassVar[Tuple[str, ...]] = ()

    # Tag used by serialize()/deserialize()
    type_name: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        names = []
        for klass in cls.__mro__:
            for name, value in vars(klass).items():
                if isinstance(value, cached_property) and name not in names:
                    names.append(name)
        cls._cached_names = tuple(names)
        if cls.type_name:
            Segment._registry[cls.type_name] = cls

    def invalidate(self) -> None:
        """Clear all cached derived values, call after any defining attribute changed."""
        for name in self._cached_names:
            self.__dict__.pop(name, None)

    # -------------------------------------------------------------------------
    # Contract of concrete segments
    # -------------------------------------------------------------------------
    @property
    @abstractmethod
    def start(self) -> Vec2:
        """Vec2: The start point, equal to position_at(0)."""

    @property
    @abstractmethod
    def end(self) -> Vec2:
        """Vec2: The end point, equal to position_at(1)."""

    @abstractmethod
    def position_at(self, t: float) -> Vec2:
        """Position at the parameter _t_ in [0, 1]."""

    @abstractmethod
    def tangent_at(self, t: float) -> Vec2:
        """Non-normalized derivative dP/dt at the parameter _t_ in [0, 1]."""

    @abstractmethod
    def curvature_at(self, t: float) -> float:
        """
        Signed curvature at the parameter _t_ in [0, 1].

        Positive for visually clockwise turning (y-down screen coordinates),
        negative for counter-clockwise turning and 0 for straight parts.
        """

    @abstractmethod
    def subdivided(self, t: float) -> List[Segment]:
        """Split at _t_ into two segments of the same type, [self] for t in {0, 1}."""

    @abstractmethod
    def _build_bounds(self) -> Bounds:
        """Compute the smallest axis-aligned box containing the whole segment."""

    @abstractmethod
    def _build_svg_path_fragment(self) -> str:
        """Compute the SVG path command(s) of the segment."""

    @abstractmethod
    def get_interior_extrema_ts(self) -> List[float]:
        """Sorted parameters in (0, 1) where dx/dt or dy/dt is 0."""

    @abstractmethod
    def get_nondegenerate_segments(self) -> List[Segment]:
        """Equivalent list of segments without degenerate parts."""

    @abstractmethod
    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        """All hits of _ray_ with the segment."""

    @abstractmethod
    def get_overlaps(self, other: Segment, epsilon: float = OVERLAP_EPSILON) -> Optional[List[Overlap]]:
        """Continuous overlaps with a segment of the same type, None for other types."""

    @abstractmethod
    def transformed(self, matrix: Affine) -> Segment:
        """A copy of this segment transformed by _matrix_."""

    @abstractmethod
    def reversed(self) -> Segment:
        """A copy with the parametrization reversed (t -> 1 - t)."""

    @abstractmethod
    def get_signed_area_fragment(self) -> float:
        """Contribution to the line integral of (-y/2 dx + x/2 dy) along the segment."""

    @abstractmethod
    def write_to_context(self, context: PathContext) -> None:
        """Draw to _context_ whose current point is already the start point."""

    @abstractmethod
    def stroke_left(self, line_width: float) -> List[Segment]:
        """Segments of the offset curve on the logical left side."""

    @abstractmethod
    def stroke_right(self, line_width: float) -> List[Segment]:
        """Segments of the offset curve on the logical right side, reversed."""

    @abstractmethod
    def serialize(self) -> dict:
        """Plain data form, see deserialize()."""

    # -------------------------------------------------------------------------
    # Shared behavior
    # -------------------------------------------------------------------------
    @cached_property
    def bounds(self) -> Bounds:
        """Bounds: The smallest axis-aligned box containing the whole segment."""
        return self._build_bounds()

    def get_bounds(self) -> Bounds:
        """The smallest axis-aligned box containing the whole segment."""
        return self.bounds

    @cached_property
    def svg_path_fragment(self) -> str:
        """str: SVG path command(s) for the segment, the move-to the start is not included."""
        return self._build_svg_path_fragment()

    def get_svg_path_fragment(self) -> str:
        """SVG path command(s) for the segment, the move-to the start is not included."""
        return self.svg_path_fragment

    @cached_property
    def start_tangent(self) -> Vec2:
        """Vec2: The unit tangent at the start."""
        return self.tangent_at(0).normalized()

    @cached_property
    def end_tangent(self) -> Vec2:
        """Vec2: The unit tangent at the end."""
        return self.tangent_at(1).normalized()

    def get_bounds_with_transform(self, matrix: Affine) -> Bounds:
        """Bounds of the segment after transforming it with _matrix_."""
        return self.transformed(matrix).get_bounds()

    def are_stroked_bounds_dilated(self) -> bool:
        """
        True if both end tangents are horizontal or vertical.

        Then the stroked bounds are the regular bounds dilated by half the line width.
        """
        epsilon = 1e-7
        return (
            abs(self.start_tangent.x * self.start_tangent.y) < epsilon
            and abs(self.end_tangent.x * self.end_tangent.y) < epsilon
        )

    def slice(self, t0: float, t1: float) -> Segment:
        """The part of the segment between the parameters _t0_ < _t1_."""
        assert_parameter(t0, "t0")
        assert_parameter(t1, "t1")
        assert t0 < t1, f"slice needs t0 < t1, got {t0} and {t1}"

        segment: Segment = self
        if t1 < 1:
            segment = segment.subdivided(t1)[0]
        if t0 > 0:
            segment = segment.subdivided(GeomMath.linear(0, t1, 0, 1, t0))[1]
        return segment

    def subdivisions(self, t_list: Sequence[float]) -> List[Segment]:
        """
        Split the segment at all parameters of the ascending _t_list_.

        Args:
            t_list (Sequence[float]): sorted parameters within (0, 1)

        Returns:
            List[Segment]: len(t_list) + 1 consecutive pieces
        """
        remaining = list(t_list)
        result: List[Segment] = []
        right: Segment = self
        for i, t in enumerate(remaining):
            left, right = right.subdivided(t)
            result.append(left)
            # rescale the remaining parameters onto the right piece
            for j in range(i + 1, len(remaining)):
                remaining[j] = GeomMath.linear(t, 1, 0, 1, remaining[j])
        result.append(right)
        return result

    def subdivided_into_monotone(self) -> List[Segment]:
        """Pieces that are monotone in x and y."""
        return self.subdivisions(self.get_interior_extrema_ts())

    def is_sufficiently_flat(self, distance_epsilon: float, curve_epsilon: float) -> bool:
        """True if the segment deviates little from its chord, see Segment.is_flat()."""
        return Segment.is_flat(distance_epsilon, curve_epsilon, self.start, self.position_at(0.5), self.end)

    @staticmethod
    def is_flat(distance_epsilon: float, curve_epsilon: float, start: Vec2, middle: Vec2, end: Vec2) -> bool:
        """
        Determine if start/middle/end points represent a sufficiently flat curve.

        Args:
            distance_epsilon (float): maximum squared deviation of _middle_ from the chord
            curve_epsilon (float): maximum ratio of squared deviation to squared chord length
            start, middle, end (Vec2): sample points of the curve

        Returns:
            bool: True if both criteria hold
        """
        deviation = GeomMath.dist_to_segment_squared(middle, start, end)
        chord = start.distance_squared(end)
        if chord == 0:
            if deviation > 0:
                return False
        elif deviation / chord > curve_epsilon:
            return False
        return deviation <= distance_epsilon

    def get_arc_length(
        self, distance_epsilon: float = 1e-10, curve_epsilon: float = 1e-8, max_levels: int = 15
    ) -> float:
        """Arc length by recursive subdivision until the pieces are flat."""
        if max_levels <= 0 or self.is_sufficiently_flat(distance_epsilon, curve_epsilon):
            return self.start.distance(self.end)
        first, second = self.subdivided(0.5)
        return first.get_arc_length(distance_epsilon, curve_epsilon, max_levels - 1) + second.get_arc_length(
            distance_epsilon, curve_epsilon, max_levels - 1
        )

    def get_dash_values(
        self,
        line_dash: Sequence[float],
        line_dash_offset: float,
        distance_epsilon: float = 1e-10,
        curve_epsilon: float = 1e-8,
    ) -> DashValues:
        """
        Parameters where the dash pattern toggles along the segment.

        Args:
            line_dash (Sequence[float]): alternating dash and gap lengths, not empty
            line_dash_offset (float): offset into the dash pattern at the start
            distance_epsilon (float): flatness criterion, see is_flat()
            curve_epsilon (float): flatness criterion, see is_flat()

        Returns:
            DashValues: toggle parameters, approximate arc length and initial state
        """
        assert len(line_dash) > 0, "line_dash must not be empty"

        line_dash_sum = sum(line_dash)
        offset = math.fmod(line_dash_offset, line_dash_sum)
        if offset < 0:
            offset += line_dash_sum

        state = {"index": 0, "offset": 0.0, "inside": True, "arc_length": 0.0}
        values: List[float] = []

        def next_dash_index() -> None:
            state["index"] = (state["index"] + 1) % len(line_dash)
            state["inside"] = not state["inside"]

        # consume the initial offset
        while offset > 0:
            if offset >= line_dash[state["index"]]:
                offset -= line_dash[state["index"]]
                next_dash_index()
            else:
                state["offset"] = offset
                offset = 0

        initially_inside = bool(state["inside"])

        def recur(t0: float, t1: float, p0: Vec2, p1: Vec2, depth: int) -> None:
            t_mid = (t0 + t1) / 2
            p_mid = self.position_at(t_mid)

            if depth > 14 or Segment.is_flat(distance_epsilon, curve_epsilon, p0, p_mid, p1):
                total_length = p0.distance(p_mid) + p_mid.distance(p1)
                state["arc_length"] += total_length

                length_left = total_length
                while state["offset"] + length_left >= line_dash[state["index"]]:
                    t = GeomMath.linear(
                        0,
                        total_length,
                        t0,
                        t1,
                        total_length - length_left + line_dash[state["index"]] - state["offset"],
                    )
                    values.append(t)
                    length_left -= line_dash[state["index"]] - state["offset"]
                    state["offset"] = 0.0
                    next_dash_index()

                state["offset"] += length_left
            else:
                recur(t0, t_mid, p0, p_mid, depth + 1)
                recur(t_mid, t1, p_mid, p1, depth + 1)

        recur(0.0, 1.0, self.start, self.end, 0)
        return DashValues(values, state["arc_length"], initially_inside)

    def to_piecewise_linear_segments(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        min_levels: int = 0,
        max_levels: int = 10,
        distance_epsilon: Optional[float] = None,
        curve_epsilon: Optional[float] = None,
        point_map: Optional[Callable[[Vec2], Vec2]] = None,
    ) -> List[Segment]:
        """
        Approximate the segment by lines through recursive halving.

        Args:
            min_levels (int): number of forced subdivision levels
            max_levels (int): subdivision stops at this level
            distance_epsilon (Optional[float]): flatness criterion, None disables it
            curve_epsilon (Optional[float]): flatness criterion, None disables it
            point_map (Optional[Callable[[Vec2], Vec2]]): optional (possibly nonlinear) map applied to the points

        Returns:
            List[Segment]: the Line segments
        """
        # pylint: disable=import-outside-toplevel
        from pathseg.line import Line

        assert min_levels <= max_levels, "min_levels must not exceed max_levels"
        mapper = point_map if point_map is not None else (lambda point: point)
        distance_eps = math.inf if distance_epsilon is None else distance_epsilon
        curve_eps = math.inf if curve_epsilon is None else curve_epsilon
        segments: List[Segment] = []

        def recur(segment: Segment, min_lvl: int, max_lvl: int, start: Vec2, end: Vec2) -> None:
            finished = max_lvl == 0
            if not finished and min_lvl <= 0:
                finished = segment.is_sufficiently_flat(distance_eps, curve_eps)
            if finished:
                segments.append(Line(start, end))
                return
            middle = mapper(segment.position_at(0.5))
            first, second = segment.subdivided(0.5)
            recur(first, min_lvl - 1, max_lvl - 1, start, middle)
            recur(second, min_lvl - 1, max_lvl - 1, middle, end)

        recur(self, min_levels, max_levels, mapper(self.start), mapper(self.end))
        return segments

    def to_piecewise_linear_or_arc_segments(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        min_levels: int = 2,
        max_levels: int = 7,
        curvature_threshold: float = 0.02,
        error_threshold: float = 10,
        error_points: Sequence[float] = (0.25, 0.75),
    ) -> List[Segment]:
        """
        Approximate the segment by Arc and Line segments fitted through sample points.

        A piece is accepted when its curvature barely changes and the sampled
        _error_points_ lie close to the fitted circle (squared radius error below
        _error_threshold_).
        """
        # pylint: disable=import-outside-toplevel
        from pathseg.arc import Arc

        segments: List[Segment] = []

        def recur(
            # pylint: disable=too-many-arguments,too-many-positional-arguments
            min_lvl: int,
            max_lvl: int,
            start_t: float,
            end_t: float,
            start_point: Vec2,
            end_point: Vec2,
            start_curvature: float,
            end_curvature: float,
        ) -> None:
            middle_t = (start_t + end_t) / 2
            middle_point = self.position_at(middle_t)
            middle_curvature = self.curvature_at(middle_t)

            curvature_change = abs(start_curvature - middle_curvature) + abs(middle_curvature - end_curvature)
            if max_lvl <= 0 or (min_lvl <= 0 and curvature_change < curvature_threshold * 2):
                segment = Arc.create_from_points(start_point, middle_point, end_point)
                needs_split = False
                if isinstance(segment, Arc):
                    radius_squared = segment.radius * segment.radius
                    for ratio in error_points:
                        point = self.position_at(start_t * (1 - ratio) + end_t * ratio)
                        if abs(point.distance_squared(segment.center) - radius_squared) > error_threshold:
                            needs_split = True
                            break
                if not needs_split or max_lvl <= 0:
                    segments.append(segment)
                    return

            recur(
                min_lvl - 1, max_lvl - 1, start_t, middle_t, start_point, middle_point, start_curvature, middle_curvature
            )
            recur(min_lvl - 1, max_lvl - 1, middle_t, end_t, middle_point, end_point, middle_curvature, end_curvature)

        recur(
            min_levels,
            max_levels,
            0.0,
            1.0,
            self.position_at(0),
            self.position_at(1),
            self.curvature_at(0),
            self.curvature_at(1),
        )
        return segments

    def winding_intersection(self, ray: Ray2) -> int:
        """Sum of the winding contributions of all hits of _ray_."""
        return sum(hit.wind for hit in self.intersection(ray))

    def get_closest_points(self, point: Vec2) -> List[ClosestPoint]:
        """Points of this segment closest to _point_."""
        return Segment.closest_to_point([self], point, 1e-7)

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        """
        Sample the segment at _steps_ + 1 uniformly spaced parameters.

        Returns:
            NDArray[np.float64]: array of shape (steps+1, 2)
        """
        assert steps >= 1, f"polygonize needs at least one step, got {steps}"
        result = np.empty((steps + 1, 2), dtype=np.float64)
        for i, t in enumerate(np.linspace(0.0, 1.0, steps + 1)):
            point = self.position_at(float(t))
            result[i, 0] = point.x
            result[i, 1] = point.y
        return result

    # -------------------------------------------------------------------------
    # Static operations over several segments
    # -------------------------------------------------------------------------
    @staticmethod
    def closest_to_point(segments: Sequence[Segment], point: Vec2, threshold: float) -> List[ClosestPoint]:
        """
        Closest points on the given _segments_ to _point_ (there can be several).

        Monotone pieces of each segment are refined by halving their parameter
        ranges until all remaining candidates are shorter than _threshold_.
        Lines are solved explicitly.
        """
        # pylint: disable=import-outside-toplevel,too-many-locals
        from pathseg.line import Line

        threshold_squared = threshold * threshold
        items: List[_ClosestItem] = []
        best_list: List[ClosestPoint] = []
        best_distance_squared = math.inf

        def consider(ta: float, tb: float, pa: Vec2, pb: Vec2, segment: Segment) -> None:
            nonlocal best_distance_squared, best_list
            bounds = Bounds.point(pa).with_point(pb)
            min_distance_squared = bounds.minimum_distance_to_point_squared(point)
            if min_distance_squared <= best_distance_squared:
                max_distance_squared = bounds.maximum_distance_to_point_squared(point)
                if max_distance_squared < best_distance_squared:
                    best_distance_squared = max_distance_squared
                    best_list = []
                items.append(_ClosestItem(ta, tb, pa, pb, segment, min_distance_squared))

        for segment in segments:
            if isinstance(segment, Line):
                for info in segment.explicit_closest_to_point(point):
                    if info.distance_squared < best_distance_squared:
                        best_list = [info]
                        best_distance_squared = info.distance_squared
                    elif info.distance_squared == best_distance_squared:
                        best_list.append(info)
            else:
                ts = [0.0] + segment.get_interior_extrema_ts() + [1.0]
                for ta, tb in zip(ts[:-1], ts[1:]):
                    consider(ta, tb, segment.position_at(ta), segment.position_at(tb), segment)

        threshold_ok = False
        while items and not threshold_ok:
            current_items = items
            items = []
            threshold_ok = True
            for item in current_items:
                if item.min_distance_squared > best_distance_squared:
                    continue
                if threshold_ok and item.pa.distance_squared(item.pb) > threshold_squared:
                    threshold_ok = False
                t_mid = (item.ta + item.tb) / 2
                p_mid = item.segment.position_at(t_mid)
                consider(item.ta, t_mid, item.pa, p_mid, item.segment)
                consider(t_mid, item.tb, p_mid, item.pb, item.segment)

        for item in items:
            t = (item.ta + item.tb) / 2
            closest = item.segment.position_at(t)
            best_list.append(ClosestPoint(item.segment, t, closest, point.distance_squared(closest)))

        return best_list

    @staticmethod
    def filter_closest_to_point_result(results: Sequence[ClosestPoint]) -> List[ClosestPoint]:
        """Keep the results within 1e-11 of the closest distance, unique by location."""
        if not results:
            return []
        closest_distance_squared = min(result.distance_squared for result in results)
        filtered: List[ClosestPoint] = []
        for result in results:
            if abs(result.distance_squared - closest_distance_squared) >= 1e-11:
                continue
            if all(result.closest_point.distance_squared(other.closest_point) >= 1e-11 for other in filtered):
                filtered.append(result)
        return filtered

    @staticmethod
    def intersect(a: Segment, b: Segment) -> List[SegmentIntersection]:
        """
        All finite intersections between the segments _a_ and _b_.

        Returns:
            List[SegmentIntersection]: intersections with parameters on a and b
        """
        # pylint: disable=import-outside-toplevel
        from pathseg.arc import Arc
        from pathseg.bounds_intersection import BoundsIntersection
        from pathseg.elliptical_arc import EllipticalArc
        from pathseg.line import Line

        if isinstance(a, Line) and isinstance(b, Line):
            return Line.intersect(a, b)
        if isinstance(a, Line):
            return Line.intersect_other(a, b)
        if isinstance(b, Line):
            return [hit.swapped() for hit in Line.intersect_other(b, a)]
        if isinstance(a, Arc) and isinstance(b, Arc):
            return Arc.intersect(a, b)
        if isinstance(a, EllipticalArc) and isinstance(b, EllipticalArc):
            return EllipticalArc.intersect(a, b)
        return BoundsIntersection.intersect(a, b)

    @staticmethod
    def deserialize(payload: dict) -> Segment:
        """
        Create a segment from its plain data form.

        Raises:
            ValueError: if the "type" tag is missing or unknown
        """
        # pylint: disable=import-outside-toplevel,unused-import
        import pathseg.arc
        import pathseg.cubic
        import pathseg.elliptical_arc
        import pathseg.line
        import pathseg.quadratic

        type_name = payload.get("type")
        segment_class = Segment._registry.get(type_name) if isinstance(type_name, str) else None
        if segment_class is None:
            raise ValueError(f"Unknown segment type in payload: {type_name!r}")
        return segment_class.deserialize(payload)

    @classmethod
    def _check_type_tag(cls, payload: dict) -> None:
        """Raise ValueError unless _payload_ carries the tag of _cls_."""
        if payload.get("type") != cls.type_name:
            raise ValueError(f"Cannot deserialize {payload.get('type')!r} as {cls.type_name}")

    def __repr__(self):
        return f"{type(self).__name__}({self.serialize()})"

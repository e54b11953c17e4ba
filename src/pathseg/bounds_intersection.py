"""Segment/segment intersection by recursive bounds subdivision"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from pathseg.consts import BOUNDS_INTERSECTION_GROUP_EPSILON, BOUNDS_INTERSECTION_ITERATIONS
from pathseg.geom import Vec2
from pathseg.overlap import SegmentIntersection

if TYPE_CHECKING:
    from pathseg.segment import Segment


@dataclass(frozen=True)
class IntersectionRange:
    """
    A candidate pair of parameter ranges, one on each segment, whose endpoint boxes intersect.

    Attributes:
        at_min (float): start of the range on segment a
        at_max (float): end of the range on segment a
        bt_min (float): start of the range on segment b
        bt_max (float): end of the range on segment b
        a_min (Vec2): position of a at at_min
        a_max (Vec2): position of a at at_max
        b_min (Vec2): position of b at bt_min
        b_max (Vec2): position of b at bt_max
    """

    # pylint: disable=too-many-instance-attributes
    at_min: float
    at_max: float
    bt_min: float
    bt_max: float
    a_min: Vec2
    a_max: Vec2
    b_min: Vec2
    b_max: Vec2

    def distance(self, other: IntersectionRange) -> float:
        """Summed squared difference of all four parameter bounds."""
        da_min = self.at_min - other.at_min
        da_max = self.at_max - other.at_max
        db_min = self.bt_min - other.bt_min
        db_max = self.bt_max - other.bt_max
        return da_min * da_min + da_max * da_max + db_min * db_min + db_max * db_max

    def push_subdivisions(self, a: Segment, b: Segment, result: List[IntersectionRange]) -> None:
        """
        Halve both ranges and append the quarters whose boxes still intersect to _result_.

        A range that cannot be halved any more in floating point is appended unchanged.
        """
        at_mid = (self.at_max + self.at_min) / 2
        bt_mid = (self.bt_max + self.bt_min) / 2
        if at_mid in (self.at_min, self.at_max) or bt_mid in (self.bt_min, self.bt_max):
            result.append(self)
            return

        a_mid = a.position_at(at_mid)
        b_mid = b.position_at(bt_mid)
        a_halves = ((self.at_min, at_mid, self.a_min, a_mid), (at_mid, self.at_max, a_mid, self.a_max))
        b_halves = ((self.bt_min, bt_mid, self.b_min, b_mid), (bt_mid, self.bt_max, b_mid, self.b_max))
        for b_t0, b_t1, b_p0, b_p1 in b_halves:
            for a_t0, a_t1, a_p0, a_p1 in a_halves:
                if BoundsIntersection.box_intersects(a_p0, a_p1, b_p0, b_p1):
                    result.append(IntersectionRange(a_t0, a_t1, b_t0, b_t1, a_p0, a_p1, b_p0, b_p1))


class BoundsIntersection:
    """
    Finds the finite intersections of two arbitrary segments.

    Both segments are split at their interior extrema, so every piece is monotone
    in x and y and its bounding box is the box spanned by its endpoints. Candidate
    pairs of pieces are halved repeatedly, keeping the quarters whose boxes still
    intersect. Segments that overlap continuously produce an unbounded number of
    candidates, check get_overlaps() before intersecting them.
    """

    @staticmethod
    def box_intersects(a_min: Vec2, a_max: Vec2, b_min: Vec2, b_max: Vec2) -> bool:
        """True if the box spanned by _a_min_, _a_max_ touches the box spanned by _b_min_, _b_max_."""
        min_x = max(min(a_min.x, a_max.x), min(b_min.x, b_max.x))
        min_y = max(min(a_min.y, a_max.y), min(b_min.y, b_max.y))
        max_x = min(max(a_min.x, a_max.x), max(b_min.x, b_max.x))
        max_y = min(max(a_min.y, a_max.y), max(b_min.y, b_max.y))
        return max_x - min_x >= 0 and max_y - min_y >= 0

    @staticmethod
    def get_intersection_ranges(
        a: Segment, b: Segment, iterations: int = BOUNDS_INTERSECTION_ITERATIONS
    ) -> List[IntersectionRange]:
        """
        Refined candidate ranges after _iterations_ rounds of halving.

        Args:
            a (Segment): first segment
            b (Segment): second segment
            iterations (int): number of halving rounds

        Returns:
            List[IntersectionRange]: the remaining candidates
        """
        a_extrema = a.get_interior_extrema_ts()
        b_extrema = b.get_interior_extrema_ts()
        a_internals = list(zip([0.0] + a_extrema, a_extrema + [1.0]))
        b_internals = list(zip([0.0] + b_extrema, b_extrema + [1.0]))

        ranges: List[IntersectionRange] = []
        for at_min, at_max in a_internals:
            for bt_min, bt_max in b_internals:
                a_min = a.position_at(at_min)
                a_max = a.position_at(at_max)
                b_min = b.position_at(bt_min)
                b_max = b.position_at(bt_max)
                if BoundsIntersection.box_intersects(a_min, a_max, b_min, b_max):
                    ranges.append(IntersectionRange(at_min, at_max, bt_min, bt_max, a_min, a_max, b_min, b_max))

        for _ in range(iterations):
            refined: List[IntersectionRange] = []
            for candidate in reversed(ranges):
                candidate.push_subdivisions(a, b, refined)
            ranges = refined
        return ranges

    @staticmethod
    def intersect(
        a: Segment, b: Segment, group_epsilon: float = BOUNDS_INTERSECTION_GROUP_EPSILON
    ) -> List[SegmentIntersection]:
        """
        All finite intersections of _a_ and _b_.

        Refined candidates closer than _group_epsilon_ (summed squared parameter
        differences) to any member of a group join that group, each group yields
        one intersection at its averaged parameters.

        Returns:
            List[SegmentIntersection]: intersections with parameters on a and b
        """
        if not a.get_bounds().intersects_bounds(b.get_bounds()):
            return []

        groups: List[List[IntersectionRange]] = []
        for candidate in BoundsIntersection.get_intersection_ranges(a, b):
            for group in groups:
                if any(candidate.distance(member) < group_epsilon for member in group):
                    group.append(candidate)
                    break
            else:
                groups.append([candidate])

        results = []
        for group in groups:
            a_t = sum(member.at_min + member.at_max for member in group) / (2 * len(group))
            b_t = sum(member.bt_min + member.bt_max for member in group) / (2 * len(group))
            results.append(SegmentIntersection(a.position_at(a_t).average(b.position_at(b_t)), a_t, b_t))
        return results

"""Result value types of segment queries: overlaps, ray hits and segment intersections"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

from pathseg.geom import GeomMath, Vec2


###############################################################################
# Overlap
###############################################################################
@dataclass(frozen=True)
class Overlap:
    """
    Describes a continuous overlap of two segments p and q: p(t) == q(a * t + b).

    Attributes:
        a (float): scale of the reparametrization, never 0
        b (float): offset of the reparametrization
    """

    a: float
    b: float

    def __post_init__(self):
        assert self.a != 0, "Overlap needs a non-zero scale"

    @classmethod
    def create_linear(cls, t1_min: float, t2_min: float, t1_max: float, t2_max: float) -> Overlap:
        """
        Create the overlap mapping t1_min to t2_min and t1_max to t2_max.

        Args:
            t1_min (float): parameter on the first segment
            t2_min (float): corresponding parameter on the second segment
            t1_max (float): parameter on the first segment
            t2_max (float): corresponding parameter on the second segment

        Returns:
            Overlap: the linear map from the first segment's parameters to the second's
        """
        a = (t2_max - t2_min) / (t1_max - t1_min)
        return cls(a, t2_min - a * t1_min)

    def apply(self, t: float) -> float:
        """Map a parameter of the first segment to the second segment."""
        return self.a * t + self.b

    def apply_inverse(self, u: float) -> float:
        """Map a parameter of the second segment back to the first segment."""
        return (u - self.b) / self.a

    def get_overlapped_range(self) -> Tuple[float, float]:
        """
        The range of the first segment's parameter that overlaps the second segment.

        Returns:
            Tuple[float, float]: (t0, t1) with 0 <= t0 <= t1 <= 1
        """
        t0 = self.apply_inverse(0.0)
        t1 = self.apply_inverse(1.0)
        if t0 > t1:
            t0, t1 = t1, t0
        return GeomMath.clamp(t0, 0.0, 1.0), GeomMath.clamp(t1, 0.0, 1.0)


###############################################################################
# RayIntersection
###############################################################################
@dataclass(frozen=True)
class RayIntersection:
    """
    A hit of a ray with a segment.

    Attributes:
        distance (float): distance along the ray
        point (Vec2): the hit point
        normal (Vec2): unit normal at the hit, facing the ray origin
        wind (int): winding contribution, +1 or -1
        t (float): parameter of the hit on the segment
    """

    distance: float
    point: Vec2
    normal: Vec2
    wind: int
    t: float


###############################################################################
# SegmentIntersection
###############################################################################
@dataclass(frozen=True)
class SegmentIntersection:
    """
    An intersection point of two segments a and b.

    Attributes:
        point (Vec2): the intersection point
        a_t (float): parameter on segment a
        b_t (float): parameter on segment b
    """

    point: Vec2
    a_t: float
    b_t: float

    def swapped(self) -> SegmentIntersection:
        """The same intersection with the roles of a and b exchanged."""
        return SegmentIntersection(self.point, self.b_t, self.a_t)


###############################################################################
# Polynomial overlap
###############################################################################
class OverlapKind(Enum):
    """Outcome of matching the coefficients of two polynomials."""

    DEFINITE = auto()
    ANY_AFFINE_MAP = auto()
    NO_OVERLAP = auto()


@dataclass(frozen=True)
class PolynomialOverlap:
    """
    Result of the polynomial coefficient matching p(t) == q(a * t + b).

    The values a and b are only meaningful for OverlapKind.DEFINITE.
    """

    kind: OverlapKind
    a: float = 0.0
    b: float = 0.0

    @classmethod
    def definite(cls, a: float, b: float) -> PolynomialOverlap:
        """A single affine map."""
        return cls(OverlapKind.DEFINITE, a, b)

    @property
    def is_definite(self) -> bool:
        """bool: True if a and b are determined."""
        return self.kind is OverlapKind.DEFINITE


NO_OVERLAP = PolynomialOverlap(OverlapKind.NO_OVERLAP)
ANY_AFFINE_MAP = PolynomialOverlap(OverlapKind.ANY_AFFINE_MAP)


def polynomial_get_overlap_linear(p0s: float, p1s: float, q0s: float, q1s: float) -> PolynomialOverlap:
    """
    Find (a, b) with p(t) == q(a * t + b) for two linear polynomials in power basis.

    The power basis coefficients of a line from p0 to p1 are
        [ p0s ] == [  1   0 ] * [ p0 ]
        [ p1s ] == [ -1   1 ] * [ p1 ]

    Returns:
        PolynomialOverlap: the unique map, ANY_AFFINE_MAP for equal constants, else NO_OVERLAP
    """
    if q1s == 0:
        return ANY_AFFINE_MAP if p0s == q0s else NO_OVERLAP

    a = p1s / q1s
    if a == 0:
        return NO_OVERLAP

    b = (p0s - q0s) / q1s
    return PolynomialOverlap.definite(a, b)


def polynomial_get_overlap_quadratic(
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    p0s: float,
    p1s: float,
    p2s: float,
    q0s: float,
    q1s: float,
    q2s: float,
) -> PolynomialOverlap:
    """
    Find (a, b) with p(t) == q(a * t + b) for two quadratic polynomials in power basis.

    The power basis coefficients of a quadratic Bezier are
        [ p0s ]    [  1   0   0 ]   [ p0 ]
        [ p1s ] == [ -2   2   0 ] * [ p1 ]
        [ p2s ]    [  1  -2   1 ]   [ p2 ]

    A vanishing leading coefficient of q degrades to the linear case.
    """
    if q2s == 0:
        return polynomial_get_overlap_linear(p0s, p1s, q0s, q1s)

    discr = p2s / q2s
    if discr < 0:
        # a would be imaginary
        return NO_OVERLAP

    a = discr**0.5
    if a == 0:
        return NO_OVERLAP

    b = (p1s - a * q1s) / (2 * a * q2s)
    return PolynomialOverlap.definite(a, b)


def polynomial_get_overlap_cubic(
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    p0s: float,
    p1s: float,
    p2s: float,
    p3s: float,
    q0s: float,
    q1s: float,
    q2s: float,
    q3s: float,
) -> PolynomialOverlap:
    """
    Find (a, b) with p(t) == q(a * t + b) for two cubic polynomials in power basis.

    The power basis coefficients of a cubic Bezier are
        [ p0s ]    [  1   0   0   0 ]   [ p0 ]
        [ p1s ] == [ -3   3   0   0 ] * [ p1 ]
        [ p2s ]    [  3  -6   3   0 ]   [ p2 ]
        [ p3s ]    [ -1   3  -3   1 ]   [ p3 ]

    and the mapped cubic must satisfy
        [ p0s ]    [ 1 b b^2  b^3  ]   [ q0s ]
        [ p1s ] == [ 0 a 2ab 3ab^2 ] * [ q1s ]
        [ p2s ]    [ 0 0 a^2 3a^2b ]   [ q2s ]
        [ p3s ]    [ 0 0  0   a^3  ]   [ q3s ]

    Only the two leading rows are used to determine a and b, callers verify the rest.
    A vanishing leading coefficient of q degrades to the quadratic case.
    """
    if q3s == 0:
        return polynomial_get_overlap_quadratic(p0s, p1s, p2s, q0s, q1s, q2s)

    a = GeomMath.cube_root(p3s / q3s)
    if a == 0:
        # q3s is non-zero, so p could not match
        return NO_OVERLAP

    b = (p2s - a * a * q2s) / (3 * a * a * q3s)
    return PolynomialOverlap.definite(a, b)


def unit_interval_ts(roots: Optional[List[float]]) -> List[float]:
    """0, 1 and the given _roots_ within [0, 1], sorted and without duplicates."""
    ts = {0.0, 1.0}
    if roots:
        ts.update(root for root in roots if 0 <= root <= 1)
    return sorted(ts)

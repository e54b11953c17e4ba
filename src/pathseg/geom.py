"""Handling 2D geometry: vectors, rays, bounding boxes, affine matrices and numeric helpers"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pathseg.consts import ROOT_IMAGINARY_EPSILON, ROOT_SOLVER_DEGENERACY_RATIO


###############################################################################
# Vec2
###############################################################################
@dataclass(frozen=True)
class Vec2:
    """
    Immutable 2D point or vector.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    @classmethod
    def create_polar(cls, magnitude: float, angle: float) -> Vec2:
        """Create a vector from polar coordinates (angle in radians)."""
        return cls(magnitude * math.cos(angle), magnitude * math.sin(angle))

    @classmethod
    def coerce(cls, value: Union[Vec2, Sequence[Union[int, float]]]) -> Vec2:
        """
        Interpret _value_ as a point.

        Args:
            value (Union[Vec2, Sequence[float]]): a Vec2 or a pair (x, y)

        Returns:
            Vec2: the point

        Raises:
            TypeError: if _value_ is neither a Vec2 nor a pair of numbers
        """
        if isinstance(value, Vec2):
            return value
        if isinstance(value, (str, bytes)):
            raise TypeError(f"Cannot interpret {value!r} as a 2D point")
        try:
            x, y = value
            return cls(float(x), float(y))
        except (TypeError, ValueError) as exc:
            raise TypeError(f"Cannot interpret {value!r} as a 2D point") from exc

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec2:
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def dot(self, other: Vec2) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vec2) -> float:
        """Scalar z-component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    @property
    def magnitude(self) -> float:
        """float: The Euclidean length."""
        return math.hypot(self.x, self.y)

    @property
    def magnitude_squared(self) -> float:
        """float: The squared Euclidean length."""
        return self.x * self.x + self.y * self.y

    @property
    def angle(self) -> float:
        """float: The angle to the positive x-axis in radians, within (-pi, pi]."""
        return math.atan2(self.y, self.x)

    @property
    def perpendicular(self) -> Vec2:
        """Vec2: The vector rotated by -pi/2, i.e. (y, -x)."""
        return Vec2(self.y, -self.x)

    def normalized(self) -> Vec2:
        """
        Return the unit vector with the same direction.

        Returns:
            Vec2: the normalized vector, the zero vector stays zero
        """
        mag = self.magnitude
        if mag == 0:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / mag, self.y / mag)

    def distance(self, other: Vec2) -> float:
        """Distance to _other_."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance_squared(self, other: Vec2) -> float:
        """Squared distance to _other_."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def blend(self, other: Vec2, ratio: float) -> Vec2:
        """Linear interpolation, _ratio_ = 0 returns self and _ratio_ = 1 returns _other_."""
        return Vec2(self.x + (other.x - self.x) * ratio, self.y + (other.y - self.y) * ratio)

    def average(self, other: Vec2) -> Vec2:
        """Midpoint between self and _other_."""
        return self.blend(other, 0.5)

    def equals_epsilon(self, other: Vec2, epsilon: float) -> bool:
        """True if both coordinates differ by at most _epsilon_."""
        return max(abs(self.x - other.x), abs(self.y - other.y)) <= epsilon

    def is_finite(self) -> bool:
        """True if both coordinates are finite."""
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to a tuple (x, y)."""
        return (self.x, self.y)

    def to_array(self) -> NDArray[np.float64]:
        """Convert to a numpy array [x, y]."""
        return np.array([self.x, self.y], dtype=np.float64)

    def __str__(self):
        return f"Vec2({self.x:g}, {self.y:g})"


###############################################################################
# Ray2
###############################################################################
@dataclass(frozen=True)
class Ray2:
    """
    A ray with an origin and a unit direction.

    The direction is normalized on construction.
    """

    position: Vec2
    direction: Vec2

    def __post_init__(self):
        object.__setattr__(self, "direction", self.direction.normalized())

    def point_at_distance(self, distance: float) -> Vec2:
        """Point on the ray at the given _distance_ from the origin."""
        return self.position + self.direction * distance


###############################################################################
# Bounds
###############################################################################
@dataclass(frozen=True)
class Bounds:
    """
    Represents an axis-aligned box.

    An empty box is represented by xmin > xmax (see Bounds.nothing()).

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def nothing(cls) -> Bounds:
        """The empty box, neutral element for with_point/union."""
        return cls(math.inf, math.inf, -math.inf, -math.inf)

    @classmethod
    def point(cls, point: Vec2) -> Bounds:
        """A zero-size box at _point_."""
        return cls(point.x, point.y, point.x, point.y)

    @classmethod
    def from_points(cls, points: Sequence[Vec2]) -> Bounds:
        """Smallest box containing all _points_."""
        bounds = cls.nothing()
        for point in points:
            bounds = bounds.with_point(point)
        return bounds

    def with_point(self, point: Vec2) -> Bounds:
        """Return the box extended to include _point_."""
        return Bounds(
            min(self.xmin, point.x),
            min(self.ymin, point.y),
            max(self.xmax, point.x),
            max(self.ymax, point.y),
        )

    def union(self, other: Bounds) -> Bounds:
        """Return the smallest box containing self and _other_."""
        return Bounds(
            min(self.xmin, other.xmin),
            min(self.ymin, other.ymin),
            max(self.xmax, other.xmax),
            max(self.ymax, other.ymax),
        )

    def intersects_bounds(self, other: Bounds) -> bool:
        """True if the boxes share at least one point (touching counts)."""
        return max(self.xmin, other.xmin) <= min(self.xmax, other.xmax) and max(self.ymin, other.ymin) <= min(
            self.ymax, other.ymax
        )

    def contains_point(self, point: Vec2, epsilon: float = 0.0) -> bool:
        """True if _point_ lies inside the box dilated by _epsilon_."""
        return (
            self.xmin - epsilon <= point.x <= self.xmax + epsilon
            and self.ymin - epsilon <= point.y <= self.ymax + epsilon
        )

    def is_empty(self) -> bool:
        """True if the box contains no point."""
        return self.xmin > self.xmax or self.ymin > self.ymax

    def dilated(self, amount: float) -> Bounds:
        """Return the box expanded by _amount_ on all sides."""
        return Bounds(self.xmin - amount, self.ymin - amount, self.xmax + amount, self.ymax + amount)

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the box as Tuple (xmin, ymin, xmax, ymax)."""
        return self.xmin, self.ymin, self.xmax, self.ymax

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self.ymax - self.ymin

    @property
    def centroid(self) -> Tuple[float, float]:
        """
        The centroid of the box.

        Returns:
            Tuple[float, float]: The coordinates of the centroid as (x, y)
        """
        return (self.xmin + self.xmax) / 2, (self.ymin + self.ymax) / 2

    def minimum_distance_to_point_squared(self, point: Vec2) -> float:
        """Squared distance from _point_ to the closest point of the box (0 inside)."""
        closest_x = GeomMath.clamp(point.x, self.xmin, self.xmax)
        closest_y = GeomMath.clamp(point.y, self.ymin, self.ymax)
        return point.distance_squared(Vec2(closest_x, closest_y))

    def maximum_distance_to_point_squared(self, point: Vec2) -> float:
        """Squared distance from _point_ to the farthest corner of the box."""
        dx = max(abs(point.x - self.xmin), abs(point.x - self.xmax))
        dy = max(abs(point.y - self.ymin), abs(point.y - self.ymax))
        return dx * dx + dy * dy

    def equals_epsilon(self, other: Bounds, epsilon: float) -> bool:
        """True if all four coordinates differ by at most _epsilon_."""
        return all(abs(a - b) <= epsilon for a, b in zip(self.extent, other.extent))

    def transform_affine(self, affine_trafo: Sequence[Union[int, float]]) -> Bounds:
        """
        Transform the Bounds using the given affine transformation [a00, a01, a10, a11, b0, b1].

        All four corners are transformed, so the result contains the transformed box.

        Args:
            affine_trafo (List[float]): Affine transformation [a00, a01, a10, a11, b0, b1]

        Returns:
            Bounds: The box containing the transformed corners
        """
        corners = [(self.xmin, self.ymin), (self.xmin, self.ymax), (self.xmax, self.ymin), (self.xmax, self.ymax)]
        return Bounds.from_points([Vec2(*GeomMath.transform_point(affine_trafo, corner)) for corner in corners])

    @classmethod
    def from_dict(cls, data: dict) -> Bounds:
        """Create a Bounds instance from a dictionary."""
        return cls(
            xmin=data.get("xmin", 0.0),
            ymin=data.get("ymin", 0.0),
            xmax=data.get("xmax", 0.0),
            ymax=data.get("ymax", 0.0),
        )

    def to_dict(self) -> dict:
        """Convert the Bounds instance to a dictionary."""
        return {
            "xmin": self.xmin,
            "ymin": self.ymin,
            "xmax": self.xmax,
            "ymax": self.ymax,
        }

    def __str__(self):
        """Returns a string representation of the Bounds instance."""
        return (
            f"Bounds(xmin={self.xmin}, ymin={self.ymin}, "
            f"xmax={self.xmax}, ymax={self.ymax}, "
            f"width={self.width}, height={self.height})"
        )


###############################################################################
# Affine
###############################################################################
class Affine:
    """
    Immutable 2D affine transformation stored as a 3x3 numpy matrix.

    The matrix is:
        | a00 a01 b0 |
        | a10 a11 b1 |
        |  0   0  1  |
    which corresponds to affine_trafo = [a00, a01, a10, a11, b0, b1] (shapely ordering).
    """

    __slots__ = ("_matrix",)

    def __init__(self, matrix: Union[NDArray[np.float64], Sequence[Sequence[float]]]):
        self._matrix: NDArray[np.float64] = np.array(matrix, dtype=np.float64)
        if self._matrix.shape != (3, 3):
            raise ValueError(f"Affine needs a 3x3 matrix, got shape {self._matrix.shape}")
        self._matrix.setflags(write=False)

    @classmethod
    def identity(cls) -> Affine:
        """The identity transformation."""
        return cls(np.identity(3))

    @classmethod
    def translation(cls, x: float, y: float) -> Affine:
        """Translation by (x, y)."""
        return cls([[1.0, 0.0, x], [0.0, 1.0, y], [0.0, 0.0, 1.0]])

    @classmethod
    def rotation(cls, angle: float) -> Affine:
        """Rotation around the origin by _angle_ (radians)."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return cls([[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0.0, 0.0, 1.0]])

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> Affine:
        """Scaling by (sx, sy); uniform if _sy_ is omitted."""
        if sy is None:
            sy = sx
        return cls([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])

    @classmethod
    def from_trafo(cls, affine_trafo: Sequence[Union[int, float]]) -> Affine:
        """Create from a shapely-style list [a00, a01, a10, a11, b0, b1]."""
        a00, a01, a10, a11, b0, b1 = affine_trafo
        return cls([[a00, a01, b0], [a10, a11, b1], [0.0, 0.0, 1.0]])

    def to_trafo(self) -> List[float]:
        """Convert to a shapely-style list [a00, a01, a10, a11, b0, b1]."""
        m = self._matrix
        return [float(m[0, 0]), float(m[0, 1]), float(m[1, 0]), float(m[1, 1]), float(m[0, 2]), float(m[1, 2])]

    @property
    def matrix(self) -> NDArray[np.float64]:
        """NDArray[np.float64]: The read-only 3x3 matrix."""
        return self._matrix

    def __matmul__(self, other: Affine) -> Affine:
        return Affine(self._matrix @ other._matrix)

    def __eq__(self, other):
        if not isinstance(other, Affine):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    def __hash__(self):
        return hash(self._matrix.tobytes())

    def times_vector(self, point: Vec2) -> Vec2:
        """Transform a point (translation applied)."""
        m = self._matrix
        return Vec2(
            float(m[0, 0] * point.x + m[0, 1] * point.y + m[0, 2]),
            float(m[1, 0] * point.x + m[1, 1] * point.y + m[1, 2]),
        )

    def times_direction(self, vector: Vec2) -> Vec2:
        """Transform a direction vector (translation ignored)."""
        m = self._matrix
        return Vec2(float(m[0, 0] * vector.x + m[0, 1] * vector.y), float(m[1, 0] * vector.x + m[1, 1] * vector.y))

    def transform_normal(self, normal: Vec2) -> Vec2:
        """Transform a normal vector with the inverse transpose, result normalized."""
        inv_t = np.linalg.inv(self._matrix[:2, :2]).T
        result = inv_t @ normal.to_array()
        return Vec2(float(result[0]), float(result[1])).normalized()

    @property
    def determinant(self) -> float:
        """float: Determinant of the linear part."""
        m = self._matrix
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])

    @property
    def scale_vector(self) -> Vec2:
        """Vec2: Lengths of the transformed x and y unit vectors."""
        m = self._matrix
        return Vec2(float(math.hypot(m[0, 0], m[1, 0])), float(math.hypot(m[0, 1], m[1, 1])))

    def is_similarity(self, epsilon: float = 1e-12) -> bool:
        """
        True if the linear part only rotates, reflects and scales uniformly,
        so circles stay circles.

        Args:
            epsilon (float): tolerance relative to the largest matrix entry
        """
        m = self._matrix
        a, b, c, d = m[0, 0], m[0, 1], m[1, 0], m[1, 1]
        tolerance = epsilon * max(abs(a), abs(b), abs(c), abs(d), 1.0)
        rotating = abs(a - d) <= tolerance and abs(b + c) <= tolerance
        reflecting = abs(a + d) <= tolerance and abs(b - c) <= tolerance
        return bool(rotating or reflecting)

    def inverted(self) -> Affine:
        """The inverse transformation."""
        return Affine(np.linalg.inv(self._matrix))

    def __repr__(self):
        return f"Affine({self.to_trafo()})"


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def transform_point(
        affine_trafo: Sequence[Union[int, float]], point: Sequence[Union[int, float]]
    ) -> Tuple[float, float]:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]
        See also shapely - Affine Transformations

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Tuple/List[float]): 2D point - (x, y)

        Returns:
            Tuple[float, float]: the transformed point
        """
        x_new = float(affine_trafo[0] * point[0] + affine_trafo[1] * point[1] + affine_trafo[4])
        y_new = float(affine_trafo[2] * point[0] + affine_trafo[3] * point[1] + affine_trafo[5])
        return (x_new, y_new)

    @staticmethod
    def clamp(value: float, minimum: float, maximum: float) -> float:
        """Restrict _value_ to [minimum, maximum]."""
        if value < minimum:
            return minimum
        if value > maximum:
            return maximum
        return value

    @staticmethod
    def linear(a1: float, a2: float, b1: float, b2: float, a3: float) -> float:
        """Evaluate at _a3_ the linear map f with f(a1) = b1 and f(a2) = b2."""
        return (b2 - b1) / (a2 - a1) * (a3 - a1) + b1

    @staticmethod
    def modulo_between_down(value: float, minimum: float, maximum: float) -> float:
        """
        Map _value_ into [minimum, maximum) modulo (maximum - minimum).

        If the value is equal to minimum or maximum, minimum is returned.
        """
        assert maximum > minimum, "maximum > minimum required for modulo_between_down"
        divisor = maximum - minimum
        partial = math.fmod(value - minimum, divisor)
        if partial < 0:
            partial += divisor
        return partial + minimum

    @staticmethod
    def modulo_between_up(value: float, minimum: float, maximum: float) -> float:
        """
        Map _value_ into (minimum, maximum] modulo (maximum - minimum).

        If the value is equal to minimum or maximum, maximum is returned.
        """
        return -GeomMath.modulo_between_down(-value, -maximum, -minimum)

    @staticmethod
    def cube_root(x: float) -> float:
        """The unique real cube root of _x_."""
        return float(np.cbrt(x))

    @staticmethod
    def real_polynomial_roots(
        coefficients: Sequence[float], imaginary_epsilon: float = ROOT_IMAGINARY_EPSILON
    ) -> List[float]:
        """
        Real roots of the polynomial with _coefficients_, highest power first.

        np.roots finds all complex roots, those with an imaginary part below
        _imaginary_epsilon_ (relative to the magnitude, for larger roots) are
        taken as real. Repeated roots are returned once per multiplicity.
        """
        roots = np.roots(np.asarray(coefficients, dtype=np.float64))
        return [float(root.real) for root in roots if abs(root.imag) <= imaginary_epsilon * max(1.0, abs(root))]

    @staticmethod
    def solve_linear_roots_real(a: float, b: float) -> Optional[List[float]]:
        """
        Real roots of a*x + b = 0.

        Returns:
            Optional[List[float]]: the roots, or None if every value is a root
        """
        if a == 0:
            return None if b == 0 else []
        return [-b / a]

    @staticmethod
    def solve_quadratic_roots_real(
        a: float, b: float, c: float, imaginary_epsilon: float = ROOT_IMAGINARY_EPSILON
    ) -> Optional[List[float]]:
        """
        Real roots of a*x^2 + b*x + c = 0.

        A leading coefficient that is several orders of magnitude below the others
        degrades the equation to a linear one. A double root is returned twice.

        Returns:
            Optional[List[float]]: the roots, or None if every value is a root
        """
        ratio = ROOT_SOLVER_DEGENERACY_RATIO
        if a == 0 or abs(b / a) > ratio or abs(c / a) > ratio:
            return GeomMath.solve_linear_roots_real(b, c)
        return GeomMath.real_polynomial_roots((a, b, c), imaginary_epsilon)

    @staticmethod
    def solve_cubic_roots_real(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        a: float,
        b: float,
        c: float,
        d: float,
        imaginary_epsilon: float = ROOT_IMAGINARY_EPSILON,
    ) -> Optional[List[float]]:
        """
        Real roots of a*x^3 + b*x^2 + c*x + d = 0.

        Args:
            a, b, c, d (float): coefficients
            imaginary_epsilon (float): largest imaginary part of a root still taken as real,
                separates a double real root from a complex pair

        Returns:
            Optional[List[float]]: the roots (repeated by multiplicity), or None if every value is a root
        """
        ratio = ROOT_SOLVER_DEGENERACY_RATIO
        if a == 0 or abs(b / a) > ratio or abs(c / a) > ratio or abs(d / a) > ratio:
            return GeomMath.solve_quadratic_roots_real(b, c, d, imaginary_epsilon)

        if d == 0 or abs(a / d) > ratio or abs(b / d) > ratio or abs(c / d) > ratio:
            quadratic_roots = GeomMath.solve_quadratic_roots_real(a, b, c, imaginary_epsilon)
            return [0.0] + (quadratic_roots or [])

        return GeomMath.real_polynomial_roots((a, b, c, d), imaginary_epsilon)

    @staticmethod
    def line_line_intersection(p1: Vec2, p2: Vec2, p3: Vec2, p4: Vec2) -> Optional[Vec2]:
        """
        Intersection of the infinite line through p1/p2 with the one through p3/p4.

        Returns:
            Optional[Vec2]: the intersection, None for parallel lines or undefined lines
        """
        epsilon = 1e-10
        if p1.equals_epsilon(p2, epsilon) or p3.equals_epsilon(p4, epsilon):
            return None

        x12 = p1.x - p2.x
        x34 = p3.x - p4.x
        y12 = p1.y - p2.y
        y34 = p3.y - p4.y
        denom = x12 * y34 - y12 * x34
        if abs(denom) < epsilon:
            return None

        a = p1.x * p2.y - p1.y * p2.x
        b = p3.x * p4.y - p3.y * p4.x
        return Vec2((a * x34 - x12 * b) / denom, (a * y34 - y12 * b) / denom)

    @staticmethod
    def line_segment_intersection(p1: Vec2, p2: Vec2, p3: Vec2, p4: Vec2) -> Optional[Vec2]:
        """
        Intersection point of the line segments p1-p2 and p3-p4.

        Shared endpoints are returned exactly.

        Returns:
            Optional[Vec2]: the intersection, None if the segments do not cross or are parallel
        """

        def ccw(a: Vec2, b: Vec2, c: Vec2) -> float:
            return (c.y - a.y) * (b.x - a.x) - (b.y - a.y) * (c.x - a.x)

        if ccw(p1, p3, p4) * ccw(p2, p3, p4) > 0 or ccw(p3, p1, p2) * ccw(p4, p1, p2) > 0:
            return None

        denom = (p1.x - p2.x) * (p3.y - p4.y) - (p1.y - p2.y) * (p3.x - p4.x)
        if abs(denom) < 1e-10:
            return None

        if p1 in (p3, p4):
            return p1
        if p2 in (p3, p4):
            return p2

        det12 = p1.x * p2.y - p1.y * p2.x
        det34 = p3.x * p4.y - p3.y * p4.x
        return Vec2(
            (det12 * (p3.x - p4.x) - (p1.x - p2.x) * det34) / denom,
            (det12 * (p3.y - p4.y) - (p1.y - p2.y) * det34) / denom,
        )

    @staticmethod
    def circle_center_from_points(p1: Vec2, p2: Vec2, p3: Vec2) -> Optional[Vec2]:
        """Center of the circle through three points, None if they are collinear."""
        p12 = p1.average(p2)
        p23 = p2.average(p3)
        p12x = Vec2(p12.x + (p2.y - p1.y), p12.y - (p2.x - p1.x))
        p23x = Vec2(p23.x + (p3.y - p2.y), p23.y - (p3.x - p2.x))
        return GeomMath.line_line_intersection(p12, p12x, p23, p23x)

    @staticmethod
    def triangle_area_signed(a: Vec2, b: Vec2, c: Vec2) -> float:
        """Twice the signed area of the triangle, positive for counterclockwise vertices."""
        return a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y)

    @staticmethod
    def triangle_area(a: Vec2, b: Vec2, c: Vec2) -> float:
        """Unsigned counterpart of triangle_area_signed."""
        return abs(GeomMath.triangle_area_signed(a, b, c))

    @staticmethod
    def are_points_collinear(a: Vec2, b: Vec2, c: Vec2, epsilon: float = 0.0) -> bool:
        """True if the three points are collinear within _epsilon_."""
        return GeomMath.triangle_area(a, b, c) <= epsilon

    @staticmethod
    def dist_to_segment_squared(point: Vec2, a: Vec2, b: Vec2) -> float:
        """Squared distance from _point_ to the line segment a-b."""
        segment_squared_length = a.distance_squared(b)
        if segment_squared_length == 0:
            return point.distance_squared(a)

        t = ((point.x - a.x) * (b.x - a.x) + (point.y - a.y) * (b.y - a.y)) / segment_squared_length
        if t < 0:
            return point.distance_squared(a)
        if t > 1:
            return point.distance_squared(b)
        return point.distance_squared(a.blend(b, t))

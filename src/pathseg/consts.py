"""Central module containing constants and default tolerances for segment geometry"""

from __future__ import annotations

import math

###############################################################################
# Angles
###############################################################################

TWO_PI: float = 2.0 * math.pi

# Angles where x or y of a circle reach an extremum
CARDINAL_ANGLES: tuple = (0.0, math.pi / 2.0, math.pi, 3.0 * math.pi / 2.0)


###############################################################################
# Tolerances
###############################################################################

# Maximum center distance and radius difference for two arcs to be considered on the same circle
ARC_OVERLAP_EPSILON: float = 1e-4

# Maximum deviation of the difference curve for two Bezier segments to be considered overlapping
OVERLAP_EPSILON: float = 1e-6

# Point matching tolerance used when intersecting segments
INTERSECTION_EPSILON: float = 1e-7

# Snapping tolerance for angles near the start/end of an arc
ANGLE_EPSILON: float = 1e-8

# Parameter values within this distance of 0 or 1 count as endpoints
ROOT_BOUNDARY_EPSILON: float = 1e-10

# Maximum tangent magnitude at a cusp
CUSP_EPSILON: float = 1e-7

# Parameter distance to 0 or 1 where the closed-form endpoint curvature is used
CURVATURE_ENDPOINT_EPSILON: float = 1e-7

# Arcs sweeping more than 2*pi minus this value are written as two SVG arc commands
FULL_CIRCLE_SVG_EPSILON: float = 0.01

# Hits this close to the ends of a monotone piece are not self intersections
SELF_INTERSECTION_EPSILON: float = 1e-7

# Maximum control point distance for degree reduction of Bezier segments
REDUCTION_EPSILON: float = 1e-9

# Minimum distance along a ray for a hit to count
RAY_EPSILON: float = 1e-8

# Squared parameter distance below which two bounds intersection candidates are merged
BOUNDS_INTERSECTION_GROUP_EPSILON: float = 1e-13

# Number of halving rounds of the bounds intersection refinement
BOUNDS_INTERSECTION_ITERATIONS: int = 50

# Leading coefficients this many orders below the others degrade a polynomial
ROOT_SOLVER_DEGENERACY_RATIO: float = 1e7

# Largest imaginary part of a polynomial root that still counts as real
ROOT_IMAGINARY_EPSILON: float = 1e-7

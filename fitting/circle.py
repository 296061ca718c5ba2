"""Circle fitting: circumcenter, triplet averaging, Kasa least squares, geometric refinement.

Points are (x, y) / (E, N) pairs. Degenerate input yields None, never NaN.
"""
import logging
import math
from itertools import combinations
from typing import NamedTuple

import numpy as np
from scipy.optimize import least_squares

from shared.types import Point, Circle2D, FitStats
from shared.linalg import solve_linear
from shared.constants import COLLINEAR_EPS, PIVOT_EPS, MAX_TRIPLET_POINTS

logger = logging.getLogger(__name__)

METHOD_TRIPLET = "3-point-average"
METHOD_LSQ = "least-squares"

# ============================================================
# Three-Point Circle
# ============================================================
def circumcenter(p1: Point, p2: Point, p3: Point,
                 eps: float = COLLINEAR_EPS) -> Circle2D | None:
    """Circle through three points via perpendicular bisectors. None if collinear.

    Works relative to p1. The determinant test is |d| < eps for unit-sized
    triangles and scales with |p2-p1|*|p3-p1| beyond that, so survey-sized
    coordinates do not turn rounding noise into a huge circle.
    """
    bx, by = p2[0]-p1[0], p2[1]-p1[1]
    cx, cy = p3[0]-p1[0], p3[1]-p1[1]
    d = 2*(bx*cy - by*cx)
    if abs(d) < eps*max(1.0, math.hypot(bx, by)*math.hypot(cx, cy)):
        return None
    b2 = bx*bx + by*by; c2 = cx*cx + cy*cy
    ux = (cy*b2 - by*c2)/d
    uy = (bx*c2 - cx*b2)/d
    return Circle2D(p1[0]+ux, p1[1]+uy, math.hypot(ux, uy))

class TripletCircle(NamedTuple):
    idxs: tuple[int, int, int]
    circle: Circle2D
    stats: FitStats

def _valid_triplets(points, eps):
    if len(points) > MAX_TRIPLET_POINTS:
        logger.warning("Triplet enumeration over %d points (%d triples)",
                       len(points), math.comb(len(points), 3))
    for idxs in combinations(range(len(points)), 3):
        c = circumcenter(points[idxs[0]], points[idxs[1]], points[idxs[2]], eps)
        if c is not None:
            yield idxs, c

def triplet_circles(points: list[Point], eps: float = COLLINEAR_EPS) -> list[TripletCircle]:
    """Every non-degenerate three-point circle, scored against all points."""
    return [TripletCircle(idxs, c, statistics(c, points))
            for idxs, c in _valid_triplets(points, eps)]

def triplet_average(points: list[Point], eps: float = COLLINEAR_EPS) -> Circle2D | None:
    """Arithmetic mean of centers and radii over all C(n,3) valid triples.

    Exhaustive O(n^3); collinear triples are skipped. None when no triple
    is valid (fewer than 3 points or all collinear).
    """
    sx = sy = sr = 0.0; k = 0
    for _, c in _valid_triplets(points, eps):
        sx += c.cx; sy += c.cy; sr += c.r; k += 1
    if k == 0:
        logger.debug("No valid triple among %d points", len(points))
        return None
    return Circle2D(sx/k, sy/k, sr/k)

def median_radius(center: Point, points: list[Point]) -> float:
    """Median distance from *center* to the points (upper median for even n)."""
    if not points:
        return math.nan
    radii = sorted(math.hypot(p[0]-center[0], p[1]-center[1]) for p in points)
    return radii[len(radii)//2]

# ============================================================
# Algebraic Least Squares (Kasa)
# ============================================================
def least_squares_fit(points: list[Point], eps: float = PIVOT_EPS) -> Circle2D | None:
    """Kasa fit of x^2 + y^2 + A x + B y + C = 0 from the 3x3 normal equations.

    Coordinates are reduced to their centroid and divided by their RMS
    spread first, so the pivot tolerance means the same thing at any
    coordinate size; the circle is scaled back afterwards.
    None when the normal matrix is singular or the radius is imaginary.
    """
    n = len(points)
    if n < 3:
        return None
    x0 = sum(p[0] for p in points)/n; y0 = sum(p[1] for p in points)/n
    s = math.sqrt(sum((p[0]-x0)**2 + (p[1]-y0)**2 for p in points)/n)
    if not s > 0:
        return None
    Sx = Sy = Sxx = Syy = Sxy = Sxz = Syz = Sz = 0.0
    for p in points:
        x = (p[0]-x0)/s; y = (p[1]-y0)/s; z = x*x+y*y
        Sx += x; Sy += y; Sxx += x*x; Syy += y*y; Sxy += x*y
        Sxz += x*z; Syz += y*z; Sz += z
    M = [[Sxx, Sxy, Sx], [Sxy, Syy, Sy], [Sx, Sy, n]]
    sol = solve_linear(M, [-Sxz, -Syz, -Sz], eps)
    if sol is None:
        return None
    A, B, C = sol
    ucx, ucy = -A/2, -B/2
    r2 = ucx*ucx + ucy*ucy - C
    if not math.isfinite(r2) or r2 < 0:
        logger.debug("Kasa fit rejected: r^2=%r", r2)
        return None
    return Circle2D(x0 + s*ucx, y0 + s*ucy, s*math.sqrt(r2))

# ============================================================
# Geometric Refinement
# ============================================================
def refine_geometric(points: list[Point], initial: Circle2D | None = None) -> Circle2D | None:
    """Orthogonal-distance circle fit, minimising sum (|p - c| - r)^2.

    Levenberg-Marquardt from *initial* (default: the Kasa circle).
    """
    if len(points) < 3:
        return None
    if initial is None:
        initial = least_squares_fit(points)
        if initial is None:
            return None
    P = np.array([(p[0], p[1]) for p in points], dtype=float)

    def residuals(x):
        return np.hypot(P[:, 0]-x[0], P[:, 1]-x[1]) - x[2]

    result = least_squares(residuals, np.array(initial, dtype=float), method="lm")
    if not result.success or not np.all(np.isfinite(result.x)):
        logger.debug("Geometric refinement failed: %s", result.message)
        return None
    cx, cy, r = (float(v) for v in result.x)
    return Circle2D(cx, cy, abs(r))

# ============================================================
# Statistics and Selection
# ============================================================
def statistics(circle: Circle2D, points: list[Point]) -> FitStats:
    """RMSE and mean absolute value of radial residuals |p - c| - r."""
    if not points:
        return FitStats(0.0, 0.0)
    d = [math.hypot(p[0]-circle.cx, p[1]-circle.cy) - circle.r for p in points]
    rmse = math.sqrt(sum(v*v for v in d)/len(d))
    return FitStats(rmse, sum(abs(v) for v in d)/len(d))

class BestFit(NamedTuple):
    method: str
    circle: Circle2D
    stats: FitStats

def choose_best(avg: Circle2D | None, ls: Circle2D | None,
                points: list[Point]) -> BestFit | None:
    """Lower RMSE wins; a tie goes to the triplet average."""
    avg_stats = statistics(avg, points) if avg is not None else None
    ls_stats = statistics(ls, points) if ls is not None else None
    if avg_stats is not None and ls_stats is not None:
        if avg_stats.rmse <= ls_stats.rmse:
            return BestFit(METHOD_TRIPLET, avg, avg_stats)
        return BestFit(METHOD_LSQ, ls, ls_stats)
    if ls_stats is not None:
        return BestFit(METHOD_LSQ, ls, ls_stats)
    if avg_stats is not None:
        return BestFit(METHOD_TRIPLET, avg, avg_stats)
    return None

class CircleFitResult(NamedTuple):
    average: Circle2D | None
    average_stats: FitStats | None
    lsq: Circle2D | None
    lsq_stats: FitStats | None
    best: BestFit | None

def fit_circle(points: list[Point], eps: float = COLLINEAR_EPS) -> CircleFitResult:
    """Run both fits and pick the better one."""
    avg = triplet_average(points, eps)
    ls = least_squares_fit(points)
    return CircleFitResult(
        avg, statistics(avg, points) if avg is not None else None,
        ls, statistics(ls, points) if ls is not None else None,
        choose_best(avg, ls, points),
    )

"""Survey geometry helpers: bearings, ENH ties, and result formatting."""
import math
from typing import NamedTuple

from .types import Point, ENH

# ============================================================
# Error Type
# ============================================================
class GeometryError(ValueError):
    """Raised for impossible or contradictory geometry inputs."""

# ============================================================
# Scalar Helpers
# ============================================================
def known(x) -> bool:
    """True for a finite number; None and NaN mean 'unknown'."""
    return x is not None and math.isfinite(x)

def height_of(p) -> float:
    """H of an (E, N[, H]) record, NaN when absent."""
    if len(p) < 3 or p[2] is None:
        return math.nan
    return float(p[2])

# ============================================================
# Bearings and Ties
# ============================================================
def brg_dist(p1: Point, p2: Point) -> tuple[float, float]:
    """Bearing (degrees clockwise from North) and distance between two E/N points."""
    dE = p2[0]-p1[0]; dN = p2[1]-p1[1]
    d = math.hypot(dE, dN)
    b = math.degrees(math.atan2(dE, dN)) % 360
    return b, d

class EnhTie(NamedTuple):
    dE: float; dN: float; dH: float
    d2d: float; d3d: float
    bearing: float

def enh_tie(a, b) -> EnhTie:
    """Coordinate differences B - A with plan and slope distance.

    Heights are optional; a missing height on either end leaves dH and
    d3d as NaN while the plan values are still reported.
    """
    dE = b[0]-a[0]; dN = b[1]-a[1]
    dH = height_of(b) - height_of(a)
    brg, d2d = brg_dist((a[0], a[1]), (b[0], b[1]))
    if d2d == 0:
        brg = math.nan
    d3d = math.hypot(d2d, dH) if known(dH) else math.nan
    return EnhTie(dE, dN, dH, d2d, d3d, brg)

def enh_difference(a: ENH, b: ENH) -> ENH:
    """Component-wise A - B (the ENH difference calculator)."""
    return ENH(a.E-b.E, a.N-b.N, a.H-b.H)

# ============================================================
# Formatting Helpers
# ============================================================
def fmt_brg(b: float) -> str:
    """Format bearing in degrees to DMS string, e.g. '257° 53' 45.0\"'."""
    if not known(b):
        return ""
    d = int(b); m = int((b-d)*60); sc = (b-d-m/60)*3600
    return f"{d:d}° {m:02d}' {sc:04.1f}\""

def fmt_num(x, n: int = 3) -> str:
    """Fixed-decimal string; unknown values render blank."""
    if x is None or not known(x):
        return ""
    s = f"{x:.{n}f}"
    return s.lstrip("-") if float(s) == 0 else s

"""Circular arc from any two of radius, central angle and chord."""
import math
from typing import NamedTuple

from shared.geometry import GeometryError, known

class ArcSolution(NamedTuple):
    r: float          # radius
    b: float          # central angle, degrees
    d: float          # chord
    arc: float        # arc length
    sector: float     # sector area
    segment: float    # segment area (sector minus triangle)

def solve_arc(radius: float | None = None, angle_deg: float | None = None,
              chord: float | None = None) -> ArcSolution | None:
    """Solve the arc; None until at least two values are known.

    Raises GeometryError for values outside the arc's domain
    (chord longer than the diameter, zero angle, and so on).
    """
    r, b, d = radius, angle_deg, chord
    has_r, has_b, has_d = known(r), known(b), known(d)
    if has_r + has_b + has_d < 2:
        return None

    if has_r and has_b:
        d = 2*r*math.sin(math.radians(b)/2)
    elif has_r and has_d:
        if d < 0 or d > 2*r:
            raise GeometryError("Chord must be <= 2R")
        b = math.degrees(2*math.asin(d/(2*r)))
    else:
        s = math.sin(math.radians(b)/2)
        if s == 0:
            raise GeometryError("Angle must be > 0")
        r = d/(2*s)

    if not r > 0:
        raise GeometryError("R must be > 0")
    if not 0 < b <= 360:
        raise GeometryError("B must be within (0, 360]")
    if not 0 < d <= 2*r*(1 + 1e-12):
        raise GeometryError("D must be within (0, 2R]")

    th = math.radians(b)
    sector = 0.5*r*r*th
    return ArcSolution(r, b, d, r*th, sector, sector - 0.5*r*r*math.sin(th))

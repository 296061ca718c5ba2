"""Axis projection: flange-on-axis (t, r, theta) and baseline chainage/offset."""
import logging
import math
from typing import NamedTuple

import numpy as np

from shared.types import AxisFrame, Vector3
from shared.linalg import vec3, norm3, unit3, ref_axis
from shared.geometry import known, height_of
from shared.constants import REF_AXIS_SWITCH, AXIS_MIN_LENGTH, ON_LINE_TOL

logger = logging.getLogger(__name__)

# ============================================================
# 3D Axis Frame
# ============================================================
def axis_length(a, b) -> float:
    return norm3(vec3(b) - vec3(a))

def build_axis_frame(a, b) -> AxisFrame:
    """Orthonormal frame with u along A->B.

    Coincident A and B give a zero u (and degenerate v, w); check
    axis_length() against AXIS_MIN_LENGTH first.
    """
    origin = vec3(a)
    u = unit3(vec3(b) - origin)
    v = unit3(np.cross(u, ref_axis(u, REF_AXIS_SWITCH)))
    w = unit3(np.cross(u, v))
    return AxisFrame(origin, u, v, w)

class AxisProjection(NamedTuple):
    t: float          # along the axis from A
    r: float          # radial distance from the axis
    theta: float      # degrees in [0, 360), from v towards w
    foot: Vector3     # projection of the point on the axis

def project_along_axis(frame: AxisFrame, p) -> AxisProjection:
    d = vec3(p) - frame.origin
    t = float(d @ frame.u)
    du = t*frame.u
    rvec = d - du
    r = norm3(rvec)
    theta = math.degrees(math.atan2(float(rvec @ frame.w), float(rvec @ frame.v)))
    if theta < 0:
        theta += 360.0
    if theta >= 360.0:
        theta -= 360.0
    return AxisProjection(t, r, theta, frame.origin + du)

def project_points(frame: AxisFrame, points) -> list[AxisProjection]:
    return [project_along_axis(frame, p) for p in points]

class FlangeSummary(NamedTuple):
    r_avg: float
    r_rms: float      # spread of radii about r_avg
    t_min: float
    t_max: float
    count: int

def flange_summary(projections: list[AxisProjection]) -> FlangeSummary | None:
    if not projections:
        return None
    radii = [p.r for p in projections]
    r_avg = sum(radii)/len(radii)
    r_rms = math.sqrt(sum((r-r_avg)**2 for r in radii)/len(radii))
    ts = [p.t for p in projections]
    return FlangeSummary(r_avg, r_rms, min(ts), max(ts), len(projections))

# ============================================================
# 2D Baseline Chainage / Offset
# ============================================================
SIDE_LEFT, SIDE_RIGHT, SIDE_ON = "L", "R", "0"

class ChainageOffset(NamedTuple):
    t: float          # chainage along A->B
    offset: float     # signed: + left, - right
    side: str | None
    h_line: float     # baseline height at the chainage (NaN unless A.H and B.H)
    dH: float         # P.H - h_line (NaN unless all three heights)

_UNDEFINED = ChainageOffset(math.nan, math.nan, None, math.nan, math.nan)

def chainage_offset(a, b, p, min_length: float = AXIS_MIN_LENGTH) -> ChainageOffset:
    """Chainage and signed offset of P from baseline A->B in plan.

    Points are (E, N) or (E, N, H). A baseline shorter than *min_length*
    makes every output undefined.
    """
    dx = b[0]-a[0]; dy = b[1]-a[1]
    length = math.hypot(dx, dy)
    if length < min_length:
        logger.debug("Degenerate baseline: length=%.3e", length)
        return _UNDEFINED
    ux, uy = dx/length, dy/length
    pE = p[0]-a[0]; pN = p[1]-a[1]
    t = pE*ux + pN*uy
    offset = ux*pN - uy*pE
    if abs(offset) <= ON_LINE_TOL:
        side = SIDE_ON
    else:
        side = SIDE_LEFT if offset > 0 else SIDE_RIGHT

    hA, hB, hP = height_of(a), height_of(b), height_of(p)
    h_line = hA + (t/length)*(hB-hA) if known(hA) and known(hB) else math.nan
    dH = hP - h_line if known(hP) and known(h_line) else math.nan
    return ChainageOffset(t, offset, side, h_line, dH)

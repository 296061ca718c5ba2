"""Pipe-end fitting: PCA plane, in-plane Kasa circle, 3D center and pipe slope."""
import logging
import math
from typing import NamedTuple

import numpy as np

from shared.types import ENH, PlaneFrame, Vector3
from shared.linalg import vec3, unit3, ref_axis, eigen_sym3, min_eigen_index
from shared.constants import REF_AXIS_SWITCH
from .circle import least_squares_fit

logger = logging.getLogger(__name__)

# ============================================================
# Plane Fit
# ============================================================
def fit_plane_pca(points: list[ENH]) -> PlaneFrame | None:
    """Least-squares plane through a 3D point cloud.

    Normal is the covariance eigenvector of smallest eigenvalue; U and V
    complete a right-handed in-plane basis. None for fewer than 3 points.
    """
    n = len(points)
    if n < 3:
        return None
    P = np.array([vec3(p) for p in points])
    C = P.mean(axis=0)
    D = P - C
    cov = D.T @ D
    vals, vecs = eigen_sym3(cov)
    k = min_eigen_index(vals)
    nrm = unit3(vecs[:, k])
    U = unit3(np.cross(nrm, ref_axis(nrm, REF_AXIS_SWITCH)))
    V = unit3(np.cross(nrm, U))
    return PlaneFrame(C, nrm, U, V)

def project_to_plane(frame: PlaneFrame, p) -> tuple[float, float]:
    """In-plane (u, v) coordinates of p relative to the plane point C."""
    d = vec3(p) - frame.C
    return float(d @ frame.U), float(d @ frame.V)

def plane_to_world(frame: PlaneFrame, u: float, v: float) -> ENH:
    c = frame.C + u*frame.U + v*frame.V
    return ENH(float(c[0]), float(c[1]), float(c[2]))

# ============================================================
# Pipe End
# ============================================================
class EndFit(NamedTuple):
    center: ENH
    R: float
    rms: float
    plane_normal: Vector3

def fit_end(points: list[ENH]) -> EndFit | None:
    """Center and radius of a pipe end from points around its rim."""
    if len(points) < 3:
        return None
    plane = fit_plane_pca(points)
    if plane is None:
        return None
    uv = [project_to_plane(plane, p) for p in points]
    circ = least_squares_fit(uv)
    if circ is None or not circ.r > 0:
        logger.debug("Pipe end fit failed on %d points", len(points))
        return None
    sse = sum((math.hypot(u-circ.cx, v-circ.cy) - circ.r)**2 for u, v in uv)
    return EndFit(plane_to_world(plane, circ.cx, circ.cy), circ.r,
                  math.sqrt(sse/len(uv)), plane.n)

class PipeAxis(NamedTuple):
    dE: float; dN: float; dH: float
    horiz: float
    length: float
    slope_deg: float
    direction: tuple[float, float, float]

def slope_between(a: ENH, b: ENH) -> PipeAxis:
    """Straight run from a to b. Slope is positive uphill.

    A vertical run gives +/-90 (0 for coincident points); a zero-length
    run has NaN direction.
    """
    dE = b[0]-a[0]; dN = b[1]-a[1]; dH = b[2]-a[2]
    horiz = math.hypot(dE, dN); length = math.hypot(horiz, dH)
    if horiz > 0:
        slope = math.degrees(math.atan2(dH, horiz))
    else:
        slope = 90.0 if dH > 0 else (-90.0 if dH < 0 else 0.0)
    if length > 0:
        direction = (dE/length, dN/length, dH/length)
    else:
        direction = (math.nan, math.nan, math.nan)
    return PipeAxis(dE, dN, dH, horiz, length, slope, direction)

def axis_and_slope(fit_a: EndFit, fit_b: EndFit) -> PipeAxis:
    """Centerline between two fitted pipe ends."""
    return slope_between(fit_a.center, fit_b.center)

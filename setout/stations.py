"""Joining total-station setups and re-expressing them on a reference line.

Station point sets are ``{name: ENH}`` dicts; insertion order is kept.
"""
import logging
import math
from typing import NamedTuple

from shared.types import ENH
from shared.constants import MERGE_TOL, MIN_COMMON_POINTS, REF_LINE_MIN_LENGTH

logger = logging.getLogger(__name__)

# ============================================================
# 2D Similarity
# ============================================================
class Similarity2D(NamedTuple):
    """E' = s(cos E - sin N) + tx,  N' = s(sin E + cos N) + ty."""
    scale: float; cos: float; sin: float
    tx: float; ty: float

def fit_similarity_2d(base: list, move: list) -> Similarity2D | None:
    """Closed-form least-squares scale, rotation and shift taking *move* onto *base*."""
    n = min(len(base), len(move))
    if n < 2:
        return None
    cBx = sum(p[0] for p in base[:n])/n; cBy = sum(p[1] for p in base[:n])/n
    cMx = sum(p[0] for p in move[:n])/n; cMy = sum(p[1] for p in move[:n])/n
    Sxx = Sxy = normM = 0.0
    for bp, mp in zip(base[:n], move[:n]):
        bx = bp[0]-cBx; by = bp[1]-cBy
        mx = mp[0]-cMx; my = mp[1]-cMy
        Sxx += mx*bx + my*by        # dot
        Sxy += mx*by - my*bx        # cross
        normM += mx*mx + my*my
    if normM == 0:
        logger.debug("Similarity fit: coincident source points")
        return None
    r = math.hypot(Sxx, Sxy)
    if r == 0:
        return None
    scale = r/normM
    c, s = Sxx/r, Sxy/r
    tx = cBx - scale*(c*cMx - s*cMy)
    ty = cBy - scale*(s*cMx + c*cMy)
    return Similarity2D(scale, c, s, tx, ty)

def apply_similarity_2d(tr: Similarity2D, p) -> tuple[float, float]:
    return (tr.scale*(tr.cos*p[0] - tr.sin*p[1]) + tr.tx,
            tr.scale*(tr.sin*p[0] + tr.cos*p[1]) + tr.ty)

# ============================================================
# Station Merge
# ============================================================
class MergeResult(NamedTuple):
    merged: dict[str, ENH]
    transform: Similarity2D | None   # None when nothing was shared
    dH: float                        # mean height shift applied to *move*
    common: list[str]
    exceed_count: int                # common points misfitting by more than tol
    max_dev: float                   # largest 3D misfit on common points

def merge_stations(base: dict[str, ENH], move: dict[str, ENH],
                   tol: float = MERGE_TOL) -> MergeResult | None:
    """Bring *move* onto *base* through their shared point names.

    No shared names: plain concatenation. One shared name: None (a
    best fit needs two). Otherwise EN similarity plus mean H shift; base
    coordinates win for shared names.
    """
    common = [k for k in base if k in move]
    if not common:
        merged = dict(base)
        for k, p in move.items():
            merged.setdefault(k, p)
        return MergeResult(merged, None, 0.0, [], 0, 0.0)
    if len(common) < MIN_COMMON_POINTS:
        logger.debug("Merge needs >= %d common points, got %d", MIN_COMMON_POINTS, len(common))
        return None

    tr = fit_similarity_2d([base[k] for k in common], [move[k] for k in common])
    if tr is None:
        return None
    dH = sum(base[k].H - move[k].H for k in common)/len(common)

    def transform(p: ENH) -> ENH:
        e, n = apply_similarity_2d(tr, p)
        return ENH(e, n, p.H + dH)

    exceed = 0; max_dev = 0.0
    for k in common:
        a = base[k]; bt = transform(move[k])
        d = math.sqrt((bt.E-a.E)**2 + (bt.N-a.N)**2 + (bt.H-a.H)**2)
        if d > tol:
            exceed += 1
        max_dev = max(max_dev, d)

    merged = dict(base)
    for k, p in move.items():
        if k not in base:
            merged[k] = transform(p)
    logger.info("Merged %d points via %d common (max misfit %.4f)",
                len(move) - len(common), len(common), max_dev)
    return MergeResult(merged, tr, dH, common, exceed, max_dev)

# ============================================================
# Reference Line
# ============================================================
def reference_line(points: dict[str, ENH], a_name: str, b_name: str,
                   min_length: float = REF_LINE_MIN_LENGTH) -> dict[str, ENH] | None:
    """Local grid with A at the origin: N along A->B, E across (right +), H from A."""
    A = points.get(a_name); B = points.get(b_name)
    if A is None or B is None:
        return None
    dx = B.E - A.E; dy = B.N - A.N
    length = math.hypot(dx, dy)
    if not math.isfinite(length) or length < min_length:
        logger.debug("Reference points %s/%s too close", a_name, b_name)
        return None
    ux, uy = dx/length, dy/length
    out = {}
    for k, p in points.items():
        vx = p.E - A.E; vy = p.N - A.N
        out[k] = ENH(vx*uy - vy*ux, vx*ux + vy*uy, p.H - A.H)
    return out

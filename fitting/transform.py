"""Point-set registration: Horn quaternion rigid/similarity fit and exact 4-point affine."""
import logging
import math

import numpy as np

from shared.types import RigidTransform, AffineTransform
from shared.linalg import vec3, solve_linear
from shared.constants import HORN_POWER_ITERS, PIVOT_EPS

logger = logging.getLogger(__name__)

# ============================================================
# Quaternion Helpers
# ============================================================
def horn_matrix(S: np.ndarray) -> np.ndarray:
    """Horn's symmetric 4x4 key matrix from the cross-covariance S = sum y x^T."""
    Sxx, Sxy, Sxz = S[0]; Syx, Syy, Syz = S[1]; Szx, Szy, Szz = S[2]
    return np.array([
        [Sxx+Syy+Szz, Syz-Szy,      Szx-Sxz,      Sxy-Syx],
        [Syz-Szy,     Sxx-Syy-Szz,  Sxy+Syx,      Szx+Sxz],
        [Szx-Sxz,     Sxy+Syx,      -Sxx+Syy-Szz, Syz+Szy],
        [Sxy-Syx,     Szx+Sxz,      Syz+Szy,      -Sxx-Syy+Szz],
    ])

def power_iteration(N: np.ndarray, iters: int = HORN_POWER_ITERS) -> np.ndarray:
    """Eigenvector of the largest (signed) eigenvalue of a symmetric N.

    N is shifted by its absolute entry sum, which bounds the spectral
    radius, so every eigenvalue is non-negative and the largest one also
    dominates in magnitude. The shifted matrix is then squared and
    normalised *iters* times; the result is close to q q^T and its
    largest column gives q. No convergence test.
    """
    n = N.shape[0]
    M = N + np.abs(N).sum()*np.eye(n)
    for _ in range(iters):
        M = M @ M
        nm = np.linalg.norm(M)
        if nm == 0:
            break
        M /= nm
    norms = np.linalg.norm(M, axis=0)
    j = int(np.argmax(norms))
    if norms[j] == 0:
        return np.eye(n)[0]
    return M[:, j]/norms[j]

def quat_to_matrix(q) -> np.ndarray:
    """Rotation matrix of quaternion (w, x, y, z); q is normalised first."""
    nq = math.sqrt(float(q @ q)) or 1.0
    w, x, y, z = (float(c)/nq for c in q)
    xx, yy, zz = x*x, y*y, z*z
    xy, xz, yz = x*y, x*z, y*z
    wx, wy, wz = w*x, w*y, w*z
    return np.array([
        [1 - 2*(yy + zz), 2*(xy - wz),     2*(xz + wy)],
        [2*(xy + wz),     1 - 2*(xx + zz), 2*(yz - wx)],
        [2*(xz - wy),     2*(yz + wx),     1 - 2*(xx + yy)],
    ])

# ============================================================
# Rigid / Similarity Fit
# ============================================================
def apply_rigid(tr: RigidTransform, p) -> np.ndarray:
    return tr.s*(tr.R @ vec3(p)) + tr.t

def best_fit_rigid(P, Q, allow_scale: bool = False,
                   iters: int = HORN_POWER_ITERS) -> RigidTransform | None:
    """Least-squares rotation (+ optional scale) and shift taking Q onto P.

    P and Q are matched point lists (target, source); extra points on the
    longer list are ignored. None for fewer than 3 correspondences.
    """
    n = min(len(P), len(Q))
    if n < 3:
        return None
    X = np.array([vec3(p) for p in P[:n]])
    Y = np.array([vec3(q) for q in Q[:n]])
    cP = X.mean(axis=0); cQ = Y.mean(axis=0)
    Xc = X - cP; Yc = Y - cQ

    S = Yc.T @ Xc
    q = power_iteration(horn_matrix(S), iters)
    R = quat_to_matrix(q)

    s = 1.0
    if allow_scale:
        den = float(np.sum(Yc*Yc))
        s = float(np.sum((Yc @ R.T)*Xc))/den if den > 0 else 1.0
    t = cP - s*(R @ cQ)

    mapped = s*(Y @ R.T) + t
    rms = math.sqrt(float(np.sum((X - mapped)**2))/n)
    logger.debug("Horn fit: n=%d scale=%.9f rms=%.6g", n, s, rms)
    return RigidTransform(R, s, t, rms)

# ============================================================
# Exact Affine (4 points)
# ============================================================
def apply_affine(tr: AffineTransform, p) -> np.ndarray:
    return tr.A @ vec3(p) + tr.t

def exact_affine_fit4(src, tgt, eps: float = PIVOT_EPS) -> AffineTransform | None:
    """12-parameter affine map through exactly four correspondences.

    Unknowns are the nine entries of A (row-major) and t. Zero residual
    for consistent input; no averaging. None when the count is not four
    or the control points are degenerate (coplanar sources).
    """
    if len(src) != 4 or len(tgt) != 4:
        logger.debug("Affine fit needs exactly 4 pairs, got %d/%d", len(src), len(tgt))
        return None
    M = np.zeros((12, 12)); b = np.zeros(12)
    row = 0
    for s, g in zip(src, tgt):
        sv = vec3(s); gv = vec3(g)
        for k in range(3):
            M[row, 3*k:3*k+3] = sv
            M[row, 9+k] = 1.0
            b[row] = gv[k]
            row += 1
    x = solve_linear(M, b, eps)
    if x is None:
        return None
    return AffineTransform(x[:9].reshape(3, 3), x[9:].copy())

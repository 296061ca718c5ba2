"""Small dense linear algebra: pivoted elimination and 3x3 Jacobi eigensolver."""
import logging
import math

import numpy as np

from .constants import PIVOT_EPS, JACOBI_MAX_ITERS, JACOBI_OFF_TOL, JACOBI_SKIP_TOL

logger = logging.getLogger(__name__)

# ============================================================
# Vector Helpers
# ============================================================
def vec3(p) -> np.ndarray:
    """(E, N, H) sequence as a float array."""
    return np.array([p[0], p[1], p[2]], dtype=float)

def norm3(a: np.ndarray) -> float:
    return math.sqrt(float(a[0]*a[0] + a[1]*a[1] + a[2]*a[2]))

def unit3(a: np.ndarray) -> np.ndarray:
    """a / |a|. A zero vector is returned unchanged (callers guard length)."""
    n = norm3(a) or 1.0
    return np.asarray(a, dtype=float) / n

def ref_axis(n: np.ndarray, switch: float) -> np.ndarray:
    """Reference axis safely away from n: +Z unless n is near vertical, then +X."""
    return np.array([0.0, 0.0, 1.0]) if abs(n[2]) < switch else np.array([1.0, 0.0, 0.0])

# ============================================================
# Linear Systems
# ============================================================
def solve_linear(A, b, eps: float = PIVOT_EPS) -> np.ndarray | None:
    """Solve A x = b by Gaussian elimination with partial pivoting.

    Works on a copy of the augmented matrix. Returns None when a pivot
    magnitude drops below *eps* (singular within tolerance).
    """
    M = np.array(A, dtype=float)
    n = M.shape[0]
    if M.shape != (n, n):
        raise ValueError(f"Square matrix required, got {M.shape}")
    M = np.hstack([M, np.array(b, dtype=float).reshape(n, 1)])

    for i in range(n):
        p = i + int(np.argmax(np.abs(M[i:, i])))
        if abs(M[p, i]) < eps:
            logger.debug("Singular system: pivot %.3e in column %d", M[p, i], i)
            return None
        if p != i:
            M[[i, p]] = M[[p, i]]
        piv = M[i, i]
        for r in range(i+1, n):
            f = M[r, i]/piv
            M[r, i:] -= f*M[i, i:]

    x = np.zeros(n)
    for i in range(n-1, -1, -1):
        s = M[i, n] - M[i, i+1:n] @ x[i+1:]
        x[i] = s/M[i, i]
    return x

# ============================================================
# Symmetric Eigen (Jacobi)
# ============================================================
def _off_norm(a: np.ndarray) -> float:
    return math.hypot(a[0, 1], a[0, 2], a[1, 2])

def eigen_sym3(M, max_iters: int = JACOBI_MAX_ITERS,
               tol: float = JACOBI_OFF_TOL) -> tuple[np.ndarray, np.ndarray]:
    """Eigen-decomposition of a symmetric 3x3 matrix by Jacobi rotations.

    Each iteration annihilates the largest off-diagonal element. Stops after
    *max_iters* rotations or once the off-diagonal norm is below *tol*, and
    returns whatever approximation was reached: (eigenvalues, eigenvectors)
    with eigenvector k in column k.
    """
    a = np.array(M, dtype=float)
    v = np.eye(3)
    it = 0
    while it < max_iters and _off_norm(a) > tol:
        p, q = 0, 1
        if abs(a[0, 2]) > abs(a[p, q]): p, q = 0, 2
        if abs(a[1, 2]) > abs(a[p, q]): p, q = 1, 2
        app, aqq, apq = a[p, p], a[q, q], a[p, q]
        if abs(apq) < JACOBI_SKIP_TOL:
            break
        phi = 0.5*math.atan2(2*apq, aqq - app)
        c, s = math.cos(phi), math.sin(phi)
        col_p = a[:, p].copy(); col_q = a[:, q].copy()
        a[:, p] = c*col_p - s*col_q; a[:, q] = s*col_p + c*col_q
        row_p = a[p, :].copy(); row_q = a[q, :].copy()
        a[p, :] = c*row_p - s*row_q; a[q, :] = s*row_p + c*row_q
        a[p, q] = a[q, p] = 0.0
        vp = v[:, p].copy(); vq = v[:, q].copy()
        v[:, p] = c*vp - s*vq; v[:, q] = s*vp + c*vq
        it += 1
    return np.array([a[0, 0], a[1, 1], a[2, 2]]), v

def min_eigen_index(vals) -> int:
    """Index of the smallest eigenvalue; ties keep the first encountered."""
    k = 0
    if vals[1] < vals[k]: k = 1
    if vals[2] < vals[k]: k = 2
    return k

"""Shared test fixtures: synthetic circles, pipe ends and transformed point sets."""
import math
import numpy as np
import pytest
from shared.types import ENH


def rotation(axis, angle_deg):
    """Rodrigues rotation matrix about *axis*."""
    k = np.asarray(axis, dtype=float); k = k/np.linalg.norm(k)
    K = np.array([[0, -k[2], k[1]], [k[2], 0, -k[0]], [-k[1], k[0], 0]])
    th = math.radians(angle_deg)
    return np.eye(3) + math.sin(th)*K + (1 - math.cos(th))*(K @ K)


@pytest.fixture(scope="session")
def circle_def():
    """(cx, cy, r) of the synthetic circle."""
    return 120.5, -40.25, 7.5


@pytest.fixture(scope="session")
def circle_pts(circle_def):
    """Eight points exactly on the circle, unevenly spaced."""
    cx, cy, r = circle_def
    angles = [0, 40, 85, 130, 180, 220, 270, 310]
    return [(cx + r*math.cos(math.radians(a)), cy + r*math.sin(math.radians(a))) for a in angles]


@pytest.fixture(scope="session")
def noisy_circle_pts(circle_pts):
    """Circle points with small deterministic radial-ish perturbations."""
    noise = [0.004, -0.003, 0.002, -0.005, 0.001, 0.003, -0.002, 0.0]
    return [(x + e, y - 0.5*e) for (x, y), e in zip(circle_pts, noise)]


@pytest.fixture(scope="session")
def pipe_end():
    """Rim points of a tilted pipe end: (points, center, radius, normal)."""
    C = np.array([1000.0, 2000.0, 50.0])
    n = np.array([1.0, 2.0, 3.0]); n = n/np.linalg.norm(n)
    e1 = np.cross(n, [0.0, 0.0, 1.0]); e1 = e1/np.linalg.norm(e1)
    e2 = np.cross(n, e1)
    R = 0.1635
    pts = []
    for a in [0, 40, 85, 130, 180, 220, 270, 310]:
        t = math.radians(a)
        p = C + R*(math.cos(t)*e1 + math.sin(t)*e2)
        pts.append(ENH(*(float(v) for v in p)))
    return pts, C, R, n


@pytest.fixture(scope="session")
def cube_src():
    """Cube corners: an isotropic source point set."""
    return [np.array([x, y, z], dtype=float)
            for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)]


@pytest.fixture(scope="session")
def known_rotation():
    return rotation([1.0, 2.0, 2.0], 40.0)


@pytest.fixture(scope="session")
def known_shift():
    return np.array([5000.0, 3000.0, 120.0])

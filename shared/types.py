"""Shared type definitions for the survey calculators."""
import math
from typing import NamedTuple

import numpy as np

Point = tuple[float, float]          # (E, N) or (x, y)
Vector3 = np.ndarray                 # shape (3,)
Matrix3 = np.ndarray                 # shape (3, 3)

class ENH(NamedTuple):
    """Survey point: Easting, Northing, Height. H is NaN when unknown."""
    E: float; N: float; H: float = math.nan

class Circle2D(NamedTuple):
    cx: float; cy: float; r: float

class FitStats(NamedTuple):
    rmse: float; mean_abs: float

class PlaneFrame(NamedTuple):
    """Plane through C with unit normal n; U, V span the plane."""
    C: Vector3; n: Vector3; U: Vector3; V: Vector3

class AxisFrame(NamedTuple):
    """Orthonormal frame: u along A->B, v and w across."""
    origin: Vector3; u: Vector3; v: Vector3; w: Vector3

class RigidTransform(NamedTuple):
    """p_target = s * R @ p_source + t."""
    R: Matrix3; s: float; t: Vector3; rms: float

class AffineTransform(NamedTuple):
    """p_target = A @ p_source + t."""
    A: Matrix3; t: Vector3

"""Shared types, tolerances, linear algebra, and survey geometry helpers."""

from .types import (
    Point, ENH, Circle2D, FitStats, PlaneFrame, AxisFrame,
    RigidTransform, AffineTransform,
)
from .geometry import (
    GeometryError, known, height_of,
    brg_dist, enh_tie, enh_difference, EnhTie, fmt_brg, fmt_num,
)
from .linalg import solve_linear, eigen_sym3, min_eigen_index, vec3, unit3, norm3
from .parse import parse_enh_line, parse_enh_text, parse_named_enh_text
from .logging_config import setup_logging

"""Least-squares and closed-form fits: circles, pipe ends, point-set transforms."""

from .circle import (
    circumcenter, triplet_circles, triplet_average, median_radius,
    least_squares_fit, refine_geometric, statistics, choose_best, fit_circle,
    TripletCircle, BestFit, CircleFitResult, METHOD_TRIPLET, METHOD_LSQ,
)
from .plane import (
    fit_plane_pca, project_to_plane, plane_to_world,
    fit_end, slope_between, axis_and_slope, EndFit, PipeAxis,
)
from .transform import (
    best_fit_rigid, apply_rigid, exact_affine_fit4, apply_affine,
    horn_matrix, power_iteration, quat_to_matrix,
)

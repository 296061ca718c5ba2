"""Setting-out calculators: axis projection, triangles, arcs, tee templates, stations."""

from .axis import (
    axis_length, build_axis_frame, project_along_axis, project_points,
    flange_summary, chainage_offset,
    AxisProjection, FlangeSummary, ChainageOffset, SIDE_LEFT, SIDE_RIGHT, SIDE_ON,
)
from .triangle import TriangleState, solve_triangle, RightTriangle, solve_right_triangle
from .arc import ArcSolution, solve_arc
from .tee import TemplatePoint, TeeProfiles, tee_profiles
from .stations import (
    Similarity2D, fit_similarity_2d, apply_similarity_2d,
    MergeResult, merge_stations, reference_line,
)

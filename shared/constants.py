"""Named numerical tolerances and iteration budgets.

All lengths in the caller's units (metres or millimetres); angles in degrees
unless noted.
"""

# Circle fitting
COLLINEAR_EPS = 1e-9              # circumcenter determinant, circle-center page
COLLINEAR_EPS_STRICT = 1e-12      # circumcenter determinant, circle-fit page
PIVOT_EPS = 1e-12                 # Gaussian elimination pivot
MAX_TRIPLET_POINTS = 60           # C(60,3) = 34220 triples; larger sets are logged

# Eigen / Horn
JACOBI_MAX_ITERS = 30
JACOBI_OFF_TOL = 1e-12
JACOBI_SKIP_TOL = 1e-18           # rotation skipped below this |a_pq|
HORN_POWER_ITERS = 30

# Plane reference axis switch: |n.z| below this uses +Z, else +X
REF_AXIS_SWITCH = 0.9

# Axis / baseline
AXIS_MIN_LENGTH = 1e-9
ON_LINE_TOL = 1e-12               # |offset| at or below this is "on line"
REF_LINE_MIN_LENGTH = 1e-6

# Station merge
MERGE_TOL = 0.003                 # 3 mm
MIN_COMMON_POINTS = 2

# Tee templates
TEE_MIN_STEPS = 4
TEE_DEFAULT_STEP = 15.0

"""Unrolled cutting templates for a branch pipe meeting a run pipe (tee)."""
import math
from typing import NamedTuple

from shared.geometry import GeometryError
from shared.constants import TEE_MIN_STEPS, TEE_DEFAULT_STEP

class TemplatePoint(NamedTuple):
    u: float          # unrolled arc length along the pipe circumference
    v: float          # template height from the reference line
    deg: float        # station angle around the pipe

class TeeProfiles(NamedTuple):
    run: list[TemplatePoint]
    branch: list[TemplatePoint]
    width_run: float
    width_branch: float
    steps: int

def _profile(R: float, factor: float, stations: list[float]) -> list[TemplatePoint]:
    out = []
    for deg in stations:
        h = max(0.0, R - R*factor*math.cos(math.radians(deg)))
        out.append(TemplatePoint(2*math.pi*R*deg/360.0, h, deg))
    return out

def tee_profiles(run_od: float, branch_od: float, run_tilt_deg: float = 0.0,
                 side_tilt_deg: float = 0.0, step_deg: float = TEE_DEFAULT_STEP) -> TeeProfiles:
    """Saddle approximation of the hole on the run and the cut on the branch.

    Run tilt and side tilt combine as cos(a)*cos(b) on the run template;
    only the side tilt shapes the branch cut. Stations are spaced evenly
    over 0..360 degrees inclusive.
    """
    if not (run_od > 0 and branch_od > 0):
        raise GeometryError("Pipe diameters must be > 0")
    if not step_deg > 0:
        raise GeometryError("Step angle must be > 0")
    Rr, Rb = run_od/2, branch_od/2
    a = math.radians(run_tilt_deg or 0.0); b = math.radians(side_tilt_deg or 0.0)
    steps = max(TEE_MIN_STEPS, round(360/step_deg))
    stations = [360.0*i/steps for i in range(steps+1)]
    return TeeProfiles(
        run=_profile(Rr, math.cos(a)*math.cos(b), stations),
        branch=_profile(Rb, math.cos(b), stations),
        width_run=2*math.pi*Rr,
        width_branch=2*math.pi*Rb,
        steps=steps,
    )

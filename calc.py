"""Command-line reports for the fitting and setting-out calculators.

Point files hold one point per line, ``E N H`` or ``name E N H``, comma
or whitespace separated; lines that do not parse are skipped. Undefined
results print blank.

    python calc.py circle rim.txt
    python calc.py pipe end_a.txt end_b.txt
    python calc.py chainage --a "0 0 10" --b "100 0 11" shots.txt
    python calc.py triangle a=3 c=4 apex=90
"""
import argparse
import logging
import sys
from functools import partial

from shared.geometry import GeometryError, enh_tie, fmt_brg, fmt_num
from shared.logging_config import setup_logging
from shared.parse import parse_enh_line, parse_enh_text, parse_named_enh_text
from fitting.circle import fit_circle, median_radius, refine_geometric, statistics
from fitting.plane import fit_end, axis_and_slope
from fitting.transform import best_fit_rigid, exact_affine_fit4, apply_rigid, apply_affine
from setout.axis import (axis_length, build_axis_frame, project_points,
                         flange_summary, chainage_offset)
from setout.triangle import TriangleState, solve_triangle
from setout.arc import solve_arc
from setout.tee import tee_profiles
from setout.stations import merge_stations, reference_line
from shared.constants import (AXIS_MIN_LENGTH, MERGE_TOL,
                              COLLINEAR_EPS, COLLINEAR_EPS_STRICT)

logger = logging.getLogger("calc")


def _read(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()

def _point_arg(text: str, need_h: bool = False):
    p = parse_enh_line(text, need_h)
    if p is None:
        raise GeometryError(f"Bad point: {text!r}")
    return p


# ============================================================
# Fitting Commands
# ============================================================
def cmd_circle(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    pts = [(p.E, p.N) for p in parse_enh_text(_read(args.file), need_h=False)]
    if len(pts) < 3:
        raise GeometryError("Need at least 3 points")
    res = fit_circle(pts, COLLINEAR_EPS_STRICT if args.strict else COLLINEAR_EPS)
    print(f"Points: {len(pts)}")
    for label, c, st in (("3-point average", res.average, res.average_stats),
                         ("Least squares", res.lsq, res.lsq_stats)):
        if c is None:
            print(f"{label:16s} n/a")
            continue
        print(f"{label:16s} E={f(c.cx)} N={f(c.cy)} R={f(c.r)} "
              f"rmse={fmt_num(st.rmse, args.decimals + 1)} mean|d|={fmt_num(st.mean_abs, args.decimals + 1)}")
    if res.average is not None:
        print(f"{'Median radius':16s} {f(median_radius((res.average.cx, res.average.cy), pts))}")
    if res.best is None:
        print("No circle: points are collinear or degenerate")
        return 1
    print(f"Best: {res.best.method}")
    if args.refine:
        g = refine_geometric(pts, res.best.circle)
        if g is None:
            print(f"{'Geometric':16s} n/a")
        else:
            st = statistics(g, pts)
            print(f"{'Geometric':16s} E={f(g.cx)} N={f(g.cy)} R={f(g.r)} "
                  f"rmse={fmt_num(st.rmse, args.decimals + 1)}")
    return 0

def cmd_pipe(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    fits = []
    for path in (args.end_a, args.end_b):
        pts = parse_enh_text(_read(path))
        fit = fit_end(pts)
        if fit is None:
            print(f"{path}: end fit failed ({len(pts)} points)")
            return 1
        c = fit.center
        print(f"{path}: C=({f(c.E)}, {f(c.N)}, {f(c.H)}) R={f(fit.R)} "
              f"D={f(2*fit.R)} rms={fmt_num(fit.rms, args.decimals + 1)}")
        fits.append(fit)
    ax = axis_and_slope(*fits)
    print(f"dE={f(ax.dE)} dN={f(ax.dN)} dH={f(ax.dH)}")
    print(f"Horizontal={f(ax.horiz)} Length={f(ax.length)} Slope={fmt_num(ax.slope_deg, 4)} deg")
    return 0

def cmd_transform(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    src = parse_named_enh_text(_read(args.source))
    tgt = parse_named_enh_text(_read(args.target))
    common = [k for k in src if k in tgt]
    Q = [src[k] for k in common]; P = [tgt[k] for k in common]
    print(f"Common points: {len(common)}")
    if args.affine:
        tr = exact_affine_fit4(Q, P)
        if tr is None:
            print("Affine fit needs exactly 4 non-coplanar common points")
            return 1
        mapped = {k: apply_affine(tr, p) for k, p in src.items()}
        print("A =")
        for row in tr.A:
            print("  " + "  ".join(fmt_num(v, 9) for v in row))
    else:
        tr = best_fit_rigid(P, Q, allow_scale=args.scale)
        if tr is None:
            print("Need at least 3 common points")
            return 1
        mapped = {k: apply_rigid(tr, p) for k, p in src.items()}
        print(f"Scale={fmt_num(tr.s, 9)} rms={fmt_num(tr.rms, args.decimals + 1)}")
        print("R =")
        for row in tr.R:
            print("  " + "  ".join(fmt_num(v, 9) for v in row))
    print("t = " + "  ".join(f(v) for v in tr.t))
    for k, p in mapped.items():
        print(f"{k:10s} {f(p[0])} {f(p[1])} {f(p[2])}")
    return 0


# ============================================================
# Setting-Out Commands
# ============================================================
def cmd_flange(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    a = _point_arg(args.a, need_h=True); b = _point_arg(args.b, need_h=True)
    if axis_length(a, b) < AXIS_MIN_LENGTH:
        raise GeometryError("Axis points A and B coincide")
    frame = build_axis_frame(a, b)
    projs = project_points(frame, parse_enh_text(_read(args.file)))
    for i, pr in enumerate(projs, 1):
        print(f"{i:3d}  t={f(pr.t)} r={f(pr.r)} theta={fmt_num(pr.theta, 2)}")
    s = flange_summary(projs)
    if s is None:
        print("No points")
        return 1
    print(f"r_avg={f(s.r_avg)} r_rms={fmt_num(s.r_rms, args.decimals + 1)} "
          f"t=[{f(s.t_min)}, {f(s.t_max)}] n={s.count}")
    return 0

def cmd_chainage(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    a = _point_arg(args.a); b = _point_arg(args.b)
    for p in parse_enh_text(_read(args.file), need_h=False):
        co = chainage_offset(a, b, p)
        if co.side is None:
            raise GeometryError("Baseline A-B has zero length")
        print(f"E={f(p.E)} N={f(p.N)}  ch={f(co.t)} off={f(abs(co.offset))} {co.side} "
              f"Hline={f(co.h_line)} dH={f(co.dH)}")
    return 0

_TRIANGLE_KEYS = {
    "a": "a", "b": "b", "c": "c", "h": "h",
    "bl": "b_left", "br": "b_right",
    "apex": "apex", "apexl": "apex_left", "apexr": "apex_right",
}

def cmd_triangle(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    fields = {}
    for item in args.fields:
        key, _, val = item.partition("=")
        name = _TRIANGLE_KEYS.get(key.strip().lower())
        if name is None or not val:
            raise GeometryError(f"Unknown triangle field: {item!r}")
        try:
            fields[name] = float(val)
        except ValueError:
            raise GeometryError(f"Bad number for {key}: {val!r}") from None
    st = solve_triangle(TriangleState(**fields))
    for name, v in st._asdict().items():
        print(f"{name:11s} {f(v)}")
    return 0

def cmd_arc(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    sol = solve_arc(args.r, args.b, args.d)
    if sol is None:
        raise GeometryError("Provide any two of R, B, D")
    print(f"R={f(sol.r)} B={fmt_num(sol.b, 4)} D={f(sol.d)}")
    print(f"Arc={f(sol.arc)} Sector={f(sol.sector)} Segment={f(sol.segment)}")
    return 0

def cmd_tee(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    prof = tee_profiles(args.run_od, args.branch_od, args.run_tilt, args.side_tilt, args.step)
    print(f"Run width={f(prof.width_run)}  Branch width={f(prof.width_branch)}  steps={prof.steps}")
    print(f"{'deg':>8s} {'run u':>10s} {'run v':>10s} {'branch u':>10s} {'branch v':>10s}")
    for r, bp in zip(prof.run, prof.branch):
        print(f"{fmt_num(r.deg, 1):>8s} {f(r.u):>10s} {f(r.v):>10s} {f(bp.u):>10s} {f(bp.v):>10s}")
    return 0

def cmd_tie(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    t = enh_tie(_point_arg(args.a), _point_arg(args.b))
    print(f"dE={f(t.dE)} dN={f(t.dN)} dH={f(t.dH)}")
    print(f"2D={f(t.d2d)} 3D={f(t.d3d)} Brg={fmt_brg(t.bearing)}")
    return 0

def cmd_merge(args) -> int:
    f = partial(fmt_num, n=args.decimals)
    base = parse_named_enh_text(_read(args.base))
    move = parse_named_enh_text(_read(args.move))
    res = merge_stations(base, move, args.tol)
    if res is None:
        print("Need at least 2 common points")
        return 1
    if res.transform is not None:
        print(f"Common={len(res.common)} scale={fmt_num(res.transform.scale, 9)} "
              f"dH={f(res.dH)} max misfit={fmt_num(res.max_dev, args.decimals + 1)} "
              f"over tol={res.exceed_count}")
    pts = res.merged
    if args.ref:
        pts = reference_line(pts, *args.ref)
        if pts is None:
            raise GeometryError("Reference points missing or coincident")
    for k, p in pts.items():
        print(f"{k:10s} {f(p.E)} {f(p.N)} {f(p.H)}")
    return 0


# ============================================================
# Entry Point
# ============================================================
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--log-file", default=None)
    ap.add_argument("--decimals", type=int, default=3)
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("circle", help="circle through 2D points")
    p.add_argument("file"); p.add_argument("--refine", action="store_true")
    p.add_argument("--strict", action="store_true", help="tighter collinearity test")
    p.set_defaults(func=cmd_circle)

    p = sub.add_parser("pipe", help="pipe centerline from two end point sets")
    p.add_argument("end_a"); p.add_argument("end_b")
    p.set_defaults(func=cmd_pipe)

    p = sub.add_parser("transform", help="best-fit transform between named point files")
    p.add_argument("source"); p.add_argument("target")
    g = p.add_mutually_exclusive_group()
    g.add_argument("--scale", action="store_true", help="allow uniform scale")
    g.add_argument("--affine", action="store_true", help="exact 4-point affine")
    p.set_defaults(func=cmd_transform)

    p = sub.add_parser("flange", help="project points onto axis A-B")
    p.add_argument("--a", required=True); p.add_argument("--b", required=True)
    p.add_argument("file")
    p.set_defaults(func=cmd_flange)

    p = sub.add_parser("chainage", help="chainage and offset from baseline A-B")
    p.add_argument("--a", required=True); p.add_argument("--b", required=True)
    p.add_argument("file")
    p.set_defaults(func=cmd_chainage)

    p = sub.add_parser("triangle", help="general triangle from key=value fields")
    p.add_argument("fields", nargs="+", help="a b c h bl br apex apexl apexr")
    p.set_defaults(func=cmd_triangle)

    p = sub.add_parser("arc", help="arc from two of R, B, D")
    p.add_argument("--r", type=float); p.add_argument("--b", type=float)
    p.add_argument("--d", type=float)
    p.set_defaults(func=cmd_arc)

    p = sub.add_parser("tee", help="tee cutting templates")
    p.add_argument("run_od", type=float); p.add_argument("branch_od", type=float)
    p.add_argument("--run-tilt", type=float, default=0.0)
    p.add_argument("--side-tilt", type=float, default=0.0)
    p.add_argument("--step", type=float, default=15.0)
    p.set_defaults(func=cmd_tee)

    p = sub.add_parser("tie", help="ENH difference between two points")
    p.add_argument("a"); p.add_argument("b")
    p.set_defaults(func=cmd_tie)

    p = sub.add_parser("merge", help="join two station files on common names")
    p.add_argument("base"); p.add_argument("move")
    p.add_argument("--tol", type=float, default=MERGE_TOL)
    p.add_argument("--ref", nargs=2, metavar=("A", "B"), help="re-express on line A->B")
    p.set_defaults(func=cmd_merge)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    logger.info("Running %s", args.command)
    try:
        return args.func(args)
    except (GeometryError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

"""Triangle solvers.

General triangle (base b, left side a, right side c, altitude h onto b)
filled in from any sufficient subset of its parameters, plus the classic
right-triangle solver. Unknown values are NaN; the general solver never
raises, it returns whatever it could derive.

Layout of the general triangle::

              apex
             /|\\
          a / | \\ c         apex = apex_left + apex_right
           /  |h \\
          /___|___\\
           b_left b_right     b = b_left + b_right
"""
import math
from typing import NamedTuple

from shared.geometry import GeometryError, known

NAN = math.nan

class TriangleState(NamedTuple):
    """Sides a, c meet at the apex; b is the base, split by the foot of h.

    base_left is the angle at the a-b vertex (between sides a and b), not
    the angle opposite a; base_right likewise sits between c and b.
    """
    a: float = NAN
    b: float = NAN
    c: float = NAN
    h: float = NAN
    b_left: float = NAN
    b_right: float = NAN
    apex: float = NAN           # degrees
    apex_left: float = NAN
    apex_right: float = NAN
    base_left: float = NAN      # angle between a and b
    base_right: float = NAN     # angle between c and b

def _clamp1(x: float) -> float:
    return max(-1.0, min(1.0, x))

def _acos_deg(x: float) -> float:
    return math.degrees(math.acos(_clamp1(x)))

def _atan2_deg(y: float, x: float) -> float:
    return math.degrees(math.atan2(y, x))

def _tie(total: float, left: float, right: float) -> tuple[float, float, float]:
    """Fill the missing member of total = left + right."""
    if not known(total) and known(left) and known(right): total = left + right
    if known(total) and known(left) and not known(right): right = total - left
    if known(total) and known(right) and not known(left): left = total - right
    return total, left, right

def _strict_sss(a: float, b: float, c: float) -> bool:
    return known(a) and known(b) and known(c) and a+b > c and a+c > b and b+c > a

def _split_from_sides(a, b, c, apex, base_left, area) -> TriangleState:
    """Altitude, base split and apex halves once a, b, c and the angles are fixed."""
    h = 2*area/b
    bl = (a*a - c*c + b*b)/(2*b); br = b - bl
    return TriangleState(a, b, c, h, bl, br, apex,
                         _atan2_deg(bl, h), _atan2_deg(br, h),
                         base_left, 180.0 - apex - base_left)

def _solve_sss(a: float, b: float, c: float) -> TriangleState:
    s = (a+b+c)/2
    area = math.sqrt(max(0.0, s*(s-a)*(s-b)*(s-c)))
    base_left = _acos_deg((a*a + b*b - c*c)/(2*a*b))
    h = 2*area/b
    bl = (a*a - c*c + b*b)/(2*b); br = b - bl
    al = _atan2_deg(bl, h); ar = _atan2_deg(br, h)
    apex = al + ar
    return TriangleState(a, b, c, h, bl, br, apex, al, ar, base_left, 180.0 - apex - base_left)

def _right_parts(h, bl, br):
    """Angles of the two right triangles either side of the altitude."""
    al = _atan2_deg(bl, h) if known(bl) else NAN
    ar = _atan2_deg(br, h) if known(br) else NAN
    gl = _atan2_deg(h, bl) if known(bl) else NAN
    gr = _atan2_deg(h, br) if known(br) else NAN
    return al, ar, gl, gr

def solve_triangle(state: TriangleState) -> TriangleState:
    """Derive every parameter the known ones determine.

    Order: ties, altitude from a right-triangle half, SSS, SAS (a, c, apex),
    altitude plus base half, one more SSS attempt, then the b + h + side
    fallback. Contradictory input (e.g. failed triangle inequality) leaves
    the dependent fields NaN.
    """
    state = TriangleState(*(NAN if v is None else float(v) for v in state))
    a, b, c, h = state.a, state.b, state.c, state.h
    bl, br = state.b_left, state.b_right
    apex, al, ar = state.apex, state.apex_left, state.apex_right
    gl = gr = NAN

    b, bl, br = _tie(b, bl, br)
    apex, al, ar = _tie(apex, al, ar)

    if not known(h):
        if known(a) and known(bl) and a*a - bl*bl >= 0:
            h = math.sqrt(a*a - bl*bl)
        elif known(c) and known(br) and c*c - br*br >= 0:
            h = math.sqrt(c*c - br*br)

    if _strict_sss(a, b, c):
        return _solve_sss(a, b, c)

    if known(a) and known(c) and known(apex) and 0 < apex < 180:
        ap = math.radians(apex)
        b2 = a*a + c*c - 2*a*c*math.cos(ap)
        if b2 > 0:
            bb = math.sqrt(b2)
            base_left = _acos_deg((a*a + b2 - c*c)/(2*a*bb))
            return _split_from_sides(a, bb, c, apex, base_left, 0.5*a*c*math.sin(ap))

    if known(h) and (known(bl) or known(br)):
        if not known(a) and known(bl): a = math.hypot(bl, h)
        if not known(c) and known(br): c = math.hypot(br, h)
        al2, ar2, gl, gr = _right_parts(h, bl, br)
        if known(al2): al = al2
        if known(ar2): ar = ar2
        apex, al, ar = _tie(apex, al, ar)

    # single extra SSS pass after the partial fills
    if _strict_sss(a, b, c):
        return _solve_sss(a, b, c)

    if known(b) and known(h) and (known(a) or known(c)):
        if known(a) and not known(bl): bl = math.sqrt(max(0.0, a*a - h*h))
        if known(c) and not known(br): br = math.sqrt(max(0.0, c*c - h*h))
        b, bl, br = _tie(b, bl, br)
        if known(bl) and known(br):
            if not known(a): a = math.hypot(bl, h)
            if not known(c): c = math.hypot(br, h)
            al, ar, gl, gr = _right_parts(h, bl, br)
            apex = al + ar

    return TriangleState(a, b, c, h, bl, br, apex, al, ar, gl, gr)

# ============================================================
# Right Triangle
# ============================================================
class RightTriangle(NamedTuple):
    a: float          # leg opposite angle_a
    b: float          # leg adjacent to angle_a
    h: float          # hypotenuse
    angle_a: float    # degrees
    angle_b: float    # degrees, 90 - angle_a

def solve_right_triangle(a: float = NAN, b: float = NAN, h: float = NAN,
                         angle_a: float = NAN, angle_b: float = NAN) -> RightTriangle:
    """Right triangle from two sides, or one side and one acute angle."""
    if not known(angle_a) and known(angle_b):
        angle_a = 90.0 - angle_b
    if known(angle_a) and not 0 < angle_a < 90:
        raise GeometryError("Angle A must be between 0 and 90 degrees (exclusive)")

    if known(a) and known(b):
        h = math.hypot(a, b); angle_a = math.degrees(math.atan2(a, b))
    elif known(a) and known(h):
        if a >= h:
            raise GeometryError("Hypotenuse must be longest (h > a)")
        b = math.sqrt(h*h - a*a); angle_a = math.degrees(math.asin(a/h))
    elif known(b) and known(h):
        if b >= h:
            raise GeometryError("Hypotenuse must be longest (h > b)")
        a = math.sqrt(h*h - b*b); angle_a = math.degrees(math.atan2(a, b))
    elif known(angle_a):
        A = math.radians(angle_a)
        if known(a):   b = a/math.tan(A); h = a/math.sin(A)
        elif known(b): a = b*math.tan(A); h = b/math.cos(A)
        elif known(h): a = h*math.sin(A); b = h*math.cos(A)
        else:
            raise GeometryError("Provide a side with the angle")
    else:
        raise GeometryError("Provide any two: two sides, or one side and one acute angle")

    if not (a > 0 and b > 0 and h > 0):
        raise GeometryError("Invalid dimensions")
    if not (h > a and h > b):
        raise GeometryError("Hypotenuse must be longest")
    return RightTriangle(a, b, h, angle_a, 90.0 - angle_a)

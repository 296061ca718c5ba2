"""Free-text ENH list parsing for the command line.

Lines are split on commas and/or whitespace; lines that do not yield the
required numbers are skipped.
"""
import math
import re

from .types import ENH

_SPLIT = re.compile(r"[,\s;]+")


def _tokens(line: str) -> list[str]:
    return [t for t in _SPLIT.split(line.strip()) if t]

def _num(s: str) -> float:
    v = float(s)
    if not math.isfinite(v):
        raise ValueError(s)
    return v

def parse_enh_line(line: str, need_h: bool = True) -> ENH | None:
    """'E N H' (or 'E N' when *need_h* is False) -> ENH, else None."""
    t = _tokens(line)
    if len(t) < (3 if need_h else 2):
        return None
    try:
        E, N = _num(t[0]), _num(t[1])
    except ValueError:
        return None
    try:
        H = _num(t[2]) if len(t) >= 3 else math.nan
    except ValueError:
        if need_h:
            return None
        H = math.nan
    return ENH(E, N, H)

def parse_enh_text(text: str, need_h: bool = True) -> list[ENH]:
    out = []
    for ln in (text or "").splitlines():
        p = parse_enh_line(ln, need_h)
        if p is not None:
            out.append(p)
    return out

def parse_named_enh_text(text: str) -> dict[str, ENH]:
    """'name E N H' rows -> {name: ENH}. Later duplicates replace earlier ones."""
    out = {}
    for ln in (text or "").splitlines():
        t = _tokens(ln)
        if len(t) < 4:
            continue
        try:
            out[t[0]] = ENH(_num(t[1]), _num(t[2]), _num(t[3]))
        except ValueError:
            continue
    return out

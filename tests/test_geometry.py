"""Tests for shared/geometry.py and shared/parse.py pure functions."""
import math
import pytest
from shared.types import ENH
from shared.geometry import (
    known, height_of, brg_dist, enh_tie, enh_difference, fmt_brg, fmt_num,
)
from shared.parse import parse_enh_line, parse_enh_text, parse_named_enh_text


# --- known / height_of ---

def test_known():
    assert known(0.0)
    assert not known(None)
    assert not known(math.nan)
    assert not known(math.inf)


def test_height_of():
    assert height_of((1, 2, 3)) == 3.0
    assert math.isnan(height_of((1, 2)))
    assert math.isnan(height_of((1, 2, None)))


# --- brg_dist ---

def test_brg_dist_north():
    b, d = brg_dist((0, 0), (0, 1))
    assert abs(b - 0.0) < 1e-10
    assert abs(d - 1.0) < 1e-10


def test_brg_dist_east():
    b, d = brg_dist((0, 0), (1, 0))
    assert abs(b - 90.0) < 1e-10
    assert abs(d - 1.0) < 1e-10


def test_brg_dist_southwest():
    b, d = brg_dist((0, 0), (-1, -1))
    assert abs(b - 225.0) < 1e-10
    assert abs(d - math.sqrt(2)) < 1e-10


# --- enh_tie ---

def test_enh_tie_full():
    t = enh_tie(ENH(100, 200, 10), ENH(103, 204, 22))
    assert (t.dE, t.dN, t.dH) == (3, 4, 12)
    assert abs(t.d2d - 5.0) < 1e-12
    assert abs(t.d3d - 13.0) < 1e-12
    assert abs(t.bearing - math.degrees(math.atan2(3, 4))) < 1e-10


def test_enh_tie_missing_height():
    t = enh_tie(ENH(0, 0), ENH(3, 4, 1))
    assert abs(t.d2d - 5.0) < 1e-12
    assert math.isnan(t.dH)
    assert math.isnan(t.d3d)


def test_enh_tie_same_plan_position():
    t = enh_tie(ENH(5, 5, 0), ENH(5, 5, 2))
    assert math.isnan(t.bearing)
    assert abs(t.d3d - 2.0) < 1e-12


def test_enh_difference():
    assert enh_difference(ENH(5, 7, 9), ENH(1, 2, 3)) == ENH(4, 5, 6)


# --- formatting ---

def test_fmt_brg_zero():
    assert fmt_brg(0.0) == "0° 00' 00.0\""


def test_fmt_brg_unknown_blank():
    assert fmt_brg(math.nan) == ""


def test_fmt_num():
    assert fmt_num(1.23456) == "1.235"
    assert fmt_num(2.5, 1) == "2.5"
    assert fmt_num(None) == ""
    assert fmt_num(math.nan) == ""
    assert fmt_num(-0.0001) == "0.000"


# --- parsing ---

def test_parse_enh_line_separators():
    assert parse_enh_line("1.5, 2.5, 3.5") == ENH(1.5, 2.5, 3.5)
    assert parse_enh_line("1.5 2.5\t3.5") == ENH(1.5, 2.5, 3.5)
    assert parse_enh_line("1;2;3") == ENH(1, 2, 3)


def test_parse_enh_line_height_optional():
    assert parse_enh_line("1 2") is None
    p = parse_enh_line("1 2", need_h=False)
    assert (p.E, p.N) == (1, 2)
    assert math.isnan(p.H)


def test_parse_enh_line_rejects_text():
    assert parse_enh_line("E N H") is None
    assert parse_enh_line("1 2 x") is None
    assert parse_enh_line("1 nan 3") is None


def test_parse_enh_text_skips_bad_lines():
    text = "E N H\n1 2 3\n\nbad line\n4,5,6\n"
    assert parse_enh_text(text) == [ENH(1, 2, 3), ENH(4, 5, 6)]
    assert parse_enh_text("") == []


def test_parse_named_enh_text():
    pts = parse_named_enh_text("CP1 10 20 30\nCP2, 11, 21, 31\nnoise\nCP1 1 2 3\n")
    assert list(pts) == ["CP1", "CP2"]
    assert pts["CP1"] == ENH(1, 2, 3)

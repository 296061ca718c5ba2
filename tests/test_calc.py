"""Tests for the calc.py command line."""
import math
import pytest
import calc


def run(capsys, *argv):
    rc = calc.main(["--log-level", "ERROR", *argv])
    return rc, capsys.readouterr()


def test_circle_report(tmp_path, capsys, circle_pts):
    f = tmp_path / "rim.txt"
    f.write_text("E N\n" + "\n".join(f"{x} {y}" for x, y in circle_pts))
    rc, out = run(capsys, "circle", str(f), "--refine")
    assert rc == 0
    assert "Best:" in out.out
    assert "R=7.500" in out.out


def test_circle_collinear(tmp_path, capsys):
    f = tmp_path / "line.txt"
    f.write_text("0 0\n1 1\n2 2\n3 3\n")
    rc, out = run(capsys, "circle", str(f))
    assert rc == 1
    assert "collinear" in out.out


def test_pipe_report(tmp_path, capsys, pipe_end):
    pts, C, R, n = pipe_end
    a = tmp_path / "a.txt"; b = tmp_path / "b.txt"
    a.write_text("\n".join(f"{p.E} {p.N} {p.H}" for p in pts))
    b.write_text("\n".join(f"{p.E + 10} {p.N} {p.H + 10}" for p in pts))
    rc, out = run(capsys, "pipe", str(a), str(b))
    assert rc == 0
    assert "Slope=45.0000" in out.out


def test_triangle(capsys):
    rc, out = run(capsys, "triangle", "a=3", "c=4", "apex=90")
    assert rc == 0
    lines = dict(ln.split(None, 1) for ln in out.out.splitlines() if ln.strip())
    assert lines["b"] == "5.000"
    assert lines["h"] == "2.400"


def test_decimals_option_per_call(capsys):
    rc, out = run(capsys, "--decimals", "1", "triangle", "a=3", "c=4", "apex=90")
    assert rc == 0
    lines = dict(ln.split(None, 1) for ln in out.out.splitlines() if ln.strip())
    assert lines["b"] == "5.0"
    rc, out = run(capsys, "triangle", "a=3", "c=4", "apex=90")
    lines = dict(ln.split(None, 1) for ln in out.out.splitlines() if ln.strip())
    assert lines["b"] == "5.000"


def test_triangle_bad_field(capsys):
    rc, out = run(capsys, "triangle", "q=3")
    assert rc == 2
    assert "Unknown triangle field" in out.err


def test_arc_error_exit_code(capsys):
    rc, out = run(capsys, "arc", "--r", "10", "--d", "25")
    assert rc == 2
    assert "Chord must be <= 2R" in out.err


def test_chainage(tmp_path, capsys):
    f = tmp_path / "shots.txt"
    f.write_text("5 1\n5 -1\n")
    rc, out = run(capsys, "chainage", "--a", "0 0", "--b", "10 0", str(f))
    assert rc == 0
    lines = out.out.splitlines()
    assert " L " in lines[0]
    assert " R " in lines[1]


def test_merge_with_reference(tmp_path, capsys):
    base = tmp_path / "base.txt"; move = tmp_path / "move.txt"
    base.write_text("A 100 100 10\nB 100 110 12\n")
    move.write_text("A 0 0 0\nB 0 10 2\nP 1 5 1\n")
    rc, out = run(capsys, "merge", str(base), str(move), "--ref", "A", "B")
    assert rc == 0
    assert "P          1.000 5.000 1.000" in out.out


def test_missing_file(capsys, tmp_path):
    rc, out = run(capsys, "circle", str(tmp_path / "nope.txt"))
    assert rc == 2

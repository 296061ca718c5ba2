"""Tests for fitting/transform.py: Horn rigid/similarity fit and 4-point affine."""
import numpy as np
import pytest
from shared.types import RigidTransform, AffineTransform
from fitting.transform import (
    best_fit_rigid, apply_rigid, exact_affine_fit4, apply_affine,
    horn_matrix, power_iteration, quat_to_matrix,
)
from conftest import rotation


class TestQuaternion:
    def test_identity_quaternion(self):
        assert np.allclose(quat_to_matrix(np.array([1.0, 0, 0, 0])), np.eye(3))

    def test_quarter_turn_about_z(self):
        s = np.sqrt(0.5)
        R = quat_to_matrix(np.array([s, 0, 0, s]))
        assert np.allclose(R @ [1, 0, 0], [0, 1, 0], atol=1e-12)

    def test_unnormalised_quaternion(self):
        R = quat_to_matrix(np.array([2.0, 0, 0, 2.0]))
        assert np.allclose(R.T @ R, np.eye(3), atol=1e-12)

    def test_horn_matrix_symmetric(self):
        S = np.arange(9, dtype=float).reshape(3, 3)
        N = horn_matrix(S)
        assert np.allclose(N, N.T)
        assert abs(np.trace(N)) < 1e-12

    def test_power_iteration_dominant(self):
        N = np.diag([1.0, 5.0, 2.0, -0.5])
        q = power_iteration(N)
        assert abs(abs(q[1]) - 1.0) < 1e-9

    def test_power_iteration_largest_signed(self):
        # -5 is largest in magnitude but 2 is the maximum
        q = power_iteration(np.diag([1.0, -5.0, 2.0, 0.0]))
        assert abs(abs(q[2]) - 1.0) < 1e-9

    def test_power_iteration_zero_matrix(self):
        assert np.allclose(power_iteration(np.zeros((4, 4))), [1, 0, 0, 0])


class TestRigidFit:
    def test_recovers_rotation(self, cube_src, known_rotation, known_shift):
        Q = [10*p for p in cube_src]
        P = [known_rotation @ q + known_shift for q in Q]
        tr = best_fit_rigid(P, Q)
        assert tr.rms < 1e-6
        assert np.allclose(tr.R, known_rotation, atol=1e-9)
        assert np.allclose(tr.t, known_shift, atol=1e-6)
        assert tr.s == 1.0

    def test_recovers_scale(self, cube_src, known_rotation, known_shift):
        Q = [10*p for p in cube_src]
        P = [1.25*(known_rotation @ q) + known_shift for q in Q]
        tr = best_fit_rigid(P, Q, allow_scale=True)
        assert tr.rms < 1e-6
        assert abs(tr.s - 1.25) < 1e-9
        for p, q in zip(P, Q):
            assert np.allclose(apply_rigid(tr, q), p, atol=1e-6)

    def test_quarter_turn_about_x(self, cube_src, known_shift):
        # answer quaternion is orthogonal to the identity
        R = rotation([1, 0, 0], -90.0)
        Q = [3*p for p in cube_src]
        P = [R @ q + known_shift for q in Q]
        tr = best_fit_rigid(P, Q)
        assert tr.rms < 1e-6

    def test_random_rotations_elongated_cloud(self):
        rng = np.random.default_rng(11)
        for _ in range(20):
            R = rotation(rng.normal(size=3), rng.uniform(-180.0, 180.0))
            t = rng.normal(size=3)*100
            Q = list(rng.normal(size=(6, 3))*[50.0, 10.0, 2.0])
            P = [R @ q + t for q in Q]
            tr = best_fit_rigid(P, Q)
            assert tr.rms < 1e-6
            assert np.allclose(tr.R, R, atol=1e-9)

    def test_random_rotations_with_scale(self):
        rng = np.random.default_rng(12)
        for _ in range(20):
            R = rotation(rng.normal(size=3), rng.uniform(-180.0, 180.0))
            Q = list(rng.normal(size=(6, 3))*[50.0, 10.0, 2.0])
            P = [0.8*(R @ q) + [5.0, -3.0, 1.0] for q in Q]
            tr = best_fit_rigid(P, Q, allow_scale=True)
            assert tr.rms < 1e-6
            assert abs(tr.s - 0.8) < 1e-9
            assert np.allclose(tr.R, R, atol=1e-9)

    def test_three_points(self, known_shift):
        R = rotation([1, 2, 2], 40.0)
        Q = [np.array(p, dtype=float) for p in ((0, 0, 0), (12, 0, 1), (3, 7, -2))]
        P = [R @ q + known_shift for q in Q]
        tr = best_fit_rigid(P, Q)
        assert tr.rms < 1e-6
        assert np.allclose(tr.R, R, atol=1e-9)

    def test_planar_grid(self, known_rotation, known_shift):
        Q = [np.array([5.0*i, 5.0*j, 0.0]) for i in range(4) for j in range(3)]
        P = [known_rotation @ q + known_shift for q in Q]
        tr = best_fit_rigid(P, Q)
        assert tr.rms < 1e-6
        assert np.allclose(tr.R, known_rotation, atol=1e-9)

    def test_rotation_is_proper(self, cube_src, known_rotation, known_shift):
        P = [known_rotation @ q + known_shift for q in cube_src]
        tr = best_fit_rigid(P, cube_src)
        assert abs(np.linalg.det(tr.R) - 1.0) < 1e-9

    def test_pure_translation(self, cube_src):
        P = [q + np.array([1.0, -2.0, 0.5]) for q in cube_src]
        tr = best_fit_rigid(P, cube_src)
        assert np.allclose(tr.R, np.eye(3), atol=1e-12)
        assert np.allclose(tr.t, [1.0, -2.0, 0.5], atol=1e-12)

    def test_extra_points_ignored(self, cube_src, known_rotation):
        P = [known_rotation @ q for q in cube_src]
        tr = best_fit_rigid(P, cube_src + [np.array([99.0, 99.0, 99.0])])
        assert tr.rms < 1e-6

    def test_too_few_points(self):
        assert best_fit_rigid([(0, 0, 0), (1, 0, 0)], [(0, 0, 0), (1, 0, 0)]) is None

    def test_apply_rigid(self):
        tr = RigidTransform(np.eye(3), 2.0, np.array([1.0, 1.0, 1.0]), 0.0)
        assert np.allclose(apply_rigid(tr, (1, 2, 3)), [3, 5, 7])


class TestAffineFit:
    A_TRUE = np.array([[1.1, 0.2, -0.3], [0.05, 0.9, 0.4], [0.0, -0.25, 1.3]])
    T_TRUE = np.array([100.0, -50.0, 7.5])
    SRC = [(0, 0, 0), (10, 0, 0), (0, 10, 0), (1, 2, 10)]

    def _map(self, p):
        return self.A_TRUE @ np.asarray(p, dtype=float) + self.T_TRUE

    def test_reproduces_controls(self):
        tgt = [self._map(p) for p in self.SRC]
        tr = exact_affine_fit4(self.SRC, tgt)
        for s, g in zip(self.SRC, tgt):
            assert np.allclose(apply_affine(tr, s), g, atol=1e-9)

    def test_fifth_point(self):
        tr = exact_affine_fit4(self.SRC, [self._map(p) for p in self.SRC])
        extra = (-4.0, 7.0, 3.5)
        assert np.allclose(apply_affine(tr, extra), self._map(extra), atol=1e-9)
        assert np.allclose(tr.A, self.A_TRUE, atol=1e-9)
        assert np.allclose(tr.t, self.T_TRUE, atol=1e-9)

    def test_wrong_count_is_none(self):
        tgt = [self._map(p) for p in self.SRC]
        assert exact_affine_fit4(self.SRC[:3], tgt[:3]) is None
        assert exact_affine_fit4(self.SRC + [(5, 5, 5)], tgt + [self._map((5, 5, 5))]) is None

    def test_coplanar_sources_singular(self):
        src = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)]
        assert exact_affine_fit4(src, [self._map(p) for p in src]) is None

    def test_apply_affine(self):
        tr = AffineTransform(2*np.eye(3), np.zeros(3))
        assert np.allclose(apply_affine(tr, (1, 2, 3)), [2, 4, 6])

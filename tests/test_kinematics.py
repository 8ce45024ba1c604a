"""Tests for the rotation-derivative / angular-velocity identities."""

import jax.numpy as jnp
import pytest

from aerojax.attitude import (
    angular_velocity_from_rotation_and_derivative,
    frame_rotation,
    rotation_derivative_from_angular_velocity,
    skew_symmetric,
)


def _rotation() -> jnp.ndarray:
    return frame_rotation(2, 0.4) @ frame_rotation(1, -1.2) @ frame_rotation(0, 2.3)


class TestSkewSymmetric:
    def test_cross_product(self):
        v = jnp.array([1.0, -2.0, 0.5])
        u = jnp.array([0.3, 0.7, -1.1])
        assert jnp.allclose(skew_symmetric(v) @ u, jnp.cross(v, u), atol=1e-15)

    def test_antisymmetric(self):
        S = skew_symmetric([0.1, 0.2, 0.3])
        assert jnp.allclose(S, -S.T)


class TestAngularVelocityFromRotation:
    def test_uniform_z_spin(self):
        C = jnp.eye(3)
        dC = jnp.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
        omega = angular_velocity_from_rotation_and_derivative(C, dC)
        assert jnp.allclose(omega, jnp.array([0.0, 0.0, 1.0]))

    def test_recovers_angular_velocity(self):
        C = _rotation()
        omega = jnp.array([1e-3, -2e-3, 7.3e-5])
        dC = skew_symmetric(omega) @ C
        assert jnp.allclose(
            angular_velocity_from_rotation_and_derivative(C, dC), omega, atol=1e-15
        )


class TestRotationDerivativeFromAngularVelocity:
    def test_matches_finite_difference(self):
        """dR/dt of R(t) = Rz(w t) R0 agrees with a central difference."""
        rate = 0.3
        R0 = _rotation()

        def R(t):
            return frame_rotation(2, rate * t) @ R0

        t, h = 1.7, 1e-6
        finite_difference = (R(t + h) - R(t - h)) / (2.0 * h)
        # Angular velocity of the target frame in the base frame
        omega = rate * (R(t).T @ jnp.array([0.0, 0.0, 1.0]))
        derivative = rotation_derivative_from_angular_velocity(R(t), omega)
        assert jnp.allclose(derivative, finite_difference, atol=1e-8)

    def test_zero_angular_velocity(self):
        derivative = rotation_derivative_from_angular_velocity(_rotation(), jnp.zeros(3))
        assert jnp.allclose(derivative, jnp.zeros((3, 3)))


class TestKinematicsRoundTrip:
    @pytest.mark.parametrize("omega", [
        [1e-3, -2e-3, 7.3e-5],
        [0.0, 0.0, 0.0],
        [2.5, -1.0, 0.3],
    ])
    def test_derivative_round_trip(self, omega):
        """derivative -> angular velocity -> derivative reproduces the derivative."""
        R = _rotation()
        omega = jnp.array(omega)

        derivative = rotation_derivative_from_angular_velocity(R, omega)
        recovered = angular_velocity_from_rotation_and_derivative(R.T, derivative.T)
        derivative_again = rotation_derivative_from_angular_velocity(R, recovered)

        assert jnp.allclose(recovered, omega, atol=1e-12)
        assert float(jnp.max(jnp.abs(derivative_again - derivative))) < 1e-12

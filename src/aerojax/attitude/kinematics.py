"""Kinematic identities between rotation derivatives and angular velocity.

For a rotation matrix ``C`` mapping target-frame components to base-frame
components, rotating with angular velocity ``omega`` (target w.r.t. base,
expressed in the base frame)::

    dC/dt = [omega x] C

so ``[omega x] = dC/dt C^T``.  The transposed matrix ``R = C^T`` (rotation
to the target frame) then satisfies ``dR/dt = [(-R omega) x] R``.

Neither function checks its preconditions (``R`` orthonormal, the
derivative consistent with ``R``); violating them gives meaningless
results rather than an error.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from aerojax.config import get_dtype


def skew_symmetric(v: ArrayLike) -> Array:
    """Cross-product matrix ``[v x]`` such that ``[v x] @ u == cross(v, u)``.

    Args:
        v: 3-vector.

    Returns:
        jax.Array: Antisymmetric 3x3 matrix.
    """
    v = jnp.asarray(v, dtype=get_dtype())
    return jnp.array([
        [0.0,   -v[2],  v[1]],
        [v[2],   0.0,  -v[0]],
        [-v[1],  v[0],  0.0],
    ])


def angular_velocity_from_rotation_and_derivative(
    rotation_to_base: ArrayLike,
    rotation_to_base_derivative: ArrayLike,
) -> Array:
    """Angular velocity of the target frame w.r.t. the base frame.

    Extracts the three independent entries of the antisymmetric matrix
    ``dC/dt C^T``.

    Args:
        rotation_to_base: Rotation matrix from target to base frame ``C``.
        rotation_to_base_derivative: Its time derivative ``dC/dt``.

    Returns:
        jax.Array: Angular velocity expressed in the base frame [rad/s].

    Examples:
        ```python
        import jax.numpy as jnp
        from aerojax.attitude import angular_velocity_from_rotation_and_derivative
        C = jnp.eye(3)
        dC = jnp.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
        angular_velocity_from_rotation_and_derivative(C, dC)  # [0, 0, 1]
        ```
    """
    _float = get_dtype()
    C = jnp.asarray(rotation_to_base, dtype=_float)
    dC = jnp.asarray(rotation_to_base_derivative, dtype=_float)

    cross_product_matrix = dC @ C.T
    return jnp.array([
        cross_product_matrix[2, 1],
        cross_product_matrix[0, 2],
        cross_product_matrix[1, 0],
    ])


def rotation_derivative_from_angular_velocity(
    rotation_to_target: ArrayLike,
    angular_velocity: ArrayLike,
) -> Array:
    """Time derivative of the rotation to the target frame.

    Computes ``dR/dt = [(-R omega) x] R``.

    Args:
        rotation_to_target: Rotation matrix from base to target frame ``R``.
        angular_velocity: Angular velocity of the target frame w.r.t. the
            base frame, expressed in the base frame [rad/s].

    Returns:
        jax.Array: ``dR/dt``, shape ``(3, 3)``.
    """
    _float = get_dtype()
    R = jnp.asarray(rotation_to_target, dtype=_float)
    omega = jnp.asarray(angular_velocity, dtype=_float)
    return skew_symmetric(-R @ omega) @ R

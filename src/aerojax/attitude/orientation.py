"""Frame-to-frame orientation values.

Provides the immutable :class:`Orientation` value returned by every
rotational model, the :class:`AngularState` bundle of orientation,
orientation derivative and angular velocity, and :func:`frame_rotation`
for elementary single-axis frame rotations.

An ``Orientation`` is stored as the 3x3 matrix that maps vector
components expressed in its *target* frame into its *base* frame::

    v_base = orientation.to_matrix() @ v_target

Quaternions use the scalar-first Hamilton convention ``[w, x, y, z]``
with the quaternion acting on vectors in the same sense as the matrix.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from aerojax.config import get_dtype, get_kinematics_tolerance


def frame_rotation(axis: int, angle: ArrayLike) -> Array:
    """Elementary frame rotation about a coordinate axis.

    Returns the matrix that re-expresses vector components in a frame
    rotated counter-clockwise by *angle* about *axis* (a passive rotation,
    Montenbruck & Gill eq. 2.24).

    Args:
        axis (int): ``0``, ``1`` or ``2`` for the x-, y- or z-axis.
        angle: Rotation angle [rad].

    Returns:
        jax.Array: 3x3 rotation matrix.

    Raises:
        ValueError: If *axis* is not 0, 1 or 2.
    """
    if axis not in (0, 1, 2):
        raise ValueError(f"axis must be 0, 1 or 2, got {axis}")
    _float = get_dtype()
    c = jnp.cos(jnp.asarray(angle, dtype=_float))
    s = jnp.sin(jnp.asarray(angle, dtype=_float))
    i, j = (axis + 1) % 3, (axis + 2) % 3

    matrix = jnp.eye(3, dtype=_float)
    matrix = matrix.at[i, i].set(c).at[j, j].set(c)
    return matrix.at[i, j].set(s).at[j, i].set(-s)


def _matrix_from_quaternion(q: Array) -> Array:
    w, x, y, z = q[0], q[1], q[2], q[3]
    return jnp.array([
        [1.0 - 2.0*(y*y + z*z), 2.0*(x*y - w*z),       2.0*(x*z + w*y)],
        [2.0*(x*y + w*z),       1.0 - 2.0*(x*x + z*z), 2.0*(y*z - w*x)],
        [2.0*(x*z - w*y),       2.0*(y*z + w*x),       1.0 - 2.0*(x*x + y*y)],
    ])


def _quaternion_from_matrix(R: Array) -> Array:
    # Shepperd's method: pick the candidate with the largest diagonal term.
    traces = jnp.array([
        1.0 + R[0, 0] + R[1, 1] + R[2, 2],
        1.0 + R[0, 0] - R[1, 1] - R[2, 2],
        1.0 - R[0, 0] + R[1, 1] - R[2, 2],
        1.0 - R[0, 0] - R[1, 1] + R[2, 2],
    ])
    roots = 0.5 * jnp.sqrt(jnp.maximum(traces, 0.0))
    d = 4.0 * roots
    candidates = jnp.array([
        [roots[0], (R[2, 1] - R[1, 2]) / d[0], (R[0, 2] - R[2, 0]) / d[0], (R[1, 0] - R[0, 1]) / d[0]],
        [(R[2, 1] - R[1, 2]) / d[1], roots[1], (R[0, 1] + R[1, 0]) / d[1], (R[0, 2] + R[2, 0]) / d[1]],
        [(R[0, 2] - R[2, 0]) / d[2], (R[0, 1] + R[1, 0]) / d[2], roots[2], (R[1, 2] + R[2, 1]) / d[2]],
        [(R[1, 0] - R[0, 1]) / d[3], (R[0, 2] + R[2, 0]) / d[3], (R[1, 2] + R[2, 1]) / d[3], roots[3]],
    ])
    q = candidates[jnp.argmax(traces)]
    q = q / jnp.linalg.norm(q)
    return jnp.where(q[0] < 0.0, -q, q)


class Orientation:
    """Rotation from a target frame to a base frame.

    Immutable: every operation returns a new instance.  The frame names
    are informational labels; they are checked on composition and
    equality but carry no other meaning.

    Args:
        matrix: 3x3 rotation matrix mapping target-frame components to
            base-frame components.  Not validated; use
            :meth:`from_matrix` with ``validate=True`` to check SO(3).
        base_frame (str): Name of the base frame.
        target_frame (str): Name of the target frame.
    """

    __slots__ = ('_matrix', '_base_frame', '_target_frame')

    def __init__(self, matrix: ArrayLike, base_frame: str = "", target_frame: str = "") -> None:
        self._matrix = jnp.asarray(matrix, dtype=get_dtype())
        self._base_frame = base_frame
        self._target_frame = target_frame

    @classmethod
    def _from_internal(cls, matrix, base_frame, target_frame):
        """Create an Orientation from a raw array without conversion.

        Used by pytree unflatten.
        """
        obj = object.__new__(cls)
        obj._matrix = matrix
        obj._base_frame = base_frame
        obj._target_frame = target_frame
        return obj

    @classmethod
    def from_matrix(
        cls,
        matrix: ArrayLike,
        base_frame: str = "",
        target_frame: str = "",
        validate: bool = True,
    ) -> Orientation:
        """Create from a 3x3 matrix, optionally checking it is in SO(3).

        Raises:
            ValueError: If ``validate`` is set and the matrix is not a
                proper rotation.
        """
        orientation = cls(matrix, base_frame, target_frame)
        if validate:
            R = orientation._matrix
            orth_err = float(jnp.max(jnp.abs(R.T @ R - jnp.eye(3))))
            det = float(jnp.linalg.det(R))
            if orth_err > 1e3 * get_kinematics_tolerance() or det <= 0.0:
                raise ValueError(
                    f"Matrix is not a proper rotation matrix. det={det:.6f}"
                )
        return orientation

    @classmethod
    def from_quaternion(cls, q: ArrayLike, base_frame: str = "", target_frame: str = "") -> Orientation:
        """Create from a scalar-first quaternion ``[w, x, y, z]`` (normalized here)."""
        q = jnp.asarray(q, dtype=get_dtype())
        return cls(_matrix_from_quaternion(q / jnp.linalg.norm(q)), base_frame, target_frame)

    @classmethod
    def identity(cls, base_frame: str = "", target_frame: str = "") -> Orientation:
        """The identity rotation between two frames."""
        return cls(jnp.eye(3), base_frame, target_frame)

    @property
    def base_frame(self) -> str:
        return self._base_frame

    @property
    def target_frame(self) -> str:
        return self._target_frame

    def to_matrix(self) -> Array:
        """Return the 3x3 target-to-base matrix."""
        return self._matrix

    def to_quaternion(self) -> Array:
        """Return the scalar-first quaternion with non-negative scalar part."""
        return _quaternion_from_matrix(self._matrix)

    def inverse(self) -> Orientation:
        """Return the base-to-target rotation, with frame labels swapped."""
        return Orientation(self._matrix.T, self._target_frame, self._base_frame)

    def rotate(self, vector: ArrayLike) -> Array:
        """Express a target-frame vector in the base frame."""
        return self._matrix @ jnp.asarray(vector, dtype=self._matrix.dtype)

    def __matmul__(self, other: Orientation) -> Orientation:
        """Compose rotations: ``(A @ B).rotate(v) == A.rotate(B.rotate(v))``."""
        if not isinstance(other, Orientation):
            return NotImplemented
        if self._target_frame and other._base_frame and self._target_frame != other._base_frame:
            raise ValueError(
                f"Cannot compose rotation with target frame '{self._target_frame}' "
                f"and rotation with base frame '{other._base_frame}'"
            )
        return Orientation(self._matrix @ other._matrix, self._base_frame, other._target_frame)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Orientation):
            return NotImplemented
        if (self._base_frame, self._target_frame) != (other._base_frame, other._target_frame):
            return False
        q1 = self.to_quaternion()
        q2 = other.to_quaternion()
        # q and -q encode the same rotation
        err = jnp.minimum(jnp.max(jnp.abs(q1 - q2)), jnp.max(jnp.abs(q1 + q2)))
        return bool(err < 10.0 * get_kinematics_tolerance())

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Orientation):
            return NotImplemented
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self) -> str:
        q = [float(v) for v in self.to_quaternion()]
        return (f"Orientation(base_frame={self._base_frame!r}, "
                f"target_frame={self._target_frame!r}, quaternion={q})")


jax.tree_util.register_pytree_node(
    Orientation,
    lambda o: ((o._matrix,), (o._base_frame, o._target_frame)),
    lambda aux, children: Orientation._from_internal(children[0], *aux),
)


class AngularState(NamedTuple):
    """Full rotational state of a frame at one instant.

    Attributes:
        orientation: Rotation from the base (global) frame to the target
            (local) frame.
        orientation_derivative: Time derivative of
            ``orientation.to_matrix()``, shape ``(3, 3)``.
        angular_velocity: Angular velocity of the target frame with
            respect to the base frame, expressed in the base frame
            [rad/s], shape ``(3,)``.
    """

    orientation: Orientation
    orientation_derivative: Array
    angular_velocity: Array

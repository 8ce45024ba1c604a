"""Aerodynamic angles and the frames they relate.

The body orientation of an atmospheric vehicle is built up through a
chain of frames::

    inertial --(trajectory frame)--> trajectory --(bank)--> aerodynamic
             --(angle of attack, sideslip)--> body

The trajectory frame has its x-axis along the velocity, its z-axis in the
plane of position and velocity pointing toward the central body, and its
y-axis completing the right-handed triad.  With passive elementary
rotations ``R_i``, the trajectory-to-body rotation is::

    R_trajectory->body = R_y(alpha) R_z(-beta) R_x(sigma)

References:
    1. E. Mooij, *The Motion of a Vehicle in a Planetary Atmosphere*,
       Delft University Press, 1994.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from aerojax.attitude.orientation import Orientation, frame_rotation
from aerojax.config import get_dtype


class AerodynamicAngles(NamedTuple):
    """Aerodynamic orientation angles at one instant [rad].

    Attributes:
        angle_of_attack: Rotation about the body y-axis between the
            airspeed vector and the body x-axis.
        sideslip: Angle between the airspeed vector and the body x-z plane.
        bank: Rotation about the airspeed vector.
    """

    angle_of_attack: float
    sideslip: float = 0.0
    bank: float = 0.0


def rotation_trajectory_to_inertial(state: ArrayLike) -> Array:
    """Compute the rotation matrix from the trajectory frame to the inertial frame.

    The columns of the returned matrix are the trajectory-frame unit
    vectors expressed in inertial coordinates.

    Args:
        state: 6-element state ``[x, y, z, vx, vy, vz]`` of the vehicle
            relative to the central body.  Units: m, m/s.

    Returns:
        jax.Array: 3x3 rotation matrix (trajectory -> inertial).
    """
    state = jnp.asarray(state, dtype=get_dtype())
    r = state[:3]
    v = state[3:6]

    x_hat = v / jnp.linalg.norm(v)
    down = -(r - jnp.dot(r, x_hat) * x_hat)
    z_hat = down / jnp.linalg.norm(down)
    y_hat = jnp.cross(z_hat, x_hat)

    return jnp.column_stack([x_hat, y_hat, z_hat])


def rotation_trajectory_to_body(angles: AerodynamicAngles) -> Array:
    """Rotation matrix from the trajectory frame to the body frame.

    Args:
        angles: Angle of attack, sideslip and bank angle [rad].

    Returns:
        jax.Array: 3x3 rotation matrix (trajectory -> body).
    """
    return (frame_rotation(1, angles.angle_of_attack)
            @ frame_rotation(2, -angles.sideslip)
            @ frame_rotation(0, angles.bank))


def aerodynamic_angles_from_rotation(
    rotation_inertial_to_body: ArrayLike,
    rotation_trajectory_to_inertial: ArrayLike,
) -> AerodynamicAngles:
    """Recover the aerodynamic angles from a body orientation.

    Inverse of :func:`rotation_trajectory_to_body`: the product
    ``R_inertial->body R_trajectory->inertial`` is decomposed into angle of
    attack, sideslip and bank.  Sideslip is returned in ``[-pi/2, pi/2]``.

    Args:
        rotation_inertial_to_body: 3x3 rotation (inertial -> body).
        rotation_trajectory_to_inertial: 3x3 rotation (trajectory -> inertial).

    Returns:
        AerodynamicAngles: The angles reproducing the body orientation.
    """
    _float = get_dtype()
    M = (jnp.asarray(rotation_inertial_to_body, dtype=_float)
         @ jnp.asarray(rotation_trajectory_to_inertial, dtype=_float))

    angle_of_attack = jnp.arctan2(M[2, 0], M[0, 0])
    sideslip = jnp.arcsin(jnp.clip(M[1, 0], -1.0, 1.0))
    bank = jnp.arctan2(M[1, 2], M[1, 1])
    return AerodynamicAngles(float(angle_of_attack), float(sideslip), float(bank))


class AerodynamicAngleCalculator:
    """Converts aerodynamic angles into a body orientation.

    Holds the function giving the current trajectory frame, which in a
    propagation depends on the vehicle's state relative to the central
    body.  The angles themselves are supplied per call, so the calculator
    has no state of its own.

    Args:
        trajectory_to_inertial_function: ``f(t) -> R`` returning the 3x3
            trajectory-to-inertial rotation at time *t*.  Use
            :func:`rotation_trajectory_to_inertial` on the current state to
            build it.
        inertial_frame (str): Name of the inertial (base) frame.
        body_frame (str): Name of the body (target) frame.

    Examples:
        ```python
        import jax.numpy as jnp
        from aerojax.reference_frames import (
            AerodynamicAngleCalculator, AerodynamicAngles, rotation_trajectory_to_inertial,
        )
        state = jnp.array([6478e3, 0.0, 0.0, 0.0, 7500.0, 0.0])
        calculator = AerodynamicAngleCalculator(lambda t: rotation_trajectory_to_inertial(state))
        orientation = calculator.rotation_body_to_inertial(0.0, AerodynamicAngles(0.2))
        ```
    """

    def __init__(
        self,
        trajectory_to_inertial_function: Callable[[float], ArrayLike],
        inertial_frame: str = "inertial",
        body_frame: str = "body",
    ) -> None:
        self._trajectory_to_inertial_function = trajectory_to_inertial_function
        self._inertial_frame = inertial_frame
        self._body_frame = body_frame

    @property
    def inertial_frame(self) -> str:
        return self._inertial_frame

    @property
    def body_frame(self) -> str:
        return self._body_frame

    def trajectory_to_inertial(self, t: float) -> Array:
        """Current trajectory-to-inertial rotation matrix."""
        return jnp.asarray(self._trajectory_to_inertial_function(t), dtype=get_dtype())

    def rotation_body_to_inertial(self, t: float, angles: AerodynamicAngles) -> Orientation:
        """Body orientation for the given angles and the current trajectory frame.

        Args:
            t (float): Time at which the trajectory frame is evaluated.
            angles: Aerodynamic angles at *t*.

        Returns:
            Orientation: Body-to-inertial rotation.
        """
        matrix = self.trajectory_to_inertial(t) @ rotation_trajectory_to_body(angles).T
        return Orientation(matrix, self._inertial_frame, self._body_frame)

    def angles_from_orientation(self, t: float, body_to_inertial: Orientation) -> AerodynamicAngles:
        """Aerodynamic angles consistent with an imposed body orientation."""
        return aerodynamic_angles_from_rotation(
            body_to_inertial.inverse().to_matrix(), self.trajectory_to_inertial(t)
        )

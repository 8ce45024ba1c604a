"""Time-dependent rotation between a base frame and a target frame.

:class:`RotationalModel` is the abstract provider queried by the
propagation loop.  Every query exists in two forms:

- ``rotation_to_base_frame(t)`` etc. take plain float seconds since the
  model's reference time;
- ``rotation_to_base_frame_extended(time)`` etc. take an
  :class:`~aerojax.time.ExtendedTime`.

By default the extended entry points convert to seconds since the
reference time and delegate to the float versions.  Subclasses that can
exploit the split representation override them.

Two concrete providers are included: :class:`ConstantRotationalModel`
and :class:`UniformRotationalModel` (steady spin about the target z-axis,
e.g. a central body's body-fixed frame).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from aerojax.attitude.kinematics import angular_velocity_from_rotation_and_derivative
from aerojax.attitude.orientation import AngularState, Orientation, frame_rotation
from aerojax.config import get_dtype
from aerojax.time import ExtendedTime


class RotationalModel(ABC):
    """Abstract time -> orientation provider.

    Subclasses implement :meth:`rotation_to_base_frame` and
    :meth:`rotation_derivative_to_base_frame`.  The target-frame queries
    are derived from them, which guarantees
    ``rotation_to_target_frame(t) == rotation_to_base_frame(t).inverse()``.

    Args:
        base_frame (str): Name of the base (global) frame.
        target_frame (str): Name of the target (local) frame.
        reference_time (ExtendedTime | None): Instant that float times are
            measured from.  Defaults to ``ExtendedTime(0, 0.0)``.
    """

    def __init__(
        self,
        base_frame: str,
        target_frame: str,
        reference_time: ExtendedTime | None = None,
    ) -> None:
        self._base_frame = base_frame
        self._target_frame = target_frame
        self._reference_time = reference_time if reference_time is not None else ExtendedTime()

    @property
    def base_frame(self) -> str:
        return self._base_frame

    @property
    def target_frame(self) -> str:
        return self._target_frame

    @property
    def reference_time(self) -> ExtendedTime:
        return self._reference_time

    def seconds_since_reference(self, time: ExtendedTime) -> float:
        """Convert an extended time to float seconds since the reference."""
        return float(time - self._reference_time)

    # Float-seconds entry points

    @abstractmethod
    def rotation_to_base_frame(self, t: float) -> Orientation:
        """Rotation from the target frame to the base frame at *t*."""

    def rotation_to_target_frame(self, t: float) -> Orientation:
        """Rotation from the base frame to the target frame at *t*."""
        return self.rotation_to_base_frame(t).inverse()

    @abstractmethod
    def rotation_derivative_to_base_frame(self, t: float) -> Array:
        """Time derivative of the target-to-base rotation matrix at *t*."""

    def rotation_derivative_to_target_frame(self, t: float) -> Array:
        """Time derivative of the base-to-target rotation matrix at *t*."""
        return self.rotation_derivative_to_base_frame(t).T

    def full_rotational_state(self, t: float) -> AngularState:
        """Orientation to the target frame, its derivative and angular velocity.

        The angular velocity (target w.r.t. base, in the base frame) is
        derived from the other two quantities, so the three are always
        mutually consistent.

        Args:
            t (float): Seconds since the reference time.

        Returns:
            AngularState: Rotational state at *t*.
        """
        to_target = self.rotation_to_target_frame(t)
        derivative = self.rotation_derivative_to_target_frame(t)
        angular_velocity = angular_velocity_from_rotation_and_derivative(
            to_target.inverse().to_matrix(), derivative.T
        )
        return AngularState(to_target, derivative, angular_velocity)

    # ExtendedTime entry points

    def rotation_to_base_frame_extended(self, time: ExtendedTime) -> Orientation:
        return self.rotation_to_base_frame(self.seconds_since_reference(time))

    def rotation_to_target_frame_extended(self, time: ExtendedTime) -> Orientation:
        return self.rotation_to_target_frame(self.seconds_since_reference(time))

    def rotation_derivative_to_base_frame_extended(self, time: ExtendedTime) -> Array:
        return self.rotation_derivative_to_base_frame(self.seconds_since_reference(time))

    def rotation_derivative_to_target_frame_extended(self, time: ExtendedTime) -> Array:
        return self.rotation_derivative_to_target_frame(self.seconds_since_reference(time))

    def full_rotational_state_extended(self, time: ExtendedTime) -> AngularState:
        return self.full_rotational_state(self.seconds_since_reference(time))


class ConstantRotationalModel(RotationalModel):
    """Time-invariant rotation.

    Args:
        rotation_to_base: 3x3 target-to-base rotation matrix.
        base_frame (str): Name of the base frame.
        target_frame (str): Name of the target frame.
    """

    def __init__(
        self,
        rotation_to_base: ArrayLike,
        base_frame: str,
        target_frame: str,
        reference_time: ExtendedTime | None = None,
    ) -> None:
        super().__init__(base_frame, target_frame, reference_time)
        self._orientation = Orientation.from_matrix(rotation_to_base, base_frame, target_frame)

    def rotation_to_base_frame(self, t: float) -> Orientation:
        return self._orientation

    def rotation_derivative_to_base_frame(self, t: float) -> Array:
        return jnp.zeros((3, 3), dtype=get_dtype())


class UniformRotationalModel(RotationalModel):
    """Steady rotation about the target frame's z-axis.

    The rotation to the target frame is ``Rz(theta_0 + rate * t) @ R_0``,
    where ``R_0`` is the rotation to the target frame at ``t = 0``.

    Args:
        initial_rotation_to_target: 3x3 base-to-target rotation ``R_0``.
        rotation_rate (float): Spin rate about the target z-axis [rad/s].
        base_frame (str): Name of the base frame.
        target_frame (str): Name of the target frame.
        initial_phase (float): Additional z-rotation at ``t = 0`` [rad].
        reference_time (ExtendedTime | None): Reference for float times.

    Examples:
        ```python
        import jax.numpy as jnp
        from aerojax.ephemerides import UniformRotationalModel
        from aerojax.time import ExtendedTime
        earth = UniformRotationalModel(jnp.eye(3), 7.2921159e-5, "J2000", "IAU_Earth")
        earth.rotation_to_target_frame(3600.0)
        earth.rotation_to_target_frame_extended(ExtendedTime(1, 0.0))  # same instant
        ```
    """

    def __init__(
        self,
        initial_rotation_to_target: ArrayLike,
        rotation_rate: float,
        base_frame: str,
        target_frame: str,
        initial_phase: float = 0.0,
        reference_time: ExtendedTime | None = None,
    ) -> None:
        super().__init__(base_frame, target_frame, reference_time)
        self._initial_rotation = Orientation.from_matrix(
            initial_rotation_to_target, target_frame, base_frame
        ).to_matrix()
        self._rotation_rate = float(rotation_rate)
        self._initial_phase = float(initial_phase)

    @property
    def rotation_rate(self) -> float:
        return self._rotation_rate

    def _phase(self, t: float) -> float:
        return self._initial_phase + self._rotation_rate * t

    def rotation_to_base_frame(self, t: float) -> Orientation:
        to_target = frame_rotation(2, self._phase(t)) @ self._initial_rotation
        return Orientation(to_target.T, self._base_frame, self._target_frame)

    def rotation_derivative_to_base_frame(self, t: float) -> Array:
        phase = self._phase(t)
        c = jnp.cos(phase)
        s = jnp.sin(phase)
        d_rz = jnp.array([
            [-s,    c,  0.0],
            [-c,   -s,  0.0],
            [0.0, 0.0,  0.0],
        ])
        return (self._rotation_rate * d_rz @ self._initial_rotation).T

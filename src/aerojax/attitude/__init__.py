"""Orientation values and frame kinematics.

- :class:`Orientation` -- immutable rotation between two named frames
- :class:`AngularState` -- orientation, its derivative and angular velocity
- :func:`frame_rotation` -- elementary single-axis frame rotation
- Kinematic identities between rotation derivatives and angular velocity
"""

from .kinematics import (
    angular_velocity_from_rotation_and_derivative,
    rotation_derivative_from_angular_velocity,
    skew_symmetric,
)
from .orientation import AngularState, Orientation, frame_rotation

__all__ = [
    "Orientation",
    "AngularState",
    "frame_rotation",
    "skew_symmetric",
    "angular_velocity_from_rotation_and_derivative",
    "rotation_derivative_from_angular_velocity",
]

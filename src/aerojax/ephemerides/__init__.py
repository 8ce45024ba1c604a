"""Rotational models: time-dependent rotations between named frames.

- :class:`RotationalModel` -- abstract provider with float-second and
  extended-time entry points
- :class:`ConstantRotationalModel`, :class:`UniformRotationalModel`
- :class:`AerodynamicAngleRotationalModel` -- body orientation from
  late-bound aerodynamic angles
"""

from .aerodynamic_angle_model import AerodynamicAngleRotationalModel, ClosureState
from .rotational_model import ConstantRotationalModel, RotationalModel, UniformRotationalModel

__all__ = [
    "RotationalModel",
    "ConstantRotationalModel",
    "UniformRotationalModel",
    "AerodynamicAngleRotationalModel",
    "ClosureState",
]

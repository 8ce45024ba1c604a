"""Reference frames tied to a vehicle's flight through an atmosphere.

Provides the :class:`AerodynamicAngles` value, the trajectory frame, and
the :class:`AerodynamicAngleCalculator` that turns aerodynamic angles into
a body orientation.
"""

from .aerodynamic_angles import (
    AerodynamicAngleCalculator,
    AerodynamicAngles,
    aerodynamic_angles_from_rotation,
    rotation_trajectory_to_body,
    rotation_trajectory_to_inertial,
)

__all__ = [
    "AerodynamicAngles",
    "AerodynamicAngleCalculator",
    "aerodynamic_angles_from_rotation",
    "rotation_trajectory_to_body",
    "rotation_trajectory_to_inertial",
]

"""
aerojax is a library for the aerodynamic attitude and trim of atmospheric flight vehicles, implemented in JAX.
"""

from .config import set_dtype, get_dtype, get_kinematics_tolerance
from .time import ExtendedTime

from .errors import (
    AerojaxError,
    ClosureNotReadyError,
    UnsupportedOperationError,
    InconsistentIndependentVariablesError,
    UnsupportedDimensionalityError,
    SettingsTypeMismatchError,
    DimensionalityMismatchError,
    TrimNotFoundError,
)

from .attitude import (
    Orientation,
    AngularState,
    frame_rotation,
    skew_symmetric,
    angular_velocity_from_rotation_and_derivative,
    rotation_derivative_from_angular_velocity,
)

from .reference_frames import (
    AerodynamicAngles,
    AerodynamicAngleCalculator,
    aerodynamic_angles_from_rotation,
    rotation_trajectory_to_inertial,
)

from .ephemerides import (
    RotationalModel,
    ConstantRotationalModel,
    UniformRotationalModel,
    AerodynamicAngleRotationalModel,
    ClosureState,
)

from .coefficients import (
    AerodynamicCoefficientIndependentVariable,
    AerodynamicCoefficients,
    AerodynamicCoefficientSettings,
    AerodynamicCoefficientModel,
    create_coefficient_model,
    merge_coefficient_tables,
    merge_axis_tables,
    read_tabulated_coefficients_from_files,
)

from .trim import TrimSettings, TrimOrientationCalculator

from .flight_conditions import FlightConditions, set_trimmed_conditions

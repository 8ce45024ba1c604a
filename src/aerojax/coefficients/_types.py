"""Type definitions for aerodynamic coefficient models.

- :class:`ScalarTable`: N-dimensional grid of scalar values for a single
  coefficient component (e.g. ``C_D``).
- :class:`CoefficientTable`: N-dimensional grid of 3-vector coefficients,
  the merged form of three :class:`ScalarTable` objects.
- :class:`AerodynamicCoefficients`: force and moment coefficient vectors
  returned by a model evaluation.
- :class:`AerodynamicCoefficientType` and
  :class:`AerodynamicCoefficientIndependentVariable`: the tags used by the
  settings and the factory.

The table types are :class:`~typing.NamedTuple` objects, so JAX treats them
as pytrees and they can be passed straight into jitted interpolators.
"""

from __future__ import annotations

import enum
from typing import NamedTuple

from jax import Array


class AerodynamicCoefficientType(enum.Enum):
    """Kind of coefficient model described by a settings object."""

    CONSTANT = "constant"
    TABULATED = "tabulated"


class AerodynamicCoefficientIndependentVariable(enum.Enum):
    """Physical parameter a coefficient table is tabulated against."""

    MACH_NUMBER = "mach_number"
    ANGLE_OF_ATTACK = "angle_of_attack"
    ANGLE_OF_SIDESLIP = "angle_of_sideslip"
    ALTITUDE = "altitude"
    TIME = "time"
    CONTROL_SURFACE_DEFLECTION = "control_surface_deflection"
    UNDEFINED = "undefined"


class ScalarTable(NamedTuple):
    """Grid of scalar values with one breakpoint array per dimension.

    Attributes:
        values: Grid values, shape ``(n_1, ..., n_N)``.
        breakpoints: Tuple of N strictly increasing 1-D arrays, the i-th of
            length ``n_i``.
    """

    values: Array
    breakpoints: tuple[Array, ...]

    @property
    def dimensionality(self) -> int:
        return len(self.breakpoints)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.values.shape)


class CoefficientTable(NamedTuple):
    """Grid of 3-vector coefficients with one breakpoint array per dimension.

    Attributes:
        values: Grid values, shape ``(n_1, ..., n_N, 3)``.
        breakpoints: Tuple of N strictly increasing 1-D arrays.
    """

    values: Array
    breakpoints: tuple[Array, ...]

    @property
    def dimensionality(self) -> int:
        return len(self.breakpoints)

    @property
    def grid_shape(self) -> tuple[int, ...]:
        return tuple(self.values.shape[:-1])


class AerodynamicCoefficients(NamedTuple):
    """Force and moment coefficients at one flight condition.

    Attributes:
        force: Force coefficients, shape ``(3,)``.
        moment: Moment coefficients, shape ``(3,)``.  Index 1 is the
            pitching-moment coefficient ``C_m``.
    """

    force: Array
    moment: Array

"""Aerodynamic coefficient models.

A coefficient model maps an ordered list of independent variable values
(Mach number, angle of attack, ...) to force and moment coefficient
vectors.  The order is fixed by the model's ``independent_variables``.

Models may own named control-surface increment models.  Their increments
are added to the baseline by :meth:`AerodynamicCoefficientModel.evaluate_with_control_surfaces`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from aerojax.coefficients._types import (
    AerodynamicCoefficientIndependentVariable,
    AerodynamicCoefficients,
    AerodynamicCoefficientType,
    CoefficientTable,
)
from aerojax.coefficients.config import ReferenceQuantities
from aerojax.coefficients.interpolation import interpolate_multilinear
from aerojax.coefficients.tables import compare_independent_variables
from aerojax.config import get_dtype
from aerojax.errors import DimensionalityMismatchError, InconsistentIndependentVariablesError

Interpolator = Callable[[tuple[Array, ...], Array, Array], Array]


class AerodynamicCoefficientModel(ABC):
    """Base class of all coefficient models.

    Args:
        independent_variables: Meaning of each entry of the input vector.
        reference: Reference quantities and frame conventions.
    """

    coefficient_type: AerodynamicCoefficientType

    def __init__(
        self,
        independent_variables: Sequence[AerodynamicCoefficientIndependentVariable],
        reference: ReferenceQuantities | None = None,
    ) -> None:
        self._independent_variables = tuple(independent_variables)
        self._reference = reference if reference is not None else ReferenceQuantities()
        self._control_surface_increments: dict[str, AerodynamicCoefficientModel] = {}

    @property
    def independent_variables(self) -> tuple[AerodynamicCoefficientIndependentVariable, ...]:
        return self._independent_variables

    @property
    def dimensionality(self) -> int:
        return len(self._independent_variables)

    @property
    def reference(self) -> ReferenceQuantities:
        return self._reference

    @property
    def control_surface_increments(self) -> Mapping[str, AerodynamicCoefficientModel]:
        return MappingProxyType(self._control_surface_increments)

    def index_of(self, variable: AerodynamicCoefficientIndependentVariable) -> int | None:
        """Position of *variable* in the input vector, or ``None`` if absent."""
        try:
            return self._independent_variables.index(variable)
        except ValueError:
            return None

    def set_control_surface_increments(
        self,
        increments: Mapping[str, AerodynamicCoefficientModel],
    ) -> None:
        """Attach increment models, replacing any previously attached."""
        self._control_surface_increments = dict(increments)

    @abstractmethod
    def _evaluate(self, point: Array) -> AerodynamicCoefficients:
        """Evaluate at a validated input vector."""

    def evaluate(self, independent_variables: ArrayLike) -> AerodynamicCoefficients:
        """Force and moment coefficients at the given flight condition.

        Args:
            independent_variables: Values ordered as
                :attr:`independent_variables`.

        Returns:
            AerodynamicCoefficients: Force and moment coefficient vectors.

        Raises:
            DimensionalityMismatchError: If the values are not a flat
                sequence or their number differs from :attr:`dimensionality`.
        """
        point = jnp.atleast_1d(jnp.asarray(independent_variables, dtype=get_dtype()))
        if point.ndim != 1:
            raise DimensionalityMismatchError(self.dimensionality, tuple(point.shape))
        if point.shape[0] != self.dimensionality:
            raise DimensionalityMismatchError(self.dimensionality, point.shape[0])
        return self._evaluate(point)

    def evaluate_control_surface_increment(
        self,
        name: str,
        independent_variables: ArrayLike,
    ) -> AerodynamicCoefficients:
        """Coefficient increment of one control surface.

        Raises:
            KeyError: If no increment model named *name* is attached.
        """
        if name not in self._control_surface_increments:
            raise KeyError(f"No control surface increment model named '{name}'")
        return self._control_surface_increments[name].evaluate(independent_variables)

    def evaluate_with_control_surfaces(
        self,
        independent_variables: ArrayLike,
        control_surface_variables: Mapping[str, ArrayLike] | None = None,
    ) -> AerodynamicCoefficients:
        """Baseline coefficients plus the increments of the given control surfaces.

        Args:
            independent_variables: Inputs of the baseline model.
            control_surface_variables: Inputs of each increment model, by
                control surface name.  Surfaces not listed contribute nothing.

        Returns:
            AerodynamicCoefficients: Summed force and moment coefficients.
        """
        force, moment = self.evaluate(independent_variables)
        for name, variables in (control_surface_variables or {}).items():
            increment = self.evaluate_control_surface_increment(name, variables)
            force = force + increment.force
            moment = moment + increment.moment
        return AerodynamicCoefficients(force, moment)


class ConstantCoefficientModel(AerodynamicCoefficientModel):
    """Model returning the same coefficients for every input.

    Args:
        force: Force coefficients.
        moment: Moment coefficients.
        reference: Reference quantities and frame conventions.
        independent_variables: Declared inputs, ignored by the evaluation.
    """

    coefficient_type = AerodynamicCoefficientType.CONSTANT

    def __init__(
        self,
        force: ArrayLike,
        moment: ArrayLike = (0.0, 0.0, 0.0),
        reference: ReferenceQuantities | None = None,
        independent_variables: Sequence[AerodynamicCoefficientIndependentVariable] = (),
    ) -> None:
        super().__init__(independent_variables, reference)
        _float = get_dtype()
        self._coefficients = AerodynamicCoefficients(
            jnp.asarray(force, dtype=_float), jnp.asarray(moment, dtype=_float)
        )

    def _evaluate(self, point: Array) -> AerodynamicCoefficients:
        return self._coefficients


class TabulatedCoefficientModel(AerodynamicCoefficientModel):
    """Model interpolating force and moment coefficient tables.

    Args:
        force_table: Table of force coefficient vectors.
        moment_table: Table of moment coefficient vectors on the same grid.
        independent_variables: Meaning of each table dimension.
        reference: Reference quantities and frame conventions.
        interpolator: ``f(breakpoints, values, point) -> vector``.  Defaults
            to :func:`~aerojax.coefficients.interpolation.interpolate_multilinear`.

    Raises:
        InconsistentIndependentVariablesError: If the tables and the
            independent variables do not describe the same grid.
    """

    coefficient_type = AerodynamicCoefficientType.TABULATED

    def __init__(
        self,
        force_table: CoefficientTable,
        moment_table: CoefficientTable,
        independent_variables: Sequence[AerodynamicCoefficientIndependentVariable],
        reference: ReferenceQuantities | None = None,
        interpolator: Interpolator = interpolate_multilinear,
    ) -> None:
        super().__init__(independent_variables, reference)
        if force_table.dimensionality != self.dimensionality:
            raise InconsistentIndependentVariablesError(
                f"{self.dimensionality} independent variables given for a "
                f"{force_table.dimensionality}-dimensional coefficient table"
            )
        if not (force_table.grid_shape == moment_table.grid_shape
                and compare_independent_variables(force_table.breakpoints, moment_table.breakpoints)):
            raise InconsistentIndependentVariablesError(
                "Force and moment coefficient tables are defined on different grids"
            )
        self._force_table = force_table
        self._moment_table = moment_table
        self._interpolator = interpolator

    @property
    def force_table(self) -> CoefficientTable:
        return self._force_table

    @property
    def moment_table(self) -> CoefficientTable:
        return self._moment_table

    @property
    def interpolator(self) -> Interpolator:
        return self._interpolator

    def _evaluate(self, point: Array) -> AerodynamicCoefficients:
        force = self._interpolator(self._force_table.breakpoints, self._force_table.values, point)
        moment = self._interpolator(self._moment_table.breakpoints, self._moment_table.values, point)
        return AerodynamicCoefficients(force, moment)

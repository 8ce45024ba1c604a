"""Settings dataclasses for aerodynamic coefficient models.

:class:`AerodynamicCoefficientSettings` is a tagged variant: the
``coefficient_type`` tag selects the builder used by
:func:`~aerojax.coefficients.factory.create_coefficient_model`, and the
``coefficients`` payload must be the matching type.  A mismatch is rejected
when the settings are constructed, so the factory never has to inspect
payload types.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from aerojax.coefficients._types import (
    AerodynamicCoefficientIndependentVariable,
    AerodynamicCoefficientType,
    CoefficientTable,
)
from aerojax.coefficients.tables import compare_independent_variables
from aerojax.errors import InconsistentIndependentVariablesError, SettingsTypeMismatchError


@dataclass(frozen=True)
class ReferenceQuantities:
    """Quantities used to dimensionalize the coefficients.

    Args:
        reference_area: Reference area [m^2].
        reference_length: Longitudinal reference length [m].
        lateral_reference_length: Lateral reference length [m].
        moment_reference_point: Point about which moment coefficients are
            given, in the body frame [m].
        coefficients_in_aerodynamic_frame: If ``True`` the force
            coefficients are given in the aerodynamic frame (drag, side,
            lift), otherwise in the body frame.
        coefficients_in_negative_axis_direction: If ``True`` positive force
            coefficients point along the negative frame axes.
    """

    reference_area: float = 1.0
    reference_length: float = 1.0
    lateral_reference_length: float = 1.0
    moment_reference_point: tuple[float, float, float] = (0.0, 0.0, 0.0)
    coefficients_in_aerodynamic_frame: bool = True
    coefficients_in_negative_axis_direction: bool = True

    def __post_init__(self) -> None:
        if self.reference_area <= 0.0:
            raise ValueError(f"reference_area must be positive, got {self.reference_area}")
        if self.reference_length <= 0.0 or self.lateral_reference_length <= 0.0:
            raise ValueError(
                f"Reference lengths must be positive, got {self.reference_length} "
                f"and {self.lateral_reference_length}"
            )
        if len(self.moment_reference_point) != 3:
            raise ValueError(
                f"moment_reference_point must have 3 components, "
                f"got {len(self.moment_reference_point)}"
            )


@dataclass(frozen=True)
class ConstantCoefficients:
    """Coefficients independent of the flight condition.

    Args:
        force: Force coefficients (3 components).
        moment: Moment coefficients (3 components).
    """

    force: tuple[float, float, float]
    moment: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if len(self.force) != 3 or len(self.moment) != 3:
            raise ValueError(
                f"Constant coefficients need 3 force and 3 moment components, "
                f"got {len(self.force)} and {len(self.moment)}"
            )


@dataclass(frozen=True)
class TabulatedCoefficients:
    """Coefficients tabulated on an N-dimensional grid.

    Args:
        force_table: Table of force coefficient vectors.
        independent_variables: Physical meaning of each table dimension,
            in table order.
        moment_table: Table of moment coefficient vectors on the same grid.
            ``None`` means zero moments.
    """

    force_table: CoefficientTable
    independent_variables: tuple[AerodynamicCoefficientIndependentVariable, ...]
    moment_table: CoefficientTable | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "independent_variables", tuple(self.independent_variables))
        if len(self.independent_variables) != self.force_table.dimensionality:
            raise InconsistentIndependentVariablesError(
                f"{len(self.independent_variables)} independent variables given for a "
                f"{self.force_table.dimensionality}-dimensional coefficient table"
            )
        if self.moment_table is not None and not (
            self.moment_table.grid_shape == self.force_table.grid_shape
            and compare_independent_variables(self.moment_table.breakpoints,
                                              self.force_table.breakpoints)
        ):
            raise InconsistentIndependentVariablesError(
                "Force and moment coefficient tables are defined on different grids"
            )

    @property
    def dimensionality(self) -> int:
        return len(self.independent_variables)


_PAYLOAD_TYPES = {
    AerodynamicCoefficientType.CONSTANT: ConstantCoefficients,
    AerodynamicCoefficientType.TABULATED: TabulatedCoefficients,
}


def _check_payload(coefficient_type: AerodynamicCoefficientType, coefficients, context: str) -> None:
    expected = _PAYLOAD_TYPES[coefficient_type]
    if not isinstance(coefficients, expected):
        raise SettingsTypeMismatchError(expected.__name__, type(coefficients).__name__, context)


@dataclass(frozen=True)
class ControlSurfaceIncrementSettings:
    """Coefficient increments caused by deflecting one control surface.

    Args:
        coefficient_type: Kind of increment model.
        coefficients: Payload matching *coefficient_type*.
    """

    coefficient_type: AerodynamicCoefficientType
    coefficients: ConstantCoefficients | TabulatedCoefficients

    def __post_init__(self) -> None:
        _check_payload(self.coefficient_type, self.coefficients, "control surface increment")


@dataclass(frozen=True)
class AerodynamicCoefficientSettings:
    """Settings from which a coefficient model is created.

    Args:
        coefficient_type: Kind of model to create.
        coefficients: Payload matching *coefficient_type*.
        reference: Reference quantities and frame conventions.
        control_surface_settings: Increment settings per control surface
            name.

    Raises:
        SettingsTypeMismatchError: If *coefficients* does not match
            *coefficient_type*.

    Examples:
        ```python
        from aerojax.coefficients import AerodynamicCoefficientSettings
        settings = AerodynamicCoefficientSettings.constant(force=(1.2, 0.0, 0.3))
        settings.coefficient_type
        ```
    """

    coefficient_type: AerodynamicCoefficientType
    coefficients: ConstantCoefficients | TabulatedCoefficients
    reference: ReferenceQuantities = field(default_factory=ReferenceQuantities)
    control_surface_settings: Mapping[str, ControlSurfaceIncrementSettings] = field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        _check_payload(self.coefficient_type, self.coefficients, "aerodynamic coefficients")

    @staticmethod
    def constant(
        force: Sequence[float],
        moment: Sequence[float] = (0.0, 0.0, 0.0),
        reference: ReferenceQuantities | None = None,
    ) -> AerodynamicCoefficientSettings:
        """Preset: constant force and moment coefficients.

        Args:
            force: Force coefficients.
            moment: Moment coefficients.
            reference: Reference quantities; defaults to unit values.

        Returns:
            AerodynamicCoefficientSettings: Constant-coefficient settings.
        """
        return AerodynamicCoefficientSettings(
            AerodynamicCoefficientType.CONSTANT,
            ConstantCoefficients(tuple(force), tuple(moment)),
            reference if reference is not None else ReferenceQuantities(),
        )

    @staticmethod
    def tabulated(
        force_table: CoefficientTable,
        independent_variables: Sequence[AerodynamicCoefficientIndependentVariable],
        moment_table: CoefficientTable | None = None,
        reference: ReferenceQuantities | None = None,
        control_surface_settings: Mapping[str, ControlSurfaceIncrementSettings] | None = None,
    ) -> AerodynamicCoefficientSettings:
        """Preset: tabulated force and moment coefficients.

        Args:
            force_table: Table of force coefficient vectors.
            independent_variables: Meaning of each table dimension.
            moment_table: Table of moment coefficient vectors, or ``None``.
            reference: Reference quantities; defaults to unit values.
            control_surface_settings: Increment settings per control surface.

        Returns:
            AerodynamicCoefficientSettings: Tabulated-coefficient settings.
        """
        return AerodynamicCoefficientSettings(
            AerodynamicCoefficientType.TABULATED,
            TabulatedCoefficients(force_table, tuple(independent_variables), moment_table),
            reference if reference is not None else ReferenceQuantities(),
            dict(control_surface_settings or {}),
        )

"""Flight conditions: the inputs of a vehicle's coefficient model.

:class:`FlightConditions` assembles, at each time, the independent
variables of an aerodynamic coefficient model.  Non-angle variables
(Mach number, altitude, ...) come from user-supplied functions of time;
the angle of attack and sideslip come from the vehicle's
:class:`~aerojax.ephemerides.AerodynamicAngleRotationalModel`.

When the vehicle is trimmed (:func:`set_trimmed_conditions`), the angle
source of that orientation model needs the non-angle variables to solve
for the angle of attack.  :meth:`FlightConditions.update` therefore
evaluates and stores the non-angle variables first, then queries the
angles.  The trim solver only reads the stored values, so the update runs
once per time value and never calls back into itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from aerojax.coefficients._types import (
    AerodynamicCoefficientIndependentVariable,
    AerodynamicCoefficients,
)
from aerojax.coefficients.models import AerodynamicCoefficientModel
from aerojax.ephemerides.aerodynamic_angle_model import AerodynamicAngleRotationalModel
from aerojax.reference_frames.aerodynamic_angles import AerodynamicAngles
from aerojax.trim.config import TrimSettings
from aerojax.trim.trim_orientation import TrimOrientationCalculator

logger = logging.getLogger(__name__)

Var = AerodynamicCoefficientIndependentVariable

_ANGLE_VARIABLES = (Var.ANGLE_OF_ATTACK, Var.ANGLE_OF_SIDESLIP)


def _angle_value(variable: AerodynamicCoefficientIndependentVariable, angles: AerodynamicAngles) -> float:
    if variable is Var.ANGLE_OF_ATTACK:
        return angles.angle_of_attack
    return angles.sideslip


class FlightConditions:
    """Current independent variables and coefficients of one vehicle.

    Args:
        coefficient_model: The vehicle's coefficient model.
        orientation_model: Supplies the aerodynamic angles.
        variable_functions: ``f(t) -> value`` for each non-angle independent
            variable used by the model or its increments.  ``TIME`` needs no
            function; it is the update time itself.
        control_surface_deflection_function: ``f(name, t) -> deflection``
            [rad], required when an increment model depends on
            ``CONTROL_SURFACE_DEFLECTION``.

    Raises:
        ValueError: If an independent variable of the model has no source.

    Examples:
        ```python
        from aerojax.coefficients import AerodynamicCoefficientIndependentVariable as Var
        from aerojax.flight_conditions import FlightConditions

        conditions = FlightConditions(model, orientation_model, {Var.MACH_NUMBER: mach_of_t})
        conditions.update(10.0)
        conditions.current_coefficients()
        ```
    """

    def __init__(
        self,
        coefficient_model: AerodynamicCoefficientModel,
        orientation_model: AerodynamicAngleRotationalModel,
        variable_functions: Mapping[AerodynamicCoefficientIndependentVariable, Callable[[float], float]] | None = None,
        control_surface_deflection_function: Callable[[str, float], float] | None = None,
    ) -> None:
        self._orientation_model = orientation_model
        self._variable_functions = dict(variable_functions or {})
        self._control_surface_deflection_function = control_surface_deflection_function
        self._trim_calculator: TrimOrientationCalculator | None = None

        self._check_variable_sources(coefficient_model)
        self._coefficient_model = coefficient_model

        self._current_time: float | None = None
        self._current_independent_variables: list[float] | None = None
        self._current_control_surface_variables: dict[str, list[float]] = {}
        self._untrimmed_independent_variables: list[float] | None = None
        self._untrimmed_control_surface_variables: dict[str, list[float]] = {}

    def _check_variable_sources(self, model: AerodynamicCoefficientModel) -> None:
        required = [(variable, "") for variable in model.independent_variables]
        for name, increment in model.control_surface_increments.items():
            required.extend((variable, name) for variable in increment.independent_variables)

        for variable, surface in required:
            if variable in _ANGLE_VARIABLES or variable is Var.TIME:
                continue
            if variable is Var.CONTROL_SURFACE_DEFLECTION:
                if not surface:
                    raise ValueError(
                        "Control surface deflection can only be used by control surface "
                        "increment models"
                    )
                if self._control_surface_deflection_function is None:
                    raise ValueError(
                        f"No control surface deflection function for surface '{surface}'"
                    )
                continue
            if variable not in self._variable_functions:
                raise ValueError(f"No function given for independent variable {variable.name}")

    @property
    def coefficient_model(self) -> AerodynamicCoefficientModel:
        return self._coefficient_model

    @property
    def orientation_model(self) -> AerodynamicAngleRotationalModel:
        return self._orientation_model

    @property
    def current_time(self) -> float | None:
        return self._current_time

    @property
    def current_independent_variables(self) -> list[float] | None:
        if self._current_independent_variables is None:
            return None
        return list(self._current_independent_variables)

    @property
    def current_control_surface_variables(self) -> dict[str, list[float]]:
        return {name: list(v) for name, v in self._current_control_surface_variables.items()}

    def untrimmed_independent_variables(self) -> list[float]:
        """Independent variables with fresh non-angle values.

        Angle entries hold the values of the previous update, or zero
        before the first update.
        """
        if self._untrimmed_independent_variables is None:
            return [0.0] * self._coefficient_model.dimensionality
        return list(self._untrimmed_independent_variables)

    def untrimmed_control_surface_variables(self) -> dict[str, list[float]]:
        """Increment-model variables with fresh non-angle values."""
        return {name: list(v) for name, v in self._untrimmed_control_surface_variables.items()}

    def _non_angle_values(
        self,
        variables: Sequence[AerodynamicCoefficientIndependentVariable],
        t: float,
        previous: Sequence[float] | None,
        surface: str = "",
    ) -> list[float]:
        values = []
        for i, variable in enumerate(variables):
            if variable in _ANGLE_VARIABLES:
                values.append(float(previous[i]) if previous is not None else 0.0)
            elif variable is Var.TIME:
                values.append(t)
            elif variable is Var.CONTROL_SURFACE_DEFLECTION:
                values.append(float(self._control_surface_deflection_function(surface, t)))
            else:
                values.append(float(self._variable_functions[variable](t)))
        return values

    def update(self, t: float) -> None:
        """Compute the independent variables at *t*.

        Does nothing if the flight conditions are already current at *t*.
        """
        t = float(t)
        if self._current_time is not None and t == self._current_time:
            return

        model = self._coefficient_model
        untrimmed = self._non_angle_values(
            model.independent_variables, t, self._current_independent_variables
        )
        untrimmed_control = {
            name: self._non_angle_values(
                increment.independent_variables, t,
                self._current_control_surface_variables.get(name), name,
            )
            for name, increment in model.control_surface_increments.items()
        }

        previous_untrimmed = (self._untrimmed_independent_variables,
                              self._untrimmed_control_surface_variables)
        self._untrimmed_independent_variables = untrimmed
        self._untrimmed_control_surface_variables = untrimmed_control
        try:
            angles = self._orientation_model.body_angles(t)
        except Exception:
            (self._untrimmed_independent_variables,
             self._untrimmed_control_surface_variables) = previous_untrimmed
            raise

        def with_angles(variables, values):
            return [
                _angle_value(variable, angles) if variable in _ANGLE_VARIABLES else value
                for variable, value in zip(variables, values)
            ]

        self._current_independent_variables = with_angles(model.independent_variables, untrimmed)
        self._current_control_surface_variables = {
            name: with_angles(model.control_surface_increments[name].independent_variables, values)
            for name, values in untrimmed_control.items()
        }
        self._current_time = t

    def current_coefficients(self) -> AerodynamicCoefficients:
        """Coefficients, including control-surface increments, at the current time.

        Raises:
            RuntimeError: If :meth:`update` has not been called yet.
        """
        if self._current_independent_variables is None:
            raise RuntimeError("Flight conditions have not been updated yet")
        return self._coefficient_model.evaluate_with_control_surfaces(
            self._current_independent_variables, self._current_control_surface_variables
        )

    def set_coefficient_model(self, coefficient_model: AerodynamicCoefficientModel) -> None:
        """Replace the coefficient model.

        Also seen by an installed trim solver, whose cached solution becomes
        stale.
        """
        self._check_variable_sources(coefficient_model)
        self._coefficient_model = coefficient_model
        self._current_independent_variables = None
        self._current_control_surface_variables = {}
        self._untrimmed_independent_variables = None
        self._untrimmed_control_surface_variables = {}
        self.reset_current_time()
        logger.info("Replaced aerodynamic coefficient model of flight conditions")

    def reset_current_time(self) -> None:
        """Force recomputation on the next update, also at an unchanged time."""
        self._current_time = None
        self._orientation_model.reset_current_time()

    @property
    def trim_calculator(self) -> TrimOrientationCalculator | None:
        return self._trim_calculator


def set_trimmed_conditions(
    flight_conditions: FlightConditions,
    settings: TrimSettings | None = None,
    sideslip_bank_function: Callable[[float], tuple[float, float]] | None = None,
) -> TrimOrientationCalculator:
    """Fly the vehicle at the trim angle of attack.

    Creates a :class:`~aerojax.trim.TrimOrientationCalculator` that reads
    the coefficient model and the untrimmed independent variables from
    *flight_conditions*, and installs it as the angle source of the flight
    conditions' orientation model.

    Args:
        flight_conditions: Flight conditions of the vehicle.
        settings: Root-find bracket and tolerances.
        sideslip_bank_function: Optional ``f(t) -> (sideslip, bank)``.

    Returns:
        TrimOrientationCalculator: The installed calculator.

    Raises:
        ValueError: If the coefficient model has no angle of attack
            independent variable.
    """
    trim = TrimOrientationCalculator(
        lambda: flight_conditions.coefficient_model,
        flight_conditions.untrimmed_independent_variables,
        flight_conditions.untrimmed_control_surface_variables,
        settings,
    )
    trim.install(flight_conditions.orientation_model, sideslip_bank_function)
    flight_conditions._trim_calculator = trim
    return trim

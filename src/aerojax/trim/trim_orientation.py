"""Trim angle-of-attack solver.

A vehicle is trimmed when its pitching-moment coefficient ``C_m`` (the
y-component of the moment coefficients) is zero.  For fixed values of the
other independent variables, :class:`TrimOrientationCalculator` finds the
angle of attack where this holds with an Illinois regula falsi root-find
over the bracket in :class:`~aerojax.trim.config.TrimSettings`.

Installed into an
:class:`~aerojax.ephemerides.AerodynamicAngleRotationalModel`, the
calculator becomes the model's angle source.  The non-angle independent
variables are read from a callback, normally the values stored by the
last :class:`~aerojax.flight_conditions.FlightConditions` update.  Trim is
solved once per time value from those inputs and never iterated to a
fixed point with the resulting orientation.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence

import jax.numpy as jnp

from aerojax.coefficients._types import AerodynamicCoefficientIndependentVariable
from aerojax.coefficients.models import AerodynamicCoefficientModel
from aerojax.errors import TrimNotFoundError
from aerojax.reference_frames.aerodynamic_angles import AerodynamicAngles
from aerojax.trim.config import TrimSettings

logger = logging.getLogger(__name__)

_ANGLE_OF_ATTACK = AerodynamicCoefficientIndependentVariable.ANGLE_OF_ATTACK


def _angle_of_attack_index(model: AerodynamicCoefficientModel) -> int:
    index = model.index_of(_ANGLE_OF_ATTACK)
    if index is None:
        raise ValueError(
            "Cannot trim a coefficient model without an angle of attack independent variable"
        )
    return index


def _with_angle_of_attack(variables: Sequence[float], index: int | None, angle_of_attack: float) -> list:
    variables = [float(v) for v in variables]
    if index is not None:
        variables[index] = angle_of_attack
    return variables


def find_root_illinois(
    function: Callable[[float], float],
    lower_bound: float,
    upper_bound: float,
    angle_tolerance: float,
    moment_tolerance: float,
    max_iterations: int,
) -> tuple[float, int]:
    """Find a root of *function* in a sign-changing bracket.

    Regula falsi with the Illinois modification: when the same bracket end
    is kept twice in a row, its function value is halved, which restores
    superlinear convergence.  A false-position step that lands within
    *angle_tolerance* of a bracket end is moved *angle_tolerance* inside the
    bracket, and an iteration that follows one which did not halve the
    bracket bisects instead.

    The result is either a point where ``|function(x)|`` is within
    *moment_tolerance*, or a point of a sign-changing bracket no wider
    than *angle_tolerance*.

    Args:
        function: Scalar function of one variable.
        lower_bound: Lower end of the bracket.
        upper_bound: Upper end of the bracket.
        angle_tolerance: Convergence threshold on the bracket width.
        moment_tolerance: Convergence threshold on ``|function(x)|``.
        max_iterations: Maximum number of iterations.

    Returns:
        tuple[float, int]: The root and the number of iterations used.

    Raises:
        TrimNotFoundError: If the function does not change sign over the
            bracket or the iteration budget is exhausted.
    """
    a, b = float(lower_bound), float(upper_bound)
    fa, fb = function(a), function(b)

    if abs(fa) <= moment_tolerance:
        return a, 0
    if abs(fb) <= moment_tolerance:
        return b, 0
    if (fa > 0.0) == (fb > 0.0):
        raise TrimNotFoundError(
            f"Pitching moment does not change sign over [{a}, {b}]: "
            f"C_m = {fa:.6e}, {fb:.6e}"
        )

    side = 0
    previous_width = math.inf
    for iteration in range(1, max_iterations + 1):
        lo, hi = min(a, b), max(a, b)
        if hi - lo > 0.5 * previous_width:
            # Last step did not halve the bracket
            c = 0.5 * (a + b)
        else:
            c = (a * fb - b * fa) / (fb - fa)
            if not lo + angle_tolerance < c < hi - angle_tolerance:
                if hi - lo <= 2.0 * angle_tolerance:
                    c = 0.5 * (a + b)
                elif c - lo <= hi - c:
                    c = lo + angle_tolerance
                else:
                    c = hi - angle_tolerance
        previous_width = hi - lo
        fc = function(c)

        if abs(fc) <= moment_tolerance:
            return c, iteration

        if (fc > 0.0) == (fb > 0.0):
            b, fb = c, fc
            if side == -1:
                fa *= 0.5
            side = -1
        else:
            a, fa = c, fc
            if side == 1:
                fb *= 0.5
            side = 1

        if abs(b - a) <= angle_tolerance:
            return c, iteration

    raise TrimNotFoundError(
        f"Trim angle of attack not converged after {max_iterations} iterations"
    )


class TrimOrientationCalculator:
    """Computes and caches the trim angle of attack.

    Args:
        coefficient_model_function: ``f() -> model`` returning the current
            coefficient model.  Reading the model through a function lets
            the calculator see a model that is replaced after installation.
        untrimmed_variables_function: ``f() -> list`` returning the model's
            independent variables at their current values.  The angle of
            attack entry is ignored.
        control_surface_variables_function: Optional ``f() -> dict`` with
            the independent variables of each control-surface increment.
        settings: Root-find bracket and tolerances.

    Raises:
        ValueError: If the coefficient model has no angle of attack
            independent variable.

    Examples:
        ```python
        from aerojax.trim import TrimOrientationCalculator, TrimSettings
        trim = TrimOrientationCalculator(
            lambda: model, lambda: [mach, 0.0], settings=TrimSettings(-1.0, 1.0)
        )
        trim.find_trim_angle_of_attack([mach, 0.0])
        ```
    """

    def __init__(
        self,
        coefficient_model_function: Callable[[], AerodynamicCoefficientModel],
        untrimmed_variables_function: Callable[[], Sequence[float]],
        control_surface_variables_function: Callable[[], Mapping[str, Sequence[float]]] | None = None,
        settings: TrimSettings | None = None,
    ) -> None:
        self._coefficient_model_function = coefficient_model_function
        self._untrimmed_variables_function = untrimmed_variables_function
        self._control_surface_variables_function = control_surface_variables_function
        self._settings = settings if settings is not None else TrimSettings()

        _angle_of_attack_index(coefficient_model_function())

        self._current_time: float | None = None
        self._current_model: AerodynamicCoefficientModel | None = None
        self._current_angle_of_attack: float | None = None

    @property
    def settings(self) -> TrimSettings:
        return self._settings

    @property
    def coefficient_model(self) -> AerodynamicCoefficientModel:
        return self._coefficient_model_function()

    @property
    def current_angle_of_attack(self) -> float | None:
        """Most recent trim solution, or ``None`` if none is cached."""
        return self._current_angle_of_attack

    def pitching_moment(
        self,
        angle_of_attack: float,
        untrimmed_variables: Sequence[float],
        control_surface_variables: Mapping[str, Sequence[float]] | None = None,
    ) -> float:
        """Pitching-moment coefficient at the given angle of attack."""
        model = self.coefficient_model
        variables = _with_angle_of_attack(
            untrimmed_variables, _angle_of_attack_index(model), angle_of_attack
        )

        control_variables = None
        if control_surface_variables:
            increments = model.control_surface_increments
            control_variables = {
                name: _with_angle_of_attack(
                    surface_variables, increments[name].index_of(_ANGLE_OF_ATTACK), angle_of_attack
                )
                for name, surface_variables in control_surface_variables.items()
            }

        moment = model.evaluate_with_control_surfaces(jnp.asarray(variables), control_variables).moment
        return float(moment[1])

    def find_trim_angle_of_attack(
        self,
        untrimmed_variables: Sequence[float],
        control_surface_variables: Mapping[str, Sequence[float]] | None = None,
    ) -> float:
        """Solve for the trim angle of attack, without caching.

        Args:
            untrimmed_variables: Independent variables of the coefficient
                model.  The angle of attack entry is ignored.
            control_surface_variables: Independent variables of each
                control-surface increment.

        Returns:
            float: Angle of attack where ``C_m = 0`` [rad].

        Raises:
            TrimNotFoundError: If no trim point exists in the bracket or the
                root-find does not converge.
        """
        settings = self._settings
        angle_of_attack, iterations = find_root_illinois(
            lambda alpha: self.pitching_moment(alpha, untrimmed_variables, control_surface_variables),
            settings.lower_bound,
            settings.upper_bound,
            settings.angle_tolerance,
            settings.moment_tolerance,
            settings.max_iterations,
        )
        logger.debug("Trim angle of attack %.12f rad found in %d iterations",
                     angle_of_attack, iterations)
        return angle_of_attack

    def trim_angle_of_attack(self, t: float) -> float:
        """Trim angle of attack at *t*, solved once per time value.

        The cached solution is reused while both the time and the
        coefficient model are unchanged.
        """
        t = float(t)
        model = self.coefficient_model
        if (self._current_time is not None and t == self._current_time
                and model is self._current_model):
            return self._current_angle_of_attack

        control_surface_variables = None
        if self._control_surface_variables_function is not None:
            control_surface_variables = self._control_surface_variables_function()
        angle_of_attack = self.find_trim_angle_of_attack(
            self._untrimmed_variables_function(), control_surface_variables
        )

        self._current_angle_of_attack = angle_of_attack
        self._current_model = model
        self._current_time = t
        return angle_of_attack

    def reset_current_time(self) -> None:
        """Discard the cached solution."""
        self._current_time = None

    def install(
        self,
        orientation_model,
        sideslip_bank_function: Callable[[float], tuple[float, float]] | None = None,
    ) -> None:
        """Register the trim solution as the angle source of an orientation model.

        Args:
            orientation_model: An
                :class:`~aerojax.ephemerides.AerodynamicAngleRotationalModel`.
            sideslip_bank_function: Optional ``f(t) -> (sideslip, bank)``.
                Both angles are zero when omitted.
        """
        def angle_source(t: float) -> AerodynamicAngles:
            angle_of_attack = self.trim_angle_of_attack(t)
            if sideslip_bank_function is None:
                return AerodynamicAngles(angle_of_attack, 0.0, 0.0)
            sideslip, bank = sideslip_bank_function(t)
            return AerodynamicAngles(angle_of_attack, sideslip, bank)

        orientation_model.set_angle_source(angle_source, reset=self.reset_current_time)
        logger.info("Installed trim angle of attack as aerodynamic angle source")

"""Body orientation driven by aerodynamic angles.

The orientation of an atmospheric vehicle is usually specified through its
angle of attack, sideslip and bank angle.  Those angles may in turn depend
on the vehicle's state (guidance laws, trim), which itself depends on the
orientation.  :class:`AerodynamicAngleRotationalModel` breaks that cycle
by late binding: the model is created without an angle source and rejects
queries until one is registered with :meth:`set_angle_source`.

Results are cached per time value so repeated queries within one
integrator stage do not re-run the angle source.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from jax import Array

from aerojax.attitude.orientation import AngularState, Orientation
from aerojax.ephemerides.rotational_model import RotationalModel
from aerojax.errors import ClosureNotReadyError, UnsupportedOperationError
from aerojax.reference_frames.aerodynamic_angles import (
    AerodynamicAngleCalculator,
    AerodynamicAngles,
)
from aerojax.time import ExtendedTime

logger = logging.getLogger(__name__)

AngleSource = Callable[[float], AerodynamicAngles]


class ClosureState(enum.Enum):
    """Whether the angle source of the model has been supplied."""

    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class AerodynamicAngleRotationalModel(RotationalModel):
    """Rotational model computing the body orientation from aerodynamic angles.

    Args:
        angle_calculator (AerodynamicAngleCalculator): Converts angles and
            the current trajectory frame into a body orientation.  Its frame
            names are used as the base and target frames of the model.
        angle_source: Optional ``f(t) -> AerodynamicAngles``.  When given,
            the model starts resolved.
        reference_time (ExtendedTime | None): Reference for float times.

    Examples:
        ```python
        from aerojax.ephemerides import AerodynamicAngleRotationalModel
        from aerojax.reference_frames import AerodynamicAngles

        model = AerodynamicAngleRotationalModel(calculator)
        model.set_angle_source(lambda t: AerodynamicAngles(0.1 + 1e-4 * t))
        model.rotation_to_base_frame(10.0)
        ```
    """

    def __init__(
        self,
        angle_calculator: AerodynamicAngleCalculator,
        angle_source: AngleSource | None = None,
        reference_time: ExtendedTime | None = None,
    ) -> None:
        super().__init__(angle_calculator.inertial_frame, angle_calculator.body_frame, reference_time)
        self._angle_calculator = angle_calculator
        self._angle_source: AngleSource | None = None
        self._angle_source_reset: Callable[[], None] | None = None
        self._closure_state = ClosureState.UNRESOLVED

        self._current_time: float | None = None
        self._current_angles: AerodynamicAngles | None = None
        self._current_orientation: Orientation | None = None

        if angle_source is not None:
            self.set_angle_source(angle_source)

    @property
    def closure_state(self) -> ClosureState:
        return self._closure_state

    @property
    def is_closure_complete(self) -> bool:
        return self._closure_state is ClosureState.RESOLVED

    @property
    def angle_calculator(self) -> AerodynamicAngleCalculator:
        return self._angle_calculator

    def set_angle_source(
        self,
        angle_source: AngleSource,
        reset: Callable[[], None] | None = None,
    ) -> None:
        """Register the function supplying the aerodynamic angles.

        Replaces any previously registered source and clears the cache.

        Args:
            angle_source: ``f(t) -> AerodynamicAngles`` (or any 3-sequence of
                angle of attack, sideslip and bank).
            reset: Optional callback invoked by :meth:`reset_current_time`,
                used by sources holding their own per-time cache.
        """
        if self._angle_source is not None:
            logger.debug("Replacing aerodynamic angle source of %s -> %s model",
                         self._base_frame, self._target_frame)
        self._angle_source = angle_source
        self._angle_source_reset = reset
        self._closure_state = ClosureState.RESOLVED
        self._current_time = None

    def add_sideslip_bank_angle_functions(
        self,
        sideslip_bank_function: Callable[[float], tuple[float, float]],
    ) -> None:
        """Supply sideslip and bank angle, keeping the current angle of attack.

        If an angle source is registered, its angle of attack is kept and
        its sideslip and bank are overridden.  Otherwise the angle of attack
        is zero.

        Args:
            sideslip_bank_function: ``f(t) -> (sideslip, bank)`` [rad].
        """
        previous_source = self._angle_source

        def angle_source(t: float) -> AerodynamicAngles:
            angle_of_attack = 0.0 if previous_source is None else previous_source(t)[0]
            sideslip, bank = sideslip_bank_function(t)
            return AerodynamicAngles(angle_of_attack, sideslip, bank)

        self.set_angle_source(angle_source, reset=self._angle_source_reset)

    def _require_closure(self) -> None:
        if self._closure_state is not ClosureState.RESOLVED:
            raise ClosureNotReadyError(
                f"No aerodynamic angle source set for {self._base_frame} -> "
                f"{self._target_frame} rotational model"
            )

    def update(self, t: float) -> None:
        """Recompute angles and orientation at *t* unless already current."""
        self._require_closure()
        t = float(t)
        if self._current_time is not None and t == self._current_time:
            return

        angles = AerodynamicAngles(*(float(angle) for angle in self._angle_source(t)))
        orientation = self._angle_calculator.rotation_body_to_inertial(t, angles)

        self._current_angles = angles
        self._current_orientation = orientation
        self._current_time = t

    def reset_current_time(self) -> None:
        """Force recomputation on the next query, also at an unchanged time."""
        self._current_time = None
        if self._angle_source_reset is not None:
            self._angle_source_reset()

    def body_angles(self, t: float) -> AerodynamicAngles:
        """Aerodynamic angles at *t*."""
        self.update(t)
        return self._current_angles

    def rotation_to_base_frame(self, t: float) -> Orientation:
        self.update(t)
        return self._current_orientation

    def rotation_derivative_to_base_frame(self, t: float) -> Array:
        raise UnsupportedOperationError(
            "Rotation matrix derivative not available from aerodynamic angles"
        )

    def rotation_derivative_to_target_frame(self, t: float) -> Array:
        raise UnsupportedOperationError(
            "Rotation matrix derivative not available from aerodynamic angles"
        )

    def full_rotational_state(self, t: float) -> AngularState:
        raise UnsupportedOperationError(
            "Angular velocity not available from aerodynamic angles"
        )

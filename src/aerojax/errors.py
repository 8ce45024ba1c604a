"""Exception types raised by aerojax.

Every exception derives from :class:`AerojaxError` and from the builtin
exception that best describes it, so callers may catch either the
library-specific type or the generic one (e.g. ``ValueError``).

None of these are retried internally.  Whether a failed trim or an
unresolved orientation aborts a propagation is decided by the caller.
"""

from __future__ import annotations


class AerojaxError(Exception):
    """Base class for all aerojax errors."""


class ClosureNotReadyError(AerojaxError, RuntimeError):
    """An angle-dependent orientation was queried before its angle source was set."""


class UnsupportedOperationError(AerojaxError, NotImplementedError):
    """The queried quantity cannot be provided by this model."""


class InconsistentIndependentVariablesError(AerojaxError, ValueError):
    """Per-axis coefficient tables do not share the same grid."""


class UnsupportedDimensionalityError(AerojaxError, ValueError):
    """A coefficient table has a number of independent variables outside [1, 6]."""

    def __init__(self, dimensionality: int, context: str = "") -> None:
        self.dimensionality = dimensionality
        message = (
            f"{dimensionality} independent variables not supported, "
            f"tabulated coefficients require between 1 and 6"
        )
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class SettingsTypeMismatchError(AerojaxError, TypeError):
    """The declared coefficient type does not match the settings payload."""

    def __init__(self, expected: str, actual: str, context: str = "") -> None:
        self.expected = expected
        self.actual = actual
        message = f"expected {expected} coefficient settings, got {actual}"
        if context:
            message = f"{message} for {context}"
        super().__init__(message)


class DimensionalityMismatchError(AerojaxError, ValueError):
    """The number of independent variables passed to a model is wrong."""

    def __init__(self, expected: int, actual: int | tuple[int, ...]) -> None:
        self.expected = expected
        self.actual = actual
        if isinstance(actual, tuple):
            actual = f"an array of shape {actual}"
        super().__init__(
            f"coefficient model expects {expected} independent variables, got {actual}"
        )


class TrimNotFoundError(AerojaxError, RuntimeError):
    """No angle of attack zeroing the pitching moment was found in the bracket."""
